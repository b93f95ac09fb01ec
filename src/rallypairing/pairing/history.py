"""Usage statistics derived from a session's round history.

All counters are recomputed from scratch on every call. Round counts per
session are small, so nothing is cached between calls and no shared mutable
state exists. Matches with an empty side are placeholders and never count.
"""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from rallypairing.models.match import Match
from rallypairing.models.pair import matchup_key, pair_key
from rallypairing.type_hints import (
    MatchupCounts,
    MatchupKey,
    PairCounts,
    PairKey,
    PlayedCounts,
)
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)

# A round is any iterable of matches, a Round or a plain list
RoundLike = Iterable[Match]


def _played_matches(rounds: Sequence[RoundLike]) -> Iterator[Match]:
    for round_matches in rounds:
        for match in round_matches:
            if match.has_players:
                yield match


def _team_key(team: Sequence[str]) -> PairKey:
    return pair_key(team[0], team[1])


def teammate_history(rounds: Sequence[RoundLike]) -> PairCounts:
    """Count how often each pair of players shared a side.

    Parameters
    ----------
    rounds : sequence of rounds
        Round history, oldest first.

    Returns
    -------
    dict
        Pair key to number of matches the two played together.
    """
    counts: PairCounts = {}
    for match in _played_matches(rounds):
        for team in (match.team_a, match.team_b):
            if len(team) >= 2:
                key = _team_key(team)
                counts[key] = counts.get(key, 0) + 1
    return counts


def opponent_history(rounds: Sequence[RoundLike]) -> PairCounts:
    """Count how often each pair of players stood on opposite sides.

    Every cross-side combination counts, not only the first player of each
    team.
    """
    counts: PairCounts = {}
    for match in _played_matches(rounds):
        for a in match.team_a:
            for b in match.team_b:
                key = pair_key(a, b)
                counts[key] = counts.get(key, 0) + 1
    return counts


def matches_played(
    player_ids: Iterable[str], rounds: Sequence[RoundLike]
) -> PlayedCounts:
    """Count matches per player, starting every known id at zero.

    Ids that appear in history but not in ``player_ids`` are ignored.
    """
    counts: PlayedCounts = {pid: 0 for pid in player_ids}
    for match in _played_matches(rounds):
        for pid in match.players:
            if pid in counts:
                counts[pid] += 1
    return counts


def team_matchup_history(rounds: Sequence[RoundLike]) -> MatchupCounts:
    """Count how often two specific two-player teams have met."""
    counts: MatchupCounts = {}
    for match in _played_matches(rounds):
        if len(match.team_a) < 2 or len(match.team_b) < 2:
            continue
        key = matchup_key(_team_key(match.team_a), _team_key(match.team_b))
        counts[key] = counts.get(key, 0) + 1
    return counts


def last_round_pair_keys(rounds: Sequence[RoundLike]) -> List[PairKey]:
    """Teammate pair keys used in the most recent round."""
    if not rounds:
        return []
    keys: List[PairKey] = []
    for match in rounds[-1]:
        if not match.has_players:
            continue
        for team in (match.team_a, match.team_b):
            if len(team) >= 2:
                key = _team_key(team)
                if key not in keys:
                    keys.append(key)
    return keys


@dataclass(frozen=True)
class HistoryStats:
    """Immutable snapshot of every counter for one round request.

    Attributes
    ----------
    teammate_counts : Mapping
        Pair key to times the two were teammates.
    opponent_counts : Mapping
        Pair key to times the two were opponents.
    matchup_counts : Mapping
        Matchup key to times the two teams met.
    matches_played : Mapping
        Player id to matches played.
    last_round_pairs : tuple of PairKey
        Teammate keys of the most recent round.
    rounds_seen : int
        Number of rounds the snapshot was built from.
    """

    teammate_counts: Mapping[PairKey, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    opponent_counts: Mapping[PairKey, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    matchup_counts: Mapping[MatchupKey, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    matches_played: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    last_round_pairs: Tuple[PairKey, ...] = ()
    rounds_seen: int = 0

    @classmethod
    def from_rounds(
        cls, player_ids: Iterable[str], rounds: Sequence[RoundLike]
    ) -> "HistoryStats":
        """Recompute every counter from ``rounds``."""
        rounds = list(rounds)
        stats = cls(
            teammate_counts=MappingProxyType(teammate_history(rounds)),
            opponent_counts=MappingProxyType(opponent_history(rounds)),
            matchup_counts=MappingProxyType(team_matchup_history(rounds)),
            matches_played=MappingProxyType(matches_played(player_ids, rounds)),
            last_round_pairs=tuple(last_round_pair_keys(rounds)),
            rounds_seen=len(rounds),
        )
        logger.debug(
            "History stats over %s rounds: %s teammate keys, %s opponent keys",
            stats.rounds_seen,
            len(stats.teammate_counts),
            len(stats.opponent_counts),
        )
        return stats

    def teammate_count(self, first: str, second: str) -> int:
        return self.teammate_counts.get(pair_key(first, second), 0)

    def opponent_count(self, first: str, second: str) -> int:
        return self.opponent_counts.get(pair_key(first, second), 0)

    def played(self, player_id: str) -> int:
        return self.matches_played.get(player_id, 0)

    def to_dict(self) -> Dict[str, object]:
        """Serialize counters with string keys, for reports and JSON."""
        return {
            "rounds_seen": self.rounds_seen,
            "teammate_counts": {
                "+".join(k): v for k, v in self.teammate_counts.items()
            },
            "opponent_counts": {
                "+".join(k): v for k, v in self.opponent_counts.items()
            },
            "matchup_counts": {
                f"{'+'.join(a)} vs {'+'.join(b)}": v
                for (a, b), v in self.matchup_counts.items()
            },
            "matches_played": dict(self.matches_played),
            "last_round_pairs": ["+".join(k) for k in self.last_round_pairs],
        }
