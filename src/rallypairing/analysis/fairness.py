"""Fairness metrics for a generated session.

The numbers here measure how well a finished session met the three goals:
few repeated teammates, few repeated opponents and even playing time.
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
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rallypairing.models.match import Match
from rallypairing.models.pair import Pair, matchup_key, pair_key
from rallypairing.pairing.history import (
    RoundLike,
    matches_played,
    opponent_history,
    team_matchup_history,
    teammate_history,
)
from rallypairing.pairing.pair_pool import all_possible_pairs
from rallypairing.type_hints import MatchupKey, PairKey
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def _repeats(counts: Mapping[Any, int]) -> int:
    return sum(count - 1 for count in counts.values() if count > 1)


@dataclass
class FairnessMetrics:
    """Fairness indicators over a whole session.

    Attributes
    ----------
    rounds : int
        Rounds in the session.
    matches : int
        Matches with players assigned.
    teammate_repeats : int
        Extra uses of teammate pairs beyond their first.
    opponent_repeats : int
        Extra meetings of two opposing players beyond their first.
    matchup_repeats : int
        Extra meetings of the same two teams beyond their first.
    total_pairs : int
        Size of the pairing universe measured.
    unused_pairs : int
        Pairs of that universe never used.
    min_pair_usage, max_pair_usage : int
        Lowest and highest usage across the universe.
    min_matches_played, max_matches_played : int
        Lowest and highest matches played across players.
    idle_player_rounds : int
        Player-rounds spent sitting out.
    """

    rounds: int = 0
    matches: int = 0
    teammate_repeats: int = 0
    opponent_repeats: int = 0
    matchup_repeats: int = 0
    total_pairs: int = 0
    unused_pairs: int = 0
    min_pair_usage: int = 0
    max_pair_usage: int = 0
    min_matches_played: int = 0
    max_matches_played: int = 0
    idle_player_rounds: int = 0

    @property
    def matches_played_spread(self) -> int:
        return self.max_matches_played - self.min_matches_played

    @property
    def pair_usage_spread(self) -> int:
        return self.max_pair_usage - self.min_pair_usage

    def to_dict(self) -> Dict[str, Any]:
        """Serialize metrics to dictionary."""
        return {
            "rounds": self.rounds,
            "matches": self.matches,
            "teammate_repeats": self.teammate_repeats,
            "opponent_repeats": self.opponent_repeats,
            "matchup_repeats": self.matchup_repeats,
            "total_pairs": self.total_pairs,
            "unused_pairs": self.unused_pairs,
            "min_pair_usage": self.min_pair_usage,
            "max_pair_usage": self.max_pair_usage,
            "pair_usage_spread": self.pair_usage_spread,
            "min_matches_played": self.min_matches_played,
            "max_matches_played": self.max_matches_played,
            "matches_played_spread": self.matches_played_spread,
            "idle_player_rounds": self.idle_player_rounds,
        }


def compute_fairness_metrics(
    player_ids: Sequence[str],
    rounds: Sequence[RoundLike],
    fixed_teams: Optional[Sequence[Pair]] = None,
    all_pairs: Optional[Sequence[Pair]] = None,
) -> FairnessMetrics:
    """Measure a session against its fairness goals.

    Parameters
    ----------
    player_ids : sequence of str
        Everyone eligible to play.
    rounds : sequence of rounds
        Session history, oldest first.
    fixed_teams : sequence of Pair, optional
        When given, pair usage is measured over team-vs-team matchups.
    all_pairs : sequence of Pair, optional
        Teammate universe to measure in free pairing; defaults to every
        combination of ``player_ids``.

    Returns
    -------
    FairnessMetrics
    """
    rounds = [list(r) for r in rounds]
    teammates = teammate_history(rounds)
    opponents = opponent_history(rounds)
    matchups = team_matchup_history(rounds)
    played = matches_played(player_ids, rounds)

    if fixed_teams:
        universe: List[Any] = [
            matchup_key(fixed_teams[i].key, fixed_teams[j].key)
            for i in range(len(fixed_teams))
            for j in range(i + 1, len(fixed_teams))
        ]
        usage: Mapping[Any, int] = matchups
    else:
        pairs = all_pairs if all_pairs is not None else all_possible_pairs(player_ids)
        universe = [p.key for p in pairs]
        usage = teammates
    usages = [usage.get(key, 0) for key in universe]

    idle = 0
    for round_matches in rounds:
        playing = {pid for m in round_matches if m.has_players for pid in m.players}
        idle += sum(1 for pid in player_ids if pid not in playing)

    metrics = FairnessMetrics(
        rounds=len(rounds),
        matches=sum(1 for r in rounds for m in r if m.has_players),
        teammate_repeats=_repeats(teammates),
        opponent_repeats=_repeats(opponents),
        matchup_repeats=_repeats(matchups),
        total_pairs=len(universe),
        unused_pairs=sum(1 for u in usages if u == 0),
        min_pair_usage=min(usages, default=0),
        max_pair_usage=max(usages, default=0),
        min_matches_played=min(played.values(), default=0),
        max_matches_played=max(played.values(), default=0),
        idle_player_rounds=idle,
    )
    logger.debug("Fairness metrics: %s", metrics.to_dict())
    return metrics


def _matchup_of(match: Match) -> Optional[MatchupKey]:
    if len(match.team_a) < 2 or len(match.team_b) < 2:
        return None
    return matchup_key(
        pair_key(match.team_a[0], match.team_a[1]),
        pair_key(match.team_b[0], match.team_b[1]),
    )


@dataclass
class RoundRepeats:
    """What a new round repeats from earlier rounds."""

    teams: List[PairKey] = field(default_factory=list)
    matchups: List[MatchupKey] = field(default_factory=list)
    opponents: Dict[int, List[PairKey]] = field(default_factory=dict)

    def team_repeated(self, team: Sequence[str]) -> bool:
        return len(team) >= 2 and pair_key(team[0], team[1]) in self.teams

    def matchup_repeated(self, match: Match) -> bool:
        key = _matchup_of(match)
        return key is not None and key in self.matchups


def find_round_repeats(
    matches: Sequence[Match], previous_rounds: Sequence[RoundLike]
) -> RoundRepeats:
    """Find repeated teams, matchups and individual opponents in a round.

    ``opponents`` maps each match index to opponent pairs met before.
    """
    teammates = teammate_history(previous_rounds)
    opponents = opponent_history(previous_rounds)
    matchups = team_matchup_history(previous_rounds)
    repeats = RoundRepeats()
    for index, match in enumerate(matches):
        for team in (match.team_a, match.team_b):
            if len(team) >= 2:
                key = pair_key(team[0], team[1])
                if teammates.get(key, 0) > 0:
                    repeats.teams.append(key)
        key = _matchup_of(match)
        if key is not None and matchups.get(key, 0) > 0:
            repeats.matchups.append(key)
        met_before = [
            pair_key(a, b)
            for a in match.team_a
            for b in match.team_b
            if opponents.get(pair_key(a, b), 0) > 0
        ]
        if met_before:
            repeats.opponents[index] = met_before
    return repeats
