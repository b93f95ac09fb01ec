"""Team-vs-team selection when doubles teams are fixed for the session."""

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

from dataclasses import dataclass
from typing import List, Mapping, Sequence

from rallypairing.constants import MIN_FIXED_TEAMS
from rallypairing.models.match import Match
from rallypairing.models.pair import Pair
from rallypairing.pairing.history import RoundLike, matches_played, opponent_history
from rallypairing.pairing.matchup_former import opponent_score
from rallypairing.type_hints import PairKey
from rallypairing.utils import RandomSource, setup_logger, shuffled

logger = setup_logger(__name__)


@dataclass(frozen=True)
class TeamMatchupCandidate:
    """A possible meeting of two fixed teams.

    Attributes
    ----------
    first : int
        Index of one team in the fixed team list.
    second : int
        Index of the other team, always greater than ``first``.
    balance_score : int
        Matches played summed over all four players; lower is more deserving.
    opponent_score : int
        Times players of the two teams have already been opponents.
    """

    first: int
    second: int
    balance_score: int
    opponent_score: int

    @property
    def sort_key(self):
        return (self.balance_score, self.opponent_score)


def score_team_matchups(
    fixed_teams: Sequence[Pair],
    played: Mapping[str, int],
    opponent_counts: Mapping[PairKey, int],
) -> List[TeamMatchupCandidate]:
    """Score every unordered pair of fixed teams."""
    candidates = []
    for i, team_i in enumerate(fixed_teams):
        for j in range(i + 1, len(fixed_teams)):
            team_j = fixed_teams[j]
            balance = sum(played.get(pid, 0) for pid in team_i.players) + sum(
                played.get(pid, 0) for pid in team_j.players
            )
            candidates.append(
                TeamMatchupCandidate(
                    first=i,
                    second=j,
                    balance_score=balance,
                    opponent_score=opponent_score(
                        team_i.players, team_j.players, opponent_counts
                    ),
                )
            )
    return candidates


def generate_fixed_team_matchups(
    fixed_teams: Sequence[Pair],
    rounds: Sequence[RoundLike],
    num_matches: int,
    rng: RandomSource,
) -> List[Match]:
    """Choose this round's team-vs-team matches.

    Candidates are shuffled, stably sorted by balance then opponent score,
    and accepted greedily. A team is never scheduled twice in one round.

    Parameters
    ----------
    fixed_teams : sequence of Pair
        Session teams, in registration order.
    rounds : sequence of rounds
        Round history, oldest first.
    num_matches : int
        Upper bound on matches to return.
    rng : RandomSource
        Source of uniform randoms.

    Returns
    -------
    list of Match
        Up to ``num_matches`` matches; empty with fewer than two teams.
    """
    if len(fixed_teams) < MIN_FIXED_TEAMS or num_matches < 1:
        return []

    members = [pid for team in fixed_teams for pid in team.players]
    played = matches_played(members, rounds)
    opponents = opponent_history(rounds)

    candidates = shuffled(score_team_matchups(fixed_teams, played, opponents), rng)
    candidates.sort(key=lambda c: c.sort_key)

    used = set()
    matches: List[Match] = []
    for candidate in candidates:
        if len(matches) >= num_matches:
            break
        if candidate.first in used or candidate.second in used:
            continue
        used.add(candidate.first)
        used.add(candidate.second)
        matches.append(
            Match(
                team_a=fixed_teams[candidate.first].players,
                team_b=fixed_teams[candidate.second].players,
            )
        )

    logger.debug(
        "Fixed-team round: %s of %s matches from %s teams",
        len(matches),
        num_matches,
        len(fixed_teams),
    )
    return matches
