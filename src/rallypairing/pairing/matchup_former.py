"""Turn selected teams into matches with few repeated opponents."""

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

from typing import List, Mapping, Optional, Sequence, Tuple, Union

from rallypairing.models.match import Match
from rallypairing.models.pair import Pair, pair_key
from rallypairing.type_hints import PairKey, Team
from rallypairing.utils import RandomSource, pick, setup_logger, shuffled

logger = setup_logger(__name__)

TeamLike = Union[Pair, Sequence[str]]


def as_team(team: TeamLike) -> Team:
    if isinstance(team, Pair):
        return team.players
    return tuple(team)


def opponent_score(
    team_a: Sequence[str],
    team_b: Sequence[str],
    opponent_counts: Mapping[PairKey, int],
) -> int:
    """Sum of opponent counts over every cross-team player combination."""
    return sum(
        opponent_counts.get(pair_key(a, b), 0) for a in team_a for b in team_b
    )


def form_matchups(
    teams: Sequence[TeamLike],
    opponent_counts: Mapping[PairKey, int],
    rng: RandomSource,
    num_matches: Optional[int] = None,
) -> List[Match]:
    """Pair teams against each other, avoiding familiar opponents.

    Teams are shuffled. Each unmatched team in turn meets the unmatched team
    it has faced least, with ties settled uniformly at random. Teams may be
    singles or doubles. A team left without an opponent rests this round.

    Parameters
    ----------
    teams : sequence of Pair or sequence of str
        Teams to place.
    opponent_counts : Mapping
        Pair key to times the two players were opponents.
    rng : RandomSource
        Source of uniform randoms.
    num_matches : int, optional
        Stop after this many matches.

    Returns
    -------
    list of Match
        Matches without court assignment.
    """
    order: List[Team] = shuffled([as_team(t) for t in teams], rng)
    matched = [False] * len(order)
    matches: List[Match] = []

    for i, team in enumerate(order):
        if num_matches is not None and len(matches) >= num_matches:
            break
        if matched[i]:
            continue
        scored: List[Tuple[int, int]] = [
            (opponent_score(team, order[j], opponent_counts), j)
            for j in range(i + 1, len(order))
            if not matched[j]
        ]
        if not scored:
            break
        lowest = min(score for score, _ in scored)
        j = pick([j for score, j in scored if score == lowest], rng)
        matched[i] = matched[j] = True
        matches.append(Match(team_a=team, team_b=order[j]))

    resting = [order[i] for i, done in enumerate(matched) if not done]
    if resting and (num_matches is None or len(matches) < num_matches):
        logger.warning(
            "%s team(s) left without an opponent and rest this round: %s",
            len(resting),
            ", ".join("+".join(t) for t in resting),
        )
    return matches
