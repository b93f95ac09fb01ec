"""Round generation entry point.

Dispatches to fixed-team matchups when teams are supplied. Otherwise it
builds teams from the player list and then pairs teams into matches. The
generator keeps no history of its own; every call recomputes statistics from
the rounds it is given.
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

from typing import Iterable, List, Mapping, Optional, Sequence, Union

from rallypairing.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TEAM_SIZE,
    GENDER_TEAMS_ANY,
    GENDER_TEAMS_MIX_PAIRS,
    MIN_PLAYERS_DOUBLES,
    MIN_PLAYERS_SINGLES,
    SUPPORTED_TEAM_SIZES,
    TEAM_SIZE_DOUBLES,
    TEAM_SIZE_SINGLES,
)
from rallypairing.exceptions import InvalidConfigurationException
from rallypairing.models.match import Match
from rallypairing.models.pair import Pair
from rallypairing.pairing.eligibility import (
    eligible_pairs,
    filter_fixed_teams,
    filter_player_ids,
)
from rallypairing.pairing.fixed_teams import generate_fixed_team_matchups
from rallypairing.pairing.history import HistoryStats, RoundLike
from rallypairing.pairing.matchup_former import form_matchups
from rallypairing.pairing.pair_selector import select_team_pairs
from rallypairing.utils import (
    RandomSource,
    create_random_source,
    setup_logger,
    shuffled,
)

logger = setup_logger(__name__)

FixedTeamLike = Union[Pair, Sequence[str]]


def assign_courts(
    matches: Sequence[Match], courts: Optional[Sequence[str]]
) -> List[Match]:
    """Give the i-th match the i-th court; extra matches keep no court."""
    if not courts:
        return list(matches)
    return [
        match.with_court(courts[i]) if i < len(courts) else match
        for i, match in enumerate(matches)
    ]


def _as_pair(team: FixedTeamLike) -> Pair:
    if isinstance(team, Pair):
        return team
    members = list(team)
    if len(members) != TEAM_SIZE_DOUBLES:
        raise InvalidConfigurationException(
            f"Fixed teams need exactly two players, got {members}"
        )
    return Pair(members[0], members[1])


class RoundGenerator:
    """Generates the next round of a session from its history.

    Parameters
    ----------
    rng : RandomSource, optional
        Source of uniform randoms for shuffles and tie-breaks. Pass a seeded
        ``random.Random`` for reproducible rounds.
    max_attempts : int
        Reshuffled selection passes per candidate pool.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise InvalidConfigurationException("max_attempts must be at least 1")
        self.rng = rng if rng is not None else create_random_source()
        self.max_attempts = max_attempts

    def generate_round(
        self,
        players: Optional[Sequence[str]] = None,
        previous_rounds: Iterable[RoundLike] = (),
        num_matches: int = 1,
        fixed_teams: Optional[Sequence[FixedTeamLike]] = None,
        courts: Optional[Sequence[str]] = None,
        team_size: int = DEFAULT_TEAM_SIZE,
        gender_teams: str = GENDER_TEAMS_ANY,
        genders: Optional[Mapping[str, str]] = None,
    ) -> List[Match]:
        """Generate the matches for the next round.

        Parameters
        ----------
        players : sequence of str, optional
            Player ids for free pairing. Ignored when ``fixed_teams`` is given.
        previous_rounds : iterable of rounds
            Round history, oldest first. Never modified.
        num_matches : int
            Upper bound on matches to return.
        fixed_teams : sequence of Pair, optional
            Session teams. Switches to team-vs-team selection.
        courts : sequence of str, optional
            Court ids assigned to matches in order.
        team_size : int
            1 for singles, 2 for doubles.
        gender_teams : str
            Gender mode, see :mod:`rallypairing.pairing.eligibility`.
        genders : Mapping, optional
            Player id to gender, used by gender modes.

        Returns
        -------
        list of Match
            Between 0 and ``num_matches`` matches. Empty when too few
            players or teams are available.

        Raises
        ------
        InvalidConfigurationException
            On duplicate player ids, fixed teams sharing a player, mixed
            pairs in singles mode or an unsupported team size.
        """
        if team_size not in SUPPORTED_TEAM_SIZES:
            raise InvalidConfigurationException(f"Unsupported team size {team_size}")
        if gender_teams == GENDER_TEAMS_MIX_PAIRS and team_size != TEAM_SIZE_DOUBLES:
            raise InvalidConfigurationException(
                "Mixed pairs are only supported for doubles"
            )
        rounds = list(previous_rounds)

        if fixed_teams:
            if team_size != TEAM_SIZE_DOUBLES:
                raise InvalidConfigurationException(
                    "Fixed teams are only supported for doubles"
                )
            matches = self._fixed_team_round(
                fixed_teams, rounds, num_matches, gender_teams, genders
            )
        else:
            ids = self._check_players(players or [])
            eligible = filter_player_ids(ids, genders, gender_teams)
            if team_size == TEAM_SIZE_SINGLES:
                matches = self._singles_round(eligible, rounds, num_matches)
            else:
                matches = self._doubles_round(
                    eligible, rounds, num_matches, gender_teams, genders
                )

        matches = assign_courts(matches, courts)
        logger.info(
            "Generated round %s: %s of %s matches",
            len(rounds) + 1,
            len(matches),
            num_matches,
        )
        return matches

    @staticmethod
    def _check_players(players: Sequence[str]) -> List[str]:
        ids = list(players)
        if len(ids) != len(set(ids)):
            raise InvalidConfigurationException("Duplicate player ids")
        return ids

    def _fixed_team_round(
        self,
        fixed_teams: Sequence[FixedTeamLike],
        rounds: List[RoundLike],
        num_matches: int,
        gender_teams: str,
        genders: Optional[Mapping[str, str]],
    ) -> List[Match]:
        teams = [_as_pair(team) for team in fixed_teams]
        members = [pid for team in teams for pid in team.players]
        if len(members) != len(set(members)):
            raise InvalidConfigurationException(
                "A player belongs to more than one fixed team"
            )
        teams = filter_fixed_teams(teams, genders, gender_teams)
        return generate_fixed_team_matchups(teams, rounds, num_matches, self.rng)

    def _doubles_round(
        self,
        players: List[str],
        rounds: List[RoundLike],
        num_matches: int,
        gender_teams: str,
        genders: Optional[Mapping[str, str]],
    ) -> List[Match]:
        if len(players) < MIN_PLAYERS_DOUBLES or num_matches < 1:
            logger.info(
                "No doubles matches possible with %s players and %s requested",
                len(players),
                num_matches,
            )
            return []

        stats = HistoryStats.from_rounds(players, rounds)
        pairs = select_team_pairs(
            eligible_pairs(players, genders, gender_teams),
            stats.matches_played,
            num_matches * 2,
            stats.teammate_counts,
            stats.last_round_pairs,
            self.rng,
            self.max_attempts,
        )
        return form_matchups(pairs, stats.opponent_counts, self.rng, num_matches)

    def _singles_round(
        self, players: List[str], rounds: List[RoundLike], num_matches: int
    ) -> List[Match]:
        if len(players) < MIN_PLAYERS_SINGLES or num_matches < 1:
            logger.info(
                "No singles matches possible with %s players and %s requested",
                len(players),
                num_matches,
            )
            return []

        stats = HistoryStats.from_rounds(players, rounds)
        order = shuffled(players, self.rng)
        order.sort(key=stats.played)
        chosen = order[: num_matches * 2]
        return form_matchups(
            [(pid,) for pid in chosen], stats.opponent_counts, self.rng, num_matches
        )


def create_round_generator(
    seed: Optional[int] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> RoundGenerator:
    """Create a round generator, seeded when ``seed`` is given."""
    return RoundGenerator(create_random_source(seed), max_attempts)


def generate_round(
    players: Optional[Sequence[str]] = None,
    previous_rounds: Iterable[RoundLike] = (),
    num_matches: int = 1,
    fixed_teams: Optional[Sequence[FixedTeamLike]] = None,
    rng: Optional[RandomSource] = None,
    **kwargs,
) -> List[Match]:
    """Quick one-off round generation, see :meth:`RoundGenerator.generate_round`."""
    generator = RoundGenerator(rng=rng)
    return generator.generate_round(
        players=players,
        previous_rounds=previous_rounds,
        num_matches=num_matches,
        fixed_teams=fixed_teams,
        **kwargs,
    )
