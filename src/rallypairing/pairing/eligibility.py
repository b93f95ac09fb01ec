"""Gender mode eligibility and round sizing.

Gender modes:

- ``ANY``: everyone plays, any pairing.
- ``MEN`` / ``WOMEN``: only male / only female players.
- ``MIX_PAIRS``: every team is one male and one female player; players who
  prefer not to state a gender sit out.
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

from typing import List, Mapping, Optional, Sequence, Tuple

from rallypairing.constants import (
    DEFAULT_TEAM_SIZE,
    GENDER_FEMALE,
    GENDER_MALE,
    GENDER_TEAM_MODES,
    GENDER_TEAMS_ANY,
    GENDER_TEAMS_MEN,
    GENDER_TEAMS_MIX_PAIRS,
    GENDER_TEAMS_WOMEN,
    GENDER_UNDISCLOSED,
)
from rallypairing.exceptions import InvalidConfigurationException
from rallypairing.models.pair import Pair
from rallypairing.models.participant import Participant
from rallypairing.pairing.pair_pool import all_possible_pairs, mixed_pairs
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def _check_mode(gender_teams: str) -> None:
    if gender_teams not in GENDER_TEAM_MODES:
        raise InvalidConfigurationException(f"Unknown gender mode {gender_teams!r}")


def _accepts(gender: str, gender_teams: str) -> bool:
    if gender_teams == GENDER_TEAMS_MEN:
        return gender == GENDER_MALE
    if gender_teams == GENDER_TEAMS_WOMEN:
        return gender == GENDER_FEMALE
    if gender_teams == GENDER_TEAMS_MIX_PAIRS:
        return gender in (GENDER_MALE, GENDER_FEMALE)
    return True


def filter_player_ids(
    player_ids: Sequence[str],
    genders: Optional[Mapping[str, str]],
    gender_teams: str = GENDER_TEAMS_ANY,
) -> List[str]:
    """Keep the players allowed to play under ``gender_teams``.

    Players missing from ``genders`` count as not having stated a gender.
    """
    _check_mode(gender_teams)
    if gender_teams == GENDER_TEAMS_ANY:
        return list(player_ids)
    genders = genders or {}
    return [
        pid
        for pid in player_ids
        if _accepts(genders.get(pid, GENDER_UNDISCLOSED), gender_teams)
    ]


def filter_participants(
    participants: Sequence[Participant], gender_teams: str = GENDER_TEAMS_ANY
) -> List[Participant]:
    """Playing participants eligible under ``gender_teams``."""
    _check_mode(gender_teams)
    return [
        p for p in participants if p.is_playing and _accepts(p.gender, gender_teams)
    ]


def split_by_gender(
    player_ids: Sequence[str], genders: Mapping[str, str]
) -> Tuple[List[str], List[str]]:
    """Return ``(males, females)`` in input order."""
    males = [pid for pid in player_ids if genders.get(pid) == GENDER_MALE]
    females = [pid for pid in player_ids if genders.get(pid) == GENDER_FEMALE]
    return males, females


def eligible_pairs(
    player_ids: Sequence[str],
    genders: Optional[Mapping[str, str]],
    gender_teams: str = GENDER_TEAMS_ANY,
) -> List[Pair]:
    """The teammate pair universe for already filtered players."""
    if gender_teams == GENDER_TEAMS_MIX_PAIRS:
        males, females = split_by_gender(player_ids, genders or {})
        return mixed_pairs(males, females)
    return all_possible_pairs(player_ids)


def filter_fixed_teams(
    fixed_teams: Sequence[Pair],
    genders: Optional[Mapping[str, str]],
    gender_teams: str = GENDER_TEAMS_ANY,
) -> List[Pair]:
    """Keep the fixed teams that fit ``gender_teams``."""
    _check_mode(gender_teams)
    if gender_teams == GENDER_TEAMS_ANY:
        return list(fixed_teams)
    genders = genders or {}
    kept = []
    for team in fixed_teams:
        team_genders = [genders.get(pid, GENDER_UNDISCLOSED) for pid in team.players]
        if gender_teams == GENDER_TEAMS_MIX_PAIRS:
            fits = GENDER_MALE in team_genders and GENDER_FEMALE in team_genders
        else:
            fits = all(_accepts(g, gender_teams) for g in team_genders)
        if fits:
            kept.append(team)
    if len(kept) < len(fixed_teams):
        logger.info(
            "%s fixed team(s) excluded by gender mode %s",
            len(fixed_teams) - len(kept),
            gender_teams,
        )
    return kept


def compute_num_matches(
    num_players: int,
    num_courts: Optional[int],
    team_size: int = DEFAULT_TEAM_SIZE,
    gender_teams: str = GENDER_TEAMS_ANY,
    males: Optional[int] = None,
    females: Optional[int] = None,
) -> int:
    """Matches that fit on the courts with the players available.

    Parameters
    ----------
    num_players : int
        Eligible players.
    num_courts : int or None
        Courts available; a missing or zero count means one court.
    team_size : int
        Players per side.
    gender_teams : str
        Gender mode. ``MIX_PAIRS`` sizes by the scarcer gender.
    males, females : int, optional
        Gender counts, required for ``MIX_PAIRS``.

    Returns
    -------
    int
        ``min(courts, players // (team_size * 2))``.
    """
    courts = num_courts or 1
    if gender_teams == GENDER_TEAMS_MIX_PAIRS:
        return max(0, min(courts, min(males or 0, females or 0) // 2))
    return max(0, min(courts, num_players // (team_size * 2)))
