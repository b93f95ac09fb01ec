"""Session configuration settings."""

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
from typing import Any, Dict, List, Optional

from rallypairing.constants import (
    DEFAULT_GENDER_TEAMS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TEAM_SIZE,
    GENDER_TEAM_MODES,
    GENDER_TEAMS_MIX_PAIRS,
    SUPPORTED_TEAM_SIZES,
    TEAM_SIZE_DOUBLES,
)
from rallypairing.exceptions import InvalidConfigurationException
from rallypairing.models.pair import Pair
from rallypairing.models.participant import Participant


@dataclass
class SessionConfig:
    """Session configuration settings.

    Attributes
    ----------
    name : str
        Session name.
    participants : list of Participant
        Everyone registered, in sign-up order.
    fixed_teams : list of Pair
        Teams held constant for the session. Empty for free pairing.
    courts : list of str
        Ordered court ids; matches are assigned to them in order.
    team_size : int
        1 for singles, 2 for doubles.
    gender_teams : str
        Gender mode, one of ``ANY``, ``MEN``, ``WOMEN`` or ``MIX_PAIRS``.
    max_attempts : int
        Retry budget per candidate pool during pair selection.
    seed : int or None
        Seed for the session's random source.
    """

    name: str = "Untitled Session"
    participants: List[Participant] = field(default_factory=list)
    fixed_teams: List[Pair] = field(default_factory=list)
    courts: List[str] = field(default_factory=list)
    team_size: int = DEFAULT_TEAM_SIZE
    gender_teams: str = DEFAULT_GENDER_TEAMS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Optional[int] = None

    @property
    def player_ids(self) -> List[str]:
        return [p.player_id for p in self.participants]

    @property
    def genders(self) -> Dict[str, str]:
        return {p.player_id: p.gender for p in self.participants}

    @property
    def uses_fixed_teams(self) -> bool:
        return bool(self.fixed_teams)

    def validate(self) -> None:
        """Check the configuration for malformed values.

        Raises
        ------
        InvalidConfigurationException
            On duplicate participants, fixed teams sharing a player, fixed
            teams in singles mode, unknown team size, unknown gender mode,
            mixed pairs in singles mode or a non-positive retry budget.
        """
        ids = self.player_ids
        if len(ids) != len(set(ids)):
            raise InvalidConfigurationException("Duplicate participant ids")
        if self.team_size not in SUPPORTED_TEAM_SIZES:
            raise InvalidConfigurationException(
                f"Unsupported team size {self.team_size}"
            )
        if self.gender_teams not in GENDER_TEAM_MODES:
            raise InvalidConfigurationException(
                f"Unknown gender mode {self.gender_teams!r}"
            )
        if (
            self.gender_teams == GENDER_TEAMS_MIX_PAIRS
            and self.team_size != TEAM_SIZE_DOUBLES
        ):
            raise InvalidConfigurationException(
                "Mixed pairs are only supported for doubles"
            )
        if self.max_attempts < 1:
            raise InvalidConfigurationException("max_attempts must be at least 1")
        if self.fixed_teams:
            if self.team_size != TEAM_SIZE_DOUBLES:
                raise InvalidConfigurationException(
                    "Fixed teams are only supported for doubles"
                )
            members = [pid for team in self.fixed_teams for pid in team.players]
            if len(members) != len(set(members)):
                raise InvalidConfigurationException(
                    "A player belongs to more than one fixed team"
                )
            if ids:
                known = set(ids)
                unknown = [pid for pid in members if pid not in known]
                if unknown:
                    raise InvalidConfigurationException(
                        f"Fixed team members are not participants: {unknown}"
                    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "participants": [p.to_dict() for p in self.participants],
            "fixed_teams": [t.to_dict() for t in self.fixed_teams],
            "courts": list(self.courts),
            "team_size": self.team_size,
            "gender_teams": self.gender_teams,
            "max_attempts": self.max_attempts,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            name=data.get("name", "Untitled Session"),
            participants=[
                Participant.from_dict(p) for p in data.get("participants", [])
            ],
            fixed_teams=[Pair.from_dict(t) for t in data.get("fixed_teams", [])],
            courts=list(data.get("courts", [])),
            team_size=data.get("team_size", DEFAULT_TEAM_SIZE),
            gender_teams=data.get("gender_teams", DEFAULT_GENDER_TEAMS),
            max_attempts=data.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
            seed=data.get("seed"),
        )
