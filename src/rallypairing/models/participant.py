"""Data model for a session participant."""

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
from typing import Any, Dict

from rallypairing.constants import GENDER_UNDISCLOSED, GENDERS
from rallypairing.exceptions import InvalidConfigurationException


@dataclass(frozen=True)
class Participant:
    """A player registered for a session.

    Attributes
    ----------
    player_id : str
        Opaque id supplied by the caller.
    gender : str
        One of ``MALE``, ``FEMALE`` or ``PREFER_NOT_TO_SAY``.
    is_playing : bool
        False for players who signed up but sit the session out.
    """

    player_id: str
    gender: str = GENDER_UNDISCLOSED
    is_playing: bool = True

    def __post_init__(self):
        if self.gender not in GENDERS:
            raise InvalidConfigurationException(
                f"Unknown gender {self.gender!r} for player {self.player_id!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        return {
            "player_id": self.player_id,
            "gender": self.gender,
            "is_playing": self.is_playing,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary."""
        return cls(
            player_id=data["player_id"],
            gender=data.get("gender", GENDER_UNDISCLOSED),
            is_playing=data.get("is_playing", True),
        )
