"""Data model for a two-player team."""

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
from typing import Any, Dict, Tuple

from rallypairing.exceptions import InvalidPairingException
from rallypairing.type_hints import MatchupKey, PairKey


def pair_key(first: str, second: str) -> PairKey:
    """Canonical key for two player ids, smaller id first."""
    return (first, second) if first <= second else (second, first)


def matchup_key(key_a: PairKey, key_b: PairKey) -> MatchupKey:
    """Canonical key for two team keys facing each other."""
    return (key_a, key_b) if key_a <= key_b else (key_b, key_a)


@dataclass(frozen=True)
class Pair:
    """Two distinct players who would be teammates.

    Attributes
    ----------
    first : str
        Id of one player.
    second : str
        Id of the other player.
    """

    first: str
    second: str

    def __post_init__(self):
        if self.first == self.second:
            raise InvalidPairingException(
                f"A pair needs two distinct players, got {self.first!r} twice"
            )

    @property
    def key(self) -> PairKey:
        return pair_key(self.first, self.second)

    @property
    def players(self) -> Tuple[str, str]:
        return (self.first, self.second)

    def contains(self, player_id: str) -> bool:
        return player_id == self.first or player_id == self.second

    def partner_of(self, player_id: str) -> str:
        """Return the teammate of ``player_id``."""
        if player_id == self.first:
            return self.second
        if player_id == self.second:
            return self.first
        raise InvalidPairingException(f"{player_id!r} is not part of {self.key}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pair to dictionary."""
        return {"players": list(self.players)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pair":
        """Deserialize pair from dictionary."""
        first, second = data["players"]
        return cls(first, second)

    def __str__(self) -> str:
        return f"{self.first}+{self.second}"
