"""Data model for matches and rounds."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple

from rallypairing.exceptions import InvalidPairingException
from rallypairing.type_hints import Team


@dataclass(frozen=True)
class Match:
    """One court's worth of play: two teams facing each other.

    Attributes
    ----------
    team_a : tuple of str
        Player ids on the first side.
    team_b : tuple of str
        Player ids on the second side.
    court_id : str or None
        Court the match is assigned to, if any.

    Notes
    -----
    An empty side is allowed. Stored history may hold placeholder matches
    that have no players assigned yet; statistics skip them through
    :attr:`has_players`.
    """

    team_a: Team
    team_b: Team
    court_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "team_a", tuple(self.team_a))
        object.__setattr__(self, "team_b", tuple(self.team_b))
        everyone = self.team_a + self.team_b
        if len(set(everyone)) != len(everyone):
            raise InvalidPairingException(
                f"Match sides must be distinct players: {self.team_a} vs {self.team_b}"
            )

    @property
    def has_players(self) -> bool:
        """True when both sides hold at least one player."""
        return bool(self.team_a) and bool(self.team_b)

    @property
    def players(self) -> Tuple[str, ...]:
        return self.team_a + self.team_b

    def with_court(self, court_id: Optional[str]) -> "Match":
        return replace(self, court_id=court_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "team_a": list(self.team_a),
            "team_b": list(self.team_b),
            "court_id": self.court_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            team_a=tuple(data.get("team_a", ())),
            team_b=tuple(data.get("team_b", ())),
            court_id=data.get("court_id"),
        )

    def __str__(self) -> str:
        court = f" @ {self.court_id}" if self.court_id is not None else ""
        return f"{'+'.join(self.team_a)} vs {'+'.join(self.team_b)}{court}"


@dataclass(frozen=True)
class Round:
    """Matches generated together for one scheduling slot.

    Attributes
    ----------
    matches : tuple of Match
        The matches, in court order.
    round_number : int
        Round number (1-indexed), 0 when not tracked.
    """

    matches: Tuple[Match, ...] = field(default_factory=tuple)
    round_number: int = 0

    def __post_init__(self):
        object.__setattr__(self, "matches", tuple(self.matches))

    def __iter__(self) -> Iterator[Match]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def players(self) -> List[str]:
        """All player ids in the round, in match order."""
        return [pid for match in self.matches for pid in match.players]

    def is_partition(self) -> bool:
        """True when no player appears in more than one match."""
        everyone = self.players()
        return len(everyone) == len(set(everyone))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round to dictionary."""
        return {
            "round_number": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Round":
        """Deserialize round from dictionary."""
        return cls(
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
            round_number=data.get("round_number", 0),
        )
