"""Round management for a play session.

This module owns the append-only round log of one session in memory and
drives the round generator with the session's configuration. Persisting the
log is left to the caller.
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

from typing import Any, Dict, List, Optional, Sequence

from rallypairing.exceptions import NoPairingAvailableException
from rallypairing.models.match import Round
from rallypairing.models.session_config import SessionConfig
from rallypairing.pairing.eligibility import (
    compute_num_matches,
    filter_fixed_teams,
    filter_participants,
    split_by_gender,
)
from rallypairing.pairing.history import HistoryStats
from rallypairing.pairing.round_generator import (
    RoundGenerator,
    create_round_generator,
)
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


class RoundManager:
    """Manages round progression for a session.

    This class is responsible for:
    - Sizing each round from courts and eligible players
    - Generating the next round from the full history
    - Keeping the ordered round log, with undo of the latest round
    """

    def __init__(
        self,
        config: SessionConfig,
        generator: Optional[RoundGenerator] = None,
        rounds: Optional[Sequence[Round]] = None,
    ):
        """Initialize the round manager.

        Args:
            config: Session configuration, validated on construction
            generator: Round generator to use; a seeded one is built from
                ``config.seed`` when omitted
            rounds: Previously generated rounds, oldest first
        """
        config.validate()
        self.config = config
        self.generator = generator or create_round_generator(
            config.seed, config.max_attempts
        )
        self.rounds: List[Round] = list(rounds or [])

    @property
    def current_round_number(self) -> int:
        """Get the current round number (1-indexed).

        Returns:
            The current round number, or 0 if no rounds have been created.
        """
        return len(self.rounds)

    def get_round(self, round_number: int) -> Optional[Round]:
        """Get a specific round.

        Args:
            round_number: The round number (1-indexed)

        Returns:
            The round, or None if the round number is out of range
        """
        if 1 <= round_number <= len(self.rounds):
            return self.rounds[round_number - 1]
        return None

    def eligible_player_ids(self) -> List[str]:
        participants = filter_participants(
            self.config.participants, self.config.gender_teams
        )
        return [p.player_id for p in participants]

    def active_fixed_teams(self):
        return filter_fixed_teams(
            self.config.fixed_teams, self.config.genders, self.config.gender_teams
        )

    def num_matches(self) -> int:
        """Matches the next round should hold."""
        courts = len(self.config.courts)
        if self.config.uses_fixed_teams:
            return min(courts or 1, len(self.active_fixed_teams()) // 2)
        players = self.eligible_player_ids()
        males, females = split_by_gender(players, self.config.genders)
        return compute_num_matches(
            len(players),
            courts,
            team_size=self.config.team_size,
            gender_teams=self.config.gender_teams,
            males=len(males),
            females=len(females),
        )

    def create_next_round(self, require_full: bool = False) -> Optional[Round]:
        """Generate the next round and append it to the log.

        Args:
            require_full: Raise instead of accepting a short or empty round

        Returns:
            The new round, or None when no match could be formed. Empty
            rounds are never appended.

        Raises:
            NoPairingAvailableException: When ``require_full`` is set and
                fewer matches than the courts allow could be formed
        """
        round_number = len(self.rounds) + 1
        requested = self.num_matches()
        if requested < 1:
            if require_full:
                raise NoPairingAvailableException(
                    f"Round {round_number}: not enough players for a match"
                )
            logger.warning("Round %s: no matches possible", round_number)
            return None

        logger.info("Creating round %s with %s matches", round_number, requested)
        matches = self.generator.generate_round(
            players=self.eligible_player_ids(),
            previous_rounds=self.rounds,
            num_matches=requested,
            fixed_teams=self.config.fixed_teams or None,
            courts=self.config.courts,
            team_size=self.config.team_size,
            gender_teams=self.config.gender_teams,
            genders=self.config.genders,
        )
        if require_full and len(matches) < requested:
            raise NoPairingAvailableException(
                f"Round {round_number}: only {len(matches)} of {requested} matches"
            )
        if not matches:
            logger.warning("Round %s: generator returned no matches", round_number)
            return None
        if len(matches) < requested:
            logger.warning(
                "Round %s is short: %s of %s matches",
                round_number,
                len(matches),
                requested,
            )

        new_round = Round(matches=tuple(matches), round_number=round_number)
        self.rounds.append(new_round)
        return new_round

    def undo_last_round(self) -> Optional[Round]:
        """Remove and return the latest round, or None if there is none."""
        if not self.rounds:
            return None
        removed = self.rounds.pop()
        logger.info("Removed round %s", removed.round_number)
        return removed

    def stats(self) -> HistoryStats:
        """Usage statistics over every round so far."""
        if self.config.uses_fixed_teams:
            player_ids = [
                pid for team in self.config.fixed_teams for pid in team.players
            ]
        else:
            player_ids = self.config.player_ids
        return HistoryStats.from_rounds(player_ids, self.rounds)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the session to dictionary."""
        return {
            "config": self.config.to_dict(),
            "rounds": [r.to_dict() for r in self.rounds],
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], generator: Optional[RoundGenerator] = None
    ) -> "RoundManager":
        """Deserialize a session from dictionary."""
        return cls(
            SessionConfig.from_dict(data["config"]),
            generator=generator,
            rounds=[Round.from_dict(r) for r in data.get("rounds", [])],
        )
