"""Random Session Generator (RSG) - internal testing system for the scheduler.

This module simulates whole play sessions, round after round, so that the
scheduler's fairness and structural guarantees can be checked at scale.
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

import argparse
import json
import random
import string
import time
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from rallypairing.analysis.fairness import compute_fairness_metrics
from rallypairing.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_SIM_COURTS,
    DEFAULT_SIM_PLAYERS,
    DEFAULT_SIM_ROUNDS,
    DEFAULT_TEAM_SIZE,
    GENDER_FEMALE,
    GENDER_MALE,
    GENDER_TEAMS_ANY,
    GENDER_TEAMS_MEN,
    GENDER_TEAMS_MIX_PAIRS,
    GENDER_TEAMS_WOMEN,
    GENDER_UNDISCLOSED,
    MAX_LETTER_IDS,
)
from rallypairing.models.match import Match
from rallypairing.models.pair import Pair
from rallypairing.models.participant import Participant
from rallypairing.models.session_config import SessionConfig
from rallypairing.pairing.eligibility import eligible_pairs
from rallypairing.pairing.round_generator import create_round_generator
from rallypairing.session.round_manager import RoundManager
from rallypairing.utils import setup_logger
from rallypairing.validation.round_checker import create_round_validator

logger = setup_logger(__name__)


class GenderDistribution(Enum):
    """Gender patterns for simulated players."""

    UNDISCLOSED = "undisclosed"
    BALANCED = "balanced"
    MOSTLY_MALE = "mostly_male"
    MOSTLY_FEMALE = "mostly_female"
    RANDOM = "random"


@dataclass
class RSGConfig:
    """Configuration for Random Session Generator."""

    num_players: int = DEFAULT_SIM_PLAYERS
    num_rounds: int = DEFAULT_SIM_ROUNDS
    num_courts: int = DEFAULT_SIM_COURTS
    team_size: int = DEFAULT_TEAM_SIZE
    fixed_teams: bool = False
    gender_teams: str = GENDER_TEAMS_ANY
    gender_distribution: GenderDistribution = GenderDistribution.BALANCED
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    validate: bool = True
    # raise ValidationException on structural violations
    strict: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_players": self.num_players,
            "num_rounds": self.num_rounds,
            "num_courts": self.num_courts,
            "team_size": self.team_size,
            "fixed_teams": self.fixed_teams,
            "gender_teams": self.gender_teams,
            "gender_distribution": self.gender_distribution.value,
            "seed": self.seed,
            "max_attempts": self.max_attempts,
        }


def player_id_for(index: int, total: int) -> str:
    """Letters A-Z for small sessions, P001 style beyond that."""
    if total <= MAX_LETTER_IDS:
        return string.ascii_uppercase[index]
    return f"P{index + 1:03d}"


class PlayerFactory:
    """Factory for creating simulated session participants."""

    def __init__(self, config: RSGConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def create_players(self) -> List[Participant]:
        """Create participants based on configuration."""
        total = self.config.num_players
        players = [
            Participant(player_id=player_id_for(i, total), gender=self._gender(i))
            for i in range(total)
        ]
        logger.info(
            "Created %s players with %s genders",
            len(players),
            self.config.gender_distribution.value,
        )
        return players

    def _gender(self, index: int) -> str:
        distribution = self.config.gender_distribution
        if distribution == GenderDistribution.UNDISCLOSED:
            return GENDER_UNDISCLOSED
        if distribution == GenderDistribution.BALANCED:
            return GENDER_MALE if index % 2 == 0 else GENDER_FEMALE
        if distribution == GenderDistribution.MOSTLY_MALE:
            return GENDER_FEMALE if index % 4 == 3 else GENDER_MALE
        if distribution == GenderDistribution.MOSTLY_FEMALE:
            return GENDER_MALE if index % 4 == 3 else GENDER_FEMALE
        return self.random.choice([GENDER_MALE, GENDER_FEMALE, GENDER_UNDISCLOSED])

    def create_fixed_teams(self, players: List[Participant]) -> List[Pair]:
        """Pair players into fixed teams that fit the gender mode."""
        mode = self.config.gender_teams
        males = [p.player_id for p in players if p.gender == GENDER_MALE]
        females = [p.player_id for p in players if p.gender == GENDER_FEMALE]
        self.random.shuffle(males)
        self.random.shuffle(females)

        if mode == GENDER_TEAMS_MIX_PAIRS:
            teams = [Pair(m, f) for m, f in zip(males, females)]
        else:
            if mode == GENDER_TEAMS_MEN:
                pool = males
            elif mode == GENDER_TEAMS_WOMEN:
                pool = females
            else:
                pool = [p.player_id for p in players]
                self.random.shuffle(pool)
            teams = [Pair(pool[i], pool[i + 1]) for i in range(0, len(pool) - 1, 2)]
        logger.info("Created %s fixed teams", len(teams))
        return teams


class RandomSessionGenerator:
    """Main session generator orchestrating players and rounds."""

    def __init__(self, config: RSGConfig):
        self.config = config
        self.player_factory = PlayerFactory(config)
        self.round_generator = create_round_generator(config.seed, config.max_attempts)

    def build_session_config(
        self, players: List[Participant], fixed_teams: List[Pair]
    ) -> SessionConfig:
        label = self.config.seed if self.config.seed is not None else "random"
        return SessionConfig(
            name=f"RSG-{label}",
            participants=players,
            fixed_teams=fixed_teams,
            courts=[f"Court {i + 1}" for i in range(self.config.num_courts)],
            team_size=self.config.team_size,
            gender_teams=self.config.gender_teams,
            max_attempts=self.config.max_attempts,
            seed=self.config.seed,
        )

    def generate_complete_session(self) -> Dict[str, Any]:
        """Generate a complete session with players and rounds."""
        logger.info(
            "Generating session: %s players, %s courts, %s rounds",
            self.config.num_players,
            self.config.num_courts,
            self.config.num_rounds,
        )
        players = self.player_factory.create_players()
        fixed_teams = (
            self.player_factory.create_fixed_teams(players)
            if self.config.fixed_teams
            else []
        )
        session_config = self.build_session_config(players, fixed_teams)
        manager = RoundManager(session_config, generator=self.round_generator)

        session_data: Dict[str, Any] = {
            "config": self.config,
            "session_config": session_config,
            "players": players,
            "fixed_teams": fixed_teams,
            "rounds": [],
        }

        for round_number in range(1, self.config.num_rounds + 1):
            requested = manager.num_matches()
            start_time = time.perf_counter()
            new_round = manager.create_next_round()
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            session_data["rounds"].append(
                {
                    "round_number": round_number,
                    "num_matches": requested,
                    "matches": list(new_round.matches) if new_round else [],
                    "time_ms": elapsed_ms,
                }
            )

        if fixed_teams:
            eligible = [
                pid for team in manager.active_fixed_teams() for pid in team.players
            ]
            universe = None
        else:
            eligible = manager.eligible_player_ids()
            universe = eligible_pairs(
                eligible, session_config.genders, session_config.gender_teams
            )
        session_data["eligible_players"] = eligible
        session_data["fairness"] = compute_fairness_metrics(
            eligible,
            manager.rounds,
            fixed_teams=manager.active_fixed_teams() or None,
            all_pairs=universe,
        )

        if self.config.validate:
            report = create_round_validator().validate_session(
                self.build_export_payload(session_data)
            )
            session_data["validation_report"] = {
                "summary": report.summary,
                "compliance_percentage": report.compliance_percentage,
                "warnings": summarize_repeat_warnings(report),
                "absolute_violations": [v.criterion for v in report.violations],
            }
            if self.config.strict:
                report.raise_if_invalid()

        logger.info("Session generation complete")
        return session_data

    def build_export_payload(self, session_data: Dict[str, Any]) -> Dict[str, Any]:
        """Plain JSON-ready view of a generated session."""

        def serialize_matches(matches: List[Match]) -> List[Dict[str, Any]]:
            return [match.to_dict() for match in matches]

        payload = {
            "config": self.config.to_dict(),
            "players": [p.player_id for p in session_data["players"]],
            "participants": [p.to_dict() for p in session_data["players"]],
            "fixed_teams": [list(t.players) for t in session_data["fixed_teams"]],
            "rounds": [
                {
                    "round_number": round_data["round_number"],
                    "num_matches": round_data["num_matches"],
                    "matches": serialize_matches(round_data["matches"]),
                }
                for round_data in session_data["rounds"]
            ],
        }
        if "fairness" in session_data:
            payload["fairness"] = session_data["fairness"].to_dict()
        return payload

    def export_json_format(self, session_data: Dict[str, Any]) -> str:
        return json.dumps(self.build_export_payload(session_data), indent=2)


def summarize_repeat_warnings(report) -> Dict[str, int]:
    """Summarize repeat warnings by criterion."""
    return dict(Counter([warning.criterion for warning in report.quality_warnings]))


def create_rsg_generator(config: RSGConfig) -> RandomSessionGenerator:
    """Create RSG session generator with given configuration."""
    return RandomSessionGenerator(config)


def create_small_session(
    num_players: int = 4, seed: Optional[int] = None
) -> RandomSessionGenerator:
    """Create a one court session for convergence checks."""
    config = RSGConfig(
        num_players=num_players,
        num_rounds=3,
        num_courts=1,
        gender_distribution=GenderDistribution.UNDISCLOSED,
        seed=seed,
    )
    return create_rsg_generator(config)


def create_club_session(
    num_players: int = 8, seed: Optional[int] = None
) -> RandomSessionGenerator:
    """Create a typical club night with every player on court."""
    config = RSGConfig(
        num_players=num_players,
        num_rounds=DEFAULT_SIM_ROUNDS,
        num_courts=max(1, num_players // 4),
        gender_distribution=GenderDistribution.UNDISCLOSED,
        seed=seed,
    )
    return create_rsg_generator(config)


def create_fixed_team_session(
    num_teams: int = 6, seed: Optional[int] = None
) -> RandomSessionGenerator:
    """Create a league night where doubles teams never change."""
    config = RSGConfig(
        num_players=num_teams * 2,
        num_rounds=num_teams * (num_teams - 1) // 2,
        num_courts=2,
        fixed_teams=True,
        gender_distribution=GenderDistribution.UNDISCLOSED,
        seed=seed,
    )
    return create_rsg_generator(config)


def create_mixed_session(
    num_players: int = 8, seed: Optional[int] = None
) -> RandomSessionGenerator:
    """Create a mixed doubles session with balanced genders."""
    config = RSGConfig(
        num_players=num_players,
        num_rounds=DEFAULT_SIM_ROUNDS,
        num_courts=max(1, num_players // 4),
        gender_teams=GENDER_TEAMS_MIX_PAIRS,
        gender_distribution=GenderDistribution.BALANCED,
        seed=seed,
    )
    return create_rsg_generator(config)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Random Session Generator (RSG)")
    parser.add_argument(
        "--players",
        type=int,
        default=DEFAULT_SIM_PLAYERS,
        help=f"Number of players in the session (default: {DEFAULT_SIM_PLAYERS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--type",
        choices=["club", "small", "fixed", "mixed"],
        default="club",
        help="Session type: club, small (one court), fixed (fixed teams), mixed",
    )
    args = parser.parse_args()

    if args.type == "club":
        generator = create_club_session(args.players, seed=args.seed)
    elif args.type == "small":
        generator = create_small_session(args.players, seed=args.seed)
    elif args.type == "fixed":
        generator = create_fixed_team_session(args.players // 2, seed=args.seed)
    else:
        generator = create_mixed_session(args.players, seed=args.seed)

    session = generator.generate_complete_session()
    print("Generated Session:")
    print(f"Players: {len(session['players'])}")
    print(f"Rounds: {len(session['rounds'])}")
    for key, value in session["fairness"].to_dict().items():
        print(f"  {key}: {value}")
    if "validation_report" in session:
        print(session["validation_report"]["summary"])
