"""Round checker for generated sessions.

Structural criteria (R1-R6) must never fail for a round produced by the
generator. Repeat criteria (Q1-Q2) are fairness warnings that are expected
once the unused pairings run out.

R1  No player appears in more than one match of a round
R2  The two sides of a match share no player
R3  Every side has the configured team size
R4  Every player is a registered player or fixed-team member
R5  In fixed-team mode every side is a registered fixed team, at most once
R6  A round holds no more matches than requested
Q1  Teammates repeat a previous pairing
Q2  Two teams repeat a previous matchup
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

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from rallypairing.constants import DEFAULT_TEAM_SIZE
from rallypairing.exceptions import InvalidPairingException, ValidationException
from rallypairing.models.match import Match
from rallypairing.models.pair import Pair, matchup_key, pair_key
from rallypairing.pairing.history import team_matchup_history, teammate_history
from rallypairing.type_hints import MatchupKey, PairKey, Team
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)

Sides = Tuple[Team, Team]


class CriterionStatus(Enum):
    """Status of a criterion check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ViolationType(Enum):
    """Types of criterion violations."""

    ABSOLUTE = "ABSOLUTE"  # R1-R6: must not violate
    QUALITY = "QUALITY"  # Q1-Q2: should minimize


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    violation_type: Optional[ViolationType] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def criterion_id(self) -> str:
        """Extract criterion ID from criterion string."""
        return self.criterion.split(":")[0].strip()

    @property
    def message(self) -> str:
        """Get the violation message."""
        return self.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criterion": self.criterion_id,
            "status": self.status.value,
            "type": self.violation_type.value if self.violation_type else None,
            "message": self.description,
            "details": self.details,
        }


@dataclass
class ValidationReport:
    """Complete validation report for one round or a whole session."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    overall_status: CriterionStatus
    summary: str
    quality_warnings: List[CriterionResult] = field(default_factory=list)
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def compliance_percentage(self) -> float:
        """Calculate compliance percentage."""
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0

    @property
    def is_valid(self) -> bool:
        return self.overall_status != CriterionStatus.VIOLATION

    def raise_if_invalid(self) -> None:
        """Raise :class:`ValidationException` on any structural violation."""
        if self.is_valid:
            return
        listed = "; ".join(f"{v.criterion_id}: {v.message}" for v in self.violations)
        raise ValidationException(f"{self.summary} ({listed})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compliance_percentage": self.compliance_percentage,
            "summary": self.summary,
            "is_valid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
            "quality_warnings": [w.to_dict() for w in self.quality_warnings],
        }


def _sides(match: Any) -> Sides:
    if isinstance(match, Match):
        return match.team_a, match.team_b
    if isinstance(match, dict):
        return tuple(match.get("team_a", ())), tuple(match.get("team_b", ()))
    team_a, team_b = match
    return tuple(team_a), tuple(team_b)


def _compliant(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.COMPLIANT,
        description=description,
    )


def _violation(
    criterion: str, description: str, kind: ViolationType, **details
) -> CriterionResult:
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.VIOLATION,
        violation_type=kind,
        description=description,
        details=details,
    )


class StructuralCriteriaChecker:
    """Validates structural criteria (R1-R6)."""

    def check_r1_partition(self, sides: Sequence[Sides]) -> CriterionResult:
        """R1: No player appears in more than one match."""
        seen: Dict[str, int] = {}
        for index, (team_a, team_b) in enumerate(sides):
            for pid in dict.fromkeys(team_a + team_b):
                if pid in seen:
                    return _violation(
                        "R1",
                        f"Player {pid} is in matches {seen[pid] + 1} and {index + 1}",
                        ViolationType.ABSOLUTE,
                        player_id=pid,
                        matches=[seen[pid] + 1, index + 1],
                    )
                seen[pid] = index
        return _compliant("R1", "Every player is in at most one match")

    def check_r2_disjoint_sides(self, sides: Sequence[Sides]) -> CriterionResult:
        """R2: The two sides of a match share no player."""
        for index, (team_a, team_b) in enumerate(sides):
            everyone = team_a + team_b
            if len(set(everyone)) != len(everyone):
                shared = sorted(set(team_a) & set(team_b))
                return _violation(
                    "R2",
                    f"Match {index + 1} repeats a player: {team_a} vs {team_b}",
                    ViolationType.ABSOLUTE,
                    match=index + 1,
                    shared=shared,
                )
        return _compliant("R2", "All match sides are disjoint")

    def check_r3_team_size(
        self, sides: Sequence[Sides], team_size: int
    ) -> CriterionResult:
        """R3: Every side has the configured size."""
        for index, (team_a, team_b) in enumerate(sides):
            for team in (team_a, team_b):
                if len(team) != team_size:
                    return _violation(
                        "R3",
                        f"Match {index + 1} has a side of {len(team)}, "
                        f"expected {team_size}",
                        ViolationType.ABSOLUTE,
                        match=index + 1,
                        team=list(team),
                    )
        return _compliant("R3", f"All sides have {team_size} player(s)")

    def check_r4_roster(
        self, sides: Sequence[Sides], known_players: Optional[Iterable[str]]
    ) -> CriterionResult:
        """R4: Every player is registered."""
        if known_players is None:
            return CriterionResult(
                criterion="R4",
                status=CriterionStatus.NOT_APPLICABLE,
                description="No roster supplied",
            )
        known = set(known_players)
        unknown = [
            pid
            for team_a, team_b in sides
            for pid in team_a + team_b
            if pid not in known
        ]
        if unknown:
            return _violation(
                "R4",
                f"Unregistered players: {', '.join(unknown)}",
                ViolationType.ABSOLUTE,
                players=unknown,
            )
        return _compliant("R4", "All players are registered")

    def check_r5_fixed_teams(
        self, sides: Sequence[Sides], fixed_teams: Optional[Sequence[Pair]]
    ) -> CriterionResult:
        """R5: Sides are registered fixed teams, each at most once."""
        if not fixed_teams:
            return CriterionResult(
                criterion="R5",
                status=CriterionStatus.NOT_APPLICABLE,
                description="Free pairing session",
            )
        registered = {team.key for team in fixed_teams}
        used: List[PairKey] = []
        for index, (team_a, team_b) in enumerate(sides):
            for team in (team_a, team_b):
                key = pair_key(team[0], team[1]) if len(team) == 2 else None
                if key not in registered:
                    return _violation(
                        "R5",
                        f"Match {index + 1} side {'+'.join(team)} is not a fixed team",
                        ViolationType.ABSOLUTE,
                        match=index + 1,
                        team=list(team),
                    )
                if key in used:
                    return _violation(
                        "R5",
                        f"Fixed team {'+'.join(key)} plays twice in one round",
                        ViolationType.ABSOLUTE,
                        team=list(key),
                    )
                used.append(key)
        return _compliant("R5", "Fixed teams intact")

    def check_r6_match_budget(
        self, sides: Sequence[Sides], num_matches: Optional[int]
    ) -> CriterionResult:
        """R6: No more matches than requested."""
        if num_matches is None:
            return CriterionResult(
                criterion="R6",
                status=CriterionStatus.NOT_APPLICABLE,
                description="No match budget supplied",
            )
        if len(sides) > num_matches:
            return _violation(
                "R6",
                f"{len(sides)} matches exceed the budget of {num_matches}",
                ViolationType.ABSOLUTE,
                matches=len(sides),
                budget=num_matches,
            )
        return _compliant("R6", f"{len(sides)} of {num_matches} matches")


class RepeatCriteriaChecker:
    """Flags repeated teammates and matchups (Q1-Q2)."""

    def check_q1_teammate_repeats(
        self, sides: Sequence[Sides], teammate_counts: Mapping[PairKey, int]
    ) -> CriterionResult:
        """Q1: Teammates should not repeat a previous pairing."""
        repeats = []
        for team_a, team_b in sides:
            for team in (team_a, team_b):
                if len(team) >= 2:
                    key = pair_key(team[0], team[1])
                    if teammate_counts.get(key, 0) > 0:
                        repeats.append("+".join(key))
        if repeats:
            return _violation(
                "Q1",
                f"Repeated teammates: {', '.join(repeats)}",
                ViolationType.QUALITY,
                teams=repeats,
            )
        return _compliant("Q1", "No repeated teammates")

    def check_q2_matchup_repeats(
        self, sides: Sequence[Sides], matchup_counts: Mapping[MatchupKey, int]
    ) -> CriterionResult:
        """Q2: Two teams should not meet again."""
        repeats = []
        for team_a, team_b in sides:
            if len(team_a) < 2 or len(team_b) < 2:
                continue
            key = matchup_key(
                pair_key(team_a[0], team_a[1]), pair_key(team_b[0], team_b[1])
            )
            if matchup_counts.get(key, 0) > 0:
                repeats.append(f"{'+'.join(key[0])} vs {'+'.join(key[1])}")
        if repeats:
            return _violation(
                "Q2",
                f"Repeated matchups: {', '.join(repeats)}",
                ViolationType.QUALITY,
                matchups=repeats,
            )
        return _compliant("Q2", "No repeated matchups")


def _build_report(results: List[CriterionResult], scope: str) -> ValidationReport:
    compliant_count = sum(1 for r in results if r.status == CriterionStatus.COMPLIANT)
    absolute_violations = [
        r
        for r in results
        if r.status == CriterionStatus.VIOLATION
        and r.violation_type == ViolationType.ABSOLUTE
    ]
    quality_warnings = [
        r
        for r in results
        if r.status == CriterionStatus.VIOLATION
        and r.violation_type == ViolationType.QUALITY
    ]
    overall_status = (
        CriterionStatus.VIOLATION if absolute_violations else CriterionStatus.COMPLIANT
    )
    if overall_status == CriterionStatus.COMPLIANT:
        summary = (
            f"{scope}: structural criteria satisfied; "
            f"{len(quality_warnings)} repeat warnings"
        )
    else:
        summary = (
            f"{scope}: {len(absolute_violations)} structural violations; "
            f"{len(quality_warnings)} repeat warnings"
        )
    return ValidationReport(
        total_criteria=len(results),
        compliant_count=compliant_count,
        violations=absolute_violations,
        overall_status=overall_status,
        summary=summary,
        quality_warnings=quality_warnings,
        criteria_results=results,
    )


class RoundValidator:
    """Main round checker."""

    def __init__(self):
        self.structural_checker = StructuralCriteriaChecker()
        self.repeat_checker = RepeatCriteriaChecker()

    def _check_round(
        self,
        matches: Sequence[Any],
        players: Optional[Iterable[str]],
        fixed_teams: Optional[Sequence[Pair]],
        team_size: int,
        num_matches: Optional[int],
        previous_rounds: Sequence[Sequence[Match]],
    ) -> List[CriterionResult]:
        sides = [s for s in (_sides(m) for m in matches) if s[0] and s[1]]
        if players is None and fixed_teams:
            players = [pid for team in fixed_teams for pid in team.players]
        checker = self.structural_checker
        results = [
            checker.check_r1_partition(sides),
            checker.check_r2_disjoint_sides(sides),
            checker.check_r3_team_size(sides, team_size),
            checker.check_r4_roster(sides, players),
            checker.check_r5_fixed_teams(sides, fixed_teams),
            checker.check_r6_match_budget(sides, num_matches),
            self.repeat_checker.check_q1_teammate_repeats(
                sides, teammate_history(previous_rounds)
            ),
            self.repeat_checker.check_q2_matchup_repeats(
                sides, team_matchup_history(previous_rounds)
            ),
        ]
        return results

    def validate_round(
        self,
        matches: Sequence[Any],
        players: Optional[Iterable[str]] = None,
        fixed_teams: Optional[Sequence[Pair]] = None,
        team_size: int = DEFAULT_TEAM_SIZE,
        num_matches: Optional[int] = None,
        previous_rounds: Sequence[Sequence[Match]] = (),
    ) -> ValidationReport:
        """Validate one round's matches.

        Matches may be :class:`Match` values, ``{"team_a", "team_b"}``
        dictionaries or ``(team_a, team_b)`` tuples. Placeholder matches
        with an empty side are skipped.
        """
        results = self._check_round(
            matches, players, fixed_teams, team_size, num_matches, previous_rounds
        )
        report = _build_report(results, "Round")
        logger.debug("Round validation complete: %s", report.summary)
        return report

    def validate_session(self, session_data: Dict[str, Any]) -> ValidationReport:
        """Validate every round of an exported session.

        ``session_data`` follows the simulator's JSON export: a ``config``
        mapping with ``team_size``, a ``players`` list of ids, an optional
        ``fixed_teams`` list of id pairs and ``rounds`` holding ``matches``.
        """
        logger.info("Starting session-wide validation")
        config = session_data.get("config", {})
        team_size = config.get("team_size", DEFAULT_TEAM_SIZE)
        players = session_data.get("players")
        fixed_teams = [Pair(a, b) for a, b in session_data.get("fixed_teams", [])]

        results: List[CriterionResult] = []
        history: List[List[Match]] = []
        for round_number, round_data in enumerate(session_data.get("rounds", []), 1):
            raw_matches = round_data.get("matches", [])
            round_results = self._check_round(
                raw_matches,
                players,
                fixed_teams or None,
                team_size,
                round_data.get("num_matches"),
                history,
            )
            for result in round_results:
                result.details.setdefault("round", round_number)
            results.extend(round_results)

            round_matches = []
            for raw in raw_matches:
                team_a, team_b = _sides(raw)
                try:
                    round_matches.append(Match(team_a, team_b))
                except InvalidPairingException:
                    # already reported under R2
                    continue
            history.append(round_matches)

        report = _build_report(results, f"Session ({len(history)} rounds)")
        logger.info("Session validation complete: %s", report.summary)
        return report


def create_round_validator() -> RoundValidator:
    """Create and configure round validator instance."""
    return RoundValidator()


def validate_round(matches: Sequence[Any], **kwargs) -> ValidationReport:
    """Quick validation function for a single round."""
    validator = create_round_validator()
    return validator.validate_round(matches, **kwargs)
