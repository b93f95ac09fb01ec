"""Example script walking through a club night with Rally Pairing.

Shows the plain round generator, the session manager with courts and fixed
teams, and the fairness report that comes out at the end.
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

import random
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rallypairing import Pair, Participant, RoundGenerator, RoundManager, SessionConfig
from rallypairing.analysis import compute_fairness_metrics


def example_round_generator():
    """Example: Calling the round generator directly."""

    print("\n" + "=" * 70)
    print("EXAMPLE 1: Four friends, one court")
    print("=" * 70 + "\n")

    players = ["Ana", "Ben", "Cleo", "Dev"]
    generator = RoundGenerator(rng=random.Random(7))
    rounds = []
    for number in range(1, 4):
        matches = generator.generate_round(players, rounds, num_matches=1)
        rounds.append(matches)
        print(f"Round {number}: " + ", ".join(str(m) for m in matches))

    print("\nAfter three rounds everyone has partnered everyone once.")
    print("=" * 70 + "\n")


def example_club_night():
    """Example: A club night run through the session manager."""

    print("\n" + "=" * 70)
    print("EXAMPLE 2: Ten players, two courts")
    print("=" * 70 + "\n")

    config = SessionConfig(
        name="Thursday padel",
        participants=[Participant(f"P{i:02d}") for i in range(1, 11)],
        courts=["Court 1", "Court 2"],
        seed=2025,
    )
    manager = RoundManager(config)
    for _ in range(5):
        new_round = manager.create_next_round()
        resting = set(config.player_ids) - set(new_round.players())
        print(f"Round {new_round.round_number}:")
        for match in new_round:
            print(f"  {match}")
        print(f"  resting: {', '.join(sorted(resting))}")

    metrics = compute_fairness_metrics(config.player_ids, manager.rounds)
    print("\nFairness:")
    for key, value in metrics.to_dict().items():
        print(f"  {key:24} {value}")
    print("=" * 70 + "\n")


def example_fixed_teams():
    """Example: Teams that stay together all evening."""

    print("\n" + "=" * 70)
    print("EXAMPLE 3: Fixed teams")
    print("=" * 70 + "\n")

    teams = [Pair("A1", "A2"), Pair("B1", "B2"), Pair("C1", "C2"), Pair("D1", "D2")]
    config = SessionConfig(
        name="League night",
        participants=[Participant(pid) for team in teams for pid in team.players],
        fixed_teams=teams,
        courts=["Court 1"],
        seed=3,
    )
    manager = RoundManager(config)
    for _ in range(6):
        new_round = manager.create_next_round()
        print(f"Round {new_round.round_number}: {new_round.matches[0]}")
    print("=" * 70 + "\n")


def main():
    """Run all examples."""

    print("\n" + "╔" + "=" * 68 + "╗")
    print("║" + " " * 68 + "║")
    print("║" + "  RALLY PAIRING - EXAMPLES".center(68) + "║")
    print("║" + " " * 68 + "║")
    print("╚" + "=" * 68 + "╝")

    example_round_generator()
    example_club_night()
    example_fixed_teams()

    print("\n" + "=" * 70)
    print("For whole simulated sessions use the rally-test CLI:")
    print("  $ rally-test simulate --players 12 --courts 3 --rounds 9 --seed 1")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
