"""Rally Pairing: fair round generation for casual doubles and singles sessions.

Typical use::

    import random
    from rallypairing import RoundGenerator

    generator = RoundGenerator(rng=random.Random(7))
    rounds = []
    for _ in range(3):
        rounds.append(
            generator.generate_round(["A", "B", "C", "D"], rounds, num_matches=1)
        )
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

from rallypairing.exceptions import (
    InvalidConfigurationException,
    InvalidPairingException,
    RallyPairingException,
)
from rallypairing.models import Match, Pair, Participant, Round, SessionConfig
from rallypairing.pairing import (
    HistoryStats,
    RoundGenerator,
    compute_num_matches,
    generate_round,
)
from rallypairing.session import RoundManager

__version__ = "0.1.0"

__all__ = [
    "HistoryStats",
    "InvalidConfigurationException",
    "InvalidPairingException",
    "Match",
    "Pair",
    "Participant",
    "RallyPairingException",
    "Round",
    "RoundGenerator",
    "RoundManager",
    "SessionConfig",
    "compute_num_matches",
    "generate_round",
]
