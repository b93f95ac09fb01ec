"""Injectable randomness for shuffles and tie-breaks.

Every random decision in the scheduler goes through a :class:`RandomSource`,
so a seeded ``random.Random`` reproduces a whole session exactly. The helpers
below only ever call ``random()``, which keeps them usable with any object
that yields uniform floats in ``[0, 1)``.
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
from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything yielding uniform floats in ``[0, 1)``."""

    def random(self) -> float: ...


def create_random_source(seed: Optional[int] = None) -> random.Random:
    """Create a random source, seeded when ``seed`` is given."""
    return random.Random(seed) if seed is not None else random.Random()


def shuffled(items: Sequence[T], rng: RandomSource) -> List[T]:
    """Return a Fisher-Yates shuffled copy of ``items``.

    Parameters
    ----------
    items : Sequence
        Items to shuffle, left untouched.
    rng : RandomSource
        Source of uniform randoms.

    Returns
    -------
    list
        A new list holding the same items in random order.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def pick(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one item uniformly at random."""
    if not items:
        raise IndexError("cannot pick from an empty sequence")
    return items[int(rng.random() * len(items))]
