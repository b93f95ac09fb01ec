"""Candidate teammate pairs for free-pairing rounds."""

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

from typing import Iterable, List, Mapping, Sequence

from rallypairing.models.pair import Pair
from rallypairing.type_hints import PairKey
from rallypairing.utils import setup_logger

logger = setup_logger(__name__)


def all_possible_pairs(players: Sequence[str]) -> List[Pair]:
    """Every two-player combination, n*(n-1)/2 pairs in input order."""
    pairs = []
    for i, first in enumerate(players):
        for second in players[i + 1 :]:
            pairs.append(Pair(first, second))
    return pairs


def mixed_pairs(males: Sequence[str], females: Sequence[str]) -> List[Pair]:
    """Every male and female combination, for mixed doubles."""
    return [Pair(male, female) for male in males for female in females]


def pair_usage(pair: Pair, teammate_counts: Mapping[PairKey, int]) -> int:
    return teammate_counts.get(pair.key, 0)


def min_usage_pool(
    all_pairs: Sequence[Pair], teammate_counts: Mapping[PairKey, int]
) -> List[Pair]:
    """Pairs whose teammate usage equals the lowest usage present."""
    if not all_pairs:
        return []
    min_count = min(pair_usage(p, teammate_counts) for p in all_pairs)
    return [p for p in all_pairs if pair_usage(p, teammate_counts) == min_count]


def build_pool(
    all_pairs: Sequence[Pair],
    teammate_counts: Mapping[PairKey, int],
    last_round_pairs: Iterable[PairKey],
) -> List[Pair]:
    """Narrow the pair universe to the fairest candidates for this round.

    Takes the least-used pairs, then drops those that were teammates in the
    previous round, unless that would leave nothing.

    Parameters
    ----------
    all_pairs : sequence of Pair
        The full pair universe for this round.
    teammate_counts : Mapping
        Pair key to times the two were teammates.
    last_round_pairs : iterable of PairKey
        Teammate keys from the most recent round.

    Returns
    -------
    list of Pair
        Candidate pool, in the order of ``all_pairs``.
    """
    min_pool = min_usage_pool(all_pairs, teammate_counts)
    recent = set(last_round_pairs)
    fresh = [p for p in min_pool if p.key not in recent]
    if fresh and len(fresh) < len(min_pool):
        logger.debug(
            "Excluded %s pairs repeated from last round", len(min_pool) - len(fresh)
        )
        return fresh
    return min_pool


def usage_levels(
    all_pairs: Sequence[Pair], teammate_counts: Mapping[PairKey, int]
) -> List[int]:
    """Distinct teammate usage counts across ``all_pairs``, ascending."""
    return sorted({pair_usage(p, teammate_counts) for p in all_pairs})


def pairs_up_to_level(
    all_pairs: Sequence[Pair], teammate_counts: Mapping[PairKey, int], level: int
) -> List[Pair]:
    """Pairs used at most ``level`` times as teammates."""
    return [p for p in all_pairs if pair_usage(p, teammate_counts) <= level]
