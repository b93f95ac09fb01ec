"""Greedy selection of disjoint teammate pairs.

A single pass walks the players who have played least first and gives each
one the least-used available partner. The pass is repeated with fresh
shuffles, and when the fairest pool cannot yield enough pairs the pool is
widened one usage level at a time.

When every player takes part in the round, the fairest pool is searched for
a full set of pairs first. A set is preferred when the fairest pairs it
leaves behind can still be split into complete rounds, so a session that
starts with every pair unused keeps using unused pairs until none are left.
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

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set

from rallypairing.constants import DEFAULT_MAX_ATTEMPTS, LOOKAHEAD_SEARCH_BUDGET
from rallypairing.models.pair import Pair
from rallypairing.pairing.pair_pool import (
    build_pool,
    min_usage_pool,
    pair_usage,
    pairs_up_to_level,
    usage_levels,
)
from rallypairing.type_hints import PairKey
from rallypairing.utils import RandomSource, setup_logger, shuffled

logger = setup_logger(__name__)


def _pool_players(pool: Sequence[Pair]) -> List[str]:
    players: List[str] = []
    seen = set()
    for pair in pool:
        for pid in pair.players:
            if pid not in seen:
                seen.add(pid)
                players.append(pid)
    return players


def _pairs_by_player(
    pairs: Sequence[Pair], players: Sequence[str]
) -> Dict[str, List[Pair]]:
    by_player: Dict[str, List[Pair]] = {pid: [] for pid in players}
    for pair in pairs:
        by_player[pair.first].append(pair)
        by_player[pair.second].append(pair)
    return by_player


class _SearchBudget:
    """Node counter shared by one look-ahead search."""

    def __init__(self, limit: int):
        self.remaining = limit

    def spend(self) -> bool:
        self.remaining -= 1
        return self.remaining >= 0

    @property
    def exhausted(self) -> bool:
        return self.remaining < 0


def _perfect_matchings(
    players: Sequence[str],
    by_player: Mapping[str, List[Pair]],
    budget: _SearchBudget,
) -> Iterator[List[Pair]]:
    """Yield every set of pairs covering each of ``players`` exactly once.

    The most constrained free player is branched on first, ties going to
    the earlier player. Candidate pairs are tried in ``by_player`` order.
    """
    used: Set[str] = set()
    chosen: List[Pair] = []

    def open_pairs(pid: str) -> List[Pair]:
        return [p for p in by_player[pid] if p.partner_of(pid) not in used]

    def search() -> Iterator[List[Pair]]:
        free = [pid for pid in players if pid not in used]
        if not free:
            yield list(chosen)
            return
        pid = min(free, key=lambda p: len(open_pairs(p)))
        for pair in open_pairs(pid):
            if not budget.spend():
                return
            used.update(pair.players)
            chosen.append(pair)
            yield from search()
            chosen.pop()
            used.difference_update(pair.players)

    yield from search()


def _splits_into_rounds(
    pairs: Sequence[Pair], players: Sequence[str], budget: _SearchBudget
) -> Optional[bool]:
    """Whether ``pairs`` splits into rounds that each use every player once.

    Returns None when the search budget ran out before an answer.
    """
    if not pairs:
        return True
    by_player = _pairs_by_player(pairs, players)
    degree = len(by_player[players[0]])
    if any(len(by_player[pid]) != degree for pid in players):
        return False
    for matching in _perfect_matchings(players, by_player, budget):
        taken = {pair.key for pair in matching}
        rest = [pair for pair in pairs if pair.key not in taken]
        result = _splits_into_rounds(rest, players, budget)
        if result is not False:
            return result
    return None if budget.exhausted else False


def _plan_full_round(
    pools: Sequence[Sequence[Pair]],
    fairest: Sequence[Pair],
    players: Sequence[str],
    rng: RandomSource,
) -> Optional[List[Pair]]:
    """Pick pairs covering every player from the first pool that allows it.

    A choice that leaves ``fairest`` splittable into complete rounds wins.
    Failing that, the first full cover found is returned, and None when no
    pool covers every player.
    """
    budget = _SearchBudget(LOOKAHEAD_SEARCH_BUDGET)
    fallback: Optional[List[Pair]] = None
    for pool in pools:
        order = shuffled(players, rng)
        by_player = _pairs_by_player(shuffled(pool, rng), order)
        if not all(by_player.values()):
            continue
        for matching in _perfect_matchings(order, by_player, budget):
            if fallback is None:
                fallback = matching
            taken = {pair.key for pair in matching}
            rest = [pair for pair in fairest if pair.key not in taken]
            if _splits_into_rounds(rest, players, budget) is not False:
                return matching
    if fallback is not None:
        logger.debug("No full round leaves the fairest pairs splittable")
    return fallback


def select_from_pool(
    pool: Sequence[Pair],
    matches_played: Mapping[str, int],
    needed_pairs: int,
    teammate_counts: Mapping[PairKey, int],
    rng: RandomSource,
) -> List[Pair]:
    """Draw up to ``needed_pairs`` disjoint pairs from ``pool`` in one pass.

    Players are shuffled, then stably sorted by matches played so the least
    active go first. Each takes the candidate whose partner has played least,
    then the least-used pair, with the shuffle order settling any remaining
    tie.

    Parameters
    ----------
    pool : sequence of Pair
        Candidate pairs.
    matches_played : Mapping
        Player id to matches played so far.
    needed_pairs : int
        Target number of pairs.
    teammate_counts : Mapping
        Pair key to times the two were teammates.
    rng : RandomSource
        Source of uniform randoms.

    Returns
    -------
    list of Pair
        Disjoint pairs, possibly fewer than requested.
    """
    if needed_pairs <= 0 or not pool:
        return []

    order = shuffled(_pool_players(pool), rng)
    position = {pid: i for i, pid in enumerate(order)}
    order.sort(key=lambda pid: matches_played.get(pid, 0))

    by_player = _pairs_by_player(pool, order)

    used = set()
    selected: List[Pair] = []
    for pid in order:
        if len(selected) >= needed_pairs:
            break
        if pid in used:
            continue
        candidates = [p for p in by_player[pid] if p.partner_of(pid) not in used]
        if not candidates:
            continue

        def rank(pair: Pair):
            partner = pair.partner_of(pid)
            return (
                matches_played.get(partner, 0),
                pair_usage(pair, teammate_counts),
                position[partner],
            )

        chosen = min(candidates, key=rank)
        selected.append(chosen)
        used.update(chosen.players)
    return selected


def _best_of_attempts(
    pool: Sequence[Pair],
    matches_played: Mapping[str, int],
    needed_pairs: int,
    teammate_counts: Mapping[PairKey, int],
    rng: RandomSource,
    max_attempts: int,
    best: List[Pair],
) -> List[Pair]:
    for _ in range(max_attempts):
        if len(best) >= needed_pairs:
            break
        result = select_from_pool(
            pool, matches_played, needed_pairs, teammate_counts, rng
        )
        if len(result) > len(best):
            best = result
    return best


def select_team_pairs(
    all_pairs: Sequence[Pair],
    matches_played: Mapping[str, int],
    needed_pairs: int,
    teammate_counts: Mapping[PairKey, int],
    last_round_pairs: Iterable[PairKey],
    rng: RandomSource,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> List[Pair]:
    """Select the teammate pairs for one round.

    Tries the filtered fairest pool first, then the same pool without the
    last-round exclusion, then every higher usage level in turn. Each stage
    gets ``max_attempts`` reshuffled passes and the longest result found so
    far is kept.

    When the round needs every player, the two fairest pools are first
    searched for a full cover that keeps the remaining fairest pairs
    splittable into complete rounds.

    Returns
    -------
    list of Pair
        Disjoint pairs. Shorter than ``needed_pairs`` only when every stage
        fell short.
    """
    if needed_pairs <= 0 or not all_pairs:
        return []

    last_round_pairs = list(last_round_pairs)
    stages = [build_pool(all_pairs, teammate_counts, last_round_pairs)]
    unfiltered = min_usage_pool(all_pairs, teammate_counts)
    if unfiltered != stages[0]:
        stages.append(unfiltered)

    players = _pool_players(all_pairs)
    if needed_pairs * 2 == len(players):
        planned = _plan_full_round(stages, unfiltered, players, rng)
        if planned:
            return planned

    for level in usage_levels(all_pairs, teammate_counts)[1:]:
        stages.append(pairs_up_to_level(all_pairs, teammate_counts, level))

    best: List[Pair] = []
    for stage, pool in enumerate(stages):
        best = _best_of_attempts(
            pool,
            matches_played,
            needed_pairs,
            teammate_counts,
            rng,
            max_attempts,
            best,
        )
        if len(best) >= needed_pairs:
            if stage > 0:
                logger.debug("Pair selection needed fallback stage %s", stage)
            return best

    logger.info(
        "Pair selection found %s of %s requested pairs", len(best), needed_pairs
    )
    return best
