from rallypairing.models import Pair
from rallypairing.pairing.pair_pool import (
    all_possible_pairs,
    build_pool,
    min_usage_pool,
    mixed_pairs,
    pairs_up_to_level,
    usage_levels,
)


def _keys(pairs):
    return [p.key for p in pairs]


def test_all_possible_pairs_covers_every_combination_once():
    players = list("ABCDEFGH")
    pairs = all_possible_pairs(players)

    assert len(pairs) == 28
    assert len(set(_keys(pairs))) == 28
    assert all(p.first != p.second for p in pairs)


def test_all_possible_pairs_small_inputs():
    assert all_possible_pairs([]) == []
    assert all_possible_pairs(["A"]) == []
    assert _keys(all_possible_pairs(["A", "B"])) == [("A", "B")]


def test_mixed_pairs_crosses_genders():
    pairs = mixed_pairs(["M1", "M2"], ["F1", "F2", "F3"])

    assert len(pairs) == 6
    for pair in pairs:
        assert pair.first.startswith("M")
        assert pair.second.startswith("F")


def test_min_usage_pool_keeps_least_used_pairs():
    pairs = all_possible_pairs(["A", "B", "C", "D"])
    counts = {("A", "B"): 1, ("C", "D"): 1}

    pool = min_usage_pool(pairs, counts)

    assert _keys(pool) == [("A", "C"), ("A", "D"), ("B", "C"), ("B", "D")]


def test_build_pool_drops_last_round_pairs():
    pairs = all_possible_pairs(["A", "B", "C", "D"])
    counts = {p.key: 1 for p in pairs}

    pool = build_pool(pairs, counts, [("A", "C"), ("B", "D")])

    assert _keys(pool) == [("A", "B"), ("A", "D"), ("B", "C"), ("C", "D")]


def test_build_pool_keeps_min_pool_when_exclusion_empties_it():
    pairs = all_possible_pairs(["A", "B", "C", "D"])
    counts = {("A", "C"): 1, ("A", "D"): 1, ("B", "C"): 1, ("B", "D"): 1}

    pool = build_pool(pairs, counts, [("A", "B"), ("C", "D")])

    assert _keys(pool) == [("A", "B"), ("C", "D")]


def test_build_pool_of_empty_universe():
    assert build_pool([], {}, []) == []


def test_usage_levels_and_expansion():
    pairs = all_possible_pairs(["A", "B", "C"])
    counts = {("A", "B"): 2, ("A", "C"): 1}

    assert usage_levels(pairs, counts) == [0, 1, 2]
    assert _keys(pairs_up_to_level(pairs, counts, 0)) == [("B", "C")]
    assert _keys(pairs_up_to_level(pairs, counts, 1)) == [("A", "C"), ("B", "C")]
    assert pairs_up_to_level(pairs, counts, 2) == pairs


def test_pairs_are_value_objects():
    assert Pair("B", "A").key == Pair("A", "B").key
    assert Pair("A", "B") in all_possible_pairs(["A", "B", "C"])
