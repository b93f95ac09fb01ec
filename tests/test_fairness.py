from rallypairing.analysis import compute_fairness_metrics, find_round_repeats
from rallypairing.models import Match, Pair

FOUR = ["A", "B", "C", "D"]


def test_metrics_for_a_converged_four_player_session():
    rounds = [
        [Match(("A", "B"), ("C", "D"))],
        [Match(("A", "C"), ("B", "D"))],
        [Match(("A", "D"), ("B", "C"))],
    ]

    metrics = compute_fairness_metrics(FOUR, rounds)

    assert metrics.rounds == 3
    assert metrics.matches == 3
    assert metrics.teammate_repeats == 0
    assert metrics.total_pairs == 6
    assert metrics.unused_pairs == 0
    assert metrics.pair_usage_spread == 0
    assert metrics.matches_played_spread == 0
    assert metrics.idle_player_rounds == 0
    # every player meets each other player twice as an opponent
    assert metrics.opponent_repeats == 6


def test_metrics_count_idle_players_and_repeats():
    rounds = [
        [Match(("A", "B"), ("C", "D"))],
        [Match(("B", "A"), ("C", "E"))],
    ]

    metrics = compute_fairness_metrics(FOUR + ["E"], rounds)

    assert metrics.teammate_repeats == 1
    assert metrics.idle_player_rounds == 2
    assert metrics.min_matches_played == 1
    assert metrics.max_matches_played == 2
    assert metrics.unused_pairs == 10 - 3


def test_fixed_team_metrics_measure_matchups():
    teams = [Pair("A", "B"), Pair("C", "D"), Pair("E", "F")]
    rounds = [
        [Match(("A", "B"), ("C", "D"))],
        [Match(("A", "B"), ("C", "D"))],
    ]

    metrics = compute_fairness_metrics(list("ABCDEF"), rounds, fixed_teams=teams)

    assert metrics.total_pairs == 3
    assert metrics.unused_pairs == 2
    assert metrics.matchup_repeats == 1
    assert metrics.to_dict()["pair_usage_spread"] == 2


def test_empty_session():
    metrics = compute_fairness_metrics([], [])

    assert metrics.to_dict()["matches"] == 0
    assert metrics.pair_usage_spread == 0


def test_placeholder_matches_leave_players_idle():
    rounds = [[Match(("A", "B"), ("C", "D")), Match((), ("E", "F"))]]

    metrics = compute_fairness_metrics(FOUR + ["E", "F"], rounds)

    assert metrics.matches == 1
    assert metrics.idle_player_rounds == 2
    assert metrics.max_pair_usage == 1
    assert metrics.unused_pairs == 15 - 2


def test_find_round_repeats():
    history = [[Match(("A", "B"), ("C", "D"))]]
    matches = [Match(("B", "A"), ("C", "E")), Match(("F", "G"), ("H", "I"))]

    repeats = find_round_repeats(matches, history)

    assert repeats.teams == [("A", "B")]
    assert repeats.team_repeated(("A", "B"))
    assert not repeats.team_repeated(("C", "E"))
    assert repeats.matchups == []
    assert repeats.opponents == {0: [("B", "C"), ("A", "C")]}


def test_find_round_repeats_flags_same_matchup():
    history = [[Match(("A", "B"), ("C", "D"))]]
    match = Match(("D", "C"), ("A", "B"))

    repeats = find_round_repeats([match], history)

    assert repeats.matchup_repeated(match)
    assert repeats.teams == [("C", "D"), ("A", "B")]
