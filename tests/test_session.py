import random

import pytest

from rallypairing.exceptions import (
    InvalidConfigurationException,
    NoPairingAvailableException,
)
from rallypairing.models import Pair, Participant, SessionConfig
from rallypairing.pairing.round_generator import RoundGenerator
from rallypairing.session import RoundManager


def _config(ids, courts=2, **kwargs):
    return SessionConfig(
        participants=[Participant(pid) for pid in ids],
        courts=[f"Court {i + 1}" for i in range(courts)],
        seed=kwargs.pop("seed", 17),
        **kwargs,
    )


def test_rounds_are_numbered_and_on_courts():
    manager = RoundManager(_config("ABCDEFGH"))

    first = manager.create_next_round()
    second = manager.create_next_round()

    assert first.round_number == 1
    assert second.round_number == 2
    assert manager.current_round_number == 2
    assert [m.court_id for m in first] == ["Court 1", "Court 2"]
    assert manager.get_round(1) is first
    assert manager.get_round(3) is None


def test_num_matches_follows_courts_and_players():
    assert RoundManager(_config("ABCDEFGH", courts=1)).num_matches() == 1
    assert RoundManager(_config("ABCDEFGHIJ", courts=3)).num_matches() == 2
    assert RoundManager(_config("ABCDE", courts=1, team_size=1)).num_matches() == 1


def test_players_sitting_out_are_not_scheduled():
    config = _config("ABCDE", courts=1)
    config.participants[4] = Participant("E", is_playing=False)
    manager = RoundManager(config)

    for _ in range(3):
        new_round = manager.create_next_round()
        assert "E" not in new_round.players()


def test_too_few_players_returns_none():
    manager = RoundManager(_config("ABC"))

    assert manager.create_next_round() is None
    assert manager.rounds == []


def test_require_full_raises_when_round_cannot_be_filled():
    manager = RoundManager(_config("ABC"))

    with pytest.raises(NoPairingAvailableException):
        manager.create_next_round(require_full=True)


def test_undo_last_round():
    manager = RoundManager(_config("ABCD", courts=1))
    manager.create_next_round()
    latest = manager.create_next_round()

    assert manager.undo_last_round() is latest
    assert manager.current_round_number == 1
    manager.undo_last_round()
    assert manager.undo_last_round() is None


def test_stats_track_every_round():
    manager = RoundManager(_config("ABCD", courts=1))
    for _ in range(3):
        manager.create_next_round()

    stats = manager.stats()

    assert stats.rounds_seen == 3
    assert dict(stats.matches_played) == {"A": 3, "B": 3, "C": 3, "D": 3}
    assert set(stats.teammate_counts.values()) == {1}


def test_fixed_team_session():
    teams = [Pair("A", "B"), Pair("C", "D"), Pair("E", "F")]
    manager = RoundManager(_config("ABCDEF", fixed_teams=teams))

    assert manager.num_matches() == 1
    for _ in range(3):
        new_round = manager.create_next_round()
        assert len(new_round) == 1
        match = new_round.matches[0]
        assert Pair(*match.team_a) in teams or Pair(*match.team_a[::-1]) in teams
    played = manager.stats().matches_played
    assert set(played.values()) == {2}


def test_round_trip_preserves_history():
    manager = RoundManager(_config("ABCDEFGH"))
    manager.create_next_round()
    manager.create_next_round()

    restored = RoundManager.from_dict(
        manager.to_dict(), generator=RoundGenerator(rng=random.Random(1))
    )

    assert restored.rounds == manager.rounds
    assert restored.config == manager.config
    assert restored.create_next_round().round_number == 3


def test_invalid_config_is_rejected_on_construction():
    with pytest.raises(InvalidConfigurationException):
        RoundManager(_config("AAB"))


def test_mixed_pairs_in_singles_is_rejected():
    config = SessionConfig(
        participants=[
            Participant("M1", gender="MALE"),
            Participant("M2", gender="MALE"),
            Participant("M3", gender="MALE"),
            Participant("F1", gender="FEMALE"),
        ],
        courts=["Court 1", "Court 2"],
        team_size=1,
        gender_teams="MIX_PAIRS",
    )

    with pytest.raises(InvalidConfigurationException):
        config.validate()
    with pytest.raises(InvalidConfigurationException):
        RoundManager(config)


def test_mixed_pairs_in_doubles_is_sized_by_the_smaller_gender():
    config = SessionConfig(
        participants=[
            Participant("M1", gender="MALE"),
            Participant("M2", gender="MALE"),
            Participant("M3", gender="MALE"),
            Participant("F1", gender="FEMALE"),
            Participant("F2", gender="FEMALE"),
        ],
        courts=["Court 1", "Court 2"],
        gender_teams="MIX_PAIRS",
        seed=4,
    )
    manager = RoundManager(config)

    assert manager.num_matches() == 1
    assert len(manager.create_next_round()) == 1
