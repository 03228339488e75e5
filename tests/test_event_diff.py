import pytest

from swarm_bliss.config import FeedbackConfig
from swarm_bliss.core.event_diff import EventDiff
from swarm_bliss.models.telemetry import EventBatch, EventRecord
from swarm_bliss.models.tracking import EventStreamState


def event(event_id, name, result=""):
    return EventRecord(id=event_id, name=name, event_time=float(event_id), result=result)


@pytest.fixture
def engine():
    return EventDiff(FeedbackConfig())


def test_empty_batch_keeps_state(engine, log_messages):
    state = EventStreamState(seen_count=4, match_ended=False)

    new_state, actuations = engine.diff([], state)

    assert new_state is state
    assert actuations == []
    assert "No events found" in log_messages


def test_game_start_marker_on_first_batch(engine, log_messages):
    state, actuations = engine.diff([event(0, "GameStart")], engine.initial_state())

    assert actuations == []
    assert state == EventStreamState(seen_count=1, match_ended=False)
    assert "Game started" in log_messages


def test_game_start_marker_only_when_nothing_seen(engine, log_messages):
    engine.diff([event(0, "GameStart"), event(1, "MinionsSpawning")], EventStreamState(seen_count=1))

    assert "Game started" not in log_messages


def test_defeat_pulses_and_latches(engine):
    batch = [event(0, "GameStart"), event(1, "GameEnd", "Lose")]

    state, actuations = engine.diff(batch, EventStreamState(seen_count=1))

    assert [(a.intensity, a.duration, a.reason) for a in actuations] == [(0.75, 1.0, "defeat")]
    assert state == EventStreamState(seen_count=2, match_ended=True)


@pytest.mark.parametrize("result", ["Win", "", "Surrender"])
def test_any_other_result_is_victory(engine, result):
    _, actuations = engine.diff([event(0, "GameEnd", result)], EventStreamState(seen_count=3))

    assert [(a.intensity, a.duration, a.reason) for a in actuations] == [(1.0, 2.0, "victory")]


def test_game_end_fires_once(engine):
    batch = [event(0, "GameStart"), event(1, "GameEnd", "Lose")]
    state, _ = engine.diff(batch, engine.initial_state())

    state, actuations = engine.diff(batch + [event(2, "GameEnd", "Lose")], state)

    assert actuations == []
    assert state == EventStreamState(seen_count=3, match_ended=True)


def test_only_last_event_is_inspected(engine):
    batch = [event(0, "GameEnd", "Win"), event(1, "ChampionKill")]

    state, actuations = engine.diff(batch, engine.initial_state())

    assert actuations == []
    assert state.match_ended is False


def test_seen_count_is_batch_length(engine):
    state, _ = engine.diff([event(i, "ChampionKill") for i in range(5)], EventStreamState(seen_count=9))

    assert state.seen_count == 5


def test_accepts_event_batch_payload(engine):
    batch = EventBatch.model_validate(
        {"Events": [{"EventID": 0, "EventName": "GameEnd", "EventTime": 1200.5, "Result": "Lose"}]}
    )

    _, actuations = engine.diff(batch, engine.initial_state())

    assert [a.reason for a in actuations] == ["defeat"]
