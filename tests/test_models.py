from pydantic import ValidationError
import pytest

from swarm_bliss.models.actuation import Actuation
from swarm_bliss.models.telemetry import ActivePlayerSnapshot, EventBatch, GameStatus, ScoreSnapshot
from swarm_bliss.models.tracking import ActivePlayerTrackingState, EventStreamState, ScoreTrackingState


def test_event_optional_fields_default():
    batch = EventBatch.model_validate(
        {"Events": [{"EventID": 3, "EventName": "FirstBlood", "EventTime": 95.2}]}
    )

    record = batch.events[0]
    assert (record.id, record.name, record.event_time) == (3, "FirstBlood", 95.2)
    assert record.game_time == 0.0
    assert record.result == ""


def test_game_status_mode_defaults_to_empty():
    assert GameStatus.model_validate({}).mode == ""
    assert GameStatus.model_validate({"gameMode": "STRAWBERRY", "gameTime": 12.0}).mode == "STRAWBERRY"


def test_active_player_payload():
    player = ActivePlayerSnapshot.model_validate(
        {
            "currentGold": 412.5,
            "level": 6,
            "championStats": {"abilityHaste": 15.0, "armor": 52.0, "maxHealth": 1180.0, "moveSpeed": 345.0},
            "summonerName": "ignored",
        }
    )

    assert player.gold == 412.5
    assert player.stats.health == 1180.0
    assert player.stats.speed == 345.0


def test_score_requires_both_fields():
    with pytest.raises(ValidationError):
        ScoreSnapshot.model_validate({"creepScore": 10})


def test_tracking_states_start_at_zero():
    assert EventStreamState() == EventStreamState(seen_count=0, match_ended=False)
    assert ScoreTrackingState() == ScoreTrackingState(creep_score=0, update_count=0, deaths=0)
    stats = ActivePlayerTrackingState().stats
    assert (stats.haste, stats.armor, stats.health, stats.speed) == (0.0, 0.0, 0.0, 0.0)


@pytest.mark.parametrize(("raw", "expected"), [(1.33, 1.0), (-0.2, 0.0), (0.4, 0.4), (1, 1.0)])
def test_actuation_intensity_is_clamped(raw, expected):
    assert Actuation(raw, 0.1).intensity == expected


def test_actuation_rejects_negative_duration():
    with pytest.raises(ValueError):
        Actuation(0.5, -1.0)
