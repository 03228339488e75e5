from pydantic import BaseModel, ConfigDict, Field


class TelemetryModel(BaseModel):
    """Base of every live client payload, fields populate by alias or name."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class GameStatus(TelemetryModel):
    mode: str = Field("", alias="gameMode")


class EventRecord(TelemetryModel):
    """Single entry of the match event feed."""

    id: int = Field(alias="EventID")
    name: str = Field(alias="EventName")
    game_time: float = Field(0.0, alias="GameTime")
    event_time: float = Field(alias="EventTime")
    result: str = Field("", alias="Result")


class EventBatch(TelemetryModel):
    events: list[EventRecord] = Field(alias="Events")


class ScoreSnapshot(TelemetryModel):
    creep_score: int = Field(alias="creepScore")
    deaths: int


class PlayerStats(TelemetryModel):
    """Champion stats compared between two active player snapshots."""

    haste: float = Field(alias="abilityHaste")
    armor: float
    health: float = Field(alias="maxHealth")
    speed: float = Field(alias="moveSpeed")


class ActivePlayerSnapshot(TelemetryModel):
    gold: float = Field(alias="currentGold")
    level: int
    stats: PlayerStats = Field(alias="championStats")
