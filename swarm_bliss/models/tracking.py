from dataclasses import dataclass, field

from swarm_bliss.models.telemetry import PlayerStats


def zero_stats() -> PlayerStats:
    return PlayerStats(haste=0.0, armor=0.0, health=0.0, speed=0.0)


@dataclass(frozen=True)
class EventStreamState:
    """Running state of the event poller.

    Attributes
    ----------
    seen_count : int
        Length of the last event batch. This is a length counter, not a
        cursor over event ids.
    match_ended : bool
        Latched once the end of match pulse has fired.
    """

    seen_count: int = 0
    match_ended: bool = False


@dataclass(frozen=True)
class ScoreTrackingState:
    """Running state of the score poller.

    Attributes
    ----------
    creep_score : int
        Last creep score seen.
    update_count : int
        Number of creep score increases seen so far, drives the debounce.
    deaths : int
        Last death count seen.
    """

    creep_score: int = 0
    update_count: int = 0
    deaths: int = 0


@dataclass(frozen=True)
class ActivePlayerTrackingState:
    """Last active player values seen by the active player poller."""

    gold: float = 0.0
    level: int = 0
    stats: PlayerStats = field(default_factory=zero_stats)
