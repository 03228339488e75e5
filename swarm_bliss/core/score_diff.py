from loguru import logger

from swarm_bliss.config import FeedbackConfig
from swarm_bliss.models.actuation import Actuation
from swarm_bliss.models.telemetry import ScoreSnapshot
from swarm_bliss.models.tracking import ScoreTrackingState


class ScoreDiff:
    """Pulses on creep score and death increases.

    Creep score changes several times a second in a busy fight, so only
    every ``creep_score_period``-th increase produces a pulse. Every death
    increase pulses once, whatever the size of the jump.

    Parameters
    ----------
    config : FeedbackConfig
        Pulse parameters and debounce period.
    """

    def __init__(self, config: FeedbackConfig):
        self.config = config

    def initial_state(self) -> ScoreTrackingState:
        return ScoreTrackingState()

    def diff(
        self, snapshot: ScoreSnapshot, state: ScoreTrackingState
    ) -> tuple[ScoreTrackingState, list[Actuation]]:
        actuations = []

        update_count = state.update_count
        if snapshot.creep_score > state.creep_score:
            update_count += 1
            if update_count % self.config.creep_score_period == 0:
                logger.info(f"Creep score updated: {snapshot.creep_score}")
                actuations.append(
                    Actuation(
                        self.config.creep_score_intensity,
                        self.config.creep_score_duration,
                        "creep score",
                    )
                )

        if snapshot.deaths > state.deaths:
            logger.info(f"Death count updated: {snapshot.deaths}")
            actuations.append(
                Actuation(self.config.death_intensity, self.config.death_duration, "death")
            )

        new_state = ScoreTrackingState(
            creep_score=snapshot.creep_score,
            update_count=update_count,
            deaths=snapshot.deaths,
        )
        return new_state, actuations
