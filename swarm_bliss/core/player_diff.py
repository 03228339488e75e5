from loguru import logger

from swarm_bliss.config import FeedbackConfig
from swarm_bliss.models.actuation import Actuation
from swarm_bliss.models.telemetry import ActivePlayerSnapshot
from swarm_bliss.models.tracking import ActivePlayerTrackingState


class ActivePlayerDiff:
    """Pulses on gold, level and champion stat increases.

    At most one pulse per snapshot. Checks run in priority order (gold,
    level, ability haste, armor, max health, move speed) and the first
    increase found wins, so a level up that also raises a stat plays once.
    The tracking state always takes the snapshot values.

    Parameters
    ----------
    config : FeedbackConfig
        Pulse parameters and intensity scales.
    """

    def __init__(self, config: FeedbackConfig):
        self.config = config

    def initial_state(self) -> ActivePlayerTrackingState:
        return ActivePlayerTrackingState()

    def _select(
        self, snapshot: ActivePlayerSnapshot, state: ActivePlayerTrackingState
    ) -> Actuation | None:
        config = self.config
        stats, previous = snapshot.stats, state.stats

        if snapshot.gold > state.gold:
            logger.info(f"Gold updated: {snapshot.gold}")
            return Actuation(snapshot.gold / config.gold_scale, config.gold_duration, "gold")
        if snapshot.level > state.level:
            logger.info(f"Level updated: {snapshot.level}")
            return Actuation(config.level_intensity, config.level_duration, "level")
        if stats.haste > previous.haste:
            logger.info(f"Ability haste updated: {stats.haste}")
            return Actuation(stats.haste / config.haste_scale, config.stat_duration, "ability haste")
        if stats.armor > previous.armor:
            logger.info(f"Armor updated: {stats.armor}")
            return Actuation(stats.armor / config.armor_scale, config.stat_duration, "armor")
        if stats.health > previous.health:
            logger.info(f"Health updated: {stats.health}")
            return Actuation(stats.health / config.health_scale, config.stat_duration, "health")
        if stats.speed > previous.speed:
            logger.info(f"Move speed updated: {stats.speed}")
            return Actuation(stats.speed / config.speed_scale, config.stat_duration, "move speed")
        return None

    def diff(
        self, snapshot: ActivePlayerSnapshot, state: ActivePlayerTrackingState
    ) -> tuple[ActivePlayerTrackingState, list[Actuation]]:
        actuation = self._select(snapshot, state)
        new_state = ActivePlayerTrackingState(
            gold=snapshot.gold, level=snapshot.level, stats=snapshot.stats
        )
        return new_state, [actuation] if actuation is not None else []
