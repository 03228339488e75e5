from dataclasses import replace

from loguru import logger

from swarm_bliss.config import FeedbackConfig
from swarm_bliss.models.actuation import Actuation
from swarm_bliss.models.telemetry import EventBatch, EventRecord
from swarm_bliss.models.tracking import EventStreamState

GAME_START = "GameStart"
GAME_END = "GameEnd"
DEFEAT = "Lose"


class EventDiff:
    """Detects match start and end in the event feed.

    Parameters
    ----------
    config : FeedbackConfig
        Victory and defeat pulse parameters.

    Notes
    -----
    The feed is refetched in full every cycle, only the last record of a
    batch is inspected. ``seen_count`` stores the batch length, so a feed
    that reorders or trims old events can hide or repeat a start marker.
    """

    def __init__(self, config: FeedbackConfig):
        self.config = config

    def initial_state(self) -> EventStreamState:
        return EventStreamState()

    def _end_of_match(self, event: EventRecord) -> Actuation:
        if event.result == DEFEAT:
            logger.info("Defeat")
            return Actuation(self.config.defeat_intensity, self.config.defeat_duration, "defeat")
        logger.info(f"Victory ({event.result or 'no result'})")
        return Actuation(self.config.victory_intensity, self.config.victory_duration, "victory")

    def diff(
        self, batch: EventBatch | list[EventRecord], state: EventStreamState
    ) -> tuple[EventStreamState, list[Actuation]]:
        """Compare a fresh event batch with the running state.

        Parameters
        ----------
        batch : EventBatch | list[EventRecord]
            Full event feed, oldest first.
        state : EventStreamState
            State returned by the previous call.

        Returns
        -------
        tuple[EventStreamState, list[Actuation]]
            Updated state and at most one end of match pulse.
        """
        events = batch.events if isinstance(batch, EventBatch) else batch
        if not events:
            logger.warning("No events found")
            return state, []

        if state.seen_count == 0 and events[0].name == GAME_START:
            logger.info("Game started")

        actuations = []
        match_ended = state.match_ended
        last_event = events[-1]
        if not match_ended and last_event.name == GAME_END:
            actuations.append(self._end_of_match(last_event))
            match_ended = True

        return replace(state, seen_count=len(events), match_ended=match_ended), actuations
