import threading
from typing import Any, Protocol

from loguru import logger

from swarm_bliss.errors import ActuationError, TelemetryError
from swarm_bliss.models.actuation import Actuation
from swarm_bliss.threaders.actuator import ActuatorThread
from swarm_bliss.threaders.telemetry_worker import FetchRequest, TelemetryWorker


class DiffEngine(Protocol):
    def initial_state(self) -> Any: ...

    def diff(self, snapshot: Any, state: Any) -> tuple[Any, list[Actuation]]: ...


class PollerThread(threading.Thread):
    """Polls one telemetry stream and turns its deltas into pulses.

    Each cycle fetches a snapshot, diffs it against the tracking state,
    plays the resulting pulses and waits ``interval`` seconds. The first
    telemetry failure ends the thread: the live client API disappears when
    the match is over, so there is nothing to retry against.

    Parameters
    ----------
    name : str
        Stream name used in logs (e.g. "events").
    request : FetchRequest
        Request sent every cycle.
    engine : DiffEngine
        Diff engine owning the comparison rules for the stream.
    telemetry : TelemetryWorker
        Shared telemetry worker.
    actuator : ActuatorThread
        Shared actuator.
    interval : float, optional
        Seconds between cycles, by default 0.05.

    Attributes
    ----------
    state : Any
        Tracking state, only ever replaced by this thread.
    error : Exception | None
        Failure that ended the thread, None while running or after ``stop``.
    cycles : int
        Completed poll cycles.
    actuations : int
        Pulses played successfully.
    failed_actuations : int
        Pulses the device failed to play.
    """

    def __init__(
        self,
        name: str,
        request: FetchRequest,
        engine: DiffEngine,
        telemetry: TelemetryWorker,
        actuator: ActuatorThread,
        interval: float = 0.05,
    ):
        super().__init__(name=f"Poller-{name}", daemon=True)
        self.stream = name
        self.request = request
        self.engine = engine
        self.telemetry = telemetry
        self.actuator = actuator
        self.interval = interval

        self.state = engine.initial_state()
        self.error: Exception | None = None
        self.cycles = 0
        self.actuations = 0
        self.failed_actuations = 0
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    def poll_once(self) -> None:
        """Run one fetch, diff, actuate cycle.

        Raises
        ------
        TelemetryError
            If the snapshot could not be fetched or decoded.
        """
        snapshot = self.telemetry.fetch(self.request)
        self.state, actuations = self.engine.diff(snapshot, self.state)
        for actuation in actuations:
            self.dispatch(actuation)
        self.cycles += 1

    def dispatch(self, actuation: Actuation) -> None:
        """Play a pulse; a device failure never ends the poller."""
        try:
            self.actuator.actuate(actuation)
            self.actuations += 1
        except ActuationError as e:
            self.failed_actuations += 1
            logger.warning(f"{self.stream}: missed {actuation.reason} pulse: {e}")

    def run(self) -> None:
        """Main thread loop, polls until a telemetry failure or ``stop``."""
        logger.debug(f"{self.stream} poller started on {self.request.url}")
        while self.running:
            try:
                self.poll_once()
            except TelemetryError as e:
                self.error = e
                logger.info(f"{self.stream} poller ended: {e}")
                return
            except Exception as e:
                self.error = e
                logger.exception(f"{self.stream} poller crashed: {e}")
                return

            self._stop_event.wait(self.interval)

        logger.debug(f"{self.stream} poller stopped")

    def stop(self) -> None:
        """Stop the poller after its current cycle."""
        self._stop_event.set()
