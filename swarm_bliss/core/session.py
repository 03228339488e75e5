import threading

from loguru import logger

from swarm_bliss.config import AppConfig, BackoffPolicy
from swarm_bliss.core.event_diff import EventDiff
from swarm_bliss.core.player_diff import ActivePlayerDiff
from swarm_bliss.core.score_diff import ScoreDiff
from swarm_bliss.errors import TelemetryError
from swarm_bliss.haptics.device import HapticDevice
from swarm_bliss.models.telemetry import ActivePlayerSnapshot, EventBatch, GameStatus, ScoreSnapshot
from swarm_bliss.telemetry.client import TelemetryClient
from swarm_bliss.threaders.actuator import ActuatorThread
from swarm_bliss.threaders.poller import PollerThread
from swarm_bliss.threaders.telemetry_worker import FetchRequest, TelemetryWorker


class MatchGate:
    """Blocks until the status endpoint reports the target game mode.

    Parameters
    ----------
    telemetry : TelemetryWorker
        Shared telemetry worker.
    url : str
        Game status endpoint.
    target_mode : str
        Game mode that opens the gate.
    backoff : BackoffPolicy
        Delay between checks and optional attempt limit.
    stop_event : threading.Event
        Set to abandon the wait.

    Attributes
    ----------
    attempts : int
        Status checks made by the last ``wait`` call.
    """

    def __init__(
        self,
        telemetry: TelemetryWorker,
        url: str,
        target_mode: str,
        backoff: BackoffPolicy,
        stop_event: threading.Event,
    ):
        self.telemetry = telemetry
        self.request = FetchRequest(url, model=GameStatus)
        self.target_mode = target_mode
        self.backoff = backoff
        self.stop_event = stop_event
        self.attempts = 0

    def check(self) -> bool:
        """Return True if a match in the target mode is running."""
        try:
            status = self.telemetry.fetch(self.request)
        except TelemetryError as e:
            logger.warning("Game not started yet")
            logger.debug(f"Error while fetching game status: {e}")
            return False

        if status.mode != self.target_mode:
            logger.debug(f"Game mode is {status.mode!r}, waiting for {self.target_mode!r}")
            return False
        return True

    def wait(self) -> bool:
        """Poll the status endpoint until the match starts.

        Returns
        -------
        bool
            True once the match is running, False if the attempt limit was
            reached or the wait was stopped.
        """
        self.attempts = 0
        while not self.stop_event.is_set():
            self.attempts += 1
            if self.check():
                return True
            if self.backoff.exhausted(self.attempts):
                logger.warning(f"No {self.target_mode} match after {self.attempts} checks, giving up")
                return False
            self.stop_event.wait(self.backoff.delay(self.attempts))
        return False


class SessionController:
    """Runs the pollers for every match, forever.

    Idle: wait for the target game mode. In match: fetch the player name,
    start the event, score and active player pollers, and wait until all
    three have ended on their own. Then go back to idle.

    Parameters
    ----------
    config : AppConfig
        Application configuration.
    client : TelemetryClient
        Telemetry client, owned by the telemetry worker once started.
    device : HapticDevice
        Connected haptic device, owned by the actuator once started.

    Attributes
    ----------
    telemetry : TelemetryWorker
        Worker serving every telemetry request.
    actuator : ActuatorThread
        Worker playing every pulse.
    gate : MatchGate
        Match start detector.
    pollers : list[PollerThread]
        Pollers of the current (or last) match.
    matches : int
        Matches tracked so far.
    """

    def __init__(self, config: AppConfig, client: TelemetryClient, device: HapticDevice):
        self.config = config
        self.device = device
        self.telemetry = TelemetryWorker(client)
        self.actuator = ActuatorThread(device)

        self._stop_event = threading.Event()
        telemetry_config = config.telemetry
        self.gate = MatchGate(
            self.telemetry,
            telemetry_config.url(telemetry_config.game_stats),
            config.session.target_mode,
            config.session.backoff,
            self._stop_event,
        )
        self.pollers: list[PollerThread] = []
        self.matches = 0

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    def start(self) -> None:
        """Start the telemetry and actuator workers."""
        self.telemetry.start()
        self.actuator.start()
        logger.success(f"Workers started, pulses go to {self.device.name}")

    def create_pollers(self, username: str) -> list[PollerThread]:
        """Build the three pollers of a match."""
        telemetry_config = self.config.telemetry
        feedback = self.config.feedback
        interval = self.config.poller.interval

        streams = [
            (
                "events",
                FetchRequest(telemetry_config.url(telemetry_config.event_data), model=EventBatch),
                EventDiff(feedback),
            ),
            (
                "score",
                FetchRequest(
                    telemetry_config.url(telemetry_config.player_scores),
                    model=ScoreSnapshot,
                    params={"riotId": username},
                ),
                ScoreDiff(feedback),
            ),
            (
                "active player",
                FetchRequest(
                    telemetry_config.url(telemetry_config.active_player),
                    model=ActivePlayerSnapshot,
                ),
                ActivePlayerDiff(feedback),
            ),
        ]
        return [
            PollerThread(name, request, engine, self.telemetry, self.actuator, interval=interval)
            for name, request, engine in streams
        ]

    def fetch_username(self) -> str | None:
        telemetry_config = self.config.telemetry
        request = FetchRequest(
            telemetry_config.url(telemetry_config.active_player_name), scalar=str
        )
        try:
            return self.telemetry.fetch(request)
        except TelemetryError as e:
            logger.error(f"Error while fetching username: {e}")
            return None

    def run_match(self, username: str) -> None:
        """Start the pollers and block until all of them have ended."""
        self.matches += 1
        self.pollers = self.create_pollers(username)
        for poller in self.pollers:
            poller.start()

        for poller in self.pollers:
            poller.join()
            if poller.error is not None:
                logger.info(f"{poller.stream} poller finished: {poller.error}")

        logger.info("Game ended")
        self.log_match_summary()

    def run_session(self) -> bool:
        """Go through one idle, in match, idle cycle.

        Returns
        -------
        bool
            False if the match gate gave up or the controller was stopped.
        """
        logger.info(f"Waiting for a {self.config.session.target_mode} match...")
        if not self.gate.wait():
            return False

        username = self.fetch_username()
        if username is None:
            # The gate stays open while the match runs, so retry after a delay
            self._stop_event.wait(self.config.session.backoff.delay(1))
            return self.running

        logger.success(f"Match started for {username}")
        self.run_match(username)
        return self.running

    def run_forever(self) -> None:
        """Track matches until the gate gives up or ``stop`` is called."""
        while self.run_session():
            pass
        logger.info(f"Session controller stopped after {self.matches} matches")

    def get_match_stats(self) -> dict:
        """Cycle and pulse counters of the last match, per stream."""
        return {
            poller.stream: {
                "cycles": poller.cycles,
                "actuations": poller.actuations,
                "failed_actuations": poller.failed_actuations,
            }
            for poller in self.pollers
        }

    def log_match_summary(self) -> None:
        logger.info(f"Match {self.matches} Summary:")
        for stream, stats in self.get_match_stats().items():
            logger.info(
                f"{stream}: {stats['cycles']} cycles, {stats['actuations']} pulses"
                f" ({stats['failed_actuations']} missed)"
            )

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop pollers and workers, then wait for the workers to exit.

        Once this returns without timing out, the telemetry client and the
        device are no longer used by any thread.
        """
        self._stop_event.set()
        for poller in self.pollers:
            poller.stop()
        self.telemetry.stop()
        self.actuator.stop()
        for worker in (self.telemetry, self.actuator):
            if worker.is_alive():
                worker.join(timeout)
                if worker.is_alive():
                    logger.warning(f"{worker.name} still busy after {timeout}s")
