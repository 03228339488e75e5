import os
from dataclasses import dataclass, replace

from dotenv import find_dotenv, load_dotenv

from swarm_bliss.errors import ConfigError


@dataclass(frozen=True)
class TelemetryConfig:
    """Location of the live client telemetry API.

    Attributes
    ----------
    base_url : str
        Root of the live client data endpoints
        (default: "https://127.0.0.1:2999/liveclientdata").
    game_stats : str
        Path of the game status endpoint (default: "gamestats").
    active_player_name : str
        Path of the active player name endpoint (default: "activeplayername").
    event_data : str
        Path of the event feed endpoint (default: "eventdata").
    player_scores : str
        Path of the player score endpoint (default: "playerscores").
    active_player : str
        Path of the active player endpoint (default: "activeplayer").
    verify_tls : bool
        Verify the server certificate. The game serves a self-signed
        certificate on localhost (default: False).
    timeout : float | None
        Per request timeout in seconds, None for no timeout (default: None).
    """

    base_url: str = "https://127.0.0.1:2999/liveclientdata"
    game_stats: str = "gamestats"
    active_player_name: str = "activeplayername"
    event_data: str = "eventdata"
    player_scores: str = "playerscores"
    active_player: str = "activeplayer"
    verify_tls: bool = False
    timeout: float | None = None

    def url(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"


@dataclass(frozen=True)
class PollerConfig:
    """Timing of the in-match pollers.

    Attributes
    ----------
    interval : float
        Seconds to wait between two poll cycles (default: 0.05).
    """

    interval: float = 0.05


@dataclass(frozen=True)
class BackoffPolicy:
    """Retry policy used while waiting for a match to start.

    Attributes
    ----------
    initial_delay : float
        Delay before the first retry in seconds (default: 1.0).
    multiplier : float
        Factor applied to the delay after each retry (default: 1.0).
    max_delay : float
        Upper bound of the delay in seconds (default: 1.0).
    max_attempts : int | None
        Number of status checks before giving up, None to wait
        forever (default: None).
    """

    initial_delay: float = 1.0
    multiplier: float = 1.0
    max_delay: float = 1.0
    max_attempts: int | None = None

    def delay(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        return min(self.initial_delay * self.multiplier ** (attempt - 1), self.max_delay)

    def exhausted(self, attempt: int) -> bool:
        return self.max_attempts is not None and attempt >= self.max_attempts


@dataclass(frozen=True)
class SessionConfig:
    """Match detection parameters.

    Attributes
    ----------
    target_mode : str
        Game mode reported by the status endpoint while a match of
        interest is running (default: "STRAWBERRY").
    backoff : BackoffPolicy
        Retry policy while no match is running.
    """

    target_mode: str = "STRAWBERRY"
    backoff: BackoffPolicy = BackoffPolicy()


@dataclass(frozen=True)
class FeedbackConfig:
    """Intensities, durations and scales of every haptic pulse.

    Durations are in seconds, intensities are normalized to [0, 1].
    Scale values divide the raw stat to obtain an intensity.
    """

    defeat_intensity: float = 0.75
    defeat_duration: float = 1.0
    victory_intensity: float = 1.0
    victory_duration: float = 2.0

    creep_score_period: int = 2
    creep_score_intensity: float = 0.4
    creep_score_duration: float = 0.2
    death_intensity: float = 0.75
    death_duration: float = 1.0

    gold_scale: float = 15000.0
    gold_duration: float = 0.2
    level_intensity: float = 0.5
    level_duration: float = 0.5
    haste_scale: float = 500.0
    armor_scale: float = 300.0
    health_scale: float = 10000.0
    speed_scale: float = 1000.0
    stat_duration: float = 0.1


@dataclass(frozen=True)
class LoggingConfig:
    """Log sinks.

    Attributes
    ----------
    level : str
        Console log level (default: "INFO").
    log_file : bool
        Also write a rotating DEBUG log file (default: True).
    """

    level: str = "INFO"
    log_file: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for Swarm Bliss.

    Attributes
    ----------
    telemetry : TelemetryConfig
        Telemetry API location and client options.
    poller : PollerConfig
        In-match polling cadence.
    session : SessionConfig
        Match detection parameters.
    feedback : FeedbackConfig
        Haptic pulse parameters.
    logging : LoggingConfig
        Log sinks.
    """

    telemetry: TelemetryConfig = TelemetryConfig()
    poller: PollerConfig = PollerConfig()
    session: SessionConfig = SessionConfig()
    feedback: FeedbackConfig = FeedbackConfig()
    logging: LoggingConfig = LoggingConfig()


ENV_PREFIX = "SWARM_BLISS_"


def _env(name: str) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _as_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from e


def _as_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from e


def _as_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def _override(config, env_name, attribute, parse=None):
    value = _env(env_name)
    if value is None:
        return config
    if parse is not None:
        value = parse(env_name, value)
    return replace(config, **{attribute: value})


def load_config(env_file: str | None = None, base: AppConfig | None = None) -> AppConfig:
    """Build the application config from defaults and the environment.

    Parameters
    ----------
    env_file : str | None
        Optional dotenv file loaded before reading the environment. When None,
        a ``.env`` file found from the working directory upwards is used.
    base : AppConfig | None
        Config to override, defaults to ``AppConfig()``.

    Returns
    -------
    AppConfig
        Config with every ``SWARM_BLISS_*`` override applied.

    Raises
    ------
    ConfigError
        If an override cannot be parsed or is out of range.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))
    config = base or AppConfig()

    telemetry = _override(config.telemetry, "BASE_URL", "base_url")
    telemetry = _override(telemetry, "VERIFY_TLS", "verify_tls", _as_bool)
    telemetry = _override(telemetry, "TIMEOUT", "timeout", _as_float)

    poller = _override(config.poller, "POLL_INTERVAL", "interval", _as_float)

    backoff = config.session.backoff
    retry_delay = _env("RETRY_DELAY")
    if retry_delay is not None:
        delay = _as_float("RETRY_DELAY", retry_delay)
        backoff = replace(backoff, initial_delay=delay, max_delay=max(delay, backoff.max_delay))
    backoff = _override(backoff, "MAX_ATTEMPTS", "max_attempts", _as_int)
    session = _override(config.session, "TARGET_MODE", "target_mode")
    session = replace(session, backoff=backoff)

    logging_config = _override(config.logging, "LOG_LEVEL", "level", lambda _, v: v.upper())
    logging_config = _override(logging_config, "LOG_FILE", "log_file", _as_bool)

    result = replace(
        config, telemetry=telemetry, poller=poller, session=session, logging=logging_config
    )
    validate_config(result)
    return result


def validate_config(config: AppConfig) -> None:
    """Reject configs the pollers cannot run with."""
    if config.poller.interval < 0:
        raise ConfigError("poll interval must not be negative")
    if config.telemetry.timeout is not None and config.telemetry.timeout <= 0:
        raise ConfigError("telemetry timeout must be positive")
    backoff = config.session.backoff
    if backoff.initial_delay < 0 or backoff.max_delay < 0:
        raise ConfigError("retry delays must not be negative")
    if backoff.multiplier < 1.0:
        raise ConfigError("retry multiplier must be at least 1.0")
    if backoff.max_attempts is not None and backoff.max_attempts < 1:
        raise ConfigError("max attempts must be at least 1")
    if config.feedback.creep_score_period < 1:
        raise ConfigError("creep score period must be at least 1")
    if not config.session.target_mode:
        raise ConfigError("target mode must not be empty")
