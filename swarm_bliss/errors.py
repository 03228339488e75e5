class SwarmBlissError(Exception):
    """Base class for every error raised by Swarm Bliss."""


class ConfigError(SwarmBlissError):
    """Invalid configuration value."""


class TelemetryError(SwarmBlissError):
    """A telemetry request did not produce a usable snapshot.

    Parameters
    ----------
    url : str
        Endpoint that was requested.
    message : str
        Human readable cause.
    """

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class NetworkError(TelemetryError):
    """Connection, transport or HTTP status failure."""


class DecodeError(TelemetryError):
    """Response body does not match the expected schema."""


class ActuationError(SwarmBlissError):
    """The haptic device rejected or failed a command."""
