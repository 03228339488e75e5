import threading
from typing import Protocol

from loguru import logger


class HapticDevice(Protocol):
    """Already connected actuator able to play one command at a time.

    Discovery and transport are handled before the device reaches Swarm
    Bliss. Implementations raise any exception on failure, the actuator
    thread turns it into ``ActuationError``.
    """

    name: str

    def vibrate(self, intensity: float) -> None: ...

    def stop(self) -> None: ...


class LoggingDevice:
    """Device that only logs pulses, used for dry runs.

    Attributes
    ----------
    name : str
        Device name shown in logs.
    active_intensity : float
        Intensity currently playing, 0.0 when stopped.
    pulses : int
        Number of vibrate commands received.
    """

    def __init__(self, name: str = "Dry run device"):
        self.name = name
        self.active_intensity = 0.0
        self.pulses = 0
        self._lock = threading.Lock()

    def vibrate(self, intensity: float) -> None:
        with self._lock:
            self.active_intensity = intensity
            self.pulses += 1
        logger.info(f"[{self.name}] vibrate {intensity:.2f}")

    def stop(self) -> None:
        with self._lock:
            self.active_intensity = 0.0
        logger.debug(f"[{self.name}] stop")
