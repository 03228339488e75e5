from dataclasses import dataclass


def clamp_intensity(value: float) -> float:
    return max(0.0, min(value, 1.0))


@dataclass(frozen=True)
class Actuation:
    """Haptic pulse to be played on the device.

    Attributes
    ----------
    intensity : float
        Normalized vibration strength, clamped to [0, 1].
    duration : float
        Seconds the vibration is held before the device is stopped.
    reason : str
        Short label of the game event that triggered the pulse.
    """

    intensity: float
    duration: float
    reason: str = ""

    def __post_init__(self):
        object.__setattr__(self, "intensity", clamp_intensity(float(self.intensity)))
        if self.duration < 0:
            raise ValueError(f"Actuation duration must not be negative, got {self.duration}")
