from loguru import logger

from swarm_bliss.errors import ActuationError
from swarm_bliss.haptics.device import HapticDevice
from swarm_bliss.models.actuation import Actuation
from swarm_bliss.threaders.worker import RequestWorker


class ActuatorThread(RequestWorker):
    """Plays haptic pulses on the device, one at a time.

    Every pulse is a start, hold, stop sequence. Because the thread is the
    only user of the device, pulses queued by different pollers never
    overlap on the hardware.

    Parameters
    ----------
    device : HapticDevice
        Connected device that receives the commands.

    Attributes
    ----------
    device : HapticDevice
        Target device.
    """

    def __init__(self, device: HapticDevice):
        super().__init__(name="ActuatorThread")
        self.device = device

    def rejected(self, job: Actuation) -> Exception:
        return ActuationError(f"actuator stopped, dropped {job.reason or 'pulse'}")

    def handle(self, job: Actuation) -> None:
        try:
            self.device.vibrate(job.intensity)
        except Exception as e:
            raise ActuationError(
                f"{self.device.name} failed to vibrate at {job.intensity:.2f}: {e}"
            ) from e

        try:
            # Cut the hold short on shutdown
            self._stopping.wait(job.duration)
        finally:
            self._stop_device()

    def _stop_device(self) -> None:
        try:
            self.device.stop()
        except Exception as e:
            raise ActuationError(f"{self.device.name} failed to stop: {e}") from e

    def actuate(self, actuation: Actuation) -> None:
        """Play a pulse and block until the device has been stopped.

        Raises
        ------
        ActuationError
            If the device failed or the actuator is stopped.
        """
        logger.debug(
            f"Actuating {actuation.reason}: {actuation.intensity:.2f} for {actuation.duration}s"
        )
        self.submit(actuation).result()
