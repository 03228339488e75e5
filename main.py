import sys

from loguru import logger

from swarm_bliss.config import AppConfig, LoggingConfig, load_config
from swarm_bliss.core.session import SessionController
from swarm_bliss.errors import ConfigError
from swarm_bliss.haptics.device import LoggingDevice
from swarm_bliss.telemetry.client import TelemetryClient


def setup_logging(config: LoggingConfig) -> None:
    """Configure loguru logging with file and console outputs."""
    logger.remove()
    if config.log_file:
        logger.add("swarm_bliss_{time}.log", rotation="50 MB", level="DEBUG")
    logger.add(sys.stderr, level=config.level, colorize=True)

    logger.info("Starting Swarm Bliss")
    logger.info("=" * 50)


def build_controller(config: AppConfig) -> SessionController:
    """Wire the telemetry client and device into a session controller."""
    client = TelemetryClient(config.telemetry)
    # Device discovery is done by the host application; run dry otherwise
    device = LoggingDevice()
    return SessionController(config, client, device)


def main() -> int:
    """Main entry point, tracks matches until interrupted."""
    try:
        config = load_config()
    except ConfigError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1

    setup_logging(config.logging)
    controller = build_controller(config)

    try:
        controller.start()
        controller.run_forever()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
    finally:
        controller.stop()
        controller.telemetry.client.close()
        logger.info("Swarm Bliss stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
