"""Main entry point for the memorizer."""
import logging
import sys

from memorizer.cli import main
from memorizer.config import ensure_directories, settings
from memorizer.logging_config import setup_logging
from memorizer.monitoring import start_monitoring


def run() -> None:
    """Run the command line interface."""
    ensure_directories()
    setup_logging()

    if settings.monitoring.metrics_port:
        start_monitoring(settings.monitoring.metrics_port)
        logging.getLogger(__name__).info(f"Metrics exposed on port {settings.monitoring.metrics_port}")

    sys.exit(main())


if __name__ == "__main__":
    run()
