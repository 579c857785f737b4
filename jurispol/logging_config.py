import logging
import sys
from typing import Optional

from .settings import settings


def configure_logging(service_name: str, level: Optional[str] = None) -> None:
    """
    Configure logging for a JurisPol process (relay, UI or script).
    Safe to call more than once; later calls reconfigure the root logger.
    """
    log_level = (level or settings.log_level).upper()

    logging.basicConfig(
        level=log_level,
        format=(
            "%(asctime)s | %(levelname)s | %(name)s | "
            f"service={service_name} | %(message)s"
        ),
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger(__name__).info("Logging configured for service=%s", service_name)
