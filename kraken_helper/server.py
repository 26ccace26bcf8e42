import logging

import uvicorn

from .config import Settings, load_environment
from .main import app

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("kraken_helper")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT, datefmt=LOG_DATETIME_FORMAT)


def main() -> None:
    load_environment()
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    logger.info("Kraken Helper service listening on port %s", settings.port)
    logger.info("Available endpoints:")
    logger.info("  POST /buy")
    logger.info("  POST /withdraw")
    logger.info("  GET  / (status check)")
    if settings.dry_run:
        logger.warning("DRY_RUN enabled: orders are validated only and withdrawals are not sent")

    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
