import logging

from app.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configures the root logger once for the whole process."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)

    # httpx logs every request at INFO, the client already logs what matters
    logging.getLogger("httpx").setLevel(logging.WARNING)
