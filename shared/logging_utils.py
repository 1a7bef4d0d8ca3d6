import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(default_level: str = "INFO") -> int:
    level_name = (os.getenv("LOG_LEVEL") or default_level).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)

    # urllib3 logs every long-poll request at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
    return level
