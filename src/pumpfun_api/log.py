import logging
import sys
import time
from typing import Optional

LOGGER_NAME = "pumpfun_api"


class UTCFormatter(logging.Formatter):
    converter = time.gmtime


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level.upper())
    fmt = UTCFormatter(fmt="%(asctime)sZ %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    # reconfiguring replaces the previous handlers
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(fmt)
        log.addHandler(handler)
    log.propagate = False
    return log
