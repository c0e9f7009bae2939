import logging
import sys

from lightmeter.kernel.system.config import METER_CONFIG

LOGGER_NAME = "lightmeter"
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: int | None = None) -> logging.Logger:
    """
    Attaches a stdout handler to the "lightmeter" logger.

    Safe to call again: the existing handler is reused and moved to the new
    level. The level defaults to METER_CONFIG (LIGHTMETER_LOG_LEVEL).
    Host streams and the root logger are left alone.
    """
    if level is None:
        level = METER_CONFIG.log_level

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        for existing in logger.handlers:
            existing.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Helper to get a sub-logger for a specific module.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
