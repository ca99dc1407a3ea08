"""Logger setup."""

import logging
import sys

import colorlog

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_logger(name: str) -> logging.Logger:
    """Module logger; handlers live on the ``gas_gateway`` parent logger"""
    return logging.getLogger(name)


def configure_logging(log_level: str = "INFO", log_color: bool = False) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Raises:
        ValueError: If the log level is unknown.
    """
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}")
    level = LOG_LEVELS[log_level]

    logger = logging.getLogger("gas_gateway")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if log_color:
        handler = colorlog.StreamHandler(sys.stdout)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s" + LOG_FORMAT,
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            )
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(level)
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger
