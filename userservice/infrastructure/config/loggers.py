import logging.config
from copy import deepcopy
from typing import Any
from typing import Final

from userservice.infrastructure.types import LogHandler
from userservice.infrastructure.types import LogLevel

LOGGER_USERSERVICE: Final[str] = "userservice"

default_conf: Final[dict[str, Any]] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "message": {
            "format": "%(message)s",
        },
        "rich": {
            "format": "%(message)s",
            "datefmt": "[%X]",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
        "cli": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "message",
            "stream": "ext://sys.stdout",
        },
        "cli_alert": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
        "rich": {
            "class": "rich.logging.RichHandler",
            "formatter": "rich",
            "level": "NOTSET",
            "markup": True,
            "rich_tracebacks": True,
            "show_path": True,
        },
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        LOGGER_USERSERVICE: {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        # Statements are only logged at INFO, keep them quiet unless asked.
        "sqlalchemy.engine": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
}


def configure_loggers(level: LogLevel, handlers: list[LogHandler], propagate: bool = False) -> None:
    """Applies the logging configuration for the given level and handlers.

    Only the `userservice` logger takes the requested level, but every declared
    logger (root included) writes to the same handlers.

    Args:
        level: The minimum logging level of the `userservice` logger.
        handlers: The handler names to use (e.g. ["console"], ["rich"]).
        propagate: Whether the `userservice` records go up to the root logger.
    """
    conf = deepcopy(default_conf)

    conf["loggers"][LOGGER_USERSERVICE]["level"] = level
    conf["loggers"][LOGGER_USERSERVICE]["propagate"] = propagate

    for logger in conf["loggers"].values():
        logger["handlers"] = handlers
    conf["root"]["handlers"] = handlers

    logging.config.dictConfig(conf)
