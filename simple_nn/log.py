# simple_nn/log.py
import logging
import sys

from . import config

# Loggers that already have their handler attached
_LOGGER_INITIALIZED = {}


def get_logger(
    name="simple_nn",
    level=None,
    fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    propagate=False,
):
    """
    Get or create a logger writing to stderr.
    - name: Logger name (default 'simple_nn'); use 'simple_nn.<module>' for children
    - level: Logging level (default: DEBUG when SIMPLE_NN_DEBUG is set, else SIMPLE_NN_LOG_LEVEL)
    - fmt, datefmt: Formatting for log messages
    - propagate: Whether to propagate to the root logger (default False)
    """
    logger = logging.getLogger(name)
    if not _LOGGER_INITIALIZED.get(name, False):
        if level is None:
            level = "DEBUG" if config.debug_level() >= 1 else config.log_level()
        logger.setLevel(level)
        logger.propagate = propagate

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        logger.addHandler(handler)

        _LOGGER_INITIALIZED[name] = True

    return logger


def reset_logger(name=None):
    """Remove the handlers attached by :func:`get_logger`.

    With no ``name`` every logger configured so far is reset.
    """
    names = list(_LOGGER_INITIALIZED.keys()) if name is None else [name]

    for n in names:
        logger = logging.getLogger(n)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if name is None:
        _LOGGER_INITIALIZED.clear()
    else:
        _LOGGER_INITIALIZED.pop(name, None)


__all__ = ["get_logger", "reset_logger"]
