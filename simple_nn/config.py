"""
Runtime settings for simple_nn, read from the environment.

    SIMPLE_NN_DEBUG       0 (default), 1 logs graph records, 2 also logs backward steps
    SIMPLE_NN_LOG_LEVEL   level name for the package logger (default WARNING)

Settings are read while the package is imported, so an invalid value falls
back to its default with a RuntimeWarning instead of breaking the import.
"""

import functools
import logging
import os
import warnings


@functools.lru_cache(maxsize=None)
def getenv(key, default=0):
    """Read ``key`` from the environment, coerced to the type of ``default``."""
    return type(default)(os.getenv(key, default))


@functools.lru_cache(maxsize=None)
def debug_level():
    try:
        return getenv("SIMPLE_NN_DEBUG", 0)
    except ValueError:
        warnings.warn(
            f"SIMPLE_NN_DEBUG must be an integer, got {os.getenv('SIMPLE_NN_DEBUG')!r}; using 0",
            RuntimeWarning,
        )
        return 0


@functools.lru_cache(maxsize=None)
def log_level():
    level = getenv("SIMPLE_NN_LOG_LEVEL", "WARNING").upper()
    # getLevelName maps registered names to their number
    if not isinstance(logging.getLevelName(level), int):
        warnings.warn(
            f"SIMPLE_NN_LOG_LEVEL must be a logging level name, got {level!r}; using WARNING",
            RuntimeWarning,
        )
        return "WARNING"
    return level


def reload():
    """Forget cached values so changed environment variables are picked up."""
    getenv.cache_clear()
    debug_level.cache_clear()
    log_level.cache_clear()


__all__ = ["getenv", "debug_level", "log_level", "reload"]
