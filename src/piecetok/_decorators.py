"""Timing decorators for vocabulary file I/O."""

import functools
import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def log_elapsed(action: str) -> Callable[[Callable], Callable]:
    """
    Log how long the wrapped call took, as ``"<action> <first arg> took N ms"``.

    The first positional argument is the vocabulary path for every decorated
    loader function, so it names the file in the log line.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            # still report the time of a failed load
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                target = f" {args[0]}" if args else ""
                log.info(f"{action}{target} took {elapsed_ms:.2f} ms")

        return wrapper

    return decorator
