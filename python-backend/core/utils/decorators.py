"""
Utility decorators and context managers.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


@contextmanager
def timer() -> Iterator[Dict[str, int]]:
    """
    Measure elapsed wall time of a block.

    Example:
        >>> with timer() as t:
        ...     do_work()
        >>> t["ms"]  # read after the block
    """
    result = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = int((time.perf_counter() - start) * 1000)


def timed(func):
    """Log how long func takes at debug level."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with timer() as t:
            result = func(*args, **kwargs)
        logger.debug(f"{func.__qualname__} took {t['ms']}ms")
        return result

    return wrapper
