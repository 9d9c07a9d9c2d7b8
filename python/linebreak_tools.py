"""
Tools used while working on the line-breaking algorithms.

    @profile() : decorate a function with it to have every call run under
        cProfile. It does nothing until `enable_profiling()` is called, so the
        layouts can stay decorated all the time. The stats are logged at DEBUG
        level on the `linebreak_tools` logger.
"""
import cProfile
import functools
import logging
import pstats
from io import StringIO

logger = logging.getLogger(__name__)

_profiling = False

def enable_profiling(enabled:bool=True):
    global _profiling
    _profiling = enabled

def profiling_enabled() -> bool:
    return _profiling

def profile(sort_by:str='cumulative', limit:int=20):
    """
    Returns a decorator that profiles each call of the decorated function
        (when profiling is enabled) and logs the `limit` most expensive
        entries sorted by `sort_by`.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _profiling:
                return func(*args, **kwargs)

            profiler = cProfile.Profile()
            try:
                return profiler.runcall(func, *args, **kwargs)
            finally:
                out = StringIO()
                pstats.Stats(profiler, stream=out).sort_stats(sort_by).print_stats(limit)
                logger.debug('Profile of %s:\n%s', func.__qualname__, out.getvalue())
        return wrapper
    return decorator
