"""Timing helpers for encode runs"""
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Iterator, Optional

def _now():
    return time.perf_counter()

@dataclass
class Stopwatch:
    started: float
    stopped: Optional[float] = None

    @property
    def elapsed(self) -> float:
        end = self.stopped if self.stopped is not None else _now()
        return end - self.started

@contextmanager
def section_timer(name: str, logger: logging.Logger, level: int = logging.INFO) -> Iterator[Stopwatch]:
    """Log how long the enclosed block took; the yielded stopwatch keeps the figure"""
    watch = Stopwatch(started=_now())
    try:
        yield watch
    finally:
        watch.stopped = _now()
        logger.log(level, "TIMER %s took %.3f s", name, watch.elapsed)

def timeit(logger: logging.Logger, name: Optional[str] = None, level: int = logging.INFO):
    """Log how long each call of the decorated function took"""
    def deco(fn):
        label = name or fn.__qualname__
        @wraps(fn)
        def wrapper(*args, **kwargs):
            with section_timer(label, logger, level):
                return fn(*args, **kwargs)
        return wrapper
    return deco
