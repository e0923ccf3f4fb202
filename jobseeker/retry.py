"""Exponential-backoff retry, used around SQLite writes that can hit a locked database."""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Iterator, Tuple, Type

from jobseeker.log import get_logger

log = get_logger(__name__)


def backoff_delays(
    attempts: int,
    base_delay: float,
    max_delay: float,
    factor: float = 2.0,
    jitter: bool = True,
) -> Iterator[float]:
    """Delays to sleep between *attempts* tries (one fewer than attempts)."""
    for n in range(attempts - 1):
        delay = min(base_delay * factor ** n, max_delay)
        yield delay * (0.5 + random.random()) if jitter else delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    when: Callable[[BaseException], bool] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Callable:
    """Decorator: call again on *retryable* errors that also satisfy *when*.

    Anything else, and the last failure, propagates unchanged.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = backoff_delays(max_attempts, base_delay, max_delay, backoff_factor, jitter)
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if when is not None and not when(exc):
                        raise
                    delay = next(delays, None)
                    if delay is None:
                        log.error("%s gave up after %d attempts: %s", fn.__qualname__, attempt, exc)
                        raise
                    log.warning("%s failed (%s), attempt %d/%d in %.2fs",
                                fn.__qualname__, exc, attempt + 1, max_attempts, delay)
                    (sleep or time.sleep)(delay)
                    attempt += 1

        return wrapper

    return decorator
