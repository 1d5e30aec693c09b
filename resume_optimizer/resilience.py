"""
Resilience utilities for the Resume Optimizer API.

Fixed-interval retry used by the database connection supervisor. The
interval between attempts is constant: no exponential growth, no jitter.
"""

import time
from typing import Any, Callable, Optional, Tuple, Type


def retry_fixed_interval(
    func: Callable[[], Any],
    max_retries: int = 5,
    interval: float = 2.0,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[BaseException, int], None]] = None,
    sleep: Callable[[float], Any] = time.sleep,
) -> Any:
    """
    Call ``func`` until it succeeds or the retry budget is spent.

    The first call is not a retry, so ``func`` runs at most
    ``max_retries + 1`` times. Once the budget is spent the last exception
    is re-raised unchanged.

    Args:
        func: Zero-argument callable to invoke
        max_retries: Number of retries after the initial attempt
        interval: Seconds to wait between attempts
        retryable_exceptions: Exceptions that trigger another attempt
        on_retry: Optional callback called before each wait (exception, attempt)
        sleep: Wait function, injectable for tests

    Returns:
        Whatever ``func`` returns on its first successful call
    """
    attempt = 0
    while True:
        try:
            return func()
        except retryable_exceptions as e:
            if attempt >= max_retries:
                raise

            attempt += 1
            if on_retry:
                on_retry(e, attempt)
            sleep(interval)

