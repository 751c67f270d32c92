"""Bounded retry of the stability check."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ecs_stability_gate.exceptions import ConfigurationError, StabilityCheckFailure


if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def retry(
    max_attempts: int,
    check: Callable[[], object],
    on_attempt: Callable[[int], None] | None = None,
    on_failure: Callable[[int, StabilityCheckFailure], None] | None = None,
    delay: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run check until it succeeds or max_attempts attempts have been made.

    Attempts run one after another. Any exception raised by check counts as a
    failed attempt; the type is never inspected. The failure is handed to
    on_failure as a StabilityCheckFailure and the loop moves on.

    Args:
        max_attempts: Upper bound on the number of times check is called.
        check: The stability check. Returning normally means stable.
        on_attempt: Called with the attempt number before every attempt.
        on_failure: Called with the attempt number and failure after every
            failed attempt.
        delay: Seconds to sleep between a failed attempt and the next one.
        sleep: Sleep function, replaceable in tests.

    Returns:
        The number of attempts consumed. When every attempt fails this is
        max_attempts + 1, because the counter moves past the limit before the
        loop condition is checked again. Callers must treat a result greater
        than max_attempts as failure.

    Raises:
        ConfigurationError: If max_attempts is less than 1.
    """
    if max_attempts < 1:
        msg: str = f"max_attempts must be a positive integer, got: {max_attempts}"
        raise ConfigurationError(msg)

    attempt = 1
    stable = False
    while attempt <= max_attempts and not stable:
        if on_attempt is not None:
            on_attempt(attempt)
        try:
            check()
            stable = True
        except Exception as e:  # noqa: BLE001
            failure = StabilityCheckFailure.from_exception(e)
            logger.debug("Attempt %d failed: %s", attempt, failure.cause.code)
            if on_failure is not None:
                on_failure(attempt, failure)
            attempt += 1
            if delay > 0 and attempt <= max_attempts:
                sleep(delay)

    return attempt
