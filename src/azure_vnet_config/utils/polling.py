"""Polling helper for asynchronous provider operations."""
import logging
from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    RetryError,
    before_sleep_log,
    retry_if_result,
    stop_after_delay,
    wait_fixed,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollTimeout(Exception):
    """Raised when the polled value was still pending at the deadline."""

    def __init__(self, last_value):
        self.last_value = last_value
        super().__init__(f"Still pending at deadline: {last_value!r}")


def poll_until(
    check: Callable[[], T],
    pending: Callable[[T], bool],
    interval: float = 5,
    timeout: float = 600,
) -> T:
    """Call check() until pending(result) is False.

    Exceptions raised by check() are not retried and propagate as-is.

    Args:
        check: Function returning the current value
        pending: Predicate telling whether to keep polling
        interval: Seconds between calls
        timeout: Seconds after which polling gives up

    Raises:
        PollTimeout: If the value is still pending after timeout
    """
    retrying = Retrying(
        retry=retry_if_result(pending),
        wait=wait_fixed(interval),
        stop=stop_after_delay(timeout),
        before_sleep=before_sleep_log(logger, logging.DEBUG),
    )
    try:
        return retrying(check)
    except RetryError as e:
        raise PollTimeout(e.last_attempt.result()) from e
