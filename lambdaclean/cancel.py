"""
Cooperative cancellation shared by the streams, the worker pool and the CLI.
"""

import logging
import signal
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class CancelToken:
    """A one-way cancellation flag backed by a threading.Event."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds; True if cancelled meanwhile."""
        return self._event.wait(timeout)


@contextmanager
def interrupt_handler(token: CancelToken) -> Iterator[CancelToken]:
    """
    Turn SIGINT into a cancellation request for the duration of the block.

    Only the main thread may install signal handlers; elsewhere the token is
    yielded untouched and Ctrl+C keeps its default behaviour.

    Args:
        token: Token to cancel when the user interrupts

    Yields:
        The same token
    """
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def _on_interrupt(signum, frame):
        if not token.cancelled:
            logger.info("Interrupt received, stopping sweep")
        token.cancel()

    previous = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
