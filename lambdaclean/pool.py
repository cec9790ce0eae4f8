"""
Bounded-concurrency worker pool for delete side effects.

A fixed number of daemon threads drain a bounded queue whose capacity
equals the number of workers, so ``submit`` blocks once that many tasks
are waiting. Each submitted task gets a Future; callers wait on the
futures of their own tasks while the concurrency bound stays global.
"""

import logging
import queue
import threading
from concurrent.futures import Future, wait
from typing import Any, Callable, Iterable, List, Optional

from .cancel import CancelToken

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds between cancellation checks while blocked

_STOP = object()


class WorkerPool:
    """
    Runs ``handler(task)`` on up to ``concurrency`` threads at once.

    With ``fail_fast`` the first handler exception poisons the pool: tasks
    still queued are cancelled instead of run and later submissions raise
    that exception. Without it, exceptions only reach the task's Future.
    """

    def __init__(self, handler: Callable[[Any], Any], concurrency: int,
                 cancel: Optional[CancelToken] = None, fail_fast: bool = True):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.handler = handler
        self.concurrency = concurrency
        self.cancel = cancel or CancelToken()
        self.fail_fast = fail_fast
        self._queue: queue.Queue = queue.Queue(maxsize=concurrency)
        self._threads: List[threading.Thread] = []
        self._error: Optional[BaseException] = None
        self._error_lock = threading.Lock()
        self._aborted = threading.Event()
        self._closed = False

    def __enter__(self) -> "WorkerPool":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def error(self) -> Optional[BaseException]:
        """First handler exception seen, if any."""
        return self._error

    def start(self) -> None:
        if self._threads:
            return
        for i in range(self.concurrency):
            thread = threading.Thread(target=self._work, name=f"lambdaclean-worker-{i}", daemon=True)
            thread.start()
            self._threads.append(thread)
        logger.debug(f"Started {self.concurrency} delete workers")

    def submit(self, task: Any) -> Future:
        """
        Queue a task, blocking while the queue is full.

        Returns once the task is accepted, not once it has run.

        Args:
            task: Passed to the handler unchanged

        Returns:
            Future resolved with the handler's result or exception; already
            cancelled if the sweep was cancelled before the task was queued

        Raises:
            RuntimeError: If the pool is closed
            Exception: The pool's first handler error, in fail-fast mode
        """
        if self._closed:
            raise RuntimeError("submit on a closed worker pool")
        future: Future = Future()
        while True:
            self._raise_if_failed()
            if self.cancel.cancelled or self._aborted.is_set():
                future.cancel()
                return future
            try:
                self._queue.put((task, future), timeout=POLL_INTERVAL)
                return future
            except queue.Full:
                continue

    def close(self) -> None:
        """Stop the workers after the queue drains. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._queue.put(_STOP)
        for thread in self._threads:
            thread.join()
        logger.debug("Delete workers stopped")

    def abort(self) -> None:
        """Cancel every queued task that has not started yet."""
        self._aborted.set()

    def _raise_if_failed(self) -> None:
        if self.fail_fast and self._error is not None:
            raise self._error

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            task, future = item

            if self.cancel.cancelled or self._aborted.is_set():
                future.cancel()
                continue
            if not future.set_running_or_notify_cancel():
                continue

            try:
                result = self.handler(task)
            except Exception as e:
                with self._error_lock:
                    if self._error is None:
                        self._error = e
                if self.fail_fast:
                    self._aborted.set()
                future.set_exception(e)
            else:
                future.set_result(result)


def wait_for(futures: Iterable[Future]) -> List[BaseException]:
    """
    Completion barrier: wait until every future is done.

    Args:
        futures: Futures returned by WorkerPool.submit; cancelled ones count
            as done

    Returns:
        Exceptions raised by the tasks, in submission order
    """
    futures = list(futures)
    pending = set(futures)
    while pending:
        _, pending = wait(pending, timeout=POLL_INTERVAL)

    errors = []
    for future in futures:
        if future.cancelled():
            continue
        error = future.exception()
        if error is not None:
            errors.append(error)
    return errors
