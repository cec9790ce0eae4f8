"""
Sweep orchestration: discovery -> versions -> retention window -> deletes.

Functions are processed one after another. Deletes of a function run on
the shared worker pool; the function's KEEP lines are printed only after
all of its deletes have reported, so each function's output stays
contiguous.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .cancel import CancelToken
from .config import ErrorPolicy, SweepConfig
from .errors import DeleteError, ListVersionsError, SweepError
from .pool import WorkerPool, wait_for
from .provider.base import ResourceProvider
from .report import Reporter
from .retention import DeleteTask, RetentionWindow
from .streams import discover, iter_versions

logger = logging.getLogger(__name__)


class SweepState(Enum):
    DISCOVERING = "discovering"
    PROCESSING = "processing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class SweepResult:
    """Outcome of one sweep invocation."""
    state: SweepState = SweepState.DISCOVERING
    functions: int = 0
    deleted: int = 0
    kept: int = 0
    failed: List[str] = field(default_factory=list)  # functions given up on
    error: Optional[SweepError] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        """0 on completion or user cancellation, 1 on any error."""
        return 0 if self.ok else 1


class Sweeper:
    """
    Runs a single retention sweep against a provider.

    Args:
        provider: Where functions and versions come from
        config: Immutable sweep options
        reporter: Receives KEEP/DELETE lines; stdout by default
        cancel: Cooperative cancellation token
    """

    def __init__(self, provider: ResourceProvider, config: SweepConfig,
                 reporter: Optional[Reporter] = None, cancel: Optional[CancelToken] = None):
        self.provider = provider
        self.config = config.validate()
        self.reporter = reporter or Reporter()
        self.cancel = cancel or CancelToken()
        self.result = SweepResult()  # replaced on every run()

    @property
    def fail_fast(self) -> bool:
        return self.config.policy is ErrorPolicy.FAIL_FAST

    def run(self) -> SweepResult:
        """
        Sweep every discovered function.

        Fatal errors do not propagate; they end the sweep in the ABORTED
        state with ``result.error`` set.

        Returns:
            The sweep result
        """
        result = self.result = SweepResult()
        deleted_before = self.reporter.deleted_count
        kept_before = self.reporter.kept_count
        pool = WorkerPool(self._delete, self.config.concurrency, self.cancel, fail_fast=self.fail_fast)
        pool.start()

        try:
            for function in discover(self.provider, self.config, self.cancel):
                if self.cancel.cancelled:
                    break
                result.state = SweepState.PROCESSING
                result.functions += 1
                self._process(function, pool)
                if self.cancel.cancelled:
                    break
        except SweepError as e:
            logger.error(f"Sweep aborted: {e}")
            result.error = e
            pool.abort()
        except Exception as e:
            logger.exception("Sweep aborted by an unexpected error")
            result.error = SweepError(f"unexpected error: {e}")
            result.error.__cause__ = e
            pool.abort()
        finally:
            pool.close()

        result.deleted = self.reporter.deleted_count - deleted_before
        result.kept = self.reporter.kept_count - kept_before
        if self.cancel.cancelled:
            result.cancelled = True
        if result.error is not None or result.cancelled:
            result.state = SweepState.ABORTED
        else:
            result.state = SweepState.DONE

        action = "would delete" if self.config.dry_run else "deleted"
        logger.info(
            f"Sweep {result.state.value}: {result.functions} functions, "
            f"{action} {result.deleted} versions, kept {result.kept}"
        )
        return result

    def _process(self, function: str, pool: WorkerPool) -> None:
        window = RetentionWindow(function, self.config.keep)
        futures: List[Future] = []

        try:
            for version in iter_versions(self.provider, function, self.cancel):
                decision = window.push(version)
                if decision is not None:
                    futures.append(pool.submit(DeleteTask(function, decision.version)))
        except (ListVersionsError, DeleteError) as e:
            if self.fail_fast:
                raise
            wait_for(futures)
            self._give_up(function, e)
            return

        errors = wait_for(futures)
        if self.cancel.cancelled:
            return
        if errors:
            if self.fail_fast:
                raise errors[0]
            self._give_up(function, errors[0])
            return

        logger.debug(f"{function}: {len(futures)} deleted, {len(window)} kept")
        for decision in window.drain():
            self.reporter.kept(decision.function, decision.version)

    def _give_up(self, function: str, error: SweepError) -> None:
        logger.error(f"Skipping {function}: {error}")
        self.result.failed.append(function)
        if self.result.error is None:
            self.result.error = error

    def _delete(self, task: DeleteTask) -> None:
        """Worker handler: delete one version (unless dry-run) and report it."""
        if not self.config.dry_run:
            try:
                self.provider.delete_function_version(task.function, task.version)
            except Exception as e:
                if not self.cancel.cancelled:
                    raise DeleteError(task.function, task.version, str(e)) from e
                logger.debug(f"Delete of {task.function}:{task.version} interrupted: {e}")
        self.reporter.deleted(task.function, task.version)
