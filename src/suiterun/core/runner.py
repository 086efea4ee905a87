"""Test execution orchestration."""

import logging
import time
import traceback
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Protocol

from suiterun.core.context import RunContext
from suiterun.core.models import (
    Errored,
    Failed,
    OutcomeStatus,
    Passed,
    RunSummary,
    SuiteDescriptor,
    TestOutcome,
)
from suiterun.core.suite import IntegrationSuite, Suite, SuiteKind
from suiterun.storage.backend import StorageBackend, Transaction, resolve_datasource

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ProgressListener(Protocol):
    """Receives one status per finished test."""

    def report_progress(self, status: OutcomeStatus) -> None: ...


def _is_engine_frame(filename: str) -> bool:
    try:
        return Path(filename).resolve().is_relative_to(PACKAGE_DIR)
    except (OSError, ValueError):
        return False


def format_trace(error: BaseException) -> str:
    """Format a traceback without the runner's and assertion library's own frames.

    Errors raised entirely inside the engine, such as a storage backend
    failing to begin a transaction, keep their frames.
    """
    all_frames = traceback.extract_tb(error.__traceback__)
    frames = [frame for frame in all_frames if not _is_engine_frame(frame.filename)]
    if not frames:
        frames = all_frames
    lines = ["Traceback (most recent call last):\n"]
    lines.extend(traceback.format_list(frames))
    lines.extend(traceback.format_exception_only(type(error), error))
    return "".join(lines)


class SuiteRunner:
    """Runs discovered suites one test method at a time.

    Every test gets a fresh suite instance and, when a storage backend is
    configured, its own transaction that is always rolled back.
    """

    def __init__(
        self,
        context: Optional[RunContext] = None,
        backend: Optional[StorageBackend] = None,
        datasource: Optional[str] = None,
        bootstrap: Optional[Callable[[], Any]] = None,
        listener: Optional[ProgressListener] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize the runner.

        Args:
            context: Shared run state; a fresh one is created when omitted
            backend: Storage backend providing the rollback boundary
            datasource: Datasource name, overriding the configured default
            bootstrap: Callable that boots the application for integration suites
            listener: Receives a status after every test (usually the reporter)
            timeout_seconds: Per-test deadline, overriding the configured one
        """
        self.context = context or RunContext()
        self.backend = backend
        self.datasource = resolve_datasource(
            datasource, self.context.config.storage.default_datasource
        )
        self.bootstrap = bootstrap
        self.listener = listener
        self.timeout_seconds = timeout_seconds or self.context.config.runner.timeout_seconds

    def run(self, suites: Iterable[SuiteDescriptor]) -> RunSummary:
        """Run every test method of every suite, in order."""
        summary = RunSummary()
        started = time.perf_counter()

        for descriptor in suites:
            for method_name in descriptor.test_method_names:
                outcome = self.run_test(descriptor, method_name)
                summary.record(outcome)
                if self.listener is not None:
                    self.listener.report_progress(outcome.status)

        summary.total_wall_seconds = time.perf_counter() - started
        logger.info(
            "Ran %d tests: %d passed, %d failed, %d errors in %.2fs",
            summary.total,
            len(summary.passes),
            len(summary.failures),
            len(summary.errors),
            summary.total_wall_seconds,
        )
        return summary

    def run_test(self, descriptor: SuiteDescriptor, method_name: str) -> TestOutcome:
        """Run one test method inside its own rollback boundary."""
        suite_name = descriptor.qualified_name
        transaction: Optional[Transaction] = None
        started = time.perf_counter()
        deadline = started + self.timeout_seconds if self.timeout_seconds else None
        logger.debug("Running %s::%s", suite_name, method_name)

        try:
            suite = descriptor.suite_class()
            suite.bind(self.context, deadline=deadline)

            if suite.kind == SuiteKind.INTEGRATION and isinstance(suite, IntegrationSuite):
                suite.boot_framework(self.bootstrap)

            if self.backend is not None:
                transaction = self.backend.begin(self.datasource)
                suite.bind(self.context, transaction, deadline)

            self._run_lifecycle(suite, method_name)
        except KeyboardInterrupt:
            raise
        except AssertionError as e:
            outcome: TestOutcome = Failed(
                suite_name=suite_name,
                method_name=method_name,
                message=self._message(e),
                detail=getattr(e, "detail", None),
                trace=format_trace(e),
            )
        except BaseException as e:
            # SystemExit and other non-Exception signals are errors too
            outcome = Errored(
                suite_name=suite_name,
                method_name=method_name,
                message=self._message(e),
                detail=getattr(e, "detail", None),
                trace=format_trace(e),
            )
        else:
            elapsed = time.perf_counter() - started
            if deadline is not None and elapsed > self.timeout_seconds:
                outcome = Errored(
                    suite_name=suite_name,
                    method_name=method_name,
                    message=f"Timed out after {elapsed:.2f}s (limit {self.timeout_seconds:g}s)",
                )
            else:
                outcome = Passed(
                    suite_name=suite_name,
                    method_name=method_name,
                    elapsed_seconds=elapsed,
                )
        finally:
            rollback_error = self._rollback(transaction)

        if rollback_error is not None and isinstance(outcome, Passed):
            outcome = Errored(
                suite_name=suite_name,
                method_name=method_name,
                message=f"Rollback failed: {self._message(rollback_error)}",
                detail=getattr(rollback_error, "detail", None),
                trace=format_trace(rollback_error),
            )
        return outcome

    @staticmethod
    def _run_lifecycle(suite: Suite, method_name: str) -> None:
        suite.setup()
        try:
            getattr(suite, method_name)()
        except BaseException:
            try:
                suite.teardown()
            except Exception:
                logger.exception("teardown() also failed after %s raised", method_name)
            raise
        suite.teardown()

    def _rollback(self, transaction: Optional[Transaction]) -> Optional[Exception]:
        if transaction is None or self.backend is None:
            return None
        try:
            self.backend.rollback(transaction)
        except Exception as e:
            logger.error("Rollback on %s failed: %s", self.datasource, e)
            return e
        return None

    @staticmethod
    def _message(error: BaseException) -> str:
        message = getattr(error, "message", None) or str(error)
        if not isinstance(error, Exception):
            return f"{type(error).__name__}: {message}" if message else type(error).__name__
        return message or type(error).__name__
