"""Data models for discovered suites and test outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class OutcomeStatus(str, Enum):
    """Status of a single executed test method."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass(frozen=True)
class SuiteDescriptor:
    """A suite class found by discovery, with the test methods it declares."""

    source_path: Path
    qualified_name: str
    test_method_names: tuple[str, ...]
    suite_class: type

    @property
    def test_count(self) -> int:
        """Number of test methods in the suite."""
        return len(self.test_method_names)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source_path": str(self.source_path),
            "qualified_name": self.qualified_name,
            "test_method_names": list(self.test_method_names),
        }


@dataclass(frozen=True)
class Passed:
    """A test method that completed without raising."""

    suite_name: str
    method_name: str
    elapsed_seconds: float = 0.0

    status = OutcomeStatus.PASSED

    @property
    def name(self) -> str:
        return f"{self.suite_name}::{self.method_name}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "elapsed_seconds": self.elapsed_seconds,
        }


@dataclass(frozen=True)
class Failed:
    """A test method whose assertion did not hold."""

    suite_name: str
    method_name: str
    message: str
    detail: Optional[str] = None
    trace: str = ""

    status = OutcomeStatus.FAILED

    @property
    def name(self) -> str:
        return f"{self.suite_name}::{self.method_name}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "detail": self.detail,
            "trace": self.trace,
        }


@dataclass(frozen=True)
class Errored:
    """A test method that raised something other than an assertion failure."""

    suite_name: str
    method_name: str
    message: str
    detail: Optional[str] = None
    trace: str = ""

    status = OutcomeStatus.ERROR

    @property
    def name(self) -> str:
        return f"{self.suite_name}::{self.method_name}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "detail": self.detail,
            "trace": self.trace,
        }


TestOutcome = Union[Passed, Failed, Errored]


@dataclass
class RunSummary:
    """Outcomes of one run, bucketed by status."""

    passes: list[Passed] = field(default_factory=list)
    failures: list[Failed] = field(default_factory=list)
    errors: list[Errored] = field(default_factory=list)
    total_wall_seconds: float = 0.0

    @property
    def total(self) -> int:
        """Total number of executed test methods."""
        return len(self.passes) + len(self.failures) + len(self.errors)

    @property
    def successful(self) -> bool:
        """True when nothing failed or errored."""
        return not self.failures and not self.errors

    def record(self, outcome: TestOutcome) -> None:
        """Add an outcome to the bucket matching its status."""
        if isinstance(outcome, Passed):
            self.passes.append(outcome)
        elif isinstance(outcome, Failed):
            self.failures.append(outcome)
        elif isinstance(outcome, Errored):
            self.errors.append(outcome)
        else:
            raise TypeError(f"Not a test outcome: {outcome!r}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": len(self.passes),
            "failed": len(self.failures),
            "errors": len(self.errors),
            "total_wall_seconds": self.total_wall_seconds,
            "passes": [o.to_dict() for o in self.passes],
            "failures": [o.to_dict() for o in self.failures],
            "error_outcomes": [o.to_dict() for o in self.errors],
        }
