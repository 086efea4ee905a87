"""Exception taxonomy for suiterun.

Two families matter to the runner: ``AssertionFailed`` (and any other
``AssertionError``) is bucketed as a test *failure*; everything else,
including the usage errors below, is bucketed as a test *error*.
"""

from typing import Optional


class AssertionFailed(AssertionError):
    """Raised when an assertion's expectation does not hold."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class UsageError(Exception):
    """Raised when the engine is used incorrectly by a test author."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class AssertionUsageError(UsageError):
    """An assertion was given a value type it cannot inspect."""


class MethodNotStubbed(UsageError):
    """A mocked method was called without a configured stub."""


class UnknownMethod(UsageError):
    """A stub or verification named a method the mocked interface lacks."""


class VerificationFailed(UsageError):
    """A mock was not called the expected number of times."""


class MockTargetError(UsageError):
    """A mock target could not be resolved to a class."""


class FactoryNotFound(UsageError):
    """No factory is registered under the requested name."""


class UnknownTrait(UsageError):
    """A factory was asked for a trait it does not define."""


class DatasourceNotFound(UsageError):
    """The storage backend has no datasource with the requested name."""


class SuiteLoadError(Exception):
    """Raised when a suite file cannot be loaded and loading is strict."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load suite file {path}: {reason}")
        self.path = path
        self.reason = reason


class DeadlineExceeded(Exception):
    """A test ran past its per-test deadline."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
