"""Base classes every test suite derives from."""

import inspect
import time
from enum import Enum
from typing import Any, Callable, ClassVar, Iterable, Mapping, Optional, Union

from suiterun.core import mock as mocking
from suiterun.core.assertions import Assertions
from suiterun.core.context import RunContext
from suiterun.errors import DeadlineExceeded

TEST_PREFIX = "test"


class SuiteKind(str, Enum):
    """How the runner prepares a suite before each test."""

    UNIT = "unit"
    INTEGRATION = "integration"


def _takes_no_arguments(func: Callable) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    params = list(signature.parameters.values())[1:]
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in params
    )


class Suite:
    """A group of related test methods.

    Subclasses define ``test*`` methods and may override ``setup`` and
    ``teardown``. Set ``abstract = True`` on a shared base suite to keep
    discovery from running it on its own.
    """

    kind: ClassVar[SuiteKind] = SuiteKind.UNIT
    abstract: ClassVar[bool] = False

    def __init__(self):
        self.assertions = Assertions()
        self.transaction: Any = None
        self._context: Optional[RunContext] = None
        self.deadline: Optional[float] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # abstract applies only to the class that sets it
        if "abstract" not in cls.__dict__:
            cls.abstract = False

    def bind(
        self, context: RunContext, transaction: Any = None, deadline: Optional[float] = None
    ) -> None:
        """Attach the run context, the open transaction and the test's deadline.

        ``deadline`` is a ``time.perf_counter()`` value, or None for no limit.
        """
        self._context = context
        self.transaction = transaction
        self.deadline = deadline

    def checkpoint(self) -> None:
        """Stop the test if its deadline has passed.

        Long-running tests call this between steps; the runner cannot
        interrupt a test on its own.

        Raises:
            DeadlineExceeded: If the deadline has passed
        """
        if self.deadline is not None and time.perf_counter() > self.deadline:
            raise DeadlineExceeded("Test exceeded its deadline")

    @property
    def context(self) -> RunContext:
        if self._context is None:
            self._context = RunContext()
        return self._context

    def setup(self) -> None:
        """Run before each test method."""

    def teardown(self) -> None:
        """Run after each test method."""

    @classmethod
    def test_method_names(cls) -> list[str]:
        """Public zero-argument ``test*`` methods, in declaration order.

        Methods inherited from user-defined base suites come first, in the
        order their classes appear from base to derived.
        """
        names: list[str] = []
        for klass in reversed(cls.__mro__):
            if not issubclass(klass, Suite) or klass in (Suite, IntegrationSuite):
                continue
            for name, member in vars(klass).items():
                if name in names or not name.startswith(TEST_PREFIX):
                    continue
                if inspect.isfunction(member) and _takes_no_arguments(member):
                    names.append(name)
        return [name for name in names if inspect.isfunction(getattr(cls, name, None))]

    def get_test_methods(self) -> list[str]:
        return self.test_method_names()

    # Assertions

    def fail(self, message: str, detail: Optional[str] = None) -> None:
        self.assertions.fail(message, detail)

    def assert_equal(self, expected: Any, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.equal(expected, actual, message)

    def assert_not_equal(self, expected: Any, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.not_equal(expected, actual, message)

    def assert_true(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.true(actual, message)

    def assert_false(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.false(actual, message)

    def assert_null(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.null(actual, message)

    def assert_not_null(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.not_null(actual, message)

    def assert_throws(
        self,
        func: Callable[[], Any],
        expected: Union[type, str, None] = None,
        message: Optional[str] = None,
    ) -> BaseException:
        return self.assertions.throws(func, expected, message)

    def assert_count(self, expected: int, collection: Any, message: Optional[str] = None) -> None:
        self.assertions.count(expected, collection, message)

    def assert_contains(self, needle: Any, haystack: Any, message: Optional[str] = None) -> None:
        self.assertions.contains(needle, haystack, message)

    def assert_not_contains(self, needle: Any, haystack: Any, message: Optional[str] = None) -> None:
        self.assertions.not_contains(needle, haystack, message)

    def assert_matches(self, pattern: str, text: str, message: Optional[str] = None) -> None:
        self.assertions.matches(pattern, text, message)

    def assert_empty(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.empty(actual, message)

    def assert_not_empty(self, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.not_empty(actual, message)

    def assert_instance_of(self, expected: Union[type, str], actual: Any, message: Optional[str] = None) -> None:
        self.assertions.instance_of(expected, actual, message)

    def assert_greater_than(self, threshold: Any, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.greater_than(threshold, actual, message)

    def assert_less_than(self, threshold: Any, actual: Any, message: Optional[str] = None) -> None:
        self.assertions.less_than(threshold, actual, message)

    # Mocks

    def mock(self, target: Union[type, str]) -> mocking.MockInstance:
        return self.context.mock(target)

    def stub(self, instance: mocking.MockInstance, name: str, *value: Any) -> mocking.MockInstance:
        """Stub ``name`` on a mock; with no value the method returns ``None``."""
        return mocking.stub(instance, name, *value)

    def verify(
        self,
        instance: mocking.MockInstance,
        name: str,
        times: Union[int, mocking.Times, Mapping[str, int]] = 1,
    ) -> None:
        mocking.verify(instance, name, times)

    # Factories

    def make(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        return self.context.make(name, overrides, traits)

    def create(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        return self.context.create(name, overrides, traits)

    def sequence(self, key: str) -> int:
        return self.context.increment_sequence(key)


class IntegrationSuite(Suite):
    """A suite that needs the application bootstrapped before each test.

    The runner boots the framework before opening the test's transaction.
    Override ``create_application`` when no bootstrap callable is configured.
    """

    kind: ClassVar[SuiteKind] = SuiteKind.INTEGRATION

    def __init__(self):
        super().__init__()
        self.app: Any = None

    def create_application(self) -> Any:
        """Build the application when no bootstrap callable is configured."""
        return None

    def boot_framework(self, bootstrap: Optional[Callable[[], Any]] = None) -> None:
        self.app = bootstrap() if bootstrap is not None else self.create_application()
