"""Whole-object mocks built from an interface declaration.

A mock replaces every public method of the target class with an
interceptor that records the call and answers from a stub table. Calling a
method that has no stub is a usage error, not a silent ``None``.
"""

import logging
import time
from dataclasses import dataclass, field
from types import FunctionType
from typing import Any, Mapping, Optional, Union

from suiterun.errors import (
    AssertionUsageError,
    MethodNotStubbed,
    MockTargetError,
    UnknownMethod,
    VerificationFailed,
)
from suiterun.loader import resolve_object

logger = logging.getLogger(__name__)

_NOTHING = object()


@dataclass(frozen=True)
class CallRecord:
    """One recorded call on a mocked method."""

    method_name: str
    arguments: tuple = ()
    keywords: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0


@dataclass(frozen=True)
class Stub:
    """A configured answer for one mocked method."""

    value: Any = None
    has_value: bool = False


@dataclass(frozen=True)
class Times:
    """An inclusive call-count range for ``verify``."""

    min: Optional[int] = None
    max: Optional[int] = None

    def accepts(self, count: int) -> bool:
        if self.min is not None and count < self.min:
            return False
        if self.max is not None and count > self.max:
            return False
        return True

    def describe(self) -> str:
        if self.min is not None and self.max is not None:
            if self.min == self.max:
                return str(self.min)
            return f"between {self.min} and {self.max}"
        if self.min is not None:
            return f"at least {self.min}"
        if self.max is not None:
            return f"at most {self.max}"
        return "any number"


def interface_methods(target: type) -> list[str]:
    """List the public method names a class declares along its MRO."""
    names: list[str] = []
    for klass in target.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or name in names:
                continue
            if isinstance(member, (FunctionType, staticmethod, classmethod)):
                names.append(name)
    return names


class MockInstance:
    """Stand-in object whose methods are all interceptors.

    Bookkeeping lives in ``_mock_*`` attributes so it cannot collide with
    the mocked interface's own method names.
    """

    def __init__(self, target: type):
        self._mock_target = target
        self._mock_methods = tuple(interface_methods(target))
        self._mock_calls: list[CallRecord] = []
        self._mock_stubs: dict[str, Stub] = {}

        for name in self._mock_methods:
            setattr(self, name, self._mock_interceptor(name))

    @property
    def _mock_name(self) -> str:
        return self._mock_target.__name__

    def _mock_interceptor(self, name: str):
        def intercept(*args, **kwargs):
            self._mock_calls.append(
                CallRecord(
                    method_name=name,
                    arguments=args,
                    keywords=dict(kwargs),
                    timestamp=time.time(),
                )
            )
            stub = self._mock_stubs.get(name)
            if stub is None:
                raise MethodNotStubbed(
                    f"Method {self._mock_name}.{name}() was called but not stubbed",
                    f"Configure it first: stub(mock, \"{name}\", value)",
                )
            return stub.value if stub.has_value else None

        intercept.__name__ = name
        intercept.__qualname__ = f"{self._mock_name}.{name}"
        return intercept

    def __repr__(self) -> str:
        return f"<Mock of {self._mock_name}>"


def _resolve_target(target: Union[type, str]) -> type:
    if isinstance(target, type):
        return target
    if isinstance(target, str):
        try:
            resolved = resolve_object(target)
        except (ImportError, AttributeError, ValueError) as e:
            raise MockTargetError(f"Cannot resolve mock target: {target}", str(e)) from e
        if isinstance(resolved, type):
            return resolved
        raise MockTargetError(
            f"Mock target is not a class: {target}",
            f"Resolved to {type(resolved).__name__}",
        )
    raise MockTargetError(
        "Mock target must be a class or an import path",
        f"Got: {type(target).__name__}",
    )


def mock(target: Union[type, str]) -> MockInstance:
    """Build a mock for a class or a ``"package.module:Class"`` import path."""
    klass = _resolve_target(target)
    instance = MockInstance(klass)
    logger.debug("Created mock of %s with methods %s", klass.__name__, instance._mock_methods)
    return instance


def _check_method(instance: MockInstance, name: str) -> None:
    if name not in instance._mock_methods:
        available = ", ".join(instance._mock_methods) or "(none)"
        raise UnknownMethod(
            f"{instance._mock_name} has no method {name}()",
            f"Available methods: {available}",
        )


def stub(instance: MockInstance, name: str, value: Any = _NOTHING) -> MockInstance:
    """Configure what a mocked method returns.

    Leaving out ``value`` stubs the method to return ``None``. Stubbing the
    same method again replaces the earlier stub.
    """
    _check_method(instance, name)
    if value is _NOTHING:
        instance._mock_stubs[name] = Stub()
    else:
        instance._mock_stubs[name] = Stub(value=value, has_value=True)
    return instance


def calls(instance: MockInstance, name: Optional[str] = None) -> list[CallRecord]:
    """Return the recorded calls, optionally only those to one method."""
    if name is None:
        return list(instance._mock_calls)
    return [record for record in instance._mock_calls if record.method_name == name]


def verify(
    instance: MockInstance,
    name: str,
    times: Union[int, Times, Mapping[str, int]] = 1,
) -> None:
    """Check how many times a mocked method was called.

    Args:
        instance: The mock to inspect
        name: Method name
        times: Exact count, a ``Times`` range, or a ``{"min": .., "max": ..}`` mapping

    Raises:
        VerificationFailed: If the recorded count is outside the expectation
        AssertionUsageError: If ``times`` is not a count, range or mapping
    """
    _check_method(instance, name)
    if isinstance(times, Mapping):
        times = Times(min=times.get("min"), max=times.get("max"))
    elif isinstance(times, int) and not isinstance(times, bool):
        times = Times(min=times, max=times)
    elif not isinstance(times, Times):
        raise AssertionUsageError(
            "verify() expects an int, a Times range or a min/max mapping",
            f"Got: {type(times).__name__}",
        )

    actual = len(calls(instance, name))
    if not times.accepts(actual):
        raise VerificationFailed(
            f"Method {instance._mock_name}.{name}() was not called the expected number of times",
            f"Expected: {times.describe()}, Actual: {actual}",
        )
