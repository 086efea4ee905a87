"""Assertion vocabulary shared by every suite.

Each method either returns normally or raises ``AssertionFailed`` whose
``detail`` carries a compact rendering of the expected and actual values.
Collections and tabular results are summarised by type and size rather than
dumped, so failure messages stay short.
"""

import re
from collections.abc import Mapping, Sized
from numbers import Number
from typing import Any, Callable, Optional, Union

from suiterun.errors import AssertionFailed, AssertionUsageError

MAX_INLINE_LENGTH = 60


def is_tabular(value: Any) -> bool:
    """Check whether a value looks like a query result with rows and columns."""
    return (
        not isinstance(value, (str, bytes, Mapping, type))
        and hasattr(value, "columns")
        and hasattr(value, "rows")
    )


def export_value(value: Any) -> str:
    """Render a value compactly for a failure detail."""
    if value is None or isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        if len(value) > MAX_INLINE_LENGTH:
            return f'"{value[:MAX_INLINE_LENGTH]}..." (str, {len(value)} chars)'
        return f'"{value}"'
    if isinstance(value, Number):
        return str(value)
    if is_tabular(value):
        return f"{type(value).__name__}({len(list(value.rows))} rows)"
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return f"{type(value).__name__}({len(value)})"
    if isinstance(value, type):
        return f"<class {value.__name__}>"

    text = repr(value)
    if len(text) <= MAX_INLINE_LENGTH:
        return text
    return type(value).__name__


def _numeric(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


class Assertions:
    """Value comparisons that raise ``AssertionFailed`` on mismatch."""

    def fail(self, message: str, detail: Optional[str] = None) -> None:
        """Fail unconditionally."""
        raise AssertionFailed(message, detail)

    def _compare_detail(self, expected: Any, actual: Any) -> str:
        return f"Expected: {export_value(expected)}\nActual: {export_value(actual)}"

    def equal(self, expected: Any, actual: Any, message: Optional[str] = None) -> None:
        if expected != actual:
            self.fail(
                message or "Failed asserting that two values are equal",
                self._compare_detail(expected, actual),
            )

    def not_equal(self, expected: Any, actual: Any, message: Optional[str] = None) -> None:
        if expected == actual:
            self.fail(
                message or "Failed asserting that two values are not equal",
                f"Both values: {export_value(actual)}",
            )

    def true(self, actual: Any, message: Optional[str] = None) -> None:
        if actual is not True:
            self.fail(
                message or "Failed asserting that value is True",
                self._compare_detail(True, actual),
            )

    def false(self, actual: Any, message: Optional[str] = None) -> None:
        if actual is not False:
            self.fail(
                message or "Failed asserting that value is False",
                self._compare_detail(False, actual),
            )

    def null(self, actual: Any, message: Optional[str] = None) -> None:
        if actual is not None:
            self.fail(
                message or "Failed asserting that value is None",
                self._compare_detail(None, actual),
            )

    def not_null(self, actual: Any, message: Optional[str] = None) -> None:
        if actual is None:
            self.fail(message or "Failed asserting that value is not None", "Actual: None")

    def throws(
        self,
        func: Callable[[], Any],
        expected: Union[type, str, None] = None,
        message: Optional[str] = None,
    ) -> BaseException:
        """Assert that calling ``func`` raises, optionally of a given kind.

        Args:
            func: Zero-argument callable to run
            expected: Exception class, or the name of one, that must be raised

        Returns:
            The exception that was raised
        """
        try:
            func()
        except BaseException as exc:
            if isinstance(exc, KeyboardInterrupt) and (
                expected is None or not self._exception_matches(exc, expected)
            ):
                raise
            if expected is not None and not self._exception_matches(exc, expected):
                self.fail(
                    message or "Failed asserting that the expected exception was raised",
                    f"Expected: {self._kind_name(expected)}\n"
                    f"Actual: {type(exc).__name__}: {exc}",
                )
            return exc

        expected_text = self._kind_name(expected) if expected is not None else "an exception"
        self.fail(
            message or "Failed asserting that an exception was raised",
            f"Expected: {expected_text}\nActual: nothing was raised",
        )

    @staticmethod
    def _kind_name(expected: Union[type, str]) -> str:
        return expected.__name__ if isinstance(expected, type) else str(expected)

    @staticmethod
    def _exception_matches(exc: BaseException, expected: Union[type, str]) -> bool:
        if isinstance(expected, type):
            return isinstance(exc, expected)
        return type(exc).__name__ == expected or type(exc).__qualname__ == expected

    def count(self, expected: int, collection: Any, message: Optional[str] = None) -> None:
        if is_tabular(collection):
            actual = len(list(collection.rows))
        elif isinstance(collection, Sized) and not isinstance(collection, (str, bytes)):
            actual = len(collection)
        else:
            raise AssertionUsageError(
                "count() needs a sized collection or tabular result",
                f"Got: {type(collection).__name__}",
            )

        if actual != expected:
            self.fail(
                message or f"Failed asserting that collection has {expected} elements",
                f"Expected: {expected}\nActual: {actual}",
            )

    def _contains(self, needle: Any, haystack: Any) -> bool:
        if isinstance(haystack, str):
            if not isinstance(needle, str):
                raise AssertionUsageError(
                    "Text can only be searched for text",
                    f"Needle: {type(needle).__name__}",
                )
            return needle.lower() in haystack.lower()
        if is_tabular(haystack):
            return any(needle in tuple(row) for row in haystack.rows)
        if isinstance(haystack, Mapping):
            return needle in haystack
        try:
            return needle in haystack
        except TypeError:
            raise AssertionUsageError(
                "contains() needs text, a collection or a tabular result",
                f"Got: {type(haystack).__name__}",
            ) from None

    def contains(self, needle: Any, haystack: Any, message: Optional[str] = None) -> None:
        if not self._contains(needle, haystack):
            self.fail(
                message or "Failed asserting that value contains the needle",
                f"Needle: {export_value(needle)}\nHaystack: {export_value(haystack)}",
            )

    def not_contains(self, needle: Any, haystack: Any, message: Optional[str] = None) -> None:
        if self._contains(needle, haystack):
            self.fail(
                message or "Failed asserting that value does not contain the needle",
                f"Needle: {export_value(needle)}\nHaystack: {export_value(haystack)}",
            )

    def matches(self, pattern: str, text: str, message: Optional[str] = None) -> None:
        if not isinstance(text, str):
            raise AssertionUsageError(
                "matches() needs text to search",
                f"Got: {type(text).__name__}",
            )
        if re.search(pattern, text) is None:
            self.fail(
                message or "Failed asserting that text matches the pattern",
                f"Pattern: {pattern}\nText: {export_value(text)}",
            )

    def _size(self, value: Any) -> int:
        if value is None:
            return 0
        if is_tabular(value):
            return len(list(value.rows))
        if isinstance(value, Sized):
            return len(value)
        raise AssertionUsageError(
            "empty() needs text, a collection or a tabular result",
            f"Got: {type(value).__name__}",
        )

    def empty(self, actual: Any, message: Optional[str] = None) -> None:
        if self._size(actual) != 0:
            self.fail(
                message or "Failed asserting that value is empty",
                f"Actual: {export_value(actual)}",
            )

    def not_empty(self, actual: Any, message: Optional[str] = None) -> None:
        if self._size(actual) == 0:
            self.fail(
                message or "Failed asserting that value is not empty",
                f"Actual: {export_value(actual)}",
            )

    def instance_of(self, expected: Union[type, str], actual: Any, message: Optional[str] = None) -> None:
        """Assert that ``actual`` is an instance of a class given by name or object.

        Names match a class in the object's MRO either by bare name or by
        ``module.QualName``.
        """
        if isinstance(expected, type):
            matched = isinstance(actual, expected)
            expected_name = expected.__name__
        else:
            expected_name = expected
            matched = any(
                klass.__name__ == expected or f"{klass.__module__}.{klass.__qualname__}" == expected
                for klass in type(actual).__mro__
            )

        if not matched:
            self.fail(
                message or f"Failed asserting that object is an instance of {expected_name}",
                f"Expected: {expected_name}\nActual: {type(actual).__name__}",
            )

    def greater_than(self, threshold: Any, actual: Any, message: Optional[str] = None) -> None:
        self._check_numbers(threshold, actual)
        if not actual > threshold:
            self.fail(
                message or f"Failed asserting that {actual} is greater than {threshold}",
                f"Expected: > {threshold}\nActual: {actual}",
            )

    def less_than(self, threshold: Any, actual: Any, message: Optional[str] = None) -> None:
        self._check_numbers(threshold, actual)
        if not actual < threshold:
            self.fail(
                message or f"Failed asserting that {actual} is less than {threshold}",
                f"Expected: < {threshold}\nActual: {actual}",
            )

    @staticmethod
    def _check_numbers(*values: Any) -> None:
        for value in values:
            if not _numeric(value):
                raise AssertionUsageError(
                    "Numeric comparison needs numbers",
                    f"Got: {type(value).__name__}",
                )
