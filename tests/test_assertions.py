"""Tests for the assertion library."""

import sys

import pytest

from suiterun.core.assertions import Assertions, export_value, is_tabular
from suiterun.errors import AssertionFailed, AssertionUsageError
from suiterun.storage.backend import ResultSet


@pytest.fixture
def check():
    """Create an Assertions instance."""
    return Assertions()


@pytest.fixture
def users():
    """A small tabular result."""
    return ResultSet(
        columns=["id", "email"],
        rows=[(1, "ada@example.com"), (2, "grace@example.com")],
    )


class TestExportValue:
    """Tests for compact value rendering."""

    def test_scalars(self):
        """Test that scalars render verbatim."""
        assert export_value(None) == "None"
        assert export_value(True) == "True"
        assert export_value(5) == "5"
        assert export_value(2.5) == "2.5"
        assert export_value("abc") == '"abc"'

    def test_collections_are_summarised(self):
        """Test that collections render as type and size only."""
        assert export_value([1, 2, 3]) == "list(3)"
        assert export_value({"a": 1, "b": 2}) == "dict(2)"
        assert export_value((1,)) == "tuple(1)"

    def test_tabular_is_summarised(self, users):
        """Test that tabular results render as a row count."""
        assert export_value(users) == "ResultSet(2 rows)"

    def test_long_text_is_truncated(self):
        """Test that long strings are cut short."""
        rendered = export_value("x" * 500)
        assert "500 chars" in rendered
        assert len(rendered) < 100

    def test_is_tabular(self, users):
        """Test tabular detection."""
        assert is_tabular(users)
        assert not is_tabular([1, 2])
        assert not is_tabular({"columns": [], "rows": []})


class TestEquality:
    """Tests for equal / not_equal."""

    def test_equal_passes(self, check):
        """Test equal values pass."""
        check.equal(5, 5)
        check.equal([1, 2], [1, 2])

    def test_equal_failure_detail_contains_both_values(self, check):
        """Test that the detail names expected and actual."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.equal(5, 10)

        assert "5" in exc_info.value.detail
        assert "10" in exc_info.value.detail
        assert exc_info.value.detail == "Expected: 5\nActual: 10"

    def test_custom_message(self, check):
        """Test that a custom message replaces the default."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.equal(1, 2, "totals differ")

        assert exc_info.value.message == "totals differ"

    def test_not_equal(self, check):
        """Test not_equal."""
        check.not_equal(1, 2)
        with pytest.raises(AssertionFailed):
            check.not_equal("a", "a")

    def test_failure_is_an_assertion_error(self, check):
        """Test that failures are AssertionErrors."""
        with pytest.raises(AssertionError):
            check.equal(1, 2)


class TestBooleansAndNone:
    """Tests for true / false / null / not_null."""

    def test_true_is_strict(self, check):
        """Test that truthy values do not satisfy true()."""
        check.true(True)
        for value in (1, "yes", [1]):
            with pytest.raises(AssertionFailed):
                check.true(value)

    def test_false_is_strict(self, check):
        """Test that falsy values do not satisfy false()."""
        check.false(False)
        for value in (0, "", [], None):
            with pytest.raises(AssertionFailed):
                check.false(value)

    def test_null(self, check):
        """Test null and not_null."""
        check.null(None)
        check.not_null(0)
        with pytest.raises(AssertionFailed):
            check.null(0)
        with pytest.raises(AssertionFailed):
            check.not_null(None)


class TestThrows:
    """Tests for throws."""

    def test_passes_and_returns_exception(self, check):
        """Test that the raised exception is returned."""
        error = check.throws(lambda: int("nope"), ValueError)
        assert isinstance(error, ValueError)

    def test_fails_when_nothing_raised(self, check):
        """Test failure when the callable returns normally."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.throws(lambda: None)

        assert "nothing was raised" in exc_info.value.detail

    def test_fails_on_different_kind(self, check):
        """Test failure when a different exception is raised."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.throws(lambda: {}["missing"], ValueError)

        assert "KeyError" in exc_info.value.detail
        assert "ValueError" in exc_info.value.detail

    def test_kind_by_name(self, check):
        """Test that the expected kind can be given by name."""
        check.throws(lambda: 1 / 0, "ZeroDivisionError")
        with pytest.raises(AssertionFailed):
            check.throws(lambda: 1 / 0, "KeyError")

    def test_subclass_matches_class(self, check):
        """Test that a subclass satisfies an expected base class."""
        check.throws(lambda: {}["missing"], LookupError)

    def test_system_exit(self, check):
        """Test that sys.exit() can be asserted like any exception."""
        error = check.throws(lambda: sys.exit(1), SystemExit)
        assert error.code == 1

    def test_system_exit_is_wrong_kind(self, check):
        """Test that an unexpected SystemExit is a failure, not an escape."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.throws(lambda: sys.exit(2), ValueError)

        assert "SystemExit" in exc_info.value.detail

    def test_interrupt_propagates(self, check):
        """Test that Ctrl-C is not swallowed unless it was expected."""

        def interrupt():
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            check.throws(interrupt, ValueError)
        assert isinstance(check.throws(interrupt, KeyboardInterrupt), KeyboardInterrupt)



class TestCount:
    """Tests for count."""

    def test_sequences_and_mappings(self, check):
        """Test counting sized collections."""
        check.count(3, [1, 2, 3])
        check.count(2, {"a": 1, "b": 2})
        check.count(0, set())

    def test_tabular(self, check, users):
        """Test counting tabular rows."""
        check.count(2, users)

    def test_mismatch(self, check):
        """Test a mismatched count fails with both numbers."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.count(2, [1])

        assert exc_info.value.detail == "Expected: 2\nActual: 1"

    def test_unsupported_type_is_usage_error(self, check):
        """Test that counting text or scalars is a usage error, not a failure."""
        with pytest.raises(AssertionUsageError):
            check.count(3, "abc")
        with pytest.raises(AssertionUsageError):
            check.count(1, 42)


class TestContains:
    """Tests for contains / not_contains."""

    def test_sequence_membership(self, check):
        """Test list membership."""
        check.contains(2, [1, 2, 3])
        with pytest.raises(AssertionFailed):
            check.contains(4, [1, 2, 3])

    def test_text_is_case_insensitive(self, check):
        """Test substring search ignores case."""
        check.contains("WORLD", "hello world")
        check.not_contains("moon", "hello world")

    def test_tabular_cell_search(self, check, users):
        """Test that any cell in any row matches."""
        check.contains("grace@example.com", users)
        check.contains(1, users)
        check.not_contains("nobody@example.com", users)

    def test_mapping_keys(self, check):
        """Test mapping membership checks keys."""
        check.contains("a", {"a": 1})

    def test_not_contains_fails(self, check):
        """Test not_contains fails when present."""
        with pytest.raises(AssertionFailed):
            check.not_contains("a", ["a"])

    def test_unsupported_haystack(self, check):
        """Test a non-container haystack is a usage error."""
        with pytest.raises(AssertionUsageError):
            check.contains(1, 42)


class TestMatchesAndEmpty:
    """Tests for matches / empty / not_empty."""

    def test_matches(self, check):
        """Test regex search."""
        check.matches(r"^\d{3}-\d{4}$", "555-1234")
        with pytest.raises(AssertionFailed):
            check.matches(r"^\d+$", "abc")

    def test_matches_needs_text(self, check):
        """Test matches against non-text is a usage error."""
        with pytest.raises(AssertionUsageError):
            check.matches(r"\d", 5)

    def test_empty(self, check, users):
        """Test empty across supported types."""
        for value in ("", [], {}, None, ResultSet()):
            check.empty(value)
        with pytest.raises(AssertionFailed):
            check.empty(users)

    def test_not_empty(self, check):
        """Test not_empty."""
        check.not_empty("x")
        with pytest.raises(AssertionFailed):
            check.not_empty([])

    def test_empty_unsupported(self, check):
        """Test empty on a number is a usage error."""
        with pytest.raises(AssertionUsageError):
            check.empty(0)


class Animal:
    pass


class Dog(Animal):
    pass


class TestInstanceOf:
    """Tests for instance_of."""

    def test_walks_ancestry_by_name(self, check):
        """Test that ancestor names match."""
        check.instance_of("Dog", Dog())
        check.instance_of("Animal", Dog())
        check.instance_of("object", Dog())

    def test_qualified_name(self, check):
        """Test that module-qualified names match."""
        check.instance_of(f"{__name__}.Animal", Dog())

    def test_class_object(self, check):
        """Test that a class can be passed."""
        check.instance_of(Animal, Dog())

    def test_mismatch(self, check):
        """Test that unrelated names fail."""
        with pytest.raises(AssertionFailed) as exc_info:
            check.instance_of("Dog", Animal())

        assert "Animal" in exc_info.value.detail

    def test_partial_name_does_not_match(self, check):
        """Test that names must match exactly."""
        with pytest.raises(AssertionFailed):
            check.instance_of("Do", Dog())


class TestNumericComparison:
    """Tests for greater_than / less_than."""

    def test_greater_than_is_strict(self, check):
        """Test equality does not satisfy greater_than."""
        check.greater_than(5, 6)
        with pytest.raises(AssertionFailed):
            check.greater_than(5, 5)

    def test_less_than_is_strict(self, check):
        """Test equality does not satisfy less_than."""
        check.less_than(5, 4.5)
        with pytest.raises(AssertionFailed):
            check.less_than(5, 5)

    def test_non_numbers_are_usage_errors(self, check):
        """Test that strings and booleans are rejected."""
        with pytest.raises(AssertionUsageError):
            check.greater_than(1, "2")
        with pytest.raises(AssertionUsageError):
            check.less_than(True, 0)
