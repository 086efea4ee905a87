"""Tests for the outcome and descriptor models."""

from pathlib import Path

import pytest

from suiterun.core.models import (
    Errored,
    Failed,
    OutcomeStatus,
    Passed,
    RunSummary,
    SuiteDescriptor,
)


class TestOutcomeStatus:
    """Tests for OutcomeStatus enum."""

    def test_status_values(self):
        """Test that all expected statuses exist."""
        assert OutcomeStatus.PASSED.value == "passed"
        assert OutcomeStatus.FAILED.value == "failed"
        assert OutcomeStatus.ERROR.value == "error"


class TestOutcomes:
    """Tests for the three outcome variants."""

    def test_status_per_variant(self):
        assert Passed("S", "test_a").status is OutcomeStatus.PASSED
        assert Failed("S", "test_a", "m").status is OutcomeStatus.FAILED
        assert Errored("S", "test_a", "m").status is OutcomeStatus.ERROR

    def test_name(self):
        """Test the suite::method display name."""
        assert Passed("models.user_suite.UserSuite", "test_create").name == (
            "models.user_suite.UserSuite::test_create"
        )

    def test_immutable(self):
        """Test outcomes cannot be changed after creation."""
        outcome = Failed("S", "test_a", "m")
        with pytest.raises(AttributeError):
            outcome.message = "changed"

    def test_to_dict(self):
        """Test converting a failure to a dictionary."""
        data = Failed("S", "test_a", "not equal", "Expected: 1\nActual: 2", "trace").to_dict()

        assert data["name"] == "S::test_a"
        assert data["status"] == "failed"
        assert data["detail"] == "Expected: 1\nActual: 2"
        assert data["trace"] == "trace"


class TestSuiteDescriptor:
    """Tests for SuiteDescriptor."""

    def test_to_dict(self):
        descriptor = SuiteDescriptor(
            source_path=Path("tests/user_suite.py"),
            qualified_name="user_suite.UserSuite",
            test_method_names=("test_a", "test_b"),
            suite_class=object,
        )

        assert descriptor.test_count == 2
        assert descriptor.to_dict() == {
            "source_path": "tests/user_suite.py",
            "qualified_name": "user_suite.UserSuite",
            "test_method_names": ["test_a", "test_b"],
        }


class TestRunSummary:
    """Tests for RunSummary."""

    def test_default_values(self):
        """Test an empty summary."""
        summary = RunSummary()
        assert summary.total == 0
        assert summary.successful is True
        assert summary.total_wall_seconds == 0.0

    def test_record_buckets_by_status(self):
        """Test each outcome lands in exactly one bucket."""
        summary = RunSummary()
        summary.record(Passed("S", "a"))
        summary.record(Failed("S", "b", "m"))
        summary.record(Errored("S", "c", "m"))
        summary.record(Passed("S", "d"))

        assert [o.method_name for o in summary.passes] == ["a", "d"]
        assert len(summary.failures) == 1
        assert len(summary.errors) == 1
        assert summary.total == 4
        assert summary.successful is False

    def test_record_rejects_other_values(self):
        with pytest.raises(TypeError):
            RunSummary().record("passed")

    def test_to_dict(self):
        """Test converting to dictionary."""
        summary = RunSummary(
            passes=[Passed("S", "a", 0.5)],
            errors=[Errored("S", "b", "boom")],
            total_wall_seconds=1.5,
        )
        data = summary.to_dict()

        assert data["total"] == 2
        assert data["passed"] == 1
        assert data["failed"] == 0
        assert data["errors"] == 1
        assert data["passes"][0]["elapsed_seconds"] == 0.5
        assert data["error_outcomes"][0]["message"] == "boom"
