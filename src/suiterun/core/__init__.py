"""Core test execution functionality."""

from suiterun.core.assertions import Assertions
from suiterun.core.context import RunContext
from suiterun.core.discovery import DiscoveryResult, DiscoveryWarning, SuiteDiscovery
from suiterun.core.models import (
    Errored,
    Failed,
    OutcomeStatus,
    Passed,
    RunSummary,
    SuiteDescriptor,
)
from suiterun.core.runner import SuiteRunner
from suiterun.core.suite import IntegrationSuite, Suite, SuiteKind

__all__ = [
    "Assertions",
    "DiscoveryResult",
    "DiscoveryWarning",
    "Errored",
    "Failed",
    "IntegrationSuite",
    "OutcomeStatus",
    "Passed",
    "RunContext",
    "RunSummary",
    "Suite",
    "SuiteDescriptor",
    "SuiteDiscovery",
    "SuiteKind",
    "SuiteRunner",
]
