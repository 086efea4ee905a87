"""
suiterun - a self-hosted test-execution engine.

This package provides:
- Suite discovery by filesystem convention
- Per-test transactional rollback against a storage backend
- An assertion vocabulary and method-level mocks
- Data factories with traits and sequences
- Streaming, colourised console reporting
"""

__version__ = "0.1.0"
__author__ = "suiterun Team"

from suiterun.core.assertions import Assertions
from suiterun.core.context import RunContext
from suiterun.core.mock import Times, calls, mock, stub, verify
from suiterun.core.suite import IntegrationSuite, Suite, SuiteKind
from suiterun.errors import (
    AssertionFailed,
    DeadlineExceeded,
    FactoryNotFound,
    MethodNotStubbed,
    UsageError,
    VerificationFailed,
)
from suiterun.factory import Factory, trait

__all__ = [
    "AssertionFailed",
    "Assertions",
    "DeadlineExceeded",
    "Factory",
    "FactoryNotFound",
    "IntegrationSuite",
    "MethodNotStubbed",
    "RunContext",
    "Suite",
    "SuiteKind",
    "Times",
    "UsageError",
    "VerificationFailed",
    "calls",
    "mock",
    "stub",
    "trait",
    "verify",
]
