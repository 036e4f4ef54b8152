"""Test identity and per-run result models."""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


logger = logging.getLogger(__name__)


class TestOutcome(str, Enum):
    """Result of a single test run."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> "TestOutcome":
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _OUTCOME_ALIASES:
                return _OUTCOME_ALIASES[key]
        logger.warning("Unrecognized test outcome %r, treating it as 'other'", value)
        return cls.OTHER

    @property
    def is_notable(self) -> bool:
        """Anything that neither passed nor was skipped counts as failing."""
        return self not in {TestOutcome.PASSED, TestOutcome.SKIPPED}


_OUTCOME_ALIASES: dict[str, TestOutcome] = {
    "passed": TestOutcome.PASSED,
    "pass": TestOutcome.PASSED,
    "success": TestOutcome.PASSED,
    "ok": TestOutcome.PASSED,
    "failed": TestOutcome.FAILED,
    "fail": TestOutcome.FAILED,
    "failure": TestOutcome.FAILED,
    "error": TestOutcome.ERROR,
    "errored": TestOutcome.ERROR,
    "skipped": TestOutcome.SKIPPED,
    "skip": TestOutcome.SKIPPED,
    "notexecuted": TestOutcome.SKIPPED,
    "not_executed": TestOutcome.SKIPPED,
    "ignored": TestOutcome.SKIPPED,
    "other": TestOutcome.OTHER,
}


class Test(BaseModel):
    """Logical test identity, independent of the suite that ran it."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique test name")
    class_name: Optional[str] = Field(None, description="Declaring class, when known")
    method_name: Optional[str] = Field(None, description="Test method, when known")


class TestRun(BaseModel):
    """One execution of a test inside one suite."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Run-level display name")
    outcome: TestOutcome = Field(..., description="Result of the run")
    exception_message: Optional[str] = None
    exception_stack_trace: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None


class RunRecord(NamedTuple):
    """A run attributed to its test identity and owning suite."""

    test: Test
    suite: str
    run: TestRun
