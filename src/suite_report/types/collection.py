"""Aggregated view over every run of a report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from .suite import TestSuiteRun
from .test import Test, TestRun


class ShowReason(str, Enum):
    """Why a test is listed in the detailed report."""

    NONE = "none"
    FAILING_ALWAYS = "failing_always"
    FAILING_SOMETIMES = "failing_sometimes"
    ERRORED = "errored"


class FormatMode(str, Enum):
    """How much of the report to render."""

    COMMENT = "comment"
    SUMMARY = "summary"


class ShownRun(NamedTuple):
    """A notable run, the suite it is listed under and the other suites that share it."""

    run: TestRun
    run_suite: str
    suites: tuple[str, ...] = ()


@dataclass(frozen=True)
class ShownTest:
    """A test selected for detailed display."""

    reason: ShowReason
    test: Test
    runs: tuple[ShownRun, ...] = ()
    has_hidden_notable_runs: bool = False


@dataclass(frozen=True)
class TestResultCollection:
    """Every unique test, every suite run and the tests to show in detail.

    ``total``, ``executed``, ``passed``, ``failed`` and ``errored`` count every
    run instance across every suite; ``aggregate_run`` counts each unique test
    once.
    """

    __test__ = False  # Prevent pytest from collecting this as a test class

    tests: tuple[Test, ...]
    test_suite_runs: tuple[TestSuiteRun, ...]
    aggregate_run: TestSuiteRun
    total: int = 0
    executed: int = 0
    passed: int = 0
    failed: int = 0
    errored: int = 0
    show_tests: tuple[ShownTest, ...] = field(default_factory=tuple)

    @property
    def skipped(self) -> int:
        return self.total - self.executed

    @property
    def other(self) -> int:
        return self.executed - self.passed - self.failed - self.errored

    @property
    def has_errors(self) -> bool:
        """True when any run, or any unique test, errored."""
        return self.errored > 0 or self.aggregate_run.errored > 0
