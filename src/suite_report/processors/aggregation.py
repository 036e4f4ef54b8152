"""Fold test runs into suite, unique-test and collection-wide statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from ..types import RunRecord, Test, TestOutcome, TestResultCollection, TestSuiteRun
from .selection import select_shown_tests


logger = logging.getLogger(__name__)

UNIQUE_RUN_NAME = "Unique"


def collapse_outcomes(outcomes: Iterable[TestOutcome]) -> TestOutcome:
    """Collapse the runs of one test into a single outcome.

    Errored if any run errored, else failed if any run failed, else skipped
    if every run was skipped, else passed.
    """
    outcomes = list(outcomes)
    if TestOutcome.ERROR in outcomes:
        return TestOutcome.ERROR
    if TestOutcome.FAILED in outcomes:
        return TestOutcome.FAILED
    if outcomes and all(outcome is TestOutcome.SKIPPED for outcome in outcomes):
        return TestOutcome.SKIPPED
    return TestOutcome.PASSED


def count_outcomes(name: str, outcomes: Iterable[TestOutcome]) -> TestSuiteRun:
    """Build suite statistics with one count per outcome."""
    total = executed = passed = failed = errored = 0
    for outcome in outcomes:
        total += 1
        if outcome is TestOutcome.SKIPPED:
            continue
        executed += 1
        if outcome is TestOutcome.PASSED:
            passed += 1
        elif outcome is TestOutcome.FAILED:
            failed += 1
        elif outcome is TestOutcome.ERROR:
            errored += 1

    return TestSuiteRun(
        name=name,
        total=total,
        executed=executed,
        passed=passed,
        failed=failed,
        errored=errored,
    )


def build_collection(
    records: Iterable[RunRecord],
    *,
    suites: Sequence[str] = (),
    max_runs_per_test: Optional[int] = None,
) -> TestResultCollection:
    """Aggregate every run into a ``TestResultCollection``.

    Args:
        records: Runs attributed to a test and a suite. Tests sharing a name
            are the same logical test.
        suites: Suite names to list first, kept even if they have no runs.
        max_runs_per_test: Optional cap on notable runs shown per test

    Returns:
        The frozen collection. Tests and suites keep first-observed order.
    """
    tests: dict[str, Test] = {}
    runs_by_test: dict[str, list[RunRecord]] = {}
    outcomes_by_suite: dict[str, list[TestOutcome]] = {name: [] for name in suites}

    for record in records:
        name = record.test.name
        if name not in tests:
            tests[name] = record.test
            runs_by_test[name] = []
        runs_by_test[name].append(record)
        outcomes_by_suite.setdefault(record.suite, []).append(record.run.outcome)

    suite_runs = tuple(
        count_outcomes(name, outcomes) for name, outcomes in outcomes_by_suite.items()
    )
    aggregate_run = count_outcomes(
        UNIQUE_RUN_NAME,
        (collapse_outcomes(r.run.outcome for r in runs) for runs in runs_by_test.values()),
    )

    collection = TestResultCollection(
        tests=tuple(tests.values()),
        test_suite_runs=suite_runs,
        aggregate_run=aggregate_run,
        total=sum(s.total for s in suite_runs),
        executed=sum(s.executed for s in suite_runs),
        passed=sum(s.passed for s in suite_runs),
        failed=sum(s.failed for s in suite_runs),
        errored=sum(s.errored for s in suite_runs),
        show_tests=select_shown_tests(runs_by_test, max_runs_per_test=max_runs_per_test),
    )

    logger.debug(
        "Aggregated %d runs of %d unique tests across %d suites, %d shown",
        collection.total,
        len(collection.tests),
        len(suite_runs),
        len(collection.show_tests),
    )
    return collection
