"""Pick the tests worth showing in detail and explain why."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from ..types import RunRecord, ShowReason, ShownRun, ShownTest, TestOutcome


logger = logging.getLogger(__name__)


def classify_runs(outcomes: Iterable[TestOutcome]) -> ShowReason:
    """Decide why a test would be shown, given the outcome of each of its runs.

    An errored run wins over everything else. Failed runs and runs with an
    unrecognized outcome are failing: a test whose every run is failing is
    always failing, one failing only in some runs is sometimes failing.
    Tests with no notable run get ``ShowReason.NONE``.
    """
    outcomes = list(outcomes)
    if TestOutcome.ERROR in outcomes:
        return ShowReason.ERRORED
    if not any(outcome.is_notable for outcome in outcomes):
        return ShowReason.NONE
    if all(outcome.is_notable for outcome in outcomes):
        return ShowReason.FAILING_ALWAYS
    return ShowReason.FAILING_SOMETIMES


def _merge_notable_runs(records: Sequence[RunRecord]) -> list[ShownRun]:
    """Merge equivalent notable runs (same run name and outcome) across suites.

    The first suite a run is seen in becomes its primary suite; the others are
    listed in ``ShownRun.suites`` in the order they were seen.
    """
    merged: dict[tuple[str, TestOutcome], tuple[ShownRun, list[str]]] = {}
    for record in records:
        if not record.run.outcome.is_notable:
            continue
        key = (record.run.name, record.run.outcome)
        if key not in merged:
            merged[key] = (ShownRun(record.run, record.suite), [])
            continue
        primary, extra_suites = merged[key]
        if record.suite != primary.run_suite and record.suite not in extra_suites:
            extra_suites.append(record.suite)

    return [
        primary._replace(suites=tuple(extra_suites))
        for primary, extra_suites in merged.values()
    ]


def select_shown_tests(
    runs_by_test: Mapping[str, Sequence[RunRecord]],
    *,
    max_runs_per_test: Optional[int] = None,
) -> tuple[ShownTest, ...]:
    """Select every test with at least one failed or errored run.

    Args:
        runs_by_test: Runs of each test keyed by test name, in the order the
            tests were first observed. That order is kept as is.
        max_runs_per_test: Optional cap on the notable runs listed per test.
            When runs are dropped because of it, ``has_hidden_notable_runs``
            is set on the shown test.

    Returns:
        The shown tests, in first-observed order
    """
    shown: list[ShownTest] = []

    for name, records in runs_by_test.items():
        if not records:
            continue
        reason = classify_runs(record.run.outcome for record in records)
        if reason is ShowReason.NONE:
            continue

        runs = _merge_notable_runs(records)
        hidden = max_runs_per_test is not None and len(runs) > max_runs_per_test
        if hidden:
            runs = runs[:max_runs_per_test]

        shown.append(
            ShownTest(
                reason=reason,
                test=records[0].test,
                runs=tuple(runs),
                has_hidden_notable_runs=hidden,
            )
        )
        logger.debug("Showing %s (%s, %d runs)", name, reason.value, len(runs))

    return tuple(shown)
