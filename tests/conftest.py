import pytest

from suite_report.types import RunRecord, Test, TestOutcome, TestRun


def make_record(
    test_name: str,
    suite: str,
    outcome: TestOutcome,
    run_name: str | None = None,
    **run_fields,
) -> RunRecord:
    """Build a run record for ``test_name`` in ``suite``."""
    return RunRecord(
        Test(name=test_name),
        suite,
        TestRun(name=run_name or test_name, outcome=outcome, **run_fields),
    )


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def two_suite_records():
    """Suite A: 8 passed, 2 failed. Suite B: 9 passed, 1 skipped."""
    records = []
    for i in range(10):
        outcome = TestOutcome.FAILED if i < 2 else TestOutcome.PASSED
        records.append(make_record(f"test_{i}", "A", outcome))
    for i in range(10):
        outcome = TestOutcome.SKIPPED if i == 9 else TestOutcome.PASSED
        records.append(make_record(f"test_{i}", "B", outcome))
    return records
