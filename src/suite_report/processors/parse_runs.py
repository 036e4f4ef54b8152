import csv
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from ..types import RunRecord, Test, TestOutcome, TestRun


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"test_name", "outcome"}


def _cell(row: dict, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None or value == "":
        return None
    return value


def parse_runs_from_csv(
    path_to_csv: Union[str, Path], default_suite: Optional[str] = None
) -> list[RunRecord]:
    """Parse a CSV export of test runs into run records.

    Rows without a ``suite`` value belong to ``default_suite``, or to a suite
    named after the file when no default is given.
    """
    path = Path(path_to_csv)
    fallback_suite = default_suite or path.stem

    with open(path, newline="", encoding="utf-8") as source:
        reader = csv.DictReader(source)
        missing = REQUIRED_COLUMNS.difference(reader.fieldnames or {})
        if missing:
            raise ValueError(f"{path}: CSV missing columns: {', '.join(sorted(missing))}")

        records: list[RunRecord] = []

        for row in reader:
            test_name = (row["test_name"] or "").strip()
            if not test_name:
                raise ValueError(f"{path}:{reader.line_num}: empty test_name")

            test = Test(
                name=test_name,
                class_name=_cell(row, "class_name"),
                method_name=_cell(row, "method_name"),
            )
            run = TestRun(
                name=_cell(row, "run_name") or test_name,
                outcome=TestOutcome(row["outcome"] or ""),
                exception_message=_cell(row, "exception_message"),
                exception_stack_trace=_cell(row, "stack_trace"),
                stdout=_cell(row, "stdout"),
                stderr=_cell(row, "stderr"),
            )
            records.append(RunRecord(test, _cell(row, "suite") or fallback_suite, run))

    logger.debug("Parsed %d runs from %s", len(records), path)
    return records


def parse_runs_from_csv_files(paths: Iterable[Union[str, Path]]) -> list[RunRecord]:
    """Parse several CSV exports, keeping file order."""
    records: list[RunRecord] = []
    for path in paths:
        records.extend(parse_runs_from_csv(path))
    return records
