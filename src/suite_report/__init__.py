"""
suite-report - summarize test runs from one or more suites as Markdown.

Runs are aggregated into unique-test and per-run statistics, failing tests are
selected in a stable order, and the result is rendered as a pull-request
comment or a CI job summary.
"""

import sys

from .processors import build_collection, format_collection, save_markdown_report
from .types import (
    FormatMode,
    RunRecord,
    ShowReason,
    ShownRun,
    ShownTest,
    Test,
    TestOutcome,
    TestResultCollection,
    TestRun,
    TestSuiteRun,
)

__version__ = "1.0.0"

__all__ = [
    "FormatMode",
    "RunRecord",
    "ShowReason",
    "ShownRun",
    "ShownTest",
    "Test",
    "TestOutcome",
    "TestResultCollection",
    "TestRun",
    "TestSuiteRun",
    "build_collection",
    "format_collection",
    "main",
    "save_markdown_report",
]


def main() -> None:
    from .interface.cli import CLIApplication

    sys.exit(CLIApplication().run())
