from .test import (
    RunRecord,
    Test,
    TestOutcome,
    TestRun,
)

from .suite import (
    TestSuiteRun
)

from .collection import (
    FormatMode,
    ShowReason,
    ShownRun,
    ShownTest,
    TestResultCollection,
)

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
]
