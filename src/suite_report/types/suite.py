"""Suite-level run statistics."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TestSuiteRun(BaseModel):
    """Counts for one execution of one suite.

    ``skipped`` and ``other`` are derived so that
    ``passed + failed + errored + other == executed <= total`` always holds.
    """

    __test__ = False  # Prevent pytest from collecting this as a test class

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Suite name, e.g. a platform or CI job")
    total: int = Field(0, ge=0)
    executed: int = Field(0, ge=0, description="Runs that were not skipped")
    passed: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)
    errored: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_counts(self) -> "TestSuiteRun":
        if self.executed > self.total:
            raise ValueError(f"executed ({self.executed}) exceeds total ({self.total})")
        if self.passed + self.failed + self.errored > self.executed:
            raise ValueError(
                f"passed + failed + errored ({self.passed + self.failed + self.errored}) "
                f"exceeds executed ({self.executed})"
            )
        return self

    @property
    def skipped(self) -> int:
        return self.total - self.executed

    @property
    def other(self) -> int:
        return self.executed - self.passed - self.failed - self.errored
