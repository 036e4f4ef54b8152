"""Configuration management for suite-report."""

import json
from pathlib import Path
from typing import Optional

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..types import FormatMode


class ReportSettings(BaseSettings):
    """Report configuration.

    Loads from environment variables automatically:
        SUITE_REPORT_TITLE, SUITE_REPORT_MODE, SUITE_REPORT_MAX_RUNS_PER_TEST,
        SUITE_REPORT_OUTPUT_PATH, GITHUB_STEP_SUMMARY

    Or from a JSON/YAML file with ``from_file``.
    """

    title: Optional[str] = Field(default=None, description="Report heading")
    mode: FormatMode = Field(default=FormatMode.COMMENT, description="Render mode (comment/summary)")
    max_runs_per_test: Optional[int] = Field(
        default=None, ge=1, description="Cap on failing runs listed per test, unlimited when unset"
    )
    output_path: Optional[Path] = Field(default=None, description="Where to write the report")
    step_summary_path: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("step_summary_path", "GITHUB_STEP_SUMMARY"),
        description="CI job summary file the summary table is appended to",
    )

    model_config = SettingsConfigDict(
        env_prefix="SUITE_REPORT_",
        case_sensitive=False,
        extra="forbid",
    )

    @classmethod
    def from_file(cls, config_path: str) -> "ReportSettings":
        """Load configuration from file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in [".yaml", ".yml"]:
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        return cls(**data)

    def save(self, config_path: str) -> None:
        """Save configuration to file."""
        path = Path(config_path)
        data = self.model_dump(mode="json", exclude_none=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in [".yaml", ".yml"]:
                yaml.dump(data, f, default_flow_style=False, indent=2)
            else:
                json.dump(data, f, indent=2)
