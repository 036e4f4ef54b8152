"""Processors for stateless data transformations."""

from .aggregation import build_collection, collapse_outcomes, count_outcomes
from .markdown_formatter import format_collection, save_markdown_report
from .parse_runs import parse_runs_from_csv, parse_runs_from_csv_files
from .selection import classify_runs, select_shown_tests

__all__ = [
    "build_collection",
    "classify_runs",
    "collapse_outcomes",
    "count_outcomes",
    "format_collection",
    "parse_runs_from_csv",
    "parse_runs_from_csv_files",
    "save_markdown_report",
    "select_shown_tests",
]
