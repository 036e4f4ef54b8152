"""Markdown formatter for test result collections."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union

from ..types import (
    FormatMode,
    ShowReason,
    ShownRun,
    ShownTest,
    TestOutcome,
    TestResultCollection,
)


_REASON_TEXT: dict[ShowReason, str] = {
    ShowReason.NONE: "???",
    ShowReason.FAILING_ALWAYS: "this test is always failing",
    ShowReason.FAILING_SOMETIMES: "this test is sometimes failing",
    ShowReason.ERRORED: "this test errored in at least one run",
}

_BACKTICK_RUN = re.compile(r"`+")


def format_collection(
    collection: TestResultCollection,
    title: Optional[str] = None,
    mode: FormatMode = FormatMode.COMMENT,
) -> str:
    """
    Format a test result collection into markdown.

    Structure: title > totals table > failing runs (comment mode only)

    Args:
        collection: Aggregated test results
        title: Optional top-level heading, skipped when blank
        mode: ``FormatMode.SUMMARY`` renders the totals table only

    Returns:
        Markdown formatted string
    """
    mode = FormatMode(mode)
    lines: list[str] = []

    if title and title.strip():
        lines.append(f"# {title}")
        lines.append("")

    lines.extend(_format_totals_table(collection))
    lines.append("")

    if mode is not FormatMode.SUMMARY:
        lines.append(f"### Failing{' or Erroring' if collection.has_errors else ''} runs")
        lines.append("")
        for shown_test in collection.show_tests:
            lines.extend(_format_shown_test(shown_test))

    return "\n".join(lines) + "\n"


def _format_totals_table(collection: TestResultCollection) -> list[str]:
    """Unique and Total rows; the Errored column only appears when something errored."""
    unique = collection.aggregate_run
    header = ["", "Total", "Skipped", "Passed", "Failed"]
    unique_row = ["Unique", unique.total, unique.skipped, unique.passed, unique.failed]
    total_row = [
        "Total",
        collection.total,
        collection.skipped,
        collection.passed,
        collection.failed,
    ]
    if collection.has_errors:
        header.append("Errored")
        unique_row.append(unique.errored)
        total_row.append(collection.errored)

    return [
        _table_row(header),
        _table_row(["---:"] * len(header)),
        _table_row(unique_row),
        _table_row(total_row),
    ]


def _table_row(cells: list) -> str:
    return "| " + " | ".join(str(cell) for cell in cells) + " |"


def _format_shown_test(shown_test: ShownTest) -> list[str]:
    """Format a single shown test as a collapsible section."""
    test = shown_test.test
    lines = [f"<details><summary>❌ {_code(test.name)}</summary>", ""]

    if test.class_name is not None:
        lines.append(f"<sub>Class Name: {_code(test.class_name)}</sub>")
    if test.method_name is not None:
        lines.append(f"<sub>Method Name: {_code(test.method_name)}</sub>")

    lines.append(f"<sub>*This test is shown because {_reason_text(shown_test.reason)}.*</sub>")
    lines.append("")

    for shown_run in shown_test.runs:
        lines.extend(_format_run(shown_run))

    if shown_test.has_hidden_notable_runs:
        lines.append("<sub>*More failing runs of this test are not shown.*</sub>")
        lines.append("")

    lines.append("</details>")
    lines.append("")
    return lines


def _reason_text(reason: ShowReason) -> str:
    if reason in _REASON_TEXT:
        return _REASON_TEXT[reason]
    # Unknown reasons are rendered literally.
    return str(getattr(reason, "value", reason))


def _outcome_marker(outcome: TestOutcome) -> str:
    if outcome is TestOutcome.ERROR:
        return "❗"
    if outcome is TestOutcome.FAILED:
        return "❌"
    return f"❓ ({getattr(outcome, 'value', outcome)})"


def _format_run(shown_run: ShownRun) -> list[str]:
    run = shown_run.run
    lines = [
        f"<details><summary>{_outcome_marker(run.outcome)} {_code(shown_run.run_suite)} {_code(run.name)}</summary>",
        "",
    ]

    if shown_run.suites:
        lines.append(f"<sub>*Also in {_join_suites(shown_run.suites)}.*</sub>")
        lines.append("")

    if run.exception_message is not None:
        lines.append("Exception message:")
        lines.extend(_fenced(run.exception_message))
        lines.append("")

    if run.exception_stack_trace is not None:
        lines.append("Stack trace:")
        lines.extend(_fenced(run.exception_stack_trace))
        lines.append("")

    if run.stdout is not None:
        lines.extend(_collapsible_output("Test Standard Output", run.stdout))

    if run.stderr is not None:
        lines.extend(_collapsible_output("Test Standard Error", run.stderr))

    lines.append("</details>")
    lines.append("")
    return lines


def _join_suites(suites: tuple[str, ...]) -> str:
    """`a`; `a` and `b`; `a`, `b`, and `c`."""
    quoted = [_code(suite) for suite in suites]
    if len(quoted) == 1:
        return quoted[0]
    if len(quoted) == 2:
        return f"{quoted[0]} and {quoted[1]}"
    return ", ".join(quoted[:-1]) + f", and {quoted[-1]}"


def _longest_backtick_run(text: str) -> int:
    return max((len(m.group()) for m in _BACKTICK_RUN.finditer(text)), default=0)


def _code(text: str) -> str:
    """Inline code span whose delimiter is longer than any backtick run in text."""
    delimiter = "`" * (_longest_backtick_run(text) + 1)
    if text.startswith("`") or text.endswith("`"):
        text = f" {text} "
    return f"{delimiter}{text}{delimiter}"


def _fenced(text: str) -> list[str]:
    """Wrap text in a code fence longer than any backtick run it contains."""
    fence = "`" * max(3, _longest_backtick_run(text) + 1)
    return [fence, text, fence]


def _collapsible_output(summary: str, text: str) -> list[str]:
    return [f"<details><summary>{summary}</summary>", "", *_fenced(text), "", "</details>", ""]


def save_markdown_report(
    collection: TestResultCollection,
    output_path: Union[str, Path],
    title: Optional[str] = None,
    mode: FormatMode = FormatMode.COMMENT,
    append: bool = False,
) -> str:
    """
    Render a collection and save it to a markdown file.

    Args:
        collection: Aggregated test results
        output_path: Path to save the markdown file
        title: Optional report heading
        mode: Render mode
        append: Append to the file instead of replacing it, as CI job
            summary files expect

    Returns:
        The rendered markdown
    """
    markdown_content = format_collection(collection, title=title, mode=mode)

    with open(output_path, "a" if append else "w", encoding="utf-8") as f:
        f.write(markdown_content)

    return markdown_content
