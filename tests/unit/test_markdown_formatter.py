"""Unit tests for markdown formatter processor."""

import pytest

from suite_report.processors.aggregation import build_collection, count_outcomes
from suite_report.processors.markdown_formatter import (
    _join_suites,
    format_collection,
    save_markdown_report,
)
from suite_report.types import (
    FormatMode,
    ShowReason,
    ShownRun,
    ShownTest,
    Test,
    TestOutcome,
    TestResultCollection,
    TestRun,
)


@pytest.fixture
def failing_collection(record):
    return build_collection([record("Foo", "A", TestOutcome.FAILED, exception_message="boom")])


@pytest.fixture
def erroring_collection(record):
    return build_collection(
        [
            record(
                "Foo",
                "A",
                TestOutcome.ERROR,
                exception_message="NullReferenceException",
                exception_stack_trace="at Foo() line 12",
                stdout="starting\ndone",
                stderr="warning: flaky",
            ),
            record("Foo", "B", TestOutcome.PASSED),
            record("Bar", "A", TestOutcome.PASSED),
        ]
    )


def test_summary_mode_exact_output(failing_collection):
    markdown = format_collection(failing_collection, title="Results", mode=FormatMode.SUMMARY)

    assert markdown == (
        "# Results\n"
        "\n"
        "|  | Total | Skipped | Passed | Failed |\n"
        "| ---: | ---: | ---: | ---: | ---: |\n"
        "| Unique | 1 | 0 | 0 | 1 |\n"
        "| Total | 1 | 0 | 0 | 1 |\n"
        "\n"
    )


def test_comment_mode_exact_output(failing_collection):
    markdown = format_collection(failing_collection, title="Results", mode=FormatMode.COMMENT)

    assert markdown == (
        "# Results\n"
        "\n"
        "|  | Total | Skipped | Passed | Failed |\n"
        "| ---: | ---: | ---: | ---: | ---: |\n"
        "| Unique | 1 | 0 | 0 | 1 |\n"
        "| Total | 1 | 0 | 0 | 1 |\n"
        "\n"
        "### Failing runs\n"
        "\n"
        "<details><summary>❌ `Foo`</summary>\n"
        "\n"
        "<sub>*This test is shown because this test is always failing.*</sub>\n"
        "\n"
        "<details><summary>❌ `A` `Foo`</summary>\n"
        "\n"
        "Exception message:\n"
        "```\n"
        "boom\n"
        "```\n"
        "\n"
        "</details>\n"
        "\n"
        "</details>\n"
        "\n"
    )


@pytest.mark.parametrize("title", [None, "", "   "])
def test_blank_title_is_omitted(failing_collection, title):
    markdown = format_collection(failing_collection, title=title)

    assert not markdown.startswith("#")
    assert markdown.startswith("|  | Total |")


def test_summary_is_prefix_of_comment(erroring_collection):
    summary = format_collection(erroring_collection, title="CI", mode=FormatMode.SUMMARY)
    comment = format_collection(erroring_collection, title="CI", mode=FormatMode.COMMENT)

    assert comment.startswith(summary)
    assert "###" not in summary
    assert "<details>" not in summary


def test_rendering_is_idempotent(erroring_collection):
    assert format_collection(erroring_collection, "CI") == format_collection(erroring_collection, "CI")


def test_errored_column_only_when_errors_exist(two_suite_records, erroring_collection):
    clean = format_collection(build_collection(two_suite_records))
    errored = format_collection(erroring_collection)

    assert "Errored" not in clean
    assert "| Unique | 10 | 0 | 8 | 2 |\n" in clean
    assert "| Total | 20 | 1 | 17 | 2 |\n" in clean
    assert "### Failing runs" in clean

    assert "|  | Total | Skipped | Passed | Failed | Errored |\n" in errored
    assert "| ---: | ---: | ---: | ---: | ---: | ---: |\n" in errored
    assert "| Unique | 2 | 0 | 1 | 0 | 1 |\n" in errored
    assert "| Total | 3 | 0 | 2 | 0 | 1 |\n" in errored
    assert "### Failing or Erroring runs" in errored


def test_run_details(erroring_collection):
    markdown = format_collection(erroring_collection)

    assert "<sub>*This test is shown because this test errored in at least one run.*</sub>" in markdown
    assert "<details><summary>❗ `A` `Foo`</summary>" in markdown
    assert "Exception message:\n```\nNullReferenceException\n```" in markdown
    assert "Stack trace:\n```\nat Foo() line 12\n```" in markdown
    assert "<details><summary>Test Standard Output</summary>\n\n```\nstarting\ndone\n```\n\n</details>" in markdown
    assert "<details><summary>Test Standard Error</summary>\n\n```\nwarning: flaky\n```\n\n</details>" in markdown
    assert "`Bar`" not in markdown


def test_absent_fields_are_omitted(record):
    markdown = format_collection(build_collection([record("Foo", "A", TestOutcome.FAILED)]))

    assert "Exception message" not in markdown
    assert "Stack trace" not in markdown
    assert "Standard Output" not in markdown
    assert "Standard Error" not in markdown
    assert "Also in" not in markdown
    assert "Class Name" not in markdown


def test_class_and_method_names(record):
    failing = record("Foo", "A", TestOutcome.FAILED)
    failing = failing._replace(
        test=Test(name="Foo", class_name="Acme.FooTests", method_name="Foo")
    )

    markdown = format_collection(build_collection([failing]))

    assert "<sub>Class Name: `Acme.FooTests`</sub>" in markdown
    assert "<sub>Method Name: `Foo`</sub>" in markdown


def test_sometimes_failing_text(two_suite_records):
    markdown = format_collection(build_collection(two_suite_records))

    assert markdown.count("this test is sometimes failing") == 2
    assert "Also in" not in markdown


def test_also_in_clause(record):
    collection = build_collection(
        [record("Foo", suite, TestOutcome.FAILED) for suite in ("A", "B", "C")]
    )

    assert "<sub>*Also in `B` and `C`.*</sub>" in format_collection(collection)


def test_join_suites():
    assert _join_suites(("a",)) == "`a`"
    assert _join_suites(("a", "b")) == "`a` and `b`"
    assert _join_suites(("a", "b", "c")) == "`a`, `b`, and `c`"


def test_fence_outgrows_backticks_in_content(record):
    message = "expected:\n```\nfoo\n```"
    collection = build_collection(
        [record("Foo", "A", TestOutcome.FAILED, exception_message=message)]
    )

    assert f"Exception message:\n````\n{message}\n````" in format_collection(collection)


def test_content_is_not_interpreted(record):
    message = "<script>alert(1)</script> **bold** # heading"
    collection = build_collection(
        [record("Foo", "A", TestOutcome.FAILED, exception_message=message)]
    )

    assert f"```\n{message}\n```" in format_collection(collection)


def test_hidden_runs_note(record):
    collection = build_collection(
        [record("Foo", "A", TestOutcome.FAILED, run_name=f"Foo({i})") for i in range(3)],
        max_runs_per_test=1,
    )

    markdown = format_collection(collection)

    assert markdown.count("<details><summary>❌ `A`") == 1
    assert "More failing runs of this test are not shown." in markdown


def test_fallback_reason_and_marker():
    test = Test(name="Foo")
    collection = TestResultCollection(
        tests=(test,),
        test_suite_runs=(),
        aggregate_run=count_outcomes("Unique", []),
        show_tests=(
            ShownTest(
                reason=ShowReason.NONE,
                test=test,
                runs=(ShownRun(TestRun(name="Foo", outcome=TestOutcome.SKIPPED), "A"),),
            ),
        ),
    )

    markdown = format_collection(collection)

    assert "<sub>*This test is shown because ???.*</sub>" in markdown
    assert "<details><summary>❓ (skipped) `A` `Foo`</summary>" in markdown


def test_save_markdown_report(failing_collection, tmp_path):
    output_path = tmp_path / "report.md"

    content = save_markdown_report(failing_collection, output_path, title="Results")
    save_markdown_report(failing_collection, output_path, mode=FormatMode.SUMMARY, append=True)

    written = output_path.read_text(encoding="utf-8")
    assert written.startswith(content)
    assert written.count("| Unique |") == 2


def test_unrecognized_outcome_is_reported(record):
    collection = build_collection(
        [
            record("Timeout", "A", TestOutcome.OTHER, exception_message="timed out"),
            record("Timeout", "B", TestOutcome.PASSED),
        ]
    )

    markdown = format_collection(collection)

    assert "<details><summary>❌ `Timeout`</summary>" in markdown
    assert "<sub>*This test is shown because this test is sometimes failing.*</sub>" in markdown
    assert "<details><summary>❓ (other) `A` `Timeout`</summary>" in markdown
    assert "Exception message:\n```\ntimed out\n```" in markdown


def test_mode_accepts_plain_strings(erroring_collection):
    assert format_collection(erroring_collection, mode="summary") == format_collection(
        erroring_collection, mode=FormatMode.SUMMARY
    )
    assert "### Failing or Erroring runs" in format_collection(erroring_collection, mode="comment")


def test_names_with_backticks_keep_code_spans_intact(record):
    failing = record("Parses `x`", "suite`1", TestOutcome.FAILED, run_name="Parses ``y``")
    failing = failing._replace(
        test=Test(name="Parses `x`", class_name="`Quoted`", method_name="Parses")
    )
    collection = build_collection(
        [failing, record("Parses `x`", "B", TestOutcome.FAILED, run_name="Parses ``y``")]
    )

    markdown = format_collection(collection)

    assert "<details><summary>❌ `` Parses `x` ``</summary>" in markdown
    assert "<sub>Class Name: `` `Quoted` ``</sub>" in markdown
    assert "<sub>Method Name: `Parses`</sub>" in markdown
    assert "<details><summary>❌ ``suite`1`` ``` Parses ``y`` ```</summary>" in markdown
    assert "<sub>*Also in `B`.*</sub>" in markdown
