from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape

from ..core.config import ReportSettings
from ..processors.aggregation import build_collection
from ..processors.markdown_formatter import format_collection, save_markdown_report
from ..processors.parse_runs import parse_runs_from_csv_files
from ..types import FormatMode


logger = logging.getLogger(__name__)


class CLIApplication:
    """Top-level command router."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.parser = argparse.ArgumentParser(
            prog="suite-report",
            description="Summarize test runs from one or more suites as Markdown.",
        )
        subparsers = self.parser.add_subparsers(dest="command", required=True)
        render = subparsers.add_parser(
            "render",
            help="Aggregate test runs and render a Markdown report.",
        )
        render.add_argument(
            "csv_paths",
            nargs="+",
            help="CSV exports with test_name and outcome columns (plus optional suite, class_name, "
            "method_name, run_name, exception_message, stack_trace, stdout, stderr).",
        )
        render.add_argument("--title", help="Report heading.")
        render.add_argument(
            "--mode",
            choices=[mode.value for mode in FormatMode],
            help="comment renders failing runs in detail, summary only the totals (default: comment).",
        )
        render.add_argument(
            "--output",
            "-o",
            dest="output_path",
            help="Where to write the report (default: print to the terminal).",
        )
        render.add_argument(
            "--max-runs",
            dest="max_runs_per_test",
            type=int,
            help="Maximum failing runs listed per test.",
        )
        render.add_argument("--config", dest="config_path", help="JSON or YAML settings file.")
        render.add_argument(
            "--step-summary",
            action="store_true",
            help="Also append the totals table to $GITHUB_STEP_SUMMARY.",
        )
        render.add_argument(
            "--preview",
            action="store_true",
            help="Render the Markdown in the terminal instead of printing it raw.",
        )
        render.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    def run(self, argv: Sequence[str] | None = None) -> int:
        load_dotenv(Path.cwd() / ".env")
        args = self.parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(message)s",
            handlers=[RichHandler(console=self.console, show_path=False)],
        )
        return RenderCommand(self.console, args).run()


class RenderCommand:
    """Pipeline driver for `suite-report render`."""

    def __init__(self, console: Console, args: argparse.Namespace) -> None:
        self.console = console
        self.args = args
        self.csv_paths = [Path(path).expanduser() for path in args.csv_paths]

    def load_settings(self) -> ReportSettings:
        settings = (
            ReportSettings.from_file(self.args.config_path)
            if self.args.config_path
            else ReportSettings()
        )
        overrides = {
            key: value
            for key, value in {
                "title": self.args.title,
                "mode": FormatMode(self.args.mode) if self.args.mode else None,
                "max_runs_per_test": self.args.max_runs_per_test,
                "output_path": Path(self.args.output_path).expanduser() if self.args.output_path else None,
            }.items()
            if value is not None
        }
        # model_copy skips validation, so revalidate the merged values.
        return ReportSettings.model_validate({**settings.model_dump(), **overrides})

    def run(self) -> int:
        try:
            self.execute()
        except (ValueError, OSError) as exc:
            self.console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
            return 1
        return 0

    def execute(self) -> None:
        settings = self.load_settings()

        records = parse_runs_from_csv_files(self.csv_paths)
        collection = build_collection(records, max_runs_per_test=settings.max_runs_per_test)

        if settings.output_path is not None:
            save_markdown_report(collection, settings.output_path, title=settings.title, mode=settings.mode)
            self.console.print(
                f"Report saved to {settings.output_path}: {len(collection.tests)} unique tests, "
                f"{collection.total} runs, {len(collection.show_tests)} failing",
                style="bold red" if collection.show_tests else "bold green",
                highlight=False,
            )
        else:
            report = format_collection(collection, title=settings.title, mode=settings.mode)
            if self.args.preview:
                self.console.print(Markdown(report))
            else:
                self.console.print(report, markup=False, emoji=False, highlight=False, soft_wrap=True, end="")

        if self.args.step_summary:
            if settings.step_summary_path is None:
                logger.warning("--step-summary given but GITHUB_STEP_SUMMARY is not set")
            else:
                save_markdown_report(
                    collection,
                    settings.step_summary_path,
                    title=settings.title,
                    mode=FormatMode.SUMMARY,
                    append=True,
                )