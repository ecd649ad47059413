"""
Command-line entry point for notebulk
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

import aiofiles
from rich.console import Console
from rich.table import Table

from notebulk import __version__
from notebulk.config import get_settings
from notebulk.jobs import (
    BatchRunner,
    JobConfigState,
    JobConfigurationError,
    ParameterId,
    RunReport,
    build_report,
    summarize_user,
)
from notebulk.notes import NOTE_TYPES, find_note_type, split_by_notes
from notebulk.search import MatchMode
from notebulk.store import JsonUserStore
from notebulk.utils import get_logger, setup_logging

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notebulk",
        description="Search, modify or delete notes across many user records.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--users-dir", type=Path, help="Directory of <primary_id>.json records"
    )
    parser.add_argument("--ids", nargs="*", help="Only process these user ids")
    parser.add_argument("--set-id", help="Set identity recorded in the report")
    parser.add_argument(
        "--action", choices=["modify", "delete"], required=True, help="Job action"
    )

    search = parser.add_argument_group("search")
    search.add_argument("--text", help="Text to search for in notes")
    search.add_argument("--case-sensitive", action="store_true")
    search.add_argument(
        "--match-mode",
        choices=[mode.value for mode in MatchMode],
        default=MatchMode.SUBSTRING.value,
    )
    search.add_argument(
        "--keep-accents",
        action="store_true",
        help="Treat accented and unaccented letters as different",
    )
    search.add_argument("--start-date", help="First day, YYYY-MM-DD")
    search.add_argument("--end-date", help="Last day, YYYY-MM-DD")
    search.add_argument(
        "--creator", action="append", help="Note creator (repeatable)"
    )
    search.add_argument("--locale", help="Locale used for case folding")

    modify = parser.add_argument_group("modification")
    popup = modify.add_mutually_exclusive_group()
    popup.add_argument("--make-popup", action="store_true")
    popup.add_argument("--disable-popup", action="store_true")
    modify.add_argument("--user-viewable", choices=["true", "false"])
    modify.add_argument(
        "--note-type", choices=[note_type.value for note_type in NOTE_TYPES]
    )

    parser.add_argument("--report", type=Path, help="Write the run report as JSON")
    parser.add_argument(
        "--save-report",
        action="store_true",
        help="Write the run report into the configured report directory",
    )
    return parser


def configure_job(args: argparse.Namespace, state: JobConfigState) -> None:
    """Translate command-line options into job parameters."""
    state.choose_option(args.action)

    if args.text is not None:
        state.add_parameter(
            ParameterId.TEXT_SEARCH,
            {
                "text": args.text,
                "case_sensitive": args.case_sensitive,
                "match_mode": args.match_mode,
                "ignore_accents": not args.keep_accents,
            },
        )
    if args.start_date or args.end_date:
        state.add_parameter(
            ParameterId.DATE_RANGE,
            {"start_date": args.start_date, "end_date": args.end_date},
        )
    if args.creator:
        state.add_parameter(
            ParameterId.CREATOR_SEARCH, {"selected_creators": args.creator}
        )

    # The state rejects these for the delete action
    if args.make_popup or args.disable_popup:
        state.add_parameter(
            ParameterId.POPUP_SETTINGS,
            {"make_popup": args.make_popup, "disable_popup": args.disable_popup},
        )
    if args.user_viewable is not None:
        state.add_parameter(
            ParameterId.USER_VIEWABLE,
            {"make_user_viewable": args.user_viewable == "true"},
        )
    if args.note_type:
        state.add_parameter(ParameterId.NOTE_TYPE, find_note_type(args.note_type))


def print_report(report: RunReport) -> None:
    summary = report.summary
    table = Table(title="Note processing results")
    table.add_column("User")
    table.add_column("Action")
    table.add_column("Notes", justify="right")
    table.add_column("Changes")
    table.add_column("Update")

    for log in report.logs:
        if not log.modified:
            continue
        user_summary = summarize_user(log)
        if log.update_error:
            update = f"failed: {log.update_error}"
        else:
            update = "ok" if log.update_successful else "-"
        table.add_row(
            log.user_id,
            user_summary.action,
            str(user_summary.note_count),
            ", ".join(user_summary.modifications),
            update,
        )

    console.print(table)
    console.print(
        f"Processed {summary.total_users_processed} users, "
        f"{summary.users_with_changes} with changes, "
        f"{summary.successful_updates} updated, {summary.total_errors} errors."
    )


async def write_report(report: RunReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(report.model_dump_json(indent=2))


async def run_job(args: argparse.Namespace) -> int:
    """Load records, validate the job, run it and report. Returns an exit code."""
    logger = get_logger(__name__)
    store = JsonUserStore(args.users_dir or get_settings().users_dir)

    users = await store.load_users(args.ids or None)
    with_notes, without_notes = split_by_notes(users)
    logger.info(
        "Records ready",
        users_with_notes=len(with_notes),
        users_without_notes=len(without_notes),
    )

    state = JobConfigState()
    try:
        configure_job(args, state)
        plan = state.build_job(len(users), locale=args.locale)
    except JobConfigurationError as e:
        console.print("[red]The job cannot run:[/red]")
        for reason in e.reasons:
            console.print(f"  - {reason.message}")
        if not e.reasons:
            console.print(f"  - {e}")
        return 2

    state.mark_executed()
    runner = BatchRunner()
    await runner.run(users, plan.criteria, plan.options, store.persist)

    report = build_report(runner, configuration=plan.configuration, set_id=args.set_id)
    print_report(report)
    report_path = args.report
    if report_path is None and args.save_report:
        stamp = report.start_time or datetime.now()
        report_path = get_settings().report_dir / f"run-{stamp:%Y%m%d-%H%M%S}.json"
    if report_path is not None:
        await write_report(report, report_path)
        logger.info("Report written", path=str(report_path))

    return 1 if report.summary.total_errors else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging()
    return asyncio.run(run_job(args))


if __name__ == "__main__":
    sys.exit(main())
