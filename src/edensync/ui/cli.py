# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING, NoReturn

from dotenv import load_dotenv

from edensync.app import TimelineReport, show_timeline
from edensync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from edensync.domain.model import Throw

log = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise ValueError(message)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(prog="edensync", description="Reconcile Eden Pods throws and harvests")
    subparsers = parser.add_subparsers(dest="command", required=True)

    timeline = subparsers.add_parser("timeline", help="Show the unified throw timeline")
    timeline.add_argument("--owner", type=str, required=True, help="Owner ledger address")
    timeline.add_argument(
        "--watch",
        type=float,
        default=None,
        help="Keep polling the ledger for this many seconds before printing",
    )
    timeline.add_argument("--verbose", action="store_true", help="Enable debug logging")

    stages = subparsers.add_parser("stages", help="Show growth stages of confirmed throws")
    stages.add_argument("--owner", type=str, required=True, help="Owner ledger address")
    stages.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(list(argv))
    watch = getattr(args, "watch", None)
    if watch is not None and watch < 0:
        raise ValueError("--watch must be non-negative")
    if not args.owner.strip():
        raise ValueError("--owner must not be empty")
    return args


def _format_throw(throw: Throw) -> str:
    status = "pending" if throw.is_pending else f"#{throw.ledger_id}"
    return (
        f"{throw.thrown_at:%Y-%m-%d %H:%M} {throw.pod_type_icon} {throw.pod_type_name} "
        f"@ {throw.location_label or '-'} [{status}]"
    )


def _print_timeline(report: TimelineReport) -> None:
    summary = report.summary
    dominant = summary.dominant_stage.name if summary.dominant_stage else "-"
    print(
        f"{report.owner_key}: {summary.total} throw(s), {summary.pending} pending, "
        f"{summary.harvestable} harvestable, mostly {dominant}, {len(report.harvests)} harvest(s)"
    )
    for throw in report.timeline:
        print(f"  {_format_throw(throw)}")
    if report.error:
        print(f"warning: {report.error}")


def _print_stages(report: TimelineReport) -> None:
    for reading in report.stages:
        marker = " *" if reading.is_harvestable else ""
        print(
            f"#{reading.ledger_id} {reading.stage.icon} {reading.stage.name} "
            f"{reading.progress_percent}% (day {reading.days_since}){marker}"
        )
    if report.error:
        print(f"warning: {report.error}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "timeline":
            report = show_timeline(parsed_args.owner.strip(), watch_seconds=parsed_args.watch)
            _print_timeline(report)
        elif parsed_args.command == "stages":
            report = show_timeline(parsed_args.owner.strip())
            _print_stages(report)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
