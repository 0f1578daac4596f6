"""Command-line entry for plantcare_lite.

Prints the care schedule of a week or month from a plants/tasks data file.
"""

from __future__ import annotations

import argparse
import datetime
import sys
from typing import NoReturn, TextIO

from .calendar_windows import month_window, week_window
from .care_exceptions import CareDataError, ConfigError
from .care_loader import load_care_data
from .care_models import TimeSlot
from .clock import now_local
from .config_loader import load_config
from .lite_logging import configure_lite_logging
from .occurrence_aggregator import CareSchedule, build_schedule

_SLOT_TITLES = {
    TimeSlot.ALL_DAY: "All day",
    TimeSlot.DAYTIME: "Day",
    TimeSlot.NIGHTTIME: "Night",
}


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for plantcare_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="plantcare_lite",
        description="plantcare_lite - print the care calendar for a week or month",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m plantcare_lite plants.yaml                      # This week
  python -m plantcare_lite plants.json --view month         # This month
  python -m plantcare_lite plants.yaml --date 2024-01-10 --plant p1
        """,
    )
    parser.add_argument("data_file", help="YAML or JSON file with plants and care tasks")
    parser.add_argument("--view", choices=("week", "month"), help="Range to display (default from config)")
    parser.add_argument(
        "--date",
        type=datetime.date.fromisoformat,
        metavar="YYYY-MM-DD",
        help="Any day inside the range to display (default: today)",
    )
    parser.add_argument(
        "--plant",
        action="append",
        dest="plant_ids",
        metavar="PLANT_ID",
        help="Only show tasks of this plant (repeatable)",
    )
    parser.add_argument("--config", metavar="PATH", help="Path to plantcare.yaml")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def render_schedule(schedule: CareSchedule, out: TextIO) -> None:
    """Write a plain-text rendering of the schedule, one block per day."""
    out.write(f"Care schedule {schedule.range_start:%Y-%m-%d} - {schedule.range_end:%Y-%m-%d}\n")
    for day in schedule.days():
        slots = schedule.occurrences_by_slot(day)
        if not any(slots.values()):
            continue
        out.write(f"\n{day:%a %Y-%m-%d}\n")
        for slot, occurrences in slots.items():
            for occurrence in occurrences:
                when = "--:--" if occurrence.is_all_day else f"{occurrence.occurrence_datetime:%H:%M}"
                out.write(
                    f"  [{_SLOT_TITLES[slot]:<7}] {when}  {occurrence.plant_name}: {occurrence.task_name}\n"
                )
    if schedule.truncated_task_ids:
        out.write(f"\nWarning: results may be incomplete for tasks {sorted(schedule.truncated_task_ids)}\n")


def run(args: argparse.Namespace, out: TextIO | None = None) -> int:
    """Execute the CLI for parsed arguments and return the exit code."""
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"plantcare_lite: {exc}", file=sys.stderr)
        return 2

    configure_lite_logging(debug_mode=args.debug, log_level=config.log_level)
    try:
        data = load_care_data(args.data_file)
    except CareDataError as exc:
        print(f"plantcare_lite: {exc}", file=sys.stderr)
        return 2

    reference = args.date or now_local().date()
    view = args.view or config.default_view
    if view == "month":
        range_start, range_end = month_window(reference)
    else:
        range_start, range_end = week_window(reference, config.week_starts_on)

    schedule = build_schedule(
        data.rules,
        data.plants,
        range_start,
        range_end,
        plant_ids=args.plant_ids,
        settings=config,
    )
    render_schedule(schedule, out or sys.stdout)
    return 0


def main() -> NoReturn:
    """Run the plantcare_lite CLI."""
    parser = _create_parser()
    sys.exit(run(parser.parse_args()))


if __name__ == "__main__":
    main()
