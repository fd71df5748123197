"""Command-line interface for the shiftroster scheduling tool."""

import argparse
import logging
import sys
from datetime import date
from typing import Optional

from shiftroster.config import (
    ConfigError,
    load_roster,
    load_rule_set,
    rule_set_to_json,
    save_rule_set,
)
from shiftroster.domain.calendar import first_of_month, previous_month
from shiftroster.domain.models import Schedule, ScheduleHistory, ScheduleRuleSet, StaffMember
from shiftroster.domain.presets import RULE_PRESETS, create_sample_roster, get_preset
from shiftroster.logging_config import setup_logging
from shiftroster.output.pdf_generator import PDFGenerator
from shiftroster.output.text_generator import TextGenerator
from shiftroster.scheduling.eligibility import can_assign
from shiftroster.scheduling.scheduler import MonthlyScheduler
from shiftroster.scheduling.statistics import compute_stats, fairness_metrics
from shiftroster.validation.rules import RuleSetError
from shiftroster.validation.validator import ScheduleValidator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_CONFIG = 2


def _load_rules(args: argparse.Namespace) -> ScheduleRuleSet:
    if getattr(args, "rules", None):
        return load_rule_set(args.rules)
    return get_preset(args.preset)


def _load_roster(args: argparse.Namespace) -> list[StaffMember]:
    if args.roster:
        return load_roster(args.roster)
    return create_sample_roster(args.count)


def print_schedule_summary(schedule: Schedule, history: ScheduleHistory) -> None:
    """Print statistics and validation results for one month."""
    stats = compute_stats(schedule.staff, schedule.shifts, schedule.rules, schedule.month)
    metrics = fairness_metrics(stats, schedule.rules)
    labels = [st.short_label for st in schedule.rules.shift_types]

    print(f"\n{'=' * 60}")
    print(f"Schedule: {schedule.month.strftime('%B %Y')} ({schedule.month_key})")
    print(f"{'=' * 60}")
    print(f"  Staff: {len(schedule.staff)}")
    print(f"  Shift Instances: {len(schedule.shifts)}")
    print(f"  Understaffed Shifts: {len(schedule.understaffed_shifts())}")

    print(f"\nStaff Statistics:")
    for s in stats:
        counts = ", ".join(f"{label}={s.shift_counts.get(i, 0)}" for i, label in enumerate(labels))
        print(
            f"  {s.staff_name} ({s.staff_id}): {s.total_shifts} shifts [{counts}], "
            f"{s.total_hours:.0f}h, {s.average_hours_per_week:.1f}h/week, "
            f"streak {s.consecutive_shift_streak}"
        )

    print(f"\nFairness Metrics:")
    print(f"  Avg Hours: {metrics.avg_hours:.1f}")
    print(f"  Std Dev: {metrics.hours_std_dev:.1f}")
    print(f"  Range: {metrics.min_hours:.1f} - {metrics.max_hours:.1f}")
    print(f"  Fairness Score: {metrics.fairness_score:.1f}/100")

    result = ScheduleValidator().validate(schedule, history)
    if result.is_valid:
        print(f"\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:3]:
            print(f"    - {warning}")
        if len(result.warnings) > 3:
            print(f"    ... and {len(result.warnings) - 3} more warnings")


def run_generate(args: argparse.Namespace) -> int:
    rules = _load_rules(args)
    roster = _load_roster(args)
    start = date(args.year, args.month, 1)

    print(f"Generating {args.months} month(s) from {start.strftime('%B %Y')} "
          f"for {len(roster)} staff...")

    scheduler = MonthlyScheduler(roster, rules)
    schedules = scheduler.generate_range(start, args.months)
    for schedule in schedules:
        print_schedule_summary(schedule, scheduler.history)

    last = schedules[-1]
    if args.text:
        TextGenerator().generate(last, args.text, scheduler.history)
        print(f"\nText schedule written: {args.text}")
    if args.output:
        print(f"\nGenerating PDF: {args.output}")
        PDFGenerator().generate(last, args.output, scheduler.history)
        print("  PDF created successfully!")
    return EXIT_OK


def run_check(args: argparse.Namespace) -> int:
    rules = _load_rules(args)
    roster = _load_roster(args)
    month = date(args.year, args.month, 1)
    shift_date = date.fromisoformat(args.date)

    if first_of_month(shift_date) != month:
        print(f"Date {shift_date} is not in {month.strftime('%B %Y')}")
        return EXIT_USAGE

    staff = next((s for s in roster if s.id == args.staff), None)
    if staff is None:
        print(f"Unknown staff ID: {args.staff}")
        return EXIT_USAGE

    # Generate the previous month too, so rest rules see across the boundary
    scheduler = MonthlyScheduler(roster, rules)
    previous = scheduler.regenerate(previous_month(month))
    schedule = scheduler.regenerate(month)

    shift = next(
        (s for s in schedule.shifts if s.date == shift_date and s.type_index == args.shift),
        None,
    )
    if shift is None:
        print(f"No shift of type {args.shift} on {shift_date}")
        return EXIT_USAGE

    label = rules.shift_types[shift.type_index].label
    result = can_assign(staff, shift, previous.shifts + schedule.shifts, rules)
    if result.eligible:
        print(f"{staff.name} ({staff.id}) can take {label} on {shift_date}")
    else:
        print(f"{staff.name} ({staff.id}) cannot take {label} on {shift_date}: {result.reason}")
    print(f"  Currently assigned: {', '.join(shift.assigned_staff) or 'nobody'}")
    return EXIT_OK


def run_presets(args: argparse.Namespace) -> int:
    print("Built-in rule presets:")
    for name, factory in RULE_PRESETS.items():
        rules = factory()
        shifts = ", ".join(
            f"{st.label} x{st.required_staff}" for st in rules.shift_types
        )
        print(f"  {name:<22} {rules.target_hours_per_week:g}h/week, "
              f"{rules.shift_duration_hours:g}h shifts: {shifts}")
    return EXIT_OK


def run_export_rules(args: argparse.Namespace) -> int:
    rules = get_preset(args.preset)
    if args.output:
        save_rule_set(rules, args.output)
        print(f"Rules written: {args.output}")
    else:
        print(rule_set_to_json(rules))
    return EXIT_OK


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", "-y", type=int, required=True, help="Calendar year")
    parser.add_argument(
        "--month", "-m",
        type=int,
        required=True,
        choices=range(1, 13),
        metavar="MONTH",
        help="Calendar month (1-12)",
    )
    rules_group = parser.add_mutually_exclusive_group()
    rules_group.add_argument("--rules", "-r", type=str, help="Rule set JSON file")
    rules_group.add_argument(
        "--preset", "-p",
        type=str,
        default="default",
        choices=sorted(RULE_PRESETS),
        help="Built-in rule preset (default: default)",
    )
    roster_group = parser.add_mutually_exclusive_group()
    roster_group.add_argument("--roster", type=str, help="Roster JSON file")
    roster_group.add_argument(
        "--count", "-c",
        type=int,
        default=15,
        help="Number of sample staff to generate (default: 15)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shiftroster",
        description="shiftroster - Monthly Shift Scheduling Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -y 2024 -m 3                  Schedule March 2024 for 15 sample staff
  %(prog)s generate -y 2024 -m 3 --months 3       Schedule March to May
  %(prog)s generate -y 2024 -m 3 -o march.pdf     Generate PDF output
  %(prog)s generate -y 2024 -m 3 --rules r.json --roster staff.json

  %(prog)s check -y 2024 -m 3 --staff S001 --date 2024-03-05 --shift 1
  %(prog)s presets                                List built-in rule presets
  %(prog)s export-rules --preset hospital_standard -o rules.json
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    generate_parser = subparsers.add_parser("generate", help="Generate monthly schedules")
    _add_source_arguments(generate_parser)
    generate_parser.add_argument(
        "--months", "-n",
        type=int,
        default=1,
        help="Number of consecutive months to generate (default: 1)",
    )
    generate_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    generate_parser.add_argument("--text", "-t", type=str, help="Output text file path")

    check_parser = subparsers.add_parser(
        "check",
        help="Explain whether a staff member can take a shift",
    )
    _add_source_arguments(check_parser)
    check_parser.add_argument("--staff", "-s", type=str, required=True, help="Staff ID")
    check_parser.add_argument("--date", "-d", type=str, required=True, help="YYYY-MM-DD")
    check_parser.add_argument("--shift", type=int, required=True, help="Shift type index")

    subparsers.add_parser("presets", help="List built-in rule presets")

    export_parser = subparsers.add_parser("export-rules", help="Export a preset as JSON")
    export_parser.add_argument(
        "--preset", "-p",
        type=str,
        default="default",
        choices=sorted(RULE_PRESETS),
        help="Preset to export (default: default)",
    )
    export_parser.add_argument("--output", "-o", type=str, help="Output JSON file path")

    return parser


COMMANDS = {
    "generate": run_generate,
    "check": run_check,
    "presets": run_presets,
    "export-rules": run_export_rules,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING", args.log_file)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_USAGE

    if getattr(args, "months", 1) < 1:
        print("--months must be at least 1")
        return EXIT_USAGE

    try:
        return handler(args)
    except (ConfigError, RuleSetError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}")
        return EXIT_CONFIG
    except ValueError as exc:
        # Bad --date and similar argument values
        print(f"Error: {exc}")
        return EXIT_USAGE
    except OSError as exc:
        print(f"Error: {exc}")
        return EXIT_CONFIG


if __name__ == "__main__":
    sys.exit(main())
