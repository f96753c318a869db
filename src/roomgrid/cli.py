"""Command-line interface for the room calendar engine."""

import argparse
import logging
import sys
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from pydantic import ValidationError as SettingsError

from roomgrid.config import RoomGridSettings, get_settings
from roomgrid.data.codec import load_snapshot_file, save_snapshot_file
from roomgrid.data.snapshot import CalendarView
from roomgrid.data.source import InMemorySource, OperatingSettings
from roomgrid.domain.models import (
    DateRange,
    ExternalGuest,
    RequesterContext,
    Reservation,
    ReservationStatus,
    Resource,
)
from roomgrid.engine.grid import GridBuilder
from roomgrid.engine.status import room_status
from roomgrid.output.pdf_generator import PDFGenerator
from roomgrid.output.text_generator import TextGenerator
from roomgrid.validation.validator import ReservationValidator

logger = logging.getLogger(__name__)


def create_sample_resources(count: int = 4) -> list[Resource]:
    """Create sample rooms for the demo.

    Args:
        count: Number of rooms to create.
    """
    names = [
        "Everest", "Kilimanjaro", "Matterhorn", "Denali", "Aconcagua",
        "Elbrus", "Vinson", "Olympus", "Fuji", "Etna",
    ]
    amenities = [
        ("projector", "whiteboard"),
        ("video-conference",),
        ("whiteboard",),
        ("projector", "video-conference", "whiteboard"),
    ]

    resources = []
    for i in range(count):
        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name} {i // len(names) + 1}"

        # Some rooms keep their own hours, one is reserved for a company
        opening = 7 if i % 4 == 1 else None
        closing = 20 if i % 4 == 1 else None
        locked = frozenset({"acme"}) if i % 4 == 2 else frozenset()

        resources.append(
            Resource(
                id=f"R{i + 1:02d}",
                name=name,
                capacity=4 + 2 * (i % 5),
                amenities=amenities[i % len(amenities)],
                opening_hour=opening,
                closing_hour=closing,
                locked_to_companies=locked,
            )
        )
    return resources


def create_sample_reservations(
    resources: list[Resource],
    date_range: DateRange,
    tz: tzinfo,
) -> list[Reservation]:
    """Create a week of sample reservations, some misaligned to the hour."""
    # (hour, minute, duration minutes, title)
    patterns = [
        (9, 0, 30, "Standup"),
        (9, 45, 15, "Sync"),
        (10, 30, 90, "Design review"),
        (13, 0, 60, "Lunch & learn"),
        (14, 30, 90, "Planning"),
        (16, 15, 45, "1:1"),
    ]

    reservations = []
    for day_index, day in enumerate(date_range.dates):
        if day.weekday() >= 5:
            continue
        for room_index, resource in enumerate(resources):
            for p_index, (hour, minute, minutes, title) in enumerate(patterns):
                if (day_index + room_index + p_index) % 3 != 0:
                    continue
                start = datetime.combine(day, time(hour, minute), tzinfo=tz)
                status = (
                    ReservationStatus.CANCELLED
                    if (day_index + p_index) % 7 == 6
                    else ReservationStatus.CONFIRMED
                )
                reservations.append(
                    Reservation(
                        id=f"B{len(reservations) + 1:04d}",
                        resource_id=resource.id,
                        user_id=f"U{(room_index + p_index) % 5 + 1:02d}",
                        title=title,
                        start=start,
                        end=start + timedelta(minutes=minutes),
                        status=status,
                        attendees=("team@example.com",),
                        external_guests=(
                            (ExternalGuest(name="Visitor", company="Partner Ltd"),)
                            if title == "Design review"
                            else ()
                        ),
                    )
                )
    return reservations


def _parse_now(value: Optional[str], tz: tzinfo, label: str = "--now") -> datetime:
    if value is None:
        return datetime.now(tz)
    try:
        instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"{label}: invalid ISO 8601 time {value!r}") from exc
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=tz)
    return instant


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"--start: invalid date {value!r} (expected YYYY-MM-DD)") from exc


def _print_grid(view: CalendarView, output_path: Optional[str]) -> None:
    grid = view.grid
    print(TextGenerator().generate_to_string(grid))

    warnings = ReservationValidator().check_snapshot(
        view.snapshot.resources, view.snapshot.reservations
    ).warnings
    if warnings:
        print(f"\nWarnings ({len(warnings)}):")
        for warning in warnings[:5]:
            print(f"    - {warning}")
        if len(warnings) > 5:
            print(f"    ... and {len(warnings) - 5} more warnings")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(grid, output_path)
        print("  PDF created successfully!")


def _calendar_view(
    source: InMemorySource,
    settings: RoomGridSettings,
    company: Optional[str],
    now: datetime,
    start: Optional[str],
    days: Optional[int],
    full_day: bool,
) -> CalendarView:
    tz = settings.tzinfo
    view = CalendarView(
        source,
        requester=RequesterContext(company_id=company),
        tz=tz,
        now_fn=lambda: now,
        builder=GridBuilder(hours_policy=settings.hours_policy()),
        days=days or settings.window_days,
        full_day=full_day,
    )
    if start:
        view.set_range(DateRange(_parse_day(start), view.date_range.days))
    else:
        view.refresh()
    return view


def run_demo(
    settings: RoomGridSettings,
    room_count: int = 4,
    company: Optional[str] = None,
    output_path: Optional[str] = None,
    save_path: Optional[str] = None,
) -> None:
    """Build and print a sample week."""
    tz = settings.tzinfo
    now = datetime.now(tz)
    date_range = DateRange.today(now, settings.window_days)

    resources = create_sample_resources(room_count)
    source = InMemorySource(
        resources=resources,
        reservations=create_sample_reservations(resources, date_range, tz),
        settings=OperatingSettings(opening_hour=8, closing_hour=18),
    )
    print(
        f"Generating demo calendar for {room_count} rooms "
        f"({len(source.reservations)} reservations)...\n"
    )

    if save_path:
        save_snapshot_file(source, save_path)
        print(f"Snapshot saved to {save_path}\n")

    view = _calendar_view(source, settings, company, now, None, None, False)
    _print_grid(view, output_path)


def run_render(args: argparse.Namespace, settings: RoomGridSettings) -> None:
    """Print the grid for a snapshot file."""
    source = load_snapshot_file(args.snapshot)
    now = _parse_now(args.now, settings.tzinfo)
    view = _calendar_view(
        source, settings, args.company, now, args.start, args.days, args.full_day
    )
    _print_grid(view, args.output)


def run_status(args: argparse.Namespace, settings: RoomGridSettings) -> int:
    """Print what is happening in one room."""
    source = load_snapshot_file(args.snapshot)
    tz = settings.tzinfo
    now = _parse_now(args.now, tz)

    resource = next((r for r in source.resources if r.id == args.room), None)
    if resource is None:
        print(f"Unknown room: {args.room}", file=sys.stderr)
        return 1

    status = room_status(resource, source.reservations, now)
    print(f"{resource.name} as of {now.astimezone(tz).strftime('%Y-%m-%d %H:%M')}")
    if status.current:
        current = status.current
        print(
            f"  BUSY: {current.title} until "
            f"{current.end.astimezone(tz).strftime('%H:%M')}"
        )
    else:
        print("  AVAILABLE")

    if status.upcoming:
        print("\n  Upcoming:")
        for reservation in status.upcoming:
            print(
                f"    {reservation.start.astimezone(tz).strftime('%a %H:%M')}-"
                f"{reservation.end.astimezone(tz).strftime('%H:%M')} {reservation.title}"
            )
    return 0


def run_check(args: argparse.Namespace, settings: RoomGridSettings) -> int:
    """Run the advisory checks for a proposed reservation."""
    source = load_snapshot_file(args.snapshot)
    tz = settings.tzinfo
    now = _parse_now(args.now, tz)

    resource = next((r for r in source.resources if r.id == args.room), None)
    if resource is None:
        print(f"Unknown room: {args.room}", file=sys.stderr)
        return 1

    proposal = Reservation(
        id=args.id,
        resource_id=resource.id,
        user_id=args.user or "",
        title=args.title,
        start=_parse_now(args.start, tz, "START"),
        end=_parse_now(args.end, tz, "END"),
    )
    global_settings = source.get_operating_settings()
    window = settings.hours_policy().effective_window(
        resource, global_settings.window if global_settings else None
    )

    result = ReservationValidator().check(
        proposal, resource, source.reservations, window, args.company, now, tz=tz
    )
    if result.is_valid:
        print("Validation: PASSED")
        return 0

    print(f"Validation: FAILED ({len(result.errors)} errors)")
    for error in result.errors:
        print(f"    - {error}")
    return 1


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="roomgrid - Meeting room availability calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                            Sample week with 4 rooms
  %(prog)s demo --rooms 6 --company acme   View as a member of acme
  %(prog)s demo --save week.json           Also write the sample snapshot

  %(prog)s render week.json                Text calendar for a snapshot
  %(prog)s render week.json --output week.pdf --start 2024-01-15

  %(prog)s status week.json R01            Current and next reservations
  %(prog)s check week.json R01 2024-01-15T09:00 2024-01-15T10:00
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Render a sample week")
    demo_parser.add_argument(
        "--rooms", "-r",
        type=int,
        default=4,
        help="Number of rooms to generate (default: 4)",
    )
    demo_parser.add_argument("--company", "-c", type=str, help="Company of the viewer")
    demo_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    demo_parser.add_argument("--save", "-s", type=str, help="Write the sample snapshot to a JSON file")

    render_parser = subparsers.add_parser("render", help="Render a snapshot file")
    render_parser.add_argument("snapshot", help="Snapshot JSON file")
    render_parser.add_argument("--start", type=str, help="First day (YYYY-MM-DD, default: today)")
    render_parser.add_argument("--days", "-d", type=int, help="Number of days (default: 7)")
    render_parser.add_argument("--company", "-c", type=str, help="Company of the viewer")
    render_parser.add_argument("--now", type=str, help="Current time (ISO 8601, default: now)")
    render_parser.add_argument(
        "--full-day",
        action="store_true",
        help="Show all 24 hours instead of the operating hours",
    )
    render_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")

    status_parser = subparsers.add_parser("status", help="Show a room's current status")
    status_parser.add_argument("snapshot", help="Snapshot JSON file")
    status_parser.add_argument("room", help="Room id")
    status_parser.add_argument("--now", type=str, help="Current time (ISO 8601, default: now)")

    check_parser = subparsers.add_parser("check", help="Check a proposed reservation")
    check_parser.add_argument("snapshot", help="Snapshot JSON file")
    check_parser.add_argument("room", help="Room id")
    check_parser.add_argument("start", help="Start time (ISO 8601)")
    check_parser.add_argument("end", help="End time (ISO 8601)")
    check_parser.add_argument("--company", "-c", type=str, help="Company of the person booking")
    check_parser.add_argument("--user", "-u", type=str, help="User id of the person booking")
    check_parser.add_argument("--title", "-t", type=str, default="New reservation", help="Title")
    check_parser.add_argument(
        "--id",
        type=str,
        default="new",
        help="Reservation id; pass an existing id to check an edit",
    )
    check_parser.add_argument("--now", type=str, help="Current time (ISO 8601, default: now)")

    args = parser.parse_args()

    try:
        settings = get_settings()
    except SettingsError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        if args.command == "demo":
            run_demo(settings, args.rooms, args.company, args.output, args.save)
            return 0
        elif args.command == "render":
            run_render(args, settings)
            return 0
        elif args.command == "status":
            return run_status(args, settings)
        elif args.command == "check":
            return run_check(args, settings)
        else:
            parser.print_help()
            return 1
    except (ValueError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
