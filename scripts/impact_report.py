"""
Vacation impact report.
Prints this week's class calendar and, for each of an instructor's vacations,
the classes that still need to be cancelled or rescheduled.

Reads the REST backend configured in .env, or a JSON fixture with --fixtures.
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from academy_scheduler.core.portal import PortalFactory, SchedulingPortal
from academy_scheduler.core.exceptions import SchedulingError
from academy_scheduler.models import parse_date, CalendarEvent, ImpactedSession
from academy_scheduler.utils.logger import setup_logger

logger = setup_logger(__name__)


def print_events(events: List[CalendarEvent]) -> None:
    """Pretty-print calendar events grouped by day."""
    if not events:
        print("  (no classes)")
        return
    current_day = None
    for event in events:
        day = event.start.date()
        if day != current_day:
            current_day = day
            print(f"\n  {day.strftime('%A %d %b %Y')}")
        print(
            f"    {event.start.strftime('%H:%M')}-{event.end.strftime('%H:%M')}  "
            f"{event.title} [{event.session.category or 'Uncategorized'}] "
            f"({event.session.status.value})"
        )


def print_impacted(items: List[ImpactedSession]) -> None:
    if not items:
        print("  No classes impacted.")
        return
    print(f"  {len(items)} classes will be impacted:")
    for item in items:
        session = item.session
        print(
            f"    {session.start_date} {session.start_time}  {session.title} "
            f"({session.duration} min) - {item.state.value}"
        )


async def run_report(portal: SchedulingPortal, instructor_id: str) -> None:
    print("=" * 60)
    print(f"Calendar: {portal.calendar.visible_window.start} - {portal.calendar.visible_window.end}")
    print("=" * 60)
    print_events(await portal.get_visible_events())
    for diagnostic in portal.calendar.last_diagnostics:
        print(f"  ! skipped {diagnostic}")

    vacations = await portal.list_vacations(instructor_id)
    print("\n" + "=" * 60)
    print(f"Vacations for instructor {instructor_id}: {len(vacations)}")
    print("=" * 60)
    for vacation in vacations:
        print(f"\n  {vacation.label()} ({vacation.status.value}) {vacation.reason or ''}")
        items = await portal.compute_impacted_sessions(instructor_id, vacation)
        print_impacted(items)
    portal.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show classes impacted by instructor vacations")
    parser.add_argument("instructor", help="Instructor id")
    parser.add_argument("--fixtures", type=Path, help="JSON fixture instead of the REST backend")
    parser.add_argument("--date", help="Anchor date YYYY-MM-DD for the calendar (default: today)")
    parser.add_argument("--view", choices=["day", "week", "month"], default="week")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    start_time = time.time()

    logger.info("Starting vacation impact report")

    try:
        anchor = parse_date(args.date) if args.date else None
        if args.date and anchor is None:
            logger.error(f"Invalid --date value: {args.date}")
            return 1

        portal = PortalFactory.create(
            fixture_path=args.fixtures,
            today_provider=(lambda: anchor) if anchor else None
        )
        portal.calendar.set_granularity(args.view)

        asyncio.run(run_report(portal, args.instructor))
        return 0

    except FileNotFoundError as e:
        logger.error(f"Missing required file: {e}")
        return 1

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    except SchedulingError as e:
        logger.error("Session store unavailable", exc_info=True)
        logger.error(str(e))
        return 1

    except KeyboardInterrupt:
        logger.warning("Report interrupted by user")
        return 1

    finally:
        elapsed = time.time() - start_time
        logger.info(f"Total execution time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main())
