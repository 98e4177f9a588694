import argparse
import json
import logging
import sys

from reservation_parser.exceptions import ParsingError

from .app_factory import create_facade, initialize_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rebuild rental reservations from pickup and return calendar entries."
    )
    parser.add_argument("ics_file", help="Path to an iCal export of the rental calendar.")
    parser.add_argument("--year", type=int, help="Year of the month to reconcile.")
    parser.add_argument("--month", type=int, help="Month to reconcile (1-12).")
    parser.add_argument(
        "--primary-source",
        help="Source tag marking the events whose pickups belong to this run.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print outcome counts instead of the drafts.",
    )
    return parser


def main(argv=None) -> int:
    initialize_app()
    args = build_parser().parse_args(argv)
    if (args.year is None) != (args.month is None):
        logger.error("--year and --month must be given together.")
        return 2

    facade = create_facade(primary_source=args.primary_source)
    try:
        with open(args.ics_file, "r", encoding="utf-8") as f:
            ics_text = f.read()
        drafts = facade.reconcile_ics(ics_text, year=args.year, month=args.month)
    except (OSError, ParsingError, ValueError) as e:
        logger.error(f"Could not reconcile {args.ics_file}: {e}")
        return 1

    if args.summary:
        output = facade.summarize(drafts)
    else:
        output = [draft.to_dict() for draft in drafts]
    json.dump(output, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
