"""Command-line entry point for the scheduler."""
import argparse
import json
import logging
import sys
from typing import List, Optional

from vocabplan.config import parse_offsets, settings
from vocabplan.logging_config import setup_logging
from vocabplan.models.schedule_models import CellStyle, MatrixRequest, ReviewOffsets, ScheduleMatrix
from vocabplan.monitoring import start_monitoring
from vocabplan.services.schedule_service import ScheduleService, display_unit_number

logger = logging.getLogger(__name__)

CELL_MARKS = {
    CellStyle.COMPLETED: "*",
    CellStyle.UNUSED: "-",
}


def format_matrix(matrix: ScheduleMatrix) -> str:
    """Render the matrix as a plain text table."""
    headers = ["day"] + matrix.headers()
    lines = ["\t".join(headers)]
    for row in matrix.rows:
        columns = [""] * len(matrix.headers())
        for cell in row.cells:
            mark = CELL_MARKS.get(cell.style, "")
            columns[cell.column] = f"list{display_unit_number(cell.unit_number)}{mark}"
        lines.append("\t".join([f"D{row.day}"] + columns))
    lines.append(f"{matrix.units_count} units, {matrix.total_days} days")
    for warning in matrix.warnings:
        lines.append(f"warning: {warning.field}: {warning.message}")
    return "\n".join(lines)


def offsets_arg(raw: str) -> List[int]:
    """Parse --offsets, rejecting lists the scheduler cannot use."""
    try:
        return list(ReviewOffsets.of(parse_offsets(raw)))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid review offsets {raw!r}: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vocabplan",
        description="Spaced-repetition schedule matrix for vocabulary plans",
    )
    parser.add_argument("--json", action="store_true", help="Print the matrix as JSON")
    parser.add_argument("--min-days", type=int, default=settings.schedule.minimum_display_days,
                        help="Minimum number of days to display")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    preview_parser = subparsers.add_parser("preview", help="Preview a schedule from pacing numbers")
    preview_parser.add_argument("total_words", type=int, help="Words in the book")
    preview_parser.add_argument("--words-per-day", type=int, default=settings.schedule.default_words_per_day)
    preview_parser.add_argument("--offsets", type=offsets_arg,
                                help="Comma separated review offsets, e.g. 1,2,4,7,15")

    plan_parser = subparsers.add_parser("plan", help="Show the matrix of a stored plan")
    plan_parser.add_argument("plan_id", type=int, help="Learning plan ID")

    return parser


def load_plan_request(plan_id: int, minimum_display_days: int) -> MatrixRequest:
    """Read a stored plan into a matrix request."""
    from vocabplan.models.base import SessionLocal, init_db
    from vocabplan.services.unit_store import LearningUnitStore

    init_db()
    db = SessionLocal()
    try:
        return LearningUnitStore(db).get_matrix_request(plan_id, minimum_display_days)
    finally:
        db.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if settings.monitoring.enabled:
        start_monitoring(settings.monitoring.port)

    if args.command == "preview":
        request = MatrixRequest(
            total_words=args.total_words,
            words_per_day=args.words_per_day,
            review_offsets=args.offsets or settings.schedule.review_offsets,
            minimum_display_days=args.min_days,
        )
    else:
        try:
            request = load_plan_request(args.plan_id, args.min_days)
        except ValueError as e:
            logger.error(str(e))
            return 2

    matrix = ScheduleService().build_matrix(request)
    if args.json:
        print(json.dumps(matrix.to_dict(), indent=2))
    else:
        print(format_matrix(matrix))
    return 0


def run() -> None:
    """Console script entry point."""
    setup_logging("Starting vocabplan ...")
    sys.exit(main())


if __name__ == "__main__":
    run()
