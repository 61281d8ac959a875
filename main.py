"""
Main entry point for the flight booking core
Initializes the schema, optionally loads sample data and prints an availability report
"""
import argparse
import logging
import sys
from datetime import date

from backend.commands import AvailabilityReport, execute
from database.config import load_settings
from database.database import get_db_manager


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)-8s %(name)s: %(message)s',
    )


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description='Flight booking core')
    parser.add_argument('--sample-data', action='store_true', help='Generate sample data after init')
    parser.add_argument('--seed', type=int, help='Random seed for sample data')
    parser.add_argument('--report-date', type=str, default=None,
                        help='Print seat availability for this date (YYYY-MM-DD)')
    args = parser.parse_args(argv)

    configure_logging(load_settings().log_level)
    logger = logging.getLogger('main')

    logger.info("Initializing database...")
    get_db_manager().create_tables()
    logger.info("Database ready!")

    if args.sample_data:
        from data.data_generator import DataGenerator
        DataGenerator(seed=args.seed).generate_sample_dataset()

    if args.report_date or args.sample_data:
        result = execute(AvailabilityReport(args.report_date or date.today()))
        if not result.ok:
            logger.error("Availability report failed: %s", result.error)
            return 1
        for row in result.value:
            print(f"{row.flight_num:<8} {row.origin:>5} -> {row.destination:<5} "
                  f"{row.booked:>4}/{row.capacity:<4} available {row.available}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
