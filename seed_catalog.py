#!/usr/bin/env python3
"""
Seed the fitness catalog into the database and optionally print a user's
domain scores.
"""

import argparse
import logging
import sys

from flask import current_app

from app import create_app, db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def seed(create_tables: bool = True) -> dict:
    """Create tables when asked and insert missing catalog rows"""
    from services.catalog_service import CatalogService

    if create_tables:
        db.create_all()
    return CatalogService.seed_catalog()

def report_benchmark_gaps() -> int:
    """Log event/cohort pairs the benchmark table does not cover"""
    from services.scoring.benchmarks import get_benchmark_table
    from services.scoring.catalog import EVENTS, get_cohorts

    table = get_benchmark_table(current_app.config.get('BENCHMARKS_PATH'))
    missing = table.missing_entries([e.value for e in EVENTS], [c.key for c in get_cohorts()])
    for event_value, cohort_keys in missing.items():
        logger.info(f"No benchmark for {event_value} in: {', '.join(cohort_keys)}")
    gaps = sum(len(keys) for keys in missing.values())
    logger.info(f"Benchmark table: {table.entry_count()} entries, {gaps} gaps")
    return gaps

def print_scores(user_id: int) -> None:
    from services.scoring.catalog import domain_values
    from services.scoring_service import build_scoring_service

    service = build_scoring_service()
    results = service.get_user_domain_results(user_id, domain_values())
    for domain, result in results.items():
        if result.is_scored:
            print(f"  {domain:<25} {result.value:>3}")
        else:
            print(f"  {domain:<25}   - ({result.reason})")
    print(f"  {'core score':<25} {service.get_user_core_score(user_id, domain_values()):>3}")

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--no-create-tables', action='store_true', help="Skip db.create_all()")
    parser.add_argument('--scores-for', type=int, metavar='USER_ID', help="Print domain scores for a user")
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        try:
            created = seed(create_tables=not args.no_create_tables)
            logger.info(f"Seeded catalog: {created}")
            report_benchmark_gaps()

            if args.scores_for is not None:
                print(f"Domain scores for user {args.scores_for}:")
                print_scores(args.scores_for)
        except Exception as e:
            logger.error(f"Seeding failed: {str(e)}")
            return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
