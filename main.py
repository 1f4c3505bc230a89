"""
main.py — Main orchestrator for the job board pipeline.
Coordinates fetching, processing, README rendering and run reporting.
"""

import argparse
import sys
import time
from datetime import datetime

import httpx

from companies import CompanyDirectory
from config import (
    BOARD, DATA_DIR, DEBUG_MODE, DEFAULT_EXPERIENCE_LEVEL, EMPLOYMENT_TYPES, EXPERIENCE_LEVELS,
    README_MAX_AGE_DAYS, REPO_ROOT, STALE_DAYS, TRUST_JSEARCH_SENIORITY, UNKNOWN_LOCATION_IS_US,
    validate_config,
)
from config_validator import ConfigError, validate_board_config
from deduplication import filter_duplicates
from filters import SeniorFilter
from instrumentation import make_tracer
from job_processor import process_jobs
from locations import LocationRules
from models import RunLog
from monitoring import get_logger, log_pipeline_step, log_run_summary, log_scraper_failure, log_scraper_success, setup_logging
from readme_generator import ReadmeGenerator, load_job_categories
from scrapers.jsearch import JSearchScraper
from store import StorePaths


def get_active_scrapers(paths: StorePaths):
    """Return list of all active scraper instances."""
    return [
        JSearchScraper(usage_file=paths.usage),
    ]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fetch, filter and publish job listings.")
    parser.add_argument("--skip-fetch", action="store_true", help="reprocess the stored jobs without calling any API")
    parser.add_argument("--no-readme", action="store_true", help="do not rewrite README.md")
    parser.add_argument("--debug", action="store_true", help="write a pipeline trace to debug-trace.json")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    """Execute the full pipeline. Returns the process exit status."""
    args = parse_args(argv)

    setup_logging()
    logger = get_logger("main")

    logger.info("=" * 60)
    logger.info("JOB BOARD PIPELINE — Starting run")
    logger.info(f"Timestamp: {datetime.now().isoformat()}")
    logger.info("=" * 60)

    for warning in validate_config():
        logger.warning(f"Config: {warning}")

    try:
        validate_board_config(BOARD, REPO_ROOT)
    except ConfigError as e:
        logger.error(f"Invalid board configuration: {e}")
        return 1

    paths = StorePaths(DATA_DIR)
    tracer = make_tracer(args.debug or DEBUG_MODE)
    run_start = time.time()
    errors = []

    # ===== 1. FETCH =====
    logger.info("--- Phase 1: Fetch ---")
    fetched = []
    if args.skip_fetch:
        logger.info("Fetch skipped (--skip-fetch)")
    else:
        for scraper in get_active_scrapers(paths):
            try:
                with scraper:
                    results = scraper.scrape()
                    fetched.extend(results)
                    log_scraper_success(logger, scraper.name, len(results))
            except (httpx.HTTPError, OSError, ValueError) as e:
                errors.append(f"{scraper.name}: {e}")
                log_scraper_failure(logger, scraper.name, e)

    tracer.checkpoint("fetch_all_jobs", fetched)

    unique = filter_duplicates(fetched)
    log_pipeline_step(logger, "Fetch deduplication", len(fetched), len(unique))

    # ===== 2. PROCESS =====
    logger.info("--- Phase 2: Process ---")
    result = process_jobs(
        unique,
        paths,
        location_rules=LocationRules(unknown_is_us=UNKNOWN_LOCATION_IS_US),
        senior_filter=SeniorFilter(trust_jsearch=TRUST_JSEARCH_SENIORITY),
        stale_days=STALE_DAYS,
        level_table=EXPERIENCE_LEVELS,
        type_table=EMPLOYMENT_TYPES,
        tracer=tracer,
    )

    # ===== 3. README =====
    if args.no_readme:
        logger.info("README update skipped (--no-readme)")
    else:
        logger.info("--- Phase 3: README ---")
        companies = CompanyDirectory.from_file(REPO_ROOT / BOARD.get("companies_file", "companies.yaml"))
        generator = ReadmeGenerator(
            BOARD,
            load_job_categories(REPO_ROOT / BOARD.get("categories_file", "job_categories.json")),
            companies,
            REPO_ROOT,
            level_table=EXPERIENCE_LEVELS,
            default_level=DEFAULT_EXPERIENCE_LEVEL,
            max_age_days=README_MAX_AGE_DAYS,
        )
        generator.update_readme(result.current_jobs, result.archived_jobs)

    # ===== 4. SUMMARY =====
    run_duration = time.time() - run_start
    run_log = RunLog(
        run_date=datetime.now().isoformat(),
        jobs_fetched=len(fetched),
        jobs_current=len(result.current_jobs),
        jobs_archived=len(result.archived_jobs),
        jobs_new=len(result.new_jobs),
        errors=errors,
        duration_seconds=run_duration,
    )
    log_run_summary(
        logger,
        jobs_fetched=run_log.jobs_fetched,
        jobs_current=run_log.jobs_current,
        jobs_archived=run_log.jobs_archived,
        jobs_new=run_log.jobs_new,
        errors=run_log.errors,
        duration=run_log.duration_seconds,
    )

    if tracer.enabled:
        try:
            tracer.save(paths.debug_trace)
        except OSError as e:
            logger.error(f"Failed to save pipeline trace: {e}")

    logger.info("JOB BOARD PIPELINE — Run complete")
    return 0


if __name__ == "__main__":
    sys.exit(run())
