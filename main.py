"""Opportunity Scout — CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging to both console and log file."""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    run_date = datetime.now().strftime("%Y-%m-%d")
    log_file = log_dir / f"run_{run_date}.log"

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def _rank_feed(feed_path: str, profile, output_dir: str | None, logger: logging.Logger) -> None:
    """Rank scraped feed posts against the profile and emit the feed summary."""
    from opportunity_scout.agents.feed_relevance import (
        load_feed_posts,
        rank_feed_posts,
        summarize_feed,
    )
    from opportunity_scout.exceptions import ConfigurationError

    try:
        posts = load_feed_posts(feed_path)
    except ConfigurationError as e:
        logger.error("Skipping feed ranking: %s", e)
        return

    ranked = rank_feed_posts(
        posts,
        custom_keywords=profile.target_roles,
        graduation_year=profile.graduation_year,
    )
    summary = summarize_feed(ranked, graduation_year=profile.graduation_year)
    payload = json.dumps(
        {
            "posts": [p.model_dump(mode="json", by_alias=True) for p in ranked],
            "summary": summary.model_dump(mode="json", by_alias=True),
        },
        indent=2,
        ensure_ascii=False,
    )
    if output_dir:
        (Path(output_dir) / "feed.json").write_text(payload, encoding="utf-8")
    else:
        print(payload)
    logger.info("Feed: %d of %d posts relevant", len(ranked), len(posts))


def main() -> None:
    """Main CLI entrypoint for Opportunity Scout."""
    parser = argparse.ArgumentParser(
        description="Opportunity Scout — find and rank internship and entry-level postings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py "SDE Intern"                         # Search with defaults (India)
  python main.py "Backend Intern" --location Pune     # Narrow to a city
  python main.py "SDE Intern" --output-dir results    # Write JSON and CSV files
  python main.py "SDE Intern" --feed posts.json       # Also rank scraped feed posts
        """,
    )
    parser.add_argument("query", help="What to search for, e.g. 'SDE Intern'")
    parser.add_argument(
        "--location",
        default=None,
        help="Location to search in. Default: DEFAULT_LOCATION or India",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Path to profile file. Default: PROFILE_PATH or profile.yaml",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for results.json and jobs.csv. Default: print JSON only",
    )
    parser.add_argument(
        "--feed",
        default=None,
        help="JSON file of scraped social-feed posts to rank alongside the search",
    )
    parser.add_argument(
        "--usage-db",
        default=None,
        help="SQLite file to persist API usage to. Default: in-memory only",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    # Setup logging
    log_level = args.log_level or os.getenv("LOG_LEVEL", "INFO")
    setup_logging(log_level)

    logger = logging.getLogger("opportunity_scout")
    logger.info("=" * 60)
    logger.info("Opportunity Scout — Starting: %r", args.query)
    logger.info("=" * 60)

    from opportunity_scout.config import load_settings
    from opportunity_scout.exceptions import OpportunityScoutError
    from opportunity_scout.graph import build_pipeline
    from opportunity_scout.storage.usage import (
        InMemoryUsageRecorder,
        SqliteUsageRecorder,
        cost_report,
    )

    recorder = SqliteUsageRecorder(args.usage_db) if args.usage_db else InMemoryUsageRecorder()
    start_time = time.time()

    try:
        settings = load_settings()
        if args.profile:
            settings = settings.model_copy(update={"profile_path": args.profile})
        pipeline = build_pipeline(settings, usage_recorder=recorder)
    except OpportunityScoutError as e:
        logger.error("Cannot start search: %s", e)
        sys.exit(2)

    result = pipeline.run_search(args.query, args.location)
    duration = time.time() - start_time

    print(result.to_json(indent=2))

    if args.output_dir:
        out_dir = Path(args.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "results.json").write_text(result.to_json(indent=2), encoding="utf-8")
        if result.csv_data:
            (out_dir / "jobs.csv").write_text(result.csv_data + "\n", encoding="utf-8")
        logger.info("Results written to %s", out_dir)

    if args.feed:
        _rank_feed(args.feed, pipeline.profile, args.output_dir, logger)

    logger.info("=" * 60)
    logger.info("Search complete in %.1f seconds", duration)
    logger.info(
        "Results: total=%d, high=%d, medium=%d, success=%s",
        result.total_jobs,
        len(result.high_match_jobs),
        len(result.medium_match_jobs),
        result.success,
    )
    if result.error:
        logger.warning("Error: %s", result.error)
    for line in cost_report(recorder.summary()).splitlines():
        logger.info(line)
    logger.info("=" * 60)

    if isinstance(recorder, SqliteUsageRecorder):
        recorder.close()

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
