"""
CLI entry point for benefit-rates.

Usage:
    python -m benefit_rates
    python -m benefit_rates --benefits pip,attendance_allowance --dry-run
    python -m benefit_rates --check
"""

import argparse
import asyncio
import logging
import sys

import structlog

from .core.models import ExitCode

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Update benefit rates from the GOV.UK Content API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Update every benefit
  python -m benefit_rates

  # Update specific benefits without writing
  python -m benefit_rates --benefits pip,attendance_allowance --dry-run

  # Validate the stored file only (no network)
  python -m benefit_rates --check

  # Use a custom settings file and rates file
  python -m benefit_rates --config /path/to/settings.yml --rates-file rates.json

Exit codes:
  0  success or no changes
  1  validation failed (file not written)
  2  fetch failed or rates file unreadable (file not written)
        """,
    )

    parser.add_argument(
        "--rates-file",
        type=str,
        help="Path to benefit-rates.json (default: from settings)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to settings.yml config file",
    )

    parser.add_argument(
        "--benefits",
        type=str,
        help="Comma-separated list of benefit ids to update (default: all)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch, merge and validate but don't write the rates file",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate the stored rates file and exit (no network)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: from settings)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for CI)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser.parse_args(argv)


async def main_async(args) -> ExitCode:
    """Async main function."""
    from .config.loader import load_settings
    from .orchestrator import RateUpdater

    logger = structlog.get_logger(__name__)

    settings = load_settings(args.config)
    if args.benefits:
        settings.benefits = [b.strip() for b in args.benefits.split(",") if b.strip()]
    if args.timeout is not None:
        settings.timeout = args.timeout

    updater = RateUpdater(
        settings=settings,
        rates_file=args.rates_file,
        dry_run=args.dry_run,
    )

    if args.check:
        outcome = updater.check()
    else:
        outcome = await updater.run()

    logger.info(
        "run_finished",
        exit_code=int(outcome.exit_code),
        written=outcome.written,
        changed=outcome.merge.changed if outcome.merge else 0,
    )
    return outcome.exit_code


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"benefit-rates {__version__}")
        sys.exit(0)

    setup_logging(args.log_level, args.json_logs)

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(int(exit_code))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.exception("fatal_error", error=str(e))
        sys.exit(int(ExitCode.FETCH_FAILED))


if __name__ == "__main__":
    main()
