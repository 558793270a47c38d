"""
Command-line entry point for the booking lifecycle.

Runs the ordered steps against a Restful Booker service, prints a summary,
optionally writes a JSON report, and exits non-zero when any step failed.

Usage:
    booker-suite --base-url https://restful-booker.herokuapp.com --report run.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from booker_suite.api.booker_client import BookerAPIError, RestfulBookerClient
from booker_suite.auth.token_provider import BookerAuthenticator
from booker_suite.config.settings import ConfigurationError, SecretRedactionFilter, Settings
from booker_suite.runner.lifecycle import BookingLifecycleRunner, LifecycleReport
from booker_suite.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_MARKS = {"passed": "✓", "failed": "✗", "skipped": "-"}


def _package_loggers() -> List[logging.Logger]:
    """Every logger created by booker_suite modules (one per module, each with its handler)."""
    names = [
        name
        for name in list(logging.root.manager.loggerDict)
        if name == "booker_suite" or name.startswith("booker_suite.")
    ]
    return [logging.getLogger(name) for name in names]


def setup_logging(verbose: bool = False) -> None:
    """Set the level of the structured JSON loggers."""
    level = logging.DEBUG if verbose else logging.INFO
    for package_logger in _package_loggers():
        package_logger.setLevel(level)
        for handler in package_logger.handlers:
            handler.setLevel(level)


def install_redaction(settings: Settings) -> SecretRedactionFilter:
    """Redact the password (and later the token) from every package log line."""
    redaction_filter = SecretRedactionFilter({"password": settings.password})
    for package_logger in _package_loggers():
        settings.setup_redaction_filter(package_logger, redaction_filter)
    return redaction_filter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booker-suite",
        description="Run the Restful Booker booking lifecycle checks",
    )
    parser.add_argument("--base-url", help="Service base URL (overrides config and env)")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--report", help="Write the JSON run report to this path")
    parser.add_argument(
        "--ping",
        action="store_true",
        help="Check GET /ping before running and abort if the service is down",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    return parser


def print_summary(report: LifecycleReport) -> None:
    """Print a human-readable summary of the run."""
    print("\n" + "=" * 80)
    print(f"BOOKING LIFECYCLE - {report.base_url}")
    print("=" * 80)
    print(f"Authenticated: {'yes' if report.authenticated else 'no (auth steps skipped)'}")
    print(f"Booking ID:    {report.booking_id}")
    print("-" * 80)
    for result in report.results:
        mark = STATUS_MARKS[result.status.value]
        code = f"[{result.status_code}]" if result.status_code is not None else ""
        print(f"  {mark} {result.order:>2}. {result.name} {code}")
        if result.message and result.status.value != "passed":
            print(f"       {result.message}")
    print("-" * 80)
    print(
        f"Passed: {report.passed}  Failed: {report.failed}  "
        f"Skipped: {report.skipped}  Total: {len(report.results)}"
    )
    print("=" * 80)


def check_service(client: RestfulBookerClient) -> bool:
    """Return True if GET /ping answers 201."""
    try:
        response = client.ping()
    except BookerAPIError as e:
        logger.error("Health check failed", operation="ping", error=str(e))
        return False
    if response.status_code != 201:
        logger.error(
            "Health check returned unexpected status",
            operation="ping",
            context={"status_code": response.status_code},
        )
        return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        settings = Settings(config_path=args.config, base_url=args.base_url)
    except ConfigurationError as e:
        logger.error("Invalid configuration", error=str(e))
        return 2

    redaction_filter = install_redaction(settings)

    with RestfulBookerClient(settings=settings) as client:
        if args.ping and not check_service(client):
            return 2

        authenticator = BookerAuthenticator(client, redaction_filter=redaction_filter)
        report = BookingLifecycleRunner(client, authenticator).run()

    print_summary(report)

    if args.report:
        report_path = Path(args.report)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(report.to_json(), encoding="utf-8")
        print(f"Report written to {report_path}")

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
