# main.py

"""Entry point for the dropship_import headless CLI."""

import argparse
import asyncio
import logging
import sys

from dropship_import.config.logging_config import setup_logging
from dropship_import.config.settings import Settings

logger = logging.getLogger("dropship_import.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="dropship_import",
        description="Import product listings from online stores as drafts.",
        epilog=(
            f"At most {Settings.MAX_BULK_URLS} URLs per run. "
            "The marketplace pipeline accepts Alibaba, AliExpress and 1688."
        ),
    )
    parser.add_argument(
        "urls",
        nargs="*",
        default=[],
        help="Product page URLs to import.",
    )
    parser.add_argument(
        "--file",
        default=None,
        dest="url_file",
        help="Text file with one URL per line.",
    )
    parser.add_argument(
        "-p",
        "--pipeline",
        choices=["generic", "marketplace"],
        default="generic",
        help="Extraction pipeline (default: generic).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        default=False,
        help="Persist successful imports as product drafts.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the proxy endpoints.",
    )
    return parser


def _run_import(args: argparse.Namespace) -> None:
    """Import the requested URLs and exit."""
    from dropship_import.cli.runner import cli_import, collect_urls

    urls = collect_urls(args.urls, args.url_file)
    exit_code = asyncio.run(
        cli_import(
            urls=urls,
            pipeline_name=args.pipeline,
            output_format=args.output_format,
            save=args.save,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run proxy connectivity health check."""
    from dropship_import.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check or the importer."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(run_label="health" if args.health else "import")
    logger.info("dropship_import starting, log file: %s", log_file)

    if args.health:
        _run_health_check()
    elif not args.urls and args.url_file is None:
        parser.print_help()
        sys.exit(2)
    else:
        _run_import(args)


if __name__ == "__main__":
    main()
