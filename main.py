#!/usr/bin/env python
"""CLI for the coinscout research pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from coinscout.config import create_from_config, get_default_config_path, load_config
from coinscout.data import ResearchReport
from coinscout.errors import KnowledgeBaseUnavailableError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    query: str
    config: Path
    log: bool = False
    log_dir: str = "logs"

    @field_validator("query")
    @classmethod
    def query_must_not_be_blank(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("Query must not be empty")
        return v

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def print_report(report: ResearchReport) -> None:
    """Print a research report to stdout."""
    if not report.accepted:
        print(report.describe_rejection())
        return

    names = ", ".join(f"{a.name} ({a.symbol.upper()})" for a in report.resolution.assets)
    print(f"\nResolved: {names}")

    for quote in report.quotes.values():
        change = (
            f"{quote.price_change_24h:+.2f}%" if quote.price_change_24h is not None else "n/a"
        )
        price = f"${quote.current_price:,.4f}" if quote.current_price is not None else "n/a"
        print(f"  {quote.name}: {price} (24h {change})")

    print(f"\nAcquired {len(report.documents)} documents:\n")
    for i, doc in enumerate(report.documents, 1):
        logger.info(f"{i}. {doc.title}")
        logger.info(f"   URL: {doc.url}")
        logger.info(f"   Words: {doc.word_count} (via {doc.method})")
        if doc.published_date:
            logger.info(f"   Published: {doc.published_date}")


async def run(args: CLIArgs) -> None:
    """Execute the pipeline with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Running pipeline for: {args.query}")
    logger.info(f"Config: {args.config}")

    report = await pipeline.run(args.query)
    print_report(report)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Resolve a crypto question to known assets and gather fresh sources."
    )
    parser.add_argument(
        "query",
        help="Question about one or more cryptocurrencies",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            query=ns.query,
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except (KnowledgeBaseUnavailableError, ProviderNotConfiguredError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
