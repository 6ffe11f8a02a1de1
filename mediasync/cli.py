"""Command-line interface for the media sync."""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

__all__ = ["main", "parse_args", "print_banner", "apply_overrides"]

from mediasync.config import SyncSettings, load_settings
from mediasync.errors import ConfigurationError, MediaSyncError
from mediasync.logging_config import get_logger, log_sync_event, setup_logging
from mediasync.models import SyncSummary
from mediasync.sync import run_sync

logger = get_logger("cli")

RULE = "─" * 56


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Attach asset-source media to catalog products by product code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync using settings from .env / the environment
  python -m mediasync.cli

  # Show what would be attached without writing anything
  python -m mediasync.cli --dry-run

  # Smaller batches and more retries
  python -m mediasync.cli --batch-size 4 --max-retries 5
        """,
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to a .env file to load (default: .env)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve products and diff media but never attach (overrides DRY_RUN)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Media per attach call (overrides MEDIA_BATCH_SIZE)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        help="Attempts per remote call (overrides MAX_RETRIES)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug output",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Don't write the JSONL log file",
    )
    return parser.parse_args(argv)


def apply_overrides(settings: SyncSettings, args: argparse.Namespace) -> SyncSettings:
    """Apply command-line overrides on top of environment settings."""
    changes = {}
    if args.dry_run:
        changes["dry_run"] = True
    if args.batch_size is not None:
        if args.batch_size < 1:
            raise ConfigurationError("--batch-size must be at least 1")
        changes["batch_size"] = args.batch_size
    if args.max_retries is not None:
        if args.max_retries < 1:
            raise ConfigurationError("--max-retries must be at least 1")
        changes["max_retries"] = args.max_retries
    return dataclasses.replace(settings, **changes) if changes else settings


def print_banner(settings: SyncSettings) -> None:
    print(RULE)
    print("Asset -> Catalog Media Sync")
    for line in settings.banner_lines():
        print(line)
    print(RULE)


def print_summary(summary: SyncSummary) -> None:
    print(RULE)
    line = f"Summary: attached={summary.attached}, skipped(existing)={summary.skipped}"
    if summary.dry_run:
        line += f", would_attach={summary.would_attach}"
    print(line)
    if summary.missing_codes:
        print(f"Codes without a product: {', '.join(summary.missing_codes)}")
    print("Done.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI. Returns the process exit code."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    env_path = Path(args.env_file)
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)

    try:
        settings = apply_overrides(load_settings(), args)
        print_banner(settings)
        summary = run_sync(settings)
    except MediaSyncError as e:
        logger.error(f"Sync failed: {e}")
        log_sync_event("sync_failed", {"error": str(e), "error_type": type(e).__name__})
        return 1
    except KeyboardInterrupt:
        logger.error("Sync interrupted")
        return 130

    if summary.message is None:
        print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
