# src/main.py - v3
"""CLI entry point: build presets.json from the preset directories.

Usage:
    preset-index [-v]

All behaviour comes from the environment (API_KEY, BASE_URL, MODEL,
GITHUB_ACTIONS, ...); see config/settings.py.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from presetindex.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from pydantic import ValidationError

    from presetindex.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(_cmd_build(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="preset-index",
        description=f"preset-index v{__version__}: build the ChatLuna preset catalog",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    return parser


async def _cmd_build(settings) -> int:
    """Run one catalog build and report its counters."""
    from presetindex.pipeline.build import build_catalog

    result = await build_catalog(settings)
    stats = result.stats
    print("\nCatalog built:")
    print(f"  Presets:      {len(result.records)}")
    print(f"  Reused:       {stats.reused}")
    print(f"  Generated:    {stats.generated}")
    print(f"  Failed:       {stats.failed}")
    print(f"  Skipped:      {stats.skipped}")
    print(f"  Cache source: {result.cache_source or 'none'}")
    print(f"  Output:       {result.output_path}")
    return 0


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from presetindex.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
