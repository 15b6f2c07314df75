"""Command Line Interface for Marquee.

Commands:
    refresh       Run the now-playing refresh (or one movie with --movie)
    seed-genres   Seed the genre reference table in both languages
    init-db       Create every table
    serve         Start the API server
"""

import argparse
import asyncio
import sys
import traceback

from marquee.database import close_database, get_database
from marquee.etl.pipeline import (
    refresh_now_playing_catalog,
    refresh_specific_movie,
    seed_genres,
)
from marquee.etl.utils import setup_logger
from marquee.settings import settings

logger = setup_logger("marquee.cli")


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="marquee",
        description="Now-playing catalog refresh and rating alerts",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    refresh = subparsers.add_parser("refresh", help="Refresh the now-playing catalog")
    refresh.add_argument(
        "--movie",
        type=int,
        default=None,
        metavar="TMDB_ID",
        help="Fully re-enrich a single movie",
    )
    refresh.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help=f"Listing pages (default: {settings.pipeline.max_pages})",
    )

    subparsers.add_parser("seed-genres", help="Seed genres in both languages")
    subparsers.add_parser("init-db", help="Create database tables")

    serve = subparsers.add_parser("serve", help="Start the API server")
    serve.add_argument("--host", default=settings.api.host)
    serve.add_argument("--port", type=int, default=settings.api.port)

    return parser


# =============================================================================
# COMMAND HANDLERS
# =============================================================================


async def _run_refresh(args: argparse.Namespace) -> None:
    """Handle the refresh command."""
    try:
        if args.movie is not None:
            outcome = await refresh_specific_movie(args.movie)
            logger.info(f"Movie {outcome.movie_id} refreshed (rating={outcome.rating})")
        else:
            summary = await refresh_now_playing_catalog(trigger="cli", max_pages=args.max_pages)
            logger.info(
                f"Refresh done: listed={summary.listed}, processed={summary.processed}, "
                f"skipped={summary.skipped}, failed={summary.failed}"
            )
    finally:
        await close_database()


async def _run_seed_genres() -> None:
    """Handle the seed-genres command."""
    try:
        count = await seed_genres()
        logger.info(f"{count} genres seeded")
    finally:
        await close_database()


async def _run_init_db() -> None:
    """Handle the init-db command."""
    try:
        await get_database().create_all()
        logger.info("Database tables created")
    finally:
        await close_database()


def _run_serve(args: argparse.Namespace) -> None:
    """Handle the serve command."""
    import uvicorn

    uvicorn.run("marquee.api.main:app", host=args.host, port=args.port)


def _execute_command(args: argparse.Namespace) -> None:
    """Dispatch a parsed command.

    Args:
        args: Parsed command line arguments.
    """
    if args.command == "refresh":
        asyncio.run(_run_refresh(args))
    elif args.command == "seed-genres":
        asyncio.run(_run_seed_genres())
    elif args.command == "init-db":
        asyncio.run(_run_init_db())
    elif args.command == "serve":
        _run_serve(args)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Args:
        argv: Arguments (defaults to sys.argv).
    """
    args = _build_parser().parse_args(argv)
    try:
        _execute_command(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"\nFATAL: {e}", file=sys.stderr)
        traceback.print_exc()
        logger.error(f"Command {args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
