"""Refresh pipeline orchestration.

Usage:
    from marquee.etl.pipeline import refresh_now_playing_catalog

    summary = await refresh_now_playing_catalog()
"""

from marquee.etl.pipeline.orchestrator import (
    RefreshOrchestrator,
    build_orchestrator,
    refresh_now_playing_catalog,
    refresh_specific_movie,
    seed_genres,
)

__all__ = [
    "RefreshOrchestrator",
    "build_orchestrator",
    "refresh_now_playing_catalog",
    "refresh_specific_movie",
    "seed_genres",
]
