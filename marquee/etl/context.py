"""Run configuration and run-scoped state.

RefreshConfig is built once from settings (or directly in tests);
RunContext lives for one refresh and carries the genre cache.
"""

from dataclasses import dataclass, field

from marquee.etl.types import RefreshSummary
from marquee.settings import PipelineSettings, settings


@dataclass(frozen=True)
class RefreshConfig:
    """Immutable pipeline configuration.

    Attributes mirror PipelineSettings; see marquee.settings.base.
    """

    primary_language: str = "en-US"
    secondary_language: str = "he-IL"
    region: str = "IL"
    max_pages: int = 1
    movie_concurrency: int = 2
    actor_concurrency: int = 1
    movie_delay_seconds: float = 0.05
    actor_delay_seconds: float = 0.1
    movie_timeout_seconds: float = 300.0
    max_cast_members: int = 15
    skip_existing: bool = True
    refresh_existing_ratings: bool = False
    ledger_requires_delivery: bool = False
    poster_base_url: str = "https://image.tmdb.org/t/p/w300"
    youtube_base_url: str = "https://www.youtube.com/watch?v="

    @classmethod
    def from_settings(cls, pipeline: PipelineSettings | None = None) -> "RefreshConfig":
        """Build a config from pipeline settings.

        Args:
            pipeline: Pipeline settings (defaults to global settings).

        Returns:
            RefreshConfig instance.
        """
        pipeline = pipeline or settings.pipeline
        return cls(
            primary_language=pipeline.primary_language,
            secondary_language=pipeline.secondary_language,
            region=pipeline.region,
            max_pages=pipeline.max_pages,
            movie_concurrency=pipeline.movie_concurrency,
            actor_concurrency=pipeline.actor_concurrency,
            movie_delay_seconds=pipeline.movie_delay_seconds,
            actor_delay_seconds=pipeline.actor_delay_seconds,
            movie_timeout_seconds=pipeline.movie_timeout_seconds,
            max_cast_members=pipeline.max_cast_members,
            skip_existing=pipeline.skip_existing,
            refresh_existing_ratings=pipeline.refresh_existing_ratings,
            ledger_requires_delivery=pipeline.ledger_requires_delivery,
            poster_base_url=pipeline.poster_base_url,
            youtube_base_url=pipeline.youtube_base_url,
        )

    @property
    def languages(self) -> tuple[str, str]:
        """Primary and secondary languages, in that order."""
        return self.primary_language, self.secondary_language


@dataclass
class RunContext:
    """State shared by every processor during one refresh.

    Attributes:
        config: Pipeline configuration.
        processed_genres: TMDB genre ids upserted in this run.
        genre_names: Cached names keyed by (TMDB genre id, language).
        summary: Counters accumulated by the orchestrator.
    """

    config: RefreshConfig
    processed_genres: set[int] = field(default_factory=set)
    genre_names: dict[tuple[int, str], str] = field(default_factory=dict)
    summary: RefreshSummary = field(default_factory=RefreshSummary)

    def genre_name(self, genre_id: int, language: str) -> str | None:
        """Return the cached genre name in a language, if known."""
        return self.genre_names.get((genre_id, language))
