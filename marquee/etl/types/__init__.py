"""ETL data types package.

Usage:
    from marquee.etl.types import TMDBListingItem, RatingResult
"""

from marquee.etl.types.pipeline import (
    CastResult,
    MatchResult,
    MovieOutcome,
    MovieStatus,
    NotificationPayload,
    RefreshSummary,
)
from marquee.etl.types.ratings import (
    ImdbApiTitle,
    OmdbTitle,
    RatingResult,
    RatingSource,
)
from marquee.etl.types.tmdb import (
    TMDBCastData,
    TMDBCreditsData,
    TMDBExternalIds,
    TMDBGenreData,
    TMDBGenreListResponse,
    TMDBListingItem,
    TMDBMovieDetails,
    TMDBNowPlayingResponse,
    TMDBPersonDetails,
    TMDBVideoData,
    TMDBVideosResponse,
)

__all__ = [
    # TMDB
    "TMDBGenreData",
    "TMDBGenreListResponse",
    "TMDBListingItem",
    "TMDBNowPlayingResponse",
    "TMDBMovieDetails",
    "TMDBExternalIds",
    "TMDBVideoData",
    "TMDBVideosResponse",
    "TMDBCastData",
    "TMDBCreditsData",
    "TMDBPersonDetails",
    # Ratings
    "OmdbTitle",
    "ImdbApiTitle",
    "RatingResult",
    "RatingSource",
    # Pipeline
    "MovieOutcome",
    "MovieStatus",
    "CastResult",
    "MatchResult",
    "NotificationPayload",
    "RefreshSummary",
]
