"""Extractors for the catalog source and rating providers.

Usage:
    from marquee.etl.extractors import TMDBClient, OMDbClient

    async with TMDBClient() as tmdb:
        listing = await tmdb.get_now_playing(language="en-US", region="IL")
"""

from marquee.etl.extractors.base import BaseAPIClient
from marquee.etl.extractors.ratings import ImdbApiClient, OMDbClient
from marquee.etl.extractors.tmdb import TMDBClient, TMDBNormalizer, canonical_id

__all__ = [
    "BaseAPIClient",
    "TMDBClient",
    "TMDBNormalizer",
    "canonical_id",
    "OMDbClient",
    "ImdbApiClient",
]
