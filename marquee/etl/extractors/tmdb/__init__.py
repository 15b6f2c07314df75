"""TMDB extraction: API client and normalizer."""

from marquee.etl.extractors.tmdb.client import TMDBClient
from marquee.etl.extractors.tmdb.normalizer import (
    SYNTHETIC_ID_PREFIX,
    UNKNOWN_TITLE,
    TMDBNormalizer,
    canonical_id,
    clean_text,
)

__all__ = [
    "TMDBClient",
    "TMDBNormalizer",
    "canonical_id",
    "clean_text",
    "SYNTHETIC_ID_PREFIX",
    "UNKNOWN_TITLE",
]
