"""Rating provider clients and payload parsing."""

from marquee.etl.extractors.ratings.imdbapi import ImdbApiClient
from marquee.etl.extractors.ratings.omdb import OMDbClient
from marquee.etl.extractors.ratings.parsing import (
    NOT_AVAILABLE,
    parse_imdbapi_title,
    parse_omdb_title,
    parse_rating,
    parse_votes,
)

__all__ = [
    "OMDbClient",
    "ImdbApiClient",
    "NOT_AVAILABLE",
    "parse_rating",
    "parse_votes",
    "parse_omdb_title",
    "parse_imdbapi_title",
]
