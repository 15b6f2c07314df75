"""Refresh processors: rating, genre, cast, movie and notification."""

from marquee.etl.processors.actor import CastProcessor
from marquee.etl.processors.base import BaseProcessor, ProcessorStats
from marquee.etl.processors.genre import HEBREW_GENRE_NAMES, GenreProcessor
from marquee.etl.processors.movie import MovieProcessor
from marquee.etl.processors.notification import NotificationMatcher
from marquee.etl.processors.rating import RatingReconciler

__all__ = [
    "BaseProcessor",
    "ProcessorStats",
    "RatingReconciler",
    "GenreProcessor",
    "HEBREW_GENRE_NAMES",
    "CastProcessor",
    "MovieProcessor",
    "NotificationMatcher",
]
