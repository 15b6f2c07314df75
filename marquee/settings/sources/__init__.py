"""External source settings.

Exports configuration classes for the catalog source and
both rating providers.
"""

from marquee.settings.sources.ratings import IMDBAPISettings, OMDBSettings
from marquee.settings.sources.tmdb import TMDBSettings

__all__ = [
    "TMDBSettings",
    "OMDBSettings",
    "IMDBAPISettings",
]
