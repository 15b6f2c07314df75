"""Rating provider data types.

Provider payloads are parsed at the client boundary into these
variants, so reconciliation never touches raw JSON.
"""

from dataclasses import dataclass
from typing import Literal

RatingSource = Literal["omdb", "imdbapi", "mixed", "none"]


@dataclass(frozen=True)
class OmdbTitle:
    """Provider A (OMDb) title ratings.

    Attributes:
        imdb_id: Queried IMDb id.
        rating: Parsed imdbRating, None when absent or "N/A".
        votes: Parsed imdbVotes, None when absent or "N/A".
    """

    imdb_id: str
    rating: float | None
    votes: int | None

    @property
    def complete(self) -> bool:
        """Whether both rating and votes are usable."""
        return self.rating is not None and self.votes is not None


@dataclass(frozen=True)
class ImdbApiTitle:
    """Provider B (imdbapi.dev) title ratings.

    Attributes:
        imdb_id: Queried IMDb id.
        rating: rating.aggregateRating.
        votes: rating.voteCount.
    """

    imdb_id: str
    rating: float | None
    votes: int | None


@dataclass(frozen=True)
class RatingResult:
    """Authoritative rating after reconciliation.

    Attributes:
        rating: Reconciled rating or None.
        votes: Reconciled vote count or None.
        source: Which provider(s) supplied the values.
    """

    rating: float | None = None
    votes: int | None = None
    source: RatingSource = "none"

    @property
    def has_rating(self) -> bool:
        """Whether a rating value is known."""
        return self.rating is not None
