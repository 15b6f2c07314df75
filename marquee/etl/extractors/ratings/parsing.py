"""Rating provider payload parsing.

Provider A (OMDb) reports ratings as display strings ("9.3",
"2,700,000", "N/A"); Provider B (imdbapi.dev) as JSON numbers.
Both are parsed here into typed variants.
"""

import logging
import math
from collections.abc import Callable
from typing import Any, TypeVar

from marquee.etl.errors import ParseError
from marquee.etl.types import ImdbApiTitle, OmdbTitle

NOT_AVAILABLE = "N/A"

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_rating(value: str | None) -> float | None:
    """Parse a display rating.

    Args:
        value: Raw rating string.

    Returns:
        Rating as float, None on empty value or "N/A".

    Raises:
        ParseError: On a malformed or out-of-range rating.
    """
    text = _normalize(value)
    if text is None:
        return None
    try:
        rating = float(text)
    except ValueError as e:
        raise ParseError(f"Malformed rating: {value!r}") from e
    if not math.isfinite(rating) or not 0 <= rating <= 10:
        raise ParseError(f"Rating out of range: {value!r}")
    return rating


def parse_votes(value: str | None) -> int | None:
    """Parse a display vote count, stripping thousands separators.

    Args:
        value: Raw vote count string.

    Returns:
        Vote count, None on empty value or "N/A".

    Raises:
        ParseError: On a malformed vote count.
    """
    text = _normalize(value)
    if text is None:
        return None
    digits = text.replace(",", "")
    if not digits.isdigit():
        raise ParseError(f"Malformed vote count: {value!r}")
    return int(digits)


def parse_omdb_title(imdb_id: str, payload: Any) -> OmdbTitle:
    """Parse an OMDb title payload.

    Args:
        imdb_id: Queried IMDb id.
        payload: Decoded JSON body.

    Each field is parsed on its own: a malformed rating or vote
    count is logged and reported as None, keeping the other field.

    Returns:
        Parsed OmdbTitle.

    Raises:
        ParseError: When the payload is not an object.
    """
    if not isinstance(payload, dict):
        raise ParseError(f"OMDb payload for {imdb_id} is not an object")
    return OmdbTitle(
        imdb_id=imdb_id,
        rating=_omdb_field(imdb_id, payload, "imdbRating", parse_rating),
        votes=_omdb_field(imdb_id, payload, "imdbVotes", parse_votes),
    )


def parse_imdbapi_title(imdb_id: str, payload: Any) -> ImdbApiTitle:
    """Parse an imdbapi.dev title payload.

    Args:
        imdb_id: Queried IMDb id.
        payload: Decoded JSON body.

    Returns:
        Parsed ImdbApiTitle (fields None when the rating block is absent).

    Raises:
        ParseError: On a malformed payload or field.
    """
    if not isinstance(payload, dict):
        raise ParseError(f"imdbapi payload for {imdb_id} is not an object")

    block = payload.get("rating")
    if block is None:
        return ImdbApiTitle(imdb_id=imdb_id, rating=None, votes=None)
    if not isinstance(block, dict):
        raise ParseError(f"imdbapi rating block for {imdb_id} is not an object")

    rating = block.get("aggregateRating")
    if rating is not None:
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            raise ParseError(f"imdbapi aggregateRating is not a number: {rating!r}")
        if not 0 <= rating <= 10:
            raise ParseError(f"imdbapi aggregateRating out of range: {rating!r}")
        rating = float(rating)

    votes = block.get("voteCount")
    if votes is not None:
        if isinstance(votes, bool) or not isinstance(votes, int) or votes < 0:
            raise ParseError(f"imdbapi voteCount is not a count: {votes!r}")

    return ImdbApiTitle(imdb_id=imdb_id, rating=rating, votes=votes)


def _normalize(value: str | None) -> str | None:
    """Strip a raw field, mapping empty and sentinel values to None."""
    if value is None:
        return None
    text = value.strip()
    if not text or text.upper() == NOT_AVAILABLE:
        return None
    return text


def _omdb_field(
    imdb_id: str,
    payload: dict[str, Any],
    key: str,
    parse: Callable[[str | None], T | None],
) -> T | None:
    """Parse one OMDb field, dropping it to None when malformed."""
    try:
        return parse(_string_field(payload, key))
    except ParseError as e:
        logger.warning(f"Ignoring OMDb {key} for {imdb_id}: {e}")
        return None


def _string_field(payload: dict[str, Any], key: str) -> str | None:
    """Read an optional string field, rejecting other types."""
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"OMDb field {key} is not a string: {value!r}")
    return value
