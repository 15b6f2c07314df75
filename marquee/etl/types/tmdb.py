"""TMDB API data types.

TypedDict definitions for data structures returned by
The Movie Database (TMDB) API endpoints used by the refresh.
"""

from typing import NotRequired, TypedDict


class TMDBGenreData(TypedDict):
    """Genre data from TMDB API."""

    id: int
    name: str


class TMDBGenreListResponse(TypedDict):
    """Response from TMDB genre/movie/list endpoint."""

    genres: list[TMDBGenreData]


class TMDBListingItem(TypedDict):
    """Movie entry from the now_playing listing."""

    id: int
    title: str
    original_title: NotRequired[str | None]
    overview: NotRequired[str | None]
    release_date: NotRequired[str | None]
    poster_path: NotRequired[str | None]
    genre_ids: NotRequired[list[int]]


class TMDBNowPlayingResponse(TypedDict):
    """Response from TMDB movie/now_playing endpoint."""

    page: int
    total_pages: int
    total_results: int
    results: list[TMDBListingItem]


class TMDBMovieDetails(TypedDict):
    """Movie details in one language."""

    id: int
    title: NotRequired[str | None]
    original_title: NotRequired[str | None]
    overview: NotRequired[str | None]
    poster_path: NotRequired[str | None]
    release_date: NotRequired[str | None]
    runtime: NotRequired[int | None]
    original_language: NotRequired[str | None]
    genres: NotRequired[list[TMDBGenreData]]


class TMDBExternalIds(TypedDict):
    """Cross-reference ids of a movie or person."""

    id: NotRequired[int]
    imdb_id: NotRequired[str | None]


class TMDBVideoData(TypedDict):
    """Video entry from movie/{id}/videos."""

    key: str
    name: NotRequired[str | None]
    site: str
    type: str
    iso_639_1: NotRequired[str | None]


class TMDBVideosResponse(TypedDict):
    """Response from movie/{id}/videos."""

    results: list[TMDBVideoData]


class TMDBCastData(TypedDict):
    """Cast member data from TMDB credits endpoint."""

    id: int
    name: str
    character: NotRequired[str | None]
    order: NotRequired[int]
    profile_path: NotRequired[str | None]


class TMDBCreditsData(TypedDict):
    """Credits data from TMDB API (crew is ignored)."""

    cast: list[TMDBCastData]


class TMDBPersonDetails(TypedDict):
    """Person details in one language."""

    id: int
    name: NotRequired[str | None]
    biography: NotRequired[str | None]
    imdb_id: NotRequired[str | None]
    profile_path: NotRequired[str | None]
    popularity: NotRequired[float | None]
    birthday: NotRequired[str | None]
    deathday: NotRequired[str | None]
    place_of_birth: NotRequired[str | None]
