"""Shared pytest fixtures for Marquee tests.

The catalog source and both rating providers are served by an
in-memory stub through httpx.MockTransport, so the real clients,
parsers and processors run end to end against a SQLite store.
"""

import json
import re
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest

from marquee.database import DatabaseConnection
from marquee.etl.context import RefreshConfig, RunContext
from marquee.etl.extractors import ImdbApiClient, OMDbClient, TMDBClient, TMDBNormalizer
from marquee.etl.notify import Notifier
from marquee.etl.pipeline import RefreshOrchestrator
from marquee.settings import IMDBAPISettings, NotifySettings, OMDBSettings, TMDBSettings

TMDB_BASE_URL = "https://tmdb.test/3"
OMDB_BASE_URL = "https://omdb.test"
IMDBAPI_BASE_URL = "https://imdbapi.test"
NOTIFIER_URL = "https://notify.test/alerts"

_MOVIE = re.compile(r"^/movie/(\d+)$")
_MOVIE_PART = re.compile(r"^/movie/(\d+)/(external_ids|videos|credits)$")
_PERSON = re.compile(r"^/person/(\d+)$")
_TITLE = re.compile(r"^/titles/(tt\d+)$")


# -------------------------------------------------------------------------
# Provider stub
# -------------------------------------------------------------------------


class CatalogStub:
    """In-memory TMDB, OMDb, imdbapi.dev and notifier webhook.

    Attributes:
        listing: Now-playing results.
        movies: Details keyed by TMDB id then language.
        failing_paths: TMDB paths answering 400.
        dispatched: Payloads received by the notifier webhook.
    """

    def __init__(self) -> None:
        self.listing: list[dict[str, Any]] = []
        self.total_pages = 1
        self.movies: dict[int, dict[str, dict[str, Any]]] = {}
        self.external_ids: dict[int, str | None] = {}
        self.videos: dict[int, list[dict[str, Any]]] = {}
        self.credits: dict[int, list[dict[str, Any]]] = {}
        self.people: dict[int, dict[str, dict[str, Any]]] = {}
        self.genres: dict[str, list[dict[str, Any]]] = {}
        self.omdb: dict[str, dict[str, Any]] = {}
        self.imdbapi: dict[str, dict[str, Any]] = {}
        self.failing_paths: set[str] = set()
        self.notifier_status = 200
        self.dispatched: list[dict[str, Any]] = []
        self.tmdb_requests: list[httpx.Request] = []
        self.rating_requests: list[httpx.Request] = []

    # Builders

    def add_movie(
        self,
        tmdb_id: int,
        title: str,
        imdb_id: str | None = None,
        genres: list[dict[str, Any]] | None = None,
        cast: list[dict[str, Any]] | None = None,
        secondary_title: str | None = None,
    ) -> None:
        """Register a listed movie with details in both languages."""
        self.listing.append({"id": tmdb_id, "title": title, "release_date": "1994-09-23"})
        primary = {
            "id": tmdb_id,
            "title": title,
            "original_title": title,
            "overview": f"{title} overview",
            "poster_path": f"/{tmdb_id}.jpg",
            "release_date": "1994-09-23",
            "runtime": 142,
            "original_language": "en",
            "genres": genres or [],
        }
        secondary = {"id": tmdb_id, "title": secondary_title or "", "overview": ""}
        self.movies[tmdb_id] = {"en-US": primary, "he-IL": secondary}
        self.external_ids[tmdb_id] = imdb_id
        trailer = {"name": "Official Trailer", "site": "YouTube", "type": "Trailer"}
        teaser = {"name": "Teaser", "site": "YouTube", "type": "Teaser"}
        self.videos[tmdb_id] = [
            {"key": f"yt{tmdb_id}", **trailer},
            {"key": f"tz{tmdb_id}", **teaser},
        ]
        self.credits[tmdb_id] = cast or []
        for member in cast or []:
            self.add_person(member["id"], member["name"])

    def add_person(self, person_id: int, name: str, imdb_id: str | None = None) -> None:
        """Register a person with details in both languages."""
        self.people[person_id] = {
            "en-US": {
                "id": person_id,
                "name": name,
                "biography": f"{name} biography",
                "imdb_id": imdb_id,
                "profile_path": f"/p{person_id}.jpg",
                "popularity": 10.5,
                "birthday": "1958-10-16",
                "deathday": None,
                "place_of_birth": "Somewhere",
            },
            "he-IL": {"id": person_id, "name": "", "biography": ""},
        }

    # Transports

    def tmdb_handler(self, request: httpx.Request) -> httpx.Response:
        """Answer TMDB endpoints."""
        self.tmdb_requests.append(request)
        path = request.url.path.removeprefix("/3")
        language = request.url.params.get("language", "en-US")

        if path in self.failing_paths:
            return httpx.Response(400, json={"status_message": "Invalid request"})

        if path == "/movie/now_playing":
            return httpx.Response(
                200,
                json={"page": 1, "total_pages": self.total_pages, "results": self.listing},
            )
        if path == "/genre/movie/list":
            return httpx.Response(200, json={"genres": self.genres.get(language, [])})

        if match := _MOVIE.match(path):
            details = self.movies.get(int(match.group(1)), {}).get(language)
            return _json_or_404(details)

        if match := _MOVIE_PART.match(path):
            tmdb_id, part = int(match.group(1)), match.group(2)
            if part == "external_ids":
                return httpx.Response(
                    200, json={"id": tmdb_id, "imdb_id": self.external_ids.get(tmdb_id)}
                )
            if part == "videos":
                return httpx.Response(
                    200, json={"id": tmdb_id, "results": self.videos.get(tmdb_id, [])}
                )
            return httpx.Response(200, json={"id": tmdb_id, "cast": self.credits.get(tmdb_id, [])})

        if match := _PERSON.match(path):
            return _json_or_404(self.people.get(int(match.group(1)), {}).get(language))

        return httpx.Response(404, json={"status_message": "Not found"})

    def omdb_handler(self, request: httpx.Request) -> httpx.Response:
        """Answer OMDb title lookups."""
        self.rating_requests.append(request)
        payload = self.omdb.get(request.url.params.get("i", ""))
        if payload is None:
            return httpx.Response(200, json={"Response": "False", "Error": "Incorrect IMDb ID."})
        return httpx.Response(200, json={"Response": "True", **payload})

    def imdbapi_handler(self, request: httpx.Request) -> httpx.Response:
        """Answer imdbapi.dev title lookups."""
        self.rating_requests.append(request)
        match = _TITLE.match(request.url.path)
        return _json_or_404(self.imdbapi.get(match.group(1)) if match else None)

    def notifier_handler(self, request: httpx.Request) -> httpx.Response:
        """Record alert payloads."""
        if self.notifier_status < 400:
            self.dispatched.append(json.loads(request.content))
        return httpx.Response(self.notifier_status, json={})


def _json_or_404(payload: dict[str, Any] | None) -> httpx.Response:
    if payload is None:
        return httpx.Response(404, json={"status_message": "Not found"})
    return httpx.Response(200, json=payload)


def seed_now_playing(catalog: CatalogStub) -> CatalogStub:
    """Populate the stub with one rated and one unrated movie."""
    catalog.genres = {
        "en-US": [{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}],
        "he-IL": [{"id": 18, "name": "דרמה"}, {"id": 80, "name": "פשע"}],
    }
    catalog.add_movie(
        278,
        "The Shawshank Redemption",
        imdb_id="tt0111161",
        genres=[{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}],
        cast=[
            {"id": 504, "name": "Tim Robbins", "character": "Andy Dufresne", "order": 0},
            {"id": 192, "name": "Morgan Freeman", "character": "Red", "order": 1},
        ],
        secondary_title="חומות של תקווה",
    )
    catalog.add_movie(
        42, "Obscure Festival Film", imdb_id=None, genres=[{"id": 18, "name": "Drama"}]
    )
    catalog.omdb["tt0111161"] = {"imdbRating": "9.3", "imdbVotes": "2,700,000"}
    return catalog


# -------------------------------------------------------------------------
# Settings
# -------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from developer environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    for var in ("NOTIFIER_URL", "RESEND_API_KEY", "SUMMARY_TO", "CRON_SECRET", "DATABASE_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def refresh_config() -> RefreshConfig:
    """Sequential configuration without spacing delays."""
    return RefreshConfig(
        movie_concurrency=1,
        actor_concurrency=1,
        movie_delay_seconds=0,
        actor_delay_seconds=0,
        movie_timeout_seconds=30,
    )


@pytest.fixture
def context(refresh_config: RefreshConfig) -> RunContext:
    """Fresh run context."""
    return RunContext(config=refresh_config)


@pytest.fixture
def normalizer(refresh_config: RefreshConfig) -> TMDBNormalizer:
    """Normalizer with default URL prefixes."""
    return TMDBNormalizer(refresh_config.poster_base_url, refresh_config.youtube_base_url)


async def no_sleep(_seconds: float) -> None:
    """Sleep replacement keeping tests instantaneous."""
    return None


# -------------------------------------------------------------------------
# Database
# -------------------------------------------------------------------------


@pytest.fixture
async def db(tmp_path: Path) -> AsyncGenerator[DatabaseConnection, None]:
    """SQLite store with every table created."""
    connection = DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'marquee.db'}")
    await connection.create_all()
    yield connection
    await connection.dispose()


# -------------------------------------------------------------------------
# Clients
# -------------------------------------------------------------------------


@pytest.fixture
def catalog() -> CatalogStub:
    """Empty provider stub."""
    return CatalogStub()


@pytest.fixture
def now_playing(catalog: CatalogStub) -> CatalogStub:
    """Stub listing Shawshank (tt0111161) and an unrated movie without IMDb id."""
    return seed_now_playing(catalog)


@pytest.fixture
async def tmdb_client(catalog: CatalogStub) -> AsyncGenerator[TMDBClient, None]:
    """TMDB client bound to the stub."""
    config = TMDBSettings(
        TMDB_API_KEY="test_api_key",
        TMDB_BASE_URL=TMDB_BASE_URL,
        TMDB_MIN_REQUEST_DELAY=0,
        TMDB_REQUESTS_PER_PERIOD=0,
    )
    async with TMDBClient(config, transport=httpx.MockTransport(catalog.tmdb_handler)) as client:
        yield client


@pytest.fixture
async def omdb_client(catalog: CatalogStub) -> AsyncGenerator[OMDbClient, None]:
    """OMDb client bound to the stub."""
    config = OMDBSettings(
        OMDB_API_KEY="test_omdb_key",
        OMDB_BASE_URL=OMDB_BASE_URL,
        OMDB_MIN_REQUEST_DELAY=0,
    )
    async with OMDbClient(config, transport=httpx.MockTransport(catalog.omdb_handler)) as client:
        yield client


@pytest.fixture
async def imdbapi_client(catalog: CatalogStub) -> AsyncGenerator[ImdbApiClient, None]:
    """imdbapi.dev client bound to the stub."""
    config = IMDBAPISettings(IMDBAPI_BASE_URL=IMDBAPI_BASE_URL, IMDBAPI_MIN_REQUEST_DELAY=0)
    transport = httpx.MockTransport(catalog.imdbapi_handler)
    async with ImdbApiClient(config, transport=transport) as client:
        yield client


@pytest.fixture
async def notifier(catalog: CatalogStub) -> AsyncGenerator[Notifier, None]:
    """Notifier posting to the stub webhook."""
    config = NotifySettings(NOTIFIER_URL=NOTIFIER_URL, NOTIFIER_TOKEN="notify_token")
    transport = httpx.MockTransport(catalog.notifier_handler)
    async with Notifier(config, transport=transport) as client:
        yield client


@pytest.fixture
def orchestrator(
    db: DatabaseConnection,
    tmdb_client: TMDBClient,
    omdb_client: OMDbClient,
    imdbapi_client: ImdbApiClient,
    notifier: Notifier,
    refresh_config: RefreshConfig,
) -> RefreshOrchestrator:
    """Orchestrator wired to the stub and the SQLite store."""
    return RefreshOrchestrator(
        db=db,
        tmdb=tmdb_client,
        omdb=omdb_client,
        imdbapi=imdbapi_client,
        notifier=notifier,
        config=refresh_config,
        sleep=no_sleep,
    )
