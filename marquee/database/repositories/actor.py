"""Actor repository for cast upserts."""

from typing import TypedDict

from sqlalchemy import func, select

from marquee.database.models import Actor, ActorTranslation, CastMember
from marquee.database.repositories.base import BaseRepository


class ActorData(TypedDict, total=False):
    """Typed dictionary for actor base input data."""

    id: str
    tmdb_id: int
    imdb_id: str | None
    profile_url: str | None
    popularity: float | None
    birthday: object
    deathday: object
    place_of_birth: str | None


class ActorRepository(BaseRepository[Actor]):
    """Repository for Actor and CastMember operations.

    Actors share the canonical id scheme of movies and are
    linked to movies through cast_members.
    """

    model = Actor

    async def upsert(self, data: ActorData) -> None:
        """Insert or update the actor base record by canonical id.

        Args:
            data: Actor fields, must include id and tmdb_id.
        """
        stmt = self._insert().values(**data)
        updates = {key: stmt.excluded[key] for key in data if key != "id"}
        updates["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_=updates)
        await self._execute(stmt)

    async def upsert_translation(
        self,
        actor_id: str,
        language: str,
        name: str,
        biography: str | None,
    ) -> None:
        """Insert or update an actor translation keyed by (actor, language).

        Args:
            actor_id: Canonical actor id.
            language: Language tag.
            name: Localized name.
            biography: Localized biography.
        """
        stmt = self._insert(ActorTranslation).values(
            actor_id=actor_id,
            language=language,
            name=name,
            biography=biography,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["actor_id", "language"],
            set_={
                "name": stmt.excluded.name,
                "biography": stmt.excluded.biography,
                "updated_at": func.now(),
            },
        )
        await self._execute(stmt)

    async def upsert_cast_member(
        self,
        movie_id: str,
        actor_id: str,
        character: str | None,
        display_order: int,
    ) -> None:
        """Link an actor to a movie, updating the link in place.

        Args:
            movie_id: Canonical movie id.
            actor_id: Canonical actor id.
            character: Character name.
            display_order: Billing order.
        """
        stmt = self._insert(CastMember).values(
            movie_id=movie_id,
            actor_id=actor_id,
            character=character,
            display_order=display_order,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["movie_id", "actor_id"],
            set_={
                "character": stmt.excluded.character,
                "display_order": stmt.excluded.display_order,
                "updated_at": func.now(),
            },
        )
        await self._execute(stmt)

    async def get_cast(self, movie_id: str) -> list[CastMember]:
        """Get cast links of a movie.

        Args:
            movie_id: Canonical movie id.

        Returns:
            Cast links ordered by billing.
        """
        stmt = (
            select(CastMember)
            .where(CastMember.movie_id == movie_id)
            .order_by(CastMember.display_order)
        )
        result = await self._session.scalars(stmt)
        return list(result.all())

    async def get_translations(self, actor_id: str) -> list[ActorTranslation]:
        """Get every translation of an actor.

        Args:
            actor_id: Canonical actor id.

        Returns:
            Translations ordered by language.
        """
        stmt = (
            select(ActorTranslation)
            .where(ActorTranslation.actor_id == actor_id)
            .order_by(ActorTranslation.language)
        )
        result = await self._session.scalars(stmt)
        return list(result.all())
