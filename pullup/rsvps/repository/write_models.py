"""RSVP write models. Return DTOs, never ORM models.

Every mutation of an event's RSVPs runs inside the event's lock and inside
one transaction that holds the event row ``FOR UPDATE``. Capacity is read,
decided and written without another booking for the same event interleaving.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pullup.config.database import async_session_manager
from pullup.rsvps.domain.booking import build_new_rsvp
from pullup.rsvps.domain.revisions import apply_revision, pull_up_all
from pullup.rsvps.dtos import (
    GuestSubmissionDTO,
    NotFoundError,
    PullUpSummaryDTO,
    RsvpDTO,
    RsvpRevisionDTO,
)
from pullup.rsvps.repository.locks import EventLocks, event_locks
from pullup.rsvps.repository.orm_models import Event, Rsvp

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class RsvpWriteModel(ABC):
    @abstractmethod
    async def create_rsvp(self, event_slug: str, submission: GuestSubmissionDTO) -> RsvpDTO:
        """
        Book a new RSVP for the event.
        Raises NotFoundError, ValidationError, DuplicateRsvpError or CapacityExceededError.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_rsvp(
        self, rsvp_id: UUID, revision: RsvpRevisionDTO, event_slug: str | None = None
    ) -> RsvpDTO:
        """Apply a partial update and return the full new record.

        When ``event_slug`` is given, an RSVP of another event is reported as
        not found.
        """
        raise NotImplementedError

    @abstractmethod
    async def mark_all_pulled_up(self, event_slug: str) -> PullUpSummaryDTO:
        """Mark every confirmed party of the event as fully arrived."""
        raise NotImplementedError


class SqlRsvpWriteModel(RsvpWriteModel):
    """Write operations for RSVPs. Returns DTOs, never ORM models."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
        locks: EventLocks = event_locks,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_overwrite = session_overwrite
        self._session_maker = session_maker
        self._locks = locks
        self._clock = clock

    def _session(self, auto_commit: bool = True):
        return async_session_manager(
            auto_commit=auto_commit,
            session_overwrite=self._session_overwrite,
            session_maker=self._session_maker,
        )

    async def _lock_event(self, session, event_slug: str) -> Event:
        """Load the event row and hold it for the rest of the transaction."""
        stmt = select(Event).where(Event.slug == event_slug).with_for_update()
        result = await session.execute(stmt)
        event = result.scalar_one_or_none()
        if event is None:
            raise NotFoundError("event", event_slug)
        return event

    async def _get_rsvps(self, session, event: Event) -> list[Rsvp]:
        stmt = select(Rsvp).where(Rsvp.event_id == event.uuid).order_by(Rsvp.created_at)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def _get_event_slug(self, rsvp_id: UUID) -> str:
        async with self._session(auto_commit=False) as session:
            stmt = (
                select(Event.slug)
                .join(Rsvp, Rsvp.event_id == Event.uuid)
                .where(Rsvp.uuid == rsvp_id)
            )
            result = await session.execute(stmt)
            event_slug = result.scalar_one_or_none()
        if event_slug is None:
            raise NotFoundError("rsvp", rsvp_id)
        return event_slug

    async def create_rsvp(self, event_slug: str, submission: GuestSubmissionDTO) -> RsvpDTO:
        async with self._locks.hold(event_slug):
            async with self._session() as session:
                event = await self._lock_event(session, event_slug)
                existing = [row.to_dto(event.slug) for row in await self._get_rsvps(session, event)]

                rsvp = build_new_rsvp(
                    event.to_configuration(), existing, submission, now=self._clock()
                )

                row = Rsvp(uuid=rsvp.id, event_id=event.uuid, created_at=rsvp.created_at)
                row.apply_dto(rsvp)
                session.add(row)
                await session.flush()

        logger.info(
            "Created RSVP %s for %s: %s party of %d, dinner %s",
            rsvp.id,
            event_slug,
            rsvp.booking_status.value,
            rsvp.party_size,
            rsvp.dinner.booking_status.value if rsvp.wants_dinner else "none",
        )
        return rsvp

    async def update_rsvp(
        self, rsvp_id: UUID, revision: RsvpRevisionDTO, event_slug: str | None = None
    ) -> RsvpDTO:
        owner_slug = await self._get_event_slug(rsvp_id)
        if event_slug is not None and owner_slug != event_slug:
            raise NotFoundError("rsvp", rsvp_id)
        event_slug = owner_slug

        async with self._locks.hold(event_slug):
            async with self._session() as session:
                event = await self._lock_event(session, event_slug)
                rows = await self._get_rsvps(session, event)

                row = next((r for r in rows if r.uuid == rsvp_id), None)
                if row is None:
                    raise NotFoundError("rsvp", rsvp_id)

                others = [r.to_dto(event.slug) for r in rows if r.uuid != rsvp_id]
                rsvp = apply_revision(
                    event.to_configuration(),
                    row.to_dto(event.slug),
                    others,
                    revision,
                    now=self._clock(),
                )
                row.apply_dto(rsvp)
                await session.flush()

        logger.info("Updated RSVP %s for %s", rsvp_id, event_slug)
        return rsvp

    async def mark_all_pulled_up(self, event_slug: str) -> PullUpSummaryDTO:
        updated = skipped = unchanged = 0

        async with self._locks.hold(event_slug):
            async with self._session() as session:
                event = await self._lock_event(session, event_slug)
                now = self._clock()
                for row in await self._get_rsvps(session, event):
                    current = row.to_dto(event.slug)
                    if not current.is_confirmed:
                        skipped += 1
                        continue
                    arrived = pull_up_all(current, now=now)
                    if (arrived.dinner_pull_up_count, arrived.cocktail_only_pull_up_count) == (
                        current.dinner_pull_up_count,
                        current.cocktail_only_pull_up_count,
                    ):
                        unchanged += 1
                        continue
                    row.apply_dto(arrived)
                    updated += 1
                await session.flush()

        logger.info(
            "Marked %s as pulled up: %d updated, %d unchanged, %d skipped",
            event_slug,
            updated,
            unchanged,
            skipped,
        )
        return PullUpSummaryDTO(updated=updated, skipped=skipped, unchanged=unchanged)
