import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pullup.config.database import async_session_manager
from pullup.rsvps.domain.stats import aggregate, slot_availability
from pullup.rsvps.dtos import (
    DinnerSlotAvailabilityDTO,
    EventConfigurationDTO,
    EventStatsDTO,
    NotFoundError,
    RsvpDTO,
)
from pullup.rsvps.repository.orm_models import Event, Rsvp


class RsvpReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event_configuration(self, event_slug: str) -> EventConfigurationDTO:
        """Load the capacity and dinner policy of an event. Raises NotFoundError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_rsvp(self, rsvp_id: UUID) -> RsvpDTO:
        """Load one RSVP. Raises NotFoundError."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_rsvps(self, event_slug: str) -> list[RsvpDTO]:
        """All RSVPs of an event in arrival order, cancelled ones included."""
        raise NotImplementedError

    async def get_event_stats(self, event_slug: str) -> EventStatsDTO:
        config = await self.get_event_configuration(event_slug)
        return aggregate(config, await self.list_rsvps(event_slug))

    async def get_dinner_slots(self, event_slug: str) -> list[DinnerSlotAvailabilityDTO]:
        config = await self.get_event_configuration(event_slug)
        return slot_availability(config, await self.list_rsvps(event_slug))


class SqlRsvpReadModel(RsvpReadModel):
    """SQL implementation of the RSVP read model. Returns DTOs, never ORM rows."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self._session_overwrite = session_overwrite
        self._session_maker = session_maker

    def _session(self):
        return async_session_manager(
            auto_commit=False,
            session_overwrite=self._session_overwrite,
            session_maker=self._session_maker,
        )

    @staticmethod
    async def _get_event(session, event_slug: str) -> Event:
        result = await session.execute(select(Event).where(Event.slug == event_slug))
        event = result.scalar_one_or_none()
        if event is None:
            raise NotFoundError("event", event_slug)
        return event

    async def get_event_configuration(self, event_slug: str) -> EventConfigurationDTO:
        async with self._session() as session:
            event = await self._get_event(session, event_slug)
            return event.to_configuration()

    async def get_rsvp(self, rsvp_id: UUID) -> RsvpDTO:
        async with self._session() as session:
            result = await session.execute(
                select(Rsvp, Event.slug)
                .join(Event, Rsvp.event_id == Event.uuid)
                .where(Rsvp.uuid == rsvp_id)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("rsvp", rsvp_id)
            rsvp, event_slug = row
            return rsvp.to_dto(event_slug)

    async def list_rsvps(self, event_slug: str) -> list[RsvpDTO]:
        async with self._session() as session:
            event = await self._get_event(session, event_slug)
            result = await session.execute(
                select(Rsvp).where(Rsvp.event_id == event.uuid).order_by(Rsvp.created_at)
            )
            return [rsvp.to_dto(event.slug) for rsvp in result.scalars().all()]
