"""Write model for host edits of an event's capacity and dinner policy.

Existing RSVPs keep their status when capacity shrinks; the dashboard shows
the event as over capacity instead.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pullup.config.database import async_session_manager
from pullup.rsvps.domain.slots import as_utc, validate_event_configuration
from pullup.rsvps.dtos import (
    EventConfigurationDTO,
    EventUpdateDTO,
    NotFoundError,
    ValidationError,
)
from pullup.rsvps.repository.locks import EventLocks, event_locks
from pullup.rsvps.repository.orm_models import Event

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "title",
    "waitlist_enabled",
    "max_plus_ones_per_guest",
    "dinner_enabled",
    "dinner_seating_interval_hours",
)


def apply_event_update(
    config: EventConfigurationDTO, update: EventUpdateDTO
) -> EventConfigurationDTO:
    """Merge ``update`` into ``config`` and check the result."""
    changes = update.changes()
    for name in REQUIRED_FIELDS:
        if name in changes and changes[name] is None:
            raise ValidationError(name, "must not be null")

    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValidationError("title", "is required")
    for name in ("dinner_start_time", "dinner_end_time"):
        if name in changes:
            changes[name] = as_utc(changes[name])

    updated = replace(config, **changes)
    validate_event_configuration(updated)
    return updated


class EventUpdateWriteModel(ABC):
    @abstractmethod
    async def update_event(self, event_slug: str, update: EventUpdateDTO) -> EventConfigurationDTO:
        """Apply a partial change to the event and return its new configuration.

        Raises NotFoundError or ValidationError; nothing is stored on error.
        """
        raise NotImplementedError


class SqlEventUpdateWriteModel(EventUpdateWriteModel):
    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
        locks: EventLocks = event_locks,
    ):
        self._session_overwrite = session_overwrite
        self._session_maker = session_maker
        self._locks = locks

    async def update_event(self, event_slug: str, update: EventUpdateDTO) -> EventConfigurationDTO:
        async with self._locks.hold(event_slug):
            async with async_session_manager(
                session_overwrite=self._session_overwrite,
                session_maker=self._session_maker,
            ) as session:
                stmt = select(Event).where(Event.slug == event_slug).with_for_update()
                event = (await session.execute(stmt)).scalar_one_or_none()
                if event is None:
                    raise NotFoundError("event", event_slug)

                config = apply_event_update(event.to_configuration(), update)
                for name in update.changes():
                    setattr(event, name, getattr(config, name))
                await session.flush()

        logger.info("Updated event %s: %s", event_slug, ", ".join(sorted(update.changes())))
        return config
