"""Write model for creating events.

Derives a unique slug from the title, checks the capacity and dinner policy,
and stores the event. Returns DTOs instead of ORM models.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pullup.config.database import async_session_manager
from pullup.config.settings import settings
from pullup.rsvps.domain.slots import as_utc, validate_event_configuration
from pullup.rsvps.dtos import EventConfigurationDTO, ValidationError
from pullup.rsvps.repository.orm_models import Event

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    slug = text.strip().lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return re.sub(r"-+", "-", slug).strip("-")


class EventWriteModel(ABC):
    """Abstract base class for event creation."""

    @abstractmethod
    async def create_event(
        self,
        title: str,
        slug: str | None = None,
        cocktail_capacity: int | None = None,
        food_capacity: int | None = None,
        total_capacity: int | None = None,
        waitlist_enabled: bool = True,
        max_plus_ones_per_guest: int | None = None,
        dinner_enabled: bool = False,
        dinner_start_time: datetime | None = None,
        dinner_end_time: datetime | None = None,
        dinner_seating_interval_hours: float | None = None,
        dinner_max_seats_per_slot: int | None = None,
    ) -> EventConfigurationDTO:
        """Create an event and return its configuration.

        Args:
            title: Human readable name, also the source of the slug
            slug: Explicit slug; derived from the title when omitted
            max_plus_ones_per_guest: Defaults to ``DEFAULT_MAX_PLUS_ONES``
            dinner_seating_interval_hours: Defaults to
                ``DEFAULT_DINNER_SEATING_INTERVAL_HOURS``
        """
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    """SQL implementation of event creation."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None, session_maker=None) -> None:
        self.session_overwrite = session_overwrite
        self.session_maker = session_maker

    async def create_event(
        self,
        title: str,
        slug: str | None = None,
        cocktail_capacity: int | None = None,
        food_capacity: int | None = None,
        total_capacity: int | None = None,
        waitlist_enabled: bool = True,
        max_plus_ones_per_guest: int | None = None,
        dinner_enabled: bool = False,
        dinner_start_time: datetime | None = None,
        dinner_end_time: datetime | None = None,
        dinner_seating_interval_hours: float | None = None,
        dinner_max_seats_per_slot: int | None = None,
    ) -> EventConfigurationDTO:
        title = (title or "").strip()
        if not title:
            raise ValidationError("title", "is required")

        base_slug = slugify(slug or title) or "event"
        config = EventConfigurationDTO(
            slug=base_slug,
            title=title,
            cocktail_capacity=cocktail_capacity,
            food_capacity=food_capacity,
            total_capacity=total_capacity,
            waitlist_enabled=waitlist_enabled,
            max_plus_ones_per_guest=(
                settings.DEFAULT_MAX_PLUS_ONES
                if max_plus_ones_per_guest is None
                else max_plus_ones_per_guest
            ),
            dinner_enabled=dinner_enabled,
            dinner_start_time=as_utc(dinner_start_time),
            dinner_end_time=as_utc(dinner_end_time),
            dinner_seating_interval_hours=(
                settings.DEFAULT_DINNER_SEATING_INTERVAL_HOURS
                if dinner_seating_interval_hours is None
                else dinner_seating_interval_hours
            ),
            dinner_max_seats_per_slot=dinner_max_seats_per_slot,
        )
        validate_event_configuration(config)

        async with self.async_session_manager(
            session_overwrite=self.session_overwrite,
            session_maker=self.session_maker,
        ) as session:
            config = replace(config, slug=await self._unique_slug(session, base_slug))
            event = Event(
                title=title,
                slug=config.slug,
                cocktail_capacity=config.cocktail_capacity,
                food_capacity=config.food_capacity,
                total_capacity=config.total_capacity,
                waitlist_enabled=config.waitlist_enabled,
                max_plus_ones_per_guest=config.max_plus_ones_per_guest,
                dinner_enabled=config.dinner_enabled,
                dinner_start_time=config.dinner_start_time,
                dinner_end_time=config.dinner_end_time,
                dinner_seating_interval_hours=config.dinner_seating_interval_hours,
                dinner_max_seats_per_slot=config.dinner_max_seats_per_slot,
                dinner_overflow_action=config.dinner_overflow_action,
            )
            session.add(event)
            await session.flush()

        logger.info("Created event %s (%s)", config.slug, title)
        return config

    async def _unique_slug(self, session, base_slug: str) -> str:
        """Append -2, -3, ... until the slug is free."""
        result = await session.execute(
            select(Event.slug).where(Event.slug.like(f"{base_slug}%"))
        )
        taken = set(result.scalars().all())
        slug = base_slug
        counter = 2
        while slug in taken:
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug
