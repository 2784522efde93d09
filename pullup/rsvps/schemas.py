"""Response models shared by the RSVP endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pullup.rsvps.dtos import (
    BookingStatus,
    DinnerBookingDTO,
    DinnerBookingStatus,
    DinnerOverflowAction,
    EventConfigurationDTO,
    PullUpStatus,
    RsvpDTO,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DinnerResponse(CamelModel):
    enabled: bool = True
    slot_time: datetime
    party_size: int
    booking_status: DinnerBookingStatus


class RsvpResponse(CamelModel):
    id: UUID
    event_slug: str
    email: str
    name: str | None
    plus_ones: int
    party_size: int
    total_guests: int
    booking_status: BookingStatus
    wants_dinner: bool
    dinner: DinnerResponse | None
    cocktail_only_party_size: int
    dinner_pull_up_count: int
    cocktail_only_pull_up_count: int
    pull_up_status: PullUpStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dto(cls, rsvp: RsvpDTO) -> "RsvpResponse":
        dinner = None
        if isinstance(rsvp.dinner, DinnerBookingDTO):
            dinner = DinnerResponse(
                slot_time=rsvp.dinner.slot_time,
                party_size=rsvp.dinner.party_size,
                booking_status=rsvp.dinner.booking_status,
            )
        return cls(
            id=rsvp.id,
            event_slug=rsvp.event_slug,
            email=rsvp.email,
            name=rsvp.name,
            plus_ones=rsvp.plus_ones,
            party_size=rsvp.party_size,
            total_guests=rsvp.total_guests,
            booking_status=rsvp.booking_status,
            wants_dinner=rsvp.wants_dinner,
            dinner=dinner,
            cocktail_only_party_size=rsvp.cocktail_only_party_size,
            dinner_pull_up_count=rsvp.dinner_pull_up_count,
            cocktail_only_pull_up_count=rsvp.cocktail_only_pull_up_count,
            pull_up_status=rsvp.pull_up_status,
            created_at=rsvp.created_at,
            updated_at=rsvp.updated_at,
        )


class EventResponse(CamelModel):
    slug: str
    title: str | None = None
    cocktail_capacity: int | None
    food_capacity: int | None
    total_capacity: int | None
    waitlist_enabled: bool
    max_plus_ones_per_guest: int
    dinner_enabled: bool
    dinner_start_time: datetime | None
    dinner_end_time: datetime | None
    dinner_seating_interval_hours: float | None
    dinner_max_seats_per_slot: int | None
    dinner_overflow_action: DinnerOverflowAction

    @classmethod
    def from_dto(cls, config: EventConfigurationDTO, **extra) -> "EventResponse":
        return cls(
            slug=config.slug,
            title=config.title,
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
            **extra,
        )
