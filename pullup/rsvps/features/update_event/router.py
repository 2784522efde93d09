from datetime import datetime

from fastapi import APIRouter, Depends

from pullup.rsvps.dtos import EventUpdateDTO, RsvpError
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.features.update_event.write_model import (
    EventUpdateWriteModel,
    SqlEventUpdateWriteModel,
)
from pullup.rsvps.schemas import CamelModel, EventResponse
from pullup.rsvps.urls import HOST_EVENT_URL

router = APIRouter()


class EventUpdateSubmit(CamelModel):
    """Host edit of an event. Fields left out of the body keep their value."""

    title: str | None = None
    cocktail_capacity: int | None = None
    food_capacity: int | None = None
    total_capacity: int | None = None
    waitlist_enabled: bool | None = None
    max_plus_ones_per_guest: int | None = None
    dinner_enabled: bool | None = None
    dinner_start_time: datetime | None = None
    dinner_end_time: datetime | None = None
    dinner_seating_interval_hours: float | None = None
    dinner_max_seats_per_slot: int | None = None

    def to_dto(self) -> EventUpdateDTO:
        return EventUpdateDTO(**{name: getattr(self, name) for name in self.model_fields_set})


def get_event_update_write_model() -> EventUpdateWriteModel:
    """Dependency to get event update write model instance."""
    return SqlEventUpdateWriteModel()


@router.put(HOST_EVENT_URL, response_model=EventResponse)
async def update_event(
    slug: str,
    payload: EventUpdateSubmit,
    write_model: EventUpdateWriteModel = Depends(get_event_update_write_model),
) -> EventResponse:
    """
    Change the title, capacities or dinner policy of an event.
    Existing RSVPs keep their booking status.
    """
    try:
        config = await write_model.update_event(slug, payload.to_dto())
    except RsvpError as e:
        raise to_http_error(e) from e

    return EventResponse.from_dto(config)
