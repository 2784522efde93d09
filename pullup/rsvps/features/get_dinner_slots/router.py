from datetime import datetime

from fastapi import APIRouter, Depends

from pullup.rsvps.dtos import RsvpError
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from pullup.rsvps.schemas import CamelModel
from pullup.rsvps.urls import DINNER_SLOTS_URL

router = APIRouter()


class DinnerSlotResponse(CamelModel):
    time: datetime
    available: bool
    remaining: int | None
    confirmed: int
    waitlist: int


class DinnerSlotsResponse(CamelModel):
    event_slug: str
    slots: list[DinnerSlotResponse]


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


@router.get(DINNER_SLOTS_URL, response_model=DinnerSlotsResponse)
async def get_dinner_slots(
    slug: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> DinnerSlotsResponse:
    """Dinner seating times offered to guests, with the seats still open at each."""
    try:
        slots = await read_model.get_dinner_slots(slug)
    except RsvpError as e:
        raise to_http_error(e) from e

    return DinnerSlotsResponse(
        event_slug=slug,
        slots=[
            DinnerSlotResponse(
                time=slot.time,
                available=slot.available,
                remaining=slot.remaining,
                confirmed=slot.confirmed,
                waitlist=slot.waitlist,
            )
            for slot in slots
        ],
    )
