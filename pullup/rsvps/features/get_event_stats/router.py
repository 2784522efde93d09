from datetime import datetime

from fastapi import APIRouter, Depends

from pullup.rsvps.dtos import EventStatsDTO, RsvpError
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from pullup.rsvps.schemas import CamelModel
from pullup.rsvps.urls import EVENT_STATS_URL

router = APIRouter()


class SlotStatsResponse(CamelModel):
    time: datetime
    confirmed: int
    waitlist: int
    pulled_up: int
    remaining_seats: int | None
    over_capacity: bool


class EventStatsResponse(CamelModel):
    event_slug: str
    attending: int
    waitlist: int
    cancelled: int
    cocktail_only: int
    dinner_confirmed: int
    dinner_waitlist: int
    cocktails_pulled_up: int
    dinner_pulled_up: int
    pulled_up_total: int
    total_over_capacity: int | None
    cocktail_over_capacity: int | None
    food_over_capacity: int | None
    total_spots_left: int | None
    cocktail_spots_left: int | None
    food_spots_left: int | None
    slots: list[SlotStatsResponse]

    @classmethod
    def from_dto(cls, stats: EventStatsDTO) -> "EventStatsResponse":
        return cls(
            event_slug=stats.event_slug,
            attending=stats.attending,
            waitlist=stats.waitlist,
            cancelled=stats.cancelled,
            cocktail_only=stats.cocktail_only,
            dinner_confirmed=stats.dinner_confirmed,
            dinner_waitlist=stats.dinner_waitlist,
            cocktails_pulled_up=stats.cocktails_pulled_up,
            dinner_pulled_up=stats.dinner_pulled_up,
            pulled_up_total=stats.pulled_up_total,
            total_over_capacity=stats.total_over_capacity,
            cocktail_over_capacity=stats.cocktail_over_capacity,
            food_over_capacity=stats.food_over_capacity,
            total_spots_left=stats.total_spots_left,
            cocktail_spots_left=stats.cocktail_spots_left,
            food_spots_left=stats.food_spots_left,
            slots=[
                SlotStatsResponse(
                    time=slot.time,
                    confirmed=slot.confirmed,
                    waitlist=slot.waitlist,
                    pulled_up=slot.pulled_up,
                    remaining_seats=slot.remaining_seats,
                    over_capacity=slot.over_capacity,
                )
                for slot in stats.slots
            ],
        )


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


@router.get(EVENT_STATS_URL, response_model=EventStatsResponse)
async def get_event_stats(
    slug: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> EventStatsResponse:
    """
    Live dashboard numbers for the event, counted in people.
    Over-capacity and spots-left values are null when the capacity is not set.
    """
    try:
        stats = await read_model.get_event_stats(slug)
    except RsvpError as e:
        raise to_http_error(e) from e

    return EventStatsResponse.from_dto(stats)
