from fastapi import APIRouter, Depends

from pullup.rsvps.dtos import RsvpError
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from pullup.rsvps.schemas import CamelModel, EventResponse
from pullup.rsvps.urls import EVENT_URL

router = APIRouter()


class AttendanceResponse(CamelModel):
    confirmed: int
    waitlist: int
    cocktail_spots_left: int | None


class PublicEventResponse(EventResponse):
    attendance: AttendanceResponse


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


@router.get(EVENT_URL, response_model=PublicEventResponse)
async def get_event(
    slug: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> PublicEventResponse:
    """Event details shown to guests before they RSVP, with current attendance."""
    try:
        config = await read_model.get_event_configuration(slug)
        stats = await read_model.get_event_stats(slug)
    except RsvpError as e:
        raise to_http_error(e) from e

    return PublicEventResponse.from_dto(
        config,
        attendance=AttendanceResponse(
            confirmed=stats.attending,
            waitlist=stats.waitlist,
            cocktail_spots_left=stats.cocktail_spots_left,
        ),
    )
