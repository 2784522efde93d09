from fastapi import APIRouter, Depends

from pullup.rsvps.dtos import RsvpError
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from pullup.rsvps.schemas import CamelModel, RsvpResponse
from pullup.rsvps.urls import LIST_GUESTS_URL

router = APIRouter()


class GuestListResponse(CamelModel):
    event_slug: str
    guests: list[RsvpResponse]


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


@router.get(LIST_GUESTS_URL, response_model=GuestListResponse)
async def list_guests(
    slug: str,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
) -> GuestListResponse:
    """All RSVPs of the event in arrival order, with their derived party and pull-up fields."""
    try:
        rsvps = await read_model.list_rsvps(slug)
    except RsvpError as e:
        raise to_http_error(e) from e

    return GuestListResponse(
        event_slug=slug,
        guests=[RsvpResponse.from_dto(rsvp) for rsvp in rsvps],
    )
