import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import EmailStr

from pullup.rsvps.dtos import (
    DuplicateRsvpError,
    GuestSubmissionDTO,
    RsvpError,
    RsvpRevisionDTO,
)
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.write_models import RsvpWriteModel, SqlRsvpWriteModel
from pullup.rsvps.schemas import CamelModel, RsvpResponse
from pullup.rsvps.urls import SUBMIT_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class GuestSubmit(CamelModel):
    email: EmailStr
    name: str | None = None
    plus_ones: int = 0
    wants_dinner: bool = False
    dinner_time_slot: datetime | None = None
    dinner_party_size: int | None = None

    def to_dto(self) -> GuestSubmissionDTO:
        return GuestSubmissionDTO(
            email=self.email,
            name=self.name,
            plus_ones=self.plus_ones,
            wants_dinner=self.wants_dinner,
            dinner_time_slot=self.dinner_time_slot,
            dinner_party_size=self.dinner_party_size,
        )

    def to_revision(self) -> RsvpRevisionDTO:
        """The fields the guest actually sent, as an update of their existing RSVP."""
        sent = self.model_fields_set & {
            "name",
            "plus_ones",
            "wants_dinner",
            "dinner_time_slot",
            "dinner_party_size",
        }
        return RsvpRevisionDTO(**{name: getattr(self, name) for name in sent})


def get_rsvp_write_model() -> RsvpWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRsvpWriteModel()


@router.post(SUBMIT_RSVP_URL, response_model=RsvpResponse, status_code=201)
async def submit_rsvp(
    slug: str,
    submission: GuestSubmit,
    response: Response,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> RsvpResponse:
    """
    Book an RSVP for the event.
    A second submission from the same email revises the existing RSVP instead.
    """
    try:
        rsvp = await write_model.create_rsvp(slug, submission.to_dto())
    except DuplicateRsvpError as e:
        logger.info("Revising existing RSVP %s for %s", e.existing_id, slug)
        try:
            rsvp = await write_model.update_rsvp(
                e.existing_id, submission.to_revision(), event_slug=slug
            )
        except RsvpError as revise_error:
            raise to_http_error(revise_error) from revise_error
        response.status_code = 200
    except RsvpError as e:
        raise to_http_error(e) from e

    return RsvpResponse.from_dto(rsvp)
