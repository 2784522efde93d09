from datetime import datetime
from typing import Any
from uuid import UUID

import pydantic
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import field_validator

from pullup.rsvps.domain.normalize import normalize_legacy_fields
from pullup.rsvps.dtos import RsvpError, RsvpRevisionDTO
from pullup.rsvps.errors import to_http_error
from pullup.rsvps.repository.write_models import RsvpWriteModel, SqlRsvpWriteModel
from pullup.rsvps.schemas import CamelModel, RsvpResponse
from pullup.rsvps.urls import REVISE_RSVP_URL

router = APIRouter()


class RsvpRevisionSubmit(CamelModel):
    """Host edit of an RSVP. Only the fields present in the body are changed."""

    name: str | None = None
    email: str | None = None
    plus_ones: int | None = None
    booking_status: str | None = None
    wants_dinner: bool | None = None
    dinner_time_slot: datetime | None = None
    dinner_party_size: int | None = None
    dinner_booking_status: str | None = None
    dinner_pull_up_count: int | None = None
    cocktail_only_pull_up_count: int | None = None
    force_confirm: bool = False

    @field_validator("force_confirm", mode="before")
    @classmethod
    def null_means_not_forced(cls, value):
        return False if value is None else value

    def to_dto(self) -> RsvpRevisionDTO:
        sent = self.model_fields_set - {"force_confirm"}
        return RsvpRevisionDTO(
            force_confirm=self.force_confirm,
            **{name: getattr(self, name) for name in sent},
        )


def get_rsvp_write_model() -> RsvpWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRsvpWriteModel()


@router.put(REVISE_RSVP_URL, response_model=RsvpResponse)
async def revise_rsvp(
    slug: str,
    rsvp_id: UUID,
    payload: dict[str, Any] = Body(...),
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
) -> RsvpResponse:
    """
    Partially update an RSVP.
    Accepts canonical field names as well as the legacy ones
    (status, dinnerStatus, pulledUpForDinner, pulledUpForCocktails, nested dinner).
    """
    try:
        revision = RsvpRevisionSubmit.model_validate(normalize_legacy_fields(payload))
    except pydantic.ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False),
        ) from e

    try:
        rsvp = await write_model.update_rsvp(rsvp_id, revision.to_dto(), event_slug=slug)
    except RsvpError as e:
        raise to_http_error(e) from e

    return RsvpResponse.from_dto(rsvp)
