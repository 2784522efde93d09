"""Booking engine.

Decides, first come first served, whether a party is confirmed or
waitlisted on the cocktail track and, independently, on the dinner track.
Waitlisted guests are never promoted automatically.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID, uuid4

from pullup.rsvps.domain.slots import as_utc, attribute_slot
from pullup.rsvps.domain.validation import (
    clean_name,
    validate_dinner_party_size,
    validate_email_address,
    validate_plus_ones,
)
from pullup.rsvps.dtos import (
    NO_DINNER,
    BookingDecision,
    BookingRequest,
    BookingStatus,
    CapacityExceededError,
    DinnerBookingDTO,
    DinnerBookingStatus,
    DinnerDecision,
    DuplicateRsvpError,
    EventConfigurationDTO,
    GuestSubmissionDTO,
    RsvpDTO,
)

logger = logging.getLogger(__name__)


def cocktail_attendance(records: Iterable[RsvpDTO]) -> int:
    """People currently holding a confirmed cocktail-track booking."""
    return sum(record.party_size for record in records if record.is_confirmed)


def holds_dinner_seats(record: RsvpDTO, slot_time: datetime | None = None) -> bool:
    if record.booking_status == BookingStatus.CANCELLED or not record.has_confirmed_dinner:
        return False
    return slot_time is None or as_utc(record.dinner.slot_time) == as_utc(slot_time)


def slot_occupancy(records: Iterable[RsvpDTO], slot_time: datetime) -> int:
    """Seats taken by confirmed dinner bookings at ``slot_time``."""
    return sum(
        record.dinner.party_size for record in records if holds_dinner_seats(record, slot_time)
    )


def decide_cocktail(
    config: EventConfigurationDTO,
    existing_records: Iterable[RsvpDTO],
    party_size: int,
    force_confirm: bool = False,
) -> BookingStatus:
    """Cocktail-track status for a party of ``party_size``.

    Raises ``CapacityExceededError`` when the track is full and the event
    has no waitlist.
    """
    capacity = config.cocktail_capacity
    if force_confirm or capacity is None:
        return BookingStatus.CONFIRMED

    attendance = cocktail_attendance(existing_records)
    if attendance + party_size <= capacity:
        return BookingStatus.CONFIRMED
    if config.waitlist_enabled:
        logger.info(
            "Cocktail track of %s is full (%d/%d), waitlisting party of %d",
            config.slug,
            attendance,
            capacity,
            party_size,
        )
        return BookingStatus.WAITLIST
    raise CapacityExceededError(
        event_slug=config.slug,
        requested=party_size,
        available=max(0, capacity - attendance),
    )


def decide_dinner(
    config: EventConfigurationDTO,
    existing_records: Iterable[RsvpDTO],
    slot_time: datetime,
    party_size: int,
    force_confirm: bool = False,
) -> DinnerBookingStatus:
    """Dinner-track status, independent of the cocktail-track decision."""
    max_seats = config.dinner_max_seats_per_slot
    if force_confirm or max_seats is None:
        return DinnerBookingStatus.CONFIRMED

    occupancy = slot_occupancy(existing_records, slot_time)
    if occupancy + party_size <= max_seats:
        return DinnerBookingStatus.CONFIRMED
    # DinnerOverflowAction.WAITLIST is the only overflow policy
    logger.info(
        "Dinner slot %s of %s is full (%d/%d), waitlisting %d seats",
        as_utc(slot_time).isoformat(),
        config.slug,
        occupancy,
        max_seats,
        party_size,
    )
    return DinnerBookingStatus.WAITLIST


def decide(
    config: EventConfigurationDTO,
    existing_records: Iterable[RsvpDTO],
    request: BookingRequest,
) -> BookingDecision:
    """Decide the booking status of ``request`` against the records already held.

    Raises ``CapacityExceededError`` when the cocktail track is full and the
    event has no waitlist; nothing is booked in that case.
    """
    existing_records = list(existing_records)

    cocktail_status = decide_cocktail(
        config, existing_records, request.party_size, request.force_confirm
    )

    dinner = None
    if request.wants_dinner and config.dinner_enabled and request.dinner_slot_time is not None:
        party_size = min(request.dinner_party_size or request.party_size, request.party_size)
        dinner = DinnerDecision(
            status=decide_dinner(
                config,
                existing_records,
                request.dinner_slot_time,
                party_size,
                request.force_confirm,
            ),
            slot_time=as_utc(request.dinner_slot_time),
            party_size=party_size,
        )

    decision = BookingDecision(
        cocktail_status=cocktail_status,
        cocktail_only_party_size=request.party_size - (dinner.party_size if dinner else 0),
        dinner=dinner,
    )
    logger.info(
        "Booking decision for %s: party=%d cocktail=%s dinner=%s",
        config.slug,
        request.party_size,
        decision.cocktail_status.value,
        dinner.status.value if dinner else None,
    )
    return decision


def dinner_from_decision(decision: BookingDecision):
    if decision.dinner is None:
        return NO_DINNER
    return DinnerBookingDTO(
        slot_time=decision.dinner.slot_time,
        party_size=decision.dinner.party_size,
        booking_status=decision.dinner.status,
    )


def find_by_email(records: Iterable[RsvpDTO], email: str) -> RsvpDTO | None:
    return next((record for record in records if record.email == email), None)


def build_new_rsvp(
    config: EventConfigurationDTO,
    existing_records: Iterable[RsvpDTO],
    submission: GuestSubmissionDTO,
    now: datetime,
    rsvp_id: UUID | None = None,
) -> RsvpDTO:
    """Validate a guest submission and turn it into a new RSVP record.

    The caller persists the result; both pull-up counters start at zero.
    """
    existing_records = list(existing_records)

    email = validate_email_address(submission.email)
    name = clean_name(submission.name)
    plus_ones = validate_plus_ones(config, submission.plus_ones)

    duplicate = find_by_email(existing_records, email)
    if duplicate is not None:
        raise DuplicateRsvpError(email=email, existing_id=duplicate.id)

    party_size = 1 + plus_ones
    slot_time = None
    dinner_party_size = None
    if submission.wants_dinner:
        slot_time = attribute_slot(config, submission.dinner_time_slot)
        dinner_party_size = validate_dinner_party_size(
            submission.dinner_party_size if submission.dinner_party_size is not None else party_size
        )

    decision = decide(
        config,
        existing_records,
        BookingRequest(
            party_size=party_size,
            wants_dinner=submission.wants_dinner,
            dinner_slot_time=slot_time,
            dinner_party_size=dinner_party_size,
        ),
    )

    return RsvpDTO(
        id=rsvp_id or uuid4(),
        event_slug=config.slug,
        email=email,
        name=name,
        plus_ones=plus_ones,
        booking_status=decision.cocktail_status,
        dinner=dinner_from_decision(decision),
        dinner_pull_up_count=0,
        cocktail_only_pull_up_count=0,
        created_at=now,
        updated_at=now,
    )
