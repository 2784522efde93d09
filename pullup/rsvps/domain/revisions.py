"""Partial updates of RSVP records and the pull-up (check-in) rules.

Every update produces a complete new record. Only the supplied fields
change, but the cascades they trigger (dinner cleared together with its
arrival count, arrival counts zeroed for non-confirmed tracks, counts
saturated at the party size) are applied to the same record before it is
stored, so readers never observe half of a cascade.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from pullup.rsvps.domain.booking import decide_cocktail, decide_dinner, find_by_email
from pullup.rsvps.domain.slots import as_utc, attribute_slot
from pullup.rsvps.domain.validation import (
    clean_name,
    parse_booking_status,
    parse_dinner_status,
    validate_count,
    validate_dinner_party_size,
    validate_email_address,
    validate_plus_ones,
)
from pullup.rsvps.dtos import (
    BookingStatus,
    DinnerBookingDTO,
    DinnerBookingStatus,
    DuplicateRsvpError,
    EventConfigurationDTO,
    RsvpDTO,
    RsvpRevisionDTO,
)

logger = logging.getLogger(__name__)


def clamp_pull_ups(record: RsvpDTO) -> RsvpDTO:
    """Saturate both arrival counters at what the record allows.

    Non-confirmed tracks allow nothing; a confirmed dinner allows its party
    size; the cocktail-only portion allows the rest of the party.
    """
    dinner_max = 0
    if record.is_confirmed and record.has_confirmed_dinner:
        dinner_max = record.dinner.party_size
    cocktail_max = record.cocktail_only_party_size if record.is_confirmed else 0

    dinner_count = min(max(record.dinner_pull_up_count, 0), dinner_max)
    cocktail_count = min(max(record.cocktail_only_pull_up_count, 0), cocktail_max)
    if (dinner_count, cocktail_count) == (
        record.dinner_pull_up_count,
        record.cocktail_only_pull_up_count,
    ):
        return record

    logger.info(
        "Clamped pull-up counts of RSVP %s from (%d, %d) to (%d, %d)",
        record.id,
        record.dinner_pull_up_count,
        record.cocktail_only_pull_up_count,
        dinner_count,
        cocktail_count,
    )
    return replace(
        record,
        dinner_pull_up_count=dinner_count,
        cocktail_only_pull_up_count=cocktail_count,
    )


def pull_up_all(record: RsvpDTO, now: datetime | None = None) -> RsvpDTO:
    """Mark every member of a confirmed party as arrived."""
    if not record.is_confirmed:
        return record
    return clamp_pull_ups(
        replace(
            record,
            dinner_pull_up_count=record.dinner_party_size if record.has_confirmed_dinner else 0,
            cocktail_only_pull_up_count=record.cocktail_only_party_size,
            updated_at=now or record.updated_at,
        )
    )


def _revise_dinner(
    config: EventConfigurationDTO,
    record: RsvpDTO,
    revision: RsvpRevisionDTO,
) -> tuple[RsvpDTO, bool, bool]:
    """Apply the dinner fields of ``revision``.

    Returns the record plus two flags: whether the dinner booking is a fresh
    request (new, or moved to another slot) and whether it grew in place.
    """
    if revision.supplied("wants_dinner") and not revision.wants_dinner:
        if record.wants_dinner:
            logger.info("RSVP %s opted out of dinner", record.id)
        return record.without_dinner(), False, False

    current = record.dinner
    opting_in = revision.wants_dinner is True and not isinstance(current, DinnerBookingDTO)
    if not isinstance(current, DinnerBookingDTO) and not opting_in:
        return record, False, False

    slot_time = current.slot_time if isinstance(current, DinnerBookingDTO) else None
    if revision.supplied("dinner_time_slot") and revision.dinner_time_slot is not None:
        slot_time = attribute_slot(config, revision.dinner_time_slot)
    elif slot_time is None:
        slot_time = attribute_slot(config, None)

    if revision.supplied("dinner_party_size") and revision.dinner_party_size is not None:
        party_size = validate_dinner_party_size(revision.dinner_party_size)
    elif isinstance(current, DinnerBookingDTO):
        party_size = current.party_size
    else:
        party_size = record.party_size
    party_size = min(party_size, record.party_size)

    if opting_in:
        dinner = DinnerBookingDTO(
            slot_time=slot_time,
            party_size=party_size,
            booking_status=DinnerBookingStatus.WAITLIST,
        )
        return replace(record, dinner=dinner), True, False

    moved = as_utc(slot_time) != as_utc(current.slot_time)
    grew = party_size > current.party_size
    dinner = replace(current, slot_time=slot_time, party_size=party_size)
    return replace(record, dinner=dinner), moved, grew and not moved


def apply_revision(
    config: EventConfigurationDTO,
    current: RsvpDTO,
    other_records: Iterable[RsvpDTO],
    revision: RsvpRevisionDTO,
    now: datetime,
) -> RsvpDTO:
    """Apply a partial update to ``current`` and return the full new record.

    ``other_records`` are the event's other RSVPs; they are consulted when
    the update needs a fresh capacity decision (a confirmed party grows, a
    dinner booking is requested or moved, or a track is set to CONFIRMED).
    ``force_confirm`` skips those capacity checks.
    """
    others = [record for record in other_records if record.id != current.id]
    record = current

    if revision.supplied("name"):
        record = replace(record, name=clean_name(revision.name))

    if revision.supplied("email"):
        email = validate_email_address(revision.email)
        duplicate = find_by_email(others, email)
        if duplicate is not None:
            raise DuplicateRsvpError(email=email, existing_id=duplicate.id)
        record = replace(record, email=email)

    party_grew = False
    if revision.supplied("plus_ones"):
        plus_ones = validate_plus_ones(config, revision.plus_ones)
        party_grew = plus_ones > record.plus_ones
        record = replace(record, plus_ones=plus_ones)

    explicit_status = None
    if revision.supplied("booking_status"):
        explicit_status = parse_booking_status(revision.booking_status)
    explicit_dinner_status = None
    if revision.supplied("dinner_booking_status"):
        explicit_dinner_status = parse_dinner_status(revision.dinner_booking_status)

    dinner_pull_ups = record.dinner_pull_up_count
    if revision.supplied("dinner_pull_up_count"):
        dinner_pull_ups = validate_count(revision.dinner_pull_up_count, "dinnerPullUpCount")
    cocktail_pull_ups = record.cocktail_only_pull_up_count
    if revision.supplied("cocktail_only_pull_up_count"):
        cocktail_pull_ups = validate_count(
            revision.cocktail_only_pull_up_count, "cocktailOnlyPullUpCount"
        )

    record, dinner_fresh, dinner_grew = _revise_dinner(config, record, revision)

    # cocktail track
    if explicit_status is not None:
        status = explicit_status
        check = status == BookingStatus.CONFIRMED and (not current.is_confirmed or party_grew)
    else:
        status = record.booking_status
        check = status == BookingStatus.CONFIRMED and party_grew
    if check and not revision.force_confirm:
        status = decide_cocktail(config, others, record.party_size)
    elif check:
        logger.info("Host forced confirmation of RSVP %s", record.id)

    # dinner track
    if isinstance(record.dinner, DinnerBookingDTO):
        dinner = record.dinner
        if explicit_dinner_status is not None:
            dinner_status = explicit_dinner_status
            check = dinner_status == DinnerBookingStatus.CONFIRMED and (
                dinner_fresh or dinner_grew or not current.has_confirmed_dinner
            )
        elif dinner_fresh:
            dinner_status = DinnerBookingStatus.CONFIRMED
            check = True
        else:
            dinner_status = dinner.booking_status
            check = dinner_status == DinnerBookingStatus.CONFIRMED and dinner_grew
        if check and not revision.force_confirm:
            dinner_status = decide_dinner(config, others, dinner.slot_time, dinner.party_size)
        record = replace(record, dinner=replace(dinner, booking_status=dinner_status))

    record = replace(
        record,
        booking_status=status,
        dinner_pull_up_count=dinner_pull_ups if record.wants_dinner else 0,
        cocktail_only_pull_up_count=cocktail_pull_ups,
        updated_at=now,
    )
    return clamp_pull_ups(record)
