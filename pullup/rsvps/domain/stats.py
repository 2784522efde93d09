"""Live dashboard statistics.

A read-only projection over an event's RSVP records, recomputed from
scratch on every call. All numbers count people, not RSVPs.
"""

from collections.abc import Iterable
from datetime import datetime

from pullup.rsvps.domain.slots import as_utc, generate_slots
from pullup.rsvps.dtos import (
    BookingStatus,
    DinnerBookingDTO,
    DinnerSlotAvailabilityDTO,
    EventConfigurationDTO,
    EventStatsDTO,
    RsvpDTO,
    SlotStatsDTO,
)


def _over(value: int, capacity: int | None) -> int | None:
    if capacity is None:
        return None
    return max(0, value - capacity)


def _left(value: int, capacity: int | None) -> int | None:
    if capacity is None:
        return None
    return max(0, capacity - value)


def _slot_stats(
    config: EventConfigurationDTO,
    records: list[RsvpDTO],
    slot_time: datetime,
) -> SlotStatsDTO:
    booked = [
        record
        for record in records
        if record.booking_status != BookingStatus.CANCELLED
        and isinstance(record.dinner, DinnerBookingDTO)
        and as_utc(record.dinner.slot_time) == slot_time
    ]
    seated = [record for record in booked if record.dinner.is_confirmed]
    confirmed = sum(record.dinner.party_size for record in seated)
    max_seats = config.dinner_max_seats_per_slot
    return SlotStatsDTO(
        time=slot_time,
        confirmed=confirmed,
        waitlist=sum(record.dinner.party_size for record in booked if not record.dinner.is_confirmed),
        pulled_up=sum(record.dinner_pull_up_count for record in seated),
        remaining_seats=_left(confirmed, max_seats),
        over_capacity=max_seats is not None and confirmed > max_seats,
    )


def aggregate(config: EventConfigurationDTO, records: Iterable[RsvpDTO]) -> EventStatsDTO:
    """Derive the dashboard numbers for one event.

    The result does not depend on the order of ``records``.
    """
    records = list(records)

    attending = waitlist = cancelled = cocktail_only = 0
    dinner_confirmed = dinner_waitlist = 0
    cocktails_pulled_up = dinner_pulled_up = 0

    for record in records:
        if record.booking_status == BookingStatus.CANCELLED:
            cancelled += record.party_size
            continue

        if record.booking_status == BookingStatus.WAITLIST:
            waitlist += record.party_size
        else:
            attending += record.party_size
            # a seated guest counts once at dinner, their plus-ones stay on cocktails
            cocktail_only += record.plus_ones if record.has_confirmed_dinner else record.party_size

        if isinstance(record.dinner, DinnerBookingDTO):
            if record.dinner.is_confirmed:
                dinner_confirmed += record.dinner.party_size
            else:
                dinner_waitlist += record.dinner.party_size

        cocktails_pulled_up += record.cocktail_only_pull_up_count
        dinner_pulled_up += record.dinner_pull_up_count

    return EventStatsDTO(
        event_slug=config.slug,
        attending=attending,
        waitlist=waitlist,
        cancelled=cancelled,
        cocktail_only=cocktail_only,
        dinner_confirmed=dinner_confirmed,
        dinner_waitlist=dinner_waitlist,
        cocktails_pulled_up=cocktails_pulled_up,
        dinner_pulled_up=dinner_pulled_up,
        pulled_up_total=cocktails_pulled_up + dinner_pulled_up,
        total_over_capacity=_over(attending, config.total_capacity),
        cocktail_over_capacity=_over(cocktail_only, config.cocktail_capacity),
        food_over_capacity=_over(dinner_confirmed, config.food_capacity),
        total_spots_left=_left(attending, config.total_capacity),
        cocktail_spots_left=_left(cocktail_only, config.cocktail_capacity),
        food_spots_left=_left(dinner_confirmed, config.food_capacity),
        slots=[_slot_stats(config, records, slot) for slot in generate_slots(config)],
    )


def slot_availability(
    config: EventConfigurationDTO, records: Iterable[RsvpDTO]
) -> list[DinnerSlotAvailabilityDTO]:
    """Slots as offered to guests choosing a dinner time."""
    records = list(records)
    availability = []
    for slot_time in generate_slots(config):
        stats = _slot_stats(config, records, slot_time)
        availability.append(
            DinnerSlotAvailabilityDTO(
                time=slot_time,
                available=stats.remaining_seats is None or stats.remaining_seats > 0,
                remaining=stats.remaining_seats,
                confirmed=stats.confirmed,
                waitlist=stats.waitlist,
            )
        )
    return availability
