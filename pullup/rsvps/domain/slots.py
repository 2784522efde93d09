"""Dinner seating slots.

Slots are a pure function of the event configuration: the dinner window is
stepped from start to end (inclusive) at the seating interval. Nothing about
the current bookings influences which slots exist.
"""

from datetime import UTC, datetime, timedelta

from pullup.rsvps.dtos import (
    MAX_PLUS_ONES,
    MAX_SEATING_INTERVAL_HOURS,
    MIN_SEATING_INTERVAL_HOURS,
    EventConfigurationDTO,
    ValidationError,
)


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def seating_interval(config: EventConfigurationDTO) -> timedelta | None:
    hours = config.dinner_seating_interval_hours
    if hours is None or hours <= 0:
        return None
    return timedelta(hours=hours)


def generate_slots(config: EventConfigurationDTO) -> list[datetime]:
    """Expand the dinner window into its ordered seating times.

    Returns an empty list when dinner is disabled or the window is unusable
    (missing bounds, end not after start, non-positive interval).
    """
    if not config.dinner_enabled:
        return []

    start = as_utc(config.dinner_start_time)
    end = as_utc(config.dinner_end_time)
    interval = seating_interval(config)
    if start is None or end is None or interval is None or end <= start:
        return []

    slots = []
    current = start
    while current <= end:
        slots.append(current)
        current += interval
    return slots


def attribute_slot(
    config: EventConfigurationDTO,
    requested: datetime | None,
    field: str = "dinnerTimeSlot",
) -> datetime:
    """Map a requested dinner time onto the nearest configured slot.

    The request must fall within half a seating interval of a slot.
    """
    slots = generate_slots(config)
    if not slots:
        raise ValidationError(field, "dinner seating is not available for this event")
    if requested is None:
        raise ValidationError(field, "a dinner time slot is required")

    requested = as_utc(requested)
    nearest = min(slots, key=lambda slot: abs(slot - requested))
    if abs(nearest - requested) > seating_interval(config) / 2:
        raise ValidationError(field, f"{requested.isoformat()} is not a dinner time slot")
    return nearest


def validate_event_configuration(config: EventConfigurationDTO) -> None:
    """Check the configuration invariants before an event is stored."""
    for name in ("cocktail_capacity", "food_capacity", "total_capacity"):
        value = getattr(config, name)
        if value is not None and value < 0:
            raise ValidationError(name, "must not be negative")

    if not 0 <= config.max_plus_ones_per_guest <= MAX_PLUS_ONES:
        raise ValidationError("max_plus_ones_per_guest", f"must be between 0 and {MAX_PLUS_ONES}")

    if config.dinner_max_seats_per_slot is not None and config.dinner_max_seats_per_slot < 1:
        raise ValidationError("dinner_max_seats_per_slot", "must be at least 1")

    if not config.dinner_enabled:
        return

    if config.dinner_start_time is None or config.dinner_end_time is None:
        raise ValidationError("dinner_start_time", "dinner needs a start and an end time")
    if as_utc(config.dinner_start_time) > as_utc(config.dinner_end_time):
        raise ValidationError("dinner_end_time", "dinner cannot end before it starts")

    hours = config.dinner_seating_interval_hours
    if hours is None or not MIN_SEATING_INTERVAL_HOURS <= hours <= MAX_SEATING_INTERVAL_HOURS:
        raise ValidationError(
            "dinner_seating_interval_hours",
            f"must be between {MIN_SEATING_INTERVAL_HOURS} and {MAX_SEATING_INTERVAL_HOURS} hours",
        )
