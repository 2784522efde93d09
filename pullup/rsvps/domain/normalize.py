"""Ingestion of legacy RSVP payloads.

Older clients send ``status``/``dinnerStatus`` strings and
``pulledUpFor*`` counters instead of the canonical ``bookingStatus``,
``dinnerBookingStatus`` and ``*PullUpCount`` fields. They are mapped here,
once, so nothing downstream needs fallbacks.
"""

from collections.abc import Mapping
from typing import Any

LEGACY_BOOKING_STATUS = {
    "attending": "CONFIRMED",
    "confirmed": "CONFIRMED",
    "waitlist": "WAITLIST",
    "cancelled": "CANCELLED",
    "declined": "CANCELLED",
}

# "cocktails" and "cocktails_waitlist" both meant: dinner not (yet) seated
LEGACY_DINNER_STATUS = {
    "confirmed": "CONFIRMED",
    "waitlist": "WAITLIST",
    "cocktails": "WAITLIST",
    "cocktails_waitlist": "WAITLIST",
}

# canonical key -> keys it may arrive under, canonical first
FIELD_SOURCES: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "email": ("email",),
    "plusOnes": ("plusOnes",),
    "bookingStatus": ("bookingStatus", "status"),
    "wantsDinner": ("wantsDinner",),
    "dinnerTimeSlot": ("dinnerTimeSlot", "dinner.slotTime"),
    "dinnerPartySize": ("dinnerPartySize",),
    "dinnerBookingStatus": ("dinnerBookingStatus", "dinner.bookingStatus", "dinnerStatus"),
    "dinnerPullUpCount": ("dinnerPullUpCount", "pulledUpForDinner"),
    "cocktailOnlyPullUpCount": ("cocktailOnlyPullUpCount", "pulledUpForCocktails"),
    "forceConfirm": ("forceConfirm",),
}


def _translate(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if key == "status":
        return LEGACY_BOOKING_STATUS.get(value.lower(), value)
    if key == "dinnerStatus":
        return LEGACY_DINNER_STATUS.get(value.lower(), value)
    return value


def _flatten_dinner(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Lift a nested ``dinner`` object into the flat ``dinner.*`` keys."""
    flat = dict(payload)
    if "dinner" not in payload:
        return flat

    dinner = flat.pop("dinner")
    if dinner is None:
        flat.setdefault("wantsDinner", False)
        return flat
    if isinstance(dinner, Mapping):
        if "enabled" in dinner:
            flat.setdefault("wantsDinner", dinner["enabled"])
        if "slotTime" in dinner:
            flat.setdefault("dinner.slotTime", dinner["slotTime"])
        if "partySize" in dinner:
            flat.setdefault("dinnerPartySize", dinner["partySize"])
        if "bookingStatus" in dinner:
            flat.setdefault("dinner.bookingStatus", dinner["bookingStatus"])
    return flat


def normalize_legacy_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Map a raw payload onto canonical field names.

    A canonical key is emitted when any of its source keys is present. Its
    value is the first non-null source value, so canonical names win over
    legacy ones. Unknown keys are dropped.
    """
    flat = _flatten_dinner(payload)
    normalized: dict[str, Any] = {}
    for canonical, sources in FIELD_SOURCES.items():
        present = [key for key in sources if key in flat]
        if not present:
            continue
        normalized[canonical] = next(
            (_translate(key, flat[key]) for key in present if flat[key] is not None),
            None,
        )
    return normalized
