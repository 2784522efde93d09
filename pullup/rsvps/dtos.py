from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import ClassVar
from uuid import UUID

MAX_PLUS_ONES = 10
MAX_DINNER_PARTY_SIZE = 20
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MIN_SEATING_INTERVAL_HOURS = 0.5
MAX_SEATING_INTERVAL_HOURS = 24.0


class RsvpError(Exception):
    """Base class for errors raised by the booking engine and record store."""


class ValidationError(RsvpError):
    """Raised when input is malformed or outside its declared range."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(RsvpError):
    """Raised when an event or RSVP record does not exist."""

    def __init__(self, kind: str, key: object) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class CapacityExceededError(RsvpError):
    """Raised when capacity is hard-closed and the waitlist is disabled."""

    def __init__(self, event_slug: str, requested: int, available: int) -> None:
        self.event_slug = event_slug
        self.requested = requested
        self.available = available
        super().__init__(
            f"Event '{event_slug}' is full: {requested} requested, {available} available"
        )


class DuplicateRsvpError(RsvpError):
    """Raised when an email already has an RSVP for the event."""

    def __init__(self, email: str, existing_id: UUID) -> None:
        self.email = email
        self.existing_id = existing_id
        super().__init__(f"'{email}' has already RSVP'd to this event")


class BookingStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    WAITLIST = "WAITLIST"
    CANCELLED = "CANCELLED"


class DinnerBookingStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    WAITLIST = "WAITLIST"


class DinnerOverflowAction(str, Enum):
    WAITLIST = "WAITLIST"


class PullUpStatus(str, Enum):
    NONE = "NONE"
    PARTIAL = "PARTIAL"
    FULL = "FULL"


class _Unset:
    """Marks a revision field the caller did not supply."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class EventConfigurationDTO:
    """Capacity and dinner-seating policy of one event, read-only per decision."""

    slug: str
    title: str | None = None
    cocktail_capacity: int | None = None
    food_capacity: int | None = None
    total_capacity: int | None = None
    waitlist_enabled: bool = True
    max_plus_ones_per_guest: int = 3
    dinner_enabled: bool = False
    dinner_start_time: datetime | None = None
    dinner_end_time: datetime | None = None
    dinner_seating_interval_hours: float | None = 2.0
    dinner_max_seats_per_slot: int | None = None
    dinner_overflow_action: DinnerOverflowAction = DinnerOverflowAction.WAITLIST


@dataclass(frozen=True)
class NoDinner:
    """The guest has not opted into dinner."""

    enabled: ClassVar[bool] = False

    def __bool__(self) -> bool:
        return False


NO_DINNER = NoDinner()


@dataclass(frozen=True)
class DinnerBookingDTO:
    """A seat reservation for part of the party at one dinner slot."""

    slot_time: datetime
    party_size: int
    booking_status: DinnerBookingStatus

    enabled: ClassVar[bool] = True

    @property
    def is_confirmed(self) -> bool:
        return self.booking_status == DinnerBookingStatus.CONFIRMED


DinnerDTO = NoDinner | DinnerBookingDTO


@dataclass(frozen=True)
class RsvpDTO:
    """One guest party's reservation for an event."""

    id: UUID
    event_slug: str
    email: str
    booking_status: BookingStatus
    name: str | None = None
    plus_ones: int = 0
    dinner: DinnerDTO = NO_DINNER
    dinner_pull_up_count: int = 0
    cocktail_only_pull_up_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def party_size(self) -> int:
        return 1 + self.plus_ones

    @property
    def total_guests(self) -> int:
        return self.party_size

    @property
    def is_confirmed(self) -> bool:
        return self.booking_status == BookingStatus.CONFIRMED

    @property
    def wants_dinner(self) -> bool:
        return self.dinner.enabled

    @property
    def has_confirmed_dinner(self) -> bool:
        return isinstance(self.dinner, DinnerBookingDTO) and self.dinner.is_confirmed

    @property
    def dinner_party_size(self) -> int:
        if isinstance(self.dinner, DinnerBookingDTO):
            return self.dinner.party_size
        return 0

    @property
    def cocktail_only_party_size(self) -> int:
        """Portion of the party not seated by a confirmed dinner booking."""
        if self.is_confirmed and self.has_confirmed_dinner:
            return max(0, self.party_size - self.dinner.party_size)
        return self.party_size

    @property
    def pull_up_total(self) -> int:
        return self.dinner_pull_up_count + self.cocktail_only_pull_up_count

    @property
    def pull_up_status(self) -> PullUpStatus:
        if not self.is_confirmed or self.pull_up_total == 0:
            return PullUpStatus.NONE
        if self.pull_up_total >= self.party_size:
            return PullUpStatus.FULL
        return PullUpStatus.PARTIAL

    def without_dinner(self) -> "RsvpDTO":
        """Clear the dinner booking together with its arrival count."""
        return replace(self, dinner=NO_DINNER, dinner_pull_up_count=0)


@dataclass(frozen=True)
class GuestSubmissionDTO:
    """A guest's RSVP form submission."""

    email: str
    name: str | None = None
    plus_ones: int = 0
    wants_dinner: bool = False
    dinner_time_slot: datetime | None = None
    dinner_party_size: int | None = None


@dataclass(frozen=True)
class RsvpRevisionDTO:
    """Partial update of an RSVP; fields left as UNSET are not touched."""

    name: str | None | _Unset = UNSET
    email: str | _Unset = UNSET
    plus_ones: int | _Unset = UNSET
    booking_status: BookingStatus | str | _Unset = UNSET
    wants_dinner: bool | _Unset = UNSET
    dinner_time_slot: datetime | None | _Unset = UNSET
    dinner_party_size: int | None | _Unset = UNSET
    dinner_booking_status: DinnerBookingStatus | str | _Unset = UNSET
    dinner_pull_up_count: int | None | _Unset = UNSET
    cocktail_only_pull_up_count: int | None | _Unset = UNSET
    force_confirm: bool = False

    def supplied(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


@dataclass(frozen=True)
class EventUpdateDTO:
    """Partial change of an event's title, capacity or dinner policy."""

    title: str | None | _Unset = UNSET
    cocktail_capacity: int | None | _Unset = UNSET
    food_capacity: int | None | _Unset = UNSET
    total_capacity: int | None | _Unset = UNSET
    waitlist_enabled: bool | None | _Unset = UNSET
    max_plus_ones_per_guest: int | None | _Unset = UNSET
    dinner_enabled: bool | None | _Unset = UNSET
    dinner_start_time: datetime | None | _Unset = UNSET
    dinner_end_time: datetime | None | _Unset = UNSET
    dinner_seating_interval_hours: float | None | _Unset = UNSET
    dinner_max_seats_per_slot: int | None | _Unset = UNSET

    def changes(self) -> dict[str, object]:
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__
            if getattr(self, name) is not UNSET
        }


@dataclass(frozen=True)
class BookingRequest:
    """The party a booking decision is made for."""

    party_size: int
    wants_dinner: bool = False
    dinner_slot_time: datetime | None = None
    dinner_party_size: int | None = None
    force_confirm: bool = False


@dataclass(frozen=True)
class DinnerDecision:
    status: DinnerBookingStatus
    slot_time: datetime
    party_size: int


@dataclass(frozen=True)
class BookingDecision:
    cocktail_status: BookingStatus
    # party members not allocated to the dinner track
    cocktail_only_party_size: int
    dinner: DinnerDecision | None = None


@dataclass(frozen=True)
class SlotStatsDTO:
    time: datetime
    confirmed: int = 0
    waitlist: int = 0
    pulled_up: int = 0
    remaining_seats: int | None = None
    over_capacity: bool = False


@dataclass(frozen=True)
class DinnerSlotAvailabilityDTO:
    time: datetime
    available: bool
    remaining: int | None
    confirmed: int
    waitlist: int


@dataclass(frozen=True)
class EventStatsDTO:
    """Live dashboard numbers for one event, counted in people."""

    event_slug: str
    attending: int = 0
    waitlist: int = 0
    cancelled: int = 0
    cocktail_only: int = 0
    dinner_confirmed: int = 0
    dinner_waitlist: int = 0
    cocktails_pulled_up: int = 0
    dinner_pulled_up: int = 0
    pulled_up_total: int = 0
    total_over_capacity: int | None = None
    cocktail_over_capacity: int | None = None
    food_over_capacity: int | None = None
    total_spots_left: int | None = None
    cocktail_spots_left: int | None = None
    food_spots_left: int | None = None
    slots: list[SlotStatsDTO] = field(default_factory=list)


@dataclass(frozen=True)
class PullUpSummaryDTO:
    """Outcome of marking a whole event as arrived."""

    updated: int = 0
    skipped: int = 0
    unchanged: int = 0
