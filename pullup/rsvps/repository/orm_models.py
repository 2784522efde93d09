from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pullup.config.table_names import TableNames
from pullup.models.base import Base, TimeStamp
from pullup.rsvps.domain.slots import as_utc
from pullup.rsvps.dtos import (
    NO_DINNER,
    BookingStatus,
    DinnerBookingDTO,
    DinnerBookingStatus,
    DinnerOverflowAction,
    EventConfigurationDTO,
    RsvpDTO,
)


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Capacity
    cocktail_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    food_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    waitlist_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    max_plus_ones_per_guest: Mapped[int] = mapped_column(Integer, default=3, nullable=False)

    # Dinner seating policy
    dinner_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dinner_start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dinner_end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dinner_seating_interval_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    dinner_max_seats_per_slot: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dinner_overflow_action: Mapped[str] = mapped_column(
        Enum(DinnerOverflowAction, name="dinner_overflow_action_enum"),
        default=DinnerOverflowAction.WAITLIST,
        nullable=False,
    )

    rsvps: Mapped[list["Rsvp"]] = relationship("Rsvp", back_populates="event")

    def to_configuration(self) -> EventConfigurationDTO:
        return EventConfigurationDTO(
            slug=self.slug,
            title=self.title,
            cocktail_capacity=self.cocktail_capacity,
            food_capacity=self.food_capacity,
            total_capacity=self.total_capacity,
            waitlist_enabled=self.waitlist_enabled,
            max_plus_ones_per_guest=self.max_plus_ones_per_guest,
            dinner_enabled=self.dinner_enabled,
            dinner_start_time=as_utc(self.dinner_start_time),
            dinner_end_time=as_utc(self.dinner_end_time),
            dinner_seating_interval_hours=self.dinner_seating_interval_hours,
            dinner_max_seats_per_slot=self.dinner_max_seats_per_slot,
            dinner_overflow_action=DinnerOverflowAction(self.dinner_overflow_action),
        )

    def __repr__(self) -> str:
        return f"<Event {self.slug}>"


class Rsvp(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_rsvps_event_email"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event: Mapped[Event] = relationship("Event", back_populates="rsvps")

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_ones: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    booking_status: Mapped[str] = mapped_column(
        Enum(BookingStatus, name="booking_status_enum"),
        nullable=False,
    )

    # Dinner booking, all null when the guest has not opted into dinner
    dinner_slot_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dinner_party_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dinner_booking_status: Mapped[str | None] = mapped_column(
        Enum(DinnerBookingStatus, name="dinner_booking_status_enum"),
        nullable=True,
    )

    # Arrivals
    dinner_pull_up_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cocktail_only_pull_up_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def to_dto(self, event_slug: str) -> RsvpDTO:
        dinner = NO_DINNER
        if self.dinner_slot_time is not None:
            dinner = DinnerBookingDTO(
                slot_time=as_utc(self.dinner_slot_time),
                party_size=self.dinner_party_size,
                booking_status=DinnerBookingStatus(self.dinner_booking_status),
            )
        return RsvpDTO(
            id=self.uuid,
            event_slug=event_slug,
            email=self.email,
            name=self.name,
            plus_ones=self.plus_ones,
            booking_status=BookingStatus(self.booking_status),
            dinner=dinner,
            dinner_pull_up_count=self.dinner_pull_up_count,
            cocktail_only_pull_up_count=self.cocktail_only_pull_up_count,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )

    def apply_dto(self, rsvp: RsvpDTO) -> None:
        """Copy every mutable field of ``rsvp`` onto this row."""
        self.email = rsvp.email
        self.name = rsvp.name
        self.plus_ones = rsvp.plus_ones
        self.booking_status = rsvp.booking_status
        if isinstance(rsvp.dinner, DinnerBookingDTO):
            self.dinner_slot_time = rsvp.dinner.slot_time
            self.dinner_party_size = rsvp.dinner.party_size
            self.dinner_booking_status = rsvp.dinner.booking_status
        else:
            self.dinner_slot_time = None
            self.dinner_party_size = None
            self.dinner_booking_status = None
        self.dinner_pull_up_count = rsvp.dinner_pull_up_count
        self.cocktail_only_pull_up_count = rsvp.cocktail_only_pull_up_count
        if rsvp.updated_at is not None:
            self.updated_at = rsvp.updated_at

    def __repr__(self) -> str:
        return f"<Rsvp {self.email} - {self.booking_status}>"
