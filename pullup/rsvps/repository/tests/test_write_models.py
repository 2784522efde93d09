"""Tests for SqlRsvpWriteModel against a temporary SQLite database."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select

from pullup.rsvps.dtos import (
    BookingStatus,
    CapacityExceededError,
    DinnerBookingStatus,
    DuplicateRsvpError,
    GuestSubmissionDTO,
    NotFoundError,
    RsvpRevisionDTO,
    ValidationError,
)
from pullup.rsvps.features.create_event.write_model import SqlEventWriteModel
from pullup.rsvps.repository.orm_models import Rsvp
from pullup.rsvps.repository.write_models import SqlRsvpWriteModel
from pullup.rsvps.tests.factories import DINNER_START


async def create_event(session_maker, **kwargs):
    values = {
        "title": "Launch Party",
        "dinner_enabled": True,
        "dinner_start_time": DINNER_START,
        "dinner_end_time": DINNER_START + timedelta(hours=4),
        "dinner_seating_interval_hours": 2.0,
        "max_plus_ones_per_guest": 10,
    }
    values.update(kwargs)
    return await SqlEventWriteModel(session_maker=session_maker).create_event(**values)


async def test_create_rsvp(session_maker):
    event = await create_event(session_maker, cocktail_capacity=10)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)

    rsvp = await write_model.create_rsvp(
        event.slug,
        GuestSubmissionDTO(
            email="ada@example.com",
            name="Ada",
            plus_ones=2,
            wants_dinner=True,
            dinner_time_slot=DINNER_START,
            dinner_party_size=2,
        ),
    )

    assert rsvp.event_slug == "launch-party"
    assert rsvp.booking_status == BookingStatus.CONFIRMED
    assert rsvp.dinner.booking_status == DinnerBookingStatus.CONFIRMED
    assert rsvp.cocktail_only_party_size == 1

    async with session_maker() as session:
        row = (await session.execute(select(Rsvp).where(Rsvp.uuid == rsvp.id))).scalar_one()
        assert row.email == "ada@example.com"
        assert row.plus_ones == 2
        assert row.dinner_party_size == 2
        assert row.dinner_pull_up_count == 0


async def test_create_rsvp_unknown_event(session_maker):
    write_model = SqlRsvpWriteModel(session_maker=session_maker)

    with pytest.raises(NotFoundError):
        await write_model.create_rsvp("nope", GuestSubmissionDTO(email="ada@example.com"))


async def test_create_rsvp_duplicate_email(session_maker):
    event = await create_event(session_maker)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    first = await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="ada@example.com"))

    with pytest.raises(DuplicateRsvpError) as exc_info:
        await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="Ada@Example.com"))

    assert exc_info.value.existing_id == first.id


async def test_same_email_allowed_on_other_event(session_maker):
    first = await create_event(session_maker)
    second = await create_event(session_maker)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)

    await write_model.create_rsvp(first.slug, GuestSubmissionDTO(email="ada@example.com"))
    rsvp = await write_model.create_rsvp(second.slug, GuestSubmissionDTO(email="ada@example.com"))

    assert second.slug == "launch-party-2"
    assert rsvp.event_slug == "launch-party-2"


async def test_hard_closed_event_stores_nothing(session_maker):
    event = await create_event(session_maker, cocktail_capacity=1, waitlist_enabled=False)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="first@example.com"))

    with pytest.raises(CapacityExceededError):
        await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="late@example.com"))

    async with session_maker() as session:
        rows = (await session.execute(select(Rsvp))).scalars().all()
        assert [row.email for row in rows] == ["first@example.com"]


async def test_concurrent_bookings_never_oversell(session_maker):
    event = await create_event(session_maker, cocktail_capacity=3)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    await write_model.create_rsvp(
        event.slug, GuestSubmissionDTO(email="first@example.com", plus_ones=1)
    )

    results = await asyncio.gather(
        *(
            SqlRsvpWriteModel(session_maker=session_maker).create_rsvp(
                event.slug, GuestSubmissionDTO(email=f"guest{i}@example.com")
            )
            for i in range(5)
        )
    )

    statuses = [rsvp.booking_status for rsvp in results]
    assert statuses.count(BookingStatus.CONFIRMED) == 1
    assert statuses.count(BookingStatus.WAITLIST) == 4


async def test_update_rsvp_applies_cascades(session_maker):
    event = await create_event(session_maker)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    rsvp = await write_model.create_rsvp(
        event.slug,
        GuestSubmissionDTO(
            email="ada@example.com",
            plus_ones=6,
            wants_dinner=True,
            dinner_time_slot=DINNER_START,
            dinner_party_size=4,
        ),
    )

    rsvp = await write_model.update_rsvp(
        rsvp.id, RsvpRevisionDTO(dinner_pull_up_count=9, cocktail_only_pull_up_count=2)
    )
    assert (rsvp.dinner_pull_up_count, rsvp.cocktail_only_pull_up_count) == (4, 2)

    rsvp = await write_model.update_rsvp(rsvp.id, RsvpRevisionDTO(wants_dinner=False))
    assert not rsvp.wants_dinner
    assert (rsvp.dinner_pull_up_count, rsvp.cocktail_only_pull_up_count) == (0, 2)

    async with session_maker() as session:
        row = (await session.execute(select(Rsvp).where(Rsvp.uuid == rsvp.id))).scalar_one()
        assert row.dinner_slot_time is None
        assert row.dinner_booking_status is None
        assert row.dinner_pull_up_count == 0
        assert row.cocktail_only_pull_up_count == 2


async def test_update_rsvp_invalid_value_changes_nothing(session_maker):
    event = await create_event(session_maker)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    rsvp = await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="ada@example.com"))

    with pytest.raises(ValidationError):
        await write_model.update_rsvp(
            rsvp.id, RsvpRevisionDTO(name="Ada", cocktail_only_pull_up_count=-1)
        )

    async with session_maker() as session:
        row = (await session.execute(select(Rsvp).where(Rsvp.uuid == rsvp.id))).scalar_one()
        assert row.name is None


async def test_update_rsvp_not_found(session_maker):
    event = await create_event(session_maker)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    rsvp = await write_model.create_rsvp(event.slug, GuestSubmissionDTO(email="ada@example.com"))

    with pytest.raises(NotFoundError):
        await write_model.update_rsvp(uuid4(), RsvpRevisionDTO(name="Ghost"))
    with pytest.raises(NotFoundError):
        await write_model.update_rsvp(
            rsvp.id, RsvpRevisionDTO(name="Ada"), event_slug="another-party"
        )


async def test_mark_all_pulled_up(session_maker):
    event = await create_event(session_maker, cocktail_capacity=4)
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    confirmed = await write_model.create_rsvp(
        event.slug,
        GuestSubmissionDTO(
            email="ada@example.com",
            plus_ones=2,
            wants_dinner=True,
            dinner_time_slot=DINNER_START,
            dinner_party_size=1,
        ),
    )
    await write_model.create_rsvp(
        event.slug, GuestSubmissionDTO(email="grace@example.com", plus_ones=3)
    )

    summary = await write_model.mark_all_pulled_up(event.slug)
    again = await write_model.mark_all_pulled_up(event.slug)

    assert (summary.updated, summary.skipped, summary.unchanged) == (1, 1, 0)
    assert (again.updated, again.skipped, again.unchanged) == (0, 1, 1)

    async with session_maker() as session:
        row = (await session.execute(select(Rsvp).where(Rsvp.uuid == confirmed.id))).scalar_one()
        assert (row.dinner_pull_up_count, row.cocktail_only_pull_up_count) == (1, 2)
