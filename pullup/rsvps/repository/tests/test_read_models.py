from datetime import timedelta
from uuid import uuid4

import pytest

from pullup.rsvps.dtos import (
    BookingStatus,
    DinnerBookingStatus,
    GuestSubmissionDTO,
    NotFoundError,
    RsvpRevisionDTO,
)
from pullup.rsvps.features.create_event.write_model import SqlEventWriteModel
from pullup.rsvps.repository.read_models import SqlRsvpReadModel
from pullup.rsvps.repository.write_models import SqlRsvpWriteModel
from pullup.rsvps.tests.factories import DINNER_START


@pytest.fixture
async def seeded_event(session_maker):
    """An event with one confirmed dinner party, one cocktail guest and one waitlisted party."""
    event = await SqlEventWriteModel(session_maker=session_maker).create_event(
        title="Supper Club",
        total_capacity=10,
        cocktail_capacity=6,
        food_capacity=4,
        max_plus_ones_per_guest=5,
        dinner_enabled=True,
        dinner_start_time=DINNER_START,
        dinner_end_time=DINNER_START + timedelta(hours=2),
        dinner_seating_interval_hours=1.0,
        dinner_max_seats_per_slot=4,
    )
    write_model = SqlRsvpWriteModel(session_maker=session_maker)
    dinner = await write_model.create_rsvp(
        event.slug,
        GuestSubmissionDTO(
            email="ada@example.com",
            plus_ones=3,
            wants_dinner=True,
            dinner_time_slot=DINNER_START,
            dinner_party_size=3,
        ),
    )
    await write_model.update_rsvp(dinner.id, RsvpRevisionDTO(dinner_pull_up_count=2))
    await write_model.create_rsvp(
        event.slug, GuestSubmissionDTO(email="grace@example.com", plus_ones=1)
    )
    await write_model.create_rsvp(
        event.slug, GuestSubmissionDTO(email="late@example.com", plus_ones=2)
    )
    return event


async def test_get_event_configuration(session_maker, seeded_event):
    read_model = SqlRsvpReadModel(session_maker=session_maker)

    config = await read_model.get_event_configuration("supper-club")

    assert config == seeded_event
    assert config.dinner_start_time == DINNER_START


async def test_get_event_configuration_not_found(session_maker):
    with pytest.raises(NotFoundError):
        await SqlRsvpReadModel(session_maker=session_maker).get_event_configuration("nope")


async def test_list_rsvps_in_arrival_order(session_maker, seeded_event):
    read_model = SqlRsvpReadModel(session_maker=session_maker)

    rsvps = await read_model.list_rsvps(seeded_event.slug)

    assert [rsvp.email for rsvp in rsvps] == [
        "ada@example.com",
        "grace@example.com",
        "late@example.com",
    ]
    assert [rsvp.booking_status for rsvp in rsvps] == [
        BookingStatus.CONFIRMED,
        BookingStatus.CONFIRMED,
        BookingStatus.WAITLIST,
    ]
    assert rsvps[0].dinner.booking_status == DinnerBookingStatus.CONFIRMED
    assert rsvps[0].dinner.slot_time == DINNER_START
    assert rsvps[0].dinner_pull_up_count == 2


async def test_get_rsvp(session_maker, seeded_event):
    read_model = SqlRsvpReadModel(session_maker=session_maker)
    listed = (await read_model.list_rsvps(seeded_event.slug))[1]

    rsvp = await read_model.get_rsvp(listed.id)

    assert rsvp == listed

    with pytest.raises(NotFoundError):
        await read_model.get_rsvp(uuid4())


async def test_get_event_stats(session_maker, seeded_event):
    stats = await SqlRsvpReadModel(session_maker=session_maker).get_event_stats(seeded_event.slug)

    assert stats.attending == 6
    assert stats.waitlist == 3
    assert stats.cocktail_only == 3 + 2
    assert stats.dinner_confirmed == 3
    assert stats.dinner_pulled_up == 2
    assert stats.food_spots_left == 1
    assert stats.cocktail_spots_left == 1
    assert [slot.confirmed for slot in stats.slots] == [3, 0, 0]


async def test_get_dinner_slots(session_maker, seeded_event):
    slots = await SqlRsvpReadModel(session_maker=session_maker).get_dinner_slots(
        seeded_event.slug
    )

    assert [slot.time for slot in slots] == [
        DINNER_START,
        DINNER_START + timedelta(hours=1),
        DINNER_START + timedelta(hours=2),
    ]
    assert [slot.remaining for slot in slots] == [1, 4, 4]
