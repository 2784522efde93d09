import pytest

from pullup.rsvps.features.update_event.router import get_event_update_write_model
from pullup.rsvps.tests.factories import make_event, make_rsvp
from pullup.rsvps.tests.inmemory_models import (
    InMemoryEventUpdateWriteModel,
    InMemoryRsvpStore,
)
from pullup.rsvps.urls import HOST_EVENT_URL

URL = HOST_EVENT_URL.format(slug="launch-party")


def overrides_for(store: InMemoryRsvpStore) -> dict:
    write_model = InMemoryEventUpdateWriteModel(store)
    return {get_event_update_write_model: lambda: write_model}


@pytest.mark.asyncio
async def test_update_event_capacity_and_dinner_policy(client_factory):
    store = InMemoryRsvpStore(
        events=[make_event(title="Launch Party", cocktail_capacity=50, food_capacity=20)]
    )

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(
            URL,
            json={
                "title": "  Launch Party II ",
                "cocktailCapacity": 80,
                "foodCapacity": None,
                "dinnerSeatingIntervalHours": 1,
                "dinnerMaxSeatsPerSlot": 12,
            },
        )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Launch Party II"
    assert data["cocktailCapacity"] == 80
    assert data["foodCapacity"] is None
    assert data["dinnerSeatingIntervalHours"] == 1.0
    assert data["dinnerMaxSeatsPerSlot"] == 12

    event = store.events["launch-party"]
    assert event.cocktail_capacity == 80
    assert event.food_capacity is None
    # untouched fields keep their value
    assert event.max_plus_ones_per_guest == 10
    assert event.dinner_enabled


@pytest.mark.asyncio
async def test_update_event_keeps_existing_bookings(client_factory):
    rsvp = make_rsvp(party_size=4)
    store = InMemoryRsvpStore(events=[make_event(cocktail_capacity=10)], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(URL, json={"cocktailCapacity": 2})

    assert response.status_code == 200
    assert store.rsvps[rsvp.id] == rsvp


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"cocktailCapacity": -1}, "cocktail_capacity"),
        ({"title": "   "}, "title"),
        ({"waitlistEnabled": None}, "waitlist_enabled"),
        ({"dinnerEndTime": "2025-06-01T17:00:00Z"}, "dinner_end_time"),
        ({"dinnerSeatingIntervalHours": 48}, "dinner_seating_interval_hours"),
        ({"dinnerStartTime": None}, "dinner_start_time"),
    ],
)
async def test_update_event_rejects_invalid_configuration(client_factory, payload, field):
    event = make_event(title="Launch Party")
    store = InMemoryRsvpStore(events=[event])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(URL, json=payload)

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == field
    assert store.events["launch-party"] == event


@pytest.mark.asyncio
async def test_disabling_dinner_drops_the_window_check(client_factory):
    store = InMemoryRsvpStore(events=[make_event()])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(
            URL, json={"dinnerEnabled": False, "dinnerStartTime": None, "dinnerEndTime": None}
        )

    assert response.status_code == 200
    assert response.json()["dinnerEnabled"] is False


@pytest.mark.asyncio
async def test_update_event_not_found(client_factory):
    store = InMemoryRsvpStore(events=[make_event()])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(HOST_EVENT_URL.format(slug="nope"), json={"title": "X"})

    assert response.status_code == 404
