from uuid import uuid4

import pytest

from pullup.rsvps.dtos import BookingStatus, DinnerBookingStatus
from pullup.rsvps.features.revise_rsvp.router import RsvpRevisionSubmit, get_rsvp_write_model
from pullup.rsvps.tests.factories import make_dinner, make_event, make_rsvp
from pullup.rsvps.tests.inmemory_models import InMemoryRsvpStore, InMemoryRsvpWriteModel
from pullup.rsvps.urls import REVISE_RSVP_URL


def url_for(rsvp_id, slug: str = "launch-party") -> str:
    return REVISE_RSVP_URL.format(slug=slug, rsvp_id=rsvp_id)


def overrides_for(store: InMemoryRsvpStore) -> dict:
    write_model = InMemoryRsvpWriteModel(store)
    return {get_rsvp_write_model: lambda: write_model}


@pytest.mark.asyncio
async def test_revise_pull_up_counts(client_factory):
    rsvp = make_rsvp(party_size=7, dinner=make_dinner(4))
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(
            url_for(rsvp.id), json={"dinnerPullUpCount": 9, "cocktailOnlyPullUpCount": 3}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["dinnerPullUpCount"] == 4
    assert data["cocktailOnlyPullUpCount"] == 3
    assert data["pullUpStatus"] == "FULL"
    assert store.rsvps[rsvp.id].dinner_pull_up_count == 4


@pytest.mark.asyncio
async def test_revise_with_legacy_field_names(client_factory):
    rsvp = make_rsvp(party_size=3, dinner=make_dinner(2), dinner_pull_up_count=2)
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(
            url_for(rsvp.id),
            json={"status": "cancelled", "pulledUpForCocktails": 1},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["bookingStatus"] == "CANCELLED"
    assert data["dinnerPullUpCount"] == 0
    assert data["cocktailOnlyPullUpCount"] == 0


@pytest.mark.asyncio
async def test_revise_dinner_opt_out(client_factory):
    rsvp = make_rsvp(
        party_size=5, dinner=make_dinner(3), dinner_pull_up_count=3, cocktail_only_pull_up_count=2
    )
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(url_for(rsvp.id), json={"dinner": None})

    assert response.status_code == 200
    data = response.json()
    assert data["wantsDinner"] is False
    assert data["dinner"] is None
    assert data["dinnerPullUpCount"] == 0
    assert data["cocktailOnlyPullUpCount"] == 2


@pytest.mark.asyncio
async def test_revise_force_confirm(client_factory):
    full = make_rsvp(party_size=2, dinner=make_dinner(2))
    waiting = make_rsvp(
        party_size=2,
        status=BookingStatus.WAITLIST,
        dinner=make_dinner(2, DinnerBookingStatus.WAITLIST),
    )
    store = InMemoryRsvpStore(
        events=[make_event(cocktail_capacity=2, dinner_max_seats_per_slot=2)],
        rsvps=[full, waiting],
    )

    async with client_factory(overrides_for(store)) as client:
        gated = await client.put(url_for(waiting.id), json={"bookingStatus": "CONFIRMED"})
        forced = await client.put(
            url_for(waiting.id),
            json={
                "bookingStatus": "CONFIRMED",
                "dinnerBookingStatus": "CONFIRMED",
                "forceConfirm": True,
            },
        )

    assert gated.json()["bookingStatus"] == "WAITLIST"
    assert forced.json()["bookingStatus"] == "CONFIRMED"
    assert forced.json()["dinner"]["bookingStatus"] == "CONFIRMED"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"dinnerPullUpCount": -1}, "dinnerPullUpCount"),
        ({"bookingStatus": "MAYBE"}, "bookingStatus"),
        ({"plusOnes": 12}, "plusOnes"),
    ],
)
async def test_revise_rejects_invalid_values(client_factory, payload, field):
    rsvp = make_rsvp(party_size=2)
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(url_for(rsvp.id), json=payload)

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == field
    assert store.rsvps[rsvp.id] == rsvp


@pytest.mark.asyncio
async def test_revise_rejects_malformed_types(client_factory):
    rsvp = make_rsvp(party_size=2)
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        response = await client.put(url_for(rsvp.id), json={"plusOnes": "lots"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_revise_not_found(client_factory):
    rsvp = make_rsvp()
    store = InMemoryRsvpStore(events=[make_event()], rsvps=[rsvp])

    async with client_factory(overrides_for(store)) as client:
        missing = await client.put(url_for(uuid4()), json={"name": "Ghost"})
        wrong_event = await client.put(url_for(rsvp.id, slug="other-party"), json={"name": "X"})

    assert missing.status_code == 404
    assert wrong_event.status_code == 404


@pytest.mark.parametrize(
    ("payload", "expected"),
    [({}, False), ({"forceConfirm": None}, False), ({"forceConfirm": True}, True)],
)
def test_force_confirm_is_always_a_bool(payload, expected):
    revision = RsvpRevisionSubmit.model_validate(payload).to_dto()

    assert revision.force_confirm is expected
    assert not revision.supplied("name")
