"""Tests for SqlEventWriteModel."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from pullup.config.settings import settings
from pullup.rsvps.dtos import ValidationError
from pullup.rsvps.features.create_event.write_model import SqlEventWriteModel, slugify
from pullup.rsvps.repository.orm_models import Event


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("PullUp Launch Party", "pullup-launch-party"),
        ("  Summer_Soirée 2025! ", "summer-soire-2025"),
        ("a -- b", "a-b"),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


async def test_create_event_applies_defaults(session_maker):
    write_model = SqlEventWriteModel(session_maker=session_maker)

    config = await write_model.create_event(title="PullUp Launch Party", cocktail_capacity=80)

    assert config.slug == "pullup-launch-party"
    assert config.cocktail_capacity == 80
    assert config.max_plus_ones_per_guest == settings.DEFAULT_MAX_PLUS_ONES
    assert config.dinner_seating_interval_hours == settings.DEFAULT_DINNER_SEATING_INTERVAL_HOURS
    assert not config.dinner_enabled

    async with session_maker() as session:
        event = (await session.execute(select(Event))).scalar_one()
        assert event.title == "PullUp Launch Party"
        assert event.waitlist_enabled is True


async def test_create_event_makes_slug_unique(session_maker):
    write_model = SqlEventWriteModel(session_maker=session_maker)

    slugs = [(await write_model.create_event(title="Dinner Club")).slug for _ in range(3)]

    assert slugs == ["dinner-club", "dinner-club-2", "dinner-club-3"]


async def test_create_event_with_explicit_slug(session_maker):
    config = await SqlEventWriteModel(session_maker=session_maker).create_event(
        title="Anything", slug="My Slug"
    )

    assert config.slug == "my-slug"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"title": " "},
        {"title": "Party", "cocktail_capacity": -5},
        {"title": "Party", "dinner_enabled": True},
        {
            "title": "Party",
            "dinner_enabled": True,
            "dinner_start_time": datetime(2025, 6, 1, 22, tzinfo=UTC),
            "dinner_end_time": datetime(2025, 6, 1, 18, tzinfo=UTC),
        },
    ],
)
async def test_create_event_rejects_invalid_configuration(session_maker, kwargs):
    with pytest.raises(ValidationError):
        await SqlEventWriteModel(session_maker=session_maker).create_event(**kwargs)

    async with session_maker() as session:
        assert (await session.execute(select(Event))).scalars().all() == []
