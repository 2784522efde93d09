"""CLI commands for PullUp event and RSVP management."""

import asyncio
from datetime import datetime

import typer

from pullup.config.logging import setup_logging
from pullup.rsvps.dtos import BookingStatus, GuestSubmissionDTO, RsvpError
from pullup.rsvps.features.create_event.write_model import SqlEventWriteModel
from pullup.rsvps.repository.read_models import SqlRsvpReadModel
from pullup.rsvps.repository.write_models import SqlRsvpWriteModel

app = typer.Typer(help="CLI commands for PullUp event and RSVP management")


def _run(coro):
    """Run a coroutine, turning booking errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except RsvpError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)


def _spots(value: int | None) -> str:
    return "unlimited" if value is None else str(value)


@app.command()
def create_event(
    title: str = typer.Argument(..., help="Event title"),
    slug: str | None = typer.Option(None, help="URL slug; derived from the title when omitted"),
    cocktail_capacity: int | None = typer.Option(None, help="Cocktail (main) capacity"),
    food_capacity: int | None = typer.Option(None, help="Total dinner seats"),
    total_capacity: int | None = typer.Option(None, help="Overall headcount cap"),
    waitlist: bool = typer.Option(True, help="Waitlist guests once capacity is reached"),
    max_plus_ones: int | None = typer.Option(None, help="Max plus-ones per guest"),
    dinner_start: datetime | None = typer.Option(None, help="First dinner seating (ISO 8601)"),
    dinner_end: datetime | None = typer.Option(None, help="Last dinner seating (ISO 8601)"),
    seating_interval: float | None = typer.Option(None, help="Hours between seatings"),
    seats_per_slot: int | None = typer.Option(None, help="Dinner seats per seating"),
):
    """Create an event. Dinner is enabled when a dinner window is given."""
    write_model = SqlEventWriteModel()
    event = _run(
        write_model.create_event(
            title=title,
            slug=slug,
            cocktail_capacity=cocktail_capacity,
            food_capacity=food_capacity,
            total_capacity=total_capacity,
            waitlist_enabled=waitlist,
            max_plus_ones_per_guest=max_plus_ones,
            dinner_enabled=dinner_start is not None or dinner_end is not None,
            dinner_start_time=dinner_start,
            dinner_end_time=dinner_end,
            dinner_seating_interval_hours=seating_interval,
            dinner_max_seats_per_slot=seats_per_slot,
        )
    )

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Slug: {event.slug}", fg=typer.colors.CYAN)
    typer.secho(f"  Cocktail capacity: {_spots(event.cocktail_capacity)}", fg=typer.colors.BLUE)
    typer.secho(f"  Max plus-ones: {event.max_plus_ones_per_guest}", fg=typer.colors.BLUE)
    if event.dinner_enabled:
        typer.secho(
            f"  Dinner: {event.dinner_start_time} - {event.dinner_end_time}",
            fg=typer.colors.BLUE,
        )


@app.command()
def submit_rsvp(
    slug: str = typer.Argument(..., help="Event slug"),
    email: str = typer.Option(..., help="Guest email"),
    name: str | None = typer.Option(None, help="Guest name"),
    plus_ones: int = typer.Option(0, help="Number of plus-ones"),
    dinner_slot: datetime | None = typer.Option(None, help="Requested dinner seating"),
    dinner_party_size: int | None = typer.Option(None, help="Seats needed at dinner"),
):
    """Submit an RSVP on behalf of a guest."""
    submission = GuestSubmissionDTO(
        email=email,
        name=name,
        plus_ones=plus_ones,
        wants_dinner=dinner_slot is not None,
        dinner_time_slot=dinner_slot,
        dinner_party_size=dinner_party_size,
    )
    rsvp = _run(SqlRsvpWriteModel().create_rsvp(slug, submission))

    confirmed = rsvp.booking_status == BookingStatus.CONFIRMED
    color = typer.colors.GREEN if confirmed else typer.colors.YELLOW
    typer.secho(f"RSVP {rsvp.booking_status.value}", fg=color)
    typer.secho(f"  ID: {rsvp.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Party size: {rsvp.party_size}", fg=typer.colors.BLUE)
    if rsvp.dinner.enabled:
        typer.secho(
            f"  Dinner: {rsvp.dinner.slot_time} x{rsvp.dinner.party_size}"
            f" ({rsvp.dinner.booking_status.value})",
            fg=typer.colors.BLUE,
        )


@app.command()
def event_stats(slug: str = typer.Argument(..., help="Event slug")):
    """Print attendance and pull-up numbers for an event."""
    stats = _run(SqlRsvpReadModel().get_event_stats(slug))

    typer.secho(f"Stats for {stats.event_slug}", fg=typer.colors.GREEN)
    typer.secho(f"  Attending: {stats.attending}", fg=typer.colors.BLUE)
    typer.secho(f"  Waitlist: {stats.waitlist}", fg=typer.colors.BLUE)
    typer.secho(f"  Cancelled: {stats.cancelled}", fg=typer.colors.BLUE)
    typer.secho(f"  Cocktail only: {stats.cocktail_only}", fg=typer.colors.BLUE)
    typer.secho(
        f"  Dinner: {stats.dinner_confirmed} confirmed, {stats.dinner_waitlist} waitlisted",
        fg=typer.colors.BLUE,
    )
    typer.secho(
        f"  Pulled up: {stats.pulled_up_total}"
        f" (cocktails {stats.cocktails_pulled_up}, dinner {stats.dinner_pulled_up})",
        fg=typer.colors.CYAN,
    )
    typer.secho(f"  Cocktail spots left: {_spots(stats.cocktail_spots_left)}")
    typer.secho(f"  Food spots left: {_spots(stats.food_spots_left)}")
    typer.secho(f"  Total spots left: {_spots(stats.total_spots_left)}")
    for over, label in (
        (stats.cocktail_over_capacity, "cocktail"),
        (stats.food_over_capacity, "food"),
        (stats.total_over_capacity, "total"),
    ):
        if over:
            typer.secho(f"  Over {label} capacity by {over}", fg=typer.colors.RED)


@app.command()
def dinner_slots(slug: str = typer.Argument(..., help="Event slug")):
    """List dinner seatings with their remaining seats."""
    slots = _run(SqlRsvpReadModel().get_dinner_slots(slug))

    if not slots:
        typer.secho("No dinner seatings for this event", fg=typer.colors.YELLOW)
        return
    for slot in slots:
        color = typer.colors.GREEN if slot.available else typer.colors.RED
        typer.secho(
            f"  {slot.time.isoformat()}  remaining {_spots(slot.remaining)}"
            f"  confirmed {slot.confirmed}  waitlist {slot.waitlist}",
            fg=color,
        )


@app.command()
def mark_pulled_up(slug: str = typer.Argument(..., help="Event slug")):
    """Mark every confirmed RSVP of an event as fully arrived."""
    summary = _run(SqlRsvpWriteModel().mark_all_pulled_up(slug))

    typer.secho(f"Updated {summary.updated} RSVP(s)", fg=typer.colors.GREEN)
    typer.secho(f"  Already pulled up: {summary.unchanged}", fg=typer.colors.BLUE)
    typer.secho(f"  Skipped (not confirmed): {summary.skipped}", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    setup_logging()
    app()
