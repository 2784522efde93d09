from email_validator import EmailNotValidError, validate_email

from pullup.rsvps.dtos import (
    MAX_DINNER_PARTY_SIZE,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PLUS_ONES,
    BookingStatus,
    DinnerBookingStatus,
    EventConfigurationDTO,
    ValidationError,
)


def validate_email_address(value: str | None, field: str = "email") -> str:
    """Return the normalized (lower-cased) address or raise ``ValidationError``."""
    if value is None or not value.strip():
        raise ValidationError(field, "email is required")
    value = value.strip()
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValidationError(field, f"must be at most {MAX_EMAIL_LENGTH} characters")
    try:
        result = validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(field, str(e)) from e
    return result.normalized.lower()


def clean_name(value: str | None, field: str = "name") -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) > MAX_NAME_LENGTH:
        raise ValidationError(field, f"must be at most {MAX_NAME_LENGTH} characters")
    return value or None


def validate_plus_ones(config: EventConfigurationDTO, value: int, field: str = "plusOnes") -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(field, "must be an integer")
    if not 0 <= value <= MAX_PLUS_ONES:
        raise ValidationError(field, f"must be between 0 and {MAX_PLUS_ONES}")
    if value > config.max_plus_ones_per_guest:
        raise ValidationError(
            field, f"this event allows at most {config.max_plus_ones_per_guest} plus-ones"
        )
    return value


def validate_dinner_party_size(value: int, field: str = "dinnerPartySize") -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(field, "must be an integer")
    if not 1 <= value <= MAX_DINNER_PARTY_SIZE:
        raise ValidationError(field, f"must be between 1 and {MAX_DINNER_PARTY_SIZE}")
    return value


def validate_count(value: int | None, field: str) -> int:
    """Pull-up counts: ``None`` means zero, negatives are rejected."""
    if value is None:
        return 0
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(field, "must be an integer")
    if value < 0:
        raise ValidationError(field, "must not be negative")
    return value


def parse_booking_status(value: BookingStatus | str, field: str = "bookingStatus") -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError as e:
        raise ValidationError(field, f"'{value}' is not a booking status") from e


def parse_dinner_status(
    value: DinnerBookingStatus | str, field: str = "dinnerBookingStatus"
) -> DinnerBookingStatus:
    try:
        return DinnerBookingStatus(value)
    except ValueError as e:
        raise ValidationError(field, f"'{value}' is not a dinner booking status") from e
