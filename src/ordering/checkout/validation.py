"""Shipping details a checkout cannot proceed without."""

from protean.exceptions import ValidationError

REQUIRED_SHIPPING_FIELDS = (
    "house_number",
    "street",
    "area",
    "city",
    "state",
    "postal_code",
    "country",
)

REQUIRED_CONTACT_FIELDS = ("name", "primary_phone")


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_fields(shipping: dict, contact: dict) -> list[str]:
    missing = [field for field in REQUIRED_SHIPPING_FIELDS if _blank(shipping.get(field))]
    missing += [field for field in REQUIRED_CONTACT_FIELDS if _blank(contact.get(field))]
    return missing


def validate_details(shipping: dict, contact: dict) -> None:
    """Raise a ValidationError keyed by every missing field."""
    missing = missing_fields(shipping, contact)
    if missing:
        raise ValidationError({field: ["This field is required"] for field in missing})
