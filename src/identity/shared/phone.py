"""Phone number normalization for profiles and addresses."""

import re

from protean.exceptions import ValidationError

_ALLOWED = re.compile(r"^\+?[\d\s\-()]+$")


def normalize_phone(number, field: str = "phone"):
    """Strip surrounding whitespace and reject malformed numbers.

    Accepts digits, spaces, hyphens, parentheses and an optional leading +.
    Empty values come back as ``None``.
    """
    if number is None:
        return None
    number = str(number).strip()
    if not number:
        return None
    if not re.search(r"\d", number) or not _ALLOWED.match(number):
        raise ValidationError({field: [f"Invalid phone number: {number!r}"]})
    return number
