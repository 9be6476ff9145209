import re

_PHONE_INPUT = re.compile(r"^\+?[\d\s().-]{6,20}$")


def validate_phone_number(value: str) -> str:
    """Reject input that cannot be a phone number at all."""
    value = value.strip()
    if not _PHONE_INPUT.match(value) or not any(c.isdigit() for c in value):
        raise ValueError("Phone number may only contain digits, spaces and + - . ( )")
    return value
