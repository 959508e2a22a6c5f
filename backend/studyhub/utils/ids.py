"""Identifier parsing at the service boundary."""

import uuid
from typing import Any

from studyhub.exceptions import ValidationError


def parse_uuid(value: Any, field: str) -> uuid.UUID:
    """
    Coerce a client-supplied id into a UUID.

    Raises ValidationError for anything that is not a UUID or UUID string,
    so malformed ids answer 400 instead of reaching the database.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise ValidationError(message=f"Invalid {field} id", field=field)
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(
            message=f"Invalid {field} id: {value}",
            field=field,
        )
