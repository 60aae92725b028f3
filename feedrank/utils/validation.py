"""Identifier validation shared by the engine and the API layer."""

import re

from feedrank.utils.exceptions import InvalidUserIdError, ValidationError

# Opaque tokens: UUIDs, slugs, "post:123" style keys
_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,127}$")


def is_valid_identifier(value) -> bool:
    """Check whether a value is a well-formed opaque identifier."""
    return isinstance(value, str) and bool(_IDENTIFIER_RE.match(value))


def validate_user_id(user_id) -> str:
    """Return the user id unchanged or raise InvalidUserIdError."""
    if not is_valid_identifier(user_id):
        raise InvalidUserIdError(details={"user_id": str(user_id)[:64]})
    return user_id


def validate_content_id(content_id) -> str:
    """Return the content id unchanged or raise ValidationError."""
    if not is_valid_identifier(content_id):
        raise ValidationError(
            message="Invalid content ID provided",
            details={"content_id": str(content_id)[:64]},
        )
    return content_id
