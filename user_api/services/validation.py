"""
User Service - User Payload Validation
======================================

What:  Pure functions that turn a raw request body into a checked UserCreate.
Who:   Called by UserService.create_user() before anything touches the database.

Rules, applied in order (first failure wins):
    1. The body parses as {"id": string, "name": string}  -> MalformedPayloadError
    2. id and name are both non-empty                      -> ValidationError(missing_field)
    3. len(id) <= 50 and len(name) <= 100                  -> ValidationError(too_long)

Values are checked exactly as sent: no trimming, no case folding. Lengths are
counted in characters, the same unit as the VARCHAR columns.
"""

from typing import Union

from pydantic import ValidationError as PydanticValidationError

from user_api.exceptions import MalformedPayloadError, ValidationError
from user_api.models.user import MAX_USER_ID_LENGTH, MAX_USER_NAME_LENGTH
from user_api.schemas.user import UserCreate

REQUIRED_MESSAGE = "User ID and Name are required"
TOO_LONG_MESSAGE = "User ID or Name too long"


def parse_user_payload(raw: Union[bytes, str]) -> UserCreate:
    """
    Decode a create-user request body.

    Raises:
        MalformedPayloadError: Not JSON, not an object, or a field of the
        wrong type.
    """
    try:
        return UserCreate.model_validate_json(raw)
    except PydanticValidationError as e:
        raise MalformedPayloadError(
            context={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def validate_user(payload: UserCreate) -> UserCreate:
    """
    Check the field rules of a decoded payload.

    Returns:
        The payload, unchanged, when every rule holds.

    Raises:
        ValidationError: A field is empty or too long.
    """
    if not payload.id or not payload.name:
        raise ValidationError(
            REQUIRED_MESSAGE,
            kind=ValidationError.MISSING_FIELD,
            field="id" if not payload.id else "name",
        )

    if len(payload.id) > MAX_USER_ID_LENGTH or len(payload.name) > MAX_USER_NAME_LENGTH:
        raise ValidationError(
            TOO_LONG_MESSAGE,
            kind=ValidationError.TOO_LONG,
            field="id" if len(payload.id) > MAX_USER_ID_LENGTH else "name",
            context={
                "max_id_length": MAX_USER_ID_LENGTH,
                "max_name_length": MAX_USER_NAME_LENGTH,
            },
        )

    return payload
