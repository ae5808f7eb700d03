"""
User Service - Payload Validation Tests
=======================================

What we test:
    ✅ Shape errors are MalformedPayloadError (not ValidationError)
    ✅ Empty fields are rejected before length checks
    ✅ Length limits at and just past the boundary
    ✅ No normalization of accepted values
"""

import pytest

from user_api.exceptions import MalformedPayloadError, ValidationError
from user_api.schemas.user import UserCreate
from user_api.services.validation import (
    REQUIRED_MESSAGE,
    TOO_LONG_MESSAGE,
    parse_user_payload,
    validate_user,
)


class TestParseUserPayload:
    """Rule 1: the body must be {"id": string, "name": string}."""

    def test_valid_body(self):
        payload = parse_user_payload(b'{"id": "u1", "name": "Alice"}')
        assert payload == UserCreate(id="u1", name="Alice")

    def test_unknown_keys_are_ignored(self):
        payload = parse_user_payload(b'{"id": "u1", "name": "Alice", "age": 3}')
        assert payload.id == "u1"

    def test_absent_fields_default_to_empty(self):
        payload = parse_user_payload(b"{}")
        assert payload.id == ""
        assert payload.name == ""

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b'{"id": "u1", "name": "Alice"',
            b"[]",
            b'"u1"',
            b'{"id": 1, "name": "Alice"}',
            b'{"id": "u1", "name": null}',
            b'{"id": "u1", "name": {"first": "A"}}',
        ],
    )
    def test_malformed_bodies(self, body):
        with pytest.raises(MalformedPayloadError) as exc_info:
            parse_user_payload(body)
        assert exc_info.value.message == "Invalid JSON payload"

    def test_malformed_is_not_validation_error(self):
        with pytest.raises(MalformedPayloadError) as exc_info:
            parse_user_payload(b"[]")
        assert not isinstance(exc_info.value, ValidationError)


class TestValidateUser:
    """Rules 2 and 3: non-empty, then length limits."""

    def test_valid_payload_is_returned_unchanged(self):
        payload = UserCreate(id=" u1 ", name="  Alice")
        assert validate_user(payload) is payload
        assert payload.id == " u1 "

    @pytest.mark.parametrize(
        "user_id,name,field",
        [("", "Alice", "id"), ("u1", "", "name"), ("", "", "id")],
    )
    def test_empty_fields(self, user_id, name, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_user(UserCreate(id=user_id, name=name))

        assert exc_info.value.message == REQUIRED_MESSAGE
        assert exc_info.value.kind == ValidationError.MISSING_FIELD
        assert exc_info.value.field == field

    def test_empty_check_wins_over_length_check(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_user(UserCreate(id="x" * 51, name=""))
        assert exc_info.value.kind == ValidationError.MISSING_FIELD

    def test_maximum_lengths_accepted(self):
        validate_user(UserCreate(id="i" * 50, name="n" * 100))

    def test_minimum_lengths_accepted(self):
        validate_user(UserCreate(id="i", name="n"))

    @pytest.mark.parametrize(
        "user_id,name,field",
        [("i" * 51, "Alice", "id"), ("u1", "n" * 101, "name")],
    )
    def test_too_long(self, user_id, name, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_user(UserCreate(id=user_id, name=name))

        assert exc_info.value.message == TOO_LONG_MESSAGE
        assert exc_info.value.kind == ValidationError.TOO_LONG
        assert exc_info.value.field == field

    def test_length_counts_characters(self):
        # 50 characters, 100 bytes in UTF-8
        validate_user(UserCreate(id="é" * 50, name="Zoë"))
