"""
User Service - User Operations
==============================

What:  Business logic behind POST /api/users and GET /api/users.
How:   Composes the payload validator and the database gateway. The gateway is
       passed in on every call, never imported, so tests can hand in a mock.
Who:   Called by the route handlers in `user_api.routes.users`.

Create flow:
    raw body ──▶ parse_user_payload ──▶ validate_user ──▶ db.insert_user ──▶ 201
                 (400 malformed)        (400 rule)        (500 storage)

Duplicate ids are not checked here. The primary key rejects them and the
failure is reported like any other storage error; the log line marks it as
an integrity violation.
"""

import logging
from typing import Union

from user_api.database import Database
from user_api.exceptions import DatabaseError
from user_api.schemas.user import (
    UserCreatedResponse,
    UserListResponse,
    UserResponse,
)
from user_api.services.validation import parse_user_payload, validate_user

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Could not create user"
LIST_FAILED_MESSAGE = "Internal server error"


class UserService:
    """
    Stateless operations on users.

    Error Handling Strategy:
        Client errors (MalformedPayloadError, ValidationError) propagate as is.
        DatabaseError from the gateway is re-raised with the client-facing
        message for the operation; the gateway's context travels along for
        the server log.
    """

    async def create_user(
        self,
        db: Database,
        raw_body: Union[bytes, str],
    ) -> UserCreatedResponse:
        """
        Decode, validate and store a new user.

        Raises:
            MalformedPayloadError: Body is not a user object
            ValidationError: Empty or over-long field
            DatabaseError: Insert failed (including duplicate id)
        """
        payload = validate_user(parse_user_payload(raw_body))

        try:
            await db.insert_user(payload.id, payload.name)
        except DatabaseError as e:
            if e.context.get("integrity_violation"):
                logger.warning("Rejected user %r: id already exists", payload.id)
            raise DatabaseError(CREATE_FAILED_MESSAGE, context=e.context) from e

        logger.info("User created: %s", payload.id)
        return UserCreatedResponse(user=UserResponse(id=payload.id, name=payload.name))

    async def list_users(self, db: Database) -> UserListResponse:
        """
        Return every stored user.

        Raises:
            DatabaseError: Query failed
        """
        try:
            users = await db.list_users()
        except DatabaseError as e:
            raise DatabaseError(LIST_FAILED_MESSAGE, context=e.context) from e

        return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


# Stateless, shared by all requests
user_service = UserService()
