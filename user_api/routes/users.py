"""
User Service - User Route Handlers
==================================

What:  POST /api/users (create) and GET /api/users (list).
How:   Thin handlers: pull the body / gateway out of the request and delegate
       to UserService. Errors are raised, and the global exception handlers in
       main.py turn them into {"error": ...} responses.

Why the create handler reads the raw body:
    Declaring `payload: UserCreate` would let FastAPI reject bad bodies with
    its own 422 format. The service needs to answer 400 "Invalid JSON payload"
    for shape errors and a different 400 for rule violations, so it parses
    the body itself.
"""

from fastapi import APIRouter, Depends, Request

from user_api.database import Database, get_database
from user_api.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserCreatedResponse,
    UserListResponse,
)
from user_api.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={
        200: {"description": "Every stored user", "model": UserListResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="List all users",
)
async def list_users(db: Database = Depends(get_database)) -> UserListResponse:
    """Returns the full user table. No filtering, no pagination."""
    return await user_service.list_users(db)


@router.post(
    "/users",
    status_code=201,
    response_model=UserCreatedResponse,
    responses={
        201: {"description": "User created", "model": UserCreatedResponse},
        400: {"description": "Malformed body or invalid field", "model": ErrorResponse},
        500: {"description": "Database error (including duplicate id)", "model": ErrorResponse},
    },
    summary="Create a user",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UserCreate.model_json_schema()}},
        }
    },
)
async def create_user(
    request: Request,
    db: Database = Depends(get_database),
) -> UserCreatedResponse:
    """
    Store a new user.

    Error responses (handled by global exception handlers):
        HTTP 400: Invalid JSON payload (MalformedPayloadError)
        HTTP 400: Missing or too long field (ValidationError)
        HTTP 500: Could not create user (DatabaseError)
    """
    body = await request.body()
    return await user_service.create_user(db, body)
