"""
User Service - Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for every failure the service knows about.
How:   Each exception carries a client-safe `message` and a `context` dict that is
       only ever logged. Global handlers registered in `main.py` translate the
       request-time exceptions into `{"error": message}` JSON responses.
Who:   Raised by the config loader, the database gateway and the services.

Exception Hierarchy:
    UserApiError (base)
    ├── StartupError                 -> process exits with status 1
    │   ├── ConfigurationError       (config file missing / unparsable)
    │   ├── StorageConnectionError   (engine cannot be created)
    │   └── SchemaInitError          (init script missing / failing)
    ├── MalformedPayloadError        -> 400 Bad Request (body is not a user object)
    ├── ValidationError              -> 400 Bad Request (missing field / too long)
    ├── NotFoundError                -> 404 Not Found
    └── DatabaseError                -> 500 Internal Server Error

Startup errors are never turned into HTTP responses. They propagate to
`main.main()`, which is the only place allowed to terminate the process.
"""

from typing import Any, Dict, Optional


class UserApiError(Exception):
    """
    Base exception for all User Service errors.

    Attributes:
        message:  Error description that is safe to return to API clients
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ── Fatal startup errors ──────────────────────────────────────────────────


class StartupError(UserApiError):
    """Raised when the service cannot finish bootstrapping."""


class ConfigurationError(StartupError):
    """
    Raised when the configuration file cannot be loaded.

    When: File missing or unreadable, invalid JSON, a required setting absent
          from both the file and the environment.
    """

    def __init__(
        self,
        message: str = "Configuration could not be loaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageConnectionError(StartupError):
    """Raised when a database engine cannot be built from the settings."""

    def __init__(
        self,
        message: str = "Could not connect to the database",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SchemaInitError(StartupError):
    """Raised when the schema initialization script cannot be read or executed."""

    def __init__(
        self,
        message: str = "Schema initialization failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ── Request-time errors ───────────────────────────────────────────────────


class MalformedPayloadError(UserApiError):
    """
    Raised when a request body does not parse as the expected shape.

    What:    Invalid JSON, an empty body, a non-object body or a field of the
             wrong type. Kept separate from ValidationError so clients can tell
             "you sent garbage" apart from "you broke a rule".
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid JSON payload",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(UserApiError):
    """
    Raised when a well-formed payload breaks a field rule.

    HTTP:    400 Bad Request

    Attributes:
        kind:   Violated constraint category, "missing_field" or "too_long"
        field:  Offending field name when a single field is to blame
    """

    MISSING_FIELD = "missing_field"
    TOO_LONG = "too_long"

    def __init__(
        self,
        message: str = "Validation failed",
        kind: str = MISSING_FIELD,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["kind"] = kind
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.kind = kind
        self.field = field


class NotFoundError(UserApiError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=f"The requested {resource} was not found", context=ctx)


class DatabaseError(UserApiError):
    """
    Raised when a live database operation fails.

    When:    Constraint violation (duplicate id), connection lost, query error.
    HTTP:    500 Internal Server Error

    Security Note:
        `message` stays generic. The driver error, the operation name and the
        integrity flag live in `context` and are only written to the server log.
    """

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
