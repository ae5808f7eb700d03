"""
User Service - Database Gateway
===============================

What:  Owns the async SQLAlchemy engine and exposes the handful of storage
       operations the service needs: schema init, ping, insert, list.
Why:   Keeps every SQL detail in one place and out of the request handlers.
How:   `Database.from_settings()` builds a pooled engine (connections are
       opened lazily on first use). Each gateway call runs in its own session
       that commits on success and rolls back on error.
Who:   Created once by the bootstrap, stored on `app.state.database`, and
       injected into routes via `get_database()`.

Connection Pooling Strategy:
    pool_size=20:       Persistent connections for normal load
    max_overflow=10:    Temporary connections for traffic spikes
    pool_pre_ping:      Validates connections before use (catches DB restarts)
    pool_recycle=3600:  Recycles connections every hour

    The pool is the only shared mutable state in the process. It is safe for
    concurrent use by many request tasks, so the gateway adds no locking.

Error Policy:
    Startup operations raise StartupError subclasses (fatal).
    Request-time operations raise DatabaseError with the driver error in
    `context`; turning that into an HTTP response is the caller's job.
    `ping()` never raises.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, List, Union

from fastapi import Request
from sqlalchemy import select, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from user_api.config import Settings
from user_api.exceptions import (
    DatabaseError,
    SchemaInitError,
    StorageConnectionError,
)
from user_api.models.user import User

logger = logging.getLogger(__name__)


def build_database_url(settings: Settings) -> URL:
    """
    Assemble the asyncpg connection URL from the individual settings.

    Raises:
        ValueError: db_port is not an integer.
    """
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.db_user or None,
        password=settings.db_password or None,
        host=settings.db_host or None,
        port=int(settings.db_port) if settings.db_port else None,
        database=settings.db_name or None,
    )


def split_sql_script(script: str) -> List[str]:
    """
    Split a SQL script into individual statements.

    Drivers that use prepared statements (asyncpg) refuse multi-statement
    strings, so the init script is run one statement at a time. Full-line
    `--` comments are dropped; semicolons inside string literals or
    dollar-quoted bodies are not supported.
    """
    lines = [
        line for line in script.splitlines()
        if not line.strip().startswith("--")
    ]
    statements = "\n".join(lines).split(";")
    return [s.strip() for s in statements if s.strip()]


class Database:
    """
    Handle to the relational store.

    Operations:
        - init_schema(): Run the idempotent init script (startup)
        - ping():        Liveness probe for /health
        - insert_user(): Parameterized INSERT of one user
        - list_users():  SELECT of every user
        - dispose():     Close all pooled connections (shutdown)
    """

    def __init__(self, url: Union[str, URL], **engine_kwargs: Any):
        self.url = make_url(url)
        self.engine = create_async_engine(self.url, **engine_kwargs)
        # expire_on_commit=False: rows stay readable after the session closes
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build the gateway from configuration.

        `database_url` wins when set; otherwise a postgresql+asyncpg URL is
        assembled from the host/port/user/password/name fields. No connection
        is opened here.

        Raises:
            StorageConnectionError: The URL cannot be built or the driver is
            unavailable.
        """
        try:
            if settings.database_url:
                url = make_url(settings.database_url)
            else:
                url = build_database_url(settings)

            engine_kwargs: dict = {"echo": settings.log_level == "DEBUG"}
            if url.get_backend_name() == "postgresql":
                engine_kwargs.update(
                    pool_size=settings.db_pool_size,
                    max_overflow=settings.db_max_overflow,
                    pool_pre_ping=settings.db_pool_pre_ping,
                    pool_recycle=3600,
                )
                if url.get_driver_name() == "asyncpg":
                    engine_kwargs["connect_args"] = {"ssl": settings.db_ssl}

            database = cls(url, **engine_kwargs)
        except (ArgumentError, ValueError, ImportError) as e:
            raise StorageConnectionError(
                f"Could not configure database connection: {e}",
                context={"host": settings.db_host, "port": settings.db_port},
            ) from e

        logger.info(
            "Database engine created for %s",
            database.url.render_as_string(hide_password=True),
        )
        return database

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit of work: commits when the block succeeds, rolls back otherwise.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # ── Startup ───────────────────────────────────────────────────────────

    async def init_schema(self, script_path: Union[str, Path]) -> None:
        """
        Execute the schema initialization script.

        Runs on every startup, so the script must be idempotent
        (CREATE TABLE IF NOT EXISTS ...). All statements share one transaction.

        Raises:
            SchemaInitError: The script cannot be read or a statement fails,
            including when the database is unreachable.
        """
        path = Path(script_path)
        try:
            script = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaInitError(
                f"Failed to read {path}: {e}",
                context={"path": str(path)},
            ) from e

        statements = split_sql_script(script)
        try:
            async with self.engine.begin() as conn:
                for statement in statements:
                    await conn.exec_driver_sql(statement)
        except (SQLAlchemyError, OSError) as e:
            raise SchemaInitError(
                f"Failed to execute {path}: {e}",
                context={"path": str(path)},
            ) from e

        logger.info("Schema initialized from %s (%d statements)", path, len(statements))

    # ── Request-time operations ───────────────────────────────────────────

    async def ping(self) -> bool:
        """Return True when a trivial query round-trips, False otherwise."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def insert_user(self, user_id: str, name: str) -> None:
        """
        Insert one user row. Values are bound parameters, never SQL text.

        Raises:
            DatabaseError: Constraint violation or connectivity failure. The
            context carries `integrity_violation=True` for the former.
        """
        try:
            async with self.session() as session:
                session.add(User(id=user_id, name=name))
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseError(
                context={
                    "operation": "insert_user",
                    "user_id": user_id,
                    "integrity_violation": isinstance(e, IntegrityError),
                    "cause": str(e),
                },
            ) from e

    async def list_users(self) -> List[User]:
        """
        Return every user row. An empty table gives an empty list.

        Raises:
            DatabaseError: Query or connectivity failure.
        """
        try:
            async with self.session() as session:
                result = await session.execute(select(User))
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseError(
                context={"operation": "list_users", "cause": str(e)},
            ) from e

    # ── Shutdown ──────────────────────────────────────────────────────────

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the process-wide gateway.

    Example usage in a route:
        @router.get("/users")
        async def list_users(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.database
