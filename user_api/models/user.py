"""
User Service - User SQLAlchemy Model
====================================

What:  ORM mapping of the `users` table.
Who:   Used by the database gateway to build parameterized INSERT/SELECT
       statements.

The table itself is created by `init.sql`, not by `Base.metadata.create_all()`.
This mapping must stay in step with that script:

    CREATE TABLE IF NOT EXISTS users (
        id   VARCHAR(50)  PRIMARY KEY,
        name VARCHAR(100) NOT NULL
    );
"""

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Column widths, shared with the request validator
MAX_USER_ID_LENGTH = 50
MAX_USER_NAME_LENGTH = 100


class Base(DeclarativeBase):
    """Base class for the service's ORM models."""
    pass


class User(Base):
    """
    A user row.

    `id` is supplied by the client, not generated. Its uniqueness is left to
    the primary key constraint: a second insert with the same id fails in the
    database and surfaces as a storage error.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(MAX_USER_ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(String(MAX_USER_NAME_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, name={self.name!r})>"
