"""ORM models. The `users` table is the only one."""

from user_api.models.user import Base, User

__all__ = ["Base", "User"]
