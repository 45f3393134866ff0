"""Users module — User model, schemas and services."""

from hrops.users.models import User

__all__ = ["User"]
