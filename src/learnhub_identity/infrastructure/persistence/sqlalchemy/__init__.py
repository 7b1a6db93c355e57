"""SQLAlchemy implementation for learnhub_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel: SQLAlchemy model for users (including the password hash)
- UserRepositorySQLAlchemy: Repository implementation for users
"""

from learnhub_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from learnhub_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from learnhub_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
