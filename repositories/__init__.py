"""Account store backends."""

from .abstract_repository import AbstractUserRepository
from .sql_user_repository import SQLUserRepository

__all__ = ["AbstractUserRepository", "SQLUserRepository"]
