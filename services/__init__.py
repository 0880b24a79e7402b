"""
Use cases for the account service.

Each service receives the account repository at construction time and raises
werkzeug HTTP exceptions for every failure, so blueprints stay thin and the
app-level JSON error handler renders all errors the same way.
"""

from .account_service import AccountService, LoginResult, TokenDispatch
from .moderation_service import ModerationService
from .relationship_service import RelationshipService

__all__ = [
    "AccountService",
    "LoginResult",
    "TokenDispatch",
    "ModerationService",
    "RelationshipService",
]
