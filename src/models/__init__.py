"""
SQLAlchemy models for the Calendar Assistant.

Importing this package registers every table on Base.metadata.
"""

from src.models.base import Base, BaseModel
from src.models.tokens import UserToken

__all__ = [
    "Base",
    "BaseModel",
    "UserToken",
]
