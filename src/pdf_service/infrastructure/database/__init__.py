"""Relational storage for users and documents."""

from .client import DatabaseClient
from .models import Base, DocumentModel, UserModel

__all__ = ["DatabaseClient", "Base", "DocumentModel", "UserModel"]
