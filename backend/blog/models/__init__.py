# blog/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Account, credentials, roles and ban state
- Follow: Directed follow edge between two accounts
"""
from .user import User
from .follow import Follow
