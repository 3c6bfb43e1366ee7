# blog/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Default admin creation on first startup
- db: Database configuration and connection management
- errors: Typed account errors and storage error translation
- presence: WebSocket presence broadcasting
- roles: Role enumeration and membership checks
- security: Password hashing and session token signing
- session: Session cookie issue/clear policy
"""
