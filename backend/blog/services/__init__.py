"""
Services Module

Account core used by the HTTP handlers:
- accounts: Account store (lookup, create, update, remove, serialization)
- auth: Authentication flow (login, registration, logout)
- social: Follow graph
- moderation: Ban flag
"""
