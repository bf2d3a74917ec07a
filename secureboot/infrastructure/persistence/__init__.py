"""Persistence: database session, ORM models, repositories."""
