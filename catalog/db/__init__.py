"""Persistence layer: engine/session, ORM models, schemas, repositories."""
