"""
Per-domain repository modules for database access.

Repositories own the SQLAlchemy queries; routers and services never build
queries themselves.
"""
