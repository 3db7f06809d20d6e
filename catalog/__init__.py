"""Catalog service: users, products, reviews and uploads over FastAPI."""
