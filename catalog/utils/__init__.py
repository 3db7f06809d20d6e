"""Shared helpers: hashing, tokens, filenames, runtime settings."""
