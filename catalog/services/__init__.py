"""Business logic services: mail delivery, account flows, file storage."""
