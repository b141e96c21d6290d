"""Async SQLAlchemy engine and sessions."""
