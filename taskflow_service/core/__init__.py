"""Core domain layer: settings, models, schemas, exceptions and dependencies."""
