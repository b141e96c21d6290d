"""Infrastructure adapters: logging, database, cache, auth, rate limiting, metrics."""
