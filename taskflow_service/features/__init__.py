"""Feature modules (routers, schemas and services per domain)."""
