"""Infrastructure adapters: database access, logging and metrics."""
