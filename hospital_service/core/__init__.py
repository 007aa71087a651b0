"""Core domain-independent building blocks (settings, pagination, errors)."""
