"""Hospital search service: keyset-paginated search over clinical entities."""
