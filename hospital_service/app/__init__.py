"""FastAPI application: factory, lifespan, routing and error handling."""
