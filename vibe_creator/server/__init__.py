"""HTTP server for Vibe Creator: FastAPI application, routers and services."""
