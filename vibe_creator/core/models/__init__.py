"""Domain models and API I/O schemas."""
