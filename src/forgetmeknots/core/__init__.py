"""Domain models, errors and logging setup shared by every layer."""
