"""FastAPI service and order pipeline."""
