"""Service layer for order submission and its side effects."""
