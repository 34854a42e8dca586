"""Multi-tenant restaurant order pipeline."""
