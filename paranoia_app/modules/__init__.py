"""Blueprint-backed application modules."""
