"""Administrative use cases. Callers are always ADMIN."""
