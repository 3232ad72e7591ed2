"""Admin console routes."""
