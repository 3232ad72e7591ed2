"""Company, job and application routes."""
