"""
Error envelope package.

Turns domain failures, validation errors and routing misses into the
single `{"error": {"code", "message"}}` body every client sees.
"""
