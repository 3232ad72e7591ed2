"""Hiring adapters: in-memory and SQL repositories."""
