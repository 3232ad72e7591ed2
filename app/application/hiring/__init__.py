"""Hiring use cases: companies, jobs and applications."""
