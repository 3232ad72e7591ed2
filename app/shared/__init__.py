"""
Shared module package.

Cross-cutting pieces used by every router:
- Mapping of domain errors to the JSON error envelope
- Request id and secure headers middleware
- Fixed-window rate limiting
- Query-string validation and logging setup
"""
