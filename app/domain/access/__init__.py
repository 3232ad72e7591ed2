"""
Access bounded context: domain layer.

Answers two questions for every guarded operation:
- Who is the caller, and is their role high enough (RBAC)?
- Does the caller control the resource being acted on (ownership)?
"""
