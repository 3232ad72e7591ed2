"""
Domain layer package.

Holds the error taxonomy, the access rules (roles, RBAC, ownership)
and the hiring model with its application status machine.
Nothing here imports FastAPI, SQLAlchemy or touches IO.
"""
