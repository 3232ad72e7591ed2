"""
Interfaces layer package.

HTTP surface of the job board: routers per bounded context, the
camelCase request/response schemas and the guard pipeline that every
route runs before its use case. Routes translate, they do not decide.
"""
