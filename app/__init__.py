"""
JobBoard: job board API with a guarded request core.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - access: Callers, roles, RBAC and ownership guards.
    - hiring: Users, companies, jobs, applications and their lifecycle.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (memory, SQL, hashing) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas, the guard pipeline.
    - shared: Cross-cutting concerns (errors, security, logging, validation).
"""
