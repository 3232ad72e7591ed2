"""
Guard pipeline for guarded routes.

A pipeline is declared once per route and used as a FastAPI dependency:

    create_job_guard = (
        GuardPipeline()
        .rate_limit(LimitClass.JOB_CREATION)
        .body(JobCreateRequest)
        .require_role(Role.EMPLOYER)
    )

Stages always execute in the same order, whatever order they were
declared in:

    1. rate limit (operation class budget)
    2. query string (overall cap, then parameter validation)
    3. JSON body (content type, size, syntax, shape)
    4. session resolution + RBAC
    5. ownership / non-ownership

Ownership stages exist only on AuthorizedPipeline, which is obtained
from require_role(). A pipeline without a role check cannot express an
ownership check at all.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional

from fastapi import Request
from pydantic import BaseModel

from app.domain.access.entities import AuthenticatedCaller, ResourceKind, ResourceRef, Role
from app.domain.access.rbac import require_at_least
from app.domain.errors import AuthenticationFailure, ValidationFailure
from app.interfaces.dependencies import Container
from app.shared.logging import log_auth_failure
from app.shared.security.rate_limiting import LimitClass, get_client_key
from app.shared.validation import (
    ValidationOutcome,
    validate_body_headers,
    validate_json_body,
    validate_model,
    validate_query_string,
)

logger = logging.getLogger(__name__)

QueryValidator = Callable[[Mapping[str, str]], ValidationOutcome]
ResourceLocator = Callable[[Request], ResourceRef]

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class GuardContext:
    """Everything the guards established about the current request.

    Attributes:
        request_id: Correlation id of the request.
        client_key: Rate-limit key of the client.
        caller: The authorized caller, when a role stage ran.
        body: The validated body model, when a body stage ran.
        query: The validated query parameters, when a query stage ran.
        resource: The resource whose ownership was checked, if any.
    """

    request_id: str
    client_key: str
    caller: Optional[AuthenticatedCaller] = None
    body: Optional[BaseModel] = None
    query: Any = None
    resource: Optional[ResourceRef] = None

    def require_caller(self) -> AuthenticatedCaller:
        if self.caller is None:
            raise AuthenticationFailure("You must be logged in to access this resource")
        return self.caller


def path_resource(kind: ResourceKind, param: str) -> ResourceLocator:
    """Locate the guarded resource from a path parameter."""

    def locate(request: Request) -> ResourceRef:
        return ResourceRef(kind, str(request.path_params[param]))

    return locate


def session_token(request: Request, cookie_name: str) -> Optional[str]:
    """Read the session token from the cookie, else from a Bearer header."""
    token = request.cookies.get(cookie_name)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None
    return None


def _container(request: Request) -> Container:
    return request.app.state.container


def _raise_invalid(outcome: ValidationOutcome) -> None:
    raise ValidationFailure(outcome.error, field=outcome.field)


async def _read_capped(request: Request, max_size: int) -> bytes:
    """Read the body, stopping once it grows past ``max_size``."""
    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > max_size:
            break
    return bytes(raw)


class GuardPipeline:
    """Pre-authentication stages of a guarded route.

    Builder methods return a new pipeline; instances are immutable and
    safe to share between requests.
    """

    def __init__(
        self,
        *,
        limit_class: Optional[LimitClass] = None,
        body_schema: Optional[type[BaseModel]] = None,
        query_validator: Optional[QueryValidator] = None,
        role: Optional[Role] = None,
        owned_by_caller: Optional[ResourceLocator] = None,
        not_owned_by_caller: Optional[ResourceLocator] = None,
    ) -> None:
        self._limit_class = limit_class
        self._body_schema = body_schema
        self._query_validator = query_validator
        self._role = role
        self._owned_by_caller = owned_by_caller
        self._not_owned_by_caller = not_owned_by_caller

    def _with(self, cls: type["GuardPipeline"], **changes: Any) -> Any:
        options = {
            "limit_class": self._limit_class,
            "body_schema": self._body_schema,
            "query_validator": self._query_validator,
            "role": self._role,
            "owned_by_caller": self._owned_by_caller,
            "not_owned_by_caller": self._not_owned_by_caller,
        }
        options.update(changes)
        return cls(**options)

    def rate_limit(self, limit_class: LimitClass) -> "GuardPipeline":
        """Count the request against an operation class budget."""
        return self._with(type(self), limit_class=limit_class)

    def body(self, schema: type[BaseModel]) -> "GuardPipeline":
        """Require a JSON body matching ``schema``."""
        return self._with(type(self), body_schema=schema)

    def query(self, validator: QueryValidator) -> "GuardPipeline":
        """Validate the query parameters with ``validator``."""
        return self._with(type(self), query_validator=validator)

    def require_role(self, role: Role) -> "AuthorizedPipeline":
        """Require a session whose role ranks at least ``role``."""
        return self._with(AuthorizedPipeline, role=role)

    def authenticated(self) -> "AuthorizedPipeline":
        """Require any logged-in caller."""
        return self.require_role(Role.USER)

    async def __call__(self, request: Request) -> GuardContext:
        """Run every declared stage in the fixed order."""
        container = _container(request)
        config = container.settings
        request_id = getattr(request.state, "request_id", None) or uuid.uuid4().hex
        client_key = get_client_key(request, config.trust_forwarded_headers)
        context = GuardContext(request_id=request_id, client_key=client_key)

        if self._limit_class is not None:
            container.rate_limiter.enforce(self._limit_class, client_key)

        query_string = validate_query_string(
            request.url.query, max_length=config.max_query_string_length
        )
        if not query_string.valid:
            _raise_invalid(query_string)
        if self._query_validator is not None:
            outcome = self._query_validator(request.query_params)
            if not outcome.valid:
                _raise_invalid(outcome)
            context = replace(context, query=outcome.data)

        if self._body_schema is not None:
            body = await self._read_body(request, config.max_request_size_bytes)
            context = replace(context, body=body)

        if self._role is not None:
            caller = await self._authorize(request, context, container)
            context = replace(context, caller=caller)
            request.state.caller_id = caller.id

            resource = await self._check_ownership(request, caller, container)
            if resource is not None:
                context = replace(context, resource=resource)

        return context

    async def _read_body(self, request: Request, max_size: int) -> BaseModel:
        content_type = request.headers.get("content-type")
        content_length = request.headers.get("content-length")
        declared = validate_body_headers(content_type, content_length, max_size)
        if not declared.valid:
            _raise_invalid(declared)

        raw = await _read_capped(request, max_size)
        parsed = validate_json_body(content_type, content_length, raw, max_size=max_size)
        if not parsed.valid:
            _raise_invalid(parsed)
        shaped = validate_model(parsed.data, self._body_schema)
        if not shaped.valid:
            _raise_invalid(shaped)
        return shaped.data

    async def _authorize(
        self, request: Request, context: GuardContext, container: Container
    ) -> AuthenticatedCaller:
        token = session_token(request, container.settings.session_cookie_name)
        caller = await container.session_resolver.resolve(token)
        if caller is None:
            log_auth_failure(
                context.request_id,
                request.url.path,
                "no valid session" if token else "no session token",
                context.client_key,
            )
        return require_at_least(caller, self._role)

    async def _check_ownership(
        self, request: Request, caller: AuthenticatedCaller, container: Container
    ) -> Optional[ResourceRef]:
        return None


class AuthorizedPipeline(GuardPipeline):
    """A pipeline with an RBAC stage. Only this type has ownership stages."""

    def require_ownership(self, locator: ResourceLocator) -> "AuthorizedPipeline":
        """Require the caller's company to own the located resource (admins pass)."""
        return self._with(AuthorizedPipeline, owned_by_caller=locator)

    def require_non_ownership(self, locator: ResourceLocator) -> "AuthorizedPipeline":
        """Forbid acting on a resource the caller's company owns (admins pass)."""
        return self._with(AuthorizedPipeline, not_owned_by_caller=locator)

    async def _check_ownership(
        self, request: Request, caller: AuthenticatedCaller, container: Container
    ) -> Optional[ResourceRef]:
        resource = None
        if self._owned_by_caller is not None:
            resource = self._owned_by_caller(request)
            await container.ownership_guard.require_ownership(caller, resource)
        if self._not_owned_by_caller is not None:
            resource = self._not_owned_by_caller(request)
            await container.ownership_guard.require_non_ownership(caller, resource)
        return resource
