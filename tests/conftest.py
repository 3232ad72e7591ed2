"""
Shared fixtures for the JobBoard test suite.

API tests run against a real application built by create_app() with
in-memory repositories, a manually advanced rate-limiter clock and a
cheap password hash.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.domain.access.entities import Role
from app.domain.hiring.entities import Company, Job, JobStatus, JobType, User
from app.infrastructure.hiring.memory_repositories import (
    InMemoryApplicationRepository,
    InMemoryCompanyRepository,
    InMemoryJobRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
    MemoryDatabase,
)
from app.infrastructure.identity.password_hasher import PasslibPasswordHasher
from app.interfaces.dependencies import Container, build_container
from app.main import create_app
from app.shared.security.rate_limiting import RateLimiter, limiter

API = "/api/v1"
PASSWORD = "correct-horse-battery"
JOB_DESCRIPTION = (
    "We are looking for a backend engineer to design, build and operate "
    "the services behind our hiring platform."
)
TEST_SETTINGS: dict[str, Any] = {
    "environment": "test",
    "database_url": None,
    "log_level": "WARNING",
    "rate_limit_auth_requests": 100,
}

FAST_HASHER = PasslibPasswordHasher(rounds=1000)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 10_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(frozen=True)
class Account:
    id: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def job_payload(**overrides: Any) -> dict[str, Any]:
    """A valid job creation body in wire format."""
    payload = {
        "title": "Backend Engineer",
        "description": JOB_DESCRIPTION,
        "location": "Remote",
        "jobType": "FULL_TIME",
        "status": "OPEN",
        "salaryMin": 50_000,
        "salaryMax": 80_000,
    }
    payload.update(overrides)
    return payload


class ApiClient:
    """TestClient wrapper with account and seeding helpers."""

    def __init__(self, client: TestClient, container: Container, clock: FakeClock) -> None:
        self.client = client
        self.container = container
        self.clock = clock

    def __getattr__(self, name: str) -> Any:
        # get/post/patch/delete go straight to the TestClient.
        return getattr(self.client, name)

    @staticmethod
    def job_payload(**overrides: Any) -> dict[str, Any]:
        return job_payload(**overrides)

    def run(self, fn: Callable, *args: Any) -> Any:
        """Run a repository coroutine on the application's event loop."""
        return self.client.portal.call(fn, *args)

    def signup(self, email: str, role: str = "USER", password: str = PASSWORD):
        return self.client.post(
            f"{API}/auth/signup", json={"email": email, "password": password, "role": role}
        )

    def login(self, email: str, password: str = PASSWORD):
        response = self.client.post(
            f"{API}/auth/login", json={"email": email, "password": password}
        )
        # Accounts authenticate with Bearer tokens so several can coexist.
        self.client.cookies.clear()
        return response

    def account(self, email: str, role: Role = Role.USER) -> Account:
        """Create an account (admins are seeded directly) and log it in."""
        if role is Role.ADMIN:
            self.seed_user(email, role)
        else:
            assert self.signup(email, role.value).status_code == 201
        response = self.login(email)
        assert response.status_code == 200, response.text
        body = response.json()
        return Account(id=body["user"]["id"], email=email, token=body["token"])

    def seed_user(self, email: str, role: Role = Role.USER, is_active: bool = True) -> User:
        user = User(
            email=email,
            password_hash=FAST_HASHER.hash(PASSWORD),
            role=role,
            is_active=is_active,
        )
        return self.run(self.container.users.add, user)

    def seed_company(self, owner_id: str, name: str = "Acme") -> Company:
        return self.run(self.container.companies.add, Company(name=name, owner_id=owner_id))

    def seed_job(
        self, company_id: str, status: JobStatus = JobStatus.OPEN, **fields: Any
    ) -> Job:
        values = {
            "title": "Backend Engineer",
            "description": JOB_DESCRIPTION,
            "location": "Remote",
            "job_type": JobType.FULL_TIME,
        }
        values.update(fields)
        job = Job(company_id=company_id, status=status, **values)
        return self.run(self.container.jobs.add, job)

    def employer_with_job(self, email: str = "boss@acme.io", **job_fields: Any):
        """An employer with a company and one OPEN job, created through the API."""
        employer = self.account(email, Role.EMPLOYER)
        response = self.client.post(
            f"{API}/companies", json={"name": "Acme"}, headers=employer.headers
        )
        assert response.status_code == 201, response.text
        response = self.client.post(
            f"{API}/jobs", json=job_payload(**job_fields), headers=employer.headers
        )
        assert response.status_code == 201, response.text
        return employer, response.json()

    def apply(self, applicant: Account, job_id: str, cover_note: Optional[str] = "Hello"):
        body = {"coverNote": cover_note} if cover_note is not None else {}
        return self.client.post(
            f"{API}/jobs/{job_id}/applications", json=body, headers=applicant.headers
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_api(clock: FakeClock):
    """Factory building a started application with optional settings overrides."""
    clients: list[TestClient] = []

    def factory(**overrides: Any) -> ApiClient:
        config = Settings(**{**TEST_SETTINGS, **overrides})
        container = build_container(
            config,
            rate_limiter=RateLimiter.from_settings(config, clock=clock),
            hasher=FAST_HASHER,
        )
        client = TestClient(create_app(config, container))
        client.__enter__()
        clients.append(client)
        return ApiClient(client, container, clock)

    limiter.reset()
    yield factory
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def api(make_api) -> ApiClient:
    return make_api()


@pytest.fixture
def db() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def repos(db: MemoryDatabase):
    """In-memory repositories sharing one database, for use case tests."""
    return {
        "users": InMemoryUserRepository(db),
        "sessions": InMemorySessionRepository(db),
        "companies": InMemoryCompanyRepository(db),
        "jobs": InMemoryJobRepository(db),
        "applications": InMemoryApplicationRepository(db),
    }
