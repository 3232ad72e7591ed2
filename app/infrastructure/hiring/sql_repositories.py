"""
Adapter: PostgreSQL repositories.

Implements the hiring ports with SQLAlchemy Core ``text()`` queries over
an AsyncEngine (asyncpg driver). Schema lives in db/schema.sql.

Uniqueness is enforced by the database: inserts use
``ON CONFLICT DO NOTHING RETURNING`` and an empty result means the row
already existed. Status changes are a single conditional UPDATE.
"""

import logging
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from app.domain.access.entities import Role
from app.domain.hiring.entities import (
    Application,
    ApplicationStats,
    ApplicationStatus,
    Company,
    Job,
    JobSearchCriteria,
    JobStatus,
    JobType,
    Page,
    RecentApplication,
    Session,
    User,
    UserListCriteria,
)
from app.domain.hiring.errors import (
    DuplicateApplicationError,
    DuplicateCompanyError,
    DuplicateEmailError,
)
from app.domain.hiring.ports import (
    ApplicationRepository,
    CompanyRepository,
    JobRepository,
    SessionRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, email, password_hash, role, is_active, email_verified, created_at"
COMPANY_COLUMNS = "id, name, owner_id, location, website, is_verified, created_at"
JOB_COLUMNS = (
    "id, company_id, title, description, location, job_type, status, "
    "salary_min, salary_max, experience, created_at, updated_at"
)
APPLICATION_COLUMNS = "id, job_id, user_id, status, cover_note, created_at, updated_at"

JOB_ORDER_BY = {
    "newest": "created_at DESC",
    "salary_high": "salary_max DESC NULLS LAST, salary_min DESC NULLS LAST, created_at DESC",
    "salary_low": "salary_min ASC NULLS LAST, salary_max ASC NULLS LAST, created_at DESC",
}


def _to_user(row: Any) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        role=Role(row.role),
        is_active=row.is_active,
        email_verified=row.email_verified,
        created_at=row.created_at,
    )


def _to_company(row: Any) -> Company:
    return Company(
        id=row.id,
        name=row.name,
        owner_id=row.owner_id,
        location=row.location,
        website=row.website,
        is_verified=row.is_verified,
        created_at=row.created_at,
    )


def _to_job(row: Any) -> Job:
    return Job(
        id=row.id,
        company_id=row.company_id,
        title=row.title,
        description=row.description,
        location=row.location,
        job_type=JobType(row.job_type),
        status=JobStatus(row.status),
        salary_min=row.salary_min,
        salary_max=row.salary_max,
        experience=row.experience,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_application(row: Any) -> Application:
    return Application(
        id=row.id,
        job_id=row.job_id,
        user_id=row.user_id,
        status=ApplicationStatus(row.status),
        cover_note=row.cover_note,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlUserRepository(UserRepository):
    """Users in the ``users`` table. Emails are stored lower-cased."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, user_id: str) -> Optional[User]:
        query = text(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"id": user_id})).first()
        return _to_user(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        query = text(f"SELECT {USER_COLUMNS} FROM users WHERE email = :email")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"email": email.strip().lower()})).first()
        return _to_user(row) if row else None

    async def add(self, user: User) -> User:
        query = text(
            """
            INSERT INTO users
                (id, email, password_hash, role, is_active, email_verified, created_at)
            VALUES
                (:id, :email, :password_hash, :role, :is_active, :email_verified, :created_at)
            ON CONFLICT (email) DO NOTHING
            RETURNING id
            """
        )
        async with self._engine.begin() as conn:
            inserted = (
                await conn.execute(
                    query,
                    {
                        "id": user.id,
                        "email": user.email.lower(),
                        "password_hash": user.password_hash,
                        "role": user.role.value,
                        "is_active": user.is_active,
                        "email_verified": user.email_verified,
                        "created_at": user.created_at,
                    },
                )
            ).first()
        if inserted is None:
            raise DuplicateEmailError()
        return user

    async def list_users(self, criteria: UserListCriteria) -> Page:
        clauses = []
        params: dict[str, Any] = {}
        if criteria.role is not None:
            clauses.append("role = :role")
            params["role"] = criteria.role.value
        if criteria.is_active is not None:
            clauses.append("is_active = :is_active")
            params["is_active"] = criteria.is_active
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        count_query = text(f"SELECT COUNT(*) FROM users {where}")
        rows_query = text(
            f"SELECT {USER_COLUMNS} FROM users {where} "
            "ORDER BY created_at DESC LIMIT :limit OFFSET :offset"
        )
        async with self._engine.connect() as conn:
            total = (await conn.execute(count_query, params)).scalar_one()
            rows = (
                await conn.execute(
                    rows_query,
                    {**params, "limit": criteria.limit, "offset": (criteria.page - 1) * criteria.limit},
                )
            ).all()
        return Page(
            items=[_to_user(r) for r in rows],
            total=total,
            page=criteria.page,
            limit=criteria.limit,
        )

    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        query = text(
            f"UPDATE users SET is_active = :is_active WHERE id = :id RETURNING {USER_COLUMNS}"
        )
        async with self._engine.begin() as conn:
            row = (await conn.execute(query, {"id": user_id, "is_active": is_active})).first()
        return _to_user(row) if row else None


class SqlSessionRepository(SessionRepository):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def add(self, session: Session) -> None:
        query = text(
            "INSERT INTO sessions (token, user_id, expires_at) "
            "VALUES (:token, :user_id, :expires_at)"
        )
        async with self._engine.begin() as conn:
            await conn.execute(
                query,
                {
                    "token": session.token,
                    "user_id": session.user_id,
                    "expires_at": session.expires_at,
                },
            )

    async def get(self, token: str) -> Optional[Session]:
        query = text("SELECT token, user_id, expires_at FROM sessions WHERE token = :token")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"token": token})).first()
        if row is None:
            return None
        return Session(token=row.token, user_id=row.user_id, expires_at=row.expires_at)

    async def delete(self, token: str) -> None:
        async with self._engine.begin() as conn:
            await conn.execute(text("DELETE FROM sessions WHERE token = :token"), {"token": token})

    async def delete_for_user(self, user_id: str) -> int:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text("DELETE FROM sessions WHERE user_id = :user_id"), {"user_id": user_id}
            )
        return result.rowcount


class SqlCompanyRepository(CompanyRepository):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, company_id: str) -> Optional[Company]:
        query = text(f"SELECT {COMPANY_COLUMNS} FROM companies WHERE id = :id")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"id": company_id})).first()
        return _to_company(row) if row else None

    async def get_by_owner(self, owner_id: str) -> Optional[Company]:
        query = text(f"SELECT {COMPANY_COLUMNS} FROM companies WHERE owner_id = :owner_id")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"owner_id": owner_id})).first()
        return _to_company(row) if row else None

    async def add(self, company: Company) -> Company:
        query = text(
            """
            INSERT INTO companies
                (id, name, owner_id, location, website, is_verified, created_at)
            VALUES
                (:id, :name, :owner_id, :location, :website, :is_verified, :created_at)
            ON CONFLICT (owner_id) DO NOTHING
            RETURNING id
            """
        )
        async with self._engine.begin() as conn:
            inserted = (
                await conn.execute(
                    query,
                    {
                        "id": company.id,
                        "name": company.name,
                        "owner_id": company.owner_id,
                        "location": company.location,
                        "website": company.website,
                        "is_verified": company.is_verified,
                        "created_at": company.created_at,
                    },
                )
            ).first()
        if inserted is None:
            raise DuplicateCompanyError(company.owner_id)
        return company


def _job_params(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "company_id": job.company_id,
        "title": job.title,
        "description": job.description,
        "location": job.location,
        "job_type": job.job_type.value,
        "status": job.status.value,
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "experience": job.experience,
        "created_at": job.created_at,
        "updated_at": job.updated_at,
    }


class SqlJobRepository(JobRepository):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, job_id: str) -> Optional[Job]:
        query = text(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = :id")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"id": job_id})).first()
        return _to_job(row) if row else None

    async def add(self, job: Job) -> Job:
        query = text(
            f"""
            INSERT INTO jobs ({JOB_COLUMNS})
            VALUES
                (:id, :company_id, :title, :description, :location, :job_type, :status,
                 :salary_min, :salary_max, :experience, :created_at, :updated_at)
            """
        )
        async with self._engine.begin() as conn:
            await conn.execute(query, _job_params(job))
        return job

    async def update(self, job: Job) -> Job:
        query = text(
            f"""
            UPDATE jobs SET
                title = :title, description = :description, location = :location,
                job_type = :job_type, status = :status, salary_min = :salary_min,
                salary_max = :salary_max, experience = :experience, updated_at = now()
            WHERE id = :id
            RETURNING {JOB_COLUMNS}
            """
        )
        async with self._engine.begin() as conn:
            row = (await conn.execute(query, _job_params(job))).first()
        return _to_job(row) if row else job

    async def delete(self, job_id: str) -> bool:
        # applications.job_id is declared ON DELETE CASCADE
        async with self._engine.begin() as conn:
            result = await conn.execute(text("DELETE FROM jobs WHERE id = :id"), {"id": job_id})
        return result.rowcount > 0

    async def search(self, criteria: JobSearchCriteria) -> Page:
        clauses = []
        params: dict[str, Any] = {}
        if criteria.status is not None:
            clauses.append("status = :status")
            params["status"] = criteria.status.value
        if criteria.company_id is not None:
            clauses.append("company_id = :company_id")
            params["company_id"] = criteria.company_id
        if criteria.query:
            clauses.append("(title ILIKE :query OR description ILIKE :query)")
            params["query"] = f"%{criteria.query}%"
        if criteria.location:
            clauses.append("location ILIKE :location")
            params["location"] = f"%{criteria.location}%"
        if criteria.job_type is not None:
            clauses.append("job_type = :job_type")
            params["job_type"] = criteria.job_type.value
        if criteria.min_salary is not None:
            clauses.append("(salary_max IS NULL OR salary_max >= :min_salary)")
            params["min_salary"] = criteria.min_salary
        if criteria.max_salary is not None:
            clauses.append("(salary_min IS NULL OR salary_min <= :max_salary)")
            params["max_salary"] = criteria.max_salary
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        order_by = JOB_ORDER_BY.get(criteria.sort, JOB_ORDER_BY["newest"])

        count_query = text(f"SELECT COUNT(*) FROM jobs {where}")
        rows_query = text(
            f"SELECT {JOB_COLUMNS} FROM jobs {where} "
            f"ORDER BY {order_by} LIMIT :limit OFFSET :offset"
        )
        async with self._engine.connect() as conn:
            total = (await conn.execute(count_query, params)).scalar_one()
            rows = (
                await conn.execute(
                    rows_query,
                    {**params, "limit": criteria.limit, "offset": (criteria.page - 1) * criteria.limit},
                )
            ).all()
        return Page(
            items=[_to_job(r) for r in rows],
            total=total,
            page=criteria.page,
            limit=criteria.limit,
        )

    async def count(
        self, company_id: Optional[str] = None, status: Optional[JobStatus] = None
    ) -> int:
        clauses = []
        params: dict[str, Any] = {}
        if company_id is not None:
            clauses.append("company_id = :company_id")
            params["company_id"] = company_id
        if status is not None:
            clauses.append("status = :status")
            params["status"] = status.value
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        query = text(f"SELECT COUNT(*) FROM jobs {where}")
        async with self._engine.connect() as conn:
            return (await conn.execute(query, params)).scalar_one()


class SqlApplicationRepository(ApplicationRepository):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, application_id: str) -> Optional[Application]:
        query = text(f"SELECT {APPLICATION_COLUMNS} FROM applications WHERE id = :id")
        async with self._engine.connect() as conn:
            row = (await conn.execute(query, {"id": application_id})).first()
        return _to_application(row) if row else None

    async def add(self, application: Application) -> Application:
        query = text(
            f"""
            INSERT INTO applications ({APPLICATION_COLUMNS})
            VALUES (:id, :job_id, :user_id, :status, :cover_note, :created_at, :updated_at)
            ON CONFLICT (job_id, user_id) DO NOTHING
            RETURNING id
            """
        )
        async with self._engine.begin() as conn:
            inserted = (
                await conn.execute(
                    query,
                    {
                        "id": application.id,
                        "job_id": application.job_id,
                        "user_id": application.user_id,
                        "status": application.status.value,
                        "cover_note": application.cover_note,
                        "created_at": application.created_at,
                        "updated_at": application.updated_at,
                    },
                )
            ).first()
        if inserted is None:
            raise DuplicateApplicationError(application.job_id)
        return application

    async def list_for_job(self, job_id: str) -> list[Application]:
        query = text(
            f"SELECT {APPLICATION_COLUMNS} FROM applications "
            "WHERE job_id = :job_id ORDER BY created_at DESC"
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query, {"job_id": job_id})).all()
        return [_to_application(r) for r in rows]

    async def list_for_user(self, user_id: str) -> list[Application]:
        query = text(
            f"SELECT {APPLICATION_COLUMNS} FROM applications "
            "WHERE user_id = :user_id ORDER BY created_at DESC"
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query, {"user_id": user_id})).all()
        return [_to_application(r) for r in rows]

    async def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus,
    ) -> Optional[Application]:
        query = text(
            f"""
            UPDATE applications
            SET status = :new, updated_at = now()
            WHERE id = :id AND status = :expected
            RETURNING {APPLICATION_COLUMNS}
            """
        )
        async with self._engine.begin() as conn:
            row = (
                await conn.execute(
                    query,
                    {"id": application_id, "expected": expected.value, "new": new.value},
                )
            ).first()
        if row is None:
            logger.info(
                "Status compare-and-set lost for application=%s (expected %s)",
                application_id,
                expected.value,
            )
            return None
        return _to_application(row)

    async def stats_for_job(self, job_id: str) -> ApplicationStats:
        return await self._stats("WHERE a.job_id = :job_id", {"job_id": job_id})

    async def stats_for_company(self, company_id: Optional[str]) -> ApplicationStats:
        if company_id is None:
            return await self._stats("", {})
        return await self._stats("WHERE j.company_id = :company_id", {"company_id": company_id})

    async def recent_for_company(
        self, company_id: Optional[str], limit: int
    ) -> list[RecentApplication]:
        where = ""
        params: dict[str, Any] = {"limit": limit}
        if company_id is not None:
            where = "WHERE j.company_id = :company_id"
            params["company_id"] = company_id
        query = text(
            f"""
            SELECT a.id, a.job_id, j.title, a.status, a.created_at
            FROM applications a JOIN jobs j ON j.id = a.job_id
            {where}
            ORDER BY a.created_at DESC
            LIMIT :limit
            """
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query, params)).all()
        return [
            RecentApplication(
                application_id=r.id,
                job_id=r.job_id,
                job_title=r.title,
                status=ApplicationStatus(r.status),
                created_at=r.created_at,
            )
            for r in rows
        ]

    async def _stats(self, where: str, params: dict[str, Any]) -> ApplicationStats:
        query = text(
            f"""
            SELECT a.status, COUNT(*) AS count, MAX(a.created_at) AS last_applied_at
            FROM applications a JOIN jobs j ON j.id = a.job_id
            {where}
            GROUP BY a.status
            """
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query, params)).all()
        return ApplicationStats.from_counts(
            {ApplicationStatus(r.status): r.count for r in rows},
            last_applied_at=max((r.last_applied_at for r in rows), default=None),
        )
