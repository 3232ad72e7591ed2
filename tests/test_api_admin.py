"""
Tests for the admin API endpoints.

Tests role enforcement, account moderation and forced job closure.
"""

from app.domain.access.entities import Role

API = "/api/v1"


class TestListUsers:
    """Tests for GET /api/v1/admin/users."""

    def test_anonymous_caller_stops_at_authentication(self, api, monkeypatch) -> None:
        """401 before any rate-limit counting or repository access."""

        async def must_not_run(*args, **kwargs):
            raise AssertionError("listing must not be reached")

        monkeypatch.setattr(api.container.users, "list_users", must_not_run)
        response = api.get(f"{API}/admin/users")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert len(api.container.rate_limiter.store) == 0

    def test_employer_is_forbidden(self, api) -> None:
        employer = api.account("boss@example.com", Role.EMPLOYER)
        response = api.get(f"{API}/admin/users", headers=employer.headers)
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Admin role required to perform this action"

    def test_filters_and_pagination(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        api.signup("e1@example.com", "EMPLOYER")
        api.signup("e2@example.com", "EMPLOYER")
        api.signup("u1@example.com")

        response = api.get(
            f"{API}/admin/users",
            params={"role": "EMPLOYER", "limit": "1"},
            headers=admin.headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert len(body["users"]) == 1
        assert body["users"][0]["role"] == "EMPLOYER"
        assert body["pagination"]["total"] == 2
        assert body["pagination"]["hasNextPage"] is True

    def test_invalid_filters(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        response = api.get(
            f"{API}/admin/users", params={"isActive": "maybe"}, headers=admin.headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == 'isActive must be "true" or "false"'


class TestUpdateUserStatus:
    """Tests for PATCH /api/v1/admin/users/{id}."""

    def test_disable_revokes_access(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        user = api.account("user@example.com")
        response = api.patch(
            f"{API}/admin/users/{user.id}", json={"isActive": False}, headers=admin.headers
        )
        assert response.status_code == 200
        assert response.json()["isActive"] is False
        assert api.get(f"{API}/auth/me", headers=user.headers).status_code == 401
        assert api.login(user.email).status_code == 400

    def test_reenable(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        user = api.seed_user("user@example.com", is_active=False)
        response = api.patch(
            f"{API}/admin/users/{user.id}", json={"isActive": True}, headers=admin.headers
        )
        assert response.status_code == 200
        assert api.login("user@example.com").status_code == 200

    def test_only_json_booleans(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        user = api.account("user@example.com")
        response = api.patch(
            f"{API}/admin/users/{user.id}", json={"isActive": "false"}, headers=admin.headers
        )
        assert response.status_code == 400

    def test_admin_cannot_disable_self(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        response = api.patch(
            f"{API}/admin/users/{admin.id}", json={"isActive": False}, headers=admin.headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "You cannot disable your own account"

    def test_unknown_user(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        response = api.patch(
            f"{API}/admin/users/nope", json={"isActive": False}, headers=admin.headers
        )
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "User not found"

    def test_admin_budget(self, make_api) -> None:
        api = make_api(rate_limit_admin_requests=1)
        admin = api.account("root@example.com", Role.ADMIN)
        user = api.account("user@example.com")
        url = f"{API}/admin/users/{user.id}"
        assert api.patch(url, json={"isActive": True}, headers=admin.headers).status_code == 200
        response = api.patch(url, json={"isActive": True}, headers=admin.headers)
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"


class TestForceCloseJob:
    """Tests for PATCH /api/v1/admin/jobs/{id}/close."""

    def test_closes_any_job(self, api) -> None:
        _, job = api.employer_with_job()
        admin = api.account("root@example.com", Role.ADMIN)
        response = api.patch(f"{API}/admin/jobs/{job['id']}/close", headers=admin.headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CLOSED"
        assert api.get(f"{API}/jobs/{job['id']}").status_code == 404

    def test_owner_is_not_admin(self, api) -> None:
        employer, job = api.employer_with_job()
        response = api.patch(f"{API}/admin/jobs/{job['id']}/close", headers=employer.headers)
        assert response.status_code == 403

    def test_unknown_job(self, api) -> None:
        admin = api.account("root@example.com", Role.ADMIN)
        response = api.patch(f"{API}/admin/jobs/nope/close", headers=admin.headers)
        assert response.status_code == 404
