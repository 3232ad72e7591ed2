"""
Tests for the authentication API endpoints.

Tests FastAPI routes end to end with in-memory repositories.
Validates request validation, sessions, error mapping and the
authentication rate limit.
"""

from app.domain.access.entities import Role

API = "/api/v1"
PASSWORD = "correct-horse-battery"


class TestSignUp:
    """Tests for POST /api/v1/auth/signup."""

    def test_creates_account(self, api) -> None:
        """A valid sign-up returns the public view of the account."""
        response = api.signup("New@Example.com", "EMPLOYER")
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new@example.com"
        assert body["role"] == "EMPLOYER"
        assert body["isActive"] is True
        assert "passwordHash" not in body and "password_hash" not in body

    def test_duplicate_email(self, api) -> None:
        api.signup("a@b.io")
        response = api.signup("A@B.io")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    def test_admin_role_cannot_be_requested(self, api) -> None:
        """ADMIN is not a self-service role."""
        response = api.signup("a@b.io", "ADMIN")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_short_password(self, api) -> None:
        response = api.signup("a@b.io", password="short")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Password must be at least 8 characters long"

    def test_body_must_be_json(self, api) -> None:
        response = api.post(
            f"{API}/auth/signup",
            content=b"email=a@b.io",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Content-Type must be application/json"

    def test_malformed_json(self, api) -> None:
        response = api.post(
            f"{API}/auth/signup",
            content=b'{"email": ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid JSON format"

    def test_unknown_field(self, api) -> None:
        response = api.post(
            f"{API}/auth/signup",
            json={"email": "a@b.io", "password": PASSWORD, "isAdmin": True},
        )
        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    def test_login_sets_cookie_and_returns_token(self, api) -> None:
        api.signup("a@b.io")
        response = api.client.post(
            f"{API}/auth/login", json={"email": "a@b.io", "password": PASSWORD}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["email"] == "a@b.io"
        assert len(body["token"]) == 64
        assert response.cookies.get("session_token") == body["token"]
        assert "httponly" in response.headers["set-cookie"].lower()

    def test_cookie_authenticates_follow_up_requests(self, api) -> None:
        api.signup("a@b.io")
        api.client.post(f"{API}/auth/login", json={"email": "a@b.io", "password": PASSWORD})
        response = api.get(f"{API}/auth/me")
        assert response.status_code == 200
        assert response.json()["email"] == "a@b.io"

    def test_wrong_password(self, api) -> None:
        api.signup("a@b.io")
        response = api.login("a@b.io", "wrong-password")
        assert response.status_code == 401
        assert response.json() == {
            "error": {"code": "INVALID_CREDENTIALS", "message": "Invalid email or password"}
        }

    def test_unknown_email_gets_same_answer(self, api) -> None:
        response = api.login("ghost@b.io")
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    def test_disabled_account(self, api) -> None:
        api.seed_user("off@b.io", is_active=False)
        response = api.login("off@b.io")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Account is deactivated"


class TestSession:
    """Tests for GET /auth/me and POST /auth/logout."""

    def test_me_requires_session(self, api) -> None:
        response = api.get(f"{API}/auth/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_bearer_token(self, api) -> None:
        account = api.account("a@b.io", Role.EMPLOYER)
        response = api.get(f"{API}/auth/me", headers=account.headers)
        assert response.status_code == 200
        assert response.json()["role"] == "EMPLOYER"

    def test_garbage_token(self, api) -> None:
        response = api.get(f"{API}/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_logout_ends_session(self, api) -> None:
        account = api.account("a@b.io")
        response = api.post(f"{API}/auth/logout", headers=account.headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert api.get(f"{API}/auth/me", headers=account.headers).status_code == 401


class TestAuthRateLimit:
    """Authentication attempts share one fixed-window budget per client."""

    def test_sixth_attempt_is_rejected_with_remaining_window(self, make_api) -> None:
        """Five attempts are answered; the sixth gets 429 and the time left."""
        api = make_api(rate_limit_auth_requests=5, rate_limit_auth_window_seconds=900)
        api.seed_user("a@b.io")
        for _ in range(5):
            assert api.login("a@b.io", "wrong-password").status_code == 401

        api.clock.advance(100)
        response = api.login("a@b.io")
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "800"
        assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    def test_limit_runs_before_body_validation(self, make_api) -> None:
        """Malformed attempts still consume the budget."""
        api = make_api(rate_limit_auth_requests=2)
        for _ in range(2):
            assert api.post(f"{API}/auth/login", json={}).status_code == 400
        assert api.post(f"{API}/auth/login", json={}).status_code == 429

    def test_window_reset(self, make_api) -> None:
        api = make_api(rate_limit_auth_requests=1, rate_limit_auth_window_seconds=60)
        api.seed_user("a@b.io")
        assert api.login("a@b.io").status_code == 200
        assert api.login("a@b.io").status_code == 429
        api.clock.advance(60)
        assert api.login("a@b.io").status_code == 200
