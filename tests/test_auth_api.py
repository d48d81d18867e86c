"""HTTP tests for /auth and /users: cookie sessions, uniform 401s, admin user management."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from pydantic import SecretStr

from portal.api.deps import get_auth_service
from portal.core.config import Settings
from portal.main import create_app
from portal.services.auth import AuthService
from portal.services.credential_store import SqlCredentialStore
from portal.services.errors import StoreUnavailableError

PREFIX = "/api/v1"
ADMIN_EMAIL = "admin@example.com"
MEMBER_EMAIL = "member@example.com"
PASSWORD = "TestPassword123"


def _settings(**overrides: object) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr("api-test-secret"),
        "BCRYPT_ROUNDS": 4,
        "SESSION_COOKIE_NAME": "app_session_id",
    }
    values.update(overrides)
    return Settings(**values)


class ApiTestCase(unittest.TestCase):
    """App on a fresh in-memory database with one admin and one member."""

    settings_overrides: dict = {}

    def setUp(self) -> None:
        self.settings = _settings(**self.settings_overrides)
        self.app = create_app(self.settings)
        self.database = self.app.state.database
        self.database.create_all()
        session = self.database.SessionLocal()
        try:
            auth = AuthService(SqlCredentialStore(session), bcrypt_rounds=4)
            self.admin_id = auth.register(ADMIN_EMAIL, PASSWORD, "Admin", role="admin")
            self.member_id = auth.register(MEMBER_EMAIL, PASSWORD, "Member")
        finally:
            session.close()
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        self.database.dispose()

    def login(self, email: str = MEMBER_EMAIL, password: str = PASSWORD):
        return self.client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})


class TestLogin(ApiTestCase):
    def test_success_sets_session_cookie(self) -> None:
        r = self.login()
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["email"], MEMBER_EMAIL)
        self.assertEqual(body["user"]["role"], "member")
        self.assertEqual(body["user"]["name"], "Member")
        self.assertNotIn("password_hash", body["user"])
        cookie_header = r.headers["set-cookie"].lower()
        self.assertIn("app_session_id=", cookie_header)
        self.assertIn("; httponly", cookie_header)
        self.assertNotIn("; secure", cookie_header)

    def test_cookie_is_secure_behind_https_proxy(self) -> None:
        r = self.client.post(
            f"{PREFIX}/auth/login",
            json={"email": MEMBER_EMAIL, "password": PASSWORD},
            headers={"X-Forwarded-Proto": "https"},
        )
        self.assertEqual(r.status_code, 200)
        self.assertIn("; secure", r.headers["set-cookie"].lower())

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        wrong = self.login(password="WrongPassword")
        unknown = self.login(email="nobody@example.com")
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json()["detail"], "Invalid email or password")
        self.assertNotIn("set-cookie", wrong.headers)

    def test_inactive_account_gets_the_same_401(self) -> None:
        self.client.cookies.clear()
        self.login(ADMIN_EMAIL)
        self.client.patch(f"{PREFIX}/users/{self.member_id}", json={"is_active": False})
        r = self.login()
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["detail"], "Invalid email or password")

    def test_invalid_email_format_is_422(self) -> None:
        r = self.client.post(f"{PREFIX}/auth/login", json={"email": "not-an-email", "password": PASSWORD})
        self.assertEqual(r.status_code, 422)


class TestSession(ApiTestCase):
    def test_me_without_session_is_null(self) -> None:
        r = self.client.get(f"{PREFIX}/auth/me")
        self.assertEqual(r.status_code, 200)
        self.assertIsNone(r.json())

    def test_me_after_login(self) -> None:
        self.login()
        r = self.client.get(f"{PREFIX}/auth/me")
        self.assertEqual(r.json()["id"], self.member_id)
        self.assertEqual(r.json()["email"], MEMBER_EMAIL)

    def test_logout_clears_cookie(self) -> None:
        self.login()
        r = self.client.post(f"{PREFIX}/auth/logout")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"success": True})
        self.assertIn("app_session_id=", r.headers["set-cookie"])
        self.assertIsNone(self.client.get(f"{PREFIX}/auth/me").json())

    def test_token_survives_logout(self) -> None:
        """Sessions are stateless: a copied token stays valid after logout."""
        self.login()
        token = self.client.cookies.get("app_session_id")
        self.client.post(f"{PREFIX}/auth/logout")
        self.client.cookies.set("app_session_id", token)
        self.assertEqual(self.client.get(f"{PREFIX}/auth/me").json()["id"], self.member_id)

    def test_tampered_cookie_is_anonymous(self) -> None:
        self.client.cookies.set("app_session_id", "garbage.token.value")
        self.assertIsNone(self.client.get(f"{PREFIX}/auth/me").json())

    def test_deactivated_user_loses_session(self) -> None:
        self.login()
        member_cookie = self.client.cookies.get("app_session_id")
        self.client.cookies.clear()
        self.login(ADMIN_EMAIL)
        self.client.patch(f"{PREFIX}/users/{self.member_id}", json={"is_active": False})
        self.client.cookies.clear()
        self.client.cookies.set("app_session_id", member_cookie)
        self.assertIsNone(self.client.get(f"{PREFIX}/auth/me").json())


class TestRegister(ApiTestCase):
    def test_register_then_login(self) -> None:
        r = self.client.post(
            f"{PREFIX}/auth/register",
            json={"email": "new@example.com", "password": "Brand-new-pass", "name": "New"},
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"success": True})
        self.assertNotIn("set-cookie", r.headers)
        login = self.login("new@example.com", "Brand-new-pass")
        self.assertEqual(login.json()["user"]["role"], "member")

    def test_mixed_case_email_is_kept_verbatim(self) -> None:
        r = self.client.post(
            f"{PREFIX}/auth/register",
            json={"email": "Ana@Church.ORG", "password": "Brand-new-pass"},
        )
        self.assertEqual(r.status_code, 200)
        session = self.database.SessionLocal()
        try:
            stored = SqlCredentialStore(session).get_by_email("Ana@Church.ORG")
            self.assertIsNotNone(stored)
            self.assertEqual(stored.email, "Ana@Church.ORG")
        finally:
            session.close()
        login = self.login("Ana@Church.ORG", "Brand-new-pass")
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json()["user"]["email"], "Ana@Church.ORG")

    def test_login_as_user_created_outside_the_api(self) -> None:
        session = self.database.SessionLocal()
        try:
            AuthService(SqlCredentialStore(session), bcrypt_rounds=4).register(
                "Pastor@Church.ORG", PASSWORD, "Pastor", role="admin"
            )
        finally:
            session.close()
        r = self.login("Pastor@Church.ORG")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["email"], "Pastor@Church.ORG")

    def test_duplicate_is_400(self) -> None:
        r = self.client.post(f"{PREFIX}/auth/register", json={"email": MEMBER_EMAIL, "password": PASSWORD})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Failed to create user")

    def test_short_password_is_422(self) -> None:
        r = self.client.post(f"{PREFIX}/auth/register", json={"email": "new@example.com", "password": "short"})
        self.assertEqual(r.status_code, 422)


class TestRegistrationDisabled(ApiTestCase):
    settings_overrides = {"REGISTRATION_ENABLED": False}

    def test_register_forbidden(self) -> None:
        r = self.client.post(
            f"{PREFIX}/auth/register",
            json={"email": "new@example.com", "password": "Brand-new-pass"},
        )
        self.assertEqual(r.status_code, 403)


class TestChangePassword(ApiTestCase):
    def test_requires_session(self) -> None:
        r = self.client.post(
            f"{PREFIX}/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "NewPassword456"},
        )
        self.assertEqual(r.status_code, 401)

    def test_change_then_login_with_new(self) -> None:
        self.login()
        r = self.client.post(
            f"{PREFIX}/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "NewPassword456"},
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.login(password=PASSWORD).status_code, 401)
        self.assertEqual(self.login(password="NewPassword456").status_code, 200)

    def test_wrong_current_password(self) -> None:
        self.login()
        r = self.client.post(
            f"{PREFIX}/auth/change-password",
            json={"current_password": "WrongPassword", "new_password": "NewPassword456"},
        )
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["detail"], "Current password is incorrect")
        self.assertEqual(self.login(password=PASSWORD).status_code, 200)


class TestUsersAdmin(ApiTestCase):
    def test_member_forbidden(self) -> None:
        self.login()
        self.assertEqual(self.client.get(f"{PREFIX}/users").status_code, 403)

    def test_anonymous_unauthorized(self) -> None:
        self.assertEqual(self.client.get(f"{PREFIX}/users").status_code, 401)

    def test_admin_lists_users(self) -> None:
        self.login(ADMIN_EMAIL)
        r = self.client.get(f"{PREFIX}/users")
        self.assertEqual(r.status_code, 200)
        emails = [u["email"] for u in r.json()["users"]]
        self.assertEqual(emails, [ADMIN_EMAIL, MEMBER_EMAIL])
        self.assertNotIn("password_hash", r.json()["users"][0])

    def test_admin_promotes_member(self) -> None:
        self.login(ADMIN_EMAIL)
        r = self.client.patch(f"{PREFIX}/users/{self.member_id}", json={"role": "admin"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["role"], "admin")

    def test_admin_cannot_disable_self(self) -> None:
        self.login(ADMIN_EMAIL)
        r = self.client.patch(f"{PREFIX}/users/{self.admin_id}", json={"is_active": False})
        self.assertEqual(r.status_code, 400)

    def test_missing_user_is_404(self) -> None:
        self.login(ADMIN_EMAIL)
        r = self.client.patch(f"{PREFIX}/users/9999", json={"is_active": False})
        self.assertEqual(r.status_code, 404)


class TestStoreUnavailable(ApiTestCase):
    def test_login_maps_to_503_not_401(self) -> None:
        store = MagicMock()
        store.get_by_email.side_effect = StoreUnavailableError()
        self.app.dependency_overrides[get_auth_service] = lambda: AuthService(store, bcrypt_rounds=4)
        try:
            r = self.login()
        finally:
            self.app.dependency_overrides.clear()
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json()["detail"], "Service temporarily unavailable")


class TestHealth(ApiTestCase):
    def test_health(self) -> None:
        r = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok", "environment": "dev", "database": "connected"})


if __name__ == "__main__":
    unittest.main()
