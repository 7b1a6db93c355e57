"""Integration tests for the authentication endpoints."""

import pytest
from fastapi.testclient import TestClient

from learnhub_identity import JWTService

TEST_PASSWORD = "Str0ng!Pwd"
NEW_PASSWORD = "An0ther!Pwd"


def _login(client: TestClient, email: str, password: str):
    return client.post("/auth/login", json={"email": email, "password": password})


def _change_password(client, headers, current, new, confirm=None):
    return client.post(
        "/auth/change-password",
        json={
            "currentPassword": current,
            "newPassword": new,
            "confirmNewPassword": confirm if confirm is not None else new,
        },
        headers=headers,
    )


@pytest.mark.integration
class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, test_client, registered_user_data):
        response = test_client.post("/auth/register", json=registered_user_data)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["name"] == "Ada Lovelace"
        assert data["user"]["role"] == "student"
        assert "password" not in data["user"]
        assert "password_hash" not in str(data)

        # Both authentication modes are established
        assert "accessToken" in response.cookies
        assert "refreshToken" in response.cookies
        assert "sessionId" in response.cookies

    def test_register_with_role(self, test_client, registered_user_data):
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "role": "instructor"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "instructor"

    def test_register_normalizes_email(self, test_client, registered_user_data):
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "email": "Ada@Example.COM"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "ada@example.com"

    def test_register_duplicate_email(self, test_client, registered_user):
        response = test_client.post(
            "/auth/register",
            json={
                "name": "Someone Else",
                "email": "ADA@example.com",
                "password": "Diff3rent!Pwd",
                "confirm_password": "Diff3rent!Pwd",
            },
        )

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "Email already in use",
            "code": "EMAIL_ALREADY_EXISTS",
        }

    def test_register_weak_password(self, test_client, registered_user_data):
        response = test_client.post(
            "/auth/register",
            json={
                **registered_user_data,
                "password": "weakpassword",
                "confirm_password": "weakpassword",
            },
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Password must contain at least one uppercase, one lowercase, "
            "one number and one special character"
        )

    def test_register_accepts_apostrophe_email(
        self,
        test_client,
        registered_user_data,
    ):
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "email": "O'Brien@example.com"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "o'brien@example.com"
        login = _login(test_client, "o'brien@example.com", TEST_PASSWORD)
        assert login.status_code == 200

    def test_register_trims_name_before_length_check(
        self,
        test_client,
        registered_user_data,
    ):
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "name": "  ab  "},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_register_password_over_bcrypt_limit(
        self,
        test_client,
        registered_user_data,
    ):
        password = "Str0ng!Pwd" + "a" * 70
        response = test_client.post(
            "/auth/register",
            json={
                **registered_user_data,
                "password": password,
                "confirm_password": password,
            },
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Password cannot exceed 72 bytes",
            "code": "VALIDATION_ERROR",
        }

    def test_register_password_mismatch(self, test_client, registered_user_data):
        response = test_client.post(
            "/auth/register",
            json={**registered_user_data, "confirm_password": "Other!Pwd1"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match"

    def test_register_missing_fields(self, test_client):
        response = test_client.post("/auth/register", json={"email": "a@x.com"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"

    def test_rejected_registration_stores_nothing(
        self,
        test_client,
        registered_user_data,
    ):
        test_client.post(
            "/auth/register",
            json={**registered_user_data, "confirm_password": "Other!Pwd1"},
        )

        response = _login(test_client, "ada@example.com", TEST_PASSWORD)

        assert response.status_code == 401


@pytest.mark.integration
class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, test_client, registered_user):
        response = _login(test_client, "ada@example.com", TEST_PASSWORD)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["id"] == registered_user["user"]["id"]
        # jti makes every issued token unique
        assert data["token"] != registered_user["token"]
        assert "refreshToken" in response.cookies

    def test_login_is_case_insensitive_on_email(self, test_client, registered_user):
        response = _login(test_client, "ADA@EXAMPLE.COM", TEST_PASSWORD)

        assert response.status_code == 200

    def test_unknown_email_and_wrong_password_are_indistinguishable(
        self,
        test_client,
        registered_user,
    ):
        unknown = _login(test_client, "nobody@example.com", TEST_PASSWORD)
        wrong = _login(test_client, "ada@example.com", "Wr0ng!Pwd")

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()
        assert unknown.json()["message"] == "Invalid credentials"
        assert "accessToken" not in wrong.cookies

    def test_login_invalid_email_format(self, test_client):
        response = _login(test_client, "not-an-email", TEST_PASSWORD)

        assert response.status_code == 400

    def test_login_records_last_login(self, test_client, registered_user):
        login = _login(test_client, "ada@example.com", TEST_PASSWORD)

        response = test_client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {login.json()['token']}"},
        )

        assert response.json()["user"]["last_login"] is not None


@pytest.mark.integration
class TestEndToEnd:
    def test_register_login_change_password(self, test_client):
        """Full credential lifecycle for one account."""
        register = test_client.post(
            "/auth/register",
            json={
                "name": "Alice",
                "email": "a@x.com",
                "password": TEST_PASSWORD,
                "confirm_password": TEST_PASSWORD,
            },
        )
        assert register.status_code == 201
        assert register.json()["token"]

        login = _login(test_client, "a@x.com", TEST_PASSWORD)
        assert login.status_code == 200
        token = login.json()["token"]
        assert token != register.json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        wrong = _change_password(test_client, headers, "Wr0ng!Pwd", NEW_PASSWORD)
        assert wrong.status_code == 401

        changed = _change_password(test_client, headers, TEST_PASSWORD, NEW_PASSWORD)
        assert changed.status_code == 200
        assert changed.json() == {
            "success": True,
            "message": "Password updated successfully",
        }

        assert _login(test_client, "a@x.com", TEST_PASSWORD).status_code == 401
        assert _login(test_client, "a@x.com", NEW_PASSWORD).status_code == 200


@pytest.mark.integration
class TestChangePassword:
    def test_requires_authentication(self, test_client, registered_user):
        response = _change_password(test_client, {}, TEST_PASSWORD, NEW_PASSWORD)

        assert response.status_code == 401

    def test_rejects_weak_new_password(self, test_client, auth_headers):
        response = _change_password(
            test_client,
            auth_headers,
            TEST_PASSWORD,
            "weakpassword",
        )

        assert response.status_code == 400

    def test_new_password_over_bcrypt_limit_rejected_first(
        self,
        test_client,
        auth_headers,
    ):
        # Rejected by validation even though the current password is wrong
        response = _change_password(
            test_client,
            auth_headers,
            "Wr0ng!Pwd",
            "An0ther!Pwd" + "a" * 70,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["message"] == "Password cannot exceed 72 bytes"

    def test_rejects_unconfirmed_new_password(self, test_client, auth_headers):
        response = _change_password(
            test_client,
            auth_headers,
            TEST_PASSWORD,
            NEW_PASSWORD,
            confirm="Different!1",
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Passwords do not match"

    def test_wrong_current_password_keeps_old_one(self, test_client, auth_headers):
        response = _change_password(
            test_client,
            auth_headers,
            "Wr0ng!Pwd",
            NEW_PASSWORD,
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"
        assert _login(test_client, "ada@example.com", TEST_PASSWORD).status_code == 200


@pytest.mark.integration
class TestCurrentUser:
    """Tests for GET /auth/me and its alias."""

    def test_me_with_bearer_token(self, test_client, auth_headers, registered_user):
        response = test_client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == registered_user["user"]["id"]
        assert user["email"] == "ada@example.com"
        assert user["is_active"] is True
        assert "password_hash" not in user

    def test_alias_route(self, test_client, auth_headers):
        response = test_client.get("/auth/get-current-login-info", headers=auth_headers)

        assert response.status_code == 200

    def test_me_with_cookies_only(self, test_client, registered_user_data):
        test_client.post("/auth/register", json=registered_user_data)

        response = test_client.get("/auth/me")

        assert response.status_code == 200

    def test_me_with_session_only(self, test_client, registered_user_data):
        """The signed session alone is enough to authenticate."""
        test_client.post("/auth/register", json=registered_user_data)
        test_client.cookies.delete("accessToken")
        test_client.cookies.delete("refreshToken")

        response = test_client.get("/auth/protected")

        assert response.status_code == 200
        assert response.json()["user"]["method"] == "session"

    def test_invalid_bearer_falls_back_to_session(
        self,
        test_client,
        registered_user_data,
    ):
        test_client.post("/auth/register", json=registered_user_data)
        test_client.cookies.delete("accessToken")

        response = test_client.get(
            "/auth/protected",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["method"] == "session"

    def test_me_without_credentials(self, test_client):
        response = test_client.get("/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["code"] == "AUTHENTICATION_REQUIRED"

    def test_me_with_garbage_token(self, test_client):
        response = test_client.get(
            "/auth/me",
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, test_client, registered_user):
        login = _login(test_client, "ada@example.com", TEST_PASSWORD)
        refresh_token = login.cookies["refreshToken"]
        test_client.cookies.clear()

        response = test_client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {refresh_token}"},
        )

        assert response.status_code == 401

    def test_token_signed_with_other_key(self, test_client, registered_user):
        forged = JWTService(secret_key="some-other-secret").create_access_token(
            registered_user["user"]["id"],
            "ada@example.com",
            "admin",
        )

        response = test_client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {forged}"},
        )

        assert response.status_code == 401


@pytest.mark.integration
class TestRefresh:
    """Tests for POST /auth/refresh."""

    def test_refresh_from_body(self, test_client, registered_user):
        login = _login(test_client, "ada@example.com", TEST_PASSWORD)
        refresh_token = login.cookies["refreshToken"]
        test_client.cookies.clear()

        response = test_client.post(
            "/auth/refresh",
            json={"refreshToken": refresh_token},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["accessToken"]

        me = test_client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {data['accessToken']}"},
        )
        assert me.status_code == 200

    def test_refresh_from_cookie(self, test_client, registered_user):
        _login(test_client, "ada@example.com", TEST_PASSWORD)

        response = test_client.post("/auth/refresh")

        assert response.status_code == 200
        assert "accessToken" in response.cookies

    def test_refresh_without_token(self, test_client):
        response = test_client.post("/auth/refresh", json={})

        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token required"

    def test_refresh_with_invalid_token(self, test_client):
        response = test_client.post(
            "/auth/refresh",
            json={"refreshToken": "garbage"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "INVALID_REFRESH_TOKEN"

    def test_refresh_with_access_token(self, test_client, registered_user):
        response = test_client.post(
            "/auth/refresh",
            json={"refreshToken": registered_user["token"]},
        )

        assert response.status_code == 403


@pytest.mark.integration
class TestLogout:
    def test_logout_clears_cookies_and_session(self, test_client, registered_user_data):
        test_client.post("/auth/register", json=registered_user_data)
        assert test_client.get("/auth/me").status_code == 200

        response = test_client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Logged out successfully",
        }
        assert test_client.get("/auth/me").status_code == 401

    def test_logout_without_login(self, test_client):
        response = test_client.post("/auth/logout")

        assert response.status_code == 200


@pytest.mark.integration
class TestProtectedRoutes:
    def test_protected_requires_authentication(self, test_client):
        assert test_client.get("/auth/protected").status_code == 401

    def test_protected_reports_identity(self, test_client, auth_headers):
        response = test_client.get("/auth/protected", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "This is a protected route"
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["method"] == "bearer"

    def test_admin_route_forbidden_for_student(self, test_client, auth_headers):
        response = test_client.get("/auth/protected/admin", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_admin_route_for_admin(self, test_client, registered_user_data):
        register = test_client.post(
            "/auth/register",
            json={**registered_user_data, "role": "admin"},
        )
        headers = {"Authorization": f"Bearer {register.json()['token']}"}

        response = test_client.get("/auth/protected/admin", headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == "This is an admin-only route"


@pytest.mark.integration
def test_health(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
