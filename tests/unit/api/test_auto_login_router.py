import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlmodel import Session

from src.cobalt_cms.entities.core.admin_role import AdminRole
from src.cobalt_cms.entities.core.admin_user import AdminUserRepository
from src.cobalt_cms.entities.core.login_audit import LoginAuditRepository
from tests.utils import b64url, cms_claims, make_cobalt_token

AUTO_LOGIN = "/api/cobalt-auth/auto-login"
CHECK_AUTH = "/api/cobalt-auth/check-auth"


def _login(client: TestClient, email: str = "new@x.com", **claims):
    token = make_cobalt_token(cms_claims(email, **claims))
    return client.post(AUTO_LOGIN, json={"email": email, "cobaltToken": token})


def _users(engine: Engine):
    with Session(engine) as db:
        return AdminUserRepository(db).list_all()


class TestAutoLogin:
    def test_new_user_is_provisioned_and_logged_in(
        self, client: TestClient, engine: Engine, super_admin_role: AdminRole
    ):
        response = _login(client, email="New@X.com")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["created"] is True
        assert body["message"] == "User created and logged in successfully"
        assert body["user"]["email"] == "new@x.com"
        assert body["user"]["firstname"] == "Ada"
        assert "password" not in body["user"]

        assert "strapi-jwt" in response.cookies
        assert "cms_session_id" in response.cookies
        cookie_header = "; ".join(response.headers.get_list("set-cookie"))
        assert "HttpOnly" in cookie_header

        users = _users(engine)
        assert [u.email for u in users] == ["new@x.com"]
        assert users[0].role_codes == ["strapi-super-admin"]

        check = client.get(CHECK_AUTH)
        assert check.json() == {
            "authenticated": True,
            "user": {
                "id": body["user"]["id"],
                "email": "new@x.com",
                "firstname": "Ada",
                "lastname": "Lovelace",
            },
        }

    def test_second_login_reuses_identity(
        self, client: TestClient, engine: Engine, super_admin_role: AdminRole
    ):
        first = _login(client)
        second = _login(client, given_name="Changed")

        assert second.status_code == 200
        assert second.json()["created"] is False
        assert second.json()["message"] == "Auto-login successful"
        assert second.json()["user"]["id"] == first.json()["user"]["id"]
        assert second.json()["user"]["firstname"] == "Ada"
        assert len(_users(engine)) == 1

        with Session(engine) as db:
            audit = LoginAuditRepository(db).get_by_cobalt_user_id("cobalt-user-1")
        assert audit is not None
        assert audit.login_count == 2

    def test_expired_token_creates_nothing(
        self, client: TestClient, engine: Engine, super_admin_role: AdminRole
    ):
        response = _login(client, exp=int(time.time()) - 10)

        assert response.status_code == 401
        assert response.json()["detail"] == "Cobalt token has expired"
        assert "set-cookie" not in response.headers
        assert _users(engine) == []

    def test_unauthorized_claims_forbidden(
        self, client: TestClient, engine: Engine, super_admin_role: AdminRole
    ):
        response = _login(client, isCMS=False, roles=["viewer"])

        assert response.status_code == 403
        assert response.json()["detail"] == "User does not have CMS permissions"
        assert _users(engine) == []

    def test_role_based_authorization(self, client: TestClient, super_admin_role: AdminRole):
        response = _login(client, isCMS=None, roles=["cms-editor"])
        assert response.status_code == 200

    @pytest.mark.parametrize("token", ["not-a-token", "a.%%%.c", "abc"])
    def test_malformed_token(self, client: TestClient, token: str):
        response = client.post(AUTO_LOGIN, json={"email": "new@x.com", "cobaltToken": token})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid Cobalt token"

    def test_deeply_nested_token_is_invalid(self, client: TestClient):
        token = "h." + b64url(b"[" * 3000) + ".s"

        response = client.post(AUTO_LOGIN, json={"email": "new@x.com", "cobaltToken": token})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid Cobalt token"

    @pytest.mark.parametrize(
        ("body", "detail"),
        [
            ({"cobaltToken": "x.y.z"}, "Email is required"),
            ({"email": "", "cobaltToken": "x.y.z"}, "Email is required"),
            ({"email": "new@x.com"}, "Cobalt token is required"),
        ],
    )
    def test_missing_fields(self, client: TestClient, body: dict, detail: str):
        response = client.post(AUTO_LOGIN, json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == detail

    def test_inactive_identity_rejected(
        self, client: TestClient, super_admin_role: AdminRole, admin_user_factory
    ):
        admin_user_factory("off@x.com", [super_admin_role], is_active=False)

        response = _login(client, email="off@x.com")

        assert response.status_code == 401
        assert response.json()["detail"] == "User account is disabled"
        assert "set-cookie" not in response.headers

    def test_missing_role_is_internal_error(self, client: TestClient, engine: Engine):
        response = _login(client)

        assert response.status_code == 500
        assert response.json()["detail"] == "Auto-login failed"
        assert _users(engine) == []


class TestCheckAuth:
    def test_no_cookie(self, client: TestClient):
        response = client.get(CHECK_AUTH)

        assert response.status_code == 200
        assert response.json() == {"authenticated": False}

    def test_garbage_cookie(self, client: TestClient):
        client.cookies.set("strapi-jwt", "garbage")

        response = client.get(CHECK_AUTH)

        assert response.json() == {"authenticated": False}

    def test_unknown_session_slot(self, client: TestClient):
        client.cookies.set("cms_session_id", "does-not-exist")

        assert client.get(CHECK_AUTH).json() == {"authenticated": False}

    def test_session_slot_alone_authenticates(
        self, client: TestClient, super_admin_role: AdminRole
    ):
        login = _login(client)
        session_id = login.cookies["cms_session_id"]

        client.cookies.clear()
        client.cookies.set("cms_session_id", session_id)

        response = client.get(CHECK_AUTH)
        assert response.json()["authenticated"] is True
        assert response.json()["user"]["id"] == login.json()["user"]["id"]
