"""Login, session and logout endpoints, plus the admin/master guards."""

from tests.helpers import ADMIN, MASTER, login


class TestLogin:
    def test_login_success_returns_admin(self, client):
        resp = login(client, **MASTER)
        assert resp.status_code == 200
        admin = resp.get_json()["admin"]
        assert admin["username"] == "master"
        assert admin["role"] == "master"
        assert "password_hash" not in admin

    def test_wrong_password(self, client):
        resp = login(client, "master", "nope")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid credentials"

    def test_unknown_user_same_message(self, client):
        resp = login(client, "ghost", "whatever")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid credentials"

    def test_missing_fields(self, client):
        resp = client.post("/api/auth/login", json={"username": "master"})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid data"

    def test_non_json_body(self, client):
        resp = client.post("/api/auth/login", data="username=master")
        assert resp.status_code == 400

    def test_session_cookie_is_httponly(self, client):
        resp = login(client, **MASTER)
        cookie = resp.headers.get("Set-Cookie", "")
        assert "HttpOnly" in cookie
        assert "SameSite=Lax" in cookie


class TestSession:
    def test_no_session(self, client):
        resp = client.get("/api/auth/session")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Not authenticated"

    def test_session_after_login(self, master_client):
        resp = master_client.get("/api/auth/session")
        assert resp.status_code == 200
        assert resp.get_json()["admin"]["username"] == "master"

    def test_logout_clears_session(self, master_client):
        resp = master_client.post("/api/auth/logout")
        assert resp.get_json() == {"ok": True}
        assert master_client.get("/api/auth/session").status_code == 401

    def test_deleted_admin_session(self, master_client, admin_client):
        admins = master_client.get("/api/master/admins").get_json()
        alice = next(a for a in admins if a["username"] == ADMIN["username"])
        assert master_client.delete(f"/api/master/admins/{alice['id']}").status_code == 200

        resp = admin_client.get("/api/auth/session")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Admin not found"


class TestGuards:
    def test_admin_routes_require_login(self, client):
        assert client.get("/api/admin/images").status_code == 401
        assert client.get("/api/admin/stats").status_code == 401
        assert client.post("/api/admin/upload").status_code == 401
        assert client.delete("/api/admin/images/abc").status_code == 401

    def test_master_routes_reject_plain_admin(self, admin_client):
        resp = admin_client.get("/api/master/admins")
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Master admin required"
        assert admin_client.get("/api/master/reports").status_code == 403

    def test_master_routes_require_login(self, client):
        assert client.get("/api/master/admins").status_code == 401
