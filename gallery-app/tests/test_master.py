"""Master-only management of admin accounts."""

import pytest

from gallery.errors import ValidationError
from gallery.services import admin_service
from tests.helpers import ADMIN, jpeg_bytes, login, upload


def _admins(client):
    return {a["username"]: a for a in client.get("/api/master/admins").get_json()}


def _me(client):
    return client.get("/api/auth/session").get_json()["admin"]


class TestListAndCreate:
    def test_seeded_master_is_listed(self, master_client):
        admins = _admins(master_client)
        assert list(admins) == ["master"]
        assert admins["master"]["role"] == "master"
        assert admins["master"]["image_count"] == 0

    def test_create_admin_defaults_to_admin_role(self, admin_app, master_client):
        resp = master_client.post("/api/master/admins", json={"username": "bob", "password": "bob-pass"})
        assert resp.status_code == 201
        assert resp.get_json()["admin"]["role"] == "admin"
        assert login(admin_app.test_client(), "bob", "bob-pass").status_code == 200

    def test_create_master(self, master_client):
        resp = master_client.post(
            "/api/master/admins", json={"username": "boss", "password": "boss-pass", "role": "master"}
        )
        assert resp.status_code == 201
        assert _admins(master_client)["boss"]["role"] == "master"

    def test_duplicate_username(self, master_client):
        resp = master_client.post("/api/master/admins", json={"username": "master", "password": "xxxx"})
        assert resp.status_code == 409

    def test_validation(self, master_client):
        bad = [
            {"username": "", "password": "long-enough"},
            {"username": "carol", "password": "abc"},
            {"username": "carol", "password": "long-enough", "role": "owner"},
            {"username": "x" * 81, "password": "long-enough"},
        ]
        for body in bad:
            assert master_client.post("/api/master/admins", json=body).status_code == 400

    def test_image_count(self, admin_client, master_client):
        upload(admin_client, (jpeg_bytes(), "a.jpg"), (jpeg_bytes(), "b.jpg"))
        assert _admins(master_client)[ADMIN["username"]]["image_count"] == 2


class TestUpdate:
    def test_promote_and_demote(self, admin_client, master_client):
        alice = _admins(master_client)[ADMIN["username"]]
        resp = master_client.put(f"/api/master/admins/{alice['id']}", json={"role": "master"})
        assert resp.status_code == 200
        assert resp.get_json()["admin"]["role"] == "master"
        assert admin_client.get("/api/master/admins").status_code == 200

        resp = master_client.put(f"/api/master/admins/{alice['id']}", json={"role": "admin"})
        assert resp.get_json()["admin"]["role"] == "admin"
        assert admin_client.get("/api/master/admins").status_code == 403

    def test_cannot_change_own_role(self, master_client):
        me = _me(master_client)
        resp = master_client.put(f"/api/master/admins/{me['id']}", json={"role": "admin"})
        assert resp.status_code == 400

    def test_master_can_demote_another_master(self, admin_app, master_client):
        master_client.post("/api/master/admins", json={"username": "boss", "password": "boss-pass", "role": "master"})
        boss_client = admin_app.test_client()
        login(boss_client, "boss", "boss-pass")

        original = _me(master_client)
        # boss demotes the original master: allowed, two masters exist
        assert boss_client.put(f"/api/master/admins/{original['id']}", json={"role": "admin"}).status_code == 200

    def test_reset_password(self, admin_app, admin_client, master_client):
        alice = _admins(master_client)[ADMIN["username"]]
        resp = master_client.put(f"/api/master/admins/{alice['id']}", json={"password": "reset-pass"})
        assert resp.status_code == 200
        assert login(admin_app.test_client(), ADMIN["username"], "reset-pass").status_code == 200

    def test_reset_password_too_short(self, admin_client, master_client):
        alice = _admins(master_client)[ADMIN["username"]]
        resp = master_client.put(f"/api/master/admins/{alice['id']}", json={"password": "x"})
        assert resp.status_code == 400

    def test_unknown_admin(self, master_client):
        assert master_client.put("/api/master/admins/missing", json={"role": "admin"}).status_code == 404


class TestDelete:
    def test_delete_reassigns_images(self, admin_client, master_client, public_client):
        upload(admin_client, (jpeg_bytes(), "a.jpg"))
        alice = _admins(master_client)[ADMIN["username"]]

        resp = master_client.delete(f"/api/master/admins/{alice['id']}")
        assert resp.status_code == 200
        assert ADMIN["username"] not in _admins(master_client)

        images = public_client.get("/api/images").get_json()
        assert [i["uploader_username"] for i in images] == ["master"]
        assert _admins(master_client)["master"]["image_count"] == 1

    def test_cannot_delete_self(self, master_client):
        me = _me(master_client)
        resp = master_client.delete(f"/api/master/admins/{me['id']}")
        assert resp.status_code == 400

    def test_delete_unknown(self, master_client):
        assert master_client.delete("/api/master/admins/missing").status_code == 404


class TestAdminServiceGuards:
    def test_last_master_cannot_be_demoted_or_deleted(self, admin_client, app_ctx):
        alice = admin_service.get_admin_by_username(ADMIN["username"])
        master = admin_service.get_admin_by_username("master")
        with pytest.raises(ValidationError):
            admin_service.update_admin(alice, master, role="admin")
        with pytest.raises(ValidationError):
            admin_service.delete_admin(alice, master)
        assert admin_service.get_master_count() == 1

    def test_seed_skips_when_another_process_already_seeded(self, app_ctx, monkeypatch):
        monkeypatch.setattr(admin_service, "get_admin_count", lambda: 0)
        assert admin_service.seed_master_admin() is None
        assert admin_service.get_master_count() == 1
