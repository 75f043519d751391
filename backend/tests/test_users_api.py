"""
User administration endpoints and CLI commands.
"""

from lunishop.extensions import db
from lunishop.models import SessionToken, User
from lunishop.services import user_service


class TestUserAdministration:

    def test_admin_creates_seller(self, client, seed, admin_headers):
        resp = client.post("/api/v1/users", json={
            "email": "clerk@lunishop.test",
            "password": "clerk-pass",
            "name": "Clerk",
            "role": "seller",
        }, headers=admin_headers)
        assert resp.status_code == 201
        assert user_service.get_user_by_email("clerk@lunishop.test").role == "seller"

    def test_unknown_role_rejected(self, client, seed, admin_headers):
        resp = client.post("/api/v1/users", json={
            "email": "clerk@lunishop.test",
            "password": "clerk-pass",
            "name": "Clerk",
            "role": "overlord",
        }, headers=admin_headers)
        assert resp.status_code == 400

    def test_role_change(self, client, seed, admin_headers, accounts):
        user_id = accounts["user"]["id"]
        resp = client.patch(f"/api/v1/users/{user_id}/role", json={"role": "seller"}, headers=admin_headers)
        assert resp.status_code == 200
        assert user_service.get_user(user_id).role == "seller"

    def test_role_change_takes_effect_on_next_request(self, client, seed, admin_headers, user_headers, accounts):
        assert client.get("/api/v1/orders", headers=user_headers).status_code == 403
        client.patch(f"/api/v1/users/{accounts['user']['id']}/role", json={"role": "seller"}, headers=admin_headers)
        assert client.get("/api/v1/orders", headers=user_headers).status_code == 200

    def test_self_update_ignores_role(self, client, seed, user_headers, accounts):
        user_id = accounts["user"]["id"]
        resp = client.put(
            f"/api/v1/users/{user_id}",
            json={"name": "Renamed", "phone": "+1 555 0100", "role": "admin"},
            headers=user_headers,
        )
        assert resp.status_code == 200

        profile = client.get(f"/api/v1/users/{user_id}", headers=user_headers).json["data"]
        assert profile["name"] == "Renamed"
        assert profile["phone"] == "+1 555 0100"
        assert profile["role"] == "user"

    def test_update_onto_taken_email(self, client, seed, user_headers, accounts):
        resp = client.put(
            f"/api/v1/users/{accounts['user']['id']}",
            json={"email": "other@lunishop.test"},
            headers=user_headers,
        )
        assert resp.status_code == 409

    def test_admin_password_reset_revokes_sessions(self, client, seed, admin_headers, other_headers, accounts):
        resp = client.put(
            f"/api/v1/users/{accounts['other']['id']}",
            json={"password": "fresh-pass"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert client.get("/api/v1/auth/me", headers=other_headers).status_code == 401

        login = client.post("/api/v1/auth/login", json={"email": "other@lunishop.test", "password": "fresh-pass"})
        assert login.status_code == 200

    def test_self_update_cannot_set_password(self, client, seed, user_headers, accounts):
        resp = client.put(
            f"/api/v1/users/{accounts['user']['id']}",
            json={"name": "Renamed", "password": "hijacked1"},
            headers=user_headers,
        )
        assert resp.status_code == 400
        assert "/auth/change-password" in resp.get_data(as_text=True)

        hijack = client.post("/api/v1/auth/login", json={"email": "user@lunishop.test", "password": "hijacked1"})
        assert hijack.status_code == 401
        login = client.post("/api/v1/auth/login", json={"email": "user@lunishop.test", "password": "secret123"})
        assert login.status_code == 200
        assert user_service.get_user(accounts["user"]["id"]).name == "User"

    def test_admin_cannot_reset_own_password_here(self, client, seed, admin_headers, accounts):
        resp = client.put(
            f"/api/v1/users/{accounts['admin']['id']}",
            json={"password": "fresh-pass"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert client.get("/api/v1/auth/me", headers=admin_headers).status_code == 200

    def test_user_cannot_update_someone_else(self, client, seed, user_headers, accounts):
        resp = client.put(f"/api/v1/users/{accounts['other']['id']}", json={"name": "Hacked"}, headers=user_headers)
        assert resp.status_code == 403

    def test_delete_removes_sessions(self, client, seed, admin_headers, accounts):
        other_id = accounts["other"]["id"]
        resp = client.delete(f"/api/v1/users/{other_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert db.session.get(User, other_id) is None
        assert db.session.query(SessionToken).filter_by(user_id=other_id).count() == 0

    def test_delete_user_with_orders_conflicts(self, client, seed, admin_headers, user_headers, accounts):
        client.post("/api/v1/orders", json={
            "sales_outlet_id": seed["main_outlet_id"],
            "items": [{"product_id": seed["scarf_id"], "size": 0, "amount": 1, "price": 2500}],
        }, headers=user_headers)

        resp = client.delete(f"/api/v1/users/{accounts['user']['id']}", headers=admin_headers)
        assert resp.status_code == 409
        assert resp.get_data(as_text=True) == "user has orders"

    def test_delete_missing(self, client, seed, admin_headers):
        assert client.delete("/api/v1/users/999", headers=admin_headers).status_code == 404


class TestCommands:

    def test_create_and_list(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create",
            "--email", "boss@lunishop.test",
            "--password", "boss-pass",
            "--name", "Boss",
            "--role", "admin",
        ])
        assert result.exit_code == 0, result.output
        assert "boss@lunishop.test" in result.output

        result = runner.invoke(args=["users", "list"])
        assert "boss@lunishop.test" in result.output
        assert "admin" in result.output

    def test_set_role(self, app, accounts):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "set-role", "user@lunishop.test", "accountant"])
        assert result.exit_code == 0, result.output
        assert user_service.get_user_by_email("user@lunishop.test").role == "accountant"

    def test_set_role_unknown_user(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "set-role", "ghost@lunishop.test", "seller"])
        assert result.exit_code != 0
        assert "user not found" in result.output

    def test_cleanup_sessions(self, app, accounts):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["maintenance", "cleanup-sessions"])
        assert result.exit_code == 0
        assert "Deleted 0 session tokens" in result.output
