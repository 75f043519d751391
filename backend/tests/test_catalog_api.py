"""
Products, sales outlets, and stock endpoints.
"""

import logging

import pytest

from lunishop.services import catalog_service
from lunishop.services.inventory_service import get_stock_amount


class TestProducts:

    def test_list_envelope(self, client, seed):
        resp = client.get("/api/v1/products")
        assert resp.status_code == 200
        assert resp.json["success"] is True
        assert resp.json["count"] == 2
        assert [p["name"] for p in resp.json["data"]] == ["Boots", "Scarf"]

    def test_get_one(self, client, seed):
        resp = client.get(f"/api/v1/products/{seed['boots_id']}")
        assert resp.status_code == 200
        assert resp.json["data"]["price"] == 12000

    def test_get_missing(self, client, seed):
        resp = client.get("/api/v1/products/999")
        assert resp.status_code == 404
        assert resp.mimetype == "text/plain"

    def test_create_with_image(self, client, seed, admin_headers):
        resp = client.post(
            "/api/v1/products",
            json={"name": "Hat", "price": 1500, "description": "Wool", "image_path": "img/hat.png"},
            headers=admin_headers,
        )
        assert resp.status_code == 201

        hat = next(p for p in client.get("/api/v1/products").json["data"] if p["name"] == "Hat")
        assert hat["image"]["image_path"] == "img/hat.png"

    def test_duplicate_name_conflicts(self, client, seed, admin_headers):
        resp = client.post("/api/v1/products", json={"name": "Boots", "price": 1}, headers=admin_headers)
        assert resp.status_code == 409
        assert resp.get_data(as_text=True) == "product with this name already exists"

    @pytest.mark.parametrize("price", [-1, "12.5", 1.5, True, None, 10**12])
    def test_bad_price(self, client, seed, admin_headers, price):
        resp = client.post("/api/v1/products", json={"name": "Hat", "price": price}, headers=admin_headers)
        assert resp.status_code == 400

    def test_update_partial(self, client, seed, admin_headers):
        resp = client.put(
            f"/api/v1/products/{seed['scarf_id']}",
            json={"price": 3000, "image_path": "img/scarf.png"},
            headers=admin_headers,
        )
        assert resp.status_code == 200

        scarf = client.get(f"/api/v1/products/{seed['scarf_id']}").json["data"]
        assert scarf["name"] == "Scarf"
        assert scarf["price"] == 3000
        assert scarf["image"]["image_path"] == "img/scarf.png"

    def test_update_nothing(self, client, seed, admin_headers):
        resp = client.put(f"/api/v1/products/{seed['scarf_id']}", json={}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_removes_stock(self, client, seed, admin_headers):
        resp = client.delete(f"/api/v1/products/{seed['scarf_id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert get_stock_amount(seed["main_outlet_id"], seed["scarf_id"], 0) is None

    def test_delete_ordered_product_conflicts(self, client, seed, admin_headers, user_headers):
        client.post("/api/v1/orders", json={
            "sales_outlet_id": seed["main_outlet_id"],
            "items": [{"product_id": seed["scarf_id"], "size": 0, "amount": 1, "price": 2500}],
        }, headers=user_headers)

        resp = client.delete(f"/api/v1/products/{seed['scarf_id']}", headers=admin_headers)
        assert resp.status_code == 409


class TestOutlets:

    def test_list(self, client, seed):
        resp = client.get("/api/v1/outlets")
        assert [o["address"] for o in resp.json["data"]] == ["Main St 1", "Side St 2"]

    def test_create_and_duplicate(self, client, seed, admin_headers):
        assert client.post("/api/v1/outlets", json={"address": "Elm 3"}, headers=admin_headers).status_code == 201
        resp = client.post("/api/v1/outlets", json={"address": "Elm 3"}, headers=admin_headers)
        assert resp.status_code == 409
        assert resp.get_data(as_text=True) == "sales outlet already exists"

    def test_blank_address(self, client, seed, admin_headers):
        resp = client.post("/api/v1/outlets", json={"address": "  "}, headers=admin_headers)
        assert resp.status_code == 400

    def test_rename(self, client, seed, admin_headers):
        resp = client.put(
            f"/api/v1/outlets/{seed['side_outlet_id']}", json={"address": "Side St 20"}, headers=admin_headers
        )
        assert resp.status_code == 200
        assert client.get(f"/api/v1/outlets/{seed['side_outlet_id']}").json["data"]["address"] == "Side St 20"

    def test_rename_onto_existing(self, client, seed, admin_headers):
        resp = client.put(
            f"/api/v1/outlets/{seed['side_outlet_id']}", json={"address": "Main St 1"}, headers=admin_headers
        )
        assert resp.status_code == 409

    def test_delete(self, client, seed, admin_headers):
        resp = client.delete(f"/api/v1/outlets/{seed['main_outlet_id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) is None
        assert client.get(f"/api/v1/outlets/{seed['main_outlet_id']}").status_code == 404

    def test_stock_listing(self, client, seed):
        resp = client.get(f"/api/v1/outlets/{seed['main_outlet_id']}/stock")
        rows = [(row["product"]["name"], row["size"], row["amount"]) for row in resp.json["data"]]
        assert rows == [("Boots", 42, 5), ("Boots", 43, 1), ("Scarf", 0, 10)]

    def test_stock_listing_unknown_outlet(self, client, seed):
        assert client.get("/api/v1/outlets/999/stock").status_code == 404

    def test_product_stock_absent_is_empty_list(self, client, seed):
        resp = client.get(f"/api/v1/outlets/{seed['side_outlet_id']}/stock/{seed['boots_id']}")
        assert resp.status_code == 200
        assert resp.json == {"success": True, "data": [], "count": 0}


class TestStock:

    def test_add(self, client, seed, seller_headers):
        resp = client.post("/api/v1/stock", json={
            "sales_outlet_id": seed["side_outlet_id"],
            "product_id": seed["boots_id"],
            "size": 42,
            "amount": 7,
        }, headers=seller_headers)
        assert resp.status_code == 201
        assert get_stock_amount(seed["side_outlet_id"], seed["boots_id"], 42) == 7

    def test_add_duplicate(self, client, seed, seller_headers):
        resp = client.post("/api/v1/stock", json={
            "sales_outlet_id": seed["main_outlet_id"],
            "product_id": seed["boots_id"],
            "size": 42,
            "amount": 7,
        }, headers=seller_headers)
        assert resp.status_code == 409
        assert resp.get_data(as_text=True) == "product stock already exists"

    def test_update_amount(self, client, seed, seller_headers):
        resp = client.put(
            f"/api/v1/stock/{seed['main_outlet_id']}/{seed['boots_id']}/42",
            json={"amount": 9},
            headers=seller_headers,
        )
        assert resp.status_code == 200
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 9

    def test_update_negative(self, client, seed, seller_headers):
        resp = client.put(
            f"/api/v1/stock/{seed['main_outlet_id']}/{seed['boots_id']}/42",
            json={"amount": -1},
            headers=seller_headers,
        )
        assert resp.status_code == 400
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 5

    def test_delete_one_size(self, client, seed, admin_headers):
        resp = client.delete(
            f"/api/v1/stock/{seed['main_outlet_id']}/{seed['boots_id']}?size=43", headers=admin_headers
        )
        assert resp.status_code == 200
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 43) is None
        assert get_stock_amount(seed["main_outlet_id"], seed["boots_id"], 42) == 5

    def test_delete_bad_size(self, client, seed, admin_headers):
        resp = client.delete(
            f"/api/v1/stock/{seed['main_outlet_id']}/{seed['boots_id']}?size=big", headers=admin_headers
        )
        assert resp.status_code == 400


class TestUnexpectedErrors:

    def test_service_crash_is_500_and_logged(self, client, seed, monkeypatch, caplog):
        def boom():
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(catalog_service, "list_products", boom)

        with caplog.at_level(logging.ERROR):
            resp = client.get("/api/v1/products")

        assert resp.status_code == 500
        assert resp.get_data(as_text=True) == "Internal server error"
        assert "Unhandled error on GET /api/v1/products" in caplog.text
        assert "disk on fire" not in resp.get_data(as_text=True)

    def test_unknown_route_keeps_404(self, client):
        assert client.get("/api/v1/nowhere").status_code == 404
