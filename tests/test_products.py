"""Tests for the product endpoints."""
from __future__ import annotations

import json
from decimal import Decimal

from conftest import make_product

NEW_PRODUCT = {
    "name": "Edge Control Gel",
    "description": "Strong hold gel for sleek edges",
    "price": 8.99,
    "stock_quantity": 40,
    "category": "Care",
    "sku": "CARE-GEL-002",
    "weight": 120,
    "dimensions": {"length": 6, "width": 6, "height": 4},
}


def test_create_product_round_trip(client, admin_headers) -> None:
    created = client.post("/products", json=NEW_PRODUCT, headers=admin_headers)
    assert created.status_code == 201
    data = created.json["data"]
    assert data["price"] == 8.99
    assert data["dimensions"] == {"length": 6.0, "width": 6.0, "height": 4.0}
    assert data["is_active"] is True

    fetched = client.get(f"/products/{data['id']}")
    assert fetched.json["data"] == data


def test_create_product_requires_admin(client, customer_headers) -> None:
    response = client.post("/products", json=NEW_PRODUCT, headers=customer_headers)

    assert response.status_code == 403


def test_duplicate_sku_conflicts(app, client, admin_headers) -> None:
    make_product(app, sku="CARE-GEL-002")

    response = client.post("/products", json=NEW_PRODUCT, headers=admin_headers)

    assert response.status_code == 409
    assert response.json["error"] == "SKU_EXISTS"


def test_product_price_precision_is_enforced(client, admin_headers) -> None:
    response = client.post(
        "/products", json={**NEW_PRODUCT, "price": 8.999}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json["errors"][0]["code"] == "invalid_precision"


def test_non_finite_prices_are_validation_errors(client, admin_headers) -> None:
    quoted = client.post("/products", json={**NEW_PRODUCT, "price": "NaN"}, headers=admin_headers)
    assert quoted.status_code == 400
    assert quoted.json["errors"][0] == {
        "field": "price",
        "message": "Price must be a finite number",
        "code": "invalid_number",
    }

    # the JSON parser accepts a bare NaN literal too
    body = json.dumps({**NEW_PRODUCT, "price": float("nan")})
    bare = client.post("/products", data=body, content_type="application/json", headers=admin_headers)
    assert bare.status_code == 400
    assert bare.json["errors"][0]["code"] == "invalid_number"


def test_listing_filters_are_combined(app, client) -> None:
    make_product(app, name="Kanekalon Braiding Hair", price=Decimal("12.00"), stock_quantity=5)
    make_product(app, name="Premium Extension Pack", price=Decimal("45.00"), stock_quantity=0)
    make_product(app, name="Wide Tooth Comb", category="Tools", price=Decimal("4.00"))
    make_product(app, name="Retired Extension Bundle", is_active=False)

    extensions = client.get("/products?category=Extensions")
    assert {item["name"] for item in extensions.json["data"]} == {
        "Kanekalon Braiding Hair", "Premium Extension Pack"
    }

    in_stock = client.get("/products?category=Extensions&in_stock=true")
    assert [item["name"] for item in in_stock.json["data"]] == ["Kanekalon Braiding Hair"]

    priced = client.get("/products?min_price=5&max_price=20&sort_by=price")
    assert [item["name"] for item in priced.json["data"]] == ["Kanekalon Braiding Hair"]

    searched = client.get("/products?search=comb")
    assert [item["name"] for item in searched.json["data"]] == ["Wide Tooth Comb"]

    retired = client.get("/products?active=false")
    assert [item["name"] for item in retired.json["data"]] == ["Retired Extension Bundle"]


def test_listing_sorts_by_price(app, client) -> None:
    make_product(app, name="Braiding Hair Large", price=Decimal("30.00"))
    make_product(app, name="Braiding Hair Small", price=Decimal("10.00"))

    response = client.get("/products?sort_by=price&sort_order=desc")

    assert [item["price"] for item in response.json["data"]] == [30.0, 10.0]


def test_update_product(app, client, admin_headers) -> None:
    product_id = make_product(app)

    response = client.put(
        f"/products/{product_id}", json={"price": 19.5, "stock_quantity": 3}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json["data"]["price"] == 19.5
    assert response.json["data"]["stock_quantity"] == 3
    assert response.json["data"]["name"] == "Kanekalon Braiding Hair"


def test_delete_product_is_soft(app, client, admin_headers) -> None:
    product_id = make_product(app)

    assert client.delete(f"/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/products/{product_id}").status_code == 404

    # still editable by an admin, which is how it comes back
    restored = client.put(f"/products/{product_id}", json={"is_active": True}, headers=admin_headers)
    assert restored.status_code == 200
    assert client.get(f"/products/{product_id}").status_code == 200
