"""Tests for the order endpoints."""
from __future__ import annotations

from decimal import Decimal

import pytest
from conftest import bearer, make_product, make_user, token_for

from braids.extensions import db
from braids.models import Order, Product

ADDRESS = "221B Baker Street, London"


@pytest.fixture
def products(app):
    return {
        "hair": make_product(app, name="Kanekalon Braiding Hair", price=Decimal("25.99"), stock_quantity=10),
        "oil": make_product(app, name="Scalp Nourishing Oil", price=Decimal("15.50"), stock_quantity=4, category="Care"),
    }


def order_payload(customer_id, *items, **extra):
    return {
        "customer_id": customer_id,
        "items": [{"product_id": product_id, "quantity": quantity} for product_id, quantity in items],
        "shipping_address": ADDRESS,
        "payment_method": "card",
        **extra,
    }


def place(client, headers, payload):
    response = client.post("/orders", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.json["data"]


def stock(app, product_id):
    with app.app_context():
        return db.session.get(Product, product_id).stock_quantity


def test_order_totals_with_free_shipping(app, client, customer_id, customer_headers, products) -> None:
    data = place(
        client,
        customer_headers,
        order_payload(customer_id, (products["hair"], 2), (products["oil"], 1)),
    )

    assert data["subtotal"] == 67.48
    assert data["tax_amount"] == 6.75
    assert data["shipping_amount"] == 0.0
    assert data["total_amount"] == 74.23
    assert data["status"] == "PENDING"
    assert data["payment_status"] == "PENDING"
    assert data["order_number"].startswith("ORD-")
    assert sorted((item["quantity"], item["unit_price"], item["total_price"]) for item in data["items"]) == [
        (1, 15.5, 15.5),
        (2, 25.99, 51.98),
    ]
    assert stock(app, products["hair"]) == 8


def test_order_totals_with_flat_shipping(client, customer_id, customer_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["oil"], 1)))

    assert data["subtotal"] == 15.5
    assert data["tax_amount"] == 1.55
    assert data["shipping_amount"] == 10.0
    assert data["total_amount"] == 27.05


def test_order_round_trip(client, customer_id, customer_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 1)))

    fetched = client.get(f"/orders/{data['id']}", headers=customer_headers)
    assert fetched.json["data"] == data

    items = client.get(f"/orders/{data['id']}/items", headers=customer_headers)
    assert items.json["data"] == data["items"]


def test_repeated_product_is_rejected_before_anything_is_written(
    app, client, customer_id, customer_headers, products
) -> None:
    payload = order_payload(customer_id, (products["hair"], 1), (products["hair"], 2))

    response = client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert response.json["errors"][0]["code"] == "duplicate_products"
    with app.app_context():
        assert db.session.query(Order).count() == 0
    assert stock(app, products["hair"]) == 10


def test_insufficient_stock_conflicts(app, client, customer_id, customer_headers, products) -> None:
    response = client.post(
        "/orders", json=order_payload(customer_id, (products["oil"], 5)), headers=customer_headers
    )

    assert response.status_code == 409
    assert response.json["error"] == "INSUFFICIENT_STOCK"
    assert stock(app, products["oil"]) == 4


def test_client_price_must_match_catalog(client, customer_id, customer_headers, products) -> None:
    payload = order_payload(customer_id, (products["hair"], 1))
    payload["items"][0]["unit_price"] = 1.0

    response = client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 409
    assert response.json["error"] == "PRICE_MISMATCH"

    payload["items"][0]["unit_price"] = 25.99
    assert client.post("/orders", json=payload, headers=customer_headers).status_code == 201


def test_non_finite_unit_price_is_rejected(client, customer_id, customer_headers, products) -> None:
    payload = order_payload(customer_id, (products["hair"], 1))
    payload["items"][0]["unit_price"] = "nan"

    response = client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert response.json["errors"][0]["code"] == "invalid_number"


def test_unknown_product_returns_404(client, customer_id, customer_headers) -> None:
    payload = order_payload(customer_id, ("6f1c2d3e-4b5a-4c6d-8e9f-0a1b2c3d4e5f", 1))

    response = client.post("/orders", json=payload, headers=customer_headers)

    assert response.status_code == 404


def test_customer_orders_only_for_self(app, client, customer_id, products) -> None:
    other_headers = bearer(token_for(app, make_user(app, email="other@example.com")))

    response = client.post(
        "/orders", json=order_payload(customer_id, (products["hair"], 1)), headers=other_headers
    )

    assert response.status_code == 403


def test_order_visibility(app, client, customer_id, customer_headers, admin_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 1)))
    other_headers = bearer(token_for(app, make_user(app, email="other@example.com")))

    assert client.get(f"/orders/{data['id']}", headers=other_headers).status_code == 403
    assert client.get("/orders", headers=customer_headers).status_code == 403
    assert client.get(f"/orders/customer/{customer_id}", headers=other_headers).status_code == 403

    mine = client.get(f"/orders/customer/{customer_id}", headers=customer_headers)
    assert [order["id"] for order in mine.json["data"]] == [data["id"]]

    everything = client.get("/orders?status=PENDING", headers=admin_headers)
    assert everything.json["pagination"]["total"] == 1

    summaries = client.get("/orders/summaries", headers=admin_headers)
    assert summaries.json["data"] == [{
        "id": data["id"],
        "order_number": data["order_number"],
        "customer_id": customer_id,
        "total_amount": data["total_amount"],
        "status": "PENDING",
        "payment_status": "PENDING",
        "created_at": data["created_at"],
        "items_count": 1,
    }]


def test_admin_filters_by_amount(client, customer_id, customer_headers, admin_headers, products) -> None:
    place(client, customer_headers, order_payload(customer_id, (products["oil"], 1)))
    place(client, customer_headers, order_payload(customer_id, (products["hair"], 3)))

    big = client.get("/orders?min_amount=50", headers=admin_headers)
    assert [order["total_amount"] for order in big.json["data"]] == [85.77]

    cheapest_first = client.get("/orders?order_by=total_amount&sort=asc", headers=admin_headers)
    assert [order["total_amount"] for order in cheapest_first.json["data"]] == [27.05, 85.77]


def test_cancel_restores_stock_and_cannot_repeat(app, client, customer_id, customer_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 3)))
    assert stock(app, products["hair"]) == 7

    cancelled = client.post(
        f"/orders/{data['id']}/cancel", json={"reason": "Ordered by mistake"}, headers=customer_headers
    )
    assert cancelled.status_code == 200
    assert cancelled.json["data"]["status"] == "CANCELLED"
    assert cancelled.json["data"]["cancellation_reason"] == "Ordered by mistake"
    assert stock(app, products["hair"]) == 10

    again = client.post(f"/orders/{data['id']}/cancel", headers=customer_headers)
    assert again.status_code == 409
    assert again.json["error"] == "ORDER_ALREADY_CANCELLED"


def test_delivered_orders_cannot_be_cancelled(client, customer_id, customer_headers, admin_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 1)))
    client.put(f"/orders/{data['id']}", json={"status": "DELIVERED"}, headers=admin_headers)

    response = client.post(f"/orders/{data['id']}/cancel", headers=admin_headers)

    assert response.status_code == 409
    assert response.json["error"] == "ORDER_DELIVERED"


def test_customer_updates_are_limited(client, customer_id, customer_headers, admin_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 1)))
    url = f"/orders/{data['id']}"

    assert client.put(url, json={"status": "SHIPPED"}, headers=customer_headers).status_code == 403
    assert client.put(url, json={"payment_status": "PAID"}, headers=customer_headers).status_code == 403

    moved = client.put(url, json={"shipping_address": "10 Downing Street, London"}, headers=customer_headers)
    assert moved.status_code == 200
    assert moved.json["data"]["shipping_address"] == "10 Downing Street, London"

    confirmed = client.put(url, json={"status": "CONFIRMED", "payment_status": "PAID"}, headers=admin_headers)
    assert confirmed.status_code == 200
    assert confirmed.json["data"]["payment_status"] == "PAID"

    # once confirmed, the customer can no longer touch it
    late = client.put(url, json={"status": "CANCELLED"}, headers=customer_headers)
    assert late.status_code == 409
    assert late.json["error"] == "ORDER_NOT_PENDING"


def test_cancel_via_update_restores_stock(app, client, customer_id, customer_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["oil"], 2)))

    response = client.put(f"/orders/{data['id']}", json={"status": "CANCELLED"}, headers=customer_headers)

    assert response.status_code == 200
    assert stock(app, products["oil"]) == 4


def test_invalid_status_value_lists_choices(client, customer_id, customer_headers, admin_headers, products) -> None:
    data = place(client, customer_headers, order_payload(customer_id, (products["hair"], 1)))

    response = client.put(f"/orders/{data['id']}", json={"status": "LOST"}, headers=admin_headers)

    assert response.status_code == 400
    assert "PENDING, CONFIRMED, PROCESSING, SHIPPED, DELIVERED, CANCELLED" in response.json["errors"][0]["message"]
