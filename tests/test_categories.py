"""Tests for the category endpoints."""
from __future__ import annotations

from conftest import make_category

MISSING_ID = "6f1c2d3e-4b5a-4c6d-8e9f-0a1b2c3d4e5f"


def test_create_category_requires_admin(client, customer_headers) -> None:
    payload = {"name": "Extensions", "description": "Braiding hair"}

    assert client.post("/categories", json=payload).status_code == 401
    assert client.post("/categories", json=payload, headers=customer_headers).status_code == 403


def test_create_and_read_round_trip(client, admin_headers) -> None:
    created = client.post(
        "/categories",
        json={"name": "Hair Care", "description": "Oils and creams", "display_order": 2},
        headers=admin_headers,
    )
    assert created.status_code == 201
    assert created.json["message"] == "Category created successfully"

    fetched = client.get(f"/categories/{created.json['data']['id']}")
    assert fetched.status_code == 200
    assert fetched.json["data"] == created.json["data"]


def test_category_names_are_unique_ignoring_case(app, client, admin_headers) -> None:
    make_category(app, name="Extensions")

    response = client.post("/categories", json={"name": "EXTENSIONS"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json["error"] == "CATEGORY_EXISTS"


def test_category_name_must_be_letters(client, admin_headers) -> None:
    response = client.post("/categories", json={"name": "Tools 2"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json["errors"][0]["field"] == "name"


def test_updating_display_order_keeps_other_fields(app, client, admin_headers) -> None:
    category_id = make_category(app, name="Accessories", description="Cuffs and beads", display_order=3)

    response = client.put(
        f"/categories/{category_id}", json={"display_order": 7}, headers=admin_headers
    )
    data = response.json["data"]

    assert response.status_code == 200
    assert data["display_order"] == 7
    assert data["name"] == "Accessories"
    assert data["description"] == "Cuffs and beads"
    assert data["updated_at"] >= data["created_at"]


def test_rename_to_existing_name_conflicts(app, client, admin_headers) -> None:
    make_category(app, name="Tools")
    category_id = make_category(app, name="Care")

    response = client.put(f"/categories/{category_id}", json={"name": "tools"}, headers=admin_headers)

    assert response.status_code == 409


def test_public_listing_hides_inactive_and_sorts_by_display_order(app, client, admin_headers) -> None:
    make_category(app, name="Tools", display_order=3)
    make_category(app, name="Care", display_order=1)
    make_category(app, name="Hidden", display_order=2, is_active=False)

    public = client.get("/categories")
    assert [item["name"] for item in public.json["data"]] == ["Care", "Tools"]

    by_name = client.get("/categories?order_by=name&sort=desc")
    assert [item["name"] for item in by_name.json["data"]] == ["Tools", "Care"]

    assert client.get("/categories/all").status_code == 401
    everything = client.get("/categories/all", headers=admin_headers)
    assert [item["name"] for item in everything.json["data"]] == ["Care", "Hidden", "Tools"]
    inactive = client.get("/categories/all?is_active=false", headers=admin_headers)
    assert [item["name"] for item in inactive.json["data"]] == ["Hidden"]


def test_delete_category_is_soft(app, client, admin_headers) -> None:
    category_id = make_category(app)

    assert client.delete(f"/categories/{category_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/categories/{category_id}").status_code == 404
    assert client.delete(f"/categories/{category_id}", headers=admin_headers).status_code == 404

    listing = client.get("/categories/all", headers=admin_headers)
    assert listing.json["data"][0]["is_active"] is False


def test_missing_category_returns_404(client, admin_headers) -> None:
    assert client.get(f"/categories/{MISSING_ID}").status_code == 404
    assert client.put(
        f"/categories/{MISSING_ID}", json={"display_order": 1}, headers=admin_headers
    ).status_code == 404
