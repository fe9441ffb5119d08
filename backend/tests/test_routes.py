# Overview: Pytest coverage for HTTP status mapping and request parsing.

"""
Route tests.

Verifies:
- Unauthenticated requests return 401 (missing, bad, expired tokens, unsynced users)
- Authorization failures return 403
- Missing resources return 404
- Uniqueness and lifecycle conflicts return 409
- Payload validation returns 400
"""

from datetime import timedelta

import pytest
from goodies.choices import Condition, ProductType, Role, Status

from conftest import auth_headers, headers_for, identity_token, make_product


def product_payload(**overrides) -> dict:
    payload = {
        "name": "Misato Katsuragi",
        "character_names": ["Misato Katsuragi"],
        "license_names": ["Evangelion"],
        "product_types": [ProductType.PREPAINTED],
        "condition": Condition.USED,
        "status": Status.IN_STOCK,
        "storage_location": "Cabinet",
        "purchase_location": "Flea market",
        "purchase_date": "2023-11-20T14:00:00Z",
        "purchase_price_cents": 4500,
    }
    payload.update(overrides)
    return payload


class TestAuthentication:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/products"),
            ("POST", "/api/products"),
            ("GET", "/api/products/paginated"),
            ("GET", "/api/events"),
            ("POST", "/api/events"),
            ("GET", "/api/users/me"),
            ("GET", "/api/users/lite"),
            ("DELETE", "/api/event-products/1"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_bad_token(self, client, db_session):
        resp = client.get("/api/users/me", headers=auth_headers("not-a-jwt"))
        assert resp.status_code == 401

    def test_expired_token(self, client, db_session, member):
        token = identity_token(member.external_id, expires_in=timedelta(minutes=-5))
        resp = client.get("/api/users/me", headers=auth_headers(token))
        assert resp.status_code == 401

    def test_unsynced_user(self, client, db_session):
        resp = client.get("/api/users/me", headers=auth_headers(identity_token("user_unknown")))
        assert resp.status_code == 401
        assert resp.json["error"] == "User not found"

    def test_current_user(self, client, db_session, member):
        resp = client.get("/api/users/me", headers=headers_for(member))
        assert resp.status_code == 200
        assert resp.json["user"]["email"] == member.email

    def test_missing_signing_key(self, app, client, db_session, member):
        headers = headers_for(member)
        saved = app.config["IDENTITY_JWT_KEY"]
        app.config["IDENTITY_JWT_KEY"] = None
        try:
            resp = client.get("/api/users/me", headers=headers)
        finally:
            app.config["IDENTITY_JWT_KEY"] = saved
        assert resp.status_code == 500


class TestProductRoutes:

    def test_create_and_fetch(self, client, db_session, member):
        resp = client.post("/api/products", json=product_payload(), headers=headers_for(member))
        assert resp.status_code == 201

        product_id = resp.json["id"]
        resp = client.get(f"/api/products/{product_id}", headers=headers_for(member))
        assert resp.status_code == 200
        assert resp.json["product"]["owner_user_id"] == member.id
        assert resp.json["product"]["purchase_date"] == "2023-11-20T14:00:00Z"

    def test_create_missing_fields(self, client, db_session, member):
        resp = client.post("/api/products", json={"name": "Nameless"}, headers=headers_for(member))
        assert resp.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"purchase_price_cents": -1},
            {"purchase_price_cents": 1_000_000_000},
            {"purchase_price_cents": "12.50"},
            {"quantity": -3},
            {"condition": "Like new"},
            {"product_types": ["Spaceship"]},
            {"character_names": []},
            {"purchase_date": "yesterday"},
            {"owner_user_id": 1},
        ],
    )
    def test_create_rejects_invalid(self, client, db_session, member, overrides):
        resp = client.post("/api/products", json=product_payload(**overrides), headers=headers_for(member))
        assert resp.status_code == 400

    def test_create_for_other_user_forbidden(self, client, db_session, member, other_member):
        resp = client.post(
            "/api/products",
            json=product_payload(target_user_id=other_member.id),
            headers=headers_for(member),
        )
        assert resp.status_code == 403

    def test_admin_creates_for_other_user(self, client, db_session, admin, member):
        resp = client.post(
            "/api/products",
            json=product_payload(target_user_id=member.id),
            headers=headers_for(admin),
        )
        assert resp.status_code == 201

        resp = client.get(f"/api/products/{resp.json['id']}", headers=headers_for(admin))
        assert resp.json["product"]["owner_user_id"] == member.id

    def test_update_forbidden_for_stranger(self, client, db_session, product, other_member):
        resp = client.patch(
            f"/api/products/{product.id}", json={"quantity": 9}, headers=headers_for(other_member)
        )
        assert resp.status_code == 403

    def test_update_by_owner(self, client, db_session, product, member):
        resp = client.patch(f"/api/products/{product.id}", json={"quantity": 9}, headers=headers_for(member))
        assert resp.status_code == 200

        resp = client.get(f"/api/products/{product.id}", headers=headers_for(member))
        assert resp.json["product"]["quantity"] == 9

    def test_missing_product(self, client, db_session, member):
        assert client.get("/api/products/999", headers=headers_for(member)).status_code == 404
        assert client.delete("/api/products/999", headers=headers_for(member)).status_code == 404

    def test_delete_by_owner(self, client, db_session, product, member):
        resp = client.delete(f"/api/products/{product.id}", headers=headers_for(member))
        assert resp.status_code == 200
        assert client.get(f"/api/products/{product.id}", headers=headers_for(member)).status_code == 404

    def test_by_status_rejects_unknown(self, client, db_session, member):
        resp = client.get("/api/products/status/Lost", headers=headers_for(member))
        assert resp.status_code == 400

    def test_paginated(self, client, db_session, member):
        for i in range(3):
            make_product(db_session, member, name=f"Figure {i}")

        resp = client.get("/api/products/paginated?page_size=2", headers=headers_for(member))
        assert resp.status_code == 200
        assert len(resp.json["page"]) == 2
        assert resp.json["is_done"] is False

        cursor = resp.json["next_cursor"]
        resp = client.get(
            "/api/products/paginated", query_string={"page_size": 2, "cursor": cursor},
            headers=headers_for(member),
        )
        assert len(resp.json["page"]) == 1
        assert resp.json["is_done"] is True

    def test_paginated_bad_cursor(self, client, db_session, member):
        resp = client.get("/api/products/paginated?cursor=garbage", headers=headers_for(member))
        assert resp.status_code == 400

    def test_availability_on_sold_listing_conflicts(self, client, db_session, member, product, event_id):
        resp = client.post(
            f"/api/events/{event_id}/products",
            json={"product_id": product.id, "sale_price_cents": 1000},
            headers=headers_for(member),
        )
        listing_id = resp.json["listing"]["id"]
        client.patch(
            f"/api/event-products/{listing_id}", json={"status": Status.SOLD}, headers=headers_for(member)
        )

        resp = client.post(
            f"/api/products/{product.id}/availability",
            json={"event_id": event_id, "available": False},
            headers=headers_for(member),
        )
        assert resp.status_code == 409

    def test_availability_validates_body(self, client, db_session, member, product, event_id):
        resp = client.post(
            f"/api/products/{product.id}/availability",
            json={"event_id": event_id, "available": "yes"},
            headers=headers_for(member),
        )
        assert resp.status_code == 400


class TestEventRoutes:

    def test_create_event(self, client, db_session, member):
        resp = client.post(
            "/api/events",
            json={
                "name": "Winter Market",
                "start_time": "2030-12-01T09:00:00Z",
                "end_time": "2030-12-01T17:00:00Z",
            },
            headers=headers_for(member),
        )
        assert resp.status_code == 201

        resp = client.get(f"/api/events/{resp.json['id']}", headers=headers_for(member))
        event = resp.json["event"]
        assert event["admin_id"] == member.id
        assert event["location"] == "A déterminer"
        assert event["participants"][0]["role"] == Role.BOARD_OF_DIRECTORS

    def test_create_event_accepts_empty_description(self, client, db_session, member):
        resp = client.post(
            "/api/events",
            json={
                "name": "Quiet Market",
                "description": "",
                "start_time": "2030-12-01T09:00:00Z",
                "end_time": "2030-12-01T17:00:00Z",
            },
            headers=headers_for(member),
        )
        assert resp.status_code == 201

        resp = client.get(f"/api/events/{resp.json['id']}", headers=headers_for(member))
        assert resp.json["event"]["description"] == ""

    def test_create_event_rejects_blank_name(self, client, db_session, member):
        resp = client.post(
            "/api/events",
            json={
                "name": "  ",
                "start_time": "2030-12-01T09:00:00Z",
                "end_time": "2030-12-01T17:00:00Z",
            },
            headers=headers_for(member),
        )
        assert resp.status_code == 400
        assert resp.json["error"] == "name cannot be blank"

    def test_create_event_rejects_inverted_times(self, client, db_session, member):
        resp = client.post(
            "/api/events",
            json={
                "name": "Backwards",
                "start_time": "2030-12-01T17:00:00Z",
                "end_time": "2030-12-01T09:00:00Z",
            },
            headers=headers_for(member),
        )
        assert resp.status_code == 400

    def test_missing_event(self, client, db_session, member):
        assert client.get("/api/events/999", headers=headers_for(member)).status_code == 404
        assert client.post("/api/events/999/participate", headers=headers_for(member)).status_code == 404

    def test_participate_twice_conflicts(self, client, db_session, other_member, event_id):
        first = client.post(f"/api/events/{event_id}/participate", headers=headers_for(other_member))
        second = client.post(f"/api/events/{event_id}/participate", headers=headers_for(other_member))

        assert first.status_code == 201
        assert second.status_code == 409

    def test_add_participant(self, client, db_session, member, other_member, event_id):
        resp = client.post(
            f"/api/events/{event_id}/participants",
            json={"email": other_member.email, "role": Role.MEMBER},
            headers=headers_for(member),
        )
        assert resp.status_code == 201

        resp = client.post(
            f"/api/events/{event_id}/participants",
            json={"email": other_member.email, "role": Role.MEMBER},
            headers=headers_for(member),
        )
        assert resp.status_code == 409

    def test_add_participant_forbidden(self, client, db_session, member, other_member, event_id):
        resp = client.post(
            f"/api/events/{event_id}/participants",
            json={"email": member.email, "role": Role.GUEST},
            headers=headers_for(other_member),
        )
        assert resp.status_code == 403

    def test_remove_last_admin_conflicts(self, client, db_session, member, event_id):
        resp = client.delete(
            f"/api/events/{event_id}/participants/{member.id}", headers=headers_for(member)
        )
        assert resp.status_code == 409

    def test_listing_requires_organizer(self, client, db_session, other_member, product, event_id):
        resp = client.post(
            f"/api/events/{event_id}/products",
            json={"product_id": product.id, "sale_price_cents": 1000},
            headers=headers_for(other_member),
        )
        assert resp.status_code == 403

    def test_listing_rejects_bad_price(self, client, db_session, member, product, event_id):
        resp = client.post(
            f"/api/events/{event_id}/products",
            json={"product_id": product.id, "sale_price_cents": "ten"},
            headers=headers_for(member),
        )
        assert resp.status_code == 400

    def test_remove_listing(self, client, db_session, member, product, event_id):
        resp = client.post(
            f"/api/events/{event_id}/products",
            json={"product_id": product.id},
            headers=headers_for(member),
        )
        listing_id = resp.json["listing"]["id"]

        resp = client.delete(f"/api/event-products/{listing_id}", headers=headers_for(member))
        assert resp.status_code == 200

        resp = client.delete(f"/api/event-products/{listing_id}", headers=headers_for(member))
        assert resp.status_code == 404

    def test_analytics(self, client, db_session, member, other_member, event_id):
        resp = client.get(f"/api/events/{event_id}/analytics", headers=headers_for(member))
        assert resp.status_code == 200
        assert resp.json["participant_count"] == 1

        resp = client.get(f"/api/events/{event_id}/analytics", headers=headers_for(other_member))
        assert resp.status_code == 403


class TestUserRoutes:

    def test_lite_listing(self, client, db_session, member, other_member):
        other_member.nickname = None
        db_session.commit()

        resp = client.get("/api/users/lite", headers=headers_for(member))

        assert resp.status_code == 200
        assert resp.json["page"] == [
            {"id": member.id, "label": member.nickname},
            {"id": other_member.id, "label": other_member.email},
        ]
        assert resp.json["is_done"] is True


class TestSystemRoutes:

    def test_health(self, client, db_session):
        resp = client.get("/api/system/health")
        assert resp.status_code == 200
        assert resp.json["checks"]["database"]["status"] == "healthy"
