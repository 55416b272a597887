"""
Tests for the HTTP API.

The application runs against the seeded in-memory database through
dependency overrides; push delivery goes to the mocked gateway.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from fowlregistry.core.config import settings
from fowlregistry.interfaces.dependencies import get_engine
from fowlregistry.interfaces.ownership.dependencies import get_transfer_notifier
from fowlregistry.main import app
from fowlregistry.shared.security.auth import create_access_token
from fowlregistry.shared.security.rate_limiting import limiter


@pytest.fixture
def client(engine, notifier, monkeypatch):
    monkeypatch.setattr(settings, "analytics_export_enabled", False)
    monkeypatch.setattr(settings, "auto_create_schema", False)
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_transfer_notifier] = lambda: notifier
    limiter.reset()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.reset()


def auth(uid: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(uid)}"}


def _create(client, uid: str = "alice", **overrides):
    body = {
        "fowlId": "F1",
        "recipientIdentifier": "bob@example.com",
        "contactMethod": "EMAIL",
        "proofUrls": ["https://img/goldie.jpg"],
    }
    body.update(overrides)
    return client.post("/api/v1/transfers", json=body, headers=auth(uid))


def _verify_body(client, account, transfer_id: str) -> dict:
    record = client.get(f"/api/v1/transfers/{transfer_id}", headers=auth("alice")).json()
    proof = {
        "transferId": record["id"],
        "fowlId": record["fowlId"],
        "fromUid": record["fromUid"],
        "toUid": record["toUid"],
        "timestamp": record["timestamp"],
        "proofUrls": record["proofUrls"],
    }
    return {"transferId": transfer_id, "signature": account.sign(proof), "proofData": proof}


# ══════════════════════════════════════════════════════════════════════
# Platform
# ══════════════════════════════════════════════════════════════════════


class TestPlatform:
    def test_health(self, client) -> None:
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_security_headers(self, client) -> None:
        resp = client.get("/api/v1/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert resp.headers["Cache-Control"] == "no-store"

    def test_docs_hidden_outside_debug(self, client) -> None:
        assert client.get("/docs").status_code == 404


# ══════════════════════════════════════════════════════════════════════
# Transfers
# ══════════════════════════════════════════════════════════════════════


class TestCreateTransferEndpoint:
    def test_created(self, client) -> None:
        resp = _create(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "PENDING"
        assert data["transferId"]
        assert data["timestamp"] > 0

    def test_anonymous(self, client) -> None:
        resp = client.post(
            "/api/v1/transfers",
            json={"fowlId": "F1", "recipientIdentifier": "bob@example.com", "contactMethod": "EMAIL"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthenticated"

    def test_expired_token_is_anonymous(self, client) -> None:
        token = create_access_token("alice", expires_delta=timedelta(seconds=-5))
        resp = client.post(
            "/api/v1/transfers",
            json={"fowlId": "F1", "recipientIdentifier": "bob@example.com", "contactMethod": "EMAIL"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 401

    def test_not_owner(self, client) -> None:
        resp = _create(client, uid="mallory")
        assert resp.status_code == 403
        assert resp.json()["error"] == "permission-denied"

    def test_unknown_fowl(self, client) -> None:
        resp = _create(client, fowlId="F404")
        assert resp.status_code == 404
        assert resp.json() == {"error": "not-found", "detail": "Fowl not found: F404"}

    def test_invalid_recipient(self, client) -> None:
        resp = _create(client, recipientIdentifier="bob")
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid-argument"

    def test_self_recipient(self, client) -> None:
        resp = _create(client, recipientIdentifier="+1 555 000 0001", contactMethod="PHONE")
        assert resp.status_code == 400
        assert "yourself" in resp.json()["detail"]

    def test_schema_violation(self, client) -> None:
        resp = _create(client, contactMethod="FAX")
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "invalid-argument"
        assert "contactMethod" in body["detail"]


class TestVerifyEndpoint:
    def test_recipient_verifies(self, client, accounts) -> None:
        transfer_id = _create(client).json()["transferId"]

        resp = client.post(
            "/api/v1/transfers/verify",
            json=_verify_body(client, accounts["bob"], transfer_id),
            headers=auth("bob"),
        )

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "transferId": transfer_id, "status": "VERIFIED"}
        record = client.get(f"/api/v1/transfers/{transfer_id}", headers=auth("bob")).json()
        assert record["verified"] is True
        assert record["recipientUid"] == "bob"

    def test_bad_signature_rejects(self, client, accounts) -> None:
        transfer_id = _create(client).json()["transferId"]
        body = _verify_body(client, accounts["bob"], transfer_id)
        body["signature"] = accounts["mallory"].sign(body["proofData"])

        resp = client.post("/api/v1/transfers/verify", json=body, headers=auth("bob"))

        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid-argument", "detail": "Invalid signature"}
        record = client.get(f"/api/v1/transfers/{transfer_id}", headers=auth("alice")).json()
        assert record["status"] == "REJECTED"
        assert record["rejectionReason"] == "Invalid signature"

    def test_missing_parameters(self, client) -> None:
        resp = client.post("/api/v1/transfers/verify", json={}, headers=auth("bob"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing required parameters"

    def test_outsider(self, client, accounts) -> None:
        transfer_id = _create(client).json()["transferId"]
        resp = client.post(
            "/api/v1/transfers/verify",
            json=_verify_body(client, accounts["mallory"], transfer_id),
            headers=auth("mallory"),
        )
        assert resp.status_code == 403

    def test_unknown_transfer(self, client) -> None:
        resp = client.post(
            "/api/v1/transfers/verify",
            json={"transferId": "nope", "signature": "AAAA", "proofData": {"a": 1}},
            headers=auth("bob"),
        )
        assert resp.status_code == 404

    def test_ownership_conflict_is_opaque(self, client, accounts, engine) -> None:
        from fowlregistry.infrastructure.ownership.ownership_store import (
            OwnershipStoreAdapter,
        )

        transfer_id = _create(client).json()["transferId"]
        OwnershipStoreAdapter(engine=engine).conditional_owner_update("F1", "alice", "mallory", 1)

        resp = client.post(
            "/api/v1/transfers/verify",
            json=_verify_body(client, accounts["bob"], transfer_id),
            headers=auth("bob"),
        )
        assert resp.status_code == 500
        assert resp.json() == {"error": "internal", "detail": "Internal server error"}

    def test_rate_limited(self, client) -> None:
        codes = [
            client.post("/api/v1/transfers/verify", json={}).status_code
            for _ in range(11)
        ]
        assert codes[:10] == [401] * 10
        assert codes[10] == 429


class TestGetTransferEndpoint:
    def test_outsider_forbidden(self, client) -> None:
        transfer_id = _create(client).json()["transferId"]
        resp = client.get(f"/api/v1/transfers/{transfer_id}", headers=auth("mallory"))
        assert resp.status_code == 403

    def test_camel_case_record(self, client) -> None:
        transfer_id = _create(client).json()["transferId"]
        data = client.get(f"/api/v1/transfers/{transfer_id}", headers=auth("alice")).json()
        assert data["fowlId"] == "F1"
        assert data["contactMethod"] == "EMAIL"
        assert data["proofUrls"] == ["https://img/goldie.jpg"]
        assert data["rejectionReason"] is None


# ══════════════════════════════════════════════════════════════════════
# User data export
# ══════════════════════════════════════════════════════════════════════


class TestUserDataExportEndpoint:
    def test_requires_caller(self, client) -> None:
        resp = client.get("/api/v1/users/me/export")
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthenticated"

    def test_export_parties(self, client) -> None:
        transfer_id = _create(client).json()["transferId"]
        client.post(
            "/api/v1/fowls/F1/vaccinations",
            json={"vaccineName": "Marek", "scheduledDate": 1_000},
            headers=auth("alice"),
        )

        alice = client.get("/api/v1/users/me/export", headers=auth("alice"))
        assert alice.status_code == 200
        data = alice.json()
        assert data["uid"] == "alice"
        assert data["profile"]["email"] == "alice@example.com"
        assert "fcmToken" not in data["profile"]
        assert [f["id"] for f in data["fowls"]] == ["F1", "F2", "F3"]
        assert [t["id"] for t in data["transfers"]["sent"]] == [transfer_id]
        assert data["transfers"]["received"] == []
        assert [e["vaccineName"] for e in data["vaccinationEvents"]] == ["Marek"]
        assert data["recordCount"] == 5

        bob = client.get("/api/v1/users/me/export", headers=auth("bob")).json()
        assert [t["id"] for t in bob["transfers"]["received"]] == [transfer_id]
        assert bob["vaccinationEvents"] == []


# ══════════════════════════════════════════════════════════════════════
# Breeding
# ══════════════════════════════════════════════════════════════════════


class TestBreedingEndpoints:
    def test_requires_caller(self, client) -> None:
        assert client.get("/api/v1/fowls/F1/family-tree").status_code == 401
        assert client.get("/api/v1/breeding/analytics").status_code == 401

    def test_family_tree(self, client) -> None:
        resp = client.get("/api/v1/fowls/F1/family-tree", headers=auth("alice"))
        assert resp.status_code == 200
        data = resp.json()
        assert data["rootId"] == "F1"
        nodes = {n["id"]: n for n in data["nodes"]}
        assert nodes["F1"]["x"] == 0.0
        assert nodes["F2"]["color"] == "blue"
        assert nodes["F1"]["color"] == "magenta"
        assert nodes["F4"]["color"] == "gray"
        assert {(c["fromId"], c["toId"], c["type"]) for c in data["connections"]} == {
            ("F1", "F2", "parent"),
            ("F1", "F3", "parent"),
            ("F1", "F4", "offspring"),
        }

    def test_family_tree_unknown(self, client) -> None:
        assert client.get("/api/v1/fowls/F404/family-tree", headers=auth("alice")).status_code == 404

    @pytest.mark.parametrize("fmt, media_type, magic", [("png", "image/png", b"\x89PNG"), ("pdf", "application/pdf", b"%PDF")])
    def test_export(self, client, fmt, media_type, magic) -> None:
        resp = client.get(f"/api/v1/fowls/F1/family-tree/export?format={fmt}", headers=auth("alice"))
        assert resp.status_code == 200
        assert resp.headers["content-type"] == media_type
        assert f"family_tree_F1.{fmt}" in resp.headers["content-disposition"]
        assert resp.content.startswith(magic)

    def test_export_unsupported(self, client) -> None:
        resp = client.get("/api/v1/fowls/F1/family-tree/export?format=gif", headers=auth("alice"))
        assert resp.status_code == 400

    def test_analytics(self, client) -> None:
        resp = client.get("/api/v1/breeding/analytics?period=NINETY_DAYS", headers=auth("alice"))
        assert resp.status_code == 200
        data = resp.json()
        assert data["period"] == "NINETY_DAYS"
        assert data["hatchRate"] == 0.0
        assert len(data["trendData"]) == 13

    def test_analytics_custom_needs_bounds(self, client) -> None:
        resp = client.get("/api/v1/breeding/analytics?period=CUSTOM", headers=auth("alice"))
        assert resp.status_code == 400

    def test_vaccination_flow(self, client) -> None:
        created = client.post(
            "/api/v1/fowls/F1/vaccinations",
            json={"vaccineName": "Marek", "scheduledDate": 1_000, "notes": "day-old"},
            headers=auth("alice"),
        )
        assert created.status_code == 201
        event = created.json()
        assert event["status"] == "PENDING"
        assert event["isOverdue"] is True

        listed = client.get("/api/v1/fowls/F1/vaccinations", headers=auth("alice")).json()
        assert [e["id"] for e in listed["events"]] == [event["id"]]

        done = client.post(f"/api/v1/vaccinations/{event['id']}/complete", headers=auth("alice"))
        assert done.status_code == 200
        assert done.json()["status"] == "COMPLETED"

        again = client.post(f"/api/v1/vaccinations/{event['id']}/complete", headers=auth("alice"))
        assert again.status_code == 400

    def test_vaccination_writes_need_owner(self, client) -> None:
        body = {"vaccineName": "Marek", "scheduledDate": 1_000}
        denied = client.post(
            "/api/v1/fowls/F1/vaccinations", json=body, headers=auth("mallory")
        )
        assert denied.status_code == 403
        assert denied.json()["error"] == "permission-denied"

        event = client.post(
            "/api/v1/fowls/F1/vaccinations", json=body, headers=auth("alice")
        ).json()
        resp = client.post(
            f"/api/v1/vaccinations/{event['id']}/complete", headers=auth("mallory")
        )
        assert resp.status_code == 403

        listed = client.get("/api/v1/fowls/F1/vaccinations", headers=auth("alice")).json()
        assert [e["status"] for e in listed["events"]] == ["PENDING"]

    def test_vaccination_schema(self, client) -> None:
        resp = client.post(
            "/api/v1/fowls/F1/vaccinations",
            json={"vaccineName": "", "scheduledDate": 0},
            headers=auth("alice"),
        )
        assert resp.status_code == 422
