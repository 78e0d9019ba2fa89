"""HTTP tests for the record store API."""

import json
from datetime import timedelta

from veripass_api.auth.tokens import create_access_token

TX_HASH = "0x" + "ab" * 32


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "veripass-api"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "VeriPass API"


def test_correlation_id_echoed(client):
    response = client.get("/health", headers={"x-correlation-id": "abc-123"})
    assert response.headers["x-correlation-id"] == "abc-123"
    assert client.get("/health").headers.get("x-correlation-id")


def test_create_asset_envelope(client, alice_headers, asset_payload, alice):
    response = client.post("/api/assets", json=asset_payload(1), headers=alice_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Asset created successfully"
    data = body["data"]
    assert data["assetId"] == 1
    assert data["mintStatus"] == "PENDING"
    assert data["createdBy"] == alice
    assert data["dataHash"].startswith("0x") and len(data["dataHash"]) == 66
    assert data["images"] == []


def test_create_asset_requires_token(client, asset_payload):
    response = client.post("/api/assets", json=asset_payload(1))
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]


def test_expired_token_rejected(client, asset_payload, alice):
    token = create_access_token(alice, expires_in=timedelta(seconds=-1))
    response = client.post("/api/assets", json=asset_payload(1), headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_validation_error_envelope(client, alice_headers, asset_payload):
    response = client.post(
        "/api/assets", json=asset_payload(1, manufacturedDate="May 2020"), headers=alice_headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert any("manufacturedDate" in d["path"] for d in body["details"])


def test_get_asset_and_by_hash(client, alice_headers, asset_payload):
    created = client.post("/api/assets", json=asset_payload(5), headers=alice_headers).json()["data"]
    assert client.get("/api/assets/5").json()["data"]["id"] == created["id"]
    by_hash = client.get(f"/api/assets/by-hash/{created['dataHash']}")
    assert by_hash.status_code == 200
    assert by_hash.json()["data"]["assetId"] == 5


def test_unknown_asset_404(client):
    response = client.get("/api/assets/404")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Asset not found", "details": None}


def test_mint_status_flow(client, alice_headers, bob_headers, asset_payload):
    client.post("/api/assets", json=asset_payload(1), headers=alice_headers)

    forbidden = client.patch(
        "/api/assets/1/mint-status", json={"status": "MINTED", "txHash": TX_HASH}, headers=bob_headers
    )
    assert forbidden.status_code == 403

    minted = client.patch(
        "/api/assets/1/mint-status", json={"status": "MINTED", "txHash": TX_HASH}, headers=alice_headers
    )
    assert minted.status_code == 200
    assert minted.json()["data"]["mintStatus"] == "MINTED"
    assert minted.json()["data"]["txHash"] == TX_HASH

    again = client.post("/api/assets", json=asset_payload(1), headers=alice_headers)
    assert again.status_code == 409


def test_pending_asset_of_other_user_forbidden(client, alice_headers, bob_headers, asset_payload):
    client.post("/api/assets", json=asset_payload(1), headers=alice_headers)
    response = client.post("/api/assets", json=asset_payload(1), headers=bob_headers)
    assert response.status_code == 403


def _evidence_body(**overrides):
    body = {
        "assetId": 1,
        "eventType": "MAINTENANCE",
        "eventDate": "2024-02-01",
        "description": "Annual service",
    }
    body.update(overrides)
    return body


def test_evidence_create_confirm_and_list(client, make_asset, alice_headers):
    make_asset(1)
    created = client.post("/api/evidence", json=_evidence_body(), headers=alice_headers)
    assert created.status_code == 201
    evidence = created.json()["data"]
    assert evidence["status"] == "PENDING"
    assert evidence["files"] == []

    repeat = client.post("/api/evidence", json=_evidence_body(), headers=alice_headers)
    assert repeat.status_code == 200
    assert repeat.json()["data"]["id"] == evidence["id"]

    confirmed = client.post(
        f"/api/evidence/{evidence['id']}/confirm",
        json={"txHash": TX_HASH, "blockchainEventId": 2},
        headers=alice_headers,
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["data"]["status"] == "CONFIRMED"
    assert confirmed.json()["data"]["isVerified"] is False

    listed = client.get("/api/evidence/asset/1").json()["data"]
    assert [e["id"] for e in listed] == [evidence["id"]]
    assert client.get(f"/api/evidence/by-hash/{evidence['dataHash']}").status_code == 200


def test_unpaired_surrogate_rejected_as_validation_error(client, make_asset, alice_headers):
    make_asset(1)
    # json.dumps keeps the surrogate as an ASCII escape, as a browser would send it.
    body = json.dumps(_evidence_body(description="\ud800"))
    response = client.post(
        "/api/evidence",
        content=body,
        headers={**alice_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert response.json()["details"][0]["path"] == "body.description"


def test_evidence_by_oracle_is_verified(client, make_asset, oracle_headers, oracle_address):
    make_asset(1)
    evidence = client.post("/api/evidence", json=_evidence_body(), headers=oracle_headers).json()["data"]
    assert evidence["createdBy"] == oracle_address
    confirmed = client.post(
        f"/api/evidence/{evidence['id']}/confirm", json={"txHash": TX_HASH}, headers=oracle_headers
    ).json()["data"]
    assert confirmed["isVerified"] is True
    assert confirmed["verifiedBy"] == oracle_address


def test_wrong_oracle_key_rejected(client, make_asset):
    make_asset(1)
    response = client.post("/api/evidence", json=_evidence_body(), headers={"X-Oracle-Key": "nope"})
    assert response.status_code == 401


def test_verification_request_lifecycle(client, make_asset, alice_headers, oracle_headers):
    make_asset(1)
    body = {"assetId": 1, "requestType": "SERVICE_VERIFICATION"}

    created = client.post("/api/verification-requests", json=body, headers=alice_headers)
    assert created.status_code == 201
    request_id = created.json()["data"]["requestId"]
    assert created.json()["data"]["status"] == "PENDING"

    duplicate = client.post("/api/verification-requests", json=body, headers=alice_headers)
    assert duplicate.status_code == 200
    assert duplicate.json()["data"]["requestId"] == request_id

    pending = client.get("/api/verification-requests/pending", headers=oracle_headers).json()["data"]
    assert [r["requestId"] for r in pending] == [request_id]

    claimed = client.patch(
        f"/api/verification-requests/{request_id}", json={"status": "PROCESSING"}, headers=oracle_headers
    )
    assert claimed.status_code == 200
    assert claimed.json()["data"]["claimedAt"] is not None

    failed = client.patch(
        f"/api/verification-requests/{request_id}",
        json={"status": "FAILED", "errorMessage": "No service records found"},
        headers=oracle_headers,
    )
    assert failed.json()["data"]["errorMessage"] == "No service records found"

    back = client.patch(
        f"/api/verification-requests/{request_id}", json={"status": "PENDING"}, headers=oracle_headers
    )
    assert back.status_code == 409

    status = client.get(f"/api/verification-requests/{request_id}").json()["data"]["status"]
    assert status == "FAILED"


def test_queue_routes_require_oracle(client, alice_headers):
    assert client.get("/api/verification-requests/pending").status_code == 401
    assert client.get("/api/verification-requests/pending", headers=alice_headers).status_code == 401
    response = client.patch(
        "/api/verification-requests/VR-1-x", json={"status": "PROCESSING"}, headers=alice_headers
    )
    assert response.status_code == 401


def test_expire_stale_route(client, oracle_headers):
    response = client.post(
        "/api/verification-requests/expire-stale", json={"olderThanSeconds": 60}, headers=oracle_headers
    )
    assert response.status_code == 200
    assert response.json()["data"] == []

    invalid = client.post(
        "/api/verification-requests/expire-stale", json={"olderThanSeconds": 0}, headers=oracle_headers
    )
    assert invalid.status_code == 400


def test_service_records(client, make_asset, make_service_record, oracle_headers, alice_headers):
    make_asset(1)
    make_service_record(1, "SR-002", service_date="2024-06-01", work_performed=None)
    make_service_record(1, "SR-001", service_date="2024-01-15")

    records = client.get("/api/service-records/1", headers=oracle_headers).json()["data"]
    assert [r["recordId"] for r in records] == ["SR-001", "SR-002"]
    assert records[1]["workPerformed"] == []
    assert records[0]["verified"] is True

    assert client.get("/api/service-records/1", headers=alice_headers).status_code == 200
    assert client.get("/api/service-records/1").status_code == 401
    assert client.get("/api/service-records/2", headers=oracle_headers).status_code == 404


def test_metrics_exposed(client):
    response = client.get("/metrics/")
    assert response.status_code == 200
    assert "veripass_" in response.text
