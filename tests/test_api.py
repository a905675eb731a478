"""Tests for kiosk and admin HTTP endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from gift_exchange.api.app import create_app
from gift_exchange.domain.ledger import GiftType

ADMIN = {"X-Admin-Token": "admin-secret"}


def _claim(client: TestClient, slot_id: str, name: str = "Mina") -> dict:
    response = client.post(
        "/claims",
        json={
            "slot_id": slot_id,
            "name": name,
            "message": "Merry!",
            "gift_type": "B",
            "preference_mode": "random",
        },
    )
    assert response.status_code == 200
    return response.json()


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_slots_and_preview(container, seed_pool) -> None:
    seed_pool(GiftType.A, GiftType.B, GiftType.C)
    client = TestClient(create_app(container))

    slots = client.get("/slots").json()["slots"]
    preview = client.get(
        "/slots/preview", params={"gift_type": "A", "preference_mode": "differ"}
    ).json()

    assert [slot["number"] for slot in slots] == [1, 2, 3]
    assert preview["preference_satisfied"] is True
    assert {item["slot_number"] for item in preview["candidates"]} == {2, 3}
    assert preview["candidates"][0]["holder"]["name"].startswith("Seed")


def test_claim_then_poll_and_gate(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))

    claim = _claim(client, str(slots[0].id))
    status = client.get(f"/claims/{claim['pending_id']}").json()
    gate = client.get("/gate").json()

    assert claim["slot_number"] == 1
    assert claim["previous_holder"]["gift_type"] == "A"
    assert status == {"status": "pending"}
    assert gate["has_outstanding_claim"] is True
    assert gate["holder_pending_id"] == claim["pending_id"]


def test_second_claim_returns_retryable_conflict(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))
    _claim(client, str(slots[0].id))

    response = client.post(
        "/claims",
        json={"slot_id": str(slots[0].id), "name": "Jun", "gift_type": "C"},
    )

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "conflict"
    assert body["retryable"] is True


def test_claim_validation_error_is_400(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))

    missing_name = client.post(
        "/claims", json={"slot_id": str(slots[0].id), "gift_type": "A"}
    )
    long_message = client.post(
        "/claims",
        json={
            "slot_id": str(slots[0].id),
            "name": "Mina",
            "message": "x" * 30,
            "gift_type": "A",
        },
    )

    assert missing_name.status_code == 400
    assert missing_name.json()["error"] == "validation"
    assert long_message.status_code == 400
    assert long_message.json()["retryable"] is False


def test_preview_with_no_free_slot_is_503(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))
    _claim(client, str(slots[0].id))

    response = client.get("/slots/preview", params={"gift_type": "A"})

    assert response.status_code == 503
    assert response.json()["error"] == "resource_exhausted"


def test_negative_exclude_window_is_400(container, seed_pool) -> None:
    seed_pool(GiftType.A)
    client = TestClient(create_app(container))

    response = client.get(
        "/slots/preview", params={"gift_type": "A", "exclude_window": -1}
    )

    assert response.status_code == 400


def test_oversized_exclude_window_is_400(container, seed_pool) -> None:
    seed_pool(GiftType.A)
    client = TestClient(create_app(container))

    response = client.get(
        "/slots/preview", params={"gift_type": "A", "exclude_window": 1_000_000_000}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    missing = client.get("/admin/pending")
    wrong = client.get("/admin/pending", headers={"X-Admin-Token": "nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_auth_validate(container) -> None:
    client = TestClient(create_app(container))

    ok = client.post("/auth/validate", json={"password": "admin-secret"})
    bad = client.post("/auth/validate", json={"password": "guess"})

    assert ok.json() == {"success": True}
    assert bad.status_code == 401


def test_approve_prints_receipt(container, seed_pool, receipt_printer) -> None:
    slots = seed_pool(*([GiftType.A, GiftType.B, GiftType.C] * 10))
    client = TestClient(create_app(container))
    claim = _claim(client, str(slots[0].id))

    pending = client.get("/admin/pending", headers=ADMIN).json()["pending"]
    response = client.post(
        f"/admin/pending/{claim['pending_id']}/approve",
        params={"print_receipt": "true"},
        headers=ADMIN,
    )

    assert [item["id"] for item in pending] == [claim["pending_id"]]
    assert response.status_code == 200
    body = response.json()
    assert body["record"]["sequence_number"] == 31
    assert body["record"]["visitor_sequence_number"] == 1
    assert body["record"]["slot_number"] == 1
    assert body["printed"] is True
    assert receipt_printer.receipts[0]["current_participant"]["slot_number"] == 1
    assert client.get(f"/claims/{claim['pending_id']}").json() == {
        "status": "processed"
    }


def test_reject_then_approve_is_404(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))
    claim = _claim(client, str(slots[0].id))

    rejected = client.post(
        f"/admin/pending/{claim['pending_id']}/reject", headers=ADMIN
    )
    approved = client.post(
        f"/admin/pending/{claim['pending_id']}/approve", headers=ADMIN
    )

    assert rejected.status_code == 200
    assert approved.status_code == 404
    assert approved.json()["error"] == "not_found"


def test_records_edit_retract_and_previous(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A)
    client = TestClient(create_app(container))
    claim = _claim(client, str(slots[0].id))
    record = client.post(
        f"/admin/pending/{claim['pending_id']}/approve", headers=ADMIN
    ).json()["record"]

    listing = client.get(
        "/admin/records", params={"search": "Mina"}, headers=ADMIN
    ).json()
    edited = client.patch(
        f"/admin/records/{record['id']}",
        json={"gift_type": "C"},
        headers=ADMIN,
    ).json()
    previous = client.get(
        f"/admin/records/{record['id']}/previous", headers=ADMIN
    ).json()
    retracted = client.delete(f"/admin/records/{record['id']}", headers=ADMIN).json()

    assert listing["pagination"]["total"] == 1
    assert edited["slot"]["held_gift_type"] == "C"
    assert edited["reconciled"] is True
    assert previous["previous_holder"]["name"] == "Seed 1"
    assert retracted["record"]["is_retracted"] is True
    assert retracted["slot"]["held_gift_type"] == "A"


def test_admin_slot_disable_and_reconcile(container, seed_pool) -> None:
    slots = seed_pool(GiftType.A, GiftType.B)
    client = TestClient(create_app(container))

    disabled = client.put(
        f"/admin/slots/{slots[0].id}/disabled",
        json={"disabled": True},
        headers=ADMIN,
    )
    reconciled = client.post(f"/admin/slots/{slots[1].id}/reconcile", headers=ADMIN)
    missing = client.post(f"/admin/slots/{uuid4()}/reconcile", headers=ADMIN)

    assert disabled.json()["slot"]["disabled"] is True
    assert reconciled.json()["slot"]["held_gift_type"] == "B"
    assert missing.status_code == 404
    assert [
        slot["disabled"]
        for slot in client.get("/admin/slots", headers=ADMIN).json()["slots"]
    ] == [True, False]


def test_pool_initialize_and_reset(container) -> None:
    client = TestClient(create_app(container))

    initialized = client.post(
        "/admin/pool/initialize", json={"mode": "random"}, headers=ADMIN
    )
    again = client.post(
        "/admin/pool/initialize", json={"mode": "random"}, headers=ADMIN
    )
    stats = client.get("/stats/participants").json()
    reset = client.post("/admin/pool/reset", headers=ADMIN)

    assert len(initialized.json()["slots"]) == 30
    assert again.status_code == 409
    assert stats == {
        "total_visitors": 0,
        "next_visitor_sequence_number": 1,
        "next_sequence_number": 31,
    }
    assert reset.json() == {"status": "ok"}
    assert client.get("/slots").json() == {"slots": []}


def test_unexpected_error_is_500(container, seed_pool, store) -> None:
    seed_pool(GiftType.A)
    store.fail_latest_for_slot = True
    client = TestClient(create_app(container), raise_server_exceptions=False)

    response = client.get("/slots/preview", params={"gift_type": "A"})

    assert response.status_code == 500
    assert response.json()["error"] == "internal"
