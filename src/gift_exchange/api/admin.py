"""Reviewer and administration endpoints with shared-secret auth."""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from gift_exchange.api.models import (  # noqa: TC001
    DisableRequest,
    PasswordRequest,
    PoolInitRequest,
    RecordEditRequest,
)
from gift_exchange.api.serializers import (
    serialize_approval,
    serialize_mutation,
    serialize_page,
    serialize_pending,
    serialize_slot,
    serialize_snapshot,
)
from gift_exchange.domain.ledger import RecordQuery

if TYPE_CHECKING:
    from gift_exchange.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])
auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _get_admin_password(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_password


def is_valid_password(candidate: str | None, expected: str) -> bool:
    """Compare a supplied secret with the configured one."""
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode(), expected.encode())


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_password: str = Depends(_get_admin_password),
) -> None:
    """Ensure requests include the admin secret."""
    if not is_valid_password(x_admin_token, admin_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@auth_router.post("/validate")
async def validate_password(
    payload: PasswordRequest,
    admin_password: str = Depends(_get_admin_password),
) -> dict[str, bool]:
    """Check the admin secret for the reviewer console login."""
    if not is_valid_password(payload.password, admin_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail={"success": False}
        )
    return {"success": True}


@router.get("/pending", dependencies=[Depends(require_admin)])
async def list_pending(request: Request) -> dict[str, object]:
    """Return claims awaiting approval, oldest first."""
    container: AppContainer = request.app.state.container
    return {
        "pending": [
            serialize_pending(pending)
            for pending in container.allocation_service.list_pending()
        ]
    }


@router.post("/pending/expire", dependencies=[Depends(require_admin)])
async def expire_pending(request: Request) -> dict[str, object]:
    """Reject claims older than the configured TTL."""
    container: AppContainer = request.app.state.container
    expired = container.allocation_service.expire_stale_claims()
    return {"expired": [str(pending_id) for pending_id in expired]}


@router.post("/pending/{pending_id}/approve", dependencies=[Depends(require_admin)])
async def approve_pending(
    pending_id: UUID, request: Request, print_receipt: bool = False
) -> dict[str, object]:
    """Approve a claim, finalizing it into the ledger."""
    container: AppContainer = request.app.state.container
    result = container.allocation_service.approve(pending_id)
    body = serialize_approval(result)
    if print_receipt:
        body["printed"] = await container.receipt_service.print_approval(result)
    return body


@router.post("/pending/{pending_id}/reject", dependencies=[Depends(require_admin)])
async def reject_pending(pending_id: UUID, request: Request) -> dict[str, str]:
    """Reject a claim and free its slot."""
    container: AppContainer = request.app.state.container
    rejected = container.allocation_service.reject(pending_id)
    return {"pending_id": str(rejected)}


@router.get("/slots", dependencies=[Depends(require_admin)])
async def list_slots(request: Request) -> dict[str, object]:
    """Return every slot with its status and held gift."""
    container: AppContainer = request.app.state.container
    slots = container.slot_service.list_slots()
    return {"slots": [serialize_slot(slot) for slot in slots]}


@router.put("/slots/{slot_id}/disabled", dependencies=[Depends(require_admin)])
async def set_slot_disabled(
    slot_id: UUID, payload: DisableRequest, request: Request
) -> dict[str, object]:
    """Exclude a slot from selection or bring it back."""
    container: AppContainer = request.app.state.container
    slot = container.slot_service.set_disabled(slot_id, payload.disabled)
    return {"slot": serialize_slot(slot)}


@router.post("/slots/{slot_id}/reconcile", dependencies=[Depends(require_admin)])
async def reconcile_slot(slot_id: UUID, request: Request) -> dict[str, object]:
    """Recompute a slot's held gift from the ledger."""
    container: AppContainer = request.app.state.container
    container.slot_service.get_slot(slot_id)
    return {"slot": serialize_slot(container.reconciler.reconcile(slot_id))}


@router.get("/records", dependencies=[Depends(require_admin)])
async def list_records(  # noqa: PLR0913
    request: Request,
    page: int = 1,
    page_size: int = 50,
    search: str = "",
    sort_by: str = "visitor_sequence_number",
    sort_order: str = "desc",
) -> dict[str, object]:
    """Return a page of live ledger records."""
    container: AppContainer = request.app.state.container
    query = RecordQuery(
        page=page,
        page_size=page_size,
        search=search,
        sort_by=sort_by,
        descending=sort_order != "asc",
    )
    return serialize_page(container.ledger_service.search(query))


@router.patch("/records/{record_id}", dependencies=[Depends(require_admin)])
async def edit_record(
    record_id: UUID, payload: RecordEditRequest, request: Request
) -> dict[str, object]:
    """Edit a ledger record's fields and reconcile its slot."""
    container: AppContainer = request.app.state.container
    mutation = container.ledger_service.edit_record(record_id, payload.to_domain())
    return serialize_mutation(mutation)


@router.delete("/records/{record_id}", dependencies=[Depends(require_admin)])
async def retract_record(record_id: UUID, request: Request) -> dict[str, object]:
    """Retract a ledger record and restore its slot's previous holder."""
    container: AppContainer = request.app.state.container
    mutation = container.ledger_service.retract_record(record_id)
    return {"retracted_id": str(record_id), **serialize_mutation(mutation)}


@router.get("/records/{record_id}/previous", dependencies=[Depends(require_admin)])
async def previous_holder(record_id: UUID, request: Request) -> dict[str, object]:
    """Return who held the slot before this record, for receipt reprints."""
    container: AppContainer = request.app.state.container
    record = container.ledger_service.get_record(record_id)
    snapshot = container.ledger_service.previous_holder(record_id)
    return {"previous_holder": serialize_snapshot(snapshot), "is_seed": record.is_seed}


@router.post("/pool/initialize", dependencies=[Depends(require_admin)])
async def initialize_pool(
    payload: PoolInitRequest, request: Request
) -> dict[str, object]:
    """Create the slot pool with seed gifts."""
    container: AppContainer = request.app.state.container
    gifts = [gift.to_seed() for gift in payload.gifts] if payload.gifts else None
    slots = container.pool_service.initialize(payload.mode, gifts)
    return {"mode": payload.mode, "slots": [serialize_slot(slot) for slot in slots]}


@router.post("/pool/reset", dependencies=[Depends(require_admin)])
async def reset_pool(request: Request) -> dict[str, str]:
    """Delete all event data."""
    container: AppContainer = request.app.state.container
    container.pool_service.reset()
    return {"status": "ok"}
