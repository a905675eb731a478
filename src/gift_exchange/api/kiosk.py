"""Visitor-facing kiosk endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Query, Request

from gift_exchange.api.models import ClaimRequest  # noqa: TC001
from gift_exchange.api.serializers import (
    serialize_gate,
    serialize_preview,
    serialize_snapshot,
    serialize_stats,
)
from gift_exchange.domain.claims import PreferenceMode
from gift_exchange.domain.ledger import GiftType
from gift_exchange.services.allocation import MAX_EXCLUSION_WINDOW

if TYPE_CHECKING:
    from gift_exchange.containers import AppContainer

router = APIRouter(tags=["kiosk"])


@router.get("/slots")
async def list_slot_numbers(request: Request) -> dict[str, object]:
    """Return slot ids and numbers for kiosk rendering."""
    container: AppContainer = request.app.state.container
    return {
        "slots": [
            {"id": str(slot.id), "number": slot.number}
            for slot in container.slot_service.list_slots()
        ]
    }


@router.get("/slots/preview")
async def preview_slots(
    request: Request,
    gift_type: GiftType,
    preference_mode: PreferenceMode = PreferenceMode.RANDOM,
    exclude_window: int | None = Query(default=None, ge=0, le=MAX_EXCLUSION_WINDOW),
) -> dict[str, object]:
    """Return the slots a visitor may be assigned, without claiming any."""
    container: AppContainer = request.app.state.container
    preview = container.allocation_service.preview(
        gift_type, preference_mode, exclude_window
    )
    return serialize_preview(preview)


@router.post("/claims")
async def create_claim(payload: ClaimRequest, request: Request) -> dict[str, object]:
    """Claim a slot and queue it for approval."""
    container: AppContainer = request.app.state.container
    pending = container.allocation_service.claim(
        payload.slot_id,
        visitor=payload.to_domain(),
        gift_type=payload.gift_type,
        mode=payload.preference_mode,
    )
    return {
        "pending_id": str(pending.id),
        "slot_number": pending.slot_number,
        "preference_satisfied": pending.preference_satisfied,
        "previous_holder": serialize_snapshot(pending.previous_holder),
    }


@router.get("/claims/{pending_id}")
async def claim_status(pending_id: UUID, request: Request) -> dict[str, str]:
    """Report whether a claim is still waiting for the reviewer."""
    container: AppContainer = request.app.state.container
    return {"status": container.allocation_service.pending_status(pending_id).value}


@router.get("/gate")
async def admission_gate(request: Request) -> dict[str, object]:
    """Return whether any claim is awaiting approval anywhere in the pool."""
    container: AppContainer = request.app.state.container
    return serialize_gate(container.admission_gate.status())


@router.get("/stats/participants")
async def participant_stats(request: Request) -> dict[str, object]:
    """Return visitor totals and the next visitor number."""
    container: AppContainer = request.app.state.container
    return serialize_stats(container.ledger_service.participant_stats())
