"""JSON shapes for API responses."""

from gift_exchange.domain.claims import (
    ApprovalResult,
    Candidate,
    PendingClaim,
    PreviewResult,
)
from gift_exchange.domain.ledger import HolderSnapshot, LedgerRecord, RecordPage
from gift_exchange.domain.slots import Slot
from gift_exchange.services.admission import GateStatus
from gift_exchange.services.ledger import LedgerMutation, ParticipantStats


def serialize_slot(slot: Slot) -> dict[str, object]:
    return {
        "id": str(slot.id),
        "number": slot.number,
        "status": slot.status.value,
        "held_gift_type": slot.held_gift_type.value if slot.held_gift_type else None,
        "held_record_id": str(slot.held_record_id) if slot.held_record_id else None,
        "disabled": slot.disabled,
        "needs_repair": slot.needs_repair,
        "updated_at": slot.updated_at.isoformat() if slot.updated_at else None,
    }


def serialize_snapshot(snapshot: HolderSnapshot | None) -> dict[str, object] | None:
    return snapshot.to_dict() if snapshot else None


def serialize_record(record: LedgerRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "sequence_number": record.sequence_number,
        "visitor_sequence_number": record.visitor_sequence_number,
        "is_seed": record.is_seed,
        "is_retracted": record.is_retracted,
        "retracted_at": (
            record.retracted_at.isoformat() if record.retracted_at else None
        ),
        "gift_type": record.gift_type.value,
        "message": record.message,
        "name": record.name,
        "line_id": record.line_id,
        "instagram": record.instagram,
        "slot_id": str(record.slot_id),
        "created_at": record.created_at.isoformat(),
        "finalized_at": record.finalized_at.isoformat(),
    }


def serialize_candidate(candidate: Candidate) -> dict[str, object]:
    return {
        "slot_id": str(candidate.slot.id),
        "slot_number": candidate.slot.number,
        "held_gift_type": (
            candidate.slot.held_gift_type.value
            if candidate.slot.held_gift_type
            else None
        ),
        "holder": serialize_snapshot(candidate.holder),
    }


def serialize_preview(preview: PreviewResult) -> dict[str, object]:
    return {
        "preference_satisfied": preview.preference_satisfied,
        "tier": preview.tier,
        "candidates": [serialize_candidate(item) for item in preview.candidates],
    }


def serialize_pending(pending: PendingClaim) -> dict[str, object]:
    return {
        "id": str(pending.id),
        "slot_id": str(pending.slot_id),
        "slot_number": pending.slot_number,
        "gift_type": pending.gift_type.value,
        "name": pending.visitor.name,
        "message": pending.visitor.message,
        "line_id": pending.visitor.line_id,
        "instagram": pending.visitor.instagram,
        "previous_holder": serialize_snapshot(pending.previous_holder),
        "preference_satisfied": pending.preference_satisfied,
        "created_at": pending.created_at.isoformat(),
    }


def serialize_approval(result: ApprovalResult) -> dict[str, object]:
    return {
        "record": {
            **serialize_record(result.record),
            "slot_number": result.slot_number,
        },
        "previous_holder": serialize_snapshot(result.previous_holder),
    }


def serialize_mutation(mutation: LedgerMutation) -> dict[str, object]:
    return {
        "record": serialize_record(mutation.record),
        "affected_slot_id": str(mutation.slot_id),
        "reconciled": mutation.reconciled,
        "slot": serialize_slot(mutation.slot) if mutation.slot else None,
    }


def serialize_page(page: RecordPage) -> dict[str, object]:
    return {
        "records": [serialize_record(record) for record in page.records],
        "pagination": {
            "total": page.total,
            "page": page.page,
            "page_size": page.page_size,
            "total_pages": page.total_pages,
        },
    }


def serialize_gate(gate: GateStatus) -> dict[str, object]:
    return {
        "has_outstanding_claim": gate.has_outstanding_claim,
        "holder_pending_id": (
            str(gate.holder_pending_id) if gate.holder_pending_id else None
        ),
        "holder_slot_number": gate.holder_slot_number,
        "acquired_at": gate.acquired_at.isoformat() if gate.acquired_at else None,
        "outstanding": gate.outstanding,
    }


def serialize_stats(stats: ParticipantStats) -> dict[str, object]:
    return {
        "total_visitors": stats.total_visitors,
        "next_visitor_sequence_number": stats.next_visitor_sequence_number,
        "next_sequence_number": stats.next_sequence_number,
    }
