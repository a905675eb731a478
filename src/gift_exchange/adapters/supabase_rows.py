"""Row parsing shared by the Supabase repositories."""

from datetime import datetime
from uuid import UUID

from gift_exchange.domain.claims import PendingClaim
from gift_exchange.domain.ledger import (
    GiftType,
    HolderSnapshot,
    LedgerRecord,
    VisitorDetails,
)
from gift_exchange.domain.slots import Slot, SlotStatus

SLOT_COLUMNS = (
    "id, number, status, held_gift_type, held_record_id, disabled, needs_repair, "
    "updated_at"
)
RECORD_COLUMNS = (
    "id, sequence_number, visitor_sequence_number, is_seed, is_retracted, "
    "retracted_at, gift_type, message, name, line_id, instagram, slot_id, "
    "created_at, finalized_at"
)
PENDING_COLUMNS = (
    "id, slot_id, slot_number, gift_type, message, name, line_id, instagram, "
    "previous_holder, preference_satisfied, created_at"
)


def parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def parse_slot(row: dict[str, object]) -> Slot:
    held_type = row.get("held_gift_type")
    held_record = row.get("held_record_id")
    return Slot(
        id=UUID(str(row["id"])),
        number=int(row["number"]),
        status=SlotStatus(row["status"]),
        held_gift_type=GiftType(held_type) if held_type else None,
        held_record_id=UUID(str(held_record)) if held_record else None,
        disabled=bool(row.get("disabled", False)),
        needs_repair=bool(row.get("needs_repair", False)),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def parse_record(row: dict[str, object]) -> LedgerRecord:
    visitor_number = row.get("visitor_sequence_number")
    return LedgerRecord(
        id=UUID(str(row["id"])),
        sequence_number=int(row["sequence_number"]),
        visitor_sequence_number=(
            int(visitor_number) if visitor_number is not None else None
        ),
        is_seed=bool(row.get("is_seed", False)),
        is_retracted=bool(row.get("is_retracted", False)),
        retracted_at=parse_timestamp(row.get("retracted_at")),
        gift_type=GiftType(row["gift_type"]),
        message=str(row.get("message") or ""),
        name=str(row.get("name") or ""),
        line_id=row.get("line_id"),
        instagram=row.get("instagram"),
        slot_id=UUID(str(row["slot_id"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        finalized_at=datetime.fromisoformat(str(row["finalized_at"])),
    )


def parse_pending(row: dict[str, object]) -> PendingClaim:
    previous = row.get("previous_holder")
    return PendingClaim(
        id=UUID(str(row["id"])),
        slot_id=UUID(str(row["slot_id"])),
        slot_number=int(row["slot_number"]),
        gift_type=GiftType(row["gift_type"]),
        visitor=VisitorDetails(
            name=str(row.get("name") or ""),
            message=str(row.get("message") or ""),
            line_id=row.get("line_id"),
            instagram=row.get("instagram"),
        ),
        previous_holder=(
            HolderSnapshot.from_dict(previous) if isinstance(previous, dict) else None
        ),
        preference_satisfied=bool(row.get("preference_satisfied", False)),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
