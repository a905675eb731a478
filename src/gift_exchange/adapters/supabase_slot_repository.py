"""Supabase-backed slot repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from gift_exchange.adapters.supabase_rows import SLOT_COLUMNS, parse_slot
from gift_exchange.domain.slots import Slot, SlotStatus
from gift_exchange.services.slots import SlotRepository


@dataclass
class SupabaseSlotRepository(SlotRepository):
    """Supabase implementation for the slot pool."""

    client: Client

    def list_slots(self) -> list[Slot]:
        """Return every slot ordered by number."""
        response = (
            self.client.table("slots")
            .select(SLOT_COLUMNS)
            .order("number", desc=False)
            .execute()
        )
        return [parse_slot(row) for row in response.data or []]

    def get_slot(self, slot_id: UUID) -> Slot | None:
        """Return a slot by id, if present."""
        response = (
            self.client.table("slots")
            .select(SLOT_COLUMNS)
            .eq("id", str(slot_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_slot(response.data[0])

    def reconcile_holding(self, slot_id: UUID) -> Slot | None:
        """Recompute the held gift from the ledger in one transaction."""
        response = self.client.rpc(
            "reconcile_slot", {"p_slot_id": str(slot_id)}
        ).execute()
        if not response.data:
            return None
        return parse_slot(response.data[0])

    def set_disabled(self, slot_id: UUID, disabled: bool) -> Slot | None:
        """Toggle the disabled flag, conditioned on the slot being available."""
        response = (
            self.client.table("slots")
            .update(
                {
                    "disabled": disabled,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(slot_id))
            .eq("status", SlotStatus.AVAILABLE.value)
            .execute()
        )
        if not response.data:
            return None
        return parse_slot(response.data[0])

    def mark_needs_repair(self, slot_id: UUID) -> None:
        """Flag a slot for manual reconciliation."""
        self.client.table("slots").update({"needs_repair": True}).eq(
            "id", str(slot_id)
        ).execute()
