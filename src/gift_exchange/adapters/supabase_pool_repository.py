"""Supabase-backed whole-pool operations."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from gift_exchange.adapters.supabase_rows import parse_slot
from gift_exchange.domain.slots import Slot
from gift_exchange.services.pool import PoolRepository, SeedGift


@dataclass
class SupabasePoolRepository(PoolRepository):
    """Supabase implementation for pool bootstrap and reset."""

    client: Client

    def count_slots(self) -> int:
        """Return the number of slots."""
        response = self.client.table("slots").select("id", count="exact").execute()
        return response.count or 0

    def count_records(self) -> int:
        """Return the number of ledger records."""
        response = (
            self.client.table("ledger_records").select("id", count="exact").execute()
        )
        return response.count or 0

    def seed_pool(self, gifts: list[SeedGift], finalized_at: datetime) -> list[Slot]:
        """Create slots and seed records in one transaction."""
        response = self.client.rpc(
            "seed_pool",
            {
                "p_gifts": [
                    {
                        "gift_type": gift.gift_type.value,
                        "name": gift.visitor.name,
                        "message": gift.visitor.message,
                        "line_id": gift.visitor.line_id or None,
                        "instagram": gift.visitor.instagram or None,
                    }
                    for gift in gifts
                ],
                "p_finalized_at": finalized_at.isoformat(),
            },
        ).execute()
        if not response.data:
            raise RuntimeError("Failed to seed slot pool")
        return sorted(
            (parse_slot(row) for row in response.data), key=lambda slot: slot.number
        )

    def clear_pool(self) -> None:
        """Delete all event data and reset counters."""
        self.client.rpc("clear_pool", {}).execute()
