"""Supabase-backed approval queue.

Multi-row transitions call plpgsql functions through ``rpc`` so that each
runs in a single database transaction (see supabase/migrations).
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from gift_exchange.adapters.supabase_rows import (
    PENDING_COLUMNS,
    parse_pending,
    parse_record,
)
from gift_exchange.domain.claims import NewClaim, PendingClaim
from gift_exchange.domain.ledger import LedgerRecord
from gift_exchange.services.allocation import ClaimRepository


@dataclass
class SupabaseClaimRepository(ClaimRepository):
    """Supabase implementation for pending claims."""

    client: Client

    def get_pending(self, pending_id: UUID) -> PendingClaim | None:
        """Return a pending claim by id."""
        response = (
            self.client.table("pending_claims")
            .select(PENDING_COLUMNS)
            .eq("id", str(pending_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_pending(response.data[0])

    def list_pending(self) -> list[PendingClaim]:
        """Return pending claims in arrival order."""
        response = (
            self.client.table("pending_claims")
            .select(PENDING_COLUMNS)
            .order("created_at", desc=False)
            .execute()
        )
        return [parse_pending(row) for row in response.data or []]

    def open_claim(self, claim: NewClaim) -> PendingClaim | None:
        """Claim the slot and queue the claim in one transaction."""
        response = self.client.rpc(
            "open_claim",
            {
                "p_slot_id": str(claim.slot_id),
                "p_gift_type": claim.gift_type.value,
                "p_name": claim.visitor.name,
                "p_message": claim.visitor.message,
                "p_line_id": claim.visitor.line_id or None,
                "p_instagram": claim.visitor.instagram or None,
                "p_previous_holder": (
                    claim.previous_holder.to_dict() if claim.previous_holder else None
                ),
                "p_preference_satisfied": claim.preference_satisfied,
                "p_created_at": claim.created_at.isoformat(),
            },
        ).execute()
        if not response.data:
            return None
        return parse_pending(response.data[0])

    def finalize_claim(
        self, pending_id: UUID, finalized_at: datetime
    ) -> LedgerRecord | None:
        """Consume the pending claim into a numbered ledger record."""
        response = self.client.rpc(
            "finalize_claim",
            {
                "p_pending_id": str(pending_id),
                "p_finalized_at": finalized_at.isoformat(),
            },
        ).execute()
        if not response.data:
            return None
        return parse_record(response.data[0])

    def release_claim(self, pending_id: UUID) -> bool:
        """Free the slot and drop the pending claim."""
        response = self.client.rpc(
            "release_claim", {"p_pending_id": str(pending_id)}
        ).execute()
        return response.data is True
