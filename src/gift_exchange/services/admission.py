"""Pool-wide admission gate for kiosks."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gift_exchange.services.allocation import ClaimRepository


@dataclass(frozen=True)
class GateStatus:
    """Snapshot of the approval lease."""

    has_outstanding_claim: bool
    holder_pending_id: UUID | None
    holder_slot_number: int | None
    acquired_at: datetime | None
    outstanding: int


@dataclass
class AdmissionGate:
    """Single named lease serializing claims behind one reviewer.

    A pending claim holds the lease from the moment it is opened until it is
    approved or rejected. The gate is advisory: kiosks check it before
    claiming, the server never refuses a claim because it is held.
    """

    claim_repository: ClaimRepository

    def status(self) -> GateStatus:
        """Return who holds the lease, if anyone."""
        pending = self.claim_repository.list_pending()
        if not pending:
            return GateStatus(
                has_outstanding_claim=False,
                holder_pending_id=None,
                holder_slot_number=None,
                acquired_at=None,
                outstanding=0,
            )
        holder = pending[0]
        return GateStatus(
            has_outstanding_claim=True,
            holder_pending_id=holder.id,
            holder_slot_number=holder.slot_number,
            acquired_at=holder.created_at,
            outstanding=len(pending),
        )

    def has_outstanding_claim(self) -> bool:
        """Return true iff any claim is awaiting approval."""
        return self.status().has_outstanding_claim
