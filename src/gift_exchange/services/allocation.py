"""Claim, approve and reject: the slot allocation state machine."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from gift_exchange.domain.claims import (
    ApprovalResult,
    Candidate,
    ClaimStatus,
    NewClaim,
    PendingClaim,
    PreferenceMode,
    PreviewResult,
)
from gift_exchange.domain.errors import Conflict, NotFound, ValidationFailed
from gift_exchange.domain.ledger import GiftType, LedgerRecord, VisitorDetails
from gift_exchange.domain.slots import SlotStatus
from gift_exchange.services import selector
from gift_exchange.services.ledger import LedgerRepository
from gift_exchange.services.slots import SlotRepository

_logger = logging.getLogger(__name__)

MAX_EXCLUSION_WINDOW = 100


class ClaimRepository(Protocol):
    """Persistence interface for the approval queue.

    ``open_claim``, ``finalize_claim`` and ``release_claim`` each run as one
    store transaction.
    """

    def get_pending(self, pending_id: UUID) -> PendingClaim | None:
        """Return a pending claim by id, if present."""

    def list_pending(self) -> list[PendingClaim]:
        """Return pending claims, oldest first."""

    def open_claim(self, claim: NewClaim) -> PendingClaim | None:
        """Move the slot available -> claimed and queue the claim.

        Returns None when the slot was no longer available and enabled.
        """

    def finalize_claim(
        self, pending_id: UUID, finalized_at: datetime
    ) -> LedgerRecord | None:
        """Consume the pending claim into a numbered ledger record.

        Returns None when the pending claim no longer exists.
        """

    def release_claim(self, pending_id: UUID) -> bool:
        """Free a claimed slot and drop its pending claim without a record."""


@dataclass
class AllocationService:
    """Coordinates slot claims with the single human approval step."""

    slot_repository: SlotRepository
    ledger_repository: LedgerRepository
    claim_repository: ClaimRepository
    exclusion_window: int = 3
    message_max_length: int = 20
    pending_claim_ttl_seconds: int | None = None

    def preview(
        self,
        gift_type: GiftType,
        mode: PreferenceMode,
        exclusion_window: int | None = None,
    ) -> PreviewResult:
        """Return eligible slots without touching any state."""
        window = self.exclusion_window if exclusion_window is None else exclusion_window
        if window < 0 or window > MAX_EXCLUSION_WINDOW:
            raise ValidationFailed(
                f"Exclusion window must be between 0 and {MAX_EXCLUSION_WINDOW}"
            )
        slots = self.slot_repository.list_slots()
        window = min(window, len(slots))
        recent = self.ledger_repository.recent_visitor_slot_ids(window)
        selection = selector.select(slots, gift_type, mode, window, recent)
        candidates = []
        for slot in selection.candidates:
            holder = self.ledger_repository.latest_for_slot(slot.id)
            candidates.append(
                Candidate(slot=slot, holder=holder.snapshot() if holder else None)
            )
        return PreviewResult(
            preference_satisfied=selection.preference_satisfied,
            tier=selection.tier,
            candidates=candidates,
        )

    def claim(
        self,
        slot_id: UUID,
        visitor: VisitorDetails,
        gift_type: GiftType,
        mode: PreferenceMode,
    ) -> PendingClaim:
        """Claim a slot for a visitor, pending approval."""
        self._validate_visitor(visitor)
        slot = self.slot_repository.get_slot(slot_id)
        if slot is None:
            raise NotFound(f"Slot {slot_id} does not exist")
        if not slot.is_selectable:
            raise Conflict(f"Slot {slot.number} was just taken, please try again")
        holder = self.ledger_repository.latest_for_slot(slot.id)
        new_claim = NewClaim(
            slot_id=slot.id,
            gift_type=gift_type,
            visitor=visitor,
            previous_holder=holder.snapshot() if holder else None,
            preference_satisfied=selector.matches_preference(
                slot.held_gift_type, gift_type, mode
            ),
            created_at=datetime.now(tz=UTC),
        )
        pending = self.claim_repository.open_claim(new_claim)
        if pending is None:
            _logger.info("Claim conflict on slot %s", slot.number)
            raise Conflict(f"Slot {slot.number} was just taken, please try again")
        _logger.info("Claim %s opened on slot %s", pending.id, pending.slot_number)
        return pending

    def approve(self, pending_id: UUID) -> ApprovalResult:
        """Finalize a pending claim into the ledger and free its slot."""
        pending = self._get_pending(pending_id)
        self._require_claimed(pending)
        record = self.claim_repository.finalize_claim(
            pending_id, finalized_at=datetime.now(tz=UTC)
        )
        if record is None:
            raise NotFound(f"Pending claim {pending_id} was already processed")
        _logger.info(
            "Approved claim %s: sequence=%s visitor=%s slot=%s",
            pending_id,
            record.sequence_number,
            record.visitor_sequence_number,
            pending.slot_number,
        )
        return ApprovalResult(
            record=record,
            slot_number=pending.slot_number,
            previous_holder=pending.previous_holder,
        )

    def reject(self, pending_id: UUID) -> UUID:
        """Discard a pending claim; no record is created and no number consumed."""
        pending = self._get_pending(pending_id)
        self._require_claimed(pending)
        if not self.claim_repository.release_claim(pending_id):
            raise Conflict(f"Pending claim {pending_id} was processed concurrently")
        _logger.info("Rejected claim %s on slot %s", pending_id, pending.slot_number)
        return pending_id

    def pending_status(self, pending_id: UUID) -> ClaimStatus:
        """Return whether a claim is still waiting for the reviewer."""
        if self.claim_repository.get_pending(pending_id) is None:
            return ClaimStatus.PROCESSED
        return ClaimStatus.PENDING

    def list_pending(self) -> list[PendingClaim]:
        """Return the reviewer queue, oldest first."""
        return self.claim_repository.list_pending()

    def expire_stale_claims(self, now: datetime | None = None) -> list[UUID]:
        """Reject claims older than the configured TTL, if one is configured."""
        if self.pending_claim_ttl_seconds is None:
            return []
        cutoff = (now or datetime.now(tz=UTC)) - timedelta(
            seconds=self.pending_claim_ttl_seconds
        )
        expired = []
        for pending in self.claim_repository.list_pending():
            if pending.created_at > cutoff:
                continue
            try:
                expired.append(self.reject(pending.id))
            except (Conflict, NotFound):
                _logger.warning("Stale claim %s changed while expiring", pending.id)
        if expired:
            _logger.info("Expired %s stale claims", len(expired))
        return expired

    def _get_pending(self, pending_id: UUID) -> PendingClaim:
        pending = self.claim_repository.get_pending(pending_id)
        if pending is None:
            raise NotFound(f"Pending claim {pending_id} does not exist")
        return pending

    def _require_claimed(self, pending: PendingClaim) -> None:
        slot = self.slot_repository.get_slot(pending.slot_id)
        if slot is None or slot.status is not SlotStatus.CLAIMED:
            raise Conflict(
                f"Slot {pending.slot_number} is not claimed, it was changed elsewhere"
            )

    def _validate_visitor(self, visitor: VisitorDetails) -> None:
        if not visitor.name.strip():
            raise ValidationFailed("Name is required")
        if len(visitor.message) > self.message_max_length:
            raise ValidationFailed(
                f"Message cannot exceed {self.message_max_length} characters"
            )
