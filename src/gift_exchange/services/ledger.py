"""Ledger queries and administrative edits."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from gift_exchange.domain.errors import Conflict, NotFound, ValidationFailed
from gift_exchange.domain.ledger import (
    HolderSnapshot,
    LedgerCounters,
    LedgerRecord,
    RecordChanges,
    RecordPage,
    RecordQuery,
)
from gift_exchange.domain.slots import Slot
from gift_exchange.services.reconciler import StateReconciler
from gift_exchange.services.slots import SlotRepository

_logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset(
    {"visitor_sequence_number", "sequence_number", "finalized_at", "name"}
)
MAX_PAGE_SIZE = 100


class LedgerRepository(Protocol):
    """Persistence interface for finalized records."""

    def get_record(self, record_id: UUID) -> LedgerRecord | None:
        """Return a record by id, retracted or not."""

    def latest_for_slot(self, slot_id: UUID) -> LedgerRecord | None:
        """Return the most recently finalized live record for a slot."""

    def previous_for_record(self, record: LedgerRecord) -> LedgerRecord | None:
        """Return the live record finalized on the same slot just before this one."""

    def recent_visitor_slot_ids(self, limit: int) -> list[UUID]:
        """Return slot ids of the most recent live visitor records, newest first."""

    def search_records(self, query: RecordQuery) -> RecordPage:
        """Return a page of live records matching the query."""

    def update_record(
        self, record_id: UUID, payload: dict[str, object]
    ) -> LedgerRecord:
        """Apply field changes to a record and return it."""

    def retract_record(
        self, record_id: UUID, retracted_at: datetime
    ) -> LedgerRecord | None:
        """Soft-delete a record unless it is already retracted."""

    def count_visitor_records(self) -> int:
        """Return the number of live visitor records."""

    def counters(self) -> LedgerCounters:
        """Return the last issued sequence numbers."""


@dataclass(frozen=True)
class LedgerMutation:
    """Outcome of an edit or retraction."""

    record: LedgerRecord
    slot_id: UUID
    reconciled: bool
    slot: Slot | None = None


@dataclass(frozen=True)
class ParticipantStats:
    """Visitor counters shown on kiosks."""

    total_visitors: int
    next_visitor_sequence_number: int
    next_sequence_number: int


@dataclass
class LedgerService:
    """Application service for the ledger and its derived slot state."""

    repository: LedgerRepository
    slot_repository: SlotRepository
    reconciler: StateReconciler
    message_max_length: int = 20

    def get_record(self, record_id: UUID) -> LedgerRecord:
        """Return a record or raise NotFound."""
        record = self.repository.get_record(record_id)
        if record is None:
            raise NotFound(f"Record {record_id} does not exist")
        return record

    def search(self, query: RecordQuery) -> RecordPage:
        """Return a page of live records."""
        if query.page < 1 or query.page_size < 1 or query.page_size > MAX_PAGE_SIZE:
            raise ValidationFailed("Invalid pagination parameters")
        if query.sort_by not in SORTABLE_FIELDS:
            raise ValidationFailed(f"Cannot sort by {query.sort_by}")
        return self.repository.search_records(query)

    def edit_record(self, record_id: UUID, changes: RecordChanges) -> LedgerMutation:
        """Apply an administrative edit and reconcile the record's slot."""
        self._validate_changes(changes)
        current = self.get_record(record_id)
        payload = changes.to_payload()
        record = (
            self.repository.update_record(record_id, payload) if payload else current
        )
        _logger.info(
            "Edited record %s fields=%s", record.sequence_number, sorted(payload)
        )
        return self._reconcile_after(record)

    def retract_record(self, record_id: UUID) -> LedgerMutation:
        """Soft-delete a record and restore its slot's previous holder."""
        current = self.get_record(record_id)
        if current.is_retracted:
            raise Conflict(f"Record {current.sequence_number} is already retracted")
        record = self.repository.retract_record(record_id, datetime.now(tz=UTC))
        if record is None:
            raise Conflict(f"Record {current.sequence_number} is already retracted")
        _logger.info("Retracted record %s", record.sequence_number)
        return self._reconcile_after(record)

    def previous_holder(self, record_id: UUID) -> HolderSnapshot | None:
        """Return whoever held the slot before this record, for reprints."""
        record = self.get_record(record_id)
        if record.is_seed:
            return None
        previous = self.repository.previous_for_record(record)
        return previous.snapshot() if previous else None

    def participant_stats(self) -> ParticipantStats:
        """Return visitor totals and the numbers the next approval will use."""
        counters = self.repository.counters()
        return ParticipantStats(
            total_visitors=self.repository.count_visitor_records(),
            next_visitor_sequence_number=counters.visitor_sequence_number + 1,
            next_sequence_number=counters.sequence_number + 1,
        )

    def _reconcile_after(self, record: LedgerRecord) -> LedgerMutation:
        try:
            slot = self.reconciler.reconcile(record.slot_id)
        except Exception:
            _logger.exception(
                "Failed to reconcile slot %s after record %s changed",
                record.slot_id,
                record.sequence_number,
            )
            self._flag_for_repair(record.slot_id)
            return LedgerMutation(
                record=record, slot_id=record.slot_id, reconciled=False
            )
        return LedgerMutation(
            record=record, slot_id=record.slot_id, reconciled=True, slot=slot
        )

    def _flag_for_repair(self, slot_id: UUID) -> None:
        try:
            self.slot_repository.mark_needs_repair(slot_id)
        except Exception:
            _logger.exception("Failed to flag slot %s for repair", slot_id)

    def _validate_changes(self, changes: RecordChanges) -> None:
        if changes.name is not None and not changes.name.strip():
            raise ValidationFailed("Name cannot be blank")
        if (
            changes.message is not None
            and len(changes.message) > self.message_max_length
        ):
            raise ValidationFailed(
                f"Message cannot exceed {self.message_max_length} characters"
            )
