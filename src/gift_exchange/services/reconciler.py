"""Recompute a slot's held gift from ledger history."""

import logging
from dataclasses import dataclass
from uuid import UUID

from gift_exchange.domain.errors import NotFound
from gift_exchange.domain.slots import Slot
from gift_exchange.services.slots import SlotRepository

_logger = logging.getLogger(__name__)


@dataclass
class StateReconciler:
    """Keeps Slot.held_* equal to the latest live ledger record for the slot."""

    slot_repository: SlotRepository

    def reconcile(self, slot_id: UUID) -> Slot:
        """Rewrite the slot's held gift from the ledger. Idempotent.

        The read of the newest live record and the write of the held fields
        happen in one store transaction, so an approval committing on the same
        slot cannot be overwritten with an older holder.
        """
        slot = self.slot_repository.reconcile_holding(slot_id)
        if slot is None:
            raise NotFound(f"Slot {slot_id} does not exist")
        _logger.info(
            "Reconciled slot %s: holding=%s", slot.number, slot.held_record_id
        )
        return slot
