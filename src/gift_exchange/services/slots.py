"""Slot pool access and administration."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from gift_exchange.domain.errors import Conflict, NotFound
from gift_exchange.domain.slots import Slot, SlotStatus

_logger = logging.getLogger(__name__)


class SlotRepository(Protocol):
    """Persistence interface for the slot pool."""

    def list_slots(self) -> list[Slot]:
        """Return every slot ordered by number."""

    def get_slot(self, slot_id: UUID) -> Slot | None:
        """Return a slot by id, if present."""

    def reconcile_holding(self, slot_id: UUID) -> Slot | None:
        """Copy the newest live ledger record into the held-gift fields.

        Runs as one store transaction and clears the repair flag. Returns None
        when the slot does not exist.
        """

    def set_disabled(self, slot_id: UUID, disabled: bool) -> Slot | None:
        """Toggle the disabled flag only while the slot is available."""

    def mark_needs_repair(self, slot_id: UUID) -> None:
        """Flag a slot whose cached state may disagree with the ledger."""


@dataclass
class SlotService:
    """Application service for slot listing and the disabled flag."""

    repository: SlotRepository

    def list_slots(self) -> list[Slot]:
        """Return the full pool."""
        return self.repository.list_slots()

    def get_slot(self, slot_id: UUID) -> Slot:
        """Return a slot or raise NotFound."""
        slot = self.repository.get_slot(slot_id)
        if slot is None:
            raise NotFound(f"Slot {slot_id} does not exist")
        return slot

    def set_disabled(self, slot_id: UUID, disabled: bool) -> Slot:
        """Enable or disable a slot; refused while it is claimed."""
        slot = self.get_slot(slot_id)
        if slot.status is SlotStatus.CLAIMED:
            raise Conflict(
                f"Slot {slot.number} is awaiting approval, resolve it first"
            )
        if slot.disabled == disabled:
            return slot
        updated = self.repository.set_disabled(slot_id, disabled)
        if updated is None:
            raise Conflict(f"Slot {slot.number} was claimed concurrently")
        _logger.info(
            "Slot %s %s", updated.number, "disabled" if disabled else "enabled"
        )
        return updated
