"""Domain models for the physical slot pool."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from gift_exchange.domain.ledger import GiftType


class SlotStatus(str, Enum):
    """Availability of a slot."""

    AVAILABLE = "available"
    CLAIMED = "claimed"


@dataclass(frozen=True)
class Slot:
    """One physical position in the fixed-size pool."""

    id: UUID
    number: int
    status: SlotStatus
    held_gift_type: GiftType | None
    held_record_id: UUID | None
    disabled: bool = False
    needs_repair: bool = False
    updated_at: datetime | None = None

    @property
    def is_selectable(self) -> bool:
        """Return true when the slot may enter the claimed state."""
        return self.status is SlotStatus.AVAILABLE and not self.disabled
