"""Domain models for claims awaiting approval."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from gift_exchange.domain.ledger import (
    GiftType,
    HolderSnapshot,
    LedgerRecord,
    VisitorDetails,
)
from gift_exchange.domain.slots import Slot


class PreferenceMode(str, Enum):
    """Visitor preference relative to the gift currently in a slot."""

    MATCH = "match"
    DIFFER = "differ"
    RANDOM = "random"


class ClaimStatus(str, Enum):
    """Status reported to a polling kiosk."""

    PENDING = "pending"
    PROCESSED = "processed"


@dataclass(frozen=True)
class NewClaim:
    """Payload for opening a claim on a slot."""

    slot_id: UUID
    gift_type: GiftType
    visitor: VisitorDetails
    previous_holder: HolderSnapshot | None
    preference_satisfied: bool
    created_at: datetime


@dataclass(frozen=True)
class PendingClaim:
    """A claimed slot waiting for the reviewer."""

    id: UUID
    slot_id: UUID
    slot_number: int
    gift_type: GiftType
    visitor: VisitorDetails
    previous_holder: HolderSnapshot | None
    preference_satisfied: bool
    created_at: datetime


@dataclass(frozen=True)
class Candidate:
    """An eligible slot together with what it currently holds."""

    slot: Slot
    holder: HolderSnapshot | None


@dataclass(frozen=True)
class PreviewResult:
    """Eligible slots for a visitor's preference."""

    preference_satisfied: bool
    tier: str
    candidates: list[Candidate]


@dataclass(frozen=True)
class ApprovalResult:
    """A finalized exchange ready for receipt printing."""

    record: LedgerRecord
    slot_number: int
    previous_holder: HolderSnapshot | None
