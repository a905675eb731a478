"""Domain models for the finalized exchange ledger."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class GiftType(str, Enum):
    """Category of a deposited gift."""

    A = "A"
    B = "B"
    C = "C"


@dataclass(frozen=True)
class VisitorDetails:
    """Identity and contact fields supplied by a visitor."""

    name: str
    message: str = ""
    line_id: str | None = None
    instagram: str | None = None


@dataclass(frozen=True)
class HolderSnapshot:
    """Frozen copy of the ledger record that deposited a slot's gift."""

    record_id: UUID
    sequence_number: int
    visitor_sequence_number: int | None
    gift_type: GiftType
    message: str
    name: str
    line_id: str | None
    instagram: str | None

    def to_dict(self) -> dict[str, object]:
        """Serialize the snapshot for storage and responses."""
        return {
            "record_id": str(self.record_id),
            "sequence_number": self.sequence_number,
            "visitor_sequence_number": self.visitor_sequence_number,
            "gift_type": self.gift_type.value,
            "message": self.message,
            "name": self.name,
            "line_id": self.line_id,
            "instagram": self.instagram,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "HolderSnapshot":
        """Rebuild a snapshot stored as JSON."""
        visitor_number = payload.get("visitor_sequence_number")
        return cls(
            record_id=UUID(str(payload["record_id"])),
            sequence_number=int(payload["sequence_number"]),
            visitor_sequence_number=(
                int(visitor_number) if visitor_number is not None else None
            ),
            gift_type=GiftType(payload["gift_type"]),
            message=str(payload.get("message") or ""),
            name=str(payload.get("name") or ""),
            line_id=payload.get("line_id"),
            instagram=payload.get("instagram"),
        )


@dataclass(frozen=True)
class LedgerRecord:
    """One finalized visitor exchange or staff seed gift."""

    id: UUID
    sequence_number: int
    visitor_sequence_number: int | None
    is_seed: bool
    gift_type: GiftType
    message: str
    name: str
    line_id: str | None
    instagram: str | None
    slot_id: UUID
    created_at: datetime
    finalized_at: datetime
    is_retracted: bool = False
    retracted_at: datetime | None = None

    def snapshot(self) -> HolderSnapshot:
        """Return a denormalized copy for display and printing."""
        return HolderSnapshot(
            record_id=self.id,
            sequence_number=self.sequence_number,
            visitor_sequence_number=self.visitor_sequence_number,
            gift_type=self.gift_type,
            message=self.message,
            name=self.name,
            line_id=self.line_id,
            instagram=self.instagram,
        )


@dataclass(frozen=True)
class RecordChanges:
    """Field-level administrative edit of a ledger record."""

    gift_type: GiftType | None = None
    message: str | None = None
    name: str | None = None
    line_id: str | None = None
    instagram: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Return only the fields that were supplied."""
        payload: dict[str, object] = {}
        if self.gift_type is not None:
            payload["gift_type"] = self.gift_type.value
        if self.message is not None:
            payload["message"] = self.message
        if self.name is not None:
            payload["name"] = self.name
        if self.line_id is not None:
            payload["line_id"] = self.line_id or None
        if self.instagram is not None:
            payload["instagram"] = self.instagram or None
        return payload


@dataclass(frozen=True)
class LedgerCounters:
    """Last issued values of the two sequence generators."""

    sequence_number: int
    visitor_sequence_number: int


@dataclass(frozen=True)
class RecordQuery:
    """Paginated ledger search."""

    page: int = 1
    page_size: int = 50
    search: str = ""
    sort_by: str = "visitor_sequence_number"
    descending: bool = True


@dataclass(frozen=True)
class RecordPage:
    """One page of ledger records."""

    records: list[LedgerRecord]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Return the page count for the query."""
        return -(-self.total // self.page_size) if self.page_size else 0
