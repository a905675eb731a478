"""Pydantic models for request payloads."""

from uuid import UUID

from pydantic import BaseModel, Field

from gift_exchange.domain.claims import PreferenceMode
from gift_exchange.domain.ledger import GiftType, RecordChanges, VisitorDetails
from gift_exchange.services.pool import SeedGift


class VisitorPayload(BaseModel):
    """Visitor identity and contact fields."""

    name: str = Field(min_length=1)
    message: str = ""
    line_id: str | None = None
    instagram: str | None = None

    def to_domain(self) -> VisitorDetails:
        return VisitorDetails(
            name=self.name.strip(),
            message=self.message,
            line_id=self.line_id or None,
            instagram=self.instagram or None,
        )


class ClaimRequest(VisitorPayload):
    """Kiosk request to claim a previewed slot."""

    slot_id: UUID
    gift_type: GiftType
    preference_mode: PreferenceMode = PreferenceMode.RANDOM


class RecordEditRequest(BaseModel):
    """Administrative field edit; the slot cannot be changed here."""

    gift_type: GiftType | None = None
    message: str | None = None
    name: str | None = None
    line_id: str | None = None
    instagram: str | None = None

    def to_domain(self) -> RecordChanges:
        return RecordChanges(
            gift_type=self.gift_type,
            message=self.message,
            name=self.name,
            line_id=self.line_id,
            instagram=self.instagram,
        )


class SeedGiftPayload(VisitorPayload):
    """One staff-provided seed gift."""

    gift_type: GiftType

    def to_seed(self) -> SeedGift:
        return SeedGift(gift_type=self.gift_type, visitor=self.to_domain())


class PoolInitRequest(BaseModel):
    """Pool initialization request."""

    mode: str = "random"
    gifts: list[SeedGiftPayload] | None = None


class DisableRequest(BaseModel):
    """Toggle for a slot's disabled flag."""

    disabled: bool


class PasswordRequest(BaseModel):
    """Admin password check."""

    password: str
