"""Pool initialization and reset."""

import logging
import random
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from gift_exchange.domain.errors import Conflict, ValidationFailed
from gift_exchange.domain.ledger import GiftType, VisitorDetails
from gift_exchange.domain.slots import Slot
from gift_exchange.services.allocation import ClaimRepository

_logger = logging.getLogger(__name__)

_SEED_MESSAGES = (
    "Hope you like it",
    "Have a lovely day",
    "Picked with care",
    "Enjoy the surprise",
    "Made just for you",
    "Hope it brings joy",
    "A special one",
    "Happy holidays",
    "Happy new year",
    "For someone great",
)


@dataclass(frozen=True)
class SeedGift:
    """A bootstrap gift placed by staff before the event starts."""

    gift_type: GiftType
    visitor: VisitorDetails


class PoolRepository(Protocol):
    """Persistence interface for whole-pool operations."""

    def count_slots(self) -> int:
        """Return the number of slots."""

    def count_records(self) -> int:
        """Return the number of ledger records, retracted included."""

    def seed_pool(self, gifts: list[SeedGift], finalized_at: datetime) -> list[Slot]:
        """Create slots 1..N with one seed record each, atomically."""

    def clear_pool(self) -> None:
        """Delete every slot, record and pending claim and reset counters."""


def random_seed_gifts(count: int, rng: random.Random | None = None) -> list[SeedGift]:
    """Generate placeholder seed gifts for rehearsals."""
    source = rng or random.Random()
    types = list(GiftType)
    return [
        SeedGift(
            gift_type=source.choice(types),
            visitor=VisitorDetails(
                name=f"Test visitor {index}",
                message=source.choice(_SEED_MESSAGES),
                line_id=f"line_user_{index}",
                instagram=f"ig_user_{index}",
            ),
        )
        for index in range(1, count + 1)
    ]


@dataclass
class PoolService:
    """Bootstraps and clears the fixed-size slot pool."""

    repository: PoolRepository
    claim_repository: ClaimRepository
    pool_size: int = 30
    message_max_length: int = 20
    rng: random.Random = field(default_factory=random.Random)

    def initialize(self, mode: str, gifts: list[SeedGift] | None = None) -> list[Slot]:
        """Create the pool with seed gifts, either generated or supplied."""
        if mode == "random":
            seed_gifts = random_seed_gifts(self.pool_size, self.rng)
        elif mode == "manual":
            seed_gifts = self._validate_manual(gifts or [])
        else:
            raise ValidationFailed("Initialization mode must be random or manual")
        if self.repository.count_slots() or self.repository.count_records():
            raise Conflict("The pool already has data, reset it first")
        slots = self.repository.seed_pool(seed_gifts, datetime.now(tz=UTC))
        _logger.info("Initialized pool with %s slots (%s)", len(slots), mode)
        return slots

    def reset(self) -> None:
        """Clear all event data; refused while a claim awaits approval."""
        outstanding = len(self.claim_repository.list_pending())
        if outstanding:
            raise Conflict(
                f"Cannot reset: {outstanding} claims are awaiting approval"
            )
        self.repository.clear_pool()
        _logger.info("Pool reset")

    def _validate_manual(self, gifts: list[SeedGift]) -> list[SeedGift]:
        if len(gifts) != self.pool_size:
            raise ValidationFailed(f"Exactly {self.pool_size} seed gifts are required")
        for index, gift in enumerate(gifts, start=1):
            if not gift.visitor.name.strip():
                raise ValidationFailed(f"Seed gift {index} is missing a name")
            if len(gift.visitor.message) > self.message_max_length:
                raise ValidationFailed(f"Seed gift {index} message is too long")
        return gifts
