"""Preference matching with tiered constraint relaxation."""

import random
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from uuid import UUID

from gift_exchange.domain.claims import PreferenceMode
from gift_exchange.domain.errors import ResourceExhausted
from gift_exchange.domain.ledger import GiftType
from gift_exchange.domain.slots import Slot

SlotPredicate = Callable[[Slot], bool]


@dataclass(frozen=True)
class Tier:
    """One relaxation step: a name and the predicate a slot must satisfy."""

    name: str
    predicate: SlotPredicate


@dataclass(frozen=True)
class Selection:
    """Result of running the selector over a pool snapshot."""

    preference_satisfied: bool
    tier: str
    candidates: list[Slot]


def matches_preference(
    held_gift_type: GiftType | None, desired: GiftType, mode: PreferenceMode
) -> bool:
    """Return true when a held gift satisfies the visitor's preference.

    A slot that has never held a gift has no type and satisfies neither
    ``match`` nor ``differ``.
    """
    if mode is PreferenceMode.RANDOM:
        return True
    if held_gift_type is None:
        return False
    if mode is PreferenceMode.MATCH:
        return held_gift_type == desired
    return held_gift_type != desired


def excluded_slot_ids(recent_slot_ids: Sequence[UUID], window: int) -> set[UUID]:
    """Return the distinct slots among the ``window`` most recent finalizations."""
    excluded: set[UUID] = set()
    for slot_id in recent_slot_ids:
        if len(excluded) >= window:
            break
        excluded.add(slot_id)
    return excluded


def _outside(excluded: set[UUID]) -> SlotPredicate:
    return lambda slot: slot.is_selectable and slot.id not in excluded


def iter_tiers(
    desired: GiftType,
    mode: PreferenceMode,
    window: int,
    recent_slot_ids: Sequence[UUID],
) -> Iterator[Tier]:
    """Yield relaxation tiers in the order they must be tried.

    Windows wider than the number of distinct recent slots exclude the same
    set, so the window is clamped to that count before narrowing.
    """
    window = min(max(window, 0), len(set(recent_slot_ids)))
    excluded = excluded_slot_ids(recent_slot_ids, window)
    outside = _outside(excluded)
    yield Tier(
        "preferred",
        lambda slot: outside(slot)
        and matches_preference(slot.held_gift_type, desired, mode),
    )
    if mode is not PreferenceMode.RANDOM:
        yield Tier("any-type", outside)
    for narrowed in range(window - 1, -1, -1):
        yield Tier(
            f"window-{narrowed}",
            _outside(excluded_slot_ids(recent_slot_ids, narrowed)),
        )
    yield Tier("open", lambda slot: slot.is_selectable)


def select(
    slots: Sequence[Slot],
    desired: GiftType,
    mode: PreferenceMode,
    window: int,
    recent_slot_ids: Sequence[UUID] = (),
) -> Selection:
    """Return the first non-empty tier of eligible slots.

    Never mutates slots. Raises ResourceExhausted only when no slot is
    available and enabled.
    """
    for index, tier in enumerate(iter_tiers(desired, mode, window, recent_slot_ids)):
        candidates = [slot for slot in slots if tier.predicate(slot)]
        if candidates:
            satisfied = mode is PreferenceMode.RANDOM or index == 0
            return Selection(
                preference_satisfied=satisfied,
                tier=tier.name,
                candidates=candidates,
            )
    raise ResourceExhausted("All slots are occupied, please wait")


def choose(candidates: Sequence[Slot], rng: random.Random | None = None) -> Slot:
    """Pick one candidate uniformly at random."""
    if not candidates:
        raise ResourceExhausted("No candidate slots to choose from")
    return (rng or random).choice(list(candidates))
