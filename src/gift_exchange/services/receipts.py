"""Receipt printing for finalized exchanges."""

import logging
from dataclasses import dataclass
from typing import Protocol

from gift_exchange.domain.claims import ApprovalResult

_logger = logging.getLogger(__name__)


class ReceiptPrinter(Protocol):
    """Interface for the physical receipt printer bridge."""

    async def print_receipt(self, payload: dict[str, object]) -> bool:
        """Print a receipt and report whether it succeeded."""


class DisabledReceiptPrinter:
    """Printer used when no printer bridge is configured."""

    async def print_receipt(self, payload: dict[str, object]) -> bool:
        """Report failure without printing."""
        return False


def build_receipt(result: ApprovalResult) -> dict[str, object]:
    """Build the receipt payload for an approved exchange."""
    record = result.record
    return {
        "previous_holder": (
            result.previous_holder.to_dict() if result.previous_holder else None
        ),
        "current_participant": {
            "sequence_number": record.sequence_number,
            "visitor_sequence_number": record.visitor_sequence_number,
            "slot_number": result.slot_number,
            "gift_type": record.gift_type.value,
        },
    }


@dataclass
class ReceiptService:
    """Sends approved exchanges to the receipt printer."""

    printer: ReceiptPrinter

    async def print_approval(self, result: ApprovalResult) -> bool:
        """Print the receipt for an approval; failures are logged, not raised."""
        if result.previous_holder is None:
            _logger.warning(
                "No previous holder to print for record %s",
                result.record.sequence_number,
            )
            return False
        try:
            printed = await self.printer.print_receipt(build_receipt(result))
        except Exception:
            _logger.exception(
                "Receipt printing failed for record %s", result.record.sequence_number
            )
            return False
        if not printed:
            _logger.warning(
                "Printer rejected receipt for record %s", result.record.sequence_number
            )
        return printed
