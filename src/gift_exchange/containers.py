"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from gift_exchange.adapters.receipt_printer_client import HttpxReceiptPrinter
from gift_exchange.adapters.supabase_claim_repository import SupabaseClaimRepository
from gift_exchange.adapters.supabase_ledger_repository import (
    SupabaseLedgerRepository,
)
from gift_exchange.adapters.supabase_pool_repository import SupabasePoolRepository
from gift_exchange.adapters.supabase_slot_repository import SupabaseSlotRepository
from gift_exchange.config import Settings, parse_optional_url
from gift_exchange.services.admission import AdmissionGate
from gift_exchange.services.allocation import AllocationService
from gift_exchange.services.ledger import LedgerService
from gift_exchange.services.pool import PoolService
from gift_exchange.services.receipts import (
    DisabledReceiptPrinter,
    ReceiptPrinter,
    ReceiptService,
)
from gift_exchange.services.reconciler import StateReconciler
from gift_exchange.services.slots import SlotService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    slot_service: SlotService
    allocation_service: AllocationService
    ledger_service: LedgerService
    reconciler: StateReconciler
    admission_gate: AdmissionGate
    pool_service: PoolService
    receipt_service: ReceiptService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    slot_repository = SupabaseSlotRepository(supabase_client)
    ledger_repository = SupabaseLedgerRepository(supabase_client)
    claim_repository = SupabaseClaimRepository(supabase_client)
    pool_repository = SupabasePoolRepository(supabase_client)
    reconciler = StateReconciler(slot_repository=slot_repository)
    allocation_service = AllocationService(
        slot_repository=slot_repository,
        ledger_repository=ledger_repository,
        claim_repository=claim_repository,
        exclusion_window=resolved_settings.exclusion_window,
        message_max_length=resolved_settings.message_max_length,
        pending_claim_ttl_seconds=resolved_settings.pending_claim_ttl_seconds,
    )
    ledger_service = LedgerService(
        repository=ledger_repository,
        slot_repository=slot_repository,
        reconciler=reconciler,
        message_max_length=resolved_settings.message_max_length,
    )
    pool_service = PoolService(
        repository=pool_repository,
        claim_repository=claim_repository,
        pool_size=resolved_settings.pool_size,
        message_max_length=resolved_settings.message_max_length,
    )
    printer_url = parse_optional_url(resolved_settings.receipt_printer_url)
    http_printer = (
        HttpxReceiptPrinter.create(
            printer_url,
            timeout_seconds=resolved_settings.receipt_printer_timeout_seconds,
        )
        if printer_url
        else None
    )
    printer: ReceiptPrinter = http_printer or DisabledReceiptPrinter()

    async def close_resources() -> None:
        if http_printer is not None:
            await http_printer.close()

    return AppContainer(
        settings=resolved_settings,
        slot_service=SlotService(slot_repository),
        allocation_service=allocation_service,
        ledger_service=ledger_service,
        reconciler=reconciler,
        admission_gate=AdmissionGate(claim_repository),
        pool_service=pool_service,
        receipt_service=ReceiptService(printer),
        close_resources=close_resources,
    )
