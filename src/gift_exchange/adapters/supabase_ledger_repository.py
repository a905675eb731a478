"""Supabase-backed ledger repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from gift_exchange.adapters.supabase_rows import RECORD_COLUMNS, parse_record
from gift_exchange.domain.ledger import (
    LedgerCounters,
    LedgerRecord,
    RecordPage,
    RecordQuery,
)
from gift_exchange.services.ledger import LedgerRepository

# Recent records scanned per requested slot when collecting distinct slots.
_RECENT_LOOKBACK = 4


def _quoted(value: str) -> str:
    """Quote a logic-filter value so PostgREST reads reserved characters literally."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase implementation for the exchange ledger."""

    client: Client

    def get_record(self, record_id: UUID) -> LedgerRecord | None:
        """Return a record by id."""
        response = (
            self.client.table("ledger_records")
            .select(RECORD_COLUMNS)
            .eq("id", str(record_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_record(response.data[0])

    def latest_for_slot(self, slot_id: UUID) -> LedgerRecord | None:
        """Return the newest live record for a slot."""
        response = (
            self.client.table("ledger_records")
            .select(RECORD_COLUMNS)
            .eq("slot_id", str(slot_id))
            .eq("is_retracted", False)
            .order("finalized_at", desc=True)
            .order("sequence_number", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_record(response.data[0])

    def previous_for_record(self, record: LedgerRecord) -> LedgerRecord | None:
        """Return the live record on the same slot finalized before this one."""
        response = (
            self.client.table("ledger_records")
            .select(RECORD_COLUMNS)
            .eq("slot_id", str(record.slot_id))
            .eq("is_retracted", False)
            .lt("finalized_at", record.finalized_at.isoformat())
            .order("finalized_at", desc=True)
            .order("sequence_number", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_record(response.data[0])

    def recent_visitor_slot_ids(self, limit: int) -> list[UUID]:
        """Return distinct slots of the newest live visitor records."""
        if limit <= 0:
            return []
        response = (
            self.client.table("ledger_records")
            .select("slot_id")
            .eq("is_seed", False)
            .eq("is_retracted", False)
            .order("finalized_at", desc=True)
            .limit(limit * _RECENT_LOOKBACK)
            .execute()
        )
        slot_ids: list[UUID] = []
        for row in response.data or []:
            slot_id = UUID(str(row["slot_id"]))
            if slot_id not in slot_ids:
                slot_ids.append(slot_id)
            if len(slot_ids) >= limit:
                break
        return slot_ids

    def search_records(self, query: RecordQuery) -> RecordPage:
        """Return a page of live records, optionally filtered by name or number."""
        request = (
            self.client.table("ledger_records")
            .select(RECORD_COLUMNS, count="exact")
            .eq("is_retracted", False)
        )
        search = query.search.strip()
        if search:
            filters = [f"name.ilike.{_quoted(f'*{search}*')}"]
            if search.isdigit():
                filters.append(f"visitor_sequence_number.eq.{search}")
                filters.append(f"sequence_number.eq.{search}")
            request = request.or_(",".join(filters))
        start = (query.page - 1) * query.page_size
        response = (
            request.order(query.sort_by, desc=query.descending)
            .range(start, start + query.page_size - 1)
            .execute()
        )
        return RecordPage(
            records=[parse_record(row) for row in response.data or []],
            total=response.count or 0,
            page=query.page,
            page_size=query.page_size,
        )

    def update_record(
        self, record_id: UUID, payload: dict[str, object]
    ) -> LedgerRecord:
        """Apply field changes to a record."""
        response = (
            self.client.table("ledger_records")
            .update(payload)
            .eq("id", str(record_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update ledger record")
        return parse_record(response.data[0])

    def retract_record(
        self, record_id: UUID, retracted_at: datetime
    ) -> LedgerRecord | None:
        """Soft-delete a record, conditioned on it still being live."""
        response = (
            self.client.table("ledger_records")
            .update({"is_retracted": True, "retracted_at": retracted_at.isoformat()})
            .eq("id", str(record_id))
            .eq("is_retracted", False)
            .execute()
        )
        if not response.data:
            return None
        return parse_record(response.data[0])

    def count_visitor_records(self) -> int:
        """Return the number of live visitor records."""
        response = (
            self.client.table("ledger_records")
            .select("id", count="exact")
            .eq("is_seed", False)
            .eq("is_retracted", False)
            .execute()
        )
        return response.count or 0

    def counters(self) -> LedgerCounters:
        """Return the last issued values of both sequence generators."""
        response = (
            self.client.table("exchange_counters").select("name, value").execute()
        )
        values = {row["name"]: int(row["value"]) for row in response.data or []}
        return LedgerCounters(
            sequence_number=values.get("sequence_number", 0),
            visitor_sequence_number=values.get("visitor_sequence_number", 0),
        )
