"""Data Access Object for records."""

from supabase import Client

from recordboard.dao.base import BaseDAO
from recordboard.models.record import FLAG_NAMES, SwimRecord


class RecordDAO(BaseDAO[SwimRecord]):
    """DAO for SwimRecord entities, current and historical."""

    table_name = "records"
    model_class = SwimRecord

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def find_by_list(self, record_list_id: str) -> list[SwimRecord]:
        """Every row of a list, current and history, in display order."""
        result = self._run(
            self.table.select("*")
            .eq("record_list_id", record_list_id)
            .order("sort_order")
        )
        return [self._to_model(row) for row in result.data]

    def find_by_lists(self, record_list_ids: list[str]) -> list[SwimRecord]:
        """Rows of several lists in one request (used by export)."""
        if not record_list_ids:
            return []
        result = self._run(
            self.table.select("*")
            .in_("record_list_id", record_list_ids)
            .order("sort_order")
        )
        return [self._to_model(row) for row in result.data]

    def _to_model(self, row: dict) -> SwimRecord:
        """Convert a row, defaulting legacy NULL flags.

        Rows written before history existed have `is_current` NULL; they are
        current. This is the only place that rule lives.
        """
        return SwimRecord(
            id=str(row["id"]),
            record_list_id=str(row["record_list_id"]) if row.get("record_list_id") else None,
            event_name=row["event_name"],
            time_ms=row.get("time_ms") or 0,
            swimmer_name=row.get("swimmer_name") or "",
            record_date=row.get("record_date"),
            location=row.get("location"),
            sort_order=row.get("sort_order") or 0,
            is_current=row.get("is_current") is not False,
            superseded_by=str(row["superseded_by"]) if row.get("superseded_by") else None,
            created_at=row.get("created_at"),
            **{name: bool(row.get(name)) for name in FLAG_NAMES},
        )

    def _to_db(self, model: SwimRecord) -> dict:
        data = {
            "record_list_id": model.record_list_id,
            "event_name": model.event_name,
            "time_ms": model.time_ms,
            "swimmer_name": model.swimmer_name,
            "record_date": model.record_date,
            "location": model.location,
            "sort_order": model.sort_order,
            "is_current": model.is_current,
            "superseded_by": model.superseded_by,
        }
        data.update({name: getattr(model, name) for name in FLAG_NAMES})
        if model.id:
            data["id"] = model.id
        return data
