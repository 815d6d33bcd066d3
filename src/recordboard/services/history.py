"""Record supersession and history reconstruction.

Per event a list holds one current record. Breaking it creates a new current
record and demotes the old one: `is_current=False`, `superseded_by=<new id>`.
History is never stored pre-joined; every read regroups the list's rows in a
single pass.
"""

from collections import defaultdict
from collections.abc import Iterable

from recordboard.errors import ValidationFailed
from recordboard.models.record import EditableRecord, RecordWithHistory, SwimRecord


def split_current_and_history(
    records: Iterable[SwimRecord],
) -> tuple[list[SwimRecord], list[SwimRecord]]:
    """Partition rows into (current, history), preserving input order."""
    current: list[SwimRecord] = []
    history: list[SwimRecord] = []
    for record in records:
        (current if record.is_current else history).append(record)
    return current, history


def sort_history(records: Iterable[SwimRecord]) -> list[SwimRecord]:
    """Most recent `record_date` first; undated rows last, in their original order.

    Dates compare as strings. Normalized dates are zero padded, so this is
    chronological within one granularity; across granularities a bare year
    sorts before any date in that year ("2024" < "2024-01-01").
    """
    records = list(records)
    dated = sorted(
        (r for r in records if r.record_date),
        key=lambda r: r.record_date,
        reverse=True,
    )
    undated = [r for r in records if not r.record_date]
    return dated + undated


def build_history_map(records: Iterable[SwimRecord]) -> dict[str, list[SwimRecord]]:
    """Map each superseding record id to the history rows pointing at it."""
    grouped: dict[str, list[SwimRecord]] = defaultdict(list)
    for record in records:
        if not record.is_current and record.superseded_by:
            grouped[record.superseded_by].append(record)
    return {record_id: sort_history(rows) for record_id, rows in grouped.items()}


def _slot_key(record: SwimRecord) -> tuple[str, bool, bool]:
    # Split rows legitimately share an event name with the full swim
    return (record.event_name.strip().casefold(), record.is_split, record.is_relay_split)


def _recency(position: int, record: SwimRecord) -> tuple:
    created = record.created_at.isoformat() if record.created_at else ""
    return (record.record_date or "", created, position)


def resolve_duplicate_currents(
    current: list[SwimRecord],
) -> tuple[list[SwimRecord], dict[str, list[SwimRecord]]]:
    """Pick one current record per event slot when several claim to be current.

    The most recent wins: latest `record_date`, then latest `created_at`, then
    the later row. Losers are not modified; they are shown as history of the
    winner, together with whatever history they had themselves.

    Returns:
        (winners in input order, winner id -> demoted losers)
    """
    by_slot: dict[tuple[str, bool, bool], list[tuple[int, SwimRecord]]] = defaultdict(list)
    for position, record in enumerate(current):
        by_slot[_slot_key(record)].append((position, record))

    losers_by_winner: dict[str, list[SwimRecord]] = {}
    losing_positions: set[int] = set()
    for entries in by_slot.values():
        if len(entries) < 2:
            continue
        winner_pos, winner = max(entries, key=lambda e: _recency(*e))
        if not winner.id:
            continue
        losers_by_winner[winner.id] = [r for pos, r in entries if pos != winner_pos]
        losing_positions.update(pos for pos, _ in entries if pos != winner_pos)

    winners = [r for pos, r in enumerate(current) if pos not in losing_positions]
    return winners, losers_by_winner


def _collect_chain(
    record_id: str | None, history_map: dict[str, list[SwimRecord]]
) -> list[SwimRecord]:
    """Every history row reachable from `record_id` through `superseded_by` links."""
    collected: list[SwimRecord] = []
    seen: set[str] = set()
    pending = [record_id] if record_id else []
    while pending:
        for row in history_map.get(pending.pop(), []):
            if row.id and row.id in seen:
                continue
            if row.id:
                seen.add(row.id)
                pending.append(row.id)
            collected.append(row)
    return collected


def attach_history(records: Iterable[SwimRecord]) -> list[RecordWithHistory]:
    """Group a list's rows into current records with their history.

    A record broken twice keeps its whole chain: rows superseded by an
    already-superseded row are shown under today's current record. Current
    rows come back ordered by `sort_order` (stable for ties).
    """
    current, history = split_current_and_history(records)
    current.sort(key=lambda r: r.sort_order)
    history_map = build_history_map(history)
    winners, demoted = resolve_duplicate_currents(current)

    board: list[RecordWithHistory] = []
    for record in winners:
        rows = _collect_chain(record.id, history_map)
        for loser in demoted.get(record.id or "", []):
            rows.append(loser)
            rows.extend(_collect_chain(loser.id, history_map))
        board.append(RecordWithHistory(record=record, history=sort_history(rows)))
    return board


def filter_board(board: Iterable[RecordWithHistory], query: str | None) -> list[RecordWithHistory]:
    """Keep entries whose current record's event, swimmer or location contains `query`.

    Case-insensitive substring match; history rows are not searched. A blank
    query keeps the whole board.
    """
    needle = (query or "").strip().casefold()
    if not needle:
        return list(board)

    def matches(record: SwimRecord) -> bool:
        haystack = (record.event_name, record.swimmer_name, record.location or "")
        return any(needle in field.casefold() for field in haystack)

    return [entry for entry in board if matches(entry.record)]


def break_record(record: SwimRecord) -> EditableRecord:
    """Start breaking a current record.

    Returns the placeholder for the new record: same event and position,
    no time or swimmer yet, flagged as new. The old record is only demoted
    when the placeholder is saved (see `supersede_fields`).

    Raises:
        ValidationFailed: record is unsaved or already superseded
    """
    if not record.id:
        raise ValidationFailed("Can't break a record that hasn't been saved yet")
    if not record.is_current:
        raise ValidationFailed("This record has already been broken")

    return EditableRecord(
        event_name=record.event_name,
        sort_order=record.sort_order,
        is_new=True,
        breaks_record_id=record.id,
    )


def supersede_fields(new_record_id: str) -> dict:
    """Update applied to the old record once its replacement has an id.

    Only these two fields change; the old row keeps its time, swimmer and flags.
    """
    return {"is_current": False, "superseded_by": new_record_id}
