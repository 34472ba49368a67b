"""Plain-text rendering of records.

Pure functions of the record dicts returned by the API: the same list in
always gives the same text out. Secrets are masked unless reveal=True.
"""

from typing import Any, Iterable

MASK = "••••••••"
EMPTY_SECRET = "N/A"
NO_NOTES = "No notes provided."
NO_RECORDS = "No records found."


def render_record(record: dict[str, Any], reveal: bool = False) -> str:
    secret = record.get("password") or ""
    if not secret:
        shown = EMPTY_SECRET
    elif reveal:
        shown = secret
    else:
        shown = MASK

    lines = [
        f"[{record.get('type', '')}] {record.get('name', '')}  ({record.get('_id', '')})",
        f"  ID/Number:    {record.get('idNumber', '')}",
        f"  Password/Key: {shown}",
        f"  Notes:        {record.get('notes') or NO_NOTES}",
    ]
    return "\n".join(lines)


def render_records(records: Iterable[dict[str, Any]], reveal: bool = False) -> str:
    blocks = [render_record(r, reveal=reveal) for r in records]
    if not blocks:
        return NO_RECORDS
    return "\n\n".join(blocks)
