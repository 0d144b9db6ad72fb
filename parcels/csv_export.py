"""
CSV rendering for the parcels export endpoint.

Fixed five-column layout. Quoting follows RFC 4180: a field containing a
comma, double quote, CR or LF is wrapped in double quotes and embedded quotes
are doubled; None renders as an empty field.
"""

from typing import Any, Dict, Iterable

CSV_COLUMNS = ("sl_uuid", "address", "county", "sqft", "total_value")

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def escape_csv_value(value: Any) -> str:
    """Escape a single value as one CSV field."""
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def render_csv_line(row: Dict[str, Any]) -> str:
    return ",".join(escape_csv_value(row.get(col)) for col in CSV_COLUMNS)


def render_parcels_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """Header line plus one line per row, newline-terminated."""
    lines = [",".join(CSV_COLUMNS)]
    lines.extend(render_csv_line(row) for row in rows)
    return "\n".join(lines) + "\n"
