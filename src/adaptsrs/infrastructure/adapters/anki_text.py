"""
Codec for Anki's delimited-text notes format.

Reads the header directives (#separator and the deck, tags, guid and notetype
columns) and quote-aware rows; writes the semicolon-separated layout Anki imports:

    #separator:semicolon
    #html:true
    #deck column:1
    #tags column:4
    "Deck::Sub";"front";"back";"tag1 tag2"
"""

import logging
from dataclasses import dataclass

from adaptsrs.domain.constants import DEFAULT_IMPORT_DECK
from adaptsrs.domain.models import AnkiRow

logger = logging.getLogger(__name__)

SEPARATOR_NAMES = {
    "tab": "\t",
    "comma": ",",
    "semicolon": ";",
    "space": " ",
    "pipe": "|",
}

EXPORT_HEADER = [
    "#separator:semicolon",
    "#html:true",
    "#deck column:1",
    "#tags column:4",
]


@dataclass
class _Layout:
    separator: str = ";"
    deck_index: int | None = 0  # 0-based
    tags_index: int | None = 3
    guid_index: int | None = None
    notetype_index: int | None = None


def parse_anki_export(content: str) -> list[AnkiRow]:
    """
    Parse an Anki text export into rows.

    Rows with a single field are skipped. Two-field rows are (front, back)
    in the import deck without tags.
    """
    lines = content.lstrip("\ufeff").split("\n")
    layout, header_lines = _read_header(lines)
    body = "\n".join(lines[header_lines:])

    rows: list[AnkiRow] = []
    skipped = 0
    for fields in _split_records(body, layout.separator):
        if fields == [""]:
            continue
        if len(fields) < 2:
            skipped += 1
            continue
        rows.append(_map_fields(fields, layout))

    if skipped:
        logger.warning(f"Skipped {skipped} row(s) with fewer than two fields")
    return rows


def _read_header(lines: list[str]) -> tuple[_Layout, int]:
    layout = _Layout()
    consumed = 0
    for line in lines:
        stripped = line.strip()
        if stripped == "":
            consumed += 1
            continue
        if not stripped.startswith("#"):
            break

        consumed += 1
        key, _, value = stripped[1:].partition(":")
        key = key.strip().lower()
        value = value.strip()

        if key == "separator":
            layout.separator = SEPARATOR_NAMES.get(value.lower(), value) or ";"
        elif key == "deck column":
            layout.deck_index = _column_index(value)
        elif key == "tags column":
            layout.tags_index = _column_index(value)
        elif key == "guid column":
            layout.guid_index = _column_index(value)
        elif key == "notetype column":
            layout.notetype_index = _column_index(value)

    return layout, consumed


def _column_index(value: str) -> int | None:
    try:
        return int(value) - 1
    except ValueError:
        logger.warning(f"Ignoring non-numeric column directive: {value!r}")
        return None


def _split_records(text: str, separator: str) -> list[list[str]]:
    """
    Split into records of fields, honouring quotes and "" escapes.

    Unquoted fields are trimmed. Quoted fields keep their inner text verbatim;
    only whitespace outside the quotes is dropped.
    """
    records: list[list[str]] = []
    fields: list[str] = []
    field: list[str] = []
    in_quotes = False
    quoted = False
    i = 0

    def finish() -> str:
        value = "".join(field)
        return value if quoted else value.strip()

    while i < len(text):
        char = text[i]
        if char == '"':
            if in_quotes and i + 1 < len(text) and text[i + 1] == '"':
                field.append('"')
                i += 1
            elif in_quotes:
                in_quotes = False
            else:
                if not quoted and not "".join(field).strip():
                    field = []
                in_quotes = quoted = True
        elif char == separator and not in_quotes:
            fields.append(finish())
            field, quoted = [], False
        elif char == "\n" and not in_quotes:
            fields.append(finish())
            records.append(fields)
            fields, field, quoted = [], [], False
        elif char == "\r" and not in_quotes:
            pass
        elif quoted and not in_quotes and char.isspace():
            pass
        else:
            field.append(char)
        i += 1

    if field or fields or quoted:
        fields.append(finish())
        records.append(fields)

    return records


def _map_fields(fields: list[str], layout: _Layout) -> AnkiRow:
    if len(fields) == 2:
        return AnkiRow(deck_path=DEFAULT_IMPORT_DECK, front=fields[0], back=fields[1])

    special = {
        layout.deck_index,
        layout.tags_index,
        layout.guid_index,
        layout.notetype_index,
    }
    content = [f for i, f in enumerate(fields) if i not in special]
    front = content[0] if content else ""
    back = content[1] if len(content) > 1 else ""

    deck_path = _field_at(fields, layout.deck_index) or DEFAULT_IMPORT_DECK
    raw_tags = _field_at(fields, layout.tags_index)
    tags = [t for t in raw_tags.split(" ") if t.strip()] if raw_tags else []

    return AnkiRow(deck_path=deck_path, front=front, back=back, tags=tags)


def _field_at(fields: list[str], index: int | None) -> str:
    if index is None or index < 0 or index >= len(fields):
        return ""
    return fields[index]


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def render_anki_export(rows: list[AnkiRow]) -> str:
    """Render rows with the export header; tags are space-joined."""
    lines = list(EXPORT_HEADER)
    for row in rows:
        lines.append(
            ";".join(
                _quote(v) for v in (row.deck_path, row.front, row.back, " ".join(row.tags))
            )
        )
    return "\n".join(lines)
