"""Spreadsheet URL parsing and A1 notation helpers."""

import re
from typing import NamedTuple
from urllib.parse import parse_qs, urlsplit

from sheets_mcp.exceptions import InvalidSpreadsheetUrlError

_SPREADSHEET_PATH = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_FRAGMENT_GID = re.compile(r"gid=(\d+)")
_PLAIN_SHEET_NAME = re.compile(r"^[A-Za-z0-9_]+$")
_CELL_LIKE_NAME = re.compile(r"^([A-Za-z]{1,3}\d+|[Rr]\d*[Cc]\d*)$")
_QUOTED_SHEET_NAME = re.compile(r"^'(?:[^']|'')+'$")


class ParsedSpreadsheet(NamedTuple):
    spreadsheet_id: str
    gid: str | None = None


def parse_spreadsheet_input(value: str) -> ParsedSpreadsheet:
    """Accept a bare spreadsheet ID or a full Google Sheets URL.

    The gid comes from the ``gid`` query parameter when present, otherwise
    from a ``#gid=<digits>`` fragment.
    """
    value = (value or "").strip()
    if not value:
        raise InvalidSpreadsheetUrlError("Spreadsheet ID or URL is required")
    if not value.startswith(("http://", "https://")):
        return ParsedSpreadsheet(value)

    parts = urlsplit(value)
    match = _SPREADSHEET_PATH.search(parts.path)
    if not match:
        raise InvalidSpreadsheetUrlError(
            "Invalid Google Sheets URL. Expected format: "
            "https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit"
        )

    gid = None
    query_gid = parse_qs(parts.query).get("gid")
    if query_gid:
        gid = query_gid[0]
    else:
        fragment = _FRAGMENT_GID.match(parts.fragment)
        if fragment:
            gid = fragment.group(1)
    return ParsedSpreadsheet(match.group(1), gid)


def column_index_to_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA (bijective base 26)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letters = ""
    while index >= 0:
        letters = chr(index % 26 + ord("A")) + letters
        index = index // 26 - 1
    return letters


def column_letter_to_index(letters: str) -> int:
    """A -> 0, Z -> 25, AA -> 26."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def cell_ref(row_index: int, column_index: int) -> str:
    return f"{column_index_to_letter(column_index)}{row_index + 1}"


def quote_sheet_name(sheet_name: str) -> str:
    """Quote a sheet name for A1 notation unless it is already safe or quoted.

    Names that read as cell references (``A1``, ``R1C1``) are quoted too.
    """
    if _PLAIN_SHEET_NAME.match(sheet_name) and not _CELL_LIKE_NAME.match(sheet_name):
        return sheet_name
    if _QUOTED_SHEET_NAME.match(sheet_name):
        return sheet_name
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'"


def build_a1_notation(sheet_name: str, cell_range: str | None = None) -> str:
    """Build a range such as ``Sheet1!A1:B10`` or ``'My Sheet'!A:A``."""
    name = quote_sheet_name(sheet_name)
    if not cell_range:
        return name
    return f"{name}!{cell_range}"
