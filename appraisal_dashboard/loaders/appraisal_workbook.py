"""
Loader for the 360° appraisal response workbook.

Source: VGG_360_Reorganized.xlsx (local file or static URL)

Structure per sheet:
    Row 1: question header (ignored)
    Row 2 onward: one survey response per row, columns A-W laid out as in
    config.COLUMN_SCHEMA. Manager name is in column C.

Sheets differ only in rating encoding: one uses text labels ("Always",
"Most times", ...), the other numeric strings ("1".."4"). Both are read
through the same column schema.
"""

import io
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import openpyxl
import requests

from ..config import (
    ANCHOR_FIELDS,
    COLUMN_SCHEMA,
    MANAGER_COLUMN,
    MIN_ROW_CELLS,
    REQUEST_TIMEOUT,
    WORKBOOK_FILE,
    WORKBOOK_URL,
)
from ..exceptions import DataUnavailableError
from ..models import AppraisalResponse
from .utils import clean_text, normalise_date, parse_score

logger = logging.getLogger(__name__)

# Column kind -> cell parser
_PARSERS = {
    "timestamp": normalise_date,
    "relationship": clean_text,
    "score": parse_score,
    "text": clean_text,
}


# ---------------------------------------------------------------------------
# Row extraction
# ---------------------------------------------------------------------------

def extract_response(
    row: Sequence[Any] | None,
    sheet_name: str,
    row_idx: int,
    response_number: int,
) -> AppraisalResponse | None:
    """Convert one worksheet row into an AppraisalResponse.

    Returns None when the row is too short, has no manager name, or carries
    none of the anchor scores (header echoes, footers, blank lines).
    """
    if not row or len(row) < MIN_ROW_CELLS:
        return None

    manager = row[MANAGER_COLUMN]
    if not isinstance(manager, str) or not manager.strip():
        return None

    values: dict[str, Any] = {}
    for col in COLUMN_SCHEMA:
        raw = row[col.offset] if col.offset < len(row) else None
        values[col.field] = _PARSERS[col.kind](raw)

    if all(values[name] is None for name in ANCHOR_FIELDS):
        return None

    return AppraisalResponse(
        id=f"{sheet_name}-{row_idx}",
        response_number=response_number,
        manager_name=manager.strip(),
        **values,
    )


def _ingest_sheet(
    sheet_name: str,
    rows: Sequence[Sequence[Any]],
    next_number: int,
) -> tuple[list[AppraisalResponse], int]:
    """Extract the data rows of one sheet.

    Returns the retained records and the next free response number.
    """
    retained = []
    for row_idx in range(1, len(rows)):
        response = extract_response(rows[row_idx], sheet_name, row_idx, next_number)
        if response is None:
            continue
        retained.append(response)
        next_number += 1

    logger.info(
        "Sheet '%s': %d responses kept, %d rows skipped",
        sheet_name, len(retained), len(rows) - 1 - len(retained),
    )
    return retained, next_number


def ingest_sheets(
    sheets: Mapping[str, Sequence[Sequence[Any]]] | Iterable[tuple[str, Sequence[Sequence[Any]]]],
) -> list[AppraisalResponse]:
    """Build the full response collection from ordered sheets of raw rows.

    Response numbers start at 1 and run on across sheets, advancing only for
    retained rows. Sheets with fewer than two rows (header + data) are skipped.
    """
    items = sheets.items() if isinstance(sheets, Mapping) else sheets

    responses: list[AppraisalResponse] = []
    next_number = 1
    for sheet_name, rows in items:
        rows = list(rows)
        if len(rows) < 2:
            logger.debug("Skipping sheet '%s': no data rows", sheet_name)
            continue
        retained, next_number = _ingest_sheet(sheet_name, rows, next_number)
        responses.extend(retained)

    return responses


# ---------------------------------------------------------------------------
# Workbook reading
# ---------------------------------------------------------------------------

def _trim_row(row: tuple) -> tuple:
    """Drop trailing empty cells so row length reflects the last filled column."""
    end = len(row)
    while end and row[end - 1] is None:
        end -= 1
    return row[:end]


def read_workbook_rows(source: str | Path | bytes | io.IOBase) -> dict[str, list[tuple]]:
    """Read every sheet of a workbook into lists of cell-value tuples.

    Parameters
    ----------
    source : Path, raw bytes, or a binary file-like object.

    Returns
    -------
    Dict mapping sheet name to its rows, in workbook order. Trailing blank
    rows and trailing empty cells are dropped.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    wb = openpyxl.load_workbook(source, read_only=True, data_only=True)
    try:
        sheets: dict[str, list[tuple]] = {}
        for ws in wb.worksheets:
            rows = [_trim_row(r) for r in ws.iter_rows(values_only=True)]
            while rows and not rows[-1]:
                rows.pop()
            sheets[ws.title] = rows
    finally:
        wb.close()

    return sheets


def fetch_workbook_bytes(url: str, timeout: float = REQUEST_TIMEOUT) -> bytes:
    """Download a workbook from a static URL."""
    logger.info("Fetching appraisal workbook from %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def _is_url(source: Any) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def load_appraisal_workbook(
    source: str | Path | bytes | io.IOBase | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> list[AppraisalResponse]:
    """Load and normalise all responses from the appraisal workbook.

    Loading is all-or-nothing: any fetch or parse failure raises
    DataUnavailableError and no partial collection is returned.

    Parameters
    ----------
    source : Local path, http(s) URL, raw bytes or binary file-like object.
        Defaults to config.WORKBOOK_URL, then config.WORKBOOK_FILE.
    timeout : Request timeout in seconds for URL sources.

    Returns
    -------
    List of AppraisalResponse in sheet-then-row order.
    """
    if source is None:
        source = WORKBOOK_URL or WORKBOOK_FILE

    label = str(source) if isinstance(source, (str, Path)) else type(source).__name__

    try:
        if _is_url(source):
            source = fetch_workbook_bytes(source, timeout)
        sheets = read_workbook_rows(source)
    except Exception as exc:
        logger.exception("Failed to load appraisal workbook: %s", label)
        raise DataUnavailableError(
            f"Failed to load appraisal data from {label}", source=label
        ) from exc

    responses = ingest_sheets(sheets)
    if not responses:
        logger.warning("No responses extracted from %s", label)

    logger.info("Loaded %d responses from %s", len(responses), label)
    return responses
