"""Data ingestion loaders for the appraisal workbook."""

from .appraisal_workbook import extract_response, ingest_sheets
from .appraisal_workbook import load_appraisal_workbook, read_workbook_rows
from .appraisal_workbook import fetch_workbook_bytes
from .utils import parse_score, normalise_date, round_half_up

__all__ = [
    "extract_response",
    "ingest_sheets",
    "load_appraisal_workbook",
    "read_workbook_rows",
    "fetch_workbook_bytes",
    "parse_score",
    "normalise_date",
    "round_half_up",
]
