"""Unit tests for the appraisal workbook row extractor, ingestor and loader."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import openpyxl
import pandas as pd
import pytest
import requests

from appraisal_dashboard.config import COLUMN_SCHEMA, MANAGER_COLUMN
from appraisal_dashboard.exceptions import DataUnavailableError
from appraisal_dashboard.loaders.appraisal_workbook import (
    extract_response,
    ingest_sheets,
    load_appraisal_workbook,
    read_workbook_rows,
)

LABELS = ["Always", "Most times", "Sometimes", "Never"]


# ---------------------------------------------------------------------------
# Column schema
# ---------------------------------------------------------------------------

def test_column_schema_offsets_are_unique_and_skip_manager_and_unused():
    offsets = [c.offset for c in COLUMN_SCHEMA]
    assert len(offsets) == len(set(offsets))
    assert MANAGER_COLUMN not in offsets
    assert 1 not in offsets
    assert sorted(offsets) == [0] + list(range(3, 23))


@pytest.mark.parametrize("col", [c for c in COLUMN_SCHEMA if c.kind == "score"], ids=lambda c: c.field)
def test_each_score_column_maps_to_its_field(col):
    row = [None] * 23
    row[MANAGER_COLUMN] = "Jane Doe"
    row[4] = "Never"  # anchor so the row is kept
    row[col.offset] = "3"

    response = extract_response(row, "Page 3", 1, 1)

    assert response is not None
    assert getattr(response, col.field) == 3


@pytest.mark.parametrize("col", [c for c in COLUMN_SCHEMA if c.kind == "text"], ids=lambda c: c.field)
def test_each_text_column_maps_to_its_field(col):
    row = [None] * 23
    row[MANAGER_COLUMN] = "Jane Doe"
    row[4] = "Always"
    row[col.offset] = f"text for {col.field}"

    response = extract_response(row, "Page 1", 1, 1)

    assert getattr(response, col.field) == f"text for {col.field}"


# ---------------------------------------------------------------------------
# Row extraction
# ---------------------------------------------------------------------------

def test_extract_response_text_label_row(build_row):
    row = build_row(
        manager="  Jane Doe ",
        scores=LABELS * 3,
        final_say="Never",
        timestamp=45000.25,
        feedback=("Micromanaging", "Delegating", "Mentoring"),
    )

    response = extract_response(row, "Page 1", 7, 12)

    assert response.id == "Page 1-7"
    assert response.response_number == 12
    assert response.manager_name == "Jane Doe"
    assert response.relationship == "Colleague"
    assert response.timestamp == pd.Timestamp("2023-03-15 06:00:00")
    assert response.mentors_coaches_score == 4
    assert response.open_to_ideas_score == 4
    assert response.sense_of_urgency_score == 3
    assert response.patient_humble_score == 4
    assert response.empowers_team_score == 1
    assert response.final_say_score == 1
    assert response.team_leadership_comments == "TL comment"
    assert response.stop_doing == "Micromanaging"
    assert response.continue_doing == "Mentoring"


def test_extract_response_numeric_string_row(build_row):
    row = build_row(scores=["4", "3", "2", "1"] * 3, final_say="2")

    response = extract_response(row, "Page 3", 1, 1)

    assert list(response.scores().values()) == [4, 3, 2, 1] * 3
    assert response.final_say_score == 2


@pytest.mark.parametrize("manager", ["", "   ", None, 42])
def test_extract_response_skips_missing_or_non_string_manager(build_row, manager):
    row = build_row(manager=manager, scores=["4"] * 12)
    assert extract_response(row, "Page 1", 1, 1) is None


@pytest.mark.parametrize("row", [None, [], ["2024-01-01"], ["2024-01-01", "x"]])
def test_extract_response_skips_short_rows(row):
    assert extract_response(row, "Page 1", 1, 1) is None


def test_extract_response_skips_rows_without_anchor_scores(build_row):
    # Only non-anchor questions answered: establishes rapport and final say
    scores = [None, None, "4", None, None, None, "3", None, None, "2", None, None]
    row = build_row(scores=scores, final_say="1")
    assert extract_response(row, "Page 1", 1, 1) is None


def test_extract_response_keeps_row_with_single_anchor(build_row):
    scores = [None] * 8 + ["Sometimes", None, None, None]
    response = extract_response(build_row(scores=scores), "Page 1", 1, 1)
    assert response.patient_humble_score == 2


def test_extract_response_short_row_pads_missing_cells():
    row = [None, None, "Jane Doe", "Colleague", "Always"]
    response = extract_response(row, "Page 1", 1, 1)

    assert response.mentors_coaches_score == 4
    assert response.effective_direction_score is None
    assert response.continue_doing is None


def test_extract_response_bad_cells_resolve_to_none(build_row):
    row = build_row(
        relationship="",
        scores=["Always", "seven", "0", "5", None] + [None] * 7,
        timestamp="not a date",
    )
    response = extract_response(row, "Page 1", 1, 1)

    assert response.timestamp is None
    assert response.relationship is None
    assert response.effective_direction_score is None
    assert response.establishes_rapport_score is None
    assert response.sets_clear_goals_score is None


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

def test_ingest_numbers_run_across_sheets_and_skip_dropped_rows(header_row, build_row):
    sheets = {
        "Page 1": [
            header_row,
            build_row(manager="A", scores=LABELS * 3),
            build_row(manager="", scores=LABELS * 3),  # dropped
            build_row(manager="B", scores=LABELS * 3),
        ],
        "Notes": [header_row],  # header only, skipped
        "Page 3": [
            header_row,
            build_row(manager="C", scores=["1"] * 12),
        ],
    }

    responses = ingest_sheets(sheets)

    assert [r.manager_name for r in responses] == ["A", "B", "C"]
    assert [r.response_number for r in responses] == [1, 2, 3]
    assert [r.id for r in responses] == ["Page 1-1", "Page 1-3", "Page 3-1"]


def test_ingest_skips_header_row_even_if_it_looks_like_data(build_row):
    row = build_row(manager="A", scores=["4"] * 12)
    responses = ingest_sheets([("Only", [row, row])])
    assert len(responses) == 1
    assert responses[0].id == "Only-1"


def test_ingest_empty_workbook():
    assert ingest_sheets({}) == []
    assert ingest_sheets({"Sheet1": []}) == []


def test_empty_manager_row_excluded_even_with_valid_scores(header_row, build_row):
    sheets = {"Page 1": [header_row, build_row(manager="", scores=["4"] * 12, final_say="1")]}
    assert ingest_sheets(sheets) == []


# ---------------------------------------------------------------------------
# Workbook loading
# ---------------------------------------------------------------------------

def _write(path, sheets):
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


def test_read_workbook_rows_trims_trailing_cells(tmp_path, header_row):
    path = _write(tmp_path / "wb.xlsx", {"S1": [header_row, ["x", None, "Jane", None, None]]})

    sheets = read_workbook_rows(path)

    assert list(sheets) == ["S1"]
    assert sheets["S1"][1] == ("x", None, "Jane")


def test_load_appraisal_workbook_from_path_and_bytes(tmp_path, header_row, build_row):
    path = _write(tmp_path / "wb.xlsx", {
        "Page 1": [header_row, build_row(manager="A", scores=LABELS * 3)],
        "Page 3": [header_row, build_row(manager="B", scores=["2"] * 12)],
    })

    from_path = load_appraisal_workbook(path)
    from_bytes = load_appraisal_workbook(path.read_bytes())

    assert [r.manager_name for r in from_path] == ["A", "B"]
    assert [r.response_number for r in from_bytes] == [1, 2]


def test_load_appraisal_workbook_missing_file(tmp_path):
    with pytest.raises(DataUnavailableError) as exc_info:
        load_appraisal_workbook(tmp_path / "missing.xlsx")
    assert "missing.xlsx" in str(exc_info.value)


def test_load_appraisal_workbook_corrupt_bytes():
    with pytest.raises(DataUnavailableError):
        load_appraisal_workbook(b"this is not a zip archive")


@patch("appraisal_dashboard.loaders.appraisal_workbook.requests.get")
def test_load_appraisal_workbook_from_url(mock_get, tmp_path, header_row, build_row):
    path = _write(tmp_path / "wb.xlsx", {"Page 1": [header_row, build_row(scores=LABELS * 3)]})
    mock_get.return_value = MagicMock(content=path.read_bytes())

    responses = load_appraisal_workbook("https://example.com/data/360.xlsx", timeout=5)

    mock_get.assert_called_once_with("https://example.com/data/360.xlsx", timeout=5)
    assert len(responses) == 1


@patch("appraisal_dashboard.loaders.appraisal_workbook.requests.get")
def test_load_appraisal_workbook_http_failure(mock_get):
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
    mock_get.return_value = resp

    with pytest.raises(DataUnavailableError) as exc_info:
        load_appraisal_workbook("https://example.com/missing.xlsx")

    assert isinstance(exc_info.value.__cause__, requests.HTTPError)
    assert exc_info.value.source == "https://example.com/missing.xlsx"
