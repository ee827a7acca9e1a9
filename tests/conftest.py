"""Shared fixtures for the appraisal pipeline tests."""

from __future__ import annotations

import itertools

import pytest

from appraisal_dashboard.models import AppraisalResponse


@pytest.fixture()
def make_response():
    """Factory for AppraisalResponse records with sequential numbering."""
    counter = itertools.count(1)

    def _make(manager: str = "A", **fields) -> AppraisalResponse:
        number = next(counter)
        return AppraisalResponse(
            id=f"Sheet1-{number}",
            response_number=number,
            manager_name=manager,
            **fields,
        )

    return _make


def raw_row(
    manager: object = "Jane Doe",
    relationship: object = "Colleague",
    scores: list | None = None,
    final_say: object = None,
    timestamp: object = None,
    feedback: tuple = (None, None, None),
) -> list:
    """Build a 23-column worksheet row.

    *scores* holds the twelve question cells in workbook order
    (5 leadership, 3 results, 4 cultural fit).
    """
    scores = list(scores or [None] * 12)
    tl, ro, cf = scores[:5], scores[5:8], scores[8:12]
    return [
        timestamp, "reviewer@example.com", manager, relationship,
        *tl, "TL comment",
        *ro, "RO comment",
        *cf, final_say, "CF comment",
        *feedback,
    ]


@pytest.fixture()
def header_row() -> list:
    return [f"Q{i}" for i in range(23)]


@pytest.fixture()
def build_row():
    return raw_row
