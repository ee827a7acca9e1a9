"""
Simulated data generator for the appraisal dashboard.

Builds a raw workbook in the same layout as the real survey export: a
text-label sheet, a numeric-string sheet and an empty notes sheet, with a
few junk rows the loader must skip. All names and comments are synthetic.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import openpyxl

from .config import COLUMN_SCHEMA, EXCEL_EPOCH, MANAGER_COLUMN, RATING_SCORES

logger = logging.getLogger(__name__)

_MANAGERS = [
    "Amaka Obi", "Tunde Bello", "Ngozi Eze", "Kunle Ade",
    "Sade Lawal", "Ifeanyi Okafor", "Bisi Ajayi", "Chidi Nwosu",
]

_RELATIONSHIPS = [
    "I am his/her direct report",
    "He/she is the executive in charge of my team",
    "I have worked a few times with this Manager",
    "I do not have direct relationship with him",
    "Colleague",
]

_STOP = [
    "Micromanaging routine tasks",
    "Cancelling one-on-ones at short notice",
    "Making decisions without the team",
    "Sending requests late in the evening",
]
_START = [
    "Sharing the roadmap earlier",
    "Giving feedback more regularly",
    "Delegating client calls",
    "Recognising wins in team meetings",
]
_CONTINUE = [
    "Being available when we are blocked",
    "Running clear weekly check-ins",
    "Backing the team in front of leadership",
    "Mentoring new joiners",
]

_HEADER = [
    "Timestamp", "Email Address", "Manager", "Relationship",
    "Mentors and coaches team members", "Gives effective direction",
    "Establishes rapport", "Sets clear goals", "Open to new ideas",
    "Team leadership comments",
    "Shows a sense of urgency", "Analyzes change", "Confidence and integrity",
    "Results orientation comments",
    "Patient and humble", "Flat and collaborative", "Approachable",
    "Empowers the team", "Always has the final say",
    "Cultural fit comments",
    "What should this manager stop doing?",
    "What should this manager start doing?",
    "What should this manager continue doing?",
]

_LABEL_FOR_SCORE = {v: k for k, v in RATING_SCORES.items() if not k.isdigit()}

_SCORE_OFFSETS = [c.offset for c in COLUMN_SCHEMA if c.kind == "score"]
_FINAL_SAY_OFFSET = next(c.offset for c in COLUMN_SCHEMA if c.field == "final_say_score")


def _draw_score(rng: np.random.Generator, skill: float) -> int:
    """Draw a 1-4 rating centred on a manager's skill level."""
    return int(np.clip(round(rng.normal(skill, 0.7)), 1, 4))


def _build_row(
    rng: np.random.Generator,
    manager: str,
    skill: float,
    when: datetime,
    numeric: bool,
) -> list:
    row: list = [None] * len(_HEADER)
    epoch = datetime.fromisoformat(EXCEL_EPOCH)
    # Numeric sheet stores serial dates, label sheet stores datetimes
    row[0] = (when - epoch).total_seconds() / 86400 if numeric else when
    row[1] = f"reviewer{rng.integers(1000, 9999)}@example.com"
    row[MANAGER_COLUMN] = manager
    row[3] = str(rng.choice(_RELATIONSHIPS))

    for offset in _SCORE_OFFSETS:
        if rng.random() < 0.05:
            continue  # skipped question
        score = _draw_score(rng, skill)
        if offset == _FINAL_SAY_OFFSET:
            # Final say is reverse-scaled: strong managers rarely insist on it
            score = 5 - score
        if rng.random() < 0.02:
            row[offset] = "N/A" if not numeric else None
        elif numeric:
            row[offset] = str(score)
        else:
            row[offset] = _LABEL_FOR_SCORE[score]

    if rng.random() < 0.5:
        row[9] = "Good direction but could involve the team more"
    if rng.random() < 0.3:
        row[13] = "Delivers under pressure"
    if rng.random() < 0.3:
        row[19] = "Easy to talk to"
    row[20] = str(rng.choice(_STOP)) if rng.random() < 0.6 else None
    row[21] = str(rng.choice(_START)) if rng.random() < 0.6 else None
    row[22] = str(rng.choice(_CONTINUE)) if rng.random() < 0.7 else None
    return row


def generate_sheets(
    n_managers: int = 6,
    responses_per_manager: int = 8,
    seed: int = 42,
) -> dict[str, list[list]]:
    """Generate a simulated raw workbook.

    Returns
    -------
    Dict mapping sheet name to rows (header first):
        "Page 1": text-label ratings and datetime timestamps
        "Page 3": numeric-string ratings and serial-number timestamps
        "Notes": a single note row (skipped by the loader)
    """
    rng = np.random.default_rng(seed)
    managers = _MANAGERS[:n_managers]
    skills = {m: float(rng.uniform(2.0, 3.6)) for m in managers}
    start = datetime(2025, 11, 3, 9, 0, 0)

    pages: dict[str, list[list]] = {"Page 1": [list(_HEADER)], "Page 3": [list(_HEADER)]}
    for i in range(responses_per_manager):
        for j, manager in enumerate(managers):
            numeric = (i + j) % 2 == 1
            when = start + timedelta(seconds=int(rng.integers(0, 21 * 86400)))
            sheet = "Page 3" if numeric else "Page 1"
            pages[sheet].append(_build_row(rng, manager, skills[manager], when, numeric))

    # Rows the loader must skip: blank manager, and a footer with no ratings
    pages["Page 1"].append([None, None, "", "Colleague", "Always", "Always"])
    pages["Page 3"].append(["Total", None, "Responses", None])

    pages["Notes"] = [["Survey closed 24 November 2025"]]

    logger.info(
        "Generated %d simulated rows for %d managers",
        len(pages["Page 1"]) + len(pages["Page 3"]) - 4, len(managers),
    )
    return pages


def write_workbook(sheets: dict[str, list[list]], path: str | Path) -> Path:
    """Write raw sheets to an .xlsx file with openpyxl."""
    path = Path(path)
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    wb.close()

    logger.info("Wrote simulated workbook to %s", path)
    return path
