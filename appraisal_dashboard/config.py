"""
Configuration: file locations, rating labels, workbook column schema and
the competency question registry.

QUESTION_REGISTRY maps each scored response field to its display name,
competency category and aggregation transform. COLUMN_SCHEMA maps each
zero-based workbook column to the response field it feeds.
"""

import os
from pathlib import Path
from typing import NamedTuple

# ---------------------------------------------------------------------------
# File locations, overridable with environment variables
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

WORKBOOK_FILE = Path(
    os.getenv("APPRAISAL_WORKBOOK", str(DATA_DIR / "data" / "VGG_360_Reorganized.xlsx"))
)

# Optional remote workbook; takes precedence over WORKBOOK_FILE when set
WORKBOOK_URL: str | None = os.getenv("APPRAISAL_WORKBOOK_URL") or None

REQUEST_TIMEOUT: float = float(os.getenv("APPRAISAL_REQUEST_TIMEOUT", "30"))

LOG_LEVEL: str = os.getenv("APPRAISAL_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

# ---------------------------------------------------------------------------
# Rating scale
# ---------------------------------------------------------------------------
MAX_SCORE = 4
MIN_SCORE = 1

# Survey sheets use either text labels or digit strings. "N/A" maps to 0,
# which is outside the valid range and is dropped wherever range-checked.
RATING_SCORES: dict[str, int] = {
    "Always": 4,
    "Most times": 3,
    "Sometimes": 2,
    "Never": 1,
    "N/A": 0,
    "4": 4,
    "3": 3,
    "2": 2,
    "1": 1,
}

# Spreadsheet serial dates count days from this epoch
EXCEL_EPOCH = "1899-12-30"

# ---------------------------------------------------------------------------
# Workbook column schema
# ---------------------------------------------------------------------------
class ColumnSpec(NamedTuple):
    offset: int
    field: str
    kind: str  # "timestamp", "relationship", "score" or "text"


MANAGER_COLUMN = 2
MIN_ROW_CELLS = 3

COLUMN_SCHEMA: tuple[ColumnSpec, ...] = (
    ColumnSpec(0, "timestamp", "timestamp"),
    # column 1 (respondent e-mail) is not used
    ColumnSpec(3, "relationship", "relationship"),
    ColumnSpec(4, "mentors_coaches_score", "score"),
    ColumnSpec(5, "effective_direction_score", "score"),
    ColumnSpec(6, "establishes_rapport_score", "score"),
    ColumnSpec(7, "sets_clear_goals_score", "score"),
    ColumnSpec(8, "open_to_ideas_score", "score"),
    ColumnSpec(9, "team_leadership_comments", "text"),
    ColumnSpec(10, "sense_of_urgency_score", "score"),
    ColumnSpec(11, "analyzes_change_score", "score"),
    ColumnSpec(12, "confidence_integrity_score", "score"),
    ColumnSpec(13, "results_orientation_comments", "text"),
    ColumnSpec(14, "patient_humble_score", "score"),
    ColumnSpec(15, "flat_collaborative_score", "score"),
    ColumnSpec(16, "approachable_score", "score"),
    ColumnSpec(17, "empowers_team_score", "score"),
    ColumnSpec(18, "final_say_score", "score"),
    ColumnSpec(19, "cultural_fit_comments", "text"),
    ColumnSpec(20, "stop_doing", "text"),
    ColumnSpec(21, "start_doing", "text"),
    ColumnSpec(22, "continue_doing", "text"),
)

# A row is a genuine survey answer only if one of these is present
ANCHOR_FIELDS: tuple[str, ...] = (
    "mentors_coaches_score",
    "effective_direction_score",
    "sense_of_urgency_score",
    "patient_humble_score",
)

# ---------------------------------------------------------------------------
# Competency categories and question registry
# ---------------------------------------------------------------------------
CATEGORIES: dict[str, str] = {
    "team_leadership": "Team Leadership",
    "results_orientation": "Results Orientation",
    "cultural_fit": "Cultural Fit",
}

# transform: "direct" scores average as-is; "reversed" averages are mapped
# onto the normal scale as REVERSE_BASE - mean.
REVERSE_BASE = MAX_SCORE + 1

QUESTION_REGISTRY: dict[str, dict] = {
    "mentors_coaches_score": {
        "name": "Mentoring & Coaching",
        "category": "team_leadership",
        "transform": "direct",
    },
    "effective_direction_score": {
        "name": "Effective Direction",
        "category": "team_leadership",
        "transform": "direct",
    },
    "establishes_rapport_score": {
        "name": "Establishes Rapport",
        "category": "team_leadership",
        "transform": "direct",
    },
    "sets_clear_goals_score": {
        "name": "Goal Setting",
        "category": "team_leadership",
        "transform": "direct",
    },
    "open_to_ideas_score": {
        "name": "Open to Ideas",
        "category": "team_leadership",
        "transform": "direct",
    },
    "sense_of_urgency_score": {
        "name": "Sense of Urgency",
        "category": "results_orientation",
        "transform": "direct",
    },
    "analyzes_change_score": {
        "name": "Change Analysis",
        "category": "results_orientation",
        "transform": "direct",
    },
    "confidence_integrity_score": {
        "name": "Confidence & Integrity",
        "category": "results_orientation",
        "transform": "direct",
    },
    "patient_humble_score": {
        "name": "Patience & Humility",
        "category": "cultural_fit",
        "transform": "direct",
    },
    "flat_collaborative_score": {
        "name": "Collaborative Culture",
        "category": "cultural_fit",
        "transform": "direct",
    },
    "approachable_score": {
        "name": "Approachability",
        "category": "cultural_fit",
        "transform": "direct",
    },
    "empowers_team_score": {
        "name": "Team Empowerment",
        "category": "cultural_fit",
        "transform": "direct",
    },
    "final_say_score": {
        "name": "Final Say",
        "category": "cultural_fit",
        "transform": "reversed",
    },
}

# The twelve normally-scaled questions, in display order
QUESTION_FIELDS: tuple[str, ...] = tuple(
    field for field, spec in QUESTION_REGISTRY.items() if spec["transform"] == "direct"
)

TEXT_FIELDS: tuple[str, ...] = tuple(
    col.field for col in COLUMN_SCHEMA if col.kind == "text"
)

UNKNOWN_RELATIONSHIP = "Unknown"

# ---------------------------------------------------------------------------
# Score bands (lower bound, label), checked top down
# ---------------------------------------------------------------------------
SCORE_BANDS: list[tuple[float, str]] = [
    (3.5, "Excellent"),
    (2.5, "Good"),
    (2.0, "Average"),
    (0.0, "Needs Improvement"),
]

# ---------------------------------------------------------------------------
# Chat digest sizes
# ---------------------------------------------------------------------------
TOP_MANAGERS_IN_CONTEXT = 5
BOTTOM_MANAGERS_IN_CONTEXT = 3
