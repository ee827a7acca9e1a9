"""
Record types flowing through the appraisal pipeline.

Response records are produced once by the workbook loader; every other
structure here is a derived view recomputed on each filter change.
"""

from dataclasses import asdict, dataclass, field

import pandas as pd

from .config import MAX_SCORE, QUESTION_FIELDS


@dataclass(slots=True)
class AppraisalResponse:
    """One reviewer's ratings and comments about one manager."""

    id: str
    response_number: int
    manager_name: str
    timestamp: pd.Timestamp | None = None
    relationship: str | None = None
    mentors_coaches_score: int | None = None
    effective_direction_score: int | None = None
    establishes_rapport_score: int | None = None
    sets_clear_goals_score: int | None = None
    open_to_ideas_score: int | None = None
    team_leadership_comments: str | None = None
    sense_of_urgency_score: int | None = None
    analyzes_change_score: int | None = None
    confidence_integrity_score: int | None = None
    results_orientation_comments: str | None = None
    patient_humble_score: int | None = None
    flat_collaborative_score: int | None = None
    approachable_score: int | None = None
    empowers_team_score: int | None = None
    final_say_score: int | None = None
    cultural_fit_comments: str | None = None
    stop_doing: str | None = None
    start_doing: str | None = None
    continue_doing: str | None = None

    def scores(self) -> dict[str, int | None]:
        """Return the twelve question scores keyed by field name."""
        return {name: getattr(self, name) for name in QUESTION_FIELDS}

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(slots=True)
class ManagerSummary:
    """Aggregated category scores for one manager."""

    manager_name: str
    total_responses: int
    avg_team_leadership: float
    avg_results_orientation: float
    avg_cultural_fit: float
    overall_score: float
    responses: list[AppraisalResponse] = field(default_factory=list, repr=False)

    def score_pct(self) -> float:
        """Return overall score as a percentage of the maximum (1 dp)."""
        return round(self.overall_score / MAX_SCORE * 100, 1)


@dataclass(slots=True)
class CompetencyScore:
    key: str
    name: str
    category: str
    score: float
    percentage: float
    responses: int = 0
    max_score: int = MAX_SCORE


@dataclass(slots=True)
class FeedbackThemes:
    stop_doing: list[str] = field(default_factory=list)
    start_doing: list[str] = field(default_factory=list)
    continue_doing: list[str] = field(default_factory=list)

    def total(self) -> int:
        return len(self.stop_doing) + len(self.start_doing) + len(self.continue_doing)


@dataclass(frozen=True)
class FilterState:
    """Dashboard filter selection. Empty tuples mean "no restriction".

    score_range is carried for the UI but is not applied when filtering.
    """

    managers: tuple[str, ...] = ()
    relationships: tuple[str, ...] = ()
    score_range: tuple[float, float] = (1, MAX_SCORE)


@dataclass(slots=True)
class OverallStats:
    total_responses: int = 0
    total_managers: int = 0
    avg_overall_score: float = 0.0
    top_performer: str = "N/A"
    top_score: float = 0.0
