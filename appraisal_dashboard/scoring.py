"""
Scoring functions — pure functions with no side effects.

Provides per-manager category aggregation, per-question competency
breakdown, relationship and score distributions, feedback extraction,
score banding and headline statistics.
"""

import logging
from collections import Counter

from .config import (
    CATEGORIES,
    MAX_SCORE,
    MIN_SCORE,
    QUESTION_FIELDS,
    QUESTION_REGISTRY,
    REVERSE_BASE,
    SCORE_BANDS,
    UNKNOWN_RELATIONSHIP,
)
from .loaders.utils import round_half_up
from .models import (
    AppraisalResponse,
    CompetencyScore,
    FeedbackThemes,
    ManagerSummary,
    OverallStats,
)

logger = logging.getLogger(__name__)


def _mean(values: list[int | float]) -> float:
    """Arithmetic mean, 0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def _collect(responses: list[AppraisalResponse], fields: list[str]) -> list[int]:
    """Flatten all non-null scores of *fields* across *responses*."""
    scores = []
    for r in responses:
        for name in fields:
            score = getattr(r, name)
            if score is not None:
                scores.append(score)
    return scores


def _fields_for(category: str, transform: str) -> list[str]:
    return [
        field for field, spec in QUESTION_REGISTRY.items()
        if spec["category"] == category and spec["transform"] == transform
    ]


def category_means(responses: list[AppraisalResponse]) -> dict[str, float]:
    """Return unrounded category means for a set of responses.

    Logic
    -----
    - "direct" questions of a category are pooled into one flat list and
      averaged (0 when nothing was answered).
    - "reversed" questions are averaged separately and mapped onto the
      normal scale as REVERSE_BASE - mean (0 when nothing was answered).
    - A category with a reversed term is the mean of the two terms.
    """
    means: dict[str, float] = {}
    for category in CATEGORIES:
        direct = _mean(_collect(responses, _fields_for(category, "direct")))

        reversed_fields = _fields_for(category, "reversed")
        if not reversed_fields:
            means[category] = direct
            continue

        reversed_scores = _collect(responses, reversed_fields)
        reversed_term = REVERSE_BASE - _mean(reversed_scores) if reversed_scores else 0.0
        means[category] = (direct + reversed_term) / 2

    return means


def calculate_manager_summaries(responses: list[AppraisalResponse]) -> list[ManagerSummary]:
    """Group responses by manager and score each manager.

    Overall score is the unweighted mean of the three category means, so
    response volume does not weight it. Output is sorted by overall score,
    highest first; ties keep first-seen manager order.
    """
    by_manager: dict[str, list[AppraisalResponse]] = {}
    for r in responses:
        by_manager.setdefault(r.manager_name, []).append(r)

    summaries = []
    for manager_name, manager_responses in by_manager.items():
        means = category_means(manager_responses)
        overall = _mean(list(means.values()))

        summaries.append(ManagerSummary(
            manager_name=manager_name,
            total_responses=len(manager_responses),
            avg_team_leadership=round_half_up(means["team_leadership"]),
            avg_results_orientation=round_half_up(means["results_orientation"]),
            avg_cultural_fit=round_half_up(means["cultural_fit"]),
            overall_score=round_half_up(overall),
            responses=manager_responses,
        ))

    summaries.sort(key=lambda s: s.overall_score, reverse=True)

    logger.debug("Scored %d managers from %d responses", len(summaries), len(responses))
    return summaries


def get_competency_breakdown(responses: list[AppraisalResponse]) -> list[CompetencyScore]:
    """Mean score for each of the twelve competency questions."""
    breakdown = []
    for field in QUESTION_FIELDS:
        spec = QUESTION_REGISTRY[field]
        scores = _collect(responses, [field])
        avg = _mean(scores)

        breakdown.append(CompetencyScore(
            key=field,
            name=spec["name"],
            category=spec["category"],
            score=round_half_up(avg),
            percentage=round_half_up(avg / MAX_SCORE * 100, 1),
            responses=len(scores),
        ))

    return breakdown


def get_relationship_distribution(responses: list[AppraisalResponse]) -> dict[str, int]:
    """Count responses per relationship label; blanks count as "Unknown"."""
    counts: Counter[str] = Counter()
    for r in responses:
        counts[r.relationship or UNKNOWN_RELATIONSHIP] += 1
    return dict(counts)


def get_score_distribution(responses: list[AppraisalResponse]) -> dict[int, int]:
    """Histogram of every in-range question score across all responses.

    Each response contributes one count per answered question (up to 12).
    """
    distribution = {score: 0 for score in range(MIN_SCORE, MAX_SCORE + 1)}
    for score in _collect(responses, list(QUESTION_FIELDS)):
        if MIN_SCORE <= score <= MAX_SCORE:
            distribution[score] += 1
    return distribution


def extract_feedback_themes(responses: list[AppraisalResponse]) -> FeedbackThemes:
    """Collect stop / start / continue-doing comments in response order."""
    themes = FeedbackThemes()
    for r in responses:
        if r.stop_doing:
            themes.stop_doing.append(r.stop_doing)
        if r.start_doing:
            themes.start_doing.append(r.start_doing)
        if r.continue_doing:
            themes.continue_doing.append(r.continue_doing)
    return themes


def classify_score(score: float) -> str:
    """Return the descriptive band for a 0-4 score.

    Logic
    -----
    - Excellent          if score >= 3.5
    - Good               if score >= 2.5
    - Average            if score >= 2.0
    - Needs Improvement  otherwise
    """
    for lower, label in SCORE_BANDS:
        if score >= lower:
            return label
    return SCORE_BANDS[-1][1]


def get_overall_stats(
    responses: list[AppraisalResponse],
    summaries: list[ManagerSummary],
) -> OverallStats:
    """Headline numbers for the stats cards.

    Managers with an overall score of 0 (no usable answers) are left out of
    the average. Top performer is the first summary, or "N/A" when empty.
    """
    scored = [s.overall_score for s in summaries if s.overall_score > 0]
    top = summaries[0] if summaries else None

    return OverallStats(
        total_responses=len(responses),
        total_managers=len(summaries),
        avg_overall_score=round_half_up(_mean(scored)),
        top_performer=top.manager_name if top else "N/A",
        top_score=top.overall_score if top else 0.0,
    )
