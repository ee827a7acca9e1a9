"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end. Each
function returns plain dicts, dataclasses or strings suitable for rendering
cards, charts, tables and the chat assistant's data context. Every view is
recomputed from the full response collection on each call.
"""

import logging

from .config import BOTTOM_MANAGERS_IN_CONTEXT, CATEGORIES, TOP_MANAGERS_IN_CONTEXT
from .filters import apply_filters, get_available_managers, get_available_relationships
from .models import AppraisalResponse, FilterState, ManagerSummary
from .scoring import (
    calculate_manager_summaries,
    classify_score,
    extract_feedback_themes,
    get_competency_breakdown,
    get_overall_stats,
    get_relationship_distribution,
    get_score_distribution,
)

logger = logging.getLogger(__name__)


def get_dashboard_view(
    all_responses: list[AppraisalResponse],
    filters: FilterState | None = None,
) -> dict:
    """Single entry point the app calls to populate every panel.

    Parameters
    ----------
    all_responses : Full collection from load_appraisal_workbook().
    filters : Current filter selection. None means no filtering.

    Returns
    -------
    Dict with keys:
        filters, responses, manager_summaries, competency_scores,
        relationship_distribution, score_distribution, feedback_themes,
        overall_stats, available_managers, available_relationships
    """
    filters = filters or FilterState()
    responses = apply_filters(all_responses, filters)
    summaries = calculate_manager_summaries(responses)

    view = {
        "filters": filters,
        "responses": responses,
        "manager_summaries": summaries,
        "competency_scores": get_competency_breakdown(responses),
        "relationship_distribution": get_relationship_distribution(responses),
        "score_distribution": get_score_distribution(responses),
        "feedback_themes": extract_feedback_themes(responses),
        "overall_stats": get_overall_stats(responses, summaries),
        # Option lists always come from the unfiltered collection
        "available_managers": get_available_managers(all_responses),
        "available_relationships": get_available_relationships(all_responses),
    }

    logger.info(
        "Dashboard view: %d of %d responses, %d managers",
        len(responses), len(all_responses), len(summaries),
    )
    return view


def get_manager_detail(summary: ManagerSummary) -> dict:
    """Drill-down for one manager, computed from that manager's responses only.

    Returns
    -------
    Dict with structure:
    {
        "summary": ManagerSummary,
        "band": "Good",
        "categories": [{"category": "Team Leadership", "score": 3.2, "band": "Good"}, ...],
        "competency_scores": [CompetencyScore, ...],
        "feedback_themes": FeedbackThemes,
    }
    """
    category_scores = {
        "team_leadership": summary.avg_team_leadership,
        "results_orientation": summary.avg_results_orientation,
        "cultural_fit": summary.avg_cultural_fit,
    }

    return {
        "summary": summary,
        "band": classify_score(summary.overall_score),
        "categories": [
            {
                "category": CATEGORIES[key],
                "score": score,
                "band": classify_score(score),
            }
            for key, score in category_scores.items()
        ],
        "competency_scores": get_competency_breakdown(summary.responses),
        "feedback_themes": extract_feedback_themes(summary.responses),
    }


def build_data_context(view: dict) -> str:
    """Plain-text digest of the aggregated view for the chat assistant.

    Returns an empty string when no manager has been scored.
    """
    summaries: list[ManagerSummary] = view["manager_summaries"]
    if not summaries:
        return ""

    stats = view["overall_stats"]
    lines = [
        f"Total Responses: {stats.total_responses}",
        f"Total Managers: {stats.total_managers}",
        f"Average Score: {stats.avg_overall_score}/4.0",
        "",
        f"Top {TOP_MANAGERS_IN_CONTEXT} Managers:",
    ]
    for i, s in enumerate(summaries[:TOP_MANAGERS_IN_CONTEXT], start=1):
        lines.append(f"{i}. {s.manager_name}: {s.overall_score:.2f} ({s.total_responses} reviews)")

    lines += ["", f"Lowest {BOTTOM_MANAGERS_IN_CONTEXT} Performers:"]
    for s in reversed(summaries[-BOTTOM_MANAGERS_IN_CONTEXT:]):
        lines.append(f"- {s.manager_name}: {s.overall_score:.2f}")

    lines += ["", "Competency Averages:"]
    for c in view["competency_scores"]:
        lines.append(f"- {c.name}: {c.score:.2f}/4.0")

    return "\n".join(lines)
