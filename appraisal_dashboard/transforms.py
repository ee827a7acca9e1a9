"""
Data transforms: flatten response records and derived views into
DataFrames for tables, charts and spreadsheet export.
"""

import logging

import pandas as pd

from .config import CATEGORIES, MAX_SCORE
from .models import AppraisalResponse, CompetencyScore, ManagerSummary
from .scoring import classify_score

logger = logging.getLogger(__name__)


RESPONSE_COLUMNS = [
    "id", "response_number", "timestamp", "manager_name", "relationship",
    "mentors_coaches_score", "effective_direction_score",
    "establishes_rapport_score", "sets_clear_goals_score",
    "open_to_ideas_score", "team_leadership_comments",
    "sense_of_urgency_score", "analyzes_change_score",
    "confidence_integrity_score", "results_orientation_comments",
    "patient_humble_score", "flat_collaborative_score",
    "approachable_score", "empowers_team_score", "final_say_score",
    "cultural_fit_comments", "stop_doing", "start_doing", "continue_doing",
]

# Export sheet headers, in column order
_SUMMARY_EXPORT_HEADERS = {
    "manager_name": "Manager Name",
    "total_responses": "Total Reviews",
    "avg_team_leadership": "Team Leadership",
    "avg_results_orientation": "Results Orientation",
    "avg_cultural_fit": "Cultural Fit",
    "overall_score": "Overall Score",
}

_RESPONSE_EXPORT_HEADERS = {
    "timestamp": "Timestamp",
    "manager_name": "Manager",
    "relationship": "Relationship",
    "mentors_coaches_score": "Mentors/Coaches",
    "effective_direction_score": "Effective Direction",
    "establishes_rapport_score": "Establishes Rapport",
    "sets_clear_goals_score": "Clear Goals",
    "open_to_ideas_score": "Open to Ideas",
    "team_leadership_comments": "Team Leadership Comments",
    "sense_of_urgency_score": "Sense of Urgency",
    "analyzes_change_score": "Analyzes Change",
    "confidence_integrity_score": "Confidence/Integrity",
    "results_orientation_comments": "Results Comments",
    "patient_humble_score": "Patient/Humble",
    "flat_collaborative_score": "Flat Collaborative",
    "approachable_score": "Approachable",
    "empowers_team_score": "Empowers Team",
    "final_say_score": "Final Say",
    "cultural_fit_comments": "Cultural Fit Comments",
    "stop_doing": "Stop Doing",
    "start_doing": "Start Doing",
    "continue_doing": "Continue Doing",
}


def responses_to_frame(responses: list[AppraisalResponse]) -> pd.DataFrame:
    """One row per response record.

    Returns
    -------
    DataFrame with RESPONSE_COLUMNS. Score columns are nullable Int64.
    """
    if not responses:
        return pd.DataFrame(columns=RESPONSE_COLUMNS)

    df = pd.DataFrame([r.to_dict() for r in responses], columns=RESPONSE_COLUMNS)
    score_cols = [c for c in RESPONSE_COLUMNS if c.endswith("_score")]
    df[score_cols] = df[score_cols].astype("Int64")
    return df


def build_manager_summary_table(summaries: list[ManagerSummary]) -> pd.DataFrame:
    """Leaderboard table.

    Returns
    -------
    DataFrame with columns:
        rank, manager_name, total_responses, avg_team_leadership,
        avg_results_orientation, avg_cultural_fit, overall_score,
        score_pct, band
    """
    columns = [
        "rank", "manager_name", "total_responses", "avg_team_leadership",
        "avg_results_orientation", "avg_cultural_fit", "overall_score",
        "score_pct", "band",
    ]
    if not summaries:
        return pd.DataFrame(columns=columns)

    rows = []
    for rank, s in enumerate(summaries, start=1):
        rows.append({
            "rank": rank,
            "manager_name": s.manager_name,
            "total_responses": s.total_responses,
            "avg_team_leadership": s.avg_team_leadership,
            "avg_results_orientation": s.avg_results_orientation,
            "avg_cultural_fit": s.avg_cultural_fit,
            "overall_score": s.overall_score,
            "score_pct": s.score_pct(),
            "band": classify_score(s.overall_score),
        })

    return pd.DataFrame(rows, columns=columns)


def build_competency_table(scores: list[CompetencyScore]) -> pd.DataFrame:
    """Per-question competency table for bar and radar charts."""
    rows = [{
        "key": c.key,
        "competency": c.name,
        "category": CATEGORIES.get(c.category, c.category),
        "score": c.score,
        "max_score": c.max_score,
        "percentage": c.percentage,
        "responses": c.responses,
    } for c in scores]
    return pd.DataFrame(
        rows,
        columns=["key", "competency", "category", "score", "max_score", "percentage", "responses"],
    )


def build_distribution_frame(distribution: dict, label: str) -> pd.DataFrame:
    """Turn a {label: count} mapping into a two-column frame with shares."""
    df = pd.DataFrame(list(distribution.items()), columns=[label, "count"])
    total = df["count"].sum()
    df["share_pct"] = (df["count"] / total * 100).round(1) if total else 0.0
    return df


def build_export_tables(
    summaries: list[ManagerSummary],
    responses: list[AppraisalResponse],
) -> dict[str, pd.DataFrame]:
    """Sheets handed to the export collaborator.

    Returns
    -------
    {"Manager Summary": DataFrame, "All Responses": DataFrame} with
    human-readable headers.
    """
    summary_rows = []
    for s in summaries:
        row = {header: getattr(s, field) for field, header in _SUMMARY_EXPORT_HEADERS.items()}
        row["Score %"] = f"{s.overall_score / MAX_SCORE * 100:.1f}%"
        summary_rows.append(row)
    summary_df = pd.DataFrame(
        summary_rows, columns=[*_SUMMARY_EXPORT_HEADERS.values(), "Score %"]
    )

    response_rows = []
    for r in responses:
        row = {}
        for field, header in _RESPONSE_EXPORT_HEADERS.items():
            value = getattr(r, field)
            if value is None and not field.endswith("_score"):
                value = ""
            row[header] = value
        response_rows.append(row)
    response_df = pd.DataFrame(response_rows, columns=list(_RESPONSE_EXPORT_HEADERS.values()))

    logger.info(
        "Built export tables: %d managers, %d responses", len(summary_df), len(response_df)
    )
    return {"Manager Summary": summary_df, "All Responses": response_df}
