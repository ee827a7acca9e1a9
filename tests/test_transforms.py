"""Unit tests for DataFrame transforms and export tables."""

from __future__ import annotations

import pandas as pd

from appraisal_dashboard.scoring import calculate_manager_summaries, get_competency_breakdown
from appraisal_dashboard.transforms import (
    RESPONSE_COLUMNS,
    build_competency_table,
    build_distribution_frame,
    build_export_tables,
    build_manager_summary_table,
    responses_to_frame,
)


def test_responses_to_frame(make_response):
    responses = [
        make_response("A", mentors_coaches_score=4, timestamp=pd.Timestamp("2024-01-02")),
        make_response("B", stop_doing="Late emails"),
    ]

    df = responses_to_frame(responses)

    assert list(df.columns) == RESPONSE_COLUMNS
    assert len(df) == 2
    assert str(df["mentors_coaches_score"].dtype) == "Int64"
    assert df.loc[0, "mentors_coaches_score"] == 4
    assert pd.isna(df.loc[1, "mentors_coaches_score"])
    assert df.loc[1, "stop_doing"] == "Late emails"


def test_responses_to_frame_empty():
    df = responses_to_frame([])
    assert df.empty
    assert list(df.columns) == RESPONSE_COLUMNS


def test_build_manager_summary_table(make_response):
    summaries = calculate_manager_summaries([
        make_response("A", mentors_coaches_score=4, sense_of_urgency_score=4, patient_humble_score=4, final_say_score=1),
        make_response("B", mentors_coaches_score=2),
    ])

    table = build_manager_summary_table(summaries)

    assert table["rank"].tolist() == [1, 2]
    assert table["manager_name"].tolist() == ["A", "B"]
    assert table.loc[0, "overall_score"] == 4.0
    assert table.loc[0, "score_pct"] == 100.0
    assert table.loc[0, "band"] == "Excellent"
    assert table.loc[1, "band"] == "Needs Improvement"


def test_build_competency_table(make_response):
    table = build_competency_table(get_competency_breakdown([make_response(mentors_coaches_score=3)]))

    assert len(table) == 12
    assert table.loc[0, "competency"] == "Mentoring & Coaching"
    assert table.loc[0, "category"] == "Team Leadership"
    assert table.loc[0, "percentage"] == 75.0


def test_build_distribution_frame():
    df = build_distribution_frame({"Colleague": 3, "Unknown": 1}, "relationship")

    assert df["relationship"].tolist() == ["Colleague", "Unknown"]
    assert df["share_pct"].tolist() == [75.0, 25.0]


def test_build_distribution_frame_all_zero():
    df = build_distribution_frame({1: 0, 2: 0, 3: 0, 4: 0}, "score")
    assert df["share_pct"].tolist() == [0.0] * 4


def test_build_export_tables(make_response):
    responses = [
        make_response("A", relationship=None, mentors_coaches_score=4, final_say_score=2),
        make_response("B", relationship="Colleague", mentors_coaches_score=2, continue_doing="Mentoring"),
    ]
    summaries = calculate_manager_summaries(responses)

    tables = build_export_tables(summaries, responses)

    assert list(tables) == ["Manager Summary", "All Responses"]

    summary = tables["Manager Summary"]
    assert list(summary.columns) == [
        "Manager Name", "Total Reviews", "Team Leadership", "Results Orientation",
        "Cultural Fit", "Overall Score", "Score %",
    ]
    assert summary.loc[0, "Manager Name"] == "A"
    assert summary.loc[0, "Score %"].endswith("%")

    detail = tables["All Responses"]
    assert len(detail.columns) == 22
    assert detail.loc[0, "Relationship"] == ""
    assert detail.loc[0, "Final Say"] == 2
    assert detail.loc[1, "Continue Doing"] == "Mentoring"
