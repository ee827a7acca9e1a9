"""
360° Appraisal Analytics — Manager Competency Dashboard

Analytics backend for turning a 360° performance-review workbook into
per-manager competency summaries, breakdowns and a chat-ready digest.

To load a different workbook:
    Point APPRAISAL_WORKBOOK at a local file, or APPRAISAL_WORKBOOK_URL at
    a static URL, and call loaders.load_appraisal_workbook(). The column
    layout is declared in config.COLUMN_SCHEMA.

To connect to Streamlit/Dash:
    Call dashboard.get_dashboard_view(responses, filters) to get a plain
    dict for cards, leaderboard, charts and feedback panels, and
    dashboard.build_data_context(view) for the chat assistant.

To add or regroup questions:
    Add an entry to config.QUESTION_REGISTRY mapping the response field to
    its display name, category and transform, a matching ColumnSpec in
    config.COLUMN_SCHEMA, and the field on models.AppraisalResponse.
"""
