"""
360° Appraisal Analytics — End-to-end analytics pipeline.

Runs the full pipeline from the source workbook to dashboard-ready outputs
and prints smoke-test summaries. Falls back to a simulated workbook when no
source is given and the configured file does not exist.

Usage:
    python main.py [workbook path or URL]
"""

import logging
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from appraisal_dashboard.config import LOG_FORMAT, LOG_LEVEL, WORKBOOK_FILE, WORKBOOK_URL
from appraisal_dashboard.dashboard import (
    build_data_context,
    get_dashboard_view,
    get_manager_detail,
)
from appraisal_dashboard.exceptions import DataUnavailableError
from appraisal_dashboard.filters import normalize_filters
from appraisal_dashboard.loaders import load_appraisal_workbook
from appraisal_dashboard.simulator import generate_sheets, write_workbook
from appraisal_dashboard.transforms import (
    build_competency_table,
    build_export_tables,
    build_manager_summary_table,
)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)


def _resolve_source(argv: list[str]) -> str:
    if len(argv) > 1:
        return argv[1]
    if WORKBOOK_URL:
        return WORKBOOK_URL
    if WORKBOOK_FILE.exists():
        return str(WORKBOOK_FILE)

    logger.warning("No workbook at %s, using simulated data", WORKBOOK_FILE)
    path = Path(tempfile.mkdtemp()) / "simulated_360.xlsx"
    return str(write_workbook(generate_sheets(), path))


def main(argv: list[str] | None = None) -> int:
    """Run the full analytics pipeline and print smoke-test outputs."""
    argv = sys.argv if argv is None else argv

    print("=" * 70)
    print("  360° APPRAISAL ANALYTICS — Manager Competency Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    source = _resolve_source(argv)
    try:
        responses = load_appraisal_workbook(source)
    except DataUnavailableError as e:
        print(f"\nData unavailable: {e}")
        return 1

    print(f"\nResponses: {len(responses)} loaded from {source}")

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    view = get_dashboard_view(responses, normalize_filters({}))
    stats = view["overall_stats"]
    print(f"\nManagers: {stats.total_managers} | Average score: {stats.avg_overall_score}/4.0")
    print(f"Top performer: {stats.top_performer} ({stats.top_score:.2f})")

    leaderboard = build_manager_summary_table(view["manager_summaries"])
    if not leaderboard.empty:
        print("\nLeaderboard:")
        print(leaderboard.to_string(index=False))

    print("\nCompetency breakdown:")
    print(build_competency_table(view["competency_scores"]).to_string(index=False))

    print(f"\nRelationship distribution: {view['relationship_distribution']}")
    print(f"Score distribution: {view['score_distribution']}")

    themes = view["feedback_themes"]
    print(
        f"Feedback: {len(themes.stop_doing)} stop / {len(themes.start_doing)} start / "
        f"{len(themes.continue_doing)} continue"
    )

    if view["manager_summaries"]:
        detail = get_manager_detail(view["manager_summaries"][0])
        print(f"\nDetail — {detail['summary'].manager_name} ({detail['band']}):")
        for cat in detail["categories"]:
            print(f"  {cat['category']:20s} | {cat['score']:.2f} | {cat['band']}")

    # ------------------------------------------------------------------
    # 3. Chat context and export
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] CHAT CONTEXT & EXPORT")
    print("-" * 40)
    print()
    print(build_data_context(view) or "(no data)")

    export = build_export_tables(view["manager_summaries"], view["responses"])
    for name, df in export.items():
        print(f"\nExport sheet '{name}': {len(df)} rows x {len(df.columns)} columns")

    # ------------------------------------------------------------------
    # 4. Acceptance criteria verification
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    overall = [s.overall_score for s in view["manager_summaries"]]
    check1 = all(a >= b for a, b in zip(overall, overall[1:]))
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Leaderboard sorted by overall score")

    numbers = [r.response_number for r in responses]
    check2 = numbers == list(range(1, len(responses) + 1))
    print(f"  [{'PASS' if check2 else 'FAIL'}] Response numbers run 1..{len(responses)} across sheets")

    in_range = sum(view["score_distribution"].values())
    check3 = all(0 <= x <= 4 for x in overall)
    print(f"  [{'PASS' if check3 else 'FAIL'}] All overall scores within 0-4 ({in_range} ratings)")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
