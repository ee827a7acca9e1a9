"""
Filter engine: manager and relationship inclusion filters over the full
response collection, plus the option lists the filter panel offers.
"""

import logging
from collections.abc import Iterable

from .config import MAX_SCORE, MIN_SCORE
from .models import AppraisalResponse, FilterState

logger = logging.getLogger(__name__)


def _as_str_tuple(values: Iterable[object] | None) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    out: list[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v)
        if s not in out:
            out.append(s)
    return tuple(out)


def _as_score_range(raw: object) -> tuple[float, float]:
    default = (MIN_SCORE, MAX_SCORE)
    try:
        low, high = (float(x) for x in raw)  # type: ignore[union-attr]
    except (TypeError, ValueError):
        return default
    if low > high:
        low, high = high, low
    low = max(MIN_SCORE, min(MAX_SCORE, low))
    high = max(MIN_SCORE, min(MAX_SCORE, high))
    return low, high


def normalize_filters(raw: dict | None) -> FilterState:
    """Build a FilterState from loose UI input.

    Drops None entries, de-duplicates while keeping order, and clamps the
    score range into the rating scale.
    """
    raw = raw or {}
    return FilterState(
        managers=_as_str_tuple(raw.get("managers")),
        relationships=_as_str_tuple(raw.get("relationships")),
        score_range=_as_score_range(raw.get("score_range", (MIN_SCORE, MAX_SCORE))),
    )


def apply_filters(
    responses: list[AppraisalResponse],
    filters: FilterState | None = None,
) -> list[AppraisalResponse]:
    """Return the responses passing the manager and relationship filters.

    An empty selection does not restrict. A response with no relationship
    is excluded once any relationship is selected. score_range is ignored.
    """
    if filters is None:
        return list(responses)

    managers = set(filters.managers)
    relationships = set(filters.relationships)

    filtered = [
        r for r in responses
        if (not managers or r.manager_name in managers)
        and (not relationships or r.relationship in relationships)
    ]

    logger.debug("Filters kept %d of %d responses", len(filtered), len(responses))
    return filtered


def get_available_managers(responses: list[AppraisalResponse]) -> list[str]:
    """Return sorted distinct manager names for the filter panel."""
    return sorted({r.manager_name for r in responses})


def get_available_relationships(responses: list[AppraisalResponse]) -> list[str]:
    """Return distinct non-empty relationship labels in first-seen order."""
    return list(dict.fromkeys(r.relationship for r in responses if r.relationship))
