from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import Activity, SearchResult, Task

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20

SCORE_EXACT = 100
SCORE_PREFIX = 90
SCORE_WHOLE_WORD = 70
SCORE_SUBSTRING = 50
SCORE_NO_MATCH = 0


class InvalidQueryError(ValueError):
    """Raised when the search query is empty or whitespace only."""


def search(
    query: str,
    activities: Sequence[Activity],
    tasks: Sequence[Task],
    *,
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[SearchResult]:
    """Rank activities and tasks containing `query`, best first.

    Activity hits come before task hits when scores tie. Only the first
    `limit` results are returned.
    """
    if query is None or not query.strip():
        raise InvalidQueryError("query parameter required")
    lowered = query.lower()

    activity_results = [
        SearchResult(
            type="activity",
            item=activity,
            score=calculate_score(_activity_text(activity), lowered),
        )
        for activity in activities
        if _activity_matches(activity, lowered)
    ]
    task_results = [
        SearchResult(
            type="task",
            item=task,
            score=calculate_score(_task_text(task), lowered),
        )
        for task in tasks
        if _task_matches(task, lowered)
    ]

    # list.sort is stable, so ties keep activities-then-tasks input order.
    ranked = activity_results + task_results
    ranked.sort(key=lambda result: result.score, reverse=True)
    logger.debug(
        "search event=ranked query=%s activity_hits=%d task_hits=%d",
        lowered,
        len(activity_results),
        len(task_results),
    )
    return ranked[: max(limit, 0)]


def calculate_score(text: str, query: str) -> int:
    """Score `query` against `text`: exact, prefix, whole word, then substring."""
    lower_text = text.lower()
    lower_query = query.lower()

    if lower_text == lower_query:
        return SCORE_EXACT
    if lower_text.startswith(lower_query):
        return SCORE_PREFIX
    if lower_query in lower_text.split():
        return SCORE_WHOLE_WORD
    if lower_query in lower_text:
        return SCORE_SUBSTRING
    return SCORE_NO_MATCH


def _activity_matches(activity: Activity, query: str) -> bool:
    return (
        query in (activity.details or "").lower()
        or query in (activity.action or "").lower()
        or query in (activity.type or "").lower()
    )


def _task_matches(task: Task, query: str) -> bool:
    if query in (task.title or "").lower():
        return True
    return bool(task.description) and query in task.description.lower()


def _activity_text(activity: Activity) -> str:
    return f"{activity.details or ''} {activity.action or ''} {activity.type or ''}"


def _task_text(task: Task) -> str:
    # Missing description still contributes the separator, so "Deploy" alone
    # is never an exact match for "deploy".
    return f"{task.title or ''} {task.description or ''}"
