"""Search engine exports."""

from promptpilot.search.engine import (
    CancellationToken,
    SearchEngine,
    SearchHit,
    SearchSession,
    SearchState,
    SearchUpdate,
    iter_matches,
    matches,
)

__all__ = [
    "CancellationToken",
    "SearchEngine",
    "SearchHit",
    "SearchSession",
    "SearchState",
    "SearchUpdate",
    "iter_matches",
    "matches",
]
