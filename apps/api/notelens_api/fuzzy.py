from __future__ import annotations


def matches(query: str, candidate: str) -> bool:
    """Case-insensitive substring test. An empty query matches nothing."""
    if not query:
        return False
    return query.casefold() in candidate.casefold()
