"""Token-overlap retrieval over the in-memory food records."""

import re
from collections.abc import Sequence

from nutriempower.domain.foods import FoodRecord

MAX_QUERY_TOKENS = 8

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def tokenize(query: str, max_tokens: int = MAX_QUERY_TOKENS) -> list[str]:
    """Lowercase, split on non-alphanumerics, and cap the token count."""
    tokens = _NON_ALNUM.sub(" ", query.lower()).split()
    return tokens[:max_tokens]


def score(record: FoodRecord, tokens: Sequence[str]) -> int:
    """Count query tokens contained in the record's description or category."""
    haystack = f"{record.description} {record.category or ''}".lower()
    return sum(1 for token in tokens if token in haystack)


def retrieve(
    records: Sequence[FoodRecord], query: str, limit: int = 3
) -> list[FoodRecord]:
    """Return up to ``limit`` records with a positive score, best first."""
    if not records or limit <= 0:
        return []
    tokens = tokenize(query)
    if not tokens:
        return []
    scored = sorted(
        ((score(record, tokens), record) for record in records),
        key=lambda pair: pair[0],
        reverse=True,
    )
    return [record for points, record in scored if points > 0][:limit]
