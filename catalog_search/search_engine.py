from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from catalog_search.config import (
    BRAND_BONUS,
    RANK_CATEGORY_WEIGHT,
    RANK_TITLE_WEIGHT,
    RANK_VENDOR_WEIGHT,
)
from catalog_search.models import CatalogEntry
from catalog_search.similarity import TOLERANCE, ToleranceTable, contains_or_similar, is_similar
from catalog_search.text_cleaner import normalize


@dataclass(frozen=True, slots=True)
class RankingWeights:
    vendor: int = 4
    title: int = 2
    category: int = 1
    brand_bonus: int = 3


WEIGHTS = RankingWeights(
    vendor=RANK_VENDOR_WEIGHT,
    title=RANK_TITLE_WEIGHT,
    category=RANK_CATEGORY_WEIGHT,
    brand_bonus=BRAND_BONUS,
)


def is_purchasable(entry: CatalogEntry) -> bool:
    """Positive aggregate stock and at least one variant that can be sold right now."""
    if (entry.total_inventory or 0) <= 0:
        return False
    return any(variant.is_purchasable for variant in entry.variants)


def _searchable_text(entry: CatalogEntry) -> str:
    return normalize(f"{entry.title} {entry.vendor} {entry.product_type}")


def matches(entry: CatalogEntry, query_tokens: Sequence[str], tolerance: ToleranceTable = TOLERANCE) -> bool:
    """
    Every query token must be accounted for by some field of the entry.

    A token is satisfied when the searchable text contains it, or when any
    token of that text contains it, is contained by it, or is within edit
    distance tolerance of it.
    """
    text = _searchable_text(entry)
    text_tokens = list(dict.fromkeys(t for t in text.split(" ") if t))
    for query_token in query_tokens:
        if query_token in text:
            continue
        if not any(contains_or_similar(token, query_token, tolerance) for token in text_tokens):
            return False
    return True


def vendor_matches_brand(entry: CatalogEntry, brand: str, tolerance: ToleranceTable = TOLERANCE) -> bool:
    vendor = normalize(entry.vendor)
    # one-way: a vendor that is only a fragment of the brand key does not qualify
    return brand in vendor or is_similar(vendor, brand, tolerance)


def score(
    entry: CatalogEntry,
    query_tokens: Sequence[str],
    brand: str | None = None,
    weights: RankingWeights = WEIGHTS,
    tolerance: ToleranceTable = TOLERANCE,
) -> int:
    title = normalize(entry.title)
    vendor = normalize(entry.vendor)
    category = normalize(entry.product_type)
    total = 0
    for token in query_tokens:
        if token in vendor:
            total += weights.vendor
        if token in title:
            total += weights.title
        if token in category:
            total += weights.category
    if brand and vendor_matches_brand(entry, brand, tolerance):
        total += weights.brand_bonus
    return total


def rank(
    entries: Iterable[CatalogEntry],
    query_tokens: Sequence[str],
    brand: str | None = None,
    weights: RankingWeights = WEIGHTS,
    tolerance: ToleranceTable = TOLERANCE,
) -> List[CatalogEntry]:
    # sorted() is stable: equal scores keep retrieval order
    return sorted(entries, key=lambda e: -score(e, query_tokens, brand, weights, tolerance))


def restrict_to_brand(
    entries: Sequence[CatalogEntry],
    brand: str,
    tolerance: ToleranceTable = TOLERANCE,
) -> List[CatalogEntry]:
    """Entries sold under the brand, or all of them when none are."""
    restricted = [e for e in entries if vendor_matches_brand(e, brand, tolerance)]
    return restricted if restricted else list(entries)


def search(
    candidates: Sequence[CatalogEntry],
    query_tokens: Sequence[str],
    brand: str | None = None,
    weights: RankingWeights = WEIGHTS,
    tolerance: ToleranceTable = TOLERANCE,
) -> List[CatalogEntry]:
    if brand:
        candidates = restrict_to_brand(candidates, brand, tolerance)
    survivors = [
        entry for entry in candidates
        if is_purchasable(entry) and matches(entry, query_tokens, tolerance)
    ]
    return rank(survivors, query_tokens, brand, weights, tolerance)
