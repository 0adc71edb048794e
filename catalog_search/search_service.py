from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from catalog_search import search_engine
from catalog_search.brands import BrandAliasTable, BrandDetector, configured_brand_aliases
from catalog_search.cache import Cache, search_cache
from catalog_search.config import MATCHER_REVISION, RESULT_LIMIT, STOREFRONT_URL
from catalog_search.formatting import format_results
from catalog_search.models import CatalogEntry
from catalog_search.text_cleaner import normalize

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def fetch_products(self, vendor: str | None = None, first: int | None = None) -> List[CatalogEntry]:
        ...


def result_cache_key(normalized_query: str, revision: str = MATCHER_REVISION) -> str:
    return f"v{revision}:{normalized_query}"


def _dedupe(entries: Sequence[CatalogEntry]) -> List[CatalogEntry]:
    seen = set()
    unique = []
    for entry in entries:
        key = entry.id or id(entry)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


class SearchService:
    """Query in, formatted result records out. Upstream retrieval is delegated to `catalog`."""

    def __init__(
        self,
        catalog: CatalogSource,
        brands: BrandAliasTable | None = None,
        cache: Cache | None = None,
        detector: BrandDetector | None = None,
        limit: int = RESULT_LIMIT,
        storefront_url: str = STOREFRONT_URL,
    ):
        self.catalog = catalog
        self.brands = brands if brands is not None else configured_brand_aliases()
        self.detector = detector or BrandDetector(self.brands)
        self.cache = cache if cache is not None else search_cache
        self.limit = limit
        self.storefront_url = storefront_url

    async def _brand_candidates(self, brand: str) -> List[CatalogEntry]:
        entries: List[CatalogEntry] = []
        for spelling in self.brands.spellings(brand):
            entries.extend(await self.catalog.fetch_products(vendor=spelling))
        return _dedupe(entries)

    async def fetch_candidates(self, brand: str | None) -> List[CatalogEntry]:
        candidates: List[CatalogEntry] = []
        if brand:
            candidates = await self._brand_candidates(brand)
            if candidates:
                candidates = search_engine.restrict_to_brand(candidates, brand)
        if not candidates:
            candidates = await self.catalog.fetch_products()
        return candidates

    def rank_candidates(self, query: str, candidates: Sequence[CatalogEntry], brand: str | None = None) -> List[dict]:
        """Brand detection, restriction, filtering and ranking over an already fetched candidate list."""
        tokens = normalize(query).split()
        if brand is None:
            brand = self.detector.detect(tokens)
        ranked = search_engine.search(candidates, tokens, brand)
        return format_results(ranked, self.limit, self.storefront_url)

    async def search(self, query: str) -> List[dict]:
        """
        Ranked result records for a non-empty query.

        Cached per normalized query; an empty list means nothing matched.
        Every call returns fresh records, so callers may modify them.
        """
        normalized = normalize(query)
        key = result_cache_key(normalized)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %r", normalized)
            return [dict(record) for record in cached]

        brand = self.detector.detect(normalized.split())
        candidates = await self.fetch_candidates(brand)
        results = self.rank_candidates(normalized, candidates, brand)
        logger.info(
            "Search %r :: brand=%s :: %d candidates :: %d returned",
            normalized, brand, len(candidates), len(results),
        )
        self.cache.set(key, tuple(dict(record) for record in results))
        return results
