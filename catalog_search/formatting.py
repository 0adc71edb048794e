from __future__ import annotations

import re
from typing import Iterable, List

from catalog_search.config import RESULT_LIMIT, STOREFRONT_URL, THUMBNAIL_SIZE
from catalog_search.models import CatalogEntry, ResultRecord, Variant

NO_RESULTS = {"message": "No results"}
PRICE_NOT_AVAILABLE = "N/A"

_EXTENSION = r"(\.(?:png|jpe?g|webp))(\?.*)?$"
_SIZE_SUFFIX_RE = re.compile(r"(_\d+x\d+|_small|_medium|_large)?" + _EXTENSION, re.IGNORECASE)
_EXTENSION_RE = re.compile(_EXTENSION, re.IGNORECASE)


def to_thumbnail(url: str | None, size: str = THUMBNAIL_SIZE) -> str | None:
    """
    Point an image URL at its fixed-size rendition.

    "https://cdn/x/img_large.jpg?v=1" -> "https://cdn/x/img_200x200.jpg?v=1".
    URLs without a known image extension come back untouched.
    """
    if not url:
        return None
    cleaned = _SIZE_SUFFIX_RE.sub(lambda m: m.group(2) + (m.group(3) or ""), url, count=1)
    return _EXTENSION_RE.sub(lambda m: f"_{size}{m.group(1)}{m.group(2) or ''}", cleaned, count=1)


def choose_variant(entry: CatalogEntry) -> Variant | None:
    for variant in entry.variants:
        if variant.is_purchasable:
            return variant
    return entry.variants[0] if entry.variants else None


def format_entry(entry: CatalogEntry, storefront_url: str = STOREFRONT_URL) -> ResultRecord:
    variant = choose_variant(entry)
    variant_id = variant.numeric_id if variant else None
    return ResultRecord(
        id=entry.id,
        variant_id=variant_id,
        title=entry.title,
        brand=entry.vendor or "",
        category=entry.product_type or "",
        price=(variant.price if variant and variant.price else PRICE_NOT_AVAILABLE),
        image=to_thumbnail(entry.image_url),
        url=f"{storefront_url}/products/{entry.handle}",
        add_to_cart=f"{storefront_url}/cart/{variant_id}:1" if variant_id else None,
    )


def format_results(
    entries: Iterable[CatalogEntry],
    limit: int = RESULT_LIMIT,
    storefront_url: str = STOREFRONT_URL,
) -> List[dict]:
    results = []
    for entry in entries:
        if limit and len(results) >= limit:
            break
        results.append(format_entry(entry, storefront_url).to_dict())
    return results


def to_payload(results: List[dict]):
    """A plain list of records, or the informational payload when there are none."""
    return results if results else dict(NO_RESULTS)
