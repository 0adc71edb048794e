from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from catalog_search.config import BRAND_ALIASES_FILE, BRAND_THRESHOLD
from catalog_search.similarity import TOLERANCE, ToleranceTable, is_similar
from catalog_search.text_cleaner import normalize

logger = logging.getLogger(__name__)

EXACT_SCORE = 3
CONTAINS_SCORE = 2
SIMILAR_SCORE = 2


@dataclass(frozen=True, slots=True)
class BrandAliasTable:
    """
    Ordered brand key -> vendor spellings as they appear in catalog data.

    Iteration order is the detection tie-break, so it is kept as a tuple.
    """
    entries: tuple[tuple[str, tuple[str, ...]], ...]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "BrandAliasTable":
        entries = []
        seen = set()
        for key, spellings in mapping.items():
            brand_key = normalize(key)
            if not brand_key or brand_key in seen:
                continue
            seen.add(brand_key)
            entries.append((brand_key, tuple(s for s in spellings if s)))
        return cls(tuple(entries))

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def spellings(self, key: str) -> tuple[str, ...]:
        for brand_key, spellings in self.entries:
            if brand_key == key:
                return spellings
        return ()

    def __len__(self) -> int:
        return len(self.entries)


DEFAULT_BRAND_ALIASES = BrandAliasTable.from_mapping({
    "kerastase": ["Kérastase", "KERASTASE", "KÉRASTASE", "Kerastase"],
    "loreal professionnel": [
        "L'Oréal Professionnel",
        "L'OREAL PROFESSIONNEL",
        "L'Oreal Professionnel",
        "LOREAL PROFESSIONNEL",
    ],
    "redken": ["Redken", "REDKEN"],
    "schwarzkopf": ["Schwarzkopf", "SCHWARZKOPF"],
    "igora": ["IGORA", "Schwarzkopf"],  # Schwarzkopf colour line
    "sebastian": ["Sebastian Professional", "SEBASTIAN", "Sebastian"],
    "alfaparf": ["Alfaparf", "ALFAPARF"],
    "moroccanoil": ["Moroccanoil", "MOROCCANOIL"],
    "olaplex": ["Olaplex", "OLAPLEX"],
    "revlon": ["Revlon", "REVLON"],
    "fanola": ["Fanola", "FANOLA"],
    "lakme": ["Lakmé", "LAKMÉ", "Lakme", "LAKME"],
})


def load_brand_aliases(path: str | Path) -> BrandAliasTable:
    """Read a JSON object of brand key -> list of vendor spellings, keeping file order."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot load brand aliases from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Brand aliases in {path} must be a JSON object")
    for key, spellings in data.items():
        if not isinstance(spellings, list) or not all(isinstance(s, str) for s in spellings):
            raise ValueError(f"Brand {key!r} in {path} must map to a list of strings")
    table = BrandAliasTable.from_mapping(data)
    logger.info("Loaded %d brands from %s", len(table), path)
    return table


def configured_brand_aliases() -> BrandAliasTable:
    if BRAND_ALIASES_FILE:
        return load_brand_aliases(BRAND_ALIASES_FILE)
    return DEFAULT_BRAND_ALIASES


class BrandDetector:
    def __init__(
        self,
        table: BrandAliasTable = DEFAULT_BRAND_ALIASES,
        threshold: int = BRAND_THRESHOLD,
        tolerance: ToleranceTable = TOLERANCE,
    ):
        self.table = table
        self.threshold = threshold
        self.tolerance = tolerance

    def score_brand(self, brand_key: str, query_tokens: Sequence[str]) -> int:
        score = 0
        brand_tokens = [t for t in brand_key.split(" ") if t]
        for token in query_tokens:
            for brand_token in brand_tokens:
                if token == brand_token:
                    score += EXACT_SCORE
                elif token in brand_token or brand_token in token:
                    score += CONTAINS_SCORE
                elif is_similar(token, brand_token, self.tolerance):
                    score += SIMILAR_SCORE
        return score

    def detect(self, query_tokens: Sequence[str]) -> str | None:
        best_key = None
        best_score = 0
        for brand_key in self.table.keys():
            score = self.score_brand(brand_key, query_tokens)
            # strict ">" so the first key reaching the maximum wins
            if best_key is None or score > best_score:
                best_key, best_score = brand_key, score
        if best_key is not None and best_score >= self.threshold:
            logger.debug("Brand %r detected with score %d", best_key, best_score)
            return best_key
        return None
