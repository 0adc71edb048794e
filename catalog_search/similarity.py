from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from catalog_search.config import SIMILARITY_TOLERANCE
from catalog_search.text_cleaner import normalize

# (max length, allowed distance); a None length covers everything longer.
ToleranceTable = tuple[tuple[int | None, int], ...]


def parse_tolerance(value: str) -> ToleranceTable:
    """
    Parse "4:1,6:1,10:2,*:3" into a tolerance table.

    Pairs are sorted by length; a missing "*" entry reuses the last distance
    for longer strings.
    """
    bounded: list[tuple[int, int]] = []
    catch_all = None
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        length, sep, distance = chunk.partition(":")
        if not sep:
            raise ValueError(f"Bad tolerance entry {chunk!r}, expected <length>:<distance>")
        if length.strip() == "*":
            catch_all = int(distance)
        else:
            bounded.append((int(length), int(distance)))
    if not bounded and catch_all is None:
        raise ValueError("Tolerance table is empty")
    bounded.sort()
    if catch_all is None:
        catch_all = bounded[-1][1]
    return tuple(bounded) + ((None, catch_all),)


DEFAULT_TOLERANCE: ToleranceTable = ((4, 1), (6, 1), (10, 2), (None, 3))
TOLERANCE: ToleranceTable = parse_tolerance(SIMILARITY_TOLERANCE)


def edit_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    return Levenshtein.distance(a, b)


def allowed_distance(length: int, tolerance: ToleranceTable = TOLERANCE) -> int:
    for max_length, distance in tolerance:
        if max_length is None or length <= max_length:
            return distance
    return tolerance[-1][1]


def is_similar(a: str, b: str, tolerance: ToleranceTable = TOLERANCE) -> bool:
    a, b = normalize(a), normalize(b)
    length = max(len(a), len(b))
    return edit_distance(a, b) <= allowed_distance(length, tolerance)


def contains_or_similar(a: str, b: str, tolerance: ToleranceTable = TOLERANCE) -> bool:
    if a in b or b in a:
        return True
    return is_similar(a, b, tolerance)
