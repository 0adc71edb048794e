import re
import unicodedata

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]+")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Lowercase, strip accents, turn anything but [a-z0-9] into single spaces."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFD", str(text).lower())
    normalized = "".join(c for c in normalized if not unicodedata.combining(c))
    normalized = _NON_ALNUM_RE.sub(" ", normalized)
    normalized = _SPACE_RE.sub(" ", normalized)
    return normalized.strip()


def tokenize(text: str | None) -> list[str]:
    return [token for token in normalize(text).split(" ") if token]
