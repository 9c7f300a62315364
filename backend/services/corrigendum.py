"""Keyword classifier for amendment / correction notices."""

CORRIGENDUM_KEYWORDS = (
    "corrigendum",
    "amendment",
    "correction",
    "erratum",
    "modification",
    "revised",
    "addendum",
    "notice no",
)

_MIN_LENGTH = min(len(kw) for kw in CORRIGENDUM_KEYWORDS)


def is_corrigendum(text: str | None) -> bool:
    """True if the text mentions any corrigendum keyword (case-insensitive)."""
    if not text or len(text) < _MIN_LENGTH:
        return False
    lower = text.lower()
    return any(kw in lower for kw in CORRIGENDUM_KEYWORDS)
