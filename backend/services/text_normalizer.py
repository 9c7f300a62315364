"""Deterministic cleanup of raw scraped / OCR notification text.

Removes noise without destroying meaningful structure. Step order matters for
idempotence: character stripping and decorative-run removal come first, and the
whitespace/newline collapses run last so nothing later can re-introduce runs.
"""

import re

# Tab, LF, printable ASCII, Devanagari block, rupee sign
_DISALLOWED_RE = re.compile(r"[^\t\n\x20-\x7E\u0900-\u097F\u20B9]")

# ====, ----, ####, **** separators
_DECORATIVE_RE = re.compile(r"[=\-#*]{4,}")

# Rs / Rs. / INR as a whole word, plus the spacing after it
_CURRENCY_RE = re.compile(r"\b(?:Rs\.?|INR)(?![A-Za-z])[ \t]*", re.IGNORECASE)
RUPEE = "₹"

# dd-mm-yyyy / dd.mm.yyyy → dd/mm/yyyy
_DATE_SEPARATOR_RE = re.compile(r"(?<!\d)(\d{2})[-.](\d{2})[-.](\d{4})(?!\d)")

_HORIZONTAL_WS_RE = re.compile(r"[ \t]{2,}")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def normalize(raw_text) -> str:
    """Return cleaned text; empty string for None, non-string, or empty input."""
    if not raw_text or not isinstance(raw_text, str):
        return ""

    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    text = _DISALLOWED_RE.sub(" ", text)
    text = _DECORATIVE_RE.sub("", text)
    text = _CURRENCY_RE.sub(RUPEE, text)
    text = _DATE_SEPARATOR_RE.sub(r"\1/\2/\3", text)
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()
