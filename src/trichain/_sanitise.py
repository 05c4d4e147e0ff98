"""
Utilities for rendering tokens as single-line displayable strings.
"""

import unicodedata

from .store import BEGIN, END

_SENTINEL_LABELS = {BEGIN: "<BOS>", END: "<EOS>"}


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_token(tok: str) -> str:
    """Escape control characters and show sentinels by their short labels."""
    if tok in _SENTINEL_LABELS:
        return _SENTINEL_LABELS[tok]
    return _escape_ctrl_chars(tok)
