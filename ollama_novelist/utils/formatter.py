"""
formatter.py — lightweight plain-text cleaner for manuscripts

Used by the prompt log writer before the manuscript is saved.
"""

from __future__ import annotations

import re

__all__ = ["format_text", "paragraphs"]


# ----------------------------------------------------------------------
def _smart_quotes(t: str) -> str:
    return (
        t.replace("“", '"').replace("”", '"')
         .replace("‘", "'").replace("’", "'")
    )

def _unify_eol(t: str) -> str:
    return t.replace("\r\n", "\n").replace("\r", "\n")


# ----------------------------------------------------------------------
def format_text(txt: str) -> str:
    """
    Return *txt* cleaned of common whitespace / Unicode oddities.

    Rules applied (in order):

    1. Convert CR/LF variants to `\\n`.
    2. Collapse 3+ consecutive newlines -> one blank line.
    3. Strip trailing spaces / tabs.
    4. Replace “smart quotes” with straight quotes.
    5. Ensure exactly one trailing newline at EOF.
    """
    txt = _unify_eol(txt)
    txt = re.sub(r"\n{3,}", "\n\n", txt)       # collapse blank paragraphs
    txt = re.sub(r"[ \t]+\n", "\n", txt)       # strip EOL whitespace
    txt = _smart_quotes(txt)
    return txt.rstrip() + "\n"                 # canonical single newline


def paragraphs(txt: str) -> list[str]:
    """Non-blank lines of *txt*, stripped; one paragraph each."""
    return [line.strip() for line in _unify_eol(txt).split("\n") if line.strip()]
