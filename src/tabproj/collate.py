"""Caseless text collation for field-name comparison.

Follows "Default Caseless Matching" from the Unicode standard (section 3.13):
canonical decomposition, full case folding, then NFKC recomposition.

The order is fixed. Headers are collated with this same function at parse
time, so any change here silently breaks header matching.
"""

from __future__ import annotations

import unicodedata


def collate(text: str) -> str:
    """Return the collated form of *text*, ignoring case and normalization form.

    >>> collate("Straße") == collate("STRASSE")
    True
    """
    return unicodedata.normalize("NFKC", unicodedata.normalize("NFD", text).casefold())
