from __future__ import annotations

import unicodedata
from typing import Tuple

# Spanish alphabet: ñ is its own letter right after n; other accents are
# secondary differences of their base letter.
_ENYE = "\u00f1"
_AFTER_N = "n\U0010ffff"


def spanish_sort_key(value: str) -> Tuple[str, Tuple[str, ...], Tuple[bool, ...]]:
    """
    Collation key approximating Spanish locale rules.

    - primary:   letters without accents or case ("Álvaro" ~ "alvaro")
    - secondary: the accent marks, so unaccented sorts first on ties
    - tertiary:  case, lowercase first on ties
    """
    primary = []
    accents = []
    value = unicodedata.normalize("NFC", value)
    for ch in value.casefold():
        if ch == _ENYE:
            primary.append(_AFTER_N)
            accents.append("")
            continue
        decomposed = unicodedata.normalize("NFD", ch)
        base = "".join(c for c in decomposed if not unicodedata.combining(c))
        marks = "".join(c for c in decomposed if unicodedata.combining(c))
        primary.append(base)
        accents.append(marks)

    case = tuple(ch.isupper() for ch in value)
    return "".join(primary), tuple(accents), case
