"""
mkpw.graphemes
Split text into user-perceived characters (extended grapheme clusters).
"""

from typing import List

import regex

_CLUSTER = regex.compile(r"\X")


def split_graphemes(text: str) -> List[str]:
    """
    Return the extended grapheme clusters of `text`, in order.

    "👨‍👩‍👦" is one cluster, as are "á" written with a combining accent and a
    flag made of two regional indicators.
    """
    return _CLUSTER.findall(text)


def grapheme_count(text: str) -> int:
    return len(split_graphemes(text))
