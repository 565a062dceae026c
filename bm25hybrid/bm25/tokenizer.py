"""
Tokenizer for BM25 text processing.

Tokenization pipeline:
1. Lowercase conversion
2. Diacritic removal (NFKD decomposition, combining marks dropped),
   lowercased again since compatibility forms can decompose to capitals
3. Split on every character that is not a letter or digit
4. Drop empty fragments

The same function is used for indexed text and for queries, so any change
here changes both sides of term matching.
"""

import re
import unicodedata
from typing import List, Optional

# Anything that is not a letter or digit separates tokens (underscore included)
_SPLIT_PATTERN = re.compile(r"[\W_]+")


def strip_diacritics(text: str) -> str:
    """
    Remove accents by decomposing characters and dropping combining marks.

    Examples:
        >>> strip_diacritics("café naïve")
        'cafe naive'
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def tokenize(text: Optional[str]) -> List[str]:
    """
    Tokenize text into BM25 index terms.

    Args:
        text: Input text (None and empty strings give no tokens)

    Returns:
        List of normalized tokens in text order (duplicates kept)

    Examples:
        >>> tokenize("Crème Brûlée, 2 servings!")
        ['creme', 'brulee', '2', 'servings']

        >>> tokenize("user_name@example.com")
        ['user', 'name', 'example', 'com']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    # NFKD can turn compatibility letters (e.g. "ℍ") into uppercase ASCII
    text = strip_diacritics(text.lower()).lower()
    return [t for t in _SPLIT_PATTERN.split(text) if t]
