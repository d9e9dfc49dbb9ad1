"""Comparison module: word-by-word and verse-by-verse comparison queries."""

from psalter.comparison.words import (
    WordRow,
    WordTable,
    czech_sort_key,
    filter_words,
    select_manuscripts,
    word_table,
)
from psalter.comparison.verses import (
    DEFAULT_PSALTERS,
    OLDER_PSALTERS,
    OlderPsalter,
    VerseComparison,
    sort_verse_ids,
    verse_comparison,
)

__all__ = [
    "WordRow",
    "WordTable",
    "czech_sort_key",
    "filter_words",
    "select_manuscripts",
    "word_table",
    "DEFAULT_PSALTERS",
    "OLDER_PSALTERS",
    "OlderPsalter",
    "VerseComparison",
    "sort_verse_ids",
    "verse_comparison",
]
