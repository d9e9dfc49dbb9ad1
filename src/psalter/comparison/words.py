"""Word-by-word comparison table.

Entries are listed alphabetically by Latin lemma under Czech collation,
optionally filtered by a search term, with readings for a small set of
selected manuscripts.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from psalter.variants.models import WordEntry

# Letters with a caron sort after their base letter; "ch" sorts after "h"
_CZECH_LETTERS = {"č": "c~", "ř": "r~", "š": "s~", "ž": "z~"}


def czech_sort_key(text: str) -> tuple[str, str]:
    """Case-insensitive sort key approximating Czech alphabetical order."""
    folded = text.casefold()
    primary = []
    for ch in folded.replace("ch", "h~"):
        if ch in _CZECH_LETTERS:
            primary.append(_CZECH_LETTERS[ch])
        else:
            primary.append(unicodedata.normalize("NFD", ch)[0])
    return "".join(primary), folded


def filter_words(words: Iterable[WordEntry], search: str = "") -> list[WordEntry]:
    """Sort by Latin lemma and keep entries matching the search term."""
    ordered = sorted(words, key=lambda w: czech_sort_key(w.latin))
    term = search.strip().casefold()
    if not term:
        return ordered
    return [
        w
        for w in ordered
        if term in w.latin.casefold() or term in w.reference_form.casefold()
    ]


def select_manuscripts(
    requested: Iterable[str], available: Sequence[str], limit: int = 5
) -> list[str]:
    """Requested manuscripts present in the sheet, deduplicated and capped."""
    known = set(available)
    selected: list[str] = []
    for ms in requested:
        if ms in known and ms not in selected:
            selected.append(ms)
            if len(selected) >= limit:
                break
    return selected


@dataclass
class WordRow:
    """One row of the comparison table."""

    latin: str
    reference_form: str
    cells: dict[str, dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "latin": self.latin,
            "reference_form": self.reference_form,
            "cells": self.cells,
        }


@dataclass
class WordTable:
    """Comparison table with truncation info."""

    manuscripts: list[str]
    rows: list[WordRow]
    total: int
    truncated: bool

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "manuscripts": self.manuscripts,
            "rows": [r.to_dict() for r in self.rows],
            "total": self.total,
            "truncated": self.truncated,
        }


def word_table(
    words: Iterable[WordEntry],
    manuscripts: Sequence[str],
    search: str = "",
    row_limit: int = 200,
) -> WordTable:
    """Build the table for the given manuscripts, showing at most row_limit rows."""
    matched = filter_words(words, search)
    rows = []
    for word in matched[:row_limit]:
        cells = {}
        for ms in manuscripts:
            variant = word.variant_for(ms)
            cells[ms] = variant.to_dict() if variant is not None else None
        rows.append(WordRow(latin=word.latin, reference_form=word.reference_form, cells=cells))

    return WordTable(
        manuscripts=list(manuscripts),
        rows=rows,
        total=len(matched),
        truncated=len(matched) > row_limit,
    )
