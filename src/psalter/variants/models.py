"""Word variant data models.

A word entry records how one Latin lemma is rendered by every manuscript
declared for a psalm sheet, each rendering classified against the
normalized reference orthography (BiblPad).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from psalter.config import IDENTICAL_SENTINEL


class VariantKind(Enum):
    """Classification of a manuscript reading against the reference form."""

    IDENTICAL = "identical"
    """Same as the reference form."""

    AUTOSEMANTIC = "autosemantic"
    """Substitution carrying independent lexical meaning."""

    SYNSEMANTIC = "synsemantic"
    """Minor grammatical or function-word change."""

    UNKNOWN = "unknown"
    """Unclassified difference."""


@dataclass(frozen=True)
class Variant:
    """One manuscript's reading of one word."""

    text: str
    """Manuscript text, or "X" when identical to the reference form."""

    kind: VariantKind
    """Classification of the reading."""

    @property
    def is_sentinel(self) -> bool:
        """True if the reading is the identical-to-reference sentinel."""
        return self.text == IDENTICAL_SENTINEL

    @property
    def is_attested(self) -> bool:
        """True if the manuscript has any text at this position."""
        return bool(self.text)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"text": self.text, "kind": self.kind.value}


IDENTICAL_VARIANT = Variant(text=IDENTICAL_SENTINEL, kind=VariantKind.IDENTICAL)


@dataclass(frozen=True)
class WordEntry:
    """A source word and its attestation across a sheet's manuscripts."""

    latin: str
    """Canonical Latin lemma."""

    reference_form: str
    """Reference (BiblPad) orthography used as comparison baseline."""

    variants: dict[str, Variant] = field(default_factory=dict)
    """Readings keyed by manuscript abbreviation, in sheet order."""

    def variant_for(self, manuscript: str) -> Variant | None:
        """Reading for a manuscript, or None if the sheet lacks it."""
        return self.variants.get(manuscript)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "latin": self.latin,
            "reference_form": self.reference_form,
            "variants": {ms: v.to_dict() for ms, v in self.variants.items()},
        }
