"""Per-manuscript variation profiles.

Profiles are pure reductions over decoded word entries: counts per
variant kind, the variation rate, rankings and the aggregate change
distribution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from psalter.config import DISTRIBUTION_LABELS
from psalter.variants.models import VariantKind, WordEntry


@dataclass(frozen=True)
class ManuscriptProfile:
    """Aggregated variant counts for one manuscript."""

    name: str
    total_words: int = 0
    identical_count: int = 0
    autosemantic_count: int = 0
    synsemantic_count: int = 0
    other_count: int = 0

    @property
    def variation_rate(self) -> float:
        """Percentage of attested words that differ from the reference form."""
        if self.total_words == 0:
            return 0.0
        return (self.total_words - self.identical_count) / self.total_words * 100

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "total_words": self.total_words,
            "identical_count": self.identical_count,
            "autosemantic_count": self.autosemantic_count,
            "synsemantic_count": self.synsemantic_count,
            "other_count": self.other_count,
            "variation_rate": self.variation_rate,
        }


def compute_profile(words: Iterable[WordEntry], manuscript: str) -> ManuscriptProfile:
    """Count a manuscript's readings by kind, skipping empty readings."""
    total = identical = autosemantic = synsemantic = other = 0

    for word in words:
        variant = word.variant_for(manuscript)
        if variant is None or not variant.text:
            continue
        total += 1
        if variant.kind is VariantKind.IDENTICAL:
            identical += 1
        elif variant.kind is VariantKind.AUTOSEMANTIC:
            autosemantic += 1
        elif variant.kind is VariantKind.SYNSEMANTIC:
            synsemantic += 1
        else:
            other += 1

    return ManuscriptProfile(
        name=manuscript,
        total_words=total,
        identical_count=identical,
        autosemantic_count=autosemantic,
        synsemantic_count=synsemantic,
        other_count=other,
    )


def compute_profiles(
    words: Sequence[WordEntry], manuscripts: Iterable[str]
) -> list[ManuscriptProfile]:
    """Profiles for each manuscript, in the given manuscript order."""
    return [compute_profile(words, ms) for ms in manuscripts]


def most_innovative(
    profiles: Sequence[ManuscriptProfile], limit: int = 10
) -> list[ManuscriptProfile]:
    """Highest variation rates first; ties keep manuscript order."""
    return sorted(profiles, key=lambda p: p.variation_rate, reverse=True)[:limit]


def most_conservative(
    profiles: Sequence[ManuscriptProfile], limit: int = 10
) -> list[ManuscriptProfile]:
    """Lowest variation rates first; ties keep manuscript order."""
    return sorted(profiles, key=lambda p: p.variation_rate)[:limit]


@dataclass(frozen=True)
class ChangeDistribution:
    """Category totals summed over all profiles."""

    identical: int = 0
    autosemantic: int = 0
    synsemantic: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        return self.identical + self.autosemantic + self.synsemantic + self.other

    def as_series(self) -> list[dict]:
        """Labelled category values for charting."""
        return [
            {"name": DISTRIBUTION_LABELS[key], "value": getattr(self, key)}
            for key in ("identical", "autosemantic", "synsemantic", "other")
        ]

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "identical": self.identical,
            "autosemantic": self.autosemantic,
            "synsemantic": self.synsemantic,
            "other": self.other,
            "total": self.total,
        }


def overall_distribution(profiles: Iterable[ManuscriptProfile]) -> ChangeDistribution:
    """Sum each count category across all profiles."""
    identical = autosemantic = synsemantic = other = 0
    for p in profiles:
        identical += p.identical_count
        autosemantic += p.autosemantic_count
        synsemantic += p.synsemantic_count
        other += p.other_count
    return ChangeDistribution(
        identical=identical,
        autosemantic=autosemantic,
        synsemantic=synsemantic,
        other=other,
    )
