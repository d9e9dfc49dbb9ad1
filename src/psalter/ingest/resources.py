"""Models for the read-only JSON resources published alongside word data.

These resources come from the external analysis pipeline and are only
validated for shape here, never transformed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


class ResourceFormatError(ValueError):
    """Raised when a resource does not have the expected shape."""

    def __init__(self, message: str, resource: str | None = None):
        self.resource = resource
        full_message = f"[{resource}] {message}" if resource else message
        super().__init__(full_message)


def _floats(values: list, label: str, resource: str) -> list[float]:
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError):
        raise ResourceFormatError(f"{label} must contain only numbers", resource)


def _strings(values: Any, label: str, resource: str) -> list[str]:
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ResourceFormatError(f"{label} must be a list of strings", resource)
    return list(values)


def _check_linkage(rows: Any, size: int, resource: str) -> list[list[float]]:
    """Validate ``[left, right, height, count]`` rows against known node ids."""
    if not isinstance(rows, list):
        raise ResourceFormatError("linkage_matrix must be a list", resource)
    linkage = []
    for i, row in enumerate(rows):
        if not isinstance(row, list) or len(row) < 3:
            raise ResourceFormatError(
                f"linkage_matrix row {i} must have at least 3 values", resource
            )
        values = _floats(row, "linkage_matrix", resource)
        # Row i may refer to leaves and to the nodes built by rows 0..i-1.
        for ref in values[:2]:
            if not ref.is_integer() or not 0 <= ref < size + i:
                raise ResourceFormatError(
                    f"linkage_matrix row {i} references unknown node {ref:g}", resource
                )
        linkage.append(values)
    return linkage


def _check_square(
    matrix: Any, size: int, label: str, resource: str
) -> list[list[float]]:
    if not isinstance(matrix, list) or len(matrix) != size:
        raise ResourceFormatError(f"{label} must have {size} rows", resource)
    rows = []
    for i, row in enumerate(matrix):
        if not isinstance(row, list) or len(row) != size:
            raise ResourceFormatError(f"{label} row {i} must have {size} values", resource)
        rows.append(_floats(row, label, resource))
    return rows


@dataclass
class SimilarityData:
    """Similarity analysis produced by the clustering pipeline."""

    manuscripts: list[str]
    similarity_matrix: list[list[float]]
    distance_matrix: list[list[float]] = field(default_factory=list)
    linkage_matrix: list[list[float]] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], resource: str = "similarity") -> "SimilarityData":
        """Validate and build from the similarity resource."""
        if not isinstance(data, Mapping):
            raise ResourceFormatError("Resource must be a mapping", resource)
        for key in ("manuscripts", "similarity_matrix"):
            if key not in data:
                raise ResourceFormatError(f"Missing required field: {key}", resource)

        manuscripts = _strings(data["manuscripts"], "manuscripts", resource)
        size = len(manuscripts)
        similarity = _check_square(
            data["similarity_matrix"], size, "similarity_matrix", resource
        )
        distance = data.get("distance_matrix") or []
        if distance:
            distance = _check_square(distance, size, "distance_matrix", resource)

        linkage = _check_linkage(data.get("linkage_matrix") or [], size, resource)

        stats = data.get("stats") or {}
        if not isinstance(stats, Mapping):
            raise ResourceFormatError("stats must be a mapping", resource)

        return cls(
            manuscripts=manuscripts,
            similarity_matrix=similarity,
            distance_matrix=distance,
            linkage_matrix=linkage,
            stats=dict(stats),
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "manuscripts": self.manuscripts,
            "similarity_matrix": self.similarity_matrix,
            "distance_matrix": self.distance_matrix,
            "linkage_matrix": self.linkage_matrix,
            "stats": self.stats,
        }


@dataclass(frozen=True)
class ManuscriptInfo:
    """Display metadata for one manuscript."""

    abbreviation: str
    full_name: str = ""
    date: str = ""
    location: str = ""
    signature: str | None = None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "abbreviation": self.abbreviation,
            "full_name": self.full_name,
            "date": self.date,
            "location": self.location,
            "signature": self.signature,
        }


@dataclass
class ManuscriptCatalog:
    """Manuscript metadata plus the translation-family grouping."""

    manuscripts: dict[str, ManuscriptInfo] = field(default_factory=dict)
    translation_families: dict[str, list[str]] = field(default_factory=dict)

    def get(self, abbreviation: str) -> ManuscriptInfo | None:
        return self.manuscripts.get(abbreviation)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], resource: str = "metadata") -> "ManuscriptCatalog":
        """Build from either ``{metadata, translation_families}`` or a flat mapping."""
        if not isinstance(data, Mapping):
            raise ResourceFormatError("Resource must be a mapping", resource)

        if "metadata" in data:
            entries = data["metadata"]
        else:
            entries = {k: v for k, v in data.items() if k != "translation_families"}
        if not isinstance(entries, Mapping):
            raise ResourceFormatError("metadata must be a mapping", resource)

        manuscripts = {}
        for abbr, info in entries.items():
            if not isinstance(info, Mapping):
                raise ResourceFormatError(f"Metadata for {abbr} must be a mapping", resource)
            manuscripts[abbr] = ManuscriptInfo(
                abbreviation=abbr,
                full_name=info.get("full_name", ""),
                date=info.get("date", ""),
                location=info.get("location", ""),
                signature=info.get("signature"),
            )

        raw_families = data.get("translation_families") or {}
        if not isinstance(raw_families, Mapping):
            raise ResourceFormatError("translation_families must be a mapping", resource)
        families = {
            name: _strings(members, f"translation family {name}", resource)
            for name, members in raw_families.items()
        }
        return cls(manuscripts=manuscripts, translation_families=families)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "metadata": {k: v.to_dict() for k, v in self.manuscripts.items()},
            "translation_families": self.translation_families,
        }


@dataclass(frozen=True)
class VerseTranslation:
    """Latin verse text with its renderings in the older Czech psalters."""

    verse_id: str
    latin: str
    translations: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "verse_id": self.verse_id,
            "latin": self.latin,
            "translations": self.translations,
        }


def parse_verses(data: Mapping[str, Any], resource: str = "verses") -> dict[str, VerseTranslation]:
    """Parse the verse-translation resource (``latin`` or ``latina`` key)."""
    if not isinstance(data, Mapping):
        raise ResourceFormatError("Resource must be a mapping", resource)

    verses = {}
    for verse_id, entry in data.items():
        if not isinstance(entry, Mapping):
            raise ResourceFormatError(f"Verse {verse_id} must be a mapping", resource)
        latin = entry.get("latin", entry.get("latina"))
        if latin is None:
            raise ResourceFormatError(f"Verse {verse_id} has no Latin text", resource)
        translations = entry.get("translations") or {}
        if not isinstance(translations, Mapping):
            raise ResourceFormatError(
                f"Translations of verse {verse_id} must be a mapping", resource
            )
        verses[verse_id] = VerseTranslation(
            verse_id=verse_id,
            latin=latin,
            translations=dict(translations),
        )
    return verses
