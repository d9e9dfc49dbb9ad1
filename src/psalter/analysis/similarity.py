"""Pairwise similarity analysis over the externally computed matrix.

Pairs are enumerated once each from the upper triangle of the similarity
matrix, in canonical manuscript order. Summary figures, rankings, cluster
grouping and network edges are all derived from that enumeration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from psalter.config import HEATMAP_DOMAIN


@dataclass(frozen=True)
class SimilarityPair:
    """Two manuscripts and their similarity percentage."""

    manuscript_a: str
    manuscript_b: str
    similarity: float

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "manuscript_a": self.manuscript_a,
            "manuscript_b": self.manuscript_b,
            "similarity": self.similarity,
        }


def enumerate_pairs(
    manuscripts: Sequence[str], matrix: Sequence[Sequence[float]]
) -> list[SimilarityPair]:
    """Unordered pairs (i < j) in row-major order of the upper triangle."""
    pairs = []
    for i in range(len(manuscripts)):
        for j in range(i + 1, len(manuscripts)):
            pairs.append(
                SimilarityPair(manuscripts[i], manuscripts[j], float(matrix[i][j]))
            )
    return pairs


@dataclass
class SimilaritySummary:
    """Summary statistics over all manuscript pairs."""

    pair_count: int = 0
    average_similarity: float = 0.0
    min_similarity: float = 0.0
    max_similarity: float = 0.0
    pairs_at_least_95: int = 0
    pairs_at_least_90: int = 0
    pairs_below_80: int = 0
    most_similar: list[SimilarityPair] = field(default_factory=list)
    least_similar: list[SimilarityPair] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "pair_count": self.pair_count,
            "average_similarity": self.average_similarity,
            "min_similarity": self.min_similarity,
            "max_similarity": self.max_similarity,
            "pairs_at_least_95": self.pairs_at_least_95,
            "pairs_at_least_90": self.pairs_at_least_90,
            "pairs_below_80": self.pairs_below_80,
            "most_similar": [p.to_dict() for p in self.most_similar],
            "least_similar": [p.to_dict() for p in self.least_similar],
        }


def summarize_pairs(pairs: Sequence[SimilarityPair], top: int = 10) -> SimilaritySummary:
    """Aggregate pair similarities; an empty sequence yields zeros."""
    if not pairs:
        return SimilaritySummary()

    values = [p.similarity for p in pairs]
    return SimilaritySummary(
        pair_count=len(pairs),
        average_similarity=sum(values) / len(values),
        min_similarity=min(values),
        max_similarity=max(values),
        pairs_at_least_95=sum(1 for v in values if v >= 95),
        pairs_at_least_90=sum(1 for v in values if v >= 90),
        pairs_below_80=sum(1 for v in values if v < 80),
        most_similar=sorted(pairs, key=lambda p: p.similarity, reverse=True)[:top],
        least_similar=sorted(pairs, key=lambda p: p.similarity)[:top],
    )


def extract_clusters(
    pairs: Iterable[SimilarityPair], threshold: float = 98.0
) -> list[list[str]]:
    """Greedy grouping of highly similar manuscripts.

    Pairs at or above the threshold are scanned in the given order. A pair
    of two unassigned manuscripts starts a new cluster; a pair with one
    assigned member adds the other to that member's cluster; a pair whose
    members are both assigned is skipped. Clusters are never merged, even
    when a later pair bridges two of them.
    """
    clusters: list[list[str]] = []
    assigned: dict[str, int] = {}

    for pair in pairs:
        if pair.similarity < threshold:
            continue
        a, b = pair.manuscript_a, pair.manuscript_b
        in_a, in_b = a in assigned, b in assigned

        if not in_a and not in_b:
            assigned[a] = assigned[b] = len(clusters)
            clusters.append([a, b])
        elif in_a and not in_b:
            clusters[assigned[a]].append(b)
            assigned[b] = assigned[a]
        elif in_b and not in_a:
            clusters[assigned[b]].append(a)
            assigned[a] = assigned[b]

    return clusters


@dataclass(frozen=True)
class NetworkLink:
    """Edge of the manuscript similarity network."""

    source: str
    target: str
    value: float
    weight: float

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "value": self.value,
            "weight": self.weight,
        }


def network_links(
    manuscripts: Sequence[str],
    matrix: Sequence[Sequence[float]],
    threshold: float = 95.0,
) -> list[NetworkLink]:
    """Edges for pairs strictly above the threshold, weighted by the excess."""
    return [
        NetworkLink(
            source=p.manuscript_a,
            target=p.manuscript_b,
            value=p.similarity,
            weight=(p.similarity - threshold) / 2,
        )
        for p in enumerate_pairs(manuscripts, matrix)
        if p.similarity > threshold
    ]


def similarity_heatmap(
    manuscripts: Sequence[str], matrix: Sequence[Sequence[float]]
) -> dict:
    """Row-major heatmap cells with the fixed colour domain."""
    cells = [
        {"row": row, "column": column, "similarity": float(matrix[i][j])}
        for i, row in enumerate(manuscripts)
        for j, column in enumerate(manuscripts)
    ]
    return {
        "manuscripts": list(manuscripts),
        "domain": list(HEATMAP_DOMAIN),
        "cells": cells,
    }
