"""Analysis module: statistics derived from decoded word data and the
externally supplied similarity matrices.

All functions are pure and never raise on empty input.
"""

from psalter.analysis.profiles import (
    ChangeDistribution,
    ManuscriptProfile,
    compute_profile,
    compute_profiles,
    most_conservative,
    most_innovative,
    overall_distribution,
)
from psalter.analysis.similarity import (
    NetworkLink,
    SimilarityPair,
    SimilaritySummary,
    enumerate_pairs,
    extract_clusters,
    network_links,
    similarity_heatmap,
    summarize_pairs,
)
from psalter.analysis.dendrogram import DendrogramNode, build_dendrogram, leaf_order

__all__ = [
    # Profiles
    "ManuscriptProfile",
    "ChangeDistribution",
    "compute_profile",
    "compute_profiles",
    "most_innovative",
    "most_conservative",
    "overall_distribution",
    # Similarity
    "SimilarityPair",
    "SimilaritySummary",
    "NetworkLink",
    "enumerate_pairs",
    "summarize_pairs",
    "extract_clusters",
    "network_links",
    "similarity_heatmap",
    # Dendrogram
    "DendrogramNode",
    "build_dendrogram",
    "leaf_order",
]
