"""Pydantic models for API."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthModel(BaseModel):
    """Loader state."""

    status: str = Field(..., description="ok, loading or error")
    version: str
    loading: bool
    ready: bool
    error: Optional[str] = None


class SheetModel(BaseModel):
    """A psalm sheet of word data."""

    name: str
    word_count: int
    manuscripts: List[str]


class VariantModel(BaseModel):
    """A manuscript reading."""

    text: str
    kind: str


class WordRowModel(BaseModel):
    """A row of the word-by-word comparison table."""

    latin: str
    reference_form: str
    cells: Dict[str, Optional[VariantModel]]


class WordTableModel(BaseModel):
    """Word-by-word comparison for selected manuscripts."""

    sheet: str
    manuscripts: List[str]
    rows: List[WordRowModel]
    total: int = Field(..., description="Matching entries before truncation")
    truncated: bool


class ProfileModel(BaseModel):
    """Per-manuscript variation profile, enriched with display metadata."""

    name: str
    total_words: int
    identical_count: int
    autosemantic_count: int
    synsemantic_count: int
    other_count: int
    variation_rate: float
    full_name: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None


class DistributionItemModel(BaseModel):
    """A labelled slice of the change distribution."""

    name: str
    value: int


class StatisticsModel(BaseModel):
    """Profiles, rankings and overall distribution for a sheet."""

    sheet: str
    profiles: List[ProfileModel] = Field(
        ..., description="All profiles, highest variation rate first"
    )
    most_innovative: List[ProfileModel]
    most_conservative: List[ProfileModel]
    distribution: List[DistributionItemModel]


class PairModel(BaseModel):
    """Similarity between two manuscripts."""

    manuscript_a: str
    manuscript_b: str
    similarity: float


class SimilaritySummaryModel(BaseModel):
    """Pairwise similarity summary."""

    manuscripts: List[str]
    pair_count: int
    average_similarity: float
    min_similarity: float
    max_similarity: float
    pairs_at_least_95: int
    pairs_at_least_90: int
    pairs_below_80: int
    most_similar: List[PairModel]
    least_similar: List[PairModel]
    stats: dict = Field(default_factory=dict, description="Producer statistics")


class ClustersModel(BaseModel):
    """Groups of highly similar manuscripts."""

    threshold: float
    clusters: List[List[str]]


class NetworkLinkModel(BaseModel):
    """Network edge."""

    source: str
    target: str
    value: float
    weight: float


class NetworkModel(BaseModel):
    """Force-directed graph data."""

    threshold: float
    nodes: List[str]
    links: List[NetworkLinkModel]


class HeatmapCellModel(BaseModel):
    row: str
    column: str
    similarity: float


class HeatmapModel(BaseModel):
    """Similarity heatmap cells."""

    manuscripts: List[str]
    domain: List[float]
    cells: List[HeatmapCellModel]


class DendrogramModel(BaseModel):
    """Dendrogram tree (nested dicts) and its leaf order."""

    tree: Optional[dict] = None
    leaf_order: List[str]


class ManuscriptInfoModel(BaseModel):
    abbreviation: str
    full_name: str = ""
    date: str = ""
    location: str = ""
    signature: Optional[str] = None


class ManuscriptsModel(BaseModel):
    """Manuscript metadata and translation families."""

    metadata: Dict[str, ManuscriptInfoModel]
    translation_families: Dict[str, List[str]]


class OlderPsalterModel(BaseModel):
    abbreviation: str
    name: str
    period: str
    type: str


class VerseListModel(BaseModel):
    """Available verses and the psalter catalog."""

    verses: List[str]
    psalters: List[OlderPsalterModel]
    default_psalters: List[str]


class VerseTranslationModel(BaseModel):
    abbreviation: str
    text: str
    name: Optional[str] = None
    period: Optional[str] = None
    type: Optional[str] = None


class VerseComparisonModel(BaseModel):
    """Latin verse with selected translations."""

    verse_id: str
    latin: str
    translations: List[VerseTranslationModel]
