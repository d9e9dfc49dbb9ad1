"""API route definitions."""

from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

# Keep typing imports in namespace for Pydantic annotation evaluation
__typing_imports__ = (List, Optional)

from psalter import __version__
from psalter.analysis import (
    build_dendrogram,
    compute_profiles,
    enumerate_pairs,
    extract_clusters,
    leaf_order,
    most_conservative,
    most_innovative,
    network_links,
    overall_distribution,
    similarity_heatmap,
    summarize_pairs,
)
from psalter.api.models import (
    ClustersModel,
    DendrogramModel,
    HealthModel,
    HeatmapModel,
    ManuscriptsModel,
    NetworkModel,
    SheetModel,
    SimilaritySummaryModel,
    StatisticsModel,
    VerseComparisonModel,
    VerseListModel,
    WordTableModel,
)
from psalter.comparison import (
    DEFAULT_PSALTERS,
    OLDER_PSALTERS,
    select_manuscripts,
    sort_verse_ids,
    verse_comparison,
    word_table,
)
from psalter.config import Settings
from psalter.ingest.loader import DataLoader, LoaderError, PsalterData

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_data(request: Request) -> PsalterData:
    """Session snapshot from the app's loader; 503 if the load failed."""
    loader: DataLoader = request.app.state.loader
    try:
        return await loader.get()
    except LoaderError as e:
        raise HTTPException(status_code=503, detail=f"Error loading data: {e}")


def _split(values: Optional[List[str]]) -> list[str]:
    """Accept repeated and comma-separated query values."""
    result = []
    for value in values or []:
        result.extend(v.strip() for v in value.split(",") if v.strip())
    return result


def _require_sheet(data: PsalterData, sheet: str) -> None:
    if sheet not in data.sheets:
        raise HTTPException(status_code=404, detail=f"Unknown sheet: {sheet}")


@router.get("/health", response_model=HealthModel)
async def health_check(request: Request):
    """Loader state (does not trigger a load)."""
    state = request.app.state.loader.state
    if state.loading:
        status = "loading"
    elif state.error:
        status = "error"
    else:
        status = "ok"
    return HealthModel(
        status=status,
        version=__version__,
        loading=state.loading,
        ready=state.ready,
        error=state.error,
    )


@router.get("/sheets", response_model=List[SheetModel])
async def list_sheets(data: PsalterData = Depends(get_data)):
    """List psalm sheets in source order."""
    return [
        SheetModel(
            name=name,
            word_count=len(words),
            manuscripts=data.manuscripts(name),
        )
        for name, words in data.sheets.items()
    ]


@router.get("/sheets/{sheet}/manuscripts", response_model=List[str])
async def sheet_manuscripts(sheet: str, data: PsalterData = Depends(get_data)):
    """Manuscripts declared for a sheet, in declared order."""
    _require_sheet(data, sheet)
    return data.manuscripts(sheet)


@router.get("/sheets/{sheet}/words", response_model=WordTableModel)
async def sheet_words(
    sheet: str,
    manuscripts: Annotated[
        Optional[List[str]], Query(description="Manuscripts to compare")
    ] = None,
    search: Annotated[str, Query(description="Filter on Latin or BiblPad")] = "",
    data: PsalterData = Depends(get_data),
    settings: Settings = Depends(get_settings),
):
    """Word-by-word comparison, sorted by Latin lemma."""
    _require_sheet(data, sheet)
    requested = _split(manuscripts)
    available = data.manuscripts(sheet)

    unknown = [ms for ms in requested if ms not in available]
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown manuscripts for {sheet}: {', '.join(unknown)}",
        )

    selected = select_manuscripts(
        requested, available, limit=settings.max_compared_manuscripts
    )
    table = word_table(
        data.words(sheet), selected, search=search, row_limit=settings.word_row_limit
    )
    return WordTableModel(sheet=sheet, **table.to_dict())


@router.get("/statistics", response_model=StatisticsModel)
async def statistics(
    sheet: Annotated[Optional[str], Query(description="Sheet (default: aggregate)")] = None,
    data: PsalterData = Depends(get_data),
    settings: Settings = Depends(get_settings),
):
    """Manuscript profiles, rankings and overall change distribution."""
    sheet = sheet or settings.aggregate_sheet
    _require_sheet(data, sheet)

    profiles = compute_profiles(data.words(sheet), data.manuscripts(sheet))

    def enrich(profile) -> dict:
        row = profile.to_dict()
        info = data.catalog.get(profile.name)
        if info is not None:
            row.update(full_name=info.full_name, date=info.date, location=info.location)
        return row

    return StatisticsModel(
        sheet=sheet,
        profiles=[enrich(p) for p in most_innovative(profiles, limit=len(profiles))],
        most_innovative=[enrich(p) for p in most_innovative(profiles, settings.ranking_size)],
        most_conservative=[
            enrich(p) for p in most_conservative(profiles, settings.ranking_size)
        ],
        distribution=overall_distribution(profiles).as_series(),
    )


@router.get("/similarity", response_model=SimilaritySummaryModel)
async def similarity_summary(
    data: PsalterData = Depends(get_data),
    settings: Settings = Depends(get_settings),
):
    """Pairwise similarity statistics and rankings."""
    sim = data.similarity
    pairs = enumerate_pairs(sim.manuscripts, sim.similarity_matrix)
    summary = summarize_pairs(pairs, top=settings.ranking_size)
    return SimilaritySummaryModel(
        manuscripts=sim.manuscripts, stats=sim.stats, **summary.to_dict()
    )


@router.get("/similarity/clusters", response_model=ClustersModel)
async def similarity_clusters(
    threshold: Annotated[Optional[float], Query(ge=0, le=100)] = None,
    data: PsalterData = Depends(get_data),
    settings: Settings = Depends(get_settings),
):
    """Groups of manuscripts at or above the cluster threshold."""
    threshold = settings.cluster_threshold if threshold is None else threshold
    sim = data.similarity
    pairs = enumerate_pairs(sim.manuscripts, sim.similarity_matrix)
    return ClustersModel(
        threshold=threshold, clusters=extract_clusters(pairs, threshold=threshold)
    )


@router.get("/similarity/network", response_model=NetworkModel)
async def similarity_network(
    threshold: Annotated[Optional[float], Query(ge=0, le=100)] = None,
    data: PsalterData = Depends(get_data),
    settings: Settings = Depends(get_settings),
):
    """Nodes and edges for the force-directed similarity graph."""
    threshold = settings.network_threshold if threshold is None else threshold
    sim = data.similarity
    links = network_links(sim.manuscripts, sim.similarity_matrix, threshold=threshold)
    return NetworkModel(
        threshold=threshold,
        nodes=sim.manuscripts,
        links=[link.to_dict() for link in links],
    )


@router.get("/similarity/heatmap", response_model=HeatmapModel)
async def similarity_heatmap_cells(data: PsalterData = Depends(get_data)):
    """Similarity matrix as heatmap cells."""
    sim = data.similarity
    return similarity_heatmap(sim.manuscripts, sim.similarity_matrix)


@router.get("/similarity/dendrogram", response_model=DendrogramModel)
async def similarity_dendrogram(data: PsalterData = Depends(get_data)):
    """Hierarchical clustering tree from the linkage matrix."""
    sim = data.similarity
    tree = build_dendrogram(sim.manuscripts, sim.linkage_matrix)
    return DendrogramModel(
        tree=tree.to_dict() if tree is not None else None,
        leaf_order=leaf_order(tree),
    )


@router.get("/manuscripts", response_model=ManuscriptsModel)
async def list_manuscripts(data: PsalterData = Depends(get_data)):
    """Manuscript metadata and translation families."""
    return data.catalog.to_dict()


@router.get("/verses", response_model=VerseListModel)
async def list_verses(data: PsalterData = Depends(get_data)):
    """Verse identifiers in verse order, plus the older-psalter catalog."""
    return VerseListModel(
        verses=sort_verse_ids(data.verses),
        psalters=[p.to_dict() for p in OLDER_PSALTERS.values()],
        default_psalters=DEFAULT_PSALTERS,
    )


@router.get("/verses/{verse_id}", response_model=VerseComparisonModel)
async def get_verse(
    verse_id: str,
    psalters: Annotated[
        Optional[List[str]], Query(description="Older psalters to show")
    ] = None,
    data: PsalterData = Depends(get_data),
):
    """Latin verse with translations from the selected older psalters."""
    selected = _split(psalters) if psalters else None
    try:
        comparison = verse_comparison(data.verses, verse_id, selected)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown verse: {verse_id}")
    return comparison.to_dict()
