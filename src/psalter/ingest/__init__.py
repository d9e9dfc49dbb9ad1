"""Ingest module: loading of the static JSON resources.

Resources:
- psalter_data.json: compact word-variant data (decoded by psalter.variants)
- similarity_analysis.json: similarity, distance and linkage matrices
- manuscript_metadata.json: display metadata and translation families
- verse_translations.json: Latin verses with older Czech translations
"""

from psalter.ingest.resources import (
    ManuscriptCatalog,
    ManuscriptInfo,
    ResourceFormatError,
    SimilarityData,
    VerseTranslation,
    parse_verses,
)
from psalter.ingest.loader import (
    DataLoader,
    DirectoryResourceSource,
    HttpResourceSource,
    LoadState,
    LoaderError,
    PsalterData,
    ResourceFetchError,
)

__all__ = [
    # Resources
    "SimilarityData",
    "ManuscriptInfo",
    "ManuscriptCatalog",
    "VerseTranslation",
    "ResourceFormatError",
    "parse_verses",
    # Loader
    "DataLoader",
    "DirectoryResourceSource",
    "HttpResourceSource",
    "LoadState",
    "LoaderError",
    "PsalterData",
    "ResourceFetchError",
]
