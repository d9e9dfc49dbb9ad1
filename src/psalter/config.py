"""Configuration settings for Czech Psalter."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml


@dataclass
class Settings:
    """Application settings."""

    # Data location (base_url wins when both are set)
    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    base_url: str | None = None

    # Resource file names
    psalter_resource: str = "psalter_data.json"
    similarity_resource: str = "similarity_analysis.json"
    metadata_resource: str = "manuscript_metadata.json"
    verses_resource: str = "verse_translations.json"

    # HTTP fetch timeout in seconds; None waits indefinitely
    http_timeout: float | None = None

    # Statistics
    aggregate_sheet: str = "Všechny"
    ranking_size: int = 10
    cluster_threshold: float = 98.0
    network_threshold: float = 95.0

    # Comparison view limits
    max_compared_manuscripts: int = 5
    word_row_limit: int = 200

    # API server
    host: str = "127.0.0.1"
    port: int = 8000

    log_level: str = "INFO"


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings, applying overrides from a YAML file when given."""
    if path is None:
        return Settings()

    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    if "data_dir" in raw and raw["data_dir"] is not None:
        raw["data_dir"] = Path(raw["data_dir"]).expanduser()
    return Settings(**raw)


# Kind-code table of the compact word encoding
KIND_CODES = {
    "a": "autosemantic",
    "s": "synsemantic",
    "u": "unknown",
    "i": "identical",
}

# Sentinel text for a reading identical to the reference form
IDENTICAL_SENTINEL = "X"

# Labels for the aggregate change-distribution chart
DISTRIBUTION_LABELS = {
    "identical": "Identical (X)",
    "autosemantic": "Autosemantic",
    "synsemantic": "Synsemantic",
    "other": "Other",
}

# Fixed colour domain of the similarity heatmap (percent)
HEATMAP_DOMAIN = (50.0, 100.0)
