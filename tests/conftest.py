"""Shared fixtures: a small psalter dataset in the published JSON formats."""

from __future__ import annotations

import json

import pytest

from psalter.config import Settings
from psalter.ingest.loader import DataLoader, DirectoryResourceSource

AGGREGATE = "Všechny"


@pytest.fixture
def compact_data() -> dict:
    """Compact word data: an aggregate sheet and one psalm sheet."""
    return {
        AGGREGATE: {
            "manuscripts": ["Witt", "Klem", "Pad", "Bak"],
            "words": [
                {
                    "l": "domine",
                    "b": "hospodine",
                    "v": [None, ["hospodine", "i"], ["pane", "a"], None],
                },
                {"l": "ne", "b": "ne", "v": [None, None, ["nie", "s"], ["", "u"]]},
                {
                    "l": "in",
                    "b": "v",
                    "v": [["ve", "s"], None, ["u", "a"], ["w", "q"]],
                },
                {"l": "furore", "b": "hněvě", "v": [None, None, None, None]},
            ],
        },
        "Ž 6": {
            "manuscripts": ["Pad", "Witt"],
            "words": [{"l": "deus", "b": "bože", "v": [["hospodine", "a"], None]}],
        },
    }


@pytest.fixture
def similarity_data() -> dict:
    """Similarity resource for four manuscripts.

    Upper triangle in enumeration order:
    Witt-Klem 99, Witt-Pad 80, Witt-Bak 95, Klem-Pad 79.5, Klem-Bak 90, Pad-Bak 98
    """
    return {
        "manuscripts": ["Witt", "Klem", "Pad", "Bak"],
        "similarity_matrix": [
            [100, 99, 80, 95],
            [99, 100, 79.5, 90],
            [80, 79.5, 100, 98],
            [95, 90, 98, 100],
        ],
        "distance_matrix": [
            [0, 1, 20, 5],
            [1, 0, 20.5, 10],
            [20, 20.5, 0, 2],
            [5, 10, 2, 0],
        ],
        "linkage_matrix": [[0, 1, 1.0, 2], [2, 3, 2.0, 2], [4, 5, 10.0, 4]],
        "stats": {"num_manuscripts": 4, "num_words": 4},
    }


@pytest.fixture
def metadata_data() -> dict:
    return {
        "metadata": {
            "Witt": {
                "full_name": "Žaltář wittenberský",
                "date": "14. stol.",
                "location": "Wittenberg",
            },
            "Pad": {
                "full_name": "Bible padeřovská",
                "date": "1430-1435",
                "location": "Wien",
                "signature": "Cod. 1175-1177",
            },
        },
        "translation_families": {"first": ["Witt", "Klem"], "third": ["Pad"]},
    }


@pytest.fixture
def verse_data() -> dict:
    return {
        "Ps 6,10": {
            "latina": "exaudivit Dominus deprecationem meam",
            "translations": {"Witt": "uslyšal hospodin prosbu mú"},
        },
        "Ps 6,2": {
            "latin": "Domine ne in furore tuo arguas me",
            "translations": {
                "Witt": "Hospodine, ne v hněvě tvém tresci mne",
                "PTZ": "Hospodine, nekárej mne v hněvě svém",
                "Bak": "Pane, ne v prchlivosti své tresci mne",
            },
        },
    }


@pytest.fixture
def data_dir(tmp_path, compact_data, similarity_data, metadata_data, verse_data):
    """Directory holding the four resources under their default names."""
    settings = Settings()
    resources = {
        settings.psalter_resource: compact_data,
        settings.similarity_resource: similarity_data,
        settings.metadata_resource: metadata_data,
        settings.verses_resource: verse_data,
    }
    for name, content in resources.items():
        (tmp_path / name).write_text(
            json.dumps(content, ensure_ascii=False), encoding="utf-8"
        )
    return tmp_path


@pytest.fixture
def settings(data_dir) -> Settings:
    return Settings(data_dir=data_dir)


@pytest.fixture
def loader(settings) -> DataLoader:
    return DataLoader(DirectoryResourceSource(settings.data_dir), settings)
