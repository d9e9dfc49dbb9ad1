"""Tests for resource models and settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from psalter.config import Settings, load_settings
from psalter.ingest import (
    ManuscriptCatalog,
    ResourceFormatError,
    SimilarityData,
    parse_verses,
)


class TestSimilarityData:
    def test_from_dict(self, similarity_data):
        sim = SimilarityData.from_dict(similarity_data)
        assert sim.manuscripts == ["Witt", "Klem", "Pad", "Bak"]
        assert sim.similarity_matrix[3][2] == 98.0
        assert len(sim.linkage_matrix) == 3
        assert sim.stats["num_words"] == 4

    def test_missing_matrix(self):
        with pytest.raises(ResourceFormatError, match="similarity_matrix"):
            SimilarityData.from_dict({"manuscripts": []})

    def test_ragged_row(self, similarity_data):
        similarity_data["similarity_matrix"][1] = [99, 100]
        with pytest.raises(ResourceFormatError, match="row 1 must have 4 values"):
            SimilarityData.from_dict(similarity_data)

    def test_non_numeric_value(self, similarity_data):
        similarity_data["similarity_matrix"][0][1] = "high"
        with pytest.raises(ResourceFormatError, match="only numbers"):
            SimilarityData.from_dict(similarity_data)

    @pytest.mark.parametrize(
        "row, node",
        [
            ([0, 4, 1.0, 2], "4"),
            ([-1, 1, 1.0, 2], "-1"),
            ([0, 1.5, 1.0, 2], "1.5"),
        ],
    )
    def test_linkage_unknown_node(self, similarity_data, row, node):
        similarity_data["linkage_matrix"][0] = row
        with pytest.raises(ResourceFormatError, match=f"row 0 references unknown node {node}$"):
            SimilarityData.from_dict(similarity_data)

    def test_linkage_may_reference_earlier_merge(self, similarity_data):
        similarity_data["linkage_matrix"][2] = [5, 4, 10.0, 4]
        sim = SimilarityData.from_dict(similarity_data)
        assert sim.linkage_matrix[2][:2] == [5.0, 4.0]

    def test_linkage_forward_reference(self, similarity_data):
        similarity_data["linkage_matrix"][1] = [2, 5, 2.0, 2]
        with pytest.raises(ResourceFormatError, match="row 1 references unknown node 5"):
            SimilarityData.from_dict(similarity_data)

    def test_manuscripts_not_list(self, similarity_data):
        similarity_data["manuscripts"] = "Witt"
        with pytest.raises(ResourceFormatError, match="list of strings"):
            SimilarityData.from_dict(similarity_data)

    def test_optional_matrices(self):
        sim = SimilarityData.from_dict({"manuscripts": ["A"], "similarity_matrix": [[100]]})
        assert sim.distance_matrix == []
        assert sim.linkage_matrix == []


class TestManuscriptCatalog:
    def test_wrapped_form(self, metadata_data):
        catalog = ManuscriptCatalog.from_dict(metadata_data)
        assert catalog.get("Witt").full_name == "Žaltář wittenberský"
        assert catalog.get("Witt").signature is None
        assert catalog.get("Kap") is None
        assert catalog.translation_families == {"first": ["Witt", "Klem"], "third": ["Pad"]}

    def test_flat_form(self):
        catalog = ManuscriptCatalog.from_dict(
            {"Klem": {"full_name": "Žaltář klementinský", "date": "14. stol."}}
        )
        assert catalog.get("Klem").location == ""
        assert catalog.translation_families == {}

    def test_round_trip_dict(self, metadata_data):
        d = ManuscriptCatalog.from_dict(metadata_data).to_dict()
        assert d["metadata"]["Pad"]["signature"] == "Cod. 1175-1177"

    def test_invalid_entry(self):
        with pytest.raises(ResourceFormatError):
            ManuscriptCatalog.from_dict({"metadata": {"Witt": "text"}})

    def test_families_not_mapping(self, metadata_data):
        metadata_data["translation_families"] = ["first"]
        with pytest.raises(ResourceFormatError, match="translation_families must be a mapping"):
            ManuscriptCatalog.from_dict(metadata_data)

    def test_family_members_not_list(self, metadata_data):
        metadata_data["translation_families"]["third"] = "Pad"
        with pytest.raises(ResourceFormatError, match="translation family third"):
            ManuscriptCatalog.from_dict(metadata_data)


class TestParseVerses:
    def test_missing_latin(self):
        with pytest.raises(ResourceFormatError, match="no Latin text"):
            parse_verses({"Ps 6,2": {"translations": {}}})

    def test_translations_not_mapping(self):
        with pytest.raises(ResourceFormatError, match="must be a mapping"):
            parse_verses({"Ps 6,2": {"latin": "Domine", "translations": [["Witt"]]}})


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings == Settings()
        assert settings.aggregate_sheet == "Všechny"
        assert settings.cluster_threshold == 98.0
        assert settings.http_timeout is None

    def test_yaml_overrides(self, tmp_path):
        config = tmp_path / "psalter.yaml"
        config.write_text(
            "data_dir: /srv/psalter\nranking_size: 5\nbase_url: https://example.test/data\n",
            encoding="utf-8",
        )
        settings = load_settings(config)
        assert settings.data_dir == Path("/srv/psalter")
        assert settings.ranking_size == 5
        assert settings.base_url == "https://example.test/data"

    def test_unknown_key(self, tmp_path):
        config = tmp_path / "psalter.yaml"
        config.write_text("rankng_size: 5\n", encoding="utf-8")
        with pytest.raises(ValueError, match="rankng_size"):
            load_settings(config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "psalter.yaml"
        config.write_text("", encoding="utf-8")
        assert load_settings(config) == Settings()
