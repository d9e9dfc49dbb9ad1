"""Tests for the session data loader.

Tests cover:
- Directory and HTTP resource sources
- Consolidated load state (ready, terminal error)
- Read-through caching of the decoded snapshot
- Failure of any single resource failing the whole load
"""

from __future__ import annotations

import json

import httpx
import pytest

from psalter.config import Settings
from psalter.ingest import (
    DataLoader,
    DirectoryResourceSource,
    HttpResourceSource,
    LoaderError,
    LoadState,
    ResourceFetchError,
)


class CountingSource:
    """Wraps a source and counts fetches."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    async def fetch_json(self, name):
        self.calls.append(name)
        return await self.inner.fetch_json(name)


def _mock_transport(resources: dict, status_overrides: dict | None = None):
    status_overrides = status_overrides or {}

    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        if name in status_overrides:
            return httpx.Response(status_overrides[name])
        if name not in resources:
            return httpx.Response(404)
        return httpx.Response(200, json=resources[name])

    return httpx.MockTransport(handler)


class TestLoadState:
    def test_initial_state_is_loading(self, loader):
        state = loader.state
        assert state.loading is True
        assert state.data is None
        assert state.error is None
        assert state.ready is False

    def test_to_dict(self):
        assert LoadState(loading=False, error="boom").to_dict() == {
            "loading": False,
            "ready": False,
            "error": "boom",
        }


class TestDirectoryLoad:
    """Loading from a local directory."""

    @pytest.mark.asyncio
    async def test_load_ready(self, loader):
        state = await loader.load()
        assert state.ready
        assert state.loading is False
        data = state.data
        assert data.sheet_names == ["Všechny", "Ž 6"]
        assert data.manuscripts("Ž 6") == ["Pad", "Witt"]
        assert data.manuscripts("missing") == []
        assert len(data.words("Všechny")) == 4
        assert data.similarity.manuscripts == ["Witt", "Klem", "Pad", "Bak"]
        assert data.catalog.get("Pad").signature == "Cod. 1175-1177"
        assert data.catalog.translation_families["first"] == ["Witt", "Klem"]
        assert data.verses["Ps 6,10"].latin.startswith("exaudivit")

    @pytest.mark.asyncio
    async def test_manuscript_round_trip(self, loader, compact_data):
        data = await loader.get()
        for sheet, body in compact_data.items():
            assert data.manuscripts(sheet) == body["manuscripts"]

    @pytest.mark.asyncio
    async def test_get_is_cached(self, settings):
        source = CountingSource(DirectoryResourceSource(settings.data_dir))
        loader = DataLoader(source, settings)

        first = await loader.get()
        second = await loader.get()

        assert first is second
        assert len(source.calls) == 4

    @pytest.mark.asyncio
    async def test_missing_resource_fails_whole_load(self, settings):
        (settings.data_dir / settings.verses_resource).unlink()
        loader = DataLoader(DirectoryResourceSource(settings.data_dir), settings)

        state = await loader.load()

        assert state.loading is False
        assert state.data is None
        assert "verse_translations.json" in state.error
        assert not state.ready

    @pytest.mark.asyncio
    async def test_invalid_json(self, settings):
        (settings.data_dir / settings.metadata_resource).write_text("{not json")
        state = await DataLoader(
            DirectoryResourceSource(settings.data_dir), settings
        ).load()
        assert "invalid JSON" in state.error

    @pytest.mark.asyncio
    async def test_codec_error_reported(self, settings):
        (settings.data_dir / settings.psalter_resource).write_text(
            json.dumps({"S": {"manuscripts": ["M1"]}})
        )
        state = await DataLoader(
            DirectoryResourceSource(settings.data_dir), settings
        ).load()
        assert "Missing required field: words" in state.error

    @pytest.mark.asyncio
    async def test_malformed_similarity_reported(self, settings, similarity_data):
        similarity_data["similarity_matrix"] = similarity_data["similarity_matrix"][:2]
        (settings.data_dir / settings.similarity_resource).write_text(
            json.dumps(similarity_data)
        )
        state = await DataLoader(
            DirectoryResourceSource(settings.data_dir), settings
        ).load()
        assert "similarity_matrix must have 4 rows" in state.error

    @pytest.mark.asyncio
    async def test_failure_is_terminal(self, settings):
        verses = settings.data_dir / settings.verses_resource
        content = verses.read_text(encoding="utf-8")
        verses.unlink()
        source = CountingSource(DirectoryResourceSource(settings.data_dir))
        loader = DataLoader(source, settings)

        first = await loader.load()
        fetched = len(source.calls)
        verses.write_text(content, encoding="utf-8")
        second = await loader.load()

        assert second is first
        assert second.error is not None
        assert len(source.calls) == fetched

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "resource, field, value, message",
        [
            ("metadata_resource", "translation_families", ["a"], "translation_families must be a mapping"),
            ("metadata_resource", "translation_families", {"first": "Witt"}, "translation family first"),
            ("similarity_resource", "manuscripts", "Witt", "manuscripts must be a list of strings"),
        ],
    )
    async def test_wrong_container_type_is_terminal(
        self, settings, metadata_data, similarity_data, resource, field, value, message
    ):
        payload = metadata_data if resource == "metadata_resource" else similarity_data
        payload[field] = value
        name = getattr(settings, resource)
        (settings.data_dir / name).write_text(json.dumps(payload), encoding="utf-8")
        source = CountingSource(DirectoryResourceSource(settings.data_dir))
        loader = DataLoader(source, settings)

        state = await loader.load()
        fetched = len(source.calls)

        assert state.loading is False
        assert message in state.error
        assert await loader.load() is state
        assert len(source.calls) == fetched

    @pytest.mark.asyncio
    async def test_translations_not_mapping(self, settings, verse_data):
        verse_data["Ps 6,2"]["translations"] = [1]
        (settings.data_dir / settings.verses_resource).write_text(
            json.dumps(verse_data), encoding="utf-8"
        )
        state = await DataLoader(
            DirectoryResourceSource(settings.data_dir), settings
        ).load()
        assert state.loading is False
        assert "Translations of verse Ps 6,2 must be a mapping" in state.error

    @pytest.mark.asyncio
    async def test_non_utf8_file(self, settings):
        (settings.data_dir / settings.psalter_resource).write_bytes(b'{"S": "\xff"}')
        loader = DataLoader(DirectoryResourceSource(settings.data_dir), settings)

        state = await loader.load()

        assert state.loading is False
        assert "psalter_data.json" in state.error
        assert "not valid UTF-8" in state.error
        with pytest.raises(LoaderError, match="not valid UTF-8"):
            await loader.get()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_terminal(self, settings):
        class BrokenSource:
            calls = 0

            async def fetch_json(self, name):
                BrokenSource.calls += 1
                raise RuntimeError("disk on fire")

        loader = DataLoader(BrokenSource(), settings)

        state = await loader.load()
        fetched = BrokenSource.calls

        assert state.loading is False
        assert state.error == "RuntimeError: disk on fire"
        assert await loader.load() is state
        assert BrokenSource.calls == fetched

    @pytest.mark.asyncio
    async def test_get_raises_after_failure(self, tmp_path):
        loader = DataLoader(DirectoryResourceSource(tmp_path), Settings(data_dir=tmp_path))
        with pytest.raises(LoaderError, match="file not found"):
            await loader.get()

    def test_load_sync(self, loader):
        data = loader.load_sync()
        assert "Všechny" in data.sheets


class TestHttpSource:
    """Fetching over HTTP with httpx."""

    @pytest.fixture
    def resources(self, compact_data, similarity_data, metadata_data, verse_data):
        s = Settings()
        return {
            s.psalter_resource: compact_data,
            s.similarity_resource: similarity_data,
            s.metadata_resource: metadata_data,
            s.verses_resource: verse_data,
        }

    @pytest.mark.asyncio
    async def test_fetch_json(self, resources):
        source = HttpResourceSource(
            "http://example.test/data", transport=_mock_transport(resources)
        )
        data = await source.fetch_json("manuscript_metadata.json")
        assert data["metadata"]["Witt"]["location"] == "Wittenberg"

    @pytest.mark.asyncio
    async def test_non_success_status(self, resources):
        source = HttpResourceSource(
            "http://example.test/data",
            transport=_mock_transport(resources, {"similarity_analysis.json": 500}),
        )
        with pytest.raises(ResourceFetchError) as exc_info:
            await source.fetch_json("similarity_analysis.json")
        assert exc_info.value.status_code == 500
        assert exc_info.value.resource == "similarity_analysis.json"

    @pytest.mark.asyncio
    async def test_full_load_over_http(self, resources):
        source = HttpResourceSource(
            "http://example.test/data/", transport=_mock_transport(resources)
        )
        state = await DataLoader(source).load()
        assert state.ready
        assert state.data.words("Ž 6")[0].latin == "deus"

    @pytest.mark.asyncio
    async def test_one_failed_fetch_fails_load(self, resources):
        source = HttpResourceSource(
            "http://example.test/data",
            transport=_mock_transport(resources, {"verse_translations.json": 404}),
        )
        state = await DataLoader(source).load()
        assert state.data is None
        assert "HTTP 404" in state.error

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        source = HttpResourceSource(
            "http://example.test", transport=httpx.MockTransport(handler)
        )
        with pytest.raises(ResourceFetchError, match="connection refused"):
            await source.fetch_json("psalter_data.json")


class TestFromSettings:
    def test_directory_source_by_default(self, tmp_path):
        loader = DataLoader.from_settings(Settings(data_dir=tmp_path))
        assert isinstance(loader.source, DirectoryResourceSource)
        assert loader.source.root == tmp_path

    def test_http_source_when_base_url_set(self):
        loader = DataLoader.from_settings(
            Settings(base_url="https://example.test/psalter", http_timeout=3.0)
        )
        assert isinstance(loader.source, HttpResourceSource)
        assert loader.source.base_url == "https://example.test/psalter/"
        assert loader.source.timeout == 3.0
