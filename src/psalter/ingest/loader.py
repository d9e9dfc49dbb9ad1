"""Session data loader.

Fetches the four static JSON resources concurrently, decodes the compact
word data and publishes one consolidated state. The loader owns the
decoded snapshot: it is built once per session and handed to consumers
by reference.

Fail fast if:
- Any resource is missing, unreachable or answers with a non-success status
- A resource is not valid JSON or has the wrong shape
- The compact word data violates the wire contract

There is no retry. A failed load is terminal for the loader instance.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import httpx

from psalter.config import Settings
from psalter.ingest.resources import (
    ManuscriptCatalog,
    ResourceFormatError,
    SimilarityData,
    VerseTranslation,
    parse_verses,
)
from psalter.variants.codec import CodecError, decode_compact, get_manuscripts
from psalter.variants.models import WordEntry

logger = logging.getLogger(__name__)


class LoaderError(Exception):
    """Raised when session data cannot be loaded."""

    pass


class ResourceFetchError(LoaderError):
    """Raised when a resource cannot be retrieved or parsed as JSON."""

    def __init__(self, resource: str, message: str, status_code: int | None = None):
        self.resource = resource
        self.status_code = status_code
        super().__init__(f"Failed to load {resource}: {message}")


class ResourceSource(Protocol):
    """Anything that can return a named JSON resource."""

    async def fetch_json(self, name: str) -> Any: ...


class DirectoryResourceSource:
    """Reads resources from a local directory."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirectoryResourceSource({str(self.root)!r})"

    async def fetch_json(self, name: str) -> Any:
        path = self.root / name
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ResourceFetchError(name, f"file not found: {path}")
        except UnicodeDecodeError as e:
            raise ResourceFetchError(name, f"not valid UTF-8: {e}")
        except OSError as e:
            raise ResourceFetchError(name, str(e))
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ResourceFetchError(name, f"invalid JSON: {e}")


class HttpResourceSource:
    """Fetches resources relative to a base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.transport = transport

    def __repr__(self) -> str:
        return f"HttpResourceSource({self.base_url!r})"

    async def fetch_json(self, name: str) -> Any:
        url = self.base_url + name
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise ResourceFetchError(name, str(e) or type(e).__name__)

        if not response.is_success:
            raise ResourceFetchError(
                name, f"HTTP {response.status_code}", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise ResourceFetchError(name, f"invalid JSON: {e}")


@dataclass
class PsalterData:
    """Consolidated, read-only snapshot of all session resources."""

    sheets: dict[str, list[WordEntry]]
    sheet_manuscripts: dict[str, list[str]]
    similarity: SimilarityData
    catalog: ManuscriptCatalog
    verses: dict[str, VerseTranslation] = field(default_factory=dict)

    @property
    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def words(self, sheet: str) -> list[WordEntry]:
        """Decoded entries of a sheet; KeyError if the sheet is unknown."""
        return self.sheets[sheet]

    def manuscripts(self, sheet: str) -> list[str]:
        """Manuscripts declared for a sheet ([] if unknown)."""
        return list(self.sheet_manuscripts.get(sheet, []))


@dataclass
class LoadState:
    """Loading/error/ready state published by the loader."""

    data: PsalterData | None = None
    loading: bool = True
    error: str | None = None

    @property
    def ready(self) -> bool:
        return not self.loading and self.error is None and self.data is not None

    def to_dict(self) -> dict:
        """Serialize status fields (without the data snapshot)."""
        return {"loading": self.loading, "ready": self.ready, "error": self.error}


class DataLoader:
    """Loads session data once and caches the decoded snapshot."""

    def __init__(self, source: ResourceSource, settings: Settings | None = None):
        self.source = source
        self.settings = settings or Settings()
        self._state = LoadState()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DataLoader":
        """Pick an HTTP or directory source based on settings."""
        if settings.base_url:
            source: ResourceSource = HttpResourceSource(
                settings.base_url, timeout=settings.http_timeout
            )
        else:
            source = DirectoryResourceSource(settings.data_dir)
        return cls(source, settings)

    @property
    def state(self) -> LoadState:
        return self._state

    async def load(self) -> LoadState:
        """Run the load once; later calls return the terminal state."""
        if not self._state.loading:
            return self._state

        s = self.settings
        names = (
            s.psalter_resource,
            s.similarity_resource,
            s.metadata_resource,
            s.verses_resource,
        )
        logger.info(f"Loading psalter resources from {self.source!r}")

        try:
            compact, similarity, metadata, verses = await asyncio.gather(
                *(self.source.fetch_json(name) for name in names)
            )
            data = PsalterData(
                sheets=decode_compact(compact),
                sheet_manuscripts={
                    sheet: get_manuscripts(compact, sheet) for sheet in compact
                },
                similarity=SimilarityData.from_dict(similarity, s.similarity_resource),
                catalog=ManuscriptCatalog.from_dict(metadata, s.metadata_resource),
                verses=parse_verses(verses, s.verses_resource),
            )
        except (LoaderError, CodecError, ResourceFormatError) as e:
            logger.error(f"Psalter data load failed: {e}")
            self._state = LoadState(data=None, loading=False, error=str(e))
            return self._state
        except Exception as e:
            # Anything unexpected still ends the load; there is no retry.
            logger.exception("Unexpected error while loading psalter data")
            self._state = LoadState(
                data=None, loading=False, error=f"{type(e).__name__}: {e}"
            )
            return self._state

        logger.info(
            f"Loaded {len(data.sheets)} sheets, "
            f"{len(data.similarity.manuscripts)} manuscripts in similarity matrix, "
            f"{len(data.verses)} verses"
        )
        self._state = LoadState(data=data, loading=False, error=None)
        return self._state

    async def get(self) -> PsalterData:
        """Read-through accessor for the cached snapshot."""
        state = await self.load()
        if state.error is not None or state.data is None:
            raise LoaderError(state.error or "Unknown error")
        return state.data

    def load_sync(self) -> PsalterData:
        """Blocking variant of get() for command-line use."""
        return asyncio.run(self.get())
