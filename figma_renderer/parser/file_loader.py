"""Document loader that pulls file and variable payloads through injected collaborators.

The loader never talks to the network itself: it builds endpoint URLs and
hands them to a ``fetch`` coroutine, consulting an optional response cache
before and storing the response after.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Protocol
from urllib.parse import urlencode

from figma_renderer.errors import VariableFetchError
from figma_renderer.model.document_model import Branch, Document
from figma_renderer.model.variables import RawLibrary, VariableLibrary
from figma_renderer.parser.document_parser import DocumentParser
from figma_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

API_ROOT = "https://api.figma.com"
FILE_PATH = "/v1/files/{key}"
VARIABLES_PATH = "/v1/files/{key}/variables/local"
FILE_QUERY = {"branch_data": "1", "geometry": "paths"}

Fetch = Callable[[str], Awaitable[Mapping[str, Any]]]


class ResponseCache(Protocol):
    """Key-value store for deserialized responses."""

    async def get(self, key: str) -> Optional[Mapping[str, Any]]:
        ...

    async def set(self, key: str, value: Mapping[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class FileSource:
    """Everything needed to (re)load a file: its key and the I/O collaborators."""

    key: str
    fetch: Fetch
    cache: Optional[ResponseCache] = None
    api_root: str = API_ROOT

    def for_key(self, key: str) -> "FileSource":
        """Same collaborators, pointed at another file or branch key."""
        return replace(self, key=key)

    @property
    def file_url(self) -> str:
        return f"{self.api_root}{FILE_PATH.format(key=self.key)}?{urlencode(FILE_QUERY)}"

    @property
    def variables_url(self) -> str:
        return f"{self.api_root}{VARIABLES_PATH.format(key=self.key)}"


class DocumentLoader:
    """Fetch, cache and parse one file into a :class:`Document`."""

    def __init__(self, source: FileSource) -> None:
        self._source = source

    async def load(self) -> Document:
        """Load the file; the variable library stays deferred until first resolution."""
        data = await self._get_json(self._source.file_url)
        library = VariableLibrary.deferred(self._fetch_variables)
        root = DocumentParser(library).parse(data["document"])
        branches = parse_branches(data.get("branches"))
        LOGGER.info("Loaded file %s with %d branches", self._source.key, len(branches))
        return Document(
            root=root,
            library=library,
            branches=branches,
            source=self._source,
            name=data.get("name"),
        )

    async def _fetch_variables(self) -> RawLibrary:
        data = await self._get_json(self._source.variables_url)
        if data.get("error"):
            raise VariableFetchError(
                f"Error fetching variables for {self._source.key} (status {data.get('status')})"
            )
        return data.get("meta") or {}

    async def _get_json(self, url: str) -> Mapping[str, Any]:
        cache = self._source.cache
        if cache is not None:
            cached = await cache.get(url)
            if cached:
                LOGGER.debug("Cache hit for %s", url)
                return cached

        LOGGER.debug("Fetching %s", url)
        data = await self._source.fetch(url)
        if cache is not None and not data.get("error"):
            await cache.set(url, data)
        return data


def parse_branches(raw: Any) -> List[Branch]:
    """Accept either a list or an id-keyed mapping of branch entries."""
    if not raw:
        return []
    entries = raw.values() if isinstance(raw, Mapping) else raw
    return [
        Branch(
            key=entry["key"],
            name=entry["name"],
            thumbnail_url=entry.get("thumbnail_url"),
            last_modified=entry.get("last_modified"),
        )
        for entry in entries
    ]
