"""Aggregate model combining the node tree, its variables, and its fetch context."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from figma_renderer.errors import BranchNotFoundError, MissingContextError
from figma_renderer.model.node_tree import Node, NodeList, Selector
from figma_renderer.model.variables import VariableLibrary

if TYPE_CHECKING:
    from figma_renderer.parser.file_loader import FileSource


@dataclass(slots=True, frozen=True)
class Branch:
    """Alternate variant of a file, addressed by its own key."""

    key: str
    name: str
    thumbnail_url: Optional[str] = None
    last_modified: Optional[str] = None


@dataclass(slots=True)
class Document:
    """Parsed document root plus the variable library its paints refer to."""

    root: Node
    library: VariableLibrary
    branches: List[Branch] = field(default_factory=list)
    source: Optional["FileSource"] = None
    name: Optional[str] = None

    def query_selector_all(self, selector: Optional[Selector] = None, **filters: object) -> NodeList:
        return self.root.query_selector_all(selector, **filters)

    def query_selector(self, selector: Optional[Selector] = None, **filters: object) -> Optional[Node]:
        return self.root.query_selector(selector, **filters)

    async def branch(self, name: str) -> "Document":
        """Load the named branch as an independent document."""
        if self.source is None:
            raise MissingContextError("Cannot switch branch on a document that was not loaded from a file source")
        for branch in self.branches:
            if branch.name == name:
                break
        else:
            raise BranchNotFoundError(name)

        from figma_renderer.parser.file_loader import DocumentLoader

        return await DocumentLoader(self.source.for_key(branch.key)).load()
