"""Entry-points for the document -> tree -> SVG pipeline."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List, Mapping, Optional

from figma_renderer.model.document_model import Document
from figma_renderer.model.node_tree import Node, Selector
from figma_renderer.model.variables import VariableLibrary
from figma_renderer.parser.document_parser import DocumentParser
from figma_renderer.parser.file_loader import DocumentLoader, FileSource, parse_branches
from figma_renderer.renderer.markup import DEFAULT_TAB_WIDTH
from figma_renderer.renderer.svg_renderer import RenderOptions, SvgRenderer
from figma_renderer.utils.debug import DebugDumper
from figma_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.-]+")


def build_document(file_data: Mapping[str, Any], library: Optional[VariableLibrary] = None) -> Document:
    """Build a document from an already-fetched file response.

    ``file_data`` is either the full file response (with a ``document`` key) or
    a bare node. Without a library an empty, resolved one is used.
    """
    if library is None:
        library = VariableLibrary.from_data({})
    raw_root = file_data.get("document", file_data)
    root = DocumentParser(library).parse(raw_root)
    return Document(
        root=root,
        library=library,
        branches=parse_branches(file_data.get("branches")),
        name=file_data.get("name"),
    )


async def load_document(source: FileSource) -> Document:
    """Fetch and parse a file through ``source``'s collaborators."""
    LOGGER.info("Loading file %s", source.key)
    return await DocumentLoader(source).load()


def render_node(node: Node, options: Optional[RenderOptions] = None, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
    """Render ``node`` and its subtree as SVG text."""
    return SvgRenderer(options).render(node).to_string(tab_width)


def render_outputs(
    document: Document,
    output_dir: Path,
    selector: Optional[Selector] = None,
    *,
    options: Optional[RenderOptions] = None,
    debug: bool = False,
    **filters: object,
) -> List[Path]:
    """Write one ``.svg`` file per node matching ``selector`` and ``filters``.

    With ``debug`` the parsed tree is also dumped under ``output_dir / "debug"``.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    if debug:
        DebugDumper(output_dir / "debug").dump(document)
    written: List[Path] = []
    for node in document.query_selector_all(selector, **filters).to_list():
        target = output_dir / f"{_filename(node)}.svg"
        target.write_text(render_node(node, options), encoding="utf-8")
        written.append(target)
    LOGGER.info("Rendered %d nodes into %s", len(written), output_dir)
    return written


def _filename(node: Node) -> str:
    stem = _UNSAFE_FILENAME.sub("_", node.name).strip("_") or "node"
    node_id = _UNSAFE_FILENAME.sub("_", node.id)
    return f"{stem}_{node_id}"
