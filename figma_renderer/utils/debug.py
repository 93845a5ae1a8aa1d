"""Helpers to persist parsed documents for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from figma_renderer.model.document_model import Document
from figma_renderer.model.node_tree import Node
from figma_renderer.model.variables import VariableAlias, VariableLibrary


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document) -> Path:
        """Persist the node tree as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {
            "name": document.name,
            "branches": [branch.name for branch in document.branches],
            "variables": self._serialize_library(document.library),
            "root": self._serialize_node(document.root),
        }
        target = self.directory / "document_tree.json"
        target.write_text(json.dumps(payload, indent=2))
        return target

    def _serialize_node(self, node: Node) -> dict:
        return {
            "id": node.id,
            "name": node.name,
            "kind": node.kind.value,
            "visible": node.visible,
            "payload": self._serialize(node.payload),
            "children": [self._serialize_node(child) for child in node.children],
        }

    def _serialize_library(self, library: VariableLibrary) -> Any:
        if not library.resolved:
            return library.state.value
        return {variable_id: variable.name for variable_id, variable in library.variables.items()}

    def _serialize(self, value: Any) -> Any:
        # Aliases point back at the library; print only the target id.
        if isinstance(value, VariableAlias):
            return {"alias": value.id}
        if isinstance(value, Enum):
            return value.value
        if is_dataclass(value):
            return {f.name: self._serialize(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, dict):
            return {str(k): self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
