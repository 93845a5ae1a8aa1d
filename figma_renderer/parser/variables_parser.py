"""Parse the raw variables payload into typed variables and collections."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from figma_renderer.model.paints import Color
from figma_renderer.model.variables import (
    Mode,
    Variable,
    VariableAlias,
    VariableCollection,
    VariableType,
    VariableValue,
)
from figma_renderer.utils.logger import get_logger

if TYPE_CHECKING:
    from figma_renderer.model.variables import VariableLibrary

LOGGER = get_logger(__name__)

ALIAS_TYPE = "VARIABLE_ALIAS"


def is_alias(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get("type") == ALIAS_TYPE and "id" in value


def parse_color(raw: Mapping[str, Any]) -> Color:
    """Build a color from an ``{r, g, b[, a]}`` mapping."""
    return Color(r=float(raw["r"]), g=float(raw["g"]), b=float(raw["b"]), a=float(raw.get("a", 1.0)))


class VariablesParser:
    """Convert the ``variables``/``variableCollections`` payload for a library."""

    def __init__(self, library: "VariableLibrary") -> None:
        self._library = library

    def parse(self, raw: Mapping[str, Any]) -> Tuple[Dict[str, Variable], Dict[str, VariableCollection]]:
        variables: Dict[str, Variable] = {}
        for raw_variable in (raw.get("variables") or {}).values():
            variable = self._parse_variable(raw_variable)
            if variable is not None:
                variables[variable.id] = variable

        collections: Dict[str, VariableCollection] = {}
        for raw_collection in (raw.get("variableCollections") or {}).values():
            collection = self._parse_collection(raw_collection)
            collections[collection.id] = collection
        return variables, collections

    def _parse_collection(self, raw: Mapping[str, Any]) -> VariableCollection:
        modes = [Mode(mode_id=mode["modeId"], name=mode.get("name", "")) for mode in raw.get("modes", [])]
        return VariableCollection(
            id=raw["id"],
            name=raw.get("name", ""),
            modes=modes,
            default_mode_id=raw["defaultModeId"],
            key=raw.get("key"),
            remote=bool(raw.get("remote", False)),
            hidden_from_publishing=bool(raw.get("hiddenFromPublishing", False)),
            variable_ids=list(raw.get("variableIds", [])),
        )

    def _parse_variable(self, raw: Mapping[str, Any]) -> Optional[Variable]:
        try:
            resolved_type = VariableType(raw.get("resolvedType"))
        except ValueError:
            LOGGER.warning("Skipping variable %s with unknown type %r", raw.get("id"), raw.get("resolvedType"))
            return None

        variable = Variable(
            id=raw["id"],
            name=raw.get("name", ""),
            resolved_type=resolved_type,
            variable_collection_id=raw.get("variableCollectionId", ""),
            library=self._library,
            key=raw.get("key"),
            description=raw.get("description", ""),
            remote=bool(raw.get("remote", False)),
            hidden_from_publishing=bool(raw.get("hiddenFromPublishing", False)),
            scopes=list(raw.get("scopes", [])),
            code_syntax=dict(raw.get("codeSyntax") or {}),
        )
        for mode_id, raw_value in (raw.get("valuesByMode") or {}).items():
            value = self._parse_value(resolved_type, raw_value)
            if value is None:
                LOGGER.warning(
                    "Dropping %s value for mode %s of variable %s: %r",
                    resolved_type.value,
                    mode_id,
                    variable.id,
                    raw_value,
                )
                continue
            variable.values_by_mode[mode_id] = value
        return variable

    def _parse_value(self, resolved_type: VariableType, raw: Any) -> Optional[VariableValue]:
        if is_alias(raw):
            return VariableAlias(id=raw["id"], library=self._library)
        if resolved_type is VariableType.BOOLEAN:
            return raw if isinstance(raw, bool) else None
        if resolved_type is VariableType.FLOAT:
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                return float(raw)
            return None
        if resolved_type is VariableType.STRING:
            return raw if isinstance(raw, str) else None
        if isinstance(raw, Mapping) and {"r", "g", "b"} <= raw.keys():
            return parse_color(raw)
        return None
