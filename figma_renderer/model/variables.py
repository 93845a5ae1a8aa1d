"""Design-token variables, their collections, and the resolving library.

A :class:`VariableLibrary` is either built from already-fetched data or wraps
a deferred resolver coroutine. Resolution follows an explicit state machine::

    UNRESOLVED -> RESOLVING -> RESOLVED
                           \\-> FAILED

Concurrent callers of :meth:`VariableLibrary.resolve_all` share one in-flight
task, so the resolver runs at most once per library.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from figma_renderer.errors import (
    AliasCycleError,
    AliasTypeMismatchError,
    NotResolvedError,
    UnresolvedAliasError,
    VariableResolutionError,
)
from figma_renderer.model.paints import Color
from figma_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

MAX_ALIAS_DEPTH = 64

RawLibrary = Mapping[str, Any]
LibraryResolver = Callable[[], Awaitable[RawLibrary]]


class VariableType(Enum):
    BOOLEAN = "BOOLEAN"
    FLOAT = "FLOAT"
    STRING = "STRING"
    COLOR = "COLOR"


class LibraryState(Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class Mode:
    mode_id: str
    name: str


@dataclass(slots=True)
class VariableCollection:
    """Set of modes shared by the variables it groups."""

    id: str
    name: str
    modes: List[Mode]
    default_mode_id: str
    key: Optional[str] = None
    remote: bool = False
    hidden_from_publishing: bool = False
    variable_ids: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.default_mode_id not in {mode.mode_id for mode in self.modes}:
            raise ValueError(
                f"Collection {self.id} default mode {self.default_mode_id!r} is not one of its modes"
            )

    def mode(self, mode_id: str) -> Optional[Mode]:
        for mode in self.modes:
            if mode.mode_id == mode_id:
                return mode
        return None


@dataclass(slots=True, eq=False)
class VariableAlias:
    """Weak reference from a mode slot to another variable, looked up by id."""

    id: str
    library: "VariableLibrary"

    async def resolve(self) -> "Variable":
        """Dereference one hop, resolving the library first if needed."""
        variable = await self.library.resolve(self.id)
        if variable is None:
            raise UnresolvedAliasError(self.id)
        return variable

    def resolve_sync(self) -> "Variable":
        """Dereference one hop against an already-resolved library."""
        variable = self.library.get(self.id)
        if variable is None:
            raise UnresolvedAliasError(self.id)
        return variable

    async def value(self) -> "VariableValue":
        return (await self.resolve()).value()


ConcreteValue = Union[bool, float, str, Color]
VariableValue = Union[ConcreteValue, VariableAlias]


@dataclass(slots=True, eq=False)
class Variable:
    """A typed design token whose value may differ per mode."""

    id: str
    name: str
    resolved_type: VariableType
    variable_collection_id: str
    library: "VariableLibrary" = field(repr=False)
    key: Optional[str] = None
    description: str = ""
    remote: bool = False
    hidden_from_publishing: bool = False
    scopes: List[str] = field(default_factory=list)
    code_syntax: Dict[str, str] = field(default_factory=dict)
    values_by_mode: Dict[str, VariableValue] = field(default_factory=dict)

    @property
    def collection(self) -> VariableCollection:
        collection = self.library.collection(self.variable_collection_id)
        if collection is None:
            raise VariableResolutionError(
                f"Collection {self.variable_collection_id} of variable {self.id} not found"
            )
        return collection

    def value(self, mode_id: Optional[str] = None) -> Optional[VariableValue]:
        """Value for ``mode_id``, defaulting to the collection's default mode."""
        if mode_id is None:
            mode_id = self.collection.default_mode_id
        return self.values_by_mode.get(mode_id)

    def resolved_value(self, mode_id: Optional[str] = None) -> Optional[ConcreteValue]:
        """Follow aliases until a concrete value is reached.

        Aliased variables are read in their own collection's default mode. A
        chain revisiting a variable, or longer than ``MAX_ALIAS_DEPTH``, raises
        :class:`AliasCycleError`.
        """
        chain = [self.id]
        value = self.value(mode_id)
        while isinstance(value, VariableAlias):
            target = value.resolve_sync()
            if target.resolved_type is not self.resolved_type:
                raise AliasTypeMismatchError(
                    f"Variable {chain[-1]} ({self.resolved_type.value}) aliases "
                    f"{target.id} ({target.resolved_type.value})"
                )
            if target.id in chain or len(chain) > MAX_ALIAS_DEPTH:
                raise AliasCycleError(chain + [target.id])
            chain.append(target.id)
            value = target.value()
        return value


class VariableLibrary:
    """Id-indexed store of variables and collections with coalesced resolution."""

    def __init__(self, resolver: Optional[LibraryResolver] = None) -> None:
        self._resolver = resolver
        self._variables: Dict[str, Variable] = {}
        self._collections: Dict[str, VariableCollection] = {}
        self._state = LibraryState.UNRESOLVED
        self._pending: Optional[asyncio.Future[None]] = None
        self._error: Optional[BaseException] = None

    @classmethod
    def from_data(cls, raw: RawLibrary) -> "VariableLibrary":
        """Build a library that is resolved from the start."""
        library = cls()
        library._load(raw)
        return library

    @classmethod
    def deferred(cls, resolver: LibraryResolver) -> "VariableLibrary":
        """Build a library that calls ``resolver`` on first resolution."""
        return cls(resolver)

    @property
    def state(self) -> LibraryState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state is LibraryState.RESOLVED

    @property
    def variables(self) -> Mapping[str, Variable]:
        return dict(self._variables)

    @property
    def collections(self) -> Mapping[str, VariableCollection]:
        return dict(self._collections)

    def collection(self, collection_id: str) -> Optional[VariableCollection]:
        return self._collections.get(collection_id)

    def get(self, variable_id: str) -> Optional[Variable]:
        """Synchronous lookup; the library must already be resolved."""
        if self._state is not LibraryState.RESOLVED:
            raise NotResolvedError(f"Library not resolved (state: {self._state.value})")
        return self._variables.get(variable_id)

    async def resolve(self, variable_id: str) -> Optional[Variable]:
        await self.resolve_all()
        return self.get(variable_id)

    async def resolve_all(self) -> None:
        """Resolve once; concurrent callers await the same in-flight task."""
        if self._state is LibraryState.RESOLVED:
            return
        if self._state is LibraryState.FAILED:
            assert self._error is not None
            raise self._error
        if self._pending is None:
            if self._resolver is None:
                self._load({})
                return
            self._state = LibraryState.RESOLVING
            self._pending = asyncio.ensure_future(self._run_resolver())
        await asyncio.shield(self._pending)

    async def _run_resolver(self) -> None:
        assert self._resolver is not None
        LOGGER.debug("Resolving variable library")
        try:
            raw = await self._resolver()
            self._load(raw)
        except BaseException as exc:
            self._state = LibraryState.FAILED
            self._error = exc
            LOGGER.warning("Variable library resolution failed: %s", exc)
            raise
        finally:
            self._pending = None

    def _load(self, raw: RawLibrary) -> None:
        from figma_renderer.parser.variables_parser import VariablesParser

        variables, collections = VariablesParser(self).parse(raw)
        self._variables = variables
        self._collections = collections
        self._state = LibraryState.RESOLVED
        LOGGER.debug("Loaded %d variables in %d collections", len(variables), len(collections))
