"""Exception hierarchy shared across parsing, resolution, and rendering."""
from __future__ import annotations


class FigmaRendererError(Exception):
    """Base class for all library errors."""


class VariableResolutionError(FigmaRendererError):
    """Raised when a design-token variable cannot be resolved."""


class NotResolvedError(VariableResolutionError):
    """Synchronous variable access attempted before the library finished resolving."""


class UnresolvedAliasError(VariableResolutionError, LookupError):
    """Alias target is absent from the library."""

    def __init__(self, variable_id: str) -> None:
        super().__init__(f"Variable {variable_id} could not be resolved")
        self.variable_id = variable_id


class AliasCycleError(VariableResolutionError):
    """Alias chain loops back onto a variable already visited."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__("Alias cycle detected: " + " -> ".join(chain))
        self.chain = chain


class AliasTypeMismatchError(VariableResolutionError):
    """Alias points at a variable holding a different payload type."""


class VariableFetchError(VariableResolutionError):
    """The variables endpoint reported an error."""


class RenderError(FigmaRendererError):
    """Raised when a subtree cannot be rendered."""


class UnsupportedPaintError(RenderError):
    """Paint kind has no SVG rendering."""

    def __init__(self, paint_type: str) -> None:
        super().__init__(f"{paint_type} not implemented yet")
        self.paint_type = paint_type


class MissingPaintError(RenderError):
    """Geometry entry resolved to no paint while skipping is disabled."""


class UnknownNodeKindError(FigmaRendererError, ValueError):
    """Raw node carries a type the tree builder does not know."""

    def __init__(self, node_type: object) -> None:
        super().__init__(f"Unknown node type: {node_type}")
        self.node_type = node_type


class UnknownPaintTypeError(FigmaRendererError, ValueError):
    """Raw paint carries a type the paint parser does not know."""

    def __init__(self, paint_type: object) -> None:
        super().__init__(f"Unknown paint type: {paint_type}")
        self.paint_type = paint_type


class MissingContextError(FigmaRendererError):
    """Operation needs the fetch context the document was not created with."""


class BranchNotFoundError(FigmaRendererError, LookupError):
    """Named branch is not listed on the document."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Branch "{name}" not found')
        self.name = name
