"""Colors and paints attached to node fills, strokes and backgrounds."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from figma_renderer.utils.numbers import CHANNEL_SCALE, format_number

if TYPE_CHECKING:
    from figma_renderer.model.variables import VariableAlias


class PaintType(Enum):
    SOLID = "SOLID"
    GRADIENT_LINEAR = "GRADIENT_LINEAR"
    GRADIENT_RADIAL = "GRADIENT_RADIAL"
    GRADIENT_ANGULAR = "GRADIENT_ANGULAR"
    GRADIENT_DIAMOND = "GRADIENT_DIAMOND"
    IMAGE = "IMAGE"


GRADIENT_TYPES = frozenset(
    {
        PaintType.GRADIENT_LINEAR,
        PaintType.GRADIENT_RADIAL,
        PaintType.GRADIENT_ANGULAR,
        PaintType.GRADIENT_DIAMOND,
    }
)


@dataclass(slots=True, frozen=True)
class Color:
    """RGBA color with channels in the 0..1 range."""

    r: float
    g: float
    b: float
    a: float = 1.0

    def __str__(self) -> str:
        channels = ", ".join(format_number(channel * CHANNEL_SCALE) for channel in (self.r, self.g, self.b))
        return f"rgba({channels}, {format_number(self.a)})"


@dataclass(slots=True, frozen=True)
class ColorStop:
    position: float
    color: Color


@dataclass(slots=True, frozen=True)
class SolidPaint:
    """Flat color fill, optionally bound to a color variable."""

    color: Color
    opacity: Optional[float] = None
    visible: bool = True
    blend_mode: Optional[str] = None
    bound_color: Optional["VariableAlias"] = None

    @property
    def paint_type(self) -> PaintType:
        return PaintType.SOLID


@dataclass(slots=True, frozen=True)
class GradientPaint:
    """Linear, radial, angular or diamond gradient."""

    paint_type: PaintType
    stops: Tuple[ColorStop, ...] = ()
    handle_positions: Tuple[Tuple[float, float], ...] = ()
    blend_mode: Optional[str] = None
    opacity: Optional[float] = None
    visible: bool = True


@dataclass(slots=True, frozen=True)
class ImagePaint:
    """Image fill referencing an asset by id."""

    image_ref: Optional[str]
    scale_mode: Optional[str] = None
    image_transform: Optional[Tuple[Tuple[float, ...], ...]] = None
    scaling_factor: Optional[float] = None
    rotation: float = 0.0
    gif_ref: Optional[str] = None
    opacity: Optional[float] = None
    visible: bool = True

    @property
    def paint_type(self) -> PaintType:
        return PaintType.IMAGE


Paint = SolidPaint | GradientPaint | ImagePaint
