"""Typed UI primitives produced by the property parser.

Host toolkits translate these into their own spacing, color and alignment
types; the core never depends on a concrete toolkit.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Spacing:
    """Per-side insets (padding/margin), normalized to four sides."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def all(cls, value: float) -> "Spacing":
        return cls(value, value, value, value)

    @classmethod
    def symmetric(cls, horizontal: float = 0.0, vertical: float = 0.0) -> "Spacing":
        return cls(left=horizontal, top=vertical, right=horizontal, bottom=vertical)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def to_dict(self) -> dict[str, float]:
        return {"left": self.left, "top": self.top, "right": self.right, "bottom": self.bottom}


ZERO_SPACING = Spacing()


@dataclass(frozen=True)
class Color:
    """ARGB color, 8 bits per channel."""

    alpha: int
    red: int
    green: int
    blue: int

    @classmethod
    def from_argb(cls, value: int) -> "Color":
        return cls(
            alpha=(value >> 24) & 0xFF,
            red=(value >> 16) & 0xFF,
            green=(value >> 8) & 0xFF,
            blue=value & 0xFF,
        )

    @property
    def argb(self) -> int:
        return (self.alpha << 24) | (self.red << 16) | (self.green << 8) | self.blue

    @property
    def opacity(self) -> float:
        return self.alpha / 255.0

    def to_hex(self) -> str:
        """Render as #AARRGGBB."""
        return f"#{self.argb:08X}"


@dataclass(frozen=True)
class Alignment:
    """Relative position inside a box; (-1, -1) is top-left, (1, 1) bottom-right."""

    x: float = 0.0
    y: float = 0.0


Alignment.TOP_LEFT = Alignment(-1.0, -1.0)
Alignment.TOP_CENTER = Alignment(0.0, -1.0)
Alignment.TOP_RIGHT = Alignment(1.0, -1.0)
Alignment.CENTER_LEFT = Alignment(-1.0, 0.0)
Alignment.CENTER = Alignment(0.0, 0.0)
Alignment.CENTER_RIGHT = Alignment(1.0, 0.0)
Alignment.BOTTOM_LEFT = Alignment(-1.0, 1.0)
Alignment.BOTTOM_CENTER = Alignment(0.0, 1.0)
Alignment.BOTTOM_RIGHT = Alignment(1.0, 1.0)


@dataclass(frozen=True)
class CornerRadius:
    """Per-corner radii."""

    top_left: float = 0.0
    top_right: float = 0.0
    bottom_left: float = 0.0
    bottom_right: float = 0.0

    @classmethod
    def circular(cls, radius: float) -> "CornerRadius":
        return cls(radius, radius, radius, radius)


@dataclass(frozen=True)
class Offset:
    dx: float = 0.0
    dy: float = 0.0


class Shape(str, Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


class MainAxisAlignment(str, Enum):
    START = "start"
    END = "end"
    CENTER = "center"
    SPACE_BETWEEN = "spaceBetween"
    SPACE_AROUND = "spaceAround"
    SPACE_EVENLY = "spaceEvenly"


class CrossAxisAlignment(str, Enum):
    START = "start"
    END = "end"
    CENTER = "center"
    STRETCH = "stretch"
    BASELINE = "baseline"


class TextAlign(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"
    START = "start"
    END = "end"


class FontWeight(int, Enum):
    W100 = 100
    W200 = 200
    W300 = 300
    NORMAL = 400
    W500 = 500
    W600 = 600
    BOLD = 700
    W800 = 800
    W900 = 900
