"""Property Parser - raw JSON values to typed UI primitives.

Every parser is total: malformed input yields a default (or ``None`` for
colors) instead of an exception. ``PropertyParser`` wraps the functions and
reports each fallback as an ``unresolvable_property`` diagnostic.
"""

import math
import re
from typing import Any

from ..core import DiagnosticKind, DiagnosticReporter
from ..models.primitives import (
    Alignment,
    Color,
    CornerRadius,
    CrossAxisAlignment,
    FontWeight,
    MainAxisAlignment,
    Offset,
    Shape,
    Spacing,
    TextAlign,
    ZERO_SPACING,
)

NAMED_COLORS: dict[str, int] = {
    "transparent": 0x00000000,
    "black": 0xFF000000,
    "white": 0xFFFFFFFF,
    "red": 0xFFF44336,
    "pink": 0xFFE91E63,
    "purple": 0xFF9C27B0,
    "indigo": 0xFF3F51B5,
    "blue": 0xFF2196F3,
    "cyan": 0xFF00BCD4,
    "teal": 0xFF009688,
    "green": 0xFF4CAF50,
    "yellow": 0xFFFFEB3B,
    "amber": 0xFFFFC107,
    "orange": 0xFFFF9800,
    "brown": 0xFF795548,
    "grey": 0xFF9E9E9E,
    "gray": 0xFF9E9E9E,
}

_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

_NAMED_ALIGNMENTS: dict[str, Alignment] = {
    "topleft": Alignment.TOP_LEFT,
    "topcenter": Alignment.TOP_CENTER,
    "topright": Alignment.TOP_RIGHT,
    "centerleft": Alignment.CENTER_LEFT,
    "center": Alignment.CENTER,
    "centerright": Alignment.CENTER_RIGHT,
    "bottomleft": Alignment.BOTTOM_LEFT,
    "bottomcenter": Alignment.BOTTOM_CENTER,
    "bottomright": Alignment.BOTTOM_RIGHT,
}

_FONT_WEIGHTS: dict[str, FontWeight] = {
    "thin": FontWeight.W100,
    "light": FontWeight.W300,
    "normal": FontWeight.NORMAL,
    "regular": FontWeight.NORMAL,
    "medium": FontWeight.W500,
    "semibold": FontWeight.W600,
    "bold": FontWeight.BOLD,
    "black": FontWeight.W900,
}


def _normalize_name(value: str) -> str:
    return value.lower().replace("_", "").replace("-", "").replace(" ", "")


# ============================================================================
# Numeric coercion
# ============================================================================

def parse_double(value: Any) -> float | None:
    """Coerce numbers and numeric strings to float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def parse_int(value: Any) -> int | None:
    """Coerce to int, truncating floats."""
    number = parse_double(value)
    return int(number) if number is not None else None


def parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off", ""):
            return False
    return default


# ============================================================================
# Spacing
# ============================================================================

def parse_spacing(value: Any) -> Spacing:
    """
    Parse padding/margin shorthand to four sides.

    Supports:
    - 16 → all sides
    - {"all": 16}
    - {"horizontal": 20, "vertical": 10}
    - {"left": 1, "top": 2, "right": 3, "bottom": 4}, missing sides are 0

    When several shapes are present, "all" wins over horizontal/vertical,
    which win over per-side keys.
    """
    number = parse_double(value)
    if number is not None:
        return Spacing.all(number)

    if not isinstance(value, dict):
        return ZERO_SPACING

    if "all" in value:
        return Spacing.all(parse_double(value["all"]) or 0.0)

    if "horizontal" in value or "vertical" in value:
        return Spacing.symmetric(
            horizontal=parse_double(value.get("horizontal")) or 0.0,
            vertical=parse_double(value.get("vertical")) or 0.0,
        )

    return Spacing(
        left=parse_double(value.get("left")) or 0.0,
        top=parse_double(value.get("top")) or 0.0,
        right=parse_double(value.get("right")) or 0.0,
        bottom=parse_double(value.get("bottom")) or 0.0,
    )


def is_spacing(value: Any) -> bool:
    """True if value has one of the accepted spacing shapes."""
    if parse_double(value) is not None:
        return True
    if not isinstance(value, dict):
        return False
    return any(k in value for k in ("all", "horizontal", "vertical", "left", "top", "right", "bottom"))


# ============================================================================
# Color
# ============================================================================

def parse_color(value: Any) -> Color | None:
    """
    Parse "#RGB", "#RRGGBB", "#AARRGGBB", a color name or an ARGB integer.

    Returns None when the value is not a color; callers pick the default.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Color.from_argb(value & 0xFFFFFFFF)
    if not isinstance(value, str):
        return None

    text = value.strip()
    named = NAMED_COLORS.get(text.lower())
    if named is not None:
        return Color.from_argb(named)

    if text.startswith("#"):
        digits = text[1:]
    elif text.lower().startswith("0x"):
        digits = text[2:]
    else:
        return None

    if not _HEX_RE.match(digits):
        return None
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        digits = "FF" + digits
    return Color.from_argb(int(digits, 16))


# ============================================================================
# Alignment
# ============================================================================

def parse_alignment(value: Any) -> Alignment:
    """
    Parse a named alignment ("topLeft", "top_left", "bottom-right", ...) or
    an {"x", "y"} map. Unknown values fall back to center.
    """
    if isinstance(value, str):
        return _NAMED_ALIGNMENTS.get(_normalize_name(value), Alignment.CENTER)

    if isinstance(value, dict):
        return Alignment(
            x=parse_double(value.get("x")) or 0.0,
            y=parse_double(value.get("y")) or 0.0,
        )

    return Alignment.CENTER


def is_alignment(value: Any) -> bool:
    if isinstance(value, str):
        return _normalize_name(value) in _NAMED_ALIGNMENTS
    return isinstance(value, dict) and ("x" in value or "y" in value)


def _parse_enum(enum_cls: Any, value: Any, default: Any) -> Any:
    if isinstance(value, str):
        wanted = _normalize_name(value)
        for member in enum_cls:
            if _normalize_name(member.value) == wanted:
                return member
    return default


def parse_main_axis_alignment(value: Any) -> MainAxisAlignment:
    return _parse_enum(MainAxisAlignment, value, MainAxisAlignment.START)


def parse_cross_axis_alignment(value: Any) -> CrossAxisAlignment:
    return _parse_enum(CrossAxisAlignment, value, CrossAxisAlignment.START)


def parse_text_align(value: Any) -> TextAlign:
    return _parse_enum(TextAlign, value, TextAlign.LEFT)


def parse_font_weight(value: Any) -> FontWeight:
    """Accepts names ("bold"), "w600" and numbers (600)."""
    if isinstance(value, str):
        lowered = _normalize_name(value)
        if lowered in _FONT_WEIGHTS:
            return _FONT_WEIGHTS[lowered]
        if lowered.startswith("w"):
            lowered = lowered[1:]
        value = parse_int(lowered)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        rounded = int(round(value / 100.0) * 100)
        for member in FontWeight:
            if member.value == rounded:
                return member
    return FontWeight.NORMAL


# ============================================================================
# Shape and geometry
# ============================================================================

def parse_border_radius(value: Any) -> CornerRadius | None:
    """Number, {"all": r} or per-corner {"topLeft", "topRight", "bottomLeft", "bottomRight"}."""
    number = parse_double(value)
    if number is not None:
        return CornerRadius.circular(number)

    if not isinstance(value, dict):
        return None

    if "all" in value:
        return CornerRadius.circular(parse_double(value["all"]) or 0.0)

    return CornerRadius(
        top_left=parse_double(value.get("topLeft")) or 0.0,
        top_right=parse_double(value.get("topRight")) or 0.0,
        bottom_left=parse_double(value.get("bottomLeft")) or 0.0,
        bottom_right=parse_double(value.get("bottomRight")) or 0.0,
    )


def parse_offset(value: Any) -> Offset:
    if isinstance(value, dict):
        return Offset(dx=parse_double(value.get("dx")) or 0.0, dy=parse_double(value.get("dy")) or 0.0)
    return Offset()


def parse_shape(value: Any) -> Shape:
    return _parse_enum(Shape, value, Shape.RECTANGLE)


# ============================================================================
# Reporting wrapper
# ============================================================================

class PropertyParser:
    """
    Property parsing bound to a diagnostics reporter.

    Builders use the module functions directly; the renderer uses this
    class so that fallbacks on author-supplied values get reported.
    """

    def __init__(self, diagnostics: DiagnosticReporter | None = None) -> None:
        self.diagnostics = diagnostics

    def _unresolvable(self, name: str, value: Any, source: str | None) -> None:
        if self.diagnostics is not None:
            self.diagnostics.report(
                DiagnosticKind.UNRESOLVABLE_PROPERTY,
                f"cannot parse {name} from {value!r}",
                source=source,
                property=name,
            )

    def spacing(self, value: Any, name: str = "padding", source: str | None = None) -> Spacing:
        if value is not None and not is_spacing(value):
            self._unresolvable(name, value, source)
        return parse_spacing(value)

    def color(
        self,
        value: Any,
        default: Color | None = None,
        name: str = "color",
        source: str | None = None,
    ) -> Color | None:
        parsed = parse_color(value)
        if parsed is None and value is not None:
            self._unresolvable(name, value, source)
            return default
        return parsed if parsed is not None else default

    def alignment(self, value: Any, name: str = "alignment", source: str | None = None) -> Alignment:
        if value is not None and not is_alignment(value):
            self._unresolvable(name, value, source)
        return parse_alignment(value)

    def double(
        self,
        value: Any,
        default: float | None = None,
        name: str = "value",
        source: str | None = None,
    ) -> float | None:
        parsed = parse_double(value)
        if parsed is None and value is not None:
            self._unresolvable(name, value, source)
            return default
        return parsed if parsed is not None else default
