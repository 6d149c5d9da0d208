"""Tag color registry - maps natural-language color commands to tag colors.

Standalone module (no project imports besides exceptions). Adding a color
means appending one ColorDefinition to COLORS.

Accepted commands:
    "blue", "blue tag", "blue background"   -> background blue, readable text
    "red text"                               -> text red, background unchanged
    "white text on dark green"               -> both set
    "#1e90ff"                                -> background hex, readable text
Shade modifiers: "light", "dark", "bright".
"""

import re
from dataclasses import dataclass

from clickup_mcp.exceptions import ValidationFailure


@dataclass(frozen=True)
class ColorDefinition:
    """One named color with its shade variants (hex strings)."""

    name: str
    base: str
    light: str
    dark: str
    bright: str


COLORS: tuple[ColorDefinition, ...] = (
    ColorDefinition("red", "#e53935", "#ef9a9a", "#b71c1c", "#ff1744"),
    ColorDefinition("orange", "#fb8c00", "#ffcc80", "#e65100", "#ff9100"),
    ColorDefinition("yellow", "#fdd835", "#fff59d", "#f9a825", "#ffea00"),
    ColorDefinition("green", "#43a047", "#a5d6a7", "#1b5e20", "#00e676"),
    ColorDefinition("teal", "#00897b", "#80cbc4", "#004d40", "#1de9b6"),
    ColorDefinition("blue", "#1e88e5", "#90caf9", "#0d47a1", "#2979ff"),
    ColorDefinition("purple", "#8e24aa", "#ce93d8", "#4a148c", "#d500f9"),
    ColorDefinition("pink", "#d81b60", "#f48fb1", "#880e4f", "#f50057"),
    ColorDefinition("brown", "#6d4c41", "#bcaaa4", "#3e2723", "#8d6e63"),
    ColorDefinition("gray", "#757575", "#e0e0e0", "#424242", "#9e9e9e"),
    ColorDefinition("black", "#000000", "#424242", "#000000", "#212121"),
    ColorDefinition("white", "#ffffff", "#ffffff", "#f5f5f5", "#ffffff"),
)

_ALIASES = {"grey": "gray", "violet": "purple", "cyan": "teal", "magenta": "pink"}
_SHADES = ("light", "dark", "bright")
_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
_NOISE = {"tag", "color", "colour", "background", "bg", "a", "the"}


def color_names() -> tuple[str, ...]:
    """Return all color names in registration order."""
    return tuple(c.name for c in COLORS)


def get_color(name: str) -> ColorDefinition:
    """Return a color by name or alias. Raises KeyError if not found."""
    key = _ALIASES.get(name, name)
    for color in COLORS:
        if color.name == key:
            return color
    raise KeyError(f"Unknown color: {name!r}")


def _expand_hex(value: str) -> str:
    value = value.lower()
    if len(value) == 4:
        value = "#" + "".join(ch * 2 for ch in value[1:])
    return value


def contrast_text(background: str) -> str:
    """Black or white, whichever reads better on *background*."""
    hex6 = _expand_hex(background)
    r, g, b = (int(hex6[i : i + 2], 16) for i in (1, 3, 5))
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return "#000000" if luminance > 150 else "#ffffff"


def _phrase_to_hex(phrase: str, command: str) -> str:
    words = [w for w in phrase.split() if w not in _NOISE]
    if len(words) == 1 and _HEX_RE.match(words[0]):
        return _expand_hex(words[0])
    shade = None
    if words and words[0] in _SHADES:
        shade = words.pop(0)
    if len(words) != 1:
        raise ValidationFailure(
            f"[ERROR] Could not read a color from '{command}'. "
            f"Use a hex value or one of: {', '.join(color_names())}"
        )
    try:
        color = get_color(words[0])
    except KeyError:
        raise ValidationFailure(
            f"[ERROR] Unknown color '{words[0]}' in '{command}'. "
            f"Valid: {', '.join(color_names())}"
        ) from None
    return getattr(color, shade) if shade else color.base


def parse_color_command(command: str) -> tuple[str | None, str | None]:
    """Turn a color command into ``(tag_fg, tag_bg)``; None means unchanged."""
    text = " ".join((command or "").strip().lower().split())
    if not text:
        raise ValidationFailure("[ERROR] Color command cannot be empty.")

    if " on " in text:
        fg_part, bg_part = text.split(" on ", 1)
        fg_part = fg_part.replace(" text", "").strip()
        return _phrase_to_hex(fg_part, command), _phrase_to_hex(bg_part, command)
    if text.endswith(" text"):
        return _phrase_to_hex(text[: -len(" text")], command), None
    bg = _phrase_to_hex(text, command)
    return contrast_text(bg), bg
