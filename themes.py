# themes.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

RGB = tuple[int, int, int]

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{6})")


class Theme(str, Enum):
    # Values are persisted and sent by clients; keep them byte-for-byte.
    PROFESSIONAL = "professional"
    MODERN = "modern"
    LUXURY = "luxury"
    MINIMAL = "minimal"
    ELEGANT_BLACK_GOLD = "elegant-black-gold"
    MINIMAL_WHITE_SILVER = "minimal-white-silver"
    IVORY_SERIF_CLASSIC = "ivory-serif-classic"
    MODERN_ROSE_GOLD = "modern-rose-gold"

    @classmethod
    def parse(cls, value) -> "Theme":
        if isinstance(value, Theme):
            return value
        key = (str(value) if value is not None else "").strip().lower()
        for theme in cls:
            if theme.value == key:
                return theme
        return cls.PROFESSIONAL


class ColorScheme(NamedTuple):
    primary: RGB
    secondary: RGB
    accent: RGB
    dark: RGB
    medium: RGB
    light: RGB
    bg: RGB
    white: RGB


@dataclass(frozen=True)
class ColorOverride:
    """
    User-chosen colors. Only primary, secondary, accent and bg can be
    overridden; dark/medium/light/white always come from NEUTRALS.
    """
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    background: Optional[str] = None

    @classmethod
    def from_mapping(cls, data) -> Optional["ColorOverride"]:
        if isinstance(data, ColorOverride):
            return data
        if not isinstance(data, dict) or not data:
            return None
        return cls(
            primary=data.get("primary"),
            secondary=data.get("secondary"),
            accent=data.get("accent"),
            background=data.get("background"),
        )


# dark, medium, light, white used whenever custom colors are supplied
NEUTRALS = {
    "dark": (15, 23, 42),
    "medium": (100, 116, 139),
    "light": (226, 232, 240),
    "white": (255, 255, 255),
}

PALETTES: dict[Theme, ColorScheme] = {
    Theme.PROFESSIONAL: ColorScheme(
        primary=(13, 60, 97),
        secondary=(30, 96, 145),
        accent=(52, 152, 219),
        dark=(15, 23, 42),
        medium=(100, 116, 139),
        light=(226, 232, 240),
        bg=(248, 250, 252),
        white=(255, 255, 255),
    ),
    Theme.MODERN: ColorScheme(
        primary=(79, 70, 229),
        secondary=(124, 58, 237),
        accent=(6, 182, 212),
        dark=(17, 24, 39),
        medium=(107, 114, 128),
        light=(229, 231, 235),
        bg=(249, 250, 251),
        white=(255, 255, 255),
    ),
    Theme.LUXURY: ColorScheme(
        primary=(88, 28, 135),
        secondary=(126, 34, 206),
        accent=(202, 138, 4),
        dark=(30, 27, 46),
        medium=(113, 113, 122),
        light=(228, 228, 231),
        bg=(250, 245, 255),
        white=(255, 255, 255),
    ),
    Theme.MINIMAL: ColorScheme(
        primary=(55, 65, 81),
        secondary=(75, 85, 99),
        accent=(16, 185, 129),
        dark=(17, 24, 39),
        medium=(107, 114, 128),
        light=(229, 231, 235),
        bg=(255, 255, 255),
        white=(255, 255, 255),
    ),
    Theme.ELEGANT_BLACK_GOLD: ColorScheme(
        primary=(17, 17, 17),
        secondary=(38, 38, 38),
        accent=(212, 175, 55),
        dark=(10, 10, 10),
        medium=(115, 115, 115),
        light=(229, 229, 229),
        bg=(250, 248, 240),
        white=(255, 255, 255),
    ),
    Theme.MINIMAL_WHITE_SILVER: ColorScheme(
        primary=(148, 163, 184),
        secondary=(203, 213, 225),
        accent=(100, 116, 139),
        dark=(30, 41, 59),
        medium=(100, 116, 139),
        light=(226, 232, 240),
        bg=(255, 255, 255),
        white=(255, 255, 255),
    ),
    Theme.IVORY_SERIF_CLASSIC: ColorScheme(
        primary=(120, 53, 15),
        secondary=(146, 64, 14),
        accent=(180, 83, 9),
        dark=(41, 37, 36),
        medium=(120, 113, 108),
        light=(231, 229, 228),
        bg=(255, 251, 235),
        white=(255, 255, 255),
    ),
    Theme.MODERN_ROSE_GOLD: ColorScheme(
        primary=(183, 110, 121),
        secondary=(219, 152, 160),
        accent=(232, 180, 140),
        dark=(55, 48, 63),
        medium=(120, 113, 128),
        light=(241, 228, 232),
        bg=(255, 247, 248),
        white=(255, 255, 255),
    ),
}


def hex_to_rgb(value) -> RGB:
    """`#RRGGBB` -> (r, g, b). Anything malformed becomes black."""
    m = _HEX_RE.fullmatch((value or "").strip()) if isinstance(value, str) else None
    if not m:
        return (0, 0, 0)
    h = m.group(1)
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def rgb_to_hex(rgb: RGB) -> str:
    r, g, b = (max(0, min(255, int(c))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def resolve_color_scheme(theme, custom_colors=None) -> ColorScheme:
    override = ColorOverride.from_mapping(custom_colors)
    if override is not None:
        return ColorScheme(
            primary=hex_to_rgb(override.primary),
            secondary=hex_to_rgb(override.secondary),
            accent=hex_to_rgb(override.accent),
            bg=hex_to_rgb(override.background),
            **NEUTRALS,
        )
    return PALETTES[Theme.parse(theme)]
