"""Colour tokens, gradient text and render-ready gradients.

Gradients are stored as tuples of 24-bit ``0xRRGGBB`` integers. Index 0 is the
fill colour for points inside the set; the remaining entries are the stops the
renderer cycles through. Users edit them as comma-separated tokens, each token
being a colour name (``"Red"``) or a bare hexadecimal value (``"1F"``).

Decoding never fails: anything unrecognised becomes black, so half-typed text
still yields a drawable gradient.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

import matplotlib
import numpy as np
import PIL.Image
from matplotlib import colors as mcolors

RGB_MAX = 0xFFFFFF
DEFAULT_RENDER_GRADIENT = (0x000000, 0x000000, 0xFFFFFF)
MIN_RENDER_LENGTH = len(DEFAULT_RENDER_GRADIENT)

PRESETS: Mapping[str, str] = MappingProxyType({
    "Fire": "Yellow, Red, Orange, Black",
    "Ice": "Black, Black, Blue, White",
    "Storm": "1F, White, Black",
    "Plasma": "Black, Black, Lime, Black, Purple, Black, Yellow",
    "Psychedelic": "Black, Black, Red, Lime, Blue",
})

_HEX_TOKEN = re.compile(r"[0-9A-Fa-f]+")
# Property-cycle references resolve through rcParams and change with the style.
_CYCLE_REFERENCE = re.compile(r"C\d+")
# matplotlib lists both spellings; "gray" is the one that is shown.
_GREY_SPELLING = re.compile(r"grey", re.IGNORECASE)


@dataclass(frozen=True)
class RenderGradient:
    """Gradient split the way the renderer consumes it."""

    fill_color: int
    stops: tuple[int, ...]


@dataclass(frozen=True)
class ColorTable:
    """Immutable two-way lookup between colour names and RGB values."""

    rgb_by_name: Mapping[str, int]
    name_by_rgb: Mapping[int, str]


def rgb_components(rgb: int) -> tuple[int, int, int]:
    rgb = int(rgb) & RGB_MAX
    return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF


def _spec_to_rgb24(spec: str) -> int:
    red, green, blue = (int(round(channel * 255)) for channel in mcolors.to_rgb(spec))
    return (red << 16) | (green << 8) | blue


def _is_theme_dependent(name: str, spec: str) -> bool:
    return bool(_CYCLE_REFERENCE.fullmatch(name) or _CYCLE_REFERENCE.fullmatch(str(spec)))


def build_color_table(palette: Mapping[str, str] | None = None) -> ColorTable:
    """Build the name table from ``palette`` (matplotlib's CSS4 colours by default).

    Names are keyed case-insensitively and shown with a leading capital. When
    several names share a value, the last one in palette order is used for
    encoding, except that a "grey" spelling never replaces an existing name.
    """

    if palette is None:
        palette = mcolors.CSS4_COLORS

    rgb_by_name: dict[str, int] = {}
    name_by_rgb: dict[int, str] = {}
    for name, spec in palette.items():
        if _is_theme_dependent(name, spec):
            continue
        rgb = _spec_to_rgb24(spec)
        name = name.strip()
        rgb_by_name[name.lower()] = rgb
        if rgb in name_by_rgb and _GREY_SPELLING.search(name):
            continue
        name_by_rgb[rgb] = name[:1].upper() + name[1:]
    return ColorTable(MappingProxyType(rgb_by_name), MappingProxyType(name_by_rgb))


def normalize_for_render(gradient: Sequence[int]) -> RenderGradient:
    """Pad ``gradient`` to at least three entries and split off the fill colour.

    Short gradients keep their entries at their existing positions; only the
    missing trailing slots take the defaults black, black, white.
    """

    colors = list(gradient)
    if len(colors) < MIN_RENDER_LENGTH:
        padded = list(DEFAULT_RENDER_GRADIENT)
        padded[:len(colors)] = colors
        colors = padded
    return RenderGradient(fill_color=int(colors[0]), stops=tuple(int(c) for c in colors[1:]))


class GradientCodec:
    """Converts between colour tokens and RGB values using a :class:`ColorTable`."""

    def __init__(self, table: ColorTable | None = None) -> None:
        self.table = table if table is not None else build_color_table()

    def decode_color_token(self, token: str) -> int:
        token = token.strip()
        rgb = self.table.rgb_by_name.get(token.lower())
        if rgb is not None:
            return rgb
        if _HEX_TOKEN.fullmatch(token):
            value = int(token, 16)
            if value <= RGB_MAX:
                return value
        return 0

    def encode_color(self, rgb: int) -> str:
        rgb = int(rgb) & RGB_MAX
        name = self.table.name_by_rgb.get(rgb)
        if name is not None:
            return name
        return format(rgb, "x")

    def decode_list(self, text: str) -> tuple[int, ...]:
        return tuple(self.decode_color_token(token) for token in text.split(","))

    def encode_list(self, colors: Iterable[int]) -> str:
        return ", ".join(self.encode_color(rgb) for rgb in colors)

    normalize_for_render = staticmethod(normalize_for_render)

    def preset_gradient(self, name: str) -> tuple[int, ...]:
        """Decode the preset called ``name`` (case-insensitive)."""

        for preset_name, text in PRESETS.items():
            if preset_name.lower() == name.strip().lower():
                return self.decode_list(text)
        raise KeyError(f"Unknown gradient preset '{name}'. Valid choices: {', '.join(PRESETS)}.")


@lru_cache(maxsize=None)
def default_codec() -> GradientCodec:
    """Process-wide codec over the default name table, built on first use."""

    return GradientCodec()


def decode_color_token(token: str) -> int:
    return default_codec().decode_color_token(token)


def encode_color(rgb: int) -> str:
    return default_codec().encode_color(rgb)


def decode_list(text: str) -> tuple[int, ...]:
    return default_codec().decode_list(text)


def encode_list(colors: Iterable[int]) -> str:
    return default_codec().encode_list(colors)


def preset_gradient(name: str) -> tuple[int, ...]:
    return default_codec().preset_gradient(name)


def gradient_from_colormap(name: str, count: int, *, fill_color: int = 0x000000) -> tuple[int, ...]:
    """Sample ``count`` evenly spaced stops from a matplotlib colormap behind ``fill_color``."""

    if count < 1:
        raise ValueError("count must be at least 1.")
    cmap = matplotlib.colormaps[name]
    samples = np.asarray(cmap(np.linspace(0.0, 1.0, count)))[:, :3]
    channels = np.uint32(np.clip(np.round(samples * 255), 0, 255))
    stops = (channels[:, 0] << 16) | (channels[:, 1] << 8) | channels[:, 2]
    return (int(fill_color) & RGB_MAX, *(int(stop) for stop in stops))


def _stops_array(stops: Sequence[int]) -> np.ndarray:
    return np.array([rgb_components(stop) for stop in stops], dtype=np.float64)


def gradient_swatch(gradient: Sequence[int], width: int = 512, height: int = 48) -> PIL.Image.Image:
    """Preview one period of ``gradient`` as the renderer cycles through it.

    A block of the fill colour comes first, followed by the stops interpolated
    linearly with the last stop blending back into the first.
    """

    width = max(int(width), 2)
    height = max(int(height), 1)
    render = normalize_for_render(gradient)

    fill_width = max(1, width // 10)
    ramp_width = width - fill_width

    stops = _stops_array(render.stops)
    length = len(stops)
    hue = np.arange(ramp_width, dtype=np.float64) / ramp_width * length
    lower = np.floor(hue).astype(np.int64)
    upper = (lower + 1) % length
    epsilon = (hue - lower)[:, None]
    ramp = stops[lower] + (stops[upper] - stops[lower]) * epsilon

    row = np.empty((width, 3), dtype=np.float64)
    row[:fill_width] = rgb_components(render.fill_color)
    row[fill_width:] = ramp
    pixels = np.uint8(np.clip(np.round(row), 0, 255))
    return PIL.Image.fromarray(np.ascontiguousarray(np.broadcast_to(pixels, (height, width, 3))))
