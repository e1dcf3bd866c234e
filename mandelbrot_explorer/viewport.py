"""Viewport state for panning and zooming across the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

ZOOM_FACTOR = 0.8
BASE_EXTENT = 4.0


@dataclass(frozen=True)
class Rectangle:
    """Visible region of the complex plane. ``top`` is the larger imaginary bound."""

    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0


def zoom_scale(zoom_level: int, zoom_factor: float = ZOOM_FACTOR) -> np.float64:
    """Return the extent multiplier applied at ``zoom_level``."""

    return np.power(np.float64(zoom_factor), np.float64(zoom_level))


def compute_borders(
    center_x: float,
    center_y: float,
    zoom_level: int,
    surface_width: int,
    surface_height: int,
    *,
    zoom_factor: float = ZOOM_FACTOR,
    base_extent: float = BASE_EXTENT,
) -> Rectangle:
    """Derive the visible rectangle from the view centre, zoom level and surface size.

    The base height is ``base_extent``; the base width follows the surface
    aspect ratio so that pixels stay square. Both are scaled by
    ``zoom_factor ** zoom_level``.
    """

    width_px = max(int(surface_width), 1)
    height_px = max(int(surface_height), 1)

    scale = zoom_scale(zoom_level, zoom_factor)
    base_height = np.float64(base_extent)
    base_width = np.float64(base_extent) * np.float64(width_px) / np.float64(height_px)
    zoomed_height = base_height * scale
    zoomed_width = base_width * scale

    cx = np.float64(center_x)
    cy = np.float64(center_y)
    return Rectangle(
        left=float(cx - 0.5 * zoomed_width),
        right=float(cx + 0.5 * zoomed_width),
        top=float(cy + 0.5 * zoomed_height),
        bottom=float(cy - 0.5 * zoomed_height),
    )


class ViewportModel:
    """Maps the drawing surface onto a rectangle of the complex plane.

    The borders are derived state. ``initialize``, ``resize`` and
    ``zoom_to_pixel`` recompute them from the centre and zoom level, while
    ``pan_by_pixels`` translates the current rectangle in place.
    """

    def __init__(
        self,
        surface_width: int,
        surface_height: int,
        *,
        zoom_factor: float = ZOOM_FACTOR,
        base_extent: float = BASE_EXTENT,
    ) -> None:
        self.zoom_factor = float(zoom_factor)
        self.base_extent = float(base_extent)
        self.initialize(surface_width, surface_height)

    def initialize(self, surface_width: int, surface_height: int) -> None:
        """Reset to the origin at zoom level 0 on a surface of the given size."""

        self.surface_width = max(int(surface_width), 1)
        self.surface_height = max(int(surface_height), 1)
        self.center_x = 0.0
        self.center_y = 0.0
        self.zoom_level = 0
        self.recompute_borders()

    @property
    def rectangle(self) -> Rectangle:
        return Rectangle(left=self.left, right=self.right, top=self.top, bottom=self.bottom)

    def recompute_borders(self) -> None:
        """Refresh ``left``/``right``/``top``/``bottom`` from centre, zoom and surface size."""

        self.surface_width = max(int(self.surface_width), 1)
        self.surface_height = max(int(self.surface_height), 1)
        rect = compute_borders(
            self.center_x,
            self.center_y,
            self.zoom_level,
            self.surface_width,
            self.surface_height,
            zoom_factor=self.zoom_factor,
            base_extent=self.base_extent,
        )
        self.left = rect.left
        self.right = rect.right
        self.top = rect.top
        self.bottom = rect.bottom

    def resize(self, surface_width: int, surface_height: int) -> None:
        """Adopt a new surface size, keeping the centre and zoom level."""

        self.surface_width = max(int(surface_width), 1)
        self.surface_height = max(int(surface_height), 1)
        self.recompute_borders()

    def pixel_to_complex(self, x: float, y: float) -> tuple[float, float]:
        """Return the complex coordinate under surface pixel ``(x, y)``."""

        real = np.float64(self.left) + (np.float64(self.right) - np.float64(self.left)) * np.float64(x) / self.surface_width
        imag = np.float64(self.top) + (np.float64(self.bottom) - np.float64(self.top)) * np.float64(y) / self.surface_height
        return float(real), float(imag)

    def complex_to_pixel(self, real: float, imag: float) -> tuple[float, float]:
        """Inverse of :meth:`pixel_to_complex`; the result may lie off-surface."""

        x = (np.float64(real) - np.float64(self.left)) / (np.float64(self.right) - np.float64(self.left)) * self.surface_width
        y = (np.float64(imag) - np.float64(self.top)) / (np.float64(self.bottom) - np.float64(self.top)) * self.surface_height
        return float(x), float(y)

    def pan_by_pixels(self, dx: float, dy: float) -> None:
        """Drag the view by ``(dx, dy)`` pixels so the content follows the pointer.

        Translates the current rectangle without recomputing it, so many small
        pans can drift slightly from one equivalent large pan.
        """

        delta_real = (np.float64(self.right) - np.float64(self.left)) * np.float64(dx) / self.surface_width
        delta_imag = (np.float64(self.bottom) - np.float64(self.top)) * np.float64(dy) / self.surface_height

        self.left = float(self.left - delta_real)
        self.right = float(self.right - delta_real)
        self.center_x = float(self.center_x - delta_real)

        self.top = float(self.top - delta_imag)
        self.bottom = float(self.bottom - delta_imag)
        self.center_y = float(self.center_y - delta_imag)

    def zoom_to_pixel(self, x: float, y: float, zoom_delta: int) -> None:
        """Zoom by ``zoom_delta`` steps while keeping the point under ``(x, y)`` fixed."""

        self.center_x, self.center_y = self.pixel_to_complex(x, y)
        self.zoom_level += int(zoom_delta)
        self.recompute_borders()
        self.pan_by_pixels(x - self.surface_width / 2.0, y - self.surface_height / 2.0)
