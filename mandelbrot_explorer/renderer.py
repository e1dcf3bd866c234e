"""Contract with the external fractal renderer.

The renderer owns the drawing surface and the escape-time kernel. This module
only describes what it is handed: a :class:`DrawRequest` per frame and, for
engines that take raw memory, the fixed-size parameter block built by
:func:`pack_parameters`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol, runtime_checkable

import numpy as np

GRADIENT_CAPACITY = 21
GRADIENT_PAD_COLOR = 0x00FF00
PARAMETER_BLOCK_LIMIT = 128

PARAMETER_BLOCK_DTYPE = np.dtype([
    ("top", "<f4"),
    ("left", "<f4"),
    ("right", "<f4"),
    ("bottom", "<f4"),
    ("surface_width", "<f4"),
    ("surface_height", "<f4"),
    ("bailout_radius", "<f4"),
    ("max_iterations", "<u4"),
    ("fill_color", "<u4"),
    ("gradient_period_factor", "<f4"),
    ("gradient_length", "<u4"),
    ("gradient", "<u4", (GRADIENT_CAPACITY,)),
])

if PARAMETER_BLOCK_DTYPE.itemsize > PARAMETER_BLOCK_LIMIT:
    raise RuntimeError("Mandelbrot parameter block exceeds the push constant limit.")


@dataclass(frozen=True)
class DrawRequest:
    """Everything the renderer needs to draw one frame."""

    left: float
    right: float
    top: float
    bottom: float
    bailout_radius: float
    max_iterations: int
    gradient_period_factor: float
    fill_color: int
    gradient_stops: tuple[int, ...]


class DebugSeverity(enum.IntFlag):
    VERBOSE = 0x00000001
    INFO = 0x00000010
    WARNING = 0x00000100
    ERROR = 0x00001000


class DebugMessageType(enum.IntFlag):
    GENERAL = 0x00000001
    VALIDATION = 0x00000002
    PERFORMANCE = 0x00000004
    DEVICE_ADDRESS_BINDING = 0x00000008


@dataclass(frozen=True)
class DebugMessage:
    """Diagnostic emitted by a renderer backend."""

    text: str
    severity: DebugSeverity = DebugSeverity.INFO
    type: DebugMessageType = DebugMessageType.GENERAL


@runtime_checkable
class Renderer(Protocol):
    """Drawing engine driven by :class:`~mandelbrot_explorer.coordinator.RenderCoordinator`."""

    def get_surface_extent(self) -> tuple[int, int]:
        ...

    def refresh_surface(self) -> None:
        ...

    def draw(self, request: DrawRequest) -> None:
        ...


@dataclass(frozen=True)
class ParameterBlock:
    """Decoded view of a packed parameter block."""

    top: float
    left: float
    right: float
    bottom: float
    surface_width: float
    surface_height: float
    bailout_radius: float
    max_iterations: int
    fill_color: int
    gradient_period_factor: float
    gradient: tuple[int, ...]
    padding: tuple[int, ...]


def pack_parameters(request: DrawRequest, surface_extent: tuple[int, int]) -> bytes:
    """Pack ``request`` into the engine's 128-byte little-endian parameter block.

    Stops beyond :data:`GRADIENT_CAPACITY` are dropped and unused slots are
    filled with :data:`GRADIENT_PAD_COLOR`.
    """

    width, height = surface_extent
    length = min(len(request.gradient_stops), GRADIENT_CAPACITY)

    block = np.zeros(1, dtype=PARAMETER_BLOCK_DTYPE)
    block["top"] = request.top
    block["left"] = request.left
    block["right"] = request.right
    block["bottom"] = request.bottom
    block["surface_width"] = float(width)
    block["surface_height"] = float(height)
    block["bailout_radius"] = request.bailout_radius
    block["max_iterations"] = request.max_iterations
    block["fill_color"] = request.fill_color
    block["gradient_period_factor"] = request.gradient_period_factor
    block["gradient_length"] = length
    block["gradient"][0, :] = GRADIENT_PAD_COLOR
    block["gradient"][0, :length] = request.gradient_stops[:length]
    return block.tobytes()


def unpack_parameters(data: bytes) -> ParameterBlock:
    """Decode a block produced by :func:`pack_parameters`."""

    if len(data) != PARAMETER_BLOCK_DTYPE.itemsize:
        raise ValueError(
            f"Parameter block must be {PARAMETER_BLOCK_DTYPE.itemsize} bytes, got {len(data)}."
        )
    record = np.frombuffer(data, dtype=PARAMETER_BLOCK_DTYPE, count=1)[0]
    length = int(record["gradient_length"])
    gradient = tuple(int(value) for value in record["gradient"])
    return ParameterBlock(
        top=float(record["top"]),
        left=float(record["left"]),
        right=float(record["right"]),
        bottom=float(record["bottom"]),
        surface_width=float(record["surface_width"]),
        surface_height=float(record["surface_height"]),
        bailout_radius=float(record["bailout_radius"]),
        max_iterations=int(record["max_iterations"]),
        fill_color=int(record["fill_color"]),
        gradient_period_factor=float(record["gradient_period_factor"]),
        gradient=gradient[:length],
        padding=gradient[length:],
    )


class ParameterBlockRenderer:
    """Headless renderer that records the parameter block of every draw.

    Blocks are kept in :attr:`blocks` and, when ``stream`` is given, written
    to it back to back so an out-of-process engine can consume them.
    """

    def __init__(self, width: int, height: int, *, stream: Optional[BinaryIO] = None) -> None:
        self._extent = (int(width), int(height))
        self._pending_extent: Optional[tuple[int, int]] = None
        self._stream = stream
        self._messages: list[DebugMessage] = []
        self.blocks: list[bytes] = []

    def set_surface_extent(self, width: int, height: int) -> None:
        """Stage a new surface size; it takes effect on :meth:`refresh_surface`."""

        self._pending_extent = (int(width), int(height))

    def refresh_surface(self) -> None:
        if self._pending_extent is not None:
            self._extent = self._pending_extent
            self._pending_extent = None
            self._messages.append(DebugMessage(
                f"Surface recreated at {self._extent[0]}x{self._extent[1]}.",
                DebugSeverity.VERBOSE,
            ))

    def get_surface_extent(self) -> tuple[int, int]:
        return self._extent

    def draw(self, request: DrawRequest) -> None:
        if len(request.gradient_stops) > GRADIENT_CAPACITY:
            self._messages.append(DebugMessage(
                f"Gradient has {len(request.gradient_stops)} stops; "
                f"only the first {GRADIENT_CAPACITY} are used.",
                DebugSeverity.WARNING,
                DebugMessageType.VALIDATION,
            ))
        block = pack_parameters(request, self._extent)
        self.blocks.append(block)
        if self._stream is not None:
            self._stream.write(block)

    def drain_debug_messages(self) -> list[DebugMessage]:
        messages, self._messages = self._messages, []
        return messages
