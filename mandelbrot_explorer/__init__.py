"""Public API for the interactive Mandelbrot explorer core."""

from .config import ConfigError, ExplorerConfig, ExplorerError, RenderError
from .coordinator import RenderCoordinator
from .gradient import (
    PRESETS,
    ColorTable,
    GradientCodec,
    RenderGradient,
    build_color_table,
    decode_color_token,
    decode_list,
    encode_color,
    encode_list,
    gradient_from_colormap,
    gradient_swatch,
    normalize_for_render,
    preset_gradient,
)
from .renderer import (
    DebugMessage,
    DebugMessageType,
    DebugSeverity,
    DrawRequest,
    ParameterBlockRenderer,
    Renderer,
    pack_parameters,
    unpack_parameters,
)
from .scheduling import IdleQueue, IdleScheduler, TkIdleScheduler
from .viewport import Rectangle, ViewportModel, compute_borders

__all__ = [
    "PRESETS",
    "ColorTable",
    "ConfigError",
    "DebugMessage",
    "DebugMessageType",
    "DebugSeverity",
    "DrawRequest",
    "ExplorerConfig",
    "ExplorerError",
    "GradientCodec",
    "IdleQueue",
    "IdleScheduler",
    "ParameterBlockRenderer",
    "Rectangle",
    "RenderCoordinator",
    "RenderError",
    "RenderGradient",
    "Renderer",
    "TkIdleScheduler",
    "ViewportModel",
    "build_color_table",
    "compute_borders",
    "decode_color_token",
    "decode_list",
    "encode_color",
    "encode_list",
    "gradient_from_colormap",
    "gradient_swatch",
    "normalize_for_render",
    "pack_parameters",
    "preset_gradient",
    "unpack_parameters",
]
