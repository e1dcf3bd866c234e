"""Turns viewport and gradient state into renderer calls."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Optional

from .config import ExplorerConfig, RenderError, gradient_period_factor
from .gradient import RGB_MAX, GradientCodec, default_codec, normalize_for_render
from .renderer import DebugSeverity, DrawRequest, Renderer
from .scheduling import IdleQueue, IdleScheduler
from .viewport import ViewportModel

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    DebugSeverity.VERBOSE: logging.DEBUG,
    DebugSeverity.INFO: logging.INFO,
    DebugSeverity.WARNING: logging.WARNING,
    DebugSeverity.ERROR: logging.ERROR,
}


class RenderCoordinator:
    """Issues draws for a single interactive session.

    Pan and wheel zoom draw immediately. Resizes and gradient changes go
    through :meth:`schedule_deferred_draw`, because the host repaints the
    surface after those handlers return and would wipe an immediate draw.
    The deferred draw is a two-state machine: a request while one is pending
    is dropped, and the pending flag clears when the deferred draw runs.
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        config: Optional[ExplorerConfig] = None,
        scheduler: Optional[IdleScheduler] = None,
        viewport: Optional[ViewportModel] = None,
        codec: Optional[GradientCodec] = None,
        on_status: Optional[Callable[[str], None]] = None,
        time_fn: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.renderer = renderer
        self.config = config if config is not None else ExplorerConfig()
        self.scheduler = scheduler if scheduler is not None else IdleQueue()
        self.codec = codec if codec is not None else default_codec()
        if viewport is None:
            width, height = renderer.get_surface_extent()
            viewport = ViewportModel(width, height)
        self.viewport = viewport
        self.gradient: tuple[int, ...] = tuple(self.config.gradient)
        self.gradient_period = self.config.gradient_period
        self.last_render_ms: Optional[float] = None
        self.draw_count = 0
        self._on_status = on_status
        self._time_fn = time_fn
        self._draw_pending = False

    @property
    def draw_pending(self) -> bool:
        return self._draw_pending

    @property
    def gradient_text(self) -> str:
        return self.codec.encode_list(self.gradient)

    def build_request(self) -> DrawRequest:
        render_gradient = normalize_for_render(self.gradient)
        rect = self.viewport.rectangle
        return DrawRequest(
            left=rect.left,
            right=rect.right,
            top=rect.top,
            bottom=rect.bottom,
            bailout_radius=float(self.config.bailout_radius),
            max_iterations=int(self.config.max_iterations),
            gradient_period_factor=gradient_period_factor(self.gradient_period),
            fill_color=render_gradient.fill_color,
            gradient_stops=render_gradient.stops,
        )

    def request_draw(self) -> float:
        """Draw now and return the elapsed time in milliseconds."""

        request = self.build_request()
        start = self._time_fn()
        try:
            self.renderer.draw(request)
        except Exception as exc:
            logger.exception("Renderer failed to draw %s", request)
            raise RenderError(f"Renderer failed to draw: {exc}") from exc
        finally:
            self._forward_debug_messages()
        elapsed_ms = (self._time_fn() - start) * 1000.0

        self.draw_count += 1
        self.last_render_ms = elapsed_ms
        message = f"Render time: {int(elapsed_ms)} ms."
        logger.debug(
            "%s left=%.17g right=%.17g top=%.17g bottom=%.17g zoom=%d",
            message, request.left, request.right, request.top, request.bottom,
            self.viewport.zoom_level,
        )
        if self._on_status is not None:
            self._on_status(message)
        return elapsed_ms

    def schedule_deferred_draw(self) -> bool:
        """Queue one draw for the next idle point; return False if one is already queued."""

        if self._draw_pending:
            logger.debug("Deferred draw already pending; request coalesced")
            return False
        self._draw_pending = True
        self.scheduler.call_when_idle(self._run_deferred_draw)
        return True

    def _run_deferred_draw(self) -> None:
        self._draw_pending = False
        self.request_draw()

    def _forward_debug_messages(self) -> None:
        drain = getattr(self.renderer, "drain_debug_messages", None)
        if drain is None:
            return
        for message in drain():
            level = _SEVERITY_LEVELS.get(message.severity, logging.INFO)
            logger.log(level, "renderer [%s]: %s", message.type.name, message.text)

    def on_surface_resized(self) -> None:
        self.renderer.refresh_surface()
        width, height = self.renderer.get_surface_extent()
        self.viewport.resize(width, height)
        self.schedule_deferred_draw()

    def on_pan(self, dx: float, dy: float) -> float:
        self.viewport.pan_by_pixels(dx, dy)
        return self.request_draw()

    def on_wheel(self, x: float, y: float, delta: float) -> Optional[float]:
        """Zoom one step toward ``(x, y)``; positive ``delta`` zooms in."""

        if delta > 0:
            self.viewport.zoom_to_pixel(x, y, 1)
        elif delta < 0:
            self.viewport.zoom_to_pixel(x, y, -1)
        else:
            return None
        return self.request_draw()

    def set_gradient(self, colors: Iterable[int]) -> None:
        """Replace the gradient; entries are kept to their low 24 bits."""

        self.gradient = tuple(int(rgb) & RGB_MAX for rgb in colors)
        self.schedule_deferred_draw()

    def set_gradient_text(self, text: str) -> None:
        self.set_gradient(self.codec.decode_list(text))

    def select_preset(self, name: str) -> None:
        self.set_gradient(self.codec.preset_gradient(name))

    def set_gradient_period(self, percent: int) -> float:
        period = int(percent)
        if period <= 0:
            raise ValueError(f"gradient period must be positive, got {percent}.")
        self.gradient_period = period
        return self.request_draw()
