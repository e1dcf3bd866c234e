"""Session-wide render settings."""

from __future__ import annotations

from dataclasses import dataclass

from .gradient import RGB_MAX

DEFAULT_GRADIENT = (0x000000, 0x000000, 0xFF0000, 0x00FF00, 0x0000FF)
# max_iterations travels to the renderer as an unsigned 32-bit field.
MAX_ITERATIONS_LIMIT = 0xFFFFFFFF


class ExplorerError(Exception):
    """Base class for errors raised by the explorer."""


class ConfigError(ExplorerError, ValueError):
    """Raised when render settings are out of range."""


class RenderError(ExplorerError):
    """Raised when the renderer fails to draw a frame."""


def gradient_period_factor(percent: int) -> float:
    """Convert a gradient period percentage into the factor the renderer expects."""

    return percent / 100.0


@dataclass(frozen=True)
class ExplorerConfig:
    """Fixed parameters applied to every draw, plus the initial gradient."""

    bailout_radius: float = 256.0
    max_iterations: int = 5000
    gradient_period: int = 20
    gradient: tuple[int, ...] = DEFAULT_GRADIENT

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.bailout_radius <= 0:
            raise ConfigError(f"bailout_radius must be positive, got {self.bailout_radius}.")
        if not 0 < self.max_iterations <= MAX_ITERATIONS_LIMIT:
            raise ConfigError(
                f"max_iterations must be between 1 and {MAX_ITERATIONS_LIMIT}, got {self.max_iterations}."
            )
        if self.gradient_period <= 0:
            raise ConfigError(f"gradient_period must be positive, got {self.gradient_period}.")
        for rgb in self.gradient:
            if not 0 <= rgb <= RGB_MAX:
                raise ConfigError(f"gradient colours must be 24-bit RGB values, got {rgb:#x}.")

    @property
    def gradient_period_factor(self) -> float:
        return gradient_period_factor(self.gradient_period)
