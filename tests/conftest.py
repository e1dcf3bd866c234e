from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from mandelbrot_explorer import DrawRequest, IdleQueue


@dataclass
class RecordingRenderer:
    width: int = 800
    height: int = 600
    draws: list[DrawRequest] = field(default_factory=list)
    refreshes: int = 0
    fail: bool = False

    def get_surface_extent(self) -> tuple[int, int]:
        return self.width, self.height

    def refresh_surface(self) -> None:
        self.refreshes += 1

    def draw(self, request: DrawRequest) -> None:
        if self.fail:
            raise RuntimeError("device lost")
        self.draws.append(request)


class FakeClock:
    def __init__(self, step: float = 0.012) -> None:
        self.now = 100.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def idle_queue() -> IdleQueue:
    return IdleQueue()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
