"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from PIL import Image
import pytest

from core.errors import RenderNotReady
from infrastructure.json_project_repository import JsonProjectRepository
from infrastructure.media_store import MediaStore


class FakeClock:
    """Deterministic epoch-millisecond clock advancing by `step` per call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@dataclass
class FakeRenderer:
    """Renderer stand-in that records calls and returns canned bytes."""

    frames: list[tuple[str, list[float], tuple[int, int] | None]] = field(default_factory=list)
    ready: bool = False
    payload: bytes = b"\xff\xd8fake-jpeg\xff\xd9"
    cleared: int = 0

    @property
    def has_frame(self) -> bool:
        return self.ready

    def clear(self) -> None:
        self.cleared += 1
        self.ready = False

    def render(self, source_uri, matrix, size=None):
        self.frames.append((source_uri, list(matrix), size))
        self.ready = True
        return object()

    def snapshot(self, quality: int = 95) -> bytes:
        if not self.ready:
            raise RenderNotReady()
        return self.payload


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    return tmp_path / "projects"


@pytest.fixture
def repo(storage_root: Path, clock: FakeClock) -> JsonProjectRepository:
    return JsonProjectRepository(storage_root, clock=clock)


@pytest.fixture
def media(tmp_path: Path, clock: FakeClock) -> MediaStore:
    return MediaStore(tmp_path / "edits", tmp_path / "exports", clock=clock)


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def sample_image(tmp_path: Path) -> Path:
    """A 4x2 RGB PNG with distinct colors."""
    img = Image.new("RGB", (4, 2))
    img.putdata(
        [
            (255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255),
            (10, 20, 30), (200, 100, 50), (0, 0, 0), (128, 128, 128),
        ]
    )  # fmt: skip
    path = tmp_path / "sample.png"
    img.save(path)
    return path


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru output (loguru does not feed pytest's caplog)."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
