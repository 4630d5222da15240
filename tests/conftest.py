"""Shared test fixtures for downscaler."""

import logging
from pathlib import Path

import pytest

from downscaler.exceptions import EncodeError


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


@pytest.fixture
def empty_env() -> dict[str, str]:
    """Environment mapping with no DOWNSCALER_* variables."""
    return {}


@pytest.fixture
def video_tree(tmp_path: Path) -> Path:
    """Create a source tree with videos at several depths.

    Layout:
        intro.mp4
        notes.txt
        movies/drama.mkv
        movies/kids/cartoon.mp4
        tv/show.mkv
        tvfish/fish.mp4
    """
    source = tmp_path / "source"
    (source / "movies" / "kids").mkdir(parents=True)
    (source / "tv").mkdir()
    (source / "tvfish").mkdir()

    (source / "intro.mp4").write_bytes(b"intro")
    (source / "notes.txt").write_text("not a video")
    (source / "movies" / "drama.mkv").write_bytes(b"drama")
    (source / "movies" / "kids" / "cartoon.mp4").write_bytes(b"cartoon")
    (source / "tv" / "show.mkv").write_bytes(b"show")
    (source / "tvfish" / "fish.mp4").write_bytes(b"fish")
    return source


class FakeEncoder:
    """Encoder double that records calls and writes the destination file.

    Files whose name is in ``fail_names`` raise EncodeError instead.
    """

    def __init__(self, fail_names: set[str] | None = None) -> None:
        self.fail_names = fail_names or set()
        self.calls: list[tuple[Path, Path, int | None]] = []

    def transcode(self, source: Path, destination: Path, height: int | None) -> None:
        self.calls.append((source, destination, height))
        if source.name in self.fail_names:
            raise EncodeError("ffmpeg exited with status code 1", source, returncode=1)
        destination.write_bytes(source.read_bytes())

    def describe(self, source: Path, destination: Path, height: int | None) -> str:
        return f"encode {source} -> {destination} height={height}"

    def heights_by_name(self) -> dict[str, int | None]:
        return {source.name: height for source, _, height in self.calls}


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def make_encoder():
    """Factory for FakeEncoder instances, e.g. ``make_encoder({"a.mkv"})``."""
    return FakeEncoder
