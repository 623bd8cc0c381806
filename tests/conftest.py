"""Shared fixtures for Puntada tests."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from puntada.config import reset_engine_config


@pytest.fixture(autouse=True)
def _default_engine_config() -> Iterator[None]:
    """Every test starts and ends with the default EngineConfig."""
    reset_engine_config()
    yield
    reset_engine_config()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project root (symlinks resolved)."""
    root = tmp_path / "app"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def write(project: Path) -> Callable[[str, str], Path]:
    """Write a file under the project root, byte for byte."""

    def _write(relative: str, content: str) -> Path:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write
