"""Pytest configuration and shared fixtures for TreeConf tests."""

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from tests.data.serializables import Broken, Marker, Point, Temperature
from treeconf import Configuration, TypeRegistry


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def registry() -> TypeRegistry:
    """Create a registry knowing the test serializable classes."""
    registry = TypeRegistry()
    registry.register("point", Point)
    registry.register_class(Marker)
    registry.register_class(Temperature, "temperature")
    registry.register_class(Broken, "broken")
    return registry


@pytest.fixture
def config(registry: TypeRegistry) -> Configuration:
    """Create an empty configuration using the test registry."""
    return Configuration(registry=registry)


def write_document(file_path: Path, text: str) -> None:
    """Write document text to a file.

    Args:
        file_path: Path to write file
        text: Document text
    """
    file_path.write_text(text, encoding="utf-8")
