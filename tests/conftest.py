"""Shared fixtures for uiadoption tests. No network, no git."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def write_package(tmp_path):
    """Write a package.json at *rel* (relative to tmp_path) and return its path."""

    def _write(
        deps: dict | None = None,
        dev_deps: dict | None = None,
        rel: str = ".",
        name: str = "app",
    ) -> Path:
        directory = tmp_path / rel
        directory.mkdir(parents=True, exist_ok=True)
        data: dict = {"name": name}
        if deps is not None:
            data["dependencies"] = deps
        if dev_deps is not None:
            data["devDependencies"] = dev_deps
        path = directory / "package.json"
        path.write_text(json.dumps(data))
        return path

    return _write
