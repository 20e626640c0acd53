"""Small object factories shared by the test modules."""

from __future__ import annotations

from uiadoption.engines.usage_scanner.models import Manifest, Repo


def manifest(deps: dict | None = None, dev_deps: dict | None = None, name: str = "app") -> Manifest:
    return Manifest(name=name, dependencies=deps or {}, dev_dependencies=dev_deps or {})


def repo(name: str = "demo", **overrides) -> Repo:
    defaults = {
        "name": name,
        "html_url": f"https://github.com/govalta/{name}",
        "ssh_url": f"git@github.com:govalta/{name}.git",
        "created_at": "2021-01-01T00:00:00Z",
        "updated_at": "2023-06-01T00:00:00Z",
        "pushed_at": "2023-06-02T00:00:00Z",
    }
    defaults.update(overrides)
    return Repo(**defaults)
