"""Tests for the manifest loader."""

from __future__ import annotations

import pytest

from uiadoption.engines.usage_scanner.manifests import (
    discover_manifests,
    load_manifest,
    load_manifests,
    parse_manifest,
)


class TestDiscoverManifests:
    def test_root_manifest(self, tmp_path, write_package):
        write_package({"react": "18.2.0"})
        assert discover_manifests(tmp_path) == [tmp_path / "package.json"]

    def test_nested_manifests(self, tmp_path, write_package):
        write_package({"react": "18.2.0"})
        write_package({"vue": "3.3.0"}, rel="packages/web")
        found = discover_manifests(tmp_path)
        assert tmp_path / "packages" / "web" / "package.json" in found
        assert len(found) == 2

    def test_skips_node_modules(self, tmp_path, write_package):
        write_package({"react": "18.2.0"})
        write_package({"left-pad": "1.0.0"}, rel="node_modules/left-pad")
        write_package({"x": "1.0.0"}, rel="apps/site/node_modules/x")
        assert discover_manifests(tmp_path) == [tmp_path / "package.json"]

    def test_empty_tree(self, tmp_path):
        assert discover_manifests(tmp_path) == []

    def test_ignores_directory_named_package_json(self, tmp_path):
        (tmp_path / "package.json").mkdir()
        assert discover_manifests(tmp_path) == []


class TestParseManifest:
    def test_dependencies_and_dev_dependencies(self, tmp_path):
        content = (
            '{"name": "site", "dependencies": {"react": "^18.2.0"},'
            ' "devDependencies": {"typescript": "5.1.0"}}'
        )
        outcome = parse_manifest(tmp_path / "package.json", content)
        assert outcome.ok
        m = outcome.value
        assert m.name == "site"
        assert dict(m.dependencies) == {"react": "^18.2.0"}
        assert dict(m.dev_dependencies) == {"typescript": "5.1.0"}

    def test_missing_sections(self, tmp_path):
        outcome = parse_manifest(tmp_path / "package.json", '{"private": true}')
        assert outcome.ok
        assert outcome.value.name == ""
        assert dict(outcome.value.dependencies) == {}
        assert dict(outcome.value.dev_dependencies) == {}

    def test_malformed_json(self, tmp_path):
        outcome = parse_manifest(tmp_path / "package.json", '{"dependencies": ')
        assert not outcome.ok
        assert outcome.value is None
        assert "invalid JSON" in outcome.error

    def test_non_object_json(self, tmp_path):
        outcome = parse_manifest(tmp_path / "package.json", "[1, 2, 3]")
        assert not outcome.ok

    def test_non_string_versions_dropped(self, tmp_path):
        outcome = parse_manifest(
            tmp_path / "package.json", '{"dependencies": {"a": "1.0.0", "b": {"v": 1}}}'
        )
        assert dict(outcome.value.dependencies) == {"a": "1.0.0"}

    def test_missing_file(self, tmp_path):
        outcome = load_manifest(tmp_path / "nope" / "package.json")
        assert not outcome.ok

    def test_source_file_relative_to_repo(self, tmp_path, write_package):
        path = write_package({"vue": "3.0.0"}, rel="apps/web")
        outcome = load_manifest(path, tmp_path)
        assert outcome.value.source_file == "apps/web/package.json"


class TestLoadManifests:
    def test_skips_malformed(self, tmp_path, write_package):
        write_package({"react": "18.2.0"})
        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / "package.json").write_text("{ not json")
        manifests = load_manifests(tmp_path)
        assert len(manifests) == 1
        assert dict(manifests[0].dependencies) == {"react": "18.2.0"}

    def test_skips_deeply_nested_manifest(self, tmp_path, write_package):
        write_package({"@abgov/angular-components": "2.4.1"})
        nested = tmp_path / "bad"
        nested.mkdir()
        (nested / "package.json").write_text("[" * 100_000)
        manifests = load_manifests(tmp_path)
        assert len(manifests) == 1
        assert dict(manifests[0].dependencies) == {"@abgov/angular-components": "2.4.1"}

    def test_all_malformed_returns_empty(self, tmp_path):
        (tmp_path / "package.json").write_text("")
        assert load_manifests(tmp_path) == []

    def test_manifest_is_immutable(self, tmp_path, write_package):
        write_package({"react": "18.2.0"})
        m = load_manifests(tmp_path)[0]
        with pytest.raises(TypeError):
            m.dependencies["vue"] = "3.0.0"  # type: ignore[index]
