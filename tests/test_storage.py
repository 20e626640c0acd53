"""Tests for the repository cache and the report sink."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from factories import repo

from uiadoption.engines.usage_scanner.models import LibraryVariant as V
from uiadoption.engines.usage_scanner.models import Report, Result, Stats
from uiadoption.exceptions import ReportWriteError
from uiadoption.storage.cache import RepoCache
from uiadoption.storage.report import ReportWriter, report_timestamp

# ── RepoCache ────────────────────────────────────────────────────────────


class TestRepoCache:
    def test_miss_when_absent(self, tmp_path):
        assert RepoCache(tmp_path / ".cache").load() == []

    def test_save_then_load(self, tmp_path):
        cache = RepoCache(tmp_path / ".cache")
        repos = [repo("a"), repo("b")]
        cache.save(repos)
        assert cache.path == tmp_path / ".cache" / "data.json"
        assert cache.load() == repos

    def test_limited_uses_separate_file(self, tmp_path):
        full = RepoCache(tmp_path)
        limited = RepoCache(tmp_path, limited=True)
        full.save([repo("a"), repo("b")])
        assert limited.path.name == "data.limit.json"
        assert limited.load() == []

    def test_malformed_is_miss(self, tmp_path):
        (tmp_path / "data.json").write_text("{oops")
        assert RepoCache(tmp_path).load() == []

    def test_non_list_is_miss(self, tmp_path):
        (tmp_path / "data.json").write_text('{"name": "a"}')
        assert RepoCache(tmp_path).load() == []

    def test_save_failure_is_logged_not_raised(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        RepoCache(blocker / "sub").save([repo("a")])


# ── ReportWriter ─────────────────────────────────────────────────────────


def _report() -> Report:
    stats = Stats().add(V.ANGULAR_UIC).add(V.NONE)
    results = [Result(repo="forms", lib=V.ANGULAR_UIC, versions=("2.4.1",), count=2, elements={"button": 2})]
    return Report.build(stats, results)


class TestReportTimestamp:
    def test_format(self):
        ts = report_timestamp(datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc))
        assert ts == "2024-05-01T12:30:00.123Z"


class TestReportWriter:
    def test_write(self, tmp_path):
        writer = ReportWriter(tmp_path / "report")
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        path = writer.write(_report(), now)
        assert path == tmp_path / "report" / "data" / "2024-05-01T00:00:00.000Z.json"
        data = json.loads(path.read_text())
        assert data["stats"]["totalLibCount"] == 1
        assert data["stats"]["angularUICLibCount"] == 1
        assert data["data"][0]["repo"] == "forms"
        assert data["data"][0]["lib"] == "angular-uic"

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "report"
        blocker.write_text("not a dir")
        with pytest.raises(ReportWriteError):
            ReportWriter(blocker).write(_report())

    def test_render_newest_first_with_bundled_template(self, tmp_path):
        writer = ReportWriter(tmp_path)
        writer.write(_report(), datetime(2024, 1, 1, tzinfo=timezone.utc))
        writer.write(_report(), datetime(2024, 2, 1, tzinfo=timezone.utc))
        html = writer.render().read_text()
        expected = json.dumps(["2024-02-01T00:00:00.000Z.json", "2024-01-01T00:00:00.000Z.json"])
        assert expected in html
        assert "{DATA}" not in html

    def test_render_prefers_local_template(self, tmp_path):
        (tmp_path / "index.html.template").write_text("<p>{DATA}</p>")
        writer = ReportWriter(tmp_path)
        assert writer.render().read_text() == "<p>[]</p>"

    def test_render_failure_raises(self, tmp_path):
        writer = ReportWriter(tmp_path)
        with patch.object(ReportWriter, "_template", side_effect=OSError("gone")):
            with pytest.raises(ReportWriteError):
                writer.render()
