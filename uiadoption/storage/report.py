"""Report sink — timestamped JSON data files plus a rendered HTML index."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from importlib import resources
from pathlib import Path

import structlog

from uiadoption.engines.usage_scanner.models import Report
from uiadoption.exceptions import ReportWriteError

log = structlog.get_logger("uiadoption.report")

TEMPLATE_NAME = "index.html.template"
DATA_PLACEHOLDER = "{DATA}"


def report_timestamp(now: datetime | None = None) -> str:
    """``2024-05-01T12:00:00.000Z``-style UTC timestamp used as the data file stem."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReportWriter:
    def __init__(self, report_dir: Path) -> None:
        self.report_dir = report_dir
        self.data_dir = report_dir / "data"

    def write(self, report: Report, now: datetime | None = None) -> Path:
        """Persist *report* as ``data/<timestamp>.json``.

        Raises :class:`ReportWriteError` if the file cannot be written.
        """
        path = self.data_dir / f"{report_timestamp(now)}.json"
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(report.to_dict()), encoding="utf-8")
        except OSError as exc:
            raise ReportWriteError(f"cannot write report {path}: {exc}") from exc
        log.info("report.written", path=str(path), repos=len(report.data))
        return path

    def data_files(self) -> list[str]:
        """Data file names on disk, newest first."""
        if not self.data_dir.is_dir():
            return []
        return sorted((p.name for p in self.data_dir.glob("*.json")), reverse=True)

    def _template(self) -> str:
        local = self.report_dir / TEMPLATE_NAME
        if local.is_file():
            return local.read_text(encoding="utf-8")
        bundled = resources.files("uiadoption").joinpath("templates").joinpath(TEMPLATE_NAME)
        return bundled.read_text(encoding="utf-8")

    def render(self) -> Path:
        """Embed the list of data files into ``index.html``."""
        target = self.report_dir / "index.html"
        try:
            html = self._template().replace(DATA_PLACEHOLDER, json.dumps(self.data_files()))
            self.report_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise ReportWriteError(f"cannot render {target}: {exc}") from exc
        log.info("report.rendered", path=str(target))
        return target
