"""Per-run output directory and console capture for the CLI.

A run of ``daly-cluster`` on ``life expectancy.csv`` lands in::

    results/life_expectancy/kmeans/2026-10-18/
        data/           clusters and edges CSVs
        plots/          scatter and network PNGs
        run_log.txt     everything printed while the run was open
        run_info.json   parameters, timing, git revision, ok/failed
    results/life_expectancy/kmeans/latest -> 2026-10-18

A second run on the same UTC day reuses (and overwrites) that day's directory.
"""

from __future__ import annotations

import io
import json
import re
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

from daly_cluster.config import RESULTS_ROOT


class _TeeStream:
    """stdout replacement that echoes to the console and keeps a copy."""

    def __init__(self, console: io.TextIOBase) -> None:
        self._console = console
        self._chunks: list[str] = []

    def write(self, data: str) -> int:
        self._console.write(data)
        self._chunks.append(data)
        return len(data)

    def flush(self) -> None:
        self._console.flush()

    def getvalue(self) -> str:
        return "".join(self._chunks)


def dataset_slug(path: Path | str) -> str:
    """Lowercased file stem with runs of unsafe characters collapsed to "_".

    "life expectancy.csv" -> "life_expectancy". Falls back to "dataset" when
    nothing usable is left.
    """
    stem = Path(path).stem.strip().lower()
    slug = re.sub(r"[^a-z0-9_-]+", "_", stem).strip("_")
    return slug or "dataset"


def _git_revision() -> str:
    try:
        out = subprocess.check_output(
            ["git", "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return out.strip() or "unknown"


class RunContext:
    """Open a dated run directory and record what happened in it.

    ``setup()`` (or entering the ``with`` block) creates ``plots_dir`` and
    ``data_dir`` and starts teeing stdout. ``finalize()`` stops the tee and
    writes ``run_log.txt`` and ``run_info.json``, then repoints ``latest``.
    Leaving the block through an exception records ``"status": "failed"``
    and lets the exception propagate.
    """

    LOG_FILE = "run_log.txt"
    INFO_FILE = "run_info.json"

    def __init__(
        self,
        dataset: str,
        analysis_name: str,
        params: dict | None = None,
        results_root: Path | None = None,
    ) -> None:
        self.dataset = dataset
        self.analysis_name = analysis_name
        self.params = dict(params or {})

        self.run_date = datetime.now(timezone.utc).date().isoformat()
        self._analysis_dir = Path(results_root or RESULTS_ROOT) / dataset / analysis_name
        self.run_dir = self._analysis_dir / self.run_date
        self.plots_dir = self.run_dir / "plots"
        self.data_dir = self.run_dir / "data"

        self._tee: _TeeStream | None = None
        self._saved_stdout = None
        self._started: datetime | None = None

    def __enter__(self) -> RunContext:
        self.setup()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.finalize(failed=exc_type is not None)

    def setup(self) -> None:
        for directory in (self.plots_dir, self.data_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self._saved_stdout = sys.stdout
        self._tee = _TeeStream(sys.stdout)
        sys.stdout = self._tee  # type: ignore[assignment]
        self._started = datetime.now(timezone.utc)

    def _metadata(self, failed: bool) -> dict:
        return {
            "analysis": self.analysis_name,
            "dataset": self.dataset,
            "run_date": self.run_date,
            "timestamp_start": self._started.isoformat() if self._started else None,
            "timestamp_end": datetime.now(timezone.utc).isoformat(),
            "status": "failed" if failed else "ok",
            "git_commit": _git_revision(),
            "python_version": sys.version,
            "params": self.params,
        }

    def finalize(self, failed: bool = False) -> None:
        log_text = self._tee.getvalue() if self._tee is not None else ""
        if self._saved_stdout is not None:
            sys.stdout = self._saved_stdout
            self._saved_stdout = None
        self._tee = None

        (self.run_dir / self.LOG_FILE).write_text(log_text, encoding="utf-8")
        (self.run_dir / self.INFO_FILE).write_text(
            json.dumps(self._metadata(failed), indent=2, default=str),
            encoding="utf-8",
        )
        self._point_latest()

    def _point_latest(self) -> None:
        # Relative target, so the results tree can be moved as a whole
        latest = self._analysis_dir / "latest"
        if latest.is_symlink() or latest.exists():
            latest.unlink()
        latest.symlink_to(self.run_date)
