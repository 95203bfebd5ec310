"""
Tests for CLI argument parsing and the end-to-end run in cli.py.

Each test writes a small source CSV to tmp_path and points --output at
tmp_path, so the run directory, CSVs and metadata land in the sandbox.
Plots are skipped except where a test checks them.

Run: uv run pytest tests/test_cli.py -v
"""

import csv
import json
from pathlib import Path

import pytest

from daly_cluster.cli import main

# ── Helpers ──────────────────────────────────────────────────────────────────

N_COLUMNS = 13


def _row(name: str, comm: float, non_comm: float, co2: float) -> str:
    row = ["x"] * N_COLUMNS
    row[0] = name
    row[8] = str(comm)
    row[9] = str(non_comm)
    row[12] = str(co2)
    return ",".join(row)


@pytest.fixture
def source_csv(tmp_path: Path) -> Path:
    """Three countries plus a no-data row and a duplicate."""
    header = ",".join(f"col{i}" for i in range(N_COLUMNS))
    lines = [
        header,
        _row("CountryA", 10.0, 20.0, 5.0),
        _row("CountryB", 15.0, 25.0, 10.0),
        _row("Empty", 0, 0, 0),
        _row("CountryC", 30.0, 35.0, 20.0),
        _row("CountryA", 99.0, 99.0, 99.0),
    ]
    path = tmp_path / "life expectancy.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _run_dir(out: Path) -> Path:
    return out / "life_expectancy" / "kmeans" / "latest"


# ── Successful runs ──────────────────────────────────────────────────────────


class TestRun:
    """Full runs produce CSVs, metadata and console output."""

    def test_writes_csvs(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "--seed", "1", "-o", str(out), "--no-plots"])
        data_dir = _run_dir(out) / "data"
        assert (data_dir / "life_expectancy_clusters.csv").exists()
        assert (data_dir / "life_expectancy_edges.csv").exists()

    def test_clusters_csv_contents(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "--seed", "1", "-o", str(out), "--no-plots"])
        with open(_run_dir(out) / "data" / "life_expectancy_clusters.csv") as f:
            rows = list(csv.DictReader(f))
        assert [r["name"] for r in rows] == ["CountryA", "CountryB", "CountryC"]
        labels = [r["cluster"] for r in rows]
        assert labels[0] == labels[1] != labels[2]

    def test_threshold_controls_edges(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "--threshold", "10", "-o", str(out), "--no-plots"])
        with open(_run_dir(out) / "data" / "life_expectancy_edges.csv") as f:
            pairs = {(r["source"], r["target"]) for r in csv.DictReader(f)}
        assert pairs == {("CountryA", "CountryB"), ("CountryB", "CountryA")}

    def test_run_info(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "--seed", "3", "-o", str(out), "--no-plots"])
        info = json.loads((_run_dir(out) / "run_info.json").read_text())
        assert info["analysis"] == "kmeans"
        assert info["dataset"] == "life_expectancy"
        assert info["status"] == "ok"
        assert info["params"]["k"] == 2
        assert info["params"]["seed"] == 3

    def test_run_log_captures_report(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "-o", str(out), "--no-plots"])
        log = (_run_dir(out) / "run_log.txt").read_text()
        assert "Loaded and cleaned 3 unique countries." in log
        assert "Clustered Results:" in log

    def test_quiet_skips_report(
        self, source_csv: Path, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "-o", str(out), "--no-plots", "--quiet"])
        assert "Clustered Results:" not in capsys.readouterr().out

    def test_normalize(self, source_csv: Path, tmp_path: Path) -> None:
        """On the unit scale A-B is 0.53 apart and B-C 1.20, so only A-B is within 0.6."""
        out = tmp_path / "results"
        main(
            [
                str(source_csv),
                "--k",
                "2",
                "--normalize",
                "--threshold",
                "0.6",
                "-o",
                str(out),
                "--no-plots",
            ]
        )
        with open(_run_dir(out) / "data" / "life_expectancy_edges.csv") as f:
            pairs = {(r["source"], r["target"]) for r in csv.DictReader(f)}
        assert pairs == {("CountryA", "CountryB"), ("CountryB", "CountryA")}

    def test_writes_plots(self, source_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "results"
        main([str(source_csv), "--k", "2", "--threshold", "30", "-o", str(out), "-q"])
        plots_dir = _run_dir(out) / "plots"
        assert (plots_dir / "clusters.png").exists()
        assert (plots_dir / "network.png").exists()


# ── Empty data and errors ────────────────────────────────────────────────────


class TestNoData:
    """A source with no usable rows short-circuits without error."""

    def test_no_valid_data(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("a,b,c\n", encoding="utf-8")
        out = tmp_path / "results"
        main([str(path), "-o", str(out), "--no-plots"])
        assert "No valid data found." in capsys.readouterr().out
        assert not (out / "empty" / "kmeans" / "latest" / "data" / "empty_clusters.csv").exists()


class TestErrors:
    """Load failures and oversized k exit with status 1."""

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "nope.csv"), "-o", str(tmp_path / "results"), "--no-plots"])
        assert exc_info.value.code == 1
        assert "Could not read" in capsys.readouterr().err

    def test_malformed_source(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "ragged.csv"
        path.write_text("a,b,c\nNepal,1,2,3,4\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path), "-o", str(tmp_path / "results"), "--no-plots"])
        assert exc_info.value.code == 1
        assert "Could not read" in capsys.readouterr().err

    def test_k_too_large(
        self, source_csv: Path, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """Default k=5 against three countries."""
        out = tmp_path / "results"
        with pytest.raises(SystemExit) as exc_info:
            main([str(source_csv), "-o", str(out), "--no-plots"])
        assert exc_info.value.code == 1
        assert "k=5" in capsys.readouterr().err
        info = json.loads((_run_dir(out) / "run_info.json").read_text())
        assert info["status"] == "failed"

    @pytest.mark.parametrize(
        "flags",
        [["--k", "0"], ["--max-iterations", "-1"], ["--threshold", "-0.1"]],
    )
    def test_invalid_arguments(self, source_csv: Path, flags: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([str(source_csv), *flags])
        assert exc_info.value.code == 2
