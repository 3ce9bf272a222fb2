"""Smoke tests for the simulation CLI."""

from __future__ import annotations

import json
from pathlib import Path

from scripts import simulate


def test_simulate_reports_detection_metrics(tmp_path: Path) -> None:
    output_path = tmp_path / "report.json"
    regions_path = tmp_path / "regions.json"

    report = simulate.main(
        [
            "--train-size",
            "60",
            "--eval-size",
            "40",
            "--maintenance-every",
            "20",
            "--save-regions",
            str(regions_path),
            "--output",
            str(output_path),
        ]
    )

    evaluation = report["evaluation"]
    assert evaluation["circuits"] == 40
    assert evaluation["maintenance_runs"] == 2
    assert evaluation["accuracy"] >= 0.9
    assert evaluation["recall"] >= 0.9
    assert sum(report["training"]["outcomes"].values()) == 60
    assert report["stats"]["total_decisions"] == 40

    saved = json.loads(output_path.read_text(encoding="utf-8"))
    assert saved["evaluation"] == evaluation
    assert regions_path.exists()


def test_simulate_accepts_yaml_config_and_backend(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "thronion.yaml"
    config_path.write_text("thronion:\n  max_regions: 4\n", encoding="utf-8")

    report = simulate.main(
        [
            "--train-size",
            "20",
            "--eval-size",
            "10",
            "--config",
            str(config_path),
            "--backend",
            "torch",
        ]
    )

    assert report["config"]["max_regions"] == 4
    assert report["config"]["scoring_backend"] == "torch"
    assert report["stats"]["total_regions"] <= 4
    printed = json.loads(capsys.readouterr().out)
    assert printed["evaluation"]["circuits"] == 10
