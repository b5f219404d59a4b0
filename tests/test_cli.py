"""Unit tests for the kube-latency CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from measurements.cli import app

runner = CliRunner()

VALID_YAML = """\
name: podLatency
thresholds:
  - conditionType: Ready
    metric: P99
    threshold: 2s
"""

RECORDS = [
    {
        "timestamp": "2026-01-15T00:00:00Z",
        "podName": f"pod-{i}",
        "namespace": "density-1",
        "schedulingLatency": 10 * i,
        "podReadyLatency": 100 * i,
    }
    for i in range(1, 5)
]


@pytest.fixture
def latencies(tmp_path):
    path = tmp_path / "latencies.json"
    path.write_text(json.dumps(RECORDS))
    return path


class TestValidate:
    def test_valid_config(self, tmp_path):
        path = tmp_path / "m.yml"
        path.write_text(VALID_YAML)
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_unsupported_metric(self, tmp_path):
        path = tmp_path / "m.yml"
        path.write_text(VALID_YAML.replace("P99", "P999"))
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "P999" in result.output

    def test_condition_checked_against_kind(self, tmp_path):
        path = tmp_path / "m.yml"
        path.write_text(VALID_YAML.replace("Ready", "PodScheduled"))
        result = runner.invoke(app, ["validate", str(path), "--kind", "node"])
        assert result.exit_code == 1
        assert "PodScheduled" in result.output

    def test_unknown_kind(self, tmp_path):
        path = tmp_path / "m.yml"
        path.write_text(VALID_YAML)
        result = runner.invoke(app, ["validate", str(path), "--kind", "ingress"])
        assert result.exit_code == 1


class TestSummarize:
    def test_prints_quantiles(self, latencies):
        result = runner.invoke(app, ["summarize", str(latencies), "--job", "density"])
        assert result.exit_code == 0
        assert "PodScheduled" in result.output
        assert "Ready" in result.output

    def test_indexes_to_local_directory(self, latencies, tmp_path):
        metrics_dir = tmp_path / "collected"
        indexers = tmp_path / "indexers.yml"
        indexers.write_text(
            f"- name: local\n  type: local\n  metricsDirectory: {metrics_dir}\n"
        )

        result = runner.invoke(
            app, ["summarize", str(latencies), "--job", "density", "--indexers", str(indexers)]
        )

        assert result.exit_code == 0
        raw = json.loads((metrics_dir / "podLatencyMeasurement-density.json").read_text())
        quantiles = json.loads(
            (metrics_dir / "podLatencyQuantilesMeasurement-density.json").read_text()
        )
        assert len(raw) == 4
        ready = next(q for q in quantiles if q["quantileName"] == "Ready")
        assert ready["max"] == 400
        assert ready["jobName"] == "density"

    def test_closes_indexers_after_summarize(
        self, latencies, tmp_path, monkeypatch, registry, es
    ):
        monkeypatch.setattr("measurements.cli.build_registry", lambda configs: registry)
        indexers = tmp_path / "indexers.yml"
        indexers.write_text("[]\n")

        result = runner.invoke(
            app, ["summarize", str(latencies), "--job", "density", "--indexers", str(indexers)]
        )

        assert result.exit_code == 0
        assert es.metric_names == [
            "podLatencyMeasurement-density",
            "podLatencyQuantilesMeasurement-density",
        ]
        assert es.closed

    def test_bad_records(self, tmp_path):
        path = tmp_path / "latencies.json"
        path.write_text(json.dumps([{"podName": "missing-fields"}]))
        result = runner.invoke(app, ["summarize", str(path), "--job", "density"])
        assert result.exit_code == 1
