"""Unit tests for routing latency result sets to indexers."""

from __future__ import annotations

import logging

from conftest import RecordingIndexer

from indexers import IndexerRegistry
from latency_core.models import MeasurementConfig
from latency_core.types import ResultKind
from measurements.indexing import index_latency_measurement, select_indexers

DOCS = [{"quantileName": "Ready", "P99": 10}]


def _config(timeseries: str = "", quantiles: str = "") -> MeasurementConfig:
    return MeasurementConfig(
        name="podLatency", timeseries_indexer=timeseries, quantiles_indexer=quantiles
    )


class TestRoutingRules:
    def test_raw_metric_goes_to_timeseries_indexer_only(self, registry, es, local):
        index_latency_measurement(
            _config(timeseries="es"), "density", {ResultKind.POD_LATENCY: DOCS}, registry
        )
        assert es.metric_names == ["podLatencyMeasurement-density"]
        assert local.calls == []

    def test_quantiles_broadcast_without_quantiles_indexer(self, registry, es, local):
        index_latency_measurement(
            _config(timeseries="es"),
            "density",
            {ResultKind.POD_LATENCY_QUANTILES: DOCS},
            registry,
        )
        assert es.metric_names == ["podLatencyQuantilesMeasurement-density"]
        assert local.metric_names == ["podLatencyQuantilesMeasurement-density"]

    def test_quantiles_go_to_quantiles_indexer_only(self, registry, es, local):
        index_latency_measurement(
            _config(quantiles="local"),
            "density",
            {ResultKind.NODE_LATENCY_QUANTILES: DOCS},
            registry,
        )
        assert es.calls == []
        assert local.metric_names == ["nodeLatencyQuantilesMeasurement-density"]

    def test_raw_metric_broadcast_when_only_quantiles_indexer_set(self, registry, es, local):
        index_latency_measurement(
            _config(quantiles="local"), "density", {ResultKind.PVC_LATENCY: DOCS}, registry
        )
        assert len(es.calls) == 1
        assert len(local.calls) == 1

    def test_unknown_metric_is_broadcast(self, registry, es, local):
        index_latency_measurement(
            _config(timeseries="es", quantiles="es"), "density", {"jobSummary": DOCS}, registry
        )
        assert es.metric_names == ["jobSummary-density"]
        assert local.metric_names == ["jobSummary-density"]

    def test_plain_string_metric_names_route_like_kinds(self, registry, es, local):
        index_latency_measurement(
            _config(timeseries="es"), "density", {"svcLatencyMeasurement": DOCS}, registry
        )
        assert len(es.calls) == 1
        assert local.calls == []

    def test_documents_passed_through(self, registry, es):
        index_latency_measurement(
            _config(timeseries="es"), "density", {ResultKind.POD_LATENCY: DOCS}, registry
        )
        assert es.calls[0][0] == DOCS


class TestFailureIsolation:
    def test_failed_indexer_does_not_block_others(self, es, caplog):
        failing = RecordingIndexer(fail=True)
        registry = IndexerRegistry()
        registry.register("local", failing)
        registry.register("es", es)

        with caplog.at_level(logging.WARNING, logger="measurements.indexing"):
            index_latency_measurement(
                _config(),
                "density",
                {ResultKind.POD_LATENCY: DOCS, ResultKind.POD_LATENCY_QUANTILES: DOCS},
                registry,
            )

        assert len(failing.calls) == 2
        assert es.metric_names == [
            "podLatencyMeasurement-density",
            "podLatencyQuantilesMeasurement-density",
        ]
        assert any("Indexer local failed" in r.getMessage() for r in caplog.records)

    def test_missing_dedicated_indexer_is_skipped(self, registry, es, local, caplog):
        with caplog.at_level(logging.ERROR, logger="measurements.indexing"):
            index_latency_measurement(
                _config(timeseries="opensearch"),
                "density",
                {ResultKind.POD_LATENCY: DOCS, ResultKind.POD_LATENCY_QUANTILES: DOCS},
                registry,
            )
        assert es.metric_names == ["podLatencyQuantilesMeasurement-density"]
        assert local.metric_names == ["podLatencyQuantilesMeasurement-density"]
        assert any("opensearch" in r.getMessage() for r in caplog.records)

    def test_empty_registry_is_a_no_op(self):
        index_latency_measurement(_config(), "density", {"x": DOCS}, IndexerRegistry())


class TestSelectIndexers:
    def test_broadcast_preserves_registration_order(self, registry):
        names = [name for name, _ in select_indexers(_config(), "x", registry)]
        assert names == ["es", "local"]
