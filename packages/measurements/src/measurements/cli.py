"""Typer CLI for kube-latency.

Commands:
  validate   Check a measurement's latency thresholds for a latency kind
  summarize  Compute latency quantiles from normalized records and optionally index them
"""

from __future__ import annotations

import json
import logging
from pathlib import Path  # noqa: TC003 - Typer evaluates type hints at runtime
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from indexers.config import build_registry
from latency_core.models import JobConfig, MeasurementConfig
from measurements.factory import BaseMeasurementFactory
from measurements.kinds import UnknownLatencyKindError, get_latency_kind
from measurements.settings import GlobalConfig, load_indexer_configs, load_measurement_config
from measurements.validation import MeasurementConfigError

if TYPE_CHECKING:
    from measurements.kinds import LatencyKind

app = typer.Typer(
    name="kube-latency",
    help="Latency quantile aggregation and indexing for workload benchmarks",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main() -> None:
    settings = GlobalConfig()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Path) -> MeasurementConfig:
    try:
        return load_measurement_config(path)
    except (OSError, ValidationError) as exc:
        console.print(f"[red]Cannot load measurement config {path}: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc


def _resolve_kind(name: str) -> LatencyKind:
    try:
        return get_latency_kind(name)
    except UnknownLatencyKindError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc


@app.command()
def validate(
    config: Annotated[Path, typer.Argument(help="Measurement YAML file")],
    kind: Annotated[str, typer.Option("--kind", "-k", help="Latency kind")] = "pod",
) -> None:
    """Validate the latency thresholds of a measurement."""
    latency_kind = _resolve_kind(kind)
    measurement = _load_config(config)
    factory = BaseMeasurementFactory.from_config(GlobalConfig(), measurement)
    try:
        factory.new_measurement(JobConfig(name="validate")).validate(latency_kind)
    except MeasurementConfigError as exc:
        console.print(f"[red]Invalid measurement {measurement.name}: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
    console.print(
        f"[green]Measurement {measurement.name} is valid "
        f"({len(measurement.thresholds)} thresholds)[/green]"
    )


@app.command()
def summarize(
    latencies: Annotated[Path, typer.Argument(help="JSON list of normalized latency records")],
    job: Annotated[str, typer.Option("--job", "-j", help="Job name")],
    kind: Annotated[str, typer.Option("--kind", "-k", help="Latency kind")] = "pod",
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Measurement YAML file")
    ] = None,
    indexers: Annotated[
        Path | None, typer.Option("--indexers", "-i", help="Indexers YAML file")
    ] = None,
) -> None:
    """Print latency quantiles per condition, indexing results when indexers are given."""
    latency_kind = _resolve_kind(kind)
    measurement = _load_config(config) if config else MeasurementConfig(name=f"{kind}Latency")

    try:
        raw = json.loads(latencies.read_text())
        records = [latency_kind.record_type.model_validate(item) for item in raw]
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot load latency records {latencies}: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    factory = BaseMeasurementFactory.from_config(GlobalConfig(), measurement)
    m = factory.new_measurement(JobConfig(name=job))
    try:
        m.validate(latency_kind)
    except MeasurementConfigError as exc:
        console.print(f"[red]Invalid measurement {measurement.name}: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
    m.collect(records)

    table = Table(title=f"{latency_kind.quantiles} ({job})")
    table.add_column("Condition", style="bold")
    for col in ("P50", "P95", "P99", "Min", "Max", "Avg"):
        table.add_column(col, justify="right")
    for q in m.quantiles(latency_kind):
        table.add_row(
            q.quantile_name,
            f"{q.p50:g}",
            f"{q.p95:g}",
            f"{q.p99:g}",
            f"{q.min:g}",
            f"{q.max:g}",
            f"{q.avg:.2f}",
        )
    console.print(table)

    if indexers:
        with build_registry(load_indexer_configs(indexers)) as registry:
            m.index(m.result_sets(latency_kind), registry)
            console.print(f"Indexed results to: {', '.join(registry.names())}")
