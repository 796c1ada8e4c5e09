"""
Prefect flows for a Frescalo analysis run.

classify_occurrences: read records, classify into epochs, write audit tables
run_analysis:         classify, prepare inputs, run Frescalo, summarize, report
build_report:         re-render the report from a finished run directory

Every path is an argument; nothing depends on the process working directory.

Run locally:
    python -m frescalo_trends.flows.analysis records.csv epochs.csv weights.txt runs/2024
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from prefect import flow, task

from frescalo_trends import frescalo
from frescalo_trends.analysis import TaxonTrend, summarize_trends, trends_to_dict
from frescalo_trends.config import DEFAULT_ALPHA, DEFAULT_DATE_FORMAT, DEFAULT_PHI
from frescalo_trends.frescalo.models import EPOCHS_FILE, SPECIES_FILE
from frescalo_trends.occurrences import (
    ColumnMap,
    IngestResult,
    classified_to_frame,
    load_epochs,
    load_occurrences,
)
from frescalo_trends.periods import ClassificationResult, EpochSet, classify_records
from frescalo_trends.renderers import render_template
from frescalo_trends.renderers.classification import build_classification_html
from frescalo_trends.renderers.trends import (
    build_site_stats_html,
    build_trend_charts_html,
    build_trend_table_html,
)
from frescalo_trends.store import RunStore

# Relative paths within a run directory
CLASSIFIED_PATH = Path("derived/classified.csv")
UNCLASSIFIED_PATH = Path("derived/unclassified.csv")
CLASSIFICATION_SUMMARY_PATH = Path("derived/classification.json")
TRENDS_SUMMARY_PATH = Path("derived/trends.json")
REPORT_PATH = Path("derived/report.html")
OUTPUT_PATH = Path("output")

# Everything computed from a Frescalo run; stale once the inputs change
RESULT_PATHS = (OUTPUT_PATH, Path("output.partial"), TRENDS_SUMMARY_PATH, REPORT_PATH)


def summarize_classification(
    result: ClassificationResult,
    epochs: EpochSet,
    malformed: int = 0,
    dropped_sites: list[str] | None = None,
) -> dict[str, Any]:
    """Count records per epoch for the audit summary."""
    counts = result.counts_by_period
    return {
        "total": len(result),
        "classified": len(result) - result.unclassified_count,
        "unclassified": result.unclassified_count,
        "malformed": malformed,
        "epochs": [
            {"period": i, "label": e.label, "count": counts.get(i, 0)} for i, e in enumerate(epochs)
        ],
        "dropped_sites": dropped_sites or [],
    }


# =============================================================================
# Tasks
# =============================================================================


@task(name="load-occurrences")
def load_records(
    occurrences_path: Path,
    columns: ColumnMap | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict: bool = True,
) -> IngestResult:
    """Read the occurrence table and parse its dates."""
    return load_occurrences(occurrences_path, columns, date_format, strict=strict)


@task(name="classify-records")
def classify(ingest: IngestResult, epochs: EpochSet) -> ClassificationResult:
    """Assign each record to an epoch or leave it unclassified."""
    return classify_records(ingest.records, epochs)


@task(name="save-classification")
def save_classification(
    store: RunStore,
    result: ClassificationResult,
    epochs: EpochSet,
    summary: dict[str, Any],
) -> Path:
    """Write the classified table, the unclassified audit table, and the summary."""
    frame = classified_to_frame(result)
    epoch_labels = [e.label for e in epochs]
    store.write_table(CLASSIFIED_PATH, frame, source="classifier", epochs=epoch_labels)
    store.write_table(
        UNCLASSIFIED_PATH,
        frame[frame["period"] == "unclassified"],
        source="classifier",
        epochs=epoch_labels,
    )
    return store.write(
        CLASSIFICATION_SUMMARY_PATH, summary, source="classifier", epochs=epoch_labels
    )


@task(name="invalidate-results")
def invalidate_results(store: RunStore) -> list[str]:
    """Remove output and derived results left by a previous run of this directory."""
    return [str(path) for path in RESULT_PATHS if store.discard(path)]


@task(name="prepare-frescalo-inputs")
def prepare_inputs(
    store: RunStore,
    result: ClassificationResult,
    epochs: EpochSet,
    weights_path: Path,
    non_benchmark: list[str] | None = None,
) -> frescalo.FrescaloInputs:
    """Write the Frescalo data file, lookups and weights into input/."""
    return frescalo.write_inputs(store.input, result, epochs, weights_path, non_benchmark)


@task(name="run-frescalo")
def execute_frescalo(
    frescalo_path: Path,
    inputs: frescalo.FrescaloInputs,
    output_dir: Path,
    params: frescalo.FrescaloParams,
    timeout: float | None = None,
) -> frescalo.FrescaloOutputs:
    """Run the external Frescalo binary (single attempt, no retries)."""
    return frescalo.run_frescalo(frescalo_path, inputs, output_dir, params, timeout)


@task(name="load-trends")
def load_trends(store: RunStore, epochs: EpochSet) -> list[frescalo.TrendRow]:
    """Read Trend.csv with taxon names and epochs restored."""
    outputs = frescalo.FrescaloOutputs(store.output)
    return frescalo.read_trends(outputs.trend, store.input / SPECIES_FILE, epochs)


@task(name="load-site-stats")
def load_site_stats(store: RunStore) -> dict[str, Any]:
    """Summarize Stats.csv for the report's neighbourhood card."""
    outputs = frescalo.FrescaloOutputs(store.output)
    return frescalo.summarize_site_stats(frescalo.read_site_stats(outputs.stats))


@task(name="summarize-trends")
def summarize(
    store: RunStore, rows: list[frescalo.TrendRow], geometric: bool = False
) -> dict[str, TaxonTrend]:
    """Compute per-taxon trend statistics and save them as JSON."""
    trends = summarize_trends(rows, geometric=geometric)
    store.write(
        TRENDS_SUMMARY_PATH,
        trends_to_dict(trends),
        source="trend_stats",
        geometric=geometric,
    )
    return trends


@task(name="render-report")
def render_report(
    store: RunStore,
    epochs: EpochSet,
    rows: list[frescalo.TrendRow],
    trends: dict[str, TaxonTrend],
    classification: dict[str, Any] | None,
    params: frescalo.FrescaloParams,
    site_stats: dict[str, Any] | None = None,
    title: str = "Frescalo trends",
) -> Path:
    """Assemble the HTML report and write it to derived/."""
    html = render_template(
        "report.html.j2",
        title=title,
        generated=datetime.now().strftime("%Y-%m-%d %H:%M"),
        phi=f"{params.phi:.2f}",
        alpha=f"{params.alpha:.2f}",
        classification=build_classification_html(classification) if classification else "",
        site_stats=build_site_stats_html(site_stats) if site_stats else "",
        trend_table=build_trend_table_html(trends),
        trend_charts=build_trend_charts_html(rows, epochs),
    )
    return store.write_text(REPORT_PATH, html)


# =============================================================================
# Flows
# =============================================================================


@flow(name="classify-occurrences", log_prints=True)
def classify_occurrences(
    occurrences_path: Path,
    epochs: list[tuple[int, int]],
    run_dir: Path,
    columns: ColumnMap | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict: bool = True,
) -> dict[str, Any]:
    """
    Classify occurrence records into epochs and write the audit tables.

    Returns:
        The classification summary (counts per epoch, unclassified count).
    """
    epoch_set = EpochSet(epochs)
    store = RunStore(run_dir)

    print(f"Reading occurrences from {occurrences_path}...")
    ingest = load_records(occurrences_path, columns, date_format, strict)
    for error in ingest.errors:
        print(f"Skipping malformed record: {error}")

    print(f"Classifying {len(ingest.records)} records into {len(epoch_set)} epochs...")
    result = classify(ingest, epoch_set)
    summary = summarize_classification(result, epoch_set, malformed=len(ingest.errors))
    if invalidate_results(store):
        print("Removed Frescalo results that no longer match the classification.")
    save_classification(store, result, epoch_set, summary)

    print(f"{summary['classified']} classified, {summary['unclassified']} unclassified")
    return summary


@flow(name="frescalo-analysis", log_prints=True)
def run_analysis(  # noqa: PLR0913
    occurrences_path: Path,
    epochs: list[tuple[int, int]],
    weights_path: Path,
    run_dir: Path,
    frescalo_path: Path = Path("frescalo"),
    phi: float = DEFAULT_PHI,
    alpha: float = DEFAULT_ALPHA,
    non_benchmark: list[str] | None = None,
    columns: ColumnMap | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict: bool = True,
    timeout: float | None = None,
    geometric: bool = False,
) -> dict[str, Any]:
    """
    Full analysis: classify, run Frescalo, summarize trends, render report.

    Configuration (epochs, phi, alpha, weights file) is validated before
    anything is read or written. Results of an earlier run in ``run_dir`` are
    removed before new inputs are written, so a failed re-run leaves no
    output that could be mistaken for this run's.
    """
    epoch_set = EpochSet(epochs)
    params = frescalo.FrescaloParams(phi=phi, alpha=alpha)
    frescalo.require_weights_file(weights_path)
    store = RunStore(run_dir)

    print(f"Reading occurrences from {occurrences_path}...")
    ingest = load_records(occurrences_path, columns, date_format, strict)
    for error in ingest.errors:
        print(f"Skipping malformed record: {error}")

    print(f"Classifying {len(ingest.records)} records into {len(epoch_set)} epochs...")
    result = classify(ingest, epoch_set)

    discarded = invalidate_results(store)
    if discarded:
        print(f"Removed results of the previous run: {', '.join(discarded)}")

    print("Preparing Frescalo inputs...")
    inputs = prepare_inputs(store, result, epoch_set, weights_path, non_benchmark)
    if inputs.dropped_sites:
        print(f"Warning: {len(inputs.dropped_sites)} sites have no weights and were dropped.")

    summary = summarize_classification(
        result, epoch_set, malformed=len(ingest.errors), dropped_sites=inputs.dropped_sites
    )
    save_classification(store, result, epoch_set, summary)
    print(f"{summary['classified']} classified, {summary['unclassified']} unclassified")

    print(f"Running Frescalo ({inputs.presence_rows} presences, {inputs.species_count} taxa)...")
    execute_frescalo(frescalo_path, inputs, store.output, params, timeout)

    print("Summarizing trends...")
    rows = load_trends(store, epoch_set)
    trends = summarize(store, rows, geometric)
    site_stats = load_site_stats(store)

    report_path = render_report(store, epoch_set, rows, trends, summary, params, site_stats)
    print(f"Report written: {report_path}")

    return {
        "classification": summary,
        "taxa": len(trends),
        "report": str(report_path),
    }


@flow(name="build-report", log_prints=True)
def build_report(run_dir: Path, geometric: bool = False) -> dict[str, Any]:
    """
    Re-render the report for a run directory whose Frescalo output exists.

    Epochs are read back from the run's input/time_periods.csv and phi/alpha
    from the parameter record Frescalo's output was saved with.
    """
    store = RunStore(run_dir)
    outputs = frescalo.FrescaloOutputs(store.output)
    if not outputs.trend.exists():
        print("No Frescalo output found. Run the analysis first.")
        return {"error": "no output"}

    epoch_set = load_epochs(store.input / EPOCHS_FILE)
    params = frescalo.read_run_params(outputs.params)
    classification = store.read(CLASSIFICATION_SUMMARY_PATH)

    rows = load_trends(store, epoch_set)
    trends = summarize(store, rows, geometric)
    site_stats = load_site_stats(store)
    report_path = render_report(store, epoch_set, rows, trends, classification, params, site_stats)

    print(f"Report written: {report_path}")
    return {"taxa": len(trends), "report": str(report_path)}


if __name__ == "__main__":
    occ, epoch_table, weights, out = (Path(a) for a in sys.argv[1:5])
    flow_result = run_analysis(occ, load_epochs(epoch_table).to_pairs(), weights, out)
    print(f"Flow complete: {flow_result}")
