"""Readers for the files Frescalo writes."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import Any

import pandas as pd

from frescalo_trends.errors import ExternalToolError
from frescalo_trends.frescalo.models import TREND_COLUMNS, FrescaloParams, TrendRow
from frescalo_trends.periods import EpochSet


def _read_padded_csv(path: Path) -> pd.DataFrame:
    """Frescalo pads fields with spaces; strip them from headers and text."""
    if not path.exists():
        msg = f"Expected Frescalo output missing: {path}"
        raise ExternalToolError(msg)
    frame = pd.read_csv(path, skipinitialspace=True)
    frame.columns = [str(c).strip() for c in frame.columns]
    for col in frame.columns:
        if pd.api.types.is_string_dtype(frame[col]):
            frame[col] = frame[col].str.strip()
    return frame


def _integer_column(frame: pd.DataFrame, column: str, path: Path) -> pd.Series:
    values = pd.to_numeric(frame[column], errors="coerce")
    if values.isna().any() or (values % 1 != 0).any():
        msg = f"{path.name} has non-integer values in column {column}"
        raise ExternalToolError(msg)
    return values.astype(int)


def read_species_lookup(path: Path) -> dict[int, str]:
    """Map integer species codes back to taxon names."""
    frame = pd.read_csv(path, dtype={"code": int, "taxon": str})
    return dict(zip(frame["code"], frame["taxon"], strict=True))


def read_trend_table(trend_path: Path, species_path: Path, epochs: EpochSet) -> pd.DataFrame:
    """Load Trend.csv with taxon names and epoch labels restored.

    Adds ``taxon``, ``period`` (0-based), ``epoch`` (label) and ``midpoint``
    columns next to Frescalo's own.

    Raises:
        ExternalToolError: If the file is missing, lacks the expected columns,
            or refers to a time period or species code that was never written.
    """
    frame = _read_padded_csv(trend_path)
    missing = [c for c in TREND_COLUMNS[:4] if c not in frame.columns]
    if missing:
        msg = f"{trend_path.name} is missing columns: {', '.join(missing)}"
        raise ExternalToolError(msg)

    lookup = read_species_lookup(species_path)
    frame["taxon"] = _integer_column(frame, "Species", trend_path).map(lookup)
    frame["period"] = _integer_column(frame, "Time", trend_path) - 1

    unknown_taxa = frame["taxon"].isna()
    bad_periods = ~frame["period"].between(0, len(epochs) - 1)
    if unknown_taxa.any() or bad_periods.any():
        msg = f"{trend_path.name} refers to species codes or time periods that were not supplied"
        raise ExternalToolError(msg)

    frame["epoch"] = frame["period"].map(lambda i: epochs[i].label)
    frame["midpoint"] = frame["period"].map(lambda i: epochs[i].midpoint)
    return frame


def trend_rows(frame: pd.DataFrame) -> list[TrendRow]:
    """Convert a table from ``read_trend_table`` into TrendRow values.

    Raises:
        ExternalToolError: If a numeric field is blank or not a number.
    """
    has_obs = "X" in frame.columns
    has_est = "Xest" in frame.columns
    try:
        return [
            TrendRow(
                taxon=row["taxon"],
                period=int(row["period"]),
                time=float(row["midpoint"]),
                tfactor=float(row["TFactor"]),
                st_dev=float(row["St_Dev"]),
                observed=int(row["X"]) if has_obs else 0,
                expected=float(row["Xest"]) if has_est else 0.0,
            )
            for _, row in frame.iterrows()
        ]
    except (TypeError, ValueError) as exc:
        msg = f"Trend table has an unreadable value: {exc}"
        raise ExternalToolError(msg) from exc


def read_trends(trend_path: Path, species_path: Path, epochs: EpochSet) -> list[TrendRow]:
    """Read Trend.csv straight into TrendRow values."""
    return trend_rows(read_trend_table(trend_path, species_path, epochs))


def read_site_stats(stats_path: Path) -> pd.DataFrame:
    """Load Stats.csv (one row per site) as-is."""
    return _read_padded_csv(stats_path)


def summarize_site_stats(stats: pd.DataFrame) -> dict[str, Any]:
    """Neighbourhood diagnostics for the report.

    Phi_in is each site's benchmark frequency before rescaling; Frescalo
    iterates until Phi_out reaches the target phi.
    """
    missing = [c for c in ("Location", "Phi_in", "Phi_out", "Iter") if c not in stats.columns]
    if missing:
        msg = f"Site statistics are missing columns: {', '.join(missing)}"
        raise ExternalToolError(msg)
    if stats.empty:
        return {"sites": 0}
    phi_in = pd.to_numeric(stats["Phi_in"], errors="coerce")
    phi_out = pd.to_numeric(stats["Phi_out"], errors="coerce")
    return {
        "sites": len(stats),
        "phi_in_min": round(float(phi_in.min()), 3),
        "phi_in_mean": round(float(phi_in.mean()), 3),
        "phi_in_max": round(float(phi_in.max()), 3),
        "phi_out_mean": round(float(phi_out.mean()), 3),
        "max_iterations": int(pd.to_numeric(stats["Iter"], errors="coerce").max()),
    }


def read_run_params(params_path: Path) -> FrescaloParams:
    """Read the phi/alpha a finished run was made with.

    Raises:
        ExternalToolError: If the output has no parameter record.
    """
    if not params_path.exists():
        msg = f"Frescalo output has no parameter record: {params_path}"
        raise ExternalToolError(msg)
    data = json.loads(params_path.read_text())
    return FrescaloParams(phi=float(data["phi"]), alpha=float(data["alpha"]))
