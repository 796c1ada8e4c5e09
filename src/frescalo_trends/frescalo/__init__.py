"""Adapter around the external Frescalo program.

Frescalo itself is a black box; this package only prepares its inputs,
runs it, and reads its outputs.

Public API:
  - models: FrescaloParams, FrescaloInputs, FrescaloOutputs, TrendRow
  - inputs: build_presence_table, build_species_lookup, require_weights_file,
            read_weight_sites, filter_to_weighted_sites, write_inputs
  - runner: build_control, resolve_executable, run_frescalo
  - outputs: read_trend_table, read_trends, trend_rows, read_site_stats,
             summarize_site_stats, read_species_lookup, read_run_params
"""

from frescalo_trends.frescalo.inputs import (
    build_presence_table,
    build_species_lookup,
    filter_to_weighted_sites,
    read_weight_sites,
    require_weights_file,
    write_inputs,
)
from frescalo_trends.frescalo.models import (
    FrescaloInputs,
    FrescaloOutputs,
    FrescaloParams,
    TrendRow,
)
from frescalo_trends.frescalo.outputs import (
    read_run_params,
    read_site_stats,
    read_species_lookup,
    read_trend_table,
    read_trends,
    summarize_site_stats,
    trend_rows,
)
from frescalo_trends.frescalo.runner import build_control, resolve_executable, run_frescalo

__all__ = [
    "FrescaloInputs",
    "FrescaloOutputs",
    "FrescaloParams",
    "TrendRow",
    "build_control",
    "build_presence_table",
    "build_species_lookup",
    "filter_to_weighted_sites",
    "read_run_params",
    "read_site_stats",
    "read_species_lookup",
    "read_trend_table",
    "read_trends",
    "read_weight_sites",
    "require_weights_file",
    "resolve_executable",
    "run_frescalo",
    "summarize_site_stats",
    "trend_rows",
    "write_inputs",
]
