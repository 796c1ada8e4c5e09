"""Frescalo parameters, file layout, and output row types."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 (used at runtime)

from frescalo_trends.config import ALPHA_RANGE, DEFAULT_ALPHA, DEFAULT_PHI, PHI_RANGE
from frescalo_trends.errors import ConfigurationError

# File names inside a run's input/ directory
DATA_FILE = "frescalo_data.txt"
WEIGHTS_FILE = "weights.txt"
SPECIES_FILE = "species_names.csv"
EPOCHS_FILE = "time_periods.csv"
EXCLUDE_FILE = "benchmark_exclude.txt"
CONTROL_FILE = "frescalo_in.txt"

# File names Frescalo writes into the output directory
LOG_FILE = "Log.txt"
STATS_FILE = "Stats.csv"
FREQ_FILE = "Freq.csv"
TREND_FILE = "Trend.csv"
STDOUT_FILE = "frescalo_stdout.txt"
PARAMS_FILE = "frescalo_params.json"

TREND_COLUMNS = ["Species", "Time", "TFactor", "St_Dev", "X", "Xspt", "Xest", "N>0.00", "N>0.98"]


@dataclass(frozen=True)
class FrescaloParams:
    """The two tunable neighbourhood parameters.

    phi is the target standardised frequency of benchmark species in each
    neighbourhood; alpha is the proportion of species treated as benchmarks.
    """

    phi: float = DEFAULT_PHI
    alpha: float = DEFAULT_ALPHA

    def __post_init__(self) -> None:
        lo, hi = PHI_RANGE
        if not lo <= self.phi <= hi:
            msg = f"phi must be between {lo} and {hi}, got {self.phi}"
            raise ConfigurationError(msg)
        lo, hi = ALPHA_RANGE
        if not lo <= self.alpha <= hi:
            msg = f"alpha must be between {lo} and {hi}, got {self.alpha}"
            raise ConfigurationError(msg)


@dataclass
class FrescaloInputs:
    """Paths to the files prepared for one Frescalo invocation."""

    directory: Path
    data: Path
    weights: Path
    species: Path
    epochs: Path
    exclude: Path | None = None
    presence_rows: int = 0
    species_count: int = 0
    dropped_sites: list[str] = field(default_factory=list)


@dataclass
class FrescaloOutputs:
    """Paths to the files of a completed Frescalo run."""

    directory: Path

    @property
    def stats(self) -> Path:
        return self.directory / STATS_FILE

    @property
    def trend(self) -> Path:
        return self.directory / TREND_FILE

    @property
    def params(self) -> Path:
        """phi/alpha the run was made with, written next to Frescalo's own files."""
        return self.directory / PARAMS_FILE


@dataclass(frozen=True)
class TrendRow:
    """One (taxon, epoch) time factor estimate from Trend.csv."""

    taxon: str
    period: int
    time: float
    tfactor: float
    st_dev: float
    observed: int = 0
    expected: float = 0.0
