"""Preparation of Frescalo input files from classified records.

Frescalo works on presence data: one row per (site, species, time period).
Species names are replaced by integer codes in the data file since names
contain spaces; the lookup is written alongside so output can be mapped back.
Time periods are written as 1-based chronological numbers.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from frescalo_trends.errors import ConfigurationError
from frescalo_trends.frescalo.models import (
    DATA_FILE,
    EPOCHS_FILE,
    EXCLUDE_FILE,
    SPECIES_FILE,
    WEIGHTS_FILE,
    FrescaloInputs,
)
from frescalo_trends.periods import ClassificationResult, EpochSet

PRESENCE_COLUMNS = ["site", "taxon", "period"]


def build_presence_table(result: ClassificationResult) -> pd.DataFrame:
    """Reduce classified records to unique (site, taxon, period) presences.

    Unclassified records are excluded. Rows are sorted for stable output.
    """
    rows = [(r.record.site, r.record.taxon, r.period) for r in result.classified]
    frame = pd.DataFrame(rows, columns=PRESENCE_COLUMNS)
    frame = frame.drop_duplicates().sort_values(PRESENCE_COLUMNS).reset_index(drop=True)
    return frame.astype({"period": "int64"})


def build_species_lookup(taxa: Iterable[str]) -> pd.DataFrame:
    """Assign 1-based integer codes to taxa in alphabetical order."""
    names = sorted(set(taxa))
    return pd.DataFrame({"code": range(1, len(names) + 1), "taxon": names})


def require_weights_file(weights_path: Path) -> None:
    """Raise ConfigurationError unless ``weights_path`` is an existing file."""
    if not weights_path.is_file():
        msg = f"Weights file not found: {weights_path}"
        raise ConfigurationError(msg)


def read_weight_sites(weights_path: Path) -> set[str]:
    """Collect every site identifier mentioned in a weights file.

    The file holds whitespace-separated ``site1 site2 weight`` rows.
    """
    require_weights_file(weights_path)
    frame = pd.read_csv(
        weights_path,
        sep=r"\s+",
        header=None,
        names=["site1", "site2", "weight"],
        dtype={"site1": str, "site2": str},
        engine="python",
    )
    return set(frame["site1"]) | set(frame["site2"])


def filter_to_weighted_sites(
    presence: pd.DataFrame, weighted_sites: set[str]
) -> tuple[pd.DataFrame, list[str]]:
    """Drop presences at sites absent from the weights file.

    Returns:
        Tuple of (filtered presence table, sorted dropped site ids).
    """
    mask = presence["site"].isin(weighted_sites)
    dropped = sorted(set(presence.loc[~mask, "site"]))
    return presence.loc[mask].reset_index(drop=True), dropped


def write_inputs(
    directory: Path,
    result: ClassificationResult,
    epochs: EpochSet,
    weights_path: Path,
    non_benchmark: Iterable[str] | None = None,
) -> FrescaloInputs:
    """Write every file Frescalo needs into ``directory``.

    Args:
        directory: Destination (created if missing).
        result: Classified records; only classified ones are used.
        epochs: The EpochSet the records were classified against.
        weights_path: Site-weights file, copied through unmodified.
        non_benchmark: Taxa to exclude from benchmarking.

    Returns:
        FrescaloInputs describing the written files.

    Raises:
        ConfigurationError: If the weights file is missing or no presence
            rows remain after filtering to weighted sites.
    """
    weighted_sites = read_weight_sites(weights_path)
    presence, dropped = filter_to_weighted_sites(build_presence_table(result), weighted_sites)
    if presence.empty:
        msg = "No classified records at sites covered by the weights file"
        raise ConfigurationError(msg)

    directory.mkdir(parents=True, exist_ok=True)

    lookup = build_species_lookup(presence["taxon"])
    codes = dict(zip(lookup["taxon"], lookup["code"], strict=True))
    species_path = directory / SPECIES_FILE
    lookup.to_csv(species_path, index=False)

    data = pd.DataFrame(
        {
            "site": presence["site"],
            "code": presence["taxon"].map(codes),
            "time": presence["period"] + 1,
        }
    )
    data_path = directory / DATA_FILE
    data.to_csv(data_path, sep=" ", header=False, index=False)

    epochs_path = directory / EPOCHS_FILE
    pd.DataFrame(
        {
            "time": range(1, len(epochs) + 1),
            "start": [e.start for e in epochs],
            "end": [e.end for e in epochs],
        }
    ).to_csv(epochs_path, index=False)

    weights_copy = directory / WEIGHTS_FILE
    shutil.copyfile(weights_path, weights_copy)

    exclude_path: Path | None = None
    if non_benchmark:
        excluded = sorted({codes[t] for t in non_benchmark if t in codes})
        exclude_path = directory / EXCLUDE_FILE
        exclude_path.write_text("".join(f"{code}\n" for code in excluded))

    return FrescaloInputs(
        directory=directory,
        data=data_path,
        weights=weights_copy,
        species=species_path,
        epochs=epochs_path,
        exclude=exclude_path,
        presence_rows=len(data),
        species_count=len(lookup),
        dropped_sites=dropped,
    )
