"""Occurrence table and epoch table ingestion.

Dates are parsed exactly once here; everything downstream works with
``DateRange`` values. Tables are read with pandas as strings so that
date text reaches the parser untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import TYPE_CHECKING

import pandas as pd

from frescalo_trends.config import DEFAULT_DATE_FORMAT
from frescalo_trends.errors import ConfigurationError, DataFormatError
from frescalo_trends.periods import EpochSet, OccurrenceRecord, parse_date_range

if TYPE_CHECKING:
    from frescalo_trends.periods import ClassificationResult


@dataclass(frozen=True)
class ColumnMap:
    """Source column names for the four fields the pipeline needs."""

    taxon: str = "taxon"
    site: str = "site"
    start: str = "start_date"
    end: str = "end_date"

    def as_list(self) -> list[str]:
        return [self.taxon, self.site, self.start, self.end]


@dataclass
class IngestResult:
    """Parsed records plus any per-row errors collected in lenient mode."""

    records: list[OccurrenceRecord] = field(default_factory=list)
    errors: list[DataFormatError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# =============================================================================
# Occurrences
# =============================================================================


def records_from_frame(
    frame: pd.DataFrame,
    columns: ColumnMap | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    *,
    strict: bool = True,
) -> IngestResult:
    """Convert a DataFrame of raw occurrence rows into OccurrenceRecords.

    Args:
        frame: Source rows; dates as text.
        columns: Column names to read (defaults to taxon/site/start_date/end_date).
        date_format: strptime format of the date columns.
        strict: Raise on the first malformed row (True) or collect every
            malformed row into ``IngestResult.errors`` and keep going (False).

    Returns:
        IngestResult. Row numbers are 1-based data rows (header excluded).

    Raises:
        ConfigurationError: If a required column is missing.
        DataFormatError: In strict mode, for the first malformed row.
    """
    cols = columns or ColumnMap()
    missing = [c for c in cols.as_list() if c not in frame.columns]
    if missing:
        msg = f"Occurrence table is missing columns: {', '.join(missing)}"
        raise ConfigurationError(msg)

    result = IngestResult()
    for row_no, (taxon, site, start, end) in enumerate(
        frame[cols.as_list()].itertuples(index=False, name=None), start=1
    ):
        taxon_str = str(taxon).strip()
        site_str = str(site).strip()
        try:
            dates = parse_date_range(start, end, date_format)
        except DataFormatError as exc:
            error = DataFormatError(
                "Malformed date",
                row=row_no,
                taxon=taxon_str,
                site=site_str,
                field=exc.field,
                value=exc.value,
            )
            if strict:
                raise error from exc
            result.errors.append(error)
            continue
        result.records.append(
            OccurrenceRecord(taxon=taxon_str, site=site_str, dates=dates, row=row_no)
        )
    return result


def load_occurrences(
    path: Path,
    columns: ColumnMap | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    *,
    strict: bool = True,
) -> IngestResult:
    """Read an occurrence CSV and parse its dates. See ``records_from_frame``."""
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    return records_from_frame(frame, columns, date_format, strict=strict)


def classified_to_frame(result: ClassificationResult) -> pd.DataFrame:
    """Flatten a classification result into a table with a ``period`` column.

    Unclassified rows carry the string ``"unclassified"``.
    """
    rows = [
        {
            "row": r.record.row,
            "taxon": r.record.taxon,
            "site": r.record.site,
            "start_date": r.record.dates.start.isoformat() if r.record.dates.start else "",
            "end_date": r.record.dates.end.isoformat() if r.record.dates.end else "",
            "period": r.period_label,
        }
        for r in result.records
    ]
    return pd.DataFrame(
        rows, columns=["row", "taxon", "site", "start_date", "end_date", "period"]
    )


# =============================================================================
# Epochs
# =============================================================================


def load_epochs(path: Path, start_column: str = "start", end_column: str = "end") -> EpochSet:
    """Read an epoch table (one ``start,end`` year pair per row).

    Raises:
        ConfigurationError: Missing columns, non-integer years, or any
            ``EpochSet`` validation failure.
    """
    if not path.is_file():
        msg = f"Epoch table not found: {path}"
        raise ConfigurationError(msg)
    # Read as text so "1960.7" is rejected rather than truncated
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in (start_column, end_column) if c not in frame.columns]
    if missing:
        msg = f"Epoch table is missing columns: {', '.join(missing)}"
        raise ConfigurationError(msg)
    try:
        pairs = [
            (int(start), int(end))
            for start, end in frame[[start_column, end_column]].itertuples(index=False, name=None)
        ]
    except (TypeError, ValueError) as exc:
        msg = f"Epoch years must be integers: {exc}"
        raise ConfigurationError(msg) from exc
    return EpochSet(pairs)
