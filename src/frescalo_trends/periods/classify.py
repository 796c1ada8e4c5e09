"""Assign dated records to analysis epochs (no I/O).

A record belongs to an epoch only when its whole possible date span lies
inside that epoch:

    start_year >= epoch.start  and  end_year <= epoch.end

Records that straddle an epoch boundary, fall in a gap, lie outside every
epoch, or have an unknown bound are left unclassified. A record is never
split across periods and never assigned to the period it mostly falls in.
"""

from __future__ import annotations

from collections.abc import Iterable

from frescalo_trends.periods.epochs import EpochSet
from frescalo_trends.periods.models import (
    ClassificationResult,
    ClassifiedRecord,
    DateRange,
    Epoch,
    OccurrenceRecord,
)


def _as_epoch_set(epochs: EpochSet | Iterable[Epoch | tuple[int, int]]) -> EpochSet:
    return epochs if isinstance(epochs, EpochSet) else EpochSet(epochs)


def find_containing_epochs(
    dates: DateRange,
    epochs: EpochSet | Iterable[Epoch | tuple[int, int]],
) -> list[int]:
    """Return indices of every epoch that fully contains the date range.

    Args:
        dates: The record's date range.
        epochs: Epoch definitions (validated into an EpochSet if needed).

    Returns:
        Chronological epoch indices. Empty for unbounded ranges.
    """
    epoch_set = _as_epoch_set(epochs)
    start_year = dates.start_year
    end_year = dates.end_year
    if start_year is None or end_year is None:
        return []
    return [
        i
        for i, epoch in enumerate(epoch_set)
        if epoch.contains_year(start_year) and epoch.contains_year(end_year)
    ]


def classify_range(
    dates: DateRange,
    epochs: EpochSet | Iterable[Epoch | tuple[int, int]],
) -> int | None:
    """Return the index of the single epoch containing ``dates``, or None.

    Example::

        >>> epochs = EpochSet([(1600, 1959), (1960, 1999), (2000, 2023)])
        >>> classify_range(DateRange(date(1970, 1, 1), date(1975, 1, 1)), epochs)
        1
    """
    matches = find_containing_epochs(dates, epochs)
    # EpochSet rejects overlaps, so at most one epoch can match
    return matches[0] if len(matches) == 1 else None


def classify_records(
    records: Iterable[OccurrenceRecord],
    epochs: EpochSet | Iterable[Epoch | tuple[int, int]],
) -> ClassificationResult:
    """Classify every record against the same epochs.

    Each record is evaluated independently, so the input may be split into
    batches and the results concatenated.

    Returns:
        ClassificationResult in input order, exposing the unclassified subset.
    """
    epoch_set = _as_epoch_set(epochs)
    return ClassificationResult(
        records=[
            ClassifiedRecord(record=record, period=classify_range(record.dates, epoch_set))
            for record in records
        ]
    )
