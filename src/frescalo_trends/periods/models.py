"""Value types for dated records and analysis epochs."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

#: Exported in place of a period index for records that fit no single epoch.
UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class DateRange:
    """The span of dates a record could have been made on.

    A bound of None means it is unknown (e.g. "before 1900").
    """

    start: date | None
    end: date | None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_precise(self) -> bool:
        """True for single-day records."""
        return self.is_bounded and self.start == self.end

    @property
    def start_year(self) -> int | None:
        return self.start.year if self.start is not None else None

    @property
    def end_year(self) -> int | None:
        return self.end.year if self.end is not None else None


@dataclass(frozen=True)
class Epoch:
    """A closed range of years, e.g. 1960-1999 inclusive."""

    start: int
    end: int

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2

    def contains_year(self, year: int) -> bool:
        return self.start <= year <= self.end

    def overlaps(self, other: Epoch) -> bool:
        return self.start <= other.end and other.start <= self.end


@dataclass(frozen=True)
class OccurrenceRecord:
    """One observation of a taxon at a site, as read from the source table."""

    taxon: str
    site: str
    dates: DateRange
    row: int | None = None


@dataclass(frozen=True)
class ClassifiedRecord:
    """An occurrence record with its period index (None = unclassified)."""

    record: OccurrenceRecord
    period: int | None

    @property
    def is_classified(self) -> bool:
        return self.period is not None

    @property
    def period_label(self) -> int | str:
        """Period index, or ``"unclassified"`` for tabular export."""
        return self.period if self.period is not None else UNCLASSIFIED


@dataclass
class ClassificationResult:
    """All records from one classification pass, with audit views."""

    records: list[ClassifiedRecord] = field(default_factory=list)

    @property
    def classified(self) -> list[ClassifiedRecord]:
        return [r for r in self.records if r.is_classified]

    @property
    def unclassified(self) -> list[ClassifiedRecord]:
        return [r for r in self.records if not r.is_classified]

    @property
    def unclassified_count(self) -> int:
        return sum(1 for r in self.records if not r.is_classified)

    @property
    def counts_by_period(self) -> dict[int, int]:
        """Number of classified records per period index, sorted by index."""
        counts = Counter(r.period for r in self.records if r.period is not None)
        return dict(sorted(counts.items()))

    def __len__(self) -> int:
        return len(self.records)
