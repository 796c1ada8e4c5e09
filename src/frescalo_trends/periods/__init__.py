"""Date-range to analysis-epoch classification.

Public API:
  - models: DateRange, Epoch, OccurrenceRecord, ClassifiedRecord,
            ClassificationResult, UNCLASSIFIED
  - epochs: EpochSet, parse_epoch_spec
  - dates: parse_date, parse_date_range
  - classify: classify_range, classify_records, find_containing_epochs
"""

from frescalo_trends.periods.classify import (
    classify_range,
    classify_records,
    find_containing_epochs,
)
from frescalo_trends.periods.dates import parse_date, parse_date_range
from frescalo_trends.periods.epochs import EpochSet, parse_epoch_spec
from frescalo_trends.periods.models import (
    UNCLASSIFIED,
    ClassificationResult,
    ClassifiedRecord,
    DateRange,
    Epoch,
    OccurrenceRecord,
)

__all__ = [
    "UNCLASSIFIED",
    "ClassificationResult",
    "ClassifiedRecord",
    "DateRange",
    "Epoch",
    "EpochSet",
    "OccurrenceRecord",
    "classify_range",
    "classify_records",
    "find_containing_epochs",
    "parse_date",
    "parse_date_range",
    "parse_epoch_spec",
]
