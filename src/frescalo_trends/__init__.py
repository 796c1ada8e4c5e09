"""Frescalo Trends - occurrence records to species frequency trends.

Architecture::

    periods/       Date ranges -> analysis epochs (the classifier, pure)
    occurrences.py Occurrence/epoch table ingestion (dates parsed once)
    frescalo/      External Frescalo program: inputs, invocation, outputs
    analysis/      Per-taxon trend statistics over Frescalo time factors
    renderers/     Pure data -> HTML (classification audit, trend charts)
    store.py       Run directory (input/ -> output/ -> derived/)
    flows/         Prefect orchestration of an analysis run

Data flow: occurrences -> periods -> frescalo (input/, output/) -> analysis
-> renderers -> derived/report.html
"""

__version__ = "0.1.0"

from frescalo_trends.config import Settings
from frescalo_trends.errors import (
    ConfigurationError,
    DataFormatError,
    ExternalToolError,
    FrescaloTrendsError,
)
from frescalo_trends.periods import (
    UNCLASSIFIED,
    DateRange,
    Epoch,
    EpochSet,
    classify_range,
    classify_records,
)

__all__ = [
    "UNCLASSIFIED",
    "ConfigurationError",
    "DataFormatError",
    "DateRange",
    "Epoch",
    "EpochSet",
    "ExternalToolError",
    "FrescaloTrendsError",
    "Settings",
    "__version__",
    "classify_range",
    "classify_records",
]
