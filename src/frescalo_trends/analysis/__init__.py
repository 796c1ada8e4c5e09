"""Analysis of Frescalo output.

Dependency rule: analysis/ works on parsed ``TrendRow`` values only.
It never runs Frescalo, reads files, or produces HTML.

Modules:
  - trend_stats: per-taxon slope and first-vs-last change test
"""

from frescalo_trends.analysis.trend_stats import (
    TaxonTrend,
    change_z_test,
    summarize_taxon,
    summarize_trends,
    trends_to_dict,
)

__all__ = [
    "TaxonTrend",
    "change_z_test",
    "summarize_taxon",
    "summarize_trends",
    "trends_to_dict",
]
