"""Per-taxon trend summaries over Frescalo time factors.

Two views of each taxon's series:
  - a least-squares slope of time factor against epoch midpoint year
  - a z-test of the change between the first and last epoch estimated:
    z = (T_last - T_first) / sqrt(sd_first^2 + sd_last^2)
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from frescalo_trends.frescalo.models import TrendRow

_NORMAL = statistics.NormalDist()


@dataclass
class TaxonTrend:
    """Trend statistics for one taxon."""

    taxon: str
    n_periods: int
    slope: float | None
    intercept: float | None
    first_tfactor: float
    last_tfactor: float
    change_z: float | None
    change_p: float | None

    @property
    def direction(self) -> str:
        """Significant direction of change at the 5% level."""
        if self.change_p is None or self.change_z is None or self.change_p >= 0.05:
            return "stable"
        return "increase" if self.change_z > 0 else "decrease"


def change_z_test(
    t_first: float, sd_first: float, t_last: float, sd_last: float
) -> tuple[float | None, float | None]:
    """Two-sided z-test for the difference between two time factors.

    Returns:
        (z, p), or (None, None) when both standard deviations are zero.
    """
    se = math.sqrt(sd_first**2 + sd_last**2)
    if se == 0:
        return None, None
    z = (t_last - t_first) / se
    p = 2 * (1 - _NORMAL.cdf(abs(z)))
    return z, p


def summarize_taxon(taxon: str, rows: list[TrendRow], *, geometric: bool = False) -> TaxonTrend:
    """Build a TaxonTrend from one taxon's rows.

    Args:
        taxon: Taxon name.
        rows: That taxon's TrendRows (any order).
        geometric: Regress log(time factor) instead of the raw value;
            periods with a zero time factor are left out of the fit.
    """
    ordered = sorted(rows, key=lambda r: r.period)
    first, last = ordered[0], ordered[-1]

    points = [
        (r.time, math.log(r.tfactor) if geometric else r.tfactor)
        for r in ordered
        if not geometric or r.tfactor > 0
    ]
    slope: float | None = None
    intercept: float | None = None
    if len(points) >= 2:
        xs, ys = zip(*points, strict=True)
        fit = statistics.linear_regression(xs, ys)
        slope, intercept = fit.slope, fit.intercept

    z, p = (None, None)
    if len(ordered) >= 2:
        z, p = change_z_test(first.tfactor, first.st_dev, last.tfactor, last.st_dev)

    return TaxonTrend(
        taxon=taxon,
        n_periods=len(ordered),
        slope=slope,
        intercept=intercept,
        first_tfactor=first.tfactor,
        last_tfactor=last.tfactor,
        change_z=z,
        change_p=p,
    )


def summarize_trends(rows: list[TrendRow], *, geometric: bool = False) -> dict[str, TaxonTrend]:
    """Group TrendRows by taxon and summarize each, keyed by taxon name."""
    by_taxon: dict[str, list[TrendRow]] = {}
    for row in rows:
        by_taxon.setdefault(row.taxon, []).append(row)
    return {
        taxon: summarize_taxon(taxon, taxon_rows, geometric=geometric)
        for taxon, taxon_rows in sorted(by_taxon.items())
    }


def trends_to_dict(trends: dict[str, TaxonTrend]) -> list[dict[str, object]]:
    """Serialize trend summaries to a JSON-compatible list."""

    def _round(value: float | None, digits: int) -> float | None:
        return round(value, digits) if value is not None else None

    return [
        {
            "taxon": t.taxon,
            "n_periods": t.n_periods,
            "slope": _round(t.slope, 6),
            "intercept": _round(t.intercept, 4),
            "first_tfactor": round(t.first_tfactor, 4),
            "last_tfactor": round(t.last_tfactor, 4),
            "change_z": _round(t.change_z, 3),
            "change_p": _round(t.change_p, 4),
            "direction": t.direction,
        }
        for t in trends.values()
    ]
