"""Trend renderers: per-taxon time factor charts and the summary table.

Charts are inline SVG: one point per epoch at its midpoint year, with
whiskers at +/- one standard deviation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from frescalo_trends.renderers import render_template

if TYPE_CHECKING:
    from frescalo_trends.analysis.trend_stats import TaxonTrend
    from frescalo_trends.frescalo.models import TrendRow
    from frescalo_trends.periods import EpochSet

# SVG dimensions
_SVG_WIDTH = 360
_SVG_HEIGHT = 220
_MARGIN_LEFT = 45
_MARGIN_TOP = 20
_MARGIN_RIGHT = 15
_MARGIN_BOTTOM = 30


def _round_up_nice(value: float) -> float:
    """Round a value up to a 'nice' number for axis scaling."""
    if value <= 0:
        return 1.0
    nice_steps = [0.5, 1.0, 1.5, 2.0, 3.0, 4.0, 5.0, 10.0]
    for step in nice_steps:
        if step >= value:
            return step
    return float(int(value / 5 + 1) * 5)


def build_taxon_chart(taxon: str, rows: list[TrendRow], epochs: EpochSet) -> dict[str, object]:
    """Compute SVG geometry for one taxon's chart."""
    plot_right = _SVG_WIDTH - _MARGIN_RIGHT
    plot_bottom = _SVG_HEIGHT - _MARGIN_BOTTOM
    plot_width = plot_right - _MARGIN_LEFT
    plot_height = plot_bottom - _MARGIN_TOP

    x_min = epochs.first_year
    x_span = max(1, epochs.last_year - x_min)
    y_max = _round_up_nice(max((r.tfactor + r.st_dev for r in rows), default=1.0) * 1.1)

    def x_for_year(year: float) -> float:
        return _MARGIN_LEFT + (year - x_min) / x_span * plot_width

    def y_for_value(value: float) -> float:
        return plot_bottom - (max(0.0, value) / y_max) * plot_height

    ordered = sorted(rows, key=lambda r: r.period)
    points = [
        {
            "x": round(x_for_year(r.time), 1),
            "y": round(y_for_value(r.tfactor), 1),
            "y_low": round(y_for_value(r.tfactor - r.st_dev), 1),
            "y_high": round(y_for_value(r.tfactor + r.st_dev), 1),
            "title": f"{epochs[r.period].label}: {r.tfactor:.2f} ± {r.st_dev:.2f}",
        }
        for r in ordered
    ]

    n_ticks = 4
    y_ticks = [
        {"y": round(y_for_value(y_max * i / n_ticks), 1), "label": f"{y_max * i / n_ticks:.2f}"}
        for i in range(n_ticks + 1)
    ]
    x_labels = [{"x": round(x_for_year(e.midpoint), 1), "text": e.label} for e in epochs]

    return {
        "taxon": taxon,
        "points": points,
        "polyline": " ".join(f"{p['x']},{p['y']}" for p in points),
        "y_ticks": y_ticks,
        "x_labels": x_labels,
    }


def build_trend_charts_html(rows: list[TrendRow], epochs: EpochSet) -> str:
    """Build one SVG chart per taxon, alphabetically.

    Args:
        rows: Parsed Trend.csv rows for all taxa.
        epochs: The run's epochs, used for the x axis.

    Returns:
        Rendered HTML string with inline SVG charts.
    """
    by_taxon: dict[str, list[TrendRow]] = {}
    for row in rows:
        by_taxon.setdefault(row.taxon, []).append(row)

    charts = [build_taxon_chart(t, taxon_rows, epochs) for t, taxon_rows in sorted(by_taxon.items())]
    return render_template(
        "trend_charts.html.j2",
        charts=charts,
        svg_width=_SVG_WIDTH,
        svg_height=_SVG_HEIGHT,
        margin_left=_MARGIN_LEFT,
        margin_top=_MARGIN_TOP,
        plot_right=_SVG_WIDTH - _MARGIN_RIGHT,
        plot_bottom=_SVG_HEIGHT - _MARGIN_BOTTOM,
    )


def build_trend_table_html(trends: dict[str, TaxonTrend]) -> str:
    """Build the per-taxon trend statistics table."""

    def _fmt(value: float | None, spec: str) -> str:
        return format(value, spec) if value is not None else "–"

    rows = [
        {
            "taxon": t.taxon,
            "n_periods": t.n_periods,
            "slope": _fmt(t.slope, ".4f"),
            "first": f"{t.first_tfactor:.2f}",
            "last": f"{t.last_tfactor:.2f}",
            "z": _fmt(t.change_z, ".2f"),
            "p": _fmt(t.change_p, ".3f"),
            "direction": t.direction,
        }
        for t in trends.values()
    ]
    return render_template("trend_table.html.j2", rows=rows)


def build_site_stats_html(stats: dict[str, object]) -> str:
    """Build the neighbourhood card from ``frescalo.summarize_site_stats`` output."""
    return render_template("site_stats.html.j2", **stats)
