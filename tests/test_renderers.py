"""Tests for the HTML renderers."""

from __future__ import annotations

from frescalo_trends.analysis import summarize_trends
from frescalo_trends.frescalo import TrendRow
from frescalo_trends.periods import EpochSet
from frescalo_trends.renderers import render_template
from frescalo_trends.renderers.classification import build_classification_html
from frescalo_trends.renderers.trends import (
    _round_up_nice,
    build_site_stats_html,
    build_taxon_chart,
    build_trend_charts_html,
    build_trend_table_html,
)

EPOCHS = EpochSet([(1600, 1959), (1960, 1999), (2000, 2023)])

ROWS = [
    TrendRow("Vanessa atalanta", 0, 1779.5, 1.1, 0.2),
    TrendRow("Vanessa atalanta", 1, 1979.5, 0.7, 0.15),
    TrendRow("Aglais io", 2, 2011.5, 1.25, 0.31),
]


class TestRoundUpNice:
    """Test y-axis rounding."""

    def test_steps(self) -> None:
        assert _round_up_nice(0.0) == 1.0
        assert _round_up_nice(0.3) == 0.5
        assert _round_up_nice(1.2) == 1.5
        assert _round_up_nice(12.0) == 15.0


class TestTaxonChart:
    """Test SVG geometry."""

    def test_points_in_period_order(self) -> None:
        chart = build_taxon_chart("Vanessa atalanta", list(reversed(ROWS[:2])), EPOCHS)
        points = chart["points"]
        assert isinstance(points, list)
        assert len(points) == 2
        assert points[0]["x"] < points[1]["x"]
        assert "1600-1959" in points[0]["title"]

    def test_whiskers_bracket_point(self) -> None:
        chart = build_taxon_chart("Aglais io", ROWS[2:], EPOCHS)
        point = chart["points"][0]  # type: ignore[index]
        assert point["y_high"] < point["y"] < point["y_low"]

    def test_x_labels_per_epoch(self) -> None:
        chart = build_taxon_chart("Aglais io", ROWS[2:], EPOCHS)
        assert [label["text"] for label in chart["x_labels"]] == [  # type: ignore[union-attr]
            "1600-1959",
            "1960-1999",
            "2000-2023",
        ]


class TestTrendCharts:
    """Test the chart section."""

    def test_one_chart_per_taxon(self) -> None:
        html = build_trend_charts_html(ROWS, EPOCHS)
        assert html.count("<svg") == 2
        assert html.index("Aglais io") < html.index("Vanessa atalanta")
        assert "<polyline" in html

    def test_empty(self) -> None:
        assert "<svg" not in build_trend_charts_html([], EPOCHS)


class TestTrendTable:
    """Test the statistics table."""

    def test_table_rows(self) -> None:
        html = build_trend_table_html(summarize_trends(ROWS))
        assert "<em>Vanessa atalanta</em>" in html
        assert "decrease" in html or "stable" in html

    def test_missing_values_rendered_as_dash(self) -> None:
        html = build_trend_table_html(summarize_trends(ROWS[2:]))
        assert "–" in html

    def test_empty(self) -> None:
        assert "No trend estimates" in build_trend_table_html({})


class TestClassificationCard:
    """Test the classification audit card."""

    SUMMARY = {
        "total": 8,
        "classified": 6,
        "unclassified": 2,
        "malformed": 1,
        "epochs": [
            {"period": 0, "label": "1600-1959", "count": 2},
            {"period": 1, "label": "1960-1999", "count": 1},
        ],
        "dropped_sites": ["SU99"],
    }

    def test_counts(self) -> None:
        html = build_classification_html(self.SUMMARY)
        assert "8 records read; 2 unclassified (25.0%)" in html
        assert "1600-1959" in html
        assert "1 rows had malformed dates" in html
        assert "SU99" in html

    def test_zero_total(self) -> None:
        html = build_classification_html({"total": 0, "unclassified": 0, "epochs": []})
        assert "(0.0%)" in html


class TestSiteStatsCard:
    """Test the neighbourhood card."""

    def test_summary(self) -> None:
        html = build_site_stats_html(
            {
                "sites": 2,
                "phi_in_min": 0.699,
                "phi_in_mean": 0.7,
                "phi_in_max": 0.701,
                "phi_out_mean": 0.74,
                "max_iterations": 4,
            }
        )
        assert "2 sites" in html
        assert "0.699 to 0.701" in html
        assert "at most 4 iterations" in html

    def test_no_sites(self) -> None:
        assert "No site statistics" in build_site_stats_html({"sites": 0})


class TestReportTemplate:
    """Test the page wrapper."""

    def test_sections_inserted_unescaped(self) -> None:
        html = render_template(
            "report.html.j2",
            title="Trends <test>",
            generated="2026-01-01 00:00",
            phi="0.74",
            alpha="0.27",
            classification="<section id='c'></section>",
            trend_table="",
            trend_charts="",
        )
        assert "Trends &lt;test&gt;" in html
        assert "<section id='c'></section>" in html
