"""Classification audit card: records per epoch and unclassified count."""

from __future__ import annotations

from typing import Any

from frescalo_trends.renderers import render_template


def build_classification_html(summary: dict[str, Any]) -> str:
    """Build the classification summary HTML.

    Args:
        summary: Dict as produced by ``flows.analysis.summarize_classification``
            with 'total', 'unclassified', 'epochs' (label + count) and
            optionally 'malformed' and 'dropped_sites'.

    Returns:
        Rendered HTML fragment.
    """
    total = summary.get("total", 0)
    unclassified = summary.get("unclassified", 0)
    pct = (unclassified / total * 100) if total else 0.0
    return render_template(
        "classification.html.j2",
        total=total,
        unclassified=unclassified,
        unclassified_pct=f"{pct:.1f}",
        epochs=summary.get("epochs", []),
        malformed=summary.get("malformed", 0),
        dropped_sites=summary.get("dropped_sites", []),
    )
