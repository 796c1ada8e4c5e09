"""Pure rendering functions: structured data -> HTML strings.

All renderers follow the same pattern:
  - Input: dataclasses or dicts (from periods/, frescalo/ or analysis/)
  - Output: str (HTML fragment, not a full page)
  - No side effects, no I/O, no Prefect decorators

Used by flows/analysis.py, which writes the assembled report to the run
directory.

Public API:
  - trends: build_trend_charts_html, build_trend_table_html, build_site_stats_html
  - classification: build_classification_html
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
