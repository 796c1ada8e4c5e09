"""Run directory with metadata-enveloped outputs.

Each analysis run gets its own directory, passed in explicitly:
  - input/: files prepared for Frescalo (data, weights copy, lookups)
  - output/: Frescalo's own output, present only after a successful run
  - derived/: summaries and the HTML report computed from the output

JSON files are wrapped in a metadata envelope (``meta`` + ``data``).
Tables are written as CSV with a sidecar ``.meta.json`` holding the same
metadata, so the table itself stays readable by any CSV tool.
"""

from __future__ import annotations

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import pandas as pd


class RunStore:
    """Manages read/write of the files belonging to one analysis run."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.input = base_dir / "input"
        self.output = base_dir / "output"
        self.derived = base_dir / "derived"

    def _meta(self, source: str, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "created_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)
        return meta

    def read(self, path: Path) -> Any:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(self, path: Path, data: Any, source: str, **params: Any) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``derived/summary.json``).
            data: Payload to store under the ``data`` key.
            source: What produced the data (e.g. ``"classifier"``).
            **params: Extra metadata fields (epochs, phi, alpha, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        envelope = {"meta": self._meta(source, params), "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)

        return full

    def write_table(self, path: Path, frame: pd.DataFrame, source: str, **params: Any) -> Path:
        """Write a DataFrame as CSV with sidecar ``.meta.json`` metadata.

        Returns:
            Absolute path of the CSV file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(full, index=False)

        meta = self._meta(source, {"rows": len(frame), **params})
        meta_path = full.with_suffix(full.suffix + ".meta.json")
        with meta_path.open("w") as f:
            json.dump({"meta": meta}, f, indent=2)

        return full

    def write_text(self, path: Path, text: str) -> Path:
        """Write a plain text file (HTML report, logs)."""
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(text)
        return full

    def discard(self, path: Path) -> bool:
        """Remove a stored file or directory. Returns True if something was removed."""
        full = self._resolve(path)
        if full.is_dir():
            shutil.rmtree(full)
            return True
        if full.exists():
            full.unlink()
            return True
        return False

    def file_path(self, path: Path) -> Path | None:
        """Return the absolute path of a stored file, or None if missing."""
        full = self._resolve(path)
        return full if full.exists() else None

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes run directory: {path}"
            raise ValueError(msg) from None
        return full
