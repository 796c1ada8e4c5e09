"""Exception types raised across the pipeline.

Unclassified records are not errors; see ``periods.ClassificationResult``.
"""

from __future__ import annotations


class FrescaloTrendsError(Exception):
    """Base class for all errors raised by this package."""


class DataFormatError(FrescaloTrendsError, ValueError):
    """A record has a malformed or unparseable date field.

    Carries the identifying fields of the offending record so the caller can
    report it without re-reading the source table.
    """

    def __init__(
        self,
        message: str,
        *,
        row: int | None = None,
        taxon: str | None = None,
        site: str | None = None,
        field: str | None = None,
        value: str | None = None,
    ) -> None:
        self.row = row
        self.taxon = taxon
        self.site = site
        self.field = field
        self.value = value
        parts = [message]
        if row is not None:
            parts.append(f"row={row}")
        if taxon is not None:
            parts.append(f"taxon={taxon!r}")
        if site is not None:
            parts.append(f"site={site!r}")
        if field is not None:
            parts.append(f"{field}={value!r}")
        super().__init__(" ".join(parts))


class ConfigurationError(FrescaloTrendsError, ValueError):
    """Invalid run configuration (epochs, Frescalo parameters, columns)."""


class ExternalToolError(FrescaloTrendsError, RuntimeError):
    """Frescalo failed to launch, timed out, or exited nonzero."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command or []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = message
        if returncode is not None:
            detail += f" (exit code {returncode})"
        if stderr.strip():
            detail += f"\n{stderr.strip()}"
        super().__init__(detail)
