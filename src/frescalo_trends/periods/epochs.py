"""Validated, chronologically ordered epoch collections.

Building an ``EpochSet`` is the point where bad epoch definitions fail:
inverted ranges, overlaps and empty sets raise ``ConfigurationError`` before
any record is classified. Epochs are sorted by start year, so period indices
are chronological regardless of the order the caller listed them in.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence

from frescalo_trends.errors import ConfigurationError
from frescalo_trends.periods.models import Epoch

_SPEC_RE = re.compile(r"^\s*(-?\d+)\s*[-:,]\s*(-?\d+)\s*$")


class EpochSet(Sequence[Epoch]):
    """Non-overlapping epochs, indexed chronologically from 0."""

    def __init__(self, epochs: Iterable[Epoch | tuple[int, int]]) -> None:
        items = [e if isinstance(e, Epoch) else Epoch(int(e[0]), int(e[1])) for e in epochs]
        if not items:
            raise ConfigurationError("At least one epoch is required")

        for epoch in items:
            if epoch.start > epoch.end:
                msg = f"Epoch {epoch.label} starts after it ends"
                raise ConfigurationError(msg)

        ordered = sorted(items, key=lambda e: (e.start, e.end))
        for earlier, later in zip(ordered, ordered[1:], strict=False):
            if earlier.overlaps(later):
                msg = f"Epochs {earlier.label} and {later.label} overlap"
                raise ConfigurationError(msg)

        self._epochs: tuple[Epoch, ...] = tuple(ordered)

    def __getitem__(self, index: int) -> Epoch:  # type: ignore[override]
        return self._epochs[index]

    def __len__(self) -> int:
        return len(self._epochs)

    def __iter__(self) -> Iterator[Epoch]:
        return iter(self._epochs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EpochSet):
            return NotImplemented
        return self._epochs == other._epochs

    def __hash__(self) -> int:
        return hash(self._epochs)

    def __repr__(self) -> str:
        return f"EpochSet([{', '.join(e.label for e in self._epochs)}])"

    @property
    def first_year(self) -> int:
        return self._epochs[0].start

    @property
    def last_year(self) -> int:
        return self._epochs[-1].end

    def index_of_year(self, year: int) -> int | None:
        """Index of the epoch containing ``year``, or None if it falls in a gap."""
        for i, epoch in enumerate(self._epochs):
            if epoch.contains_year(year):
                return i
        return None

    def to_pairs(self) -> list[tuple[int, int]]:
        return [(e.start, e.end) for e in self._epochs]


def parse_epoch_spec(spec: str) -> Epoch:
    """Parse a ``START-END`` string (e.g. ``"1960-1999"``) into an Epoch.

    Raises:
        ConfigurationError: If the string is not two integer years.
    """
    match = _SPEC_RE.match(spec)
    if not match:
        msg = f"Invalid epoch {spec!r}, expected START-END such as 1960-1999"
        raise ConfigurationError(msg)
    return Epoch(int(match.group(1)), int(match.group(2)))
