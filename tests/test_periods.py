"""Tests for date-range to epoch classification."""

from __future__ import annotations

import random
from datetime import date

import pytest

from frescalo_trends.errors import ConfigurationError, DataFormatError
from frescalo_trends.periods import (
    UNCLASSIFIED,
    ClassificationResult,
    ClassifiedRecord,
    DateRange,
    Epoch,
    EpochSet,
    OccurrenceRecord,
    classify_range,
    classify_records,
    find_containing_epochs,
    parse_date,
    parse_date_range,
    parse_epoch_spec,
)

THREE_EPOCHS = [(1600, 1959), (1960, 1999), (2000, 2023)]


def _range(start: str, end: str) -> DateRange:
    return DateRange(date.fromisoformat(start), date.fromisoformat(end))


def _record(taxon: str, start: str, end: str, site: str = "SU12") -> OccurrenceRecord:
    return OccurrenceRecord(taxon=taxon, site=site, dates=_range(start, end))


# =============================================================================
# Value types
# =============================================================================


class TestDateRange:
    """Test DateRange properties."""

    def test_precise(self) -> None:
        dr = _range("1955-01-01", "1955-01-01")
        assert dr.is_precise
        assert dr.is_bounded
        assert dr.start_year == 1955
        assert dr.end_year == 1955

    def test_multi_year_not_precise(self) -> None:
        dr = _range("1970-01-01", "1975-01-01")
        assert not dr.is_precise
        assert dr.is_bounded

    def test_unbounded(self) -> None:
        dr = DateRange(None, date(1900, 1, 1))
        assert not dr.is_bounded
        assert not dr.is_precise
        assert dr.start_year is None
        assert dr.end_year == 1900


class TestEpoch:
    """Test Epoch properties."""

    def test_label_and_midpoint(self) -> None:
        epoch = Epoch(1960, 1999)
        assert epoch.label == "1960-1999"
        assert epoch.midpoint == pytest.approx(1979.5)

    def test_contains_year_inclusive(self) -> None:
        epoch = Epoch(1960, 1964)
        assert epoch.contains_year(1960)
        assert epoch.contains_year(1964)
        assert not epoch.contains_year(1959)
        assert not epoch.contains_year(1965)

    def test_overlaps(self) -> None:
        assert Epoch(1960, 1970).overlaps(Epoch(1970, 1980))
        assert not Epoch(1960, 1969).overlaps(Epoch(1970, 1980))


# =============================================================================
# EpochSet validation
# =============================================================================


class TestEpochSet:
    """Test epoch validation at setup time."""

    def test_accepts_tuples_and_epochs(self) -> None:
        epochs = EpochSet([(1960, 1964), Epoch(1965, 1969)])
        assert len(epochs) == 2
        assert epochs[1] == Epoch(1965, 1969)

    def test_sorted_chronologically(self) -> None:
        epochs = EpochSet([(2000, 2023), (1600, 1959), (1960, 1999)])
        assert epochs.to_pairs() == THREE_EPOCHS
        assert epochs.first_year == 1600
        assert epochs.last_year == 2023

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="starts after it ends"):
            EpochSet([(1960, 1950)])

    def test_overlap_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="overlap"):
            EpochSet([(1960, 1970), (1970, 1980)])

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            EpochSet([])

    def test_gaps_allowed(self) -> None:
        epochs = EpochSet([(1950, 1959), (1970, 1979)])
        assert epochs.index_of_year(1965) is None
        assert epochs.index_of_year(1975) == 1

    def test_equality(self) -> None:
        assert EpochSet([(1, 2), (3, 4)]) == EpochSet([(3, 4), (1, 2)])

    @pytest.mark.parametrize(
        ("spec", "expected"),
        [("1960-1999", Epoch(1960, 1999)), (" 1600 : 1959 ", Epoch(1600, 1959))],
    )
    def test_parse_epoch_spec(self, spec: str, expected: Epoch) -> None:
        assert parse_epoch_spec(spec) == expected

    def test_parse_epoch_spec_invalid(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_epoch_spec("sixties")


# =============================================================================
# Date parsing
# =============================================================================


class TestParseDates:
    """Test parsing of textual day/month/year dates."""

    def test_parse_day_month_year(self) -> None:
        assert parse_date("01/06/1958") == date(1958, 6, 1)

    def test_custom_format(self) -> None:
        assert parse_date("1958-06-01", "%Y-%m-%d") == date(1958, 6, 1)

    @pytest.mark.parametrize("blank", ["", "   ", None, float("nan")])
    def test_blank_is_unbounded(self, blank: object) -> None:
        assert parse_date(blank) is None

    def test_invalid_month_raises(self) -> None:
        with pytest.raises(DataFormatError) as excinfo:
            parse_date("31/13/1990")
        assert excinfo.value.value == "31/13/1990"

    def test_garbage_raises(self) -> None:
        with pytest.raises(DataFormatError):
            parse_date("sometime in spring")

    def test_range_start_after_end_raises(self) -> None:
        with pytest.raises(DataFormatError, match="after"):
            parse_date_range("01/01/1990", "01/01/1980")

    def test_range_open_ended(self) -> None:
        dr = parse_date_range("01/01/1990", "")
        assert dr.start == date(1990, 1, 1)
        assert dr.end is None


# =============================================================================
# classify_range
# =============================================================================


class TestClassifyRange:
    """Test classification of single date ranges."""

    def test_precise_record_in_first_epoch(self) -> None:
        assert classify_range(_range("1955-01-01", "1955-01-01"), THREE_EPOCHS) == 0

    def test_straddling_record_unclassified(self) -> None:
        assert classify_range(_range("1958-06-01", "1961-01-01"), THREE_EPOCHS) is None

    def test_multi_year_record_inside_epoch(self) -> None:
        assert classify_range(_range("1970-01-01", "1975-01-01"), THREE_EPOCHS) == 1

    def test_record_before_all_epochs(self) -> None:
        epochs = [(1960, 1964), (1965, 1969)]
        assert classify_range(_range("1959-01-01", "1959-12-31"), epochs) is None

    def test_record_after_all_epochs(self) -> None:
        assert classify_range(_range("2024-01-01", "2024-01-01"), THREE_EPOCHS) is None

    def test_record_in_gap(self) -> None:
        epochs = [(1950, 1959), (1970, 1979)]
        assert classify_range(_range("1965-05-01", "1965-05-01"), epochs) is None

    def test_record_spanning_gap_unclassified(self) -> None:
        epochs = [(1950, 1959), (1970, 1979)]
        assert classify_range(_range("1958-01-01", "1971-01-01"), epochs) is None

    def test_epoch_boundary_years_inclusive(self) -> None:
        assert classify_range(_range("1960-01-01", "1999-12-31"), THREE_EPOCHS) == 1

    def test_unbounded_unclassified(self) -> None:
        assert classify_range(DateRange(None, date(1955, 1, 1)), THREE_EPOCHS) is None
        assert classify_range(DateRange(date(1955, 1, 1), None), THREE_EPOCHS) is None

    def test_find_containing_epochs(self) -> None:
        assert find_containing_epochs(_range("2001-01-01", "2002-01-01"), THREE_EPOCHS) == [2]
        assert find_containing_epochs(_range("1999-01-01", "2002-01-01"), THREE_EPOCHS) == []

    def test_invalid_epochs_fail_before_classifying(self) -> None:
        with pytest.raises(ConfigurationError):
            classify_range(_range("1955-01-01", "1955-01-01"), [(1960, 1950)])


class TestClassificationProperties:
    """Properties that must hold for any valid epoch set."""

    def test_precise_records_match_containing_epoch(self) -> None:
        epochs = EpochSet([(1900, 1929), (1940, 1969), (1970, 1999)])
        for year in range(1890, 2010):
            dr = DateRange(date(year, 7, 1), date(year, 7, 1))
            assert classify_range(dr, epochs) == epochs.index_of_year(year)

    def test_straddling_records_never_classified(self) -> None:
        epochs = EpochSet(THREE_EPOCHS)
        rng = random.Random(42)
        for _ in range(200):
            start = rng.randint(1600, 2023)
            end = rng.randint(start, 2023)
            dr = DateRange(date(start, 1, 1), date(end, 12, 31))
            if epochs.index_of_year(start) != epochs.index_of_year(end):
                assert classify_range(dr, epochs) is None

    def test_order_independent(self) -> None:
        ranges = [
            _range("1955-01-01", "1955-01-01"),
            _range("1958-06-01", "1961-01-01"),
            _range("1970-01-01", "1975-01-01"),
            _range("2010-03-01", "2012-01-01"),
        ]
        forward = [classify_range(dr, THREE_EPOCHS) for dr in ranges]
        backward = [classify_range(dr, list(reversed(THREE_EPOCHS))) for dr in ranges]
        assert forward == backward == [0, None, 1, 2]

    def test_idempotent(self) -> None:
        records = [_record("Vanessa atalanta", "1970-01-01", "1975-01-01")]
        first = classify_records(records, THREE_EPOCHS)
        second = classify_records(records, THREE_EPOCHS)
        assert [r.period for r in first.records] == [r.period for r in second.records]


# =============================================================================
# classify_records
# =============================================================================


class TestClassifyRecords:
    """Test batch classification and its audit views."""

    def test_results_in_input_order(self) -> None:
        records = [
            _record("A", "1955-01-01", "1955-01-01"),
            _record("B", "1958-06-01", "1961-01-01"),
            _record("C", "1970-01-01", "1975-01-01"),
        ]
        result = classify_records(records, THREE_EPOCHS)
        assert [r.record.taxon for r in result.records] == ["A", "B", "C"]
        assert [r.period for r in result.records] == [0, None, 1]

    def test_unclassified_enumerable(self) -> None:
        records = [
            _record("A", "1955-01-01", "1955-01-01"),
            _record("B", "1958-06-01", "1961-01-01"),
            _record("C", "1500-01-01", "1500-01-01"),
        ]
        result = classify_records(records, THREE_EPOCHS)
        assert result.unclassified_count == 2
        assert [r.record.taxon for r in result.unclassified] == ["B", "C"]
        assert [r.record.taxon for r in result.classified] == ["A"]
        assert len(result) == 3

    def test_counts_by_period(self) -> None:
        records = [
            _record("A", "2001-01-01", "2001-01-01"),
            _record("B", "1955-01-01", "1955-01-01"),
            _record("C", "2005-01-01", "2006-01-01"),
        ]
        result = classify_records(records, THREE_EPOCHS)
        assert result.counts_by_period == {0: 1, 2: 2}

    def test_period_label(self) -> None:
        record = _record("A", "1955-01-01", "1955-01-01")
        assert ClassifiedRecord(record, 0).period_label == 0
        assert ClassifiedRecord(record, None).period_label == UNCLASSIFIED

    def test_empty_input(self) -> None:
        result = classify_records([], THREE_EPOCHS)
        assert result == ClassificationResult()
        assert result.unclassified_count == 0
