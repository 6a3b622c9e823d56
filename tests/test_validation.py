from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from devicesync.utils.validation import as_utc, is_number, parse_client_date


@pytest.mark.parametrize("value", [0, 12, 12.5, -77.1])
def test_is_number_accepts_ints_and_floats(value: object) -> None:
    assert is_number(value)


@pytest.mark.parametrize("value", ["12.5", None, True, False, [1], {"v": 1}, float("nan"), float("inf"), float("-inf")])
def test_is_number_rejects_everything_else(value: object) -> None:
    assert not is_number(value)


def test_epoch_millis_string_and_number_agree() -> None:
    expected = datetime(2023, 10, 16, 10, 0, tzinfo=UTC)
    millis = int(expected.timestamp() * 1000)

    assert parse_client_date(str(millis)) == expected
    assert parse_client_date(millis) == expected


def test_float_millis_and_decimal_strings() -> None:
    expected = datetime(2026, 1, 5, 8, 0, tzinfo=UTC)

    assert parse_client_date(1767600000000.0) == expected
    assert parse_client_date("1767600000000.0") == expected
    assert parse_client_date("1.7676e12") == expected
    assert parse_client_date(" 1767600000000.5 ") == expected


@pytest.mark.parametrize("value", ["nan", "inf", "0x1F", "1e", float("nan"), float("inf")])
def test_non_finite_and_non_decimal_numbers_are_unreadable(value: object) -> None:
    assert parse_client_date(value) is None


def test_iso_with_z_suffix() -> None:
    assert parse_client_date("2023-10-16T10:00:00Z") == datetime(2023, 10, 16, 10, 0, tzinfo=UTC)


def test_iso_with_offset_is_normalised_to_utc() -> None:
    parsed = parse_client_date("2023-10-16T16:00:00+06:00")
    assert parsed == datetime(2023, 10, 16, 10, 0, tzinfo=UTC)
    assert parsed.utcoffset() == timedelta(0)


def test_naive_iso_is_taken_as_utc() -> None:
    assert parse_client_date("2023-10-16 10:00:00") == datetime(2023, 10, 16, 10, 0, tzinfo=UTC)


def test_rfc2822() -> None:
    assert parse_client_date("Mon, 16 Oct 2023 10:00:00 GMT") == datetime(2023, 10, 16, 10, 0, tzinfo=UTC)


def test_sub_millisecond_precision_is_dropped() -> None:
    parsed = parse_client_date("2023-10-16T10:00:00.123456+00:00")
    assert parsed is not None
    assert parsed.microsecond == 123000


@pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "16/10/2023 10h", True])
def test_unreadable_dates(value: object) -> None:
    assert parse_client_date(value) is None


def test_as_utc_attaches_utc_to_naive_values() -> None:
    assert as_utc(datetime(2026, 1, 1)) == datetime(2026, 1, 1, tzinfo=UTC)
    shifted = datetime(2026, 1, 1, 6, tzinfo=timezone(timedelta(hours=6)))
    assert as_utc(shifted) == datetime(2026, 1, 1, tzinfo=UTC)
