from __future__ import annotations

import pytest

from til_api import ids
from til_api.domain.exceptions import InvalidIdentifierError


@pytest.mark.parametrize(
    "value",
    [
        "01K5RR9NFREBCCRT4YHNN94W29",
        "01k5rr9nfrebccrt4yhnn94w29",
        "01ARZ3NDEKTSV4RRFFQ69G5FAV",
    ],
)
def test_is_valid_accepts_ulids(value: str) -> None:
    assert ids.is_valid(value)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "invalid",
        "01K5RR9NFREBCCRT4YHNN94W2",
        "01K5RR9NFREBCCRT4YHNN94W299",
        "01K5RR9NFREBCCRT4YHNN94W2I",
        "01K5RR9NFREBCCRT4YHNN94W2L",
        "01K5RR9NFREBCCRT4YHNN94W2O",
        "01K5RR9NFREBCCRT4YHNN94W2U",
        "01K5RR9NFREBCCRT4YHNN94W2\n",
        None,
    ],
)
def test_is_valid_rejects_bad_length_and_confusable_letters(value) -> None:
    assert not ids.is_valid(value)


def test_decode_timestamp_reads_first_ten_characters() -> None:
    assert ids.decode_timestamp("01ARZ3NDEKTSV4RRFFQ69G5FAV") == 1469922850259
    assert ids.decode_timestamp("01arz3ndektsv4rrffq69g5fav") == 1469922850259
    assert ids.decode_timestamp("0000000000" + "0" * 16) == 0


def test_timestamp_iso_uses_millisecond_utc() -> None:
    assert ids.timestamp_iso("01ARZ3NDEKTSV4RRFFQ69G5FAV") == "2016-07-30T23:54:10.259Z"


def test_decode_timestamp_rejects_invalid() -> None:
    with pytest.raises(InvalidIdentifierError):
        ids.decode_timestamp("not-a-ulid")
    # First character above 7 overflows 48 bits.
    with pytest.raises(InvalidIdentifierError):
        ids.decode_timestamp("8" + "0" * 25)


def test_string_order_matches_timestamp_order() -> None:
    values = [
        "01K5X1514G144QQSM4K4S85WMC",
        "01ARZ3NDEKTSV4RRFFQ69G5FAV",
        "01k5rr9nfrebccrt4yhnn94w29",
        "01K5RR9NFREBCCRT4YHNN94W2A",
    ]
    by_string = sorted(values, key=ids.normalize)
    by_time = sorted(values, key=lambda v: (ids.decode_timestamp(v), ids.normalize(v)))
    assert by_string == by_time
    for a, b in zip(by_string, by_string[1:]):
        assert ids.decode_timestamp(a) <= ids.decode_timestamp(b)


@pytest.mark.parametrize(
    "value",
    [
        "01ARZ3NDE\u212aTSV4RRFFQ69G5FAV",
        "01ARZ3NDEKT\u017fV4RRFFQ69G5FAV",
        "\u212a" * 26,
    ],
)
def test_unicode_case_folds_are_not_ulid_characters(value: str) -> None:
    assert not ids.is_valid(value)
    with pytest.raises(InvalidIdentifierError):
        ids.decode_timestamp(value)
