"""Tests for the cove.dates module."""

from datetime import date, datetime

import pytest

from cove import dates
from cove.errors import InvalidDateFormat, QueryError


class TestEncode:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("03122020", "3/12/20"),
            ("01222020", "1/22/20"),
            ("12312021", "12/31/21"),
            (" 03012020 ", "3/1/20"),
        ],
    )
    def test_success(self, value: str, expected: str) -> None:
        assert dates.encode(value) == expected

    @pytest.mark.parametrize("value", ["13999999", "3122020", "2020-03-12", "02302020", "", "abcdefgh"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidDateFormat, match="MMddyyyy") as exc:
            dates.encode(value)
        assert exc.value.pattern == "MMddyyyy"

    def test_is_query_error(self) -> None:
        with pytest.raises(QueryError):
            dates.encode("13999999")


class TestKeys:
    def test_to_key_strips_leading_zeros(self) -> None:
        assert dates.to_key(date(2020, 3, 2)) == "3/2/20"

    def test_to_key_accepts_datetime(self) -> None:
        assert dates.to_key(datetime(2020, 11, 5, 0, 0)) == "11/5/20"

    def test_decode(self) -> None:
        assert dates.decode("3/12/20") == date(2020, 3, 12)

    def test_decode_rejects_non_key(self) -> None:
        with pytest.raises(ValueError):
            dates.decode("Lat")

    @pytest.mark.parametrize(
        ("label", "expected"),
        [("3/12/20", True), ("03/12/20", True), ("13/45/20", False), ("Long", False), ("2020-03-12", False)],
    )
    def test_is_date_key(self, label: str, expected: bool) -> None:
        assert dates.is_date_key(label) is expected

    def test_canonical(self) -> None:
        assert dates.canonical("03/02/20") == "3/2/20"

    def test_encode_matches_header_keys(self) -> None:
        assert dates.encode("03122020") == dates.canonical("03/12/20")
