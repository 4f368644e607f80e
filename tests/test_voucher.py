"""Tests for voucher extraction from member names."""

import pytest

from components.bill.voucher import Matched, Unmatched, extract_voucher


class TestTrailingToken:
    def test_trailing_voucher(self) -> None:
        assert extract_voucher("John Doe V-123", {}).as_pair() == ("John Doe", "V-123")

    def test_plain_name(self) -> None:
        result = extract_voucher("Plain Name", {})
        assert isinstance(result, Unmatched)
        assert result.as_pair() == ("Plain Name", "")

    @pytest.mark.parametrize(
        "display_name, expected",
        [
            ("John Doe (V-123)", ("John Doe", "V-123")),
            ("John Doe [v45]", ("John Doe", "V45")),
            ("John Doe #V9", ("John Doe", "V9")),
            ("John Doe, V-77", ("John Doe", "V-77")),
            ("Sam Lee v 45", ("Sam Lee", "V45")),
            ("  Padded Name   V12  ", ("Padded Name", "V12")),
        ],
    )
    def test_trailing_variants(self, display_name, expected) -> None:
        assert extract_voucher(display_name, {}).as_pair() == expected

    def test_token_glued_to_word_is_not_a_voucher(self) -> None:
        assert extract_voucher("Unit DV-12", {}).as_pair() == ("Unit DV-12", "")

    def test_more_than_six_digits_is_not_a_voucher(self) -> None:
        assert extract_voucher("Jane V1234567", {}).as_pair() == ("Jane V1234567", "")

    def test_name_that_is_only_a_code_keeps_the_name(self) -> None:
        assert extract_voucher("V-12", {}).as_pair() == ("V-12", "V-12")


class TestExplicitFields:
    def test_member_id(self) -> None:
        result = extract_voucher("Jane", {"member_id": "V7"})
        assert isinstance(result, Matched)
        assert result.as_pair() == ("Jane", "V7")
        assert result.source == "member_id"

    def test_explicit_code_is_stripped_from_name(self) -> None:
        result = extract_voucher("Jane Smith (v-7)", {"voucher_no": "v-7"})
        assert result.as_pair() == ("Jane Smith", "V-7")

    def test_explicit_field_wins_over_trailing_token(self) -> None:
        result = extract_voucher("Jane Smith V-1", {"voucher": "V-2"})
        assert result.as_pair() == ("Jane Smith V-1", "V-2")

    def test_field_order(self) -> None:
        fields = {"voucher_no": "V-1", "voucher": "V-2", "member_id": "V-3"}
        assert extract_voucher("Jane", fields).as_pair() == ("Jane", "V-1")

    def test_non_voucher_fields_fall_through(self) -> None:
        fields = {"voucher_no": "", "voucher": None, "member_id": "M-88"}
        assert extract_voucher("John Doe V-5", fields).as_pair() == ("John Doe", "V-5")


class TestTolerance:
    def test_missing_name(self) -> None:
        assert extract_voucher(None, None).as_pair() == ("", "")

    def test_non_string_fields(self) -> None:
        assert extract_voucher("Ann", {"member_id": 42}).as_pair() == ("Ann", "")
