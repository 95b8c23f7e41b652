"""
Tests for MRZ validation and extraction.
"""
import pytest

from iba.errors import GrammarError, LengthError
from iba.mrz import (
    TYPE1_SLOTS, TYPE3_SLOTS, TYPE1_WIDTH, TYPE3_WIDTH,
    mrz_fields, strip_fillers, validate_mrz, validate_type1, validate_type3,
)


def _replace(row, pos, char):
    return row[:pos] + char + row[pos + 1:]


class TestType1:
    """Three rows of 30 characters."""

    def test_extraction(self, type1_rows):
        assert validate_mrz(type1_rows) == [
            "I", "D", "D", "T22000129", "3", "640812", "5",
            "201031", "5", "D", "4", "MUSTERMANN", "ERIKA",
        ]

    def test_field_names(self, type1_rows):
        assert list(mrz_fields(type1_rows)) == [
            "documentType", "type", "issuingCountry", "documentNumber",
            "documentNumberCheckDigit", "birthDate", "birthDateCheckDigit",
            "expirationDate", "expirationDateCheckDigit", "nationality",
            "finalCheckDigit", "surname", "givenNames",
        ]

    def test_given_names_keep_single_fillers_stripped(self, type1_rows):
        type1_rows["row3"] = "MUSTERMANN<<ERIKA<ANNA<<<<<<<<"
        fields = mrz_fields(type1_rows)
        assert fields["surname"] == "MUSTERMANN"
        assert fields["givenNames"] == "ERIKAANNA"

    def test_surname_only(self, type1_rows):
        type1_rows["row3"] = "MUSTERMANN" + "<" * 20
        fields = mrz_fields(type1_rows)
        assert fields["surname"] == "MUSTERMANN"
        assert "givenNames" not in fields

    def test_slots_cover_every_position(self):
        for row in range(3):
            covered = sorted(p for s in TYPE1_SLOTS if s.row == row for p in range(s.start, s.stop))
            assert covered == list(range(TYPE1_WIDTH))

    @pytest.mark.parametrize("width", [29, 31])
    def test_wrong_width_is_a_length_error(self, type1_rows, width):
        type1_rows["row2"] = ("x" * width)
        with pytest.raises(LengthError) as exc:
            validate_type1(type1_rows)
        # No grammar errors alongside the length error
        assert exc.value.violations == [
            "for Type 1 documents, each row must be exactly 30 characters long"
        ]

    def test_missing_row(self, type1_rows):
        del type1_rows["row1"]
        with pytest.raises(LengthError):
            validate_mrz(type1_rows)

    def test_visa_marker_rejected(self, type1_rows):
        type1_rows["row1"] = _replace(type1_rows["row1"], 1, "V")
        with pytest.raises(GrammarError) as exc:
            validate_mrz(type1_rows)
        assert exc.value.violations == ["First row position 2 cannot be 'V'"]

    def test_all_slot_violations_aggregated(self, type1_rows):
        type1_rows["row1"] = _replace(type1_rows["row1"], 0, "1")
        type1_rows["row2"] = _replace(type1_rows["row2"], 2, "A")
        type1_rows["row3"] = _replace(type1_rows["row3"], 0, "1")
        with pytest.raises(GrammarError) as exc:
            validate_mrz(type1_rows)
        assert exc.value.violations == [
            "First row position 1 must be an 'alpha' character indicating a document type",
            "Second row positions 1-6 must be 'numeric' characters indicating date of birth (YYMMDD)",
            "Third row positions 1-30 must be 'alpha+<' characters indicating surname and given names",
        ]

    def test_filler_allowed_in_document_number_check_digit(self, type1_rows):
        type1_rows["row1"] = _replace(type1_rows["row1"], 14, "<")
        assert "3" not in validate_mrz(type1_rows)[:5]

    def test_filler_not_allowed_in_final_check_digit(self, type1_rows):
        type1_rows["row2"] = _replace(type1_rows["row2"], 29, "<")
        with pytest.raises(GrammarError) as exc:
            validate_mrz(type1_rows)
        assert exc.value.violations == [
            "Second row position 30 must be a 'numeric' character indicating final check digit"
        ]

    def test_lowercase_rejected(self, type1_rows):
        type1_rows["row3"] = type1_rows["row3"].lower()
        with pytest.raises(GrammarError):
            validate_mrz(type1_rows)


class TestType3:
    """Two rows of 44 characters."""

    def test_extraction(self, type3_rows):
        assert validate_mrz(type3_rows) == [
            "P", "D", "MUSTERMANNERIKA", "C01X00T47", "8", "D",
            "640812", "5", "F", "270228", "3", "4",
        ]

    def test_field_names(self, type3_rows):
        assert list(mrz_fields(type3_rows)) == [
            "passportType", "issuingCountry", "namePart", "passportNumber",
            "passportNumberCheckDigit", "nationality", "birthDate",
            "birthDateCheckDigit", "sex", "expirationDate",
            "expirationDateCheckDigit", "finalCheckDigit",
        ]

    def test_personal_number_kept(self, type3_rows):
        row2 = type3_rows["row2"]
        type3_rows["row2"] = row2[:28] + "ZE184226B<<<<<1" + row2[43:]
        fields = mrz_fields(type3_rows)
        assert fields["personalNumber"] == "ZE184226B"
        assert fields["personalNumberCheckDigit"] == "1"

    def test_slots_cover_every_position(self):
        for row in range(2):
            covered = sorted(p for s in TYPE3_SLOTS if s.row == row for p in range(s.start, s.stop))
            assert covered == list(range(TYPE3_WIDTH))

    @pytest.mark.parametrize("width", [43, 45])
    def test_wrong_width_is_a_length_error(self, type3_rows, width):
        type3_rows["row1"] = "P" * width
        with pytest.raises(LengthError):
            validate_type3(type3_rows)

    def test_filler_not_allowed_in_final_check_digit(self, type3_rows):
        type3_rows["row2"] = _replace(type3_rows["row2"], 43, "<")
        with pytest.raises(GrammarError) as exc:
            validate_mrz(type3_rows)
        assert exc.value.violations == [
            "Second row position 44 must be a 'numeric' character indicating final check digit"
        ]

    def test_digits_in_name_rejected(self, type3_rows):
        type3_rows["row1"] = _replace(type3_rows["row1"], 6, "0")
        with pytest.raises(GrammarError) as exc:
            validate_mrz(type3_rows)
        assert len(exc.value.violations) == 1

    def test_two_rows_of_type1_width(self, type1_rows):
        del type1_rows["row3"]
        with pytest.raises(LengthError):
            validate_mrz(type1_rows)


class TestFillers:

    def test_strip(self):
        assert strip_fillers("D<<") == "D"
        assert strip_fillers(" MUSTER <MANN\t") == "MUSTERMANN"

    def test_idempotent(self):
        for value in ("T22000129<", "<<<", "A B<C", ""):
            once = strip_fillers(value)
            assert strip_fillers(once) == once
