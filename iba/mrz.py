# Copyright (c) 2026 Signer — MIT License

"""Machine-readable zone (MRZ) validation and extraction, ICAO 9303.

Two layouts are supported:
    Type 1: three rows of 30 characters (ID cards)
    Type 3: two rows of 44 characters (passports)

Each layout is a table of named slots. A slot is a fixed range on one row
checked against a character class; ``<`` is the filler character. Row
widths are checked first and a bad width stops validation immediately.
Every slot violation is then collected and raised as one GrammarError.

Check digits are only checked for their character class. They are not
recomputed: this module reads documents, it does not authenticate them.

Usage:
    from iba.mrz import validate_mrz
    validate_mrz({
        "row1": "P<D<<MUSTERMANN<<ERIKA<<<<<<<<<<<<<<<<<<<<<<",
        "row2": "C01X00T478D<<6408125F2702283<<<<<<<<<<<<<<<4",
    })
    # ["P", "D", "MUSTERMANNERIKA", "C01X00T47", "8", "D", "640812", ...]
"""

import logging
import re
from collections import namedtuple

from .errors import GrammarError, LengthError

logger = logging.getLogger(__name__)

FILLER = "<"
NAME_SEPARATOR = FILLER * 2

TYPE1_WIDTH = 30
TYPE3_WIDTH = 44

# Character classes, compiled once
ALPHA = ("alpha", re.compile(r"[A-Z]+"))
ALPHA_FILLER = ("alpha+<", re.compile(r"[A-Z<]+"))
ALPHANUM_FILLER = ("alpha+num+<", re.compile(r"[A-Z0-9<]+"))
NUMERIC = ("numeric", re.compile(r"[0-9]+"))
NUMERIC_FILLER = ("numeric+<", re.compile(r"[0-9<]+"))

Slot = namedtuple("Slot", "name row start stop charset description")

_WHITESPACE = re.compile(r"\s+")


def strip_fillers(value):
    """Remove filler characters and all whitespace. Idempotent."""
    return _WHITESPACE.sub("", value.replace(FILLER, ""))


# ── Type 1 (3 x 30) ──────────────────────────────────────────────

TYPE1_SLOTS = (
    Slot("documentType", 0, 0, 1, ALPHA, "a document type"),
    Slot("type", 0, 1, 2, ALPHANUM_FILLER, "type of document"),
    Slot("issuingCountry", 0, 2, 5, ALPHA_FILLER, "issuing country or organization"),
    Slot("documentNumber", 0, 5, 14, ALPHANUM_FILLER, "document number"),
    Slot("documentNumberCheckDigit", 0, 14, 15, NUMERIC_FILLER, "check digit for document number"),
    Slot("optionalData1", 0, 15, 30, ALPHANUM_FILLER, "optional data"),
    Slot("birthDate", 1, 0, 6, NUMERIC, "date of birth (YYMMDD)"),
    Slot("birthDateCheckDigit", 1, 6, 7, NUMERIC, "check digit for date of birth"),
    Slot("sex", 1, 7, 8, ALPHA_FILLER, "sex (M, F, or <)"),
    Slot("expirationDate", 1, 8, 14, NUMERIC, "expiration date (YYMMDD)"),
    Slot("expirationDateCheckDigit", 1, 14, 15, NUMERIC, "check digit for expiration date"),
    Slot("nationality", 1, 15, 18, ALPHA_FILLER, "nationality"),
    Slot("optionalData2", 1, 18, 29, ALPHANUM_FILLER, "optional data"),
    Slot("finalCheckDigit", 1, 29, 30, NUMERIC, "final check digit"),
    Slot("names", 2, 0, 30, ALPHA_FILLER, "surname and given names"),
)

# A 'V' in the second position would read as a visa
_TYPE1_FORBIDDEN_TYPE = "V"

# ── Type 3 (2 x 44) ──────────────────────────────────────────────

TYPE3_SLOTS = (
    Slot("passportType", 0, 0, 1, ALPHA, "a passport"),
    Slot("type", 0, 1, 2, ALPHA_FILLER, "type of passport"),
    Slot("issuingCountry", 0, 2, 5, ALPHA_FILLER, "issuing country or organization"),
    Slot("namePart", 0, 5, 44, ALPHA_FILLER, "surname and given names"),
    Slot("passportNumber", 1, 0, 9, ALPHANUM_FILLER, "passport number"),
    Slot("passportNumberCheckDigit", 1, 9, 10, NUMERIC, "check digit for passport number"),
    Slot("nationality", 1, 10, 13, ALPHA_FILLER, "nationality"),
    Slot("birthDate", 1, 13, 19, NUMERIC, "date of birth (YYMMDD)"),
    Slot("birthDateCheckDigit", 1, 19, 20, NUMERIC, "check digit for date of birth"),
    Slot("sex", 1, 20, 21, ALPHA_FILLER, "sex (M, F, or <)"),
    Slot("expirationDate", 1, 21, 27, NUMERIC, "expiration date (YYMMDD)"),
    Slot("expirationDateCheckDigit", 1, 27, 28, NUMERIC, "check digit for expiration date"),
    Slot("personalNumber", 1, 28, 42, ALPHANUM_FILLER, "personal number"),
    Slot("personalNumberCheckDigit", 1, 42, 43, NUMERIC_FILLER, "check digit for personal number"),
    Slot("finalCheckDigit", 1, 43, 44, NUMERIC, "final check digit"),
)

_ROW_NAMES = ("First", "Second", "Third")


def _rows(mrz, count, width, label):
    keys = [f"row{i + 1}" for i in range(count)]
    rows = [mrz.get(k) for k in keys]
    if any(not isinstance(r, str) or not r for r in rows):
        raise LengthError(f"{label} requires {', '.join(keys)} to be provided")
    if any(len(r) != width for r in rows):
        raise LengthError(
            f"for {label} documents, each row must be exactly {width} characters long"
        )
    return rows


def _describe(slot):
    """Human-readable position of a slot, 1-indexed as printed on documents."""
    row = _ROW_NAMES[slot.row]
    kind, _ = slot.charset
    if slot.stop - slot.start == 1:
        article = "an" if kind[0] in "aeiou" else "a"
        return (f"{row} row position {slot.start + 1} must be {article} '{kind}' "
                f"character indicating {slot.description}")
    return (f"{row} row positions {slot.start + 1}-{slot.stop} must be '{kind}' "
            f"characters indicating {slot.description}")


def _check_slots(rows, slots):
    errors = []
    for slot in slots:
        _, pattern = slot.charset
        if not pattern.fullmatch(rows[slot.row][slot.start:slot.stop]):
            errors.append(_describe(slot))
    return errors


def _raise_if(errors, label):
    if errors:
        logger.debug("%s MRZ rejected with %d violation(s)", label, len(errors))
        raise GrammarError(errors)


def validate_type1(mrz):
    """Validate the MRZ of an ICAO 9303 Type 1 document.

    Raises LengthError if any of row1..row3 is missing or not 30
    characters wide, GrammarError listing every bad slot otherwise.
    """
    rows = _rows(mrz, 3, TYPE1_WIDTH, "Type 1")
    errors = _check_slots(rows, TYPE1_SLOTS[:2])
    if rows[0][1] == _TYPE1_FORBIDDEN_TYPE:
        errors.append(f"First row position 2 cannot be '{_TYPE1_FORBIDDEN_TYPE}'")
    errors += _check_slots(rows, TYPE1_SLOTS[2:])
    _raise_if(errors, "Type 1")
    return rows


def validate_type3(mrz):
    """Validate the MRZ of an ICAO 9303 Type 3 document (2 x 44)."""
    rows = _rows(mrz, 2, TYPE3_WIDTH, "Type 3")
    _raise_if(_check_slots(rows, TYPE3_SLOTS), "Type 3")
    return rows


def _extract(rows, slots):
    return {
        slot.name: strip_fillers(rows[slot.row][slot.start:slot.stop])
        for slot in slots
    }


def extract_type1(mrz):
    """Validate and extract a Type 1 MRZ into an ordered dict of non-empty fields."""
    rows = validate_type1(mrz)
    fields = _extract(rows, TYPE1_SLOTS[:-1])
    parts = rows[2].split(NAME_SEPARATOR)
    fields["surname"] = strip_fillers(parts[0])
    fields["givenNames"] = strip_fillers(parts[1]) if len(parts) > 1 else ""
    return {k: v for k, v in fields.items() if v}


def extract_type3(mrz):
    """Validate and extract a Type 3 MRZ into an ordered dict of non-empty fields."""
    rows = validate_type3(mrz)
    fields = _extract(rows, TYPE3_SLOTS)
    return {k: v for k, v in fields.items() if v}


def is_type1(mrz):
    """Type 1 documents are the only ones with a third row."""
    return "row3" in mrz


def mrz_fields(mrz):
    """Select the layout by row count and return the extracted fields."""
    if is_type1(mrz):
        fields = extract_type1(mrz)
        logger.debug("extracted Type 1 MRZ: %d field(s)", len(fields))
    else:
        fields = extract_type3(mrz)
        logger.debug("extracted Type 3 MRZ: %d field(s)", len(fields))
    return fields


def validate_mrz(mrz):
    """Validate a Type 1 or Type 3 MRZ and return its canonical field list."""
    return list(mrz_fields(mrz).values())
