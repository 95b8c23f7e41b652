# Copyright (c) 2026 Signer — MIT License

"""Validation of identity documents typed in by hand.

A manual document is a mapping of named fields. Each field belongs to a
character class; all violations are collected before anything is raised,
so the caller sees every problem at once.

Usage:
    from iba.manual import validate_manual
    validate_manual({"docNum": "L01X00T47", "names": "ERIKA",
                     "surname": "MUSTERMANN", "birthDate": "12081983"})
    # ["ERIKA", "MUSTERMANN", "12081983", "L01X00T47"]
"""

import logging
import re

from .errors import GrammarError, InsufficientFieldsError, MissingSecretError

logger = logging.getLogger(__name__)

# ASCII-only classes; \d would also accept non-ASCII digits
_DATE = re.compile(r"[0-9]{8}")
_LATIN = re.compile(r"[A-Za-z]+")
_NUMERIC = re.compile(r"[0-9]+")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")
_PIN = re.compile(r"[0-9]{4,12}")

PIN_FIELD = "pin"

DATE_FIELDS = ("birthDate", "expireDate", "issueDate")
LATIN_FIELDS = (
    "names", "surname", "nationality", "sex", "birthplace", "origin",
    "authority", "eyeColor", "hairColor", "motherNames", "motherSurname",
    "fatherNames", "fatherSurname",
)
NUMERIC_FIELDS = ("height", "weight")
ALPHANUMERIC_FIELDS = ("docNum", "address", "misc1", "misc2", "misc3")

# Canonical output order. Downstream hashing depends on it, never reorder.
FIELD_ORDER = (
    "names", "surname", "birthDate", "expireDate", "issueDate", "nationality",
    "sex", "birthplace", "origin", "authority", "eyeColor", "hairColor",
    "motherNames", "motherSurname", "fatherNames", "fatherSurname",
    "height", "weight", "docNum", "address", "misc1", "misc2", "misc3",
)


def _check_date(value, name, errors):
    if not _DATE.fullmatch(value):
        errors.append(f"{name} must be in the format DDMMYYYY")
        return
    day = int(value[:2])
    month = int(value[2:4])
    if not 1 <= day <= 31:
        errors.append(f"{name} day must be between 01 and 31")
    if not 1 <= month <= 12:
        errors.append(f"{name} month must be between 01 and 12")


def _check_field(value, name, errors):
    if name in DATE_FIELDS:
        _check_date(value, name, errors)
    elif name in LATIN_FIELDS:
        if not _LATIN.fullmatch(value):
            errors.append(f"{name} must be a non-empty string of Latin letters")
    elif name in NUMERIC_FIELDS:
        if not _NUMERIC.fullmatch(value):
            errors.append(f"{name} must only contain numbers")
    elif not _ALPHANUMERIC.fullmatch(value):
        errors.append(f"{name} must be a non-empty alphanumeric string")


def is_valid_pin(pin):
    """True if ``pin`` is 4 to 12 ASCII digits."""
    return isinstance(pin, str) and _PIN.fullmatch(pin) is not None


def manual_fields(doc):
    """Validate a manual document and return its fields as an ordered dict.

    Absent fields (missing key or ``None``) are skipped. An optional
    ``pin`` key is validated but never returned.

    Raises:
        GrammarError: one or more fields are malformed (all listed).
        MissingSecretError: the pin is the only malformed field.
        InsufficientFieldsError: no field other than the pin was given.
    """
    errors = []
    fields = {}

    for name in FIELD_ORDER:
        value = doc.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            errors.append(f"{name} must be a string")
            continue
        _check_field(value, name, errors)
        fields[name] = value

    pin = doc.get(PIN_FIELD)
    pin_invalid = pin is not None and not is_valid_pin(pin)
    if pin_invalid:
        errors.append("pin must be 4 to 12 digits")

    for name in doc:
        if name != PIN_FIELD and name not in FIELD_ORDER:
            errors.append(f"unknown field '{name}'")

    if errors:
        logger.debug("manual input rejected with %d violation(s)", len(errors))
        if pin_invalid and len(errors) == 1:
            raise MissingSecretError(errors)
        raise GrammarError(errors)
    if not fields:
        raise InsufficientFieldsError(
            "at least one field besides the pin must be provided"
        )

    logger.debug("manual input accepted: %d field(s)", len(fields))
    return fields


def validate_manual(doc):
    """Validate a manual document and return its canonical field list."""
    return list(manual_fields(doc).values())
