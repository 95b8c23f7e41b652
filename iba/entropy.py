# Copyright (c) 2026 Signer — MIT License

"""Entropy seed construction for Identity Bound Accounts.

Turns a validated document plus a PIN into a deterministic entropy seed:

    1. Field shuffle: the field names are put through a Fisher-Yates
       shuffle driven by HMAC-SHA256(pin, all values || counter)
    2. Pre-seed: the values in shuffled order, followed by the pin
    3. Checksum: first 6 decimal digits of SHA-256(pre-seed) as an integer
    4. Character shuffle: the characters of the pre-seed are shuffled
       again, this time keyed by the checksum
    5. Seed: shuffled characters followed by the checksum

The generator behind both shuffles is a pure function of
(key, data, counter). There is no ambient randomness anywhere: the same
document and PIN always give the same seed.

This module is also the entry boundary. ``parse_input`` resolves the
shape of a raw input once (manual fields, MRZ Type 1 or MRZ Type 3) and
``validate_input`` adds the PIN requirement on top.

Usage:
    from iba.entropy import validate_input, construct_entropy_seed
    pin, fields = validate_input({"names": "ERIKA", "surname": "MUSTERMANN"}, "123456")
    seed = construct_entropy_seed(pin, fields)
"""

import enum
import hashlib
import hmac
import logging
from collections import namedtuple
from collections.abc import Mapping

from .errors import GrammarError, InsufficientFieldsError, MissingSecretError, ValidationError
from .manual import PIN_FIELD, is_valid_pin, manual_fields
from .mrz import mrz_fields

logger = logging.getLogger(__name__)

# Width of each generator draw: 48 bits of the HMAC digest
_RNG_BYTES = 6
_RNG_SCALE = float(1 << (8 * _RNG_BYTES))

CHECKSUM_DIGITS = 6

_MRZ_ROWS = ("row1", "row2", "row3")


class DocumentKind(str, enum.Enum):
    MANUAL = "manual"
    MRZ_TYPE1 = "mrz-type1"
    MRZ_TYPE3 = "mrz-type3"


DocumentInput = namedtuple("DocumentInput", "kind fields")


def detect_kind(raw):
    """Resolve the shape of a raw input from its keys alone."""
    if not isinstance(raw, Mapping):
        raise ValidationError("input must be a mapping of field names to values")
    if "row3" in raw:
        return DocumentKind.MRZ_TYPE1
    if "row1" in raw or "row2" in raw:
        return DocumentKind.MRZ_TYPE3
    return DocumentKind.MANUAL


def parse_input(raw):
    """Validate a raw input and return a DocumentInput(kind, fields).

    ``fields`` is an ordered dict of field name -> non-empty value.
    """
    kind = detect_kind(raw)
    if kind is DocumentKind.MANUAL:
        return DocumentInput(kind, manual_fields(raw))

    extra = [k for k in raw if k not in _MRZ_ROWS and k != PIN_FIELD]
    if extra:
        raise GrammarError([f"unknown MRZ field '{k}'" for k in extra])
    return DocumentInput(kind, mrz_fields(raw))


def _pin_violations(pin):
    if pin is None:
        return ["a 4 to 12-digit pin is required"]
    if not is_valid_pin(pin):
        return ["pin must be 4 to 12 digits"]
    return []


def validate_pin(pin):
    """Raise MissingSecretError unless ``pin`` is 4 to 12 ASCII digits."""
    errors = _pin_violations(pin)
    if errors:
        raise MissingSecretError(errors)
    return pin


def validate_input(raw, pin=None):
    """Validate a document and its PIN in one pass.

    The PIN may be passed explicitly or as the ``pin`` key of the
    mapping. An explicit ``pin`` takes precedence. A bad PIN is reported
    together with the document's grammar violations; a row width error
    still stops validation before anything else is checked.

    Returns:
        (pin, fields) where fields is an ordered dict.

    Raises:
        LengthError: MRZ rows are missing or have the wrong width.
        GrammarError: the document is malformed (a bad PIN is listed last).
        MissingSecretError: the PIN is the only problem.
        InsufficientFieldsError: nothing besides the pin.
    """
    if pin is None and isinstance(raw, Mapping):
        pin = raw.get(PIN_FIELD)
    pin_errors = _pin_violations(pin)

    try:
        doc = parse_input(raw)
    except GrammarError as e:
        # A bad ``pin`` key of a manual mapping is already in the list
        missing = [v for v in pin_errors if v not in e.violations]
        if not missing:
            raise
        raise GrammarError(e.violations + missing) from None

    if pin_errors:
        raise MissingSecretError(pin_errors)
    logger.debug("validated %s input: %d field(s)", doc.kind.value, len(doc.fields))
    return pin, doc.fields


def _hmac_rng(key, data, counter):
    """Deterministic fraction in [0, 1) from HMAC-SHA256(key, data || counter)."""
    digest = hmac.new(key, data + str(counter).encode("ascii"), hashlib.sha256).digest()
    return int.from_bytes(digest[:_RNG_BYTES], "big") / _RNG_SCALE


def _shuffle(items, key, data):
    """In-place Fisher-Yates shuffle driven by _hmac_rng."""
    for i in range(len(items) - 1, 0, -1):
        j = int(_hmac_rng(key, data, i) * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def checksum(pre_seed):
    """First CHECKSUM_DIGITS decimal digits of SHA-256(pre_seed) read as an integer."""
    digest = hashlib.sha256(pre_seed.encode("utf-8")).digest()
    return str(int.from_bytes(digest, "big"))[:CHECKSUM_DIGITS]


def _as_mapping(fields):
    if isinstance(fields, Mapping):
        return fields
    return {str(i): value for i, value in enumerate(fields)}


def construct_entropy_seed(pin, fields):
    """Build the entropy seed from a PIN and a canonical field sequence.

    Args:
        pin: The user secret.
        fields: Ordered mapping of field name -> value, or a plain
                sequence of values (names are then their positions).

    Returns:
        The entropy seed string. Sensitive: do not log or persist it.

    Raises:
        MissingSecretError: pin is empty.
        InsufficientFieldsError: no field has a non-empty value.
    """
    if not pin:
        raise MissingSecretError("a pin is required to construct an entropy seed")
    fields = _as_mapping(fields)
    keys = [k for k, v in fields.items() if v]
    if not keys:
        raise InsufficientFieldsError("at least one non-empty field is required")

    # Pass 1: shuffle field names
    values = "".join(fields.values()).encode("utf-8")
    _shuffle(keys, pin.encode("utf-8"), values)
    pre_seed = "".join(fields[k] for k in keys) + pin

    # Pass 2: shuffle characters of the pre-seed, re-keyed by its checksum
    check = checksum(pre_seed)
    chars = _shuffle(list(pre_seed), check.encode("ascii"), pre_seed.encode("utf-8"))

    logger.debug("constructed entropy seed from %d field(s)", len(keys))
    return "".join(chars) + check
