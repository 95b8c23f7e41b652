# Copyright (c) 2026 Signer — MIT License

"""Avalanche audit of the entropy seed construction.

Draws random manual documents, changes one character of one field (or of
the PIN), and compares the two entropy seeds. A healthy construction
never maps two different inputs to the same seed, and since both shuffles
are re-keyed by the change, most character positions of the two seeds
differ.

The SHA-256 bit ratio is reported as well. It sits near one half for any
two different strings, so on its own it cannot tell a mixing
construction from plain concatenation; the position check can.

Usage:
    result = verify_avalanche()
    print(result["summary"])
    if not result["pass"]:
        raise RuntimeError("entropy seed construction is not mixing")
"""

import hashlib
import logging
import secrets
import string

from .entropy import construct_entropy_seed

logger = logging.getLogger(__name__)

# Mean flipped-bit ratio must land in this band
_RATIO_LOW = 0.45
_RATIO_HIGH = 0.55

# Mean fraction of seed positions that change must reach this
_POSITION_MIN = 0.5

_ALPHABETS = {
    "names": string.ascii_uppercase,
    "surname": string.ascii_uppercase,
    "birthDate": string.digits,
    "docNum": string.ascii_uppercase + string.digits,
}
_FIELD_LENGTHS = {"names": 6, "surname": 10, "birthDate": 8, "docNum": 9}


def _random_document():
    return {
        name: "".join(secrets.choice(alphabet) for _ in range(_FIELD_LENGTHS[name]))
        for name, alphabet in _ALPHABETS.items()
    }


def _mutate(value, alphabet):
    """Replace one character of ``value`` with a different one from ``alphabet``."""
    pos = secrets.randbelow(len(value))
    choices = [c for c in alphabet if c != value[pos]]
    return value[:pos] + secrets.choice(choices) + value[pos + 1:]


def _bit_ratio(a, b):
    da = hashlib.sha256(a.encode("utf-8")).digest()
    db = hashlib.sha256(b.encode("utf-8")).digest()
    flipped = sum(bin(x ^ y).count("1") for x, y in zip(da, db))
    return flipped / (len(da) * 8)


def _position_ratio(a, b):
    """Fraction of character positions at which two seeds differ."""
    longest = max(len(a), len(b))
    same = sum(x == y for x, y in zip(a, b))
    return (longest - same) / longest if longest else 0.0


def verify_avalanche(trials=64):
    """Run the audit.

    Args:
        trials: Number of (original, mutated) pairs to compare.

    Returns:
        dict with:
            "pass": bool
            "trials": int
            "identical": number of pairs that produced the same seed
            "mean_bit_ratio": mean fraction of differing digest bits
            "mean_position_ratio": mean fraction of differing seed positions
            "summary": human-readable summary string
    """
    identical = 0
    ratios = []
    positions = []
    names = list(_ALPHABETS) + ["pin"]

    for _ in range(trials):
        doc = _random_document()
        pin = "".join(secrets.choice(string.digits) for _ in range(6))
        target = secrets.choice(names)
        if target == "pin":
            other_doc, other_pin = doc, _mutate(pin, string.digits)
        else:
            other_doc = dict(doc)
            other_doc[target] = _mutate(doc[target], _ALPHABETS[target])
            other_pin = pin

        a = construct_entropy_seed(pin, doc)
        b = construct_entropy_seed(other_pin, other_doc)
        if a == b:
            identical += 1
        ratios.append(_bit_ratio(a, b))
        positions.append(_position_ratio(a, b))

    mean = sum(ratios) / len(ratios) if ratios else 0.0
    moved = sum(positions) / len(positions) if positions else 0.0
    mixing_pass = _RATIO_LOW <= mean <= _RATIO_HIGH
    moved_pass = moved >= _POSITION_MIN
    overall_pass = identical == 0 and mixing_pass and moved_pass

    lines = [
        f"Avalanche audit: {'PASS' if overall_pass else 'FAIL'}",
        f"Trials: {trials}",
        "",
        f"  [{'+' if identical == 0 else '!'}] {'distinct seeds':<20s} "
        f"{trials - identical}/{trials}",
        f"  [{'+' if mixing_pass else '!'}] {'digest bit ratio':<20s} "
        f"{mean:.4f} (expected {_RATIO_LOW}-{_RATIO_HIGH})",
        f"  [{'+' if moved_pass else '!'}] {'changed positions':<20s} "
        f"{moved:.4f} (expected >= {_POSITION_MIN})",
    ]
    if not overall_pass:
        lines.append("")
        lines.append("WARNING: small input changes are not spreading through the seed.")
    logger.debug("avalanche audit: %d trials, bit ratio %.4f, position ratio %.4f",
                 trials, mean, moved)

    return {
        "pass": overall_pass,
        "trials": trials,
        "identical": identical,
        "mean_bit_ratio": mean,
        "mean_position_ratio": moved,
        "summary": "\n".join(lines),
    }
