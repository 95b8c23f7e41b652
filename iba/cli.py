# Copyright (c) 2026 Signer — MIT License

"""Command-line interface: derive an Identity Bound Account.

Pass document fields as flags, or run without arguments for a guided,
interactive prompt.

Usage:
    iba --pin 123456 --names ERIKA --surname MUSTERMANN \\
        --doc-num L01X00T47 --birth-date 12081983
    iba --pin 123456 --row1 'P<D<<MUSTERMANN<<...' --row2 'C01X00T478D<<...'
    iba                                   # interactive
"""

import argparse
import getpass
import json
import logging
import re
import sys

from . import __version__
from .entropy import detect_kind, validate_input
from .seed import (
    CHAINS, DEFAULT_CHAIN, DEFAULT_KDF, DEFAULT_WORDS, KDFS, PHRASE_LENGTHS,
    derive_mnemonic, entropy_bits, fields_fingerprint, kdf_info, normalize_chain,
)

logger = logging.getLogger(__name__)

# (field, prompt label) in the order the interactive prompt asks for them
FIELDS = (
    ("names", "Given names"),
    ("surname", "Surname"),
    ("sex", "Sex"),
    ("birthDate", "Date of birth (DDMMYYYY)"),
    ("birthplace", "Birthplace"),
    ("origin", "Place of origin"),
    ("nationality", "Nationality"),
    ("docNum", "Document number"),
    ("authority", "Authority"),
    ("issueDate", "Date of issue (DDMMYYYY)"),
    ("expireDate", "Date of expiry (DDMMYYYY)"),
    ("address", "Address"),
    ("height", "Height"),
    ("weight", "Weight"),
    ("eyeColor", "Eye color"),
    ("hairColor", "Hair color"),
    ("motherNames", "Mother's given names"),
    ("motherSurname", "Mother's surname"),
    ("fatherNames", "Father's given names"),
    ("fatherSurname", "Father's surname"),
    ("misc1", "Miscellaneous field 1"),
    ("misc2", "Miscellaneous field 2"),
    ("misc3", "Miscellaneous field 3"),
)
ROWS = ("row1", "row2", "row3")


def _flag(field):
    """birthDate -> --birth-date"""
    return "--" + re.sub(r"([A-Z])", r"-\1", field).lower()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="iba",
        description="Generate an Identity Bound Account. Use flags to pass the "
                    "document directly, or run without arguments for an "
                    "interactive guided process.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--pin", help="PIN (4-12 digits)")

    manual = parser.add_argument_group("manual input")
    for field, label in FIELDS:
        manual.add_argument(_flag(field), dest=field, metavar=field.upper(), help=label)

    mrz = parser.add_argument_group("MRZ input (Type 1: three rows, Type 3: two rows)")
    for row in ROWS:
        mrz.add_argument(f"--{row}", dest=row, help=f"MRZ {row}")

    out = parser.add_argument_group("output")
    out.add_argument("--chain", default=DEFAULT_CHAIN, type=str.upper,
                     help=f"chain ({', '.join(CHAINS)}; default {DEFAULT_CHAIN})")
    out.add_argument("--words", default=DEFAULT_WORDS, type=int,
                     help=f"sentence length ({', '.join(map(str, PHRASE_LENGTHS))}; "
                          f"default {DEFAULT_WORDS})")
    out.add_argument("--kdf", default=DEFAULT_KDF, choices=KDFS,
                     help=f"key derivation function (default {DEFAULT_KDF})")
    out.add_argument("--legacy", action="store_true",
                     help="skip the KDF and reproduce a pre-KDF sentence")
    out.add_argument("--fingerprint", action="store_true",
                     help="also print the 4-character input fingerprint")
    out.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _document_from_args(args):
    rows = {row: getattr(args, row) for row in ROWS if getattr(args, row) is not None}
    if rows:
        return rows
    return {field: getattr(args, field) for field, _ in FIELDS
            if getattr(args, field) is not None}


def prompt_document(ask=input, ask_secret=getpass.getpass):
    """Interactive prompt. Returns (pin, document, options)."""
    print("Generate an Identity Bound Account.")
    print("Provide the data from your identity document, leave blank to skip.")
    pin = ask_secret("PIN (4-12 digits, required): ").strip()

    document = {}
    if ask("Read from the machine-readable zone? (y/N): ").strip().lower() == "y":
        for row in ROWS:
            value = ask(f"MRZ {row}: ").strip()
            if value:
                document[row] = value
    else:
        for field, label in FIELDS:
            value = ask(f"{label}: ").strip()
            if value:
                document[field] = value

    options = {
        "chain": ask("Blockchain ([ETH]/BTC/SOL): ").strip().upper() or DEFAULT_CHAIN,
        "words": ask("Sentence length ([12]/18/24): ").strip() or str(DEFAULT_WORDS),
    }
    return pin, document, options


def run(pin, document, chain=DEFAULT_CHAIN, words=DEFAULT_WORDS, kdf=DEFAULT_KDF,
        legacy=False, fingerprint=False, as_json=False, out=None):
    """Derive and print. Returns the process exit status."""
    out = out or sys.stdout
    if not pin or not document:
        print("error: a pin and at least one other field must be provided", file=sys.stderr)
        return 1

    try:
        words = int(words)
        entropy_bits(words)
        chain = normalize_chain(chain)
        kind = detect_kind(document)
        pin, fields = validate_input(document, pin)
        logger.debug("deriving from %s input", kind.value)
        sentence = derive_mnemonic(pin, fields, words=words, chain=chain,
                                   kdf=None if legacy else kdf)
        fp = fields_fingerprint(pin, fields) if fingerprint or as_json else None
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if as_json:
        json.dump({
            "mnemonic": sentence,
            "fingerprint": fp,
            "document": kind.value,
            "chain": chain,
            "words": words,
            "kdf": "none" if legacy else kdf_info(kdf),
        }, out, indent=2)
        out.write("\n")
    else:
        if fingerprint:
            print(f"fingerprint: {fp}", file=out)
        print(sentence, file=out)
    return 0


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not argv:
        pin, document, options = prompt_document()
        return run(pin, document, chain=options["chain"], words=options["words"])

    return run(
        args.pin,
        _document_from_args(args),
        chain=args.chain,
        words=args.words,
        kdf=args.kdf,
        legacy=args.legacy,
        fingerprint=args.fingerprint,
        as_json=args.json,
    )


if __name__ == "__main__":
    sys.exit(main())
