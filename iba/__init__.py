# Copyright (c) 2026 Signer — MIT License

"""Identity Bound Accounts: mnemonic sentences bound to an identity document and a PIN."""

__version__ = "1.0"

from .entropy import (
    DocumentInput,
    DocumentKind,
    construct_entropy_seed,
    parse_input,
    validate_input,
    validate_pin,
)
from .errors import (
    GrammarError,
    IdentityError,
    InsufficientFieldsError,
    LengthError,
    MissingSecretError,
    UnsupportedChainError,
    UnsupportedPhraseLengthError,
    ValidationError,
)
from .manual import validate_manual
from .mrz import validate_mrz
from .seed import (
    bind_account,
    chain_hash,
    derive_mnemonic,
    fields_fingerprint,
    get_fingerprint,
    identity_secret,
    kdf_info,
    legacy_mnemonic,
    verify_mnemonic,
)

__all__ = [
    "DocumentInput",
    "DocumentKind",
    "construct_entropy_seed",
    "parse_input",
    "validate_input",
    "validate_pin",
    "validate_manual",
    "validate_mrz",
    "bind_account",
    "legacy_mnemonic",
    "chain_hash",
    "derive_mnemonic",
    "fields_fingerprint",
    "get_fingerprint",
    "identity_secret",
    "kdf_info",
    "verify_mnemonic",
    "IdentityError",
    "ValidationError",
    "LengthError",
    "GrammarError",
    "MissingSecretError",
    "InsufficientFieldsError",
    "UnsupportedChainError",
    "UnsupportedPhraseLengthError",
]
