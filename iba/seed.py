# Copyright (c) 2026 Signer — MIT License

"""Seed derivation for Identity Bound Accounts.

Binds a mnemonic sentence to an identity document and a PIN. The same
document and PIN always produce the same sentence; any change to either
produces an unrelated one.

Derivation is layered:
    1. Validation: manual fields or MRZ rows become a canonical,
       order-stable field sequence (see iba.manual, iba.mrz)
    2. Entropy seed: fields and PIN are mixed by a keyed double
       shuffle (see iba.entropy)
    3. Identity secret: SHA-256 of the joined canonical fields,
       used as the KDF salt so the key is bound to the document
    4. Key stretching: scrypt (N=2^13, r=8, p=1) by default, or
       Argon2id (64 MiB, 3 iterations) for hardened derivation
    5. Chain hash: SHA-256 (BTC), Keccak-256 (ETH) or SHA-512 (SOL)
    6. Mnemonic: the digest is truncated to 128/192/256 bits and
       encoded as a 12/18/24-word BIP-39 sentence

Usage:
    from iba.seed import bind_account, get_fingerprint
    doc = {"names": "ERIKA", "surname": "MUSTERMANN",
           "docNum": "L01X00T47", "birthDate": "12081983"}
    sentence = bind_account("123456", doc)                      # 12 words, ETH
    sentence = bind_account("123456", doc, words=24, chain="BTC")
    fp = get_fingerprint("123456", doc)                         # "A3F1"
"""

import hashlib
import hmac
import logging
import time
import unicodedata

from argon2.low_level import hash_secret_raw, Type as _Argon2Type
from Crypto.Hash import keccak
from mnemonic import Mnemonic

from .entropy import construct_entropy_seed, validate_input
from .errors import UnsupportedChainError, UnsupportedPhraseLengthError

logger = logging.getLogger(__name__)

# Domain separator: keys from this system never collide with keys
# derived by other systems from the same inputs.
_DOMAIN = b"identity-bound-account-v1"

# scrypt parameters (default KDF)
_SCRYPT_N = 2 ** 13      # work factor
_SCRYPT_R = 8            # block size
_SCRYPT_P = 1            # parallelization
_SCRYPT_DKLEN = 64       # output bytes

# Argon2id parameters (hardened KDF)
_ARGON2_TIME = 3         # iterations
_ARGON2_MEMORY = 65536   # 64 MiB
_ARGON2_PARALLEL = 4     # lanes
_ARGON2_HASHLEN = 64     # output bytes

KDFS = ("scrypt", "argon2id")
DEFAULT_KDF = "scrypt"

# Words -> entropy bits
PHRASE_LENGTHS = {12: 128, 18: 192, 24: 256}
DEFAULT_WORDS = 12

CHAINS = ("ETH", "BTC", "SOL")
DEFAULT_CHAIN = "ETH"

_MNEMONIC = Mnemonic("english")


def _keccak256(data):
    return keccak.new(digest_bits=256, data=data).digest()


def _sha256(data):
    return hashlib.sha256(data).digest()


def _sha512(data):
    return hashlib.sha512(data).digest()


_CHAIN_HASHES = {
    "ETH": _keccak256,
    "BTC": _sha256,
    "SOL": _sha512,
}


def normalize_chain(chain):
    """Return the canonical chain name, or raise UnsupportedChainError."""
    key = chain.upper() if isinstance(chain, str) else chain
    if key not in _CHAIN_HASHES:
        raise UnsupportedChainError(chain, CHAINS)
    return key


def chain_hash(data, chain=DEFAULT_CHAIN):
    """Hash bytes with the algorithm of the given chain.

    BTC -> SHA-256, ETH -> Keccak-256, SOL -> SHA-512.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _CHAIN_HASHES[normalize_chain(chain)](data)


def entropy_bits(words):
    """Entropy size in bits for a sentence of ``words`` words (12, 18 or 24)."""
    try:
        return PHRASE_LENGTHS[words]
    except (KeyError, TypeError):
        raise UnsupportedPhraseLengthError(words, tuple(PHRASE_LENGTHS)) from None


def identity_secret(fields):
    """Hex SHA-256 of the joined canonical field values."""
    values = fields.values() if hasattr(fields, "values") else fields
    return hashlib.sha256("".join(values).encode("utf-8")).hexdigest()


def stretch(passphrase, identity, kdf=DEFAULT_KDF):
    """Run the KDF stage.

    The passphrase is NFKD-normalized before use. The salt is the domain
    tag, the KDF name and the identity secret, so the same passphrase
    bound to two different documents gives two unrelated keys.

    Args:
        passphrase: Secret input (the entropy seed in bind_account).
        identity: Identity secret string (see identity_secret).
        kdf: "scrypt" or "argon2id".

    Returns:
        64 bytes of key material.
    """
    if kdf not in KDFS:
        raise ValueError(f"kdf must be one of {', '.join(KDFS)}")
    password = unicodedata.normalize("NFKD", passphrase).encode("utf-8")
    salt = _DOMAIN + b"-" + kdf.encode("ascii") + b"-" + identity.encode("utf-8")

    t0 = time.perf_counter()
    if kdf == "scrypt":
        key = hashlib.scrypt(
            password,
            salt=salt,
            n=_SCRYPT_N,
            r=_SCRYPT_R,
            p=_SCRYPT_P,
            dklen=_SCRYPT_DKLEN,
        )
    else:
        key = hash_secret_raw(
            secret=password,
            salt=salt,
            time_cost=_ARGON2_TIME,
            memory_cost=_ARGON2_MEMORY,
            parallelism=_ARGON2_PARALLEL,
            hash_len=_ARGON2_HASHLEN,
            type=_Argon2Type.ID,
        )
    logger.debug("%s stretch took %.2fms", kdf, (time.perf_counter() - t0) * 1000)
    return key


def to_mnemonic(entropy, words=DEFAULT_WORDS):
    """Truncate entropy to the bit length for ``words`` and encode it as BIP-39.

    Raises:
        UnsupportedPhraseLengthError: words not in 12/18/24.
        ValueError: not enough entropy bytes.
        RuntimeError: the encoded sentence fails its own checksum.
    """
    n_bytes = entropy_bits(words) // 8
    if len(entropy) < n_bytes:
        raise ValueError(f"{words} words need {n_bytes} bytes of entropy, got {len(entropy)}")
    sentence = _MNEMONIC.to_mnemonic(bytes(entropy[:n_bytes]))
    if not _MNEMONIC.check(sentence):
        raise RuntimeError(f"invalid mnemonic generated for {words} words")
    return sentence


def verify_mnemonic(sentence):
    """True if ``sentence`` is a valid English BIP-39 sentence."""
    return bool(_MNEMONIC.check(" ".join(sentence.split())))


def _hash_and_wipe(key, chain):
    """Chain-hash a bytearray key, then overwrite it with zeros."""
    try:
        return chain_hash(bytes(key), chain)
    finally:
        key[:] = bytes(len(key))


def derive_mnemonic(pin, fields, words=DEFAULT_WORDS, chain=DEFAULT_CHAIN, kdf=DEFAULT_KDF):
    """Stages 2 to 6 on an already validated (pin, fields) pair.

    ``kdf=None`` skips key stretching and encodes the chain hash of the
    entropy seed directly, as sentences created before the KDF stage were.
    Intermediate key material is kept in a bytearray and overwritten once
    hashed. Immutable copies returned by hashlib and argon2 cannot be
    wiped and are left to the garbage collector.
    """
    entropy_bits(words)
    chain = normalize_chain(chain)

    seed = construct_entropy_seed(pin, fields)
    if kdf is None:
        return to_mnemonic(chain_hash(seed, chain), words)

    digest = _hash_and_wipe(bytearray(stretch(seed, identity_secret(fields), kdf)), chain)
    logger.debug("bound %d-word %s account (%s)", words, chain, kdf)
    return to_mnemonic(digest, words)


def bind_account(pin, document, words=DEFAULT_WORDS, chain=DEFAULT_CHAIN, kdf=DEFAULT_KDF):
    """Derive the mnemonic sentence bound to a document and a PIN.

    Args:
        pin: 4 to 12 digit PIN. May be None if the document mapping
             carries a ``pin`` key.
        document: Manual field mapping, or MRZ rows
                  ({row1, row2, row3} or {row1, row2}).
        words: 12, 18 or 24.
        chain: "ETH", "BTC" or "SOL".
        kdf: "scrypt" or "argon2id".

    Returns:
        Space-separated mnemonic sentence.
    """
    # Cheap argument checks first, the KDF is the expensive part
    entropy_bits(words)
    normalize_chain(chain)
    if kdf not in KDFS:
        raise ValueError(f"kdf must be one of {', '.join(KDFS)}")

    pin, fields = validate_input(document, pin)
    return derive_mnemonic(pin, fields, words=words, chain=chain, kdf=kdf)


def legacy_mnemonic(pin, document, words=DEFAULT_WORDS, chain=DEFAULT_CHAIN):
    """Mnemonic from the chain hash of the entropy seed, without a KDF.

    Reproduces sentences created before key stretching was added. Do not
    use for new accounts.
    """
    entropy_bits(words)
    normalize_chain(chain)
    pin, fields = validate_input(document, pin)
    return derive_mnemonic(pin, fields, words=words, chain=chain, kdf=None)


def fields_fingerprint(pin, fields):
    """Fingerprint of an already validated (pin, fields) pair."""
    payload = "".join(fields.values()).encode("utf-8") + b"\x00" + pin.encode("ascii")
    key = hmac.new(_DOMAIN, payload, hashlib.sha512).digest()
    return key[:2].hex().upper()


def get_fingerprint(pin, document):
    """Compute a short visual fingerprint for an input.

    Instant (HMAC only). Two entries of the same document and PIN show
    the same fingerprint, so a typo is visible before the slow KDF runs.

    Returns:
        4-char uppercase hex string, e.g. "A3F1".
    """
    pin, fields = validate_input(document, pin)
    return fields_fingerprint(pin, fields)


def kdf_info(kdf=DEFAULT_KDF):
    """Return a string describing the KDF parameters."""
    if kdf == "scrypt":
        return f"scrypt (N=2^{_SCRYPT_N.bit_length() - 1}, r={_SCRYPT_R}, p={_SCRYPT_P})"
    if kdf == "argon2id":
        return (f"Argon2id (mem={_ARGON2_MEMORY}KB, t={_ARGON2_TIME}, "
                f"p={_ARGON2_PARALLEL})")
    raise ValueError(f"kdf must be one of {', '.join(KDFS)}")
