# Copyright (c) 2026 Signer — MIT License

"""Errors raised while turning identity documents into seeds.

Every error carries the full list of violations so a caller can fix all
of them in one pass. ``str(err)`` joins them with ``"; "``.
"""


class IdentityError(ValueError):
    """Base class for all input errors."""

    def __init__(self, violations):
        if isinstance(violations, str):
            violations = [violations]
        self.violations = list(violations)
        self.message = "; ".join(self.violations)
        super().__init__(self.message)


class ValidationError(IdentityError):
    """Raised when a document fails validation."""


class LengthError(ValidationError):
    """MRZ rows are missing or have the wrong width."""


class GrammarError(ValidationError):
    """One or more fields or MRZ slots violate their character class."""


class MissingSecretError(ValidationError):
    """PIN absent, or not 4 to 12 ASCII digits."""


class InsufficientFieldsError(ValidationError):
    """PIN present but no other field to bind to."""


class UnsupportedChainError(IdentityError):
    def __init__(self, chain, supported):
        super().__init__(
            f"unsupported chain '{chain}', available options: {', '.join(supported)}"
        )
        self.chain = chain


class UnsupportedPhraseLengthError(IdentityError):
    def __init__(self, words, supported):
        super().__init__(
            f"unsupported phrase length {words}, must be one of "
            + ", ".join(str(n) for n in supported)
        )
        self.words = words
