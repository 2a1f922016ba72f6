"""
Exception hierarchy for Pedersen verifiable secret sharing.

Categories:
    - ValidationError: bad split parameters, rejected before any work
    - MnemonicError / PayloadError: phrase or binary payload cannot be decoded
    - InvalidChecksumError: the checksum word of a phrase does not match
    - CryptographicError: curve or field arithmetic cannot proceed
    - ConsistencyError: shares disagree with each other or with metadata

Everything except CryptographicError is also a ValueError, so callers that
only care about "bad input" can catch that.
"""


class PVSSError(Exception):
    """Base class for all secret sharing errors."""


# --- Validation ---


class ValidationError(PVSSError, ValueError):
    """Split parameters rejected before any work begins."""


class InvalidThresholdError(ValidationError):
    pass


class InvalidShareCountError(ValidationError):
    pass


class EmptySecretError(ValidationError):
    pass


class SecretTooLongError(ValidationError):
    pass


# --- Decoding ---


class MnemonicError(PVSSError, ValueError):
    """Word phrase cannot be encoded or decoded."""


class EmptyInputError(MnemonicError):
    pass


class InvalidWordListError(MnemonicError):
    pass


class UnknownWordError(MnemonicError):
    """A token of the phrase is not in the word list."""

    def __init__(self, word: str):
        super().__init__(f"Unknown word: {word!r}")
        self.word = word


class InvalidChecksumError(PVSSError, ValueError):
    """The last word of a phrase is not its checksum word."""


class PayloadError(PVSSError, ValueError):
    """Binary share or metadata payload is malformed."""


class InsufficientDataError(PayloadError):
    pass


class InsufficientLengthByteError(PayloadError):
    pass


class InsufficientValueDataError(PayloadError):
    pass


class InvalidThresholdOrChunkCountError(PayloadError):
    pass


class SizeMismatchError(PayloadError):
    pass


class InvalidPointLengthError(PayloadError):
    pass


class InvalidParityError(PayloadError):
    pass


class ShareFormatError(PayloadError):
    pass


# --- Cryptographic ---


class CryptographicError(PVSSError):
    """Curve or scalar field arithmetic failed."""


class PointNotOnCurveError(CryptographicError):
    pass


class NoModularInverseError(CryptographicError):
    """A Lagrange denominator is zero modulo the curve order."""

    def __init__(self, share_id: int):
        super().__init__(f"No modular inverse for share {share_id}")
        self.share_id = share_id


class CommitmentError(CryptographicError):
    pass


class RandomSourceError(CryptographicError):
    pass


# --- Consistency ---


class ConsistencyError(PVSSError, ValueError):
    """Shares disagree with each other or with their metadata."""


class ChunkCountMismatchError(ConsistencyError):
    pass


class DuplicateShareIDError(ConsistencyError):
    def __init__(self, share_id: int):
        super().__init__(f"Duplicate share ID: {share_id}")
        self.share_id = share_id


class InsufficientSharesError(ConsistencyError):
    pass


class NoSharesError(ConsistencyError):
    pass


class MismatchedInputsError(ConsistencyError):
    pass


class MetadataMismatchError(ConsistencyError):
    pass
