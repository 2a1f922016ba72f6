"""
Pedersen verifiable secret sharing with word-phrase shares.

Composes the pieces in pvss.crypto:

    split:        chunk -> polynomial + commitments -> payloads -> phrases
    verify:       phrases -> payloads -> commitment check
    reconstruct:  phrases -> payloads -> Lagrange interpolation -> chunks

Each share is a pair of phrases. Key carries the share's ID and its value
for every chunk; KeyCheck carries the threshold, chunk count and all
commitments, and is identical for every share of one split.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence

from ..crypto.curve import P256, Curve
from ..crypto.errors import (
    ChunkCountMismatchError,
    DuplicateShareIDError,
    EmptySecretError,
    InsufficientSharesError,
    InvalidChecksumError,
    InvalidShareCountError,
    InvalidThresholdError,
    MetadataMismatchError,
    NoSharesError,
    SecretTooLongError,
    ShareFormatError,
)
from ..crypto.mnemonic import MnemonicEncoder, bip39_english
from ..crypto.payload import Metadata, ShareData
from ..crypto.shamir import (
    CHUNK_SIZE,
    RandomSource,
    chunk_secret,
    chunk_to_value,
    evaluate_polynomial,
    expected_commitment,
    generate_commitments,
    generate_polynomial,
    lagrange_interpolation,
    value_to_chunk,
)


logger = logging.getLogger(__name__)

# Share IDs and chunk counts are stored in one byte.
MAX_SHARES = 255
MAX_CHUNKS = 255
MAX_SECRET_SIZE = MAX_CHUNKS * CHUNK_SIZE


@dataclass(frozen=True)
class Share:
    """
    A single share, as two word phrases.

    Attributes:
        key: Phrase encoding this share's ID and per-chunk values
        key_check: Phrase encoding the split's metadata (same for all shares)
    """

    key: str
    key_check: str

    def to_text(self) -> str:
        """
        Serialize to text.

        Format: key phrase on the first line, key check phrase on the second.
        """
        return f"{self.key}\n{self.key_check}\n"

    @classmethod
    def from_text(cls, text: str) -> "Share":
        """
        Deserialize from text. Blank lines are ignored.

        Raises:
            ShareFormatError: If there are not exactly two phrases
        """
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if len(lines) != 2:
            raise ShareFormatError(
                f"Share text must have 2 lines, got {len(lines)}"
            )
        return cls(key=lines[0], key_check=lines[1])


class PedersenVSS:
    """
    Splits, verifies and reconstructs secrets.

    The curve, word list and random source are fixed at construction and
    never modified, so one instance can serve concurrent callers.

    Example:
        >>> vss = PedersenVSS()
        >>> shares = vss.split_secret("hello", num_shares=5, threshold=3)
        >>> vss.verify_share(shares[0])
        True
        >>> vss.reconstruct_secret(shares[1:4])
        b'hello'
    """

    def __init__(
        self,
        curve: Curve = P256,
        word_list: Optional[Sequence[str]] = None,
        random_source: Optional[RandomSource] = None,
    ):
        self.curve = curve
        if word_list is None:
            word_list = bip39_english()
        self.encoder = MnemonicEncoder(word_list)
        self.random_source = random_source or secrets.randbelow

    # --- Phrase handling ---

    def _encode_phrase(self, payload: bytes) -> str:
        return self.encoder.add_checksum(self.encoder.encode(payload))

    def _decode_phrase(self, phrase: str, what: str) -> bytes:
        inner, valid = self.encoder.verify_checksum(phrase)
        if not valid:
            raise InvalidChecksumError(f"Invalid {what} phrase checksum")
        return self.encoder.decode(inner)

    def decode_share_data(self, share: Share) -> ShareData:
        """Decode a share's Key phrase."""
        return ShareData.from_bytes(self._decode_phrase(share.key, "share"))

    def decode_metadata(self, share: Share) -> Metadata:
        """Decode a share's KeyCheck phrase."""
        return Metadata.from_bytes(
            self._decode_phrase(share.key_check, "metadata"), self.curve
        )

    # --- Operations ---

    def split_secret(
        self, secret: str | bytes, num_shares: int, threshold: int
    ) -> list[Share]:
        """
        Split a secret into num_shares shares with the given threshold.

        Args:
            secret: Secret to split; text is UTF-8 encoded
            num_shares: Total number of shares (1..255)
            threshold: Minimum shares needed for reconstruction (1..num_shares)

        Returns:
            List of Share objects; share i has ID i + 1

        Raises:
            ValidationError: If parameters are invalid
            CommitmentError: If a chunk is all zero bytes (for example a
                secret starting with 31 zero bytes), since its commitment
                would be the point at infinity
            RandomSourceError: If the random source fails
        """
        if isinstance(secret, str):
            secret = secret.encode("utf-8")

        if threshold > num_shares:
            raise InvalidThresholdError(
                "Threshold cannot be greater than number of shares"
            )
        if threshold < 1:
            raise InvalidThresholdError("Threshold must be at least 1")
        if num_shares < 1:
            raise InvalidShareCountError("Number of shares must be at least 1")
        if num_shares > MAX_SHARES:
            raise InvalidShareCountError(
                f"Number of shares cannot exceed {MAX_SHARES}"
            )
        if not secret:
            raise EmptySecretError("Secret cannot be empty")
        if len(secret) > MAX_SECRET_SIZE:
            raise SecretTooLongError(
                f"Secret cannot exceed {MAX_SECRET_SIZE} bytes, got {len(secret)}"
            )

        order = self.curve.order
        chunks = chunk_secret(secret)
        logger.debug(
            "Splitting %d-byte secret into %d chunk(s), %d shares, threshold %d",
            len(secret),
            len(chunks),
            num_shares,
            threshold,
        )

        share_ids = range(1, num_shares + 1)
        share_values: dict[int, list[int]] = {x: [] for x in share_ids}
        all_commitments = []

        for chunk in chunks:
            coefficients = generate_polynomial(
                chunk_to_value(chunk, order), threshold, order, self.random_source
            )
            commitments = generate_commitments(coefficients, self.curve)
            all_commitments.append(tuple(commitments))

            for x in share_ids:
                share_values[x].append(evaluate_polynomial(coefficients, x, order))

        metadata = Metadata(
            threshold=threshold,
            chunk_count=len(chunks),
            commitments=tuple(all_commitments),
        )
        key_check = self._encode_phrase(metadata.to_bytes())

        shares = []
        for x in share_ids:
            share_data = ShareData(share_id=x, values=tuple(share_values[x]))
            key = self._encode_phrase(share_data.to_bytes())
            shares.append(Share(key=key, key_check=key_check))

        return shares

    def verify_share(self, share: Share) -> bool:
        """
        Check a share against its commitments.

        For every chunk, f(x) * G must equal sum_i x^i * C_i.

        Returns:
            True if every chunk matches, False if any does not

        Raises:
            InvalidChecksumError: If either phrase fails its checksum
            MnemonicError / PayloadError: If a phrase cannot be decoded
            ChunkCountMismatchError: If the share and metadata disagree on
                the number of chunks
        """
        share_data = self.decode_share_data(share)
        metadata = self.decode_metadata(share)

        if len(share_data.values) != metadata.chunk_count:
            raise ChunkCountMismatchError(
                f"Share has {len(share_data.values)} chunks, "
                f"metadata expects {metadata.chunk_count}"
            )

        x = share_data.share_id
        for chunk_index, (value, commitments) in enumerate(
            zip(share_data.values, metadata.commitments)
        ):
            expected = expected_commitment(commitments, x, self.curve)
            actual = self.curve.scalar_base_multiply(value)

            if expected != actual:
                logger.warning(
                    "Share %d failed commitment check on chunk %d", x, chunk_index
                )
                return False

        logger.debug("Share %d verified (%d chunk(s))", x, metadata.chunk_count)
        return True

    def reconstruct_secret(self, shares: Sequence[Share]) -> bytes:
        """
        Reconstruct the secret from threshold or more shares.

        Every provided share takes part in the interpolation. Commitments
        are not checked here; call verify_share() first to detect tampering.

        Returns:
            The secret bytes

        Raises:
            NoSharesError: If shares is empty
            InsufficientSharesError: If fewer than threshold shares are given
            MetadataMismatchError: If shares come from different splits
            ChunkCountMismatchError: If a share's chunk count is wrong
            DuplicateShareIDError: If two shares have the same ID
            InvalidChecksumError / MnemonicError / PayloadError: If a share
                cannot be decoded
        """
        if not shares:
            raise NoSharesError("No shares provided")

        metadata = self.decode_metadata(shares[0])
        if len(shares) < metadata.threshold:
            raise InsufficientSharesError(
                f"Insufficient shares: need {metadata.threshold}, got {len(shares)}"
            )

        reference = shares[0].key_check.split()
        share_data_list = []

        for i, share in enumerate(shares):
            if share.key_check.split() != reference:
                raise MetadataMismatchError(f"Share {i} belongs to a different split")

            share_data = self.decode_share_data(share)
            if len(share_data.values) != metadata.chunk_count:
                raise ChunkCountMismatchError(
                    f"Share {i} has {len(share_data.values)} chunks, "
                    f"expected {metadata.chunk_count}"
                )
            share_data_list.append(share_data)

        share_ids = [d.share_id for d in share_data_list]
        seen: set[int] = set()
        for share_id in share_ids:
            if share_id in seen:
                raise DuplicateShareIDError(share_id)
            seen.add(share_id)

        order = self.curve.order
        last = metadata.chunk_count - 1
        chunks = []

        for chunk_index in range(metadata.chunk_count):
            values = [d.values[chunk_index] for d in share_data_list]
            value = lagrange_interpolation(values, share_ids, order)

            # Every chunk but the last was exactly CHUNK_SIZE bytes wide.
            width = CHUNK_SIZE if chunk_index < last else 0
            chunks.append(value_to_chunk(value, width))

        logger.debug(
            "Reconstructed %d chunk(s) from %d shares",
            metadata.chunk_count,
            len(shares),
        )
        return b"".join(chunks)
