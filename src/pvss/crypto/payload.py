"""
Binary layouts for share and metadata payloads.

Share data (one per share):
    - 1 byte: share ID
    - 1 byte: chunk count
    - per chunk: 1 byte value length, then the value (minimal big-endian)

Metadata (identical for every share of one split):
    - 1 byte: threshold
    - 1 byte: chunk count
    - threshold * chunk count compressed points, chunk-major
"""

from dataclasses import dataclass

from ecdsa.ellipticcurve import Point

from .curve import Curve
from .errors import (
    InsufficientDataError,
    InsufficientLengthByteError,
    InsufficientValueDataError,
    InvalidThresholdOrChunkCountError,
    SizeMismatchError,
)
from .points import COMPRESSED_POINT_SIZE, compress_point, decompress_point


HEADER_SIZE = 2


@dataclass(frozen=True)
class ShareData:
    """
    One share's evaluations, one value per chunk.

    Attributes:
        share_id: Evaluation point x (1..255)
        values: f_c(x) for every chunk c, in chunk order
    """

    share_id: int
    values: tuple[int, ...]

    def to_bytes(self) -> bytes:
        """
        Serialize to binary format.

        Format: [id][count]{[len][value]}*count; no chunks encodes as [id, 0].
        """
        result = bytearray([self.share_id, len(self.values)])

        for value in self.values:
            value_bytes = value.to_bytes((value.bit_length() + 7) // 8, byteorder="big")
            result.append(len(value_bytes))
            result += value_bytes

        return bytes(result)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ShareData":
        """
        Deserialize from binary format. Bytes after the last value are ignored.

        Raises:
            InsufficientDataError: If the 2-byte header is missing
            InsufficientLengthByteError: If a value's length byte is missing
            InsufficientValueDataError: If a value is cut short
        """
        if len(data) < HEADER_SIZE:
            raise InsufficientDataError(
                f"Share data too short: got {len(data)}, minimum {HEADER_SIZE}"
            )

        share_id = data[0]
        chunk_count = data[1]

        values = []
        offset = HEADER_SIZE

        for i in range(chunk_count):
            if offset >= len(data):
                raise InsufficientLengthByteError(f"Missing length byte for value {i}")

            length = data[offset]
            offset += 1

            if offset + length > len(data):
                raise InsufficientValueDataError(
                    f"Value {i} needs {length} bytes, {len(data) - offset} left"
                )

            value = int.from_bytes(data[offset : offset + length], byteorder="big")
            values.append(value)
            offset += length

        return cls(share_id=share_id, values=tuple(values))


@dataclass(frozen=True)
class Metadata:
    """
    Commitments shared by all shares of one split.

    Attributes:
        threshold: Shares needed to reconstruct
        chunk_count: Number of secret chunks
        commitments: For each chunk, one point per polynomial coefficient
    """

    threshold: int
    chunk_count: int
    commitments: tuple[tuple[Point, ...], ...]

    def to_bytes(self) -> bytes:
        """Serialize to binary format (see module docstring)."""
        result = bytearray([self.threshold, self.chunk_count])

        for chunk_commitments in self.commitments:
            for commitment in chunk_commitments:
                result += compress_point(commitment)

        return bytes(result)

    @classmethod
    def from_bytes(cls, data: bytes, curve: Curve) -> "Metadata":
        """
        Deserialize from binary format.

        Args:
            data: Binary data from to_bytes()
            curve: Curve the commitments lie on

        Raises:
            InsufficientDataError: If the 2-byte header is missing
            InvalidThresholdOrChunkCountError: If either header field is 0
            SizeMismatchError: If the length is not exactly
                2 + threshold * chunk_count * 33
            PayloadError / PointNotOnCurveError: If a commitment is invalid
        """
        if len(data) < HEADER_SIZE:
            raise InsufficientDataError(
                f"Metadata too short: got {len(data)}, minimum {HEADER_SIZE}"
            )

        threshold = data[0]
        chunk_count = data[1]

        if threshold < 1 or chunk_count < 1:
            raise InvalidThresholdOrChunkCountError(
                f"Invalid threshold ({threshold}) or chunk count ({chunk_count})"
            )

        expected = metadata_size(threshold, chunk_count)
        if len(data) != expected:
            raise SizeMismatchError(
                f"Metadata size mismatch: expected {expected}, got {len(data)}"
            )

        commitments = []
        offset = HEADER_SIZE

        for _ in range(chunk_count):
            chunk_commitments = []
            for _ in range(threshold):
                point_bytes = data[offset : offset + COMPRESSED_POINT_SIZE]
                chunk_commitments.append(decompress_point(point_bytes, curve))
                offset += COMPRESSED_POINT_SIZE
            commitments.append(tuple(chunk_commitments))

        return cls(
            threshold=threshold,
            chunk_count=chunk_count,
            commitments=tuple(commitments),
        )


def metadata_size(threshold: int, chunk_count: int) -> int:
    """Exact byte length of a metadata payload."""
    return HEADER_SIZE + threshold * chunk_count * COMPRESSED_POINT_SIZE
