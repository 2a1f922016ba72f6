"""Tests for share and metadata binary layouts."""

import pytest

from pvss.crypto.curve import P256
from pvss.crypto.errors import (
    InsufficientDataError,
    InsufficientLengthByteError,
    InsufficientValueDataError,
    InvalidParityError,
    InvalidThresholdOrChunkCountError,
    SizeMismatchError,
)
from pvss.crypto.payload import Metadata, ShareData, metadata_size
from pvss.crypto.points import compress_point


class TestShareData:
    """Tests for [id][count]{[len][value]}* payloads."""

    def test_to_bytes_layout(self):
        data = ShareData(share_id=3, values=(0x0102, 0, 0xFF))

        assert data.to_bytes() == bytes([3, 3, 2, 0x01, 0x02, 0, 1, 0xFF])

    def test_no_chunks(self):
        assert ShareData(share_id=7, values=()).to_bytes() == b"\x07\x00"
        assert ShareData.from_bytes(b"\x07\x00") == ShareData(share_id=7, values=())

    def test_to_bytes_and_from_bytes(self):
        """Round-trip serialization should preserve values."""
        share = ShareData(share_id=200, values=(P256.order - 1, 1, 2**100))

        assert ShareData.from_bytes(share.to_bytes()) == share

    def test_zero_length_value_is_zero(self):
        assert ShareData.from_bytes(bytes([1, 2, 0, 1, 5])).values == (0, 5)

    def test_trailing_bytes_ignored(self):
        data = ShareData.from_bytes(bytes([1, 1, 1, 9, 0xAA, 0xBB]))

        assert data == ShareData(share_id=1, values=(9,))

    @pytest.mark.parametrize("raw", [b"", b"\x01"])
    def test_missing_header(self, raw):
        with pytest.raises(InsufficientDataError, match="too short"):
            ShareData.from_bytes(raw)

    def test_missing_length_byte(self):
        # Claims two chunks, holds one
        with pytest.raises(InsufficientLengthByteError):
            ShareData.from_bytes(bytes([1, 2, 1, 9]))

    def test_truncated_value(self):
        with pytest.raises(InsufficientValueDataError):
            ShareData.from_bytes(bytes([1, 1, 5, 0x01, 0x02]))


class TestMetadata:
    """Tests for [threshold][count]{point}* payloads."""

    @pytest.fixture
    def metadata(self):
        points = [P256.scalar_base_multiply(k) for k in (1, 2, 3, 4, 5, 6)]
        return Metadata(
            threshold=3,
            chunk_count=2,
            commitments=(tuple(points[:3]), tuple(points[3:])),
        )

    def test_to_bytes_layout(self, metadata):
        data = metadata.to_bytes()

        assert len(data) == metadata_size(3, 2) == 2 + 6 * 33
        assert data[:2] == bytes([3, 2])
        # chunk-major, coefficient-minor
        assert data[2:35] == compress_point(P256.scalar_base_multiply(1))
        assert data[101:134] == compress_point(P256.scalar_base_multiply(4))

    def test_to_bytes_and_from_bytes(self, metadata):
        assert Metadata.from_bytes(metadata.to_bytes(), P256) == metadata

    @pytest.mark.parametrize("header", [b"\x00\x01", b"\x01\x00", b"\x00\x00"])
    def test_zero_threshold_or_chunk_count(self, header):
        with pytest.raises(InvalidThresholdOrChunkCountError):
            Metadata.from_bytes(header, P256)

    def test_missing_header(self):
        with pytest.raises(InsufficientDataError):
            Metadata.from_bytes(b"\x01", P256)

    def test_size_mismatch(self, metadata):
        data = metadata.to_bytes()

        with pytest.raises(SizeMismatchError, match="expected 200, got 199"):
            Metadata.from_bytes(data[:-1], P256)
        with pytest.raises(SizeMismatchError):
            Metadata.from_bytes(data + b"\x00", P256)

    def test_invalid_commitment(self, metadata):
        data = bytearray(metadata.to_bytes())
        data[2] = 0x05

        with pytest.raises(InvalidParityError):
            Metadata.from_bytes(bytes(data), P256)
