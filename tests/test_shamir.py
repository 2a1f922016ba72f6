"""Tests for the Shamir / Pedersen sharing arithmetic."""

import pytest
from ecdsa.ellipticcurve import INFINITY

from pvss.crypto.curve import P256
from pvss.crypto.errors import (
    CommitmentError,
    InvalidThresholdError,
    MismatchedInputsError,
    NoModularInverseError,
    NoSharesError,
    RandomSourceError,
)
from pvss.crypto.shamir import (
    CHUNK_SIZE,
    chunk_secret,
    chunk_to_value,
    evaluate_polynomial,
    expected_commitment,
    generate_commitments,
    generate_polynomial,
    lagrange_interpolation,
    mod_inverse,
    value_to_chunk,
)


ORDER = P256.order


class TestChunking:
    """Tests for cutting secrets into field-sized chunks."""

    @pytest.mark.parametrize(
        "length, expected_chunks",
        [(1, 1), (30, 1), (31, 1), (32, 2), (61, 2), (62, 2), (63, 3)],
    )
    def test_chunk_counts_at_boundaries(self, length, expected_chunks):
        """Chunks hold at most 31 bytes."""
        chunks = chunk_secret(b"x" * length)

        assert len(chunks) == expected_chunks
        assert all(len(chunk) <= CHUNK_SIZE for chunk in chunks)

    def test_chunks_concatenate_to_secret(self):
        """Chunks come out in order and cover the whole secret."""
        secret = bytes(range(100))
        chunks = chunk_secret(secret)

        assert b"".join(chunks) == secret
        assert [len(c) for c in chunks] == [31, 31, 31, 7]

    def test_empty_secret_has_no_chunks(self):
        assert chunk_secret(b"") == []

    def test_chunk_to_value_is_big_endian(self):
        assert chunk_to_value(b"\x01\x00", ORDER) == 256
        assert chunk_to_value(b"\x00\x00\x2a", ORDER) == 42

    def test_chunk_to_value_reduces_mod_order(self):
        """Values at or above the order are reduced."""
        oversized = (ORDER + 5).to_bytes(32, byteorder="big")
        assert chunk_to_value(oversized, ORDER) == 5

    def test_value_to_chunk_minimal_form(self):
        """Without a width the shortest encoding is returned."""
        assert value_to_chunk(256) == b"\x01\x00"
        assert value_to_chunk(0) == b""

    def test_value_to_chunk_pads_to_width(self):
        assert value_to_chunk(1, width=4) == b"\x00\x00\x00\x01"
        assert value_to_chunk(0x010203, width=2) == b"\x01\x02\x03"


class TestPolynomial:
    """Tests for polynomial operations."""

    def test_polynomial_constant_term(self):
        """First coefficient is the secret."""
        secret = 12345
        coeffs = generate_polynomial(secret, threshold=3, order=ORDER)

        assert coeffs[0] == secret
        assert len(coeffs) == 3  # threshold = degree + 1
        assert all(0 <= c < ORDER for c in coeffs)

    def test_threshold_one_is_constant(self):
        assert generate_polynomial(7, threshold=1, order=ORDER) == [7]

    def test_invalid_threshold(self):
        with pytest.raises(InvalidThresholdError, match="at least 1"):
            generate_polynomial(7, threshold=0, order=ORDER)

    def test_injected_random_source(self):
        """Coefficients come from the given source."""
        coeffs = generate_polynomial(5, 3, ORDER, random_source=lambda bound: 9)
        assert coeffs == [5, 9, 9]

    def test_random_source_failure_is_wrapped(self):
        def broken(bound):
            raise OSError("entropy pool unavailable")

        with pytest.raises(RandomSourceError, match="entropy pool") as exc_info:
            generate_polynomial(5, 2, ORDER, random_source=broken)

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_random_source_out_of_range(self):
        with pytest.raises(RandomSourceError, match="outside"):
            generate_polynomial(5, 2, ORDER, random_source=lambda bound: bound)

    def test_polynomial_evaluation(self):
        """Simple polynomial evaluation check."""
        # f(x) = 5 + 3x + 2x^2
        coeffs = [5, 3, 2]
        prime = 997  # small prime for testing

        # f(1) = 5 + 3 + 2 = 10
        assert evaluate_polynomial(coeffs, 1, prime) == 10

        # f(2) = 5 + 6 + 8 = 19
        assert evaluate_polynomial(coeffs, 2, prime) == 19

        # f(30) = 5 + 90 + 1800 = 1895 = 898 mod 997
        assert evaluate_polynomial(coeffs, 30, prime) == 898

    def test_empty_polynomial_evaluates_to_zero(self):
        assert evaluate_polynomial([], 5, ORDER) == 0


class TestCommitments:
    """Tests for coefficient commitments."""

    def test_commitments_are_base_multiples(self):
        commitments = generate_commitments([1, 2, 12345], P256)

        assert commitments[0] == P256.scalar_base_multiply(1)
        assert commitments[1] == P256.add(commitments[0], commitments[0])
        assert commitments[2] == P256.scalar_base_multiply(12345)

    def test_zero_coefficient_cannot_be_committed(self):
        """0 * G is the point at infinity."""
        with pytest.raises(CommitmentError, match="infinity"):
            generate_commitments([0, 5], P256)

    def test_expected_commitment_matches_evaluation(self):
        """sum x^i * C_i == f(x) * G."""
        coeffs = [5, 3, 2, 1234567]
        commitments = generate_commitments(coeffs, P256)

        for x in (1, 4, 255):
            expected = expected_commitment(commitments, x, P256)
            actual = P256.scalar_base_multiply(evaluate_polynomial(coeffs, x, ORDER))
            assert expected == actual

    def test_expected_commitment_of_nothing_is_infinity(self):
        assert expected_commitment([], 3, P256) == INFINITY


class TestLagrange:
    """Tests for interpolation at x = 0."""

    @pytest.fixture
    def points(self):
        # f(x) = 42 + 7x + 3x^2
        coeffs = [42, 7, 3]
        ids = [1, 2, 3, 4, 5]
        values = [evaluate_polynomial(coeffs, x, ORDER) for x in ids]
        return ids, values

    def test_reconstruct_with_threshold_points(self, points):
        ids, values = points
        assert lagrange_interpolation(values[:3], ids[:3], ORDER) == 42

    def test_reconstruct_with_more_than_threshold(self, points):
        """Extra points lie on the same polynomial and do not change f(0)."""
        ids, values = points
        assert lagrange_interpolation(values, ids, ORDER) == 42

    def test_reconstruct_with_any_subset(self, points):
        ids, values = points
        subset = [0, 2, 4]

        result = lagrange_interpolation(
            [values[i] for i in subset], [ids[i] for i in subset], ORDER
        )
        assert result == 42

    def test_fewer_points_give_wrong_result(self, points):
        """t - 1 points do not determine f(0)."""
        ids, values = points
        assert lagrange_interpolation(values[:2], ids[:2], ORDER) != 42

    def test_mismatched_inputs(self):
        with pytest.raises(MismatchedInputsError):
            lagrange_interpolation([1, 2], [1], ORDER)

    def test_no_points(self):
        with pytest.raises(NoSharesError, match="At least one share"):
            lagrange_interpolation([], [], ORDER)

    def test_duplicate_ids_have_no_inverse(self):
        with pytest.raises(NoModularInverseError) as exc_info:
            lagrange_interpolation([10, 10], [1, 1], ORDER)

        assert exc_info.value.share_id == 1

    def test_mod_inverse(self):
        assert mod_inverse(3, 7) == 5
        assert (mod_inverse(12345, ORDER) * 12345) % ORDER == 1

    def test_mod_inverse_of_zero(self):
        with pytest.raises(ValueError, match="inverse of zero"):
            mod_inverse(ORDER, ORDER)
