"""
Shamir secret sharing with Pedersen-style commitments, over a curve's scalar field.

This module implements the arithmetic of (t, n) threshold sharing:
- A secret is cut into chunks small enough to be field elements
- Each chunk becomes the constant term of a random polynomial of degree t - 1
- Shares are evaluations of the polynomial at x = 1..n
- Commitments g^{a_i} to every coefficient let anyone check a share
  without learning the secret

Mathematical Basis:
    1. Chunk value S becomes the constant term (a_0) of a polynomial
    2. Polynomial: f(x) = a_0 + a_1*x + a_2*x^2 + ... + a_{t-1}*x^{t-1} mod q
    3. Commitments: C_i = a_i * G for every coefficient
    4. Share (x, f(x)) is valid iff f(x) * G == sum_i x^i * C_i
    5. Reconstruction uses Lagrange interpolation to recover a_0 = S

All arithmetic is modulo the curve order q.

Reference:
    Shamir, A. (1979). "How to share a secret". Communications of the ACM.
    Pedersen, T. P. (1991). "Non-interactive and information-theoretic
    secure verifiable secret sharing". CRYPTO '91.
"""

import secrets
from typing import Callable, Sequence

from ecdsa.ellipticcurve import INFINITY, Point

from .curve import Curve
from .errors import (
    CommitmentError,
    InvalidThresholdError,
    MismatchedInputsError,
    NoModularInverseError,
    NoSharesError,
    RandomSourceError,
)


# Chunk size in bytes. 31 bytes (248 bits) is always below a 256-bit order.
CHUNK_SIZE = 31

# Source of uniform integers in [0, bound)
RandomSource = Callable[[int], int]


def chunk_secret(secret: bytes, chunk_size: int = CHUNK_SIZE) -> list[bytes]:
    """
    Split a secret into consecutive chunks of at most chunk_size bytes.

    Concatenating the chunks gives back the secret. An empty secret has
    no chunks.
    """
    return [secret[i : i + chunk_size] for i in range(0, len(secret), chunk_size)]


def chunk_to_value(chunk: bytes, order: int) -> int:
    """Read a chunk as a big-endian integer, reduced mod order."""
    return int.from_bytes(chunk, byteorder="big") % order


def value_to_chunk(value: int, width: int = 0) -> bytes:
    """
    Write a field element back as bytes.

    Args:
        value: Non-negative integer
        width: Minimum output length; shorter results are left-padded with
            zero bytes. With the default of 0 the minimal big-endian form is
            returned and leading zero bytes of the original chunk are lost.
    """
    length = max((value.bit_length() + 7) // 8, width)
    return value.to_bytes(length, byteorder="big")


def generate_polynomial(
    secret: int,
    threshold: int,
    order: int,
    random_source: RandomSource = secrets.randbelow,
) -> list[int]:
    """
    Generate a random polynomial with the secret as constant term.

    The polynomial has degree (threshold - 1), meaning threshold points
    are needed to uniquely determine it (and recover the secret).

    Args:
        secret: The value to hide (becomes coefficient a_0)
        threshold: Number of shares needed for reconstruction
        order: Modulus of the scalar field
        random_source: Returns uniform integers in [0, bound); must be
            cryptographically secure

    Returns:
        List of coefficients [a_0, a_1, ..., a_{t-1}] where a_0 = secret

    Raises:
        InvalidThresholdError: If threshold < 1
        RandomSourceError: If the random source fails or misbehaves
    """
    if threshold < 1:
        raise InvalidThresholdError("Threshold must be at least 1")

    coefficients = [secret]

    for _ in range(threshold - 1):
        try:
            coeff = random_source(order)
        except Exception as e:
            raise RandomSourceError(f"Random source failed: {e}") from e

        if not 0 <= coeff < order:
            raise RandomSourceError("Random source returned a value outside [0, order)")
        coefficients.append(coeff)

    return coefficients


def evaluate_polynomial(coefficients: Sequence[int], x: int, order: int) -> int:
    """
    Evaluate polynomial at point x using Horner's method.

    Args:
        coefficients: Polynomial coefficients [a_0, a_1, ..., a_{t-1}]
        x: Point at which to evaluate
        order: Modulus for field arithmetic

    Returns:
        f(x) mod order (0 for an empty coefficient list)
    """
    result = 0

    for coeff in reversed(coefficients):
        result = (result * x + coeff) % order

    return result


def generate_commitments(coefficients: Sequence[int], curve: Curve) -> list[Point]:
    """
    Commit to each coefficient as a_i * G.

    Raises:
        CommitmentError: If a coefficient is a multiple of the order, whose
            commitment would be the point at infinity
    """
    commitments = []

    for i, coeff in enumerate(coefficients):
        commitment = curve.scalar_base_multiply(coeff)
        if commitment == INFINITY:
            raise CommitmentError(f"Commitment {i} is the point at infinity")
        commitments.append(commitment)

    return commitments


def expected_commitment(commitments: Sequence[Point], x: int, curve: Curve) -> Point:
    """
    Compute f(x) * G from the coefficient commitments alone.

    Evaluates sum_i x^i * C_i with Horner's method in the group:
    ((C_{t-1} * x + C_{t-2}) * x + ...) * x + C_0
    """
    result = INFINITY

    for commitment in reversed(commitments):
        result = curve.add(curve.scalar_multiply(result, x), commitment)

    return result


def mod_inverse(a: int, prime: int) -> int:
    """
    Compute modular multiplicative inverse using Fermat's little theorem.

    For prime p: a^(-1) = a^(p-2) mod p

    Raises:
        ValueError: If a is zero mod prime (no inverse exists)
    """
    if a % prime == 0:
        raise ValueError("Cannot compute inverse of zero")

    return pow(a, prime - 2, prime)


def lagrange_interpolation(
    values: Sequence[int], ids: Sequence[int], order: int
) -> int:
    """
    Recover f(0) from points (ids[i], values[i]) using Lagrange interpolation.

    The formula is:
        f(0) = sum_{i} y_i * L_i(0)

    Where L_i(0) is the Lagrange basis polynomial evaluated at 0:
        L_i(0) = product_{j != i} (-x_j) / (x_i - x_j)

    Any number of points with distinct ids works; passing more points than
    the threshold gives the same result.

    Raises:
        MismatchedInputsError: If values and ids differ in length
        NoSharesError: If there are no points
        NoModularInverseError: If a denominator is zero, i.e. ids repeat
    """
    if len(values) != len(ids):
        raise MismatchedInputsError(
            f"Got {len(values)} share values but {len(ids)} share IDs"
        )
    if not values:
        raise NoSharesError("At least one share required")

    secret = 0

    for i, (x_i, y_i) in enumerate(zip(ids, values)):
        numerator = 1
        denominator = 1

        for j, x_j in enumerate(ids):
            if i == j:
                continue

            numerator = (numerator * -x_j) % order
            denominator = (denominator * (x_i - x_j)) % order

        try:
            lagrange_coeff = (numerator * mod_inverse(denominator, order)) % order
        except ValueError:
            raise NoModularInverseError(x_i) from None

        secret = (secret + y_i * lagrange_coeff) % order

    return secret
