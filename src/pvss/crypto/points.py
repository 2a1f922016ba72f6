"""
Compressed encoding of curve points.

Format (33 bytes):
    - 1 byte: 0x02 if y is even, 0x03 if y is odd
    - 32 bytes: x, big-endian, zero-padded

Decompression recovers y from the curve equation y^2 = x^3 - 3x + b (mod p)
and picks the square root whose parity matches the prefix byte.
"""

from ecdsa.ellipticcurve import INFINITY, Point
from ecdsa.numbertheory import SquareRootError, square_root_mod_prime

from .curve import Curve
from .errors import (
    InvalidParityError,
    InvalidPointLengthError,
    PointNotOnCurveError,
)


COORDINATE_SIZE = 32
COMPRESSED_POINT_SIZE = 1 + COORDINATE_SIZE

EVEN_PREFIX = 0x02
ODD_PREFIX = 0x03

_COORDINATE_MASK = (1 << (8 * COORDINATE_SIZE)) - 1


def compress_point(point: Point) -> bytes:
    """
    Serialize a finite point to 33 bytes.

    Raises:
        PointNotOnCurveError: For the point at infinity, which has no
            compressed form
    """
    if point == INFINITY:
        raise PointNotOnCurveError("Cannot compress the point at infinity")

    x = int(point.x())
    y = int(point.y())
    prefix = EVEN_PREFIX if y % 2 == 0 else ODD_PREFIX

    # Keep the low 32 bytes; never triggers for a 256-bit field.
    x_bytes = (x & _COORDINATE_MASK).to_bytes(COORDINATE_SIZE, byteorder="big")
    return bytes([prefix]) + x_bytes


def decompress_point(data: bytes, curve: Curve) -> Point:
    """
    Deserialize a 33-byte compressed point.

    Args:
        data: Output of compress_point()
        curve: Curve the point belongs to

    Returns:
        Affine point on the curve

    Raises:
        InvalidPointLengthError: If data is not 33 bytes
        InvalidParityError: If the prefix byte is not 0x02 or 0x03
        PointNotOnCurveError: If no point with this x exists
    """
    if len(data) != COMPRESSED_POINT_SIZE:
        raise InvalidPointLengthError(
            f"Compressed point must be {COMPRESSED_POINT_SIZE} bytes, got {len(data)}"
        )

    prefix = data[0]
    if prefix not in (EVEN_PREFIX, ODD_PREFIX):
        raise InvalidParityError(f"Invalid point prefix byte: {prefix:#04x}")

    p = curve.p
    x = int.from_bytes(data[1:], byteorder="big")
    if x >= p:
        raise PointNotOnCurveError("Point x coordinate exceeds the field prime")

    y_squared = (pow(x, 3, p) + curve.a * x + curve.b) % p
    try:
        y = square_root_mod_prime(y_squared, p)
    except SquareRootError:
        raise PointNotOnCurveError(f"No point on {curve.name} has x = {x:#x}") from None

    if (y % 2 == 0) != (prefix == EVEN_PREFIX):
        y = (p - y) % p

    return curve.point(x, int(y))
