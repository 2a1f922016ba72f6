"""
Elliptic curve group used for Pedersen commitments.

Thin wrapper over the `ecdsa` package exposing only what the sharing scheme
needs: base-point multiplication, point multiplication, point addition and
an on-curve test, plus the curve parameters (p, a, b, order).

The scheme is fixed to short-Weierstrass curves with a = -3:

    y^2 = x^3 - 3x + b  (mod p)

which covers the NIST prime curves. Point decompression relies on this.
"""

from dataclasses import dataclass, field

from ecdsa import NIST256p
from ecdsa.curves import Curve as EcdsaCurve
from ecdsa.ellipticcurve import INFINITY, CurveFp, Point, PointJacobi

from .errors import PointNotOnCurveError


# Curve coefficient a, fixed for the supported curve family.
A = -3


@dataclass(frozen=True)
class Curve:
    """
    Curve parameters and group operations.

    Attributes:
        name: Curve name (e.g. "NIST256p")
        p: Field prime
        b: Curve coefficient b
        order: Order of the base point (size of the scalar field)
        generator: Base point, with precomputed multiples
    """

    name: str
    p: int
    b: int
    order: int
    generator: PointJacobi = field(repr=False, compare=False)

    @property
    def a(self) -> int:
        return A

    @property
    def curve_fp(self) -> CurveFp:
        return self.generator.curve()

    @classmethod
    def from_ecdsa(cls, curve: EcdsaCurve) -> "Curve":
        """
        Wrap a curve from the ecdsa package.

        Raises:
            ValueError: If the curve's a coefficient is not -3
        """
        fp = curve.curve
        p = int(fp.p())
        if (int(fp.a()) - A) % p != 0:
            raise ValueError(f"Curve {curve.name} does not have a = -3")

        return cls(
            name=curve.name,
            p=p,
            b=int(fp.b()),
            order=int(curve.order),
            generator=curve.generator,
        )

    def point(self, x: int, y: int) -> Point:
        """
        Build an affine point, checking the curve equation.

        Raises:
            PointNotOnCurveError: If (x, y) does not satisfy the equation
        """
        if not self.curve_fp.contains_point(x, y):
            raise PointNotOnCurveError(f"Point ({x:#x}, {y:#x}) is not on {self.name}")
        return Point(self.curve_fp, x, y, self.order)

    def is_on_curve(self, point: Point) -> bool:
        """Whether point is a finite point satisfying the curve equation."""
        if point == INFINITY:
            return False
        return self.curve_fp.contains_point(point.x(), point.y())

    def scalar_base_multiply(self, k: int) -> Point:
        """k * G. Multiples of the order give INFINITY."""
        return _to_affine(self.generator * (k % self.order))

    def scalar_multiply(self, point: Point, k: int) -> Point:
        """k * point."""
        if point == INFINITY:
            return INFINITY
        return _to_affine(PointJacobi.from_affine(point) * (k % self.order))

    def add(self, p: Point, q: Point) -> Point:
        """p + q, with INFINITY as the identity."""
        if p == INFINITY:
            return q
        if q == INFINITY:
            return p
        return _to_affine(PointJacobi.from_affine(p) + PointJacobi.from_affine(q))


def _to_affine(point) -> Point:
    # ecdsa returns either a Jacobian point or the shared INFINITY object
    if isinstance(point, PointJacobi):
        return point.to_affine()
    return point


P256 = Curve.from_ecdsa(NIST256p)
