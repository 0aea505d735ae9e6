"""Host-side 3D vector type used as point, direction and RGB color.

Vec3 is an immutable value type: every operation returns a new instance.
It is used on the Python side to describe the scene and camera before the
data is uploaded to Taichi fields, and to feed colors to the PPM encoder.
Device-side code uses the ``vec3`` Taichi type from ``core.ray`` instead.

Example:
    >>> from src.tracer.core.vec3 import Vec3, cross, unit_vector
    >>> a = Vec3(1.0, 0.0, 0.0)
    >>> b = Vec3(0.0, 1.0, 0.0)
    >>> cross(a, b)
    Vec3(0.0, 0.0, 1.0)
    >>> unit_vector(Vec3(0.0, 3.0, 4.0)).length()
    1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from numbers import Real
from typing import Union

Scalar = Union[int, float]


class Vec3:
    """A 3-component real-valued vector.

    Attributes:
        x: First component (red channel when used as a color).
        y: Second component (green channel when used as a color).
        z: Third component (blue channel when used as a color).
    """

    __slots__ = ("_e",)

    def __init__(self, x: Scalar = 0.0, y: Scalar = 0.0, z: Scalar = 0.0) -> None:
        self._e = (float(x), float(y), float(z))

    @classmethod
    def from_iterable(cls, values: Iterable[Scalar]) -> Vec3:
        """Build a vector from any 3-element iterable (tuple, list, Vec3)."""
        x, y, z = values
        return cls(x, y, z)

    @property
    def x(self) -> float:
        return self._e[0]

    @property
    def y(self) -> float:
        return self._e[1]

    @property
    def z(self) -> float:
        return self._e[2]

    # =========================================================================
    # Component Access
    # =========================================================================

    def __getitem__(self, index: int) -> float:
        """Return component ``index``.

        Only 0, 1 and 2 are valid. Negative indices are not wrapped.

        Raises:
            IndexError: If index is outside {0, 1, 2}.
        """
        if not 0 <= index <= 2:
            raise IndexError(f"Vec3 index {index} out of range (expected 0, 1 or 2)")
        return self._e[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self._e)

    def __len__(self) -> int:
        return 3

    def to_tuple(self) -> tuple[float, float, float]:
        return self._e

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __neg__(self) -> Vec3:
        return Vec3(-self._e[0], -self._e[1], -self._e[2])

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self._e[0] + other._e[0], self._e[1] + other._e[1], self._e[2] + other._e[2])

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self._e[0] - other._e[0], self._e[1] - other._e[1], self._e[2] - other._e[2])

    def __mul__(self, other: Vec3 | Scalar) -> Vec3:
        """Component-wise product with a Vec3, or scaling by a scalar."""
        if isinstance(other, Vec3):
            return Vec3(
                self._e[0] * other._e[0], self._e[1] * other._e[1], self._e[2] * other._e[2]
            )
        if isinstance(other, Real):
            return Vec3(self._e[0] * other, self._e[1] * other, self._e[2] * other)
        return NotImplemented

    def __rmul__(self, other: Scalar) -> Vec3:
        if isinstance(other, Real):
            return self * other
        return NotImplemented

    def __truediv__(self, other: Scalar) -> Vec3:
        if not isinstance(other, Real):
            return NotImplemented
        return self * (1.0 / other)

    # =========================================================================
    # Geometry
    # =========================================================================

    def dot(self, other: Vec3) -> float:
        return self._e[0] * other._e[0] + self._e[1] * other._e[1] + self._e[2] * other._e[2]

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self._e[1] * other._e[2] - self._e[2] * other._e[1],
            self._e[2] * other._e[0] - self._e[0] * other._e[2],
            self._e[0] * other._e[1] - self._e[1] * other._e[0],
        )

    def length_squared(self) -> float:
        """Squared Euclidean length (no square root, for comparisons)."""
        return self.dot(self)

    def length(self) -> float:
        """Euclidean length. The zero vector has length 0."""
        return math.sqrt(self.length_squared())

    def unit_vector(self) -> Vec3:
        """Return ``self / self.length()``.

        The zero vector has no direction; it yields NaN components rather
        than raising, so callers must check the length first.
        """
        length = self.length()
        if length == 0.0:
            return Vec3(math.nan, math.nan, math.nan)
        return self / length

    def near_zero(self, eps: float = 1e-8) -> bool:
        """True if every component magnitude is below ``eps``."""
        return all(abs(c) < eps for c in self._e)

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in self._e)

    # =========================================================================
    # Comparison and Display
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        # Exact comparison; only meaningful for test fixtures
        if not isinstance(other, Vec3):
            return NotImplemented
        return self._e == other._e

    def __hash__(self) -> int:
        return hash(self._e)

    def __str__(self) -> str:
        return f"{self._e[0]:g} {self._e[1]:g} {self._e[2]:g}"

    def __repr__(self) -> str:
        return f"Vec3({self._e[0]!r}, {self._e[1]!r}, {self._e[2]!r})"


# Semantic aliases: same type, different intent
Point3 = Vec3
Color = Vec3


def dot(a: Vec3, b: Vec3) -> float:
    """Dot product a . b."""
    return a.dot(b)


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Cross product a x b."""
    return a.cross(b)


def unit_vector(v: Vec3) -> Vec3:
    """Normalize ``v`` to unit length (see Vec3.unit_vector)."""
    return v.unit_vector()


def as_vec3(value: Vec3 | tuple[Scalar, Scalar, Scalar] | list[Scalar]) -> Vec3:
    """Coerce a Vec3 or a 3-element sequence into a Vec3."""
    if isinstance(value, Vec3):
        return value
    return Vec3.from_iterable(value)
