"""Three-component vectors, quaternions and rotation helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator


@dataclass(frozen=True, slots=True)
class Vector3:
    """An immutable Cartesian vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: object) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: object) -> Vector3:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction, or the zero vector for zero length."""
        norm = self.magnitude()
        if norm <= 0.0:
            return Vector3()
        return self / norm


@dataclass(frozen=True, slots=True)
class Quaternion:
    """An immutable quaternion; the default value is the identity rotation."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.w
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: object) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return Quaternion(
            self.w + other.w, self.x + other.x, self.y + other.y, self.z + other.z
        )

    def __mul__(self, other: object) -> Quaternion:
        if isinstance(other, Quaternion):
            w, x, y, z = self.w, self.x, self.y, self.z
            return Quaternion(
                w * other.w - x * other.x - y * other.y - z * other.z,
                w * other.x + x * other.w + y * other.z - z * other.y,
                w * other.y - x * other.z + y * other.w + z * other.x,
                w * other.z + x * other.y - y * other.x + z * other.w,
            )
        if isinstance(other, Real):
            return Quaternion(self.w * other, self.x * other, self.y * other, self.z * other)
        return NotImplemented

    def __rmul__(self, scalar: object) -> Quaternion:
        if not isinstance(scalar, Real):
            return NotImplemented
        return self * scalar

    def __truediv__(self, scalar: object) -> Quaternion:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Quaternion(self.w / scalar, self.x / scalar, self.y / scalar, self.z / scalar)

    def magnitude(self) -> float:
        """Euclidean norm of the four components."""
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Quaternion:
        """Unit quaternion, or the identity when the norm is zero."""
        norm = self.magnitude()
        if norm <= 0.0:
            return Quaternion()
        return self / norm

    def conjugate(self) -> Quaternion:
        """Quaternion with the vector part negated."""
        return Quaternion(self.w, -self.x, -self.y, -self.z)


def dot(lhs: Vector3, rhs: Vector3) -> float:
    """Scalar product of two vectors."""
    return lhs.x * rhs.x + lhs.y * rhs.y + lhs.z * rhs.z


def cross(lhs: Vector3, rhs: Vector3) -> Vector3:
    """Vector product of two vectors."""
    return Vector3(
        lhs.y * rhs.z - lhs.z * rhs.y,
        lhs.z * rhs.x - lhs.x * rhs.z,
        lhs.x * rhs.y - lhs.y * rhs.x,
    )


def rotate_vector(rotation: Quaternion, vector: Vector3) -> Vector3:
    """Rotate a vector by a quaternion (q v q*)."""
    pure = Quaternion(0.0, vector.x, vector.y, vector.z)
    rotated = rotation * pure * rotation.conjugate()
    return Vector3(rotated.x, rotated.y, rotated.z)