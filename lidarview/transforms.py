"""4x4 transformation matrices and quaternions for the demo cameras and models.

Matrices are immutable and row-major. Every transforming method returns a
new matrix equal to ``self @ transform``, so chained calls apply their
transforms to points in reverse order, the last call acting first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

Vec3 = tuple[float, float, float]

_EPSILON = 1e-12


def _sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length < _EPSILON:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


@dataclass(frozen=True)
class Quaternion:
    """Rotation quaternion with the scalar part ``w`` first."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def from_axis_and_angle(axis: Sequence[float], angle: float) -> "Quaternion":
        """Rotation of ``angle`` degrees about ``axis``; a zero axis gives no rotation."""
        ax, ay, az = _normalize(axis)
        half = math.radians(angle) / 2.0
        s = math.sin(half)
        return Quaternion(math.cos(half), ax * s, ay * s, az * s).normalized()

    def __mul__(self, other: object) -> "Quaternion":
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self
        w2, x2, y2, z2 = other
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def __iter__(self) -> Iterator[float]:
        return iter((self.w, self.x, self.y, self.z))

    def length(self) -> float:
        return math.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)

    def normalized(self) -> "Quaternion":
        """Unit-length copy; a zero quaternion is returned unchanged."""
        length = self.length()
        if length < _EPSILON:
            return self
        return Quaternion(self.w / length, self.x / length, self.y / length, self.z / length)

    def conjugated(self) -> "Quaternion":
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def rotate_vector(self, vector: Sequence[float]) -> Vec3:
        """Rotate a 3-vector by this (unit) quaternion."""
        rotated = self * Quaternion(0.0, *vector[:3]) * self.conjugated()
        return (rotated.x, rotated.y, rotated.z)


@dataclass(frozen=True)
class Matrix4:
    """Immutable 4x4 matrix of 16 values in row-major order."""

    values: tuple[float, ...] = (
        1.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    )

    def __post_init__(self) -> None:
        values = tuple(float(v) for v in self.values)
        if len(values) != 16:
            raise ValueError(f"a 4x4 matrix needs 16 values, got {len(values)}")
        object.__setattr__(self, "values", values)

    @staticmethod
    def identity() -> "Matrix4":
        return Matrix4()

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> "Matrix4":
        return cls(tuple(value for row in rows for value in row))

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, column = index
        if not (0 <= row < 4 and 0 <= column < 4):
            raise IndexError(f"matrix index {index} out of range")
        return self.values[row * 4 + column]

    @property
    def rows(self) -> tuple[tuple[float, ...], ...]:
        return tuple(self.values[r * 4 : r * 4 + 4] for r in range(4))

    def column_major(self) -> tuple[float, ...]:
        """Values in the column-major order expected by OpenGL uniforms."""
        return tuple(self.values[r * 4 + c] for c in range(4) for r in range(4))

    def is_close(self, other: "Matrix4", tolerance: float = 1e-9) -> bool:
        return all(abs(a - b) <= tolerance for a, b in zip(self.values, other.values))

    def __matmul__(self, other: object) -> "Matrix4":
        if not isinstance(other, Matrix4):
            return NotImplemented
        a, b = self.values, other.values
        return Matrix4(
            tuple(
                sum(a[r * 4 + k] * b[k * 4 + c] for k in range(4))
                for r in range(4)
                for c in range(4)
            )
        )

    def translate(self, x: float, y: float, z: float) -> "Matrix4":
        return self @ Matrix4.from_rows(
            ((1, 0, 0, x), (0, 1, 0, y), (0, 0, 1, z), (0, 0, 0, 1))
        )

    def scale(self, x: float, y: float, z: float) -> "Matrix4":
        return self @ Matrix4.from_rows(
            ((x, 0, 0, 0), (0, y, 0, 0), (0, 0, z, 0), (0, 0, 0, 1))
        )

    def rotate(self, angle: float, x: float, y: float, z: float) -> "Matrix4":
        """Rotate by ``angle`` degrees about the axis ``(x, y, z)``."""
        return self.rotate_quaternion(Quaternion.from_axis_and_angle((x, y, z), angle))

    def rotate_quaternion(self, quaternion: Quaternion) -> "Matrix4":
        w, x, y, z = quaternion.normalized()
        xx, yy, zz = x * x, y * y, z * z
        xy, xz, yz = x * y, x * z, y * z
        xw, yw, zw = x * w, y * w, z * w
        return self @ Matrix4.from_rows(
            (
                (1 - 2 * (yy + zz), 2 * (xy - zw), 2 * (xz + yw), 0),
                (2 * (xy + zw), 1 - 2 * (xx + zz), 2 * (yz - xw), 0),
                (2 * (xz - yw), 2 * (yz + xw), 1 - 2 * (xx + yy), 0),
                (0, 0, 0, 1),
            )
        )

    def look_at(
        self, eye: Sequence[float], center: Sequence[float], up: Sequence[float]
    ) -> "Matrix4":
        """Apply a viewing transform; returns ``self`` when eye and center coincide."""
        forward = _sub(center, eye)
        if max(abs(c) for c in forward) < _EPSILON:
            return self
        forward = _normalize(forward)
        side = _normalize(_cross(forward, up))
        up_vector = _cross(side, forward)
        view = Matrix4.from_rows(
            (
                (*side, 0),
                (*up_vector, 0),
                (-forward[0], -forward[1], -forward[2], 0),
                (0, 0, 0, 1),
            )
        )
        return (self @ view).translate(-eye[0], -eye[1], -eye[2])

    def perspective(self, fov: float, aspect: float, near: float, far: float) -> "Matrix4":
        """Apply a perspective projection with a vertical field of view in degrees.

        Degenerate parameters leave the matrix unchanged.
        """
        if near == far or aspect == 0:
            return self
        half = math.radians(fov / 2.0)
        sine = math.sin(half)
        if sine == 0:
            return self
        cotan = math.cos(half) / sine
        clip = far - near
        return self @ Matrix4.from_rows(
            (
                (cotan / aspect, 0, 0, 0),
                (0, cotan, 0, 0),
                (0, 0, -(near + far) / clip, -(2.0 * near * far) / clip),
                (0, 0, -1, 0),
            )
        )

    def frustum(
        self, left: float, right: float, bottom: float, top: float, near: float, far: float
    ) -> "Matrix4":
        """Apply a perspective frustum; degenerate bounds leave the matrix unchanged."""
        if left == right or bottom == top or near == far:
            return self
        width = right - left
        height = top - bottom
        clip = far - near
        return self @ Matrix4.from_rows(
            (
                (2.0 * near / width, 0, (left + right) / width, 0),
                (0, 2.0 * near / height, (top + bottom) / height, 0),
                (0, 0, -(near + far) / clip, -(2.0 * near * far) / clip),
                (0, 0, -1, 0),
            )
        )

    def ortho(
        self, left: float, right: float, bottom: float, top: float, near: float, far: float
    ) -> "Matrix4":
        """Apply an orthographic projection; degenerate bounds leave the matrix unchanged."""
        if left == right or bottom == top or near == far:
            return self
        width = right - left
        height = top - bottom
        clip = far - near
        return self @ Matrix4.from_rows(
            (
                (2.0 / width, 0, 0, -(left + right) / width),
                (0, 2.0 / height, 0, -(top + bottom) / height),
                (0, 0, -2.0 / clip, -(near + far) / clip),
                (0, 0, 0, 1),
            )
        )

    def map_point(self, point: Sequence[float]) -> Vec3:
        """Transform a 3-D point, dividing by the homogeneous coordinate."""
        px, py, pz = point[:3]
        m = self.values
        x = m[0] * px + m[1] * py + m[2] * pz + m[3]
        y = m[4] * px + m[5] * py + m[6] * pz + m[7]
        z = m[8] * px + m[9] * py + m[10] * pz + m[11]
        w = m[12] * px + m[13] * py + m[14] * pz + m[15]
        if w == 1.0:
            return (x, y, z)
        if w == 0.0:
            raise ValueError(f"point {tuple(point)} maps to infinity")
        return (x / w, y / w, z / w)