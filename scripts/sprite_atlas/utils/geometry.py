"""
Geometry primitives shared by the packer, the atlas and the draw handles.
"""

from dataclasses import dataclass
from typing import Tuple, Union
import math

import numpy as np


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in pixel units (top-left origin, Y down)."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains_point(self, x: int, y: int) -> bool:
        """Check if point is inside rectangle."""
        return self.x <= x < self.right and self.y <= y < self.bottom

    def contains(self, other: 'Rectangle') -> bool:
        """Check if another rectangle lies completely inside this one."""
        return (self.x <= other.x and self.y <= other.y and
                other.right <= self.right and other.bottom <= self.bottom)

    def intersects(self, other: 'Rectangle') -> bool:
        """Check if this rectangle intersects with another."""
        if self.is_empty or other.is_empty:
            return False
        return not (self.right <= other.x or other.right <= self.x or
                    self.bottom <= other.y or other.bottom <= self.y)

    def offset(self, dx: int, dy: int) -> 'Rectangle':
        return Rectangle(self.x + dx, self.y + dy, self.width, self.height)

    def to_box(self) -> Tuple[int, int, int, int]:
        """Pillow crop box (left, upper, right, lower)."""
        return (self.x, self.y, self.right, self.bottom)


Vec = Tuple[float, float]


class Matrix:
    """
    2D affine transform stored as a 3x3 numpy array.

    Methods return new matrices; the transforms compose in the order they are
    called, so ``Matrix.identity().moved((5, 0)).scaled_xy((0, 0), (2, 2))``
    first moves and then scales.
    """

    __slots__ = ("_m",)

    def __init__(self, values: Union[np.ndarray, None] = None):
        if values is None:
            values = np.identity(3, dtype=np.float64)
        self._m = np.asarray(values, dtype=np.float64).reshape(3, 3)

    @classmethod
    def identity(cls) -> 'Matrix':
        return cls()

    def chained(self, nxt: 'Matrix') -> 'Matrix':
        """Apply this transform, then ``nxt``."""
        return Matrix(nxt._m @ self._m)

    def moved(self, delta: Vec) -> 'Matrix':
        t = np.identity(3)
        t[0, 2], t[1, 2] = delta
        return Matrix(t @ self._m)

    def scaled_xy(self, around: Vec, scale: Vec) -> 'Matrix':
        ax, ay = around
        sx, sy = scale
        s = np.array([
            [sx, 0.0, ax - sx * ax],
            [0.0, sy, ay - sy * ay],
            [0.0, 0.0, 1.0],
        ])
        return Matrix(s @ self._m)

    def scaled(self, around: Vec, scale: float) -> 'Matrix':
        return self.scaled_xy(around, (scale, scale))

    def rotated(self, around: Vec, angle: float) -> 'Matrix':
        ax, ay = around
        c, s = math.cos(angle), math.sin(angle)
        r = np.array([
            [c, -s, ax - c * ax + s * ay],
            [s, c, ay - s * ax - c * ay],
            [0.0, 0.0, 1.0],
        ])
        return Matrix(r @ self._m)

    def project(self, points) -> np.ndarray:
        """Project a point or an (N, 2) array of points."""
        pts = np.asarray(points, dtype=np.float64)
        single = pts.ndim == 1
        pts = np.atleast_2d(pts)
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        out = (self._m @ homogeneous.T).T[:, :2]
        return out[0] if single else out

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.allclose(self._m, other._m))

    def __repr__(self) -> str:
        a = self._m
        return (f"Matrix([{a[0, 0]:g} {a[0, 1]:g} {a[0, 2]:g}] "
                f"[{a[1, 0]:g} {a[1, 1]:g} {a[1, 2]:g}])")


IM = Matrix.identity()
