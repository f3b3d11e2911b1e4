"""
===============================================================================
QUATLIB - Quaternion Rotation Algebra
===============================================================================

Quaternion value type for 3D rotation: construction, normalization,
spherical and linear interpolation, Hamilton composition, Euler-angle
conversion and point rotation.

Convention
----------
Components are stored scalar-last:

    q = (x, y, z, w) = w + x*i + y*j + z*k

The default value of every field gives the identity rotation (0, 0, 0, 1).
Most rotation operations assume a unit quaternion but the type does not
enforce it: denormalized values are legal (e.g. intermediate sums, or the
result of clamp_magnitude).

API surfaces
------------
Two layers are kept apart:

    * the pure algebra. Properties (normalized, conjugate, inverse, ...),
      static helpers (slerp, angle, rotate_point, ...) and binary methods
      (dot, add, subtract, multiply, divide, equals) that can be called as
      ``Quaternion.multiply(lhs, rhs)`` or ``lhs.multiply(rhs)``. None of
      them modify their inputs.
    * the in-place layer (add_in_place, subtract_in_place,
      multiply_in_place, divide_in_place and the augmented operators),
      which overwrites the receiver and returns nothing.

Euler Angle Convention
----------------------
Z-Y-X (yaw-pitch-roll) sequence, radians. Euler angles travel in a
Vector3 laid out as

    x = yaw   (about Z)
    y = pitch (about Y)
    z = roll  (about X)

Degenerate inputs
-----------------
Nothing in this module raises for numeric input. ``normalized`` of a zero
quaternion is the identity; ``inverse`` of a zero quaternion and ``angle``
with a zero operand are NaN.

References
----------
    [1] Shoemake, "Animating Rotation with Quaternion Curves",
        SIGGRAPH 1985.
    [2] Diebel, "Representing Attitude: Euler Angles, Unit Quaternions,
        and Rotation Vectors", Stanford, 2006.

===============================================================================
"""

import logging
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from quatlib.core.constants import (
    AXIS_TOLERANCE,
    COMPARISON_TOLERANCE,
    IDENTITY_COMPONENTS,
    SLERP_DOT_THRESHOLD,
    UNIT_TOLERANCE,
)
from quatlib.core.vector3 import Vector3

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (int, float, np.integer, np.floating)


class Quaternion:
    """
    Quaternion (x, y, z, w) representing the rotation w + xi + yj + zk.

    Parameters
    ----------
    x, y, z, w : float, optional
        Components. An omitted component (None) keeps its field default,
        so ``Quaternion()`` is the identity and ``Quaternion(1.0)`` is
        (1, 0, 0, 1). An explicit 0 is always honoured:
        ``Quaternion(0, 1, 0, 0)`` has w == 0.

    Examples
    --------
    >>> q = Quaternion.from_axis_angle(Vector3(0.0, 0.0, 1.0), np.pi / 2)
    >>> Quaternion.rotate_point(q, Vector3(1.0, 0.0, 0.0))  # ~ (0, 1, 0)
    >>> half = Quaternion.slerp(Quaternion.identity(), q, 0.5)
    """

    def __init__(self, x: Optional[float] = None, y: Optional[float] = None,
                 z: Optional[float] = None, w: Optional[float] = None) -> None:
        self._q = np.array(IDENTITY_COMPONENTS, dtype=np.float64)

        for index, value in enumerate((x, y, z, w)):
            if value is not None:
                self._q[index] = value

    # =========================================================================
    # COMPONENTS
    # =========================================================================

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[0])

    @x.setter
    def x(self, value: float) -> None:
        self._q[0] = value

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[1])

    @y.setter
    def y(self, value: float) -> None:
        self._q[1] = value

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[2])

    @z.setter
    def z(self, value: float) -> None:
        self._q[2] = value

    @property
    def w(self) -> float:
        """Scalar (real) part."""
        return float(self._q[3])

    @w.setter
    def w(self, value: float) -> None:
        self._q[3] = value

    @property
    def components(self) -> np.ndarray:
        """Copy of the components as a float64 array [x, y, z, w]."""
        return self._q.copy()

    # =========================================================================
    # FACTORIES
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        The identity quaternion (0, 0, 0, 1).

        Represents zero rotation and is the multiplicative identity:
        q * identity == identity * q == q. A new object is returned on
        every call, so callers may mutate it freely.
        """
        return Quaternion(0.0, 0.0, 0.0, 1.0)

    @staticmethod
    def from_array(values: Sequence[float]) -> 'Quaternion':
        """
        Build a quaternion from a 4-element sequence ordered [x, y, z, w].

        Raises
        ------
        ValueError
            If ``values`` does not hold exactly four elements.
        """
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape != (4,):
            raise ValueError(
                f"Quaternion needs 4 components [x, y, z, w], got {arr.size}"
            )
        return Quaternion(arr[0], arr[1], arr[2], arr[3])

    @staticmethod
    def from_euler(v: Vector3) -> 'Quaternion':
        """
        Create a quaternion from Z-Y-X Euler angles.

        Parameters
        ----------
        v : Vector3
            Euler angles in radians: v.x = yaw (Z), v.y = pitch (Y),
            v.z = roll (X). Same layout as ``euler_angles`` returns.

        Returns
        -------
        Quaternion
            Unit quaternion q = q_z(yaw) * q_y(pitch) * q_x(roll).
        """
        # Half-angles, each trig function evaluated once
        cy = np.cos(v.x / 2.0)
        sy = np.sin(v.x / 2.0)
        cp = np.cos(v.y / 2.0)
        sp = np.sin(v.y / 2.0)
        cr = np.cos(v.z / 2.0)
        sr = np.sin(v.z / 2.0)

        return Quaternion(
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
            cr * cp * cy + sr * sp * sy,
        )

    @staticmethod
    def from_axis_angle(axis: Union[Vector3, Sequence[float]],
                        angle: float) -> 'Quaternion':
        """
        Create a quaternion rotating ``angle`` radians about ``axis``.

            q = (sin(angle/2) * n, cos(angle/2)),  n = axis / |axis|

        A zero-length axis carries no direction and gives the identity.
        """
        axis_arr = np.asarray(tuple(axis), dtype=np.float64)
        axis_norm = np.linalg.norm(axis_arr)

        if axis_norm < AXIS_TOLERANCE:
            logger.debug("Zero-length rotation axis; returning identity")
            return Quaternion.identity()

        n = axis_arr / axis_norm
        sin_half = np.sin(angle / 2.0)
        return Quaternion(sin_half * n[0], sin_half * n[1], sin_half * n[2],
                          np.cos(angle / 2.0))

    def copy(self) -> 'Quaternion':
        """Return an independent copy of this quaternion."""
        return Quaternion.from_array(self._q)

    # =========================================================================
    # DERIVED PROPERTIES
    # =========================================================================

    @property
    def magnitude(self) -> float:
        """Length sqrt(x^2 + y^2 + z^2 + w^2)."""
        return float(np.sqrt(self.dot(self)))

    @property
    def sqr_magnitude(self) -> float:
        """Squared length x^2 + y^2 + z^2 + w^2, i.e. dot(q, q)."""
        return self.dot(self)

    @property
    def magnitude_sqrt(self) -> float:
        """
        Square root of the magnitude, |q| ** 0.5.

        Older releases exposed this value under the name ``sqrMagnitude``.
        It is kept for callers that depend on that number; the squared
        length is ``sqr_magnitude``.
        """
        return float(np.sqrt(self.magnitude))

    @property
    def normalized(self) -> 'Quaternion':
        """
        This quaternion scaled to unit length.

        Returns the identity when the magnitude is zero (or not a number)
        instead of dividing by it.
        """
        mag = self.magnitude

        if mag > 0:
            return Quaternion.from_array(self._q / mag)

        logger.debug("Normalizing a zero-magnitude quaternion; using identity")
        return Quaternion.identity()

    @property
    def conjugate(self) -> 'Quaternion':
        """
        The conjugate (-x, -y, -z, w).

        For a unit quaternion this is the inverse rotation.
        """
        x, y, z, w = self._q
        return Quaternion(-x, -y, -z, w)

    @property
    def inverse(self) -> 'Quaternion':
        """
        The multiplicative inverse conjugate / |q|^2.

        Valid for non-unit quaternions as well. There is no zero guard: the
        inverse of a zero quaternion has NaN components.
        """
        norm_sq = self.sqr_magnitude

        if norm_sq == 0.0:
            logger.warning("Inverting a zero quaternion; components are NaN")

        with np.errstate(divide='ignore', invalid='ignore'):
            inv_q = self.conjugate._q / norm_sq

        return Quaternion.from_array(inv_q)

    @property
    def euler_angles(self) -> Vector3:
        """
        Z-Y-X Euler angles in radians as Vector3(yaw, pitch, roll).

        Ranges: yaw and roll in [-pi, pi], pitch in [-pi/2, pi/2]. Near
        gimbal lock (pitch = +/-pi/2) rounding can push the pitch sine past
        1, so it is clamped to [-1, 1] before arcsin.
        """
        x, y, z, w = self._q

        # Roll - rotation about X
        sinr_cosp = 2.0 * (w * x + y * z)
        cosr_cosp = 1.0 - 2.0 * (x * x + y * y)
        roll = np.arctan2(sinr_cosp, cosr_cosp)

        # Pitch - rotation about Y
        sinp = np.clip(2.0 * (w * y - z * x), -1.0, 1.0)
        pitch = np.arcsin(sinp)

        # Yaw - rotation about Z
        siny_cosp = 2.0 * (w * z + x * y)
        cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
        yaw = np.arctan2(siny_cosp, cosy_cosp)

        return Vector3(float(yaw), float(pitch), float(roll))

    def to_axis_angle(self) -> Tuple[Vector3, float]:
        """
        Rotation axis (unit Vector3) and angle in radians, angle in [0, 2*pi].

        The identity has no defined axis; Z is returned with angle 0.
        """
        q = self.normalized._q
        vec_norm = float(np.linalg.norm(q[:3]))

        if vec_norm < AXIS_TOLERANCE:
            return Vector3(0.0, 0.0, 1.0), 0.0

        angle = 2.0 * np.arctan2(vec_norm, q[3])
        return Vector3.from_array(q[:3] / vec_norm), float(angle)

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """True if |q| is within ``tolerance`` of 1."""
        return abs(self.magnitude - 1.0) < tolerance

    def is_close(self, other: 'Quaternion',
                 tolerance: float = COMPARISON_TOLERANCE) -> bool:
        """
        Component-wise comparison within an absolute tolerance.

        q and -q are NOT folded together here; compare ``abs(dot)`` to 1 to
        test whether two unit quaternions describe the same rotation.
        """
        return bool(np.allclose(self._q, other._q, rtol=0.0, atol=tolerance))

    # =========================================================================
    # STATIC ALGEBRA
    # =========================================================================

    @staticmethod
    def normalize(q: 'Quaternion') -> 'Quaternion':
        """Return ``q.normalized``."""
        return q.normalized

    @staticmethod
    def magnitude_of(q: 'Quaternion') -> float:
        """Return ``q.magnitude``."""
        return q.magnitude

    def dot(self, other: 'Quaternion') -> float:
        """4D dot product x1*x2 + y1*y2 + z1*z2 + w1*w2."""
        return float(np.dot(self._q, other._q))

    def add(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise sum. Not a rotation operation."""
        return Quaternion.from_array(self._q + other._q)

    def subtract(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise difference. Not a rotation operation."""
        return Quaternion.from_array(self._q - other._q)

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product self * other.

        Composes the rotations: a point is rotated first by ``other`` and
        then by ``self``. Not commutative.

            x = w1*x2 + x1*w2 + y1*z2 - z1*y2
            y = w1*y2 + y1*w2 + z1*x2 - x1*z2
            z = w1*z2 + z1*w2 + x1*y2 - y1*x2
            w = w1*w2 - x1*x2 - y1*y2 - z1*z2

        Parameters
        ----------
        other : Quaternion
            Right-hand operand.

        Returns
        -------
        Quaternion
            The product. Called as ``Quaternion.multiply(lhs, rhs)`` this is
            lhs * rhs.
        """
        x1, y1, z1, w1 = self._q
        x2, y2, z2, w2 = other._q

        return Quaternion(
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 + y1 * w2 + z1 * x2 - x1 * z2,
            w1 * z2 + z1 * w2 + x1 * y2 - y1 * x2,
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        )

    def divide(self, other: 'Quaternion') -> 'Quaternion':
        """Quotient self * other.inverse."""
        return self.multiply(other.inverse)

    def equals(self, other: 'Quaternion') -> bool:
        """
        Exact component-wise equality, no tolerance.

        Use ``is_close`` for approximate comparison.
        """
        return bool(np.array_equal(self._q, other._q))

    @staticmethod
    def angle(q_from: 'Quaternion', q_to: 'Quaternion') -> float:
        """
        Angle in degrees between two quaternions on the 4D hypersphere.

            angle = degrees(arccos(dot(from, to) / (|from| * |to|)))

        The cosine is clamped to [-1, 1] so rounding never turns
        ``angle(q, q)`` into NaN, and equal non-zero operands give
        exactly 0.

        Both operands must be non-zero; a zero operand gives NaN.
        """
        denom = np.float64(q_from.magnitude * q_to.magnitude)
        if denom > 0.0 and q_from.equals(q_to):
            return 0.0

        with np.errstate(divide='ignore', invalid='ignore'):
            cos_angle = np.clip(np.float64(q_from.dot(q_to)) / denom,
                                -1.0, 1.0)
            return float(np.degrees(np.arccos(cos_angle)))

    @staticmethod
    def clamp_magnitude(q: 'Quaternion', max_length: float) -> 'Quaternion':
        """Copy of ``q`` scaled by min(1, max_length / |q|)."""
        mag = q.magnitude
        multiplier = 1.0

        # A zero quaternion stays zero whatever max_length is
        if mag > max_length and mag > 0.0:
            multiplier = max_length / mag

        return Quaternion.from_array(q._q * multiplier)

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def slerp(q_from: 'Quaternion', q_to: 'Quaternion',
              t: float) -> 'Quaternion':
        """
        Spherical linear interpolation with t clamped to [0, 1].

        A copy of ``q_from`` is returned for t < 0 and a copy of ``q_to``
        for t > 1; otherwise see ``slerp_unclamped``.
        """
        if t < 0:
            return q_from.copy()
        if t > 1:
            return q_to.copy()

        return Quaternion._do_slerp(q_from, q_to, t)

    @staticmethod
    def slerp_unclamped(q_from: 'Quaternion', q_to: 'Quaternion',
                        t: float) -> 'Quaternion':
        """
        Spherical linear interpolation without clamping t.

        Values outside [0, 1] extrapolate along the same great circle past
        the endpoints.
        """
        return Quaternion._do_slerp(q_from, q_to, t)

    @staticmethod
    def _do_slerp(q_from: 'Quaternion', q_to: 'Quaternion',
                  t: float) -> 'Quaternion':
        """
        Slerp along the shorter arc between ``q_from`` and ``q_to``.

        Algorithm
        ---------
        1. dot = q_from . q_to is the cosine of the arc angle.
        2. q and -q are the same rotation. If dot < 0 the arc through q_to is
           the long way round, so q_to is negated (and dot with it).
        3. Above SLERP_DOT_THRESHOLD sin(theta_0) ~ 0 and the trigonometric
           form loses precision; normalized linear interpolation is used.
        4. Otherwise build the unit vector orthogonal to q_from in the
           (q_from, q_to) plane by Gram-Schmidt and walk theta_0 * t along
           the great circle:

               result = q_from * cos(theta) + q_orth * sin(theta)

        For unit inputs the result is a unit quaternion.
        """
        dot = q_from.dot(q_to)
        to_q = q_to._q

        # Take the short path
        if dot < 0.0:
            to_q = -to_q
            dot = -dot

        if dot > SLERP_DOT_THRESHOLD:
            logger.debug("Slerp endpoints nearly parallel (dot=%.6f); "
                         "using normalized lerp", dot)
            return Quaternion.lerp_unclamped(q_from,
                                             Quaternion.from_array(to_q), t)

        theta_0 = np.arccos(dot)
        theta = theta_0 * t

        # Component of q_to orthogonal to q_from
        to_orthogonal = Quaternion.from_array(to_q - q_from._q * dot).normalized

        result = q_from._q * np.cos(theta) + to_orthogonal._q * np.sin(theta)
        return Quaternion.from_array(result)

    @staticmethod
    def lerp(q_from: 'Quaternion', q_to: 'Quaternion',
             t: float) -> 'Quaternion':
        """Normalized linear interpolation with t clamped to [0, 1]."""
        return Quaternion.lerp_unclamped(q_from, q_to,
                                         float(np.clip(t, 0.0, 1.0)))

    @staticmethod
    def lerp_unclamped(q_from: 'Quaternion', q_to: 'Quaternion',
                       t: float) -> 'Quaternion':
        """
        Normalized linear interpolation, normalize(from + t * (to - from)).

        No sign correction is applied; the endpoints are used as given.
        """
        blended = q_from._q + t * (q_to._q - q_from._q)
        return Quaternion.from_array(blended).normalized

    @staticmethod
    def rotate_towards(q_from: 'Quaternion', q_to: 'Quaternion',
                       max_degrees_delta: float) -> 'Quaternion':
        """
        Move ``q_from`` towards ``q_to`` by at most ``max_degrees_delta``.

        Returns a copy of ``q_to`` when the two are already at zero angle,
        otherwise slerp_unclamped(from, to, min(1, delta / angle)).
        """
        angle = Quaternion.angle(q_from, q_to)
        if angle == 0.0:
            return q_to.copy()

        return Quaternion.slerp_unclamped(
            q_from, q_to, min(1.0, max_degrees_delta / angle))

    # =========================================================================
    # POINT ROTATION
    # =========================================================================

    @staticmethod
    def rotate_point(rotation: 'Quaternion', point: Vector3) -> Vector3:
        """
        Rotate ``point`` by ``rotation``.

        Uses the rotation matrix expanded from the quaternion components,

            R = | 1-2(y^2+z^2)    2(xy-wz)      2(xz+wy)   |
                | 2(xy+wz)      1-2(x^2+z^2)    2(yz-wx)   |
                | 2(xz-wy)      2(yz+wx)      1-2(x^2+y^2) |

        without building the matrix or doing two Hamilton products.
        ``rotation`` must be a unit quaternion; it is not checked.
        """
        qx, qy, qz, qw = rotation._q
        x = qx * 2.0
        y = qy * 2.0
        z = qz * 2.0
        xx = qx * x
        yy = qy * y
        zz = qz * z
        xy = qx * y
        xz = qx * z
        yz = qy * z
        wx = qw * x
        wy = qw * y
        wz = qw * z

        return Vector3(
            float((1.0 - (yy + zz)) * point.x + (xy - wz) * point.y
                  + (xz + wy) * point.z),
            float((xy + wz) * point.x + (1.0 - (xx + zz)) * point.y
                  + (yz - wx) * point.z),
            float((xz - wy) * point.x + (yz + wx) * point.y
                  + (1.0 - (xx + yy)) * point.z),
        )

    # =========================================================================
    # IN-PLACE LAYER
    # =========================================================================

    def add_in_place(self, other: 'Quaternion') -> None:
        """Add ``other`` to this quaternion component-wise."""
        self._q += other._q

    def subtract_in_place(self, other: 'Quaternion') -> None:
        """Subtract ``other`` from this quaternion component-wise."""
        self._q -= other._q

    def multiply_in_place(self, other: 'Quaternion') -> None:
        """
        Replace this quaternion with the Hamilton product self * other.

        The product is formed from the current values before any component
        is overwritten, so ``q.multiply_in_place(q)`` squares q.
        """
        self._q[:] = self.multiply(other)._q

    def divide_in_place(self, other: 'Quaternion') -> None:
        """Replace this quaternion with self * other.inverse."""
        self.multiply_in_place(other.inverse)

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.subtract(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        """Negate all components. -q is the same rotation as q."""
        return Quaternion.from_array(-self._q)

    def __mul__(self, other):
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * Vector3    -> rotated point
        - Quaternion * scalar     -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, Vector3):
            return Quaternion.rotate_point(self, other)
        if isinstance(other, _SCALAR_TYPES):
            return Quaternion.from_array(self._q * float(other))
        return NotImplemented

    def __rmul__(self, other):
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, _SCALAR_TYPES):
            return Quaternion.from_array(self._q * float(other))
        return NotImplemented

    def __truediv__(self, other):
        """
        Division operator.

        - Quaternion / Quaternion -> self * other.inverse
        - Quaternion / scalar     -> component-wise scaling; dividing by 0
          gives inf/NaN components rather than raising
        """
        if isinstance(other, Quaternion):
            return self.divide(other)
        if isinstance(other, _SCALAR_TYPES):
            with np.errstate(divide='ignore', invalid='ignore'):
                return Quaternion.from_array(self._q / np.float64(other))
        return NotImplemented

    def __iadd__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.add_in_place(other)
            return self
        return NotImplemented

    def __isub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.subtract_in_place(other)
            return self
        return NotImplemented

    def __imul__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.multiply_in_place(other)
            return self
        return NotImplemented

    def __itruediv__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self.divide_in_place(other)
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        """Exact component-wise equality (see ``equals``)."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.equals(other)

    # Mutable value type
    __hash__ = None

    def __iter__(self) -> Iterator[float]:
        """Iterate components in x, y, z, w order."""
        return iter(self._q.tolist())

    def __repr__(self) -> str:
        return (f"Quaternion(x={self.x!r}, y={self.y!r}, "
                f"z={self.z!r}, w={self.w!r})")

    def __str__(self) -> str:
        return (f"({self.x:+.6f}, {self.y:+.6f}, {self.z:+.6f}, "
                f"{self.w:+.6f})")
