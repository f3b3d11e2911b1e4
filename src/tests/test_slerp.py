"""
===============================================================================
QUATLIB - Interpolation Test Suite
===============================================================================
Tests for slerp, slerp_unclamped, lerp and rotate_towards: endpoints,
unit norm, shortest-path sign handling, the near-parallel fallback,
antipodal inputs, extrapolation and monotonic progress along the arc.
scipy's Slerp is the reference for intermediate points.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation, Slerp

from quatlib.core.quaternion import Quaternion
from quatlib.core.vector3 import Vector3


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def identity_quat():
    return Quaternion.identity()


@pytest.fixture
def quat_90z():
    """90-degree rotation about Z."""
    return Quaternion.from_axis_angle(Vector3(0.0, 0.0, 1.0), np.pi / 2)


@pytest.fixture
def quat_generic():
    """2.5 rad about a skew axis, well outside the lerp fallback."""
    return Quaternion.from_axis_angle(Vector3(1.0, 2.0, 3.0), 2.5)


def rot_z(angle):
    return Quaternion.from_axis_angle(Vector3(0.0, 0.0, 1.0), angle)


# =============================================================================
# Test: Endpoints and clamping
# =============================================================================

class TestSlerpEndpoints:
    """slerp(a, b, 0) == a and slerp(a, b, 1) == b."""

    def test_slerp_at_zero(self, quat_90z, quat_generic):
        result = Quaternion.slerp(quat_90z, quat_generic, 0.0)
        assert_allclose(result.components, quat_90z.components, atol=1e-15)

    def test_slerp_at_one(self, quat_90z, quat_generic):
        result = Quaternion.slerp(quat_90z, quat_generic, 1.0)
        assert_allclose(result.components, quat_generic.components,
                        atol=1e-14)

    def test_t_below_zero_returns_from(self, quat_90z, quat_generic):
        result = Quaternion.slerp(quat_90z, quat_generic, -0.5)
        assert result == quat_90z
        assert result is not quat_90z

    def test_t_above_one_returns_to(self, quat_90z, quat_generic):
        result = Quaternion.slerp(quat_90z, quat_generic, 1.5)
        assert result == quat_generic
        assert result is not quat_generic

    def test_inputs_not_mutated(self, quat_90z, quat_generic):
        """The sign flip for the short arc works on a copy of the target."""
        far = -quat_generic
        assert Quaternion.dot(quat_90z, far) < 0.0
        before_from = quat_90z.components
        before_to = far.components

        Quaternion.slerp(quat_90z, far, 0.3)
        assert_allclose(quat_90z.components, before_from, rtol=0, atol=0)
        assert_allclose(far.components, before_to, rtol=0, atol=0)


# =============================================================================
# Test: Interpolated values
# =============================================================================

class TestSlerpValues:
    """Intermediate points of the interpolation."""

    def test_half_turn_midpoint(self, identity_quat):
        """Halfway to a 180-degree turn about Z is a 90-degree turn."""
        to = Quaternion(0, 0, 1, 0)
        mid = Quaternion.slerp(identity_quat, to, 0.5)

        assert mid.is_unit()
        assert_allclose(mid.components,
                        [0.0, 0.0, np.sqrt(0.5), np.sqrt(0.5)], atol=1e-15)
        # Equidistant from both endpoints
        assert_allclose(Quaternion.angle(identity_quat, mid), 45.0)
        assert_allclose(Quaternion.angle(mid, to), 45.0)
        # As a rotation, 90 degrees
        _, angle = mid.to_axis_angle()
        assert_allclose(angle, np.pi / 2)
        rotated = Quaternion.rotate_point(mid, Vector3(1.0, 0.0, 0.0))
        assert_allclose(rotated.to_array(), [0.0, 1.0, 0.0], atol=1e-15)

    @pytest.mark.parametrize("t", [0.0, 0.1, 0.25, 0.5, 0.75, 0.9, 1.0])
    def test_unit_norm(self, quat_90z, quat_generic, t):
        """Unit inputs give a unit result."""
        result = Quaternion.slerp(quat_90z, quat_generic, t)
        assert_allclose(result.magnitude, 1.0, atol=1e-14)

    @pytest.mark.parametrize("t", [0.2, 0.5, 0.8])
    def test_matches_scipy(self, quat_90z, quat_generic, t):
        """Intermediate rotations agree with scipy's Slerp."""
        ours = Quaternion.slerp(quat_90z, quat_generic, t).components
        key_rots = Rotation.from_quat([quat_90z.components,
                                       quat_generic.components])
        ref = Slerp([0.0, 1.0], key_rots)([t]).as_quat()[0]
        assert_allclose(abs(np.dot(ours, ref)), 1.0, atol=1e-12)

    def test_constant_angular_velocity(self, identity_quat, quat_generic):
        """Equal steps in t cover equal angles."""
        ts = np.linspace(0.0, 1.0, 11)
        points = [Quaternion.slerp(identity_quat, quat_generic, t) for t in ts]
        steps = [Quaternion.angle(a, b) for a, b in zip(points, points[1:])]
        assert_allclose(steps, steps[0], rtol=1e-9)

    def test_angle_monotonic(self, identity_quat, quat_generic):
        """angle(a, slerp(a, b, t)) never decreases as t grows."""
        ts = np.linspace(0.0, 1.0, 21)
        angles = [Quaternion.angle(identity_quat,
                                   Quaternion.slerp(identity_quat,
                                                    quat_generic, t))
                  for t in ts]
        assert np.all(np.diff(angles) >= -1e-9)
        assert angles[0] == 0.0


# =============================================================================
# Test: Shortest path and degenerate inputs
# =============================================================================

class TestSlerpShortestPath:
    """Sign handling and the numerically delicate cases."""

    def test_negated_target_same_rotation(self, quat_90z, quat_generic):
        """slerp(a, b, .5) and slerp(a, -b, .5) agree up to sign."""
        m1 = Quaternion.slerp(quat_90z, quat_generic, 0.5)
        m2 = Quaternion.slerp(quat_90z, -quat_generic, 0.5)
        assert_allclose(abs(Quaternion.dot(m1, m2)), 1.0, atol=1e-14)

    def test_negative_dot_takes_short_arc(self, identity_quat):
        """With dot < 0 the target is flipped and the short arc is used."""
        far = -rot_z(1.0)
        assert Quaternion.dot(identity_quat, far) < 0.0

        mid = Quaternion.slerp(identity_quat, far, 0.5)
        assert_allclose(mid.components, rot_z(0.5).components, atol=1e-15)
        assert Quaternion.angle(identity_quat, mid) < 90.0

    def test_identical_inputs(self, quat_generic):
        """Identical endpoints use the lerp fallback and return the input."""
        result = Quaternion.slerp(quat_generic, quat_generic, 0.5)
        assert_allclose(result.components, quat_generic.components,
                        atol=1e-15)

    def test_near_parallel_fallback(self, identity_quat):
        """Endpoints inside the dot threshold still interpolate sensibly."""
        to = rot_z(0.01)
        assert Quaternion.dot(identity_quat, to) > 0.9995

        mid = Quaternion.slerp(identity_quat, to, 0.5)
        assert mid.is_unit()
        assert_allclose(mid.components, rot_z(0.005).components, atol=1e-8)

    def test_antipodal(self, quat_generic):
        """q and -q are the same rotation; no NaN, result stays at q."""
        result = Quaternion.slerp(quat_generic, -quat_generic, 0.5)
        assert not np.any(np.isnan(result.components))
        assert_allclose(result.components, quat_generic.components,
                        atol=1e-15)

    def test_non_unit_inputs_stay_finite(self):
        a = Quaternion(0.0, 0.0, 0.0, 2.0)
        b = Quaternion(0.0, 3.0, 0.0, 0.0)
        result = Quaternion.slerp(a, b, 0.5)
        assert np.all(np.isfinite(result.components))


# =============================================================================
# Test: Unclamped slerp and lerp
# =============================================================================

class TestUnclamped:
    """slerp_unclamped, lerp and lerp_unclamped."""

    def test_extrapolation(self, identity_quat):
        """t = 2 continues past the end of the arc."""
        result = Quaternion.slerp_unclamped(identity_quat, rot_z(1.0), 2.0)
        assert_allclose(result.components, rot_z(2.0).components, atol=1e-15)

    def test_negative_extrapolation(self, identity_quat):
        result = Quaternion.slerp_unclamped(identity_quat, rot_z(1.0), -1.0)
        assert_allclose(result.components, rot_z(-1.0).components,
                        atol=1e-15)

    def test_matches_clamped_inside_range(self, quat_90z, quat_generic):
        assert (Quaternion.slerp_unclamped(quat_90z, quat_generic, 0.3)
                == Quaternion.slerp(quat_90z, quat_generic, 0.3))

    def test_lerp_midpoint(self, identity_quat):
        mid = Quaternion.lerp(identity_quat, Quaternion(0, 0, 1, 0), 0.5)
        assert_allclose(mid.components,
                        [0.0, 0.0, np.sqrt(0.5), np.sqrt(0.5)], atol=1e-15)

    def test_lerp_clamps(self, identity_quat, quat_90z):
        result = Quaternion.lerp(identity_quat, quat_90z, 3.0)
        assert_allclose(result.components, quat_90z.components, atol=1e-15)

    def test_lerp_unclamped_is_normalized(self, identity_quat, quat_90z):
        result = Quaternion.lerp_unclamped(identity_quat, quat_90z, 3.0)
        assert result.is_unit()


# =============================================================================
# Test: rotate_towards
# =============================================================================

class TestRotateTowards:
    """Tests for rotate_towards."""

    def test_limited_step(self, identity_quat):
        """A step smaller than the gap moves exactly that many degrees."""
        target = rot_z(np.pi / 2)
        gap = Quaternion.angle(identity_quat, target)
        assert_allclose(gap, 45.0)

        result = Quaternion.rotate_towards(identity_quat, target, 22.5)
        assert_allclose(Quaternion.angle(identity_quat, result), 22.5)
        assert_allclose(result.components, rot_z(np.pi / 4).components,
                        atol=1e-15)

    def test_large_step_reaches_target(self, identity_quat, quat_generic):
        result = Quaternion.rotate_towards(identity_quat, quat_generic, 360.0)
        assert_allclose(result.components, quat_generic.components,
                        atol=1e-14)

    def test_zero_angle_returns_target(self, quat_generic):
        result = Quaternion.rotate_towards(quat_generic, quat_generic, 10.0)
        assert result == quat_generic
        assert result is not quat_generic

    def test_repeated_steps_converge(self, identity_quat, quat_generic):
        """Stepping a fixed delta reaches the target in finitely many steps."""
        current = identity_quat
        for _ in range(100):
            current = Quaternion.rotate_towards(current, quat_generic, 5.0)
        assert_allclose(abs(Quaternion.dot(current, quat_generic)), 1.0,
                        atol=1e-12)
