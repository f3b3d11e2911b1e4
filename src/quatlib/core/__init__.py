"""
===============================================================================
QUATLIB - Core Module
===============================================================================
Submodules:
    constants   -- Angle conversions, Slerp threshold, tolerances
    vector3     -- Vector3 collaborator for Euler angles and points
    quaternion  -- Quaternion value type and rotation algebra
===============================================================================
"""

from quatlib.core.quaternion import Quaternion
from quatlib.core.vector3 import Vector3

__all__ = ['Quaternion', 'Vector3']
