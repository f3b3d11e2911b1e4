"""
===============================================================================
QUATLIB - Quaternion Rotation Algebra
===============================================================================
Quaternion value type with normalization, Slerp, Hamilton composition,
Euler-angle conversion and point rotation.

Submodules:
    core    -- Quaternion, Vector3 and numeric constants
    config  -- YAML configuration and logging setup for the CLI
    main    -- Command line entry point
===============================================================================
"""

from quatlib.core.quaternion import Quaternion
from quatlib.core.vector3 import Vector3

__version__ = '0.1.0'

__all__ = ['Quaternion', 'Vector3']
