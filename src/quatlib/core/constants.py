"""
===============================================================================
QUATLIB - Numeric Constants
===============================================================================
Central repository for the constants used by the rotation algebra. Angles
are in radians unless a name says otherwise.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
DEG2RAD = np.pi / 180.0
RAD2DEG = 180.0 / np.pi

# =============================================================================
# INTERPOLATION
# =============================================================================
# Above this cosine the two endpoints are treated as parallel and Slerp
# falls back to normalized linear interpolation (sin(theta) ~ 0).
SLERP_DOT_THRESHOLD = 0.9995

# =============================================================================
# TOLERANCES
# =============================================================================
UNIT_TOLERANCE = 1e-8                  # |q| - 1 allowed by is_unit()
COMPARISON_TOLERANCE = 1e-9            # per-component, is_close()
AXIS_TOLERANCE = 1e-12                 # below this an axis is degenerate

# =============================================================================
# IDENTITY COMPONENTS (x, y, z, w)
# =============================================================================
IDENTITY_COMPONENTS = (0.0, 0.0, 0.0, 1.0)
