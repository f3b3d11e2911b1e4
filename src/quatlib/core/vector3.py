"""
Three-component vector used for Euler angles and point rotation.

The quaternion algebra only reads ``x``, ``y``, ``z`` and calls the
three-argument constructor; the helpers below bridge to numpy for callers
that already work with arrays.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass
class Vector3:
    """
    Plain 3-vector.

    Attributes
    ----------
    x, y, z : float
        Cartesian components.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def magnitude(self) -> float:
        """Euclidean length sqrt(x^2 + y^2 + z^2)."""
        return float(np.linalg.norm(self.to_array()))

    def to_array(self) -> np.ndarray:
        """Components as a float64 array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @staticmethod
    def from_array(values: Sequence[float]) -> 'Vector3':
        """
        Build a vector from any 3-element sequence.

        Raises
        ------
        ValueError
            If ``values`` does not hold exactly three elements.
        """
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape != (3,):
            raise ValueError(f"Vector3 needs 3 components, got {arr.size}")
        return Vector3(float(arr[0]), float(arr[1]), float(arr[2]))

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z
