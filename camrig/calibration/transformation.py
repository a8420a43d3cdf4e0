"""
Rigid Body Transformations.

Mathematical Background:
========================

A rigid body transformation consists of a rotation R (3x3 orthonormal
matrix with det(R) = +1) and a translation t (3x1 vector). Following the
naming convention T_A_B, a transformation maps point coordinates expressed
in frame B into frame A:

    P_A = T_A_B * P_B = R_A_B @ P_B + t_A_B

As a 4x4 homogeneous matrix:

    T_A_B = | R   t |
            | 0   1 |

Inverse:

    T_B_A = T_A_B^(-1) = | R^T  -R^T t |
                         |  0      1   |

Composition chains frames left to right:

    T_A_C = T_A_B @ T_B_C

Camera Rigs:
============
A rig stores, for each camera, T_C_B: the transformation taking points in
the common body frame B into the camera frame C. A point observed in the
body frame is projected by camera i after applying T_C_B[i].
"""

from typing import Optional, Sequence

import cv2
import numpy as np


ORTHONORMAL_TOLERANCE = 1e-6


class Transformation:
    """
    Rigid body transformation (rotation and translation).

    Attributes:
        R: Rotation matrix (3x3).
        t: Translation vector (3,).

    Example:
        >>> T_C_B = Transformation(R=np.eye(3), t=np.array([0.1, 0.0, 0.0]))
        >>> T_B_C = T_C_B.inverse()
        >>> p_C = T_C_B.transform_points(np.array([1.0, 2.0, 3.0]))
    """

    def __init__(
        self,
        R: Optional[np.ndarray] = None,
        t: Optional[np.ndarray] = None,
    ):
        """
        Initialize the transformation; identity by default.

        Raises:
            ValueError: If R is not a 3x3 rotation or t is not a 3-vector.
        """
        R = np.eye(3) if R is None else np.asarray(R, dtype=np.float64)
        t = np.zeros(3) if t is None else np.asarray(t, dtype=np.float64).flatten()

        if R.shape != (3, 3):
            raise ValueError(f"R must be 3x3, got {R.shape}")
        if t.shape != (3,):
            raise ValueError(f"t must be (3,), got {t.shape}")
        if not np.allclose(R @ R.T, np.eye(3), atol=ORTHONORMAL_TOLERANCE) or np.linalg.det(R) < 0:
            raise ValueError("R must be a proper rotation matrix (orthonormal, det = +1)")

        self._R = R.copy()
        self._t = t.copy()
        self._R.flags.writeable = False
        self._t.flags.writeable = False

    @property
    def R(self) -> np.ndarray:
        return self._R

    @property
    def t(self) -> np.ndarray:
        return self._t

    def as_matrix(self) -> np.ndarray:
        """
        Get the 4x4 homogeneous transformation matrix.

        Returns:
            np.ndarray: 4x4 matrix [[R, t], [0, 1]].
        """
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self._R
        T[:3, 3] = self._t
        return T

    def inverse(self) -> "Transformation":
        """
        Get the inverse transformation [R^T, -R^T t].
        """
        R_inv = self._R.T
        return Transformation(R=R_inv, t=-R_inv @ self._t)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """
        Transform 3D point(s).

        Args:
            points: Points (3,) or (N, 3) in the source frame.

        Returns:
            np.ndarray: Points with the same shape in the target frame.
        """
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            return self._R @ points + self._t
        return points @ self._R.T + self._t

    def rotate_vectors(self, vectors: np.ndarray) -> np.ndarray:
        """Apply only the rotation (for directions such as bearing vectors)."""
        vectors = np.asarray(vectors, dtype=np.float64)
        if vectors.ndim == 1:
            return self._R @ vectors
        return vectors @ self._R.T

    def __matmul__(self, other: "Transformation") -> "Transformation":
        """Compose: (T_A_B @ T_B_C) maps frame C into frame A."""
        if not isinstance(other, Transformation):
            return NotImplemented
        return Transformation(R=self._R @ other._R, t=self._R @ other._t + self._t)

    def is_approx(self, other: "Transformation", tolerance: float = 1e-9) -> bool:
        """Element-wise comparison of R and t within ``tolerance``."""
        return (
            np.allclose(self._R, other._R, rtol=0.0, atol=tolerance)
            and np.allclose(self._t, other._t, rtol=0.0, atol=tolerance)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Transformation):
            return NotImplemented
        return self.is_approx(other)

    __hash__ = None

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "Transformation":
        """
        Create from a 4x4 homogeneous or 3x4 [R | t] matrix.
        """
        T = np.asarray(T, dtype=np.float64)
        if T.shape == (4, 4):
            return cls(R=T[:3, :3], t=T[:3, 3])
        elif T.shape == (3, 4):
            return cls(R=T[:, :3], t=T[:, 3])
        else:
            raise ValueError(f"Expected 4x4 or 3x4 matrix, got {T.shape}")

    @classmethod
    def from_rotation_vector(
        cls,
        rotation_vector: Sequence[float],
        translation: Optional[Sequence[float]] = None,
    ) -> "Transformation":
        """
        Create from an axis-angle rotation vector (radians) and translation.

        Uses OpenCV's Rodrigues formula implementation.
        """
        rvec = np.asarray(rotation_vector, dtype=np.float64).reshape(3, 1)
        R, _ = cv2.Rodrigues(rvec)
        return cls(R=R, t=translation)

    def to_rotation_vector(self) -> np.ndarray:
        """Axis-angle rotation vector (3,) of R."""
        rvec, _ = cv2.Rodrigues(self._R)
        return rvec.reshape(3)

    def __repr__(self) -> str:
        rvec = self.to_rotation_vector()
        return (
            f"Transformation(rotation_vector=[{rvec[0]:.4f}, {rvec[1]:.4f}, {rvec[2]:.4f}], "
            f"t=[{self._t[0]:.4f}, {self._t[1]:.4f}, {self._t[2]:.4f}])"
        )
