"""
Pinhole Camera Model.

Mathematical Background:
========================

The intrinsic vector is [fu, fv, cu, cv]. A point (X, Y, Z) in the camera
frame projects as

    x = X / Z,  y = Y / Z                 (perspective division)
    (x_d, y_d) = distort(x, y)            (identity without distortion)
    u = fu * x_d + cu
    v = fv * y_d + cv

or, with the calibration matrix

    K = | fu   0  cu |
        |  0  fv  cv |
        |  0   0   1 |

    [u, v, 1]^T = K [x_d, y_d, 1]^T

Jacobians:
==========

    d(u,v)/d(X,Y,Z) = diag(fu, fv) @ J_distortion @ | 1/Z   0   -X/Z^2 |
                                                    |  0   1/Z  -Y/Z^2 |

    d(u,v)/d(fu,fv,cu,cv) = | x_d   0   1  0 |
                            |  0   y_d  0  1 |

    d(u,v)/d(distortion) = diag(fu, fv) @ J_distortion_parameters

Back-projection inverts the chain: x_d = (u - cu) / fu, y_d = (v - cv) / fv,
undistort, and return the bearing [x, y, 1].
"""

import sys
from typing import Optional, Sequence, TextIO, Tuple

import numpy as np

from ..utils.checks import check
from ..utils.ids import CameraId
from ..utils.predicates import check_shared_equal
from .camera import DEFAULT_LABEL, Camera, FunctionalProjection
from .distortion import Distortion
from .projection_result import ProjectionResult


class PinholeCamera(Camera):
    """
    Pinhole camera with optional lens distortion.

    Example:
        >>> camera = PinholeCamera([460.0, 460.0, 376.0, 240.0], 752, 480)
        >>> result, keypoint = camera.project3(np.array([0.1, -0.2, 2.0]))
        >>> result.is_keypoint_visible()
        True
        >>> success, bearing = camera.back_project3(keypoint)
    """

    NUM_INTRINSICS = 4
    CAMERA_TYPE = "pinhole"

    def __init__(
        self,
        intrinsics: Sequence[float],
        image_width: int,
        image_height: int,
        distortion: Optional[Distortion] = None,
        camera_id: Optional[CameraId] = None,
        label: str = DEFAULT_LABEL,
    ):
        """
        Initialize the pinhole camera.

        Args:
            intrinsics: [fu, fv, cu, cv] in pixels; focal lengths must be > 0.
            image_width: Image width in pixels.
            image_height: Image height in pixels.
            distortion: Optional distortion model, owned by this camera.
            camera_id: Optional id; a random id is generated otherwise.
            label: Human readable name.
        """
        super().__init__(intrinsics, image_width, image_height, distortion, camera_id, label)
        check(
            self.fu > 0 and self.fv > 0,
            f"focal lengths must be positive, got fu={self.fu}, fv={self.fv}",
            self.logger,
        )

    @classmethod
    def from_matrix(
        cls,
        K: np.ndarray,
        image_width: int,
        image_height: int,
        distortion: Optional[Distortion] = None,
        **kwargs,
    ) -> "PinholeCamera":
        """
        Create from a 3x3 calibration matrix (skew is ignored).
        """
        K = np.asarray(K, dtype=np.float64)
        check(K.shape == (3, 3), f"K must be 3x3, got {K.shape}")
        return cls(
            [K[0, 0], K[1, 1], K[0, 2], K[1, 2]],
            image_width,
            image_height,
            distortion,
            **kwargs,
        )

    @property
    def fu(self) -> float:
        return float(self._intrinsics[0])

    @property
    def fv(self) -> float:
        return float(self._intrinsics[1])

    @property
    def cu(self) -> float:
        return float(self._intrinsics[2])

    @property
    def cv(self) -> float:
        return float(self._intrinsics[3])

    @property
    def K(self) -> np.ndarray:
        """3x3 calibration matrix."""
        return np.array([
            [self.fu, 0, self.cu],
            [0, self.fv, self.cv],
            [0, 0, 1]
        ], dtype=np.float64)

    def get_K_inverse(self) -> np.ndarray:
        """
        Inverse of the calibration matrix.

            K^(-1) = | 1/fu    0   -cu/fu |
                     |   0   1/fv  -cv/fv |
                     |   0     0      1   |
        """
        return np.array([
            [1 / self.fu, 0, -self.cu / self.fu],
            [0, 1 / self.fv, -self.cv / self.fv],
            [0, 0, 1]
        ], dtype=np.float64)

    def get_fov(self) -> Tuple[float, float]:
        """
        Horizontal and vertical field of view of the undistorted model.

            theta_h = 2 * arctan(width / (2 * fu))
            theta_v = 2 * arctan(height / (2 * fv))

        Returns:
            Tuple[float, float]: (horizontal_fov, vertical_fov) in radians.
        """
        horizontal_fov = 2 * np.arctan(self.image_width / (2 * self.fu))
        vertical_fov = 2 * np.arctan(self.image_height / (2 * self.fv))
        return horizontal_fov, vertical_fov

    def _project3(
        self,
        point_3d: np.ndarray,
        intrinsics: np.ndarray,
        distortion_parameters: Optional[np.ndarray],
        jacobian_point: bool,
        jacobian_intrinsics: bool,
        jacobian_distortion: bool,
    ) -> FunctionalProjection:
        fu, fv, cu, cv = intrinsics
        X, Y, Z = point_3d

        if Z == 0.0:
            # No finite image of a point in the camera plane.
            return FunctionalProjection(
                ProjectionResult.POINT_BEHIND_CAMERA,
                np.zeros(2),
                np.zeros((2, 3)) if jacobian_point else None,
                np.zeros((2, self.NUM_INTRINSICS)) if jacobian_intrinsics else None,
                np.zeros((2, self._num_distortion_parameters())) if jacobian_distortion else None,
            )

        inv_z = 1.0 / Z
        normalized = np.array([X * inv_z, Y * inv_z])

        if self._distortion is not None:
            distorted, J_dist, J_dist_params = self._distortion.distort_with_jacobians(
                normalized,
                distortion_parameters,
                jacobian_point=jacobian_point,
                jacobian_parameters=jacobian_distortion,
            )
        else:
            distorted = normalized
            J_dist = np.eye(2) if jacobian_point else None
            J_dist_params = np.zeros((2, 0)) if jacobian_distortion else None

        keypoint = np.array([fu * distorted[0] + cu, fv * distorted[1] + cv])
        focal = np.diag([fu, fv])

        J_point = None
        if jacobian_point:
            J_normalized = np.array([
                [inv_z, 0.0, -X * inv_z * inv_z],
                [0.0, inv_z, -Y * inv_z * inv_z],
            ])
            J_point = focal @ J_dist @ J_normalized

        J_intrinsics = None
        if jacobian_intrinsics:
            J_intrinsics = np.array([
                [distorted[0], 0.0, 1.0, 0.0],
                [0.0, distorted[1], 0.0, 1.0],
            ])

        J_distortion = None
        if jacobian_distortion:
            J_distortion = focal @ J_dist_params

        if Z < 0.0:
            result = ProjectionResult.POINT_BEHIND_CAMERA
        else:
            result = self._status_from_keypoint(keypoint)

        return FunctionalProjection(result, keypoint, J_point, J_intrinsics, J_distortion)

    def _num_distortion_parameters(self) -> int:
        return 0 if self._distortion is None else self._distortion.num_parameters

    def _back_project3(self, keypoint: np.ndarray) -> Tuple[bool, np.ndarray]:
        distorted = np.array([
            (keypoint[0] - self.cu) / self.fu,
            (keypoint[1] - self.cv) / self.fv,
        ])

        if self._distortion is not None:
            normalized, success = self._distortion.undistort(distorted)
        else:
            normalized, success = distorted, True

        bearing = np.array([normalized[0], normalized[1], 1.0])
        success = bool(success and np.all(np.isfinite(bearing)))
        return success, bearing

    def __eq__(self, other) -> bool:
        """Base camera equality plus equality of the distortion models."""
        base_equal = super().__eq__(other)
        if base_equal is NotImplemented or not base_equal:
            return base_equal
        return check_shared_equal(self._distortion, other._distortion)

    __hash__ = None

    def print_parameters(self, stream: Optional[TextIO] = None, text: str = "") -> None:
        stream = stream or sys.stdout
        super().print_parameters(stream, text)
        stream.write("  Projection:\n")
        stream.write(f"    focal length: {self.fu}, {self.fv}\n")
        stream.write(f"    optical center: {self.cu}, {self.cv}\n")
        stream.write(f"  Distortion: {self._distortion!r}\n")

    def __repr__(self) -> str:
        return (
            f"PinholeCamera(fu={self.fu:.2f}, fv={self.fv:.2f}, "
            f"cu={self.cu:.2f}, cv={self.cv:.2f}, "
            f"width={self.image_width}, height={self.image_height}, "
            f"distortion={self._distortion!r})"
        )
