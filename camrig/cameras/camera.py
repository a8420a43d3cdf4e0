"""
Camera geometry base class.

A Camera maps 3D points expressed in its own frame to image pixels and
pixels back to bearing vectors. The concrete projection model (pinhole,
...) is supplied by subclasses; this class owns the parameters, the image
box and the dispatch shared by every model:

    project3 / project3_with_jacobian
        -> project3_functional(point, None, None, ...)
            -> model specific _project3(point, intrinsics, distortion_parameters, ...)

    project4 / project4_with_jacobian
        -> sign-normalize the homogeneous point, then project3

Projection never raises for points that simply do not map to a visible
pixel. Those outcomes are reported through :class:`ProjectionResult`.
Malformed arguments (wrong shapes, wrongly sized parameter overrides) are
contract violations and raise :class:`ContractViolationError`.
"""

import numbers
import sys
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Sequence, TextIO, Tuple

import numpy as np

from ..utils.checks import check
from ..utils.ids import CameraId
from ..utils.logger import LoggerMixin
from .distortion import Distortion
from .projection_result import ProjectionResult


DEFAULT_LABEL = "unnamed camera"


class FunctionalProjection(NamedTuple):
    """
    Output of :meth:`Camera.project3_functional`.

    Jacobians that were not requested are None.

    Attributes:
        result: Projection outcome.
        keypoint: Pixel coordinates (2,).
        jacobian_point: d(keypoint)/d(point), 2x3.
        jacobian_intrinsics: d(keypoint)/d(intrinsics), 2 x NUM_INTRINSICS.
        jacobian_distortion: d(keypoint)/d(distortion parameters), 2 x K.
    """

    result: ProjectionResult
    keypoint: np.ndarray
    jacobian_point: Optional[np.ndarray] = None
    jacobian_intrinsics: Optional[np.ndarray] = None
    jacobian_distortion: Optional[np.ndarray] = None


def _as_vector(value, size: int, name: str) -> np.ndarray:
    vector = np.asarray(value, dtype=np.float64)
    check(
        vector.shape in ((size,), (size, 1)),
        f"{name} must have shape ({size},), got {vector.shape}",
    )
    return vector.reshape(size)


class Camera(LoggerMixin, ABC):
    """
    Abstract camera geometry.

    The intrinsics vector and image size are fixed at construction. Only the
    label and the rolling shutter line delay are mutable metadata.

    Attributes:
        id: Unique camera id.
        label: Human readable name.
        intrinsics: Model specific parameter vector (read-only).
        image_width: Width of the valid pixel box [0, width).
        image_height: Height of the valid pixel box [0, height).
        line_delay_nanoseconds: Per-row readout delay. Stored for consumers
            modelling rolling shutter timing; projection does not use it.
        distortion: Optional distortion model owned by this camera.
    """

    NUM_INTRINSICS: int = 0
    CAMERA_TYPE: str = "camera"

    def __init__(
        self,
        intrinsics: Sequence[float],
        image_width: int,
        image_height: int,
        distortion: Optional[Distortion] = None,
        camera_id: Optional[CameraId] = None,
        label: str = DEFAULT_LABEL,
    ):
        intrinsics = np.asarray(intrinsics, dtype=np.float64).reshape(-1)
        check(
            intrinsics.size == self.NUM_INTRINSICS,
            f"{type(self).__name__} expects {self.NUM_INTRINSICS} intrinsics, got {intrinsics.size}",
            self.logger,
        )
        for name, value in (("image_width", image_width), ("image_height", image_height)):
            check(
                isinstance(value, numbers.Integral) and value > 0,
                f"{name} must be a positive integer, got {value!r}",
                self.logger,
            )
        check(
            distortion is None or isinstance(distortion, Distortion),
            f"distortion must be a Distortion or None, got {type(distortion).__name__}",
            self.logger,
        )

        self._intrinsics = intrinsics.copy()
        self._intrinsics.flags.writeable = False
        self._image_width = int(image_width)
        self._image_height = int(image_height)
        self._distortion = distortion
        self._id = camera_id if camera_id is not None else CameraId.random()
        self._label = label
        self._line_delay_nanoseconds = 0

    # ------------------------------------------------------------------
    # Parameters and metadata
    # ------------------------------------------------------------------

    @property
    def id(self) -> CameraId:
        return self._id

    @property
    def label(self) -> str:
        return self._label

    @label.setter
    def label(self, label: str) -> None:
        self._label = str(label)

    @property
    def line_delay_nanoseconds(self) -> int:
        return self._line_delay_nanoseconds

    @line_delay_nanoseconds.setter
    def line_delay_nanoseconds(self, value: int) -> None:
        check(
            isinstance(value, numbers.Integral) and value >= 0,
            f"line_delay_nanoseconds must be a non-negative integer, got {value!r}",
            self.logger,
        )
        self._line_delay_nanoseconds = int(value)

    @property
    def intrinsics(self) -> np.ndarray:
        return self._intrinsics

    @property
    def image_width(self) -> int:
        return self._image_width

    @property
    def image_height(self) -> int:
        return self._image_height

    @property
    def distortion(self) -> Optional[Distortion]:
        return self._distortion

    def has_distortion(self) -> bool:
        return self._distortion is not None

    def is_keypoint_in_image_box(self, keypoint: np.ndarray) -> bool:
        """True if the keypoint lies in [0, width) x [0, height)."""
        u, v = keypoint[0], keypoint[1]
        return bool(0.0 <= u < self._image_width and 0.0 <= v < self._image_height)

    def _status_from_keypoint(self, keypoint: np.ndarray) -> ProjectionResult:
        if not np.all(np.isfinite(keypoint)):
            return ProjectionResult.PROJECTION_INVALID
        if self.is_keypoint_in_image_box(keypoint):
            return ProjectionResult.KEYPOINT_VISIBLE
        return ProjectionResult.KEYPOINT_OUTSIDE_IMAGE_BOX

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project3(self, point_3d: np.ndarray) -> Tuple[ProjectionResult, np.ndarray]:
        """
        Project a 3D point in the camera frame to a pixel.

        Args:
            point_3d: Point (3,) in the camera frame.

        Returns:
            Tuple of (ProjectionResult, keypoint (2,)).
        """
        projection = self.project3_functional(point_3d)
        return projection.result, projection.keypoint

    def project3_with_jacobian(
        self,
        point_3d: np.ndarray,
    ) -> Tuple[ProjectionResult, np.ndarray, np.ndarray]:
        """
        Project a 3D point and compute d(keypoint)/d(point).

        Returns:
            Tuple of (ProjectionResult, keypoint (2,), Jacobian (2, 3)).
        """
        projection = self.project3_functional(point_3d, jacobian_point=True)
        return projection.result, projection.keypoint, projection.jacobian_point

    def project3_functional(
        self,
        point_3d: np.ndarray,
        intrinsics_external: Optional[Sequence[float]] = None,
        distortion_coefficients_external: Optional[Sequence[float]] = None,
        jacobian_point: bool = False,
        jacobian_intrinsics: bool = False,
        jacobian_distortion: bool = False,
    ) -> FunctionalProjection:
        """
        Project a 3D point with optionally overridden parameters.

        Overrides replace the camera's own intrinsics or distortion parameters
        for this call only; the camera is never modified. Optimizers use this
        to evaluate the projection and its derivatives at perturbed parameter
        values without constructing new cameras.

        Args:
            point_3d: Point (3,) in the camera frame.
            intrinsics_external: Optional intrinsics (NUM_INTRINSICS,).
            distortion_coefficients_external: Optional distortion parameters.
                Requires the camera to have a distortion model.
            jacobian_point: Compute d(keypoint)/d(point), 2x3.
            jacobian_intrinsics: Compute d(keypoint)/d(intrinsics).
            jacobian_distortion: Compute d(keypoint)/d(distortion parameters);
                2x0 when the camera has no distortion model.

        Returns:
            FunctionalProjection with unrequested Jacobians set to None.

        Raises:
            ContractViolationError: On malformed point or overrides.
        """
        point_3d = _as_vector(point_3d, 3, "point_3d")

        if intrinsics_external is None:
            intrinsics = self._intrinsics
        else:
            intrinsics = np.asarray(intrinsics_external, dtype=np.float64).reshape(-1)
            check(
                intrinsics.size == self.NUM_INTRINSICS,
                f"intrinsics_external must have {self.NUM_INTRINSICS} entries, got {intrinsics.size}",
                self.logger,
            )

        distortion_parameters = None
        if self._distortion is not None:
            distortion_parameters = self._distortion.resolve_parameters(distortion_coefficients_external)
        else:
            check(
                distortion_coefficients_external is None,
                f"camera {self._id.short()} has no distortion model, "
                "distortion_coefficients_external must be None",
                self.logger,
            )

        return self._project3(
            point_3d,
            intrinsics,
            distortion_parameters,
            jacobian_point,
            jacobian_intrinsics,
            jacobian_distortion,
        )

    @abstractmethod
    def _project3(
        self,
        point_3d: np.ndarray,
        intrinsics: np.ndarray,
        distortion_parameters: Optional[np.ndarray],
        jacobian_point: bool,
        jacobian_intrinsics: bool,
        jacobian_distortion: bool,
    ) -> FunctionalProjection:
        """Model specific projection with already resolved parameters."""

    @staticmethod
    def _dehomogenize(point_4d: np.ndarray) -> np.ndarray:
        point_4d = _as_vector(point_4d, 4, "point_4d")
        if point_4d[3] < 0:
            return -point_4d[:3]
        return point_4d[:3].copy()

    def project4(self, point_4d: np.ndarray) -> Tuple[ProjectionResult, np.ndarray]:
        """
        Project a homogeneous point (x, y, z, w).

        A negative w flips the point to (-x, -y, -z) before dropping to 3D so
        that points with either homogeneous sign project consistently.

        Returns:
            Tuple of (ProjectionResult, keypoint (2,)).
        """
        return self.project3(self._dehomogenize(point_4d))

    def project4_with_jacobian(
        self,
        point_4d: np.ndarray,
    ) -> Tuple[ProjectionResult, np.ndarray, np.ndarray]:
        """
        Project a homogeneous point and compute a 2x4 Jacobian.

        The Jacobian holds the 2x3 point Jacobian of the sign-normalized 3D
        point in its first three columns; the fourth column is zero.
        """
        result, keypoint, J = self.project3_with_jacobian(self._dehomogenize(point_4d))
        jacobian = np.zeros((2, 4))
        jacobian[:, :3] = J
        return result, keypoint, jacobian

    def is_projectable3(self, point_3d: np.ndarray) -> bool:
        result, _ = self.project3(point_3d)
        return result.is_keypoint_visible()

    def is_projectable4(self, point_4d: np.ndarray) -> bool:
        result, _ = self.project4(point_4d)
        return result.is_keypoint_visible()

    # ------------------------------------------------------------------
    # Back-projection
    # ------------------------------------------------------------------

    def back_project3(self, keypoint: np.ndarray) -> Tuple[bool, np.ndarray]:
        """
        Compute the bearing vector of the ray through a pixel.

        Args:
            keypoint: Pixel coordinates (2,).

        Returns:
            Tuple of (success, bearing (3,)). The bearing is not normalized.
            Success is False when the pixel lies outside the model's valid
            domain.
        """
        return self._back_project3(_as_vector(keypoint, 2, "keypoint"))

    @abstractmethod
    def _back_project3(self, keypoint: np.ndarray) -> Tuple[bool, np.ndarray]:
        """Model specific back-projection."""

    def back_project4(self, keypoint: np.ndarray) -> Tuple[bool, np.ndarray]:
        """
        Back-project to a homogeneous direction (x, y, z, 0).
        """
        success, bearing = self.back_project3(keypoint)
        return success, np.append(bearing, 0.0)

    # ------------------------------------------------------------------
    # Vectorized variants
    # ------------------------------------------------------------------

    def project3_vectorized(
        self,
        points_3d: np.ndarray,
    ) -> Tuple[np.ndarray, List[ProjectionResult]]:
        """
        Project every column of a 3xN matrix independently.

        Args:
            points_3d: Points (3, N) in the camera frame.

        Returns:
            Tuple of (keypoints (2, N), list of N ProjectionResults).
        """
        points_3d = np.asarray(points_3d, dtype=np.float64)
        check(
            points_3d.ndim == 2 and points_3d.shape[0] == 3,
            f"points_3d must have shape (3, N), got {points_3d.shape}",
        )
        num_points = points_3d.shape[1]
        keypoints = np.zeros((2, num_points))
        results = [ProjectionResult.UNINITIALIZED] * num_points

        for i in range(num_points):
            results[i], keypoints[:, i] = self.project3(points_3d[:, i])

        return keypoints, results

    def back_project3_vectorized(
        self,
        keypoints: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Back-project every column of a 2xN matrix independently.

        Returns:
            Tuple of (bearings (3, N), success mask (N,)).
        """
        keypoints = np.asarray(keypoints, dtype=np.float64)
        check(
            keypoints.ndim == 2 and keypoints.shape[0] == 2,
            f"keypoints must have shape (2, N), got {keypoints.shape}",
        )
        num_points = keypoints.shape[1]
        bearings = np.zeros((3, num_points))
        success = np.zeros(num_points, dtype=bool)

        for i in range(num_points):
            success[i], bearings[:, i] = self.back_project3(keypoints[:, i])

        return bearings, success

    # ------------------------------------------------------------------
    # Comparison and printing
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        """
        Structural equality on intrinsics, line delay and image size.

        Id and label are not compared: two cameras with the same
        optics but different names are equal.
        """
        if not isinstance(other, Camera):
            return NotImplemented
        return (
            type(self) is type(other)
            and np.array_equal(self._intrinsics, other._intrinsics)
            and self._line_delay_nanoseconds == other._line_delay_nanoseconds
            and self._image_width == other._image_width
            and self._image_height == other._image_height
        )

    __hash__ = None

    def print_parameters(self, stream: Optional[TextIO] = None, text: str = "") -> None:
        """
        Write a human readable parameter summary.

        Args:
            stream: Output stream (stdout by default).
            text: Optional heading printed first.
        """
        stream = stream or sys.stdout
        if text:
            stream.write(f"{text}\n")
        stream.write(f"Camera({self._id}): {self._label}\n")
        stream.write(f"  line delay: {self._line_delay_nanoseconds}\n")
        stream.write(f"  image (cols,rows): {self._image_width}, {self._image_height}\n")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(label='{self._label}', id={self._id.short()}, "
            f"width={self._image_width}, height={self._image_height})"
        )
