"""Camera rig: an ordered set of cameras with extrinsics to a common body frame."""

import sys
from typing import Dict, Optional, Sequence, TextIO, Tuple

from ..calibration.transformation import Transformation
from ..utils.checks import check, check_index
from ..utils.ids import CameraId, NCameraId
from ..utils.logger import LoggerMixin
from .camera import Camera


class NCamera(LoggerMixin):
    """
    Immutable collection of cameras sharing a body frame.

    Camera ``i`` is related to the body frame by ``T_C_B[i]``, which maps
    body-frame points into the frame of camera ``i``. The camera list and
    the extrinsics are fixed at construction, so one rig can be shared
    read-only by many frame sets and threads.

    Attributes:
        id: Rig id.
        label: Human readable name.

    Example:
        >>> rig = NCamera(NCameraId.random(), [T_C0_B, T_C1_B], [left, right], "stereo")
        >>> rig.get_camera(1) is right
        True
        >>> rig.get_camera_index(right.id)
        1
    """

    def __init__(
        self,
        ncamera_id: Optional[NCameraId],
        T_C_B: Sequence[Transformation],
        cameras: Sequence[Camera],
        label: str = "",
    ):
        """
        Initialize the rig.

        Args:
            ncamera_id: Rig id; a random id is generated when None.
            T_C_B: One body-to-camera transformation per camera.
            cameras: Cameras in canonical index order.
            label: Human readable name.

        Raises:
            ContractViolationError: On length mismatch, missing cameras or
                duplicate camera ids.
        """
        cameras = tuple(cameras)
        T_C_B = tuple(T_C_B)

        check(
            len(cameras) == len(T_C_B),
            f"rig needs one T_C_B per camera, got {len(T_C_B)} transformations "
            f"for {len(cameras)} cameras",
            self.logger,
        )
        for i, (camera, transform) in enumerate(zip(cameras, T_C_B)):
            check(camera is not None, f"camera {i} of the rig must not be None", self.logger)
            check(
                isinstance(transform, Transformation),
                f"T_C_B[{i}] must be a Transformation, got {type(transform).__name__}",
                self.logger,
            )

        self._id = ncamera_id if ncamera_id is not None else NCameraId.random()
        self._label = label
        self._cameras: Tuple[Camera, ...] = cameras
        self._T_C_B: Tuple[Transformation, ...] = T_C_B
        self._id_to_index: Dict[CameraId, int] = {}

        for i, camera in enumerate(cameras):
            check(
                camera.id not in self._id_to_index,
                f"camera id {camera.id} appears twice in the rig "
                f"(indices {self._id_to_index.get(camera.id)} and {i})",
                self.logger,
            )
            self._id_to_index[camera.id] = i

    @property
    def id(self) -> NCameraId:
        return self._id

    @property
    def label(self) -> str:
        return self._label

    @property
    def cameras(self) -> Tuple[Camera, ...]:
        return self._cameras

    @property
    def num_cameras(self) -> int:
        return len(self._cameras)

    def __len__(self) -> int:
        return len(self._cameras)

    def get_camera(self, camera_index: int) -> Camera:
        """
        Get the camera at an index.

        The returned object is the rig's shared camera instance: frames bound
        to this rig hold the very same object.
        """
        check_index(camera_index, len(self._cameras), "camera index", self.logger)
        return self._cameras[camera_index]

    def get_T_C_B(self, camera_index: int) -> Transformation:
        """Transformation from the body frame into camera ``camera_index``."""
        check_index(camera_index, len(self._cameras), "camera index", self.logger)
        return self._T_C_B[camera_index]

    def get_T_B_C(self, camera_index: int) -> Transformation:
        """Transformation from camera ``camera_index`` into the body frame."""
        return self.get_T_C_B(camera_index).inverse()

    def get_camera_id(self, camera_index: int) -> CameraId:
        return self.get_camera(camera_index).id

    def has_camera_with_id(self, camera_id: CameraId) -> bool:
        return camera_id in self._id_to_index

    def get_camera_index(self, camera_id: CameraId) -> Optional[int]:
        """
        Index of the camera with the given id.

        Returns:
            The camera index, or None if the rig has no camera with this id.
        """
        return self._id_to_index.get(camera_id)

    def __eq__(self, other) -> bool:
        """
        Value equality: same camera count, pairwise equal cameras and extrinsics.

        Rig id and label are not compared.
        """
        if not isinstance(other, NCamera):
            return NotImplemented
        if len(self._cameras) != len(other._cameras):
            return False
        return all(
            camera == other_camera and T == other_T
            for camera, other_camera, T, other_T in zip(
                self._cameras, other._cameras, self._T_C_B, other._T_C_B
            )
        )

    __hash__ = None

    def print_parameters(self, stream: Optional[TextIO] = None, text: str = "") -> None:
        stream = stream or sys.stdout
        if text:
            stream.write(f"{text}\n")
        stream.write(f"NCamera({self._id}): {self._label}\n")
        for i, (camera, T) in enumerate(zip(self._cameras, self._T_C_B)):
            stream.write(f"  T_C{i}_B: {T!r}\n")
            camera.print_parameters(stream, f"Camera {i}:")

    def __repr__(self) -> str:
        return f"NCamera(label='{self._label}', id={self._id.short()}, num_cameras={len(self)})"
