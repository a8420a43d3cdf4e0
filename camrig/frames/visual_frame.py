"""Single camera image frame."""

from typing import Optional

import numpy as np

from ..cameras.camera import Camera
from ..utils.checks import check
from ..utils.ids import FrameId
from ..utils.predicates import check_shared_equal


INVALID_TIMESTAMP = -1


class VisualFrame:
    """
    One image of one camera, with optional keypoint measurements.

    A frame refers to at most one camera geometry. The camera is shared, not
    owned: frames grouped in a :class:`VisualNFrame` hold the exact camera
    instance of the rig at their index.

    Attributes:
        id: Frame id.
        timestamp_nanoseconds: Capture time, -1 when unknown.
        image: Optional raw image (H, W) or (H, W, C).
        keypoints: Keypoint measurements (2, N) in pixels.
    """

    def __init__(
        self,
        frame_id: Optional[FrameId] = None,
        camera: Optional[Camera] = None,
        timestamp_nanoseconds: int = INVALID_TIMESTAMP,
        image: Optional[np.ndarray] = None,
        keypoints: Optional[np.ndarray] = None,
    ):
        self._id = frame_id if frame_id is not None else FrameId.random()
        self._camera = camera
        self.timestamp_nanoseconds = int(timestamp_nanoseconds)
        self.image = image
        self._keypoints = np.zeros((2, 0))
        if keypoints is not None:
            self.keypoints = keypoints

    @property
    def id(self) -> FrameId:
        return self._id

    def get_camera_geometry(self) -> Optional[Camera]:
        return self._camera

    def set_camera_geometry(self, camera: Optional[Camera]) -> None:
        self._camera = camera

    def has_camera_geometry(self) -> bool:
        return self._camera is not None

    def has_timestamp(self) -> bool:
        return self.timestamp_nanoseconds != INVALID_TIMESTAMP

    @property
    def keypoints(self) -> np.ndarray:
        return self._keypoints

    @keypoints.setter
    def keypoints(self, keypoints: np.ndarray) -> None:
        keypoints = np.asarray(keypoints, dtype=np.float64)
        check(
            keypoints.ndim == 2 and keypoints.shape[0] == 2,
            f"keypoints must have shape (2, N), got {keypoints.shape}",
        )
        self._keypoints = keypoints

    @property
    def num_keypoints(self) -> int:
        return self._keypoints.shape[1]

    def __eq__(self, other) -> bool:
        if not isinstance(other, VisualFrame):
            return NotImplemented
        return (
            self._id == other._id
            and self.timestamp_nanoseconds == other.timestamp_nanoseconds
            and np.array_equal(self._keypoints, other._keypoints)
            and _images_equal(self.image, other.image)
            and check_shared_equal(self._camera, other._camera)
        )

    __hash__ = None

    def __repr__(self) -> str:
        camera = self._camera.label if self._camera is not None else None
        return (
            f"VisualFrame(id={self._id.short()}, timestamp={self.timestamp_nanoseconds}, "
            f"keypoints={self.num_keypoints}, camera={camera!r})"
        )


def _images_equal(lhs: Optional[np.ndarray], rhs: Optional[np.ndarray]) -> bool:
    if lhs is None or rhs is None:
        return lhs is None and rhs is None
    return np.array_equal(lhs, rhs)
