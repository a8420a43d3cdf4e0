"""
Synchronized frames of a camera rig.

A VisualNFrame groups one frame slot per camera of an :class:`NCamera`.
Slot ``i`` may only hold a frame whose camera geometry *is* the rig's camera
``i`` (identity, not value equality), so a frame can never silently end up
associated with a different optical model than the one the rig assigns.

States:
    Unbound: created with a frame count only. Frames may be set freely.
    Bound: a rig is attached. The frame count equals the rig's camera count
        and every populated slot satisfies the identity invariant.

Unbound -> Bound happens in :meth:`VisualNFrame.set_ncamera`.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from ..calibration.transformation import Transformation
from ..cameras.camera import Camera
from ..cameras.ncamera import NCamera
from ..utils.checks import check, check_index
from ..utils.ids import CameraId, NFramesId
from ..utils.logger import LoggerMixin
from ..utils.predicates import check_shared_equal
from .visual_frame import VisualFrame


def _describe_camera(camera: Optional[Camera]) -> str:
    if camera is None:
        return "<none>"
    return f"{camera.id} ('{camera.label}')"


class VisualNFrame(LoggerMixin):
    """
    Frame set bound to a shared camera rig.

    Example:
        >>> nframe = VisualNFrame(ncamera=rig)
        >>> frame = VisualFrame(camera=rig.get_camera(0))
        >>> nframe.set_frame(0, frame)
        >>> nframe.get_frame(0) is frame
        True
    """

    def __init__(
        self,
        nframe_id: Optional[NFramesId] = None,
        num_frames: Optional[int] = None,
        ncamera: Optional[NCamera] = None,
    ):
        """
        Initialize the frame set.

        Pass either ``num_frames`` (unbound) or ``ncamera`` (bound, one slot
        per rig camera); passing neither creates an empty, unbound set.

        Args:
            nframe_id: Id of the set; a random id is generated when None.
            num_frames: Number of frame slots.
            ncamera: Rig to bind to.

        Raises:
            ContractViolationError: If both ``num_frames`` and ``ncamera`` are
                given or ``num_frames`` is negative.
        """
        check(
            num_frames is None or ncamera is None,
            "pass either num_frames or ncamera, not both",
            self.logger,
        )
        self._id = nframe_id if nframe_id is not None else NFramesId.random()
        self._ncamera: Optional[NCamera] = ncamera

        if ncamera is not None:
            num_frames = ncamera.num_cameras
        elif num_frames is None:
            num_frames = 0
        check(num_frames >= 0, f"num_frames must be >= 0, got {num_frames}", self.logger)

        self._frames: List[Optional[VisualFrame]] = [None] * num_frames

    @property
    def id(self) -> NFramesId:
        return self._id

    # ------------------------------------------------------------------
    # Rig
    # ------------------------------------------------------------------

    @property
    def ncamera(self) -> Optional[NCamera]:
        """The bound rig, or None while unbound."""
        return self._ncamera

    def has_ncamera(self) -> bool:
        return self._ncamera is not None

    def get_ncamera(self) -> NCamera:
        """
        Get the bound rig.

        Raises:
            ContractViolationError: If no rig is bound.
        """
        check(
            self._ncamera is not None,
            f"VisualNFrame {self._id.short()} has no camera rig",
            self.logger,
        )
        return self._ncamera

    def set_ncamera(self, ncamera: NCamera) -> None:
        """
        Bind the frame set to a rig.

        Populated slots are reconciled with the rig: a frame already holding
        the rig's camera is left as is, a frame without camera receives the
        rig's camera, and a frame holding any other camera is rejected.
        Empty slots stay empty.

        Raises:
            ContractViolationError: If ``ncamera`` is None, the frame count
                does not match the rig's camera count, or a frame is already
                bound to a different camera.
        """
        check(ncamera is not None, "ncamera must not be None", self.logger)
        check(
            len(self._frames) == ncamera.num_cameras,
            f"number of cameras in rig {ncamera.id.short()} ({ncamera.num_cameras}) does not "
            f"match the number of frames ({len(self._frames)}) of VisualNFrame {self._id.short()}",
            self.logger,
        )

        # Validate every slot before touching any of them.
        for i, frame in enumerate(self._frames):
            if frame is None:
                continue
            current = frame.get_camera_geometry()
            expected = ncamera.get_camera(i)
            check(
                current is None or current is expected,
                f"frame {i} is already bound to camera {_describe_camera(current)}, "
                f"cannot rebind to camera {_describe_camera(expected)}",
                self.logger,
            )

        for i, frame in enumerate(self._frames):
            if frame is not None and frame.get_camera_geometry() is None:
                frame.set_camera_geometry(ncamera.get_camera(i))

        self._ncamera = ncamera
        self.logger.debug(
            f"VisualNFrame {self._id.short()} bound to rig {ncamera.id.short()} "
            f"({ncamera.num_cameras} cameras)"
        )

    def num_cameras(self) -> int:
        return self.get_ncamera().num_cameras

    def get_T_C_B(self, camera_index: int) -> Transformation:
        return self.get_ncamera().get_T_C_B(camera_index)

    def get_camera(self, camera_index: int) -> Camera:
        return self.get_ncamera().get_camera(camera_index)

    def get_camera_id(self, camera_index: int) -> CameraId:
        return self.get_ncamera().get_camera_id(camera_index)

    def has_camera_with_id(self, camera_id: CameraId) -> bool:
        return self.get_ncamera().has_camera_with_id(camera_id)

    def get_camera_index(self, camera_id: CameraId) -> Optional[int]:
        """Index of the rig camera with this id, or None if absent."""
        return self.get_ncamera().get_camera_index(camera_id)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    @property
    def num_frames(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, frame_index: int) -> VisualFrame:
        return self.get_frame(frame_index)

    def get_frame(self, frame_index: int) -> VisualFrame:
        """
        Get a populated frame.

        Raises:
            IndexOutOfRangeError: If the index is out of range.
            ContractViolationError: If the slot is empty.
        """
        check_index(frame_index, len(self._frames), "frame index", self.logger)
        frame = self._frames[frame_index]
        check(frame is not None, f"frame {frame_index} is not set", self.logger)
        return frame

    def get_frame_if_set(self, frame_index: int) -> Optional[VisualFrame]:
        """Get the frame in a slot, or None if the slot is empty."""
        check_index(frame_index, len(self._frames), "frame index", self.logger)
        return self._frames[frame_index]

    def is_frame_null(self, frame_index: int) -> bool:
        """True if the slot at ``frame_index`` holds no frame."""
        check_index(frame_index, len(self._frames), "frame index", self.logger)
        return self._frames[frame_index] is None

    def set_frame(self, frame_index: int, frame: VisualFrame) -> None:
        """
        Put a frame in a slot, replacing any previous frame.

        When a rig is bound, the frame's camera geometry must be the rig's
        camera at ``frame_index`` (the same object).

        Raises:
            IndexOutOfRangeError: If the index is out of range.
            ContractViolationError: If ``frame`` is None or its camera is not
                the rig's camera at this index.
        """
        check_index(frame_index, len(self._frames), "frame index", self.logger)
        check(frame is not None, f"frame for slot {frame_index} must not be None", self.logger)

        if self._ncamera is not None:
            expected = self._ncamera.get_camera(frame_index)
            current = frame.get_camera_geometry()
            check(
                current is expected,
                f"frame {frame.id.short()} for slot {frame_index} has camera "
                f"{_describe_camera(current)}, but the rig assigns camera "
                f"{_describe_camera(expected)}",
                self.logger,
            )

        self._frames[frame_index] = frame

    def iterate_frames(self) -> Iterator[Tuple[int, VisualFrame]]:
        """
        Iterate over populated slots.

        Yields:
            (frame_index, frame) for each non-empty slot.
        """
        for i, frame in enumerate(self._frames):
            if frame is not None:
                yield i, frame

    def get_min_timestamp_nanoseconds(self) -> Optional[int]:
        """Earliest timestamp among populated frames that carry one."""
        timestamps = self._timestamps()
        return min(timestamps) if timestamps else None

    def get_max_timestamp_nanoseconds(self) -> Optional[int]:
        """Latest timestamp among populated frames that carry one."""
        timestamps = self._timestamps()
        return max(timestamps) if timestamps else None

    def _timestamps(self) -> List[int]:
        return [
            frame.timestamp_nanoseconds
            for _, frame in self.iterate_frames()
            if frame.has_timestamp()
        ]

    def get_statistics(self) -> Dict:
        """
        Summary of the frame set.

        Returns:
            Dictionary with slot and binding counts.
        """
        populated = sum(1 for _ in self.iterate_frames())
        return {
            "num_frames": len(self._frames),
            "populated_frames": populated,
            "bound": self._ncamera is not None,
            "fill_ratio": populated / len(self._frames) if self._frames else 0.0,
        }

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        """
        Equal ids, shared-equal rigs, equal frame counts and pairwise
        shared-equal frames.
        """
        if not isinstance(other, VisualNFrame):
            return NotImplemented
        if self._id != other._id:
            return False
        if not check_shared_equal(self._ncamera, other._ncamera):
            return False
        if len(self._frames) != len(other._frames):
            return False
        return all(
            check_shared_equal(frame, other_frame)
            for frame, other_frame in zip(self._frames, other._frames)
        )

    __hash__ = None

    def __repr__(self) -> str:
        rig = self._ncamera.label if self._ncamera is not None else None
        return (
            f"VisualNFrame(id={self._id.short()}, num_frames={len(self._frames)}, "
            f"ncamera={rig!r})"
        )
