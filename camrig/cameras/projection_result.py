"""
Outcome of projecting a single 3D point into a camera.

A projection either yields a usable keypoint or fails for one of several
operationally distinct reasons. Callers branch on the status as normal
control flow: a point outside the image box may become visible in the next
frame, a point behind the camera can be retried with the other sign of a
homogeneous point, and an invalid projection should be discarded.
"""

from dataclasses import dataclass
from enum import Enum


class ProjectionStatus(Enum):
    """Closed set of projection outcomes."""
    UNINITIALIZED = "uninitialized"
    KEYPOINT_VISIBLE = "keypoint_visible"
    KEYPOINT_OUTSIDE_IMAGE_BOX = "keypoint_outside_image_box"
    POINT_BEHIND_CAMERA = "point_behind_camera"
    PROJECTION_INVALID = "projection_invalid"


@dataclass(frozen=True)
class ProjectionResult:
    """
    Value type wrapping a :class:`ProjectionStatus`.

    The class-level aliases ``ProjectionResult.KEYPOINT_VISIBLE`` etc. are
    ready-made results for each status, so ``result == ProjectionResult.POINT_BEHIND_CAMERA``
    reads naturally at call sites.

    Attributes:
        status: Why the point did or did not map to a visible pixel.

    Example:
        >>> result, keypoint = camera.project3(np.array([0.1, 0.2, 4.0]))
        >>> if result:
        ...     use(keypoint)
        >>> elif result.status is ProjectionStatus.POINT_BEHIND_CAMERA:
        ...     discard()
    """

    status: ProjectionStatus = ProjectionStatus.UNINITIALIZED

    def is_keypoint_visible(self) -> bool:
        """True iff the keypoint is usable (status is KEYPOINT_VISIBLE)."""
        return self.status is ProjectionStatus.KEYPOINT_VISIBLE

    def __bool__(self) -> bool:
        return self.is_keypoint_visible()

    def __str__(self) -> str:
        return self.status.name

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "keypoint_visible": self.is_keypoint_visible(),
        }


ProjectionResult.UNINITIALIZED = ProjectionResult(ProjectionStatus.UNINITIALIZED)
ProjectionResult.KEYPOINT_VISIBLE = ProjectionResult(ProjectionStatus.KEYPOINT_VISIBLE)
ProjectionResult.KEYPOINT_OUTSIDE_IMAGE_BOX = ProjectionResult(ProjectionStatus.KEYPOINT_OUTSIDE_IMAGE_BOX)
ProjectionResult.POINT_BEHIND_CAMERA = ProjectionResult(ProjectionStatus.POINT_BEHIND_CAMERA)
ProjectionResult.PROJECTION_INVALID = ProjectionResult(ProjectionStatus.PROJECTION_INVALID)
