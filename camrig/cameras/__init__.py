"""
Camera geometry.

Classes:
    ProjectionResult: Outcome of projecting a point (visible, outside the
        image box, behind the camera, invalid).
    Camera: Abstract projection / back-projection contract.
    PinholeCamera: Pinhole model with optional distortion.
    RadTanDistortion, EquidistantDistortion: Lens distortion models.
    NCamera: Immutable rig of cameras sharing a body frame.

Example Usage:
    >>> from camrig.cameras import PinholeCamera, RadTanDistortion
    >>> camera = PinholeCamera([460.0, 460.0, 376.0, 240.0], 752, 480,
    ...                        RadTanDistortion([-0.28, 0.07, 0.0002, 0.00002]))
    >>> result, keypoint = camera.project3(np.array([0.2, 0.1, 3.0]))
    >>> if result:
    ...     success, bearing = camera.back_project3(keypoint)
"""

from .projection_result import ProjectionResult, ProjectionStatus
from .distortion import Distortion, EquidistantDistortion, RadTanDistortion
from .camera import Camera, FunctionalProjection
from .pinhole_camera import PinholeCamera
from .ncamera import NCamera
from .factory import camera_from_config, distortion_from_config, load_ncamera, ncamera_from_config

__all__ = [
    "ProjectionResult",
    "ProjectionStatus",
    "Distortion",
    "EquidistantDistortion",
    "RadTanDistortion",
    "Camera",
    "FunctionalProjection",
    "PinholeCamera",
    "NCamera",
    "camera_from_config",
    "distortion_from_config",
    "load_ncamera",
    "ncamera_from_config",
]
