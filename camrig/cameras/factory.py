"""
Build cameras and rigs from configuration dictionaries.

Camera block::

    type: pinhole
    label: cam0
    id: 0123456789abcdef0123456789abcdef     # optional
    intrinsics: [fu, fv, cu, cv]
    image_width: 752
    image_height: 480
    line_delay_nanoseconds: 0                # optional
    distortion:                              # optional
      type: radial-tangential                # radial-tangential | equidistant | none
      parameters: [k1, k2, p1, p2]

Rig block::

    label: stereo
    id: ...                                  # optional
    cameras:
      - camera: {<camera block>}
        T_B_C: 4x4 nested list               # camera frame -> body frame
"""

from pathlib import Path
from typing import Any, Dict, Optional, Type, Union

import numpy as np

from ..calibration.transformation import Transformation
from ..utils.config_loader import ConfigLoader, require
from ..utils.ids import CameraId, NCameraId
from ..utils.logger import get_logger
from .camera import DEFAULT_LABEL, Camera
from .distortion import Distortion, EquidistantDistortion, RadTanDistortion
from .ncamera import NCamera
from .pinhole_camera import PinholeCamera


logger = get_logger(__name__)

CAMERA_TYPES: Dict[str, Type[Camera]] = {
    PinholeCamera.CAMERA_TYPE: PinholeCamera,
}

DISTORTION_TYPES: Dict[str, Type[Distortion]] = {
    RadTanDistortion.TYPE: RadTanDistortion,
    EquidistantDistortion.TYPE: EquidistantDistortion,
}


def distortion_from_config(config: Optional[Dict[str, Any]]) -> Optional[Distortion]:
    """
    Create a distortion model.

    Returns:
        The model, or None for a missing block or ``type: none``.

    Raises:
        ValueError: For an unknown distortion type.
    """
    if not config:
        return None

    distortion_type = str(config.get("type", "none")).lower()
    if distortion_type == "none":
        return None
    if distortion_type not in DISTORTION_TYPES:
        raise ValueError(
            f"Unknown distortion type '{distortion_type}', "
            f"expected one of {sorted(DISTORTION_TYPES)} or 'none'"
        )

    return DISTORTION_TYPES[distortion_type](require(config, "parameters"))


def camera_from_config(config: Dict[str, Any]) -> Camera:
    """
    Create a camera from a camera block.

    Raises:
        KeyError: If a mandatory key is missing.
        ValueError: For an unknown camera type.
    """
    camera_type = str(config.get("type", PinholeCamera.CAMERA_TYPE)).lower()
    if camera_type not in CAMERA_TYPES:
        raise ValueError(f"Unknown camera type '{camera_type}', expected one of {sorted(CAMERA_TYPES)}")

    camera_id = CameraId(config["id"]) if config.get("id") else None
    camera = CAMERA_TYPES[camera_type](
        require(config, "intrinsics"),
        int(require(config, "image_width")),
        int(require(config, "image_height")),
        distortion=distortion_from_config(config.get("distortion")),
        camera_id=camera_id,
        label=config.get("label", DEFAULT_LABEL),
    )

    line_delay = config.get("line_delay_nanoseconds")
    if line_delay is None:
        logger.debug(f"No line delay configured for camera '{camera.label}', using 0")
        line_delay = 0
    camera.line_delay_nanoseconds = int(line_delay)

    return camera


def ncamera_from_config(config: Dict[str, Any]) -> NCamera:
    """
    Create a rig from a rig block.

    ``T_B_C`` in the configuration maps camera points into the body frame;
    the rig stores its inverse ``T_C_B``.
    """
    entries = require(config, "cameras")
    if not isinstance(entries, list) or not entries:
        raise ValueError("Rig config 'cameras' must be a non-empty list")

    cameras = []
    T_C_B = []
    for i, entry in enumerate(entries):
        if "camera" not in entry:
            raise KeyError(f"Rig camera entry {i} has no 'camera' block")
        cameras.append(camera_from_config(entry["camera"]))
        T_B_C = entry.get("T_B_C")
        T_C_B.append(
            Transformation() if T_B_C is None
            else Transformation.from_matrix(np.asarray(T_B_C, dtype=np.float64)).inverse()
        )

    ncamera_id = NCameraId(config["id"]) if config.get("id") else None
    rig = NCamera(ncamera_id, T_C_B, cameras, config.get("label", ""))
    logger.info(f"Loaded rig '{rig.label}' with {rig.num_cameras} cameras")
    return rig


def load_ncamera(
    path: Union[str, Path],
    loader: Optional[ConfigLoader] = None,
) -> NCamera:
    """
    Load a rig from a YAML file.

    The rig block may sit at the top level or under an ``ncamera`` key.
    """
    loader = loader or ConfigLoader()
    config = loader.load(path)
    return ncamera_from_config(config.get("ncamera", config))
