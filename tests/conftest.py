"""Shared fixtures."""

import pytest


def build_rig(num_cameras=2, focal_length=100.0, label="rig"):
    """Rig of identical pinhole cameras spaced 10 cm apart along x."""
    from camrig.calibration.transformation import Transformation
    from camrig.cameras.ncamera import NCamera
    from camrig.cameras.pinhole_camera import PinholeCamera

    cameras = [
        PinholeCamera([focal_length, focal_length, 50.0, 50.0], 100, 100, label=f"cam{i}")
        for i in range(num_cameras)
    ]
    T_C_B = [Transformation(t=[-0.1 * i, 0.0, 0.0]) for i in range(num_cameras)]
    return NCamera(None, T_C_B, cameras, label)


@pytest.fixture
def make_rig():
    """Factory for small test rigs."""
    return build_rig


@pytest.fixture
def stereo_rig():
    return build_rig()
