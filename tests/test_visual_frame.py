"""
Tests for single camera frames.
"""

import numpy as np
import pytest


class TestVisualFrame:
    """Tests for VisualFrame."""

    def test_defaults(self):
        from camrig.frames.visual_frame import VisualFrame

        frame = VisualFrame()

        assert frame.id.is_valid()
        assert not frame.has_camera_geometry()
        assert not frame.has_timestamp()
        assert frame.num_keypoints == 0

    def test_camera_geometry(self, stereo_rig):
        from camrig.frames.visual_frame import VisualFrame

        frame = VisualFrame()
        frame.set_camera_geometry(stereo_rig.get_camera(0))

        assert frame.get_camera_geometry() is stereo_rig.get_camera(0)

    def test_keypoints_shape(self):
        from camrig.frames.visual_frame import VisualFrame
        from camrig.utils.checks import ContractViolationError

        frame = VisualFrame(keypoints=np.zeros((2, 5)))

        assert frame.num_keypoints == 5
        with pytest.raises(ContractViolationError):
            frame.keypoints = np.zeros((5, 2))

    def test_equality(self, stereo_rig):
        """Frames compare id, timestamp, measurements and camera by value."""
        from camrig.frames.visual_frame import VisualFrame
        from camrig.utils.ids import FrameId

        frame_id = FrameId.random()
        image = np.zeros((4, 4), dtype=np.uint8)
        a = VisualFrame(frame_id, stereo_rig.get_camera(0), 10, image.copy())
        b = VisualFrame(frame_id, stereo_rig.get_camera(1), 10, image.copy())

        # cameras 0 and 1 of the test rig share their calibration
        assert a == b
        assert a != VisualFrame(frame_id, stereo_rig.get_camera(0), 11, image.copy())
        assert a != VisualFrame(frame_id, None, 10, image.copy())
        assert a != VisualFrame(frame_id, stereo_rig.get_camera(0), 10)
        assert a != VisualFrame(FrameId.random(), stereo_rig.get_camera(0), 10, image.copy())


class TestUtilities:
    """Tests for ids and comparison helpers."""

    def test_hash_id(self):
        from camrig.utils.ids import CameraId, FrameId

        camera_id = CameraId.random()

        assert camera_id.is_valid()
        assert len(str(camera_id)) == 32
        assert camera_id.short() == str(camera_id)[:8]
        assert CameraId(camera_id.value.upper()) == camera_id
        assert FrameId(camera_id.value) != camera_id
        assert not CameraId().is_valid()
        with pytest.raises(ValueError):
            CameraId("not-a-hash")

    def test_check_shared_equal(self):
        from camrig.utils.predicates import check_shared_equal

        assert check_shared_equal(None, None)
        assert not check_shared_equal(None, 1)
        assert not check_shared_equal([1], None)
        assert check_shared_equal([1, 2], [1, 2])
        assert not check_shared_equal([1, 2], [2, 1])

    def test_check_index(self):
        from camrig.utils.checks import IndexOutOfRangeError, check_index

        assert check_index(np.int64(2), 3) == 2
        with pytest.raises(IndexOutOfRangeError, match="out of range"):
            check_index(3, 3)
        with pytest.raises(IndexOutOfRangeError, match="empty"):
            check_index(0, 0)
        with pytest.raises(IndexOutOfRangeError):
            check_index(True, 3)

    def test_contract_errors_are_value_errors(self):
        from camrig.utils.checks import ContractViolationError, check, check_not_none

        assert issubclass(ContractViolationError, ValueError)
        assert check_not_none(5, "value") == 5
        with pytest.raises(ContractViolationError, match="value must not be None"):
            check_not_none(None, "value")
        with pytest.raises(ValueError):
            check(False, "broken")
