"""
Tests for projection outcomes.
"""

import pytest

from camrig.cameras.projection_result import ProjectionResult, ProjectionStatus


class TestProjectionResult:
    """Tests for ProjectionResult."""

    def test_default_is_uninitialized(self):
        result = ProjectionResult()

        assert result.status is ProjectionStatus.UNINITIALIZED
        assert result == ProjectionResult.UNINITIALIZED
        assert not result

    @pytest.mark.parametrize("status", list(ProjectionStatus))
    def test_only_visible_is_truthy(self, status):
        result = ProjectionResult(status)

        assert bool(result) == (status is ProjectionStatus.KEYPOINT_VISIBLE)
        assert result.is_keypoint_visible() == bool(result)

    def test_aliases(self):
        assert ProjectionResult.POINT_BEHIND_CAMERA == ProjectionResult(
            ProjectionStatus.POINT_BEHIND_CAMERA
        )
        assert ProjectionResult.KEYPOINT_VISIBLE != ProjectionResult.KEYPOINT_OUTSIDE_IMAGE_BOX

    def test_str_and_dict(self):
        result = ProjectionResult.KEYPOINT_OUTSIDE_IMAGE_BOX

        assert str(result) == "KEYPOINT_OUTSIDE_IMAGE_BOX"
        assert result.to_dict() == {
            "status": "keypoint_outside_image_box",
            "keypoint_visible": False,
        }
