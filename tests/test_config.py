"""
Tests for configuration loading and rig construction from YAML.
"""

from pathlib import Path

import numpy as np
import pytest
import yaml


CONFIG_DIR = Path(__file__).parent.parent / "configs"


@pytest.fixture
def camera_config():
    return {
        "type": "pinhole",
        "label": "cam0",
        "intrinsics": [100.0, 100.0, 50.0, 50.0],
        "image_width": 100,
        "image_height": 100,
        "distortion": {"type": "radial-tangential", "parameters": [0.1, 0.0, 0.0, 0.0]},
    }


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_and_cache_copy(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        (tmp_path / "a.yaml").write_text("value: 1\nnested:\n  key: x\n")
        loader = ConfigLoader(str(tmp_path))

        config = loader.load("a.yaml")
        config["value"] = 2

        assert loader.load("a.yaml")["value"] == 1

    def test_empty_file(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        (tmp_path / "empty.yaml").write_text("")

        assert ConfigLoader(str(tmp_path)).load("empty.yaml") == {}

    def test_missing_file(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        with pytest.raises(FileNotFoundError):
            ConfigLoader(str(tmp_path)).load("missing.yaml")

    def test_non_mapping(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        (tmp_path / "list.yaml").write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            ConfigLoader(str(tmp_path)).load("list.yaml")

    def test_include(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        (tmp_path / "cam.yaml").write_text("label: cam0\n")
        (tmp_path / "rig.yaml").write_text("cameras:\n  - camera: \"!include cam.yaml\"\n")

        config = ConfigLoader(str(tmp_path)).load("rig.yaml")

        assert config["cameras"][0]["camera"] == {"label": "cam0"}

    def test_merge_and_save(self, tmp_path):
        from camrig.utils.config_loader import ConfigLoader

        loader = ConfigLoader(str(tmp_path))
        base = {"a": {"b": 1, "c": 2}}
        merged = loader.merge(base, {"a": {"c": 3}})

        assert merged == {"a": {"b": 1, "c": 3}}
        assert base == {"a": {"b": 1, "c": 2}}

        loader.save(merged, tmp_path / "out.yaml")
        assert yaml.safe_load((tmp_path / "out.yaml").read_text()) == merged

    def test_nested_access(self):
        from camrig.utils.config_loader import get_nested, require, set_nested

        config = {}
        set_nested(config, "distortion.type", "equidistant")

        assert get_nested(config, "distortion.type") == "equidistant"
        assert get_nested(config, "distortion.parameters", []) == []
        with pytest.raises(KeyError, match="distortion.parameters"):
            require(config, "distortion.parameters")


class TestFactory:
    """Tests for building cameras and rigs from configs."""

    def test_camera_from_config(self, camera_config):
        from camrig.cameras.distortion import RadTanDistortion
        from camrig.cameras.factory import camera_from_config

        camera = camera_from_config(camera_config)

        assert camera.label == "cam0"
        assert camera.line_delay_nanoseconds == 0
        assert isinstance(camera.distortion, RadTanDistortion)
        assert np.allclose(camera.intrinsics, [100.0, 100.0, 50.0, 50.0])

    def test_no_distortion(self, camera_config):
        from camrig.cameras.factory import camera_from_config

        camera_config["distortion"] = {"type": "none"}

        assert not camera_from_config(camera_config).has_distortion()

    def test_fixed_id(self, camera_config):
        from camrig.cameras.factory import camera_from_config

        camera_config["id"] = "0123456789abcdef0123456789abcdef"

        assert str(camera_from_config(camera_config).id) == camera_config["id"]

    def test_unknown_types(self, camera_config):
        from camrig.cameras.factory import camera_from_config

        with pytest.raises(ValueError, match="distortion type"):
            camera_from_config({**camera_config, "distortion": {"type": "fov"}})
        with pytest.raises(ValueError, match="camera type"):
            camera_from_config({**camera_config, "type": "omni"})

    def test_missing_key(self, camera_config):
        from camrig.cameras.factory import camera_from_config

        del camera_config["intrinsics"]

        with pytest.raises(KeyError, match="intrinsics"):
            camera_from_config(camera_config)

    def test_ncamera_from_config(self, camera_config):
        """T_B_C from the config is stored as its inverse."""
        from camrig.cameras.factory import ncamera_from_config

        T_B_C = np.eye(4)
        T_B_C[:3, 3] = [0.1, 0.0, 0.0]
        rig = ncamera_from_config({
            "label": "mono",
            "cameras": [{"camera": camera_config, "T_B_C": T_B_C.tolist()}],
        })

        assert rig.label == "mono"
        assert rig.num_cameras == 1
        assert np.allclose(rig.get_T_C_B(0).t, [-0.1, 0.0, 0.0])

    def test_empty_rig(self):
        from camrig.cameras.factory import ncamera_from_config

        with pytest.raises(ValueError):
            ncamera_from_config({"cameras": []})

    def test_load_stereo_rig(self):
        from camrig.cameras.factory import load_ncamera

        rig = load_ncamera(CONFIG_DIR / "stereo_rig.yaml")

        assert rig.num_cameras == 2
        assert rig.get_camera(0).label == "cam0"
        assert rig.get_camera(1).image_width == 752
        assert rig.get_camera(0) != rig.get_camera(1)
