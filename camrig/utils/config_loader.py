"""YAML configuration loading for camera and rig descriptions."""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


INCLUDE_PREFIX = "!include "


class ConfigLoader:
    """Load, merge and save YAML configurations."""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory used to resolve bare config file names.
        """
        self.config_dir = Path(config_dir) if config_dir else Path("configs")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def resolve(self, config_path: Union[str, Path]) -> Path:
        """
        Resolve a config path.

        Absolute paths and relative paths that exist as given are used as-is;
        anything else is looked up inside ``config_dir``.
        """
        config_path = Path(config_path)
        if config_path.is_absolute() or config_path.exists():
            return config_path
        if config_path.parts[:1] == self.config_dir.parts[:1]:
            return config_path
        return self.config_dir / config_path

    def load(
        self,
        config_path: Union[str, Path],
        use_cache: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to config file.
            use_cache: Whether to reuse a previously loaded copy.

        Returns:
            Configuration dictionary (a deep copy, safe to modify).

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the top level of the file is not a mapping.
        """
        config_path = self.resolve(config_path)
        cache_key = str(config_path)

        if use_cache and cache_key in self._cache:
            return copy.deepcopy(self._cache[cache_key])

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            config = yaml.safe_load(f)

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(
                f"Config file {config_path} must contain a mapping, got {type(config).__name__}"
            )

        config = self._process_includes(config, config_path.parent)

        if use_cache:
            self._cache[cache_key] = config

        return copy.deepcopy(config)

    def _process_includes(self, config: Any, base_dir: Path) -> Any:
        """
        Replace ``!include <file>`` string values with the included YAML.

        Includes are resolved relative to the including file and may appear
        inside nested mappings and lists.
        """
        if isinstance(config, dict):
            return {key: self._process_includes(value, base_dir) for key, value in config.items()}

        if isinstance(config, list):
            return [self._process_includes(value, base_dir) for value in config]

        if isinstance(config, str) and config.startswith(INCLUDE_PREFIX):
            include_path = base_dir / config[len(INCLUDE_PREFIX):].strip()
            if not include_path.exists():
                raise FileNotFoundError(f"Included config not found: {include_path}")
            with open(include_path, "r") as f:
                included = yaml.safe_load(f)
            return self._process_includes(included, include_path.parent)

        return config

    def merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Deep merge two configurations.

        Args:
            base: Base configuration.
            override: Values that take precedence over ``base``.

        Returns:
            Merged configuration; neither input is modified.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def save(
        self,
        config: Dict[str, Any],
        path: Union[str, Path],
    ) -> None:
        """
        Save configuration to a YAML file, creating parent directories.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    def clear_cache(self) -> None:
        """Clear configuration cache."""
        self._cache.clear()


def load_config(
    config_path: Union[str, Path],
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to config file.
        overrides: Optional overrides merged on top of the file contents.

    Returns:
        Configuration dictionary.
    """
    loader = ConfigLoader()
    config = loader.load(config_path)

    if overrides:
        config = loader.merge(config, overrides)

    return config


def get_nested(
    config: Dict[str, Any],
    key: str,
    default: Any = None,
) -> Any:
    """
    Get nested config value using dot notation (e.g. ``'distortion.type'``).
    """
    value = config

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_nested(
    config: Dict[str, Any],
    key: str,
    value: Any,
) -> None:
    """
    Set nested config value using dot notation, creating missing levels.
    """
    keys = key.split(".")
    current = config

    for k in keys[:-1]:
        if not isinstance(current.get(k), dict):
            current[k] = {}
        current = current[k]

    current[keys[-1]] = value


def require(config: Dict[str, Any], key: str) -> Any:
    """
    Get a mandatory nested value.

    Raises:
        KeyError: Naming the full dotted key when it is missing.
    """
    sentinel = object()
    value = get_nested(config, key, sentinel)
    if value is sentinel:
        raise KeyError(f"Missing required config key '{key}'")
    return value
