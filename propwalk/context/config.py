from pathlib import Path
from typing import Any

from loguru import logger as log

from propwalk.context import _globals
from propwalk.util.error_handling import check_types
from propwalk.util.fileio import FileIO


class Config:
    """
    Settings manager for propwalk.

    Loads settings from a TOML, JSON or YAML file (format auto-detected from the
    extension) layered over built-in defaults, and provides deep key retrieval
    and validation. A missing settings file is not an error: the defaults apply.
    """

    @staticmethod
    def deep_merge(target: dict, updates: dict) -> dict:
        for k, v in updates.items():
            if isinstance(v, dict) and isinstance(target.get(k), dict):
                Config.deep_merge(target[k], v)
            else:
                target[k] = v
        return target

    @staticmethod
    def fetch(path: Path = None) -> dict:
        """
        Loads the settings file over the defaults.

        Args:
            path (Path, optional): Settings file. Defaults to propwalk_settings.toml in the working directory.

        Returns:
            dict: Defaults updated with the file's contents.

        Raises:
            RuntimeError: If the file exists but cannot be parsed or is not a mapping.
        """
        path = Path(path) if path else Path.cwd() / _globals.CFG_FILENAME
        data = dict(_globals.CFG_DEFAULT)

        if not path.exists():
            log.debug("[Config.fetch] No settings at {}, using defaults", path)
            return data

        try:
            loaded = FileIO.read(path)
        except ValueError as e:
            raise RuntimeError(f"[Config.fetch] Failed to parse config at {path}: {e}") from e

        if loaded is None:
            return data
        if not isinstance(loaded, dict):
            raise RuntimeError(f"[Config.fetch] Parsed config is not a dict: {type(loaded)}")

        log.debug("[Config.fetch] Loaded settings from {}", path)
        return Config.deep_merge(data, loaded)

    @staticmethod
    def get(*keys, path: Path = None, data: dict = None) -> Any:
        """
        Retrieves a nested configuration value.

        Supports chained key access (e.g., cfg.get("templates", "directory")).

        Args:
            *keys: One or more keys to traverse the configuration hierarchy.
            path (Path, optional): Settings file to load when `data` is not given.
            data (dict, optional): Already loaded settings.

        Returns:
            Any: The resolved value.

        Raises:
            RuntimeError: If keys are missing or config is malformed.
        """
        for key in keys:
            if not isinstance(key, (str, int)) or isinstance(key, bool):
                raise TypeError(f"Invalid path for Config.get(): {key!r} must be str or int")

        node = data if data is not None else Config.fetch(path)
        try:
            for key in keys:
                node = node[key]
            return node
        except (KeyError, TypeError, IndexError) as e:
            raise RuntimeError(f"[Config.get] Key path {keys} not found or invalid: {e}") from e

    @staticmethod
    def validate(data: dict) -> bool:
        """
        Validates the types and values of the known settings.

        Args:
            data (dict): Loaded settings.

        Returns:
            bool: True if every known key is valid.

        Raises:
            RuntimeError: If any known key has the wrong type or an invalid value.
        """
        for key, expected in _globals.CFG_TYPES.items():
            if key not in data:
                raise RuntimeError(f"Missing required config key: {key}")
            try:
                check_types(data[key], expected, label=f"config.{key}")
            except TypeError as e:
                raise RuntimeError(str(e)) from e

        if data["search_threshold"] < 1:
            raise RuntimeError(f"search_threshold must be positive, got {data['search_threshold']}")
        if data["log_level"].upper() not in _globals.LOG_LEVELS:
            raise RuntimeError(f"Unknown log_level: {data['log_level']}")
        if data["output_format"].lower() not in _globals.OUTPUT_FORMATS:
            raise RuntimeError(f"Unknown output_format: {data['output_format']}")
        return True

    @staticmethod
    def load(path: Path = None) -> dict:
        data = Config.fetch(path)
        Config.validate(data)
        return data


cfg = Config
