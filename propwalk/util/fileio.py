import json
from pathlib import Path
from typing import Any

import toml
import yaml


class FileIO:
    """
    Static methods for reading and writing structured data files.
    Supports: TOML, JSON, YAML, YML.

    Used for schema files, answers files, settings and ValueTree dumps.
    """
    SUPPORTED_FORMATS = ["toml", "json", "yml", "yaml"]

    @staticmethod
    def resolve_extension(path: str | Path) -> str:
        """
        Determines the effective format of a given path from its suffix.

        Args:
            path (str | Path): Path or filename to evaluate.

        Returns:
            str: Format name (e.g., 'json', 'yaml').

        Raises:
            ValueError: If the format is unsupported or cannot be inferred.
        """
        suffix = Path(path).suffix.lstrip(".").lower()
        if suffix in FileIO.SUPPORTED_FORMATS:
            return suffix
        raise ValueError(f"[FileIO] Unsupported or unknown filetype for path: {path}")

    @staticmethod
    def read(path: Path) -> Any:
        """
        Reads a data file based on its extension and returns parsed content.

        Args:
            path (Path): Path to the file.

        Returns:
            Any: Parsed content, usually a dict or a list.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is unsupported or the content is malformed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"[FileIO.read] File not found: {path}")

        ext = FileIO.resolve_extension(path)
        text = path.read_text(encoding="utf-8")

        try:
            if ext == "toml":
                return toml.loads(text)
            if ext == "json":
                return json.loads(text)
            return yaml.safe_load(text)
        except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"[FileIO.read] Malformed {ext} in {path}: {e}") from e

    @staticmethod
    def dumps(data: dict, fmt: str) -> str:
        """
        Serializes a mapping to text in the given format.

        Args:
            data (dict): Plain data (no custom classes).
            fmt (str): One of 'toml', 'json', 'yaml', 'yml'.

        Returns:
            str: Serialized content.

        Raises:
            ValueError: If the format is unsupported.
        """
        fmt = fmt.lower()
        if fmt == "toml":
            return toml.dumps(data)
        if fmt == "json":
            return json.dumps(data, indent=2) + "\n"
        if fmt in ("yaml", "yml"):
            return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        raise ValueError(f"[FileIO] Unsupported format: {fmt}")

    @staticmethod
    def write(path: Path, data: dict, fmt: str = None) -> Path:
        """
        Writes a mapping to a file, creating parent directories.

        Args:
            path (Path): Target file path.
            data (dict): Content to write.
            fmt (str, optional): Format; inferred from the suffix when omitted.

        Returns:
            Path: The written path.
        """
        path = Path(path)
        fmt = fmt or FileIO.resolve_extension(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(FileIO.dumps(data, fmt), encoding="utf-8")
        return path


read = FileIO.read
write = FileIO.write
dumps = FileIO.dumps
