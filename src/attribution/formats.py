"""
Serialization file formats for Mantissa Attribution.

The format of a configuration or input file is chosen by its extension.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml


class FileFormat(Enum):
    """Supported serialization formats and their file extensions."""

    JSON = ("json",)
    YAML = ("yml", "yaml")

    @property
    def extensions(self) -> tuple[str, ...]:
        return self.value

    @classmethod
    def for_extension(cls, extension: str) -> FileFormat:
        """
        Get the format for a file extension.

        Raises:
            ValueError: If no format uses the extension
        """
        extension = extension.lower().lstrip(".")
        for file_format in cls:
            if extension in file_format.extensions:
                return file_format
        supported = ", ".join(e for f in cls for e in f.extensions)
        raise ValueError(
            f"Unknown file format for file extension '{extension}'. "
            f"Supported extensions: {supported}"
        )

    @classmethod
    def for_file(cls, path: str | os.PathLike[str]) -> FileFormat:
        """Get the format of a file by its extension."""
        return cls.for_extension(Path(path).suffix)

    def loads(self, text: str) -> Any:
        if self is FileFormat.JSON:
            return json.loads(text)
        return yaml.safe_load(text)

    def dumps(self, data: Any) -> str:
        if self is FileFormat.JSON:
            return json.dumps(data, indent=2) + "\n"
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def read_value(path: str | os.PathLike[str]) -> Any:
    """Read and deserialize a JSON or YAML file."""
    path = Path(os.path.expanduser(str(path)))
    file_format = FileFormat.for_file(path)
    return file_format.loads(path.read_text(encoding="utf-8"))


def write_value(path: str | os.PathLike[str], data: Any) -> None:
    """Serialize data into a JSON or YAML file, creating parent directories."""
    path = Path(os.path.expanduser(str(path)))
    file_format = FileFormat.for_file(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(file_format.dumps(data), encoding="utf-8")
