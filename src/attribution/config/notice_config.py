"""
Notice configuration for Mantissa Attribution.

Provides configuration management for license resolution and NOTICE
generation, including curations, path excludes, copyright garbage and
report settings.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from attribution.errors import ConfigurationError
from attribution.formats import FileFormat, read_value, write_value
from attribution.licenses.views import LicenseView
from attribution.models import (
    CopyrightGarbage,
    Identifier,
    LicenseFindingCuration,
    PathExclude,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionConfig:
    """Settings of the batch resolution."""

    max_workers: int | None = None
    timeout: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "max_workers": self.max_workers,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolutionConfig:
        """Create from dictionary."""
        max_workers = data.get("max_workers")
        timeout = data.get("timeout")
        return cls(
            max_workers=int(max_workers) if max_workers is not None else None,
            timeout=float(timeout) if timeout is not None else None,
        )


@dataclass(frozen=True)
class ReportConfig:
    """Settings of the generated NOTICE document."""

    license_view: str = "ALL"
    omit_excluded: bool = True
    license_text_dirs: tuple[str, ...] = ()
    headers: tuple[str, ...] | None = None
    footers: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license_view": self.license_view,
            "omit_excluded": self.omit_excluded,
            "license_text_dirs": list(self.license_text_dirs),
            "headers": list(self.headers) if self.headers is not None else None,
            "footers": list(self.footers),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportConfig:
        """Create from dictionary."""
        headers = data.get("headers")
        return cls(
            license_view=data.get("license_view", "ALL"),
            omit_excluded=data.get("omit_excluded", True),
            license_text_dirs=tuple(data.get("license_text_dirs", [])),
            headers=tuple(headers) if headers is not None else None,
            footers=tuple(data.get("footers", [])),
        )


@dataclass(frozen=True)
class NoticeConfiguration:
    """
    Complete configuration of a resolution and NOTICE run.

    Configuration objects are immutable; use with_overrides() to derive
    a changed copy, e.g. from command line options.
    """

    curations: tuple[LicenseFindingCuration, ...] = ()
    path_excludes: tuple[PathExclude, ...] = ()
    copyright_garbage: CopyrightGarbage = field(default_factory=CopyrightGarbage)
    excluded_packages: tuple[Identifier, ...] = ()
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    @property
    def license_view(self) -> LicenseView:
        """Get the configured license view."""
        return LicenseView.by_name(self.report.license_view)

    @property
    def license_text_dirs(self) -> tuple[str, ...]:
        return self.report.license_text_dirs

    @property
    def omit_excluded(self) -> bool:
        return self.report.omit_excluded

    @property
    def max_workers(self) -> int | None:
        return self.resolution.max_workers

    @property
    def timeout(self) -> float | None:
        return self.resolution.timeout

    def with_overrides(self, **report_overrides: Any) -> NoticeConfiguration:
        """Return a copy with some report settings replaced, None values ignored."""
        changes = {k: v for k, v in report_overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, report=replace(self.report, **changes))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "curations": [c.to_dict() for c in self.curations],
            "path_excludes": [e.to_dict() for e in self.path_excludes],
            "copyright_garbage": sorted(self.copyright_garbage.items),
            "excluded_packages": [i.to_coordinates() for i in self.excluded_packages],
            "resolution": self.resolution.to_dict(),
            "report": self.report.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> NoticeConfiguration:
        """
        Create from dictionary.

        Raises:
            ConfigurationError: If the data is malformed
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top level, got {type(data).__name__}"
            )

        try:
            config = cls(
                curations=tuple(
                    LicenseFindingCuration.from_dict(c) for c in data.get("curations", [])
                ),
                path_excludes=tuple(
                    PathExclude.from_dict(e) for e in data.get("path_excludes", [])
                ),
                copyright_garbage=CopyrightGarbage.from_dict(
                    data.get("copyright_garbage", [])
                ),
                excluded_packages=tuple(
                    Identifier.from_coordinates(i) for i in data.get("excluded_packages", [])
                ),
                resolution=ResolutionConfig.from_dict(data.get("resolution", {})),
                report=ReportConfig.from_dict(data.get("report", {})),
            )
            LicenseView.by_name(config.report.license_view)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return config

    @classmethod
    def from_json(cls, json_str: str) -> NoticeConfiguration:
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_file(cls, path: str) -> NoticeConfiguration:
        """
        Load configuration from a JSON or YAML file.

        Raises:
            ConfigurationError: If the file cannot be read or is malformed
        """
        try:
            data = read_value(path)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration: {e}", path) from e
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot parse configuration: {e}", path) from e

        try:
            config = cls.from_dict(data)
        except ConfigurationError as e:
            raise ConfigurationError(str(e), path) from e

        logger.debug(
            f"Loaded configuration from {path}: {len(config.curations)} curations, "
            f"{len(config.path_excludes)} path excludes, "
            f"{len(config.copyright_garbage)} garbage statements"
        )
        return config

    def save(self, path: str) -> None:
        """Save configuration to a JSON or YAML file."""
        write_value(path, self.to_dict())


def load_configuration(path: str | None) -> NoticeConfiguration:
    """
    Load a configuration file, or the defaults if no path is given.

    Searches the default locations when path is None.
    """
    if path is not None:
        return NoticeConfiguration.from_file(path)

    for candidate in default_config_paths():
        if candidate.is_file():
            logger.info(f"Using configuration {candidate}")
            return NoticeConfiguration.from_file(str(candidate))

    return NoticeConfiguration()


def default_config_paths() -> list[Path]:
    """Get the default configuration file locations, in search order."""
    config_dir = Path(os.path.expanduser("~/.attribution"))
    return [
        config_dir / f"config.{extension}"
        for file_format in FileFormat
        for extension in file_format.extensions
    ]
