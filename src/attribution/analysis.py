"""
Analysis input for Mantissa Attribution.

An analysis input file lists the packages and projects of an analysis
with their raw license information, as produced by a dependency analyzer
and a license scanner:

    packages:
      - id: "NPM::left-pad:1.3.0"
        declared_licenses: ["WTFPL"]
        concluded_license: null
        excluded: false
        findings:
          - provenance: {kind: artifact, url: "https://..."}
            licenses: [{license: MIT, location: {path: LICENSE, start_line: 1}}]
            copyrights: [{statement: "Copyright 2018 Jane", location: {...}}]
        license_files:
          - path: LICENSE
            licenses: [MIT]
            text: "..."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import yaml

from attribution.errors import ConfigurationError, InvalidLicenseExpressionError
from attribution.formats import read_value
from attribution.licenses.license_files import ResolvedLicenseFile, ResolvedLicenseFileInfo
from attribution.models import Identifier, LicenseInfo

logger = logging.getLogger(__name__)


@dataclass
class AnalysisInput:
    """
    Raw license information of all packages of an analysis.

    Attributes:
        license_infos: License info per package, in file order
        license_files: License files per package, where the input has any
        excluded_ids: Packages the analyzer marked as excluded
        license_file_errors: Packages whose license files carry an invalid
            license expression; their license files are left out
    """

    license_infos: list[LicenseInfo] = field(default_factory=list)
    license_files: dict[Identifier, ResolvedLicenseFileInfo] = field(default_factory=dict)
    excluded_ids: set[Identifier] = field(default_factory=set)
    license_file_errors: dict[Identifier, InvalidLicenseExpressionError] = field(
        default_factory=dict
    )

    @property
    def ids(self) -> list[Identifier]:
        return [info.id for info in self.license_infos]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        packages = []
        for info in self.license_infos:
            package = info.to_dict()
            package["excluded"] = info.id in self.excluded_ids
            file_info = self.license_files.get(info.id)
            if file_info is not None:
                package["license_files"] = [f.to_dict() for f in file_info.files]
            packages.append(package)
        return {"packages": packages}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisInput:
        """
        Create from dictionary.

        Raises:
            ConfigurationError: If the data is malformed
        """
        if not isinstance(data, dict) or not isinstance(data.get("packages", []), list):
            raise ConfigurationError("Expected a mapping with a 'packages' list")

        analysis = cls()
        for index, package in enumerate(data.get("packages", [])):
            try:
                info = LicenseInfo.from_dict(package)
            except (
                KeyError, TypeError, ValueError, AttributeError, InvalidLicenseExpressionError
            ) as e:
                raise ConfigurationError(f"Invalid package at index {index}: {e}") from e

            try:
                files = tuple(
                    ResolvedLicenseFile.from_dict(f) for f in package.get("license_files", [])
                )
            except InvalidLicenseExpressionError as e:
                error = e.for_package(info.id)
                logger.warning(f"Ignoring license files of {info.id}: {error.reason}")
                analysis.license_file_errors[info.id] = error
                files = ()
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise ConfigurationError(f"Invalid package at index {index}: {e}") from e

            analysis.license_infos.append(info)
            if files:
                analysis.license_files[info.id] = ResolvedLicenseFileInfo(info.id, files)
            if package.get("excluded", False):
                analysis.excluded_ids.add(info.id)

        return analysis

    @classmethod
    def from_file(cls, path: str) -> AnalysisInput:
        """
        Load an analysis input from a JSON or YAML file.

        Raises:
            ConfigurationError: If the file cannot be read or is malformed
        """
        try:
            data = read_value(path)
        except OSError as e:
            raise ConfigurationError(f"Cannot read analysis input: {e}", path) from e
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot parse analysis input: {e}", path) from e

        try:
            analysis = cls.from_dict(data)
        except ConfigurationError as e:
            raise ConfigurationError(str(e), path) from e

        logger.info(
            f"Loaded {len(analysis.license_infos)} packages from {path} "
            f"({len(analysis.excluded_ids)} excluded)"
        )
        return analysis
