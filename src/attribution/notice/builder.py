"""
Notice document builder for Mantissa Attribution.

Compiles the resolved licenses of all packages into a plain-text
NOTICE document:

    <header>
    ----

    <copyright statements of license 1>

    <license text 1>
    ----

    ...

Licenses are merged across packages and listed once each, sorted by
license expression. Line endings are always "\\n" so that the document
is byte-identical across platforms.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from attribution.licenses.copyright import CopyrightStatementsNormalizer
from attribution.licenses.license_files import (
    ResolvedLicenseFile,
    ResolvedLicenseFileInfo,
    licenses_not_in_license_files,
)
from attribution.licenses.merge import merge_by_license
from attribution.licenses.resolved import ResolvedLicense, ResolvedLicenseInfo
from attribution.licenses.views import ALL, LicenseView
from attribution.models import Identifier
from attribution.notice.texts import LicenseTextProvider, get_license_text

logger = logging.getLogger(__name__)

NOTICE_SEPARATOR = "\n----\n\n"

DEFAULT_HEADER = (
    "This project contains or depends on third-party software components "
    "pursuant to the following licenses:\n"
)
EMPTY_HEADER = (
    "This project neither contains or depends on any third-party software components.\n"
)


@dataclass(frozen=True)
class MissingLicenseText:
    """Warning that a license text could not be found."""

    license: str
    packages: tuple[Identifier, ...] = ()

    @property
    def message(self) -> str:
        return f"No license text found for license '{self.license}', it will be omitted from the report."

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license": self.license,
            "packages": [p.to_coordinates() for p in self.packages],
            "message": self.message,
        }


@dataclass
class NoticeLicense:
    """
    A license entry of the notice.

    Attributes:
        license: Merged resolved license
        packages: Packages the license was found in
    """

    license: ResolvedLicense
    packages: list[Identifier] = field(default_factory=list)


@dataclass
class NoticeModel:
    """
    Content of a notice before rendering.

    Transforms receive and return this model, which is the only way to
    customize the notice content.
    """

    headers: list[str] = field(default_factory=list)
    licenses: list[NoticeLicense] = field(default_factory=list)
    license_files: list[ResolvedLicenseFile] = field(default_factory=list)
    footers: list[str] = field(default_factory=list)


NoticeTransform = Callable[[NoticeModel], NoticeModel]


@dataclass
class NoticeDocument:
    """
    A rendered notice.

    Attributes:
        text: Document text with "\\n" line endings
        licenses: Licenses whose text is included
        warnings: Licenses omitted because their text is missing
    """

    text: str
    licenses: list[str] = field(default_factory=list)
    warnings: list[MissingLicenseText] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def normalize_line_endings(text: str) -> str:
    """Convert all line endings to "\\n"."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class NoticeBuilder:
    """
    Builds notice documents from resolved license info.

    Packages are filtered by identifier, their licenses by a license
    view and, unless disabled, excluded evidence is omitted. Licenses
    covered by shipped license files are replaced by the verbatim
    license file texts.
    """

    def __init__(
        self,
        license_text_provider: LicenseTextProvider,
        license_view: LicenseView = ALL,
        omit_excluded: bool = True,
        headers: Iterable[str] | None = None,
        footers: Iterable[str] = (),
        transforms: Iterable[NoticeTransform] = (),
    ):
        """
        Initialize the builder.

        Args:
            license_text_provider: Callable returning the text of a license
            license_view: View selecting the reported license sources
            omit_excluded: Omit excluded locations and copyrights
            headers: Header blocks (default: header depending on content)
            footers: Footer blocks
            transforms: Transforms applied to the model before rendering
        """
        self._license_text_provider = license_text_provider
        self._license_view = license_view
        self._omit_excluded = omit_excluded
        self._headers = list(headers) if headers is not None else None
        self._footers = list(footers)
        self._transforms = list(transforms)
        self._normalizer = CopyrightStatementsNormalizer()

    def build(
        self,
        resolved_infos: Iterable[ResolvedLicenseInfo],
        excluded_ids: Iterable[Identifier] = (),
        license_files: Mapping[Identifier, ResolvedLicenseFileInfo] | None = None,
    ) -> NoticeDocument:
        """
        Build a notice document.

        Args:
            resolved_infos: Resolved license info of all packages and projects
            excluded_ids: Packages to leave out of the notice
            license_files: License files by package, if their texts shall
                           be included

        Returns:
            The rendered NoticeDocument
        """
        model = self.build_model(resolved_infos, excluded_ids, license_files)

        for transform in self._transforms:
            model = transform(model)

        return self.render(model)

    def build_model(
        self,
        resolved_infos: Iterable[ResolvedLicenseInfo],
        excluded_ids: Iterable[Identifier] = (),
        license_files: Mapping[Identifier, ResolvedLicenseFileInfo] | None = None,
    ) -> NoticeModel:
        """Collect, filter and merge the licenses to report."""
        excluded = set(excluded_ids)
        license_files = license_files or {}

        licenses: list[ResolvedLicense] = []
        packages_by_license: dict[str, set[Identifier]] = {}
        files: list[ResolvedLicenseFile] = []

        for info in sorted(resolved_infos, key=lambda i: i.id):
            if info.id in excluded:
                logger.debug(f"Omitting excluded package {info.id}")
                continue

            info = info.filter(self._license_view)
            if self._omit_excluded:
                info = info.filter_excluded()

            file_info = license_files.get(info.id)
            if file_info is not None:
                files.extend(sorted(file_info.files, key=lambda f: f.path))

            for resolved in licenses_not_in_license_files(info, file_info):
                licenses.append(resolved)
                packages_by_license.setdefault(resolved.license, set()).add(info.id)

        merged = [
            NoticeLicense(license=resolved, packages=sorted(packages_by_license[resolved.license]))
            for resolved in merge_by_license(licenses)
        ]

        if self._headers is not None:
            headers = list(self._headers)
        elif merged or files:
            headers = [DEFAULT_HEADER]
        else:
            headers = [EMPTY_HEADER]

        return NoticeModel(
            headers=headers,
            licenses=merged,
            license_files=files,
            footers=list(self._footers),
        )

    def render(self, model: NoticeModel) -> NoticeDocument:
        """Render a notice model into a document."""
        parts: list[str] = [NOTICE_SEPARATOR.join(model.headers)]
        included: list[str] = []
        warnings: list[MissingLicenseText] = []

        for entry in sorted(model.licenses, key=lambda e: e.license.license):
            license = entry.license.license
            license_text = get_license_text(self._license_text_provider, license)
            if license_text is None:
                warning = MissingLicenseText(license, tuple(entry.packages))
                logger.warning(warning.message)
                warnings.append(warning)
                continue

            parts.append(NOTICE_SEPARATOR)

            copyrights = self.copyrights(entry.license)
            for copyright in copyrights:
                parts.append(f"{copyright}\n")
            if copyrights:
                parts.append("\n")

            parts.append(license_text)
            included.append(license)

        for license_file in model.license_files:
            parts.append(NOTICE_SEPARATOR)
            parts.append(license_file.text)

        for footer in model.footers:
            parts.append(NOTICE_SEPARATOR)
            parts.append(footer)

        return NoticeDocument(
            text=normalize_line_endings("".join(parts)),
            licenses=included,
            warnings=warnings,
        )

    def copyrights(self, resolved: ResolvedLicense) -> list[str]:
        """Get the normalized copyright statements of a license, sorted."""
        statements = resolved.get_copyrights(omit_excluded=self._omit_excluded)
        return list(self._normalizer.normalize(statements))


def build_notice(
    resolved_infos: Iterable[ResolvedLicenseInfo],
    license_text_provider: LicenseTextProvider,
    excluded_ids: Iterable[Identifier] = (),
) -> NoticeDocument:
    """
    Build a notice document with default settings.

    Convenience function for one-off notices.
    """
    return NoticeBuilder(license_text_provider).build(resolved_infos, excluded_ids)
