"""
License text providers for Mantissa Attribution.

A license text provider is any callable taking a license identifier and
returning the license text, or None if the text is not known.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Mapping

from attribution.errors import InvalidLicenseExpressionError
from attribution.licenses.spdx import parse_expression

logger = logging.getLogger(__name__)

LicenseTextProvider = Callable[[str], "str | None"]


class MappingLicenseTextProvider:
    """Provides license texts from an in-memory mapping."""

    def __init__(self, texts: Mapping[str, str]):
        self._texts = dict(texts)

    def __call__(self, license_id: str) -> str | None:
        return self._texts.get(license_id)

    def __contains__(self, license_id: object) -> bool:
        return license_id in self._texts


class DirectoryLicenseTextProvider:
    """
    Provides license texts from files in directories.

    The text of a license is read from "<dir>/<id>" or "<dir>/<id>.txt",
    searching the directories in order.
    """

    EXTENSIONS = ("", ".txt")

    def __init__(self, directories: Iterable[str | os.PathLike[str]]):
        """
        Initialize the provider.

        Args:
            directories: Directories containing license text files
        """
        self._directories = [Path(os.path.expanduser(str(d))) for d in directories]

    @property
    def directories(self) -> list[Path]:
        return list(self._directories)

    def __call__(self, license_id: str) -> str | None:
        if not license_id or "/" in license_id or "\\" in license_id or license_id.startswith("."):
            return None

        for directory in self._directories:
            for extension in self.EXTENSIONS:
                path = directory / f"{license_id}{extension}"
                if path.is_file():
                    logger.debug(f"Reading license text for {license_id} from {path}")
                    return path.read_text(encoding="utf-8")

        return None


class CompositeLicenseTextProvider:
    """Asks several providers in order and returns the first text found."""

    def __init__(self, providers: Iterable[LicenseTextProvider]):
        self._providers = list(providers)

    def __call__(self, license_id: str) -> str | None:
        for provider in self._providers:
            text = provider(license_id)
            if text is not None:
                return text
        return None


def _single_license_text(provider: LicenseTextProvider, license: str) -> str | None:
    text = provider(license)
    if text is not None or " WITH " not in license:
        return text

    license_id, exception_id = license.split(" WITH ", 1)
    license_text = provider(license_id)
    exception_text = provider(exception_id)
    if license_text is None or exception_text is None:
        return None
    return license_text.rstrip("\n") + "\n\n" + exception_text


def get_license_text(provider: LicenseTextProvider, license: str) -> str | None:
    """
    Look up the text of a license expression.

    A text registered for the whole expression wins. Otherwise the texts
    of the single licenses of the expression are joined, which requires
    every single license text to be known. A license with an exception
    is looked up as a whole first and then as license text followed by
    exception text.

    Args:
        provider: License text provider
        license: Canonical license expression

    Returns:
        License text, or None if not found
    """
    text = provider(license)
    if text is not None:
        return text

    try:
        expression = parse_expression(license)
    except InvalidLicenseExpressionError:
        return None

    texts: list[str] = []
    for single in expression.licenses():
        single_text = _single_license_text(provider, single)
        if single_text is None:
            return None
        texts.append(single_text.rstrip("\n") + "\n")

    return "\n".join(texts)
