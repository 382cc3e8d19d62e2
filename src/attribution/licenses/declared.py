"""
Declared license processing for Mantissa Attribution.

Package metadata frequently declares licenses as free text ("The MIT
License", "Apache License, Version 2.0") rather than SPDX expressions.
The processor maps such strings to SPDX expressions and remembers the
original text, so the resolved license can report which declared
strings it was derived from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from attribution.errors import InvalidLicenseExpressionError
from attribution.licenses.spdx import normalize_expression

logger = logging.getLogger(__name__)


# License name aliases
LICENSE_ALIASES: dict[str, str] = {
    # MIT variants
    "mit": "MIT",
    "mit license": "MIT",
    "the mit license": "MIT",
    "the mit license (mit)": "MIT",
    "mit/x11": "MIT",
    "x11": "MIT",
    # Apache variants
    "apache": "Apache-2.0",
    "apache 2": "Apache-2.0",
    "apache 2.0": "Apache-2.0",
    "apache-2": "Apache-2.0",
    "apache license 2.0": "Apache-2.0",
    "apache license, version 2.0": "Apache-2.0",
    "apache license version 2.0": "Apache-2.0",
    "the apache software license, version 2.0": "Apache-2.0",
    "apache software license": "Apache-2.0",
    # BSD variants
    "bsd": "BSD-3-Clause",
    "bsd license": "BSD-3-Clause",
    "bsd-2": "BSD-2-Clause",
    "bsd 2-clause": "BSD-2-Clause",
    "simplified bsd": "BSD-2-Clause",
    "bsd-3": "BSD-3-Clause",
    "bsd 3-clause": "BSD-3-Clause",
    "new bsd": "BSD-3-Clause",
    "modified bsd": "BSD-3-Clause",
    # GPL variants
    "gpl": "GPL-3.0-only",
    "gpl2": "GPL-2.0-only",
    "gpl-2": "GPL-2.0-only",
    "gpl v2": "GPL-2.0-only",
    "gplv2": "GPL-2.0-only",
    "gnu gpl v2": "GPL-2.0-only",
    "gpl3": "GPL-3.0-only",
    "gpl-3": "GPL-3.0-only",
    "gpl v3": "GPL-3.0-only",
    "gplv3": "GPL-3.0-only",
    "gnu gpl v3": "GPL-3.0-only",
    # LGPL variants
    "lgpl": "LGPL-3.0-only",
    "lgpl2.1": "LGPL-2.1-only",
    "lgpl-2.1": "LGPL-2.1-only",
    "lgpl v2.1": "LGPL-2.1-only",
    "lgpl3": "LGPL-3.0-only",
    "lgpl-3": "LGPL-3.0-only",
    "lgpl v3": "LGPL-3.0-only",
    # AGPL variants
    "agpl": "AGPL-3.0-only",
    "agpl3": "AGPL-3.0-only",
    "agpl-3": "AGPL-3.0-only",
    "agpl v3": "AGPL-3.0-only",
    "affero gpl": "AGPL-3.0-only",
    # MPL variants
    "mpl": "MPL-2.0",
    "mpl 2.0": "MPL-2.0",
    "mpl-2": "MPL-2.0",
    "mozilla public license": "MPL-2.0",
    # Other
    "isc": "ISC",
    "isc license": "ISC",
    "unlicense": "Unlicense",
    "public domain": "Unlicense",
    "cc0": "CC0-1.0",
    "cc0 1.0": "CC0-1.0",
    "wtfpl": "WTFPL",
    "artistic": "Artistic-2.0",
    "artistic 2.0": "Artistic-2.0",
    "boost": "BSL-1.0",
    "boost software license": "BSL-1.0",
    "zlib": "Zlib",
    "zlib/libpng": "Zlib",
}


@dataclass
class ProcessedDeclaredLicense:
    """
    Result of processing the declared licenses of a package.

    Attributes:
        licenses: Processed SPDX expression mapped to the original strings
                  that produced it, empty when the text was unchanged
        unmapped: Declared strings that could not be mapped
    """

    licenses: dict[str, set[str]] = field(default_factory=dict)
    unmapped: list[str] = field(default_factory=list)


class DeclaredLicenseProcessor:
    """
    Maps free-text declared licenses to SPDX expressions.

    Mapping first consults the alias table, then falls back to parsing
    the text as an SPDX expression. Text that is neither is reported as
    unmapped instead of failing the package.
    """

    def __init__(self, aliases: dict[str, str] | None = None):
        """
        Initialize the processor.

        Args:
            aliases: Lower-case alias to SPDX expression mapping.
                     Defaults to LICENSE_ALIASES
        """
        self._aliases = aliases if aliases is not None else LICENSE_ALIASES

    def process_license(self, declared: str) -> str | None:
        """
        Map a single declared license string.

        Args:
            declared: Raw declared license text

        Returns:
            Canonical SPDX expression, or None if unmappable
        """
        text = declared.strip()
        if not text:
            return None

        alias = self._aliases.get(text.lower().rstrip(". "))
        if alias:
            return normalize_expression(alias)

        try:
            return normalize_expression(text)
        except InvalidLicenseExpressionError as e:
            logger.debug(f"Declared license '{declared}' is not an SPDX expression: {e}")
            return None

    def process(self, declared_licenses: Iterable[str]) -> ProcessedDeclaredLicense:
        """
        Process all declared licenses of a package.

        Args:
            declared_licenses: Raw declared license strings

        Returns:
            ProcessedDeclaredLicense with mapped and unmapped licenses
        """
        result = ProcessedDeclaredLicense()

        for declared in declared_licenses:
            processed = self.process_license(declared)
            if processed is None:
                result.unmapped.append(declared)
                continue

            originals = result.licenses.setdefault(processed, set())
            if processed != declared:
                originals.add(declared)

        return result
