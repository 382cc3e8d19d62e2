"""
NOTICE document generation for Mantissa Attribution.

Key Components:
- NoticeBuilder: Compiles resolved licenses into a NOTICE document
- NoticeModel: Notice content before rendering, input of transforms
- License text providers: Look up license texts by SPDX identifier
"""

from attribution.notice.texts import (
    LicenseTextProvider,
    MappingLicenseTextProvider,
    DirectoryLicenseTextProvider,
    CompositeLicenseTextProvider,
    get_license_text,
)
from attribution.notice.builder import (
    NOTICE_SEPARATOR,
    DEFAULT_HEADER,
    EMPTY_HEADER,
    MissingLicenseText,
    NoticeLicense,
    NoticeModel,
    NoticeTransform,
    NoticeDocument,
    NoticeBuilder,
    build_notice,
    normalize_line_endings,
)

__all__ = [
    # Texts
    "LicenseTextProvider",
    "MappingLicenseTextProvider",
    "DirectoryLicenseTextProvider",
    "CompositeLicenseTextProvider",
    "get_license_text",
    # Builder
    "NOTICE_SEPARATOR",
    "DEFAULT_HEADER",
    "EMPTY_HEADER",
    "MissingLicenseText",
    "NoticeLicense",
    "NoticeModel",
    "NoticeTransform",
    "NoticeDocument",
    "NoticeBuilder",
    "build_notice",
    "normalize_line_endings",
]
