"""
Configuration management for Mantissa Attribution.

Provides configuration classes and utilities for managing license
curations, path excludes, copyright garbage and report settings.
"""

from attribution.config.notice_config import (
    NoticeConfiguration,
    ReportConfig,
    ResolutionConfig,
    default_config_paths,
    load_configuration,
)

__all__ = [
    "NoticeConfiguration",
    "ReportConfig",
    "ResolutionConfig",
    "default_config_paths",
    "load_configuration",
]
