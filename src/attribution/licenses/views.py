"""
License views for Mantissa Attribution.

A license view selects which evidence tiers of a resolved package are
reported. A view is an ordered list of source sets: the first set that
yields any license wins, and only the sources of that set are kept. For
example CONCLUDED_OR_REST reports the concluded license if there is
one, and falls back to declared and detected licenses otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from attribution.licenses.resolved import ResolvedLicense, ResolvedLicenseInfo
from attribution.models import LicenseSource

_CONCLUDED = frozenset({LicenseSource.CONCLUDED})
_DECLARED = frozenset({LicenseSource.DECLARED})
_DETECTED = frozenset({LicenseSource.DETECTED})


@dataclass(frozen=True)
class LicenseView:
    """An ordered selection of license sources."""

    name: str
    source_sets: tuple[frozenset[LicenseSource], ...]

    def filter_licenses(self, licenses: list[ResolvedLicense]) -> list[ResolvedLicense]:
        """
        Filter resolved licenses.

        Args:
            licenses: Licenses to filter

        Returns:
            Licenses of the first matching source set, with their sources
            restricted to that set
        """
        for sources in self.source_sets:
            selected = [
                self._restrict(resolved, sources)
                for resolved in licenses
                if resolved.sources & sources
            ]
            if selected:
                return selected
        return []

    def _restrict(
        self,
        resolved: ResolvedLicense,
        sources: frozenset[LicenseSource],
    ) -> ResolvedLicense:
        restricted = resolved.sources & sources
        # Locations only stem from detected findings.
        if LicenseSource.DETECTED in restricted:
            return replace(resolved, sources=restricted)
        return replace(resolved, sources=restricted, locations=frozenset())

    def filter(self, info: ResolvedLicenseInfo) -> ResolvedLicenseInfo:
        """Return a copy of a resolved license info filtered by this view."""
        return info.with_licenses(self.filter_licenses(list(info.licenses)))

    @classmethod
    def by_name(cls, name: str) -> LicenseView:
        """
        Get a predefined view by name.

        Args:
            name: View name (case-insensitive), e.g. "CONCLUDED_OR_REST"

        Returns:
            The matching view

        Raises:
            ValueError: If no view has this name
        """
        view = LICENSE_VIEWS.get(name.upper().replace("-", "_"))
        if view is None:
            raise ValueError(
                f"Unknown license view: {name}. Available: {', '.join(LICENSE_VIEWS)}"
            )
        return view


ALL = LicenseView("ALL", (_CONCLUDED | _DECLARED | _DETECTED,))
CONCLUDED_OR_REST = LicenseView("CONCLUDED_OR_REST", (_CONCLUDED, _DECLARED | _DETECTED))
CONCLUDED_OR_DECLARED_OR_DETECTED = LicenseView(
    "CONCLUDED_OR_DECLARED_OR_DETECTED", (_CONCLUDED, _DECLARED, _DETECTED)
)
CONCLUDED_OR_DETECTED = LicenseView("CONCLUDED_OR_DETECTED", (_CONCLUDED, _DETECTED))
ONLY_CONCLUDED = LicenseView("ONLY_CONCLUDED", (_CONCLUDED,))
ONLY_DECLARED = LicenseView("ONLY_DECLARED", (_DECLARED,))
ONLY_DETECTED = LicenseView("ONLY_DETECTED", (_DETECTED,))

LICENSE_VIEWS: dict[str, LicenseView] = {
    view.name: view
    for view in (
        ALL,
        CONCLUDED_OR_REST,
        CONCLUDED_OR_DECLARED_OR_DETECTED,
        CONCLUDED_OR_DETECTED,
        ONLY_CONCLUDED,
        ONLY_DECLARED,
        ONLY_DETECTED,
    )
}
