"""
Merging of resolved licenses for Mantissa Attribution.

Merges resolved licenses of the same license expression, typically
coming from different packages, into one.
"""

from __future__ import annotations

from typing import Iterable

from attribution.errors import InvalidArgumentError
from attribution.licenses.resolved import ResolvedLicense


def merge_licenses(licenses: Iterable[ResolvedLicense]) -> ResolvedLicense:
    """
    Merge resolved licenses of the same license expression.

    Sources, original declared licenses and locations are set unions,
    so the result does not depend on input order and duplicate
    locations collapse.

    Args:
        licenses: Licenses to merge

    Returns:
        Merged ResolvedLicense

    Raises:
        InvalidArgumentError: If the input is empty or mixes license expressions
    """
    licenses = list(licenses)
    if not licenses:
        raise InvalidArgumentError("Cannot merge an empty list of licenses.")

    license = licenses[0].license
    mismatched = sorted({r.license for r in licenses if r.license != license})
    if mismatched:
        raise InvalidArgumentError(
            f"Cannot merge different licenses: {license} and {', '.join(mismatched)}"
        )

    return ResolvedLicense(
        license=license,
        sources=frozenset().union(*(r.sources for r in licenses)),
        original_declared_licenses=frozenset().union(
            *(r.original_declared_licenses for r in licenses)
        ),
        locations=frozenset().union(*(r.locations for r in licenses)),
    )


def merge_by_license(licenses: Iterable[ResolvedLicense]) -> list[ResolvedLicense]:
    """
    Group resolved licenses by license expression and merge each group.

    Returns:
        Merged licenses sorted by license expression
    """
    groups: dict[str, list[ResolvedLicense]] = {}
    for resolved in licenses:
        groups.setdefault(resolved.license, []).append(resolved)

    return [merge_licenses(groups[license]) for license in sorted(groups)]
