"""
License resolution for Mantissa Attribution.

Turns the raw license info of a package into a ResolvedLicenseInfo:

1. Detected license findings are curated; findings removed by a
   curation are dropped from all outputs.
2. Declared, concluded and surviving detected licenses are grouped by
   canonical license expression.
3. Every license location is tagged with the path excludes matching it.
4. Copyright findings are attached to every license location in the
   same file of the same provenance. The association is file-level, not
   line-level: all copyrights of a file relate to all licenses of that
   file. Copyrights in files without license findings are reported as
   unmatched.
5. Copyright garbage is discarded and reported separately.
6. The statements of each location are normalized into canonical
   copyrights.

Resolution is a pure function of its inputs, so packages can be
resolved concurrently against shared, read-only configuration.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from typing import Iterable

from attribution.errors import (
    InvalidArgumentError,
    InvalidLicenseExpressionError,
    ResolutionTimeoutError,
)
from attribution.licenses.copyright import CopyrightStatementsNormalizer
from attribution.licenses.curations import LicenseFindingCurator
from attribution.licenses.declared import DeclaredLicenseProcessor
from attribution.licenses.excludes import PathExcludeMatcher
from attribution.licenses.garbage import CopyrightGarbageFilter
from attribution.licenses.resolved import (
    ResolvedCopyright,
    ResolvedCopyrightFinding,
    ResolvedLicense,
    ResolvedLicenseInfo,
    ResolvedLicenseLocation,
)
from attribution.licenses.spdx import normalize_expression
from attribution.models import (
    CopyrightFinding,
    CopyrightGarbage,
    Identifier,
    LicenseFinding,
    LicenseFindingCuration,
    LicenseInfo,
    LicenseSource,
    PathExclude,
    Provenance,
)

logger = logging.getLogger(__name__)

# Concluded license meaning "no conclusion was made".
NOASSERTION = "NOASSERTION"


@dataclass
class _LicenseBuilder:
    """Collects the evidence of one license expression."""

    license: str
    sources: set[LicenseSource] = field(default_factory=set)
    original_declared_licenses: set[str] = field(default_factory=set)
    locations: set[ResolvedLicenseLocation] = field(default_factory=set)

    def build(self) -> ResolvedLicense:
        return ResolvedLicense(
            license=self.license,
            sources=frozenset(self.sources),
            original_declared_licenses=frozenset(self.original_declared_licenses),
            locations=frozenset(self.locations),
        )


class LicenseResolver:
    """
    Resolves the license info of single packages.

    Holds the curation, exclude and garbage configuration. The resolver
    itself keeps no per-package state, so one instance can be used from
    several threads.
    """

    def __init__(
        self,
        curations: Iterable[LicenseFindingCuration] = (),
        path_excludes: Iterable[PathExclude] = (),
        copyright_garbage: CopyrightGarbage | None = None,
        declared_processor: DeclaredLicenseProcessor | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            curations: License finding curations in declaration order
            path_excludes: Path excludes
            copyright_garbage: Copyright statements to discard
            declared_processor: Processor for declared licenses
        """
        self._curator = LicenseFindingCurator(curations)
        self._exclude_matcher = PathExcludeMatcher(path_excludes)
        self._garbage_filter = CopyrightGarbageFilter(copyright_garbage)
        self._declared_processor = declared_processor or DeclaredLicenseProcessor()
        self._normalizer = CopyrightStatementsNormalizer()

    def resolve(self, id: Identifier, license_info: LicenseInfo) -> ResolvedLicenseInfo:
        """
        Resolve the license info of a package.

        Args:
            id: Package or project identifier
            license_info: Raw license info of the package

        Returns:
            ResolvedLicenseInfo for the package

        Raises:
            InvalidLicenseExpressionError: If any license expression of the
                package is invalid
        """
        try:
            return self._resolve(id, license_info)
        except InvalidLicenseExpressionError as e:
            raise e.for_package(id) from e

    def _resolve(self, id: Identifier, license_info: LicenseInfo) -> ResolvedLicenseInfo:
        builders: dict[str, _LicenseBuilder] = {}

        def builder_for(license: str) -> _LicenseBuilder:
            return builders.setdefault(license, _LicenseBuilder(license))

        processed = self._declared_processor.process(license_info.declared_licenses)
        for license, originals in processed.licenses.items():
            builder = builder_for(license)
            builder.sources.add(LicenseSource.DECLARED)
            builder.original_declared_licenses.update(originals)
        for unmapped in processed.unmapped:
            logger.warning(f"{id}: Could not map declared license '{unmapped}'")

        concluded = (license_info.concluded_license or "").strip()
        if concluded and concluded.upper() != NOASSERTION:
            builder_for(normalize_expression(concluded)).sources.add(LicenseSource.CONCLUDED)

        copyright_garbage: dict[Provenance, set[CopyrightFinding]] = {}
        unmatched_copyrights: dict[Provenance, set[CopyrightFinding]] = {}

        for provenance, (license_findings, copyright_findings) in self._by_provenance(
            license_info
        ).items():
            kept, discarded = self._garbage_filter.partition(copyright_findings)
            if discarded:
                copyright_garbage.setdefault(provenance, set()).update(discarded)

            copyrights_by_path: dict[str, list[CopyrightFinding]] = {}
            for finding in kept:
                copyrights_by_path.setdefault(finding.location.path, []).append(finding)

            resolved_copyrights: dict[str, frozenset[ResolvedCopyright]] = {}
            license_paths: set[str] = set()

            for finding in license_findings:
                result = self._curator.apply(finding, provenance)
                if result.is_removed:
                    logger.debug(f"{id}: Dropped {finding.license} at {finding.location}")
                    continue

                path = finding.location.path
                license_paths.add(path)
                if path not in resolved_copyrights:
                    resolved_copyrights[path] = self._resolve_copyrights(
                        provenance, copyrights_by_path.get(path, [])
                    )

                builder = builder_for(result.license)
                builder.sources.add(LicenseSource.DETECTED)
                if result.is_changed:
                    builder.original_declared_licenses.add(finding.license)
                builder.locations.add(
                    ResolvedLicenseLocation(
                        provenance=provenance,
                        location=finding.location,
                        applied_curation=result.applied_curation,
                        matching_path_excludes=tuple(
                            self._exclude_matcher.matches(provenance, path)
                        ),
                        copyrights=resolved_copyrights[path],
                    )
                )

            for path, findings in copyrights_by_path.items():
                if path not in license_paths:
                    unmatched_copyrights.setdefault(provenance, set()).update(findings)

        licenses = [builders[license].build() for license in sorted(builders)]

        return ResolvedLicenseInfo(
            id=id,
            license_info=license_info,
            licenses=tuple(licenses),
            copyright_garbage={p: frozenset(f) for p, f in copyright_garbage.items()},
            unmatched_copyrights={p: frozenset(f) for p, f in unmatched_copyrights.items()},
            unmapped_declared_licenses=tuple(processed.unmapped),
        )

    def _by_provenance(
        self,
        license_info: LicenseInfo,
    ) -> dict[Provenance, tuple[list[LicenseFinding], list[CopyrightFinding]]]:
        grouped: dict[Provenance, tuple[list[LicenseFinding], list[CopyrightFinding]]] = {}
        for findings in license_info.detected:
            licenses, copyrights = grouped.setdefault(findings.provenance, ([], []))
            licenses.extend(findings.licenses)
            copyrights.extend(findings.copyrights)
        return grouped

    def _resolve_copyrights(
        self,
        provenance: Provenance,
        findings: list[CopyrightFinding],
    ) -> frozenset[ResolvedCopyright]:
        resolved_findings = [
            ResolvedCopyrightFinding(
                statement=finding.statement,
                location=finding.location,
                matching_path_excludes=tuple(
                    self._exclude_matcher.matches(provenance, finding.location.path)
                ),
            )
            for finding in findings
        ]

        normalized = self._normalizer.normalize(f.statement for f in resolved_findings)
        return frozenset(
            ResolvedCopyright(
                statement=statement,
                findings=frozenset(f for f in resolved_findings if f.statement in originals),
            )
            for statement, originals in normalized.items()
        )


def resolve_license_info(
    id: Identifier,
    license_info: LicenseInfo,
    curations: Iterable[LicenseFindingCuration] = (),
    path_excludes: Iterable[PathExclude] = (),
    copyright_garbage: CopyrightGarbage | None = None,
) -> ResolvedLicenseInfo:
    """
    Resolve the license info of a package.

    Convenience function for one-off resolution.
    """
    return LicenseResolver(curations, path_excludes, copyright_garbage).resolve(id, license_info)


@dataclass
class BatchResolution:
    """
    Result of resolving many packages.

    Attributes:
        results: Resolved license info by package, sorted by identifier
        errors: Resolution errors by package, sorted by identifier
    """

    results: dict[Identifier, ResolvedLicenseInfo] = field(default_factory=dict)
    errors: dict[Identifier, InvalidLicenseExpressionError] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """Check if every package was resolved."""
        return not self.errors

    def summary(self) -> str:
        """Get a one-line summary."""
        return f"Resolved {len(self.results)} packages, {len(self.errors)} failed"


class LicenseInfoResolver:
    """
    Resolves the license info of all packages of an analysis.

    Results are cached per identifier for the lifetime of the resolver,
    which is meant to span a single report run. Since resolution is
    deterministic, a cached result equals a fresh one.
    """

    def __init__(
        self,
        license_infos: Iterable[LicenseInfo],
        curations: Iterable[LicenseFindingCuration] = (),
        path_excludes: Iterable[PathExclude] = (),
        copyright_garbage: CopyrightGarbage | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            license_infos: Raw license info of all packages
            curations: License finding curations in declaration order
            path_excludes: Path excludes
            copyright_garbage: Copyright statements to discard

        Raises:
            InvalidArgumentError: If two license infos share an identifier
        """
        self._license_infos: dict[Identifier, LicenseInfo] = {}
        for info in license_infos:
            if info.id in self._license_infos:
                raise InvalidArgumentError(f"Duplicate package identifier: {info.id}")
            self._license_infos[info.id] = info

        self._resolver = LicenseResolver(curations, path_excludes, copyright_garbage)
        self._cache: dict[Identifier, ResolvedLicenseInfo] = {}
        self._lock = threading.Lock()
        # Bumped when a batch times out; results started before that are not cached.
        self._generation = 0

    @property
    def ids(self) -> list[Identifier]:
        """Get all known identifiers, sorted."""
        return sorted(self._license_infos)

    def resolve_license_info(self, id: Identifier) -> ResolvedLicenseInfo:
        """
        Resolve the license info of a package.

        Args:
            id: Package identifier

        Returns:
            ResolvedLicenseInfo for the package

        Raises:
            InvalidArgumentError: If the identifier is unknown
            InvalidLicenseExpressionError: If a license expression is invalid
        """
        with self._lock:
            cached = self._cache.get(id)
            generation = self._generation
        if cached is not None:
            return cached

        license_info = self._license_infos.get(id)
        if license_info is None:
            raise InvalidArgumentError(f"Unknown package identifier: {id}")

        resolved = self._resolver.resolve(id, license_info)

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale resolution of {id}")
                return resolved
            self._cache.setdefault(id, resolved)
            return self._cache[id]

    def resolve_all(
        self,
        ids: Iterable[Identifier] | None = None,
        max_workers: int | None = None,
        timeout: float | None = None,
    ) -> BatchResolution:
        """
        Resolve many packages in parallel.

        A package with an invalid license expression does not stop the
        batch; its error is collected instead.

        Args:
            ids: Packages to resolve (default: all)
            max_workers: Number of worker threads
            timeout: Maximum time for the whole batch (seconds)

        Returns:
            BatchResolution with results and errors

        Raises:
            ResolutionTimeoutError: If the batch does not finish in time,
                no partial results are returned
        """
        ids = sorted(set(ids) if ids is not None else self._license_infos)
        results: dict[Identifier, ResolvedLicenseInfo] = {}
        errors: dict[Identifier, InvalidLicenseExpressionError] = {}

        executor = ThreadPoolExecutor(max_workers=max_workers)
        timed_out = False
        try:
            future_to_id = {
                executor.submit(self.resolve_license_info, id): id for id in ids
            }

            for future in as_completed(future_to_id, timeout=timeout):
                id = future_to_id[future]
                try:
                    results[id] = future.result()
                except InvalidLicenseExpressionError as e:
                    logger.warning(f"Failed to resolve license info: {e}")
                    errors[id] = e

        except FuturesTimeoutError:
            timed_out = True
            with self._lock:
                self._generation += 1
                self._cache.clear()
            raise ResolutionTimeoutError(timeout or 0, len(results) + len(errors), len(ids))
        finally:
            executor.shutdown(wait=not timed_out, cancel_futures=timed_out)

        logger.info(f"Resolved {len(results)} of {len(ids)} packages ({len(errors)} failed)")

        return BatchResolution(
            results=dict(sorted(results.items())),
            errors=dict(sorted(errors.items())),
        )
