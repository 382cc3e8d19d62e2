"""
End-to-end tests for Mantissa Attribution.

These tests exercise the resolution pipeline from raw license info to
resolved licenses and NOTICE documents, and the command line flow from
an analysis input file to a written notice.
"""

from __future__ import annotations

import itertools

import pytest

from attribution.analysis import AnalysisInput
from attribution.cli import main
from attribution.config import NoticeConfiguration
from attribution.formats import write_value
from attribution.licenses import (
    LicenseFindingCurator,
    LicenseInfoResolver,
    merge_by_license,
    merge_licenses,
    resolve_license_info,
)
from attribution.models import (
    CopyrightFinding,
    CopyrightGarbage,
    Findings,
    Identifier,
    LicenseFinding,
    LicenseFindingCuration,
    LicenseInfo,
    LicenseSource,
    PathExclude,
    Provenance,
    TextLocation,
)
from attribution.notice import DirectoryLicenseTextProvider, NoticeBuilder


class TestResolutionScenarios:
    """Tests for single-package resolution scenarios."""

    def test_detected_license_with_copyright(self, package_id, mit_license_info):
        """Test a detected license picks up the copyright of its file."""
        resolved = resolve_license_info(package_id, mit_license_info)

        (mit,) = resolved.licenses
        assert mit.license == "MIT"
        assert mit.sources == {LicenseSource.DETECTED}

        (location,) = mit.locations
        (copyright,) = location.copyrights
        assert copyright.statement == "Copyright 2020 Alice"
        assert not location.matching_path_excludes
        assert not mit.is_detected_excluded

    def test_excluded_location(self, package_id, mit_license_info):
        """Test a path exclude marks the location without dropping it."""
        exclude = PathExclude("a.txt")

        resolved = resolve_license_info(package_id, mit_license_info, path_excludes=[exclude])

        mit = resolved.get("MIT")
        (location,) = mit.locations
        assert location.matching_path_excludes == (exclude,)
        assert mit.is_detected_excluded

    def test_removed_finding(self, package_id, mit_license_info):
        """Test a removing curation drops the finding entirely."""
        curation = LicenseFindingCuration(path="a.txt", concluded_license=None)

        resolved = resolve_license_info(package_id, mit_license_info, curations=[curation])

        assert resolved.get("MIT") is None
        assert len(resolved) == 0
        (unmatched,) = resolved.unmatched_copyrights.values()
        assert {f.statement for f in unmatched} == {"Copyright 2020 Alice"}

    def test_merge_across_packages(self, provenance, repository_provenance):
        """Test merging the same license of two packages unions the evidence."""
        first = Identifier("NPM", "", "first", "1.0")
        second = Identifier("NPM", "", "second", "1.0")
        infos = [
            LicenseInfo(
                id=first,
                detected=(Findings(provenance, licenses=(LicenseFinding("MIT", TextLocation("LICENSE", 1, 20)),)),),
            ),
            LicenseInfo(
                id=second,
                declared_licenses=("MIT",),
                detected=(
                    Findings(
                        repository_provenance,
                        licenses=(
                            LicenseFinding("MIT", TextLocation("LICENSE.md", 1, 20)),
                            LicenseFinding("MIT", TextLocation("src/index.js", 1, 3)),
                        ),
                    ),
                ),
            ),
        ]

        first_mit, second_mit = (resolve_license_info(info.id, info).get("MIT") for info in infos)
        merged = merge_licenses([first_mit, second_mit])

        assert merged.license == "MIT"
        assert len(merged.locations) == len(first_mit.locations) + len(second_mit.locations) == 3
        assert merged.sources == {LicenseSource.DETECTED, LicenseSource.DECLARED}


# =============================================================================
# Resolution properties
# =============================================================================


class TestResolutionProperties:
    """Tests for properties every resolution result has."""

    @pytest.fixture
    def curations(self, remove_gpl_curation) -> list[LicenseFindingCuration]:
        """Return curations removing and rewriting findings."""
        return [
            remove_gpl_curation,
            LicenseFindingCuration(path="vendor/**", concluded_license="BSD-2-Clause"),
        ]

    def test_idempotent(
        self, package_id, rich_license_info, curations, path_exclude_tests, copyright_garbage
    ):
        """Test resolving twice yields equal results."""
        first = resolve_license_info(
            package_id, rich_license_info, curations, [path_exclude_tests], copyright_garbage
        )
        second = resolve_license_info(
            package_id, rich_license_info, curations, [path_exclude_tests], copyright_garbage
        )

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_locations_carry_the_license(self, package_id, rich_license_info, curations):
        """Test every location of a license was curated to that license."""
        resolved = resolve_license_info(package_id, rich_license_info, curations=curations)
        curator = LicenseFindingCurator(curations)

        raw = {
            (findings.provenance, finding.location): finding
            for findings in rich_license_info.detected
            for finding in findings.licenses
        }

        assert resolved.get("BSD-2-Clause") is not None
        for license in resolved:
            for location in license.locations:
                finding = raw[(location.provenance, location.location)]
                assert curator.apply(finding, location.provenance).license == license.license

    def test_detected_excluded_iff_all_locations_excluded(self, package_id, provenance):
        """Test is_detected_excluded needs every location excluded."""
        info = LicenseInfo(
            id=package_id,
            detected=(
                Findings(
                    provenance,
                    licenses=(
                        LicenseFinding("MIT", TextLocation("test/a.c", 1, 2)),
                        LicenseFinding("MIT", TextLocation("src/a.c", 1, 2)),
                        LicenseFinding("ISC", TextLocation("test/b.c", 1, 2)),
                    ),
                ),
            ),
        )

        resolved = resolve_license_info(package_id, info, path_excludes=[PathExclude("**/test/**")])

        assert not resolved.get("MIT").is_detected_excluded
        assert resolved.get("ISC").is_detected_excluded

    def test_garbage_round_trip(self, package_id, rich_license_info, copyright_garbage):
        """Test garbage statements only appear as garbage."""
        resolved = resolve_license_info(
            package_id, rich_license_info, copyright_garbage=copyright_garbage
        )

        statements = {
            statement
            for license in resolved
            for location in license.locations
            for copyright in location.copyrights
            for statement in [copyright.statement, *(f.statement for f in copyright.findings)]
        }
        garbage = {f.statement for findings in resolved.copyright_garbage.values() for f in findings}

        assert garbage == set(copyright_garbage.items)
        assert statements.isdisjoint(garbage)
        assert "Copyright 2001 Bob" in statements

    def test_merge_independent_of_package_order(self, provenance):
        """Test merging packages in any order gives the same licenses."""
        resolved = [
            resolve_license_info(
                Identifier("NPM", "", name, "1.0"),
                LicenseInfo(
                    id=Identifier("NPM", "", name, "1.0"),
                    declared_licenses=declared,
                    detected=(
                        Findings(
                            provenance,
                            licenses=(LicenseFinding("MIT", TextLocation(f"{name}/LICENSE", 1, 20)),),
                            copyrights=(CopyrightFinding(f"Copyright 2020 {name}", TextLocation(f"{name}/LICENSE", 1)),),
                        ),
                    ),
                ),
            )
            for name, declared in [("a", ("MIT",)), ("b", ("Apache-2.0",)), ("c", ())]
        ]

        results = {
            tuple(merge_by_license(itertools.chain.from_iterable(order)))
            for order in itertools.permutations(resolved)
        }

        assert len(results) == 1


# =============================================================================
# Notice generation
# =============================================================================


class TestNoticeGeneration:
    """Tests for NOTICE generation from resolved packages."""

    def test_excluded_package_license_left_out(self, license_texts, provenance):
        """Test an excluded package's unique license is left out, shared licenses kept once."""
        app = Identifier("NPM", "", "app-lib", "1.0")
        tool = Identifier("NPM", "", "build-tool", "1.0")
        infos = [
            LicenseInfo(id=app, declared_licenses=("MIT",)),
            LicenseInfo(id=tool, declared_licenses=("MIT", "BSD-3-Clause")),
        ]
        resolver = LicenseInfoResolver(infos)

        document = NoticeBuilder(license_texts).build(
            resolver.resolve_all().results.values(), excluded_ids=[tool]
        )

        assert document.licenses == ["MIT"]
        assert document.text.count(license_texts("MIT")) == 1
        assert license_texts("BSD-3-Clause") not in document.text

    def test_shared_license_once(self, license_texts):
        """Test a license shared by packages appears once."""
        infos = [
            LicenseInfo(id=Identifier("PyPI", "", name, "1.0"), declared_licenses=("MIT",))
            for name in ("alpha", "beta", "gamma")
        ]
        batch = LicenseInfoResolver(infos).resolve_all(max_workers=2)

        document = NoticeBuilder(license_texts).build(batch.results.values())

        assert document.text.count(license_texts("MIT")) == 1

    def test_configuration_pipeline(self, analysis_file, config_file, license_text_dir):
        """Test a notice built from loaded input and configuration."""
        analysis = AnalysisInput.from_file(str(analysis_file))
        config = NoticeConfiguration.from_file(str(config_file))
        resolver = LicenseInfoResolver(
            analysis.license_infos,
            curations=config.curations,
            path_excludes=config.path_excludes,
            copyright_garbage=config.copyright_garbage,
        )

        batch = resolver.resolve_all(max_workers=config.max_workers, timeout=config.timeout)
        document = NoticeBuilder(
            DirectoryLicenseTextProvider([license_text_dir]),
            license_view=config.license_view,
            footers=config.report.footers,
        ).build(batch.results.values(), excluded_ids=analysis.excluded_ids)

        assert batch.is_success
        assert document.licenses == ["Apache-2.0", "MIT"]
        assert "Copyright (c) 2018 Jane Doe" in document.text
        assert not document.has_warnings


# =============================================================================
# Command line
# =============================================================================


class TestCommandLineFlow:
    """Tests for the command line flow."""

    @pytest.fixture(autouse=True)
    def isolated_home(self, tmp_path, monkeypatch):
        """Keep user configuration files out of CLI runs."""
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))

    def test_notice_matches_library(self, analysis_file, license_text_dir, tmp_path):
        """Test the written notice equals the one built in-process."""
        output = tmp_path / "NOTICE"

        exit_code = main(
            ["notice", str(analysis_file), "-o", str(output), "--license-texts", str(license_text_dir)]
        )

        analysis = AnalysisInput.from_file(str(analysis_file))
        batch = LicenseInfoResolver(analysis.license_infos).resolve_all()
        expected = NoticeBuilder(DirectoryLicenseTextProvider([license_text_dir])).build(
            batch.results.values(), excluded_ids=analysis.excluded_ids
        )

        assert exit_code == 0
        assert output.read_bytes() == expected.text.encode("utf-8")

    def test_notice_is_reproducible(self, analysis_file, license_text_dir, tmp_path):
        """Test repeated runs write identical files."""
        outputs = [tmp_path / "first" / "NOTICE", tmp_path / "second" / "NOTICE"]

        for output in outputs:
            assert main(["notice", str(analysis_file), "-o", str(output), "--license-texts", str(license_text_dir)]) == 0

        assert outputs[0].read_bytes() == outputs[1].read_bytes()

    def test_excluded_packages_from_config(self, analysis_file, license_text_dir, tmp_path, capsys):
        """Test configured package exclusions leave the package out."""
        config = tmp_path / "config.json"
        config.write_text('{"excluded_packages": ["Maven:org.example:lib:2.1"]}', encoding="utf-8")

        exit_code = main(
            ["notice", str(analysis_file), "-c", str(config), "--license-texts", str(license_text_dir)]
        )

        assert exit_code == 0
        assert "Apache License" not in capsys.readouterr().out

    def test_garbage_configuration(self, tmp_path, capsys):
        """Test configured garbage never reaches the resolve output."""
        analysis = AnalysisInput(
            license_infos=[
                LicenseInfo(
                    id=Identifier("NPM", "", "tpl", "1.0"),
                    detected=(
                        Findings(
                            provenance=Provenance.unknown(),
                            licenses=(LicenseFinding("MIT", TextLocation("LICENSE", 1, 20)),),
                            copyrights=(
                                CopyrightFinding("Copyright (c) <year> <owner>", TextLocation("LICENSE", 1)),
                                CopyrightFinding("Copyright 2022 Frank", TextLocation("LICENSE", 2)),
                            ),
                        ),
                    ),
                )
            ]
        )
        analysis_path = tmp_path / "analysis.yml"
        write_value(analysis_path, analysis.to_dict())
        config_path = tmp_path / "config.yml"
        NoticeConfiguration(copyright_garbage=CopyrightGarbage.of(["Copyright (c) <year> <owner>"])).save(
            str(config_path)
        )

        assert main(["resolve", str(analysis_path), "-c", str(config_path)]) == 0

        output = capsys.readouterr().out
        assert "Copyright 2022 Frank" in output
        assert "<owner>" not in output
