"""Tests for tf_updater.patcher."""

from __future__ import annotations

from tf_updater.models import DependencyFile
from tf_updater.patcher import (
    patch_git_declaration,
    patch_version_declaration,
    patch_within_region,
    splice_region,
)
from tf_updater.regions import Region, locate_declaration


def _outside(content: str, region: Region) -> tuple[str, str]:
    return content[: region.start], content[region.end :]


class TestPatchWithinRegion:
    def test_replaces_first_occurrence_in_region(self) -> None:
        content = "aaa [x x] x"
        region = Region(start=4, end=9)

        assert patch_within_region(content, region, "x", "y") == "aaa [y x] x"

    def test_ignores_occurrences_outside_region(self) -> None:
        content = "x [x] x"
        region = Region(start=2, end=5)

        assert patch_within_region(content, region, "x", "y") == "x [y] x"

    def test_occurrence_crossing_region_end_is_ignored(self) -> None:
        content = "[ab]c"
        region = Region(start=0, end=3)

        assert patch_within_region(content, region, "bc", "zz") == content

    def test_missing_value_is_noop(self) -> None:
        content = "nothing to see"
        assert patch_within_region(content, Region(start=0, end=7), "x", "y") == content

    def test_no_region_is_noop(self) -> None:
        assert patch_within_region("abc", None, "a", "b") == "abc"


class TestSpliceRegion:
    def test_swaps_region(self) -> None:
        assert splice_region("one two three", Region(start=4, end=7), "2") == "one 2 three"

    def test_empty_replacement_removes(self) -> None:
        assert splice_region("one two three", Region(start=3, end=7), "") == "one three"


class TestPatchVersionDeclaration:
    def test_registry_round_trip(self) -> None:
        """`>= 1.0` → `>= 2.0` changes only the version line's value."""
        content = (
            'module "consul" {\n'
            '  source  = "hashicorp/consul/aws"\n'
            '  version = ">= 1.0"\n'
            "}\n"
        )
        region = locate_declaration(content, "hashicorp/consul/aws", "registry")

        updated = patch_version_declaration(content, region, ">= 1.0", ">= 2.0")

        assert updated == content.replace('">= 1.0"', '">= 2.0"')

    def test_only_first_version_line(self) -> None:
        content = (
            'module "consul" {\n'
            '  source  = "hashicorp/consul/aws"\n'
            '  version = "0.1.0"\n'
            '  # version = "0.1.0"\n'
            "}\n"
        )
        region = locate_declaration(content, "hashicorp/consul/aws", "registry")

        updated = patch_version_declaration(content, region, "0.1.0", "0.2.0")

        assert '  version = "0.2.0"\n' in updated
        assert '  # version = "0.1.0"\n' in updated

    def test_single_occurrence_in_region(self, main_tf: DependencyFile) -> None:
        """Both providers pin ~> 3.0 but only the one in the region changes."""
        content = main_tf.content
        region = locate_declaration(content, "hashicorp/random", "provider")
        assert region is not None

        updated = patch_version_declaration(content, region, "~> 3.0", "~> 3.5")

        assert updated.count('version = "~> 3.0"') == 1
        assert updated.count('version = "~> 3.5"') == 1
        assert updated.index("~> 3.5") > updated.index("hashicorp/random")

    def test_locality(self, main_tf: DependencyFile) -> None:
        content = main_tf.content
        region = locate_declaration(content, "hashicorp/consul/aws", "registry")
        assert region is not None

        updated = patch_version_declaration(content, region, "0.1.0", "0.2.0")

        before, after = _outside(content, region)
        assert updated.startswith(before)
        assert updated.endswith(after)
        assert updated != content

    def test_mismatched_requirement_is_noop(self, main_tf: DependencyFile) -> None:
        content = main_tf.content
        region = locate_declaration(content, "hashicorp/consul/aws", "registry")

        assert patch_version_declaration(content, region, "0.9.0", "1.0.0") == content

    def test_no_version_line_is_noop(self) -> None:
        content = 'module "x" {\n  source = "a/b/c"\n}\n'
        region = locate_declaration(content, "a/b/c", "registry")

        assert patch_version_declaration(content, region, "1.0", "2.0") == content


class TestPatchGitDeclaration:
    def test_updates_ref_only(self, main_tf: DependencyFile) -> None:
        content = main_tf.content
        region = locate_declaration(content, "vpc", "git")

        updated = patch_git_declaration(
            content, region, "https://github.com/org/terraform-vpc", "v1.0.0", "v1.1.0"
        )

        assert 'source = "git::https://github.com/org/terraform-vpc?ref=v1.1.0"' in updated
        # The tag value inside the same block is a different line
        assert 'release = "v1.0.0"' in updated

    def test_ref_before_source_line_untouched(self) -> None:
        content = (
            'module "vpc" {\n'
            '  description = "v1.0.0"\n'
            '  source = "git::https://github.com/org/repo?ref=v1.0.0"\n'
            "}\n"
        )
        region = locate_declaration(content, "vpc", "git")

        updated = patch_git_declaration(
            content, region, "https://github.com/org/repo", "v1.0.0", "v1.1.0"
        )

        assert '  description = "v1.0.0"\n' in updated
        assert "?ref=v1.1.0" in updated

    def test_ref_inside_url_untouched(self) -> None:
        content = (
            'module "vpc" {\n'
            '  source = "git::https://github.com/org/v1/repo?ref=v1"\n'
            "}\n"
        )
        region = locate_declaration(content, "vpc", "git")

        updated = patch_git_declaration(
            content, region, "https://github.com/org/v1/repo", "v1", "v2"
        )

        assert 'source = "git::https://github.com/org/v1/repo?ref=v2"' in updated

    def test_prefix_ref_is_not_matched(self) -> None:
        content = 'module "vpc" {\n  source = "git::https://x.io/r?ref=v1.0.1"\n}\n'
        region = locate_declaration(content, "vpc", "git")

        assert (
            patch_git_declaration(content, region, "https://x.io/r", "v1.0", "v2.0")
            == content
        )

    def test_terragrunt(self, terragrunt_hcl: DependencyFile) -> None:
        content = terragrunt_hcl.content
        region = locate_declaration(content, "vpc", "git", terragrunt=True)

        updated = patch_git_declaration(
            content, region, "https://github.com/org/modules", "v0.1.0", "v0.2.0"
        )

        assert "modules.git//vpc?ref=v0.2.0" in updated
        assert 'name = "v0.1.0"' in updated

    def test_no_region_is_noop(self, main_tf: DependencyFile) -> None:
        content = main_tf.content
        assert patch_git_declaration(content, None, "u", "a", "b") == content
