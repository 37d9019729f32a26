"""Locate dependency declarations in Terraform and lock-file text.

HCL is not parsed. Each declaration kind has an opening anchor (a block
header or a `source = ...` assignment), and the block it belongs to runs up
to the next line that starts with a closing brace. This assumes idiomatic
formatting: top-level blocks close with a `}` in column zero and nested
blocks are indented.

All lookups return a Region (a `[start, end)` span of the content) or None
when nothing matches.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from .models import SourceKind

# Any run of characters that does not cross a line starting with "}".
_BLOCK_BODY = r"(?:(?!^\}).)*"
_BLOCK_FLAGS = re.MULTILINE | re.DOTALL

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_REF_CHAR = r"[A-Za-z0-9._+/-]"
_VERSION_LINE = re.compile(r"^[ \t]*version[ \t]*=.*$", re.MULTILINE)
_CLOSING_LINE = re.compile(r"^[ \t]*\}", re.MULTILINE)


class Region(BaseModel):
    """A `[start, end)` character span of some file content."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    def text(self, content: str) -> str:
        """Return the slice of content covered by this region."""
        return content[self.start : self.end]

    def __contains__(self, index: int) -> bool:
        return self.start <= index < self.end


def _quoted(value: str) -> str:
    return r"[\"']" + re.escape(value) + r"[\"']"


def declaration_pattern(
    name: str, kind: SourceKind | str, *, terragrunt: bool = False
) -> re.Pattern[str]:
    """Build the block pattern for a declaration kind.

    Args:
        name: Dependency name. For lockfile declarations this is the full
              provider source, e.g. "registry.terraform.io/hashicorp/aws".
        kind: Declaration kind.
        terragrunt: Whether the file is a terragrunt file (git only).

    Raises:
        ValueError: If kind is not a known SourceKind.
    """
    kind = SourceKind(kind)

    if kind is SourceKind.GIT:
        # Terragrunt files don't name their modules, so the whole
        # `terraform` block is the best we can do
        if terragrunt:
            return re.compile(r"terraform\s*\{" + _BLOCK_BODY, _BLOCK_FLAGS)
        return re.compile(
            r"module\s+" + _quoted(name) + r"\s*\{" + _BLOCK_BODY, _BLOCK_FLAGS
        )

    if kind is SourceKind.REGISTRY:
        # Start right after the opening brace of the block containing the
        # source assignment, so a version line above it is included
        return re.compile(
            r"(?<=\{)"
            + _BLOCK_BODY
            + r"source\s*=\s*"
            + _quoted(name)
            + _BLOCK_BODY,
            _BLOCK_FLAGS,
        )

    if kind is SourceKind.PROVIDER:
        return re.compile(
            r"(?:source\s*=\s*"
            + _quoted(name)
            + r"|(?<![\w./-])"
            + re.escape(name)
            + r"\s*=\s*\{)"
            + _BLOCK_BODY,
            _BLOCK_FLAGS,
        )

    return re.compile(
        r"provider\s*" + _quoted(name) + r"\s*\{" + _BLOCK_BODY + r"^\}",
        _BLOCK_FLAGS,
    )


def locate_declaration(
    content: str, name: str, kind: SourceKind | str, *, terragrunt: bool = False
) -> Region | None:
    """Find the block declaring a dependency.

    Args:
        content: Full file content.
        name: Dependency name, or provider source for lockfile declarations.
        kind: Declaration kind.
        terragrunt: Whether the file is a terragrunt file.

    Returns:
        The span of the first matching block, or None.
    """
    match = declaration_pattern(name, kind, terragrunt=terragrunt).search(content)
    if match is None:
        return None
    return Region(start=match.start(), end=match.end())


def find_git_reference(
    content: str, region: Region, url: str, ref: str
) -> Region | None:
    """Find `<url>...ref=<ref>` inside a region.

    The URL scheme is ignored, so "https://github.com/org/repo" matches a
    `git::https://github.com/org/repo?ref=...` source. The ref must be a
    whole token: "v1.0" does not match "ref=v1.0.1".
    """
    pattern = re.compile(
        re.escape(_SCHEME.sub("", url))
        + r".*ref="
        + re.escape(ref)
        + r"(?!"
        + _REF_CHAR
        + r")"
    )
    match = pattern.search(content, region.start, region.end)
    if match is None:
        return None
    return Region(start=match.start(), end=match.end())


def entry_region(content: str, region: Region) -> Region:
    """Cut a region at the first closing brace line, indented or not.

    A `required_providers` entry closes with an indented `}`, so this keeps
    a provider region from running into the next provider's entry.
    """
    match = _CLOSING_LINE.search(content, region.start, region.end)
    if match is None:
        return region
    return Region(start=region.start, end=match.start())


def find_version_line(content: str, region: Region) -> Region | None:
    """Find the first `version = ...` line inside a region."""
    match = _VERSION_LINE.search(content, region.start, region.end)
    if match is None:
        return None
    return Region(start=match.start(), end=match.end())


def find_quoted_value(content: str, region: Region, value: str) -> Region | None:
    """Find a quoted string equal to value inside a region.

    Returns the span between the quotes.
    """
    pattern = re.compile(r"([\"'])" + re.escape(value) + r"\1")
    match = pattern.search(content, region.start, region.end)
    if match is None:
        return None
    return Region(start=match.start() + 1, end=match.end() - 1)
