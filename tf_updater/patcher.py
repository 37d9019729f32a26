"""Surgical text replacement inside located regions.

Every function here returns new content. Anything outside the region being
patched is left byte-for-byte untouched, and a target that cannot be found
leaves the content unchanged. The updater turns that case into an error.
"""

from __future__ import annotations

from .regions import Region, find_git_reference, find_quoted_value, find_version_line


def patch_within_region(
    content: str, region: Region | None, old: str, new: str
) -> str:
    """Replace the first occurrence of old inside region with new.

    Args:
        content: Full file content.
        region: Span to search in. None means nothing was located.
        old: Literal text to replace.
        new: Replacement text.

    Returns:
        Updated content, or content itself if old is not in the region.
    """
    if region is None or not old:
        return content
    index = content.find(old, region.start, region.end)
    if index == -1:
        return content
    return content[:index] + new + content[index + len(old) :]


def splice_region(content: str, region: Region, replacement: str) -> str:
    """Swap the whole region for replacement."""
    return content[: region.start] + replacement + content[region.end :]


def patch_git_declaration(
    content: str, region: Region | None, url: str, old_ref: str, new_ref: str
) -> str:
    """Update the ref of a git module source inside a declaration block.

    Only the `ref=<old_ref>` token following the module URL is touched, so
    the same ref string elsewhere in the block (or in the URL) is left alone.
    """
    if region is None:
        return content
    reference = find_git_reference(content, region, url, old_ref)
    if reference is None:
        return content
    ref_token = Region(start=reference.end - len(old_ref), end=reference.end)
    return patch_within_region(content, ref_token, old_ref, new_ref)


def patch_version_declaration(
    content: str, region: Region | None, old: str, new: str
) -> str:
    """Update the version constraint of a registry module or provider block.

    The first `version = ...` line in the block is the only line touched,
    and on it only a quoted value equal to old is replaced.
    """
    if region is None:
        return content
    version_line = find_version_line(content, region)
    if version_line is None:
        return content
    value = find_quoted_value(content, version_line, old)
    return patch_within_region(content, value, old, new)
