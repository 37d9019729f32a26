"""Update pipeline: pair requirements → locate → patch → verify.

This module orchestrates updating the files of one Terraform project for a
single changed dependency:
1. Check that there is a configuration file to update at all
2. Pair each new requirement with its previous one and drop unchanged pairs
3. For every file with a changed pair, locate each declaration and patch it
   (git ref, registry/provider version, or regenerated lock entry)
4. Insist that every touched file really changed, and that something did

Each file is transformed independently and in the order given. Any error
aborts the whole update.
"""

from __future__ import annotations

from .errors import (
    MissingConfigurationError,
    NoChangeError,
    NoFilesChangedError,
    RequirementFileMismatchError,
    UnsupportedSourceKindError,
)
from .lockfile import regenerate_lock_entry
from .models import (
    Dependency,
    DependencyFile,
    ProjectFiles,
    Requirement,
    SourceKind,
    UpdaterSettings,
)
from .patcher import patch_git_declaration, patch_version_declaration, splice_region
from .regions import entry_region, locate_declaration
from .shell import step

RequirementPair = tuple[Requirement, Requirement]


def check_required_files(files: ProjectFiles) -> None:
    """Fail unless there is at least one terraform or terragrunt file.

    Raises:
        MissingConfigurationError: If only a lock file (or nothing) was given.
    """
    if files.terraform_files or files.terragrunt_files:
        return
    raise MissingConfigurationError("No Terraform configuration file!")


def changed_requirement_pairs(dependency: Dependency) -> list[RequirementPair]:
    """Pair new requirements with previous ones, keeping only changed pairs.

    Returns:
        List of (new, old) requirement pairs that differ.

    Raises:
        RequirementFileMismatchError: If a changed pair spans two files.
    """
    pairs: list[RequirementPair] = []
    for new_req, old_req in zip(
        dependency.requirements, dependency.previous_requirements
    ):
        if new_req == old_req:
            continue
        if new_req.file != old_req.file:
            raise RequirementFileMismatchError(
                f"Requirement for {new_req.file} is paired with one for {old_req.file}",
                dependency=dependency.name,
                file_name=new_req.file,
                kind=new_req.source.type,
            )
        pairs.append((new_req, old_req))
    return pairs


def pending_files(dependency: Dependency, files: ProjectFiles) -> list[DependencyFile]:
    """Candidate files with at least one changed requirement, in order.

    An empty list means the dependency is already up to date everywhere.
    """
    changed = {new_req.file for new_req, _ in changed_requirement_pairs(dependency)}
    return [file for file in files.candidates if file.name in changed]


def update_git_declaration(
    content: str,
    dependency: Dependency,
    new_req: Requirement,
    old_req: Requirement,
    *,
    terragrunt: bool,
) -> str:
    """Point a git module source at the new ref."""
    url, old_ref, new_ref = old_req.source.url, old_req.source.ref, new_req.source.ref
    if not (url and old_ref and new_ref):
        return content
    region = locate_declaration(
        content, dependency.name, SourceKind.GIT, terragrunt=terragrunt
    )
    return patch_git_declaration(content, region, url, old_ref, new_ref)


def update_registry_declaration(
    content: str, dependency: Dependency, new_req: Requirement, old_req: Requirement
) -> str:
    """Rewrite the version constraint of a registry module or provider."""
    if not (old_req.requirement and new_req.requirement):
        return content
    region = locate_declaration(content, dependency.name, new_req.source.type)
    if region is not None and new_req.source.type == SourceKind.PROVIDER.value:
        # A version line after this entry's closing brace belongs to another provider
        region = entry_region(content, region)
    return patch_version_declaration(
        content, region, old_req.requirement, new_req.requirement
    )


def update_lockfile_declaration(
    content: str,
    lock_file: DependencyFile,
    new_req: Requirement,
    files: ProjectFiles,
    settings: UpdaterSettings | None,
) -> str:
    """Replace one provider's lock entry with a freshly resolved one.

    Providers missing from the lock file are left alone.
    """
    provider_source = new_req.source.provider_source
    region = locate_declaration(content, provider_source, SourceKind.LOCKFILE)
    if region is None:
        return content
    entry = regenerate_lock_entry(
        files.all_files,
        lock_file.model_copy(update={"content": content}),
        provider_source,
        settings,
    )
    return splice_region(content, region, entry)


def updated_file_content(
    file: DependencyFile,
    dependency: Dependency,
    files: ProjectFiles,
    settings: UpdaterSettings | None = None,
) -> str:
    """Apply every changed requirement for this file and return the new content.

    Raises:
        UnsupportedSourceKindError: If a requirement has an unknown source type.
        RequirementFileMismatchError: If a changed pair spans two files.
        LockToolFailureError: If regenerating a lock entry fails.
    """
    content = file.content

    for new_req, old_req in changed_requirement_pairs(dependency):
        if new_req.file != file.name:
            continue

        kind = new_req.source.type
        if kind == SourceKind.GIT.value:
            content = update_git_declaration(
                content,
                dependency,
                new_req,
                old_req,
                terragrunt=files.is_terragrunt(file),
            )
        elif kind in (SourceKind.REGISTRY.value, SourceKind.PROVIDER.value):
            content = update_registry_declaration(content, dependency, new_req, old_req)
        elif kind == SourceKind.LOCKFILE.value:
            if files.is_lock_file(file):
                content = update_lockfile_declaration(
                    content, file, new_req, files, settings
                )
        else:
            raise UnsupportedSourceKindError(
                f"Don't know how to update a {kind} declaration!",
                dependency=dependency.name,
                file_name=file.name,
                kind=kind,
            )

    return content


def updated_dependency_files(
    dependency: Dependency,
    files: ProjectFiles,
    settings: UpdaterSettings | None = None,
) -> list[DependencyFile]:
    """Update every file that declares the dependency.

    Args:
        dependency: The single dependency being updated.
        files: Classified project files.
        settings: Lock tool settings, used only for lock file entries.

    Returns:
        The changed files, with new content, in candidate order.

    Raises:
        MissingConfigurationError: If there is no terraform/terragrunt file.
        NoChangeError: If a file with a changed requirement came out unchanged.
        NoFilesChangedError: If no file changed at all.
    """
    check_required_files(files)

    if dependency.previous_version and dependency.version:
        step(
            f"Updating {dependency.name}: "
            f"{dependency.previous_version} → {dependency.version}"
        )
    else:
        step(f"Updating {dependency.name}")

    # The lock tool must see configuration files that were already updated
    snapshot = files
    updated: list[DependencyFile] = []
    for file in pending_files(dependency, files):
        content = updated_file_content(file, dependency, snapshot, settings)
        if content == file.content:
            kinds = sorted(
                {
                    new_req.source.type
                    for new_req, _ in changed_requirement_pairs(dependency)
                    if new_req.file == file.name
                }
            )
            raise NoChangeError(
                "Content didn't change!",
                dependency=dependency.name,
                file_name=file.name,
                kind=",".join(kinds),
            )
        new_file = file.model_copy(update={"content": content})
        snapshot = snapshot.with_file(new_file)
        updated.append(new_file)
        print(f"  {file.name}: updated")

    if not updated:
        raise NoFilesChangedError("No files changed!", dependency=dependency.name)

    return updated
