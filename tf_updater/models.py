"""Data models for tf-updater.

These Pydantic models represent the dependency data handed to the updater
and the files it reads and produces. All of them are frozen: updated file
content is always returned as a new DependencyFile.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceKind(str, Enum):
    """How a dependency's version or ref is declared in a file."""

    GIT = "git"
    REGISTRY = "registry"
    PROVIDER = "provider"
    LOCKFILE = "lockfile"


class DependencyFile(BaseModel):
    """A single file of the project being updated.

    Attributes:
        name: Path of the file relative to the project directory.
        content: Full text content of the file.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    content: str


class SourceSpec(BaseModel):
    """Where a requirement comes from.

    `type` names the declaration kind. It is kept as a plain string so that
    an unknown kind reaches the updater, which reports it by name.

    Attributes:
        type: One of "git", "registry", "provider" or "lockfile".
        url: Git remote URL (git sources only).
        ref: Git tag or branch (git sources only).
        registry_hostname: Registry host, e.g. "registry.terraform.io"
                           (lockfile sources only).
        module_identifier: Provider path, e.g. "hashicorp/aws"
                           (lockfile sources only).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    url: str | None = None
    ref: str | None = None
    registry_hostname: str | None = None
    module_identifier: str | None = None

    @property
    def provider_source(self) -> str:
        """Full provider address used by lock files, e.g. "registry.terraform.io/hashicorp/aws"."""
        return f"{self.registry_hostname}/{self.module_identifier}"


class Requirement(BaseModel):
    """How a dependency is pinned at one declaration site.

    Attributes:
        file: Name of the file holding the declaration.
        requirement: Version constraint string, e.g. "~> 3.0". Git
                     declarations pin by ref instead and usually leave this None.
        source: Declaration kind and kind-specific details.
    """

    model_config = ConfigDict(frozen=True)

    file: str
    requirement: str | None = None
    source: SourceSpec


class Dependency(BaseModel):
    """The single dependency being updated.

    `requirements` and `previous_requirements` are positionally paired:
    index i of each describes the same declaration site after and before
    the change.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    requirements: list[Requirement]
    previous_requirements: list[Requirement] = Field(default_factory=list)
    version: str | None = None
    previous_version: str | None = None

    @model_validator(mode="after")
    def _check_paired(self) -> Dependency:
        if len(self.requirements) != len(self.previous_requirements):
            raise ValueError(
                f"{self.name}: requirements and previous_requirements differ in length "
                f"({len(self.requirements)} != {len(self.previous_requirements)})"
            )
        return self

    @property
    def requirement_files(self) -> set[str]:
        """Names of every file referenced by a requirement."""
        return {req.file for req in self.requirements}


class ProjectFiles(BaseModel):
    """Project files, already classified by the file selector.

    Attributes:
        terraform_files: `*.tf` configuration files.
        terragrunt_files: Terragrunt `*.hcl` files.
        lock_file: The dependency lock file, if the project has one.
        support_files: Other files the lock tool needs to see (e.g. `*.tfvars`),
                       never updated themselves.
    """

    model_config = ConfigDict(frozen=True)

    terraform_files: list[DependencyFile] = Field(default_factory=list)
    terragrunt_files: list[DependencyFile] = Field(default_factory=list)
    lock_file: DependencyFile | None = None
    support_files: list[DependencyFile] = Field(default_factory=list)

    @property
    def candidates(self) -> list[DependencyFile]:
        """Files that may be updated, in processing order."""
        files = [*self.terraform_files, *self.terragrunt_files]
        if self.lock_file is not None:
            files.append(self.lock_file)
        return files

    @property
    def all_files(self) -> list[DependencyFile]:
        """Every project file, including support files."""
        return [*self.candidates, *self.support_files]

    def is_terragrunt(self, file: DependencyFile) -> bool:
        return any(f.name == file.name for f in self.terragrunt_files)

    def is_lock_file(self, file: DependencyFile) -> bool:
        return self.lock_file is not None and self.lock_file.name == file.name

    def with_file(self, file: DependencyFile) -> ProjectFiles:
        """Return a copy where the file with the same name is replaced by file."""

        def swap(files: list[DependencyFile]) -> list[DependencyFile]:
            return [file if f.name == file.name else f for f in files]

        return self.model_copy(
            update={
                "terraform_files": swap(self.terraform_files),
                "terragrunt_files": swap(self.terragrunt_files),
                "lock_file": file if self.is_lock_file(file) else self.lock_file,
                "support_files": swap(self.support_files),
            }
        )


class UpdaterSettings(BaseModel):
    """Settings for the external lock tool.

    Attributes:
        lock_tool: Executable used to regenerate lock entries ("terraform" or "tofu").
        lock_file_name: Name of the dependency lock file.
        platforms: Target platforms to hash, passed as `-platform=<p>`.
    """

    lock_tool: str = "terraform"
    lock_file_name: str = ".terraform.lock.hcl"
    platforms: list[str] = Field(default_factory=list)


class UpdateJob(BaseModel):
    """A dependency update request loaded from a job file."""

    dependency: Dependency
    settings: UpdaterSettings = Field(default_factory=UpdaterSettings)
