"""Project file discovery.

Classifies the files of a Terraform project directory into configuration
files, terragrunt files, the lock file, and support files the lock tool
needs to see. Only top-level files are update candidates. Files in
subdirectories (local modules, mostly) are carried as support files so the
lock tool can resolve `source = "./modules/x"`.
"""

from __future__ import annotations

from pathlib import Path

from .models import DependencyFile, ProjectFiles, UpdaterSettings

SUPPORT_SUFFIXES = (".tfvars", ".tf.json")
NESTED_SUFFIXES = (".tf", ".tf.json", ".tfvars", ".hcl")
TOOL_STATE_DIR = ".terraform"


def is_lock_file(name: str, lock_file_name: str = ".terraform.lock.hcl") -> bool:
    return Path(name).name == lock_file_name


def is_terraform_file(name: str) -> bool:
    return name.endswith(".tf")


def is_terragrunt_file(name: str, lock_file_name: str = ".terraform.lock.hcl") -> bool:
    """Any `.hcl` file other than the lock file, e.g. `terragrunt.hcl`."""
    return name.endswith(".hcl") and not is_lock_file(name, lock_file_name)


def project_path(root: Path, name: str) -> Path:
    """Resolve a project file name under root.

    Raises:
        ValueError: If name is absolute or points outside root.
    """
    base = root.resolve()
    path = (base / name).resolve()
    if Path(name).is_absolute() or not path.is_relative_to(base):
        raise ValueError(f"File {name!r} is outside {root}")
    return path


def discover_files(root: Path, settings: UpdaterSettings | None = None) -> ProjectFiles:
    """Read and classify the files under root.

    Files are sorted by path so the update order is deterministic. Anything
    under a `.terraform` directory is tool state and is skipped.
    """
    settings = settings or UpdaterSettings()

    terraform: list[DependencyFile] = []
    terragrunt: list[DependencyFile] = []
    support: list[DependencyFile] = []
    lock: DependencyFile | None = None

    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if TOOL_STATE_DIR in relative.parts or not path.is_file():
            continue
        name = relative.as_posix()

        if len(relative.parts) > 1:
            if name.endswith(NESTED_SUFFIXES) and not is_lock_file(
                name, settings.lock_file_name
            ):
                support.append(DependencyFile(name=name, content=path.read_text()))
        elif is_lock_file(name, settings.lock_file_name):
            lock = DependencyFile(name=name, content=path.read_text())
        elif is_terraform_file(name):
            terraform.append(DependencyFile(name=name, content=path.read_text()))
        elif is_terragrunt_file(name, settings.lock_file_name):
            terragrunt.append(DependencyFile(name=name, content=path.read_text()))
        elif name.endswith(SUPPORT_SUFFIXES):
            support.append(DependencyFile(name=name, content=path.read_text()))

    return ProjectFiles(
        terraform_files=terraform,
        terragrunt_files=terragrunt,
        lock_file=lock,
        support_files=support,
    )


def write_files(root: Path, files: list[DependencyFile]) -> None:
    """Write updated files back under root.

    Raises:
        ValueError: If a file name points outside root.
    """
    for file in files:
        project_path(root, file.name).write_text(file.content)
