"""Lock file regeneration.

Lock entries carry provider checksums that can't be computed by hand, so
the only way to produce a new entry is to let the real tool do it. The tool
runs against a throwaway copy of the project whose lock file is missing the
entry being updated. The freshly written entry is then read back, so the
caller can splice it into the original lock file without touching any
other provider's entry.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from .errors import LockToolFailureError
from .files import project_path
from .models import DependencyFile, SourceKind, UpdaterSettings
from .patcher import splice_region
from .regions import locate_declaration
from .shell import run, step


def is_tool_state(name: str, lock_file_name: str) -> bool:
    """Whether a file is lock or tool state that must not reach the scratch copy.

    Matches the lock file itself and anything under a `.terraform` directory.
    """
    return ".terraform" in name or Path(name).name == lock_file_name


def materialize_files(
    files: list[DependencyFile], root: Path, lock_file_name: str
) -> None:
    """Write project files under root, skipping lock and tool state files.

    Raises:
        ValueError: If a file name points outside root.
    """
    for file in files:
        if is_tool_state(file.name, lock_file_name):
            continue
        path = project_path(root, file.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(file.content)


def lock_command(provider_source: str, settings: UpdaterSettings) -> list[str]:
    """Build the `providers lock` command line for one provider."""
    platforms = [f"-platform={platform}" for platform in settings.platforms]
    return [settings.lock_tool, "providers", "lock", *platforms, provider_source]


def run_lock_tool(
    provider_source: str, cwd: Path, settings: UpdaterSettings, *, file_name: str
) -> None:
    """Run the lock tool for one provider inside cwd.

    Raises:
        LockToolFailureError: If the tool can't be started or exits non-zero.
    """
    args = lock_command(provider_source, settings)
    try:
        result = run(*args, cwd=cwd, check=False)
    except OSError as exc:
        raise LockToolFailureError(
            f"Could not run {settings.lock_tool}: {exc}",
            dependency=provider_source,
            file_name=file_name,
            kind=SourceKind.LOCKFILE.value,
        ) from exc
    if result.returncode != 0:
        raise LockToolFailureError(
            f"`{' '.join(args)}` exited with status {result.returncode}",
            dependency=provider_source,
            file_name=file_name,
            kind=SourceKind.LOCKFILE.value,
        )


def regenerate_lock_entry(
    project_files: list[DependencyFile],
    lock_file: DependencyFile,
    provider_source: str,
    settings: UpdaterSettings | None = None,
) -> str:
    """Produce a freshly resolved lock entry for one provider.

    Args:
        project_files: Every file of the project, copied into the scratch
                       directory so the tool sees the full configuration.
        lock_file: The current lock file.
        provider_source: Provider address, e.g. "registry.terraform.io/hashicorp/aws".
        settings: Lock tool settings. Defaults to plain `terraform`.

    Returns:
        The text of the regenerated `provider "..." { ... }` entry.

    Raises:
        LockToolFailureError: If the tool fails or its output has no entry
            for provider_source.
        ValueError: If a file name points outside the scratch directory.
    """
    settings = settings or UpdaterSettings()
    step(f"Locking {provider_source} with {settings.lock_tool}")

    existing = locate_declaration(
        lock_file.content, provider_source, SourceKind.LOCKFILE
    )
    body = (
        lock_file.content
        if existing is None
        else splice_region(lock_file.content, existing, "")
    )

    with tempfile.TemporaryDirectory(prefix="tf-updater-") as tmp:
        scope = Path(tmp)
        materialize_files(project_files, scope, settings.lock_file_name)

        lock_path = project_path(scope, lock_file.name)
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock_path.write_text(body)

        run_lock_tool(
            provider_source, lock_path.parent, settings, file_name=lock_file.name
        )

        try:
            regenerated = lock_path.read_text()
        except FileNotFoundError as exc:
            raise LockToolFailureError(
                f"{settings.lock_tool} did not write {lock_file.name}",
                dependency=provider_source,
                file_name=lock_file.name,
                kind=SourceKind.LOCKFILE.value,
            ) from exc

    entry = locate_declaration(regenerated, provider_source, SourceKind.LOCKFILE)
    if entry is None:
        raise LockToolFailureError(
            f"{settings.lock_tool} produced no entry for {provider_source}",
            dependency=provider_source,
            file_name=lock_file.name,
            kind=SourceKind.LOCKFILE.value,
        )
    print(f"  {lock_file.name}: regenerated {provider_source}")
    return entry.text(regenerated)
