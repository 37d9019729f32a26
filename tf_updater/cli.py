"""CLI entry point for tf-updater."""

from __future__ import annotations

import difflib
from pathlib import Path

import click

from tf_updater.config import load_job
from tf_updater.errors import UpdaterError
from tf_updater.files import discover_files, write_files
from tf_updater.models import SourceKind
from tf_updater.regions import locate_declaration
from tf_updater.updater import updated_dependency_files


def _unified_diff(name: str, before: str, after: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
        )
    )


@click.group()
@click.version_option(package_name="tf-updater")
def cli() -> None:
    """Update one dependency in Terraform files without touching anything else."""


@cli.command()
@click.argument("job", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dir",
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Terraform project directory.",
)
@click.option("--dry-run", is_flag=True, help="Don't write the updated files.")
@click.option("--diff", "show_diff", is_flag=True, help="Print a diff of each file.")
def update(job: Path, directory: Path, dry_run: bool, show_diff: bool) -> None:
    """Apply the dependency update described in JOB to a project."""
    try:
        update_job = load_job(job)
    except ValueError as exc:
        raise click.ClickException(f"Invalid job file {job}:\n{exc}") from exc

    files = discover_files(directory, update_job.settings)
    try:
        updated = updated_dependency_files(
            update_job.dependency, files, update_job.settings
        )
    except (UpdaterError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    if show_diff:
        originals = {file.name: file.content for file in files.candidates}
        for file in updated:
            click.echo(_unified_diff(file.name, originals[file.name], file.content))

    if dry_run:
        click.echo(f"Dry run: {len(updated)} file(s) would change")
        return

    try:
        write_files(directory, updated)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"✓ Updated {', '.join(file.name for file in updated)}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("name")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in SourceKind]),
    required=True,
    help="Declaration kind. For lockfile, NAME is the full provider source.",
)
@click.option("--terragrunt", is_flag=True, help="Treat FILE as a terragrunt file.")
def locate(file: Path, name: str, kind: str, terragrunt: bool) -> None:
    """Show the block in FILE that declares NAME."""
    content = file.read_text()
    region = locate_declaration(content, name, kind, terragrunt=terragrunt)
    if region is None:
        raise click.ClickException(f"No {kind} declaration found for {name} in {file}")

    line = content.count("\n", 0, region.start) + 1
    click.echo(f"{file}:{line} [{region.start}, {region.end})")
    click.echo(region.text(content))
