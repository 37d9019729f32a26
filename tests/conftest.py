"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from tf_updater.models import Dependency, DependencyFile, Requirement, SourceSpec

MAIN_TF = """\
terraform {
  required_providers {
    aws = {
      source  = "hashicorp/aws"
      version = "~> 3.0"
    }
    random = {
      source  = "hashicorp/random"
      version = "~> 3.0"
    }
  }
}

module "consul" {
  source  = "hashicorp/consul/aws"
  version = "0.1.0"
}

module "vpc" {
  source = "git::https://github.com/org/terraform-vpc?ref=v1.0.0"

  tags = {
    release = "v1.0.0"
  }
}
"""

TERRAGRUNT_HCL = """\
include {
  path = find_in_parent_folders()
}

terraform {
  source = "git::https://github.com/org/modules.git//vpc?ref=v0.1.0"
}

inputs = {
  name = "v0.1.0"
}
"""

LOCK_FILE = """\
# This file is maintained automatically by "terraform init".
# Manual edits may be lost in future updates.

provider "registry.terraform.io/hashicorp/aws" {
  version     = "3.74.0"
  constraints = "~> 3.0"
  hashes = [
    "h1:aaaa=",
    "zh:1111",
  ]
}

provider "registry.terraform.io/hashicorp/random" {
  version     = "3.1.0"
  constraints = "~> 3.0"
  hashes = [
    "h1:bbbb=",
  ]
}
"""

NEW_AWS_ENTRY = """\
provider "registry.terraform.io/hashicorp/aws" {
  version     = "4.0.0"
  constraints = "~> 4.0"
  hashes = [
    "h1:cccc=",
    "zh:2222",
  ]
}"""


@pytest.fixture
def main_tf() -> DependencyFile:
    return DependencyFile(name="main.tf", content=MAIN_TF)


@pytest.fixture
def terragrunt_hcl() -> DependencyFile:
    return DependencyFile(name="terragrunt.hcl", content=TERRAGRUNT_HCL)


@pytest.fixture
def lock_file() -> DependencyFile:
    return DependencyFile(name=".terraform.lock.hcl", content=LOCK_FILE)


@pytest.fixture
def new_aws_entry() -> str:
    return NEW_AWS_ENTRY


@pytest.fixture
def provider_dependency() -> Dependency:
    """hashicorp/aws going from ~> 3.0 to ~> 4.0, in main.tf and the lock file."""
    lock_source = SourceSpec(
        type="lockfile",
        registry_hostname="registry.terraform.io",
        module_identifier="hashicorp/aws",
    )
    return Dependency(
        name="hashicorp/aws",
        version="4.0.0",
        previous_version="3.74.0",
        requirements=[
            Requirement(
                file="main.tf", requirement="~> 4.0", source=SourceSpec(type="provider")
            ),
            Requirement(
                file=".terraform.lock.hcl", requirement="4.0.0", source=lock_source
            ),
        ],
        previous_requirements=[
            Requirement(
                file="main.tf", requirement="~> 3.0", source=SourceSpec(type="provider")
            ),
            Requirement(
                file=".terraform.lock.hcl", requirement="3.74.0", source=lock_source
            ),
        ],
    )


@pytest.fixture
def fake_lock_tool() -> Callable[..., Callable[..., subprocess.CompletedProcess]]:
    """Build a stand-in for `shell.run` that behaves like `providers lock`.

    The fake appends `entry` to the lock file in its working directory and
    records what it saw in `calls`.
    """

    def factory(
        entry: str,
        *,
        calls: list[dict] | None = None,
        lock_file_name: str = ".terraform.lock.hcl",
        returncode: int = 0,
    ) -> Callable[..., subprocess.CompletedProcess]:
        def run(*args: str, cwd: Path, check: bool) -> subprocess.CompletedProcess:
            cwd = Path(cwd)
            lock_path = cwd / lock_file_name
            if calls is not None:
                calls.append(
                    {
                        "args": args,
                        "cwd": cwd,
                        "files": sorted(
                            str(p.relative_to(cwd)) for p in cwd.rglob("*") if p.is_file()
                        ),
                        "main_tf": (
                            (cwd / "main.tf").read_text()
                            if (cwd / "main.tf").exists()
                            else None
                        ),
                        "lock_before": lock_path.read_text(),
                    }
                )
            if returncode == 0:
                lock_path.write_text(lock_path.read_text().rstrip("\n") + "\n\n" + entry + "\n")
            return subprocess.CompletedProcess(args, returncode)

        return run

    return factory
