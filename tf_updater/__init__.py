"""Update a single dependency in Terraform and terragrunt files, in place."""

from tf_updater.updater import updated_dependency_files

__all__ = ["updated_dependency_files"]
