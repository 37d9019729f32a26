"""Errors raised while updating dependency files.

Every error is fatal to the whole update: nothing is retried and no partial
result is returned. Each one carries the dependency, file and declaration
kind it concerns, when known, so that a pattern mismatch can be diagnosed
from the message alone.
"""

from __future__ import annotations


class UpdaterError(RuntimeError):
    """Base class for all tf-updater errors."""

    def __init__(
        self,
        message: str,
        *,
        dependency: str | None = None,
        file_name: str | None = None,
        kind: str | None = None,
    ) -> None:
        self.dependency = dependency
        self.file_name = file_name
        self.kind = kind
        context = ", ".join(
            f"{label}={value}"
            for label, value in (
                ("dependency", dependency),
                ("file", file_name),
                ("kind", kind),
            )
            if value is not None
        )
        super().__init__(f"{message} ({context})" if context else message)


class MissingConfigurationError(UpdaterError):
    """No terraform or terragrunt file was supplied."""


class UnsupportedSourceKindError(UpdaterError):
    """A requirement's source kind is not git, registry, provider or lockfile."""


class RequirementFileMismatchError(UpdaterError):
    """Paired old and new requirements refer to different files."""


class NoChangeError(UpdaterError):
    """A file that should have been updated came out unchanged."""


class LockToolFailureError(UpdaterError):
    """The lock tool failed or did not produce the expected provider entry."""


class NoFilesChangedError(UpdaterError):
    """The update as a whole changed no file."""
