"""Exception hierarchy for contract-scaffold.

Filesystem failures are not wrapped: they surface as the builtin ``OSError``
family so callers see the real path and errno.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every fatal project-generation failure."""


class TemplateResolutionError(ScaffoldError):
    """Raised when a required template slot has no resource bound."""

    def __init__(self, slot: str) -> None:
        self.slot = slot
        super().__init__(f"No template bound for required slot '{slot}'.")


class WalletGenerationError(ScaffoldError):
    """Raised when the credential library cannot produce a wallet."""


class BuildError(ScaffoldError):
    """Raised when the external build tool exits with a non-zero code."""

    MESSAGE = "Could not build project."

    def __init__(self, command: list[str], exit_code: int, cwd: Path | None = None) -> None:
        self.command = command
        self.exit_code = exit_code
        self.cwd = cwd
        super().__init__(self.MESSAGE)


class WrapperJarError(ScaffoldError):
    """Raised when the Gradle wrapper jar cannot be obtained or fails verification."""


class ConfigError(ScaffoldError):
    """Raised when the persisted CLI configuration cannot be read."""
