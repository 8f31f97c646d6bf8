"""External build-tool invocation.

``BuildInvocation`` turns an action (build, fat jar) and the detected
platform into the argument list for the Gradle wrapper.  ``run_build_tool``
runs it with the parent's stdout/stderr, waits without a timeout and raises
``BuildError`` on a non-zero exit.  Only the argument lists depend on the
platform.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from contract_scaffold.errors import BuildError
from contract_scaffold.utils import is_windows

from .writer import make_executable


class BuildAction(str, Enum):
    BUILD = "build"
    FAT_JAR = "shadowJar"


_POSIX_COMMANDS: dict[BuildAction, list[str]] = {
    BuildAction.BUILD: ["bash", "-c", "./gradlew build -q"],
    BuildAction.FAT_JAR: ["bash", "./gradlew", "shadowJar", "-q"],
}

_WINDOWS_COMMANDS: dict[BuildAction, list[str]] = {
    BuildAction.BUILD: ["cmd.exe", "/c", "gradlew.bat build -q"],
    BuildAction.FAT_JAR: ["cmd.exe", "/c", "./gradlew.bat shadowJar", "-q"],
}


@dataclass(frozen=True)
class BuildInvocation:
    """A Gradle wrapper command resolved for one platform."""

    action: BuildAction
    windows: bool
    command: tuple[str, ...]

    @classmethod
    def for_platform(cls, action: BuildAction, windows: bool | None = None) -> "BuildInvocation":
        """Resolve *action* for *windows* (detected when ``None``)."""
        if windows is None:
            windows = is_windows()
        table = _WINDOWS_COMMANDS if windows else _POSIX_COMMANDS
        return cls(action=action, windows=windows, command=tuple(table[action]))

    @property
    def wrapper_script(self) -> str:
        return "gradlew.bat" if self.windows else "gradlew"


async def run_build_tool(command: list[str] | tuple[str, ...], cwd: Path) -> None:
    """Run *command* in *cwd* and wait for it to exit.

    Output goes straight to the terminal.  There is no timeout: a hung
    build blocks the caller.

    Raises:
        BuildError: If the process exits with a non-zero code.
    """
    argv = list(command)
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdout=None,
        stderr=None,
        cwd=str(cwd),
    )
    exit_code = await process.wait()
    if exit_code != 0:
        raise BuildError(argv, exit_code, cwd)


async def build_project(project_root: Path, windows: bool | None = None) -> None:
    """Mark the wrapper script executable and run ``gradlew build``."""
    invocation = BuildInvocation.for_platform(BuildAction.BUILD, windows)
    await asyncio.to_thread(make_executable, project_root / invocation.wrapper_script)
    await run_build_tool(invocation.command, project_root)


async def create_fat_jar(project_root: Path, windows: bool | None = None) -> None:
    """Run the ``shadowJar`` task to package a self-contained jar."""
    invocation = BuildInvocation.for_platform(BuildAction.FAT_JAR, windows)
    await run_build_tool(invocation.command, project_root)
