"""Shared utility functions for contract-scaffold.

Provides async command execution, platform and runtime detection, name
helpers, and Rich-based console output used by the scaffolder and the CLI.
"""

from __future__ import annotations

import asyncio
import os
import platform
import re
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 30,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a short-lived command asynchronously.

    Args:
        cmd: Argument list of the program to run.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        FileNotFoundError: If the program does not exist.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Platform / runtime detection
# ---------------------------------------------------------------------------


def is_windows() -> bool:
    """Return ``True`` when running on Windows."""
    return platform.system().lower().startswith("windows")


_JAVA_VERSION_RE = re.compile(r'version "(\d+)(?:\.(\d+))?[^"]*"')


def parse_java_version(output: str) -> int | None:
    """Extract the major Java version from ``java -version`` output.

    Examples::

        'openjdk version "1.8.0_292"' -> 8
        'openjdk version "17.0.2" 2022-01-18' -> 17
        'java version "11"' -> 11
    """
    match = _JAVA_VERSION_RE.search(output)
    if not match:
        return None
    major = int(match.group(1))
    if major == 1 and match.group(2):
        return int(match.group(2))
    return major


async def detect_java_version() -> int | None:
    """Return the major version of the ``java`` found on ``PATH``.

    ``java -version`` prints to stderr, so both streams are searched.
    Returns ``None`` when java is not installed or its output is not
    recognised.
    """
    try:
        returncode, stdout, stderr = await run_command(["java", "-version"])
    except FileNotFoundError:
        return None
    if returncode != 0:
        return None
    return parse_java_version(f"{stderr}\n{stdout}")


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def capitalize_first_letter(name: str) -> str:
    """Upper-case the first character and leave the rest untouched.

    Unlike ``str.capitalize`` this keeps inner capitals, so ``"myProj"``
    becomes ``"MyProj"`` rather than ``"Myproj"``.
    """
    if not name:
        return name
    return name[0].upper() + name[1:]


def package_to_path(package_name: str) -> Path:
    """Convert a dotted package identifier to a relative directory path."""
    return Path(*[part for part in package_name.split(".") if part])


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(f"[cyan]{message}[/cyan]")


def create_progress() -> Progress:
    """Create a Rich spinner configured for scaffolding tasks.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


class ProgressReporter:
    """Best-effort spinner shown while a project is generated and built.

    Display errors never reach the caller; the pipeline must not fail
    because the terminal could not be redrawn.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._progress: Progress | None = None
        self._task_id: int | None = None

    def processing(self, message: str) -> None:
        """Start the spinner, or relabel it when already running."""
        if not self.enabled:
            return
        try:
            if self._progress is None:
                self._progress = create_progress()
                self._progress.start()
                self._task_id = self._progress.add_task(message, total=None)
            elif self._task_id is not None:
                self._progress.update(self._task_id, description=message)
        except Exception as exc:  # noqa: BLE001 - display only
            self._progress = None
            self._task_id = None
            print_warning(f"Progress display unavailable: {exc}")

    def stop(self) -> None:
        """Stop the spinner if it is running."""
        progress, self._progress, self._task_id = self._progress, None, None
        if progress is None:
            return
        try:
            progress.stop()
        except Exception as exc:  # noqa: BLE001 - display only
            print_warning(f"Progress display unavailable: {exc}")
