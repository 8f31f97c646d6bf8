"""Unit tests for utility functions (contract_scaffold.utils).

Tests cover:
- run_command (success, failure, timeout, capture=False)
- is_windows / parse_java_version / detect_java_version
- capitalize_first_letter / package_to_path
- Rich output helpers and ProgressReporter
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from contract_scaffold.utils import (
    ProgressReporter,
    capitalize_first_letter,
    detect_java_version,
    is_windows,
    package_to_path,
    parse_java_version,
    print_error,
    print_info,
    print_success,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command([sys.executable, "-c", "print('hello')"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, _ = await run_command([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert returncode == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_timeout(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_program(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["definitely-not-a-real-program-xyz"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_is_merged(self):
        _, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['CS_TEST_VAR'])"],
            env={"CS_TEST_VAR": "value"},
        )
        assert stdout == "value"


# ---------------------------------------------------------------------------
# Platform and runtime detection
# ---------------------------------------------------------------------------


class TestPlatform:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("system", "expected"),
        [("Windows", True), ("Linux", False), ("Darwin", False)],
    )
    def test_is_windows(self, system, expected):
        with patch("contract_scaffold.utils.platform.system", return_value=system):
            assert is_windows() is expected


class TestJavaVersion:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ('java version "1.8.0_292"', 8),
            ('openjdk version "11.0.21" 2023-10-17', 11),
            ('openjdk version "17.0.2" 2022-01-18', 17),
            ('java version "21"', 21),
            ("something unrelated", None),
            ("", None),
        ],
    )
    def test_parse_java_version(self, output, expected):
        assert parse_java_version(output) == expected

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_detect_reads_stderr(self):
        stderr = 'openjdk version "17.0.2" 2022-01-18\nOpenJDK Runtime Environment'
        with patch(
            "contract_scaffold.utils.run_command", AsyncMock(return_value=(0, "", stderr))
        ):
            assert await detect_java_version() == 17

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_detect_java_missing(self):
        with patch(
            "contract_scaffold.utils.run_command", AsyncMock(side_effect=FileNotFoundError)
        ):
            assert await detect_java_version() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_detect_nonzero_exit(self):
        with patch(
            "contract_scaffold.utils.run_command", AsyncMock(return_value=(1, "", "error"))
        ):
            assert await detect_java_version() is None


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


class TestNameHelpers:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("myproj", "Myproj"),
            ("MyProj", "MyProj"),
            ("myProj", "MyProj"),
            ("a", "A"),
            ("", ""),
            ("demo.java", "Demo.java"),
        ],
    )
    def test_capitalize_first_letter(self, name, expected):
        assert capitalize_first_letter(name) == expected

    @pytest.mark.unit
    def test_package_to_path(self):
        assert package_to_path("com.example.app") == Path("com", "example", "app")

    @pytest.mark.unit
    def test_package_to_path_single(self):
        assert package_to_path("demo") == Path("demo")


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_helpers(self):
        with patch("contract_scaffold.utils.console") as mock_console:
            print_success("ok")
            print_error("bad")
            print_warning("careful")
            print_info("fyi")
        assert mock_console.print.call_count == 4
        assert "ok" in mock_console.print.call_args_list[0].args[0]


class TestProgressReporter:
    @pytest.mark.unit
    def test_disabled_does_nothing(self):
        with patch("contract_scaffold.utils.create_progress") as factory:
            reporter = ProgressReporter(enabled=False)
            reporter.processing("Creating Demo")
            reporter.stop()
        factory.assert_not_called()
        assert reporter._progress is None

    @pytest.mark.unit
    def test_start_relabel_and_stop(self):
        progress = MagicMock()
        progress.add_task.return_value = 1
        with patch("contract_scaffold.utils.create_progress", return_value=progress):
            reporter = ProgressReporter()
            reporter.processing("Creating Demo")
            reporter.processing("Building Demo")
            assert reporter._progress is not None
            reporter.stop()

        progress.start.assert_called_once()
        progress.update.assert_called_once_with(1, description="Building Demo")
        progress.stop.assert_called_once()
        assert reporter._progress is None

    @pytest.mark.unit
    def test_stop_without_start(self):
        ProgressReporter().stop()

    @pytest.mark.unit
    def test_display_errors_only_warn(self):
        progress = MagicMock()
        progress.start.side_effect = RuntimeError("no terminal")
        with patch("contract_scaffold.utils.create_progress", return_value=progress), patch(
            "contract_scaffold.utils.print_warning"
        ) as warn:
            reporter = ProgressReporter()
            reporter.processing("Creating Demo")
        warn.assert_called_once()
        assert reporter._progress is None
