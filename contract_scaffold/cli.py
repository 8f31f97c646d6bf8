"""Command-line entry point.

Usage::

    contract-scaffold new -n Demo -p com.example
    contract-scaffold new -n Demo -p com.example -o ./projects --wallet --tests
    contract-scaffold import -n Token -p io.token -s ./contracts --fat-jar
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from contract_scaffold import __version__
from contract_scaffold.config import CliConfig, Config, GenerationMode, ProjectOptions
from contract_scaffold.errors import ConfigError, ScaffoldError
from contract_scaffold.scaffolder import ProjectGenerator
from contract_scaffold.updater import check_for_update
from contract_scaffold.utils import console, is_windows, print_error, print_success, print_warning


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-scaffold",
        description="Generate and build a web3j Gradle project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  contract-scaffold new -n Demo -p com.example\n"
            "  contract-scaffold import -n Token -p io.token -s ./contracts\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Create a project with a HelloWorld contract")
    _add_common_arguments(new)
    new.add_argument(
        "--no-sample-code",
        action="store_true",
        help="Generate an empty main class instead of the deployment sample",
    )

    imp = subparsers.add_parser("import", help="Create a project from existing contracts")
    _add_common_arguments(imp)
    imp.add_argument(
        "--solidity-path", "-s",
        required=True,
        help="Folder containing the Solidity contracts to import",
    )
    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--project-name", "-n", required=True, help="Project name")
    parser.add_argument("--package", "-p", required=True, help="Base Java package")
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Directory the project folder is created in (default: .)",
    )
    parser.add_argument("--wallet", action="store_true", help="Generate a project wallet")
    parser.add_argument(
        "--tests", action="store_true", help="Generate unit tests for the contracts"
    )
    parser.add_argument("--fat-jar", action="store_true", help="Package a self-contained jar")


def options_from_args(args: argparse.Namespace) -> ProjectOptions:
    """Translate parsed arguments into validated ``ProjectOptions``."""
    mode = GenerationMode(args.command)
    fields: dict[str, Any] = {
        "project_name": args.project_name,
        "package_name": args.package,
        "output_dir": Path(args.output),
        "mode": mode,
        "with_wallet": args.wallet,
        "with_tests": args.tests,
        "with_fat_jar": args.fat_jar,
    }
    if mode is GenerationMode.IMPORT:
        fields["solidity_import_path"] = Path(args.solidity_path)
    else:
        fields["with_sample_code"] = not args.no_sample_code
    return ProjectOptions(**fields)


def _load_cli_config(config: Config) -> CliConfig:
    try:
        return CliConfig.load_or_create(config.config_path)
    except (ConfigError, OSError) as exc:
        print_warning(f"Ignoring CLI settings: {exc}")
        return CliConfig()


async def _refresh_update_prompt(config: Config, cli_config: CliConfig) -> CliConfig:
    """Check for a newer release and persist the result; failures only warn."""
    if not config.update_url or cli_config.telemetry_disabled:
        return cli_config
    try:
        updated = await check_for_update(cli_config, __version__, config.update_url)
    except (httpx.HTTPError, ValueError) as exc:
        print_warning(f"Could not check for updates: {exc}")
        return cli_config
    try:
        updated.save(config.config_path)
    except OSError as exc:
        print_warning(f"Could not save CLI settings: {exc}")
    return updated


def _print_next_steps(project_root: Path) -> None:
    runner = "gradlew.bat" if is_windows() else "./gradlew"
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print(f"  cd {project_root}")
    console.print(f"  {runner} run")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``contract-scaffold`` / ``python -m contract_scaffold``."""
    args = build_parser().parse_args(argv)

    try:
        options = options_from_args(args)
        config = Config.from_env()
    except (ValidationError, ValueError) as exc:
        print_error(f"Invalid arguments: {exc}")
        sys.exit(1)

    cli_config = _load_cli_config(config)
    cli_config = asyncio.run(_refresh_update_prompt(config, cli_config))
    if cli_config.update_prompt:
        print_warning(cli_config.update_prompt)

    generator = ProjectGenerator(options, config)
    try:
        project_root = asyncio.run(generator.generate())
    except ScaffoldError as exc:
        print_error(str(exc))
        sys.exit(1)
    except OSError as exc:
        print_error(f"Could not write project files: {exc}")
        sys.exit(1)

    print_success(f"Project '{options.project_name}' created at {project_root}")
    _print_next_steps(project_root)


if __name__ == "__main__":
    main()
