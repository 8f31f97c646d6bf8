"""Main scaffolding orchestrator.

Takes a ``ProjectOptions`` and generates a Gradle project that deploys
Solidity contracts with web3j, then builds it with the generated Gradle
wrapper.  The steps run strictly one after another:

1. create the directory layout,
2. generate the wallet (optional),
3. select templates, locate the wrapper jar and write every project file,
4. show progress,
5. build with ``gradlew build`` (non-zero exit aborts with ``BuildError``),
6. generate unit tests from the build's contract wrappers (optional),
7. package a fat jar with ``gradlew shadowJar`` (optional),
8. stop the progress display.

A failure at any step propagates to the caller.  Directories and files that
were already written stay on disk; there is no rollback.  Running two
generations against the same directory at once is not supported.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path

from contract_scaffold.config import Config, GenerationMode, ProjectOptions
from contract_scaffold.utils import ProgressReporter, detect_java_version, print_warning

from .build_runner import build_project, create_fat_jar
from .provider import (
    MODERN_RUNTIME_VERSION,
    TemplateOptions,
    TemplateProvider,
    select_templates,
)
from .structure import ProjectStructure
from .templates import TemplateRenderer
from .unit_test_gen import UnitTestGenerator
from .wallet import ProjectWallet, generate_wallet
from .wrapper_jar import resolve_wrapper_jar


class ProjectGenerator:
    """Generates and builds one project.

    Each instance owns its structure, wallet and template provider; create a
    new generator per run.
    """

    def __init__(
        self,
        options: ProjectOptions,
        config: Config | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.options = options
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.template_dir)
        self.structure = ProjectStructure(
            root_directory=options.output_dir,
            project_name=options.project_name,
            package_name=options.package_name,
        )
        self.unit_test_gen = UnitTestGenerator(self.renderer)
        self.progress = progress or ProgressReporter(enabled=self.config.show_progress)
        self.wallet: ProjectWallet | None = None

    # -- Public API --------------------------------------------------------

    async def generate(self) -> Path:
        """Create, write and build the project.

        Returns:
            Path to the generated project root.

        Raises:
            BuildError: If a Gradle invocation exits non-zero.
            WalletGenerationError: If the wallet cannot be created.
            TemplateResolutionError: If a required template slot is empty.
            WrapperJarError: If the Gradle wrapper jar cannot be downloaded.
            OSError: On any filesystem failure.
        """
        project_root = self.structure.project_root
        try:
            await asyncio.to_thread(self.structure.create_top_level_directories)

            if self.options.with_wallet:
                self.wallet = await asyncio.to_thread(
                    generate_wallet, self.structure, self.config.wallet_kdf
                )

            provider = await self.resolve_template_provider()
            await provider.generate_files(self.structure)

            self.progress.processing(f"Creating {self.options.project_name}")
            await build_project(project_root)

            if self.options.with_tests:
                await self.generate_tests()

            if self.options.with_fat_jar:
                await create_fat_jar(project_root)
        finally:
            self.progress.stop()

        return project_root

    async def resolve_template_provider(self) -> TemplateProvider:
        """Select the templates for this run and bind its placeholder values."""
        template_options = TemplateOptions(
            mode=self.options.mode,
            sample_code=self.options.with_sample_code,
            runtime_version=await self.runtime_version(),
            wallet=self.wallet,
            import_path=(
                self.options.solidity_import_path
                if self.options.mode is GenerationMode.IMPORT
                else None
            ),
        )
        selection = select_templates(template_options)
        wrapper_jar = await resolve_wrapper_jar(self.renderer, self.config)
        selection = replace(selection, wrapper_jar=str(wrapper_jar))
        return TemplateProvider.from_selection(
            selection,
            self.renderer,
            project_name=self.options.project_name,
            package_name=self.options.package_name,
            wallet=self.wallet,
        )

    async def runtime_version(self) -> int:
        """Return the Java major version used to pick the build descriptor."""
        if self.config.java_version is not None:
            return self.config.java_version
        detected = await detect_java_version()
        if detected is None:
            print_warning(
                f"Could not detect the Java version; assuming Java {MODERN_RUNTIME_VERSION}+."
            )
            return MODERN_RUNTIME_VERSION
        return detected

    async def generate_tests(self) -> list[Path]:
        """Write JUnit tests for the contract wrappers the build produced."""
        return await self.unit_test_gen.generate(
            self.structure.generated_sources_path,
            self.structure.test_sources_root,
        )
