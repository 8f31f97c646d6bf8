"""Template selection and placeholder rendering.

Selection is a pure function, :func:`select_templates`, from a
``TemplateOptions`` record to a ``TemplateSelection`` naming one resource per
slot.  A ``TemplateProvider`` binds a selection to a template store and the
placeholder values for one generation run, then renders and writes every
project file.

Placeholder substitution is purely textual.  Every ``load_*`` call replaces
all four tokens, using an empty string for unbound values, so no raw token
survives in the output whatever the template contains.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, fields
from pathlib import Path

from contract_scaffold.config import GenerationMode
from contract_scaffold.errors import TemplateResolutionError
from contract_scaffold.utils import capitalize_first_letter

from .structure import ProjectStructure
from .templates import TemplateRenderer
from .wallet import ProjectWallet
from .writer import copy_resource_file, import_solidity_project, write_resource_file

# ---------------------------------------------------------------------------
# Placeholder tokens and resource names
# ---------------------------------------------------------------------------

PROJECT_NAME_TOKEN = "<project_name>"
PACKAGE_NAME_TOKEN = "<package_name>"
WALLET_NAME_TOKEN = "<wallet_name>"
PASSWORD_FILE_NAME_TOKEN = "<password_file_name>"

# Java 11 is the first runtime the modern Gradle descriptors support.
MODERN_RUNTIME_VERSION = 11

BUILD_DESCRIPTORS: dict[tuple[GenerationMode, bool], str] = {
    (GenerationMode.NEW, False): "build.gradle.template",
    (GenerationMode.NEW, True): "build.gradleJava11.template",
    (GenerationMode.IMPORT, False): "build.gradleImport.template",
    (GenerationMode.IMPORT, True): "build.gradleImportJava11.template",
}

SAMPLE_MAIN_CLASS = "Template.java"
EMPTY_MAIN_CLASS = "EmptyTemplate.java"
HELLO_WORLD_CONTRACT = "HelloWorld.sol"
GRADLE_SETTINGS = "settings.gradle.template"
WRAPPER_PROPERTIES = "gradlew-wrapper.properties.template"
GRADLEW_SCRIPT = "gradlew.template"
GRADLEW_BAT_SCRIPT = "gradlew.bat.template"
WRAPPER_JAR = "gradle-wrapper.jar"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateOptions:
    """The inputs that decide which template variants a project uses."""

    mode: GenerationMode
    sample_code: bool
    runtime_version: int
    wallet: ProjectWallet | None = None
    import_path: Path | None = None


@dataclass(frozen=True)
class TemplateSelection:
    """One resource name per template slot."""

    main_class: str
    gradle_build: str
    gradle_settings: str
    wrapper_properties: str
    gradlew_script: str
    gradlew_bat_script: str
    wrapper_jar: str
    solidity_contract: str | None = None
    solidity_import_path: Path | None = None


def select_templates(options: TemplateOptions) -> TemplateSelection:
    """Choose the template variant for every slot.

    * ``new`` uses the fresh HelloWorld contract, ``import`` binds the
      import folder instead.
    * Runtimes below Java 11 get the legacy build descriptor of the mode.
    * Sample code selects the populated main class, otherwise the empty one.
    """
    modern = options.runtime_version >= MODERN_RUNTIME_VERSION
    gradle_build = BUILD_DESCRIPTORS[(options.mode, modern)]

    solidity_contract: str | None = None
    import_path: Path | None = None
    if options.mode is GenerationMode.NEW:
        solidity_contract = HELLO_WORLD_CONTRACT
    else:
        import_path = options.import_path

    return TemplateSelection(
        main_class=SAMPLE_MAIN_CLASS if options.sample_code else EMPTY_MAIN_CLASS,
        gradle_build=gradle_build,
        gradle_settings=GRADLE_SETTINGS,
        wrapper_properties=WRAPPER_PROPERTIES,
        gradlew_script=GRADLEW_SCRIPT,
        gradlew_bat_script=GRADLEW_BAT_SCRIPT,
        wrapper_jar=WRAPPER_JAR,
        solidity_contract=solidity_contract,
        solidity_import_path=import_path,
    )


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

_REQUIRED_SLOTS = (
    "main_class",
    "gradle_build",
    "gradle_settings",
    "wrapper_properties",
    "gradlew_script",
    "gradlew_bat_script",
    "wrapper_jar",
)


@dataclass(frozen=True)
class TemplateProvider:
    """Selected templates plus the placeholder values of one project."""

    renderer: TemplateRenderer
    main_class: str
    gradle_build: str
    gradle_settings: str
    wrapper_properties: str
    gradlew_script: str
    gradlew_bat_script: str
    wrapper_jar: str
    solidity_contract: str | None = None
    solidity_import_path: Path | None = None
    project_name: str | None = None
    package_name: str | None = None
    wallet_name: str | None = None
    password_file_name: str | None = None

    def __post_init__(self) -> None:
        for slot in _REQUIRED_SLOTS:
            if not getattr(self, slot):
                raise TemplateResolutionError(slot)

    @classmethod
    def from_selection(
        cls,
        selection: TemplateSelection,
        renderer: TemplateRenderer,
        *,
        project_name: str | None = None,
        package_name: str | None = None,
        wallet: ProjectWallet | None = None,
    ) -> "TemplateProvider":
        """Bind *selection* to a store and the placeholder values of a run."""
        slots = {f.name: getattr(selection, f.name) for f in fields(selection)}
        return cls(
            renderer=renderer,
            project_name=project_name,
            package_name=package_name,
            wallet_name=wallet.wallet_name if wallet else None,
            password_file_name=wallet.password_file_name if wallet else None,
            **slots,
        )

    # -- Rendering ---------------------------------------------------------

    def _load(self, name: str, *, capitalize_project: bool = False) -> str:
        project = self.project_name or ""
        if capitalize_project:
            project = capitalize_first_letter(project)
        return (
            self.renderer.read_raw(name)
            .replace(PROJECT_NAME_TOKEN, project)
            .replace(PACKAGE_NAME_TOKEN, self.package_name or "")
            .replace(WALLET_NAME_TOKEN, self.wallet_name or "")
            .replace(PASSWORD_FILE_NAME_TOKEN, self.password_file_name or "")
        )

    def load_main_class(self) -> str:
        """Render the main source; the project name becomes a type name."""
        return self._load(self.main_class, capitalize_project=True)

    def load_gradle_build(self) -> str:
        return self._load(self.gradle_build)

    def load_gradle_settings(self) -> str:
        return self._load(self.gradle_settings)

    def load_wrapper_properties(self) -> str:
        return self._load(self.wrapper_properties)

    def load_gradlew_script(self) -> str:
        return self._load(self.gradlew_script)

    def load_gradlew_bat_script(self) -> str:
        return self._load(self.gradlew_bat_script)

    def load_solidity_contract(self) -> str:
        if self.solidity_contract is None:
            raise TemplateResolutionError("solidity_contract")
        return self._load(self.solidity_contract)

    @property
    def main_class_file_name(self) -> str:
        return capitalize_first_letter(f"{self.project_name or ''}.java")

    # -- Writing -----------------------------------------------------------

    async def generate_files(self, structure: ProjectStructure) -> list[Path]:
        """Render every template and write it into *structure*.

        Files are written one after another; the first failure aborts the
        rest and leaves what was already written on disk.

        Returns:
            Paths written, in write order.
        """
        root = structure.project_root
        written: list[Path] = []

        async def _write(content: str, file_name: str, directory: Path) -> None:
            written.append(
                await asyncio.to_thread(write_resource_file, content, file_name, directory)
            )

        await _write(self.load_main_class(), self.main_class_file_name, structure.main_path)
        await _write(self.load_gradle_build(), "build.gradle", root)
        await _write(self.load_gradle_settings(), "settings.gradle", root)

        if self.solidity_contract is not None:
            await _write(
                self.load_solidity_contract(), HELLO_WORLD_CONTRACT, structure.solidity_path
            )
        if self.solidity_import_path is not None:
            written.extend(
                await asyncio.to_thread(
                    import_solidity_project, self.solidity_import_path, structure.solidity_path
                )
            )

        await _write(
            self.load_wrapper_properties(), "gradle-wrapper.properties", structure.wrapper_path
        )
        await _write(self.load_gradlew_script(), "gradlew", root)
        await _write(self.load_gradlew_bat_script(), "gradlew.bat", root)

        jar_source = self.renderer.resource_path(self.wrapper_jar)
        written.append(
            await asyncio.to_thread(
                copy_resource_file, jar_source, structure.wrapper_path / "gradle-wrapper.jar"
            )
        )
        return written
