"""contract-scaffold configuration.

Typed configuration for a generation run and for the CLI.  All settings use
Pydantic v2 models so they are validated at construction time and can be
serialised to/from JSON or environment variables without boiler-plate.

Three models live here:

* ``ProjectOptions`` -- what to generate (one per run, frozen).
* ``Config`` -- how to generate it (template store, runtime overrides).
* ``CliConfig`` -- persisted CLI settings.  Setters never write to disk;
  callers persist explicitly with :meth:`CliConfig.save`.
"""

from __future__ import annotations

import os
import re
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from contract_scaffold.errors import ConfigError

# Java reserved words cannot be used as class or package names.
JAVA_KEYWORDS: frozenset[str] = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
    "class", "const", "continue", "default", "do", "double", "else", "enum",
    "extends", "final", "finally", "float", "for", "goto", "if", "implements",
    "import", "instanceof", "int", "interface", "long", "native", "new",
    "package", "private", "protected", "public", "return", "short", "static",
    "strictfp", "super", "switch", "synchronized", "this", "throw", "throws",
    "transient", "try", "void", "volatile", "while", "true", "false", "null",
})

_PROJECT_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_PACKAGE_SEGMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_CONFIG_PATH = Path.home() / ".contract-scaffold" / "config.json"
DEFAULT_WRAPPER_CACHE_DIR = Path.home() / ".contract-scaffold" / "wrapper"
DEFAULT_WRAPPER_JAR_URL = (
    "https://raw.githubusercontent.com/gradle/gradle/v7.6.4/gradle/wrapper/gradle-wrapper.jar"
)


class GenerationMode(str, Enum):
    """Whether a project is created from scratch or wraps existing contracts."""

    NEW = "new"
    IMPORT = "import"


# ---------------------------------------------------------------------------
# Per-run options
# ---------------------------------------------------------------------------


class ProjectOptions(BaseModel):
    """Everything that describes one project to generate."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Root folder and main class name")
    package_name: str = Field(..., description="Dotted Java package, e.g. com.example")
    output_dir: Path = Field(default=Path("."), description="Parent of the project root")
    mode: GenerationMode = Field(default=GenerationMode.NEW)
    with_sample_code: bool = Field(
        default=True, description="Populated HelloWorld main class (new mode only)"
    )
    with_wallet: bool = Field(default=False)
    with_tests: bool = Field(default=False)
    with_fat_jar: bool = Field(default=False)
    solidity_import_path: Path | None = Field(
        default=None, description="Existing contract folder (import mode only)"
    )

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        if not _PROJECT_NAME_RE.match(value):
            raise ValueError(
                f"Invalid project name '{value}': must start with a letter and "
                "contain only letters, digits and underscores"
            )
        if value in JAVA_KEYWORDS:
            raise ValueError(f"Invalid project name '{value}': reserved Java keyword")
        return value

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        segments = value.split(".")
        for segment in segments:
            if not _PACKAGE_SEGMENT_RE.match(segment):
                raise ValueError(
                    f"Invalid package name '{value}': '{segment}' is not a valid identifier"
                )
            if segment in JAVA_KEYWORDS:
                raise ValueError(
                    f"Invalid package name '{value}': '{segment}' is a reserved Java keyword"
                )
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_sample_code(cls, data: Any) -> Any:
        # The sample main class deploys HelloWorld, which import mode never writes.
        if isinstance(data, dict) and "with_sample_code" not in data:
            if data.get("mode") == GenerationMode.IMPORT:
                return {**data, "with_sample_code": False}
        return data

    @model_validator(mode="after")
    def _check_import_path(self) -> "ProjectOptions":
        if self.mode is not GenerationMode.IMPORT:
            return self
        if self.solidity_import_path is None:
            raise ValueError("Import mode requires a solidity_import_path")
        if not self.solidity_import_path.is_dir():
            raise ValueError(
                f"Solidity import path is not a directory: {self.solidity_import_path}"
            )
        if self.with_sample_code:
            raise ValueError(
                "Sample code needs the HelloWorld contract and is not available in import mode"
            )
        source = self.solidity_import_path.resolve()
        project_root = (self.output_dir / self.project_name).resolve()
        if project_root.is_relative_to(source):
            raise ValueError(
                f"Project directory {project_root} lies inside the imported folder {source}"
            )
        return self


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------


class Config(BaseModel):
    """Runtime settings for the scaffolder.

    Instances are typically created once by the CLI entry point with
    :meth:`from_env` and then passed to ``ProjectGenerator``.
    """

    template_dir: Path | None = Field(
        default=None, description="Override for the packaged template store"
    )
    java_version: int | None = Field(
        default=None, ge=1, description="Skip `java -version` detection and use this"
    )
    wrapper_jar: Path | None = Field(
        default=None, description="Gradle wrapper jar copied instead of the packaged one"
    )
    wrapper_jar_url: str = Field(
        default=DEFAULT_WRAPPER_JAR_URL,
        description="Download location used when no wrapper jar is available locally",
    )
    wrapper_jar_sha256: str | None = Field(
        default=None, description="Expected digest of a downloaded wrapper jar"
    )
    wrapper_cache_dir: Path = Field(default=DEFAULT_WRAPPER_CACHE_DIR)
    wallet_kdf: Literal["scrypt", "pbkdf2"] = Field(default="scrypt")
    config_path: Path = Field(default=DEFAULT_CONFIG_PATH)
    update_url: str | None = Field(
        default=None, description="Releases endpoint polled for newer versions"
    )
    show_progress: bool = Field(default=True)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CS_TEMPLATE_DIR, CS_JAVA_VERSION, CS_WRAPPER_JAR, CS_WRAPPER_JAR_URL,
            CS_WRAPPER_JAR_SHA256, CS_WRAPPER_CACHE_DIR, CS_WALLET_KDF,
            CS_CONFIG_PATH, CS_UPDATE_URL.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CS_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["CS_TEMPLATE_DIR"])
        if os.environ.get("CS_JAVA_VERSION"):
            kwargs["java_version"] = int(os.environ["CS_JAVA_VERSION"])
        if os.environ.get("CS_WRAPPER_JAR"):
            kwargs["wrapper_jar"] = Path(os.environ["CS_WRAPPER_JAR"])
        if os.environ.get("CS_WRAPPER_JAR_URL"):
            kwargs["wrapper_jar_url"] = os.environ["CS_WRAPPER_JAR_URL"]
        if os.environ.get("CS_WRAPPER_JAR_SHA256"):
            kwargs["wrapper_jar_sha256"] = os.environ["CS_WRAPPER_JAR_SHA256"]
        if os.environ.get("CS_WRAPPER_CACHE_DIR"):
            kwargs["wrapper_cache_dir"] = Path(os.environ["CS_WRAPPER_CACHE_DIR"])
        if os.environ.get("CS_WALLET_KDF"):
            kwargs["wallet_kdf"] = os.environ["CS_WALLET_KDF"]
        if os.environ.get("CS_CONFIG_PATH"):
            kwargs["config_path"] = Path(os.environ["CS_CONFIG_PATH"])
        if os.environ.get("CS_UPDATE_URL"):
            kwargs["update_url"] = os.environ["CS_UPDATE_URL"]
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Persisted CLI settings
# ---------------------------------------------------------------------------


class CliConfig(BaseModel):
    """Settings remembered between CLI invocations."""

    client_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    latest_version: str | None = Field(default=None)
    update_prompt: str | None = Field(default=None)
    telemetry_disabled: bool = Field(default=False)

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``DEFAULT_CONFIG_PATH``.

        Returns:
            The path where the file was written.
        """
        target = path or DEFAULT_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "CliConfig":
        """Load a previously-saved configuration.

        Raises:
            ConfigError: If the file is not valid JSON or fails validation.
        """
        raw = Path(path).read_text(encoding="utf-8")
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid CLI config at {path}: {exc}") from exc

    @classmethod
    def load_or_create(cls, path: Path) -> "CliConfig":
        """Load the config at *path*, creating and saving a fresh one if absent."""
        if Path(path).exists():
            return cls.load(path)
        config = cls()
        config.save(path)
        return config
