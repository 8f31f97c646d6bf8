"""On-disk layout of a generated project.

Every path is a pure function of ``(root_directory, project_name,
package_name)``; nothing touches the filesystem until one of the
``create_*`` methods is called.  Creation is idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from contract_scaffold.utils import package_to_path


@dataclass(frozen=True)
class ProjectStructure:
    """Gradle project layout derived from a project and package name."""

    root_directory: Path
    project_name: str
    package_name: str

    # -- Derived paths -----------------------------------------------------

    @property
    def project_root(self) -> Path:
        return Path(self.root_directory) / self.project_name

    @property
    def main_path(self) -> Path:
        """Directory holding the main class, e.g. ``src/main/java/com/example``."""
        return self.project_root / "src" / "main" / "java" / package_to_path(self.package_name)

    @property
    def test_path(self) -> Path:
        return self.project_root / "src" / "test" / "java" / package_to_path(self.package_name)

    @property
    def solidity_path(self) -> Path:
        return self.project_root / "src" / "main" / "solidity"

    @property
    def wrapper_path(self) -> Path:
        return self.project_root / "gradle" / "wrapper"

    @property
    def wallet_path(self) -> Path:
        return self.project_root / "src" / "test" / "resources" / "wallet"

    @property
    def generated_sources_path(self) -> Path:
        """Where the build tool writes generated contract wrappers."""
        return (
            self.project_root / "build" / "generated" / "source" / "web3j" / "main" / "java"
        )

    @property
    def test_sources_root(self) -> Path:
        """Root of the test source set; generated tests keep their package path below it."""
        return self.project_root / "src" / "test" / "java"

    def all_paths(self) -> list[Path]:
        """Return every directory of the layout, project root first."""
        return [
            self.project_root,
            self.main_path,
            self.test_path,
            self.solidity_path,
            self.wrapper_path,
            self.wallet_path,
        ]

    # -- Directory creation ------------------------------------------------

    def create_main_directory(self) -> Path:
        return _mkdir(self.main_path)

    def create_test_directory(self) -> Path:
        return _mkdir(self.test_path)

    def create_solidity_directory(self) -> Path:
        return _mkdir(self.solidity_path)

    def create_wrapper_directory(self) -> Path:
        return _mkdir(self.wrapper_path)

    def create_wallet_directory(self) -> Path:
        return _mkdir(self.wallet_path)

    def create_top_level_directories(self) -> None:
        """Create every directory the template files are written into.

        The wallet directory is only created when a wallet is generated.
        """
        self.create_main_directory()
        self.create_test_directory()
        self.create_solidity_directory()
        self.create_wrapper_directory()


def _mkdir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
