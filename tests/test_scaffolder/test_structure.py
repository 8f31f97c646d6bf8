"""Tests for ProjectStructure path derivation and directory creation."""

from __future__ import annotations

from pathlib import Path

import pytest

from contract_scaffold.scaffolder.structure import ProjectStructure

pytestmark = pytest.mark.unit


@pytest.fixture
def structure(tmp_path: Path) -> ProjectStructure:
    return ProjectStructure(tmp_path, "Demo", "com.example.app")


class TestPaths:
    def test_project_root(self, structure, tmp_path):
        assert structure.project_root == tmp_path / "Demo"

    def test_main_path_follows_package(self, structure):
        assert structure.main_path == (
            structure.project_root / "src" / "main" / "java" / "com" / "example" / "app"
        )

    def test_test_path_follows_package(self, structure):
        assert structure.test_path == (
            structure.project_root / "src" / "test" / "java" / "com" / "example" / "app"
        )

    def test_fixed_paths(self, structure):
        root = structure.project_root
        assert structure.solidity_path == root / "src" / "main" / "solidity"
        assert structure.wrapper_path == root / "gradle" / "wrapper"
        assert structure.wallet_path == root / "src" / "test" / "resources" / "wallet"

    def test_generated_sources_path(self, structure):
        assert structure.generated_sources_path.parts[-6:] == (
            "build", "generated", "source", "web3j", "main", "java",
        )

    @pytest.mark.parametrize("package", ["a", "com.example", "io.x.y.z", "org.web3j.sample"])
    def test_all_paths_descend_from_root(self, tmp_path, package):
        structure = ProjectStructure(tmp_path, "Sample", package)
        for path in structure.all_paths():
            assert path == structure.project_root or structure.project_root in path.parents

    def test_reading_paths_does_no_io(self, structure):
        _ = structure.all_paths()
        assert not structure.project_root.exists()


class TestCreation:
    def test_creates_intermediate_directories(self, structure):
        created = structure.create_main_directory()
        assert created.is_dir()
        assert created == structure.main_path

    def test_create_twice_is_noop(self, structure):
        structure.create_wallet_directory()
        marker = structure.wallet_path / "keep.txt"
        marker.write_text("x")
        structure.create_wallet_directory()
        assert marker.read_text() == "x"

    def test_top_level_directories(self, structure):
        structure.create_top_level_directories()
        assert structure.main_path.is_dir()
        assert structure.test_path.is_dir()
        assert structure.solidity_path.is_dir()
        assert structure.wrapper_path.is_dir()
        assert not structure.wallet_path.exists()

    def test_top_level_directories_idempotent(self, structure):
        structure.create_top_level_directories()
        structure.create_top_level_directories()
        assert structure.main_path.is_dir()

    def test_creation_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        structure = ProjectStructure(blocker, "Demo", "com.example")
        with pytest.raises(OSError):
            structure.create_top_level_directories()
