"""contract-scaffold scaffolder -- generates web3j Gradle projects.

This package takes a ``ProjectOptions`` and renders a Gradle project with a
main class, a Solidity contract (fresh or imported), the Gradle wrapper and
an optional wallet, then builds it.

Quick usage::

    from contract_scaffold.config import ProjectOptions
    from contract_scaffold.scaffolder import ProjectGenerator

    options = ProjectOptions(
        project_name="Demo",
        package_name="com.example",
        output_dir="/tmp/output",
    )
    project_path = await ProjectGenerator(options).generate()
"""

from contract_scaffold.scaffolder.generator import ProjectGenerator
from contract_scaffold.scaffolder.provider import (
    TemplateOptions,
    TemplateProvider,
    TemplateSelection,
    select_templates,
)
from contract_scaffold.scaffolder.structure import ProjectStructure
from contract_scaffold.scaffolder.templates import TemplateRenderer
from contract_scaffold.scaffolder.wallet import ProjectWallet

__all__ = [
    "ProjectGenerator",
    "ProjectStructure",
    "ProjectWallet",
    "TemplateOptions",
    "TemplateProvider",
    "TemplateRenderer",
    "TemplateSelection",
    "select_templates",
]
