"""JUnit test generation for contract wrappers produced by the build.

After ``gradlew build`` the web3j Gradle plugin leaves one Java wrapper per
contract under ``build/generated/source/web3j/main/java``.  For every
wrapper that declares ``public class X extends Contract`` a ``XTest.java``
is rendered into the test source set, in the wrapper's package, with a
``@BeforeAll`` deployment and one ``@Test`` per contract function.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from contract_scaffold.utils import package_to_path

from .templates import TemplateRenderer

TEST_TEMPLATE = "unit_test/ContractTest.java.j2"

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_CONTRACT_CLASS_RE = re.compile(r"public\s+class\s+(\w+)\s+extends\s+Contract\b")
_FUNCTION_RE = re.compile(
    r"public\s+RemoteFunctionCall<(?P<ret>.+?)>\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
)
_DEPLOY_RE = re.compile(
    r"public\s+static\s+RemoteCall<\w+>\s+deploy\s*\((?P<params>[^)]*)\)"
)
_LIST_TYPE_RE = re.compile(r"\bList\b")
_TUPLE_TYPE_RE = re.compile(r"\bTuple\d+\b")

# Placeholder arguments for generated calls, by Java parameter type.
_DEFAULT_VALUES: dict[str, str] = {
    "String": '"REPLACE_ME"',
    "BigInteger": "BigInteger.ONE",
    "Boolean": "true",
    "boolean": "true",
    "byte[]": "new byte[32]",
}

# Leading deploy parameters supplied by the test harness.
_HARNESS_TYPES = {"Web3j", "TransactionManager", "ContractGasProvider"}


@dataclass(frozen=True)
class JavaParameter:
    type: str
    name: str

    @property
    def default_value(self) -> str:
        if self.type.startswith("List"):
            return "Collections.emptyList()"
        return _DEFAULT_VALUES.get(self.type, "null")


@dataclass(frozen=True)
class ContractFunction:
    name: str
    return_type: str
    parameters: list[JavaParameter] = field(default_factory=list)

    @property
    def is_transaction(self) -> bool:
        return self.return_type == "TransactionReceipt"


@dataclass(frozen=True)
class ContractWrapper:
    """What the test template needs to know about one generated wrapper."""

    package_name: str
    class_name: str
    source: Path
    deploy_parameters: list[JavaParameter] = field(default_factory=list)
    functions: list[ContractFunction] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def split_parameters(params: str) -> list[JavaParameter]:
    """Split a Java parameter list, respecting commas inside generics."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in params:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))

    result: list[JavaParameter] = []
    for part in parts:
        tokens = part.replace("final ", "").strip().rsplit(None, 1)
        if len(tokens) == 2:
            result.append(JavaParameter(type=tokens[0].strip(), name=tokens[1].strip()))
    return result


def _pick_deploy_parameters(source: str) -> list[JavaParameter]:
    """Return the constructor arguments of the TransactionManager deploy overload."""
    for match in _DEPLOY_RE.finditer(source):
        params = split_parameters(match.group("params"))
        types = [p.type for p in params]
        if "TransactionManager" in types and "ContractGasProvider" in types:
            return [p for p in params if p.type not in _HARNESS_TYPES]
    return []


def parse_wrapper(path: Path) -> ContractWrapper | None:
    """Parse one generated wrapper, or return ``None`` if it is not a contract."""
    source = path.read_text(encoding="utf-8")
    class_match = _CONTRACT_CLASS_RE.search(source)
    if not class_match:
        return None
    package_match = _PACKAGE_RE.search(source)
    functions = [
        ContractFunction(
            name=m.group("name"),
            return_type=m.group("ret").strip(),
            parameters=split_parameters(m.group("params")),
        )
        for m in _FUNCTION_RE.finditer(source)
    ]
    return ContractWrapper(
        package_name=package_match.group(1) if package_match else "",
        class_name=class_match.group(1),
        source=path,
        deploy_parameters=_pick_deploy_parameters(source),
        functions=functions,
    )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class UnitTestGenerator:
    """Renders a JUnit 5 test class for every generated contract wrapper."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate(self, wrapper_dir: Path, output_dir: Path) -> list[Path]:
        """Write one ``<Contract>Test.java`` per wrapper found in *wrapper_dir*.

        Args:
            wrapper_dir: Root of the build tool's generated Java sources.
            output_dir: Root of the test source set.

        Returns:
            Paths of the written test files, sorted by wrapper path.

        Raises:
            FileNotFoundError: If *wrapper_dir* does not exist.
        """
        if not wrapper_dir.is_dir():
            raise FileNotFoundError(f"Generated sources not found: {wrapper_dir}")

        written: list[Path] = []
        for java_file in sorted(wrapper_dir.rglob("*.java")):
            wrapper = parse_wrapper(java_file)
            if wrapper is None:
                continue
            target = (
                output_dir
                / package_to_path(wrapper.package_name)
                / f"{wrapper.class_name}Test.java"
            )
            written.append(
                await self.renderer.render_to_file(
                    TEST_TEMPLATE, target, _build_context(wrapper)
                )
            )
        return written


def required_imports(wrapper: ContractWrapper) -> list[str]:
    """Imports needed for the types the test declares or passes, beyond the fixed header."""
    types = [fn.return_type for fn in wrapper.functions]
    types += [p.type for fn in wrapper.functions for p in fn.parameters]
    types += [p.type for p in wrapper.deploy_parameters]

    imports: set[str] = set()
    for java_type in types:
        if _LIST_TYPE_RE.search(java_type):
            imports.add("java.util.List")
        for tuple_name in _TUPLE_TYPE_RE.findall(java_type):
            imports.add(f"org.web3j.tuples.generated.{tuple_name}")
    return sorted(imports)


def _build_context(wrapper: ContractWrapper) -> dict[str, Any]:
    """Build the Jinja2 context, de-duplicating overloaded test names."""
    seen: dict[str, int] = {}
    tests: list[dict[str, Any]] = []
    for fn in wrapper.functions:
        count = seen.get(fn.name, 0)
        seen[fn.name] = count + 1
        tests.append({
            "method_name": fn.name if count == 0 else f"{fn.name}{count + 1}",
            "function": fn.name,
            "return_type": fn.return_type,
            "is_transaction": fn.is_transaction,
            "arguments": ", ".join(p.default_value for p in fn.parameters),
        })
    return {
        "package_name": wrapper.package_name,
        "contract_name": wrapper.class_name,
        "deploy_arguments": "".join(
            f", {p.default_value}" for p in wrapper.deploy_parameters
        ),
        "tests": tests,
        "extra_imports": required_imports(wrapper),
    }
