"""Shared pytest fixtures for the contract-scaffold test suite.

Provides reusable fixtures for:
- A writable copy of the template store with a stub wrapper jar
- A ``Config`` that never probes java or draws a spinner
- Mock build subprocesses with a chosen exit code
- A sample web3j contract wrapper as produced by the Gradle plugin
"""

from __future__ import annotations

import io
import shutil
import textwrap
import zipfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from contract_scaffold.config import Config, ProjectOptions
from contract_scaffold.scaffolder.templates import _DEFAULT_TEMPLATE_DIR, TemplateRenderer

WRAPPER_JAR_BYTES = b"PK\x03\x04 stub gradle wrapper \x00\xff"


def build_wrapper_jar() -> bytes:
    """A minimal zip with the wrapper entry point, as a download would return."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        archive.writestr("org/gradle/wrapper/GradleWrapperMain.class", b"\xca\xfe\xba\xbe")
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Template store
# ---------------------------------------------------------------------------

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Copy of the packaged templates plus a binary ``gradle-wrapper.jar``."""
    target = tmp_path / "templates"
    shutil.copytree(_DEFAULT_TEMPLATE_DIR, target)
    (target / "gradle-wrapper.jar").write_bytes(WRAPPER_JAR_BYTES)
    return target


@pytest.fixture
def renderer(template_dir: Path) -> TemplateRenderer:
    return TemplateRenderer(template_dir)


@pytest.fixture
def config(template_dir: Path, tmp_path: Path) -> Config:
    """Config pinned to Java 17 with progress output disabled."""
    return Config(
        template_dir=template_dir,
        java_version=17,
        wallet_kdf="pbkdf2",
        config_path=tmp_path / "cli" / "config.json",
        wrapper_cache_dir=tmp_path / "wrapper-cache",
        show_progress=False,
    )


@pytest.fixture
def packaged_store_config(tmp_path: Path) -> Config:
    """Config that uses the packaged template store and an empty jar cache."""
    return Config(
        java_version=17,
        wallet_kdf="pbkdf2",
        config_path=tmp_path / "cli" / "config.json",
        wrapper_cache_dir=tmp_path / "wrapper-cache",
        show_progress=False,
    )


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def demo_options(output_dir: Path) -> ProjectOptions:
    """The canonical ``Demo`` / ``com.example`` new-project options."""
    return ProjectOptions(
        project_name="Demo",
        package_name="com.example",
        output_dir=output_dir,
    )


@pytest.fixture
def solidity_import_dir(tmp_path: Path) -> Path:
    """An existing contract folder with a nested library."""
    src = tmp_path / "contracts"
    (src / "lib").mkdir(parents=True)
    (src / "Token.sol").write_text("pragma solidity ^0.5.0;\ncontract Token {}\n")
    (src / "lib" / "SafeMath.sol").write_text("pragma solidity ^0.5.0;\nlibrary SafeMath {}\n")
    return src


# ---------------------------------------------------------------------------
# Wrapper jar download
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_wrapper_download():
    """Patch ``httpx.AsyncClient`` so GET returns *content* (a valid jar by default).

    Usage:
        def test_x(mock_wrapper_download):
            with mock_wrapper_download() as client_cls:
                ...
    """

    def _factory(content: bytes | None = None, error: Exception | None = None):
        mock_response = MagicMock()
        mock_response.content = build_wrapper_jar() if content is None else content
        mock_response.raise_for_status = MagicMock(side_effect=error)

        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=mock_response)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        return patch("httpx.AsyncClient", return_value=mock_client)

    return _factory


@pytest.fixture
def wrapper_jar_bytes() -> bytes:
    return build_wrapper_jar()


# ---------------------------------------------------------------------------
# Build subprocess
# ---------------------------------------------------------------------------

def make_process(returncode: int) -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.fixture
def mock_build():
    """Patch ``asyncio.create_subprocess_exec`` with processes exiting 0.

    Usage:
        def test_x(mock_build):
            with mock_build(0, 1) as exec_mock:
                ...  # first call exits 0, second exits 1
    """

    def _factory(*returncodes: int):
        codes = list(returncodes) or [0]

        async def _exec(*args: Any, **kwargs: Any) -> MagicMock:
            code = codes.pop(0) if len(codes) > 1 else codes[0]
            return make_process(code)

        return patch("asyncio.create_subprocess_exec", side_effect=_exec)

    return _factory


# ---------------------------------------------------------------------------
# Generated wrapper sources
# ---------------------------------------------------------------------------

@pytest.fixture
def hello_world_wrapper() -> str:
    """Abridged web3j wrapper for the HelloWorld contract."""
    return textwrap.dedent("""\
        package com.example.generated.contracts;

        import java.math.BigInteger;
        import java.util.Arrays;
        import org.web3j.protocol.Web3j;
        import org.web3j.protocol.core.RemoteCall;
        import org.web3j.protocol.core.RemoteFunctionCall;
        import org.web3j.protocol.core.methods.response.TransactionReceipt;
        import org.web3j.tx.Contract;
        import org.web3j.tx.TransactionManager;
        import org.web3j.tx.gas.ContractGasProvider;

        public class HelloWorld extends Contract {
            public static final String BINARY = "0x6080";

            public static final String FUNC_GREETING = "greeting";

            public RemoteFunctionCall<TransactionReceipt> newGreeting(String _greet) {
                return executeRemoteCallTransaction(null);
            }

            public RemoteFunctionCall<String> greeting() {
                return executeRemoteCallSingleValueReturn(null, String.class);
            }

            public RemoteFunctionCall<TransactionReceipt> kill() {
                return executeRemoteCallTransaction(null);
            }

            public static HelloWorld load(String contractAddress, Web3j web3j, TransactionManager transactionManager, ContractGasProvider contractGasProvider) {
                return new HelloWorld(contractAddress, web3j, transactionManager, contractGasProvider);
            }

            public static RemoteCall<HelloWorld> deploy(Web3j web3j, Credentials credentials, ContractGasProvider contractGasProvider, String _greet) {
                return deployRemoteCall(HelloWorld.class, web3j, credentials, contractGasProvider, BINARY, "");
            }

            public static RemoteCall<HelloWorld> deploy(Web3j web3j, TransactionManager transactionManager, ContractGasProvider contractGasProvider, String _greet) {
                return deployRemoteCall(HelloWorld.class, web3j, transactionManager, contractGasProvider, BINARY, "");
            }
        }
        """)
