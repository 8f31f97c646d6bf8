"""Locating the Gradle wrapper jar copied into every project.

The jar is a binary artifact published by Gradle.  It is resolved in this
order:

1. ``Config.wrapper_jar`` when set,
2. ``gradle-wrapper.jar`` in the template store,
3. the per-user cache, downloaded once from ``Config.wrapper_jar_url``.

A downloaded jar must be a zip archive holding ``GradleWrapperMain``; when
``Config.wrapper_jar_sha256`` is set its digest must match as well.  The
jar does not depend on the Gradle version: ``gradle-wrapper.properties``
decides which distribution is run.
"""

from __future__ import annotations

import asyncio
import hashlib
import io
import zipfile
from pathlib import Path

import httpx

from contract_scaffold.config import Config
from contract_scaffold.errors import WrapperJarError
from contract_scaffold.utils import print_info

from .templates import TemplateRenderer

WRAPPER_JAR_NAME = "gradle-wrapper.jar"
WRAPPER_MAIN_CLASS = "org/gradle/wrapper/GradleWrapperMain.class"


def is_wrapper_jar(data: bytes) -> bool:
    """Return ``True`` if *data* is a zip archive containing the wrapper entry point."""
    if not zipfile.is_zipfile(io.BytesIO(data)):
        return False
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return WRAPPER_MAIN_CLASS in archive.namelist()


def _verify(data: bytes, url: str, expected_sha256: str | None) -> None:
    if not is_wrapper_jar(data):
        raise WrapperJarError(f"Downloaded file is not a Gradle wrapper jar: {url}")
    if expected_sha256:
        digest = hashlib.sha256(data).hexdigest()
        if digest != expected_sha256.strip().lower():
            raise WrapperJarError(
                f"Checksum mismatch for {url}: expected {expected_sha256}, got {digest}"
            )


def _store(data: bytes, target: Path) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_suffix(".part")
    partial.write_bytes(data)
    partial.replace(target)
    return target


async def download_wrapper_jar(
    url: str,
    target: Path,
    expected_sha256: str | None = None,
    timeout: float = 60.0,
) -> Path:
    """Download the wrapper jar from *url*, check it, and save it to *target*.

    Raises:
        WrapperJarError: On network failures, non-2xx responses or content
            that fails verification.  Nothing is written in that case.
    """
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0), follow_redirects=True
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.content
    except httpx.HTTPError as exc:
        raise WrapperJarError(f"Could not download the Gradle wrapper jar from {url}: {exc}") from exc

    _verify(data, url, expected_sha256)
    return await asyncio.to_thread(_store, data, target)


async def resolve_wrapper_jar(renderer: TemplateRenderer, config: Config) -> Path:
    """Return the path of the wrapper jar to copy, downloading it if needed."""
    if config.wrapper_jar is not None:
        return config.wrapper_jar.resolve()

    packaged = renderer.template_dir / WRAPPER_JAR_NAME
    if packaged.is_file():
        return packaged.resolve()

    cached = config.wrapper_cache_dir / WRAPPER_JAR_NAME
    if cached.is_file():
        return cached.resolve()

    print_info(f"Downloading Gradle wrapper jar from {config.wrapper_jar_url}")
    path = await download_wrapper_jar(
        config.wrapper_jar_url, cached, config.wrapper_jar_sha256
    )
    return path.resolve()
