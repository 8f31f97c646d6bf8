"""Release check for the CLI.

Polls a GitHub-releases style endpoint for the newest published version and
records the answer in ``CliConfig``.  Persisting the returned config is up
to the caller.
"""

from __future__ import annotations

import re

import httpx

from contract_scaffold.config import CliConfig


async def fetch_latest_version(url: str, timeout: float = 5.0) -> str:
    """Return the ``tag_name`` of the latest release, without a leading ``v``.

    Raises:
        httpx.HTTPError: On connection failures and non-2xx responses.
        ValueError: If the response carries no ``tag_name``.
    """
    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=3.0)) as client:
        response = await client.get(url, headers={"Accept": "application/json"})
        response.raise_for_status()
        data = response.json()
    tag = data.get("tag_name") if isinstance(data, dict) else None
    if not tag:
        raise ValueError(f"No tag_name in release data from {url}")
    return str(tag).lstrip("vV")


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", version))


def is_newer(candidate: str, current: str) -> bool:
    """Compare dotted versions numerically: ``1.10.0`` is newer than ``1.9.2``."""
    return _version_key(candidate) > _version_key(current)


async def check_for_update(
    cli_config: CliConfig,
    current_version: str,
    url: str,
) -> CliConfig:
    """Return a copy of *cli_config* updated with the latest release.

    ``update_prompt`` is set when the release is newer than
    *current_version* and cleared otherwise.
    """
    latest = await fetch_latest_version(url)
    prompt = None
    if is_newer(latest, current_version):
        prompt = (
            f"A new version of contract-scaffold is available: {latest} "
            f"(installed: {current_version}). "
            "Upgrade with: pip install --upgrade contract-scaffold"
        )
    return cli_config.model_copy(update={"latest_version": latest, "update_prompt": prompt})
