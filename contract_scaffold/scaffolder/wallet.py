"""Credential generation for new projects.

A project wallet is an encrypted V3 keystore produced by ``eth_account``
plus a plain-text file holding its generated password, both written to the
project's wallet directory.  The main class template references the two
files by name.
"""

from __future__ import annotations

import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from eth_account import Account

from contract_scaffold.errors import WalletGenerationError

from .structure import ProjectStructure
from .writer import write_resource_file

PASSWORD_BYTES = 32


@dataclass(frozen=True)
class ProjectWallet:
    """A generated keystore and the password that unlocks it."""

    password: str
    wallet_path: Path
    wallet_name: str
    password_file_name: str

    @property
    def wallet_file(self) -> Path:
        return self.wallet_path / self.wallet_name

    @property
    def password_file(self) -> Path:
        return self.wallet_path / self.password_file_name


def generate_wallet_password() -> str:
    """Return a random URL-safe password (43 characters for 32 bytes)."""
    return secrets.token_urlsafe(PASSWORD_BYTES)


def keystore_file_name(address: str, now: datetime | None = None) -> str:
    """Name a keystore the way Ethereum clients do.

    Example: ``UTC--2024-05-01T10-20-30.123456Z--0a1b...ef.json``.
    """
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S.%f")
    return f"UTC--{stamp}Z--{address.lower().removeprefix('0x')}.json"


def password_file_name_for(wallet_name: str) -> str:
    return f"{Path(wallet_name).stem}.password"


def generate_wallet(
    structure: ProjectStructure,
    kdf: Literal["scrypt", "pbkdf2"] = "scrypt",
) -> ProjectWallet:
    """Create a keystore and its password file under ``structure.wallet_path``.

    Raises:
        WalletGenerationError: If the credential library rejects the key,
            password or KDF parameters.
        OSError: If either file cannot be written.
    """
    wallet_dir = structure.create_wallet_directory()
    password = generate_wallet_password()

    try:
        account = Account.create()
        keystore = Account.encrypt(account.key, password, kdf=kdf)
    except (ValueError, TypeError, NotImplementedError) as exc:
        raise WalletGenerationError(f"Could not generate wallet: {exc}") from exc

    wallet_name = keystore_file_name(account.address)
    write_resource_file(json.dumps(keystore), wallet_name, wallet_dir)

    password_file_name = password_file_name_for(wallet_name)
    write_resource_file(password, password_file_name, wallet_dir)

    return ProjectWallet(
        password=password,
        wallet_path=wallet_dir,
        wallet_name=wallet_name,
        password_file_name=password_file_name,
    )
