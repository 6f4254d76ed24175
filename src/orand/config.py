"""Publisher configuration from the environment.

Settings come from process environment variables, optionally seeded
from a ``.env`` file. Anything required but missing is a
``ConfigurationError`` raised before any network activity.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from orand.errors import ConfigurationError
from orand.publisher import DEFAULT_RPC_TIMEOUT


DEFAULT_CONSUMER_ADDRESS = "0x540AF102792020f7f300a3AF4fF52af1B71BfF69"


@dataclass(frozen=True)
class PublisherConfig:
    """Everything needed to reach the provider and sign for it."""
    rpc_url: str
    provider_address: str
    consumer_address: str = DEFAULT_CONSUMER_ADDRESS
    private_key: Optional[str] = field(default=None, repr=False)
    chain_id: Optional[int] = None
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Path] = None,
        require_key: bool = True,
    ) -> PublisherConfig:
        """Load settings, reading ``env_file`` (or ``./.env``) first.

        Values already present in the environment win over the file.
        ``require_key=False`` is for read-only use (verification).
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        rpc_url = os.getenv("RPC_URL")
        provider_address = os.getenv("ORAND_PROVIDER_ADDRESS")
        private_key = os.getenv("WALLET_PRIVATE_KEY")

        missing = [
            name for name, value in (
                ("RPC_URL", rpc_url),
                ("ORAND_PROVIDER_ADDRESS", provider_address),
                ("WALLET_PRIVATE_KEY", private_key if require_key else "-"),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        return cls(
            rpc_url=rpc_url,
            provider_address=provider_address,
            consumer_address=os.getenv("CONSUMER_ADDRESS") or DEFAULT_CONSUMER_ADDRESS,
            private_key=private_key or None,
            chain_id=_optional_number("CHAIN_ID", int),
            rpc_timeout=_optional_number("RPC_TIMEOUT_SECONDS", float) or DEFAULT_RPC_TIMEOUT,
        )

    def account(self) -> LocalAccount:
        """The signing account for state-mutating calls."""
        if not self.private_key:
            raise ConfigurationError("Missing required settings: WALLET_PRIVATE_KEY")
        try:
            return Account.from_key(self.private_key)
        except ValueError as exc:
            raise ConfigurationError(f"WALLET_PRIVATE_KEY is not a valid key: {exc}") from exc


def _optional_number(name: str, kind: type) -> Optional[float]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
