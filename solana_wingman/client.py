"""
WingmanClient - shared handle passed to every action

Holds the RPC connection, a lazily resolved identity, the Jupiter client
and an output callback, so actions can be driven with fakes in tests.
"""

from __future__ import annotations

from typing import Callable, Optional, TYPE_CHECKING

from .config import Config, config as global_config
from .infra import RpcClient, Identity, create_connection, get_connection, resolve_identity
from .types import Network
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .protocols.jupiter import JupiterAPI


def _silent(message: str) -> None:
    pass


class WingmanClient:
    """
    Action context

    Usage:
        client = WingmanClient(echo=print)
        report = await check_balance(client)
        await client.close()
    """

    def __init__(
        self,
        rpc: Optional[RpcClient] = None,
        identity: Optional[Identity] = None,
        config: Optional[Config] = None,
        echo: Optional[Callable[[str], None]] = None,
        jupiter: Optional["JupiterAPI"] = None,
    ):
        """
        Args:
            rpc: RPC client (default: shared connection, or a private one
                when a non-global config is given)
            identity: Signing identity (default: resolved on first use)
            config: Configuration (default: global config)
            echo: Callable receiving user-facing lines (default: discard)
            jupiter: Jupiter client (default: created on first swap)
        """
        self._config = config or global_config
        self._rpc = rpc
        self._owns_rpc = False
        self._identity = identity
        self._jupiter = jupiter
        self.echo = echo or _silent

    @property
    def config(self) -> Config:
        return self._config

    @property
    def rpc(self) -> RpcClient:
        if self._rpc is None:
            if self._config is global_config:
                self._rpc = get_connection()
            else:
                self._rpc = create_connection(self._config.network.rpc_url, self._config.network.commitment)
                self._owns_rpc = True
        return self._rpc

    @property
    def identity(self) -> Identity:
        """Resolved on first access; raises IdentityNotFound / IdentityCorrupt"""
        if self._identity is None:
            self._identity = resolve_identity(
                private_key=self._config.signer.private_key,
                keypair_path=self._config.signer.keypair_path,
            )
        return self._identity

    @property
    def network(self) -> Network:
        try:
            return Network.parse(self._config.network.network)
        except ValueError as e:
            raise ConfigurationError.invalid("SOLANA_NETWORK", str(e)) from None

    @property
    def jupiter(self) -> "JupiterAPI":
        if self._jupiter is None:
            from .protocols.jupiter import JupiterAPI
            self._jupiter = JupiterAPI(
                base_url=self._config.jupiter.base_url,
                timeout=self._config.jupiter.timeout,
            )
        return self._jupiter

    async def close(self):
        """Close the Jupiter client and any private connection; the shared one is closed by its owner"""
        if self._jupiter is not None:
            await self._jupiter.close()
        if self._owns_rpc:
            await self._rpc.close()
            self._rpc = None
            self._owns_rpc = False

    def __repr__(self) -> str:
        endpoint = self._rpc.endpoint if self._rpc is not None else self._config.network.rpc_url
        return f"WingmanClient(endpoint={endpoint}, network={self._config.network.network})"
