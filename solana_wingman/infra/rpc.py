"""
RPC Client for Solana

Async JSON-RPC interface bound to one endpoint and one commitment level.
Each call is a single HTTP request; failures are raised as classified
RpcError values and retry policy lives with the caller.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ErrorCode, RpcError, ConfigurationError
from ..config import config as global_config
from ..types import BlockhashInfo

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


class RpcClient:
    """
    Async Solana RPC client

    Usage:
        rpc = RpcClient("https://api.devnet.solana.com")
        lamports = await rpc.get_balance("Address...")
        await rpc.close()

        # Or as a context manager
        async with RpcClient(url) as rpc:
            info = await rpc.get_latest_blockhash()
    """

    def __init__(
        self,
        endpoint: str,
        commitment: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL
            commitment: Default commitment level (default from config)
            timeout_seconds: Per-request timeout (default from config)
            transport: Optional httpx transport (used by tests)
        """
        if not endpoint:
            raise ConfigurationError.missing("RPC endpoint")

        self._endpoint = endpoint
        self._commitment = commitment or global_config.network.commitment
        self._timeout = timeout_seconds if timeout_seconds is not None else global_config.rpc.timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._commitment

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def call(self, method: str, params: List[Any]) -> Any:
        """
        Make JSON-RPC call

        Args:
            method: RPC method name
            params: RPC parameters

        Returns:
            RPC result

        Raises:
            RpcError: On transport failure, HTTP error or JSON-RPC error
        """
        client = self._get_client()
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        try:
            response = await client.post(self._endpoint, json=body)
        except httpx.TimeoutException:
            logger.warning(f"RPC timeout: {method} at {self._endpoint}")
            raise RpcError.timeout(self._endpoint, self._timeout)
        except httpx.RequestError as e:
            logger.warning(f"RPC connection error: {method}: {e}")
            raise RpcError.connection_failed(self._endpoint, e)

        if response.status_code == 429:
            logger.warning(f"Rate limited by {self._endpoint}")
            raise RpcError.rate_limited(self._endpoint)
        if response.status_code >= 400:
            logger.warning(f"RPC HTTP error {response.status_code}: {method}")
            raise RpcError.http_status(self._endpoint, response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise RpcError(
                f"Invalid JSON from RPC endpoint for {method}",
                ErrorCode.RPC_INVALID_RESPONSE,
                original_error=e,
                endpoint=self._endpoint,
                recoverable=False,
            )

        if "error" in result:
            logger.debug(f"RPC error for {method}: {result['error']}")
            raise RpcError.from_rpc_error(self._endpoint, result["error"])

        return result.get("result")

    async def get_balance(self, address: str, commitment: Optional[str] = None) -> int:
        """Get SOL balance in lamports"""
        params = [address, {"commitment": commitment or self.commitment}]
        result = await self.call("getBalance", params)
        return result.get("value", 0) if result else 0

    async def get_account_info(
        self,
        address: str,
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get account information

        Returns:
            Account info or None if not found
        """
        params = [
            address,
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getAccountInfo", params)
        return result.get("value") if result else None

    async def get_latest_blockhash(self, commitment: Optional[str] = None) -> BlockhashInfo:
        """Get latest blockhash and the last block height it stays valid for"""
        params = [{"commitment": commitment or self.commitment}]
        result = await self.call("getLatestBlockhash", params)
        value = (result or {}).get("value") or {}
        if not value.get("blockhash"):
            raise RpcError(
                "getLatestBlockhash returned no blockhash",
                ErrorCode.RPC_INVALID_RESPONSE,
                endpoint=self._endpoint,
            )
        return BlockhashInfo(
            blockhash=value["blockhash"],
            last_valid_block_height=int(value["lastValidBlockHeight"]),
        )

    async def get_block_height(self, commitment: Optional[str] = None) -> int:
        """Get current block height"""
        params = [{"commitment": commitment or self.commitment}]
        return await self.call("getBlockHeight", params)

    async def get_token_accounts_by_owner(
        self,
        owner: str,
        mint: Optional[str] = None,
        program_id: Optional[str] = None,
        encoding: str = "jsonParsed",
        commitment: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get token accounts owned by address

        Args:
            owner: Owner address
            mint: Optional mint filter
            program_id: Optional program filter (defaults to SPL Token)
        """
        if mint:
            filter_param = {"mint": mint}
        else:
            filter_param = {"programId": program_id or TOKEN_PROGRAM_ID}

        params = [
            owner,
            filter_param,
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = await self.call("getTokenAccountsByOwner", params)
        return result.get("value", []) if result else []

    async def get_minimum_balance_for_rent_exemption(self, data_length: int) -> int:
        return await self.call("getMinimumBalanceForRentExemption", [data_length])

    async def send_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = False,
        preflight_commitment: Optional[str] = None,
    ) -> str:
        """
        Send signed transaction once

        Node-side rebroadcast is disabled (maxRetries=0); resubmission is
        the caller's decision, made against a fresh blockhash.

        Returns:
            Transaction signature (base58)
        """
        tx_data = base64.b64encode(transaction).decode("ascii")

        params = [
            tx_data,
            {
                "skipPreflight": skip_preflight,
                "preflightCommitment": preflight_commitment or self.commitment,
                "encoding": "base64",
                "maxRetries": 0,
            },
        ]
        return await self.call("sendTransaction", params)

    async def get_signature_statuses(self, signatures: List[str]) -> List[Optional[Dict[str, Any]]]:
        """Status per signature (None where the node has not seen it)"""
        params = [signatures, {"searchTransactionHistory": False}]
        result = await self.call("getSignatureStatuses", params)
        return result.get("value", []) if result else []

    async def request_airdrop(self, address: str, lamports: int, commitment: Optional[str] = None) -> str:
        params = [address, lamports, {"commitment": commitment or self.commitment}]
        return await self.call("requestAirdrop", params)

    async def get_transaction(
        self,
        signature: str,
        encoding: str = "jsonParsed",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Get a confirmed transaction, or None if the node does not know it"""
        commitment = commitment or self.commitment
        # getTransaction does not accept "processed"
        if commitment == "processed":
            commitment = "confirmed"
        params = [
            signature,
            {
                "encoding": encoding,
                "commitment": commitment,
                "maxSupportedTransactionVersion": 0,
            },
        ]
        return await self.call("getTransaction", params)

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
