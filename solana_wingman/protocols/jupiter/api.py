"""
Jupiter API Client

Async REST client for the Jupiter swap aggregator (v6 quote and swap
endpoints). One request per call; retry policy belongs to the caller.
"""

import base64
import binascii
import logging
from decimal import Decimal
from typing import Optional, Tuple

import httpx

from ...types import QuoteResult
from ...config import config as global_config
from ...errors import AggregatorError

logger = logging.getLogger(__name__)


class JupiterAPI:
    """
    Jupiter REST API client

    Usage:
        api = JupiterAPI()
        quote = await api.get_quote(SOL_MINT, USDC_MINT, 1_000_000_000)
        tx_bytes, last_valid = await api.get_swap_transaction(quote, user_pubkey)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Jupiter API client

        Args:
            base_url: API base URL (default JUPITER_API_URL)
            timeout: Request timeout in seconds (default from config)
            transport: Optional httpx transport (used by tests)
        """
        base = base_url if base_url is not None else global_config.jupiter.base_url
        self._quote_url = f"{base.rstrip('/')}/quote"
        self._swap_url = f"{base.rstrip('/')}/swap"
        self._timeout = timeout if timeout is not None else global_config.jupiter.timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def _request(self, stage: str, method: str, url: str, **kwargs) -> dict:
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Jupiter {stage} transport error: {e}")
            raise AggregatorError.transport(stage, e)

        if response.status_code != 200:
            logger.warning(f"Jupiter {stage} failed: HTTP {response.status_code}")
            raise AggregatorError.from_response(stage, response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            raise AggregatorError(f"Jupiter {stage} returned invalid JSON", status_code=200, body=response.text)

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int = 50,
        swap_mode: str = "ExactIn",
    ) -> QuoteResult:
        """
        Get swap quote from Jupiter

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount in base units of the input mint
            slippage_bps: Slippage tolerance in basis points

        Returns:
            QuoteResult; raw_response keeps the full quote for the swap call
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": slippage_bps,
            "swapMode": swap_mode,
        }
        data = await self._request("quote", "GET", self._quote_url, params=params)

        route_plan = data.get("routePlan", [])
        route = [step.get("swapInfo", {}).get("label", "") for step in route_plan]
        threshold = data.get("otherAmountThreshold")

        return QuoteResult(
            from_token=data.get("inputMint", input_mint),
            to_token=data.get("outputMint", output_mint),
            from_amount=int(data.get("inAmount", amount)),
            to_amount=int(data.get("outAmount", 0)),
            price_impact=Decimal(str(data.get("priceImpactPct", 0))),
            route=route,
            min_to_amount=int(threshold) if threshold is not None else None,
            slippage_bps=int(data.get("slippageBps", slippage_bps)),
            raw_response=data,
        )

    async def get_swap_transaction(
        self,
        quote: QuoteResult,
        user_pubkey: str,
        wrap_and_unwrap_sol: bool = True,
    ) -> Tuple[bytes, Optional[int]]:
        """
        Get serialized swap transaction from Jupiter

        The quote's raw response is sent back unchanged.

        Returns:
            (transaction bytes, lastValidBlockHeight if provided)
        """
        if not quote.raw_response:
            raise AggregatorError("Quote has no raw response to build a swap from")

        swap_request = {
            "quoteResponse": quote.raw_response,
            "userPublicKey": user_pubkey,
            "wrapAndUnwrapSol": wrap_and_unwrap_sol,
            "dynamicComputeUnitLimit": True,
        }
        data = await self._request("swap", "POST", self._swap_url, json=swap_request)

        swap_transaction = data.get("swapTransaction")
        if not swap_transaction:
            raise AggregatorError("No swap transaction in response from Jupiter API", body=str(data))

        try:
            tx_bytes = base64.b64decode(swap_transaction, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AggregatorError(
                "Swap transaction from Jupiter API is not valid base64",
                body=str(data),
                original_error=e,
            )

        return tx_bytes, data.get("lastValidBlockHeight")

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
