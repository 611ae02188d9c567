"""
Token swap through the Jupiter aggregator

Each attempt asks for a fresh quote, checks it against the request,
builds the swap transaction from that quote and submits it. Quotes are
never reused across attempts.
"""

import logging
from typing import List, Optional

from ..client import WingmanClient
from ..errors import InvalidAmount, InvalidArgument, QuoteMismatch
from ..infra import TxDraft, submit_with_retry
from ..programs import fetch_mint_info
from ..types import (
    AmountLike,
    KNOWN_TOKENS,
    QuoteResult,
    SwapResult,
    parse_display_amount,
    resolve_mint,
    to_base_units,
    to_display,
)

logger = logging.getLogger(__name__)

MAX_SLIPPAGE_BPS = 10_000


def check_quote(quote: QuoteResult, input_mint: str, output_mint: str, amount: int):
    """Raise QuoteMismatch if the quote is not for what was requested"""
    if quote.from_token != input_mint:
        raise QuoteMismatch("input mint", input_mint, quote.from_token)
    if quote.to_token != output_mint:
        raise QuoteMismatch("output mint", output_mint, quote.to_token)
    if quote.from_amount != amount:
        raise QuoteMismatch("input amount", amount, quote.from_amount)


async def _mint_decimals(client: WingmanClient, mint: str) -> int:
    for token in KNOWN_TOKENS.values():
        if token.mint == mint:
            return token.decimals
    info = await fetch_mint_info(client.rpc, mint)
    return info.decimals


async def swap(
    client: WingmanClient,
    input_mint: str,
    output_mint: str,
    amount: AmountLike,
    slippage_bps: Optional[int] = None,
) -> SwapResult:
    """
    Swap `amount` of the input token for the output token

    Args:
        client: WingmanClient
        input_mint: Input mint address or known symbol (SOL, USDC, ...)
        output_mint: Output mint address or known symbol
        amount: Display amount of the input token
        slippage_bps: Slippage tolerance (default DEFAULT_SLIPPAGE_BPS)

    Returns:
        SwapResult with the submission result and the executed quote
    """
    in_mint = resolve_mint(input_mint)
    out_mint = resolve_mint(output_mint)
    if in_mint == out_mint:
        raise InvalidArgument("Input and output mints must differ")

    if slippage_bps is None:
        slippage_bps = client.config.trading.default_slippage_bps
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int) or not 0 <= slippage_bps <= MAX_SLIPPAGE_BPS:
        raise InvalidArgument(f"Slippage must be between 0 and {MAX_SLIPPAGE_BPS} bps: {slippage_bps}")

    display = parse_display_amount(amount)
    decimals = await _mint_decimals(client, in_mint)
    base_units = to_base_units(display, decimals)
    if base_units <= 0:
        raise InvalidAmount(f"Amount must be greater than zero: {amount}", value=str(amount))

    identity = client.identity
    jupiter = client.jupiter
    warn_pct = client.config.trading.price_impact_warn_pct
    quotes: List[QuoteResult] = []

    async def build(attempt: int) -> TxDraft:
        quote = await jupiter.get_quote(in_mint, out_mint, base_units, slippage_bps)
        check_quote(quote, in_mint, out_mint, base_units)
        quotes.append(quote)

        logger.info(f"Quote (attempt {attempt + 1}): {quote}")
        if quote.price_impact_percent > warn_pct:
            client.echo(
                f"Warning: price impact {quote.price_impact_percent:.2f}% exceeds {warn_pct}%"
            )

        tx_bytes, _ = await jupiter.get_swap_transaction(quote, identity.pubkey)
        return TxDraft.from_prebuilt(tx_bytes)

    client.echo(
        f"Swapping {to_display(base_units, decimals)} {input_mint} for {output_mint} "
        f"(slippage {slippage_bps} bps)"
    )
    result = await submit_with_retry(
        client.rpc,
        build,
        [identity.keypair],
        operation_name="swap",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )

    quote = quotes[-1] if quotes else None
    if result.is_success and quote is not None:
        client.echo(f"Expected output: {quote.to_amount} base units (minimum {quote.min_to_amount})")
    return SwapResult(tx_result=result, quote=quote)
