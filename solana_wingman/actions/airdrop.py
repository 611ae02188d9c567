"""
Test-network airdrop
"""

import logging
from typing import Optional

from ..client import WingmanClient
from ..errors import InvalidAmount, UnsupportedNetwork
from ..infra import confirm_signature, execute_with_retry
from ..types import AmountLike, TxResult, lamports_to_sol, parse_pubkey, sol_to_lamports

logger = logging.getLogger(__name__)

DEFAULT_AIRDROP_SOL = "2"


async def request_airdrop(
    client: WingmanClient,
    amount: AmountLike = DEFAULT_AIRDROP_SOL,
    address: Optional[str] = None,
) -> TxResult:
    """
    Request test funds and wait for them to land

    Refused on mainnet before any network call. Faucet rate limits and
    expired confirmations are retried with a fresh request.
    """
    network = client.network
    if network.is_production:
        raise UnsupportedNetwork("Airdrop", network.value)

    lamports = sol_to_lamports(amount)
    if lamports == 0:
        raise InvalidAmount("Airdrop amount must be greater than zero", value=str(amount))

    recipient = str(parse_pubkey(address, "recipient")) if address else client.identity.pubkey
    rpc = client.rpc

    async def attempt(index: int) -> TxResult:
        anchor = await rpc.get_latest_blockhash()
        signature = await rpc.request_airdrop(recipient, lamports)
        logger.info(f"Airdrop requested: {signature}")
        return await confirm_signature(rpc, signature, anchor.last_valid_block_height)

    client.echo(f"Requesting {lamports_to_sol(lamports)} SOL for {recipient} on {network.value}")
    result = await execute_with_retry(
        attempt,
        "airdrop",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )
    result.address = recipient

    if result.is_success:
        balance = await rpc.get_balance(recipient)
        client.echo(f"New balance: {lamports_to_sol(balance)} SOL")
    return result
