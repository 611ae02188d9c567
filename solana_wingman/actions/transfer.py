"""
Native SOL and SPL token transfers
"""

import logging
from decimal import Decimal

from solders.pubkey import Pubkey

from ..client import WingmanClient
from ..errors import InvalidAmount
from ..infra import TxDraft, submit_with_retry
from ..programs import (
    build_transfer_instruction,
    build_transfer_checked_instruction,
    build_create_ata_idempotent_instruction,
    get_associated_token_address,
    fetch_mint_info,
)
from ..types import (
    AmountLike,
    TxResult,
    parse_display_amount,
    parse_pubkey,
    sol_to_lamports,
    to_base_units,
    to_display,
    lamports_to_sol,
)

logger = logging.getLogger(__name__)


def _require_positive(base_units: int, amount: AmountLike):
    if base_units <= 0:
        raise InvalidAmount(f"Amount must be greater than zero: {amount}", value=str(amount))


async def transfer_sol(client: WingmanClient, recipient: str, amount: AmountLike) -> TxResult:
    """
    Send SOL from the wallet

    Amounts above LARGE_TRANSFER_SOL print an advisory; the transfer
    still goes ahead.
    """
    recipient_pk = parse_pubkey(recipient, "recipient")
    lamports = sol_to_lamports(amount)
    _require_positive(lamports, amount)

    threshold = Decimal(str(client.config.trading.large_transfer_sol))
    if parse_display_amount(amount) > threshold:
        client.echo(f"Warning: large transfer of {lamports_to_sol(lamports)} SOL (above {threshold} SOL)")

    identity = client.identity
    draft = TxDraft.from_instructions(
        [build_transfer_instruction(identity.public_key, recipient_pk, lamports)],
        identity.public_key,
    )
    logger.info(f"Transferring {lamports} lamports to {recipient_pk}")
    client.echo(f"Transferring {lamports_to_sol(lamports)} SOL from {identity.pubkey} to {recipient_pk}")

    return await submit_with_retry(
        client.rpc,
        draft,
        [identity.keypair],
        operation_name="transfer_sol",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )


async def transfer_token(
    client: WingmanClient,
    mint: str,
    recipient: str,
    amount: AmountLike,
) -> TxResult:
    """
    Send SPL tokens from the wallet's associated account

    Uses the mint's on-chain decimals and token program. When the
    recipient has no associated account yet, an idempotent create is
    prepended so both happen in one transaction.
    """
    mint_pk = parse_pubkey(mint, "mint")
    recipient_pk = parse_pubkey(recipient, "recipient")
    display = parse_display_amount(amount)

    rpc = client.rpc
    identity = client.identity

    mint_info = await fetch_mint_info(rpc, str(mint_pk))
    base_units = to_base_units(display, mint_info.decimals)
    _require_positive(base_units, amount)

    token_program = Pubkey.from_string(mint_info.token_program)
    source = get_associated_token_address(identity.public_key, mint_pk, token_program)
    destination = get_associated_token_address(recipient_pk, mint_pk, token_program)

    client.echo(
        f"Transferring {to_display(base_units, mint_info.decimals)} of mint {mint_pk} "
        f"from {identity.pubkey} to {recipient_pk}"
    )
    instructions = []
    if await rpc.get_account_info(str(destination)) is None:
        client.echo(f"Creating token account {destination} for recipient")
        instructions.append(
            build_create_ata_idempotent_instruction(identity.public_key, recipient_pk, mint_pk, token_program)
        )
    instructions.append(
        build_transfer_checked_instruction(
            source,
            mint_pk,
            destination,
            identity.public_key,
            base_units,
            mint_info.decimals,
            token_program,
        )
    )

    result = await submit_with_retry(
        rpc,
        TxDraft.from_instructions(instructions, identity.public_key),
        [identity.keypair],
        operation_name="transfer_token",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )
    result.address = str(destination)
    return result
