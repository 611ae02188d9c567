"""
Mint creation, token account creation and minting
"""

import logging
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..client import WingmanClient
from ..errors import InvalidAmount
from ..infra import TxDraft, submit_with_retry
from ..programs import (
    TOKEN_PROGRAM_ID,
    MINT_ACCOUNT_SIZE,
    build_create_account_instruction,
    build_initialize_mint2_instruction,
    build_create_ata_idempotent_instruction,
    build_mint_to_checked_instruction,
    get_associated_token_address,
    fetch_mint_info,
)
from ..types import AmountLike, TxResult, parse_display_amount, parse_pubkey, to_base_units, to_display

logger = logging.getLogger(__name__)

DEFAULT_MINT_DECIMALS = 9
MAX_MINT_DECIMALS = 255


async def create_mint(
    client: WingmanClient,
    decimals: int = DEFAULT_MINT_DECIMALS,
    freeze_authority: bool = True,
) -> TxResult:
    """
    Create a new SPL mint with the wallet as mint authority

    The wallet is also the freeze authority unless freeze_authority is
    False. The new mint address is returned in result.address.
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_MINT_DECIMALS:
        raise InvalidAmount(f"Decimals must be an integer between 0 and {MAX_MINT_DECIMALS}", value=str(decimals))

    rpc = client.rpc
    identity = client.identity
    mint_keypair = Keypair()
    mint_pk = mint_keypair.pubkey()
    token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    rent = await rpc.get_minimum_balance_for_rent_exemption(MINT_ACCOUNT_SIZE)
    instructions = [
        build_create_account_instruction(identity.public_key, mint_pk, rent, MINT_ACCOUNT_SIZE, token_program),
        build_initialize_mint2_instruction(
            mint_pk,
            decimals,
            identity.public_key,
            identity.public_key if freeze_authority else None,
            token_program,
        ),
    ]
    client.echo(f"Creating mint {mint_pk} with {decimals} decimals")

    result = await submit_with_retry(
        rpc,
        TxDraft.from_instructions(instructions, identity.public_key),
        [identity.keypair, mint_keypair],
        operation_name="create_mint",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )
    result.address = str(mint_pk)
    return result


async def create_token_account(
    client: WingmanClient,
    mint: str,
    owner: Optional[str] = None,
) -> TxResult:
    """
    Get or create the owner's associated token account for a mint

    Returns SKIPPED with the address when the account already exists.
    """
    mint_pk = parse_pubkey(mint, "mint")
    rpc = client.rpc
    identity = client.identity
    owner_pk = parse_pubkey(owner, "owner") if owner else identity.public_key

    mint_info = await fetch_mint_info(rpc, str(mint_pk))
    token_program = Pubkey.from_string(mint_info.token_program)
    ata = get_associated_token_address(owner_pk, mint_pk, token_program)

    if await rpc.get_account_info(str(ata)) is not None:
        client.echo(f"Token account already exists: {ata}")
        return TxResult.skipped("Token account already exists", address=str(ata))

    result = await submit_with_retry(
        rpc,
        TxDraft.from_instructions(
            [build_create_ata_idempotent_instruction(identity.public_key, owner_pk, mint_pk, token_program)],
            identity.public_key,
        ),
        [identity.keypair],
        operation_name="create_token_account",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )
    result.address = str(ata)
    return result


async def mint_tokens(
    client: WingmanClient,
    mint: str,
    recipient: str,
    amount: AmountLike,
) -> TxResult:
    """
    Mint tokens to the recipient's associated account

    The wallet must be the mint authority; a mismatch is reported by the
    network, not checked here. A missing recipient account is created in
    the same transaction.
    """
    mint_pk = parse_pubkey(mint, "mint")
    recipient_pk = parse_pubkey(recipient, "recipient")
    display = parse_display_amount(amount)

    rpc = client.rpc
    identity = client.identity

    mint_info = await fetch_mint_info(rpc, str(mint_pk))
    base_units = to_base_units(display, mint_info.decimals)
    if base_units <= 0:
        raise InvalidAmount(f"Amount must be greater than zero: {amount}", value=str(amount))

    token_program = Pubkey.from_string(mint_info.token_program)
    destination = get_associated_token_address(recipient_pk, mint_pk, token_program)

    client.echo(
        f"Minting {to_display(base_units, mint_info.decimals)} of mint {mint_pk} "
        f"to {recipient_pk} (authority {identity.pubkey})"
    )
    instructions = []
    if await rpc.get_account_info(str(destination)) is None:
        client.echo(f"Creating token account {destination} for recipient")
        instructions.append(
            build_create_ata_idempotent_instruction(identity.public_key, recipient_pk, mint_pk, token_program)
        )
    instructions.append(
        build_mint_to_checked_instruction(
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
        operation_name="mint_tokens",
        max_attempts=client.config.tx.max_attempts,
        retry_delay=client.config.tx.retry_delay,
    )
    result.address = str(destination)
    return result
