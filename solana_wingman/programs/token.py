"""
SPL Token instruction builders

Hand-packed instructions for the classic token program and Token-2022.
Every builder takes the owning token program so Token-2022 mints work
without a separate code path.
"""

import base64
import struct
from typing import Optional

from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey

from .constants import (
    TOKEN_PROGRAM_ID,
    TOKEN_PROGRAMS,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    MINT_ACCOUNT_SIZE,
    TOKEN_IX_TRANSFER_CHECKED,
    TOKEN_IX_MINT_TO_CHECKED,
    TOKEN_IX_INITIALIZE_MINT2,
    ATA_IX_CREATE_IDEMPOTENT,
)
from ..errors import InvalidAmount, InvalidAddress, AccountNotFound
from ..types import U64_MAX, MintInfo


def check_u64(value: int, label: str = "amount") -> int:
    """Reject values that do not fit an unsigned 64-bit field"""
    if value < 0 or value > U64_MAX:
        raise InvalidAmount(f"{label} out of range for u64: {value}", value=str(value))
    return value


def get_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Pubkey:
    """
    Get associated token account address.

    Deterministic in (owner, mint, token program).
    """
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    seeds = [
        bytes(owner),
        bytes(token_program),
        bytes(mint),
    ]

    address, _ = Pubkey.find_program_address(seeds, ata_program)
    return address


def build_create_ata_idempotent_instruction(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """
    Create the owner's associated token account, or do nothing if it exists.
    """
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    system_program = Pubkey.from_string(SYSTEM_PROGRAM_ID)

    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    ata_address = get_associated_token_address(owner, mint, token_program)

    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(ata_address, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(system_program, is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
    ]

    return Instruction(ata_program, bytes([ATA_IX_CREATE_IDEMPOTENT]), accounts)


def build_initialize_mint2_instruction(
    mint: Pubkey,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Optional[Pubkey] = None,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """InitializeMint2: no rent sysvar account needed"""
    if not 0 <= decimals <= 255:
        raise InvalidAmount(f"decimals out of range: {decimals}", value=str(decimals))
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    data = struct.pack("<BB", TOKEN_IX_INITIALIZE_MINT2, decimals) + bytes(mint_authority)
    # COption<Pubkey>: one tag byte, then the key when present
    if freeze_authority is not None:
        data += bytes([1]) + bytes(freeze_authority)
    else:
        data += bytes([0])

    accounts = [AccountMeta(mint, is_signer=False, is_writable=True)]
    return Instruction(token_program, data, accounts)


def build_transfer_checked_instruction(
    source: Pubkey,
    mint: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    amount: int,
    decimals: int,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    check_u64(amount)
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    accounts = [
        AccountMeta(source, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=True, is_writable=False),
    ]
    data = struct.pack("<BQB", TOKEN_IX_TRANSFER_CHECKED, amount, decimals)
    return Instruction(token_program, data, accounts)


def build_mint_to_checked_instruction(
    mint: Pubkey,
    destination: Pubkey,
    authority: Pubkey,
    amount: int,
    decimals: int,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    check_u64(amount)
    if token_program is None:
        token_program = Pubkey.from_string(TOKEN_PROGRAM_ID)

    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
    ]
    data = struct.pack("<BQB", TOKEN_IX_MINT_TO_CHECKED, amount, decimals)
    return Instruction(token_program, data, accounts)


def _read_coption_pubkey(data: bytes, offset: int) -> Optional[str]:
    (tag,) = struct.unpack_from("<I", data, offset)
    if tag == 0:
        return None
    return str(Pubkey.from_bytes(data[offset + 4:offset + 36]))


def parse_mint_account(address: str, data: bytes, owner: str) -> MintInfo:
    """
    Decode the base mint layout:

        0   mint_authority   COption<Pubkey> (4 + 32)
        36  supply           u64
        44  decimals         u8
        45  is_initialized   bool
        46  freeze_authority COption<Pubkey> (4 + 32)
    """
    if len(data) < MINT_ACCOUNT_SIZE:
        raise InvalidAddress(f"Account {address} is not a token mint", value=address)
    (supply,) = struct.unpack_from("<Q", data, 36)
    decimals = data[44]
    return MintInfo(
        address=address,
        decimals=decimals,
        token_program=owner,
        supply=supply,
        mint_authority=_read_coption_pubkey(data, 0),
        freeze_authority=_read_coption_pubkey(data, 46),
    )


async def fetch_mint_info(rpc, mint: str) -> MintInfo:
    """
    Load a mint's decimals and owning token program from chain

    Raises:
        AccountNotFound: no account at the address
        InvalidAddress: the account is not owned by a token program
    """
    account = await rpc.get_account_info(mint, encoding="base64")
    if account is None:
        raise AccountNotFound(mint, "Mint")

    owner = account.get("owner")
    if owner not in TOKEN_PROGRAMS:
        raise InvalidAddress(f"Account {mint} is not a token mint (owner {owner})", value=mint)

    raw = account.get("data") or ["", "base64"]
    data = base64.b64decode(raw[0]) if isinstance(raw, list) else b""
    return parse_mint_account(mint, data, owner)
