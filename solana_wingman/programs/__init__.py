"""
On-chain program instruction builders
"""

from .constants import (
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_PROGRAMS,
    MINT_ACCOUNT_SIZE,
)
from .token import (
    check_u64,
    get_associated_token_address,
    build_create_ata_idempotent_instruction,
    build_initialize_mint2_instruction,
    build_transfer_checked_instruction,
    build_mint_to_checked_instruction,
    parse_mint_account,
    fetch_mint_info,
)
from .system import (
    build_transfer_instruction,
    build_create_account_instruction,
)

__all__ = [
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "TOKEN_2022_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "TOKEN_PROGRAMS",
    "MINT_ACCOUNT_SIZE",
    "check_u64",
    "get_associated_token_address",
    "build_create_ata_idempotent_instruction",
    "build_initialize_mint2_instruction",
    "build_transfer_checked_instruction",
    "build_mint_to_checked_instruction",
    "parse_mint_account",
    "fetch_mint_info",
    "build_transfer_instruction",
    "build_create_account_instruction",
]
