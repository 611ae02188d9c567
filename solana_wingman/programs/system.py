"""
System program instruction builders
"""

import struct

from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey

from .constants import SYSTEM_PROGRAM_ID, SYSTEM_IX_CREATE_ACCOUNT, SYSTEM_IX_TRANSFER
from .token import check_u64


def build_transfer_instruction(sender: Pubkey, recipient: Pubkey, lamports: int) -> Instruction:
    """Native SOL transfer"""
    check_u64(lamports, "lamports")
    accounts = [
        AccountMeta(sender, is_signer=True, is_writable=True),
        AccountMeta(recipient, is_signer=False, is_writable=True),
    ]
    data = struct.pack("<IQ", SYSTEM_IX_TRANSFER, lamports)
    return Instruction(Pubkey.from_string(SYSTEM_PROGRAM_ID), data, accounts)


def build_create_account_instruction(
    payer: Pubkey,
    new_account: Pubkey,
    lamports: int,
    space: int,
    owner: Pubkey,
) -> Instruction:
    """
    Allocate a new account owned by `owner`.

    Both payer and new_account must sign.
    """
    check_u64(lamports, "lamports")
    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(new_account, is_signer=True, is_writable=True),
    ]
    data = struct.pack("<IQQ", SYSTEM_IX_CREATE_ACCOUNT, lamports, space) + bytes(owner)
    return Instruction(Pubkey.from_string(SYSTEM_PROGRAM_ID), data, accounts)
