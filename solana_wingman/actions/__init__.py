"""
Action orchestrators

Each action is an async function taking a WingmanClient.
"""

from .balance import check_balance
from .airdrop import request_airdrop
from .transfer import transfer_sol, transfer_token
from .token import create_mint, create_token_account, mint_tokens
from .swap import swap, check_quote
from .deploy import deploy_program
from .fetch_tx import fetch_transaction

__all__ = [
    "check_balance",
    "request_airdrop",
    "transfer_sol",
    "transfer_token",
    "create_mint",
    "create_token_account",
    "mint_tokens",
    "swap",
    "check_quote",
    "deploy_program",
    "fetch_transaction",
]
