"""
Type definitions for Solana Wingman
"""

from .amount import (
    AmountLike,
    LAMPORTS_PER_SOL,
    SOL_DECIMALS,
    U64_MAX,
    parse_display_amount,
    to_base_units,
    to_display,
    lamports_to_sol,
    sol_to_lamports,
)
from .common import (
    Network,
    COMMITMENT_ORDER,
    commitment_reached,
    parse_pubkey,
    BlockhashInfo,
    Token,
    KNOWN_TOKENS,
    WSOL_MINT,
    resolve_mint,
    MintInfo,
    TokenAccount,
    BalanceReport,
)
from .result import (
    TxStatus,
    TxResult,
    QuoteResult,
    SwapResult,
    DeployResult,
    TransactionDetails,
)

__all__ = [
    # Amount codec
    "AmountLike",
    "LAMPORTS_PER_SOL",
    "SOL_DECIMALS",
    "U64_MAX",
    "parse_display_amount",
    "to_base_units",
    "to_display",
    "lamports_to_sol",
    "sol_to_lamports",
    # Common types
    "Network",
    "COMMITMENT_ORDER",
    "commitment_reached",
    "parse_pubkey",
    "BlockhashInfo",
    "Token",
    "KNOWN_TOKENS",
    "WSOL_MINT",
    "resolve_mint",
    "MintInfo",
    "TokenAccount",
    "BalanceReport",
    # Results
    "TxStatus",
    "TxResult",
    "QuoteResult",
    "SwapResult",
    "DeployResult",
    "TransactionDetails",
]
