"""
Solana Wingman - on-chain actions for Solana

Provides atomic operations for:
- SOL / SPL token balances and transfers
- Devnet/testnet airdrops
- Token mint and associated account management
- Jupiter swaps
- Program deployment via the Solana CLI
- Transaction lookup

Every transaction goes through one submission pipeline: fresh blockhash,
sign, send, confirm against the block-height deadline, retry on
recoverable failures.
"""

from .client import WingmanClient
from .types import (
    Network,
    Token,
    TxResult,
    TxStatus,
    QuoteResult,
    SwapResult,
    DeployResult,
    TransactionDetails,
    BalanceReport,
)
from .errors import (
    WingmanError,
    ErrorCode,
    RpcError,
    TransactionError,
    InvalidAmount,
    InvalidAddress,
    IdentityNotFound,
    IdentityCorrupt,
)
from .actions import (
    check_balance,
    request_airdrop,
    transfer_sol,
    transfer_token,
    create_mint,
    create_token_account,
    mint_tokens,
    swap,
    deploy_program,
    fetch_transaction,
)

__all__ = [
    # Client
    "WingmanClient",
    # Types
    "Network",
    "Token",
    "TxResult",
    "TxStatus",
    "QuoteResult",
    "SwapResult",
    "DeployResult",
    "TransactionDetails",
    "BalanceReport",
    # Errors
    "WingmanError",
    "ErrorCode",
    "RpcError",
    "TransactionError",
    "InvalidAmount",
    "InvalidAddress",
    "IdentityNotFound",
    "IdentityCorrupt",
    # Actions
    "check_balance",
    "request_airdrop",
    "transfer_sol",
    "transfer_token",
    "create_mint",
    "create_token_account",
    "mint_tokens",
    "swap",
    "deploy_program",
    "fetch_transaction",
]

__version__ = "0.1.0"
