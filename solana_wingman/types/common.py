"""
Common type definitions
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from solders.pubkey import Pubkey

from ..errors import InvalidAddress


class Network(Enum):
    """Solana cluster"""
    MAINNET = "mainnet-beta"
    DEVNET = "devnet"
    TESTNET = "testnet"
    LOCALNET = "localnet"

    @property
    def is_production(self) -> bool:
        return self is Network.MAINNET

    @classmethod
    def parse(cls, value: str) -> "Network":
        """Accepts the cluster name; "mainnet" and "localhost" are aliases"""
        aliases = {"mainnet": "mainnet-beta", "localhost": "localnet"}
        normalized = aliases.get(value.strip().lower(), value.strip().lower())
        for network in cls:
            if network.value == normalized:
                return network
        raise ValueError(f"Unknown network: {value}")


# Commitment levels in increasing strength
COMMITMENT_ORDER: Dict[str, int] = {
    "processed": 0,
    "confirmed": 1,
    "finalized": 2,
}


def commitment_reached(status: Optional[str], required: str) -> bool:
    """True when a confirmationStatus is at least as strong as required"""
    if status is None:
        return False
    return COMMITMENT_ORDER.get(status, -1) >= COMMITMENT_ORDER.get(required, 1)


def parse_pubkey(value, label: str = "address") -> Pubkey:
    """
    Parse a base58 address into a Pubkey.

    Raises:
        InvalidAddress: if the value is not a 32-byte base58 key
    """
    if isinstance(value, Pubkey):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidAddress.for_value(str(value), label)
    try:
        return Pubkey.from_string(value.strip())
    except ValueError:
        raise InvalidAddress.for_value(value, label)


@dataclass(frozen=True)
class BlockhashInfo:
    """Freshness anchor: a recent blockhash and the last block height it is valid for"""
    blockhash: str
    last_valid_block_height: int


@dataclass(frozen=True)
class Token:
    """
    Known token

    Attributes:
        mint: Token mint address (base58)
        symbol: Token symbol (e.g., "SOL", "USDC")
        decimals: Number of decimal places
    """
    mint: str
    symbol: str
    decimals: int

    def __str__(self) -> str:
        return self.symbol


WSOL_MINT = "So11111111111111111111111111111111111111112"

# Keys are uppercase for case-insensitive lookup
KNOWN_TOKENS: Dict[str, Token] = {
    "SOL": Token(WSOL_MINT, "SOL", 9),
    "WSOL": Token(WSOL_MINT, "WSOL", 9),
    "USDC": Token("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "USDC", 6),
    "USDT": Token("Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", "USDT", 6),
    "BONK": Token("DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", "BONK", 5),
    "JUP": Token("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", "JUP", 6),
}


def resolve_mint(value: str) -> str:
    """
    Resolve a token symbol or mint address to a mint address.

    Raises:
        InvalidAddress: neither a known symbol nor a valid address
    """
    token = KNOWN_TOKENS.get(value.strip().upper())
    if token is not None:
        return token.mint
    return str(parse_pubkey(value, "mint"))


@dataclass
class MintInfo:
    """On-chain mint state needed to build token instructions"""
    address: str
    decimals: int
    token_program: str
    supply: int = 0
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None


@dataclass
class TokenAccount:
    """
    Token account balance

    Attributes:
        address: Token account address
        mint: Token mint
        amount: Raw balance in base units
        decimals: Mint decimals
        ui_amount: Display string
        program_id: Owning token program
    """
    address: str
    mint: str
    amount: int
    decimals: int
    ui_amount: str
    program_id: str = ""


@dataclass
class BalanceReport:
    """Native and token balances of one address"""
    address: str
    lamports: int
    sol: str
    token_accounts: List[TokenAccount] = field(default_factory=list)
