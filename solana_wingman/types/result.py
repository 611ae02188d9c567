"""
Result type definitions for transactions and quotes
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional


class TxStatus(Enum):
    """Transaction status"""
    SUCCESS = "success"
    FAILED = "failed"
    EXPIRED = "expired"
    PENDING = "pending"
    SKIPPED = "skipped"  # No action needed (e.g., account already exists)


@dataclass
class TxResult:
    """
    Transaction execution result

    Attributes:
        status: Transaction status
        signature: Transaction signature (base58)
        error: Error message if failed
        recoverable: Whether the error is recoverable (can retry)
        error_code: Error code for programmatic handling
        raw_error: On-chain error payload when execution failed
        attempts: Number of submission attempts made
        address: Account created or affected, when relevant
        slot: Slot number when confirmed
        logs: Transaction logs
    """
    status: TxStatus
    signature: Optional[str] = None
    error: Optional[str] = None
    recoverable: bool = False
    error_code: Optional[str] = None
    raw_error: Any = None
    attempts: int = 1
    address: Optional[str] = None
    slot: Optional[int] = None
    logs: List[str] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @property
    def is_expired(self) -> bool:
        return self.status == TxStatus.EXPIRED

    @property
    def is_skipped(self) -> bool:
        return self.status == TxStatus.SKIPPED

    @property
    def is_final(self) -> bool:
        """Success or skipped; nothing left to do"""
        return self.status in (TxStatus.SUCCESS, TxStatus.SKIPPED)

    @classmethod
    def success(cls, signature: str, **kwargs) -> "TxResult":
        """Create successful result"""
        return cls(
            status=TxStatus.SUCCESS,
            signature=signature,
            **kwargs
        )

    @classmethod
    def failed(cls, error: str, signature: str = None, **kwargs) -> "TxResult":
        """Create failed result"""
        return cls(
            status=TxStatus.FAILED,
            signature=signature,
            error=error,
            **kwargs
        )

    @classmethod
    def expired(cls, signature: str = None, last_valid_block_height: int = None, **kwargs) -> "TxResult":
        """Create expired result (recoverable by rebuilding against a new blockhash)"""
        return cls(
            status=TxStatus.EXPIRED,
            signature=signature,
            error=f"Transaction expired: block height exceeded {last_valid_block_height}",
            recoverable=True,
            error_code="4003",
            **kwargs
        )

    @classmethod
    def skipped(cls, reason: str = "No action needed", **kwargs) -> "TxResult":
        """Create skipped result (no transaction was needed)"""
        return cls(
            status=TxStatus.SKIPPED,
            signature=None,
            error=reason,
            **kwargs
        )

    def __str__(self) -> str:
        if self.is_success:
            sig_display = f"{self.signature[:16]}..." if self.signature else "no signature"
            return f"TxResult(SUCCESS, {sig_display})"
        return f"TxResult({self.status.value}, error={self.error})"


@dataclass
class QuoteResult:
    """
    Swap quote result

    Attributes:
        from_token: Input token mint
        to_token: Output token mint
        from_amount: Input amount (raw)
        to_amount: Output amount (raw)
        price_impact: Price impact as decimal (0.01 = 1%)
        route: Swap route (DEX labels)
        min_to_amount: Minimum output after slippage
        slippage_bps: Applied slippage in basis points
        raw_response: Raw API response, forwarded verbatim to the build request
    """
    from_token: str
    to_token: str
    from_amount: int
    to_amount: int
    price_impact: Decimal = Decimal(0)
    route: List[str] = field(default_factory=list)
    min_to_amount: Optional[int] = None
    slippage_bps: int = 50
    raw_response: Optional[dict] = None

    @property
    def price_impact_percent(self) -> float:
        """Price impact as percentage"""
        return float(self.price_impact * 100)

    def __str__(self) -> str:
        return f"Quote({self.from_amount} -> {self.to_amount}, impact={self.price_impact_percent:.2f}%)"


@dataclass
class SwapResult:
    """Outcome of a swap: the submission result plus the quote it executed"""
    tx_result: TxResult
    quote: Optional[QuoteResult] = None

    @property
    def is_success(self) -> bool:
        return self.tx_result.is_success


@dataclass
class DeployResult:
    """Outcome of running the external deploy utility"""
    program_id: str
    exit_code: int
    output: str = ""

    @property
    def is_success(self) -> bool:
        return self.exit_code == 0


@dataclass
class TransactionDetails:
    """Decoded view of a confirmed transaction"""
    signature: str
    slot: int
    block_time: Optional[int]
    fee: int
    success: bool
    error: Any = None
    compute_units: Optional[int] = None
    signers: List[str] = field(default_factory=list)
    instructions: List[dict] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
