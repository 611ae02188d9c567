"""
Exception definitions for Solana Wingman
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for on-chain actions

    1xxx - Input errors
    2xxx - Identity errors
    3xxx - RPC errors
    4xxx - Transaction errors
    5xxx - External service errors (aggregator, deploy utility)
    6xxx - Network policy errors
    9xxx - Configuration errors
    """
    # Input errors (never recoverable)
    INVALID_AMOUNT = "1001"
    INVALID_ADDRESS = "1002"
    INVALID_ARGUMENT = "1003"

    # Identity errors
    IDENTITY_NOT_FOUND = "2001"
    IDENTITY_CORRUPT = "2002"

    # RPC errors
    RPC_CONNECTION_FAILED = "3001"
    RPC_TIMEOUT = "3002"
    RPC_RATE_LIMITED = "3003"
    RPC_INVALID_RESPONSE = "3004"
    RPC_REQUEST_FAILED = "3005"

    # Transaction errors
    TX_SEND_FAILED = "4001"
    TX_EXECUTION_FAILED = "4002"
    TX_EXPIRED = "4003"
    TX_INSUFFICIENT_FUNDS = "4004"
    TX_ACCOUNT_NOT_FOUND = "4005"
    TX_CONFIRMATION_UNKNOWN = "4006"
    TX_NOT_FOUND = "4007"

    # External services
    AGGREGATOR_FAILED = "5001"
    QUOTE_MISMATCH = "5002"
    DEPLOY_FAILED = "5003"
    ARTIFACT_NOT_FOUND = "5004"

    # Network policy
    UNSUPPORTED_NETWORK = "6001"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


# Remedy hints shown by the CLI next to a failure line
REMEDIES = {
    ErrorCode.INVALID_AMOUNT: "Amounts must be non-negative decimal numbers, e.g. 1.5",
    ErrorCode.INVALID_ADDRESS: "Addresses are base58 encoded 32-byte public keys",
    ErrorCode.IDENTITY_NOT_FOUND: "Set WALLET_PRIVATE_KEY or point WALLET_PATH at a keypair file",
    ErrorCode.IDENTITY_CORRUPT: "Check that the wallet secret is a base58 key or a JSON array of 64 bytes",
    ErrorCode.RPC_RATE_LIMITED: "Wait a moment or configure a dedicated SOLANA_RPC_URL",
    ErrorCode.RPC_CONNECTION_FAILED: "Check SOLANA_RPC_URL and your network connection",
    ErrorCode.TX_INSUFFICIENT_FUNDS: "Check the balance, or request funds with `airdrop` on a test network",
    ErrorCode.TX_ACCOUNT_NOT_FOUND: "Create the token account first with `create-account`",
    ErrorCode.TX_EXPIRED: "The network was congested; run the command again",
    ErrorCode.TX_CONFIRMATION_UNKNOWN: "Look the signature up with `fetch-tx` before retrying",
    ErrorCode.UNSUPPORTED_NETWORK: "Set SOLANA_NETWORK=devnet (or testnet/localnet)",
    ErrorCode.ARTIFACT_NOT_FOUND: "Did you run `anchor build` or `cargo build-sbf`?",
}


class WingmanError(Exception):
    """
    Base exception for all Solana Wingman errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable

    @property
    def remedy(self) -> Optional[str]:
        """Short corrective hint for the user, if one is known"""
        return REMEDIES.get(self.code)


class InvalidAmount(WingmanError):
    """Amount is negative, non-finite, malformed or out of range"""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_AMOUNT,
            recoverable=False,
            details={"value": value},
        )
        self.value = value


class InvalidAddress(WingmanError):
    """Address is not a valid base58 public key"""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_ADDRESS,
            recoverable=False,
            details={"value": value},
        )
        self.value = value

    @classmethod
    def for_value(cls, value: str, label: str = "address") -> "InvalidAddress":
        return cls(f"Invalid {label}: {value!r} is not a base58 public key", value=value)


class InvalidArgument(WingmanError):
    """Any other argument that fails validation before network use"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_ARGUMENT, recoverable=False)


class AccountNotFound(WingmanError):
    """A required on-chain account (e.g. a mint) does not exist"""

    def __init__(self, address: str, label: str = "Account"):
        super().__init__(
            f"{label} not found: {address}",
            ErrorCode.TX_ACCOUNT_NOT_FOUND,
            recoverable=False,
            details={"address": address},
        )
        self.address = address


class IdentityNotFound(WingmanError):
    """
    No signing identity available

    Raised when neither the environment secret nor the key file exists.
    """

    def __init__(self, message: str, keypair_path: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.IDENTITY_NOT_FOUND,
            recoverable=False,
            details={"keypair_path": keypair_path},
        )
        self.keypair_path = keypair_path


class IdentityCorrupt(WingmanError):
    """
    Identity source is present but cannot be decoded

    The message names the source only. Secret material is never included.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Cannot decode wallet from {source}: {reason}",
            ErrorCode.IDENTITY_CORRUPT,
            recoverable=False,
            details={"source": source},
        )
        self.source = source


class RpcError(WingmanError):
    """
    RPC-related errors

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - The node answers with a JSON-RPC error object
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
        recoverable: bool = True,
        details: Optional[dict] = None,
    ):
        merged = {"endpoint": endpoint} if endpoint else {}
        merged.update(details or {})
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details=merged,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )

    @classmethod
    def http_status(cls, endpoint: str, status_code: int) -> "RpcError":
        return cls(
            f"HTTP error {status_code}",
            ErrorCode.RPC_REQUEST_FAILED,
            endpoint=endpoint,
            recoverable=status_code in (502, 503, 504),
            details={"status_code": status_code},
        )

    @classmethod
    def from_rpc_error(cls, endpoint: str, error: dict) -> "RpcError":
        """
        Build from a JSON-RPC error object.

        Deterministic failures reported by preflight (insufficient funds,
        missing account, bad instruction) are not recoverable; stale
        blockhash and node-side overload are.
        """
        message = error.get("message", str(error))
        lowered = message.lower()
        code = ErrorCode.RPC_REQUEST_FAILED
        recoverable = False
        if "blockhash not found" in lowered or "block height exceeded" in lowered:
            code = ErrorCode.TX_EXPIRED
            recoverable = True
        elif "insufficient funds" in lowered or "insufficient lamports" in lowered:
            code = ErrorCode.TX_INSUFFICIENT_FUNDS
        elif "accountnotfound" in lowered.replace(" ", "") or "could not find account" in lowered:
            code = ErrorCode.TX_ACCOUNT_NOT_FOUND
        elif "rate limit" in lowered or "too many requests" in lowered:
            code = ErrorCode.RPC_RATE_LIMITED
            recoverable = True
        elif "node is behind" in lowered or "unhealthy" in lowered:
            recoverable = True
        return cls(
            f"RPC error: {message}",
            code,
            endpoint=endpoint,
            recoverable=recoverable,
            details={
                "rpc_error_code": error.get("code"),
                "rpc_error_data": error.get("data"),
            },
        )

    @property
    def logs(self) -> list:
        """Program logs attached to a failed preflight, if any"""
        data = self.details.get("rpc_error_data")
        if isinstance(data, dict):
            return data.get("logs") or []
        return []


class TransactionError(WingmanError):
    """
    Transaction submission errors

    Raised when:
    - Transaction send fails
    - Transaction executed and failed on-chain
    - Freshness window expired before confirmation
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        signature: Optional[str] = None,
        logs: Optional[list] = None,
        recoverable: bool = False,
        details: Optional[dict] = None,
    ):
        merged = {"signature": signature, "logs": logs}
        merged.update(details or {})
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            details=merged,
        )
        self.signature = signature
        self.logs = logs or []


class ExecutionFailed(TransactionError):
    """Transaction landed and an instruction failed; fees were charged"""

    def __init__(self, signature: str, raw_error, logs: Optional[list] = None):
        super().__init__(
            f"Transaction failed on-chain: {raw_error}",
            ErrorCode.TX_EXECUTION_FAILED,
            signature=signature,
            logs=logs,
            recoverable=False,
            details={"raw_error": raw_error},
        )
        self.raw_error = raw_error


class TransactionExpired(TransactionError):
    """Freshness anchor expired before the transaction was confirmed"""

    def __init__(
        self,
        signature: Optional[str],
        last_valid_block_height: Optional[int] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Transaction expired: block height exceeded {last_valid_block_height}",
            ErrorCode.TX_EXPIRED,
            signature=signature,
            recoverable=True,
            details={"last_valid_block_height": last_valid_block_height},
        )
        self.last_valid_block_height = last_valid_block_height


class TransactionNotFound(TransactionError):
    """Signature is unknown to the node"""

    def __init__(self, signature: str):
        super().__init__(
            f"Transaction not found: {signature}",
            ErrorCode.TX_NOT_FOUND,
            signature=signature,
            recoverable=False,
        )


class AggregatorError(WingmanError):
    """
    Swap aggregator request failed

    Non-2xx responses carry the status code and response body.
    """

    RECOVERABLE_STATUS = (429, 502, 503, 504)

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            ErrorCode.AGGREGATOR_FAILED,
            recoverable=recoverable,
            original_error=original_error,
            details={"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, stage: str, status_code: int, body: str) -> "AggregatorError":
        return cls(
            f"Jupiter {stage} failed with HTTP {status_code}: {body}",
            status_code=status_code,
            body=body,
            recoverable=status_code in cls.RECOVERABLE_STATUS,
        )

    @classmethod
    def transport(cls, stage: str, error: Exception) -> "AggregatorError":
        return cls(
            f"Jupiter {stage} request failed: {error}",
            recoverable=True,
            original_error=error,
        )


class QuoteMismatch(WingmanError):
    """Quote does not match the requested mints or amount"""

    def __init__(self, field_name: str, expected, actual):
        super().__init__(
            f"Quote {field_name} mismatch: requested {expected}, got {actual}",
            ErrorCode.QUOTE_MISMATCH,
            recoverable=False,
            details={"field": field_name, "expected": str(expected), "actual": str(actual)},
        )


class DeployError(WingmanError):
    """External deploy utility exited non-zero or could not be started"""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(
            message,
            ErrorCode.DEPLOY_FAILED,
            recoverable=False,
            details={"exit_code": exit_code},
        )
        self.exit_code = exit_code


class ArtifactNotFound(WingmanError):
    """Program binary or program keypair file is missing"""

    def __init__(self, path: str, label: str = "Program binary"):
        super().__init__(
            f"{label} not found: {path}",
            ErrorCode.ARTIFACT_NOT_FOUND,
            recoverable=False,
            details={"path": path},
        )
        self.path = path


class UnsupportedNetwork(WingmanError):
    """Action is not available on the configured network"""

    def __init__(self, action: str, network: str):
        super().__init__(
            f"{action} is not available on {network}",
            ErrorCode.UNSUPPORTED_NETWORK,
            recoverable=False,
            details={"action": action, "network": network},
        )
        self.network = network


class ConfigurationError(WingmanError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
