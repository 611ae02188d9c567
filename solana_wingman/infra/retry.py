"""
Retry Logic Helper Module

Async retry loop for on-chain submissions, with error classification and
structured logging carrying a correlation ID per command.
"""

import asyncio
import logging
import uuid
import contextvars
from typing import Awaitable, Callable, Optional, Tuple

from ..types import TxResult
from ..errors import ErrorCode, WingmanError
from ..config import config as global_config

logger = logging.getLogger(__name__)

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for transaction tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("transfer") as cid:
            result = await execute_with_retry(...)
    """

    def __init__(self, prefix: Optional[str] = None):
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


def _log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_attempts: Optional[int] = None,
    **extra
):
    """Log message prefixed with correlation ID, operation and attempt"""
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    if attempt is not None and max_attempts is not None:
        parts.append(f"[{attempt}/{max_attempts}]")
    parts.append(message)

    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        "attempt": attempt,
        "max_attempts": max_attempts,
        **extra
    }

    logger.log(level, " ".join(parts), extra=extra_context)


# Transient conditions: rebuilding against a fresh blockhash may succeed
RECOVERABLE_KEYWORDS = [
    "timeout", "timed out", "connection", "network", "rate limit",
    "blockhash not found", "block height exceeded", "expired",
    "too many requests", "429", "503", "502", "504",
    "temporarily unavailable", "service unavailable",
    "econnreset", "etimedout", "socket hang up",
]

# Deterministic conditions: the same request will fail again
DETERMINISTIC_KEYWORDS = [
    "insufficient funds", "insufficient lamports", "accountnotfound",
    "could not find account", "owner does not match", "invalid account data",
    "custom program error", "invalid instruction", "instructionerror",
    "signature verification failed",
]


def classify_error(error: Exception) -> Tuple[bool, Optional[ErrorCode]]:
    """
    Classify an error to determine if it's worth retrying.

    Classified WingmanError values are trusted as-is; anything else is
    classified by keyword, deterministic keywords taking precedence.

    Returns:
        Tuple of (is_recoverable, error_code)
    """
    if isinstance(error, WingmanError):
        return error.recoverable, error.code

    error_str = str(error).lower()

    if any(keyword in error_str for keyword in DETERMINISTIC_KEYWORDS):
        if "insufficient" in error_str:
            return False, ErrorCode.TX_INSUFFICIENT_FUNDS
        if "accountnotfound" in error_str or "could not find account" in error_str:
            return False, ErrorCode.TX_ACCOUNT_NOT_FOUND
        return False, ErrorCode.TX_EXECUTION_FAILED

    if not any(keyword in error_str for keyword in RECOVERABLE_KEYWORDS):
        return False, None

    if "blockhash" in error_str or "block height" in error_str or "expired" in error_str:
        return True, ErrorCode.TX_EXPIRED
    if "timeout" in error_str or "timed out" in error_str:
        return True, ErrorCode.RPC_TIMEOUT
    if "rate limit" in error_str or "too many requests" in error_str or "429" in error_str:
        return True, ErrorCode.RPC_RATE_LIMITED
    if any(kw in error_str for kw in ["connection", "network", "socket", "econnreset"]):
        return True, ErrorCode.RPC_CONNECTION_FAILED
    return True, ErrorCode.RPC_REQUEST_FAILED


async def execute_with_retry(
    operation: Callable[[int], Awaitable[TxResult]],
    operation_name: str,
    max_attempts: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> TxResult:
    """
    Run an async operation, retrying recoverable failures.

    The operation receives the attempt index (0-based) so it can rebuild
    per-attempt state such as a fresh quote. Pauses grow linearly:
    retry_delay * 1, retry_delay * 2, ...

    Args:
        operation: async callable taking the attempt index, returning TxResult
        operation_name: Name for logging purposes
        max_attempts: Total attempts (default config.tx.max_attempts)
        retry_delay: Base delay in seconds (default config.tx.retry_delay)

    Returns:
        The first final TxResult, or the last one once attempts run out.
        Non-recoverable WingmanError raised by the operation propagates.
    """
    max_attempts = max_attempts if max_attempts is not None else global_config.tx.max_attempts
    retry_delay = retry_delay if retry_delay is not None else global_config.tx.retry_delay
    max_attempts = max(1, max_attempts)

    result: Optional[TxResult] = None
    for attempt in range(max_attempts):
        is_last = attempt == max_attempts - 1
        try:
            result = await operation(attempt)
        except WingmanError as e:
            if not e.recoverable or is_last:
                _log_with_correlation(
                    logging.ERROR,
                    f"Failed: {e}",
                    operation_name,
                    attempt + 1,
                    max_attempts,
                    error_type="fatal" if not e.recoverable else "exhausted",
                )
                if not e.recoverable:
                    raise
                return TxResult.failed(
                    e.message,
                    recoverable=True,
                    error_code=e.code.value,
                    attempts=attempt + 1,
                    logs=list(e.details.get("logs") or []),
                )
            _log_with_correlation(
                logging.WARNING,
                f"Recoverable error: {e}",
                operation_name,
                attempt + 1,
                max_attempts,
                error_type="recoverable",
            )
            await asyncio.sleep(retry_delay * (attempt + 1))
            continue

        result.attempts = attempt + 1

        if result.is_final:
            if attempt > 0:
                _log_with_correlation(
                    logging.INFO,
                    f"Succeeded after {attempt + 1} attempts",
                    operation_name,
                    attempt + 1,
                    max_attempts,
                    signature=result.signature,
                )
            return result

        if result.recoverable and not is_last:
            _log_with_correlation(
                logging.WARNING,
                f"Recoverable error: {result.error}",
                operation_name,
                attempt + 1,
                max_attempts,
                signature=result.signature,
            )
            await asyncio.sleep(retry_delay * (attempt + 1))
            continue

        # Non-recoverable error or attempts exhausted
        if result.recoverable:
            _log_with_correlation(
                logging.ERROR,
                f"Giving up after {max_attempts} attempts: {result.error}",
                operation_name,
                attempt + 1,
                max_attempts,
            )
        return result

    return result
