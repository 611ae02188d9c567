"""
Test Errors Module

Tests for solana_wingman.errors package.
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from solana_wingman.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.INVALID_AMOUNT.value == "1001"
    assert ErrorCode.RPC_CONNECTION_FAILED.value == "3001"
    assert ErrorCode.TX_EXPIRED.value == "4003"
    assert ErrorCode.AGGREGATOR_FAILED.value == "5001"

    print("  ErrorCode: PASSED")


def test_wingman_error():
    """Test WingmanError base class"""
    from solana_wingman.errors import WingmanError, ErrorCode

    print("Testing WingmanError...")

    error = WingmanError(
        message="Test error",
        code=ErrorCode.RPC_CONNECTION_FAILED,
        recoverable=True,
    )

    # __str__ returns "[code] message" format
    assert "[3001] Test error" == str(error)
    assert error.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error.should_retry
    assert error.remedy is not None

    print("  WingmanError: PASSED")


def test_rpc_error_factories():
    """Test RpcError factory methods"""
    from solana_wingman.errors import RpcError, ErrorCode

    print("Testing RpcError...")

    error = RpcError.timeout("https://rpc.test", 30)
    assert error.code == ErrorCode.RPC_TIMEOUT
    assert error.recoverable
    assert error.details["endpoint"] == "https://rpc.test"

    error = RpcError.rate_limited("https://rpc.test")
    assert error.code == ErrorCode.RPC_RATE_LIMITED
    assert error.recoverable

    assert RpcError.http_status("https://rpc.test", 503).recoverable
    assert not RpcError.http_status("https://rpc.test", 400).recoverable

    print("  RpcError: PASSED")


def test_rpc_error_classification():
    """JSON-RPC error objects are classified by message"""
    from solana_wingman.errors import RpcError, ErrorCode

    error = RpcError.from_rpc_error("u", {"code": -32002, "message": "Blockhash not found"})
    assert error.code == ErrorCode.TX_EXPIRED
    assert error.recoverable

    error = RpcError.from_rpc_error(
        "u",
        {
            "code": -32002,
            "message": "Transaction simulation failed: Error processing Instruction 0: insufficient funds",
            "data": {"logs": ["Program log: Error: insufficient funds"]},
        },
    )
    assert error.code == ErrorCode.TX_INSUFFICIENT_FUNDS
    assert not error.recoverable
    assert error.logs == ["Program log: Error: insufficient funds"]

    error = RpcError.from_rpc_error("u", {"code": -32002, "message": "Attempt to debit an account but found no record of a prior credit. AccountNotFound"})
    assert error.code == ErrorCode.TX_ACCOUNT_NOT_FOUND
    assert not error.recoverable

    error = RpcError.from_rpc_error("u", {"code": -32005, "message": "Node is behind by 120 slots"})
    assert error.recoverable

    error = RpcError.from_rpc_error("u", {"code": -32602, "message": "Invalid params"})
    assert not error.recoverable
    assert error.logs == []


def test_transaction_errors():
    """Test transaction error subclasses"""
    from solana_wingman.errors import (
        ErrorCode,
        ExecutionFailed,
        TransactionExpired,
        TransactionNotFound,
    )

    print("Testing transaction errors...")

    raw = {"InstructionError": [0, {"Custom": 1}]}
    error = ExecutionFailed("5sig", raw, ["log line"])
    assert error.code == ErrorCode.TX_EXECUTION_FAILED
    assert not error.recoverable
    assert error.raw_error == raw
    assert error.details["signature"] == "5sig"

    error = TransactionExpired("5sig", 150)
    assert error.recoverable
    assert "150" in error.message

    error = TransactionNotFound("5sig")
    assert error.code == ErrorCode.TX_NOT_FOUND

    print("  Transaction errors: PASSED")


def test_aggregator_error():
    """Non-2xx responses keep status and body; 429/5xx gateway errors are recoverable"""
    from solana_wingman.errors import AggregatorError

    error = AggregatorError.from_response("quote", 400, '{"error":"Could not find any route"}')
    assert error.status_code == 400
    assert "Could not find any route" in error.message
    assert not error.recoverable

    assert AggregatorError.from_response("swap", 429, "slow down").recoverable
    assert AggregatorError.transport("quote", Exception("reset")).recoverable


def test_identity_corrupt_hides_secret():
    """The message names the source only"""
    from solana_wingman.errors import IdentityCorrupt, ErrorCode

    error = IdentityCorrupt("WALLET_PRIVATE_KEY", "value is not valid base58")
    assert error.code == ErrorCode.IDENTITY_CORRUPT
    assert str(error) == "[2002] Cannot decode wallet from WALLET_PRIVATE_KEY: value is not valid base58"


def test_configuration_error():
    """Test ConfigurationError factories"""
    from solana_wingman.errors import ConfigurationError, ErrorCode

    error = ConfigurationError.missing("RPC endpoint")
    assert error.code == ErrorCode.CONFIG_MISSING
    assert not error.recoverable

    error = ConfigurationError.invalid("SOLANA_NETWORK", "Unknown network: x")
    assert error.code == ErrorCode.CONFIG_INVALID
