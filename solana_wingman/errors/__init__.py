"""
Error definitions for Solana Wingman
"""

from .exceptions import (
    ErrorCode,
    REMEDIES,
    WingmanError,
    InvalidAmount,
    InvalidAddress,
    InvalidArgument,
    AccountNotFound,
    IdentityNotFound,
    IdentityCorrupt,
    RpcError,
    TransactionError,
    ExecutionFailed,
    TransactionExpired,
    TransactionNotFound,
    AggregatorError,
    QuoteMismatch,
    DeployError,
    ArtifactNotFound,
    UnsupportedNetwork,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "REMEDIES",
    "WingmanError",
    "InvalidAmount",
    "InvalidAddress",
    "InvalidArgument",
    "AccountNotFound",
    "IdentityNotFound",
    "IdentityCorrupt",
    "RpcError",
    "TransactionError",
    "ExecutionFailed",
    "TransactionExpired",
    "TransactionNotFound",
    "AggregatorError",
    "QuoteMismatch",
    "DeployError",
    "ArtifactNotFound",
    "UnsupportedNetwork",
    "ConfigurationError",
]
