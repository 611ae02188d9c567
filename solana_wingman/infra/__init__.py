"""
Infrastructure layer: RPC, connection, identity, submission, retry
"""

from .rpc import RpcClient
from .connection import get_connection, create_connection, close_connection
from .identity import Identity, resolve_identity, load_keypair_file, keypair_from_base58
from .retry import (
    CorrelationContext,
    classify_error,
    execute_with_retry,
    generate_correlation_id,
    get_correlation_id,
)
from .tx_builder import (
    TxDraft,
    sign_message,
    submit_and_confirm,
    confirm_signature,
    submit_with_retry,
    error_for_result,
)

__all__ = [
    "RpcClient",
    "get_connection",
    "create_connection",
    "close_connection",
    "Identity",
    "resolve_identity",
    "load_keypair_file",
    "keypair_from_base58",
    "CorrelationContext",
    "classify_error",
    "execute_with_retry",
    "generate_correlation_id",
    "get_correlation_id",
    "TxDraft",
    "sign_message",
    "submit_and_confirm",
    "confirm_signature",
    "submit_with_retry",
    "error_for_result",
]
