"""
Shared connection handle

One RpcClient per process, created on first use from the configured
endpoint and commitment. Concurrent first access may construct more than
one client; the first one stored wins and the others are discarded.
"""

import logging
from typing import Optional

from .rpc import RpcClient
from ..config import config as global_config

logger = logging.getLogger(__name__)

_shared: Optional[RpcClient] = None


def create_connection(url: Optional[str] = None, commitment: Optional[str] = None) -> RpcClient:
    """Create an independent client (defaults from config)"""
    return RpcClient(
        url or global_config.network.rpc_url,
        commitment=commitment or global_config.network.commitment,
    )


def get_connection() -> RpcClient:
    """Return the process-wide client, creating it on first use"""
    global _shared
    if _shared is not None:
        return _shared

    candidate = create_connection()
    # A client built by a racing caller may already be stored; keep that one
    if _shared is None:
        _shared = candidate
        logger.debug(f"Connection created: {candidate.endpoint} ({candidate.commitment})")
    return _shared


async def close_connection():
    """Close and forget the shared client"""
    global _shared
    client, _shared = _shared, None
    if client is not None:
        await client.close()
