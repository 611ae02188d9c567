"""
Transaction lookup
"""

import logging
from typing import List

from solders.signature import Signature

from ..client import WingmanClient
from ..errors import InvalidArgument, TransactionNotFound
from ..types import TransactionDetails, lamports_to_sol

logger = logging.getLogger(__name__)


def _decode_instructions(message: dict) -> List[dict]:
    decoded = []
    for ix in message.get("instructions", []):
        if "parsed" in ix:
            parsed = ix["parsed"]
            decoded.append({
                "program": ix.get("program"),
                "programId": ix.get("programId"),
                "type": parsed.get("type") if isinstance(parsed, dict) else None,
                "info": parsed.get("info") if isinstance(parsed, dict) else parsed,
            })
        else:
            decoded.append({
                "programId": ix.get("programId"),
                "accounts": ix.get("accounts", []),
                "data": ix.get("data"),
            })
    return decoded


def _signers(message: dict) -> List[str]:
    signers = []
    for key in message.get("accountKeys", []):
        if isinstance(key, dict) and key.get("signer"):
            signers.append(key.get("pubkey"))
    return signers


async def fetch_transaction(client: WingmanClient, signature: str) -> TransactionDetails:
    """
    Look up a transaction by signature

    Raises:
        InvalidArgument: malformed signature
        TransactionNotFound: node does not know the signature
    """
    try:
        Signature.from_string(signature.strip())
    except ValueError:
        raise InvalidArgument(f"Invalid transaction signature: {signature!r}") from None
    signature = signature.strip()

    tx = await client.rpc.get_transaction(signature)
    if tx is None:
        raise TransactionNotFound(signature)

    meta = tx.get("meta") or {}
    message = tx.get("transaction", {}).get("message", {})

    details = TransactionDetails(
        signature=signature,
        slot=tx.get("slot", 0),
        block_time=tx.get("blockTime"),
        fee=meta.get("fee", 0),
        success=meta.get("err") is None,
        error=meta.get("err"),
        compute_units=meta.get("computeUnitsConsumed"),
        signers=_signers(message),
        instructions=_decode_instructions(message),
        logs=meta.get("logMessages") or [],
    )

    client.echo(f"Signature: {details.signature}")
    client.echo(f"Slot: {details.slot}")
    client.echo(f"Block time: {details.block_time if details.block_time is not None else 'unknown'}")
    client.echo(f"Fee: {lamports_to_sol(details.fee)} SOL")
    client.echo(f"Status: {'success' if details.success else 'failed'}")
    if details.error is not None:
        client.echo(f"Error: {details.error}")
    if details.compute_units is not None:
        client.echo(f"Compute units: {details.compute_units}")
    client.echo(f"Signers: {', '.join(details.signers) or 'none'}")
    client.echo(f"Instructions ({len(details.instructions)}):")
    for index, ix in enumerate(details.instructions):
        label = ix.get("program") or ix.get("programId")
        kind = ix.get("type")
        client.echo(f"  {index}: {label}{' ' + kind if kind else ''}")
    if details.logs:
        client.echo("Logs:")
        for line in details.logs:
            client.echo(f"  {line}")
    return details
