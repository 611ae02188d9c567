"""
Transaction builder and sender

Every attempt follows the same protocol:
- fetch a fresh blockhash and its lastValidBlockHeight
- compile the draft against it and sign
- send the signed bytes once
- poll signature status until confirmed, failed on-chain, or the
  block height passes lastValidBlockHeight

An expired transaction is never resent. A retry compiles a new message
against a new blockhash.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from solders.errors import SignerError as SoldersSignerError
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from .rpc import RpcClient
from .retry import classify_error, execute_with_retry
from ..types import TxResult, TxStatus, commitment_reached
from ..errors import (
    ErrorCode,
    WingmanError,
    AggregatorError,
    RpcError,
    TransactionError,
    ExecutionFailed,
    TransactionExpired,
)
from ..config import config as global_config

logger = logging.getLogger(__name__)


@dataclass
class TxDraft:
    """
    Unsigned, unanchored transaction

    Either an ordered instruction list with a fee payer, or a message
    received prebuilt (e.g. from the swap aggregator). The blockhash is
    supplied at compile time so each attempt gets its own anchor.
    """
    instructions: List[Instruction] = field(default_factory=list)
    payer: Optional[Pubkey] = None
    prebuilt: Optional[Union[Message, MessageV0]] = None

    @classmethod
    def from_instructions(cls, instructions: Sequence[Instruction], payer: Pubkey) -> "TxDraft":
        return cls(instructions=list(instructions), payer=payer)

    @classmethod
    def from_prebuilt(cls, tx_bytes: bytes) -> "TxDraft":
        """Wrap a serialized transaction; its own blockhash is replaced on compile"""
        try:
            tx = VersionedTransaction.from_bytes(tx_bytes)
        except ValueError as e:
            raise AggregatorError(
                f"Swap transaction could not be deserialized: {e}",
                body=base64.b64encode(tx_bytes).decode("ascii"),
                original_error=e,
            )
        return cls(prebuilt=tx.message)

    def compile(self, blockhash: str) -> Union[Message, MessageV0]:
        recent = Hash.from_string(blockhash)

        if self.prebuilt is None:
            if self.payer is None or not self.instructions:
                raise TransactionError("Transaction draft has no payer or no instructions")
            return MessageV0.try_compile(self.payer, self.instructions, [], recent)

        message = self.prebuilt
        if isinstance(message, MessageV0):
            return MessageV0(
                message.header,
                message.account_keys,
                recent,
                message.instructions,
                message.address_table_lookups,
            )
        header = message.header
        return Message.new_with_compiled_instructions(
            header.num_required_signatures,
            header.num_readonly_signed_accounts,
            header.num_readonly_unsigned_accounts,
            message.account_keys,
            recent,
            message.instructions,
        )


DraftSource = Union[TxDraft, Callable[[int], Awaitable[TxDraft]]]


def sign_message(message: Union[Message, MessageV0], signers: Sequence[Keypair]) -> VersionedTransaction:
    """Sign with every required signer; a missing or extra key is an error"""
    try:
        return VersionedTransaction(message, list(signers))
    except (SoldersSignerError, ValueError) as e:
        required = [str(k) for k in message.account_keys[:message.header.num_required_signatures]]
        raise TransactionError(
            f"Signer set does not match required signers {required}: {e}",
            ErrorCode.TX_SEND_FAILED,
            recoverable=False,
        ) from None


def _result_from_error(error: Exception, signature: Optional[str] = None) -> TxResult:
    recoverable, code = classify_error(error)
    message = error.message if isinstance(error, WingmanError) else str(error)
    logs = []
    if isinstance(error, RpcError):
        logs = error.logs
    return TxResult.failed(
        message,
        signature=signature,
        recoverable=recoverable,
        error_code=code.value if code else None,
        logs=logs,
    )


async def confirm_signature(
    rpc: RpcClient,
    signature: str,
    last_valid_block_height: int,
    commitment: Optional[str] = None,
    poll_interval: Optional[float] = None,
    max_poll_errors: Optional[int] = None,
) -> TxResult:
    """
    Poll until the signature is confirmed, fails on-chain, or expires

    Returns:
        SUCCESS at the requested commitment,
        FAILED with raw_error for an on-chain error (not recoverable),
        EXPIRED when unseen after lastValidBlockHeight (recoverable),
        FAILED with TX_CONFIRMATION_UNKNOWN after repeated poll errors.
    """
    commitment = commitment or rpc.commitment
    poll_interval = poll_interval if poll_interval is not None else global_config.tx.poll_interval
    max_poll_errors = max_poll_errors if max_poll_errors is not None else global_config.tx.max_poll_errors

    consecutive_errors = 0
    while True:
        try:
            statuses = await rpc.get_signature_statuses([signature])
            status = statuses[0] if statuses else None

            if status is not None:
                if status.get("err") is not None:
                    err = status["err"]
                    logger.warning(f"Transaction {signature} failed on-chain: {err}")
                    failure = ExecutionFailed(signature, err)
                    return TxResult.failed(
                        failure.message,
                        signature=signature,
                        recoverable=False,
                        error_code=failure.code.value,
                        raw_error=err,
                        slot=status.get("slot"),
                    )
                if commitment_reached(status.get("confirmationStatus"), commitment):
                    logger.info(f"Transaction confirmed ({commitment}): {signature}")
                    return TxResult.success(signature, slot=status.get("slot"))
            else:
                block_height = await rpc.get_block_height()
                if block_height > last_valid_block_height:
                    logger.warning(
                        f"Transaction {signature} expired: height {block_height} > {last_valid_block_height}"
                    )
                    return TxResult.expired(signature, last_valid_block_height)

            consecutive_errors = 0

        except RpcError as e:
            consecutive_errors += 1
            logger.debug(f"Error checking transaction status ({consecutive_errors}): {e}")
            if consecutive_errors > max_poll_errors:
                return TxResult.failed(
                    f"Confirmation status unknown after {consecutive_errors} failed status checks: {e.message}",
                    signature=signature,
                    recoverable=False,
                    error_code=ErrorCode.TX_CONFIRMATION_UNKNOWN.value,
                )

        await asyncio.sleep(poll_interval)


async def submit_and_confirm(
    rpc: RpcClient,
    draft: TxDraft,
    signers: Sequence[Keypair],
    commitment: Optional[str] = None,
    skip_preflight: Optional[bool] = None,
) -> TxResult:
    """
    One attempt of anchor, sign, send, confirm

    Args:
        rpc: RPC client
        draft: Transaction draft
        signers: All required signers, fee payer first
        commitment: Commitment to confirm at (default: client's)
        skip_preflight: Skip node simulation (default from config)

    Returns:
        TxResult
    """
    skip = skip_preflight if skip_preflight is not None else global_config.tx.skip_preflight

    try:
        anchor = await rpc.get_latest_blockhash()
    except RpcError as e:
        return _result_from_error(e)

    message = draft.compile(anchor.blockhash)
    tx = sign_message(message, signers)
    signature = str(tx.signatures[0])

    try:
        await rpc.send_transaction(bytes(tx), skip_preflight=skip)
        logger.info(f"Transaction sent: {signature}")
    except RpcError as e:
        if e.code != ErrorCode.RPC_TIMEOUT:
            logger.warning(f"Send failed: {e}")
            return _result_from_error(e)
        # The node may have accepted it; find out before anything is resent
        logger.warning(f"Send timed out, checking status of {signature}")

    return await confirm_signature(
        rpc,
        signature,
        anchor.last_valid_block_height,
        commitment=commitment,
    )


async def submit_with_retry(
    rpc: RpcClient,
    build: DraftSource,
    signers: Sequence[Keypair],
    operation_name: str = "submit",
    commitment: Optional[str] = None,
    max_attempts: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> TxResult:
    """
    Submit with bounded retries for transient failures

    `build` is a TxDraft, or an async callable taking the attempt index and
    returning a fresh TxDraft (swap uses this to re-quote per attempt).
    Deterministic failures return on the first attempt.
    """
    async def attempt(index: int) -> TxResult:
        draft = build if isinstance(build, TxDraft) else await build(index)
        return await submit_and_confirm(rpc, draft, signers, commitment=commitment)

    return await execute_with_retry(
        attempt,
        operation_name,
        max_attempts=max_attempts,
        retry_delay=retry_delay,
    )


def error_for_result(result: TxResult) -> Optional[WingmanError]:
    """Exception equivalent of a non-final result, for reporting"""
    if result.is_final:
        return None
    if result.status == TxStatus.EXPIRED:
        return TransactionExpired(result.signature, message=result.error)
    if result.error_code == ErrorCode.TX_EXECUTION_FAILED.value:
        return ExecutionFailed(result.signature, result.raw_error, result.logs)

    try:
        code = ErrorCode(result.error_code)
    except ValueError:
        code = ErrorCode.TX_SEND_FAILED
    return TransactionError(
        result.error or "Transaction failed",
        code,
        signature=result.signature,
        logs=result.logs,
        recoverable=result.recoverable,
    )
