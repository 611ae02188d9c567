"""
Test doubles for RPC, config and chain data
"""

import base64
import struct
from unittest.mock import AsyncMock

from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from solana_wingman.client import WingmanClient
from solana_wingman.config import (
    Config,
    NetworkConfig,
    RpcConfig,
    SignerConfig,
    TxConfig,
    JupiterConfig,
    TradingConfig,
    DeployConfig,
    LoggingConfig,
)
from solana_wingman.infra import Identity
from solana_wingman.programs import TOKEN_PROGRAM_ID, build_transfer_instruction
from solana_wingman.types import BlockhashInfo

BLOCKHASH = str(Hash.default())
LAST_VALID_BLOCK_HEIGHT = 150


def confirmed(slot: int = 42, status: str = "confirmed") -> dict:
    return {"slot": slot, "confirmations": 1, "err": None, "confirmationStatus": status}


def make_config(network: str = "devnet") -> Config:
    """Config with no retry or poll delays and no wallet sources"""
    return Config(
        network=NetworkConfig(network=network, custom_rpc_url="", commitment="confirmed"),
        rpc=RpcConfig(timeout_seconds=5.0),
        signer=SignerConfig(private_key="", keypair_path=""),
        tx=TxConfig(max_attempts=3, retry_delay=0.0, poll_interval=0.0, max_poll_errors=2, skip_preflight=False),
        jupiter=JupiterConfig(base_url="https://jupiter.test/v6", timeout=5.0),
        trading=TradingConfig(default_slippage_bps=50, large_transfer_sol=10.0, price_impact_warn_pct=1.0),
        deploy=DeployConfig(solana_cli="solana"),
        logging=LoggingConfig(log_file="", log_level="WARNING", console_output=False),
    )


class FakeRpc:
    """
    Scripted RpcClient

    Every method is an AsyncMock; by default a sent transaction confirms
    on the first status poll.
    """

    endpoint = "http://rpc.test"

    def __init__(self, commitment: str = "confirmed"):
        self.commitment = commitment
        self.get_latest_blockhash = AsyncMock(
            return_value=BlockhashInfo(BLOCKHASH, LAST_VALID_BLOCK_HEIGHT)
        )
        self.send_transaction = AsyncMock(return_value="sent")
        self.get_signature_statuses = AsyncMock(return_value=[confirmed()])
        self.get_block_height = AsyncMock(return_value=100)
        self.get_account_info = AsyncMock(return_value=None)
        self.get_balance = AsyncMock(return_value=0)
        self.get_minimum_balance_for_rent_exemption = AsyncMock(return_value=1_461_600)
        self.request_airdrop = AsyncMock(return_value="airdrop-signature")
        self.get_token_accounts_by_owner = AsyncMock(return_value=[])
        self.get_transaction = AsyncMock(return_value=None)
        self.close = AsyncMock()


def make_client(rpc=None, network: str = "devnet", identity=None, jupiter=None, echo=None):
    lines = []
    client = WingmanClient(
        rpc=rpc or FakeRpc(),
        identity=identity or Identity(Keypair(), source="test"),
        config=make_config(network),
        echo=echo or lines.append,
        jupiter=jupiter,
    )
    client.lines = lines
    return client


def mint_account_data(
    decimals: int = 6,
    supply: int = 0,
    mint_authority: Pubkey = None,
    freeze_authority: Pubkey = None,
) -> bytes:
    """Raw 82-byte mint account"""
    def coption(key):
        if key is None:
            return struct.pack("<I", 0) + bytes(32)
        return struct.pack("<I", 1) + bytes(key)

    return (
        coption(mint_authority)
        + struct.pack("<Q", supply)
        + bytes([decimals, 1])
        + coption(freeze_authority)
    )


def mint_account(decimals: int = 6, owner: str = TOKEN_PROGRAM_ID) -> dict:
    """getAccountInfo value for a mint"""
    data = base64.b64encode(mint_account_data(decimals)).decode("ascii")
    return {
        "data": [data, "base64"],
        "executable": False,
        "lamports": 1_461_600,
        "owner": owner,
        "rentEpoch": 0,
    }


def prebuilt_swap_transaction(payer: Pubkey) -> bytes:
    """Unsigned serialized v0 transaction paid by `payer`, as an aggregator returns it"""
    ix = build_transfer_instruction(payer, Keypair().pubkey(), 1_000)
    message = MessageV0.try_compile(payer, [ix], [], Hash.default())
    tx = VersionedTransaction.populate(message, [Signature.default()])
    return bytes(tx)
