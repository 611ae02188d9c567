"""
Wallet identity resolution

Sources, in order:
1. WALLET_PRIVATE_KEY - base58 encoded 64-byte secret key
2. WALLET_PATH - Solana CLI keypair file (JSON array of 64 bytes)

Only the public key is ever rendered; the secret stays inside the
wrapped Keypair.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..errors import IdentityNotFound, IdentityCorrupt, ArtifactNotFound
from ..config import config as global_config

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64


class Identity:
    """
    Signing identity

    Usage:
        identity = resolve_identity()
        print(identity.pubkey)
    """

    __slots__ = ("_keypair", "source")

    def __init__(self, keypair: Keypair, source: str = "keypair"):
        self._keypair = keypair
        self.source = source

    @property
    def pubkey(self) -> str:
        """Public key as base58 string"""
        return str(self._keypair.pubkey())

    @property
    def public_key(self) -> Pubkey:
        return self._keypair.pubkey()

    @property
    def keypair(self) -> Keypair:
        """Underlying keypair, for transaction signing only"""
        return self._keypair

    def __repr__(self) -> str:
        return f"Identity({self.pubkey}, source={self.source})"

    __str__ = __repr__


def _keypair_from_secret(secret: bytes, source: str) -> Keypair:
    if len(secret) != SECRET_KEY_LENGTH:
        raise IdentityCorrupt(source, f"expected {SECRET_KEY_LENGTH} bytes, got {len(secret)}")
    try:
        return Keypair.from_bytes(secret)
    except (ValueError, TypeError):
        raise IdentityCorrupt(source, "secret key is not a valid ed25519 keypair") from None


def keypair_from_base58(secret: str, source: str = "WALLET_PRIVATE_KEY") -> Keypair:
    """Decode a base58 secret key"""
    try:
        raw = base58.b58decode(secret.strip())
    except ValueError:
        # The decoder's message can echo input characters
        raise IdentityCorrupt(source, "value is not valid base58") from None
    return _keypair_from_secret(raw, source)


def load_keypair_file(path: str, label: str = "Keypair file") -> Keypair:
    """
    Load a Solana CLI keypair file

    Raises:
        ArtifactNotFound: file does not exist
        IdentityCorrupt: file is not a JSON array of 64 byte values
    """
    file_path = Path(os.path.expanduser(path))
    if not file_path.is_file():
        raise ArtifactNotFound(str(file_path), label)

    source = f"keypair file {file_path}"
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise IdentityCorrupt(source, "file is not valid JSON") from None

    if not isinstance(data, list):
        raise IdentityCorrupt(source, "expected a JSON array of bytes")
    try:
        secret = bytes(data)
    except (TypeError, ValueError):
        raise IdentityCorrupt(source, "array must contain integers 0-255") from None
    return _keypair_from_secret(secret, source)


def resolve_identity(
    private_key: Optional[str] = None,
    keypair_path: Optional[str] = None,
) -> Identity:
    """
    Resolve the signing identity

    Args:
        private_key: base58 secret (default: config WALLET_PRIVATE_KEY)
        keypair_path: key file path (default: config WALLET_PATH)

    Returns:
        Identity

    Raises:
        IdentityNotFound: no source is present
        IdentityCorrupt: a present source cannot be decoded
    """
    secret = private_key if private_key is not None else global_config.signer.private_key
    if secret:
        # A corrupt env secret is an error, never a fallthrough to the file
        keypair = keypair_from_base58(secret)
        identity = Identity(keypair, source="env")
        logger.debug(f"Identity resolved from environment: {identity.pubkey}")
        return identity

    path = keypair_path or global_config.signer.keypair_path
    if path:
        expanded = os.path.expanduser(path)
        if os.path.isfile(expanded):
            keypair = load_keypair_file(expanded)
            identity = Identity(keypair, source="file")
            logger.debug(f"Identity resolved from {expanded}: {identity.pubkey}")
            return identity

    raise IdentityNotFound(
        f"No wallet found: WALLET_PRIVATE_KEY is unset and no keypair file at {path or '(none)'}",
        keypair_path=path,
    )
