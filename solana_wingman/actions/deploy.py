"""
Program deployment via the Solana CLI
"""

import asyncio
import logging
import os
import subprocess
from pathlib import Path
from typing import Callable

from ..client import WingmanClient
from ..errors import ArtifactNotFound, DeployError
from ..infra import load_keypair_file
from ..types import DeployResult

logger = logging.getLogger(__name__)


def build_deploy_command(solana_cli: str, binary: str, program_keypair: str, rpc_url: str) -> list:
    return [
        solana_cli,
        "program",
        "deploy",
        binary,
        "--program-id",
        program_keypair,
        "--url",
        rpc_url,
    ]


async def deploy_program(
    client: WingmanClient,
    program_keypair_path: str,
    binary_path: str,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> DeployResult:
    """
    Deploy a compiled program binary

    The binary and program keypair are checked before the CLI is started.
    The CLI's exit code decides the outcome; there is no retry.

    Raises:
        ArtifactNotFound: binary or program keypair missing
        DeployError: CLI missing or exited non-zero
    """
    binary = Path(os.path.expanduser(binary_path))
    if not binary.is_file():
        raise ArtifactNotFound(str(binary), "Program binary")

    keypair_file = os.path.expanduser(program_keypair_path)
    program_id = str(load_keypair_file(keypair_file, "Program keypair").pubkey())
    client.echo(f"Program ID: {program_id}")

    rpc_url = client.config.network.rpc_url
    argv = build_deploy_command(client.config.deploy.solana_cli, str(binary), keypair_file, rpc_url)
    logger.info(f"Running: {' '.join(argv)}")

    try:
        completed = await asyncio.to_thread(runner, argv, capture_output=True, text=True)
    except FileNotFoundError:
        raise DeployError(f"Solana CLI not found: {argv[0]}", exit_code=127) from None

    output = (completed.stdout or "").strip()
    if output:
        client.echo(output)

    if completed.returncode != 0:
        detail = (completed.stderr or "").strip().splitlines()
        tail = detail[-1] if detail else "no error output"
        raise DeployError(
            f"Deploy failed with exit code {completed.returncode}: {tail}",
            exit_code=completed.returncode,
        )

    return DeployResult(program_id=program_id, exit_code=completed.returncode, output=output)
