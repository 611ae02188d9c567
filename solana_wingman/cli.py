"""
Solana Wingman CLI

Commands are declared as typed descriptors; every positional argument is
parsed and validated by argparse before any network call is made.

Exit codes: 0 success, 1 action failed, 2 usage error.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from .actions import (
    check_balance,
    request_airdrop,
    transfer_sol,
    transfer_token,
    create_mint,
    create_token_account,
    mint_tokens,
    swap,
    deploy_program,
    fetch_transaction,
)
from .client import WingmanClient
from .config import config as global_config, setup_logging
from .errors import WingmanError
from .infra import CorrelationContext, close_connection, error_for_result
from .types import (
    BalanceReport,
    DeployResult,
    SwapResult,
    TransactionDetails,
    TxResult,
    parse_display_amount,
    parse_pubkey,
    resolve_mint,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _validator(parse: Callable[[str], Any], label: str) -> Callable[[str], str]:
    """Wrap a domain parser as an argparse type; the original text is kept"""
    def check(text: str) -> str:
        try:
            parse(text)
        except WingmanError as e:
            raise argparse.ArgumentTypeError(e.message)
        return text.strip()
    check.__name__ = label
    return check


amount_arg = _validator(parse_display_amount, "amount")
address_arg = _validator(parse_pubkey, "address")
mint_arg = _validator(resolve_mint, "mint")


def decimals_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"decimals must be an integer: {text!r}")
    if not 0 <= value <= 255:
        raise argparse.ArgumentTypeError(f"decimals must be between 0 and 255: {value}")
    return value


def slippage_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"slippage must be an integer number of bps: {text!r}")
    if not 0 <= value <= 10_000:
        raise argparse.ArgumentTypeError(f"slippage must be between 0 and 10000 bps: {value}")
    return value


def path_arg(text: str) -> str:
    if not text.strip():
        raise argparse.ArgumentTypeError("path must not be empty")
    return text


@dataclass(frozen=True)
class Argument:
    """Positional argument; optional ones take `default` when omitted"""
    name: str
    type: Callable[[str], Any]
    help: str
    required: bool = True
    default: Any = None


@dataclass(frozen=True)
class Flag:
    """Boolean switch (store_true)"""
    flag: str
    dest: str
    help: str


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    handler: Callable[[WingmanClient, argparse.Namespace], Awaitable[Any]]
    arguments: Tuple[Argument, ...] = ()
    flags: Tuple[Flag, ...] = ()
    success: str = ""


async def cmd_balance(client, args):
    return await check_balance(client, args.address)


async def cmd_airdrop(client, args):
    return await request_airdrop(client, args.amount, args.address)


async def cmd_transfer_sol(client, args):
    return await transfer_sol(client, args.recipient, args.amount)


async def cmd_transfer_token(client, args):
    return await transfer_token(client, args.mint, args.recipient, args.amount)


async def cmd_create_mint(client, args):
    return await create_mint(client, args.decimals, freeze_authority=not args.no_freeze_authority)


async def cmd_create_account(client, args):
    return await create_token_account(client, args.mint, args.owner)


async def cmd_mint_to(client, args):
    return await mint_tokens(client, args.mint, args.recipient, args.amount)


async def cmd_swap(client, args):
    return await swap(client, args.input_mint, args.output_mint, args.amount, args.slippage_bps)


async def cmd_deploy(client, args):
    return await deploy_program(client, args.program_keypair, args.binary)


async def cmd_fetch_tx(client, args):
    return await fetch_transaction(client, args.signature)


COMMANDS: List[Command] = [
    Command(
        "balance",
        "Show SOL and token balances",
        cmd_balance,
        (Argument("address", address_arg, "Address to query (default: wallet)", required=False),),
    ),
    Command(
        "airdrop",
        "Request test SOL (devnet/testnet/localnet only)",
        cmd_airdrop,
        (
            Argument("amount", amount_arg, "Amount in SOL (default: 2)", required=False, default="2"),
            Argument("address", address_arg, "Recipient (default: wallet)", required=False),
        ),
        success="Airdropped {amount} SOL to {address}",
    ),
    Command(
        "transfer-sol",
        "Send SOL",
        cmd_transfer_sol,
        (
            Argument("recipient", address_arg, "Recipient address"),
            Argument("amount", amount_arg, "Amount in SOL"),
        ),
        success="Transferred {amount} SOL to {recipient}",
    ),
    Command(
        "transfer-token",
        "Send SPL tokens",
        cmd_transfer_token,
        (
            Argument("mint", address_arg, "Token mint"),
            Argument("recipient", address_arg, "Recipient wallet address"),
            Argument("amount", amount_arg, "Amount in token units"),
        ),
        success="Transferred {amount} tokens of {mint} to {recipient}",
    ),
    Command(
        "create-mint",
        "Create a new token mint",
        cmd_create_mint,
        (Argument("decimals", decimals_arg, "Decimal places (default: 9)", required=False, default=9),),
        (Flag("--no-freeze-authority", "no_freeze_authority", "Create the mint without a freeze authority"),),
        success="Created mint {address}",
    ),
    Command(
        "create-account",
        "Get or create an associated token account",
        cmd_create_account,
        (
            Argument("mint", address_arg, "Token mint"),
            Argument("owner", address_arg, "Account owner (default: wallet)", required=False),
        ),
        success="Token account {address}",
    ),
    Command(
        "mint-to",
        "Mint tokens to a wallet",
        cmd_mint_to,
        (
            Argument("mint", address_arg, "Token mint"),
            Argument("recipient", address_arg, "Recipient wallet address"),
            Argument("amount", amount_arg, "Amount in token units"),
        ),
        success="Minted {amount} tokens of {mint} to {recipient}",
    ),
    Command(
        "swap",
        "Swap tokens through Jupiter",
        cmd_swap,
        (
            Argument("input_mint", mint_arg, "Input mint or symbol (SOL, USDC, ...)"),
            Argument("output_mint", mint_arg, "Output mint or symbol"),
            Argument("amount", amount_arg, "Amount of the input token"),
            Argument("slippage_bps", slippage_arg, "Slippage in bps (default: 50)", required=False),
        ),
        success="Swapped {amount} {input_mint} for {output_mint}",
    ),
    Command(
        "deploy",
        "Deploy a compiled program with the Solana CLI",
        cmd_deploy,
        (
            Argument("program_keypair", path_arg, "Program keypair file"),
            Argument("binary", path_arg, "Compiled program (.so)"),
        ),
        success="Deployed program {program_id}",
    ),
    Command(
        "fetch-tx",
        "Show a transaction",
        cmd_fetch_tx,
        (Argument("signature", str, "Transaction signature"),),
    ),
]

COMMANDS_BY_NAME = {command.name: command for command in COMMANDS}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solana-wingman",
        description="On-chain actions for Solana",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for command in COMMANDS:
        p = sub.add_parser(command.name, help=command.help, description=command.help)
        for argument in command.arguments:
            kwargs = {"type": argument.type, "help": argument.help}
            if not argument.required:
                kwargs["nargs"] = "?"
                kwargs["default"] = argument.default
            p.add_argument(argument.name, **kwargs)
        for flag in command.flags:
            p.add_argument(flag.flag, dest=flag.dest, action="store_true", help=flag.help)

    return parser


def explorer_url(signature: str, network: str) -> str:
    url = f"https://explorer.solana.com/tx/{signature}"
    if network == "mainnet-beta":
        return url
    if network == "localnet":
        return f"{url}?cluster=custom"
    return f"{url}?cluster={network}"


def _print_failure(action: str, error: WingmanError):
    print(f"✗ {action} failed: {error}", file=sys.stderr)
    signature = error.details.get("signature") if error.details else None
    if signature:
        print(f"  Signature: {signature}", file=sys.stderr)
    if error.remedy:
        print(f"  Hint: {error.remedy}", file=sys.stderr)


def report(command: Command, args: argparse.Namespace, outcome: Any, network: str) -> int:
    """Print the final line(s) for an outcome; returns the exit code"""
    if isinstance(outcome, SwapResult):
        outcome = outcome.tx_result

    if isinstance(outcome, TxResult):
        if not outcome.is_final:
            _print_failure(command.name, error_for_result(outcome))
            return EXIT_FAILED
        values = dict(vars(args))
        values["address"] = outcome.address or values.get("address") or ""
        summary = command.success.format(**values) if command.success else command.name
        if outcome.is_skipped:
            print(f"✓ {summary} (already exists)")
            return EXIT_OK
        print(f"✓ {summary}")
        print(f"  Signature: {outcome.signature}")
        print(f"  Explorer: {explorer_url(outcome.signature, network)}")
        return EXIT_OK

    if isinstance(outcome, DeployResult):
        print(f"✓ {command.success.format(program_id=outcome.program_id)}")
        return EXIT_OK

    if isinstance(outcome, (BalanceReport, TransactionDetails)):
        return EXIT_OK

    print(f"✓ {command.name}")
    return EXIT_OK


async def run_command(
    command: Command,
    args: argparse.Namespace,
    client: Optional[WingmanClient] = None,
) -> int:
    owns_client = client is None
    if client is None:
        client = WingmanClient(echo=print)

    with CorrelationContext(command.name.replace("-", "_")):
        try:
            outcome = await command.handler(client, args)
        except WingmanError as e:
            logger.debug(f"{command.name} failed: {e!r}")
            _print_failure(command.name, e)
            return EXIT_FAILED
        finally:
            if owns_client:
                await client.close()
                await close_connection()

    return report(command, args, outcome, client.config.network.network)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(global_config.logging)
    command = COMMANDS_BY_NAME[args.command]
    return asyncio.run(run_command(command, args))


if __name__ == "__main__":
    sys.exit(main())
