"""
Balance query (read-only, never signs)
"""

import logging
from typing import List, Optional

from ..client import WingmanClient
from ..programs import TOKEN_PROGRAMS
from ..types import BalanceReport, TokenAccount, lamports_to_sol, parse_pubkey

logger = logging.getLogger(__name__)


def _parse_token_account(entry: dict, program_id: str) -> Optional[TokenAccount]:
    """Decode a jsonParsed getTokenAccountsByOwner entry"""
    data = entry.get("account", {}).get("data", {})
    parsed = data.get("parsed") if isinstance(data, dict) else None
    if not parsed:
        return None
    info = parsed.get("info", {})
    token_amount = info.get("tokenAmount", {})
    decimals = int(token_amount.get("decimals", 0))
    return TokenAccount(
        address=entry.get("pubkey", ""),
        mint=info.get("mint", ""),
        amount=int(token_amount.get("amount", 0)),
        decimals=decimals,
        ui_amount=token_amount.get("uiAmountString") or "0",
        program_id=program_id,
    )


async def check_balance(client: WingmanClient, address: Optional[str] = None) -> BalanceReport:
    """
    Native and token balances of an address

    Args:
        client: WingmanClient
        address: Address to query (default: the wallet's public key)
    """
    owner = str(parse_pubkey(address)) if address else client.identity.pubkey
    rpc = client.rpc

    lamports = await rpc.get_balance(owner)

    token_accounts: List[TokenAccount] = []
    for program_id in TOKEN_PROGRAMS:
        entries = await rpc.get_token_accounts_by_owner(owner, program_id=program_id)
        for entry in entries:
            account = _parse_token_account(entry, program_id)
            if account is not None:
                token_accounts.append(account)

    report = BalanceReport(
        address=owner,
        lamports=lamports,
        sol=lamports_to_sol(lamports),
        token_accounts=token_accounts,
    )
    logger.debug(f"Balance of {owner}: {report.sol} SOL, {len(token_accounts)} token accounts")

    client.echo(f"Address: {owner}")
    client.echo(f"SOL: {report.sol}")
    if token_accounts:
        client.echo(f"Token accounts ({len(token_accounts)}):")
        for account in token_accounts:
            client.echo(f"  {account.mint}  {account.ui_amount}  (account {account.address}, decimals {account.decimals})")
    else:
        client.echo("Token accounts: none")
    return report
