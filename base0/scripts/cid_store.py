"""
FilecoinCIDStore command-line tasks.

    python -m base0.scripts.cid_store store-cid --contract 0x... --piece-cid baga... \
        --data-cid bafy... --price 0.01 --title "..." --description "..." --piece-size 2048
    python -m base0.scripts.cid_store purchase-access --contract 0x... --content-id 1
    python -m base0.scripts.cid_store get-cid --contract 0x... --content-id 1

Transactions are signed with FILECOIN_DEPLOYER_PRIVATE_KEY (or
FILECOIN_WALLET_PRIVATE_KEY) against the configured network's RPC endpoint.

Dependencies: click, base0.boundary.chain
System role: Operator CLI for the content registry contract
"""

import asyncio
import logging

import click

from base0.boundary.chain.registry import ACCESS_EXPIRED, PURCHASE_REQUIRED, ContentRegistry
from base0.configs import get_settings
from base0.core.exceptions import Base0Exception, ContentAccessError
from base0.models.content import format_fil, parse_fil

logger = logging.getLogger(__name__)

PURCHASE_HINT = "💡 Use: python -m base0.scripts.cid_store purchase-access --contract <address> --content-id <id>"
IPFS_GATEWAYS = (
    "https://ipfs.io/ipfs/",
    "https://gateway.pinata.cloud/ipfs/",
    "https://cloudflare-ipfs.com/ipfs/",
)


def _connect(ctx: click.Context, contract: str) -> tuple[ContentRegistry, str, str]:
    """Registry, signing wallet and network name for a command."""
    obj = ctx.obj or {}
    if "registry" in obj:
        return obj["registry"], obj["wallet"], obj.get("network", "local")

    from base0.boundary.chain.web3_registry import Web3ContentRegistry

    settings = get_settings().filecoin
    private_key = settings.deployer_private_key or settings.wallet_private_key
    if not private_key:
        raise click.ClickException(
            "No signer key configured. Set FILECOIN_DEPLOYER_PRIVATE_KEY or FILECOIN_WALLET_PRIVATE_KEY."
        )
    try:
        registry = Web3ContentRegistry(settings.effective_rpc_url, contract, private_key=private_key)
    except Base0Exception as e:
        raise click.ClickException(e.message) from e
    return registry, registry.account.address, settings.network


def _print_header(action: str, network: str, contract: str) -> None:
    click.echo(f"{action} Filecoin network: {network}")
    click.echo(f"Contract: {contract}")


@click.group()
def cli() -> None:
    """Manage content on the FilecoinCIDStore contract."""


@cli.command("store-cid")
@click.option("--contract", required=True, help="The address of the FilecoinCIDStore contract")
@click.option("--piece-cid", required=True, help="The Filecoin piece CID (commP)")
@click.option("--data-cid", required=True, help="The original data CID")
@click.option("--price", required=True, help="The price in FIL for accessing this content")
@click.option("--title", required=True, help="The content title")
@click.option("--description", default="", help="The content description")
@click.option("--piece-size", type=int, required=True, help="The piece size in bytes")
@click.pass_context
def store_cid(
    ctx: click.Context,
    contract: str,
    piece_cid: str,
    data_cid: str,
    price: str,
    title: str,
    description: str,
    piece_size: int,
) -> None:
    """Store content with Filecoin piece CID and data CID."""
    registry, wallet, network = _connect(ctx, contract)
    try:
        price_atto = parse_fil(price)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--price") from e

    _print_header("Storing content on", network, contract)
    click.echo(f"Piece CID: {piece_cid}")
    click.echo(f"Data CID: {data_cid}")
    click.echo(f"Price: {price} FIL")
    click.echo(f"Title: {title}")
    click.echo(f"Using wallet: {wallet}")

    try:
        created = asyncio.run(
            registry.store_content(
                owner=wallet,
                piece_cid=piece_cid,
                data_cid=data_cid,
                price=price_atto,
                title=title,
                description=description,
                piece_size=piece_size,
            )
        )
    except Base0Exception as e:
        click.echo(f"❌ Error storing content: {e.message}", err=True)
        ctx.exit(1)

    click.echo("✅ Content stored successfully on Filecoin FVM!")
    if created.tx_hash:
        click.echo(f"Transaction hash: {created.tx_hash}")
    click.echo(f"📝 Content ID: {created.content_id}")


async def _purchase(registry: ContentRegistry, content_id: int, wallet: str) -> None:
    content = await registry.get_content_info(content_id, wallet)

    click.echo(f'📄 Content: "{content.title}"')
    click.echo(f'📝 Description: "{content.description}"')
    click.echo(f"💰 Price: {format_fil(content.price)} FIL")
    click.echo(f"👤 Owner: {content.owner}")
    click.echo(f"📦 Piece Size: {content.piece_size} bytes")
    click.echo(f"🔗 Deal ID: {content.deal_id if content.deal_id > 0 else 'No deal yet'}")
    click.echo(f"🔐 Current Access: {'Yes' if content.user_has_access else 'No'}")

    if content.owner.lower() == wallet.lower():
        click.echo("✅ You own this content!")
        return
    if content.user_has_access:
        click.echo("✅ You already have access to this content!")
        return
    if not content.is_active:
        click.echo("❌ Content is not active for purchase")
        return

    deal_active = await registry.check_deal_activation(content_id)
    click.echo(f"📊 Filecoin Deal Status: {'Active' if deal_active else 'Pending/None'}")

    fee_percentage = await registry.platform_fee_percentage()
    platform_fee = content.price * fee_percentage // 100
    click.echo(f"🏪 Platform fee: {format_fil(platform_fee)} FIL ({fee_percentage}%, included in price)")
    click.echo(f"💸 Total cost: {format_fil(content.price)} FIL")

    tx_hash = await registry.purchase_access(content_id, wallet, content.price)
    click.echo("✅ Access purchased successfully on Filecoin FVM!")
    if tx_hash:
        click.echo(f"📝 Transaction confirmed: {tx_hash}")
    click.echo("⏰ Access valid for 365 days from now")


@cli.command("purchase-access")
@click.option("--contract", required=True, help="The address of the FilecoinCIDStore contract")
@click.option("--content-id", type=int, required=True, help="The content ID to purchase access to")
@click.pass_context
def purchase_access(ctx: click.Context, contract: str, content_id: int) -> None:
    """Purchase access to content stored on Filecoin."""
    registry, wallet, network = _connect(ctx, contract)
    _print_header("Purchasing access on", network, contract)
    click.echo(f"Content ID: {content_id}")
    click.echo(f"Using wallet: {wallet}")

    try:
        asyncio.run(_purchase(registry, content_id, wallet))
    except Base0Exception as e:
        click.echo(f"❌ Error purchasing access: {e.message}", err=True)
        ctx.exit(1)


async def _get_cid(registry: ContentRegistry, content_id: int, wallet: str) -> bool:
    if not await registry.has_access(content_id, wallet):
        click.echo("❌ Access denied. You need to purchase access first.")
        click.echo(PURCHASE_HINT)
        return False

    content = await registry.get_content_info(content_id, wallet)
    click.echo(f'📄 Content: "{content.title}"')
    click.echo(f"👤 Owner: {content.owner}")

    if content.deal_id > 0:
        deal_active = await registry.check_deal_activation(content_id)
        click.echo(f"📊 Filecoin Deal Status: {'✅ Active' if deal_active else '⏳ Pending'}")
        click.echo(f"🔗 Deal ID: {content.deal_id}")
    else:
        click.echo("📊 No Filecoin deal created yet")

    data_cid = await registry.get_cid(content_id, wallet)
    click.echo("✅ Data CID retrieved successfully from Filecoin FVM!")
    click.echo(f"📂 Data CID: {data_cid}")
    click.echo("🌐 IPFS URLs:")
    for gateway in IPFS_GATEWAYS:
        click.echo(f"   - {gateway}{data_cid}")
    return True


@cli.command("get-cid")
@click.option("--contract", required=True, help="The address of the FilecoinCIDStore contract")
@click.option("--content-id", type=int, required=True, help="The content ID to retrieve the CID for")
@click.pass_context
def get_cid(ctx: click.Context, contract: str, content_id: int) -> None:
    """Retrieve data CID after purchasing access on Filecoin."""
    registry, wallet, network = _connect(ctx, contract)
    _print_header("Retrieving CID from", network, contract)
    click.echo(f"Content ID: {content_id}")
    click.echo(f"Using wallet: {wallet}")

    try:
        found = asyncio.run(_get_cid(registry, content_id, wallet))
    except ContentAccessError as e:
        click.echo(f"❌ Error retrieving CID: {e.message}", err=True)
        if e.message == PURCHASE_REQUIRED:
            click.echo("💡 You need to purchase access first!")
        elif e.message == ACCESS_EXPIRED:
            click.echo("💡 Your access has expired. Purchase again to renew!")
        click.echo(PURCHASE_HINT)
        ctx.exit(1)
    except Base0Exception as e:
        click.echo(f"❌ Error retrieving CID: {e.message}", err=True)
        ctx.exit(1)

    if not found:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
