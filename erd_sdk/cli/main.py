"""
erd_sdk.cli.main
================

`erd-sdk` — command-line access to the address codec, contract address
derivation and a proxy node.

Examples
--------
    $ erd-sdk version
    $ erd-sdk address decode erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th
    $ erd-sdk address shard erd1qyu5... --num-shards 3
    $ erd-sdk contract-address erd1qyu5... 0
    $ erd-sdk --proxy https://gateway.example network-config
    $ erd-sdk account erd1qyu5...
    $ erd-sdk wait 5c3b...e1

Configuration
-------------
- Proxy URL    : `--proxy` or env `ERD_PROXY_URL` (default: http://localhost:7950)
- HTTP Timeout : `--timeout` or env `ERD_TIMEOUT` seconds (default: 10.0)
- Shards       : `--num-shards` or env `ERD_NUM_SHARDS` (default: 3)
"""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from ..address import address_to_hex, hex_to_address, shard_of
from ..config import SDKConfig
from ..contracts.deployer import compute_deployed_address
from ..errors import ErdSdkError
from ..log import configure_logging
from ..provider.proxy import ProxyProvider
from ..version import __version__ as SDK_VERSION

T = TypeVar("T")

app = typer.Typer(
    name="erd-sdk",
    help="erd-sdk CLI: encode addresses, derive contract addresses and query a proxy node.",
    no_args_is_help=True,
    add_completion=False,
)
address_app = typer.Typer(help="Bech32 address helpers", no_args_is_help=True)
app.add_typer(address_app, name="address")

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    config: SDKConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


@app.callback()
def _root(
    ctx: typer.Context,
    proxy: Optional[str] = typer.Option(None, "--proxy", help="Proxy node URL.", envvar="ERD_PROXY_URL"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds.", envvar="ERD_TIMEOUT"),
    num_shards: Optional[int] = typer.Option(None, "--num-shards", help="Number of shards.", envvar="ERD_NUM_SHARDS"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level.", envvar="ERD_LOG_LEVEL"),
) -> None:
    """Resolve effective configuration for this CLI process."""
    try:
        cfg = SDKConfig.with_overrides(
            None,
            proxy_url=proxy,
            request_timeout=timeout,
            num_shards=num_shards,
            log_level=log_level,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    configure_logging(cfg.log_level)
    ctx.obj = Ctx(config=cfg)


def _run_with_provider(ctx: typer.Context, fn: Callable[[ProxyProvider], Awaitable[T]]) -> T:
    cfg: SDKConfig = ctx.obj.config

    async def _go() -> T:
        async with ProxyProvider(config=cfg) as provider:
            return await fn(provider)

    return asyncio.run(_go())


# --- Offline commands ---------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"erd-sdk {SDK_VERSION}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    data = ctx.obj.config.to_dict()
    data["sdk_version"] = SDK_VERSION
    _print_json(data)


@address_app.command("encode")
def address_encode(
    ctx: typer.Context,
    pubkey_hex: str = typer.Argument(..., help="32-byte public key as hex"),
) -> None:
    """Hex public key -> bech32 address."""
    try:
        typer.echo(hex_to_address(pubkey_hex, ctx.obj.config.hrp))
    except ErdSdkError as e:
        raise typer.BadParameter(str(e)) from e


@address_app.command("decode")
def address_decode(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="bech32 address"),
) -> None:
    """Bech32 address -> hex public key."""
    try:
        typer.echo(address_to_hex(address, ctx.obj.config.hrp))
    except ErdSdkError as e:
        raise typer.BadParameter(str(e)) from e


@address_app.command("shard")
def address_shard(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="bech32 address"),
) -> None:
    """Shard an address belongs to (-1 is the metachain)."""
    cfg: SDKConfig = ctx.obj.config
    try:
        typer.echo(str(shard_of(address, cfg.num_shards, cfg.hrp)))
    except ErdSdkError as e:
        raise typer.BadParameter(str(e)) from e


@app.command("contract-address")
def contract_address(
    deployer: str = typer.Argument(..., help="Deployer bech32 address"),
    nonce: int = typer.Argument(..., min=0, help="Nonce of the deploy transaction"),
) -> None:
    """Address a contract deployed by DEPLOYER at NONCE will get."""
    try:
        typer.echo(compute_deployed_address(deployer, nonce))
    except ErdSdkError as e:
        raise typer.BadParameter(str(e)) from e


# --- Node commands ------------------------------------------------------------


@app.command("network-config")
def network_config(ctx: typer.Context) -> None:
    """Fetch and print the network configuration."""
    cfg = _run_with_provider(ctx, lambda p: p.get_network_config())
    _print_json(cfg.to_node_dict())


@app.command("account")
def account(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="bech32 address"),
) -> None:
    """Fetch balance, nonce and code of an account."""
    acc = _run_with_provider(ctx, lambda p: p.get_address(address))
    _print_json(acc.to_node_dict())


@app.command("tx")
def tx(
    ctx: typer.Context,
    tx_hash: str = typer.Argument(..., help="Transaction hash"),
) -> None:
    """Look up a transaction by hash."""
    on_chain = _run_with_provider(ctx, lambda p: p.get_transaction(tx_hash))
    _print_json(
        {
            "hash": on_chain.hash,
            "status": on_chain.status.name.lower(),
            "raw_status": on_chain.raw_status,
            "smart_contract_errors": list(on_chain.smart_contract_errors),
            "transaction": dict(on_chain.raw),
        }
    )


@app.command("wait")
def wait(
    ctx: typer.Context,
    tx_hash: str = typer.Argument(..., help="Transaction hash"),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds between polls.", envvar="ERD_POLL_INTERVAL"
    ),
) -> None:
    """Poll a transaction until it succeeds or fails."""
    receipt = _run_with_provider(ctx, lambda p: p.wait_for_transaction(tx_hash, poll_interval=poll_interval))
    typer.echo(f"{receipt.hash} {receipt.status.name.lower()}")


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        app(prog_name="erd-sdk", standalone_mode=False, args=argv)
        return 0
    except typer.Exit as e:
        return int(e.exit_code)
    except typer.Abort:
        return 1
    except (ErdSdkError, ValueError) as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
