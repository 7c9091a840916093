#!/usr/bin/env python3
"""
HiveBridge Operator CLI

Lets committee members compute the digest of a governed operation and sign
it off-chain. The printed signatures are what callers pass to the bridge.

Usage:
    hivebridge-operator address [--key KEY]
    hivebridge-operator [--contract ADDR] [--chain-id N] wrap CALLER AMOUNT TRX_ID OP_IN_TRX [--key KEY]
    hivebridge-operator [...] add-signer ADDRESS USERNAME NONCE [--key KEY]
    hivebridge-operator [...] remove-signer ADDRESS NONCE [--key KEY]
    hivebridge-operator [...] update-threshold NEW_THRESHOLD NONCE [--key KEY]
    hivebridge-operator [...] pause NONCE [--key KEY]
    hivebridge-operator [...] unpause NONCE [--key KEY]
    hivebridge-operator recover DIGEST SIGNATURE

The private key may also come from the HIVEBRIDGE_OPERATOR_KEY environment
variable so it does not end up in shell history.
"""

import json
from pathlib import Path
from typing import Optional

import click
from eth_utils import decode_hex

from .. import __version__
from ..config import load_config
from ..crypto import PrivateKey, recover_signer, sign_digest
from ..exceptions import HiveBridgeException
from ..logger import configure_logging
from ..multisig.messages import MessageDomain


def key_option(func):
    return click.option(
        "--key", "-k",
        envvar="HIVEBRIDGE_OPERATOR_KEY",
        default=None,
        help="Operator private key (hex). Defaults to $HIVEBRIDGE_OPERATOR_KEY",
    )(func)


def load_key(key: Optional[str]) -> Optional[PrivateKey]:
    if not key:
        return None
    try:
        return PrivateKey.from_hex(key)
    except HiveBridgeException as e:
        raise click.ClickException(str(e))


def emit_result(ctx: click.Context, operation: str, digest: bytes, key: Optional[str]) -> None:
    """Print the digest and, when a key is given, the operator's signature."""
    private_key = load_key(key)
    result = {"operation": operation, "digest": "0x" + digest.hex()}
    if private_key is not None:
        result["signer"] = private_key.address
        result["signature"] = "0x" + sign_digest(private_key, digest).hex()

    if ctx.obj.get("as_json"):
        click.echo(json.dumps(result))
        return
    for k, v in result.items():
        click.echo(f"{k + ':':<11}{v}")


def get_domain(ctx: click.Context) -> MessageDomain:
    contract = ctx.obj.get("contract")
    if not contract:
        raise click.UsageError(
            "Contract address required (--contract, HIVEBRIDGE_CONTRACT_ADDRESS or bridge.toml)"
        )
    try:
        return MessageDomain(contract, ctx.obj.get("chain_id"))
    except (HiveBridgeException, ValueError) as e:
        raise click.ClickException(str(e))


def build_digest(ctx: click.Context, builder: str, *args) -> bytes:
    domain = get_domain(ctx)
    try:
        return getattr(domain, builder)(*args)
    except (HiveBridgeException, ValueError, TypeError) as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="hivebridge-operator")
@click.option("--config", "-c", "config_path", default=None, help="Path to bridge.toml")
@click.option("--contract", default=None, help="Bridge contract address")
@click.option("--chain-id", type=int, default=None, help="Chain id appended to messages")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], contract: Optional[str],
        chain_id: Optional[int], as_json: bool):
    """HiveBridge operator tools.

    Compute and sign governed-operation digests for the bridge committee.
    """
    cfg = load_config(config_path)
    configure_logging(
        log_level=cfg.logging.level,
        log_file=Path(cfg.logging.file) if cfg.logging.file else None,
        console_output=cfg.logging.console,
        file_output=True if cfg.logging.file else None,
    )
    ctx.ensure_object(dict)
    ctx.obj["contract"] = contract or cfg.committee.contract_address
    ctx.obj["chain_id"] = chain_id if chain_id is not None else cfg.committee.chain_id
    ctx.obj["as_json"] = as_json


@cli.command("address")
@key_option
def address_cmd(key: Optional[str]):
    """Print the signer address of an operator key."""
    private_key = load_key(key)
    if private_key is None:
        raise click.UsageError("A private key is required (--key or HIVEBRIDGE_OPERATOR_KEY)")
    click.echo(private_key.address)


@cli.command("wrap")
@click.argument("caller")
@click.argument("amount", type=int)
@click.argument("trx_id")
@click.argument("op_in_trx", type=int)
@key_option
@click.pass_context
def wrap_cmd(ctx, caller, amount, trx_id, op_in_trx, key):
    """Digest for minting AMOUNT to CALLER for Hive operation TRX_ID:OP_IN_TRX.

    Examples:

        hivebridge-operator --contract 0x5FbD... wrap 0x7099... 5000 abc123 0
    """
    digest = build_digest(ctx, "wrap_digest", caller, amount, trx_id, op_in_trx)
    emit_result(ctx, "wrap", digest, key)


@cli.command("add-signer")
@click.argument("address")
@click.argument("username")
@click.argument("nonce", type=int)
@key_option
@click.pass_context
def add_signer_cmd(ctx, address, username, nonce, key):
    """Digest for registering ADDRESS as signer USERNAME."""
    digest = build_digest(ctx, "add_signer_digest", address, username, nonce)
    emit_result(ctx, "addSigner", digest, key)


@cli.command("remove-signer")
@click.argument("address")
@click.argument("nonce", type=int)
@key_option
@click.pass_context
def remove_signer_cmd(ctx, address, nonce, key):
    """Digest for removing signer ADDRESS."""
    digest = build_digest(ctx, "remove_signer_digest", address, nonce)
    emit_result(ctx, "removeSigner", digest, key)


@cli.command("update-threshold")
@click.argument("new_threshold", type=int)
@click.argument("nonce", type=int)
@key_option
@click.pass_context
def update_threshold_cmd(ctx, new_threshold, nonce, key):
    """Digest for changing the multisig threshold to NEW_THRESHOLD."""
    digest = build_digest(ctx, "update_threshold_digest", new_threshold, nonce)
    emit_result(ctx, "updateMultisigThreshold", digest, key)


@cli.command("pause")
@click.argument("nonce", type=int)
@key_option
@click.pass_context
def pause_cmd(ctx, nonce, key):
    """Digest for pausing the bridge."""
    digest = build_digest(ctx, "pause_digest", nonce)
    emit_result(ctx, "pause", digest, key)


@cli.command("unpause")
@click.argument("nonce", type=int)
@key_option
@click.pass_context
def unpause_cmd(ctx, nonce, key):
    """Digest for unpausing the bridge."""
    digest = build_digest(ctx, "unpause_digest", nonce)
    emit_result(ctx, "unpause", digest, key)


@cli.command("recover")
@click.argument("digest")
@click.argument("signature")
def recover_cmd(digest: str, signature: str):
    """Print the address that produced SIGNATURE over DIGEST."""
    try:
        click.echo(recover_signer(decode_hex(digest), decode_hex(signature)))
    except (HiveBridgeException, ValueError) as e:
        raise click.ClickException(str(e))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
