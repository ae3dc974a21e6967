#!/usr/bin/env python3
"""CLI interface for the Squads multisig client."""

import logging
import sys
from typing import Optional

import click
from dotenv import load_dotenv
from solders.pubkey import Pubkey

from . import __version__
from .commands import multisig_create, program_config_init
from .config import DEFAULT_PROGRAM_ID, mask_api_key, resolve_rpc_endpoint
from .errors import SquadsCliError
from .formatters import format_json, format_text
from .instructions import U64_MAX
from .keys import decode_address, load_keypair
from .members import parse_members, split_member_argument
from .types import Generated, Supplied

logger = logging.getLogger(__name__)


class AddressType(click.ParamType):
    """Base58 (or 64-char hex) public key."""

    name = "address"

    def convert(self, value, param, ctx):
        if isinstance(value, Pubkey):
            return value
        try:
            return decode_address(value)
        except ValueError as e:
            self.fail(f"Error loading pubkey {value!r}: {e}", param, ctx)


ADDRESS = AddressType()
U64 = click.IntRange(0, U64_MAX)
U16 = click.IntRange(0, 2**16 - 1)

rpc_url_option = click.option(
    "--rpc-url", help="RPC endpoint URL or cluster name (localnet, devnet, testnet, mainnet)"
)
program_id_option = click.option("--program-id", type=ADDRESS, help="Squads program id")
priority_fee_option = click.option(
    "--priority-fee-lamports",
    type=U64,
    help="OPTIONAL, compute unit price in micro-lamports used to raise the transaction priority (default 5000)",
)


def _settings(ctx: click.Context, rpc_url: Optional[str], program_id: Optional[Pubkey]):
    """Subcommand options override the group-level ones."""
    if rpc_url is None:
        rpc_url = ctx.obj.get("rpc_url")
    if program_id is None:
        program_id = ctx.obj.get("program_id")
    if program_id is None:
        program_id = Pubkey.from_string(DEFAULT_PROGRAM_ID)
    endpoint = resolve_rpc_endpoint(rpc_url)

    click.echo(f"Using RPC: {mask_api_key(endpoint)}", err=True)
    click.echo(f"Program id: {program_id}", err=True)
    return endpoint, program_id


def _emit(ctx: click.Context, result) -> None:
    if ctx.obj.get("format") == "json":
        click.echo(format_json(result))
    else:
        click.echo(format_text(result))


def _fail(error: Exception) -> None:
    logger.debug("Command failed", exc_info=error)
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@rpc_url_option
@program_id_option
@click.option(
    "-f", "--format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format"
)
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx, rpc_url: Optional[str], program_id: Optional[Pubkey], format: str, verbose: bool):
    """Initialize the Squads program config and create multisig accounts."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    ctx.ensure_object(dict)
    ctx.obj.update(rpc_url=rpc_url, program_id=program_id, format=format)


@cli.command("program-config-init")
@click.option(
    "--initializer-keypair",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the private key responsible for signing the init transaction",
)
@click.option(
    "--program-config-authority",
    required=True,
    type=ADDRESS,
    help="Pubkey of the key responsible for updating the config",
)
@click.option("--treasury", required=True, type=ADDRESS, help="Pubkey of the treasury")
@click.option(
    "--multisig-creation-fee", required=True, type=U64, help="Fee for creating a multisig account"
)
@priority_fee_option
@rpc_url_option
@program_id_option
@click.pass_context
def program_config_init_command(
    ctx,
    initializer_keypair: str,
    program_config_authority: Pubkey,
    treasury: Pubkey,
    multisig_creation_fee: int,
    priority_fee_lamports: Optional[int],
    rpc_url: Optional[str],
    program_id: Optional[Pubkey],
):
    """Initializes the program config."""
    try:
        endpoint, program_id = _settings(ctx, rpc_url, program_id)
        initializer = load_keypair(initializer_keypair)
        result = program_config_init(
            endpoint,
            program_id,
            initializer=initializer,
            authority=program_config_authority,
            treasury=treasury,
            multisig_creation_fee=multisig_creation_fee,
            priority_fee=priority_fee_lamports,
        )
    except SquadsCliError as e:
        _fail(e)
    else:
        _emit(ctx, result)


@cli.command("multisig-create")
@click.option(
    "--keypair",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the private key responsible for signing the multisig creation",
)
@click.option(
    "--config-authority",
    type=ADDRESS,
    help="OPTIONAL, Pubkey of the key responsible for updating the config of the multisig",
)
@click.option("--rent-collector", type=ADDRESS, help="OPTIONAL, Pubkey of the rent collector")
@click.option(
    "-m", "--members",
    required=True,
    multiple=True,
    help="List of members, space separated. Each member is <pubkey>,<mask> (e.g. \"<pubkey>,7 <pubkey>,3\")",
)
@click.option("--threshold", required=True, type=U16, help="Approvals required to execute")
@click.option(
    "--multisig-keypair",
    type=click.Path(dir_okay=False),
    help="OPTIONAL, a private key to make the multisig address deterministic",
)
@priority_fee_option
@rpc_url_option
@program_id_option
@click.pass_context
def multisig_create_command(
    ctx,
    keypair: str,
    config_authority: Optional[Pubkey],
    rent_collector: Optional[Pubkey],
    members: tuple,
    threshold: int,
    multisig_keypair: Optional[str],
    priority_fee_lamports: Optional[int],
    rpc_url: Optional[str],
    program_id: Optional[Pubkey],
):
    """Creates a multisig account."""
    try:
        parsed_members = parse_members(split_member_argument(members))
        endpoint, program_id = _settings(ctx, rpc_url, program_id)
        creator = load_keypair(keypair)
        if multisig_keypair:
            create_key_source = Supplied(load_keypair(multisig_keypair))
        else:
            create_key_source = Generated()

        result = multisig_create(
            endpoint,
            program_id,
            creator=creator,
            members=parsed_members,
            threshold=threshold,
            create_key_source=create_key_source,
            config_authority=config_authority,
            rent_collector=rent_collector,
            priority_fee=priority_fee_lamports,
        )
    except SquadsCliError as e:
        _fail(e)
    else:
        _emit(ctx, result)


def main():
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
