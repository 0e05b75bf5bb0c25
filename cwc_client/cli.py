"""
CLI interface for the CWC client.

Commands:
    deliver       — Build and deliver a message from a JSON params file
    offices       — List offices currently accepting messages
    check-office  — Check whether an office code is supported
    topics        — List Library of Congress topic codes
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import click

from cwc_client import __version__


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="cwc")
@click.option("--config", "config_path", default=None, help="JSON client config file.")
@click.option("--host", default=None, help="CWC API host (overrides config and CWC_HOST).")
@click.option("--api-key", default=None, help="CWC API key (overrides config and CWC_API_KEY).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    host: Optional[str],
    api_key: Optional[str],
    verbose: bool,
) -> None:
    """Communicating with Congress — deliver constituent messages to House offices."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = {
        key: value
        for key, value in (("host", host), ("api_key", api_key))
        if value
    }


# ---------------------------------------------------------------------------
# deliver
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("params_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Print the XML document without sending.")
@click.pass_context
def deliver(ctx: click.Context, params_file: str, dry_run: bool) -> None:
    """Build a message from PARAMS_FILE and deliver it."""
    from cwc_client.errors import BadRequest, MissingParameter
    from cwc_client.topic_codes import is_topic_code

    try:
        params = json.loads(Path(params_file).read_text(encoding="utf-8"))
    except ValueError as e:
        raise click.ClickException(f"Invalid params file {params_file}: {e}")
    if not isinstance(params, dict):
        raise click.ClickException(f"Params file {params_file} must contain a JSON object.")

    with _make_client(ctx) as client:
        try:
            message = client.create_message(params)
        except MissingParameter as e:
            raise click.ClickException(str(e))

        topics = message.message.get("library_of_congress_topics", [])
        if isinstance(topics, str):
            topics = [topics]
        for topic in topics:
            if not is_topic_code(topic):
                click.echo(f"Warning: unknown topic code '{topic}'", err=True)

        if dry_run:
            click.echo(message.to_xml().decode("utf-8"))
            return

        try:
            client.deliver(message)
        except BadRequest as e:
            click.echo(f"Delivery rejected ({len(e.errors)} errors):", err=True)
            for error in e.errors:
                click.echo(f"  - {error}", err=True)
            ctx.exit(1)

    click.echo(f"Delivered message {message.delivery_id} to {message.recipient.get('member_office')}")


# ---------------------------------------------------------------------------
# offices
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--state", "-s", default=None, help="Filter by two-letter state abbreviation.")
@click.pass_context
def offices(ctx: click.Context, state: Optional[str]) -> None:
    """List offices currently accepting messages."""
    with _make_client(ctx) as client:
        office_list = client.offices()

    if state:
        office_list = [o for o in office_list if o.state == state.upper()]

    if not office_list:
        click.echo("No offices found.")
        return

    click.echo(f"Offices ({len(office_list)}):")
    for office in office_list:
        click.echo(f"  {office.code}")


# ---------------------------------------------------------------------------
# check-office
# ---------------------------------------------------------------------------

@cli.command(name="check-office")
@click.argument("office_code")
@click.pass_context
def check_office(ctx: click.Context, office_code: str) -> None:
    """Check whether OFFICE_CODE accepts messages."""
    with _make_client(ctx) as client:
        supported = client.office_supported(office_code)

    if supported:
        click.echo(f"{office_code}: supported")
    else:
        click.echo(f"{office_code}: not supported")
        ctx.exit(1)


# ---------------------------------------------------------------------------
# topics
# ---------------------------------------------------------------------------

@cli.command()
def topics() -> None:
    """List Library of Congress topic codes."""
    from cwc_client.topic_codes import TOPIC_CODES

    for topic in TOPIC_CODES:
        click.echo(topic)


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _make_client(ctx: click.Context):
    from cwc_client.client import Client
    from cwc_client.config import config_from_env, load_client_config
    from cwc_client.errors import MissingConfiguration

    options: dict = {}
    if ctx.obj.get("config_path"):
        try:
            options.update(load_client_config(ctx.obj["config_path"]))
        except FileNotFoundError as e:
            raise click.ClickException(str(e))
    options.update(config_from_env())
    options.update(ctx.obj.get("overrides", {}))

    try:
        return Client(options)
    except MissingConfiguration as e:
        raise click.ClickException(str(e))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
