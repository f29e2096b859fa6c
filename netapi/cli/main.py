"""
netapi command line.

Usage:
    netapi --url https://salt:8000 -u admin -p secret run test.ping -t '*'
    netapi -u admin -p secret run cmd.run 'uptime' -t 'web*' --batch 25%
    netapi -u admin -p secret run test.ping -t 'G@os:SUSE' --expr-form compound --async
    netapi -u admin -p secret stats
    netapi event my/tag '{"foo": "bar"}'

Credentials can also come from NETAPI_USERNAME, NETAPI_PASSWORD and NETAPI_EAUTH.
"""

import dataclasses
import json
from typing import Any

import click
import structlog
from rich.console import Console

from netapi.calls.auth import AuthModule, Credentials
from netapi.calls.batch import Batch
from netapi.calls.local_call import LocalCall
from netapi.calls.ssh import SSHConfig
from netapi.calls.targets import (
    IPCIDR,
    PCRE,
    Compound,
    Glob,
    Grains,
    GrainsPCRE,
    MinionList,
    NodeGroup,
    Pillar,
    PillarPCRE,
    Range,
    Target,
)
from netapi.client.client import NetApiClient
from netapi.core.config import load_client_config
from netapi.core.exceptions import NetApiError
from netapi.core.logging import get_logger, setup_logging
from netapi.results.result import Err, Ok
from netapi.types import TypeDescriptor

logger = get_logger(__name__)
console = Console()

EXPR_FORMS = [
    "glob", "list", "grain", "grain_pcre", "pillar", "pillar_pcre",
    "pcre", "compound", "nodegroup", "range", "ipcidr",
]


def _split_pair(expression: str) -> tuple[str, str]:
    key, sep, value = expression.partition(":")
    if not sep:
        raise click.BadParameter(f"expected key:value, got {expression!r}", param_hint="--target")
    return key, value


def build_target(expression: str, expr_form: str) -> Target:
    """Map a target expression and matcher name onto a Target."""
    if expr_form == "glob":
        return Glob(expression)
    if expr_form == "list":
        return MinionList(m.strip() for m in expression.split(",") if m.strip())
    if expr_form == "grain":
        return Grains(*_split_pair(expression))
    if expr_form == "grain_pcre":
        return GrainsPCRE(*_split_pair(expression))
    if expr_form == "pillar":
        return Pillar(*_split_pair(expression))
    if expr_form == "pillar_pcre":
        return PillarPCRE(*_split_pair(expression))
    if expr_form == "pcre":
        return PCRE(expression)
    if expr_form == "compound":
        return Compound(expression)
    if expr_form == "nodegroup":
        return NodeGroup(expression)
    if expr_form == "range":
        return Range(expression)
    if expr_form == "ipcidr":
        return IPCIDR(expression)
    raise click.BadParameter(f"unknown expr_form {expr_form!r}", param_hint="--expr-form")


def _parse_arg(value: str) -> Any:
    """Arguments that are valid JSON are sent decoded, anything else as a string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


def to_jsonable(value: Any) -> Any:
    """Render decoded results as plain JSON-compatible data."""
    if isinstance(value, Ok):
        return {"ok": to_jsonable(value.value)}
    if isinstance(value, Err):
        return {"error": value.error.message, "kind": value.error.kind}
    if isinstance(value, TypeDescriptor):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def _credentials(ctx: click.Context) -> Credentials:
    obj = ctx.obj
    if not obj["username"] or not obj["password"]:
        raise click.UsageError("--username and --password are required for this command")
    return Credentials(obj["username"], obj["password"], AuthModule(obj["eauth"]))


@click.group()
@click.option("--url", envvar="NETAPI_URL", help="Salt API URL (default: api.url from client.yaml).")
@click.option("--username", "-u", envvar="NETAPI_USERNAME", help="Username for eauth.")
@click.option("--password", "-p", envvar="NETAPI_PASSWORD", help="Password for eauth.")
@click.option(
    "--eauth",
    envvar="NETAPI_EAUTH",
    default=AuthModule.AUTO.value,
    show_default=True,
    type=click.Choice([m.value for m in AuthModule]),
    help="External authentication backend.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.pass_context
def main(
    ctx: click.Context,
    url: str | None,
    username: str | None,
    password: str | None,
    eauth: str,
    verbose: bool,
    debug: bool,
) -> None:
    """netapi - run Salt execution modules through the Salt API."""
    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    ctx.ensure_object(dict)
    ctx.obj.update(url=url, username=username, password=password, eauth=eauth)


def _make_client(ctx: click.Context) -> NetApiClient:
    if "client" in ctx.obj:
        return ctx.obj["client"]
    try:
        config = load_client_config(url=ctx.obj["url"])
    except (FileNotFoundError, ValueError) as e:
        raise click.UsageError(str(e)) from e
    client = NetApiClient(config=config)
    ctx.call_on_close(client.close)
    return client


@main.command()
@click.argument("fun")
@click.argument("args", nargs=-1)
@click.option("--target", "-t", "tgt", default="*", show_default=True, help="Target expression.")
@click.option("--expr-form", "-e", default="glob", show_default=True, type=click.Choice(EXPR_FORMS))
@click.option("--kwarg", "-k", "kwargs", multiple=True, help="Keyword argument as key=value (repeatable).")
@click.option("--batch", "-b", help="Run in waves: a count (10) or a percentage (25%).")
@click.option("--async", "run_async", is_flag=True, help="Schedule as a background job and print its jid.")
@click.option("--ssh", is_flag=True, help="Run over salt-ssh.")
@click.option("--roster", help="salt-ssh roster to use.")
@click.pass_context
def run(
    ctx: click.Context,
    fun: str,
    args: tuple[str, ...],
    tgt: str,
    expr_form: str,
    kwargs: tuple[str, ...],
    batch: str | None,
    run_async: bool,
    ssh: bool,
    roster: str | None,
) -> None:
    """Run execution module function FUN with ARGS on the targeted minions."""
    kwarg = {}
    for item in kwargs:
        key, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--kwarg")
        kwarg[key] = _parse_arg(value)

    call = LocalCall(fun, arg=[_parse_arg(a) for a in args] or None, kwarg=kwarg or None)
    target = build_target(tgt, expr_form)
    credentials = _credentials(ctx)
    client = _make_client(ctx)

    logger.debug("Running call", fun=fun, tgt=tgt, expr_form=expr_form)
    try:
        if ssh:
            result = call.call_sync_ssh(client, target, SSHConfig(roster=roster), auth=credentials)
        elif run_async:
            result = call.call_async(client, target, auth=credentials)
        else:
            result = call.call_sync(
                client,
                target,
                batch=Batch.parse(batch) if batch else None,
                auth=credentials,
            )
    except NetApiError as e:
        raise click.ClickException(str(e)) from e

    console.print_json(data=to_jsonable(result))


@main.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show CherryPy server statistics."""
    client = _make_client(ctx)
    obj = ctx.obj
    try:
        if obj["username"] and obj["password"]:
            client.login(obj["username"], obj["password"], AuthModule(obj["eauth"]))
        try:
            result = client.stats()
        finally:
            client.logout()
    except NetApiError as e:
        raise click.ClickException(str(e)) from e

    console.print_json(data=to_jsonable(result))


@main.command()
@click.argument("tag")
@click.argument("data", default="{}")
@click.pass_context
def event(ctx: click.Context, tag: str, data: str) -> None:
    """Fire event TAG with JSON DATA on the master's event bus."""
    try:
        json.loads(data)
    except ValueError as e:
        raise click.BadParameter(f"DATA must be valid JSON: {e}", param_hint="DATA") from e

    client = _make_client(ctx)
    try:
        accepted = client.send_event(tag, data)
    except NetApiError as e:
        raise click.ClickException(str(e)) from e

    click.echo("True" if accepted else "False")


if __name__ == "__main__":
    main()
