"""Comando `its organisations` — lista organisations do tenant."""

from __future__ import annotations

import asyncio

import click

from itslanguage.cli.main import build_settings, cli, connection_options, fail
from itslanguage.connection import Connection
from itslanguage.exceptions import ITSLanguageError
from itslanguage.models import Organisation
from itslanguage.sdk import AdministrativeSDK


async def _list_organisations(connection: Connection) -> list[Organisation]:
    async with connection:
        return await AdministrativeSDK(connection).list_organisations()


@cli.command()
@connection_options
def organisations(api_url: str, ws_url: str | None, token: str | None) -> None:
    """Lista as organisations visiveis com o token informado."""
    settings = build_settings(api_url, ws_url, token)

    try:
        items = asyncio.run(_list_organisations(Connection(settings)))
    except ITSLanguageError as e:
        fail(str(e))

    if not items:
        click.echo("Nenhuma organisation encontrada.")
        return

    id_w = max(max(len(o.id or "") for o in items), 2)
    click.echo(f"{'ID':<{id_w}}  {'NAME':<24}  {'CREATED'}")
    for o in items:
        created = o.created.isoformat() if o.created else "-"
        click.echo(f"{o.id or '-':<{id_w}}  {o.name:<24}  {created}")
