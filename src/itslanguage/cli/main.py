"""Grupo principal de comandos CLI do SDK ITSLanguage."""

from __future__ import annotations

import functools
import sys
from typing import TYPE_CHECKING, Any, NoReturn

import click

import itslanguage
from itslanguage.config import DEFAULT_API_URL, ConnectionSettings
from itslanguage.exceptions import ITSLanguageError
from itslanguage.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable


@click.group()
@click.version_option(version=itslanguage.__version__, prog_name="its")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Formato de log. Sem --log-format/--log-level o SDK nao emite logs.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Nivel de log.",
)
def cli(log_format: str | None, log_level: str | None) -> None:
    """ITSLanguage — cliente da API administrativa e de gravacao por streaming."""
    if log_format is not None or log_level is not None:
        configure_logging(log_format=log_format, level=log_level)


def connection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Adiciona --api-url, --ws-url e --token (com fallback ITSLANGUAGE_*)."""

    @click.option(
        "--api-url",
        envvar="ITSLANGUAGE_API_URL",
        default=DEFAULT_API_URL,
        show_default=True,
        help="URL da API REST.",
    )
    @click.option(
        "--ws-url",
        envvar="ITSLANGUAGE_WS_URL",
        default=None,
        help="URL do router WebSocket (necessario para gravar).",
    )
    @click.option(
        "--token",
        envvar="ITSLANGUAGE_OAUTH2_TOKEN",
        default=None,
        help="Token OAuth2 de acesso.",
    )
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper


def build_settings(api_url: str, ws_url: str | None, token: str | None) -> ConnectionSettings:
    """Monta as settings da conexao; erros de configuracao encerram com exit 1."""
    try:
        return ConnectionSettings.from_env(api_url=api_url, ws_url=ws_url, oauth2_token=token)
    except ITSLanguageError as e:
        fail(str(e))


def fail(message: str) -> NoReturn:
    click.echo(f"Erro: {message}", err=True)
    sys.exit(1)
