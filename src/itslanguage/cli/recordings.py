"""Comandos `its recordings` e `its record` — gravacoes de speech challenges."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from itslanguage.cli.main import build_settings, cli, connection_options, fail
from itslanguage.connection import Connection
from itslanguage.exceptions import ITSLanguageError
from itslanguage.models import SpeechChallenge, SpeechRecording
from itslanguage.recording.recorder import WaveFileRecorder
from itslanguage.sdk import AdministrativeSDK


async def _list_recordings(
    connection: Connection,
    organisation_id: str,
    challenge_id: str,
) -> list[SpeechRecording]:
    async with connection:
        sdk = AdministrativeSDK(connection)
        return await sdk.list_speech_recordings(organisation_id, challenge_id)


async def _stream_file(
    connection: Connection,
    recorder: WaveFileRecorder,
    challenge: SpeechChallenge,
) -> SpeechRecording:
    async with connection:
        await connection.open_rpc()
        session = AdministrativeSDK(connection).start_streaming_speech_recording(
            challenge, recorder
        )
        try:
            await recorder.record()
        except BaseException:
            session.cancel()
            raise
        return await session


@cli.command()
@click.argument("organisation_id")
@click.argument("challenge_id")
@connection_options
def recordings(
    organisation_id: str,
    challenge_id: str,
    api_url: str,
    ws_url: str | None,
    token: str | None,
) -> None:
    """Lista as gravacoes de um speech challenge."""
    settings = build_settings(api_url, ws_url, token)

    try:
        items = asyncio.run(_list_recordings(Connection(settings), organisation_id, challenge_id))
    except ITSLanguageError as e:
        fail(str(e))

    if not items:
        click.echo("Nenhuma gravacao encontrada.")
        return

    id_w = max(max(len(r.id or "") for r in items), 2)
    click.echo(f"{'ID':<{id_w}}  {'STUDENT':<12}  {'AUDIO'}")
    for r in items:
        click.echo(f"{r.id or '-':<{id_w}}  {r.student.id or '-':<12}  {r.audio_url or '-'}")


@cli.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--organisation", "organisation_id", required=True, help="Id da organisation.")
@click.option("--challenge", "challenge_id", required=True, help="Id do speech challenge.")
@click.option(
    "--chunk-ms",
    default=100,
    show_default=True,
    type=int,
    help="Duracao de audio por chunk enviado.",
)
@click.option("--realtime", is_flag=True, default=False, help="Envia os chunks em tempo real.")
@connection_options
def record(
    file: Path,
    organisation_id: str,
    challenge_id: str,
    chunk_ms: int,
    realtime: bool,
    api_url: str,
    ws_url: str | None,
    token: str | None,
) -> None:
    """Grava um arquivo WAV via streaming para um speech challenge."""
    if not file.exists():
        fail(f"arquivo nao encontrado: {file}")

    settings = build_settings(api_url, ws_url, token)
    challenge = SpeechChallenge(organisation_id=organisation_id, id=challenge_id)

    try:
        recorder = WaveFileRecorder(file, chunk_ms=chunk_ms, realtime=realtime)
        recording = asyncio.run(_stream_file(Connection(settings), recorder, challenge))
    except ITSLanguageError as e:
        fail(str(e))

    click.echo(f"Recording: {recording.id}")
    click.echo(f"Audio: {recording.audio_url or '-'}")
