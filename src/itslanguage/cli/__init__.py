"""CLI do SDK ITSLanguage.

Registra todos os comandos no grupo principal.
"""

from itslanguage.cli.main import cli
from itslanguage.cli.organisations import organisations
from itslanguage.cli.recordings import record, recordings

__all__ = [
    "cli",
    "organisations",
    "record",
    "recordings",
]
