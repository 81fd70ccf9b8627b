"""RecordingSlot — id da gravacao em andamento de uma conexao.

No maximo uma gravacao por conexao. Sem lock: todas as operacoes rodam no
event loop unico da conexao.
"""

from __future__ import annotations


class RecordingSlot:
    """Slot mutavel com o recording id em andamento (ou None)."""

    def __init__(self) -> None:
        self._recording_id: str | None = None

    @property
    def recording_id(self) -> str | None:
        """Recording id em andamento, ou None se o slot esta vazio."""
        return self._recording_id

    @property
    def is_empty(self) -> bool:
        return self._recording_id is None

    def set(self, recording_id: str) -> None:
        self._recording_id = recording_id

    def clear(self) -> None:
        self._recording_id = None

    def release(self, recording_id: str | None) -> None:
        """Limpa o slot se ele pertence a ``recording_id``.

        No-op quando o slot guarda outra gravacao.
        """
        if self._recording_id == recording_id:
            self._recording_id = None

    def __repr__(self) -> str:
        return f"RecordingSlot(recording_id={self._recording_id!r})"
