"""RecordingStateMachine — maquina de estados da sessao de streaming de gravacao.

Componente puro e sincrono — nao conhece WebSocket, RPC ou asyncio. O caller
(StreamingRecordingSession) e responsavel por chamar transition() nos
momentos corretos.

Estados:
    PENDING -> INITIALIZING -> STREAMING -> CLOSING -> CLOSED

Regras:
- CLOSED, FAILED e CANCELLED sao terminais.
- Qualquer estado nao-terminal pode transitar para FAILED ou CANCELLED.
- Transicoes invalidas levantam InvalidTransitionError.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from itslanguage._types import RecordingState
from itslanguage.exceptions import InvalidTransitionError

if TYPE_CHECKING:
    from collections.abc import Callable

_ABORT_TARGETS = frozenset({RecordingState.FAILED, RecordingState.CANCELLED})

# Transicoes validas: {estado_atual: {estados_alvo_permitidos}}
_VALID_TRANSITIONS: dict[RecordingState, frozenset[RecordingState]] = {
    RecordingState.PENDING: frozenset({RecordingState.INITIALIZING}) | _ABORT_TARGETS,
    RecordingState.INITIALIZING: frozenset({RecordingState.STREAMING}) | _ABORT_TARGETS,
    RecordingState.STREAMING: frozenset({RecordingState.CLOSING}) | _ABORT_TARGETS,
    RecordingState.CLOSING: frozenset({RecordingState.CLOSED}) | _ABORT_TARGETS,
    RecordingState.CLOSED: frozenset(),
    RecordingState.FAILED: frozenset(),
    RecordingState.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset(
    {RecordingState.CLOSED, RecordingState.FAILED, RecordingState.CANCELLED}
)


class RecordingStateMachine:
    """Maquina de estados para uma sessao de streaming de gravacao.

    Args:
        on_enter: Callbacks chamados ao ENTRAR em um estado.
        on_exit: Callbacks chamados ao SAIR de um estado.
        clock: Funcao que retorna timestamp monotonic (para testes deterministicos).
    """

    def __init__(
        self,
        on_enter: dict[RecordingState, Callable[[], None]] | None = None,
        on_exit: dict[RecordingState, Callable[[], None]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._state = RecordingState.PENDING
        self._on_enter = on_enter or {}
        self._on_exit = on_exit or {}
        self._clock = clock or time.monotonic
        self._state_entered_at = self._clock()

    @property
    def state(self) -> RecordingState:
        """Estado atual da sessao."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def elapsed_in_state_ms(self) -> int:
        """Tempo (em milissegundos) que a sessao esta no estado atual."""
        elapsed_s = self._clock() - self._state_entered_at
        return int(elapsed_s * 1000)

    def transition(self, target: RecordingState) -> None:
        """Transita para o estado alvo.

        Args:
            target: Estado alvo da transicao.

        Raises:
            InvalidTransitionError: Se a transicao e invalida.
        """
        if target not in _VALID_TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state.value, target.value)

        previous = self._state

        exit_cb = self._on_exit.get(previous)
        if exit_cb is not None:
            exit_cb()

        self._state = target
        self._state_entered_at = self._clock()

        enter_cb = self._on_enter.get(target)
        if enter_cb is not None:
            enter_cb()
