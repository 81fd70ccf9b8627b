"""Structured logging para o SDK ITSLanguage.

Usa structlog com stdlib logging como backend, sob o logger ``itslanguage``.
O SDK nunca mexe no root logger nem em handlers da aplicacao:

- ``get_logger`` so prepara o pipeline do structlog;
- ``configure_logging`` anexa um handler proprio (console ou json) apenas se
  a aplicacao ainda nao configurou o logger ``itslanguage``.
"""

from __future__ import annotations

import logging
import os

import structlog

SDK_LOGGER_NAME = "itslanguage"

_configured = False
_pipeline_ready = False


def _ensure_pipeline() -> None:
    global _pipeline_ready
    if _pipeline_ready:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _pipeline_ready = True


def configure_logging(
    log_format: str | None = None,
    level: str | None = None,
) -> None:
    """Liga a saida de logs do SDK em stderr.

    Idempotente — chamadas subsequentes sao ignoradas. Se o logger
    ``itslanguage`` ja tem handlers, eles sao mantidos e so o nivel muda.

    Args:
        log_format: "json" ou "console". Default via ITSLANGUAGE_LOG_FORMAT env ou "console".
        level: Nivel de log (DEBUG, INFO, WARNING, ERROR). Default via
            ITSLANGUAGE_LOG_LEVEL env ou "INFO".
    """
    global _configured
    if _configured:
        return

    _ensure_pipeline()

    resolved_format = log_format or os.environ.get("ITSLANGUAGE_LOG_FORMAT", "console")
    resolved_level = level or os.environ.get("ITSLANGUAGE_LOG_LEVEL", "INFO")

    sdk_logger = logging.getLogger(SDK_LOGGER_NAME)
    sdk_logger.setLevel(getattr(logging, resolved_level.upper(), logging.INFO))

    if not sdk_logger.handlers:
        if resolved_format == "json":
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer()

        handler = logging.StreamHandler()
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            )
        )
        sdk_logger.addHandler(handler)

    _configured = True


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Retorna logger com contexto de componente.

    Args:
        component: Nome do componente (ex: "recording.session", "rpc.wamp").

    Returns:
        BoundLogger com campo component vinculado.
    """
    _ensure_pipeline()
    return structlog.get_logger(f"{SDK_LOGGER_NAME}.{component}").bind(  # type: ignore[no-any-return]
        component=component
    )
