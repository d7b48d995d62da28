"""
Configuração de logging estruturado com structlog.

Logs são formatados como JSON fora do modo DEBUG para ingestão pelo
coletor de logs da hospedagem.
"""

import logging
import sys

import structlog

from app.core.config import settings


def setup_logging() -> None:
    """Configura logging estruturado para a aplicação."""

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.DEBUG:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True)
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
    )
    # Evita duplicar o SQL quando DEBUG liga o echo da engine
    logging.getLogger("sqlalchemy.engine").propagate = False


def mascarar_telefone(telefone: str | None) -> str | None:
    """Mantém apenas os 4 últimos dígitos do telefone para os logs."""
    if not telefone:
        return telefone
    digitos = "".join(c for c in telefone if c.isdigit())
    if len(digitos) <= 4:
        return "****"
    return "*" * (len(digitos) - 4) + digitos[-4:]


def mascarar_cpf(cpf: str | None) -> str | None:
    """CPF mascarado no formato ***.456.789-**."""
    if not cpf or len(cpf) != 11:
        return cpf
    return f"***.{cpf[3:6]}.{cpf[6:9]}-**"
