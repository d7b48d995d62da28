"""
Tasks de manutenção.

Limpeza periódica de bloqueios de CPF vencidos e de códigos de
cancelamento expirados, para todas as prefeituras.
"""

import asyncio
from typing import Awaitable, Callable

import structlog
from celery import shared_task
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.base import utcnow
from app.db.session import build_engine
from app.repositories.cpf_bloqueio_repository import expirar_bloqueios, limpar_codigos_expirados

logger = structlog.get_logger()


async def expirar_bloqueios_vencidos(db: AsyncSession) -> int:
    total = await expirar_bloqueios(db, utcnow())
    await db.commit()
    logger.info("Bloqueios de CPF expirados", total=total)
    return total


async def remover_codigos_vencidos(db: AsyncSession) -> int:
    total = await limpar_codigos_expirados(db, utcnow())
    await db.commit()
    logger.info("Códigos de cancelamento removidos", total=total)
    return total


async def _executar(rotina: Callable[[AsyncSession], Awaitable[int]]) -> int:
    """
    Roda a rotina com engine própria.

    Cada task roda num event loop novo (``asyncio.run``); o pool da
    engine não pode ser compartilhado entre loops.
    """
    engine = build_engine()
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as session:
            return await rotina(session)
    finally:
        await engine.dispose()


@shared_task(bind=True, max_retries=3)
def expirar_bloqueios_task(self):
    """Desativa bloqueios de CPF cuja data de desbloqueio já passou."""
    try:
        return {"expirados": asyncio.run(_executar(expirar_bloqueios_vencidos))}
    except Exception as e:
        logger.error("Erro ao expirar bloqueios de CPF", error=str(e))
        raise self.retry(exc=e, countdown=60)


@shared_task(bind=True, max_retries=3)
def limpar_codigos_expirados_task(self):
    try:
        return {"removidos": asyncio.run(_executar(remover_codigos_vencidos))}
    except Exception as e:
        logger.error("Erro ao limpar códigos de cancelamento", error=str(e))
        raise self.retry(exc=e, countdown=60)
