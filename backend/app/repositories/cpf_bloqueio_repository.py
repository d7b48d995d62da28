"""
Repositories da política de cancelamentos por CPF.

Comparações com o instante atual são feitas no SQL, com ``agora``
sempre em UTC.
"""

from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.cpf_bloqueio import CodigoCancelamento, CpfBloqueio, CpfCancelamento
from app.repositories.base import MultiTenantRepository


class CpfCancelamentoRepository(MultiTenantRepository[CpfCancelamento]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(CpfCancelamento, db, prefeitura_id)

    async def contar_desde(self, cpf: str, desde: datetime) -> int:
        """Cancelamentos do CPF a partir de ``desde``."""
        result = await self.db.execute(
            select(func.count(CpfCancelamento.id)).where(
                CpfCancelamento.prefeitura_id == self.prefeitura_id,
                CpfCancelamento.cpf == cpf,
                CpfCancelamento.data_cancelamento >= desde,
            )
        )
        return result.scalar_one()


class CpfBloqueioRepository(MultiTenantRepository[CpfBloqueio]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(CpfBloqueio, db, prefeitura_id)

    async def get_by_cpf(self, cpf: str) -> CpfBloqueio | None:
        result = await self.db.execute(self._scoped().where(CpfBloqueio.cpf == cpf))
        return result.scalar_one_or_none()

    async def get_vigente(self, cpf: str, agora: datetime) -> CpfBloqueio | None:
        """Bloqueio ativo e ainda dentro do prazo."""
        result = await self.db.execute(
            self._scoped().where(
                CpfBloqueio.cpf == cpf,
                CpfBloqueio.ativo == True,  # noqa: E712
                CpfBloqueio.data_desbloqueio > agora,
            )
        )
        return result.scalar_one_or_none()

    async def listar_vigentes(self, agora: datetime) -> list[CpfBloqueio]:
        result = await self.db.execute(
            self._scoped()
            .where(
                CpfBloqueio.ativo == True,  # noqa: E712
                CpfBloqueio.data_desbloqueio > agora,
            )
            .order_by(CpfBloqueio.data_desbloqueio)
        )
        return list(result.scalars().all())


async def expirar_bloqueios(db: AsyncSession, agora: datetime) -> int:
    """Desativa bloqueios vencidos de todas as prefeituras."""
    result = await db.execute(
        update(CpfBloqueio)
        .where(
            CpfBloqueio.ativo == True,  # noqa: E712
            CpfBloqueio.data_desbloqueio <= agora,
        )
        .values(ativo=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


class CodigoCancelamentoRepository(MultiTenantRepository[CodigoCancelamento]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(CodigoCancelamento, db, prefeitura_id)

    async def get_vigente(
        self,
        agendamento_id: int,
        agora: datetime,
        travar: bool = False,
    ) -> CodigoCancelamento | None:
        query = self._scoped().where(
            CodigoCancelamento.agendamento_id == agendamento_id,
            CodigoCancelamento.expira_em > agora,
        )
        if travar:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def remover_do_agendamento(self, agendamento_id: int) -> None:
        await self.db.execute(
            delete(CodigoCancelamento).where(
                CodigoCancelamento.prefeitura_id == self.prefeitura_id,
                CodigoCancelamento.agendamento_id == agendamento_id,
            )
        )


async def limpar_codigos_expirados(db: AsyncSession, agora: datetime) -> int:
    """Remove códigos vencidos de todas as prefeituras."""
    result = await db.execute(
        delete(CodigoCancelamento).where(CodigoCancelamento.expira_em <= agora)
    )
    return result.rowcount or 0
