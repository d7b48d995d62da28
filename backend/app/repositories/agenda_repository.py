"""
Repositories da configuração de agenda.
"""

from datetime import date

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agenda import DataBloqueada, HorarioConfig, LocalAtendimento
from app.models.agendamento import Agendamento
from app.repositories.base import MultiTenantRepository


class LocalAtendimentoRepository(MultiTenantRepository[LocalAtendimento]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(LocalAtendimento, db, prefeitura_id)

    async def listar(self, apenas_ativos: bool = False) -> list[LocalAtendimento]:
        query = self._scoped()
        if apenas_ativos:
            query = query.where(LocalAtendimento.ativo == True)  # noqa: E712
        result = await self.db.execute(query.order_by(LocalAtendimento.nome_local))
        return list(result.scalars().all())

    async def possui_agendamentos(self, local_id: int) -> bool:
        """Verifica se algum agendamento referencia o local."""
        result = await self.db.execute(
            select(
                exists().where(
                    Agendamento.local_id == local_id,
                    Agendamento.prefeitura_id == self.prefeitura_id,
                )
            )
        )
        return bool(result.scalar())


class HorarioConfigRepository(MultiTenantRepository[HorarioConfig]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(HorarioConfig, db, prefeitura_id)

    async def get_config(self) -> HorarioConfig | None:
        """Configuração da prefeitura (no máximo uma)."""
        result = await self.db.execute(self._scoped())
        return result.scalar_one_or_none()


class DataBloqueadaRepository(MultiTenantRepository[DataBloqueada]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(DataBloqueada, db, prefeitura_id)

    async def listar(
        self,
        data_inicio: date | None = None,
        data_fim: date | None = None,
    ) -> list[DataBloqueada]:
        query = self._scoped()
        if data_inicio:
            query = query.where(DataBloqueada.data >= data_inicio)
        if data_fim:
            query = query.where(DataBloqueada.data <= data_fim)
        result = await self.db.execute(query.order_by(DataBloqueada.data, DataBloqueada.id))
        return list(result.scalars().all())

    async def get_by_data(self, data: date) -> list[DataBloqueada]:
        """Todos os bloqueios cadastrados para a data."""
        return await self.listar(data_inicio=data, data_fim=data)
