"""
Repository do Agendamento.
"""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agendamento import STATUS_LIBERAM_VAGA, Agendamento, StatusAgendamento
from app.repositories.base import MultiTenantRepository


class AgendamentoRepository(MultiTenantRepository[Agendamento]):
    """Repository para operações com Agendamento."""

    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(Agendamento, db, prefeitura_id)

    def _filtrado(
        self,
        data: date | None = None,
        status: StatusAgendamento | None = None,
        local_id: int | None = None,
        cpf: str | None = None,
    ):
        query = self._scoped()
        if data:
            query = query.where(Agendamento.data_agendamento == data)
        if status:
            query = query.where(Agendamento.status == status)
        if local_id:
            query = query.where(Agendamento.local_id == local_id)
        if cpf:
            query = query.where(Agendamento.cidadao_cpf == cpf)
        return query

    async def listar(
        self,
        skip: int = 0,
        limit: int = 50,
        **filtros,
    ) -> list[Agendamento]:
        """Lista agendamentos em ordem de data e horário."""
        result = await self.db.execute(
            self._filtrado(**filtros)
            .order_by(
                Agendamento.data_agendamento,
                Agendamento.hora_agendamento,
                Agendamento.id,
            )
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def contar(self, **filtros) -> int:
        query = self._filtrado(**filtros).with_only_columns(func.count(Agendamento.id))
        result = await self.db.execute(query)
        return result.scalar_one()

    def consulta_travada(self, agendamento_id: int):
        """SELECT ... FOR UPDATE do agendamento."""
        return (
            self._scoped()
            .where(Agendamento.id == agendamento_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    async def get_travado(self, agendamento_id: int) -> Agendamento | None:
        """Carrega o agendamento travando a linha até o fim da transação."""
        result = await self.db.execute(self.consulta_travada(agendamento_id))
        return result.scalar_one_or_none()

    async def get_by_protocolo(self, protocolo: str) -> Agendamento | None:
        result = await self.db.execute(self._scoped().where(Agendamento.protocolo == protocolo))
        return result.scalar_one_or_none()

    async def ultimos_por_cpf(self, cpf: str, limit: int = 5) -> list[Agendamento]:
        """Agendamentos mais recentes do cidadão."""
        result = await self.db.execute(
            self._scoped()
            .where(Agendamento.cidadao_cpf == cpf)
            .order_by(
                Agendamento.data_agendamento.desc(),
                Agendamento.hora_agendamento.desc(),
                Agendamento.id.desc(),
            )
            .limit(limit)
        )
        return list(result.scalars().all())

    async def contar_ocupacao(self, local_id: int, data: date, hora: str) -> int:
        """Quantidade de vagas ocupadas no horário."""
        result = await self.db.execute(
            select(func.count(Agendamento.id)).where(
                Agendamento.prefeitura_id == self.prefeitura_id,
                Agendamento.local_id == local_id,
                Agendamento.data_agendamento == data,
                Agendamento.hora_agendamento == hora,
                Agendamento.status.not_in(STATUS_LIBERAM_VAGA),
            )
        )
        return result.scalar_one()

    async def ocupacao_por_horario(self, local_id: int, data: date) -> dict[str, int]:
        """Mapa horário -> vagas ocupadas para o local na data."""
        result = await self.db.execute(
            select(Agendamento.hora_agendamento, func.count(Agendamento.id))
            .where(
                Agendamento.prefeitura_id == self.prefeitura_id,
                Agendamento.local_id == local_id,
                Agendamento.data_agendamento == data,
                Agendamento.status.not_in(STATUS_LIBERAM_VAGA),
            )
            .group_by(Agendamento.hora_agendamento)
        )
        return {hora: total for hora, total in result.all()}
