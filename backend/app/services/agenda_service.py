"""
Service da configuração de agenda.

Locais de atendimento, grade de horários, datas bloqueadas e o cálculo
de disponibilidade de vagas.
"""

from dataclasses import dataclass
from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    DataBloqueadaError,
    HorarioInvalidoError,
    LocalIndisponivelError,
    RecursoEmUsoError,
    ResourceNotFoundError,
)
from app.models.agenda import DataBloqueada, LocalAtendimento, TipoBloqueio
from app.repositories.agenda_repository import (
    DataBloqueadaRepository,
    HorarioConfigRepository,
    LocalAtendimentoRepository,
)
from app.repositories.agendamento_repository import AgendamentoRepository
from app.schemas.agenda import (
    DataBloqueadaCreate,
    DisponibilidadeResponse,
    HorarioConfigUpdate,
    HorarioDisponibilidade,
    LocalAtendimentoCreate,
    LocalAtendimentoUpdate,
)

logger = structlog.get_logger()


@dataclass
class GradeHorarios:
    """Configuração efetiva de horários da prefeitura."""

    horarios_disponiveis: list[str]
    max_agendamentos_por_horario: int
    periodo_liberado_dias: int
    personalizado: bool


class AgendaService:
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        self._db = db
        self._prefeitura_id = prefeitura_id
        self._locais = LocalAtendimentoRepository(db, prefeitura_id)
        self._horarios = HorarioConfigRepository(db, prefeitura_id)
        self._datas = DataBloqueadaRepository(db, prefeitura_id)
        self._agendamentos = AgendamentoRepository(db, prefeitura_id)

    # === Locais de atendimento ===

    async def listar_locais(self, apenas_ativos: bool = False) -> list[LocalAtendimento]:
        return await self._locais.listar(apenas_ativos)

    async def obter_local(self, local_id: int) -> LocalAtendimento:
        local = await self._locais.get_by_id(local_id)
        if not local:
            raise ResourceNotFoundError("Local de atendimento", local_id)
        return local

    async def criar_local(self, dados: LocalAtendimentoCreate) -> LocalAtendimento:
        local = await self._locais.create(**dados.model_dump())
        logger.info("Local de atendimento criado", local_id=local.id)
        return local

    async def atualizar_local(self, local_id: int, dados: LocalAtendimentoUpdate) -> LocalAtendimento:
        await self.obter_local(local_id)
        return await self._locais.update(local_id, **dados.model_dump(exclude_unset=True))

    async def excluir_local(self, local_id: int) -> None:
        """Exclui o local; recusado se houver agendamentos vinculados."""
        await self.obter_local(local_id)
        if await self._locais.possui_agendamentos(local_id):
            raise RecursoEmUsoError(
                "Local possui agendamentos vinculados. Desative-o em vez de excluir."
            )
        await self._locais.delete(local_id)
        logger.info("Local de atendimento excluído", local_id=local_id)

    # === Grade de horários ===

    async def obter_grade(self) -> GradeHorarios:
        """Configuração da prefeitura, ou a grade padrão se não houver."""
        config = await self._horarios.get_config()
        if config is None:
            return GradeHorarios(
                horarios_disponiveis=list(settings.HORARIOS_PADRAO),
                max_agendamentos_por_horario=settings.MAX_AGENDAMENTOS_POR_HORARIO,
                periodo_liberado_dias=settings.PERIODO_LIBERADO_DIAS,
                personalizado=False,
            )
        return GradeHorarios(
            horarios_disponiveis=list(config.horarios_disponiveis or []),
            max_agendamentos_por_horario=config.max_agendamentos_por_horario,
            periodo_liberado_dias=config.periodo_liberado_dias,
            personalizado=True,
        )

    async def salvar_grade(self, dados: HorarioConfigUpdate) -> GradeHorarios:
        config = await self._horarios.get_config()
        campos = dados.model_dump()
        if config is None:
            await self._horarios.create(**campos)
        else:
            await self._horarios.update(config.id, **campos)
        logger.info(
            "Grade de horários atualizada",
            horarios=len(dados.horarios_disponiveis),
            max_por_horario=dados.max_agendamentos_por_horario,
        )
        return await self.obter_grade()

    # === Datas bloqueadas ===

    async def listar_datas_bloqueadas(
        self,
        data_inicio: date | None = None,
        data_fim: date | None = None,
    ) -> list[DataBloqueada]:
        return await self._datas.listar(data_inicio, data_fim)

    async def bloquear_data(self, dados: DataBloqueadaCreate, criado_por: str | None = None) -> DataBloqueada:
        bloqueio = await self._datas.create(
            data=dados.data,
            motivo=dados.motivo,
            tipo_bloqueio=dados.tipo_bloqueio,
            horarios_bloqueados=dados.horarios_bloqueados,
            criado_por=criado_por,
        )
        logger.info(
            "Data bloqueada",
            bloqueio_id=bloqueio.id,
            data=str(bloqueio.data),
            tipo=bloqueio.tipo_bloqueio.value,
            horarios=bloqueio.horarios_bloqueados,
        )
        return bloqueio

    async def desbloquear_data(self, bloqueio_id: int) -> None:
        if not await self._datas.delete(bloqueio_id):
            raise ResourceNotFoundError("Data bloqueada", bloqueio_id)
        logger.info("Bloqueio de data removido", bloqueio_id=bloqueio_id)

    async def bloqueio_do_horario(self, data: date, hora: str | None = None) -> DataBloqueada | None:
        """
        Bloqueio que impede a data (e o horário, se informado).

        Bloqueio de dia inteiro vale para qualquer horário; bloqueio
        parcial só para os horários listados.
        """
        for bloqueio in await self._datas.get_by_data(data):
            if bloqueio.tipo_bloqueio == TipoBloqueio.DIA_INTEIRO:
                return bloqueio
            if hora and hora in (bloqueio.horarios_bloqueados or []):
                return bloqueio
        return None

    # === Validação de vaga ===

    async def validar_vaga(self, local_id: int, data: date, hora: str) -> GradeHorarios:
        """
        Confere local, bloqueios e grade para (local, data, hora).

        A capacidade é conferida pelo service de agendamento, dentro da
        transação que grava o agendamento.
        """
        local = await self.obter_local(local_id)
        if not local.ativo:
            raise LocalIndisponivelError(local.nome_local)

        bloqueio = await self.bloqueio_do_horario(data, hora)
        if bloqueio:
            raise DataBloqueadaError(
                data,
                bloqueio.motivo,
                hora=None if bloqueio.dia_inteiro else hora,
            )

        grade = await self.obter_grade()
        if grade.horarios_disponiveis and hora not in grade.horarios_disponiveis:
            raise HorarioInvalidoError(hora)
        return grade

    async def disponibilidade(self, local_id: int, data: date) -> DisponibilidadeResponse:
        """Vagas por horário do local na data."""
        await self.obter_local(local_id)
        grade = await self.obter_grade()
        bloqueios = await self._datas.get_by_data(data)

        dia_inteiro = next((b for b in bloqueios if b.dia_inteiro), None)
        horarios_bloqueados: set[str] = set()
        for b in bloqueios:
            horarios_bloqueados.update(b.horarios_bloqueados or [])

        ocupacao = {} if dia_inteiro else await self._agendamentos.ocupacao_por_horario(local_id, data)

        horarios = []
        for hora in grade.horarios_disponiveis:
            ocupadas = ocupacao.get(hora, 0)
            restantes = max(grade.max_agendamentos_por_horario - ocupadas, 0)
            livre = dia_inteiro is None and hora not in horarios_bloqueados and restantes > 0
            horarios.append(
                HorarioDisponibilidade(
                    hora=hora,
                    vagas_total=grade.max_agendamentos_por_horario,
                    vagas_ocupadas=ocupadas,
                    vagas_restantes=restantes if livre else 0,
                    disponivel=livre,
                )
            )

        return DisponibilidadeResponse(
            data=data,
            local_id=local_id,
            dia_bloqueado=dia_inteiro is not None,
            motivo_bloqueio=dia_inteiro.motivo if dia_inteiro else None,
            horarios=horarios,
        )
