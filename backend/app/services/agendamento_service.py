"""
Service do Agendamento.

Concentra as regras de reserva de vaga: bloqueio de CPF, período
liberado, datas bloqueadas, grade de horários e capacidade do horário.
"""

from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.cpf import cpf_valido, normalizar_cpf
from app.core.exceptions import (
    ForaDoPeriodoError,
    InvalidCPFError,
    ResourceNotFoundError,
    SlotConflictError,
)
from app.core.logging import mascarar_cpf
from app.db.base import utcnow
from app.models.agendamento import STATUS_LIBERAM_VAGA, Agendamento, StatusAgendamento
from app.models.prefeitura import Prefeitura
from app.repositories.agendamento_repository import AgendamentoRepository
from app.repositories.prefeitura_repository import PrefeituraRepository
from app.schemas.agendamento import AgendamentoCreate, AgendamentoUpdate
from app.services.agenda_service import AgendaService
from app.services.bloqueio_service import BloqueioService

logger = structlog.get_logger()

PROTOCOLO_PREFIXO = "AGD"


def hoje() -> date:
    """Data corrente no fuso da prefeitura."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def formatar_protocolo(numero: int) -> str:
    return f"{PROTOCOLO_PREFIXO}-{numero:06d}"


def evento_historico(status: StatusAgendamento, por: str, observacao: str | None = None) -> dict[str, Any]:
    evento = {"status": status.value, "em": utcnow().isoformat(), "por": por}
    if observacao:
        evento["observacao"] = observacao
    return evento


class AgendamentoService:
    """
    Service para operações com Agendamento.

    Encapsula regras de negócio e coordena repositories/services.
    """

    def __init__(self, db: AsyncSession, prefeitura: Prefeitura):
        self._db = db
        self._prefeitura = prefeitura
        self._repo = AgendamentoRepository(db, prefeitura.id)
        self._prefeituras = PrefeituraRepository(db)
        self._agenda = AgendaService(db, prefeitura.id)
        self._bloqueios = BloqueioService(db, prefeitura.id)

    async def _verificar_capacidade(self, local_id: int, data: date, hora: str, limite: int) -> None:
        ocupadas = await self._repo.contar_ocupacao(local_id, data, hora)
        if ocupadas >= limite:
            logger.info(
                "Horário lotado",
                local_id=local_id,
                data=str(data),
                hora=hora,
                ocupadas=ocupadas,
                limite=limite,
            )
            raise SlotConflictError(data, hora)

    def _validar_periodo(self, data: date, periodo_liberado_dias: int) -> None:
        referencia = hoje()
        if data < referencia:
            raise ForaDoPeriodoError("Não é possível agendar para uma data passada")
        limite = referencia + timedelta(days=periodo_liberado_dias)
        if data > limite:
            raise ForaDoPeriodoError(
                f"Agendamentos liberados somente até {limite.strftime('%d/%m/%Y')}"
            )

    async def criar(self, dados: AgendamentoCreate) -> Agendamento:
        """
        Reserva a vaga e grava o agendamento com protocolo.

        Tudo acontece numa transação: o número de protocolo é reservado
        primeiro (travando a prefeitura), depois a capacidade é conferida
        e o agendamento é inserido. Agendamentos concorrentes da mesma
        prefeitura são serializados, então o limite do horário não é
        ultrapassado.

        Raises:
            InvalidCPFError (422), CPFBloqueadoError (403),
            ResourceNotFoundError (404), ForaDoPeriodoError,
            DataBloqueadaError, HorarioInvalidoError,
            LocalIndisponivelError (400), SlotConflictError (409)
        """
        cpf = normalizar_cpf(dados.cidadao_cpf)
        if not cpf_valido(cpf):
            raise InvalidCPFError(dados.cidadao_cpf)

        await self._bloqueios.garantir_liberado(cpf)

        grade = await self._agenda.validar_vaga(
            dados.local_id, dados.data_agendamento, dados.hora_agendamento
        )
        self._validar_periodo(dados.data_agendamento, grade.periodo_liberado_dias)

        try:
            numero = await self._prefeituras.proximo_protocolo(self._prefeitura.id)
            await self._verificar_capacidade(
                dados.local_id,
                dados.data_agendamento,
                dados.hora_agendamento,
                grade.max_agendamentos_por_horario,
            )

            campos = dados.model_dump()
            campos["cidadao_cpf"] = cpf
            campos["cidadao_nome"] = campos["cidadao_nome"].strip()
            agendamento = await self._repo.add(
                **campos,
                protocolo=formatar_protocolo(numero),
                status=StatusAgendamento.PENDENTE,
                notas=[],
                historico_status=[evento_historico(StatusAgendamento.PENDENTE, "cidadao", "Agendamento criado")],
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        await self._db.refresh(agendamento)
        logger.info(
            "Agendamento criado",
            agendamento_id=agendamento.id,
            protocolo=agendamento.protocolo,
            cpf=mascarar_cpf(cpf),
            local_id=agendamento.local_id,
            data=str(agendamento.data_agendamento),
            hora=agendamento.hora_agendamento,
        )
        return agendamento

    async def obter(self, agendamento_id: int) -> Agendamento:
        agendamento = await self._repo.get_by_id(agendamento_id)
        if not agendamento:
            raise ResourceNotFoundError("Agendamento", agendamento_id)
        return agendamento

    async def listar(
        self,
        skip: int = 0,
        limit: int = 50,
        data: date | None = None,
        status: StatusAgendamento | None = None,
        local_id: int | None = None,
        cpf: str | None = None,
    ) -> tuple[list[Agendamento], int]:
        """Lista agendamentos filtrados e o total sem paginação."""
        filtros = {
            "data": data,
            "status": status,
            "local_id": local_id,
            "cpf": normalizar_cpf(cpf) if cpf else None,
        }
        itens = await self._repo.listar(skip, limit, **filtros)
        total = await self._repo.contar(**filtros)
        return itens, total

    async def consultar_por_cpf(self, cpf: str) -> list[Agendamento]:
        """Últimos agendamentos do cidadão (consulta pública)."""
        cpf = normalizar_cpf(cpf)
        if len(cpf) != 11:
            raise InvalidCPFError(cpf)
        return await self._repo.ultimos_por_cpf(cpf, limit=5)

    async def atualizar(
        self,
        agendamento_id: int,
        dados: AgendamentoUpdate,
        responsavel: str,
    ) -> Agendamento:
        """
        Atualização feita pela equipe.

        Remarcação (local, data ou horário) passa de novo pelas regras de
        vaga. Mudança de status entra no histórico. Reativar um agendamento
        cancelado ou com falta ocupa vaga de novo, então o CPF e a
        capacidade do horário são conferidos como numa reserva.

        Raises:
            CPFBloqueadoError (403), SlotConflictError (409)
        """
        agendamento = await self.obter(agendamento_id)
        campos = dados.model_dump(exclude_unset=True, exclude={"nota", "status"})

        novo_local = campos.get("local_id", agendamento.local_id)
        nova_data = campos.get("data_agendamento", agendamento.data_agendamento)
        nova_hora = campos.get("hora_agendamento", agendamento.hora_agendamento)
        remarcado = (novo_local, nova_data, nova_hora) != (
            agendamento.local_id,
            agendamento.data_agendamento,
            agendamento.hora_agendamento,
        )

        status_final = dados.status or agendamento.status
        ocupa_vaga = status_final not in STATUS_LIBERAM_VAGA
        reativado = agendamento.status in STATUS_LIBERAM_VAGA and ocupa_vaga

        try:
            if reativado:
                await self._bloqueios.garantir_liberado(agendamento.cidadao_cpf)

            if remarcado:
                grade = await self._agenda.validar_vaga(novo_local, nova_data, nova_hora)
            elif reativado:
                grade = await self._agenda.obter_grade()

            # o próprio agendamento não conta: está em outro horário ou liberou a vaga
            if (remarcado or reativado) and ocupa_vaga:
                await self._prefeituras.travar(self._prefeitura.id)
                await self._verificar_capacidade(
                    novo_local, nova_data, nova_hora, grade.max_agendamentos_por_horario
                )

            for campo, valor in campos.items():
                setattr(agendamento, campo, valor)

            if dados.nota:
                agendamento.notas = [
                    *(agendamento.notas or []),
                    {"texto": dados.nota, "autor": responsavel, "em": utcnow().isoformat()},
                ]

            if dados.status and dados.status != agendamento.status:
                self._aplicar_status(agendamento, dados.status, responsavel, dados.motivo_cancelamento)

            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        await self._db.refresh(agendamento)
        logger.info(
            "Agendamento atualizado",
            agendamento_id=agendamento.id,
            campos=sorted(dados.model_fields_set),
            remarcado=remarcado,
            reativado=reativado,
        )
        return agendamento

    def _aplicar_status(
        self,
        agendamento: Agendamento,
        status: StatusAgendamento,
        responsavel: str,
        observacao: str | None = None,
    ) -> None:
        agendamento.status = status
        agendamento.historico_status = [
            *(agendamento.historico_status or []),
            evento_historico(status, responsavel, observacao),
        ]
        if status == StatusAgendamento.CONCLUIDO:
            agendamento.concluido_em = utcnow()
            agendamento.concluido_por = responsavel
        elif status == StatusAgendamento.CANCELADO:
            agendamento.cancelado_por = responsavel
            if observacao:
                agendamento.motivo_cancelamento = observacao

    async def excluir(self, agendamento_id: int) -> None:
        """Remove o agendamento; 404 se não existir na prefeitura."""
        if not await self._repo.delete(agendamento_id):
            raise ResourceNotFoundError("Agendamento", agendamento_id)
        logger.info("Agendamento excluído", agendamento_id=agendamento_id)
