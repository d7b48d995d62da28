"""
Service de bloqueio de CPF.

Cada cancelamento feito pelo cidadão é registrado. Ao atingir o limite
de cancelamentos dentro da janela configurada, o CPF fica impedido de
fazer novos agendamentos na prefeitura até a data de desbloqueio.
"""

from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.cpf import normalizar_cpf
from app.core.exceptions import CPFBloqueadoError, ResourceNotFoundError
from app.core.logging import mascarar_cpf
from app.db.base import utcnow
from app.models.cpf_bloqueio import CpfBloqueio
from app.repositories.cpf_bloqueio_repository import CpfBloqueioRepository, CpfCancelamentoRepository
from app.schemas.cpf_bloqueio import StatusBloqueioResponse

logger = structlog.get_logger()


class BloqueioService:
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        self._db = db
        self._prefeitura_id = prefeitura_id
        self._cancelamentos = CpfCancelamentoRepository(db, prefeitura_id)
        self._bloqueios = CpfBloqueioRepository(db, prefeitura_id)

    async def verificar(self, cpf: str) -> StatusBloqueioResponse:
        """Situação de bloqueio do CPF no momento."""
        bloqueio = await self._bloqueios.get_vigente(normalizar_cpf(cpf), utcnow())
        if not bloqueio:
            return StatusBloqueioResponse(bloqueado=False)
        return StatusBloqueioResponse(
            bloqueado=True,
            data_desbloqueio=bloqueio.data_desbloqueio,
            motivo=bloqueio.motivo,
            cancelamentos_count=bloqueio.cancelamentos_count,
        )

    async def garantir_liberado(self, cpf: str) -> None:
        """
        Raises:
            CPFBloqueadoError: CPF com bloqueio vigente (403)
        """
        bloqueio = await self._bloqueios.get_vigente(normalizar_cpf(cpf), utcnow())
        if bloqueio:
            logger.info(
                "Agendamento recusado: CPF bloqueado",
                cpf=mascarar_cpf(bloqueio.cpf),
                ate=str(bloqueio.data_desbloqueio),
            )
            raise CPFBloqueadoError(bloqueio.data_desbloqueio, bloqueio.motivo)

    async def registrar_cancelamento(
        self,
        cpf: str,
        agendamento_id: int | None,
        cancelado_por: str = "cidadao",
        motivo: str | None = None,
    ) -> CpfBloqueio | None:
        """
        Registra o cancelamento e aplica bloqueio se o limite foi atingido.

        Não confirma a transação; quem chama decide o commit junto com a
        mudança de status do agendamento.

        Returns:
            O bloqueio aplicado, ou None se o CPF continua liberado.
        """
        cpf = normalizar_cpf(cpf)
        agora = utcnow()

        await self._cancelamentos.add(
            cpf=cpf,
            agendamento_id=agendamento_id,
            data_cancelamento=agora,
            cancelado_por=cancelado_por,
            motivo=motivo,
        )

        desde = agora - timedelta(days=settings.BLOQUEIO_CPF_JANELA_DIAS)
        total = await self._cancelamentos.contar_desde(cpf, desde)

        logger.info(
            "Cancelamento registrado",
            cpf=mascarar_cpf(cpf),
            agendamento_id=agendamento_id,
            cancelamentos_na_janela=total,
        )

        if total < settings.BLOQUEIO_CPF_LIMITE_CANCELAMENTOS:
            return None

        return await self._aplicar_bloqueio(cpf, total)

    async def _aplicar_bloqueio(self, cpf: str, total: int) -> CpfBloqueio:
        agora = utcnow()
        campos = {
            "data_bloqueio": agora,
            "data_desbloqueio": agora + timedelta(days=settings.BLOQUEIO_CPF_DURACAO_DIAS),
            "motivo": (
                f"Bloqueado automaticamente por {total} cancelamentos "
                f"em {settings.BLOQUEIO_CPF_JANELA_DIAS} dias"
            ),
            "cancelamentos_count": total,
            "ativo": True,
        }

        bloqueio = await self._bloqueios.get_by_cpf(cpf)
        if bloqueio is None:
            bloqueio = await self._bloqueios.add(cpf=cpf, **campos)
        else:
            for campo, valor in campos.items():
                setattr(bloqueio, campo, valor)
            await self._db.flush()

        logger.warning(
            "CPF bloqueado por cancelamentos recorrentes",
            cpf=mascarar_cpf(cpf),
            cancelamentos=total,
            ate=str(campos["data_desbloqueio"]),
        )
        return bloqueio

    async def listar_vigentes(self) -> list[CpfBloqueio]:
        return await self._bloqueios.listar_vigentes(utcnow())

    async def desbloquear(self, bloqueio_id: int, responsavel: str | None = None) -> CpfBloqueio:
        """Libera manualmente um CPF bloqueado."""
        bloqueio = await self._bloqueios.get_by_id(bloqueio_id)
        if not bloqueio:
            raise ResourceNotFoundError("Bloqueio de CPF", bloqueio_id)

        bloqueio = await self._bloqueios.update(bloqueio_id, ativo=False)
        logger.info(
            "CPF desbloqueado manualmente",
            bloqueio_id=bloqueio_id,
            cpf=mascarar_cpf(bloqueio.cpf),
            responsavel=responsavel,
        )
        return bloqueio
