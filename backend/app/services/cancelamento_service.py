"""
Service de cancelamento pelo cidadão.

O cidadão pede o cancelamento, recebe um código de 6 dígitos por
WhatsApp e confirma informando o código. Só o hash do código é gravado.
"""

import hashlib
import hmac
import secrets
from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    BusinessRuleError,
    CancelamentoNaoPermitidoError,
    CodigoCancelamentoInvalidoError,
    ResourceNotFoundError,
)
from app.core.logging import mascarar_telefone
from app.db.base import utcnow
from app.models.agendamento import Agendamento, StatusAgendamento
from app.models.prefeitura import Prefeitura
from app.repositories.agendamento_repository import AgendamentoRepository
from app.repositories.cpf_bloqueio_repository import CodigoCancelamentoRepository
from app.schemas.agendamento import SolicitarCancelamentoResponse
from app.services.agendamento_service import evento_historico
from app.services.bloqueio_service import BloqueioService
from app.services.whatsapp_service import WhatsAppService

logger = structlog.get_logger()

TELEFONE_MIN_DIGITOS = 8


def gerar_codigo() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def hash_codigo(agendamento_id: int, codigo: str) -> str:
    """Hash do código amarrado ao agendamento."""
    return hmac.new(
        settings.SECRET_KEY.encode(),
        f"{agendamento_id}:{codigo}".encode(),
        hashlib.sha256,
    ).hexdigest()


class CancelamentoService:
    def __init__(
        self,
        db: AsyncSession,
        prefeitura: Prefeitura,
        whatsapp: WhatsAppService,
    ):
        self._db = db
        self._prefeitura = prefeitura
        self._agendamentos = AgendamentoRepository(db, prefeitura.id)
        self._codigos = CodigoCancelamentoRepository(db, prefeitura.id)
        self._bloqueios = BloqueioService(db, prefeitura.id)
        self._whatsapp = whatsapp

    async def _obter_pendente(self, agendamento_id: int, travar: bool = False) -> Agendamento:
        if travar:
            agendamento = await self._agendamentos.get_travado(agendamento_id)
        else:
            agendamento = await self._agendamentos.get_by_id(agendamento_id)
        if not agendamento:
            raise ResourceNotFoundError("Agendamento", agendamento_id)
        if agendamento.status != StatusAgendamento.PENDENTE:
            raise CancelamentoNaoPermitidoError()
        return agendamento

    def _mensagem(self, agendamento: Agendamento, codigo: str) -> str:
        return (
            f"{self._prefeitura.nome}: seu código para cancelar o agendamento "
            f"{agendamento.protocolo} de {agendamento.data_agendamento.strftime('%d/%m/%Y')} "
            f"às {agendamento.hora_agendamento} é {codigo}. "
            f"Ele expira em {settings.CANCELAMENTO_CODIGO_TTL_MINUTOS} minutos. "
            "Se você não pediu o cancelamento, ignore esta mensagem."
        )

    async def solicitar(self, agendamento_id: int) -> SolicitarCancelamentoResponse:
        """
        Gera e envia o código de confirmação.

        Raises:
            CancelamentoNaoPermitidoError: agendamento não está pendente (400)
            BusinessRuleError: agendamento sem telefone válido (400)
            MessagingError: falha no envio (503)
        """
        agendamento = await self._obter_pendente(agendamento_id)

        digitos = "".join(filter(str.isdigit, agendamento.telefone or ""))
        if len(digitos) < TELEFONE_MIN_DIGITOS:
            raise BusinessRuleError(
                "Agendamento não possui telefone válido para envio do código",
                rule="TELEFONE_INVALIDO",
            )

        codigo = gerar_codigo()
        expira_em = utcnow() + timedelta(minutes=settings.CANCELAMENTO_CODIGO_TTL_MINUTOS)

        try:
            await self._codigos.remover_do_agendamento(agendamento.id)
            await self._codigos.add(
                agendamento_id=agendamento.id,
                codigo_hash=hash_codigo(agendamento.id, codigo),
                expira_em=expira_em,
                tentativas=0,
            )
            await self._whatsapp.enviar_texto(agendamento.telefone, self._mensagem(agendamento, codigo))
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "Código de cancelamento enviado",
            agendamento_id=agendamento_id,
            telefone=mascarar_telefone(digitos),
        )

        return SolicitarCancelamentoResponse(
            enviado=True,
            telefone_mascarado=mascarar_telefone(digitos),
            expira_em_minutos=settings.CANCELAMENTO_CODIGO_TTL_MINUTOS,
            codigo_desenvolvimento=None if settings.is_production else codigo,
        )

    async def confirmar(self, agendamento_id: int, codigo: str) -> Agendamento:
        """
        Confere o código e cancela o agendamento.

        O cancelamento é contabilizado para o CPF e pode gerar bloqueio.
        Agendamento e código ficam travados até o fim da transação, então
        confirmações simultâneas são serializadas.

        Raises:
            CodigoCancelamentoInvalidoError: código errado, expirado ou
                com tentativas esgotadas (400)
        """
        try:
            agendamento = await self._obter_pendente(agendamento_id, travar=True)
            registro = await self._codigos.get_vigente(agendamento.id, utcnow(), travar=True)
            if registro is None:
                raise CodigoCancelamentoInvalidoError()

            if registro.tentativas >= settings.CANCELAMENTO_MAX_TENTATIVAS:
                raise CodigoCancelamentoInvalidoError("Número máximo de tentativas excedido. Solicite um novo código.")

            if not hmac.compare_digest(registro.codigo_hash, hash_codigo(agendamento.id, codigo)):
                registro.tentativas += 1
                await self._db.commit()
                logger.warning(
                    "Código de cancelamento incorreto",
                    agendamento_id=agendamento_id,
                    tentativas=registro.tentativas,
                )
                raise CodigoCancelamentoInvalidoError()

            agendamento.status = StatusAgendamento.CANCELADO
            agendamento.cancelado_por = "cidadao"
            agendamento.historico_status = [
                *(agendamento.historico_status or []),
                evento_historico(StatusAgendamento.CANCELADO, "cidadao", "Cancelado pelo cidadão via código"),
            ]
            await self._codigos.remover_do_agendamento(agendamento.id)
            await self._bloqueios.registrar_cancelamento(
                agendamento.cidadao_cpf,
                agendamento.id,
                cancelado_por="cidadao",
                motivo="Cancelamento confirmado pelo cidadão",
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        await self._db.refresh(agendamento)
        logger.info(
            "Agendamento cancelado pelo cidadão",
            agendamento_id=agendamento.id,
            protocolo=agendamento.protocolo,
        )
        return agendamento
