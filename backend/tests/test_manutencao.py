"""
Testes das rotinas de manutenção e do cliente de WhatsApp.
"""
from datetime import timedelta

import httpx
import pytest
from sqlalchemy import select

from app.core.exceptions import MessagingError
from app.db.base import utcnow
from app.models import Agendamento, CodigoCancelamento, CpfBloqueio
from app.services.agendamento_service import hoje
from app.services.whatsapp_service import WhatsAppService
from app.workers.manutencao_tasks import expirar_bloqueios_vencidos, remover_codigos_vencidos


@pytest.mark.asyncio
async def test_expirar_bloqueios_vencidos(session_maker, prefeitura):
    agora = utcnow()
    async with session_maker() as session:
        session.add_all([
            CpfBloqueio(
                prefeitura_id=prefeitura.id,
                cpf="52998224725",
                data_desbloqueio=agora - timedelta(hours=1),
                cancelamentos_count=3,
            ),
            CpfBloqueio(
                prefeitura_id=prefeitura.id,
                cpf="11144477735",
                data_desbloqueio=agora + timedelta(days=2),
                cancelamentos_count=3,
            ),
        ])
        await session.commit()

    async with session_maker() as session:
        assert await expirar_bloqueios_vencidos(session) == 1

    async with session_maker() as session:
        result = await session.execute(select(CpfBloqueio.cpf, CpfBloqueio.ativo).order_by(CpfBloqueio.cpf))
        assert [tuple(r) for r in result.all()] == [("11144477735", True), ("52998224725", False)]


@pytest.mark.asyncio
async def test_remover_codigos_vencidos(session_maker, prefeitura, local):
    agora = utcnow()
    async with session_maker() as session:
        agendamentos = [
            Agendamento(
                prefeitura_id=prefeitura.id,
                local_id=local.id,
                protocolo=f"AGD-00000{n}",
                cidadao_nome="Maria do Socorro Lima",
                cidadao_cpf="52998224725",
                data_agendamento=hoje() + timedelta(days=3),
                hora_agendamento=hora,
            )
            for n, hora in ((1, "08:00"), (2, "08:30"))
        ]
        session.add_all(agendamentos)
        await session.flush()
        session.add_all([
            CodigoCancelamento(
                prefeitura_id=prefeitura.id,
                agendamento_id=agendamentos[0].id,
                codigo_hash="a" * 64,
                expira_em=agora - timedelta(minutes=1),
            ),
            CodigoCancelamento(
                prefeitura_id=prefeitura.id,
                agendamento_id=agendamentos[1].id,
                codigo_hash="b" * 64,
                expira_em=agora + timedelta(minutes=10),
            ),
        ])
        await session.commit()
        vigente_id = agendamentos[1].id

    async with session_maker() as session:
        assert await remover_codigos_vencidos(session) == 1

    async with session_maker() as session:
        restantes = (await session.scalars(select(CodigoCancelamento.agendamento_id))).all()
        assert restantes == [vigente_id]


@pytest.mark.asyncio
async def test_whatsapp_envia_para_provedor():
    enviados = []

    def handler(request: httpx.Request) -> httpx.Response:
        enviados.append(request)
        return httpx.Response(200, json={"messageId": "abc123"})

    service = WhatsAppService(
        api_url="https://zapi.test",
        instance_id="inst",
        token="tok",
        client_token="segredo",
        transport=httpx.MockTransport(handler),
    )
    resultado = await service.enviar_texto("(88) 99999-1234", "Olá")

    assert resultado == {"messageId": "abc123"}
    assert str(enviados[0].url) == "https://zapi.test/instances/inst/token/tok/send-text"
    assert enviados[0].headers["Client-Token"] == "segredo"


@pytest.mark.asyncio
async def test_whatsapp_erro_do_provedor():
    service = WhatsAppService(
        api_url="https://zapi.test",
        instance_id="inst",
        token="tok",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="erro")),
    )
    with pytest.raises(MessagingError):
        await service.enviar_texto("88999991234", "Olá")


@pytest.mark.asyncio
async def test_whatsapp_simulado_sem_credenciais():
    service = WhatsAppService(instance_id="", token="")
    assert await service.enviar_texto("88999991234", "Olá") == {"simulado": True}
