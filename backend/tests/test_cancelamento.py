"""
Testes do cancelamento pelo cidadão e do bloqueio de CPF.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql

from app.models import CpfCancelamento
from app.repositories.agendamento_repository import AgendamentoRepository


async def _agendar(client: AsyncClient, headers, payload_agendamento, **extra) -> int:
    response = await client.post("/api/agendamentos", json=payload_agendamento(**extra), headers=headers)
    assert response.status_code == 201
    return response.json()["data"]["id"]


async def _cancelar(client: AsyncClient, headers, agendamento_id: int) -> dict:
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=headers,
    )
    assert response.status_code == 200
    codigo = response.json()["data"]["codigo_desenvolvimento"]

    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
        json={"codigo": codigo},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()["data"]


@pytest.mark.asyncio
async def test_solicitar_envia_codigo(client: AsyncClient, tenant_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)

    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["enviado"] is True
    assert data["telefone_mascarado"] == "*******1234"
    assert data["expira_em_minutos"] == 15
    assert len(data["codigo_desenvolvimento"]) == 6


@pytest.mark.asyncio
async def test_confirmar_cancela(client: AsyncClient, tenant_headers, admin_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)

    data = await _cancelar(client, tenant_headers, agendamento_id)
    assert data["status"] == "cancelado"

    response = await client.get(f"/api/agendamentos/{agendamento_id}", headers=admin_headers)
    agendamento = response.json()["data"]
    assert agendamento["cancelado_por"] == "cidadao"
    assert agendamento["historico_status"][-1]["status"] == "cancelado"

    # Cancelado não pode ser cancelado de novo
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANCELAMENTO_NAO_PERMITIDO"


@pytest.mark.asyncio
async def test_codigo_errado(client: AsyncClient, tenant_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    codigo = response.json()["data"]["codigo_desenvolvimento"]
    errado = "000000" if codigo != "000000" else "111111"

    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
        json={"codigo": errado},
        headers=tenant_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CODIGO_INVALIDO"

    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
        json={"codigo": codigo},
        headers=tenant_headers,
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_tentativas_esgotadas(client: AsyncClient, tenant_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    codigo = response.json()["data"]["codigo_desenvolvimento"]
    errado = "000000" if codigo != "000000" else "111111"

    for _ in range(5):
        await client.post(
            f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
            json={"codigo": errado},
            headers=tenant_headers,
        )

    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
        json={"codigo": codigo},
        headers=tenant_headers,
    )
    assert response.status_code == 400
    assert "tentativas" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_confirmar_sem_solicitar(client: AsyncClient, tenant_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento",
        json={"codigo": "123456"},
        headers=tenant_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CODIGO_INVALIDO"


@pytest.mark.asyncio
async def test_agendamento_sem_telefone(client: AsyncClient, tenant_headers, payload_agendamento):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento, telefone=None)
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TELEFONE_INVALIDO"


@pytest.mark.asyncio
async def test_cancelamentos_recorrentes_bloqueiam_cpf(
    client: AsyncClient, tenant_headers, admin_headers, payload_agendamento
):
    for hora in ("08:00", "08:30", "09:00"):
        agendamento_id = await _agendar(client, tenant_headers, payload_agendamento, hora_agendamento=hora)
        await _cancelar(client, tenant_headers, agendamento_id)

    response = await client.post(
        "/api/agendamentos",
        json=payload_agendamento(hora_agendamento="10:00"),
        headers=tenant_headers,
    )
    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "CPF_BLOQUEADO"
    assert error["details"]["data_desbloqueio"]

    response = await client.get("/api/bloqueio/verificar/529.982.247-25", headers=tenant_headers)
    situacao = response.json()["data"]
    assert situacao["bloqueado"] is True
    assert situacao["cancelamentos_count"] == 3

    # Outro CPF continua liberado
    response = await client.post(
        "/api/agendamentos",
        json=payload_agendamento(hora_agendamento="10:00", cidadao_cpf="11144477735"),
        headers=tenant_headers,
    )
    assert response.status_code == 201

    response = await client.get("/api/cpf-bloqueios", headers=admin_headers)
    bloqueios = response.json()["data"]
    assert len(bloqueios) == 1
    assert bloqueios[0]["cpf"] == "52998224725"

    response = await client.delete(f"/api/cpf-bloqueios/{bloqueios[0]['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get("/api/bloqueio/verificar/52998224725", headers=tenant_headers)
    assert response.json()["data"]["bloqueado"] is False

    response = await client.post(
        "/api/agendamentos",
        json=payload_agendamento(hora_agendamento="10:30"),
        headers=tenant_headers,
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_bloqueio_restrito_a_prefeitura(
    client: AsyncClient, tenant_headers, outra_prefeitura, payload_agendamento
):
    for hora in ("08:00", "08:30", "09:00"):
        agendamento_id = await _agendar(client, tenant_headers, payload_agendamento, hora_agendamento=hora)
        await _cancelar(client, tenant_headers, agendamento_id)

    response = await client.get(
        "/api/bloqueio/verificar/52998224725",
        headers={"x-prefeitura-slug": outra_prefeitura.slug},
    )
    assert response.json()["data"]["bloqueado"] is False


@pytest.mark.asyncio
async def test_cpf_bloqueios_exige_equipe(client: AsyncClient, tenant_headers):
    response = await client.get("/api/cpf-bloqueios", headers=tenant_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_confirmacao_repetida_conta_um_cancelamento(
    client: AsyncClient, session_maker, tenant_headers, payload_agendamento
):
    agendamento_id = await _agendar(client, tenant_headers, payload_agendamento)
    response = await client.post(
        f"/api/agendamentos/{agendamento_id}/solicitar-cancelamento",
        headers=tenant_headers,
    )
    codigo = response.json()["data"]["codigo_desenvolvimento"]

    url = f"/api/agendamentos/{agendamento_id}/confirmar-cancelamento"
    response = await client.post(url, json={"codigo": codigo}, headers=tenant_headers)
    assert response.status_code == 200

    response = await client.post(url, json={"codigo": codigo}, headers=tenant_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANCELAMENTO_NAO_PERMITIDO"

    async with session_maker() as session:
        total = await session.scalar(select(func.count(CpfCancelamento.id)))
    assert total == 1


def test_confirmacao_trava_agendamento():
    query = AgendamentoRepository(None, 1).consulta_travada(10)
    sql = str(query.compile(dialect=postgresql.dialect()))
    assert "FOR UPDATE" in sql
    assert "agendamentos.prefeitura_id" in sql


@pytest.mark.asyncio
async def test_reativar_cpf_bloqueado(client: AsyncClient, tenant_headers, admin_headers, payload_agendamento):
    ids = []
    for hora in ("08:00", "08:30", "09:00"):
        agendamento_id = await _agendar(client, tenant_headers, payload_agendamento, hora_agendamento=hora)
        await _cancelar(client, tenant_headers, agendamento_id)
        ids.append(agendamento_id)

    response = await client.patch(
        f"/api/agendamentos/{ids[0]}",
        json={"status": "pendente"},
        headers=admin_headers,
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "CPF_BLOQUEADO"

    # Anotação sem reativar continua permitida
    response = await client.patch(
        f"/api/agendamentos/{ids[0]}",
        json={"nota": "Cidadão ligou pedindo novo horário"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelado"
