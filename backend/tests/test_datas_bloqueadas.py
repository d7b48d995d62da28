"""
Testes de datas bloqueadas e seu efeito na agenda.
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.services.agendamento_service import hoje


def _daqui_a(dias: int) -> str:
    return (hoje() + timedelta(days=dias)).isoformat()


@pytest.mark.asyncio
async def test_bloqueio_dia_inteiro(client: AsyncClient, tenant_headers, secretaria_headers, payload_agendamento):
    response = await client.post(
        "/api/datas-bloqueadas",
        json={"data": _daqui_a(7), "motivo": "Feriado municipal", "tipo_bloqueio": "full-day"},
        headers=secretaria_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["horarios_bloqueados"] is None
    assert data["criado_por"] == "Bruno Atendente"

    response = await client.post("/api/agendamentos", json=payload_agendamento(), headers=tenant_headers)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "DATA_BLOQUEADA"
    assert "Feriado municipal" in error["message"]


@pytest.mark.asyncio
async def test_bloqueio_de_horarios(client: AsyncClient, tenant_headers, admin_headers, local, payload_agendamento):
    response = await client.post(
        "/api/datas-bloqueadas",
        json={
            "data": _daqui_a(7),
            "tipo_bloqueio": "specific-times",
            "horarios_bloqueados": ["09:30", "09:00"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["horarios_bloqueados"] == ["09:00", "09:30"]

    response = await client.post("/api/agendamentos", json=payload_agendamento(), headers=tenant_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "DATA_BLOQUEADA"

    response = await client.post(
        "/api/agendamentos",
        json=payload_agendamento(hora_agendamento="10:00"),
        headers=tenant_headers,
    )
    assert response.status_code == 201

    response = await client.get(
        "/api/agendamentos/disponibilidade",
        params={"data": _daqui_a(7), "local_id": local.id},
        headers=tenant_headers,
    )
    horarios = {h["hora"]: h for h in response.json()["data"]["horarios"]}
    assert horarios["09:00"]["disponivel"] is False
    assert horarios["09:00"]["vagas_restantes"] == 0
    assert horarios["08:30"]["disponivel"] is True


@pytest.mark.asyncio
async def test_disponibilidade_dia_bloqueado(client: AsyncClient, tenant_headers, admin_headers, local):
    await client.post(
        "/api/datas-bloqueadas",
        json={"data": _daqui_a(3), "motivo": "Ponto facultativo"},
        headers=admin_headers,
    )

    response = await client.get(
        "/api/agendamentos/disponibilidade",
        params={"data": _daqui_a(3), "local_id": local.id},
        headers=tenant_headers,
    )
    data = response.json()["data"]
    assert data["dia_bloqueado"] is True
    assert data["motivo_bloqueio"] == "Ponto facultativo"
    assert not any(h["disponivel"] for h in data["horarios"])


@pytest.mark.asyncio
async def test_dia_inteiro_com_horarios_recusado(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/datas-bloqueadas",
        json={"data": _daqui_a(5), "tipo_bloqueio": "full-day", "horarios_bloqueados": ["08:00"]},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_bloqueio_exige_equipe(client: AsyncClient, tenant_headers):
    response = await client.post(
        "/api/datas-bloqueadas",
        json={"data": _daqui_a(5)},
        headers=tenant_headers,
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_listar_e_remover_bloqueio(client: AsyncClient, tenant_headers, admin_headers, payload_agendamento):
    for dias in (2, 7, 20):
        await client.post("/api/datas-bloqueadas", json={"data": _daqui_a(dias)}, headers=admin_headers)

    response = await client.get(
        "/api/datas-bloqueadas",
        params={"data_inicio": _daqui_a(5), "data_fim": _daqui_a(10)},
        headers=tenant_headers,
    )
    assert response.status_code == 200
    bloqueios = response.json()["data"]
    assert [b["data"] for b in bloqueios] == [_daqui_a(7)]

    response = await client.delete(f"/api/datas-bloqueadas/{bloqueios[0]['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.post("/api/agendamentos", json=payload_agendamento(), headers=tenant_headers)
    assert response.status_code == 201

    response = await client.delete(f"/api/datas-bloqueadas/{bloqueios[0]['id']}", headers=admin_headers)
    assert response.status_code == 404
