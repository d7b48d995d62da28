"""
Testes de locais de atendimento, localidades de origem e bairros.
"""
import pytest
from httpx import AsyncClient

from app.models import LocalidadeOrigem


@pytest.mark.asyncio
async def test_locais_publicos_e_cadastro(client: AsyncClient, tenant_headers, admin_headers, local):
    response = await client.post(
        "/api/locais-atendimento",
        json={"nome_local": "Posto do Distrito de Missi", "ativo": False},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["prefeitura_id"] == local.prefeitura_id

    response = await client.get("/api/locais-atendimento", headers=tenant_headers)
    assert len(response.json()["data"]) == 2

    response = await client.get(
        "/api/locais-atendimento",
        params={"apenas_ativos": True},
        headers=tenant_headers,
    )
    assert [l["nome_local"] for l in response.json()["data"]] == ["Secretaria de Administração"]


@pytest.mark.asyncio
async def test_local_com_agendamentos_nao_e_excluido(
    client: AsyncClient, tenant_headers, admin_headers, local, payload_agendamento
):
    await client.post("/api/agendamentos", json=payload_agendamento(), headers=tenant_headers)

    response = await client.delete(f"/api/locais-atendimento/{local.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "RECURSO_EM_USO"


@pytest.mark.asyncio
async def test_excluir_local_sem_agendamentos(client: AsyncClient, admin_headers, local):
    response = await client.delete(f"/api/locais-atendimento/{local.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.delete(f"/api/locais-atendimento/{local.id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_localidades_e_bairros(client: AsyncClient, tenant_headers, admin_headers):
    response = await client.post(
        "/api/localidades-origem",
        json={"nome": "Missi", "tipo": "distrito"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    localidade_id = response.json()["data"]["id"]

    response = await client.post(
        "/api/bairros",
        json={"localidade_id": localidade_id, "nome": "Centro"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    bairro_id = response.json()["data"]["id"]

    response = await client.get(f"/api/localidades-origem/{localidade_id}/bairros", headers=tenant_headers)
    assert [b["nome"] for b in response.json()["data"]] == ["Centro"]

    response = await client.patch(f"/api/bairros/{bairro_id}", json={"nome": "Centro Velho"}, headers=admin_headers)
    assert response.json()["data"]["nome"] == "Centro Velho"

    response = await client.patch(
        f"/api/localidades-origem/{localidade_id}",
        json={"tipo": "povoado"},
        headers=admin_headers,
    )
    assert response.json()["data"]["tipo"] == "povoado"

    response = await client.delete(f"/api/bairros/{bairro_id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.delete(f"/api/localidades-origem/{localidade_id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get("/api/localidades-origem", headers=tenant_headers)
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_nomes_duplicados(client: AsyncClient, admin_headers):
    response = await client.post("/api/localidades-origem", json={"nome": "Sede"}, headers=admin_headers)
    localidade_id = response.json()["data"]["id"]

    response = await client.post("/api/localidades-origem", json={"nome": "sede "}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    await client.post("/api/bairros", json={"localidade_id": localidade_id, "nome": "Alto"}, headers=admin_headers)
    response = await client.post(
        "/api/bairros",
        json={"localidade_id": localidade_id, "nome": "ALTO"},
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_bairro_em_localidade_de_outra_prefeitura(
    client: AsyncClient, session_maker, admin_headers, outra_prefeitura
):
    async with session_maker() as session:
        localidade = LocalidadeOrigem(prefeitura_id=outra_prefeitura.id, nome="Jaibaras")
        session.add(localidade)
        await session.commit()
        localidade_id = localidade.id

    response = await client.post(
        "/api/bairros",
        json={"localidade_id": localidade_id, "nome": "Centro"},
        headers=admin_headers,
    )
    assert response.status_code == 404

    response = await client.patch(
        f"/api/localidades-origem/{localidade_id}",
        json={"nome": "Outro nome"},
        headers=admin_headers,
    )
    assert response.status_code == 404
