"""
Testes da gestão de equipe e do cadastro de prefeituras.
"""
import pytest
from httpx import AsyncClient


def _novo_usuario(**extra) -> dict:
    dados = {
        "nome": "Carla Recepção",
        "email": "carla@iraucuba.ce.gov.br",
        "senha": "outra-senha-123",
        "perfil": "secretaria",
    }
    dados.update(extra)
    return dados


@pytest.mark.asyncio
async def test_admin_cadastra_usuario(client: AsyncClient, admin_headers, tenant_headers):
    response = await client.post("/api/users", json=_novo_usuario(), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["perfil"] == "secretaria"
    assert data["ativo"] is True
    assert "senha" not in data and "senha_hash" not in data

    response = await client.post(
        "/api/users/login",
        json={"identifier": "carla@iraucuba.ce.gov.br", "senha": "outra-senha-123"},
        headers=tenant_headers,
    )
    assert response.status_code == 200

    response = await client.get("/api/users", headers=admin_headers)
    assert {u["email"] for u in response.json()["data"]} == {
        "admin@iraucuba.ce.gov.br",
        "carla@iraucuba.ce.gov.br",
    }


@pytest.mark.asyncio
async def test_email_duplicado(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/users",
        json=_novo_usuario(email="Admin@Iraucuba.ce.gov.br"),
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_senha_curta(client: AsyncClient, admin_headers):
    response = await client.post("/api/users", json=_novo_usuario(senha="123"), headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_desativar_usuario_bloqueia_acesso(client: AsyncClient, admin_headers, secretaria_user, secretaria_headers):
    response = await client.patch(
        f"/api/users/{secretaria_user.id}",
        json={"ativo": False},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["ativo"] is False

    response = await client.get("/api/agendamentos", headers=secretaria_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_INACTIVE"


@pytest.mark.asyncio
async def test_admin_nao_remove_a_si_mesmo(client: AsyncClient, admin_user, admin_headers):
    response = await client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
    assert response.status_code == 400

    response = await client.patch(f"/api/users/{admin_user.id}", json={"ativo": False}, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_excluir_usuario(client: AsyncClient, admin_headers, secretaria_user):
    response = await client.delete(f"/api/users/{secretaria_user.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.delete(f"/api/users/{secretaria_user.id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_super_admin_gerencia_prefeituras(client: AsyncClient, super_admin_headers, prefeitura):
    response = await client.post(
        "/api/prefeituras",
        json={"nome": "Prefeitura de Itapajé", "slug": "Itapaje"},
        headers=super_admin_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "itapaje"
    assert data["protocolo_seq"] == 0

    response = await client.post(
        "/api/prefeituras",
        json={"nome": "Outra Irauçuba", "slug": "iraucuba"},
        headers=super_admin_headers,
    )
    assert response.status_code == 409

    response = await client.patch(
        f"/api/prefeituras/{data['id']}",
        json={"ativo": False},
        headers=super_admin_headers,
    )
    assert response.json()["data"]["ativo"] is False

    response = await client.get("/api/prefeituras", headers=super_admin_headers)
    assert {p["slug"] for p in response.json()["data"]} == {"iraucuba", "itapaje"}

    response = await client.delete(f"/api/prefeituras/{data['id']}", headers=super_admin_headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_slug_invalido(client: AsyncClient, super_admin_headers):
    response = await client.post(
        "/api/prefeituras",
        json={"nome": "Prefeitura", "slug": "com espaço"},
        headers=super_admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_usuario_da_prefeitura_nao_gerencia_prefeituras(client: AsyncClient, admin_headers):
    response = await client.get("/api/prefeituras", headers=admin_headers)
    assert response.status_code == 403
