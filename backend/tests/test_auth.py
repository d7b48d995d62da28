"""
Testes de identificação da prefeitura e autenticação.
"""
import hashlib

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.security import create_access_token, get_password_hash
from app.models import Prefeitura, Usuario


@pytest.mark.asyncio
async def test_rota_de_prefeitura_sem_cabecalho(client: AsyncClient, prefeitura):
    response = await client.get("/api/locais-atendimento")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TENANT_NOT_IDENTIFIED"


@pytest.mark.asyncio
async def test_prefeitura_inexistente(client: AsyncClient, prefeitura):
    response = await client.get("/api/locais-atendimento", headers={"x-prefeitura-slug": "nao-existe"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_prefeitura_por_tenant_id(client: AsyncClient, prefeitura, local):
    response = await client.get("/api/locais-atendimento", headers={"x-tenant-id": str(prefeitura.id)})
    assert response.status_code == 200
    assert len(response.json()["data"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("metodo", "rota", "autenticado"),
    [
        ("GET", "/api/locais-atendimento", False),
        ("POST", "/api/agendamentos", False),
        ("GET", "/api/agendamentos", True),
        ("POST", "/api/agendamentos/1/solicitar-cancelamento", False),
    ],
)
async def test_prefeitura_inativa_recusada(
    client: AsyncClient,
    session_maker,
    prefeitura,
    tenant_headers,
    admin_headers,
    payload_agendamento,
    metodo,
    rota,
    autenticado,
):
    headers = admin_headers if autenticado else tenant_headers
    async with session_maker() as session:
        registro = await session.get(Prefeitura, prefeitura.id)
        registro.ativo = False
        await session.commit()

    corpo = payload_agendamento() if rota == "/api/agendamentos" and metodo == "POST" else None
    response = await client.request(metodo, rota, json=corpo, headers=headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_INACTIVE"


@pytest.mark.asyncio
async def test_login_por_email(client: AsyncClient, admin_user, tenant_headers):
    response = await client.post(
        "/api/users/login",
        json={"identifier": "ADMIN@iraucuba.ce.gov.br", "senha": "senha-forte-123"},
        headers=tenant_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["usuario"]["email"] == "admin@iraucuba.ce.gov.br"
    assert "senha_hash" not in data["usuario"]


@pytest.mark.asyncio
async def test_login_por_cpf(client: AsyncClient, admin_user, tenant_headers):
    response = await client.post(
        "/api/users/login",
        json={"identifier": "111.444.777-35", "senha": "senha-forte-123"},
        headers=tenant_headers,
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_senha_errada(client: AsyncClient, admin_user, tenant_headers):
    response = await client.post(
        "/api/users/login",
        json={"identifier": "admin@iraucuba.ce.gov.br", "senha": "errada"},
        headers=tenant_headers,
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_login_de_outra_prefeitura(client: AsyncClient, admin_user, outra_prefeitura):
    """Usuário só existe na própria prefeitura."""
    response = await client.post(
        "/api/users/login",
        json={"identifier": "admin@iraucuba.ce.gov.br", "senha": "senha-forte-123"},
        headers={"x-prefeitura-slug": outra_prefeitura.slug},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_usuario_inativo(client: AsyncClient, session_maker, prefeitura, tenant_headers):
    async with session_maker() as session:
        session.add(
            Usuario(
                prefeitura_id=prefeitura.id,
                nome="Inativo",
                email="inativo@iraucuba.ce.gov.br",
                senha_hash=get_password_hash("senha-forte-123"),
                ativo=False,
            )
        )
        await session.commit()

    response = await client.post(
        "/api/users/login",
        json={"identifier": "inativo@iraucuba.ce.gov.br", "senha": "senha-forte-123"},
        headers=tenant_headers,
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_INACTIVE"


@pytest.mark.asyncio
async def test_login_migra_hash_legado(client: AsyncClient, session_maker, prefeitura, tenant_headers):
    salt = "a1b2c3d4e5f60718"
    chave = hashlib.scrypt(b"senha-legada", salt=salt.encode(), n=16384, r=8, p=1, dklen=64)
    async with session_maker() as session:
        usuario = Usuario(
            prefeitura_id=prefeitura.id,
            nome="Usuário Antigo",
            email="antigo@iraucuba.ce.gov.br",
            senha_hash=f"{salt}:{chave.hex()}",
        )
        session.add(usuario)
        await session.commit()
        usuario_id = usuario.id

    response = await client.post(
        "/api/users/login",
        json={"identifier": "antigo@iraucuba.ce.gov.br", "senha": "senha-legada"},
        headers=tenant_headers,
    )
    assert response.status_code == 200

    async with session_maker() as session:
        senha_hash = await session.scalar(select(Usuario.senha_hash).where(Usuario.id == usuario_id))
    assert senha_hash.startswith("$scrypt$")


@pytest.mark.asyncio
async def test_rota_da_equipe_sem_token(client: AsyncClient, tenant_headers):
    response = await client.get("/api/agendamentos", headers=tenant_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_de_outra_prefeitura(client: AsyncClient, admin_user, outra_prefeitura):
    token = create_access_token(
        subject=admin_user.id,
        additional_claims={"prefeitura_id": admin_user.prefeitura_id, "perfil": "admin"},
    )
    response = await client.get(
        "/api/agendamentos",
        headers={"x-prefeitura-slug": outra_prefeitura.slug, "Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_ACCESS_DENIED"


@pytest.mark.asyncio
async def test_super_admin_login_e_acesso(client: AsyncClient, super_admin, prefeitura):
    response = await client.post(
        "/api/super-admin/login",
        json={"email": "root@agendacin.com.br", "senha": "senha-forte-123"},
    )
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    # Token de super admin vale em qualquer prefeitura
    response = await client.get(
        "/api/agendamentos",
        headers={"x-prefeitura-slug": prefeitura.slug, "Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_secretaria_nao_gerencia_equipe(client: AsyncClient, secretaria_headers):
    response = await client.get("/api/users", headers=secretaria_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"
