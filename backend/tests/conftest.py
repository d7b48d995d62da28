"""
Pytest fixtures para testes da Agenda CIN.

Cada teste usa um banco SQLite em memória próprio. Cada requisição
recebe uma sessão nova, como acontece em produção.
"""
from datetime import timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.core.dependencies import get_db
from app.core.security import create_access_token, get_password_hash
from app.models import LocalAtendimento, PerfilUsuario, Prefeitura, SuperAdmin, Usuario
from app.services.agendamento_service import hoje
from app.services.whatsapp_service import WhatsAppService, get_whatsapp_service

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SENHA = "senha-forte-123"


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Banco em memória com o schema completo."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


async def salvar(session_maker: async_sessionmaker[AsyncSession], instancia):
    """Grava a instância numa sessão curta e devolve com os campos carregados."""
    async with session_maker() as session:
        session.add(instancia)
        await session.commit()
        await session.refresh(instancia)
    return instancia


@pytest_asyncio.fixture
async def prefeitura(session_maker) -> Prefeitura:
    return await salvar(
        session_maker,
        Prefeitura(nome="Prefeitura de Irauçuba", slug="iraucuba", telefone_contato="8836351100"),
    )


@pytest_asyncio.fixture
async def outra_prefeitura(session_maker) -> Prefeitura:
    return await salvar(session_maker, Prefeitura(nome="Prefeitura de Sobral", slug="sobral"))


@pytest_asyncio.fixture
async def admin_user(session_maker, prefeitura: Prefeitura) -> Usuario:
    return await salvar(
        session_maker,
        Usuario(
            prefeitura_id=prefeitura.id,
            nome="Ana Administradora",
            email="admin@iraucuba.ce.gov.br",
            cpf="11144477735",
            senha_hash=get_password_hash(SENHA),
            perfil=PerfilUsuario.ADMIN,
        ),
    )


@pytest_asyncio.fixture
async def secretaria_user(session_maker, prefeitura: Prefeitura) -> Usuario:
    return await salvar(
        session_maker,
        Usuario(
            prefeitura_id=prefeitura.id,
            nome="Bruno Atendente",
            email="atendimento@iraucuba.ce.gov.br",
            senha_hash=get_password_hash(SENHA),
            perfil=PerfilUsuario.SECRETARIA,
        ),
    )


@pytest_asyncio.fixture
async def super_admin(session_maker) -> SuperAdmin:
    return await salvar(
        session_maker,
        SuperAdmin(nome="Plataforma", email="root@agendacin.com.br", senha_hash=get_password_hash(SENHA)),
    )


@pytest_asyncio.fixture
async def local(session_maker, prefeitura: Prefeitura) -> LocalAtendimento:
    return await salvar(
        session_maker,
        LocalAtendimento(
            prefeitura_id=prefeitura.id,
            nome_local="Secretaria de Administração",
            endereco="Rua Coronel Manoel Ricardo, 100 - Centro",
        ),
    )


def token_usuario(usuario: Usuario) -> str:
    return create_access_token(
        subject=usuario.id,
        additional_claims={"prefeitura_id": usuario.prefeitura_id, "perfil": usuario.perfil.value},
    )


@pytest.fixture
def tenant_headers(prefeitura: Prefeitura) -> dict[str, str]:
    return {"x-prefeitura-slug": prefeitura.slug}


@pytest.fixture
def admin_headers(prefeitura: Prefeitura, admin_user: Usuario) -> dict[str, str]:
    return {
        "x-prefeitura-slug": prefeitura.slug,
        "Authorization": f"Bearer {token_usuario(admin_user)}",
    }


@pytest.fixture
def secretaria_headers(prefeitura: Prefeitura, secretaria_user: Usuario) -> dict[str, str]:
    return {
        "x-prefeitura-slug": prefeitura.slug,
        "Authorization": f"Bearer {token_usuario(secretaria_user)}",
    }


@pytest.fixture
def super_admin_headers(super_admin: SuperAdmin) -> dict[str, str]:
    token = create_access_token(subject=super_admin.id, additional_claims={"super_admin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def payload_agendamento(local: LocalAtendimento):
    """Fábrica de payloads de agendamento válidos para daqui a uma semana."""

    def _payload(**extra) -> dict:
        dados = {
            "local_id": local.id,
            "cidadao_nome": "Maria do Socorro Lima",
            "cidadao_cpf": "529.982.247-25",
            "telefone": "(88) 99999-1234",
            "tipo_cin": "primeira_via",
            "data_agendamento": (hoje() + timedelta(days=7)).isoformat(),
            "hora_agendamento": "09:00",
            "aceite_termos": True,
        }
        dados.update(extra)
        return dados

    return _payload


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP com banco de teste e WhatsApp em modo simulado."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    def override_get_whatsapp_service():
        return WhatsAppService(instance_id="", token="")

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_whatsapp_service] = override_get_whatsapp_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
