"""
Dependências injetáveis do FastAPI.

Define dependências reutilizáveis para database session, resolução da
prefeitura (tenant) e autenticação da equipe.
"""

from dataclasses import dataclass
from typing import Annotated, AsyncGenerator

import structlog
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    InvalidTokenError,
    TenantAccessError,
    UserInactiveError,
)
from app.core.security import verify_token
from app.db.session import async_session_maker
from app.models.prefeitura import Prefeitura
from app.models.usuario import PerfilUsuario
from app.repositories.usuario_repository import SuperAdminRepository, UsuarioRepository
from app.services.prefeitura_service import PrefeituraService

security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que fornece uma sessão de banco de dados.

    Uso:
        @router.get("/items")
        async def get_items(db: DBSession):
            ...
    """
    async with async_session_maker() as session:
        yield session


async def get_prefeitura(
    db: Annotated[AsyncSession, Depends(get_db)],
    x_prefeitura_slug: Annotated[str | None, Header()] = None,
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> Prefeitura:
    """
    Resolve a prefeitura pelos cabeçalhos ``x-prefeitura-slug`` ou
    ``x-tenant-id``. Prefeitura inativa é recusada com 403 em qualquer
    rota, de leitura ou escrita.
    """
    prefeitura = await PrefeituraService(db).resolver(
        slug=x_prefeitura_slug,
        tenant_id=x_tenant_id,
    )
    structlog.contextvars.bind_contextvars(prefeitura=prefeitura.slug)
    return prefeitura


async def get_token_payload(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> dict:
    if credentials is None:
        raise AuthenticationError("Token de autenticação não fornecido")
    payload = verify_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise InvalidTokenError()
    return payload


@dataclass
class Operador:
    """Quem está operando uma rota da equipe: usuário da prefeitura ou super admin."""

    id: int
    nome: str
    email: str
    perfil: PerfilUsuario
    super_admin: bool = False

    @property
    def is_admin(self) -> bool:
        return self.super_admin or self.perfil == PerfilUsuario.ADMIN


async def _carregar_super_admin(db: AsyncSession, payload: dict) -> Operador:
    admin = await SuperAdminRepository(db).get_by_id(int(payload["sub"]))
    if admin is None:
        raise InvalidTokenError()
    if not admin.ativo:
        raise UserInactiveError()
    return Operador(
        id=admin.id,
        nome=admin.nome,
        email=admin.email,
        perfil=PerfilUsuario.ADMIN,
        super_admin=True,
    )


async def get_current_user(
    prefeitura: Annotated[Prefeitura, Depends(get_prefeitura)],
    payload: Annotated[dict, Depends(get_token_payload)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Operador:
    """
    Dependency que retorna o operador autenticado na prefeitura da requisição.

    O token de usuário só vale para a prefeitura que o emitiu; token de
    super admin vale para qualquer prefeitura.

    Raises:
        AuthenticationError 401: token ausente, inválido ou usuário inexistente
        TenantAccessError 403: token de outra prefeitura
        UserInactiveError 403: usuário desativado
    """
    if payload.get("super_admin"):
        return await _carregar_super_admin(db, payload)

    if payload.get("prefeitura_id") != prefeitura.id:
        raise TenantAccessError()

    usuario = await UsuarioRepository(db, prefeitura.id).get_by_id(int(payload["sub"]))
    if usuario is None:
        raise InvalidTokenError()
    if not usuario.ativo:
        raise UserInactiveError()

    structlog.contextvars.bind_contextvars(usuario_id=usuario.id)
    return Operador(
        id=usuario.id,
        nome=usuario.nome,
        email=usuario.email,
        perfil=usuario.perfil,
    )


def require_roles(*perfis: PerfilUsuario):
    """
    Factory para criar dependency que exige perfis específicos.

    Super admin passa em qualquer exigência.

    Uso:
        @router.post("", dependencies=[Depends(require_roles(PerfilUsuario.ADMIN))])
        async def create_item(...):
            ...
    """
    async def role_checker(
        current_user: Annotated[Operador, Depends(get_current_user)],
    ) -> Operador:
        if not current_user.super_admin and current_user.perfil not in perfis:
            raise InsufficientPermissionsError(
                f"Requer perfil: {', '.join(p.value for p in perfis)}"
            )
        return current_user

    return role_checker


async def get_super_admin(
    payload: Annotated[dict, Depends(get_token_payload)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Operador:
    """Rotas da plataforma (cadastro de prefeituras)."""
    if not payload.get("super_admin"):
        raise InsufficientPermissionsError("gerenciar prefeituras")
    return await _carregar_super_admin(db, payload)


# Type aliases para facilitar uso nas rotas
DBSession = Annotated[AsyncSession, Depends(get_db)]
PrefeituraAtual = Annotated[Prefeitura, Depends(get_prefeitura)]
CurrentUser = Annotated[Operador, Depends(get_current_user)]
AdminUser = Annotated[Operador, Depends(require_roles(PerfilUsuario.ADMIN))]
SuperAdminUser = Annotated[Operador, Depends(get_super_admin)]
