"""
Service de Autenticação.

Login da equipe da prefeitura e dos super administradores.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.cpf import normalizar_cpf
from app.core.exceptions import AuthenticationError, UserInactiveError
from app.core.security import (
    create_access_token,
    get_password_hash,
    needs_rehash,
    verify_password,
)
from app.models.prefeitura import Prefeitura
from app.models.usuario import SuperAdmin, Usuario
from app.repositories.usuario_repository import SuperAdminRepository, UsuarioRepository

logger = structlog.get_logger()


class AuthService:
    """Service de autenticação (JWT local)."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._super_admin_repo = SuperAdminRepository(db)

    def _emitir_token(self, subject: int, claims: dict) -> dict:
        return {
            "access_token": create_access_token(subject=subject, additional_claims=claims),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    async def _migrar_hash(self, conta: Usuario | SuperAdmin, senha: str) -> None:
        """Regrava o hash no esquema atual após login bem-sucedido."""
        if needs_rehash(conta.senha_hash):
            conta.senha_hash = get_password_hash(senha)
            await self._db.commit()
            logger.info("Hash de senha migrado", conta=type(conta).__name__, conta_id=conta.id)

    async def login_usuario(
        self,
        prefeitura: Prefeitura,
        identifier: str,
        senha: str,
    ) -> dict:
        """
        Login da equipe com email (ou CPF) e senha.

        Raises:
            AuthenticationError: usuário inexistente ou senha incorreta (401)
            UserInactiveError: usuário desativado (403)
        """
        repo = UsuarioRepository(self._db, prefeitura.id)
        if "@" in identifier:
            usuario = await repo.get_by_email(identifier)
        else:
            usuario = await repo.get_by_cpf(normalizar_cpf(identifier))

        if not usuario or not verify_password(senha, usuario.senha_hash):
            logger.warning("Login falhou", prefeitura_id=prefeitura.id)
            raise AuthenticationError("Credenciais inválidas")

        if not usuario.ativo:
            logger.warning("Login de usuário inativo", usuario_id=usuario.id)
            raise UserInactiveError()

        await self._migrar_hash(usuario, senha)

        resultado = self._emitir_token(
            usuario.id,
            {"prefeitura_id": prefeitura.id, "perfil": usuario.perfil.value},
        )
        logger.info("Login realizado com sucesso", usuario_id=usuario.id, prefeitura_id=prefeitura.id)
        return {**resultado, "usuario": usuario}

    async def login_super_admin(self, email: str, senha: str) -> dict:
        admin = await self._super_admin_repo.get_by_email(email)

        if not admin or not verify_password(senha, admin.senha_hash):
            logger.warning("Login de super admin falhou")
            raise AuthenticationError("Credenciais inválidas")

        if not admin.ativo:
            raise UserInactiveError()

        await self._migrar_hash(admin, senha)

        resultado = self._emitir_token(admin.id, {"super_admin": True})
        logger.info("Login de super admin", super_admin_id=admin.id)
        return {**resultado, "super_admin": admin}

    async def garantir_super_admin_inicial(self) -> SuperAdmin | None:
        """
        Cria o primeiro super admin a partir de SUPERADMIN_EMAIL/PASSWORD.

        Não faz nada se as variáveis não estiverem definidas ou se o
        email já estiver cadastrado.
        """
        if not settings.SUPERADMIN_EMAIL or not settings.SUPERADMIN_PASSWORD:
            return None

        existente = await self._super_admin_repo.get_by_email(settings.SUPERADMIN_EMAIL)
        if existente:
            return existente

        admin = await self._super_admin_repo.create(
            nome=settings.SUPERADMIN_NOME,
            email=settings.SUPERADMIN_EMAIL.strip().lower(),
            senha_hash=get_password_hash(settings.SUPERADMIN_PASSWORD),
        )
        logger.info("Super admin inicial criado", super_admin_id=admin.id)
        return admin
