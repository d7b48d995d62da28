"""
Repositories de usuários da prefeitura e super administradores.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.usuario import SuperAdmin, Usuario
from app.repositories.base import BaseRepository, MultiTenantRepository


class UsuarioRepository(MultiTenantRepository[Usuario]):
    """Repository para operações com Usuário."""

    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(Usuario, db, prefeitura_id)

    async def get_by_email(self, email: str) -> Usuario | None:
        """Busca usuário por email (sem diferenciar maiúsculas) no tenant."""
        result = await self.db.execute(
            self._scoped().where(func.lower(Usuario.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_by_cpf(self, cpf: str) -> Usuario | None:
        result = await self.db.execute(self._scoped().where(Usuario.cpf == cpf))
        return result.scalars().first()

    async def listar(self, apenas_ativos: bool = False) -> list[Usuario]:
        """Lista a equipe da prefeitura."""
        query = self._scoped()
        if apenas_ativos:
            query = query.where(Usuario.ativo == True)  # noqa: E712
        result = await self.db.execute(query.order_by(Usuario.nome))
        return list(result.scalars().all())


class SuperAdminRepository(BaseRepository[SuperAdmin]):
    def __init__(self, db: AsyncSession):
        super().__init__(SuperAdmin, db)

    async def get_by_email(self, email: str) -> SuperAdmin | None:
        result = await self.db.execute(
            select(SuperAdmin).where(func.lower(SuperAdmin.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()
