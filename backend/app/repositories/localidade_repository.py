"""
Repositories de localidades de origem e bairros.
"""

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.localidade import Bairro, LocalidadeOrigem
from app.repositories.base import MultiTenantRepository


class LocalidadeRepository(MultiTenantRepository[LocalidadeOrigem]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(LocalidadeOrigem, db, prefeitura_id)

    async def get_by_nome(self, nome: str) -> LocalidadeOrigem | None:
        result = await self.db.execute(
            self._scoped().where(func.lower(LocalidadeOrigem.nome) == nome.strip().lower())
        )
        return result.scalar_one_or_none()

    async def listar(self) -> list[LocalidadeOrigem]:
        result = await self.db.execute(
            self._scoped().order_by(LocalidadeOrigem.tipo, LocalidadeOrigem.nome)
        )
        return list(result.scalars().all())


class BairroRepository(MultiTenantRepository[Bairro]):
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        super().__init__(Bairro, db, prefeitura_id)

    async def listar_por_localidade(self, localidade_id: int) -> list[Bairro]:
        result = await self.db.execute(
            self._scoped()
            .where(Bairro.localidade_id == localidade_id)
            .order_by(Bairro.nome)
        )
        return list(result.scalars().all())

    async def get_by_nome(self, localidade_id: int, nome: str) -> Bairro | None:
        result = await self.db.execute(
            self._scoped().where(
                Bairro.localidade_id == localidade_id,
                func.lower(Bairro.nome) == nome.strip().lower(),
            )
        )
        return result.scalar_one_or_none()
