"""
Repository da Prefeitura.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.prefeitura import Prefeitura
from app.repositories.base import BaseRepository


class PrefeituraRepository(BaseRepository[Prefeitura]):
    """Repository para operações com Prefeitura."""

    def __init__(self, db: AsyncSession):
        super().__init__(Prefeitura, db)

    async def get_by_slug(self, slug: str) -> Prefeitura | None:
        """Busca prefeitura pelo slug."""
        result = await self.db.execute(
            select(Prefeitura).where(Prefeitura.slug == slug)
        )
        return result.scalar_one_or_none()

    async def listar(self) -> list[Prefeitura]:
        result = await self.db.execute(select(Prefeitura).order_by(Prefeitura.nome))
        return list(result.scalars().all())

    async def proximo_protocolo(self, prefeitura_id: int) -> int:
        """
        Reserva o próximo número de protocolo da prefeitura.

        O UPDATE trava a linha da prefeitura até o fim da transação, então
        dois agendamentos da mesma prefeitura nunca recebem o mesmo número
        e as verificações de vaga feitas depois desta chamada acontecem em
        série.
        """
        result = await self.db.execute(
            update(Prefeitura)
            .where(Prefeitura.id == prefeitura_id)
            .values(protocolo_seq=Prefeitura.protocolo_seq + 1)
            .returning(Prefeitura.protocolo_seq)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()

    async def travar(self, prefeitura_id: int) -> None:
        """Trava a linha da prefeitura até o fim da transação."""
        await self.db.execute(
            select(Prefeitura.id).where(Prefeitura.id == prefeitura_id).with_for_update()
        )
