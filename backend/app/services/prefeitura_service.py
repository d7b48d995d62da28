"""
Service de Prefeitura.

Resolve a prefeitura de cada requisição e mantém o cadastro de
prefeituras (operado pelo super admin).
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    TenantInactiveError,
    TenantNotFoundError,
    TenantNotIdentifiedError,
)
from app.models.prefeitura import Prefeitura
from app.repositories.prefeitura_repository import PrefeituraRepository
from app.schemas.prefeitura import PrefeituraCreate, PrefeituraUpdate

logger = structlog.get_logger()


class PrefeituraService:
    """Service para gestão de prefeituras (tenants)."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._repo = PrefeituraRepository(db)

    async def resolver(
        self,
        slug: str | None = None,
        tenant_id: str | None = None,
        exigir_ativa: bool = True,
    ) -> Prefeitura:
        """
        Identifica a prefeitura pelo slug ou pelo id informado no cabeçalho.

        Raises:
            TenantNotIdentifiedError: nenhum identificador informado (400)
            TenantNotFoundError: prefeitura inexistente (404)
            TenantInactiveError: prefeitura desativada (403)
        """
        slug = (slug or "").strip().lower()
        tenant_id = (tenant_id or "").strip()

        if not slug and not tenant_id:
            raise TenantNotIdentifiedError()

        prefeitura = None
        if tenant_id:
            if tenant_id.isdigit():
                prefeitura = await self._repo.get_by_id(int(tenant_id))
            else:
                prefeitura = await self._repo.get_by_slug(tenant_id.lower())
        else:
            prefeitura = await self._repo.get_by_slug(slug)

        if prefeitura is None:
            raise TenantNotFoundError(slug or tenant_id)

        if exigir_ativa and not prefeitura.ativo:
            logger.warning("Acesso a prefeitura inativa", prefeitura_id=prefeitura.id)
            raise TenantInactiveError(prefeitura.slug)

        return prefeitura

    async def listar(self) -> list[Prefeitura]:
        return await self._repo.listar()

    async def obter(self, prefeitura_id: int) -> Prefeitura:
        prefeitura = await self._repo.get_by_id(prefeitura_id)
        if not prefeitura:
            raise ResourceNotFoundError("Prefeitura", prefeitura_id)
        return prefeitura

    async def criar(self, dados: PrefeituraCreate) -> Prefeitura:
        """Cadastra nova prefeitura; slug deve ser único."""
        if await self._repo.get_by_slug(dados.slug):
            raise ResourceAlreadyExistsError("Prefeitura", "slug", dados.slug)

        prefeitura = await self._repo.create(**dados.model_dump())
        logger.info("Prefeitura criada", prefeitura_id=prefeitura.id, slug=prefeitura.slug)
        return prefeitura

    async def atualizar(self, prefeitura_id: int, dados: PrefeituraUpdate) -> Prefeitura:
        await self.obter(prefeitura_id)
        prefeitura = await self._repo.update(prefeitura_id, **dados.model_dump(exclude_unset=True))
        logger.info(
            "Prefeitura atualizada",
            prefeitura_id=prefeitura_id,
            campos=sorted(dados.model_fields_set),
        )
        return prefeitura

    async def excluir(self, prefeitura_id: int) -> None:
        if not await self._repo.delete(prefeitura_id):
            raise ResourceNotFoundError("Prefeitura", prefeitura_id)
        logger.info("Prefeitura excluída", prefeitura_id=prefeitura_id)
