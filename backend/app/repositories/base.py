"""
Repository base com operações CRUD genéricas.

``create``/``update``/``delete`` confirmam a transação. Operações que
precisam compor várias escritas numa transação só usam ``add``, que
apenas faz flush, e deixam o commit para o service.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base, MultiTenantBase

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Uso:
        class PrefeituraRepository(BaseRepository[Prefeitura]):
            def __init__(self, db: AsyncSession):
                super().__init__(Prefeitura, db)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: int) -> ModelType | None:
        """Busca entidade por ID."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Lista todas as entidades com paginação."""
        result = await self.db.execute(
            select(self.model).order_by(self.model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Conta total de entidades."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar_one()

    async def add(self, **kwargs: Any) -> ModelType:
        """Inclui entidade na transação corrente sem confirmar."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria nova entidade."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def update(
        self,
        id: int,
        **kwargs: Any,
    ) -> ModelType | None:
        """Atualiza entidade existente com os campos informados."""
        instance = await self.get_by_id(id)
        if not instance:
            return None

        for key, value in kwargs.items():
            setattr(instance, key, value)

        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def delete(self, id: int) -> bool:
        """Remove entidade (hard delete)."""
        instance = await self.get_by_id(id)
        if not instance:
            return False

        await self.db.delete(instance)
        await self.db.commit()
        return True


class MultiTenantRepository(BaseRepository[ModelType]):
    """
    Repository com suporte a multi-tenancy.

    Todas as queries são automaticamente filtradas por prefeitura_id.
    """

    def __init__(
        self,
        model: type[ModelType],
        db: AsyncSession,
        prefeitura_id: int,
    ):
        super().__init__(model, db)
        self.prefeitura_id = prefeitura_id

    def _scoped(self):
        return select(self.model).where(self.model.prefeitura_id == self.prefeitura_id)

    async def get_by_id(self, id: int) -> ModelType | None:
        """Busca entidade por ID com filtro de tenant."""
        if not issubclass(self.model, MultiTenantBase):
            return await super().get_by_id(id)

        result = await self.db.execute(self._scoped().where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModelType]:
        """Lista entidades do tenant com paginação."""
        if not issubclass(self.model, MultiTenantBase):
            return await super().get_all(skip, limit)

        result = await self.db.execute(
            self._scoped().order_by(self.model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Conta entidades do tenant."""
        if not issubclass(self.model, MultiTenantBase):
            return await super().count()

        result = await self.db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.prefeitura_id == self.prefeitura_id)
        )
        return result.scalar_one()

    async def add(self, **kwargs: Any) -> ModelType:
        if issubclass(self.model, MultiTenantBase):
            kwargs["prefeitura_id"] = self.prefeitura_id
        return await super().add(**kwargs)

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria entidade vinculada ao tenant."""
        if issubclass(self.model, MultiTenantBase):
            kwargs["prefeitura_id"] = self.prefeitura_id
        return await super().create(**kwargs)
