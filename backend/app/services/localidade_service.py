"""
Service de localidades de origem e bairros.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ResourceAlreadyExistsError, ResourceNotFoundError
from app.models.localidade import Bairro, LocalidadeOrigem
from app.repositories.localidade_repository import BairroRepository, LocalidadeRepository
from app.schemas.localidade import BairroCreate, BairroUpdate, LocalidadeCreate, LocalidadeUpdate

logger = structlog.get_logger()


class LocalidadeService:
    """
    Cadastro de localidades e bairros da prefeitura.

    Todo bairro pertence a uma localidade da mesma prefeitura; o repository
    de localidades é filtrado por tenant, então uma localidade de outra
    prefeitura simplesmente não é encontrada.
    """

    def __init__(self, db: AsyncSession, prefeitura_id: int):
        self._localidades = LocalidadeRepository(db, prefeitura_id)
        self._bairros = BairroRepository(db, prefeitura_id)

    # === Localidades ===

    async def listar_localidades(self) -> list[LocalidadeOrigem]:
        return await self._localidades.listar()

    async def obter_localidade(self, localidade_id: int) -> LocalidadeOrigem:
        localidade = await self._localidades.get_by_id(localidade_id)
        if not localidade:
            raise ResourceNotFoundError("Localidade", localidade_id)
        return localidade

    async def criar_localidade(self, dados: LocalidadeCreate) -> LocalidadeOrigem:
        nome = dados.nome.strip()
        if await self._localidades.get_by_nome(nome):
            raise ResourceAlreadyExistsError("Localidade", "nome", nome)
        localidade = await self._localidades.create(nome=nome, tipo=dados.tipo)
        logger.info("Localidade criada", localidade_id=localidade.id)
        return localidade

    async def atualizar_localidade(self, localidade_id: int, dados: LocalidadeUpdate) -> LocalidadeOrigem:
        localidade = await self.obter_localidade(localidade_id)
        campos = dados.model_dump(exclude_unset=True)
        if "nome" in campos and campos["nome"]:
            campos["nome"] = campos["nome"].strip()
            outra = await self._localidades.get_by_nome(campos["nome"])
            if outra and outra.id != localidade.id:
                raise ResourceAlreadyExistsError("Localidade", "nome", campos["nome"])
        return await self._localidades.update(localidade_id, **campos)

    async def excluir_localidade(self, localidade_id: int) -> None:
        if not await self._localidades.delete(localidade_id):
            raise ResourceNotFoundError("Localidade", localidade_id)
        logger.info("Localidade excluída", localidade_id=localidade_id)

    # === Bairros ===

    async def listar_bairros(self, localidade_id: int) -> list[Bairro]:
        await self.obter_localidade(localidade_id)
        return await self._bairros.listar_por_localidade(localidade_id)

    async def criar_bairro(self, dados: BairroCreate) -> Bairro:
        await self.obter_localidade(dados.localidade_id)
        nome = dados.nome.strip()
        if await self._bairros.get_by_nome(dados.localidade_id, nome):
            raise ResourceAlreadyExistsError("Bairro", "nome", nome)
        bairro = await self._bairros.create(localidade_id=dados.localidade_id, nome=nome)
        logger.info("Bairro criado", bairro_id=bairro.id, localidade_id=dados.localidade_id)
        return bairro

    async def atualizar_bairro(self, bairro_id: int, dados: BairroUpdate) -> Bairro:
        bairro = await self._bairros.get_by_id(bairro_id)
        if not bairro:
            raise ResourceNotFoundError("Bairro", bairro_id)
        nome = dados.nome.strip()
        outro = await self._bairros.get_by_nome(bairro.localidade_id, nome)
        if outro and outro.id != bairro.id:
            raise ResourceAlreadyExistsError("Bairro", "nome", nome)
        return await self._bairros.update(bairro_id, nome=nome)

    async def excluir_bairro(self, bairro_id: int) -> None:
        if not await self._bairros.delete(bairro_id):
            raise ResourceNotFoundError("Bairro", bairro_id)
