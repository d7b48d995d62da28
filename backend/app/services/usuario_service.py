"""
Service de Usuários da prefeitura.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleError, ResourceAlreadyExistsError, ResourceNotFoundError
from app.core.security import get_password_hash
from app.models.usuario import Usuario
from app.repositories.usuario_repository import UsuarioRepository
from app.schemas.usuario import UsuarioCreate, UsuarioUpdate

logger = structlog.get_logger()


class UsuarioService:
    def __init__(self, db: AsyncSession, prefeitura_id: int):
        self._repo = UsuarioRepository(db, prefeitura_id)
        self._prefeitura_id = prefeitura_id

    async def listar(self) -> list[Usuario]:
        return await self._repo.listar()

    async def obter(self, usuario_id: int) -> Usuario:
        usuario = await self._repo.get_by_id(usuario_id)
        if not usuario:
            raise ResourceNotFoundError("Usuário", usuario_id)
        return usuario

    async def criar(self, dados: UsuarioCreate) -> Usuario:
        """Cadastra membro da equipe; email único por prefeitura."""
        if await self._repo.get_by_email(dados.email):
            raise ResourceAlreadyExistsError("Usuário", "email", dados.email)

        campos = dados.model_dump(exclude={"senha"})
        campos["email"] = campos["email"].lower()
        usuario = await self._repo.create(**campos, senha_hash=get_password_hash(dados.senha))
        logger.info(
            "Usuário criado",
            usuario_id=usuario.id,
            prefeitura_id=self._prefeitura_id,
            perfil=usuario.perfil.value,
        )
        return usuario

    async def atualizar(self, usuario_id: int, dados: UsuarioUpdate, solicitante_id: int | None = None) -> Usuario:
        await self.obter(usuario_id)
        campos = dados.model_dump(exclude_unset=True, exclude={"senha"})
        if solicitante_id == usuario_id and campos.get("ativo") is False:
            raise BusinessRuleError("Não é possível desativar o próprio usuário")
        if dados.senha:
            campos["senha_hash"] = get_password_hash(dados.senha)

        usuario = await self._repo.update(usuario_id, **campos)
        logger.info("Usuário atualizado", usuario_id=usuario_id, campos=sorted(dados.model_fields_set))
        return usuario

    async def excluir(self, usuario_id: int, solicitante_id: int | None = None) -> None:
        if solicitante_id == usuario_id:
            raise BusinessRuleError("Não é possível excluir o próprio usuário")
        if not await self._repo.delete(usuario_id):
            raise ResourceNotFoundError("Usuário", usuario_id)
        logger.info("Usuário excluído", usuario_id=usuario_id, prefeitura_id=self._prefeitura_id)
