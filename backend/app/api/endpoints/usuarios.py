"""
Endpoints da equipe da prefeitura.
"""

from fastapi import APIRouter, Response, status

from app.core.dependencies import AdminUser, DBSession, PrefeituraAtual
from app.schemas.base import APIResponse
from app.schemas.usuario import UsuarioCreate, UsuarioResponse, UsuarioUpdate
from app.services.usuario_service import UsuarioService

router = APIRouter(prefix="/users", tags=["Usuários"])


@router.get("", response_model=APIResponse[list[UsuarioResponse]])
async def listar_usuarios(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: AdminUser,
) -> APIResponse[list[UsuarioResponse]]:
    usuarios = await UsuarioService(db, prefeitura.id).listar()
    return APIResponse(success=True, data=[UsuarioResponse.model_validate(u) for u in usuarios])


@router.post(
    "",
    response_model=APIResponse[UsuarioResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_usuario(
    dados: UsuarioCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: AdminUser,
) -> APIResponse[UsuarioResponse]:
    usuario = await UsuarioService(db, prefeitura.id).criar(dados)
    return APIResponse(
        success=True,
        data=UsuarioResponse.model_validate(usuario),
        message="Usuário criado com sucesso",
    )


@router.patch("/{usuario_id}", response_model=APIResponse[UsuarioResponse])
async def atualizar_usuario(
    usuario_id: int,
    dados: UsuarioUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    admin: AdminUser,
) -> APIResponse[UsuarioResponse]:
    solicitante = None if admin.super_admin else admin.id
    usuario = await UsuarioService(db, prefeitura.id).atualizar(usuario_id, dados, solicitante)
    return APIResponse(success=True, data=UsuarioResponse.model_validate(usuario))


@router.delete("/{usuario_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_usuario(
    usuario_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    admin: AdminUser,
) -> Response:
    solicitante = None if admin.super_admin else admin.id
    await UsuarioService(db, prefeitura.id).excluir(usuario_id, solicitante)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
