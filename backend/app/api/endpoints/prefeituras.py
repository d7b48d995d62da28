"""
Endpoints de Prefeituras.

Cadastro de prefeituras, restrito ao super admin.
"""

from fastapi import APIRouter, Response, status

from app.core.dependencies import DBSession, SuperAdminUser
from app.schemas.base import APIResponse
from app.schemas.prefeitura import PrefeituraCreate, PrefeituraResponse, PrefeituraUpdate
from app.services.prefeitura_service import PrefeituraService

router = APIRouter(prefix="/prefeituras", tags=["Prefeituras"])


@router.get("", response_model=APIResponse[list[PrefeituraResponse]])
async def listar_prefeituras(db: DBSession, _: SuperAdminUser) -> APIResponse[list[PrefeituraResponse]]:
    prefeituras = await PrefeituraService(db).listar()
    return APIResponse(
        success=True,
        data=[PrefeituraResponse.model_validate(p) for p in prefeituras],
    )


@router.post(
    "",
    response_model=APIResponse[PrefeituraResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_prefeitura(
    dados: PrefeituraCreate,
    db: DBSession,
    _: SuperAdminUser,
) -> APIResponse[PrefeituraResponse]:
    """Cadastra prefeitura. Slug: 3 a 80 caracteres, minúsculas, dígitos e hífen."""
    prefeitura = await PrefeituraService(db).criar(dados)
    return APIResponse(
        success=True,
        data=PrefeituraResponse.model_validate(prefeitura),
        message="Prefeitura criada com sucesso",
    )


@router.patch("/{prefeitura_id}", response_model=APIResponse[PrefeituraResponse])
async def atualizar_prefeitura(
    prefeitura_id: int,
    dados: PrefeituraUpdate,
    db: DBSession,
    _: SuperAdminUser,
) -> APIResponse[PrefeituraResponse]:
    """Atualiza dados ou ativa/desativa a prefeitura."""
    prefeitura = await PrefeituraService(db).atualizar(prefeitura_id, dados)
    return APIResponse(success=True, data=PrefeituraResponse.model_validate(prefeitura))


@router.delete("/{prefeitura_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_prefeitura(prefeitura_id: int, db: DBSession, _: SuperAdminUser) -> Response:
    await PrefeituraService(db).excluir(prefeitura_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
