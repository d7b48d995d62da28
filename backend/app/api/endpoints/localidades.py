"""
Endpoints de Localidades de origem e Bairros.
"""

from fastapi import APIRouter, Response, status

from app.core.dependencies import CurrentUser, DBSession, PrefeituraAtual
from app.schemas.base import APIResponse
from app.schemas.localidade import (
    BairroCreate,
    BairroResponse,
    BairroUpdate,
    LocalidadeCreate,
    LocalidadeResponse,
    LocalidadeUpdate,
)
from app.services.localidade_service import LocalidadeService

router = APIRouter(prefix="/localidades-origem", tags=["Localidades"])
bairros_router = APIRouter(prefix="/bairros", tags=["Localidades"])


@router.get("", response_model=APIResponse[list[LocalidadeResponse]])
async def listar_localidades(
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[list[LocalidadeResponse]]:
    localidades = await LocalidadeService(db, prefeitura.id).listar_localidades()
    return APIResponse(success=True, data=[LocalidadeResponse.model_validate(l) for l in localidades])


@router.post(
    "",
    response_model=APIResponse[LocalidadeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_localidade(
    dados: LocalidadeCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[LocalidadeResponse]:
    localidade = await LocalidadeService(db, prefeitura.id).criar_localidade(dados)
    return APIResponse(success=True, data=LocalidadeResponse.model_validate(localidade))


@router.patch("/{localidade_id}", response_model=APIResponse[LocalidadeResponse])
async def atualizar_localidade(
    localidade_id: int,
    dados: LocalidadeUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[LocalidadeResponse]:
    localidade = await LocalidadeService(db, prefeitura.id).atualizar_localidade(localidade_id, dados)
    return APIResponse(success=True, data=LocalidadeResponse.model_validate(localidade))


@router.delete("/{localidade_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_localidade(
    localidade_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> Response:
    await LocalidadeService(db, prefeitura.id).excluir_localidade(localidade_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{localidade_id}/bairros", response_model=APIResponse[list[BairroResponse]])
async def listar_bairros(
    localidade_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[list[BairroResponse]]:
    bairros = await LocalidadeService(db, prefeitura.id).listar_bairros(localidade_id)
    return APIResponse(success=True, data=[BairroResponse.model_validate(b) for b in bairros])


@bairros_router.post(
    "",
    response_model=APIResponse[BairroResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_bairro(
    dados: BairroCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[BairroResponse]:
    """Cria bairro; a localidade precisa ser desta prefeitura (404 caso contrário)."""
    bairro = await LocalidadeService(db, prefeitura.id).criar_bairro(dados)
    return APIResponse(success=True, data=BairroResponse.model_validate(bairro))


@bairros_router.patch("/{bairro_id}", response_model=APIResponse[BairroResponse])
async def atualizar_bairro(
    bairro_id: int,
    dados: BairroUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[BairroResponse]:
    bairro = await LocalidadeService(db, prefeitura.id).atualizar_bairro(bairro_id, dados)
    return APIResponse(success=True, data=BairroResponse.model_validate(bairro))


@bairros_router.delete("/{bairro_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_bairro(
    bairro_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> Response:
    await LocalidadeService(db, prefeitura.id).excluir_bairro(bairro_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
