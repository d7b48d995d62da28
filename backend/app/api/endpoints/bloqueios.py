"""
Endpoints de bloqueio de CPF por excesso de cancelamentos.
"""

from fastapi import APIRouter, Response, status

from app.core.dependencies import CurrentUser, DBSession, PrefeituraAtual
from app.schemas.base import APIResponse
from app.schemas.cpf_bloqueio import CpfBloqueioResponse, StatusBloqueioResponse
from app.services.bloqueio_service import BloqueioService

router = APIRouter(tags=["Bloqueios de CPF"])


@router.get("/bloqueio/verificar/{cpf}", response_model=APIResponse[StatusBloqueioResponse])
async def verificar_bloqueio(
    cpf: str,
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[StatusBloqueioResponse]:
    """Informa se o CPF pode agendar na prefeitura."""
    situacao = await BloqueioService(db, prefeitura.id).verificar(cpf)
    return APIResponse(success=True, data=situacao)


@router.get("/cpf-bloqueios", response_model=APIResponse[list[CpfBloqueioResponse]])
async def listar_bloqueios(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[list[CpfBloqueioResponse]]:
    bloqueios = await BloqueioService(db, prefeitura.id).listar_vigentes()
    return APIResponse(success=True, data=[CpfBloqueioResponse.model_validate(b) for b in bloqueios])


@router.delete("/cpf-bloqueios/{bloqueio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def desbloquear_cpf(
    bloqueio_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    operador: CurrentUser,
) -> Response:
    await BloqueioService(db, prefeitura.id).desbloquear(bloqueio_id, responsavel=operador.nome)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
