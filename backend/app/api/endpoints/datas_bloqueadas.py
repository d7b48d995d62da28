"""
Endpoints de Datas Bloqueadas (feriados, pontos facultativos, manutenção).
"""

from datetime import date

from fastapi import APIRouter, Query, Response, status

from app.core.dependencies import CurrentUser, DBSession, PrefeituraAtual
from app.schemas.agenda import DataBloqueadaCreate, DataBloqueadaResponse
from app.schemas.base import APIResponse
from app.services.agenda_service import AgendaService

router = APIRouter(prefix="/datas-bloqueadas", tags=["Datas Bloqueadas"])


@router.get("", response_model=APIResponse[list[DataBloqueadaResponse]])
async def listar_datas_bloqueadas(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    data_inicio: date | None = Query(None),
    data_fim: date | None = Query(None),
) -> APIResponse[list[DataBloqueadaResponse]]:
    datas = await AgendaService(db, prefeitura.id).listar_datas_bloqueadas(data_inicio, data_fim)
    return APIResponse(success=True, data=[DataBloqueadaResponse.model_validate(d) for d in datas])


@router.post(
    "",
    response_model=APIResponse[DataBloqueadaResponse],
    status_code=status.HTTP_201_CREATED,
)
async def bloquear_data(
    dados: DataBloqueadaCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    operador: CurrentUser,
) -> APIResponse[DataBloqueadaResponse]:
    """
    Bloqueia um dia inteiro (``full-day``) ou horários específicos
    (``specific-times``) da data.
    """
    bloqueio = await AgendaService(db, prefeitura.id).bloquear_data(dados, criado_por=operador.nome)
    return APIResponse(
        success=True,
        data=DataBloqueadaResponse.model_validate(bloqueio),
        message="Data bloqueada com sucesso",
    )


@router.delete("/{bloqueio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def desbloquear_data(
    bloqueio_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> Response:
    await AgendaService(db, prefeitura.id).desbloquear_data(bloqueio_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
