"""
Endpoints de Locais de Atendimento.
"""

from fastapi import APIRouter, Query, Response, status

from app.core.dependencies import CurrentUser, DBSession, PrefeituraAtual
from app.schemas.agenda import (
    LocalAtendimentoCreate,
    LocalAtendimentoResponse,
    LocalAtendimentoUpdate,
)
from app.schemas.base import APIResponse
from app.services.agenda_service import AgendaService

router = APIRouter(prefix="/locais-atendimento", tags=["Locais de Atendimento"])


@router.get("", response_model=APIResponse[list[LocalAtendimentoResponse]])
async def listar_locais(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    apenas_ativos: bool = Query(False),
) -> APIResponse[list[LocalAtendimentoResponse]]:
    """Lista locais da prefeitura (rota pública, usada no agendamento)."""
    locais = await AgendaService(db, prefeitura.id).listar_locais(apenas_ativos)
    return APIResponse(success=True, data=[LocalAtendimentoResponse.model_validate(l) for l in locais])


@router.post(
    "",
    response_model=APIResponse[LocalAtendimentoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_local(
    dados: LocalAtendimentoCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[LocalAtendimentoResponse]:
    local = await AgendaService(db, prefeitura.id).criar_local(dados)
    return APIResponse(
        success=True,
        data=LocalAtendimentoResponse.model_validate(local),
        message="Local criado com sucesso",
    )


@router.put("/{local_id}", response_model=APIResponse[LocalAtendimentoResponse])
async def atualizar_local(
    local_id: int,
    dados: LocalAtendimentoUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[LocalAtendimentoResponse]:
    local = await AgendaService(db, prefeitura.id).atualizar_local(local_id, dados)
    return APIResponse(success=True, data=LocalAtendimentoResponse.model_validate(local))


@router.delete("/{local_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_local(
    local_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> Response:
    """Exclui o local. Recusado (400) se houver agendamentos vinculados."""
    await AgendaService(db, prefeitura.id).excluir_local(local_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
