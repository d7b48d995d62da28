"""
Endpoints de Agendamentos.

Rotas públicas (agendar, consultar por CPF, disponibilidade e
cancelamento com código) exigem apenas a prefeitura no cabeçalho.
As demais são da equipe.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.dependencies import CurrentUser, DBSession, PrefeituraAtual
from app.models.agendamento import StatusAgendamento
from app.schemas.agenda import DisponibilidadeResponse
from app.schemas.agendamento import (
    AgendamentoCidadaoResponse,
    AgendamentoCreate,
    AgendamentoResponse,
    AgendamentoUpdate,
    ConfirmarCancelamentoRequest,
    ConsultaCPFResponse,
    SolicitarCancelamentoResponse,
)
from app.schemas.base import APIResponse, PaginatedResponse
from app.services.agenda_service import AgendaService
from app.services.agendamento_service import AgendamentoService
from app.services.cancelamento_service import CancelamentoService
from app.services.whatsapp_service import WhatsAppService, get_whatsapp_service

router = APIRouter(prefix="/agendamentos", tags=["Agendamentos"])


@router.get("", response_model=PaginatedResponse[AgendamentoResponse])
async def listar_agendamentos(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    data: date | None = Query(None),
    status_filtro: StatusAgendamento | None = Query(None, alias="status"),
    local_id: int | None = Query(None),
    cpf: str | None = Query(None),
) -> PaginatedResponse[AgendamentoResponse]:
    """
    Lista agendamentos da prefeitura.

    Filtros opcionais por data, status, local e CPF. Ordenados por data
    e horário.
    """
    skip = (page - 1) * page_size
    itens, total = await AgendamentoService(db, prefeitura).listar(
        skip=skip,
        limit=page_size,
        data=data,
        status=status_filtro,
        local_id=local_id,
        cpf=cpf,
    )

    return PaginatedResponse(
        success=True,
        data=[AgendamentoResponse.model_validate(a) for a in itens],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=APIResponse[AgendamentoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def criar_agendamento(
    dados: AgendamentoCreate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[AgendamentoResponse]:
    """
    Agendamento feito pelo cidadão.

    - **422**: CPF inválido ou dados incompletos
    - **403**: CPF bloqueado por cancelamentos
    - **400**: data bloqueada, fora do período ou horário inexistente
    - **409**: horário lotado
    """
    agendamento = await AgendamentoService(db, prefeitura).criar(dados)
    return APIResponse(
        success=True,
        data=AgendamentoResponse.model_validate(agendamento),
        message=f"Agendamento realizado. Protocolo {agendamento.protocolo}",
    )


@router.get("/disponibilidade", response_model=APIResponse[DisponibilidadeResponse])
async def disponibilidade(
    db: DBSession,
    prefeitura: PrefeituraAtual,
    data: date = Query(...),
    local_id: int = Query(...),
) -> APIResponse[DisponibilidadeResponse]:
    resultado = await AgendaService(db, prefeitura.id).disponibilidade(local_id, data)
    return APIResponse(success=True, data=resultado)


@router.get("/consultar/{cpf}", response_model=APIResponse[ConsultaCPFResponse])
async def consultar_por_cpf(
    cpf: str,
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[ConsultaCPFResponse]:
    """Últimos 5 agendamentos do CPF na prefeitura."""
    agendamentos = await AgendamentoService(db, prefeitura).consultar_por_cpf(cpf)
    return APIResponse(
        success=True,
        data=ConsultaCPFResponse(
            found=bool(agendamentos),
            appointments=[AgendamentoCidadaoResponse.model_validate(a) for a in agendamentos],
        ),
    )


@router.get("/{agendamento_id}", response_model=APIResponse[AgendamentoResponse])
async def obter_agendamento(
    agendamento_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> APIResponse[AgendamentoResponse]:
    agendamento = await AgendamentoService(db, prefeitura).obter(agendamento_id)
    return APIResponse(success=True, data=AgendamentoResponse.model_validate(agendamento))


@router.patch("/{agendamento_id}", response_model=APIResponse[AgendamentoResponse])
async def atualizar_agendamento(
    agendamento_id: int,
    dados: AgendamentoUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    operador: CurrentUser,
) -> APIResponse[AgendamentoResponse]:
    """
    Atualiza o agendamento (status, prioridade, remarcação, anotações).
    """
    agendamento = await AgendamentoService(db, prefeitura).atualizar(
        agendamento_id, dados, responsavel=operador.nome
    )
    return APIResponse(success=True, data=AgendamentoResponse.model_validate(agendamento))


@router.delete("/{agendamento_id}", status_code=status.HTTP_204_NO_CONTENT)
async def excluir_agendamento(
    agendamento_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: CurrentUser,
) -> Response:
    await AgendamentoService(db, prefeitura).excluir(agendamento_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{agendamento_id}/solicitar-cancelamento",
    response_model=APIResponse[SolicitarCancelamentoResponse],
)
async def solicitar_cancelamento(
    agendamento_id: int,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    whatsapp: WhatsAppService = Depends(get_whatsapp_service),
) -> APIResponse[SolicitarCancelamentoResponse]:
    """
    Envia código de cancelamento por WhatsApp ao telefone do agendamento.

    - **503**: mensagem não pôde ser entregue
    """
    resultado = await CancelamentoService(db, prefeitura, whatsapp).solicitar(agendamento_id)
    return APIResponse(
        success=True,
        data=resultado,
        message="Código enviado por WhatsApp",
    )


@router.post(
    "/{agendamento_id}/confirmar-cancelamento",
    response_model=APIResponse[AgendamentoCidadaoResponse],
)
async def confirmar_cancelamento(
    agendamento_id: int,
    request: ConfirmarCancelamentoRequest,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    whatsapp: WhatsAppService = Depends(get_whatsapp_service),
) -> APIResponse[AgendamentoCidadaoResponse]:
    agendamento = await CancelamentoService(db, prefeitura, whatsapp).confirmar(
        agendamento_id, request.codigo
    )
    return APIResponse(
        success=True,
        data=AgendamentoCidadaoResponse.model_validate(agendamento),
        message="Agendamento cancelado",
    )
