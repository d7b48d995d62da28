"""
Endpoints da grade de horários da prefeitura.
"""

from dataclasses import asdict

from fastapi import APIRouter

from app.core.dependencies import AdminUser, DBSession, PrefeituraAtual
from app.schemas.agenda import HorarioConfigResponse, HorarioConfigUpdate
from app.schemas.base import APIResponse
from app.services.agenda_service import AgendaService

router = APIRouter(prefix="/config", tags=["Configuração"])


@router.get("/horarios", response_model=APIResponse[HorarioConfigResponse])
async def obter_horarios(db: DBSession, prefeitura: PrefeituraAtual) -> APIResponse[HorarioConfigResponse]:
    """Horários ofertados, vagas por horário e janela de agendamento."""
    grade = await AgendaService(db, prefeitura.id).obter_grade()
    return APIResponse(success=True, data=HorarioConfigResponse(**asdict(grade)))


@router.put("/horarios", response_model=APIResponse[HorarioConfigResponse])
async def salvar_horarios(
    dados: HorarioConfigUpdate,
    db: DBSession,
    prefeitura: PrefeituraAtual,
    _: AdminUser,
) -> APIResponse[HorarioConfigResponse]:
    grade = await AgendaService(db, prefeitura.id).salvar_grade(dados)
    return APIResponse(
        success=True,
        data=HorarioConfigResponse(**asdict(grade)),
        message="Horários atualizados",
    )
