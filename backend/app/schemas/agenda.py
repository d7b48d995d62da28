"""
Schemas da configuração de agenda.
"""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.models.agenda import TipoBloqueio
from app.schemas.base import BaseSchema, Hora, IDMixin, TimestampMixin


# === Locais de atendimento ===

class LocalAtendimentoCreate(BaseSchema):
    nome_local: str = Field(..., min_length=2, max_length=255)
    endereco: str | None = None
    link_mapa: str | None = Field(None, max_length=500)
    ativo: bool = True


class LocalAtendimentoUpdate(BaseSchema):
    nome_local: str | None = Field(None, min_length=2, max_length=255)
    endereco: str | None = None
    link_mapa: str | None = Field(None, max_length=500)
    ativo: bool | None = None


class LocalAtendimentoResponse(LocalAtendimentoCreate, IDMixin, TimestampMixin):
    prefeitura_id: int


# === Horários ===

class HorarioConfigUpdate(BaseSchema):
    horarios_disponiveis: list[Hora] = Field(..., min_length=1)
    max_agendamentos_por_horario: int = Field(2, ge=1, le=100)
    periodo_liberado_dias: int = Field(60, ge=1, le=365)

    @model_validator(mode="after")
    def ordenar_horarios(self) -> "HorarioConfigUpdate":
        self.horarios_disponiveis = sorted(set(self.horarios_disponiveis))
        return self


class HorarioConfigResponse(BaseSchema):
    horarios_disponiveis: list[str]
    max_agendamentos_por_horario: int
    periodo_liberado_dias: int
    personalizado: bool = Field(
        True, description="False quando a prefeitura usa a grade padrão"
    )


# === Datas bloqueadas ===

class DataBloqueadaCreate(BaseSchema):
    """
    Bloqueio de data.

    ``full-day`` não aceita lista de horários; ``specific-times`` exige
    pelo menos um horário.
    """

    data: date
    motivo: str | None = Field(None, max_length=255)
    tipo_bloqueio: TipoBloqueio = TipoBloqueio.DIA_INTEIRO
    horarios_bloqueados: list[Hora] | None = None

    @model_validator(mode="after")
    def validar_horarios(self) -> "DataBloqueadaCreate":
        if self.tipo_bloqueio == TipoBloqueio.DIA_INTEIRO:
            if self.horarios_bloqueados:
                raise ValueError("Bloqueio de dia inteiro não aceita horários")
            self.horarios_bloqueados = None
        else:
            if not self.horarios_bloqueados:
                raise ValueError("Informe ao menos um horário para bloqueio parcial")
            self.horarios_bloqueados = sorted(set(self.horarios_bloqueados))
        return self


class DataBloqueadaResponse(BaseSchema, IDMixin, TimestampMixin):
    prefeitura_id: int
    data: date
    motivo: str | None = None
    tipo_bloqueio: TipoBloqueio
    horarios_bloqueados: list[str] | None = None
    criado_por: str | None = None


# === Disponibilidade ===

class HorarioDisponibilidade(BaseModel):
    hora: str
    vagas_total: int
    vagas_ocupadas: int
    vagas_restantes: int
    disponivel: bool


class DisponibilidadeResponse(BaseModel):
    data: date
    local_id: int
    dia_bloqueado: bool
    motivo_bloqueio: str | None = None
    horarios: list[HorarioDisponibilidade]
