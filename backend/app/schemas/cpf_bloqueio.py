"""
Schemas dos bloqueios de CPF.
"""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class StatusBloqueioResponse(BaseModel):
    bloqueado: bool
    data_desbloqueio: datetime | None = None
    motivo: str | None = None
    cancelamentos_count: int = 0


class CpfBloqueioResponse(BaseSchema, IDMixin, TimestampMixin):
    cpf: str
    data_bloqueio: datetime
    data_desbloqueio: datetime
    motivo: str | None = None
    cancelamentos_count: int
    ativo: bool
