"""
Schemas base compartilhados.
"""

import re
from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict

T = TypeVar("T")

HORA_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validar_hora(valor: str) -> str:
    if not HORA_PATTERN.match(valor):
        raise ValueError("Horário deve estar no formato HH:MM")
    return valor


# Horário no formato "HH:MM" (24h)
Hora = Annotated[str, AfterValidator(_validar_hora)]


def somente_digitos(valor: str | None) -> str | None:
    """Remove pontuação de CPF/telefone."""
    if valor is None:
        return None
    return "".join(filter(str.isdigit, valor))


class BaseSchema(BaseModel):
    """Schema base com configurações padrão."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class TimestampMixin(BaseModel):
    criado_em: datetime
    atualizado_em: datetime


class IDMixin(BaseModel):
    id: int


class APIResponse(BaseModel, Generic[T]):
    """
    Resposta padronizada da API.

    Exemplo de uso:
        return APIResponse(success=True, data=agendamento)
    """

    success: bool
    data: T | None = None
    message: str | None = None


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    """Resposta de erro padronizada."""

    success: bool = False
    error: ErrorDetail


class PaginatedResponse(BaseModel, Generic[T]):
    """Resposta paginada."""

    success: bool = True
    data: list[T]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        """Calcula número total de páginas."""
        if self.page_size == 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size
