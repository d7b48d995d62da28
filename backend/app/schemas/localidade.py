"""
Schemas de localidades de origem e bairros.
"""

from pydantic import Field

from app.models.localidade import TipoLocalidade
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class LocalidadeCreate(BaseSchema):
    nome: str = Field(..., min_length=2, max_length=150)
    tipo: TipoLocalidade = TipoLocalidade.DISTRITO


class LocalidadeUpdate(BaseSchema):
    nome: str | None = Field(None, min_length=2, max_length=150)
    tipo: TipoLocalidade | None = None


class LocalidadeResponse(LocalidadeCreate, IDMixin, TimestampMixin):
    prefeitura_id: int


class BairroCreate(BaseSchema):
    localidade_id: int
    nome: str = Field(..., min_length=2, max_length=150)


class BairroUpdate(BaseSchema):
    nome: str = Field(..., min_length=2, max_length=150)


class BairroResponse(BairroCreate, IDMixin, TimestampMixin):
    prefeitura_id: int
