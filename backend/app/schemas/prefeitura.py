"""
Schemas da Prefeitura.
"""

from pydantic import Field, field_validator

from app.models.prefeitura import SLUG_PATTERN
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class PrefeituraBase(BaseSchema):
    nome: str = Field(..., min_length=2, max_length=255)
    slug: str = Field(..., min_length=3, max_length=80, pattern=SLUG_PATTERN)
    telefone_contato: str | None = Field(None, max_length=20)

    @field_validator("slug", mode="before")
    @classmethod
    def normalizar_slug(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class PrefeituraCreate(PrefeituraBase):
    ativo: bool = True


class PrefeituraUpdate(BaseSchema):
    """Atualização parcial; o slug não muda depois de criado."""

    nome: str | None = Field(None, min_length=2, max_length=255)
    telefone_contato: str | None = Field(None, max_length=20)
    ativo: bool | None = None


class PrefeituraResponse(PrefeituraBase, IDMixin, TimestampMixin):
    ativo: bool
    protocolo_seq: int
