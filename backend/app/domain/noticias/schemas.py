"""
Noticia Schemas

Pydantic models for the noticia API. JSON uses camelCase field names
(createdAt, totalPages) to match the frontend contract.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TITULO_MAX_LENGTH = 200


def _validate_titulo(v: str) -> str:
    if not v:
        raise ValueError("O título não pode estar vazio")
    if len(v) > TITULO_MAX_LENGTH:
        raise ValueError(
            f"O título deve ter no máximo {TITULO_MAX_LENGTH} caracteres"
        )
    return v


def _validate_descricao(v: str) -> str:
    if not v:
        raise ValueError("A descrição não pode estar vazia")
    return v


class NoticiaCreate(BaseModel):
    """Schema for creating noticias."""

    model_config = ConfigDict(extra="forbid")

    titulo: str = Field(..., description="Headline, up to 200 characters")
    descricao: str = Field(..., description="Body text")

    @field_validator("titulo")
    @classmethod
    def check_titulo(cls, v: str) -> str:
        return _validate_titulo(v)

    @field_validator("descricao")
    @classmethod
    def check_descricao(cls, v: str) -> str:
        return _validate_descricao(v)


class NoticiaUpdate(BaseModel):
    """Schema for partial updates. Only fields sent by the client are applied."""

    model_config = ConfigDict(extra="forbid")

    titulo: Optional[str] = None
    descricao: Optional[str] = None

    @field_validator("titulo")
    @classmethod
    def check_titulo(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _validate_titulo(v)

    @field_validator("descricao")
    @classmethod
    def check_descricao(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _validate_descricao(v)

    def changes(self) -> dict:
        """Fields explicitly provided with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class NoticiaRead(BaseModel):
    """Schema for reading noticias."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    titulo: str
    descricao: str
    created_at: datetime
    updated_at: datetime


class PaginationQuery(BaseModel):
    """Listing parameters."""

    page: int = Field(1, ge=1, description="Page number (1-based)")
    limit: int = Field(10, ge=1, le=100, description="Items per page")
    search: Optional[str] = Field(None, description="Case-insensitive text filter")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class NoticiaPage(BaseModel):
    """One page of noticias with pagination metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: List[NoticiaRead]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(
        cls, data: List[NoticiaRead], total: int, page: int, limit: int
    ) -> "NoticiaPage":
        """Assemble a page, deriving total_pages as ceil(total / limit)."""
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )
