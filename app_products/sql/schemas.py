# -*- coding: utf-8 -*-
"""Esquemas Pydantic para Products.

Este módulo define los esquemas usados en el microservicio de productos:

- Payloads de entrada de cada patrón de mensaje (create/update/find_one/remove)
  y de la paginación. Se rechazan campos desconocidos (whitelist estricta).
- Esquemas de salida (producto y página de productos) en camelCase, que es
  como los consumen los clientes del microservicio.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

# Precio: >= 0, como mucho 4 decimales (ej: 99.9999) y 12 dígitos en total, como la columna Numeric(12, 4)
Price = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=4)]

# En JSON el precio viaja como número, no como string
PriceOut = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Message(BaseModel):
    """Esquema genérico para mensajes simples de respuesta."""
    detail: Optional[str] = Field(default=None, examples=["OK"])


# ---- Entradas ----------------------------------------------------------------

class Pagination(BaseModel):
    """Paginación común (offset). Ambos campos opcionales y positivos."""
    model_config = ConfigDict(extra="forbid")

    page: int = Field(default=1, gt=0, description="Página actual (1..N).")
    limit: int = Field(default=10, gt=0, description="Registros por página.")


class CreateProduct(BaseModel):
    """Payload de `create_product`.

    Ejemplo válido: {"name": "Laptop", "price": 999.99}
    """
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, examples=["Laptop"])
    price: Price = Field(examples=[999.99])


class ProductPatch(BaseModel):
    """Campos modificables de un producto. Todos opcionales, pero nunca null.

    Un `id` en el cuerpo se acepta y se ignora: nunca llega a changes().
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(default=None, exclude=True)
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Price] = None

    @field_validator("name", "price")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        """Solo los campos que vinieron en el payload (semántica PATCH), sin id."""
        return self.model_dump(exclude_unset=True)


class UpdateProduct(ProductPatch):
    """Payload de `update_product`: el id viaja dentro del propio payload."""

    id: int = Field(gt=0, exclude=True)


class ProductId(BaseModel):
    """Payload de `find_one_product` / `remove_product`."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0)


# ---- Salidas -----------------------------------------------------------------

class ProductOut(BaseModel):
    """Salida de un producto (camelCase: createdAt, updatedAt)."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    price: PriceOut
    available: bool
    created_at: datetime
    updated_at: datetime


class PageMeta(BaseModel):
    """Metadatos de paginación."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    total: int
    last_page: int


class ProductPage(BaseModel):
    """Página de productos: {data: [...], meta: {page, total, lastPage}}."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    data: List[ProductOut]
    meta: PageMeta
