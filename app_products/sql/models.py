# -*- coding: utf-8 -*-
"""Modelos de base de datos para el microservicio Products.

- product: catálogo de productos. El borrado es lógico: una fila con
  available=False deja de ser visible para todas las lecturas, pero nunca
  se elimina físicamente.

Nota: las fechas se generan en Python (UTC sin tzinfo) desde un único reloj.
Así updated_at >= created_at no depende de la resolución de CURRENT_TIMESTAMP
de SQLite (segundos).
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String

from app_products.sql.database import Base


def utcnow() -> datetime:
    """Hora actual en UTC, naive (SQLite no guarda la zona horaria)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampedModel(Base):
    """Base abstracta con campos de auditoría comunes."""

    __abstract__ = True

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)


class Product(TimestampedModel):
    """Producto del catálogo.

    Campos clave:
    - price: Numeric con 4 decimales de escala (máximo permitido por el DTO).
    - available: True = visible; False = borrado lógico (estado terminal).
    """

    __tablename__ = "product"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 4, asdecimal=True), nullable=False)
    available = Column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self):
        return f"<Product id={self.id} name={self.name!r} available={self.available}>"
