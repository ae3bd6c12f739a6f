# -*- coding: utf-8 -*-
"""CRUD y helpers de BD para Products.

Filosofía (importante):
- Estas funciones NO hacen commit().
- La transacción la controla quien llama (ProductCatalogStore), que abre una
  sesión + transacción por operación y hace commit/rollback al final.
- Todas las lecturas y escrituras filtran por available=True (borrado lógico).

Las mutaciones (update/soft delete) son un único UPDATE condicional con
RETURNING: `UPDATE product SET ... WHERE id=? AND available=true`. Si no
afecta a ninguna fila, devuelven None y quien llama lo trata como "no existe".
Así no hay ventana de carrera entre comprobar existencia y escribir.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import models

logger = logging.getLogger(__name__)


def _available():
    return models.Product.available.is_(True)


# ----------------------------- LECTURAS --------------------------------------------------------------

async def count_available_products(db: AsyncSession) -> int:
    """COUNT(*) de productos disponibles."""
    stmt = select(func.count(models.Product.id)).where(_available())
    result = await db.execute(stmt)
    return int(result.scalar() or 0)


async def list_available_products(db: AsyncSession, offset: int, limit: int) -> List[models.Product]:
    """Página de productos disponibles, en orden ascendente de id (orden estable)."""
    stmt = (
        select(models.Product)
        .where(_available())
        .order_by(models.Product.id)
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_available_product(db: AsyncSession, product_id: int) -> Optional[models.Product]:
    """Primer producto con ese id y available=True (o None)."""
    stmt = select(models.Product).where(models.Product.id == product_id, _available())
    result = await db.execute(stmt)
    return result.scalars().first()


# ----------------------------- ESCRITURAS ------------------------------------------------------------

async def create_product(db: AsyncSession, name: str, price) -> models.Product:
    """Inserta un producto disponible con created_at == updated_at."""
    now = models.utcnow()
    product = models.Product(
        name=name,
        price=price,
        available=True,
        created_at=now,
        updated_at=now,
    )
    db.add(product)
    await db.flush()
    # Recarga desde BD: precio con la escala de la columna, fechas tal cual se guardaron
    await db.refresh(product)
    return product


async def update_available_product(db: AsyncSession, product_id: int, **values) -> Optional[models.Product]:
    """UPDATE condicional sobre un producto disponible.

    - `values` ya viene sin id (ProductPatch.changes() lo descarta).
    - updated_at se refresca siempre.

    Returns:
        Product actualizado, o None si no hay producto disponible con ese id.
    """
    values["updated_at"] = models.utcnow()

    stmt = (
        update(models.Product)
        .where(models.Product.id == product_id, _available())
        .values(**values)
        .returning(models.Product)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    product = result.scalars().first()
    if product is None:
        logger.debug("[PRODUCTS][CRUD] UPDATE sin filas: id=%s", product_id)
    return product


async def soft_delete_product(db: AsyncSession, product_id: int) -> Optional[models.Product]:
    """Marca available=False (borrado lógico). None si ya no estaba disponible."""
    return await update_available_product(db, product_id, available=False)
