# -*- coding: utf-8 -*-
"""Lógica interna (core) de Products.

Este módulo contiene el catálogo de productos sin acoplarse a RabbitMQ ni a HTTP:
- create(): alta de producto (available=True).
- find_all(): listado paginado (offset) de productos disponibles.
- find_one(): producto disponible por id.
- update(): modificación parcial de un producto disponible.
- remove(): borrado lógico (available=False).

Diseño:
- ProductCatalogStore *contiene* una factoría de sesiones; no hereda del cliente de BD.
  El ciclo de vida (crear tablas, cerrar conexiones) vive en sql/database.py.
- Cada operación abre su propia sesión y transacción: commit al salir, rollback si falla.
- Cualquier error de SQLAlchemy se traduce a PersistenceError. No hay reintentos.
"""

import logging
import math
from contextlib import asynccontextmanager
from typing import Mapping, Union

from sqlalchemy.exc import SQLAlchemyError

from app_products.errors import NotFoundError, PersistenceError, ValidationError
from app_products.sql import crud, models, schemas
from app_products.sql.database import SessionLocal

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class ProductCatalogStore:
    """Acceso CRUD con borrado lógico a la tabla product."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str):
        """Sesión + transacción de una operación, con los errores de BD traducidos."""
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    yield db
        except SQLAlchemyError as exc:
            logger.error("[PRODUCTS] ❌ Error de persistencia en %s: %s", operation, exc)
            raise PersistenceError(f"{operation} failed: {exc}") from exc

    #region create
    async def create(self, data: schemas.CreateProduct) -> models.Product:
        """Crea un producto disponible y lo devuelve completo (con id generado)."""
        async with self._transaction("create") as db:
            product = await crud.create_product(db, name=data.name, price=data.price)

        logger.info("[PRODUCTS] Producto creado id=%s name=%r price=%s", product.id, product.name, product.price)
        return product

    #region find all
    async def find_all(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> dict:
        """Devuelve una página de productos disponibles.

        Returns:
            dict: {"data": [Product, ...], "meta": {"page", "total", "last_page"}}

        Reglas:
        - Orden ascendente por id.
        - last_page = ceil(total / limit); 0 si no hay productos.
        - Una página fuera de rango devuelve data=[] con meta real (no es error).

        Raises:
            ValidationError: si page o limit son < 1 (no se consulta la BD).
        """
        if page is None:
            page = DEFAULT_PAGE
        if limit is None:
            limit = DEFAULT_LIMIT
        if page < 1 or limit < 1:
            raise ValidationError(f"page and limit must be positive (page={page}, limit={limit})")

        async with self._transaction("find_all") as db:
            total = await crud.count_available_products(db)
            data = await crud.list_available_products(db, offset=(page - 1) * limit, limit=limit)

        return {
            "data": data,
            "meta": {
                "page": page,
                "total": total,
                "last_page": math.ceil(total / limit),
            },
        }

    #region find one
    async def find_one(self, product_id: int) -> models.Product:
        """Producto disponible por id.

        Raises:
            NotFoundError: si no existe o está borrado lógicamente.
        """
        async with self._transaction("find_one") as db:
            product = await crud.get_available_product(db, product_id)

        if product is None:
            raise NotFoundError(product_id)
        return product

    #region update
    async def update(
        self,
        product_id: int,
        patch: Union[schemas.ProductPatch, Mapping, None] = None,
    ) -> models.Product:
        """Actualiza solo los campos presentes en `patch`.

        - Un `id` dentro de patch se ignora (no se rechaza): el id es inmutable.
        - updated_at se refresca siempre.

        Raises:
            NotFoundError: si no hay producto disponible con ese id.
        """
        changes = _patch_changes(patch)

        async with self._transaction("update") as db:
            product = await crud.update_available_product(db, product_id, **changes)

        if product is None:
            raise NotFoundError(product_id)

        logger.info("[PRODUCTS] Producto actualizado id=%s campos=%s", product_id, sorted(changes))
        return product

    #region remove
    async def remove(self, product_id: int) -> models.Product:
        """Borrado lógico: available=False. No es re-invocable sobre el mismo id.

        Raises:
            NotFoundError: si no existe o ya estaba borrado.
        """
        async with self._transaction("remove") as db:
            product = await crud.soft_delete_product(db, product_id)

        if product is None:
            raise NotFoundError(product_id)

        logger.info("[PRODUCTS] Producto marcado como no disponible id=%s", product_id)
        return product


def _patch_changes(patch) -> dict:
    """Normaliza el patch a un dict de campos a modificar (sin id)."""
    if patch is None:
        return {}
    if not isinstance(patch, schemas.ProductPatch):
        try:
            patch = schemas.ProductPatch(**dict(patch))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    return patch.changes()


def get_store() -> ProductCatalogStore:
    """Catálogo sobre la factoría de sesiones por defecto (la de la app)."""
    return ProductCatalogStore(SessionLocal)
